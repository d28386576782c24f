from __future__ import annotations
import os

import matplotlib

matplotlib.use("Agg")

import cv2
import numpy as np
import pytest


def synth_image(width: int, height: int, seed: int = 0) -> np.ndarray:
    """Deterministic BGR gradient with a bit of structure."""
    rng = np.random.default_rng(seed)
    x = np.linspace(0, 255, width, dtype=np.float32)
    y = np.linspace(0, 255, height, dtype=np.float32)
    img = np.zeros((height, width, 3), np.uint8)
    img[..., 0] = x[None, :].astype(np.uint8)
    img[..., 1] = y[:, None].astype(np.uint8)
    img[..., 2] = rng.integers(0, 255, (height, width), dtype=np.uint8)
    return img


@pytest.fixture
def make_image(tmp_path):
    def _make(name: str, width: int = 320, height: int = 240, seed: int = 0) -> str:
        path = os.path.join(str(tmp_path), name)
        assert cv2.imwrite(path, synth_image(width, height, seed))
        return path
    return _make


@pytest.fixture
def make_corrupt(tmp_path):
    def _make(name: str = "broken.jpg", data: bytes = b"this is not an image") -> str:
        path = os.path.join(str(tmp_path), name)
        with open(path, "wb") as fh:
            fh.write(data)
        return path
    return _make


@pytest.fixture
def three_images(make_image):
    return [
        make_image("landscape.jpg", 400, 300, seed=1),
        make_image("portrait.png", 120, 500, seed=2),
        make_image("small.jpg", 100, 80, seed=3),
    ]
