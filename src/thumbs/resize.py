from __future__ import annotations
from typing import Optional, Tuple

import cv2
import numpy as np

from .errors import ResampleError
from .helpers import ThumbnailConfig


INTERPOLATIONS = {
    "lanczos": cv2.INTER_LANCZOS4,
    "area": cv2.INTER_AREA,
    "cubic": cv2.INTER_CUBIC,
    "linear": cv2.INTER_LINEAR,
    "nearest": cv2.INTER_NEAREST,
}


def thumbnail_size(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """Largest (w, h) fitting max_width x max_height with the source aspect ratio.

    Never upscales: a source already inside the box keeps its size.
    """
    if width <= max_width and height <= max_height:
        return width, height
    new_w, new_h = width, height
    if width > max_width:
        new_h = max(1, height * max_width // width)
        new_w = max_width
    if new_h > max_height:
        new_w = max(1, new_w * max_height // new_h)
        new_h = max_height
    return new_w, new_h


class Thumbnailer:
    """Downscale rasters to fit a bounding box (BGR or gray in, same layout out)."""

    def __init__(self, config: Optional[ThumbnailConfig] = None) -> None:
        self.config = config or ThumbnailConfig()
        if self.config.max_width < 1 or self.config.max_height < 1:
            raise ValueError("max_width and max_height must be >= 1")
        if self.config.interpolation not in INTERPOLATIONS:
            raise ValueError(f"Unknown interpolation: {self.config.interpolation}")
        self._flag = INTERPOLATIONS[self.config.interpolation]

    def target_size(self, img: np.ndarray) -> Tuple[int, int]:
        h, w = img.shape[:2]
        return thumbnail_size(w, h, self.config.max_width, self.config.max_height)

    def run(self, img: np.ndarray, identifier: Optional[str] = None) -> np.ndarray:
        if not isinstance(img, np.ndarray) or img.ndim < 2 or img.size == 0:
            raise ResampleError(f"Nothing to resize for {identifier}", identifier=identifier)
        w, h = self.target_size(img)
        if (w, h) == (img.shape[1], img.shape[0]):
            return img
        try:
            return cv2.resize(img, (w, h), interpolation=self._flag)
        except cv2.error as e:
            raise ResampleError(f"Resize failed for {identifier} ({e})", identifier=identifier) from e
