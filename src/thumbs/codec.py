from __future__ import annotations
import logging
import os

import cv2
import numpy as np

from .errors import DecodeError, EncodeError, SourceOpenError, TargetCreateError
from .helpers import split_ext

logger = logging.getLogger(__name__)


def decode_bytes(data: bytes, identifier: str | None = None) -> np.ndarray:
    """Encoded image bytes -> BGR uint8 raster. Raises DecodeError."""
    if not data:
        raise DecodeError(f"Empty image file: {identifier}", identifier=identifier)
    buf = np.frombuffer(data, dtype=np.uint8)
    try:
        img = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise DecodeError(f"Could not decode image: {identifier} ({e})", identifier=identifier) from e
    if img is None:
        raise DecodeError(f"Could not decode image: {identifier}", identifier=identifier)
    return img


def read_image(path: str | os.PathLike) -> np.ndarray:
    """Open, read and decode one source. The file is closed on every path."""
    identifier = os.fspath(path)
    try:
        with open(identifier, "rb") as fh:
            data = fh.read()
    except OSError as e:
        raise SourceOpenError(f"Could not open source: {identifier} ({e})", identifier=identifier) from e
    return decode_bytes(data, identifier)


def encoder_extension(ext: str, default_format: str = ".jpg") -> str:
    """Extension OpenCV should encode with; falls back when `ext` isn't writable."""
    if ext and cv2.haveImageWriter("x" + ext.lower()):
        return ext.lower()
    return default_format


def encode_image(
    img: np.ndarray,
    ext: str,
    identifier: str | None = None,
    default_format: str = ".jpg",
) -> bytes:
    """Raster -> encoded bytes, default encoder parameters."""
    fmt = encoder_extension(ext, default_format)
    try:
        ok, buf = cv2.imencode(fmt, img)
    except cv2.error as e:
        raise EncodeError(f"Could not encode {identifier} as {fmt} ({e})", identifier=identifier) from e
    if not ok:
        raise EncodeError(f"Could not encode {identifier} as {fmt}", identifier=identifier)
    return buf.tobytes()


def write_image(
    path: str | os.PathLike,
    img: np.ndarray,
    default_format: str = ".jpg",
    identifier: str | None = None,
) -> str:
    """Encode then create-or-truncate `path`. Returns the path written.

    Errors name `identifier` (the source the raster came from) when given,
    else the target path.
    """
    target = os.fspath(path)
    identifier = identifier or target
    _stem, ext = split_ext(target)
    data = encode_image(img, ext, identifier=identifier, default_format=default_format)
    try:
        with open(target, "wb") as fh:
            fh.write(data)
    except OSError as e:
        raise TargetCreateError(f"Could not write target: {target} ({e})", identifier=identifier) from e
    logger.debug("wrote %s (%d bytes)", target, len(data))
    return target
