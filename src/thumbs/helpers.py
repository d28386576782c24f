from __future__ import annotations
from dataclasses import dataclass, field
from glob import glob
from pathlib import Path
from typing import List, Tuple

import os

from .errors import EnumerationError


IMAGE_EXTENSIONS: Tuple[str, ...] = (".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp")


# Config dataclasses (lightweight & reusable)

@dataclass
class ThumbnailConfig:
    max_width: int = 150            # >= 1
    max_height: int = 150           # >= 1
    interpolation: str = "lanczos"  # 'lanczos' | 'area' | 'cubic' | 'linear' | 'nearest'


@dataclass
class PipelineConfig:
    thumbnail: ThumbnailConfig = field(default_factory=ThumbnailConfig)
    marker: str = "_thumb"
    queue_size: int = 1             # 0 => unbounded
    on_error: str = "abort"         # 'abort' | 'continue'
    decode_workers: int = 1
    resize_workers: int = 1
    default_format: str = ".jpg"    # used when the output extension can't be encoded
    poll_interval: float = 0.05     # seconds between cancellation checks
    show: bool = False


# I/O & filesystem helpers

def split_ext(identifier: str) -> Tuple[str, str]:
    """Split off everything from the last '.' of the basename (empty if none)."""
    base = os.path.basename(identifier)
    idx = base.rfind(".")
    if idx < 0:
        return identifier, ""
    ext = base[idx:]
    return identifier[: len(identifier) - len(ext)], ext


def derive_output_name(identifier: str | os.PathLike, marker: str = "_thumb") -> str:
    """'dir/pic.jpg' -> 'dir/pic_thumb.jpg'; 'noext' -> 'noext_thumb'."""
    stem, ext = split_ext(os.fspath(identifier))
    return stem + marker + ext


def is_derived(identifier: str | os.PathLike, marker: str = "_thumb") -> bool:
    stem, _ext = split_ext(os.fspath(identifier))
    return bool(marker) and stem.endswith(marker)


def list_images(
    dir_path: str | os.PathLike,
    extensions: Tuple[str, ...] = IMAGE_EXTENSIONS,
    include_thumbs: bool = False,
    marker: str = "_thumb",
) -> List[str]:
    p = Path(dir_path)
    if not p.is_dir():
        raise EnumerationError(f"Not a directory: {p}", identifier=str(p))
    try:
        entries = sorted(p.iterdir())
    except OSError as e:
        raise EnumerationError(f"Could not list {p}: {e}", identifier=str(p)) from e
    return [
        str(fp) for fp in entries
        if fp.is_file()
        and fp.suffix.lower() in extensions
        and (include_thumbs or not is_derived(fp, marker))
    ]


def glob_sources(pattern: str) -> List[str]:
    """Files matching a shell pattern, sorted. Directories are skipped."""
    try:
        matches = sorted(glob(pattern))
    except (OSError, ValueError) as e:
        raise EnumerationError(f"Bad pattern {pattern!r}: {e}", identifier=pattern) from e
    return [m for m in matches if os.path.isfile(m)]
