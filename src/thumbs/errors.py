from __future__ import annotations
from typing import Optional


class ThumbnailError(Exception):
    """Base error; `identifier` names the source (or target) that triggered it."""

    def __init__(self, message: str, identifier: Optional[str] = None) -> None:
        super().__init__(message)
        self.identifier = identifier


class EnumerationError(ThumbnailError):
    """Listing the sources failed; nothing to run."""


class SourceOpenError(ThumbnailError):
    pass


class DecodeError(ThumbnailError):
    pass


class ResampleError(ThumbnailError):
    pass


class TargetCreateError(ThumbnailError):
    pass


class EncodeError(ThumbnailError):
    pass


class PipelineCancelled(ThumbnailError):
    """Raised inside a stage when the run has been cancelled."""


class ChannelClosed(ThumbnailError):
    """Send on a channel that was already closed."""
