from .errors import (
    ThumbnailError, EnumerationError, SourceOpenError, DecodeError,
    ResampleError, TargetCreateError, EncodeError, PipelineCancelled, ChannelClosed,
)
from .helpers import (
    ThumbnailConfig, PipelineConfig, derive_output_name, list_images, glob_sources,
)
from .codec import read_image, write_image
from .resize import Thumbnailer, thumbnail_size
from .channel import Channel
from .stages import WorkItem, ItemFailure
from .pipeline import ThumbnailPipeline, PipelineResult, run_pipeline

__all__ = [
    "ThumbnailError", "EnumerationError", "SourceOpenError", "DecodeError",
    "ResampleError", "TargetCreateError", "EncodeError", "PipelineCancelled", "ChannelClosed",
    "ThumbnailConfig", "PipelineConfig", "derive_output_name", "list_images", "glob_sources",
    "read_image", "write_image",
    "Thumbnailer", "thumbnail_size",
    "Channel",
    "WorkItem", "ItemFailure",
    "ThumbnailPipeline", "PipelineResult", "run_pipeline",
]
