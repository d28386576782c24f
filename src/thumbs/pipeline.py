from __future__ import annotations
import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .channel import Channel
from .helpers import PipelineConfig
from .resize import Thumbnailer
from .stages import (
    DecodeStage,
    ItemFailure,
    ResizeStage,
    RunContext,
    WorkItem,
    WriteStage,
    run_worker,
)

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    written: List[str] = field(default_factory=list)
    failures: List[ItemFailure] = field(default_factory=list)
    error: Optional[BaseException] = None
    cancelled: bool = False
    sent: Dict[str, int] = field(default_factory=dict)  # items forwarded per stage
    channels_closed: bool = False

    @property
    def completed(self) -> bool:
        """Ran to the end of its input (item failures allowed under 'continue')."""
        return self.error is None and not self.cancelled

    @property
    def ok(self) -> bool:
        return self.completed and not self.failures

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class ThumbnailPipeline:
    """decode -> [A] -> resize -> [B] -> write, one thread per stage worker.

    `run` blocks until the write stage has drained its input or the run
    failed. Under on_error='abort' the first error cancels every stage and is
    returned in `result.error`; thumbnails already written stay on disk and
    which ones got written before the abort depends on scheduling.
    """

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self.config = config or PipelineConfig()
        c = self.config
        if c.on_error not in ("abort", "continue"):
            raise ValueError(f"on_error must be 'abort' or 'continue', got {c.on_error!r}")
        if c.decode_workers < 1 or c.resize_workers < 1:
            raise ValueError("decode_workers and resize_workers must be >= 1")
        if c.queue_size < 0:
            raise ValueError("queue_size must be >= 0")
        if c.poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")
        self.thumbnailer = Thumbnailer(c.thumbnail)

    def run(
        self,
        sources: Iterable[str | os.PathLike],
        cancel: Optional[threading.Event] = None,
    ) -> PipelineResult:
        c = self.config
        identifiers = [os.fspath(s) for s in sources]
        ctx = RunContext(on_error=c.on_error)

        decoded: Channel[WorkItem] = Channel(
            c.queue_size, ctx.cancel, c.poll_interval, producers=c.decode_workers)
        thumbnailed: Channel[WorkItem] = Channel(
            c.queue_size, ctx.cancel, c.poll_interval, producers=c.resize_workers)

        decode = DecodeStage(identifiers, decoded)
        resize = ResizeStage(decoded, thumbnailed, self.thumbnailer)
        write = WriteStage(thumbnailed, marker=c.marker, default_format=c.default_format)

        workers = (
            [(decode, i) for i in range(c.decode_workers)]
            + [(resize, i) for i in range(c.resize_workers)]
            + [(write, 0)]
        )
        threads = [
            threading.Thread(target=run_worker, args=(stage, ctx), name=f"thumbs-{stage.name}-{i}")
            for stage, i in workers
        ]

        logger.info("processing %d image(s)", len(identifiers))
        for t in threads:
            t.start()

        cancelled = False
        try:
            while not ctx.done.wait(c.poll_interval):
                if cancel is not None and cancel.is_set() and not ctx.cancel.is_set():
                    logger.info("run cancelled by caller")
                    cancelled = True
                    ctx.cancel.set()
        except BaseException:
            # interrupted while waiting: stop the stages before propagating
            ctx.cancel.set()
            raise
        finally:
            for t in threads:
                t.join()

        result = PipelineResult(
            written=list(ctx.written),
            failures=list(ctx.failures),
            error=ctx.error,
            cancelled=cancelled,
            sent={"decode": decoded.sent, "resize": thumbnailed.sent, "write": len(ctx.written)},
            channels_closed=decoded.closed and thumbnailed.closed and ctx.done.is_set(),
        )
        if result.completed:
            logger.info("wrote %d thumbnail(s), %d skipped", len(result.written), len(result.failures))
        return result


def run_pipeline(
    sources: Iterable[str | os.PathLike],
    config: Optional[PipelineConfig] = None,
    cancel: Optional[threading.Event] = None,
) -> PipelineResult:
    return ThumbnailPipeline(config).run(sources, cancel=cancel)
