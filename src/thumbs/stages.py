from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from .channel import Channel
from .codec import read_image, write_image
from .errors import PipelineCancelled, ThumbnailError
from .helpers import derive_output_name
from .resize import Thumbnailer

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


@dataclass
class WorkItem:
    identifier: str                 # source path, never changed in flight
    raster: Optional[np.ndarray]    # owned by whichever stage holds the item


@dataclass
class ItemFailure:
    identifier: str
    error: ThumbnailError


class RunContext:
    """Per-run shared state: cancel/done events, error policy, outcome lists."""

    def __init__(self, on_error: str = "abort") -> None:
        self.on_error = on_error
        self.cancel = threading.Event()
        self.done = threading.Event()
        self.error: Optional[BaseException] = None
        self.failures: List[ItemFailure] = []
        self.written: List[str] = []
        self._lock = threading.Lock()

    def fail(self, err: BaseException) -> None:
        """Record the first fatal error and cancel the run."""
        with self._lock:
            first = self.error is None
            if first:
                self.error = err
        if first:
            logger.error("pipeline failed: %s", err)
        self.cancel.set()

    def item_failed(self, identifier: str, err: ThumbnailError) -> None:
        """Apply the error policy to one item. Re-raises under 'abort'."""
        if self.on_error == "abort":
            raise err
        logger.warning("skipping %s: %s", identifier, err)
        with self._lock:
            self.failures.append(ItemFailure(identifier, err))

    def record_written(self, path: str) -> None:
        with self._lock:
            self.written.append(path)

    def check(self) -> None:
        if self.cancel.is_set():
            raise PipelineCancelled("pipeline cancelled")


class DecodeStage:
    """Sources -> WorkItems. Safe to run from several worker threads at once."""

    name = "decode"

    def __init__(self, sources: Iterable[str], out: Channel[WorkItem]) -> None:
        self._sources = iter(sources)
        self._lock = threading.Lock()
        self.out = out

    def _next_source(self) -> object:
        with self._lock:
            return next(self._sources, _EXHAUSTED)

    def run(self, ctx: RunContext) -> None:
        while True:
            ctx.check()
            identifier = self._next_source()
            if identifier is _EXHAUSTED:
                return
            try:
                raster = read_image(identifier)
            except ThumbnailError as e:
                ctx.item_failed(identifier, e)
                continue
            logger.debug("decoded %s %s", identifier, raster.shape)
            self.out.send(WorkItem(identifier, raster))

    def finish(self, ctx: RunContext) -> None:
        self.out.close()


class ResizeStage:
    name = "resize"

    def __init__(self, inp: Channel[WorkItem], out: Channel[WorkItem], thumbnailer: Thumbnailer) -> None:
        self.inp = inp
        self.out = out
        self.thumbnailer = thumbnailer

    def run(self, ctx: RunContext) -> None:
        for item in self.inp:
            try:
                item.raster = self.thumbnailer.run(item.raster, item.identifier)
            except ThumbnailError as e:
                ctx.item_failed(item.identifier, e)
                continue
            logger.debug("resized %s -> %s", item.identifier, item.raster.shape)
            self.out.send(item)

    def finish(self, ctx: RunContext) -> None:
        self.out.close()


class WriteStage:
    """Terminal stage: persists each item and fires the run's completion signal."""

    name = "write"

    def __init__(
        self,
        inp: Channel[WorkItem],
        marker: str = "_thumb",
        default_format: str = ".jpg",
    ) -> None:
        self.inp = inp
        self.marker = marker
        self.default_format = default_format

    def run(self, ctx: RunContext) -> None:
        for item in self.inp:
            target = derive_output_name(item.identifier, self.marker)
            try:
                write_image(
                    target, item.raster, default_format=self.default_format, identifier=item.identifier)
            except ThumbnailError as e:
                ctx.item_failed(item.identifier, e)
                continue
            finally:
                item.raster = None
            ctx.record_written(target)

    def finish(self, ctx: RunContext) -> None:
        ctx.done.set()


def run_worker(stage, ctx: RunContext) -> None:
    """Thread target: run one stage worker, always releasing its outputs."""
    try:
        stage.run(ctx)
    except PipelineCancelled:
        logger.debug("%s stopped: cancelled", threading.current_thread().name)
    except ThumbnailError as e:
        ctx.fail(e)
    except Exception as e:
        logger.exception("unexpected error in %s stage", stage.name)
        ctx.fail(e)
    finally:
        stage.finish(ctx)
