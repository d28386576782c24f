from __future__ import annotations
import queue
import threading
from typing import Generic, Iterator, Optional, TypeVar

from .errors import ChannelClosed, PipelineCancelled

T = TypeVar("T")

_CLOSED = object()


class Channel(Generic[T]):
    """FIFO handoff between two stages.

    Bounded when `maxsize` > 0 (send blocks while full). Closing enqueues an
    end marker, so a receiver drains everything sent before the close and
    then stops. Blocking calls poll `cancel` and give up once it is set.
    """

    def __init__(
        self,
        maxsize: int = 1,
        cancel: Optional[threading.Event] = None,
        poll_interval: float = 0.05,
        producers: int = 1,
    ) -> None:
        if producers < 1:
            raise ValueError("producers must be >= 1")
        self._q: "queue.Queue[object]" = queue.Queue(maxsize=max(0, maxsize))
        self._cancel = cancel or threading.Event()
        self._poll = poll_interval
        self._lock = threading.Lock()
        self._open_producers = producers
        self._closed = False
        self.sent = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def _put(self, obj: object) -> None:
        while True:
            if self._cancel.is_set():
                raise PipelineCancelled("pipeline cancelled")
            try:
                self._q.put(obj, timeout=self._poll)
                return
            except queue.Full:
                continue

    def send(self, item: T) -> None:
        if self._closed:
            raise ChannelClosed("send on closed channel")
        self._put(item)
        with self._lock:
            self.sent += 1

    def close(self) -> None:
        """Called once by each producer; the last call closes the channel."""
        with self._lock:
            if self._closed:
                return
            self._open_producers -= 1
            if self._open_producers > 0:
                return
            self._closed = True
        try:
            self._put(_CLOSED)
        except PipelineCancelled:
            # receivers stop on the cancel event instead
            pass

    def receive(self) -> T:
        """Next item; raises StopIteration once closed and drained."""
        while True:
            if self._cancel.is_set():
                raise PipelineCancelled("pipeline cancelled")
            try:
                obj = self._q.get(timeout=self._poll)
            except queue.Empty:
                continue
            if obj is _CLOSED:
                # leave the marker for any other receiver sharing this channel
                self._q.put_nowait(_CLOSED)
                raise StopIteration
            return obj  # type: ignore[return-value]

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.receive()
            except StopIteration:
                return
