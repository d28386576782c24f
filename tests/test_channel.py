import threading
import time

import pytest

from thumbs.channel import Channel
from thumbs.errors import ChannelClosed, PipelineCancelled


def test_fifo_and_close():
    ch = Channel(maxsize=0)
    for i in range(5):
        ch.send(i)
    ch.close()
    assert list(ch) == [0, 1, 2, 3, 4]
    assert ch.closed
    assert ch.sent == 5


def test_send_after_close():
    ch = Channel()
    ch.close()
    with pytest.raises(ChannelClosed):
        ch.send(1)


def test_bounded_send_blocks_until_received():
    ch = Channel(maxsize=1, poll_interval=0.01)
    ch.send("a")
    sent = threading.Event()

    def producer():
        ch.send("b")
        sent.set()

    t = threading.Thread(target=producer)
    t.start()
    assert not sent.wait(0.1)
    assert ch.receive() == "a"
    assert sent.wait(1.0)
    t.join()
    ch.close()
    assert list(ch) == ["b"]


def test_closes_after_last_producer():
    ch = Channel(maxsize=0, producers=2)
    ch.send(1)
    ch.close()
    assert not ch.closed
    ch.send(2)
    ch.close()
    assert ch.closed
    assert list(ch) == [1, 2]


def test_several_receivers_all_stop():
    ch = Channel(maxsize=0, poll_interval=0.01)
    for i in range(10):
        ch.send(i)
    ch.close()
    got = []
    lock = threading.Lock()

    def consume():
        for item in ch:
            with lock:
                got.append(item)

    threads = [threading.Thread(target=consume) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(2.0)
        assert not t.is_alive()
    assert sorted(got) == list(range(10))


def test_cancel_unblocks_receiver_and_sender():
    cancel = threading.Event()
    ch = Channel(maxsize=1, cancel=cancel, poll_interval=0.01)
    ch.send("x")
    threading.Timer(0.05, cancel.set).start()
    start = time.monotonic()
    with pytest.raises(PipelineCancelled):
        ch.send("y")
    assert time.monotonic() - start < 1.0

    with pytest.raises(PipelineCancelled):
        ch.receive()


def test_close_when_cancelled_does_not_block():
    cancel = threading.Event()
    ch = Channel(maxsize=1, cancel=cancel, poll_interval=0.01)
    ch.send("x")
    cancel.set()
    ch.close()
    assert ch.closed
