# tests/test_work_queue.py

"""
Unit tests for the WorkQueue class.

This file checks the FIFO hand-off itself and the two halves of the
shutdown protocol built on it: close() for graceful shutdown and
cancel() for forced shutdown.
"""

import threading
import time

import pytest

from juice_plant import WorkQueue, InterruptedWait


@pytest.fixture
def queue() -> WorkQueue:
    """Returns a fresh, unbounded WorkQueue."""
    return WorkQueue()



def test_initialization(queue: WorkQueue):
    assert queue.maxsize == 0
    assert queue.empty()
    assert queue.qsize() == 0
    assert len(queue) == 0
    assert not queue.closed
    assert not queue.cancelled


def test_negative_maxsize_rejected():
    with pytest.raises(ValueError):
        WorkQueue(maxsize=-1)


def test_fifo_order(queue: WorkQueue):
    for i in range(5):
        queue.put(i)

    assert queue.qsize() == 5
    assert [queue.take(timeout=0.1) for _ in range(5)] == [0, 1, 2, 3, 4]
    assert queue.empty()
    assert queue.total_put == 5
    assert queue.total_taken == 5


def test_take_times_out_with_none(queue: WorkQueue):
    t0 = time.monotonic()
    assert queue.take(timeout=0.05) is None
    assert time.monotonic() - t0 >= 0.045


def test_take_wakes_on_put(queue: WorkQueue):
    """A blocked taker receives an item put from another thread."""
    result = []
    taker = threading.Thread(target=lambda: result.append(queue.take(timeout=5)))
    taker.start()

    time.sleep(0.05)
    queue.put("orange")
    taker.join(timeout=2)

    assert not taker.is_alive()
    assert result == ["orange"]


def test_close_releases_waiting_taker(queue: WorkQueue):
    """After close(), a taker on an empty queue gets None at once."""
    result = []
    taker = threading.Thread(target=lambda: result.append(queue.take(timeout=5)))
    taker.start()

    time.sleep(0.05)
    t0 = time.monotonic()
    queue.close()
    taker.join(timeout=2)

    assert not taker.is_alive()
    assert time.monotonic() - t0 < 1.0
    assert result == [None]


def test_close_keeps_queued_items(queue: WorkQueue):
    """Items queued before close() can still be taken."""
    queue.put("a")
    queue.put("b")
    queue.close()

    assert queue.take(timeout=0.1) == "a"
    assert queue.take(timeout=0.1) == "b"
    assert queue.take(timeout=0.1) is None


def test_put_after_close_raises(queue: WorkQueue):
    queue.close()
    with pytest.raises(InterruptedWait):
        queue.put("late")
    assert queue.empty()


def test_cancel_interrupts_blocked_taker(queue: WorkQueue):
    """A cancelled queue raises InterruptedWait in blocked takers."""
    errors = []

    def take():
        try:
            queue.take(timeout=5)
        except InterruptedWait as e:
            errors.append(e)

    taker = threading.Thread(target=take)
    taker.start()
    time.sleep(0.05)
    queue.cancel()
    taker.join(timeout=2)

    assert not taker.is_alive()
    assert len(errors) == 1
    assert queue.cancelled

    # Later takes fail too.
    with pytest.raises(InterruptedWait):
        queue.take(timeout=0.1)


def test_wait_until_empty_returns_when_drained(queue: WorkQueue):
    for i in range(3):
        queue.put(i)

    def drain():
        while queue.take(timeout=0.2) is not None:
            time.sleep(0.01)

    consumer = threading.Thread(target=drain)
    consumer.start()

    assert queue.wait_until_empty(timeout=2.0)
    consumer.join(timeout=2)
    assert queue.empty()


def test_wait_until_empty_times_out(queue: WorkQueue):
    queue.put("stuck")
    assert not queue.wait_until_empty(timeout=0.05)
    assert queue.qsize() == 1


def test_bounded_put_times_out_when_full():
    queue = WorkQueue(maxsize=1)
    queue.put("first")

    with pytest.raises(InterruptedWait):
        queue.put("second", timeout=0.05)
    assert queue.qsize() == 1


def test_bounded_put_blocks_until_space():
    """A producer blocked on a full queue resumes after a take."""
    queue = WorkQueue(maxsize=1)
    queue.put("first")

    producer = threading.Thread(target=queue.put, args=("second",))
    producer.start()
    time.sleep(0.05)
    assert producer.is_alive()

    assert queue.take(timeout=0.1) == "first"
    producer.join(timeout=2)

    assert not producer.is_alive()
    assert queue.take(timeout=0.1) == "second"


def test_concurrent_consumers_take_each_item_once(queue: WorkQueue):
    """No item is duplicated or dropped with many consumers."""
    n_items = 2000
    taken = []
    lock = threading.Lock()

    def consume():
        while True:
            item = queue.take(timeout=0.5)
            if item is None:
                return
            with lock:
                taken.append(item)

    consumers = [threading.Thread(target=consume) for _ in range(4)]
    for c in consumers:
        c.start()
    for i in range(n_items):
        queue.put(i)
    queue.close()
    for c in consumers:
        c.join(timeout=5)

    assert sorted(taken) == list(range(n_items))
    assert queue.total_taken == n_items
