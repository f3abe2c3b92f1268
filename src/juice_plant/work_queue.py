# src/juice_plant/work_queue.py

"""
Implements `WorkQueue`, the FIFO hand-off between a plant's producer
and its workers.

The queue is a `collections.deque` guarded by a single
`threading.Condition`. Besides the usual blocking `put` and
timed `take`, it supports the two halves of the shutdown protocol:

- `close()` is the graceful request. Nothing new may be put, and
  takers waiting on an empty queue wake up and get `None` at once.
- `cancel()` is the forced one. Every blocked or later `take`
  raises `InterruptedWait`.

`wait_until_empty()` lets the plant wait for the drain without
polling: every take that empties the queue notifies the condition.
"""

import logging
import threading
import time
from collections import deque
from typing import Any, Deque, Optional

from .errors import InterruptedWait

log = logging.getLogger(__name__)


class WorkQueue:
    """
    A thread-safe FIFO queue with close and cancel semantics.

    Attributes:
        maxsize (int): Maximum number of queued items; 0 is unbounded.
    """

    def __init__(self, maxsize: int = 0):
        if maxsize < 0:
            raise ValueError("maxsize cannot be negative.")

        self.maxsize: int = maxsize
        self._items: Deque[Any] = deque()
        self._cond = threading.Condition()
        self._closed: bool = False
        self._cancelled: bool = False

        # Lifetime counters, useful to check nothing was dropped.
        self.total_put: int = 0
        self.total_taken: int = 0

    def __len__(self) -> int:
        return self.qsize()

    def qsize(self) -> int:
        with self._cond:
            return len(self._items)

    def empty(self) -> bool:
        with self._cond:
            return not self._items

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def put(self, item: Any, timeout: Optional[float] = None):
        """
        Appends an item, blocking while a bounded queue is full.

        Raises:
            InterruptedWait: If the queue is closed or cancelled, or the
                             timeout expires on a full queue.
        """
        with self._cond:
            if self.maxsize > 0:
                ok = self._cond.wait_for(
                    lambda: (len(self._items) < self.maxsize
                             or self._closed or self._cancelled),
                    timeout)
                if not ok:
                    raise InterruptedWait("Timed out waiting for queue space")
            if self._closed or self._cancelled:
                raise InterruptedWait("Queue no longer accepts items")

            self._items.append(item)
            self.total_put += 1
            self._cond.notify_all()

    def take(self, timeout: Optional[float] = None) -> Optional[Any]:
        """
        Removes and returns the oldest item.

        Waits up to `timeout` seconds (forever if None) for an item.

        Returns:
            Optional[Any]: The item, or None if the timeout expired or the
                           queue is closed and empty.

        Raises:
            InterruptedWait: If the queue was cancelled.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while True:
                if self._cancelled:
                    raise InterruptedWait("Queue cancelled")
                if self._items:
                    item = self._items.popleft()
                    self.total_taken += 1
                    # Wakes drain waiters and producers blocked on space.
                    self._cond.notify_all()
                    return item
                if self._closed:
                    return None

                if deadline is None:
                    self._cond.wait()
                else:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return None
                    self._cond.wait(remaining)

    def wait_until_empty(self, timeout: Optional[float] = None) -> bool:
        """
        Blocks until the queue holds no items.

        Cancelling the queue also ends the wait.

        Returns:
            bool: True if the queue is empty, False otherwise.
        """
        with self._cond:
            self._cond.wait_for(
                lambda: not self._items or self._cancelled, timeout)
            return not self._items

    def close(self):
        """Stops accepting items and releases takers waiting on empty."""
        with self._cond:
            if not self._closed:
                log.debug(f"Queue closed with {len(self._items)} item(s) left")
            self._closed = True
            self._cond.notify_all()

    def cancel(self):
        """Interrupts every current and future `take`."""
        with self._cond:
            if self._items:
                log.warning(f"Queue cancelled with {len(self._items)} "
                            f"item(s) left")
            self._cancelled = True
            self._cond.notify_all()
