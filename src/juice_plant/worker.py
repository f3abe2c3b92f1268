# src/juice_plant/worker.py

"""
Implements the `Worker`, a consumer bound to one plant's queue.

A worker pulls oranges off the queue and advances each one to the
terminal stage before reporting it to the plant. It keeps polling
until the plant has stopped producing *and* the queue is empty, so
a stopping plant never strands queued oranges.
"""

import logging
from typing import Optional

from .errors import InterruptedWait
from .item import Item
from .progress import ProgressListener
from .work_queue import WorkQueue

log = logging.getLogger(__name__)


class Worker:
    """
    A consumer loop run on one thread of a plant's worker pool.

    The plant passed in must provide an `is_running` attribute and an
    `increment_processed()` method.

    Attributes:
        name (str): Worker name used in narration.
        processed_count (int): Oranges this worker finished.
    """

    def __init__(self, queue: WorkQueue, plant, name: str,
                 poll_timeout: float = 1.0,
                 listener: Optional[ProgressListener] = None):
        """
        Args:
            queue (WorkQueue): The plant's shared queue.
            plant: The owning plant.
            name (str): Worker name.
            poll_timeout (float): Seconds to wait on an empty queue
                                  before re-checking the exit condition.
            listener (Optional[ProgressListener]): Progress sink.
        """
        if poll_timeout <= 0:
            raise ValueError("poll_timeout must be > 0.")

        self.queue = queue
        self.plant = plant
        self.name: str = name
        self.poll_timeout: float = poll_timeout
        self.listener: ProgressListener = listener or ProgressListener()
        self.processed_count: int = 0

    def __repr__(self):
        return f"Worker(name='{self.name}')"

    def run(self) -> int:
        """
        Drains the queue until the plant is done with it.

        Returns:
            int: Number of oranges this worker processed.
        """
        log.debug(f"{self.name} started")
        try:
            while True:
                item = self.queue.take(timeout=self.poll_timeout)
                if item is None:
                    # Exit only when queue is empty AND plant is stopping
                    if not self.plant.is_running and self.queue.empty():
                        break
                    continue

                self.process(item)
        except InterruptedWait:
            log.info(f"{self.name} interrupted while waiting, stopping")
        finally:
            self.listener.worker_stopped(self.name, self.processed_count)

        log.debug(f"{self.name} finished ({self.processed_count} processed)")
        return self.processed_count

    def process(self, item: Item):
        """Advances one item to its terminal stage and reports it."""
        while not item.is_terminal:
            stage = item.advance()
            self.listener.stage_advanced(self.name, item, stage)

        self.plant.increment_processed()
        self.processed_count += 1
