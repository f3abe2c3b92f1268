# src/juice_plant/plant.py

"""
Implements the `Plant`: one juice facility with its own queue, a
producer thread and a fixed-size worker pool.

Lifecycle: IDLE -> RUNNING -> DRAINING -> STOPPED.

Stopping is a two-phase protocol, and the order matters:

1. Stop producing. The running flag is cleared and the producer is
   given `shutdown_grace` seconds to hand off the orange it is
   holding. After that its stage delay is interrupted, and the
   queue stays open until the producer has exited.
2. Drain. `stop()` waits until the queue is empty.
3. Shut the workers down gracefully. The queue is closed and the
   workers get `shutdown_grace` seconds to finish and exit.
4. Force-cancel on timeout. Stage delays and blocked takes are
   interrupted, so every worker exits promptly.
"""

import itertools
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional

from .config import PlantConfig
from .constants import PlantState
from .errors import InterruptedWait, PlantStateError, ShutdownTimeout
from .item import Item
from .measure import PlantStats
from .progress import ProgressListener
from .work_queue import WorkQueue
from .worker import Worker

log = logging.getLogger(__name__)


class Plant:
    """
    A producing and consuming facility.

    Attributes:
        name (str): Plant name, also the producer thread's name.
        config (PlantConfig): Timing and sizing settings.
        queue (WorkQueue): Hand-off between producer and workers.
        stats (PlantStats): Supplied and processed counters.
        workers (List[Worker]): The pool's workers, once started.
        forced_shutdown (bool): True if `stop()` had to cancel workers.
        worker_errors (List[BaseException]): Exceptions that ended a
            worker loop abnormally.
    """

    def __init__(self, plant_id: int = 1,
                 config: Optional[PlantConfig] = None,
                 listener: Optional[ProgressListener] = None):
        """
        Args:
            plant_id (int): Number used to name the plant.
            config (Optional[PlantConfig]): Settings. Defaults to
                                            `PlantConfig()`.
            listener (Optional[ProgressListener]): Progress sink shared by
                                                   the producer and workers.
        """
        self.name: str = f"Plant[{plant_id}]"
        self.config: PlantConfig = config or PlantConfig()
        self.listener: ProgressListener = listener or ProgressListener()

        self.queue = WorkQueue(maxsize=self.config.queue_capacity)
        self.stats = PlantStats(self.config.items_per_unit,
                                timeline_limit=self.config.timeline_limit)
        self.workers: List[Worker] = []
        self.forced_shutdown: bool = False
        self.worker_errors: List[BaseException] = []

        self._state = PlantState.IDLE
        self._state_lock = threading.Lock()

        # Producer control flag, and the event that cuts its pause short.
        self._running = threading.Event()
        self._halt = threading.Event()
        # Set only on forced shutdown; interrupts stage delays.
        self._cancel = threading.Event()

        self._item_ids = itertools.count(1)
        self._thread = threading.Thread(target=self._produce,
                                        name=self.name, daemon=True)
        self._pool: Optional[ThreadPoolExecutor] = None
        self._futures: List[Future] = []
        self._stopped_at: Optional[float] = None

        log.info(f"{self.name} initialized: Workers={self.config.num_workers}, "
                 f"ItemsPerUnit={self.config.items_per_unit}, "
                 f"QueueCapacity={self.config.queue_capacity or 'unbounded'}")

    def __repr__(self):
        return f"Plant(name='{self.name}', state={self._state.name})"



    @property
    def state(self) -> PlantState:
        return self._state

    @property
    def is_running(self) -> bool:
        """
        True while the producer may still hand off oranges.

        This stays True after the flag is cleared until the producer
        thread has actually exited, so workers never give up on an
        orange that is being created during shutdown.
        """
        return self._running.is_set() or self._thread.is_alive()

    def start(self):
        """
        Starts the producer thread and the worker pool. Returns at once.

        Raises:
            PlantStateError: If the plant is not IDLE. A stopped plant
                             cannot be restarted.
        """
        with self._state_lock:
            if self._state is not PlantState.IDLE:
                raise PlantStateError(
                    f"{self.name} cannot start from {self._state.name}")
            self._state = PlantState.RUNNING

        self._running.set()
        self._thread.start()

        n = self.config.num_workers
        self._pool = ThreadPoolExecutor(max_workers=n,
                                        thread_name_prefix=f"{self.name}-worker")
        for i in range(n):
            worker = Worker(self.queue, self,
                            name=f"Worker-{i + 1}-{self.name}",
                            poll_timeout=self.config.poll_timeout,
                            listener=self.listener)
            self.workers.append(worker)
            self._futures.append(self._pool.submit(worker.run))

        log.info(f"{self.name} started with {n} worker(s)")

    def stop(self):
        """
        Stops production, drains the queue and shuts the workers down.

        Does not return while queued oranges remain, unless every worker
        has already exited. Calling it again on a stopped plant does
        nothing.

        Raises:
            PlantStateError: If the plant was never started, or another
                             thread is already stopping it.
        """
        with self._state_lock:
            if self._state is PlantState.STOPPED:
                log.warning(f"{self.name} is already stopped")
                return
            if self._state is not PlantState.RUNNING:
                raise PlantStateError(
                    f"{self.name} cannot stop from {self._state.name}")
            self._state = PlantState.DRAINING

        log.info(f"{self.name} stopping production, draining "
                 f"{self.queue.qsize()} queued orange(s)")
        self._running.clear()
        self._halt.set()

        self._join_producer()

        self._drain()

        self.queue.close()
        try:
            self._await_workers(self.config.shutdown_grace)
        except ShutdownTimeout as exc:
            log.warning(f"{self.name}: {exc}; cancelling")
            self._force_cancel()

        self._pool.shutdown(wait=True)
        self._collect_worker_errors()
        # Final sample so the timeline covers the drain.
        self.stats.record_sample()

        self._stopped_at = time.monotonic()
        with self._state_lock:
            self._state = PlantState.STOPPED
        log.info(f"{self.name} stopped: supplied={self.supplied_count}, "
                 f"processed={self.processed_count}")

    def wait_to_stop(self, timeout: Optional[float] = None) -> bool:
        """
        Blocks until the producer thread has exited.

        Returns:
            bool: False if the producer was still alive after `timeout`.

        Raises:
            PlantStateError: If the plant was never started.
        """
        if self._state is PlantState.IDLE:
            raise PlantStateError(f"{self.name} was never started")

        self._thread.join(timeout)
        if self._thread.is_alive():
            log.error(f"{self.name} stop malfunction")
            return False
        return True



    def _produce(self):
        """Producer loop. Single writer of the supplied counter."""
        log.info(f"{self.name} Processing oranges...")
        limit = self.config.item_limit

        while self._running.is_set():
            if limit is not None and self.stats.supplied >= limit:
                log.info(f"{self.name} reached its limit of {limit} orange(s)")
                break

            item = Item(next(self._item_ids),
                        time_unit=self.config.time_unit,
                        interrupt=self._cancel,
                        listener=self.listener)

            # Counted before the hand-off so processed never overtakes it.
            supplied = self.stats.record_supplied()
            try:
                self.queue.put(item)
            except InterruptedWait:
                self.stats.retract_supplied()
                log.error(f"{self.name} error adding {item!r} to queue")
                break

            self.listener.plant_tick(self.name, supplied)
            if self._halt.wait(self.config.arrival_delay):
                break

        log.info(f"{self.name} Done")

    def _join_producer(self):
        """
        Waits for the producer to hand off the orange it is holding.

        If building that orange outlasts the grace period, its stage
        delay is interrupted. The queue stays open until the producer
        has exited, so the orange is never dropped.
        """
        self._thread.join(timeout=self.config.shutdown_grace)
        if self._thread.is_alive():
            log.warning(f"{self.name} producer still busy after "
                        f"{self.config.shutdown_grace:.2f}s; cancelling")
            self.forced_shutdown = True
            self._cancel.set()
            self._thread.join()

    def _drain(self):
        """Waits for the queue to empty while any worker is alive."""
        while not self.queue.wait_until_empty(timeout=self.config.poll_timeout):
            if all(f.done() for f in self._futures):
                log.error(f"{self.name} has no workers left; "
                          f"{self.queue.qsize()} orange(s) unprocessed")
                return

    def _await_workers(self, grace: float):
        """
        Raises:
            ShutdownTimeout: If any worker is still running after `grace`.
        """
        _, not_done = wait(self._futures, timeout=grace)
        if not_done:
            raise ShutdownTimeout(len(not_done), grace)

    def _force_cancel(self):
        self.forced_shutdown = True
        self._cancel.set()
        self.queue.cancel()
        for future in self._futures:
            future.cancel()

    def _collect_worker_errors(self):
        for worker, future in zip(self.workers, self._futures):
            if future.cancelled():
                continue
            exc = future.exception()
            if exc is not None:
                log.error(f"{worker.name} failed", exc_info=exc)
                self.worker_errors.append(exc)



    def increment_processed(self):
        """Called by a worker once per orange that reached the terminal stage."""
        self.stats.record_processed()

    @property
    def supplied_count(self) -> int:
        return self.stats.supplied

    @property
    def processed_count(self) -> int:
        return self.stats.processed

    @property
    def bottles(self) -> int:
        return self.stats.units_produced

    @property
    def waste(self) -> int:
        return self.stats.waste

    @property
    def queue_size(self) -> int:
        return self.queue.qsize()

    def get_final_kpis(self) -> Dict[str, Any]:
        """Returns the throughput KPIs plus plant-level details."""
        kpis = self.stats.get_final_kpis(self._stopped_at)
        kpis["plant"] = {
            "name": self.name,
            "state": self._state.name,
            "num_workers": self.config.num_workers,
            "forced_shutdown": self.forced_shutdown,
            "per_worker_processed": {
                w.name: w.processed_count for w in self.workers
            }
        }
        return kpis
