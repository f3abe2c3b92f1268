# src/juice_plant/measure.py

"""
Provides `PlantStats`, the thread-safe throughput tracker of a plant.

This module owns the two shared counters of a plant (oranges supplied
and oranges processed) and everything derived from them. All writes
go through a single lock, so concurrent workers never lose or double
an update. Bottles and waste are not stored: they are computed from
the processed counter whenever they are asked for.

Like the rest of the package, it is a passive component; it only
records data when its `record_...` methods are called.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

# Set up the module-level logger
log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThroughputSample:
    """Counters read together at one instant."""
    timestamp: float
    supplied: int
    processed: int

    @property
    def backlog(self) -> int:
        return self.supplied - self.processed


class PlantStats:
    """
    Collects and derives the throughput figures of one plant.

    Attributes:
        items_per_unit (int): Oranges needed for one bottle (R).
        start_time (float): Clock reading when tracking began.
        timeline (List[ThroughputSample]): One sample per supplied
            item and per explicit `record_sample()`, plus one at
            creation to anchor the series. Once it holds more than
            `timeline_limit` samples, every other sample is dropped
            (the anchor is always kept), so memory stays bounded on
            long runs at the cost of resolution.
    """

    def __init__(self, items_per_unit: int,
                 clock: Callable[[], float] = time.monotonic,
                 timeline_limit: int = 10000):
        """
        Initializes the tracker.

        Args:
            items_per_unit (int): Oranges per bottle. Must be > 0.
            clock (Callable[[], float]): Time source for samples.
            timeline_limit (int): Samples kept before down-sampling.

        Raises:
            ValueError: If items_per_unit is 0 or less, or
                        timeline_limit is less than 2.
        """
        if items_per_unit <= 0:
            raise ValueError("items_per_unit must be > 0.")
        if timeline_limit < 2:
            raise ValueError("timeline_limit must be >= 2.")

        self.items_per_unit: int = items_per_unit
        self._clock = clock
        self.timeline_limit: int = timeline_limit
        self._lock = threading.Lock()

        self._supplied: int = 0
        self._processed: int = 0

        self.start_time: float = clock()
        self.timeline: List[ThroughputSample] = [
            ThroughputSample(self.start_time, 0, 0)
        ]

        log.debug(f"PlantStats initialized (ItemsPerUnit={items_per_unit})")



    def record_supplied(self) -> int:
        """
        Counts one more supplied orange and samples the timeline.

        Only the producer thread calls this. The lock is still taken so
        that `snapshot()` sees both counters from the same instant.

        Returns:
            int: The new supplied total.
        """
        with self._lock:
            self._supplied += 1
            self._append_locked(self._sample_locked())
            return self._supplied

    def retract_supplied(self) -> int:
        """
        Takes back the last `record_supplied()` when its orange never
        reached the queue.

        Returns:
            int: The corrected supplied total.
        """
        with self._lock:
            if self._supplied <= self._processed:
                raise ValueError("Cannot retract an orange already processed.")
            self._supplied -= 1
            self._append_locked(self._sample_locked())
            return self._supplied

    def record_processed(self) -> int:
        """
        Counts one more fully processed orange.

        Safe to call concurrently from every worker.

        Returns:
            int: The new processed total.
        """
        with self._lock:
            self._processed += 1
            return self._processed

    def record_sample(self) -> ThroughputSample:
        """Appends a sample to the timeline outside the supply path."""
        with self._lock:
            sample = self._sample_locked()
            self._append_locked(sample)
            return sample

    def _append_locked(self, sample: ThroughputSample):
        self.timeline.append(sample)
        if len(self.timeline) > self.timeline_limit:
            self.timeline = self.timeline[::2]
            log.debug(f"Timeline down-sampled to {len(self.timeline)} samples")



    @property
    def supplied(self) -> int:
        with self._lock:
            return self._supplied

    @property
    def processed(self) -> int:
        with self._lock:
            return self._processed

    @property
    def units_produced(self) -> int:
        return self.processed // self.items_per_unit

    @property
    def waste(self) -> int:
        return self.processed % self.items_per_unit

    def snapshot(self) -> ThroughputSample:
        """Reads both counters atomically without touching the timeline."""
        with self._lock:
            return self._sample_locked()

    def _sample_locked(self) -> ThroughputSample:
        return ThroughputSample(self._clock(), self._supplied, self._processed)



    def get_final_kpis(self, end_time: Optional[float] = None
                       ) -> Dict[str, Any]:
        """
        Returns the final dictionary of throughput KPIs.

        This method should be called *after* the plant has stopped;
        before that the figures are only a moving snapshot.

        Args:
            end_time (Optional[float]): Clock reading at which the run
                ended. Defaults to now.
        """
        final = self.snapshot()
        if end_time is None:
            end_time = final.timestamp

        duration = end_time - self.start_time
        if duration <= 0:
            log.warning("Total run duration is 0. Rates will be zero.")

        processed = final.processed
        supply_rate = (final.supplied / duration) if duration > 0 else 0.0
        process_rate = (processed / duration) if duration > 0 else 0.0
        max_backlog = max(s.backlog for s in self.timeline) \
            if self.timeline else 0

        return {
            "summary": {
                "start_time": self.start_time,
                "end_time": end_time,
                "total_duration": duration,
                "items_per_unit": self.items_per_unit
            },
            "throughput": {
                "total_supplied": final.supplied,
                "total_processed": processed,
                "supply_rate": supply_rate,
                "processing_rate": process_rate,
                "max_backlog_observed": max_backlog
            },
            "bottling": {
                "bottles": processed // self.items_per_unit,
                "waste": processed % self.items_per_unit
            }
        }
