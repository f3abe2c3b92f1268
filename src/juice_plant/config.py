# src/juice_plant/config.py

"""
Run-time configuration for plants and the coordinator.

All timing constants live here rather than in the classes that use
them, so tests can shrink every delay to zero and still exercise the
same code paths.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PlantConfig:
    """
    Settings shared by every plant in a run.

    Attributes:
        num_plants (int): Number of plants the coordinator runs.
        num_workers (int): Size of each plant's worker pool.
        items_per_unit (int): Oranges needed for one bottle.
        run_duration (float): Seconds the coordinator lets plants run.
        arrival_delay (float): Seconds the producer pauses between items.
        poll_timeout (float): Seconds a worker waits on an empty queue
                              before re-checking whether to exit.
        shutdown_grace (float): Seconds `Plant.stop()` waits for workers
                                before cancelling them.
        time_unit (float): Seconds per unit of stage cost. 0.001 makes
                           stage costs milliseconds; 0 disables delays.
        queue_capacity (int): Maximum queued items. 0 means unbounded.
        item_limit (Optional[int]): If set, each producer stops after
                                    supplying this many items.
        sample_interval (float): Seconds between coordinator samples.
        timeline_limit (int): Throughput samples kept per plant before
                              the timeline is down-sampled.
    """

    num_plants: int = 2
    num_workers: int = 2
    items_per_unit: int = 3
    run_duration: float = 10.0
    arrival_delay: float = 0.05
    poll_timeout: float = 1.0
    shutdown_grace: float = 2.0
    time_unit: float = 0.001
    queue_capacity: int = 0
    item_limit: Optional[int] = None
    sample_interval: float = 0.5
    timeline_limit: int = 10000

    def __post_init__(self):
        if self.num_plants <= 0:
            raise ValueError("num_plants must be > 0.")
        if self.num_workers <= 0:
            raise ValueError("num_workers must be > 0.")
        if self.items_per_unit <= 0:
            raise ValueError("items_per_unit must be > 0.")
        if self.queue_capacity < 0:
            raise ValueError("queue_capacity cannot be negative.")
        if self.item_limit is not None and self.item_limit < 0:
            raise ValueError("item_limit cannot be negative.")
        if self.poll_timeout <= 0:
            raise ValueError("poll_timeout must be > 0.")
        if self.sample_interval <= 0:
            raise ValueError("sample_interval must be > 0.")
        if self.timeline_limit < 2:
            raise ValueError("timeline_limit must be >= 2.")

        for name in ("run_duration", "arrival_delay",
                     "shutdown_grace", "time_unit"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative.")
