# src/juice_plant/coordinator.py

"""
Runs several plants side by side and totals their output.

The coordinator starts every plant, lets them run for the configured
duration, stops them one after another and waits for each producer.
Then it adds up the counters.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .config import PlantConfig
from .measure import ThroughputSample
from .plant import Plant
from .progress import ProgressListener

log = logging.getLogger(__name__)

SampleCallback = Callable[[Plant, ThroughputSample], None]


@dataclass
class FactoryReport:
    """Aggregate figures across all plants of one run."""
    supplied: int = 0
    processed: int = 0
    bottles: int = 0
    waste: int = 0
    duration: float = 0.0
    plants: List[Dict[str, Any]] = field(default_factory=list)

    def add(self, plant: Plant):
        self.supplied += plant.supplied_count
        self.processed += plant.processed_count
        self.bottles += plant.bottles
        self.waste += plant.waste
        self.plants.append(plant.get_final_kpis())

    def summary_lines(self) -> List[str]:
        return [
            f"Total provided/processed = {self.supplied}/{self.processed}",
            f"Created {self.bottles}, wasted {self.waste} oranges",
        ]


def build_plants(config: PlantConfig,
                 listener: Optional[ProgressListener] = None) -> List[Plant]:
    return [Plant(i + 1, config, listener) for i in range(config.num_plants)]


def run_factory(config: Optional[PlantConfig] = None,
                listener: Optional[ProgressListener] = None,
                on_sample: Optional[SampleCallback] = None,
                plants: Optional[List[Plant]] = None) -> FactoryReport:
    """
    Runs every plant for `config.run_duration` seconds and reports.

    Args:
        config (Optional[PlantConfig]): Run settings.
        listener (Optional[ProgressListener]): Progress sink for all plants.
        on_sample (Optional[SampleCallback]): Called with each plant's
            counter snapshot every `config.sample_interval` seconds
            while the plants run.
        plants (Optional[List[Plant]]): Pre-built plants to run instead
            of building `config.num_plants` new ones.

    Returns:
        FactoryReport: Totals and per-plant KPIs.
    """
    config = config or PlantConfig()
    if plants is None:
        plants = build_plants(config, listener)

    started: List[Plant] = []
    t0 = time.monotonic()
    try:
        for plant in plants:
            plant.start()
            started.append(plant)

        _run_for(config.run_duration, config.sample_interval,
                 plants, on_sample)
    finally:
        _stop_all(started, config.shutdown_grace)

    report = FactoryReport(duration=time.monotonic() - t0)
    for plant in started:
        report.add(plant)

    log.info(f"Run finished after {report.duration:.2f}s: "
             f"supplied={report.supplied}, processed={report.processed}")
    return report


def _run_for(duration: float, interval: float, plants: List[Plant],
             on_sample: Optional[SampleCallback]):
    deadline = time.monotonic() + duration
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        time.sleep(min(interval, remaining))
        for plant in plants:
            sample = plant.stats.record_sample()
            if on_sample is not None:
                on_sample(plant, sample)


def _stop_all(plants: List[Plant], grace: float):
    """
    Stops every plant, then waits for each producer to finish.

    A plant whose `stop()` raises does not keep the others running. The
    first such error is re-raised once every plant has been handled.
    """
    first_error: Optional[BaseException] = None
    for plant in plants:
        try:
            plant.stop()
        except Exception as exc:
            log.exception(f"{plant.name} failed to stop")
            if first_error is None:
                first_error = exc
    for plant in plants:
        try:
            plant.wait_to_stop(timeout=grace)
        except Exception as exc:
            log.exception(f"{plant.name} failed to stop")
            if first_error is None:
                first_error = exc
    if first_error is not None:
        raise first_error
