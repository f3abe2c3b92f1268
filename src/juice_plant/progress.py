# src/juice_plant/progress.py

"""
Progress notifications emitted by the plant core.

The core never prints. It reports what happens to a `ProgressListener`
supplied by the caller. The base class ignores every event, so a
listener only overrides the notifications it cares about.

Listeners are called from producer and worker threads; an
implementation that keeps state must guard it itself.
"""

import logging
from typing import Any

from .constants import Stage

log = logging.getLogger(__name__)


class ProgressListener:
    """
    No-op sink for plant progress events.

    Events:
    - `stage_advanced`: a worker moved an item to a new stage.
    - `plant_tick`: a producer supplied one more item.
    - `worker_stopped`: a worker left its loop.
    - `work_interrupted`: a stage delay was cut short.
    """

    def stage_advanced(self, worker_name: str, item: Any, stage: Stage):
        pass

    def plant_tick(self, plant_name: str, supplied: int):
        pass

    def worker_stopped(self, worker_name: str, processed: int):
        pass

    def work_interrupted(self, item: Any, stage: Stage):
        pass


class LoggingProgressListener(ProgressListener):
    """Narrates every event through the `logging` module."""

    def __init__(self, logger: logging.Logger = log,
                 level: int = logging.DEBUG):
        self.logger = logger
        self.level = level

    def stage_advanced(self, worker_name: str, item: Any, stage: Stage):
        self.logger.log(self.level,
                        f"{worker_name} processed {item} to state: {stage.name}")

    def plant_tick(self, plant_name: str, supplied: int):
        self.logger.log(self.level,
                        f"{plant_name} supplied orange #{supplied}")

    def worker_stopped(self, worker_name: str, processed: int):
        self.logger.info(f"{worker_name} stopping after {processed} oranges")

    def work_interrupted(self, item: Any, stage: Stage):
        self.logger.warning(f"Incomplete processing of {item} at "
                            f"{stage.name}, juice may be bad")
