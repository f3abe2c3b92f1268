# src/juice_plant/__init__.py

"""
Initializes the 'juice_plant' package.

This file sets up the package-level logger and "lifts" the
most important classes and enums to the top-level namespace.
This allows users to import core components directly, e.g.:

from juice_plant import Plant, PlantConfig, Stage
"""

import logging

# Setup Package-Level Logger
# A NullHandler keeps the library quiet unless the application
# configures logging itself (the CLI does).
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


# Lift constants and errors
from .constants import Stage, PlantState, INITIAL_STAGE, TERMINAL_STAGE
from .errors import (
    JuicePlantError,
    InvalidTransition,
    InterruptedWait,
    ShutdownTimeout,
    PlantStateError
)

# Lift the core classes
from .config import PlantConfig
from .item import Item
from .work_queue import WorkQueue
from .measure import PlantStats, ThroughputSample
from .progress import ProgressListener, LoggingProgressListener
from .worker import Worker
from .plant import Plant
from .coordinator import FactoryReport, run_factory


__all__ = [
    # Constants
    "Stage",
    "PlantState",
    "INITIAL_STAGE",
    "TERMINAL_STAGE",

    # Errors
    "JuicePlantError",
    "InvalidTransition",
    "InterruptedWait",
    "ShutdownTimeout",
    "PlantStateError",

    # Core Classes
    "PlantConfig",
    "Item",
    "WorkQueue",
    "PlantStats",
    "ThroughputSample",
    "ProgressListener",
    "LoggingProgressListener",
    "Worker",
    "Plant",

    # Coordinator
    "FactoryReport",
    "run_factory"
]
