# src/juice_plant/constants.py

"""
Defines core enumerations used across the juice plant.

This module provides the ordered processing stages an orange goes
through and the lifecycle states of a plant. The successor table
is spelled out explicitly so that the ordering never depends on
member definition order alone.
"""

from enum import Enum, auto
from typing import Dict, Optional

from .errors import InvalidTransition


class Stage(Enum):
    """
    Represents the processing stages of an item, in strict order.

    Each member carries its position in the sequence and the simulated
    cost (in time units) of the work performed *while* an item sits
    in that stage.
    """

    # The raw orange has been fetched from the grove.
    FETCHED = (0, 15)

    PEELED = (1, 38)

    SQUEEZED = (2, 29)

    BOTTLED = (3, 17)

    # Terminal stage. An item here cannot be advanced again.
    PROCESSED = (4, 1)

    def __init__(self, order: int, cost: int):
        self.order = order
        self.cost = cost

    @property
    def is_terminal(self) -> bool:
        return self is TERMINAL_STAGE

    def successor(self) -> "Stage":
        """
        Returns the stage that follows this one.

        Raises:
            InvalidTransition: If this is the terminal stage.
        """
        nxt = _SUCCESSORS.get(self)
        if nxt is None:
            raise InvalidTransition(f"{self.name} is the final stage")
        return nxt


INITIAL_STAGE = Stage.FETCHED
TERMINAL_STAGE = Stage.PROCESSED

# Total order of the state machine. PROCESSED has no successor.
_SUCCESSORS: Dict[Stage, Optional[Stage]] = {
    Stage.FETCHED: Stage.PEELED,
    Stage.PEELED: Stage.SQUEEZED,
    Stage.SQUEEZED: Stage.BOTTLED,
    Stage.BOTTLED: Stage.PROCESSED,
    Stage.PROCESSED: None,
}


class PlantState(Enum):
    """
    Represents the lifecycle of a plant.

    The lifecycle is linear: IDLE -> RUNNING -> DRAINING -> STOPPED.
    A STOPPED plant is never restarted; build a new one instead.
    """

    # Constructed, no threads started yet.
    IDLE = auto()

    # Producer and workers are active.
    RUNNING = auto()

    # Production has stopped; queued items are still being consumed.
    DRAINING = auto()

    STOPPED = auto()
