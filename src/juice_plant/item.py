# src/juice_plant/item.py

"""
Implements the `Item` state machine: a single orange on its way
from the grove to a bottle.

An item starts at `Stage.FETCHED` and only ever moves forward. Each
call to `advance()` performs the simulated work of the *current*
stage (a blocking delay proportional to the stage cost) and then
moves to the next stage. Creating an item is not free either: the
constructor pays for the FETCHED stage before returning.
"""

import logging
import threading
import time
from typing import List, Optional

from .constants import Stage, INITIAL_STAGE
from .errors import InvalidTransition, InterruptedWait
from .progress import ProgressListener

log = logging.getLogger(__name__)


class Item:
    """
    A unit of work progressing through the ordered `Stage` sequence.

    An item is owned by one thread at a time: the producer while it is
    being created, then whichever worker dequeued it. It carries no
    lock of its own.

    Attributes:
        item_id (int): Sequence number assigned by the producer.
        stage (Stage): The current stage.
        history (List[Stage]): Every stage visited, in order.
        interrupted (bool): True if any stage delay was cut short.
    """

    def __init__(self, item_id: int = 0, time_unit: float = 0.001,
                 interrupt: Optional[threading.Event] = None,
                 listener: Optional[ProgressListener] = None):
        """
        Creates the item and performs the FETCHED work synchronously.

        Args:
            item_id (int): Sequence number, used in narration.
            time_unit (float): Seconds per unit of stage cost.
            interrupt (Optional[threading.Event]): When set, pending and
                future stage delays end early.
            listener (Optional[ProgressListener]): Receives
                `work_interrupted` events.
        """
        if time_unit < 0:
            raise ValueError("time_unit cannot be negative.")

        self.item_id: int = item_id
        self.time_unit: float = time_unit
        self.stage: Stage = INITIAL_STAGE
        self.history: List[Stage] = [INITIAL_STAGE]
        self.interrupted: bool = False

        self._interrupt = interrupt
        self._listener = listener or ProgressListener()

        self._do_work()

    def __repr__(self):
        return f"Item(id={self.item_id}, stage={self.stage.name})"

    @property
    def is_terminal(self) -> bool:
        return self.stage.is_terminal

    def advance(self) -> Stage:
        """
        Performs the current stage's work and moves to the next stage.

        Returns:
            Stage: The stage the item is in after the transition.

        Raises:
            InvalidTransition: If the item is already at the terminal
                               stage. The item is left unchanged.
        """
        # Don't attempt to process an already completed orange
        if self.is_terminal:
            raise InvalidTransition(
                f"{self!r} has already been processed")

        nxt = self.stage.successor()
        self._do_work()
        self.stage = nxt
        self.history.append(nxt)
        return nxt

    def _do_work(self):
        """Blocks for the current stage's cost; interruption is reported."""
        try:
            self._sleep(self.stage.cost * self.time_unit)
        except InterruptedWait:
            self.interrupted = True
            log.warning(f"Incomplete processing of {self!r}, "
                        f"juice may be bad")
            self._listener.work_interrupted(self, self.stage)

    def _sleep(self, seconds: float):
        if seconds <= 0:
            return
        if self._interrupt is None:
            time.sleep(seconds)
        elif self._interrupt.wait(seconds):
            raise InterruptedWait(f"{self!r} work interrupted")
