# src/juice_plant/errors.py

"""
Exception taxonomy for the juice plant.

Only `InvalidTransition` and `PlantStateError` are meant to reach
callers. `InterruptedWait` and `ShutdownTimeout` describe expected
operational events; they are raised and handled at the boundary
where they occur (a stage delay, a worker's blocking take, the
plant's shutdown sequence).
"""


class JuicePlantError(Exception):
    """Base class for all errors raised by this package."""


class InvalidTransition(JuicePlantError, ValueError):
    """An item already at its terminal stage was asked to advance."""


class InterruptedWait(JuicePlantError):
    """A blocking delay or queue operation was interrupted."""


class ShutdownTimeout(JuicePlantError):
    """The worker pool did not finish within the grace period."""

    def __init__(self, pending: int, grace: float):
        super().__init__(f"{pending} worker(s) still running after "
                         f"{grace:.2f}s grace period")
        self.pending = pending
        self.grace = grace


class PlantStateError(JuicePlantError):
    """A lifecycle operation was called in the wrong plant state."""
