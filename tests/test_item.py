# tests/test_item.py

"""
Unit tests for the Item state machine and the Stage ordering.

These tests use `time_unit=0` wherever the delay itself is not
under test, so they run instantly.
"""

import logging
import threading
import time

import pytest

from juice_plant import (
    Item,
    Stage,
    InvalidTransition,
    INITIAL_STAGE,
    TERMINAL_STAGE,
    ProgressListener
)


class RecordingListener(ProgressListener):
    """Keeps every work_interrupted event."""
    def __init__(self):
        self.interrupted = []

    def work_interrupted(self, item, stage):
        self.interrupted.append((item.item_id, stage))


@pytest.fixture
def item() -> Item:
    """Returns a fresh item with no simulated delay."""
    return Item(item_id=1, time_unit=0)



def test_stage_order_and_costs():
    """Stages are declared in processing order with their costs."""
    assert [s.name for s in Stage] == [
        "FETCHED", "PEELED", "SQUEEZED", "BOTTLED", "PROCESSED"
    ]
    assert [s.cost for s in Stage] == [15, 38, 29, 17, 1]
    assert [s.order for s in Stage] == [0, 1, 2, 3, 4]
    assert INITIAL_STAGE is Stage.FETCHED
    assert TERMINAL_STAGE is Stage.PROCESSED


def test_stage_successor_table():
    assert Stage.FETCHED.successor() is Stage.PEELED
    assert Stage.BOTTLED.successor() is Stage.PROCESSED
    assert Stage.PROCESSED.is_terminal
    assert not Stage.BOTTLED.is_terminal

    with pytest.raises(InvalidTransition):
        Stage.PROCESSED.successor()


def test_initialization(item: Item):
    """A new item sits at the initial stage."""
    assert item.stage == Stage.FETCHED
    assert item.history == [Stage.FETCHED]
    assert not item.is_terminal
    assert not item.interrupted


def test_advance_reaches_terminal_in_order(item: Item):
    """
    Repeated advance() from the initial stage reaches the terminal
    stage in exactly (stage count - 1) calls, strictly increasing.
    """
    calls = 0
    while not item.is_terminal:
        returned = item.advance()
        calls += 1
        assert returned is item.stage

    assert calls == len(Stage) - 1
    assert item.stage == Stage.PROCESSED
    orders = [s.order for s in item.history]
    assert orders == sorted(set(orders))
    assert item.history == list(Stage)


def test_advance_on_terminal_raises(item: Item):
    """Advancing a terminal item fails and leaves it unchanged."""
    for _ in range(len(Stage) - 1):
        item.advance()
    history_before = list(item.history)

    with pytest.raises(InvalidTransition):
        item.advance()

    # Still fails on a second attempt; nothing moved.
    with pytest.raises(InvalidTransition):
        item.advance()

    assert item.stage == Stage.PROCESSED
    assert item.history == history_before


def test_invalid_transition_is_a_value_error():
    """Callers catching ValueError also see InvalidTransition."""
    assert issubclass(InvalidTransition, ValueError)


def test_negative_time_unit_rejected():
    with pytest.raises(ValueError):
        Item(time_unit=-1.0)


def test_construction_pays_fetch_cost():
    """Creating an item blocks for the FETCHED cost."""
    time_unit = 0.002
    t0 = time.monotonic()
    Item(time_unit=time_unit)
    elapsed = time.monotonic() - t0

    assert elapsed >= Stage.FETCHED.cost * time_unit * 0.9


def test_advance_pays_current_stage_cost():
    """advance() blocks for the cost of the stage being left."""
    time_unit = 0.001
    item = Item(time_unit=time_unit)

    t0 = time.monotonic()
    item.advance()  # FETCHED -> PEELED, pays FETCHED's cost
    elapsed = time.monotonic() - t0

    assert elapsed >= Stage.FETCHED.cost * time_unit * 0.9
    assert item.stage == Stage.PEELED


def test_interrupted_work_still_advances(caplog):
    """
    An interrupted delay is reported (warning + listener event) but
    the transition still happens.
    """
    interrupt = threading.Event()
    interrupt.set()
    listener = RecordingListener()

    with caplog.at_level(logging.WARNING, logger="juice_plant.item"):
        # time_unit is large: without the interrupt this would take minutes
        item = Item(item_id=7, time_unit=10.0, interrupt=interrupt,
                    listener=listener)
        item.advance()

    assert item.stage == Stage.PEELED
    assert item.interrupted
    # Construction and the first advance() both work at FETCHED.
    assert listener.interrupted == [(7, Stage.FETCHED), (7, Stage.FETCHED)]
    assert "juice may be bad" in caplog.text


def test_interrupt_cuts_a_running_delay_short():
    """Setting the event from another thread ends the current delay."""
    interrupt = threading.Event()
    item = Item(time_unit=0, interrupt=interrupt)
    item.time_unit = 10.0  # make the next stage very slow

    timer = threading.Timer(0.05, interrupt.set)
    timer.start()
    t0 = time.monotonic()
    item.advance()
    elapsed = time.monotonic() - t0
    timer.join()

    assert elapsed < 5.0
    assert item.stage == Stage.PEELED
    assert item.interrupted
