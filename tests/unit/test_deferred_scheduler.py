"""
Unit tests for logical-clock deferred callbacks.
"""

import pytest

from resus.protocol.scheduler import DeferredScheduler


@pytest.fixture
def scheduler():
    return DeferredScheduler()


def test_fires_when_logical_time_reaches_due(scheduler):
    fired = []
    scheduler.schedule(2, lambda: fired.append("a"), label="a")

    assert scheduler.advance(1) == 0
    assert fired == []
    assert scheduler.advance(2) == 1
    assert fired == ["a"]
    assert scheduler.pending == []


def test_fires_in_due_order_then_schedule_order(scheduler):
    fired = []
    scheduler.schedule(4, lambda: fired.append("late"), label="late")
    scheduler.schedule(2, lambda: fired.append("first"), label="first")
    scheduler.schedule(2, lambda: fired.append("second"), label="second")

    assert scheduler.pending == ["first", "second", "late"]
    scheduler.advance(10)
    assert fired == ["first", "second", "late"]


def test_delay_is_relative_to_current_time(scheduler):
    fired = []
    scheduler.advance(100)
    scheduler.schedule(2, lambda: fired.append(1))

    scheduler.advance(101)
    assert fired == []
    scheduler.advance(102)
    assert fired == [1]


def test_suspend_parks_and_restore_keeps_remaining_delay(scheduler):
    fired = []
    scheduler.schedule(4, lambda: fired.append(1), label="amiodarone_prompt")
    scheduler.advance(1)

    assert scheduler.suspend() == 1
    assert scheduler.pending == []
    assert scheduler.parked == ["amiodarone_prompt"]

    scheduler.restore(1)
    scheduler.advance(3)
    assert fired == []
    scheduler.advance(4)
    assert fired == [1]


def test_cancel_all_drops_pending_and_parked(scheduler):
    fired = []
    scheduler.schedule(2, lambda: fired.append(1))
    scheduler.suspend()
    scheduler.schedule(3, lambda: fired.append(2))

    assert scheduler.cancel_all() == 2
    scheduler.restore(0)
    scheduler.advance(10)
    assert fired == []


def test_negative_delay_rejected(scheduler):
    with pytest.raises(ValueError):
        scheduler.schedule(-1, lambda: None)
