"""Tests for the session countdown."""

import pytest

from app.core.config import settings
from app.test_engine.clock import SessionClock


def test_default_budget_comes_from_settings():
    clock = SessionClock()
    assert clock.remaining == settings.SESSION_DURATION_SECONDS == 8040


def test_tick_counts_down():
    clock = SessionClock(10)
    assert clock.tick() == 9
    assert clock.tick(4) == 5
    assert clock.elapsed == 5
    assert not clock.expired


def test_never_goes_negative():
    clock = SessionClock(2)
    clock.tick(5)
    assert clock.remaining == 0
    assert clock.expired
    clock.tick()
    assert clock.remaining == 0


def test_reset():
    clock = SessionClock(3)
    clock.tick(3)
    clock.reset()
    assert clock.remaining == 3
    assert not clock.expired


@pytest.mark.parametrize(
    "remaining,expected",
    [(8040, "2:14:00"), (3599, "0:59:59"), (61, "0:01:01"), (0, "0:00:00")],
)
def test_formatted(remaining, expected):
    assert SessionClock(remaining).formatted == expected


def test_negative_budget_rejected():
    with pytest.raises(ValueError):
        SessionClock(-1)
