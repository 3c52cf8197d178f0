"""Property-based tests for streak and leveling invariants."""

from datetime import date, timedelta

from hypothesis import given, settings
from hypothesis import strategies as st

from app.gamification.core import apply_xp, next_streak

TODAY = date(2026, 5, 10)


@settings(max_examples=200, deadline=None)
@given(
    level=st.integers(min_value=1, max_value=100),
    xp=st.integers(min_value=0, max_value=20_000),
    amount=st.integers(min_value=0, max_value=5_000),
)
def test_xp_award_raises_level_by_at_most_one(level: int, xp: int, amount: int) -> None:
    """
    Property: one award grants at most one level and never loses XP.
    """
    result = apply_xp(level, xp, amount)

    assert result.xp == xp + amount
    assert result.level in (level, level + 1)
    assert result.leveled_up == (result.level == level + 1)
    assert result.leveled_up == (xp + amount >= level * 100)


@settings(max_examples=200, deadline=None)
@given(
    streak=st.integers(min_value=0, max_value=365),
    gap=st.integers(min_value=-5, max_value=1000),
)
def test_streak_transitions(streak: int, gap: int) -> None:
    """
    Property: streak only grows by one, resets to one, or stays put.
    """
    last = TODAY - timedelta(days=gap)
    new_streak = next_streak(streak, last, TODAY)

    if gap == 1:
        assert new_streak == streak + 1
    elif gap > 1:
        assert new_streak == 1
    else:
        assert new_streak == streak
