"""
Pure gamification rules.

- Streak: consecutive calendar days with at least one answered question
- Leveling: reaching ``level * xp_per_level`` XP grants one level
- Achievements: threshold predicates over cumulative counters

No database access here; see ``service.py`` for persistence.
"""

from dataclasses import dataclass
from datetime import date

from app.models.gamification import RequirementType

# Days since last activity when there is no previous activity at all
NO_PRIOR_ACTIVITY_DAYS = 999


def days_since(last_activity_date: date | None, today: date) -> int:
    if last_activity_date is None:
        return NO_PRIOR_ACTIVITY_DAYS
    return (today - last_activity_date).days


def next_streak(streak_days: int, last_activity_date: date | None, today: date) -> int:
    """
    Streak after activity on ``today``.

    Only evaluated when the last activity was on another day: yesterday
    extends the streak, a longer gap (or no prior activity) restarts it at 1.
    Same-day repeats and clock skew (last activity in the future) leave it
    unchanged.
    """
    if last_activity_date == today:
        return streak_days
    gap = days_since(last_activity_date, today)
    if gap == 1:
        return streak_days + 1
    if gap > 1:
        return 1
    return streak_days


@dataclass(frozen=True)
class XPResult:
    level: int
    xp: int
    leveled_up: bool


def apply_xp(level: int, xp: int, amount: int, xp_per_level: int = 100) -> XPResult:
    """
    Add XP and apply at most one level-up.

    A single award that crosses several thresholds still grants only one
    level; the next award picks up the remainder.
    """
    if amount < 0:
        raise ValueError("XP awards must be non-negative")
    new_xp = xp + amount
    if new_xp >= level * xp_per_level:
        return XPResult(level=level + 1, xp=new_xp, leveled_up=True)
    return XPResult(level=level, xp=new_xp, leveled_up=False)


def xp_to_next_level(level: int, xp: int, xp_per_level: int = 100) -> int:
    return max(0, level * xp_per_level - xp)


def requirement_met(
    requirement_type: str,
    requirement_value: int,
    total_questions_answered: int,
    streak_days: int,
    tests_completed: int = 0,
) -> bool:
    """Check one achievement threshold. Unknown requirement types never unlock."""
    try:
        kind = RequirementType(requirement_type)
    except ValueError:
        return False
    if kind is RequirementType.QUESTIONS_ANSWERED:
        return total_questions_answered >= requirement_value
    if kind is RequirementType.TESTS_COMPLETED:
        return tests_completed >= requirement_value
    if kind is RequirementType.STREAK_DAYS:
        return streak_days >= requirement_value
    return False
