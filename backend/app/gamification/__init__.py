"""XP, levels, streaks and achievements."""

from app.gamification.core import XPResult, apply_xp, next_streak, requirement_met, xp_to_next_level
from app.gamification.service import AchievementUnlocked, GamificationEngine, LevelUp

__all__ = [
    "AchievementUnlocked",
    "GamificationEngine",
    "LevelUp",
    "XPResult",
    "apply_xp",
    "next_streak",
    "requirement_met",
    "xp_to_next_level",
]
