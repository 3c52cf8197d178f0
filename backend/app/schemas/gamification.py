"""Pydantic schemas for stats, achievements and notifications."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel


class UserStatsOut(BaseModel):
    level: int
    xp: int
    xp_to_next_level: int
    total_questions_answered: int
    streak_days: int
    last_activity_date: date | None


class AchievementOut(BaseModel):
    id: UUID
    key: str
    name: str
    description: str
    icon: str
    xp_reward: int
    requirement_type: str
    requirement_value: int
    unlocked: bool
    unlocked_at: datetime | None = None


class NotificationOut(BaseModel):
    """Level-up or achievement-unlocked event for the client to display."""

    type: Literal["level_up", "achievement_unlocked"]
    level: int | None = None
    achievement_key: str | None = None
    name: str | None = None
    description: str | None = None
    icon: str | None = None
    xp_reward: int | None = None
