"""User stats, achievement catalog and unlock records."""

import uuid
from enum import Enum as PyEnum

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class RequirementType(str, PyEnum):
    """What an achievement threshold is compared against."""

    QUESTIONS_ANSWERED = "questions_answered"
    TESTS_COMPLETED = "tests_completed"
    STREAK_DAYS = "streak_days"


class UserStats(Base):
    """Per-user progress singleton.

    ``version`` is an optimistic-lock counter: every ORM update is issued as
    ``UPDATE ... WHERE version = :seen`` and bumps it.
    """

    __tablename__ = "user_stats"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        unique=True,
    )
    level = Column(Integer, nullable=False, default=1)
    xp = Column(Integer, nullable=False, default=0)
    total_questions_answered = Column(Integer, nullable=False, default=0)
    streak_days = Column(Integer, nullable=False, default=0)
    last_activity_date = Column(Date, nullable=True)
    version = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    __mapper_args__ = {"version_id_col": version}


class Achievement(Base):
    """Catalog entry; effectively read-only reference data."""

    __tablename__ = "achievements"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    key = Column(String(100), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(50), nullable=False)
    xp_reward = Column(Integer, nullable=False, default=0)
    requirement_type = Column(String(50), nullable=False)
    requirement_value = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class UserAchievement(Base):
    """Unlock record; at most one per (user, achievement)."""

    __tablename__ = "user_achievements"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    achievement_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("achievements.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    unlocked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    achievement = relationship("Achievement")

    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )
