"""Gamification persistence: user stats, achievement unlocks and notifications."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.app_exceptions import StatsConflictError
from app.core.config import settings
from app.core.logging import get_logger
from app.gamification.core import apply_xp, next_streak, requirement_met
from app.models.attempt import TestAttempt
from app.models.gamification import Achievement, UserAchievement, UserStats

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LevelUp:
    new_level: int


@dataclass(frozen=True)
class AchievementUnlocked:
    key: str
    name: str
    description: str
    icon: str
    xp_reward: int

    @classmethod
    def from_model(cls, achievement: Achievement) -> "AchievementUnlocked":
        return cls(
            key=achievement.key,
            name=achievement.name,
            description=achievement.description,
            icon=achievement.icon,
            xp_reward=achievement.xp_reward,
        )


Notification = LevelUp | AchievementUnlocked


class GamificationEngine:
    """
    Stats, streak, XP and achievement updates for one user.

    Every stats write is an optimistic-locked update: a concurrent writer makes
    the flush fail with ``StaleDataError``, in which case the row is reloaded
    and the mutation re-applied.

    Notifications raised by the calls are appended to ``notifications`` in
    the order they happened.
    """

    def __init__(self, db: Session, user_id: UUID, today: date | None = None):
        self.db = db
        self.user_id = user_id
        self.today = today or datetime.now(timezone.utc).date()
        self.notifications: list[Notification] = []

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def _load_stats(self) -> UserStats | None:
        return self.db.execute(
            select(UserStats).where(UserStats.user_id == self.user_id)
        ).scalar_one_or_none()

    def get_or_create_stats(self) -> UserStats:
        """Fetch the user's stats row, creating the default one on first use."""
        stats = self._load_stats()
        if stats is not None:
            return stats

        stats = UserStats(
            user_id=self.user_id,
            level=1,
            xp=0,
            total_questions_answered=0,
            streak_days=0,
        )
        self.db.add(stats)
        try:
            self.db.commit()
        except IntegrityError:
            # Created concurrently; use the winner's row
            self.db.rollback()
            stats = self._load_stats()
            if stats is None:
                raise
        return stats

    def _update_stats(self, mutate: Callable[[UserStats], T]) -> tuple[UserStats, T]:
        max_attempts = max(1, settings.STATS_UPDATE_MAX_RETRIES)
        for attempt in range(1, max_attempts + 1):
            stats = self.get_or_create_stats()
            result = mutate(stats)
            try:
                self.db.commit()
                return stats, result
            except StaleDataError:
                self.db.rollback()
                logger.warning(
                    "User stats changed concurrently, retrying",
                    extra={"user_id": str(self.user_id), "attempt": attempt},
                )
        raise StatsConflictError(self.user_id, max_attempts)

    def on_xp_awarded(self, amount: int) -> UserStats:
        """Add XP; one level-up at most per award."""

        def award(stats: UserStats) -> bool:
            outcome = apply_xp(stats.level, stats.xp, amount, settings.XP_PER_LEVEL)
            stats.level = outcome.level
            stats.xp = outcome.xp
            return outcome.leveled_up

        stats, leveled_up = self._update_stats(award)
        if leveled_up:
            self.notifications.append(LevelUp(new_level=stats.level))
            logger.info(
                "User leveled up",
                extra={"user_id": str(self.user_id), "level": stats.level, "xp": stats.xp},
            )
        return stats

    def on_question_answered(self) -> UserStats:
        """Count one answered question, update the streak, then check achievements."""
        today = self.today

        def count(stats: UserStats) -> None:
            stats.total_questions_answered += 1
            if stats.last_activity_date != today:
                stats.streak_days = next_streak(stats.streak_days, stats.last_activity_date, today)
            stats.last_activity_date = today

        stats, _ = self._update_stats(count)
        self.check_achievements()
        return stats

    def on_test_completed(self) -> UserStats:
        """Evaluate achievements with the user's completed-test count."""
        completed = self.db.execute(
            select(func.count())
            .select_from(TestAttempt)
            .where(TestAttempt.user_id == self.user_id, TestAttempt.completed_at.is_not(None))
        ).scalar_one()
        self.check_achievements(tests_completed=completed)
        return self.get_or_create_stats()

    # ------------------------------------------------------------------
    # Achievements
    # ------------------------------------------------------------------

    def _catalog(self) -> list[Achievement]:
        return list(
            self.db.execute(
                select(Achievement).order_by(Achievement.requirement_value, Achievement.key)
            ).scalars()
        )

    def _unlocked(self) -> dict[UUID, datetime]:
        rows = self.db.execute(
            select(UserAchievement.achievement_id, UserAchievement.unlocked_at).where(
                UserAchievement.user_id == self.user_id
            )
        ).all()
        return {achievement_id: unlocked_at for achievement_id, unlocked_at in rows}

    def _record_unlock(self, achievement: Achievement) -> bool:
        self.db.add(UserAchievement(user_id=self.user_id, achievement_id=achievement.id))
        try:
            self.db.commit()
        except IntegrityError:
            # Another evaluation unlocked it first
            self.db.rollback()
            return False
        return True

    def check_achievements(self, tests_completed: int = 0) -> list[AchievementUnlocked]:
        """Unlock every satisfied, not-yet-unlocked achievement, one at a time."""
        stats = self.get_or_create_stats()
        total_answered = stats.total_questions_answered
        streak_days = stats.streak_days
        unlocked_ids = set(self._unlocked())

        newly_unlocked: list[AchievementUnlocked] = []
        for achievement in self._catalog():
            if achievement.id in unlocked_ids:
                continue
            if not requirement_met(
                achievement.requirement_type,
                achievement.requirement_value,
                total_questions_answered=total_answered,
                streak_days=streak_days,
                tests_completed=tests_completed,
            ):
                continue
            if not self._record_unlock(achievement):
                continue

            unlocked_ids.add(achievement.id)
            if achievement.xp_reward:
                self.on_xp_awarded(achievement.xp_reward)
            notification = AchievementUnlocked.from_model(achievement)
            self.notifications.append(notification)
            newly_unlocked.append(notification)
            logger.info(
                "Achievement unlocked",
                extra={"user_id": str(self.user_id), "achievement": achievement.key},
            )
        return newly_unlocked

    def list_achievements(self) -> list[dict[str, Any]]:
        """Catalog annotated with this user's unlock state."""
        unlocked = self._unlocked()
        return [
            {
                "achievement": achievement,
                "unlocked": achievement.id in unlocked,
                "unlocked_at": unlocked.get(achievement.id),
            }
            for achievement in self._catalog()
        ]
