"""Stats and achievement endpoints for the current user."""

from fastapi import APIRouter

from app.core.config import settings
from app.core.dependencies import CurrentUser, DbSession
from app.gamification.core import xp_to_next_level
from app.gamification.service import AchievementUnlocked, GamificationEngine, LevelUp, Notification
from app.models.gamification import UserStats
from app.schemas.gamification import AchievementOut, NotificationOut, UserStatsOut

router = APIRouter()


def stats_out(stats: UserStats) -> UserStatsOut:
    return UserStatsOut(
        level=stats.level,
        xp=stats.xp,
        xp_to_next_level=xp_to_next_level(stats.level, stats.xp, settings.XP_PER_LEVEL),
        total_questions_answered=stats.total_questions_answered,
        streak_days=stats.streak_days,
        last_activity_date=stats.last_activity_date,
    )


def notifications_out(notifications: list[Notification]) -> list[NotificationOut]:
    items = []
    for notification in notifications:
        if isinstance(notification, LevelUp):
            items.append(NotificationOut(type="level_up", level=notification.new_level))
        elif isinstance(notification, AchievementUnlocked):
            items.append(
                NotificationOut(
                    type="achievement_unlocked",
                    achievement_key=notification.key,
                    name=notification.name,
                    description=notification.description,
                    icon=notification.icon,
                    xp_reward=notification.xp_reward,
                )
            )
    return items


@router.get("/stats", response_model=UserStatsOut)
async def get_my_stats(db: DbSession, current_user: CurrentUser):
    """Current user's level, XP and streak (created on first read)."""
    stats = GamificationEngine(db, current_user.id).get_or_create_stats()
    return stats_out(stats)


@router.get("/achievements", response_model=list[AchievementOut])
async def list_my_achievements(db: DbSession, current_user: CurrentUser):
    """Achievement catalog with this user's unlock state."""
    rows = GamificationEngine(db, current_user.id).list_achievements()
    return [
        AchievementOut(
            id=row["achievement"].id,
            key=row["achievement"].key,
            name=row["achievement"].name,
            description=row["achievement"].description,
            icon=row["achievement"].icon,
            xp_reward=row["achievement"].xp_reward,
            requirement_type=row["achievement"].requirement_type,
            requirement_value=row["achievement"].requirement_value,
            unlocked=row["unlocked"],
            unlocked_at=row["unlocked_at"],
        )
        for row in rows
    ]
