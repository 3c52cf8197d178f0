"""Seed the default achievement catalog."""

from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models.gamification import Achievement, RequirementType

logger = get_logger(__name__)

DEFAULT_ACHIEVEMENTS = [
    {
        "key": "first_question",
        "name": "First Step",
        "description": "Answer your first practice question",
        "icon": "sparkles",
        "xp_reward": 10,
        "requirement_type": RequirementType.QUESTIONS_ANSWERED,
        "requirement_value": 1,
    },
    {
        "key": "questions_10",
        "name": "Warming Up",
        "description": "Answer 10 questions",
        "icon": "target",
        "xp_reward": 25,
        "requirement_type": RequirementType.QUESTIONS_ANSWERED,
        "requirement_value": 10,
    },
    {
        "key": "questions_100",
        "name": "Century",
        "description": "Answer 100 questions",
        "icon": "trophy",
        "xp_reward": 100,
        "requirement_type": RequirementType.QUESTIONS_ANSWERED,
        "requirement_value": 100,
    },
    {
        "key": "first_test",
        "name": "Test Taker",
        "description": "Complete your first full practice test",
        "icon": "file-check",
        "xp_reward": 50,
        "requirement_type": RequirementType.TESTS_COMPLETED,
        "requirement_value": 1,
    },
    {
        "key": "tests_5",
        "name": "Test Veteran",
        "description": "Complete 5 full practice tests",
        "icon": "award",
        "xp_reward": 150,
        "requirement_type": RequirementType.TESTS_COMPLETED,
        "requirement_value": 5,
    },
    {
        "key": "streak_3",
        "name": "On a Roll",
        "description": "Practice 3 days in a row",
        "icon": "flame",
        "xp_reward": 30,
        "requirement_type": RequirementType.STREAK_DAYS,
        "requirement_value": 3,
    },
    {
        "key": "streak_7",
        "name": "Week Warrior",
        "description": "Practice 7 days in a row",
        "icon": "calendar",
        "xp_reward": 75,
        "requirement_type": RequirementType.STREAK_DAYS,
        "requirement_value": 7,
    },
]


def seed_achievements(db: Session) -> int:
    """Insert missing catalog entries by key. Returns the number created."""
    existing = {key for (key,) in db.query(Achievement.key).all()}
    created = 0
    for data in DEFAULT_ACHIEVEMENTS:
        if data["key"] in existing:
            continue
        db.add(
            Achievement(
                key=data["key"],
                name=data["name"],
                description=data["description"],
                icon=data["icon"],
                xp_reward=data["xp_reward"],
                requirement_type=data["requirement_type"].value,
                requirement_value=data["requirement_value"],
            )
        )
        created += 1
    db.commit()
    if created:
        logger.info("Seeded achievements", extra={"created": created})
    return created
