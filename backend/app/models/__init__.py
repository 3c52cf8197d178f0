"""Database models."""

# Import all models here so Alembic can detect them
from app.models.attempt import AttemptQuestion, TestAttempt, UserAnswer
from app.models.gamification import Achievement, RequirementType, UserAchievement, UserStats
from app.models.question import (
    AnswerLetter,
    Difficulty,
    MathDomain,
    Question,
    RwDomain,
    Section,
    Test,
)
from app.models.practice import PracticeAnswer
from app.models.user import User, UserRole

__all__ = [
    "User",
    "UserRole",
    "Test",
    "Question",
    "Section",
    "Difficulty",
    "RwDomain",
    "MathDomain",
    "AnswerLetter",
    "TestAttempt",
    "UserAnswer",
    "AttemptQuestion",
    "PracticeAnswer",
    "UserStats",
    "Achievement",
    "UserAchievement",
    "RequirementType",
]
