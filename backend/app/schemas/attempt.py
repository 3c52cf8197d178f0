"""Pydantic schemas for tests, attempts, submission, results and review."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.question import AnswerLetter, Section
from app.schemas.gamification import NotificationOut

# ============================================================================
# Test Catalog
# ============================================================================


class PublishedTestOut(BaseModel):
    """Published practice test."""

    id: UUID
    title: str
    description: str | None
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Starting An Attempt
# ============================================================================


class AttemptCreate(BaseModel):
    """Request to start a test attempt."""

    test_id: UUID = Field(..., description="Published test to take")


class OptionOut(BaseModel):
    letter: AnswerLetter
    text: str


class SessionQuestionOut(BaseModel):
    """Question as shown while taking a test (no answer, no explanation)."""

    question_id: UUID
    position: int  # 1-based
    section: Section
    module_number: int
    question_text: str
    options: list[OptionOut]


class AttemptCreateResponse(BaseModel):
    """Response after starting an attempt."""

    attempt_id: UUID
    test_id: UUID
    started_at: datetime
    time_limit_seconds: int
    total_questions: int
    questions: list[SessionQuestionOut]


# ============================================================================
# Submission & Results
# ============================================================================


class AttemptSubmit(BaseModel):
    """Final answer ledger posted at submission."""

    answers: dict[UUID, AnswerLetter | None] = Field(
        default_factory=dict, description="Selected letter per question id (null = unanswered)"
    )
    marked: list[UUID] = Field(default_factory=list, description="Questions marked for review")
    time_spent: dict[UUID, int] = Field(
        default_factory=dict, description="Seconds spent per question (best-effort)"
    )


class SectionResult(BaseModel):
    score: int
    correct: int
    total: int


class AttemptResultOut(BaseModel):
    """Scores of a completed attempt."""

    attempt_id: UUID
    test_id: UUID | None
    test_title: str | None = None
    started_at: datetime
    completed_at: datetime
    total_score: int
    reading_writing: SectionResult
    math: SectionResult


class AttemptSubmitResponse(BaseModel):
    """Response after submitting an attempt."""

    result: AttemptResultOut
    notifications: list[NotificationOut] = []


# ============================================================================
# Review
# ============================================================================

ReviewFilter = Literal["all", "wrong", "marked"]


class ReviewItem(BaseModel):
    """One question of a completed attempt with the user's answer."""

    question_id: UUID
    section: Section
    question_text: str
    options: list[OptionOut]
    correct_answer: AnswerLetter
    explanation: str
    selected_answer: AnswerLetter | None
    is_correct: bool
    is_marked: bool
    time_spent: int


class AttemptReviewOut(BaseModel):
    attempt_id: UUID
    filter: ReviewFilter
    items: list[ReviewItem]
