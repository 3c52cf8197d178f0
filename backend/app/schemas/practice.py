"""Pydantic schemas for topic practice."""

from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.models.question import AnswerLetter, Difficulty, MathDomain, RwDomain, Section
from app.schemas.attempt import OptionOut
from app.schemas.gamification import NotificationOut, UserStatsOut


class PracticeFilters(BaseModel):
    """Criteria for building a topic-practice pool."""

    section: Section | None = None
    rw_domain: RwDomain | None = None
    math_domain: MathDomain | None = None
    difficulty: Difficulty | None = None
    topic: str | None = Field(None, max_length=255)
    limit: int = Field(10, ge=1, le=200, description="Maximum number of questions")

    @model_validator(mode="after")
    def check_domain_matches_section(self):
        if self.rw_domain is not None and self.math_domain is not None:
            raise ValueError("rw_domain and math_domain are mutually exclusive")
        if self.section == Section.MATH and self.rw_domain is not None:
            raise ValueError("rw_domain requires section reading_writing")
        if self.section == Section.READING_WRITING and self.math_domain is not None:
            raise ValueError("math_domain requires section math")
        return self


class PracticeQuestionOut(BaseModel):
    question_id: UUID
    section: Section
    difficulty: Difficulty
    domain: str | None
    topic: str | None
    question_text: str
    options: list[OptionOut]


class PracticeQuestionsOut(BaseModel):
    items: list[PracticeQuestionOut]


class PracticeAnswer(BaseModel):
    question_id: UUID
    selected_answer: AnswerLetter


class PracticeAnswerResponse(BaseModel):
    """Immediate feedback for one practice answer."""

    question_id: UUID
    selected_answer: AnswerLetter
    is_correct: bool
    counted: bool = Field(..., description="False when this question was already answered today")
    correct_answer: AnswerLetter
    explanation: str
    stats: UserStatsOut
    notifications: list[NotificationOut] = []
