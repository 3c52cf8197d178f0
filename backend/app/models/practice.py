"""Practice answers, one counted answer per user, question and day."""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.question import answer_letter_type


class PracticeAnswer(Base):
    """The first answer a user gave to a practice question on a given day.

    Only this answer counts towards ``UserStats.total_questions_answered``;
    repeats on the same day are graded but not recorded.
    """

    __tablename__ = "practice_answers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    question_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("questions.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    answered_on = Column(Date, nullable=False)
    selected_answer = Column(answer_letter_type, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "question_id", "answered_on", name="uq_practice_answer_user_question_day"
        ),
        Index("ix_practice_answers_user_id", "user_id"),
    )
