"""Test attempts and per-question answers."""

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.question import answer_letter_type


class TestAttempt(Base):
    """One user taking one test.

    Created with null completion fields when the session starts and written
    exactly once at submission. A null ``completed_at`` means in progress.
    """

    __tablename__ = "test_attempts"
    __test__ = False  # not a pytest class

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", onupdate="CASCADE"), nullable=False
    )
    test_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("tests.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
    )

    started_at = Column(DateTime(timezone=True), nullable=False, default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)
    # Set while a submit request owns the attempt; stale claims expire
    submission_started_at = Column(DateTime(timezone=True), nullable=True)

    # Scoring (computed at submit)
    total_score = Column(Integer, nullable=True)
    rw_score = Column(Integer, nullable=True)
    math_score = Column(Integer, nullable=True)
    rw_correct = Column(Integer, nullable=True)
    rw_total = Column(Integer, nullable=True)
    math_correct = Column(Integer, nullable=True)
    math_total = Column(Integer, nullable=True)

    answers = relationship("UserAnswer", back_populates="attempt", cascade="all, delete-orphan")
    questions = relationship(
        "AttemptQuestion",
        back_populates="attempt",
        cascade="all, delete-orphan",
        order_by="AttemptQuestion.position",
    )
    test = relationship("Test")

    __table_args__ = (
        Index("ix_test_attempts_user_started", "user_id", "started_at"),
        Index("ix_test_attempts_completed_at", "completed_at"),
    )

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class UserAnswer(Base):
    """A user's final answer to one question of an attempt."""

    __tablename__ = "user_answers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    attempt_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("test_attempts.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    question_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("questions.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )

    selected_answer = Column(answer_letter_type, nullable=True)  # null if not answered
    is_correct = Column(Boolean, nullable=False, default=False)
    is_marked = Column(Boolean, nullable=False, default=False)
    time_spent = Column(Integer, nullable=False, default=0)  # seconds, best-effort
    answered_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    attempt = relationship("TestAttempt", back_populates="answers")
    question = relationship("Question")

    __table_args__ = (
        UniqueConstraint("attempt_id", "question_id", name="uq_user_answer_attempt_question"),
        Index("ix_user_answers_attempt_id", "attempt_id"),
    )


class AttemptQuestion(Base):
    """Question content frozen into an attempt when it starts.

    Scoring and review read ``snapshot_json`` so later edits to the test do
    not change an attempt that is already running.
    """

    __tablename__ = "attempt_questions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    attempt_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("test_attempts.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    question_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("questions.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    position = Column(Integer, nullable=False)  # 0-based
    snapshot_json = Column(JSON, nullable=False)

    attempt = relationship("TestAttempt", back_populates="questions")

    __table_args__ = (
        UniqueConstraint("attempt_id", "position", name="uq_attempt_question_position"),
        UniqueConstraint("attempt_id", "question_id", name="uq_attempt_question_question"),
        Index("ix_attempt_questions_attempt_id", "attempt_id"),
    )
