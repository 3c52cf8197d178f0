"""SQLAlchemy implementation of the attempt repository and question loaders."""

from collections.abc import Sequence
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.app_exceptions import AttemptAlreadyCompletedError, LoadFailure
from app.models.attempt import AttemptQuestion, TestAttempt, UserAnswer
from app.models.question import Difficulty, MathDomain, Question, RwDomain, Section, Test
from app.test_engine.ports import AnswerRecord, AttemptRepository
from app.test_engine.questions import FrozenQuestion
from app.test_engine.scoring import AttemptScore


class SqlAttemptRepository(AttemptRepository):
    """Writes answers and scores for an attempt, one transaction per step."""

    def __init__(self, db: Session):
        self.db = db

    def _lock_open_attempt(self, attempt_id: UUID) -> None:
        """Row-lock the attempt for this transaction; refuse if it is completed."""
        completed_at = self.db.execute(
            select(TestAttempt.completed_at).where(TestAttempt.id == attempt_id).with_for_update()
        ).scalar_one_or_none()
        if completed_at is not None:
            raise AttemptAlreadyCompletedError(attempt_id)

    def claim_submission(self, attempt_id: UUID, now: datetime, timeout_seconds: int) -> bool:
        """
        Mark the attempt as being submitted.

        Returns False if it is completed or another submission holds a claim
        younger than ``timeout_seconds``.
        """
        stale_before = now - timedelta(seconds=timeout_seconds)
        try:
            result = self.db.execute(
                update(TestAttempt)
                .where(
                    TestAttempt.id == attempt_id,
                    TestAttempt.completed_at.is_(None),
                    or_(
                        TestAttempt.submission_started_at.is_(None),
                        TestAttempt.submission_started_at < stale_before,
                    ),
                )
                .values(submission_started_at=now)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return result.rowcount == 1

    def release_submission(self, attempt_id: UUID) -> None:
        try:
            self.db.execute(
                update(TestAttempt)
                .where(TestAttempt.id == attempt_id, TestAttempt.completed_at.is_(None))
                .values(submission_started_at=None)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def replace_answers(self, attempt_id: UUID, records: list[AnswerRecord]) -> None:
        """Delete-then-insert so a replayed submission leaves one row per question."""
        try:
            self._lock_open_attempt(attempt_id)
            self.db.execute(
                delete(UserAnswer)
                .where(UserAnswer.attempt_id == attempt_id)
                .execution_options(synchronize_session=False)
            )
            self.db.add_all(
                UserAnswer(
                    attempt_id=record.attempt_id,
                    question_id=record.question_id,
                    selected_answer=record.selected_answer,
                    is_correct=record.is_correct,
                    is_marked=record.is_marked,
                    time_spent=record.time_spent,
                )
                for record in records
            )
            self.db.commit()
        except (SQLAlchemyError, AttemptAlreadyCompletedError):
            self.db.rollback()
            raise

    def complete_attempt(self, attempt_id: UUID, score: AttemptScore, completed_at: datetime) -> None:
        """Fill score fields once; an attempt that is already completed is left untouched."""
        try:
            self.db.execute(
                update(TestAttempt)
                .where(TestAttempt.id == attempt_id, TestAttempt.completed_at.is_(None))
                .values(
                    completed_at=completed_at,
                    submission_started_at=None,
                    total_score=score.total,
                    rw_score=score.reading_writing.score,
                    rw_correct=score.reading_writing.correct,
                    rw_total=score.reading_writing.total,
                    math_score=score.math.score,
                    math_correct=score.math.correct,
                    math_total=score.math.total,
                )
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        attempt = self.db.get(TestAttempt, attempt_id)
        if attempt is not None:
            self.db.refresh(attempt)


def load_published_test(db: Session, test_id: UUID) -> Test:
    test = db.get(Test, test_id)
    if test is None or not test.is_published:
        raise LoadFailure("Test not found", {"test_id": str(test_id)})
    return test


def load_test_questions(db: Session, test_id: UUID) -> list[FrozenQuestion]:
    """
    Questions of a test in display order.

    Raises:
        LoadFailure: If the test has no questions
    """
    questions = (
        db.execute(
            select(Question)
            .where(Question.test_id == test_id)
            .order_by(Question.order_index, Question.created_at)
        )
        .scalars()
        .all()
    )
    if not questions:
        raise LoadFailure("Test has no questions", {"test_id": str(test_id)})
    return [FrozenQuestion.from_model(q) for q in questions]


def load_practice_questions(
    db: Session,
    limit: int,
    section: Section | None = None,
    rw_domain: RwDomain | None = None,
    math_domain: MathDomain | None = None,
    difficulty: Difficulty | None = None,
    topic: str | None = None,
) -> list[Question]:
    """Topic-practice pool (questions not attached to a test), storage order."""
    query = select(Question).where(Question.test_id.is_(None))
    if section is not None:
        query = query.where(Question.section == section)
    if rw_domain is not None:
        query = query.where(Question.rw_domain == rw_domain)
    if math_domain is not None:
        query = query.where(Question.math_domain == math_domain)
    if difficulty is not None:
        query = query.where(Question.difficulty == difficulty)
    if topic:
        query = query.where(Question.topic == topic)
    return list(db.execute(query.limit(limit)).scalars())


def create_attempt(
    db: Session,
    user_id: UUID,
    test_id: UUID | None,
    questions: Sequence[FrozenQuestion] = (),
) -> TestAttempt:
    """Start an attempt with empty completion fields and freeze its questions."""
    attempt = TestAttempt(user_id=user_id, test_id=test_id)
    db.add(attempt)
    db.flush()
    db.add_all(
        AttemptQuestion(
            attempt_id=attempt.id,
            question_id=question.id,
            position=position,
            snapshot_json=question.to_snapshot(),
        )
        for position, question in enumerate(questions)
    )
    db.commit()
    db.refresh(attempt)
    return attempt


def load_attempt_questions(db: Session, attempt_id: UUID) -> list[FrozenQuestion]:
    """
    The questions frozen into an attempt when it started, in display order.

    Raises:
        LoadFailure: If the attempt has no frozen questions
    """
    rows = (
        db.execute(
            select(AttemptQuestion)
            .where(AttemptQuestion.attempt_id == attempt_id)
            .order_by(AttemptQuestion.position)
        )
        .scalars()
        .all()
    )
    if not rows:
        raise LoadFailure("Attempt has no questions", {"attempt_id": str(attempt_id)})
    return [FrozenQuestion.from_snapshot(row.question_id, row.snapshot_json) for row in rows]
