"""Test session service: starting attempts, submission, results and review."""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.core.app_exceptions import (
    AttemptAlreadyCompletedError,
    AttemptInProgressError,
    StatsConflictError,
    SubmissionFailure,
    SubmissionInProgressError,
)
from app.core.config import settings
from app.core.logging import get_logger
from app.gamification.service import GamificationEngine, Notification
from app.models.attempt import AttemptQuestion, TestAttempt, UserAnswer
from app.models.user import User
from app.services.attempt_store import (
    SqlAttemptRepository,
    create_attempt,
    load_attempt_questions,
    load_published_test,
    load_test_questions,
)
from app.test_engine.ledger import AnswerLedger
from app.test_engine.questions import FrozenQuestion
from app.test_engine.submission import STEP_PERSIST_ANSWERS, SubmissionCoordinator

logger = get_logger(__name__)

REVIEW_FILTERS = ("all", "wrong", "marked")


def start_test_session(
    db: Session, user_id: UUID, test_id: UUID
) -> tuple[TestAttempt, list[FrozenQuestion]]:
    """
    Load a published test's questions and open an attempt for it.

    Questions are loaded before the attempt row is written so a test that
    cannot be loaded leaves nothing behind. The loaded questions are frozen
    into the attempt and are what submission scores against.

    Raises:
        LoadFailure: Unknown/unpublished test or no questions
    """
    load_published_test(db, test_id)
    questions = load_test_questions(db, test_id)
    attempt = create_attempt(db, user_id, test_id, questions)
    logger.info(
        "Attempt started",
        extra={
            "attempt_id": str(attempt.id),
            "user_id": str(user_id),
            "test_id": str(test_id),
            "question_count": len(questions),
        },
    )
    return attempt, questions


def get_user_attempt(db: Session, attempt_id: UUID, user: User) -> TestAttempt:
    """Get attempt and verify ownership."""
    attempt = db.get(TestAttempt, attempt_id)
    if attempt is None:
        raise HTTPException(status_code=404, detail="Attempt not found")
    if attempt.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to access this attempt")
    return attempt


def submit_attempt(
    db: Session, attempt: TestAttempt, ledger: AnswerLedger
) -> tuple[TestAttempt, list[Notification]]:
    """
    Persist answers, score and complete an attempt.

    Idempotent: an attempt that is already completed is returned as-is. The
    attempt is claimed for the duration of the submit so overlapping requests
    cannot interleave their answer writes.

    Returns:
        The refreshed attempt and any gamification notifications

    Raises:
        SubmissionInProgressError: Another request is submitting this attempt
        SubmissionFailure: A persistence step failed; the attempt stays in progress
    """
    if attempt.is_completed:
        return attempt, []

    questions = load_attempt_questions(db, attempt.id)
    repository = SqlAttemptRepository(db)
    try:
        claimed = repository.claim_submission(
            attempt.id, datetime.now(timezone.utc), settings.SUBMISSION_CLAIM_TIMEOUT_SECONDS
        )
    except SQLAlchemyError as exc:
        raise SubmissionFailure(STEP_PERSIST_ANSWERS, f"Error submitting test: {exc}") from exc
    if not claimed:
        db.refresh(attempt)
        if attempt.is_completed:
            return attempt, []
        raise SubmissionInProgressError()

    coordinator = SubmissionCoordinator(repository, attempt.id, questions)
    try:
        coordinator.submit(ledger)
    except AttemptAlreadyCompletedError:
        db.refresh(attempt)
        return attempt, []
    except SubmissionFailure:
        _release_claim(repository, attempt.id)
        raise
    ledger.discard()

    db.refresh(attempt)
    engine = GamificationEngine(db, attempt.user_id)
    try:
        engine.on_test_completed()
    except StatsConflictError:
        # Completed-test achievements are re-evaluated on the next submit
        logger.warning(
            "Stats update skipped after submission",
            extra={"attempt_id": str(attempt.id), "user_id": str(attempt.user_id)},
        )
    return attempt, engine.notifications


def _release_claim(repository: SqlAttemptRepository, attempt_id: UUID) -> None:
    try:
        repository.release_submission(attempt_id)
    except SQLAlchemyError as exc:
        logger.warning(
            "Could not release submission claim",
            extra={"attempt_id": str(attempt_id), "error": str(exc)},
        )


def get_completed_attempt(db: Session, attempt_id: UUID, user: User) -> TestAttempt:
    """Attempt for the results screen; in-progress attempts are never returned."""
    attempt = get_user_attempt(db, attempt_id, user)
    if not attempt.is_completed:
        raise AttemptInProgressError(attempt.id)
    return attempt


def list_completed_attempts(db: Session, user_id: UUID) -> list[TestAttempt]:
    return list(
        db.execute(
            select(TestAttempt)
            .where(TestAttempt.user_id == user_id, TestAttempt.completed_at.is_not(None))
            .options(selectinload(TestAttempt.test))
            .order_by(TestAttempt.completed_at.desc())
        ).scalars()
    )


def get_review_items(
    db: Session, attempt: TestAttempt, review_filter: str = "all"
) -> list[tuple[UserAnswer, FrozenQuestion]]:
    """Answers of a completed attempt with the questions as they were frozen, in test order."""
    if review_filter not in REVIEW_FILTERS:
        raise ValueError(f"Unknown review filter: {review_filter}")

    query = (
        select(UserAnswer, AttemptQuestion)
        .join(
            AttemptQuestion,
            and_(
                AttemptQuestion.attempt_id == UserAnswer.attempt_id,
                AttemptQuestion.question_id == UserAnswer.question_id,
            ),
        )
        .where(UserAnswer.attempt_id == attempt.id)
        .order_by(AttemptQuestion.position)
    )
    if review_filter == "wrong":
        query = query.where(UserAnswer.is_correct.is_(False))
    elif review_filter == "marked":
        query = query.where(UserAnswer.is_marked.is_(True))
    return [
        (answer, FrozenQuestion.from_snapshot(frozen.question_id, frozen.snapshot_json))
        for answer, frozen in db.execute(query).all()
    ]
