"""Test catalog and attempt endpoints (start, submit, results, review)."""

from uuid import UUID

from fastapi import APIRouter, Query
from sqlalchemy import select

from app.api.v1.endpoints.gamification import notifications_out
from app.core.config import settings
from app.core.dependencies import CurrentUser, DbSession
from app.models.attempt import TestAttempt
from app.models.question import Test
from app.schemas.attempt import (
    AttemptCreate,
    AttemptCreateResponse,
    AttemptResultOut,
    AttemptReviewOut,
    AttemptSubmit,
    AttemptSubmitResponse,
    OptionOut,
    PublishedTestOut,
    ReviewFilter,
    ReviewItem,
    SectionResult,
    SessionQuestionOut,
)
from app.services.session_engine import (
    get_completed_attempt,
    get_review_items,
    get_user_attempt,
    list_completed_attempts,
    start_test_session,
    submit_attempt,
)
from app.test_engine.ledger import AnswerLedger

tests_router = APIRouter()
router = APIRouter()


def result_out(attempt: TestAttempt) -> AttemptResultOut:
    return AttemptResultOut(
        attempt_id=attempt.id,
        test_id=attempt.test_id,
        test_title=attempt.test.title if attempt.test else None,
        started_at=attempt.started_at,
        completed_at=attempt.completed_at,
        total_score=attempt.total_score,
        reading_writing=SectionResult(
            score=attempt.rw_score, correct=attempt.rw_correct, total=attempt.rw_total
        ),
        math=SectionResult(
            score=attempt.math_score, correct=attempt.math_correct, total=attempt.math_total
        ),
    )


def options_out(question) -> list[OptionOut]:
    return [OptionOut(letter=letter, text=text) for letter, text in question.options]


# ============================================================================
# Test Catalog
# ============================================================================


@tests_router.get("", response_model=list[PublishedTestOut])
async def list_published_tests(db: DbSession, current_user: CurrentUser):
    """Published tests, newest first."""
    tests = db.execute(
        select(Test).where(Test.is_published.is_(True)).order_by(Test.created_at.desc())
    ).scalars()
    return list(tests)


# ============================================================================
# Attempts
# ============================================================================


@router.post("", response_model=AttemptCreateResponse)
async def start_attempt(payload: AttemptCreate, db: DbSession, current_user: CurrentUser):
    """
    Start a test attempt.

    Returns the questions in display order without answers or explanations,
    plus the time budget for the session clock.
    """
    attempt, questions = start_test_session(db, current_user.id, payload.test_id)
    return AttemptCreateResponse(
        attempt_id=attempt.id,
        test_id=payload.test_id,
        started_at=attempt.started_at,
        time_limit_seconds=settings.SESSION_DURATION_SECONDS,
        total_questions=len(questions),
        questions=[
            SessionQuestionOut(
                question_id=q.id,
                position=position,
                section=q.section,
                module_number=q.module_number,
                question_text=q.question_text,
                options=options_out(q),
            )
            for position, q in enumerate(questions, start=1)
        ],
    )


@router.get("", response_model=list[AttemptResultOut])
async def list_my_attempts(db: DbSession, current_user: CurrentUser):
    """Completed attempts of the current user, newest first."""
    return [result_out(a) for a in list_completed_attempts(db, current_user.id)]


@router.post("/{attempt_id}/submit", response_model=AttemptSubmitResponse)
async def submit_test_attempt(
    attempt_id: UUID,
    payload: AttemptSubmit,
    db: DbSession,
    current_user: CurrentUser,
):
    """
    Submit the answer ledger and score the attempt.

    Safe to retry after a failure; resubmitting a completed attempt returns
    the stored result.
    """
    attempt = get_user_attempt(db, attempt_id, current_user)
    ledger = AnswerLedger.from_snapshot(payload.answers, payload.marked, payload.time_spent)
    attempt, notifications = submit_attempt(db, attempt, ledger)
    return AttemptSubmitResponse(
        result=result_out(attempt),
        notifications=notifications_out(notifications),
    )


@router.get("/{attempt_id}/results", response_model=AttemptResultOut)
async def get_attempt_results(attempt_id: UUID, db: DbSession, current_user: CurrentUser):
    """Scores of a completed attempt. In-progress attempts return 409."""
    return result_out(get_completed_attempt(db, attempt_id, current_user))


@router.get("/{attempt_id}/review", response_model=AttemptReviewOut)
async def review_attempt(
    attempt_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
    filter: ReviewFilter = Query("all", description="all, wrong or marked"),
):
    """Question-by-question review with correct answers and explanations."""
    attempt = get_completed_attempt(db, attempt_id, current_user)
    items = []
    for answer, question in get_review_items(db, attempt, filter):
        items.append(
            ReviewItem(
                question_id=question.id,
                section=question.section,
                question_text=question.question_text,
                options=options_out(question),
                correct_answer=question.correct_answer,
                explanation=question.explanation,
                selected_answer=answer.selected_answer,
                is_correct=answer.is_correct,
                is_marked=answer.is_marked,
                time_spent=answer.time_spent,
            )
        )
    return AttemptReviewOut(attempt_id=attempt.id, filter=filter, items=items)
