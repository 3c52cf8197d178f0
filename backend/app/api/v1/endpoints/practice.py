"""Topic practice endpoints."""

from fastapi import APIRouter

from app.api.v1.endpoints.gamification import notifications_out, stats_out
from app.core.config import settings
from app.core.dependencies import CurrentUser, DbSession
from app.models.question import Question
from app.schemas.attempt import OptionOut
from app.schemas.practice import (
    PracticeAnswer,
    PracticeAnswerResponse,
    PracticeFilters,
    PracticeQuestionOut,
    PracticeQuestionsOut,
)
from app.services.attempt_store import load_practice_questions
from app.services.practice import answer_practice_question

router = APIRouter()


def practice_question_out(question: Question) -> PracticeQuestionOut:
    domain = question.domain
    return PracticeQuestionOut(
        question_id=question.id,
        section=question.section,
        difficulty=question.difficulty,
        domain=getattr(domain, "value", domain),
        topic=question.topic,
        question_text=question.question_text,
        options=[OptionOut(letter=letter, text=text) for letter, text in question.options.items()],
    )


@router.post("/questions", response_model=PracticeQuestionsOut)
async def build_practice_pool(filters: PracticeFilters, db: DbSession, current_user: CurrentUser):
    """Questions from the practice pool matching the filters."""
    limit = min(filters.limit, settings.PRACTICE_MAX_QUESTIONS)
    questions = load_practice_questions(
        db,
        limit=limit,
        section=filters.section,
        rw_domain=filters.rw_domain,
        math_domain=filters.math_domain,
        difficulty=filters.difficulty,
        topic=filters.topic,
    )
    return PracticeQuestionsOut(items=[practice_question_out(q) for q in questions])


@router.post("/answers", response_model=PracticeAnswerResponse)
async def answer_practice(payload: PracticeAnswer, db: DbSession, current_user: CurrentUser):
    """Grade one answer, update stats/streak and report any unlocks."""
    feedback = answer_practice_question(
        db, current_user.id, payload.question_id, payload.selected_answer
    )
    return PracticeAnswerResponse(
        question_id=feedback.question.id,
        selected_answer=feedback.selected_answer,
        is_correct=feedback.is_correct,
        counted=feedback.counted,
        correct_answer=feedback.question.correct_answer,
        explanation=feedback.question.explanation or "",
        stats=stats_out(feedback.stats),
        notifications=notifications_out(feedback.notifications),
    )
