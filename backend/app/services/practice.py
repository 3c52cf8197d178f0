"""Topic practice: ad-hoc question pools with per-answer feedback."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.app_exceptions import LoadFailure
from app.gamification.service import GamificationEngine, Notification
from app.models.gamification import UserStats
from app.models.practice import PracticeAnswer
from app.models.question import AnswerLetter, Question


@dataclass
class PracticeFeedback:
    question: Question
    selected_answer: AnswerLetter
    is_correct: bool
    counted: bool
    stats: UserStats
    notifications: list[Notification]


def _record_first_answer(db: Session, answer: PracticeAnswer) -> bool:
    """Store the day's first answer to a question; False if one already exists."""
    db.add(answer)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


def answer_practice_question(
    db: Session, user_id: UUID, question_id: UUID, selected_answer: AnswerLetter
) -> PracticeFeedback:
    """
    Grade one practice answer and count it towards the user's stats.

    Only the first answer to a question per day is counted; repeats are
    graded and return the current stats unchanged.

    Raises:
        LoadFailure: If the question does not exist or belongs to a test
    """
    question = db.get(Question, question_id)
    if question is None or question.test_id is not None:
        raise LoadFailure("Question not found", {"question_id": str(question_id)})

    is_correct = selected_answer == AnswerLetter(question.correct_answer)
    engine = GamificationEngine(db, user_id)
    counted = _record_first_answer(
        db,
        PracticeAnswer(
            user_id=user_id,
            question_id=question.id,
            answered_on=engine.today,
            selected_answer=selected_answer,
            is_correct=is_correct,
        ),
    )
    if counted:
        stats = engine.on_question_answered()
    else:
        stats = engine.get_or_create_stats()
    return PracticeFeedback(
        question=question,
        selected_answer=selected_answer,
        is_correct=is_correct,
        counted=counted,
        stats=stats,
        notifications=engine.notifications,
    )
