"""Test seed helpers for creating test data."""

import uuid
from typing import Any

from sqlalchemy.orm import Session

from app.models.question import AnswerLetter, Question, Section, Test
from app.test_engine.questions import FrozenQuestion


def create_test(db: Session, title: str = "Practice Test", is_published: bool = True) -> Test:
    test = Test(title=title, description=f"{title} description", is_published=is_published)
    db.add(test)
    db.flush()
    return test


def create_question(
    db: Session,
    test: Test | None = None,
    section: str = "reading_writing",
    correct_answer: str = "A",
    order_index: int | None = None,
    **kwargs: Any,
) -> Question:
    """
    Create a question with deterministic option texts.

    Args:
        db: Database session
        test: Owning test, or None for the practice pool
        section: "reading_writing" or "math"
        correct_answer: Letter of the correct option
        order_index: Display position within the test
        **kwargs: Additional question attributes

    Returns:
        Created (flushed) Question
    """
    suffix = uuid.uuid4().hex[:6]
    question = Question(
        test_id=test.id if test is not None else None,
        section=Section(section),
        module_number=kwargs.pop("module_number", 1),
        question_text=kwargs.pop("question_text", f"Question {suffix}?"),
        option_a="Option A",
        option_b="Option B",
        option_c="Option C",
        option_d="Option D",
        correct_answer=AnswerLetter(correct_answer),
        explanation=kwargs.pop("explanation", f"The answer is {correct_answer}."),
        order_index=order_index,
        **kwargs,
    )
    db.add(question)
    db.flush()
    return question


def frozen_question(section: str = "reading_writing", correct_answer: str = "A") -> FrozenQuestion:
    """In-memory question snapshot for engine tests that need no database."""
    return FrozenQuestion(
        id=uuid.uuid4(),
        section=Section(section),
        module_number=1,
        question_text="What is the answer?",
        options=tuple((letter, f"Option {letter.value}") for letter in AnswerLetter),
        correct_answer=AnswerLetter(correct_answer),
        explanation="Because.",
    )
