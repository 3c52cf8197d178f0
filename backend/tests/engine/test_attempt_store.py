"""Tests for the SQLAlchemy attempt repository and loaders."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from app.core.app_exceptions import AttemptAlreadyCompletedError, LoadFailure
from app.models.attempt import TestAttempt, UserAnswer
from app.models.question import AnswerLetter, Question
from app.services.attempt_store import (
    SqlAttemptRepository,
    create_attempt,
    load_attempt_questions,
    load_practice_questions,
    load_published_test,
    load_test_questions,
)
from app.test_engine.ledger import AnswerLedger
from app.test_engine.submission import SubmissionCoordinator
from tests.helpers.seed import create_question, create_test


def answer_count(db, attempt_id) -> int:
    return db.execute(
        select(func.count()).select_from(UserAnswer).where(UserAnswer.attempt_id == attempt_id)
    ).scalar_one()


def test_questions_load_in_display_order(db, published_test):
    create_question(db, test=published_test, section="math", correct_answer="A", order_index=0)
    db.commit()

    questions = load_test_questions(db, published_test.id)

    assert [q.section.value for q in questions] == ["math", "reading_writing", "math"]
    assert questions[1].correct_answer.value == "B"


def test_test_without_questions_is_a_load_failure(db):
    test = create_test(db)
    db.commit()
    with pytest.raises(LoadFailure):
        load_test_questions(db, test.id)


def test_unpublished_test_is_a_load_failure(db):
    test = create_test(db, is_published=False)
    db.commit()
    with pytest.raises(LoadFailure) as exc_info:
        load_published_test(db, test.id)
    assert exc_info.value.status_code == 404


def test_resubmission_leaves_one_row_per_question(db, test_user, published_test):
    attempt = create_attempt(db, test_user.id, published_test.id)
    questions = load_test_questions(db, published_test.id)
    repository = SqlAttemptRepository(db)
    ledger = AnswerLedger()
    ledger.record_answer(questions[0].id, "B")
    records = SubmissionCoordinator(repository, attempt.id, questions).build_answer_records(ledger)

    repository.replace_answers(attempt.id, records)
    repository.replace_answers(attempt.id, records)

    assert answer_count(db, attempt.id) == len(questions)


def test_complete_attempt_writes_scores_once(db, test_user, published_test):
    attempt = create_attempt(db, test_user.id, published_test.id)
    questions = load_test_questions(db, published_test.id)
    repository = SqlAttemptRepository(db)
    ledger = AnswerLedger()
    ledger.record_answer(questions[0].id, "B")
    coordinator = SubmissionCoordinator(repository, attempt.id, questions)

    coordinator.submit(ledger)
    first_completed_at = db.get(TestAttempt, attempt.id).completed_at

    later = SubmissionCoordinator(
        repository, attempt.id, questions, clock=lambda: datetime(2030, 1, 1, tzinfo=timezone.utc)
    )
    with pytest.raises(AttemptAlreadyCompletedError):
        later.submit(AnswerLedger())

    stored = db.get(TestAttempt, attempt.id)
    assert stored.completed_at == first_completed_at
    assert stored.total_score == 1000
    assert stored.rw_score == 800
    assert stored.math_score == 200
    assert (stored.rw_correct, stored.rw_total) == (1, 1)
    assert (stored.math_correct, stored.math_total) == (0, 1)


def test_practice_pool_excludes_test_questions(db, published_test):
    create_question(db, section="math", correct_answer="A", topic="linear equations")
    create_question(db, section="math", correct_answer="B", topic="circles")
    create_question(db, section="reading_writing", correct_answer="C")
    db.commit()

    pool = load_practice_questions(db, limit=10, section="math")
    assert len(pool) == 2
    assert all(q.test_id is None for q in pool)

    assert len(load_practice_questions(db, limit=10, topic="circles")) == 1
    assert len(load_practice_questions(db, limit=1)) == 1


def test_completed_attempt_refuses_new_answers(db, test_user, published_test):
    questions = load_test_questions(db, published_test.id)
    attempt = create_attempt(db, test_user.id, published_test.id, questions)
    repository = SqlAttemptRepository(db)
    ledger = AnswerLedger()
    ledger.record_answer(questions[0].id, "B")
    SubmissionCoordinator(repository, attempt.id, questions).submit(ledger)

    blank = SubmissionCoordinator(repository, attempt.id, questions).build_answer_records(
        AnswerLedger()
    )
    with pytest.raises(AttemptAlreadyCompletedError):
        repository.replace_answers(attempt.id, blank)

    rows = db.execute(select(UserAnswer).where(UserAnswer.attempt_id == attempt.id)).scalars()
    selected = {row.question_id: row.selected_answer for row in rows}
    assert selected[questions[0].id].value == "B"
    assert len(selected) == len(questions)


def test_attempt_questions_are_frozen_at_start(db, test_user, published_test):
    questions = load_test_questions(db, published_test.id)
    attempt = create_attempt(db, test_user.id, published_test.id, questions)

    create_question(db, test=published_test, section="math", correct_answer="D", order_index=3)
    rw_question = db.get(Question, questions[0].id)
    rw_question.correct_answer = AnswerLetter.A
    rw_question.explanation = "Edited."
    db.commit()

    frozen = load_attempt_questions(db, attempt.id)

    assert frozen == questions
    assert frozen[0].correct_answer.value == "B"
    assert frozen[0].explanation == "The answer is B."


def test_attempt_without_frozen_questions_is_a_load_failure(db, test_user, published_test):
    attempt = create_attempt(db, test_user.id, published_test.id)
    with pytest.raises(LoadFailure):
        load_attempt_questions(db, attempt.id)


def test_submission_claim_is_exclusive_until_stale(db, test_user, published_test):
    attempt = create_attempt(db, test_user.id, published_test.id)
    repository = SqlAttemptRepository(db)
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    assert repository.claim_submission(attempt.id, now, timeout_seconds=120) is True
    assert repository.claim_submission(attempt.id, now + timedelta(seconds=30), 120) is False
    assert repository.claim_submission(attempt.id, now + timedelta(seconds=121), 120) is True

    repository.release_submission(attempt.id)
    assert repository.claim_submission(attempt.id, now + timedelta(seconds=125), 120) is True
