"""Tests for the submission state machine."""

import uuid
from datetime import datetime, timezone

import pytest

from app.core.app_exceptions import (
    AttemptAlreadyCompletedError,
    SubmissionFailure,
    SubmissionInProgressError,
)
from app.test_engine.ledger import AnswerLedger
from app.test_engine.submission import (
    STEP_COMPLETE_ATTEMPT,
    STEP_PERSIST_ANSWERS,
    Completed,
    Failed,
    InProgress,
    SubmissionCoordinator,
    Submitting,
)
from tests.helpers.fakes import FakeAttemptRepository
from tests.helpers.seed import frozen_question

FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def questions():
    return [frozen_question("reading_writing", "B"), frozen_question("math", "C")]


@pytest.fixture
def attempt_id():
    return uuid.uuid4()


def make_coordinator(repository, attempt_id, questions, **kwargs):
    return SubmissionCoordinator(repository, attempt_id, questions, clock=lambda: FIXED_NOW, **kwargs)


def test_submit_persists_one_record_per_question(questions, attempt_id):
    repository = FakeAttemptRepository()
    coordinator = make_coordinator(repository, attempt_id, questions)
    ledger = AnswerLedger()
    ledger.record_answer(questions[0].id, "B")
    ledger.toggle_mark(questions[1].id)

    completed = coordinator.submit(ledger)

    records = repository.answers[attempt_id]
    assert set(records) == {q.id for q in questions}
    assert records[questions[0].id].is_correct is True
    assert records[questions[1].id].selected_answer is None
    assert records[questions[1].id].is_correct is False
    assert records[questions[1].id].is_marked is True
    assert completed.score.total == 1000
    assert completed.completed_at == FIXED_NOW
    assert isinstance(coordinator.state, Completed)
    assert repository.calls == ["replace_answers", "complete_attempt"]


def test_answers_are_persisted_before_completion(questions, attempt_id):
    repository = FakeAttemptRepository(fail_answers=1)
    coordinator = make_coordinator(repository, attempt_id, questions)

    with pytest.raises(SubmissionFailure) as exc_info:
        coordinator.submit(AnswerLedger())

    assert exc_info.value.step == STEP_PERSIST_ANSWERS
    assert exc_info.value.details["retryable"] is True
    assert repository.completed == {}
    assert isinstance(coordinator.state, Failed)
    assert coordinator.state.step == STEP_PERSIST_ANSWERS


def test_failed_submission_can_be_retried(questions, attempt_id):
    repository = FakeAttemptRepository(fail_complete=1)
    coordinator = make_coordinator(repository, attempt_id, questions)
    ledger = AnswerLedger()
    ledger.record_answer(questions[1].id, "C")

    with pytest.raises(SubmissionFailure):
        coordinator.submit(ledger)
    assert coordinator.state == Failed(step=STEP_COMPLETE_ATTEMPT, reason="database unavailable")
    assert coordinator.can_submit

    completed = coordinator.submit(ledger)

    assert completed.score.math.score == 800
    assert len(repository.answers[attempt_id]) == 2
    assert repository.calls.count("replace_answers") == 2


def test_submit_while_submitting_is_rejected(questions, attempt_id):
    repository = FakeAttemptRepository()
    coordinator = make_coordinator(repository, attempt_id, questions)
    coordinator.state = Submitting()

    with pytest.raises(SubmissionInProgressError):
        coordinator.submit(AnswerLedger())
    assert repository.calls == []


def test_submit_after_completion_returns_stored_result(questions, attempt_id):
    repository = FakeAttemptRepository()
    coordinator = make_coordinator(repository, attempt_id, questions)
    first = coordinator.submit(AnswerLedger())

    second = coordinator.submit(AnswerLedger())

    assert second is first
    assert repository.calls == ["replace_answers", "complete_attempt"]


def test_on_completed_callback_fires_once(questions, attempt_id):
    seen = []
    coordinator = make_coordinator(
        FakeAttemptRepository(), attempt_id, questions, on_completed=seen.append
    )
    coordinator.submit(AnswerLedger())
    coordinator.submit(AnswerLedger())
    assert len(seen) == 1


def test_initial_state(questions, attempt_id):
    coordinator = make_coordinator(FakeAttemptRepository(), attempt_id, questions)
    assert coordinator.state == InProgress()
    assert coordinator.can_submit


def test_attempt_completed_elsewhere_is_not_retryable(questions, attempt_id):
    repository = FakeAttemptRepository()
    make_coordinator(repository, attempt_id, questions).submit(AnswerLedger())
    stored = repository.answers[attempt_id]
    late = make_coordinator(repository, attempt_id, questions)

    with pytest.raises(AttemptAlreadyCompletedError):
        late.submit(AnswerLedger())

    assert isinstance(late.state, Failed)
    assert repository.answers[attempt_id] is stored
