"""Tests for driving a whole session through TestRunner."""

import uuid

import pytest

from app.test_engine.runner import TestRunner
from tests.helpers.fakes import FakeAttemptRepository
from tests.helpers.seed import frozen_question


@pytest.fixture
def runner():
    questions = [
        frozen_question("reading_writing", "A"),
        frozen_question("reading_writing", "B"),
        frozen_question("math", "D"),
    ]
    return TestRunner(
        user_id=uuid.uuid4(),
        attempt_id=uuid.uuid4(),
        questions=questions,
        repository=FakeAttemptRepository(),
        budget_seconds=5,
    )


def test_answers_follow_the_cursor(runner):
    first = runner.current
    runner.select("A")
    second = runner.next()
    runner.select("C")
    runner.select("B")
    assert runner.ledger.answer_for(first.id).value == "A"
    assert runner.ledger.answer_for(second.id).value == "B"
    assert runner.previous() is first


def test_clear_and_mark(runner):
    runner.select("A")
    runner.clear()
    assert runner.toggle_mark() is True
    summary = runner.summary()
    assert summary.answered == 0
    assert summary.marked == 1
    assert summary.unanswered == 3


def test_tick_charges_current_question_until_expiry(runner):
    for _ in range(7):
        runner.tick()
    assert runner.clock.expired
    assert runner.ledger.time_spent(runner.current.id) == 5
    assert runner.summary().expired


def test_expiry_does_not_submit(runner):
    for _ in range(10):
        runner.tick()
    assert runner.coordinator.can_submit
    assert runner.coordinator.repository.calls == []


def test_submit_scores_and_discards_ledger(runner):
    runner.select("A")
    runner.next()
    runner.next()
    runner.select("D")

    completed = runner.submit()

    assert completed.score.reading_writing.correct == 1
    assert completed.score.reading_writing.score == 500
    assert completed.score.math.score == 800
    assert runner.ledger.answered_count == 0
