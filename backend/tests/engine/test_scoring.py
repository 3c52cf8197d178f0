"""Tests for section and total scoring."""

import pytest

from app.test_engine.ledger import AnswerLedger
from app.test_engine.scoring import score_attempt, section_score
from tests.helpers.seed import frozen_question


@pytest.mark.parametrize(
    "correct,total,expected",
    [
        (0, 0, 0),
        (0, 10, 200),
        (5, 10, 500),
        (54, 54, 800),
        (1, 3, 400),
        (2, 3, 600),
        (1, 8, 275),
        (1, 16, 238),  # 237.5 rounds up
        (27, 54, 500),
    ],
)
def test_section_score(correct, total, expected):
    assert section_score(correct, total) == expected


def test_section_score_rejects_impossible_counts():
    with pytest.raises(ValueError):
        section_score(11, 10)
    with pytest.raises(ValueError):
        section_score(-1, 10)


def test_score_attempt_empty_rw_section():
    """A test with no Reading & Writing questions scores 0 for that section."""
    math = [frozen_question("math", "A") for _ in range(10)]
    ledger = AnswerLedger()
    for question in math[:5]:
        ledger.record_answer(question.id, "A")

    score = score_attempt(math, ledger)

    assert score.reading_writing.score == 0
    assert score.reading_writing.total == 0
    assert score.math.correct == 5
    assert score.math.score == 500
    assert score.total == 500


def test_score_attempt_perfect_and_blank():
    rw = frozen_question("reading_writing", "B")
    math = frozen_question("math", "C")
    ledger = AnswerLedger()
    ledger.record_answer(rw.id, "B")

    score = score_attempt([rw, math], ledger)

    assert score.reading_writing.score == 800
    assert score.math.score == 200
    assert score.total == 1000


def test_wrong_answer_not_counted():
    question = frozen_question("math", "C")
    ledger = AnswerLedger()
    ledger.record_answer(question.id, "D")
    assert score_attempt([question], ledger).math.correct == 0
