"""Property-based tests for scoring invariants."""

from hypothesis import given, settings
from hypothesis import strategies as st

from app.test_engine.ledger import AnswerLedger
from app.test_engine.scoring import score_attempt, section_score
from tests.helpers.seed import frozen_question


@st.composite
def section_counts(draw):
    total = draw(st.integers(min_value=1, max_value=500))
    correct = draw(st.integers(min_value=0, max_value=total))
    return correct, total


@settings(max_examples=200, deadline=None)
@given(counts=section_counts())
def test_section_score_bounded(counts: tuple[int, int]) -> None:
    """
    Property: a non-empty section always scores within [200, 800].

    Invariants:
    - 0 correct gives exactly 200
    - all correct gives exactly 800
    """
    correct, total = counts
    score = section_score(correct, total)

    assert 200 <= score <= 800
    if correct == 0:
        assert score == 200
    if correct == total:
        assert score == 800


@settings(max_examples=200, deadline=None)
@given(counts=section_counts())
def test_section_score_matches_half_up_rounding(counts: tuple[int, int]) -> None:
    """Property: integer scoring equals floor(200 + correct/total * 600 + 0.5)."""
    from fractions import Fraction

    correct, total = counts
    exact = 200 + Fraction(correct, total) * 600
    assert section_score(correct, total) == int(exact + Fraction(1, 2))


@settings(max_examples=100, deadline=None)
@given(counts=section_counts())
def test_one_more_correct_never_lowers_score(counts: tuple[int, int]) -> None:
    """Property: scores are monotonic in the number of correct answers."""
    correct, total = counts
    if correct < total:
        assert section_score(correct + 1, total) >= section_score(correct, total)


@settings(max_examples=50, deadline=None)
@given(
    sections=st.lists(st.sampled_from(["reading_writing", "math"]), min_size=1, max_size=30),
    picks=st.lists(st.sampled_from(["A", "B", "C", "D", None]), min_size=30, max_size=30),
)
def test_total_is_sum_of_sections(sections: list[str], picks: list[str | None]) -> None:
    """
    Property: total == rw + math, and an empty section contributes 0.
    """
    questions = [frozen_question(section, "A") for section in sections]
    ledger = AnswerLedger()
    for question, pick in zip(questions, picks):
        if pick is not None:
            ledger.record_answer(question.id, pick)

    score = score_attempt(questions, ledger)

    assert score.total == score.reading_writing.score + score.math.score
    assert score.reading_writing.total + score.math.total == len(questions)
    if "math" not in sections:
        assert score.math.score == 0
    if "reading_writing" not in sections:
        assert score.reading_writing.score == 0
