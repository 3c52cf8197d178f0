"""Section and total scores for a submitted attempt.

Linear approximation of the Digital SAT scale: each section maps the share of
correct answers onto 200..800 and the total is the sum of both sections. The
real exam uses adaptive conversion tables; this model does not try to match
them.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from app.models.question import Section
from app.test_engine.ledger import AnswerLedger
from app.test_engine.questions import FrozenQuestion

SECTION_MIN_SCORE = 200
SECTION_SCORE_SPAN = 600


@dataclass(frozen=True)
class SectionScore:
    correct: int
    total: int
    score: int


@dataclass(frozen=True)
class AttemptScore:
    reading_writing: SectionScore
    math: SectionScore

    @property
    def total(self) -> int:
        return self.reading_writing.score + self.math.score


def section_score(correct: int, total: int) -> int:
    """
    Scaled score for one section.

    ``round(200 + correct / total * 600)`` with halves rounded up, computed in
    integers. A section without questions scores 0.

    Args:
        correct: Number of correct answers
        total: Number of questions in the section

    Returns:
        0 when ``total`` is 0, otherwise a value in [200, 800]
    """
    if total <= 0:
        return 0
    if not 0 <= correct <= total:
        raise ValueError(f"correct must be within [0, {total}], got {correct}")
    numerator = 2 * SECTION_SCORE_SPAN * correct + total
    return SECTION_MIN_SCORE + numerator // (2 * total)


def score_section(
    questions: Iterable[FrozenQuestion], ledger: AnswerLedger, section: Section
) -> SectionScore:
    in_section = [q for q in questions if q.section == section]
    correct = sum(1 for q in in_section if q.is_correct(ledger.answer_for(q.id)))
    total = len(in_section)
    return SectionScore(correct=correct, total=total, score=section_score(correct, total))


def score_attempt(questions: Iterable[FrozenQuestion], ledger: AnswerLedger) -> AttemptScore:
    """Partition questions by section and score each one."""
    questions = list(questions)
    return AttemptScore(
        reading_writing=score_section(questions, ledger, Section.READING_WRITING),
        math=score_section(questions, ledger, Section.MATH),
    )
