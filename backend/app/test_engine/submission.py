"""Submission state machine.

    InProgress --submit--> Submitting --ok--> Completed
                               |
                               +--error--> Failed --submit--> Submitting ...

A failed submission can be retried: answers are written with replace
semantics and completing the attempt is a plain recompute-and-update.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from app.core.app_exceptions import (
    AttemptAlreadyCompletedError,
    SubmissionFailure,
    SubmissionInProgressError,
)
from app.core.logging import get_logger
from app.test_engine.ledger import AnswerLedger
from app.test_engine.ports import AnswerRecord, AttemptRepository
from app.test_engine.questions import FrozenQuestion
from app.test_engine.scoring import AttemptScore, score_attempt

logger = get_logger(__name__)

STEP_PERSIST_ANSWERS = "persist_answers"
STEP_COMPLETE_ATTEMPT = "complete_attempt"


@dataclass(frozen=True)
class InProgress:
    pass


@dataclass(frozen=True)
class Submitting:
    pass


@dataclass(frozen=True)
class Completed:
    score: AttemptScore
    completed_at: datetime


@dataclass(frozen=True)
class Failed:
    step: str
    reason: str


SubmissionState = InProgress | Submitting | Completed | Failed


class SubmissionCoordinator:
    """Persists answers, scores the attempt and marks it completed.

    The coordinator owns no session state of its own beyond the current
    :data:`SubmissionState`; the attempt id, questions and repository are
    passed in.
    """

    def __init__(
        self,
        repository: AttemptRepository,
        attempt_id: UUID,
        questions: Sequence[FrozenQuestion],
        on_completed: Callable[[Completed], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.repository = repository
        self.attempt_id = attempt_id
        self.questions = tuple(questions)
        self.on_completed = on_completed
        self._now = clock or (lambda: datetime.now(timezone.utc))
        self.state: SubmissionState = InProgress()

    @property
    def can_submit(self) -> bool:
        return isinstance(self.state, (InProgress, Failed))

    def build_answer_records(self, ledger: AnswerLedger) -> list[AnswerRecord]:
        """One record per question, unanswered questions included."""
        records = []
        for question in self.questions:
            selected = ledger.answer_for(question.id)
            records.append(
                AnswerRecord(
                    attempt_id=self.attempt_id,
                    question_id=question.id,
                    selected_answer=selected,
                    is_correct=question.is_correct(selected),
                    is_marked=ledger.is_marked(question.id),
                    time_spent=ledger.time_spent(question.id),
                )
            )
        return records

    def submit(self, ledger: AnswerLedger) -> Completed:
        """
        Run the submission.

        Returns:
            The Completed state (also stored on ``self.state``)

        Raises:
            SubmissionInProgressError: a submission is already running
            SubmissionFailure: a persistence step failed; state is Failed
            AttemptAlreadyCompletedError: another submission completed the attempt first
        """
        state = self.state
        if isinstance(state, Completed):
            return state
        if isinstance(state, Submitting):
            raise SubmissionInProgressError()
        if not isinstance(state, (InProgress, Failed)):
            raise TypeError(f"Unknown submission state: {state!r}")

        self.state = Submitting()
        records = self.build_answer_records(ledger)

        try:
            self.repository.replace_answers(self.attempt_id, records)
        except Exception as exc:
            self._fail(STEP_PERSIST_ANSWERS, exc)

        score = score_attempt(self.questions, ledger)
        completed_at = self._now()

        try:
            self.repository.complete_attempt(self.attempt_id, score, completed_at)
        except Exception as exc:
            self._fail(STEP_COMPLETE_ATTEMPT, exc)

        completed = Completed(score=score, completed_at=completed_at)
        self.state = completed
        logger.info(
            "Attempt submitted",
            extra={
                "attempt_id": str(self.attempt_id),
                "total_score": score.total,
                "rw_score": score.reading_writing.score,
                "math_score": score.math.score,
            },
        )
        if self.on_completed is not None:
            self.on_completed(completed)
        return completed

    def _fail(self, step: str, exc: Exception) -> None:
        self.state = Failed(step=step, reason=str(exc))
        if isinstance(exc, AttemptAlreadyCompletedError):
            raise exc
        logger.warning(
            "Submission step failed",
            extra={"attempt_id": str(self.attempt_id), "step": step, "error": str(exc)},
        )
        raise SubmissionFailure(step, f"Error submitting test: {exc}") from exc
