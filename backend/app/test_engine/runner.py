"""Interactive test session: the pieces a client drives one event at a time."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from uuid import UUID

from app.models.question import AnswerLetter
from app.test_engine.clock import SessionClock
from app.test_engine.ledger import AnswerLedger
from app.test_engine.ports import AttemptRepository
from app.test_engine.questions import FrozenQuestion
from app.test_engine.sequencer import QuestionSequencer
from app.test_engine.submission import Completed, SubmissionCoordinator


@dataclass(frozen=True)
class SessionSummary:
    answered: int
    marked: int
    unanswered: int
    time_remaining: int
    expired: bool


class TestRunner:
    """One user's attempt at one test.

    The context (user, attempt, repository) is passed in explicitly. The clock
    never submits on its own; callers check ``clock.expired``.
    """

    __test__ = False  # not a pytest class

    def __init__(
        self,
        user_id: UUID,
        attempt_id: UUID,
        questions: Sequence[FrozenQuestion],
        repository: AttemptRepository,
        budget_seconds: int | None = None,
        on_completed: Callable[[Completed], None] | None = None,
    ):
        self.user_id = user_id
        self.attempt_id = attempt_id
        self.sequencer = QuestionSequencer(questions)
        self.ledger = AnswerLedger()
        self.clock = SessionClock(budget_seconds)
        self.coordinator = SubmissionCoordinator(
            repository, attempt_id, self.sequencer.questions, on_completed=on_completed
        )

    @property
    def current(self) -> FrozenQuestion:
        return self.sequencer.current

    def select(self, letter: AnswerLetter | str) -> None:
        self.ledger.record_answer(self.current.id, letter)

    def clear(self) -> None:
        self.ledger.clear_answer(self.current.id)

    def toggle_mark(self) -> bool:
        return self.ledger.toggle_mark(self.current.id)

    def next(self) -> FrozenQuestion:
        return self.sequencer.advance()

    def previous(self) -> FrozenQuestion:
        return self.sequencer.retreat()

    def tick(self) -> int:
        """One second passes; the time is attributed to the current question."""
        if not self.clock.expired:
            self.ledger.record_time(self.current.id, 1)
        return self.clock.tick()

    def summary(self) -> SessionSummary:
        total = len(self.sequencer)
        return SessionSummary(
            answered=self.ledger.answered_count,
            marked=len(self.ledger.marked),
            unanswered=total - self.ledger.answered_count,
            time_remaining=self.clock.remaining,
            expired=self.clock.expired,
        )

    def submit(self) -> Completed:
        """Submit and, on success, drop the ledger."""
        completed = self.coordinator.submit(self.ledger)
        self.ledger.discard()
        return completed
