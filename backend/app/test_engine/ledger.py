"""In-memory record of a user's answers before submission."""

from collections.abc import Iterable, Mapping
from uuid import UUID

from app.models.question import AnswerLetter


class AnswerLedger:
    """Selected answers and review marks keyed by question id.

    Nothing here is persisted; the ledger is read once by the submission
    coordinator and then discarded.
    """

    def __init__(self):
        self._answers: dict[UUID, AnswerLetter] = {}
        self._marked: set[UUID] = set()
        self._time_spent: dict[UUID, int] = {}

    @classmethod
    def from_snapshot(
        cls,
        answers: Mapping[UUID, AnswerLetter | str | None] | None = None,
        marked: Iterable[UUID] = (),
        time_spent: Mapping[UUID, int] | None = None,
    ) -> "AnswerLedger":
        """Rebuild a ledger from a client-held copy."""
        ledger = cls()
        for question_id, letter in (answers or {}).items():
            if letter is not None:
                ledger.record_answer(question_id, letter)
        for question_id in marked:
            ledger._marked.add(question_id)
        for question_id, seconds in (time_spent or {}).items():
            ledger.record_time(question_id, seconds)
        return ledger

    def record_answer(self, question_id: UUID, letter: AnswerLetter | str) -> None:
        """Last write wins."""
        self._answers[question_id] = AnswerLetter(letter)

    def clear_answer(self, question_id: UUID) -> None:
        self._answers.pop(question_id, None)

    def answer_for(self, question_id: UUID) -> AnswerLetter | None:
        return self._answers.get(question_id)

    def toggle_mark(self, question_id: UUID) -> bool:
        """Flip the review mark. Returns the new state."""
        if question_id in self._marked:
            self._marked.discard(question_id)
            return False
        self._marked.add(question_id)
        return True

    def is_marked(self, question_id: UUID) -> bool:
        return question_id in self._marked

    def record_time(self, question_id: UUID, seconds: int) -> None:
        """Accumulate time spent on a question (best-effort)."""
        if seconds > 0:
            self._time_spent[question_id] = self._time_spent.get(question_id, 0) + int(seconds)

    def time_spent(self, question_id: UUID) -> int:
        return self._time_spent.get(question_id, 0)

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def marked(self) -> frozenset[UUID]:
        return frozenset(self._marked)

    def discard(self) -> None:
        self._answers.clear()
        self._marked.clear()
        self._time_spent.clear()
