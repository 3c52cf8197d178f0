"""Ordered question list with a clamped cursor."""

from collections.abc import Sequence

from app.test_engine.questions import FrozenQuestion


class QuestionSequencer:
    """Navigation over a fixed list of questions.

    ``advance``/``retreat`` at either end are no-ops, so the cursor always
    stays within ``[0, len - 1]``.
    """

    def __init__(self, questions: Sequence[FrozenQuestion]):
        if not questions:
            raise ValueError("A session needs at least one question")
        self._questions = tuple(questions)
        self._index = 0

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self):
        return iter(self._questions)

    @property
    def questions(self) -> tuple[FrozenQuestion, ...]:
        return self._questions

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current(self) -> FrozenQuestion:
        return self._questions[self._index]

    @property
    def position(self) -> int:
        """1-based position for display."""
        return self._index + 1

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == len(self._questions) - 1

    @property
    def progress(self) -> float:
        return self.position / len(self._questions)

    def advance(self) -> FrozenQuestion:
        if not self.is_last:
            self._index += 1
        return self.current

    def retreat(self) -> FrozenQuestion:
        if not self.is_first:
            self._index -= 1
        return self.current

    def jump_to(self, index: int) -> FrozenQuestion:
        self._index = max(0, min(index, len(self._questions) - 1))
        return self.current
