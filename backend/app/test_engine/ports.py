"""Persistence port used by the submission coordinator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from app.models.question import AnswerLetter
from app.test_engine.scoring import AttemptScore


@dataclass(frozen=True)
class AnswerRecord:
    """One row to persist per question of the attempt, answered or not."""

    attempt_id: UUID
    question_id: UUID
    selected_answer: AnswerLetter | None
    is_correct: bool
    is_marked: bool
    time_spent: int = 0


class AttemptRepository(ABC):
    """Storage operations the submission flow depends on."""

    @abstractmethod
    def replace_answers(self, attempt_id: UUID, records: list[AnswerRecord]) -> None:
        """Persist the attempt's answers; replaying the same records must not duplicate rows.

        Raises:
            AttemptAlreadyCompletedError: The attempt was completed by another submission
        """

    @abstractmethod
    def complete_attempt(self, attempt_id: UUID, score: AttemptScore, completed_at: datetime) -> None:
        """Write scores and completion time onto the attempt (safe to repeat)."""
