"""Immutable question snapshots used for the lifetime of a session."""

from dataclasses import dataclass
from uuid import UUID

from app.models.question import AnswerLetter, Question, Section


def _value(member) -> str | None:
    if member is None:
        return None
    return getattr(member, "value", member)


@dataclass(frozen=True)
class FrozenQuestion:
    """Question content frozen at session start.

    Edits to the underlying row after the session begins do not change how the
    session is scored.
    """

    id: UUID
    section: Section
    module_number: int
    question_text: str
    options: tuple[tuple[AnswerLetter, str], ...]
    correct_answer: AnswerLetter
    explanation: str = ""
    difficulty: str | None = None
    domain: str | None = None
    topic: str | None = None

    @classmethod
    def from_model(cls, question: Question) -> "FrozenQuestion":
        return cls(
            id=question.id,
            section=Section(question.section),
            module_number=question.module_number,
            question_text=question.question_text,
            options=tuple(question.options.items()),
            correct_answer=AnswerLetter(question.correct_answer),
            explanation=question.explanation or "",
            difficulty=_value(question.difficulty),
            domain=_value(question.domain),
            topic=question.topic,
        )

    def option_text(self, letter: AnswerLetter) -> str:
        return dict(self.options)[letter]

    def is_correct(self, selected: AnswerLetter | None) -> bool:
        return selected is not None and selected == self.correct_answer

    def to_snapshot(self) -> dict:
        """JSON-safe copy of the content, keyed the way it is stored per attempt."""
        return {
            "section": self.section.value,
            "module_number": self.module_number,
            "question_text": self.question_text,
            "options": [[letter.value, text] for letter, text in self.options],
            "correct_answer": self.correct_answer.value,
            "explanation": self.explanation,
            "difficulty": self.difficulty,
            "domain": self.domain,
            "topic": self.topic,
        }

    @classmethod
    def from_snapshot(cls, question_id: UUID, snapshot: dict) -> "FrozenQuestion":
        return cls(
            id=question_id,
            section=Section(snapshot["section"]),
            module_number=snapshot["module_number"],
            question_text=snapshot["question_text"],
            options=tuple((AnswerLetter(letter), text) for letter, text in snapshot["options"]),
            correct_answer=AnswerLetter(snapshot["correct_answer"]),
            explanation=snapshot.get("explanation") or "",
            difficulty=snapshot.get("difficulty"),
            domain=snapshot.get("domain"),
            topic=snapshot.get("topic"),
        )
