"""Test-taking engine: sequencing, answer capture, timing, scoring and submission.

Everything in this package is free of HTTP and ORM concerns. Persistence goes
through :class:`app.test_engine.ports.AttemptRepository`.
"""

from app.test_engine.clock import SessionClock
from app.test_engine.ledger import AnswerLedger
from app.test_engine.questions import FrozenQuestion
from app.test_engine.runner import TestRunner
from app.test_engine.scoring import AttemptScore, SectionScore, score_attempt, section_score
from app.test_engine.sequencer import QuestionSequencer
from app.test_engine.submission import (
    Completed,
    Failed,
    InProgress,
    SubmissionCoordinator,
    Submitting,
)

__all__ = [
    "AnswerLedger",
    "AttemptScore",
    "Completed",
    "Failed",
    "FrozenQuestion",
    "InProgress",
    "QuestionSequencer",
    "SectionScore",
    "SessionClock",
    "SubmissionCoordinator",
    "Submitting",
    "TestRunner",
    "score_attempt",
    "section_score",
]
