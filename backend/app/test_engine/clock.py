"""Countdown timer for a test session."""

from app.core.config import settings


class SessionClock:
    """One-second-granularity countdown.

    Purely presentational: reaching zero sets ``expired`` and nothing else.
    """

    def __init__(self, budget_seconds: int | None = None):
        budget = settings.SESSION_DURATION_SECONDS if budget_seconds is None else budget_seconds
        if budget < 0:
            raise ValueError("budget_seconds must be >= 0")
        self.budget_seconds = budget
        self._remaining = budget

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def elapsed(self) -> int:
        return self.budget_seconds - self._remaining

    @property
    def expired(self) -> bool:
        return self._remaining == 0

    def tick(self, seconds: int = 1) -> int:
        """Advance the clock; never goes below zero. Returns remaining seconds."""
        self._remaining = max(0, self._remaining - seconds)
        return self._remaining

    def reset(self) -> None:
        self._remaining = self.budget_seconds

    @property
    def formatted(self) -> str:
        """Remaining time as H:MM:SS."""
        hours, rest = divmod(self._remaining, 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{hours}:{minutes:02d}:{seconds:02d}"
