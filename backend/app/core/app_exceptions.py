"""Application-specific exceptions for consistent error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Application error with standardized error code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | list[Any] | None = None,
    ):
        super().__init__(
            status_code=status_code,
            detail={
                "code": code,
                "message": message,
                "details": details,
            },
        )
        self.code = code
        self.message = message
        self.details = details


class LoadFailure(AppError):
    """Questions, a test or an attempt could not be fetched."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(status.HTTP_404_NOT_FOUND, "LOAD_FAILURE", message, details)


class SubmissionFailure(AppError):
    """A persistence step of the submission failed; the user may retry."""

    def __init__(self, step: str, message: str):
        super().__init__(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "SUBMISSION_FAILED",
            message,
            {"step": step, "retryable": True},
        )
        self.step = step


class SubmissionInProgressError(AppError):
    """A second submit arrived while the first one is still running."""

    def __init__(self):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "SUBMISSION_IN_PROGRESS",
            "Submission is already in progress",
        )


class AttemptInProgressError(AppError):
    """Results were requested for an attempt that has not been completed."""

    def __init__(self, attempt_id: Any):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "ATTEMPT_IN_PROGRESS",
            "Attempt has not been submitted yet",
            {"attempt_id": str(attempt_id)},
        )


class StatsConflictError(AppError):
    """User stats kept changing underneath us; the update was not applied."""

    def __init__(self, user_id: Any, attempts: int):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "STATS_CONFLICT",
            "User stats were modified concurrently, please retry",
            {"user_id": str(user_id), "attempts": attempts},
        )


class AttemptAlreadyCompletedError(AppError):
    """Answers were about to be written to an attempt that is already completed."""

    def __init__(self, attempt_id: Any):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "ATTEMPT_ALREADY_COMPLETED",
            "Attempt has already been submitted",
            {"attempt_id": str(attempt_id)},
        )
