"""Exception handlers.

Every failure leaves the API in the same envelope:
``{"error_code", "message", "details", "request_id"}``.
"""

import uuid
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.app_exceptions import AppError
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Any | None = None
    request_id: str | None = None


def get_request_id(request: Request) -> str:
    """Id set by the request-id middleware, or a fresh one outside it."""
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def error_response(
    request: Request, status_code: int, error_code: str, message: str, details: Any = None
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        details=details,
        request_id=get_request_id(request),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "issue": error.get("msg", "Validation error"),
            "type": error.get("type", "validation_error"),
        }
        for error in exc.errors()
    ]
    return error_response(
        request, status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", "Invalid request data", details
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc, AppError):
        if exc.status_code >= 500:
            logger.warning(
                "Request failed with retryable error",
                extra={"request_id": get_request_id(request), "error_code": exc.code, "details": exc.details},
            )
        return error_response(request, exc.status_code, exc.code, exc.message, exc.details)

    # Plain HTTPException: detail is usually a message string
    if isinstance(exc.detail, dict):
        detail = dict(exc.detail)
        message = detail.pop("message", "An error occurred")
        return error_response(request, exc.status_code, "HTTP_ERROR", message, detail or None)
    return error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception", extra={"request_id": get_request_id(request)}, exc_info=exc)
    if settings.ENV == "prod":
        return error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "An internal server error occurred"
        )
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        str(exc),
        {"type": type(exc).__name__},
    )
