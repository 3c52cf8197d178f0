"""Liveness and readiness probes."""

from typing import Literal

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.dependencies import DbSession
from app.core.errors import get_request_id
from app.core.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


class LivenessOut(BaseModel):
    status: Literal["ok"] = "ok"


class DependencyCheck(BaseModel):
    status: Literal["ok", "down"]
    message: str | None = None


class ReadinessOut(BaseModel):
    status: Literal["ok", "down"]
    checks: dict[str, DependencyCheck]
    request_id: str


@router.get("/health", response_model=LivenessOut)
async def health() -> LivenessOut:
    """The process is up. Touches nothing else."""
    return LivenessOut()


@router.get("/ready", response_model=ReadinessOut)
async def ready(request: Request, db: DbSession):
    """The database answers a trivial query; 503 otherwise."""
    try:
        db.execute(text("SELECT 1"))
        db_check = DependencyCheck(status="ok")
    except SQLAlchemyError as exc:
        logger.warning("Readiness check: database unreachable", extra={"error": str(exc)})
        db_check = DependencyCheck(status="down", message=type(exc).__name__)

    body = ReadinessOut(status=db_check.status, checks={"db": db_check}, request_id=get_request_id(request))
    if body.status == "down":
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())
    return body
