"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from app.common.request_id import RequestIDMiddleware
from app.core.config import settings
from app.core.errors import (
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logging import get_logger, setup_logging
from app.core.seed_achievements import seed_achievements
from app.db.base import Base, import_models
from app.db.engine import engine
from app.db.session import session_scope

logger = get_logger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.ENV in ("dev", "test"):
        # Production schemas come from Alembic migrations
        import_models()
        Base.metadata.create_all(bind=engine)
    if settings.SEED_ACHIEVEMENTS:
        with session_scope() as db:
            seed_achievements(db)
    logger.info("API started", extra={"api_prefix": settings.API_PREFIX})
    yield


def create_app() -> FastAPI:
    docs_enabled = settings.ENV != "prod"
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=API_VERSION,
        description="Timed Digital SAT practice tests, scoring, topic practice and progress tracking.",
        openapi_url="/openapi.json" if docs_enabled else None,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Last added runs first: CORS wraps the request-id middleware
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
