"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from app.api.v1.endpoints import attempts, gamification, health, practice

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(attempts.tests_router, prefix="/tests", tags=["Tests"])
api_router.include_router(attempts.router, prefix="/attempts", tags=["Attempts"])
api_router.include_router(practice.router, prefix="/practice", tags=["Practice"])
api_router.include_router(gamification.router, prefix="/me", tags=["Gamification"])
