"""API routes for the Symptom Triage Engine."""

from fastapi import APIRouter

from triage_engine.api.v1 import health, triage

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(triage.router, tags=["triage"])

__all__ = ["api_router"]
