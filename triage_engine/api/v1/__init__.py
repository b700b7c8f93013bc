"""API v1 routes."""

from triage_engine.api.v1 import health, triage

__all__ = ["health", "triage"]
