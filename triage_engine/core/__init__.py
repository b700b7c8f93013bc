"""Core modules for the Symptom Triage Engine."""

from triage_engine.core.auth import verify_api_key
from triage_engine.core.exceptions import (
    AdvisoryUnavailable,
    ContentRejected,
    InternalComputationError,
    TriageError,
    ValidationError,
)
from triage_engine.core.logging import get_logger, setup_logging
from triage_engine.core.rate_limit import limiter, get_remote_address

__all__ = [
    "verify_api_key",
    "AdvisoryUnavailable",
    "ContentRejected",
    "InternalComputationError",
    "TriageError",
    "ValidationError",
    "get_logger",
    "setup_logging",
    "limiter",
    "get_remote_address",
]
