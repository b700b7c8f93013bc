"""
Error taxonomy for the triage engine.

Only ``ValidationError`` and ``ContentRejected`` ever reach an API client as
client errors. ``AdvisoryUnavailable`` is recovered inside the analyzer by
falling back to rule-based analysis. ``InternalComputationError`` is the one
fatal condition and carries a generic message only.
"""


class TriageError(Exception):
    """Base class for all triage engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TriageError):
    """Symptom text missing, not a string, or outside the length bounds."""


class ContentRejected(TriageError):
    """Symptom text matched a disallowed script/markup pattern."""


class AdvisoryUnavailable(TriageError):
    """The language-model path failed; the caller should fall back."""

    def __init__(self, reason: str):
        super().__init__(f"Advisory analysis unavailable: {reason}")
        self.reason = reason


class InternalComputationError(TriageError):
    """Unexpected failure inside the rule-based path."""

    def __init__(self, message: str = "Symptom analysis failed"):
        super().__init__(message)
