"""Pydantic schemas for request/response validation."""

from triage_engine.schemas.common import (
    ErrorResponse,
    HealthResponse,
    RuleDatabaseResponse,
    RuleSummary,
)
from triage_engine.schemas.advisory import AdvisoryCondition, AdvisoryPayload
from triage_engine.schemas.triage import (
    AnalysisMethod,
    BodyLocation,
    ConditionCandidate,
    ConfidenceTier,
    InterviewAnswers,
    PatternRule,
    ProfileData,
    ProfileType,
    SymptomDuration,
    SymptomReport,
    TriageLevel,
    TriageResult,
)

__all__ = [
    # Common
    "ErrorResponse",
    "HealthResponse",
    "RuleDatabaseResponse",
    "RuleSummary",
    # Advisory contract
    "AdvisoryCondition",
    "AdvisoryPayload",
    # Triage
    "AnalysisMethod",
    "BodyLocation",
    "ConditionCandidate",
    "ConfidenceTier",
    "InterviewAnswers",
    "PatternRule",
    "ProfileData",
    "ProfileType",
    "SymptomDuration",
    "SymptomReport",
    "TriageLevel",
    "TriageResult",
]
