"""
Common schemas used across multiple endpoints.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    timestamp: datetime = Field(default_factory=_utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "error": "ValidationError",
                "message": "Symptoms description must be at least 10 characters",
                "timestamp": "2025-08-05T10:30:00Z"
            }
        }


class HealthResponse(BaseModel):
    """Health check response."""

    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=_utcnow)
    advisory_configured: bool = Field(
        default=False,
        description="Whether the language-model advisory path is enabled"
    )
    rule_database_version: str = Field(..., description="Loaded pattern rule table version")
    rule_count: int = Field(..., ge=0, description="Number of pattern rules loaded")
    uptime_seconds: float = Field(default=0, description="Service uptime")

    class Config:
        json_schema_extra = {
            "example": {
                "service": "Symptom Triage Engine",
                "version": "1.0.0",
                "status": "healthy",
                "timestamp": "2025-08-05T10:30:00Z",
                "advisory_configured": True,
                "rule_database_version": "2025.08.3",
                "rule_count": 20,
                "uptime_seconds": 3600.5
            }
        }


class RuleSummary(BaseModel):
    """Public view of one pattern rule."""

    id: str
    conditions: list[str]
    triage_level: str
    likelihood: int
    emergency: bool


class RuleDatabaseResponse(BaseModel):
    """Pattern rule table listing."""

    version: str
    total: int
    emergency_rules: list[str]
    rules: list[RuleSummary]
