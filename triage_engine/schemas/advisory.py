"""
Response contract of the language-model advisory service.

The model's reply is untrusted input. Every field is validated here before
the analyzer looks at any of it; unknown keys are ignored.
"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field, field_validator

from triage_engine.schemas.triage import ConfidenceTier, TriageLevel


def _reject_bool(value: Any) -> Any:
    # bool is an int subclass; a JSON true is not a likelihood
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    return value


Likelihood = Annotated[float, Field(ge=0, le=100, strict=True)]
Confidence = Annotated[float, Field(ge=0.0, le=1.0, strict=True)]


class AdvisoryCondition(BaseModel):
    name: str = Field(..., min_length=1)
    likelihood: Likelihood
    recommendation: str = Field(..., min_length=1)
    reasoning: Optional[str] = None
    confidenceLevel: Optional[ConfidenceTier] = None
    sources: list[str] = Field(default_factory=list)
    naturalRemedies: Optional[str] = None

    @field_validator("likelihood", mode="before")
    @classmethod
    def _numeric_likelihood(cls, value: Any) -> Any:
        return _reject_bool(value)


class AdvisoryPayload(BaseModel):
    """``{triageLevel, conditions[], actions, reasoning?, confidenceScore, limitationsNote?}``"""
    triageLevel: TriageLevel
    conditions: list[AdvisoryCondition] = Field(..., min_length=1)
    actions: str
    confidenceScore: Confidence
    reasoning: Optional[str] = None
    limitationsNote: Optional[str] = None

    @field_validator("actions")
    @classmethod
    def _non_blank_actions(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("actions must be a non-empty string")
        return value.strip()

    @field_validator("confidenceScore", mode="before")
    @classmethod
    def _numeric_confidence(cls, value: Any) -> Any:
        return _reject_bool(value)
