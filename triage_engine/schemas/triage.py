"""
Triage Schemas - Request, Rule and Result Models

Pydantic models shared by the sanitizer, rule matcher, resolver, advisory
client and API layer. Response models serialize with the camelCase keys
the frontend already consumes (``triageLevel``, ``naturalRemedies`` ...).
"""

import re
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# ENUMS - Triage and Interview Classification Types
# ============================================================================

class TriageLevel(str, Enum):
    """Coarse urgency classification, ordered by severity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _TRIAGE_RANK[self]

    @classmethod
    def most_severe(cls, levels: Iterable["TriageLevel"]) -> "TriageLevel":
        """Most severe level among ``levels`` (``LOW`` when empty)."""
        return max(levels, key=lambda level: level.rank, default=cls.LOW)


_TRIAGE_RANK = {
    TriageLevel.LOW: 0,
    TriageLevel.MEDIUM: 1,
    TriageLevel.HIGH: 2,
}


class ConfidenceTier(str, Enum):
    """Per-condition confidence tier."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnalysisMethod(str, Enum):
    """Which analysis path produced a result."""
    AI = "ai"
    RULE_BASED = "rule-based"


class SymptomDuration(str, Enum):
    """Interview answer options for symptom duration."""
    UNDER_24_HOURS = "Less than 24 hours"
    ONE_TO_THREE_DAYS = "1-3 days"
    THREE_TO_SEVEN_DAYS = "3-7 days"
    OVER_A_WEEK = "More than a week"


class BodyLocation(str, Enum):
    """Interview answer options for pain/discomfort location."""
    HEAD_NECK = "Head/neck"
    CHEST = "Chest"
    ABDOMEN = "Abdomen"
    BACK = "Back"
    LIMBS = "Arms/legs"
    OTHER = "Other"


class ProfileType(str, Enum):
    """Who the assessment is for."""
    MYSELF = "myself"
    CHILD = "child"
    GUEST = "guest"


# ============================================================================
# REQUEST MODELS
# ============================================================================

class InterviewAnswers(BaseModel):
    """Structured interview answers collected after the free-text step."""
    pain_level: Optional[int] = Field(None, ge=1, le=10, description="Self-reported pain 1-10")
    fever: bool = Field(default=False, description="Fever or feeling feverish")
    duration: Optional[SymptomDuration] = Field(None, description="How long symptoms have lasted")
    location: Optional[BodyLocation] = Field(None, description="Where the pain/discomfort is")

    class Config:
        frozen = True


class ProfileData(BaseModel):
    """Optional demographic context."""
    age: Optional[int] = Field(None, ge=0, le=150, description="Patient age")
    sex: Optional[str] = Field(None, max_length=32, description="Patient sex")
    profile_type: ProfileType = Field(
        default=ProfileType.GUEST,
        alias="profileType",
        description="Whose symptoms are being assessed"
    )

    class Config:
        frozen = True
        populate_by_name = True


class SymptomReport(BaseModel):
    """
    One analysis request.

    ``symptoms`` is deliberately unconstrained here: length and content rules
    belong to the sanitizer so every caller gets the same error taxonomy.
    """
    symptoms: Optional[str] = Field(None, description="Free-text symptom description")
    interview_responses: InterviewAnswers = Field(
        default_factory=InterviewAnswers,
        alias="interviewResponses",
        description="Structured interview answers"
    )
    profile_data: Optional[ProfileData] = Field(
        None,
        alias="profileData",
        description="Optional demographic context"
    )

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "symptoms": "Persistent burning during urination since yesterday",
                "interviewResponses": {
                    "pain_level": 4,
                    "fever": False,
                    "duration": "1-3 days",
                    "location": "Abdomen"
                },
                "profileData": {"age": 34, "sex": "female", "profileType": "myself"}
            }
        }


# ============================================================================
# PATTERN RULE MODEL
# ============================================================================

class PatternRule(BaseModel):
    """One row of the pattern rule table."""
    id: str = Field(..., min_length=1, description="Stable rule identifier")
    keywords: list[str] = Field(..., min_length=1, description="Any of these must appear")
    qualifiers: list[str] = Field(
        default_factory=list,
        description="When non-empty, any of these must also appear"
    )
    conditions: list[str] = Field(..., min_length=1, description="Candidate condition names")
    triage_level: TriageLevel = Field(..., description="Base triage level")
    likelihood: int = Field(..., ge=0, le=100, description="Base likelihood")
    recommendation: str = Field(..., min_length=1)
    self_care: str = Field(..., min_length=1)
    emergency: bool = Field(default=False, description="Always forces high triage")
    whole_word: bool = Field(
        default=False,
        description="Terms must match whole words rather than any substring"
    )
    reasoning: Optional[str] = None
    confidence_level: Optional[ConfidenceTier] = None
    sources: list[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @field_validator("keywords", "qualifiers")
    @classmethod
    def _normalize_terms(cls, terms: list[str]) -> list[str]:
        normalized = [t.strip().lower() for t in terms]
        if any(not t for t in normalized):
            raise ValueError("blank keyword")
        return normalized

    def _contains(self, term: str, text: str) -> bool:
        if self.whole_word:
            return re.search(rf"\b{re.escape(term)}\b", text) is not None
        return term in text

    def fires_on(self, text: str) -> bool:
        """Whether this rule matches already-lowercased ``text``."""
        if not any(self._contains(k, text) for k in self.keywords):
            return False
        if self.qualifiers:
            return any(self._contains(q, text) for q in self.qualifiers)
        return True


# ============================================================================
# RESULT MODELS
# ============================================================================

class ConditionCandidate(BaseModel):
    """Candidate condition (never a diagnosis)."""
    name: str = Field(..., description="Condition name")
    likelihood: int = Field(..., ge=0, le=100, description="Likelihood 0-100")
    recommendation: str = Field(..., description="What to do about it")
    reasoning: Optional[str] = Field(None, description="Why it was suggested")
    confidence_level: Optional[ConfidenceTier] = Field(None, alias="confidenceLevel")
    sources: list[str] = Field(default_factory=list, description="Guideline references")
    self_care: Optional[str] = Field(None, alias="naturalRemedies", description="Safe self-care")

    class Config:
        frozen = True
        populate_by_name = True


class TriageResult(BaseModel):
    """Complete triage outcome; identical shape for both analysis paths."""
    triage_level: TriageLevel = Field(..., alias="triageLevel")
    conditions: list[ConditionCandidate] = Field(
        ...,
        min_length=1,
        max_length=3,
        description="Highest likelihood first"
    )
    actions: str = Field(..., min_length=1, description="Recommended next actions")
    analysis_method: AnalysisMethod = Field(..., alias="analysisMethod")
    confidence_score: float = Field(..., ge=0.0, le=1.0, alias="confidenceScore")
    reasoning: Optional[str] = None
    limitations_note: Optional[str] = Field(None, alias="limitationsNote")

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "triageLevel": "medium",
                "conditions": [
                    {
                        "name": "Urinary tract infection",
                        "likelihood": 84,
                        "recommendation": "Urinary symptoms may indicate infection. See healthcare provider for testing.",
                        "naturalRemedies": "Drink plenty of water, avoid bladder irritants.",
                        "sources": []
                    }
                ],
                "actions": "Schedule an appointment with your healthcare provider within 24-48 hours. Monitor symptoms closely.",
                "analysisMethod": "rule-based",
                "confidenceScore": 0.7,
                "limitationsNote": "This rule-based analysis uses common symptom patterns..."
            }
        }
