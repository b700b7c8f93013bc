"""
Pytest fixtures for Symptom Triage Engine tests.
"""

import json
import os
from typing import Any, Callable

import pytest

# Set environment variables before imports
os.environ["TRIAGE_SERVICE_API_KEY"] = "test-api-key-12345"
os.environ["OPENAI_API_KEY"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DEBUG"] = "true"

import httpx
from fastapi.testclient import TestClient

from triage_engine.config import Settings
from triage_engine.core.exceptions import AdvisoryUnavailable
from triage_engine.main import app
from triage_engine.schemas.triage import (
    AnalysisMethod,
    ConditionCandidate,
    InterviewAnswers,
    PatternRule,
    SymptomReport,
    TriageLevel,
    TriageResult,
)
from triage_engine.services.pattern_rules import PatternRuleTable, load_rule_table
from triage_engine.services.rule_matcher import RuleMatcher


class FailingAdvisory:
    """Advisory stand-in that always fails."""

    def __init__(self, reason: str = "request timed out"):
        self.reason = reason
        self.calls = 0

    async def analyze(self, report: SymptomReport, symptoms: str) -> TriageResult:
        self.calls += 1
        raise AdvisoryUnavailable(self.reason)

    async def close(self) -> None:
        pass


class StaticAdvisory:
    """Advisory stand-in that returns a fixed result."""

    def __init__(self, result: TriageResult):
        self.result = result
        self.calls = 0

    async def analyze(self, report: SymptomReport, symptoms: str) -> TriageResult:
        self.calls += 1
        return self.result

    async def close(self) -> None:
        pass


@pytest.fixture
def test_client():
    """Create synchronous test client."""
    return TestClient(app)


@pytest.fixture
def api_key_headers():
    """Headers with valid API key."""
    return {"X-API-Key": "test-api-key-12345"}


@pytest.fixture
def rule_table() -> PatternRuleTable:
    """Packaged pattern rule table."""
    return load_rule_table()


@pytest.fixture
def rules_by_id(rule_table: PatternRuleTable) -> dict[str, PatternRule]:
    return {rule.id: rule for rule in rule_table.rules}


@pytest.fixture
def matcher(rule_table: PatternRuleTable) -> RuleMatcher:
    return RuleMatcher(rule_table)


@pytest.fixture
def make_report() -> Callable[..., SymptomReport]:
    """Build a SymptomReport from text and interview answers."""

    def _make(symptoms: Any, **answers: Any) -> SymptomReport:
        return SymptomReport(
            symptoms=symptoms,
            interview_responses=InterviewAnswers(**answers)
        )

    return _make


@pytest.fixture
def ai_result() -> TriageResult:
    """A well-formed advisory result."""
    return TriageResult(
        triage_level=TriageLevel.LOW,
        conditions=[
            ConditionCandidate(
                name="Tension headache",
                likelihood=65,
                recommendation="Rest and hydrate; see a provider if it persists."
            )
        ],
        actions="Rest, hydrate and monitor your symptoms.",
        analysis_method=AnalysisMethod.AI,
        confidence_score=0.82,
        reasoning="Mild, short-lived headache without red flags."
    )


@pytest.fixture
def advisory_settings() -> Settings:
    """Settings with the advisory path enabled."""
    return Settings(
        OPENAI_API_KEY="sk-test",
        OPENAI_BASE_URL="https://llm.test/v1",
        ADVISORY_TIMEOUT=0.2
    )


@pytest.fixture
def advisory_payload() -> dict[str, Any]:
    """Model reply that satisfies the triage contract."""
    return {
        "triageLevel": "medium",
        "reasoning": "Dysuria without fever suggests an uncomplicated UTI.",
        "confidenceScore": 0.78,
        "limitationsNote": "Cannot examine urine sample.",
        "conditions": [
            {
                "name": "Cystitis",
                "likelihood": 60,
                "recommendation": "See a provider for a urine test."
            },
            {
                "name": "Urinary tract infection",
                "likelihood": 82.4,
                "recommendation": "See a provider for a urine test.",
                "confidenceLevel": "high",
                "naturalRemedies": "Drink plenty of water."
            }
        ],
        "actions": "Book an appointment within 24-48 hours."
    }


def completion_envelope(content: str) -> dict[str, Any]:
    """Wrap model content in a chat-completions response body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ]
    }


@pytest.fixture
def completion_transport() -> Callable[..., httpx.MockTransport]:
    """MockTransport factory replying with the given model content."""

    def _make(content: Any, status_code: int = 200) -> httpx.MockTransport:
        body = content if isinstance(content, str) else json.dumps(content)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=completion_envelope(body))

        return httpx.MockTransport(handler)

    return _make


@pytest.fixture
def failing_advisory() -> FailingAdvisory:
    """Advisory stand-in that always times out."""
    return FailingAdvisory()


@pytest.fixture
def static_advisory() -> Callable[[TriageResult], StaticAdvisory]:
    """Factory for advisory stand-ins returning a fixed result."""
    return StaticAdvisory
