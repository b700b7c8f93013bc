"""
Tests for the advisory (language-model) path.
"""

import asyncio
import json

import httpx
import pytest

from triage_engine.config import Settings
from triage_engine.core.exceptions import AdvisoryUnavailable
from triage_engine.schemas.triage import (
    AnalysisMethod,
    InterviewAnswers,
    ProfileData,
    SymptomReport,
    TriageLevel,
)
from triage_engine.services.advisory import (
    AdvisoryClient,
    InvalidAdvisory,
    ValidAdvisory,
    build_context,
    parse_advisory_response,
)

SYMPTOMS = "persistent burning during urination"


# ============================================================================
# RESPONSE VALIDATION
# ============================================================================

def test_parse_valid_response(advisory_payload):
    """Test a contract-conforming reply converts to an ai result."""
    verdict = parse_advisory_response(json.dumps(advisory_payload))

    assert isinstance(verdict, ValidAdvisory)
    result = verdict.result
    assert result.analysis_method == AnalysisMethod.AI
    assert result.triage_level == TriageLevel.MEDIUM
    assert result.confidence_score == 0.78
    assert [c.name for c in result.conditions] == ["Urinary tract infection", "Cystitis"]
    assert result.conditions[0].likelihood == 82
    assert result.conditions[0].self_care == "Drink plenty of water."


def test_parse_caps_conditions_at_three(advisory_payload):
    """Test extra model conditions are dropped after ranking."""
    advisory_payload["conditions"] = [
        {"name": f"Condition {i}", "likelihood": i * 10, "recommendation": "See a provider."}
        for i in range(1, 6)
    ]

    verdict = parse_advisory_response(json.dumps(advisory_payload))

    assert [c.likelihood for c in verdict.result.conditions] == [50, 40, 30]


def test_parse_strips_code_fence(advisory_payload):
    """Test a fenced JSON block is accepted."""
    raw = f"```json\n{json.dumps(advisory_payload)}\n```"

    assert isinstance(parse_advisory_response(raw), ValidAdvisory)


@pytest.mark.parametrize("field", ["triageLevel", "conditions", "actions", "confidenceScore"])
def test_parse_rejects_missing_required_field(advisory_payload, field):
    """Test each mandatory field is enforced."""
    del advisory_payload[field]

    verdict = parse_advisory_response(json.dumps(advisory_payload))

    assert isinstance(verdict, InvalidAdvisory)
    assert field in verdict.reason


@pytest.mark.parametrize("mutation", [
    {"triageLevel": "urgent"},
    {"triageLevel": "HIGH"},
    {"conditions": []},
    {"conditions": "UTI"},
    {"actions": "   "},
    {"actions": 42},
    {"confidenceScore": 1.5},
    {"confidenceScore": "0.9"},
    {"confidenceScore": True},
])
def test_parse_rejects_invalid_top_level_values(advisory_payload, mutation):
    """Test out-of-contract top-level values invalidate the reply."""
    advisory_payload.update(mutation)

    assert isinstance(parse_advisory_response(json.dumps(advisory_payload)), InvalidAdvisory)


@pytest.mark.parametrize("likelihood", ["75", 150, -5, None, True])
def test_parse_rejects_bad_likelihood(advisory_payload, likelihood):
    """Test likelihood must be a number within 0-100."""
    advisory_payload["conditions"][0]["likelihood"] = likelihood

    assert isinstance(parse_advisory_response(json.dumps(advisory_payload)), InvalidAdvisory)


def test_parse_rejects_condition_without_recommendation(advisory_payload):
    """Test condition entries need name, likelihood and recommendation."""
    del advisory_payload["conditions"][1]["recommendation"]

    assert isinstance(parse_advisory_response(json.dumps(advisory_payload)), InvalidAdvisory)


@pytest.mark.parametrize("raw", ["", "   ", None, "not json at all", "[1, 2, 3]", '"text"'])
def test_parse_rejects_non_object_bodies(raw):
    """Test empty, unparsable and non-object replies are invalid."""
    assert isinstance(parse_advisory_response(raw), InvalidAdvisory)


# ============================================================================
# CONTEXT
# ============================================================================

def test_build_context_includes_answers_and_profile():
    """Test the context block carries answers and demographics."""
    report = SymptomReport(
        symptoms=SYMPTOMS,
        interview_responses=InterviewAnswers(pain_level=9, fever=True, duration="1-3 days"),
        profile_data=ProfileData(age=42, sex="female", profileType="myself")
    )

    context = build_context(report, SYMPTOMS)

    assert f"- Symptoms: {SYMPTOMS}" in context
    assert "- Pain Level: 9/10" in context
    assert "- Fever: Yes" in context
    assert "- Duration: 1-3 days" in context
    assert "- Location: Not specified" in context
    assert "- Age: 42" in context
    assert "- Assessment for: myself" in context


def test_build_context_without_profile_is_bounded(make_report):
    """Test demographics are omitted when absent and length is capped."""
    report = make_report("x" * 500)

    context = build_context(report, "x" * 500, max_chars=120)

    assert "Age" not in context
    assert len(context) == 120


# ============================================================================
# CLIENT
# ============================================================================

async def test_client_returns_validated_result(advisory_settings, advisory_payload, make_report):
    """Test a successful completion yields an ai result and a well-formed request."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "choices": [{"message": {"content": json.dumps(advisory_payload)}}]
        })

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = AdvisoryClient(http_client=http, settings=advisory_settings)
        result = await client.analyze(make_report(SYMPTOMS, pain_level=4), SYMPTOMS)

    assert result.analysis_method == AnalysisMethod.AI
    assert result.confidence_score == 0.78
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == advisory_settings.OPENAI_MODEL
    assert seen["body"]["response_format"] == {"type": "json_object"}
    assert [m["role"] for m in seen["body"]["messages"]] == ["system", "user"]
    assert "Pain Level: 4/10" in seen["body"]["messages"][1]["content"]


async def test_client_not_configured_skips_network(make_report):
    """Test a missing API key fails fast without an HTTP call."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = AdvisoryClient(http_client=http, settings=Settings(OPENAI_API_KEY=""))
        with pytest.raises(AdvisoryUnavailable, match="not configured"):
            await client.analyze(make_report(SYMPTOMS), SYMPTOMS)

    assert calls == []


async def test_client_non_2xx_raises(advisory_settings, completion_transport, make_report):
    """Test upstream errors surface as AdvisoryUnavailable."""
    async with httpx.AsyncClient(transport=completion_transport("{}", status_code=503)) as http:
        client = AdvisoryClient(http_client=http, settings=advisory_settings)
        with pytest.raises(AdvisoryUnavailable) as exc_info:
            await client.analyze(make_report(SYMPTOMS), SYMPTOMS)

    assert "HTTP 503" in exc_info.value.reason


async def test_client_network_error_raises(advisory_settings, make_report):
    """Test connection failures surface as AdvisoryUnavailable."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = AdvisoryClient(http_client=http, settings=advisory_settings)
        with pytest.raises(AdvisoryUnavailable, match="network error"):
            await client.analyze(make_report(SYMPTOMS), SYMPTOMS)


async def test_client_transport_timeout_raises(advisory_settings, make_report):
    """Test httpx timeouts surface as AdvisoryUnavailable."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = AdvisoryClient(http_client=http, settings=advisory_settings)
        with pytest.raises(AdvisoryUnavailable, match="timed out"):
            await client.analyze(make_report(SYMPTOMS), SYMPTOMS)


async def test_client_overall_timeout_bounds_hung_upstream(advisory_settings, make_report):
    """Test a hung upstream is cut off by the request-scoped timeout."""

    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = AdvisoryClient(http_client=http, settings=advisory_settings)
        with pytest.raises(AdvisoryUnavailable, match="timed out"):
            await client.analyze(make_report(SYMPTOMS), SYMPTOMS)


async def test_client_malformed_envelope_raises(advisory_settings, make_report):
    """Test a body without choices is rejected."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "overloaded"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = AdvisoryClient(http_client=http, settings=advisory_settings)
        with pytest.raises(AdvisoryUnavailable, match="malformed"):
            await client.analyze(make_report(SYMPTOMS), SYMPTOMS)


async def test_client_invalid_payload_raises(
    advisory_settings, advisory_payload, completion_transport, make_report
):
    """Test a reply missing conditions is never trusted."""
    del advisory_payload["conditions"]

    async with httpx.AsyncClient(transport=completion_transport(advisory_payload)) as http:
        client = AdvisoryClient(http_client=http, settings=advisory_settings)
        with pytest.raises(AdvisoryUnavailable, match="invalid response"):
            await client.analyze(make_report(SYMPTOMS), SYMPTOMS)
