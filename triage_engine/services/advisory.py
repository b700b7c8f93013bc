"""
Advisory (AI-assisted) analysis path.

Sends a bounded context block to an OpenAI-compatible chat-completions
endpoint and validates the reply against the triage JSON contract. One
attempt per call; every failure surfaces as ``AdvisoryUnavailable`` so the
analyzer can fall back to rule-based analysis.
"""

import asyncio
import json
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx
from pydantic import ValidationError as SchemaValidationError

from triage_engine.config import Settings, get_settings
from triage_engine.core.exceptions import AdvisoryUnavailable
from triage_engine.core.logging import get_logger
from triage_engine.schemas.advisory import AdvisoryPayload
from triage_engine.schemas.triage import (
    AnalysisMethod,
    ConditionCandidate,
    SymptomReport,
    TriageResult,
)
from triage_engine.services.prompts import NOT_SPECIFIED, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from triage_engine.services.rule_matcher import MAX_CONDITIONS

logger = get_logger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


# ============================================================================
# RESPONSE VALIDATION
# ============================================================================

@dataclass(frozen=True)
class ValidAdvisory:
    result: TriageResult


@dataclass(frozen=True)
class InvalidAdvisory:
    reason: str


AdvisoryVerdict = Union[ValidAdvisory, InvalidAdvisory]


def _summarize_errors(error: SchemaValidationError) -> str:
    parts = []
    for err in error.errors()[:3]:
        location = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def payload_to_result(payload: AdvisoryPayload) -> TriageResult:
    """Convert a validated model payload into a ``TriageResult``."""
    ranked = sorted(payload.conditions, key=lambda c: c.likelihood, reverse=True)
    conditions = [
        ConditionCandidate(
            name=c.name,
            likelihood=round(c.likelihood),
            recommendation=c.recommendation,
            reasoning=c.reasoning,
            confidence_level=c.confidenceLevel,
            sources=c.sources,
            self_care=c.naturalRemedies,
        )
        for c in ranked[:MAX_CONDITIONS]
    ]
    return TriageResult(
        triage_level=payload.triageLevel,
        conditions=conditions,
        actions=payload.actions,
        analysis_method=AnalysisMethod.AI,
        confidence_score=payload.confidenceScore,
        reasoning=payload.reasoning,
        limitations_note=payload.limitationsNote,
    )


def parse_advisory_response(raw: Any) -> AdvisoryVerdict:
    """
    Validate raw model output against the triage contract.

    Args:
        raw: Message content returned by the model.

    Returns:
        ``ValidAdvisory`` with the converted result, or ``InvalidAdvisory``
        naming the first problems found. Never raises.
    """
    if not isinstance(raw, str) or not raw.strip():
        return InvalidAdvisory("empty response")

    text = raw.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return InvalidAdvisory(f"response is not valid JSON ({e.msg})")

    if not isinstance(data, dict):
        return InvalidAdvisory("response is not a JSON object")

    try:
        payload = AdvisoryPayload.model_validate(data)
    except SchemaValidationError as e:
        return InvalidAdvisory(_summarize_errors(e))

    return ValidAdvisory(payload_to_result(payload))


# ============================================================================
# CONTEXT CONSTRUCTION
# ============================================================================

def build_context(report: SymptomReport, symptoms: str, max_chars: int = 3000) -> str:
    """
    Build the bounded patient context block sent to the model.

    Args:
        report: Original request (answers and demographics).
        symptoms: Sanitized symptom text.
        max_chars: Upper bound on the block length.
    """
    answers = report.interview_responses
    pain = f"{answers.pain_level}/10" if answers.pain_level is not None else NOT_SPECIFIED

    lines = [
        "Patient Information:",
        f"- Symptoms: {symptoms}",
        f"- Pain Level: {pain}",
        f"- Fever: {'Yes' if answers.fever else 'No'}",
        f"- Duration: {answers.duration.value if answers.duration else NOT_SPECIFIED}",
        f"- Location: {answers.location.value if answers.location else NOT_SPECIFIED}",
    ]

    profile = report.profile_data
    if profile is not None:
        lines.append(f"- Age: {profile.age if profile.age is not None else NOT_SPECIFIED}")
        lines.append(f"- Sex: {profile.sex or NOT_SPECIFIED}")
        lines.append(f"- Assessment for: {profile.profile_type.value}")

    context = "\n".join(lines)
    return context[:max_chars]


# ============================================================================
# CLIENT
# ============================================================================

class AdvisoryClient:
    """
    Single-attempt client for the language-model completion service.

    Accepts a shared ``httpx.AsyncClient`` (connection pooling across
    requests); creates and owns one otherwise.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None
    ):
        self._settings = settings or get_settings()
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def is_configured(self) -> bool:
        return self._settings.advisory_enabled

    def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.ADVISORY_TIMEOUT),
                limits=httpx.Limits(
                    max_keepalive_connections=self._settings.HTTP_POOL_SIZE,
                    keepalive_expiry=self._settings.HTTP_POOL_KEEPALIVE
                )
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def build_request_body(self, context: str) -> dict[str, Any]:
        return {
            "model": self._settings.OPENAI_MODEL,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": USER_PROMPT_TEMPLATE.format(context=context)},
            ],
            "temperature": self._settings.ADVISORY_TEMPERATURE,
            "max_tokens": self._settings.ADVISORY_MAX_TOKENS,
            "response_format": {"type": "json_object"},
        }

    async def _complete(self, context: str) -> str:
        """POST the completion request and return the message content."""
        settings = self._settings
        url = f"{settings.OPENAI_BASE_URL.rstrip('/')}/chat/completions"

        try:
            response = await self._get_client().post(
                url,
                json=self.build_request_body(context),
                headers={"Authorization": f"Bearer {settings.OPENAI_API_KEY}"},
                timeout=settings.ADVISORY_TIMEOUT,
            )
        except httpx.TimeoutException as e:
            raise AdvisoryUnavailable("request timed out") from e
        except httpx.HTTPError as e:
            raise AdvisoryUnavailable(f"network error ({type(e).__name__})") from e

        if not response.is_success:
            raise AdvisoryUnavailable(f"upstream returned HTTP {response.status_code}")

        try:
            return response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AdvisoryUnavailable("malformed completion envelope") from e

    async def analyze(self, report: SymptomReport, symptoms: str) -> TriageResult:
        """
        Run advisory analysis for one report.

        Args:
            report: Original request.
            symptoms: Sanitized symptom text.

        Returns:
            Validated ``TriageResult`` tagged ``ai``.

        Raises:
            AdvisoryUnavailable: On any failure, including the overall timeout.
        """
        if not self.is_configured:
            raise AdvisoryUnavailable("advisory service not configured")

        context = build_context(report, symptoms, self._settings.ADVISORY_MAX_CONTEXT_CHARS)

        try:
            raw = await asyncio.wait_for(
                self._complete(context),
                timeout=self._settings.ADVISORY_TIMEOUT
            )
        except asyncio.TimeoutError as e:
            raise AdvisoryUnavailable("request timed out") from e

        verdict = parse_advisory_response(raw)
        if isinstance(verdict, InvalidAdvisory):
            raise AdvisoryUnavailable(f"invalid response: {verdict.reason}")

        return verdict.result
