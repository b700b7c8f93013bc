"""
Symptom Triage Analyzer

Orchestrates one analysis:

    Start -> AdvisoryAttempted -> AdvisorySucceeded -> Done
                               -> AdvisoryFailed -> RuleBasedExecuted -> Done

Validation failures end the call at ``Start``. Any advisory failure falls
back to the rule matcher and resolver; both branches return the same
``TriageResult`` shape. The analyzer keeps no per-call state, so a single
instance serves concurrent requests.
"""

import time
from enum import Enum
from typing import Optional

from triage_engine.core.exceptions import (
    AdvisoryUnavailable,
    ContentRejected,
    InternalComputationError,
    TriageError,
    ValidationError,
)
from triage_engine.core.logging import get_logger
from triage_engine.core.metrics import (
    ADVISORY_FAILURES_TOTAL,
    ANALYSES_TOTAL,
    ANALYSIS_LATENCY,
    REJECTED_INPUTS_TOTAL,
    failure_label,
)
from triage_engine.schemas.triage import (
    AnalysisMethod,
    InterviewAnswers,
    SymptomReport,
    TriageResult,
)
from triage_engine.services.advisory import AdvisoryClient
from triage_engine.services.rule_matcher import RuleMatcher
from triage_engine.services.sanitizer import validate_symptoms
from triage_engine.services.triage_resolver import actions_for_level, resolve_triage_level

logger = get_logger(__name__)

RULE_MATCH_CONFIDENCE = 0.7
GENERIC_MATCH_CONFIDENCE = 0.5

RULE_LIMITATIONS_NOTE = (
    "This rule-based analysis uses common symptom patterns and may not capture "
    "complex or rare conditions. Consider individual medical history and seek "
    "professional evaluation."
)
GENERIC_LIMITATIONS_NOTE = (
    "No specific symptom patterns identified, so this fallback analysis has "
    "reduced precision. Professional medical evaluation recommended for "
    "accurate diagnosis."
)


class AnalysisState(str, Enum):
    START = "start"
    ADVISORY_ATTEMPTED = "advisory_attempted"
    ADVISORY_SUCCEEDED = "advisory_succeeded"
    ADVISORY_FAILED = "advisory_failed"
    RULE_BASED_EXECUTED = "rule_based_executed"
    DONE = "done"


def _describe_answers(answers: InterviewAnswers) -> tuple[str, str, str]:
    pain = f"{answers.pain_level}/10" if answers.pain_level is not None else "unknown"
    fever = "yes" if answers.fever else "no"
    duration = answers.duration.value if answers.duration else "not specified"
    return pain, fever, duration


class TriageAnalyzer:
    """
    Symptom triage engine.

    Features:
    - Input validation and sanitization
    - Advisory language-model analysis with strict response validation
    - Deterministic rule-based fallback
    - Escalation-only triage resolution across both paths
    """

    def __init__(
        self,
        advisory: Optional[AdvisoryClient] = None,
        matcher: Optional[RuleMatcher] = None
    ):
        self._advisory = advisory or AdvisoryClient()
        self._matcher = matcher or RuleMatcher()
        self._logger = logger

    @property
    def matcher(self) -> RuleMatcher:
        return self._matcher

    @property
    def advisory(self) -> AdvisoryClient:
        return self._advisory

    async def analyze(self, report: SymptomReport) -> TriageResult:
        """
        Analyze one symptom report.

        Args:
            report: Symptom text, interview answers and optional demographics.

        Returns:
            Triage result tagged with the path that produced it.

        Raises:
            ValidationError: Symptom text missing or out of bounds.
            ContentRejected: Symptom text matched a disallowed pattern.
            InternalComputationError: Rule-based analysis failed unexpectedly.
        """
        started = time.perf_counter()

        try:
            symptoms = validate_symptoms(report.symptoms)
        except (ValidationError, ContentRejected) as e:
            REJECTED_INPUTS_TOTAL.labels(error=type(e).__name__).inc()
            raise

        self._logger.info(
            "Analyzing symptom report",
            extra={
                "state": AnalysisState.ADVISORY_ATTEMPTED.value,
                "text_length": len(symptoms),
                "profile_type": report.profile_data.profile_type.value if report.profile_data else None
            }
        )

        try:
            result = await self._advisory.analyze(report, symptoms)
            result = self._apply_safety_floor(result, symptoms, report.interview_responses)
            state = AnalysisState.ADVISORY_SUCCEEDED
        except AdvisoryUnavailable as e:
            ADVISORY_FAILURES_TOTAL.labels(reason=failure_label(e.reason)).inc()
            self._logger.warning(
                "Advisory analysis failed, falling back to rule-based",
                extra={"state": AnalysisState.ADVISORY_FAILED.value, "reason": e.reason}
            )
            result = self.analyze_rule_based(symptoms, report.interview_responses)
            state = AnalysisState.RULE_BASED_EXECUTED

        elapsed = time.perf_counter() - started
        ANALYSES_TOTAL.labels(
            method=result.analysis_method.value,
            triage_level=result.triage_level.value
        ).inc()
        ANALYSIS_LATENCY.labels(method=result.analysis_method.value).observe(elapsed)

        self._logger.info(
            "Analysis completed",
            extra={
                "state": AnalysisState.DONE.value,
                "via": state.value,
                "triage_level": result.triage_level.value,
                "conditions": len(result.conditions),
                "analysis_method": result.analysis_method.value,
                "elapsed_ms": round(elapsed * 1000, 1)
            }
        )
        return result

    def analyze_rule_based(self, symptoms: str, answers: InterviewAnswers) -> TriageResult:
        """
        Deterministic analysis over sanitized text.

        Raises:
            InternalComputationError: On any unexpected failure; details are
                logged, never returned.
        """
        try:
            outcome = self._matcher.match(symptoms)
            resolution = resolve_triage_level(outcome.fired_rules, answers)
            pain, fever, duration = _describe_answers(answers)

            if outcome.is_generic:
                reasoning = (
                    f"Generic assessment based on reported symptoms and pain level ({pain}). "
                    "No specific condition patterns identified."
                )
                confidence = GENERIC_MATCH_CONFIDENCE
                limitations = GENERIC_LIMITATIONS_NOTE
            else:
                reasoning = (
                    "Rule-based analysis considered symptom severity, duration, and associated "
                    f"factors. Triage level determined by pain level ({pain}), fever presence "
                    f"({fever}), and symptom duration ({duration})."
                )
                confidence = RULE_MATCH_CONFIDENCE
                limitations = RULE_LIMITATIONS_NOTE

            if resolution.reasons:
                reasoning += f" Escalated: {'; '.join(resolution.reasons)}."

            return TriageResult(
                triage_level=resolution.level,
                conditions=list(outcome.candidates),
                actions=actions_for_level(resolution.level),
                analysis_method=AnalysisMethod.RULE_BASED,
                confidence_score=confidence,
                reasoning=reasoning,
                limitations_note=limitations,
            )
        except TriageError:
            raise
        except Exception as e:
            self._logger.error(f"Rule-based analysis failed: {type(e).__name__}", exc_info=True)
            raise InternalComputationError() from e

    def _apply_safety_floor(
        self,
        result: TriageResult,
        symptoms: str,
        answers: InterviewAnswers
    ) -> TriageResult:
        """Raise an advisory level that is below what the input signals imply."""
        resolution = resolve_triage_level(
            self._matcher.fired_rules(symptoms),
            answers,
            baseline=result.triage_level
        )
        if resolution.level == result.triage_level:
            return result

        self._logger.info(
            "Escalating advisory triage level",
            extra={
                "from_level": result.triage_level.value,
                "to_level": resolution.level.value
            }
        )
        note = f"Triage level raised from {result.triage_level.value} to {resolution.level.value}"
        if resolution.reasons:
            note += f" ({'; '.join(resolution.reasons)})"
        else:
            note += " (matched symptom pattern)"
        reasoning = f"{result.reasoning} {note}." if result.reasoning else f"{note}."

        return result.model_copy(update={
            "triage_level": resolution.level,
            "actions": actions_for_level(resolution.level),
            "reasoning": reasoning,
        })

    async def close(self) -> None:
        await self._advisory.close()


# Singleton instance
_analyzer_instance: Optional[TriageAnalyzer] = None


async def get_triage_analyzer() -> TriageAnalyzer:
    """Get or create TriageAnalyzer instance."""
    global _analyzer_instance
    if _analyzer_instance is None:
        _analyzer_instance = TriageAnalyzer()
    return _analyzer_instance


async def close_triage_analyzer() -> None:
    """Close the shared analyzer's HTTP resources on shutdown."""
    global _analyzer_instance
    if _analyzer_instance is not None:
        await _analyzer_instance.close()
        _analyzer_instance = None
