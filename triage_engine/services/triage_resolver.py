"""
Triage Level Resolver

Merges rule severity with the structured interview signals into one triage
level. Escalation only: the result is never below the baseline.

Precedence, strongest first:
    1. a fired rule tagged ``emergency``        -> high
    2. pain level >= 8                          -> high
    3. most severe base level of fired rules (or the supplied baseline)
    4. pain level >= 6 or fever on a ``low``    -> medium
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from triage_engine.schemas.triage import InterviewAnswers, PatternRule, TriageLevel

SEVERE_PAIN_THRESHOLD = 8
MODERATE_PAIN_THRESHOLD = 6

TRIAGE_ACTIONS = {
    TriageLevel.HIGH: (
        "Seek emergency medical attention immediately. Do not delay care for "
        "potentially serious symptoms."
    ),
    TriageLevel.MEDIUM: (
        "Schedule an appointment with your healthcare provider within 24-48 "
        "hours. Monitor symptoms closely."
    ),
    TriageLevel.LOW: (
        "Practice self-care and monitor symptoms. Contact healthcare provider "
        "if symptoms worsen or persist."
    ),
}


@dataclass(frozen=True)
class TriageResolution:
    level: TriageLevel
    baseline: TriageLevel
    reasons: list[str] = field(default_factory=list)

    @property
    def escalated(self) -> bool:
        return self.level != self.baseline


def actions_for_level(level: TriageLevel) -> str:
    """Fixed recommended-actions text for a triage level."""
    return TRIAGE_ACTIONS[level]


def resolve_triage_level(
    rules: Iterable[PatternRule],
    answers: InterviewAnswers,
    baseline: Optional[TriageLevel] = None
) -> TriageResolution:
    """
    Resolve the final triage level.

    Args:
        rules: Pattern rules that fired on the symptom text.
        answers: Structured interview answers.
        baseline: Level already assigned by another path (the advisory
            model). Fired rules still apply on top of it.

    Returns:
        Resolution with the final level and the reasons for any escalation.
    """
    rules = list(rules)
    rule_level = TriageLevel.most_severe(rule.triage_level for rule in rules)
    start = TriageLevel.most_severe([rule_level, baseline or TriageLevel.LOW])

    level = start
    reasons: list[str] = []
    pain = answers.pain_level or 0

    if pain >= SEVERE_PAIN_THRESHOLD:
        if level != TriageLevel.HIGH:
            reasons.append(f"Severe pain reported ({pain}/10)")
        level = TriageLevel.HIGH
    elif pain >= MODERATE_PAIN_THRESHOLD and level == TriageLevel.LOW:
        level = TriageLevel.MEDIUM
        reasons.append(f"Moderate pain reported ({pain}/10)")

    if answers.fever and level == TriageLevel.LOW:
        level = TriageLevel.MEDIUM
        reasons.append("Fever reported")

    emergency_rules = [rule.id for rule in rules if rule.emergency]
    if emergency_rules:
        if level != TriageLevel.HIGH:
            reasons.append(f"Emergency pattern matched ({', '.join(emergency_rules)})")
        level = TriageLevel.HIGH

    return TriageResolution(level=level, baseline=start, reasons=reasons)
