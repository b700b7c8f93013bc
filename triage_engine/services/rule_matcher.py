"""
Rule-Based Matcher

Deterministic fallback analysis: searches symptom text against the pattern
rule table and ranks the resulting condition candidates. Pure function of
(text, table); identical input always yields identical output.
"""

import html
from dataclasses import dataclass
from typing import Optional

from triage_engine.core.logging import get_logger
from triage_engine.schemas.triage import (
    ConditionCandidate,
    ConfidenceTier,
    PatternRule,
)
from triage_engine.services.pattern_rules import PatternRuleTable, get_rule_table

logger = get_logger(__name__)

MAX_CONDITIONS = 3
GENERIC_LIKELIHOOD = 50

GENERIC_CANDIDATE = ConditionCandidate(
    name="Symptoms requiring medical evaluation",
    likelihood=GENERIC_LIKELIHOOD,
    recommendation=(
        "Your symptoms should be evaluated by a healthcare provider for proper "
        "diagnosis and treatment."
    ),
    reasoning=(
        "Symptoms did not match specific patterns in our database, indicating "
        "need for professional medical evaluation."
    ),
    confidence_level=ConfidenceTier.LOW,
    sources=["General medical evaluation guidelines"],
    self_care="Rest, stay hydrated, monitor symptoms, and seek medical care for proper evaluation.",
)


@dataclass(frozen=True)
class MatchOutcome:
    """Ranked candidates plus every rule that fired."""
    candidates: tuple[ConditionCandidate, ...]
    fired_rules: tuple[PatternRule, ...]

    @property
    def is_generic(self) -> bool:
        return not self.fired_rules


def normalize_text(text: str) -> str:
    """Lowercase, unescaped form used for keyword search."""
    return html.unescape(text).lower().strip()


def candidates_for_rule(rule: PatternRule) -> list[ConditionCandidate]:
    return [
        ConditionCandidate(
            name=name,
            likelihood=rule.likelihood,
            recommendation=rule.recommendation,
            reasoning=rule.reasoning,
            confidence_level=rule.confidence_level,
            sources=list(rule.sources),
            self_care=rule.self_care,
        )
        for name in rule.conditions
    ]


class RuleMatcher:
    """Matches sanitized symptom text against a pattern rule table."""

    def __init__(self, table: Optional[PatternRuleTable] = None):
        self._table = table

    @property
    def table(self) -> PatternRuleTable:
        if self._table is None:
            self._table = get_rule_table()
        return self._table

    def fired_rules(self, text: str) -> list[PatternRule]:
        """Rules that fire on ``text``, in declaration order."""
        normalized = normalize_text(text)
        return [rule for rule in self.table.rules if rule.fires_on(normalized)]

    def match(self, text: str) -> MatchOutcome:
        """
        Rank condition candidates for sanitized symptom text.

        Args:
            text: Sanitized symptom description.

        Returns:
            Up to ``MAX_CONDITIONS`` candidates sorted by descending
            likelihood (declaration order breaks ties), or the single generic
            candidate when no rule fires.
        """
        fired = self.fired_rules(text)

        if not fired:
            logger.debug("No pattern rules fired; using generic candidate")
            return MatchOutcome(candidates=(GENERIC_CANDIDATE,), fired_rules=())

        candidates: list[ConditionCandidate] = []
        for rule in fired:
            candidates.extend(candidates_for_rule(rule))

        # sorted() is stable, so equal likelihoods keep declaration order
        ranked = sorted(candidates, key=lambda c: c.likelihood, reverse=True)

        logger.debug(
            "Pattern rules fired",
            extra={"rule_ids": [rule.id for rule in fired]}
        )
        return MatchOutcome(
            candidates=tuple(ranked[:MAX_CONDITIONS]),
            fired_rules=tuple(fired),
        )
