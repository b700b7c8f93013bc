"""Services for the Symptom Triage Engine."""

from triage_engine.services.advisory import AdvisoryClient, parse_advisory_response
from triage_engine.services.pattern_rules import PatternRuleTable, get_rule_table
from triage_engine.services.rule_matcher import RuleMatcher
from triage_engine.services.sanitizer import validate_symptoms
from triage_engine.services.triage_analyzer import TriageAnalyzer, get_triage_analyzer
from triage_engine.services.triage_resolver import resolve_triage_level

__all__ = [
    "AdvisoryClient",
    "parse_advisory_response",
    "PatternRuleTable",
    "get_rule_table",
    "RuleMatcher",
    "validate_symptoms",
    "TriageAnalyzer",
    "get_triage_analyzer",
    "resolve_triage_level",
]
