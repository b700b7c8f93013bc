"""
FastAPI dependency injection utilities.
"""

from triage_engine.core.auth import verify_api_key
from triage_engine.services.pattern_rules import PatternRuleTable, get_rule_table
from triage_engine.services.triage_analyzer import (
    TriageAnalyzer,
    close_triage_analyzer,
    get_triage_analyzer,
)


def get_pattern_rules() -> PatternRuleTable:
    """Get the loaded pattern rule table."""
    return get_rule_table()


# Re-export for convenience
__all__ = [
    "verify_api_key",
    "TriageAnalyzer",
    "get_triage_analyzer",
    "close_triage_analyzer",
    "get_pattern_rules",
]
