"""
Pattern Rule Database

Loads the versioned keyword → condition table used by the rule-based
matcher. The table is data, not code: the packaged copy lives in
``triage_engine/data/pattern_rules.json`` and ``PATTERN_RULES_PATH`` can
point at an externally edited replacement with the same schema.
"""

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaValidationError

from triage_engine.config import get_settings
from triage_engine.core.exceptions import InternalComputationError
from triage_engine.core.logging import get_logger
from triage_engine.schemas.triage import PatternRule

logger = get_logger(__name__)


class PatternRuleTable(BaseModel):
    """Versioned, read-only collection of pattern rules."""
    version: str = Field(..., min_length=1)
    rules: tuple[PatternRule, ...] = Field(..., min_length=1)

    class Config:
        frozen = True

    @property
    def emergency_rule_ids(self) -> list[str]:
        return [rule.id for rule in self.rules if rule.emergency]


def parse_rule_table(raw: str, source: str = "<memory>") -> PatternRuleTable:
    """
    Parse and validate a JSON rule table.

    Raises:
        InternalComputationError: If the table is not valid JSON, violates
            the rule schema, or reuses a rule id.
    """
    try:
        table = PatternRuleTable.model_validate(json.loads(raw))
    except (json.JSONDecodeError, SchemaValidationError) as e:
        logger.error(
            "Pattern rule table is corrupt",
            extra={"source": source, "error": str(e)}
        )
        raise InternalComputationError() from e

    ids = [rule.id for rule in table.rules]
    if len(ids) != len(set(ids)):
        logger.error("Pattern rule table has duplicate rule ids", extra={"source": source})
        raise InternalComputationError()

    return table


@lru_cache()
def load_rule_table(path: Optional[str] = None) -> PatternRuleTable:
    """
    Load the rule table from ``path`` or the packaged default.

    Cached per path; the table is immutable once loaded.
    """
    if path:
        source = path
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot read pattern rule table: {e}", extra={"source": source})
            raise InternalComputationError() from e
    else:
        source = "triage_engine/data/pattern_rules.json"
        raw = (
            resources.files("triage_engine")
            .joinpath("data")
            .joinpath("pattern_rules.json")
            .read_text(encoding="utf-8")
        )

    table = parse_rule_table(raw, source=source)
    logger.info(
        "Pattern rule table loaded",
        extra={
            "source": source,
            "version": table.version,
            "rules": len(table.rules),
            "emergency_rules": len(table.emergency_rule_ids)
        }
    )
    return table


def get_rule_table() -> PatternRuleTable:
    """Rule table selected by settings."""
    return load_rule_table(get_settings().PATTERN_RULES_PATH)
