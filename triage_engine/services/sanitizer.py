"""
Symptom text validation and sanitization.

Runs before either analysis path. Knows nothing about triage.
"""

import html
import re
from typing import Any, Optional

from triage_engine.config import get_settings
from triage_engine.core.exceptions import ContentRejected, ValidationError
from triage_engine.core.logging import get_logger

logger = get_logger(__name__)


# Script injection and executable markup
DISALLOWED_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
]


def validate_symptoms(
    text: Any,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None
) -> str:
    """
    Validate raw symptom text and return its sanitized form.

    Args:
        text: Raw symptom description from the caller.
        min_length: Minimum trimmed length (defaults to settings).
        max_length: Maximum raw length (defaults to settings).

    Returns:
        Trimmed text with HTML-significant characters escaped.

    Raises:
        ValidationError: If text is missing, not a string, or out of bounds.
        ContentRejected: If text matches a disallowed pattern.
    """
    settings = get_settings()
    min_length = settings.SYMPTOMS_MIN_LENGTH if min_length is None else min_length
    max_length = settings.SYMPTOMS_MAX_LENGTH if max_length is None else max_length

    if text is None or not isinstance(text, str):
        raise ValidationError("Valid symptoms description is required")

    stripped = text.strip()
    if len(stripped) < min_length:
        raise ValidationError(
            f"Symptoms description must be at least {min_length} characters"
        )

    if len(text) > max_length:
        raise ValidationError("Symptoms description too long")

    for pattern in DISALLOWED_PATTERNS:
        if pattern.search(text):
            logger.warning(
                "Symptom text rejected",
                extra={"pattern": pattern.pattern, "text_length": len(text)}
            )
            raise ContentRejected("Invalid content detected in symptoms")

    return html.escape(stripped, quote=True)
