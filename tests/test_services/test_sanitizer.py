"""
Tests for symptom text validation and sanitization.
"""

import pytest

from triage_engine.core.exceptions import ContentRejected, ValidationError
from triage_engine.services.sanitizer import validate_symptoms


@pytest.mark.parametrize("text", [None, 42, ["chest pain"], "bad", "", "   short   "])
def test_rejects_missing_or_short_text(text):
    """Test missing, non-string and too-short text fails validation."""
    with pytest.raises(ValidationError):
        validate_symptoms(text)


def test_minimum_length_is_measured_after_trimming():
    """Test padding does not satisfy the minimum length."""
    with pytest.raises(ValidationError):
        validate_symptoms("    cough     ")

    assert validate_symptoms("  dry cough!  ") == "dry cough!"


def test_rejects_text_over_maximum_length():
    """Test overly long descriptions are rejected."""
    with pytest.raises(ValidationError, match="too long"):
        validate_symptoms("headache " * 250)

    assert validate_symptoms("a" * 2000)


@pytest.mark.parametrize("text", [
    "<script>alert('x')</script> headache",
    "<SCRIPT src=x> stomach ache",
    "click javascript:alert(1) for pain",
    "I have a rash <img onerror=alert(1)>",
    "pain onload = steal() since monday",
    "see data:text/html;base64,AAAA please",
])
def test_rejects_script_and_markup(text):
    """Test injection patterns raise ContentRejected."""
    with pytest.raises(ContentRejected):
        validate_symptoms(text)


def test_escapes_html_significant_characters():
    """Test output is trimmed and HTML-escaped."""
    result = validate_symptoms('  My kid\'s "tummy" hurts & pain < 5  ')

    assert result == "My kid&#x27;s &quot;tummy&quot; hurts &amp; pain &lt; 5"


def test_existing_entities_are_escaped_again():
    """Test entity-looking input is escaped, not decoded."""
    assert validate_symptoms("pain score &lt; 5 today") == "pain score &amp;lt; 5 today"
    assert validate_symptoms("pain is a > b today") == "pain is a &gt; b today"


def test_explicit_bounds_override_settings():
    """Test callers can pass their own bounds."""
    assert validate_symptoms("sore", min_length=3) == "sore"

    with pytest.raises(ValidationError):
        validate_symptoms("sore throat today", max_length=5)
