"""Symptom Triage Engine: advisory symptom triage with rule-based fallback."""

__version__ = "1.0.0"
