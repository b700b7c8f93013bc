"""
Prometheus metrics for triage analysis, exposed at /api/v1/metrics.
"""

from prometheus_client import Counter, Histogram

ANALYSES_TOTAL = Counter(
    "triage_analyses_total",
    "Completed triage analyses",
    ["method", "triage_level"]
)

ADVISORY_FAILURES_TOTAL = Counter(
    "triage_advisory_failures_total",
    "Advisory path failures that triggered rule-based fallback",
    ["reason"]
)

REJECTED_INPUTS_TOTAL = Counter(
    "triage_rejected_inputs_total",
    "Symptom reports rejected before analysis",
    ["error"]
)

ANALYSIS_LATENCY = Histogram(
    "triage_analysis_seconds",
    "End-to-end analysis latency",
    ["method"],
    buckets=(0.005, 0.05, 0.25, 1.0, 2.5, 5.0, 10.0, 15.0, 30.0)
)


def failure_label(reason: str) -> str:
    """Collapse a free-form failure reason into a low-cardinality label."""
    lowered = reason.lower()
    if lowered.startswith("invalid") or lowered.startswith("malformed"):
        return "invalid_response"
    if "not configured" in lowered:
        return "not_configured"
    if "timed out" in lowered:
        return "timeout"
    if "network" in lowered:
        return "network"
    if "http" in lowered:
        return "http_status"
    return "invalid_response"
