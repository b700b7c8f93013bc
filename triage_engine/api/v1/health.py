"""
Health check and monitoring endpoints.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from triage_engine.config import get_settings
from triage_engine.schemas.common import HealthResponse
from triage_engine.services.pattern_rules import get_rule_table

router = APIRouter()

# Track startup time
_startup_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Check service health and rule table availability.

    No authentication required for health checks.
    """
    settings = get_settings()
    table = get_rule_table()

    return HealthResponse(
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        advisory_configured=settings.advisory_enabled,
        rule_database_version=table.version,
        rule_count=len(table.rules),
        uptime_seconds=time.time() - _startup_time
    )


@router.get("/metrics")
async def prometheus_metrics():
    """
    Expose Prometheus metrics.

    No authentication for metrics endpoint.
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
