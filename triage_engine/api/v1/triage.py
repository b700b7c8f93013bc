"""
Symptom triage endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.requests import Request

from triage_engine.core.auth import verify_api_key
from triage_engine.core.exceptions import (
    ContentRejected,
    InternalComputationError,
    ValidationError,
)
from triage_engine.core.logging import get_logger
from triage_engine.core.rate_limit import get_rate_limit_string, limiter
from triage_engine.dependencies import get_pattern_rules, get_triage_analyzer
from triage_engine.schemas.common import RuleDatabaseResponse, RuleSummary
from triage_engine.schemas.triage import SymptomReport, TriageResult
from triage_engine.services.pattern_rules import PatternRuleTable
from triage_engine.services.triage_analyzer import TriageAnalyzer

logger = get_logger(__name__)

router = APIRouter(prefix="/triage", tags=["triage"])


@router.post(
    "/analyze",
    response_model=TriageResult,
    dependencies=[Depends(verify_api_key)],
    summary="Analyze Symptoms",
    description="""
    Triage a free-text symptom description plus interview answers.

    - Advisory language-model analysis when configured
    - Deterministic rule-based fallback on any advisory failure
    - Triage level never below what pain, fever or matched patterns imply

    Advisory output only; not a medical diagnosis.
    """
)
@limiter.limit(get_rate_limit_string)
async def analyze_symptoms(
    request: Request,
    body: SymptomReport,
    analyzer: TriageAnalyzer = Depends(get_triage_analyzer)
) -> TriageResult:
    """
    Analyze one symptom report.

    Returns:
        Triage level, top conditions and recommended actions.
    """
    try:
        return await analyzer.analyze(body)

    except (ValidationError, ContentRejected) as e:
        logger.info(f"Symptom report rejected: {type(e).__name__}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    except InternalComputationError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while analyzing symptoms. Please try again."
        )


@router.get(
    "/rules",
    response_model=RuleDatabaseResponse,
    dependencies=[Depends(verify_api_key)]
)
async def list_rules(table: PatternRuleTable = Depends(get_pattern_rules)):
    """
    Describe the loaded pattern rule table.

    Keywords are not exposed.
    """
    return RuleDatabaseResponse(
        version=table.version,
        total=len(table.rules),
        emergency_rules=table.emergency_rule_ids,
        rules=[
            RuleSummary(
                id=rule.id,
                conditions=list(rule.conditions),
                triage_level=rule.triage_level.value,
                likelihood=rule.likelihood,
                emergency=rule.emergency
            )
            for rule in table.rules
        ]
    )
