"""
Service-to-service authentication for the triage API.

End users authenticate with the calling backend; that backend presents one
shared key in ``X-API-Key``. Rejections are logged with the request path and
client address only. Key material never reaches the logs.
"""

import secrets
from typing import Optional

from fastapi import HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from triage_engine.config import get_settings
from triage_engine.core.logging import get_logger

logger = get_logger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def _client_host(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _reject(request: Request, status_code: int, detail: str, reason: str) -> HTTPException:
    logger.warning(
        "Rejected triage API request",
        extra={
            "reason": reason,
            "path": request.url.path,
            "client": _client_host(request)
        }
    )
    headers = {"WWW-Authenticate": "ApiKey"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=detail, headers=headers)


async def verify_api_key(
    request: Request,
    api_key: Optional[str] = Security(api_key_header)
) -> str:
    """
    Check the calling backend's key.

    Raises:
        HTTPException: 500 when the service has no key configured (a
            misdeployment, never an open service), 401 when the header is
            missing, 403 when the key does not match.
    """
    expected = get_settings().TRIAGE_SERVICE_API_KEY

    if not expected:
        logger.error("TRIAGE_SERVICE_API_KEY is not set; refusing all triage requests")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API key not configured on server"
        )

    if not api_key:
        raise _reject(request, status.HTTP_401_UNAUTHORIZED, "API key required", "missing_key")

    if not secrets.compare_digest(api_key.encode("utf-8"), expected.encode("utf-8")):
        raise _reject(request, status.HTTP_403_FORBIDDEN, "Invalid API key", "wrong_key")

    return api_key
