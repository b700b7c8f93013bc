"""
Symptom Triage Engine - Main Application Entry Point

FastAPI service that turns a symptom description plus interview answers
into an advisory triage level, ranked candidate conditions and next steps.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from triage_engine.api import api_router
from triage_engine.config import get_settings
from triage_engine.core.exceptions import InternalComputationError
from triage_engine.core.logging import get_logger, setup_logging
from triage_engine.core.rate_limit import limiter
from triage_engine.schemas.common import ErrorResponse
from triage_engine.services.pattern_rules import get_rule_table
from triage_engine.services.triage_analyzer import close_triage_analyzer, get_triage_analyzer

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()

    logger.info(
        f"Starting {settings.APP_NAME} v{settings.APP_VERSION}",
        extra={"environment": "production" if not settings.DEBUG else "development"}
    )

    # A corrupt rule table must stop the service from starting
    try:
        table = get_rule_table()
    except InternalComputationError:
        logger.critical("Pattern rule table failed to load")
        raise
    logger.info(f"Pattern rules loaded: {len(table.rules)} rules (v{table.version})")

    await get_triage_analyzer()
    if not settings.advisory_enabled:
        logger.warning("No advisory API key configured; all analyses will be rule-based")

    logger.info(
        f"Application started on {settings.HOST}:{settings.PORT}",
        extra={"debug": settings.DEBUG}
    )

    yield

    logger.info("Shutting down application...")

    await close_triage_analyzer()

    logger.info("Application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Advisory symptom triage service (not a diagnostic system)",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )

    # Add rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_ORIGIN],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining"]
    )

    # Add request timing middleware
    @app.middleware("http")
    async def add_timing_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Handle all unhandled exceptions.

        Returns sanitized error response without sensitive information.
        """
        logger.error(
            f"Unhandled exception: {type(exc).__name__}",
            extra={
                "path": request.url.path,
                "method": request.method
            },
            exc_info=exc
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="InternalServerError",
                message="An unexpected error occurred"
            ).model_dump(mode="json")
        )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """Root endpoint with service information."""
        return {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs" if settings.DEBUG else "Disabled in production",
            "health": "/api/v1/health",
            "disclaimer": "Advisory guidance only, not a medical diagnosis"
        }

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "triage_engine.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=1 if settings.DEBUG else 4,
        log_level="debug" if settings.DEBUG else "info"
    )
