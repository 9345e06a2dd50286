"""
Vendor Assessment Service - Main Application
============================================

FastAPI application for vendor security questionnaires, scoring and
reviewer validation.

Version: 0.1.0
"""

import uuid
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from services.vendor_assessment import __version__
from services.vendor_assessment.dependencies import get_notifier
from services.vendor_assessment.errors import VendorAssessmentError
from services.vendor_assessment.routes import assessments, auth, portal, vendors
from shared.config import settings
from shared.database.postgres import PostgresClient
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse


# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="vendor-assessment",
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "vendor_assessment_starting",
        environment=settings.environment.value,
        port=settings.ports.vendor_assessment,
    )

    # Startup
    try:
        PostgresClient.get_engine()
        logger.info("postgres_connected")
    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    # Unreachable SMTP only degrades notifications
    await get_notifier().verify()

    yield

    # Shutdown
    logger.info("vendor_assessment_shutting_down")
    await PostgresClient.close()


# Create FastAPI application
app = FastAPI(
    title="VendorShield Vendor Assessment Service",
    description="Vendor security questionnaires, compliance scoring and review",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind a request id and path to every log line of the request."""
    clear_context()
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    bind_context(request_id=request_id, path=request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and its database.
    """
    components: dict[str, dict[str, Any]] = {
        "postgres": await PostgresClient.health_check(),
    }

    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="vendor-assessment",
        version=__version__,
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "VendorShield Vendor Assessment Service",
        "version": __version__,
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 404, 503)
}

app.include_router(
    auth.router,
    prefix="/api/v1/auth",
    tags=["Auth"],
)

app.include_router(
    vendors.router,
    prefix="/api/v1/vendors",
    tags=["Vendors"],
    responses=ERROR_RESPONSES,
)

app.include_router(
    assessments.router,
    prefix="/api/v1/assessments",
    tags=["Assessments"],
    responses=ERROR_RESPONSES,
)

app.include_router(
    portal.questionnaire_router,
    prefix="/api/v1/questionnaire",
    tags=["Questionnaire"],
)

app.include_router(
    portal.router,
    prefix="/api/v1/portal",
    tags=["Vendor Portal"],
    responses=ERROR_RESPONSES,
)


# ============================================================================
# Error Handlers
# ============================================================================


def _error_response(status_code: int, error: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, status_code=status_code).model_dump(mode="json"),
    )


@app.exception_handler(VendorAssessmentError)
async def service_exception_handler(request: Request, exc: VendorAssessmentError) -> JSONResponse:
    """Handle service errors."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "service_exception",
        status_code=exc.status_code,
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return _error_response(exc.status_code, str(exc))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    response = _error_response(exc.status_code, exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.vendor_assessment.main:app",
        host="0.0.0.0",
        port=settings.ports.vendor_assessment,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
