"""
Main entrypoint for the Feature Admin API.

This module assembles the FastAPI application, sets up logging,
registers the exception handlers that turn every failure into the
standard response envelope and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``::

    uvicorn feature_admin_api.app.main:app --reload

The database is migrated and seeded once at startup; a failure there
aborts startup.
"""

import logging
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import FeatureError
from .core.logging_config import setup_logging
from .schemas.feature import ApiResponse, HealthStatus

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


def envelope_response(status_code: int, message: str, errors: Optional[List[str]] = None) -> JSONResponse:
    body = ApiResponse(success=False, message=message, errors=errors or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, mode="json"))


def _error_details(exc: Exception) -> Optional[List[str]]:
    if not settings.detailed_errors:
        return None
    return ["".join(traceback.format_exception(type(exc), exc, exc.__traceback__))]


async def feature_error_handler(request: Request, exc: FeatureError) -> JSONResponse:
    """Expected domain errors keep their message; internal ones are masked in production."""
    if exc.status_code >= 500:
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.message)
        message = exc.message if settings.detailed_errors else GENERIC_ERROR_MESSAGE
        return envelope_response(exc.status_code, message, _error_details(exc))
    return envelope_response(exc.status_code, exc.message, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return envelope_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return envelope_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last‑resort handler: log with traceback and map the exception class to a status."""
    logger.error("An unhandled exception occurred", exc_info=exc)
    if isinstance(exc, PermissionError):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, ValueError):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = str(exc) if settings.detailed_errors else GENERIC_ERROR_MESSAGE
    return envelope_response(status_code, message, _error_details(exc))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Apply migrations and seed data.  Exceptions propagate so the
    # server refuses to start on a broken database.
    init_db()
    logger.info("%s %s started", settings.project_name, settings.api_version)
    yield


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that imports below can
    # safely log messages.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)

    app.add_exception_handler(FeatureError, feature_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    # PermissionError and ValueError are registered explicitly so they are
    # answered by the routing layer instead of the server error middleware.
    app.add_exception_handler(PermissionError, unhandled_exception_handler)
    app.add_exception_handler(ValueError, unhandled_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health", response_model=ApiResponse[HealthStatus], tags=["health"])
    async def health() -> ApiResponse[HealthStatus]:
        return ApiResponse(
            success=True,
            message="Service is healthy",
            data=HealthStatus(
                status="Healthy",
                timestamp=datetime.now(timezone.utc),
                service=settings.project_name,
                version=settings.api_version,
            ),
        )

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
