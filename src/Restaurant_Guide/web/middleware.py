"""Exception handlers and request logging middleware.

Maps domain exceptions from ``Restaurant_Guide.utils.exceptions`` to
appropriate HTTP status codes. Provides request logging middleware that logs
method, path, status code, and duration at INFO level.
"""

import logging
import time

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from Restaurant_Guide.utils.exceptions import (
    DataAccessError,
    EntityNotFoundError,
    MultipleEntitiesFoundError,
    ReferentialIntegrityError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Domain exception -> HTTP status handlers
# ---------------------------------------------------------------------------


async def _entity_not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
    """Map EntityNotFoundError to HTTP 404."""
    logger.warning("Entity not found: %s", exc)
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _multiple_entities_handler(
    request: Request, exc: MultipleEntitiesFoundError
) -> JSONResponse:
    """Map MultipleEntitiesFoundError to HTTP 409."""
    logger.warning("Ambiguous lookup: %s", exc)
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def _integrity_handler(request: Request, exc: ReferentialIntegrityError) -> JSONResponse:
    """Map ReferentialIntegrityError to HTTP 409."""
    logger.warning("Integrity violation: %s", exc)
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def _data_access_error_handler(request: Request, exc: DataAccessError) -> JSONResponse:
    """Map base DataAccessError to HTTP 500 (catch-all for data errors)."""
    logger.error("Data access error: %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """Register all domain exception handlers on the FastAPI application.

    More specific exception types must be registered before their base classes
    so FastAPI matches them correctly.
    """
    app.add_exception_handler(EntityNotFoundError, _entity_not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(MultipleEntitiesFoundError, _multiple_entities_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ReferentialIntegrityError, _integrity_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DataAccessError, _data_access_error_handler)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with method, path, status code, and duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process request, log timing information, and return response."""
        start_time = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start_time) * 1000

        if request.url.path == "/api/health":
            log = logger.debug
        else:
            log = logger.info
        log(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )

        return response
