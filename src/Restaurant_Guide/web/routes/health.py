"""Health route: storage provider status."""

import logging

from fastapi import APIRouter, Request

from Restaurant_Guide.models.health import HealthStatus
from Restaurant_Guide.web.deps import GuideContext

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/health")
async def health_check(request: Request, context: GuideContext) -> HealthStatus:
    """Report whether the database answers and the schema was created at startup."""
    try:
        available = await context.ping()
    except Exception:
        logger.warning("Database health check failed", exc_info=True)
        available = False
    schema_ready = bool(getattr(request.app.state, "schema_ready", False))
    return HealthStatus(
        status="ok" if available and schema_ready else "degraded",
        provider=context.options.kind.value,
        schema_ready=schema_ready,
        database_available=available,
    )
