"""Health check endpoints for load balancers and monitoring."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import get_services
from app.services.lifecycle import AppServices
from app.store.realtime import RedisChangeBroker
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Lightweight health check for load balancer (no DB/Redis check)."""
    return {
        "status": "ok",
        "service": "AgriDesk",
        "timestamp": utcnow().isoformat(),
        "environment": settings.environment,
    }


@router.get("/health/ready")
async def readiness_check(services: AppServices = Depends(get_services)):
    """Readiness check covering the database and the change broker.

    Returns 200 only if every dependency is reachable, 503 otherwise.
    """
    checks = {
        "service": "ok",
        "database": "unknown",
        "realtime": "unknown",
        "cache_entries": len(services.cache),
    }
    healthy = True

    try:
        await services.store.ping()
        checks["database"] = "ok"
    except Exception as e:
        logger.warning(f"Readiness: database unreachable: {e}")
        checks["database"] = f"error: {str(e)[:100]}"
        healthy = False

    broker = services.store.broker
    if isinstance(broker, RedisChangeBroker):
        try:
            await broker.ping()
            checks["realtime"] = "ok"
        except Exception as e:
            logger.warning(f"Readiness: redis unreachable: {e}")
            checks["realtime"] = f"error: {str(e)[:100]}"
            healthy = False
    else:
        checks["realtime"] = "local"

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": "AgriDesk",
            "checks": checks,
            "timestamp": utcnow().isoformat(),
        },
    )
