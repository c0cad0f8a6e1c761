"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the registry fails its consistency check,
      or if persistence is enabled and the database is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      load balancer
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from onsregistry.api.dependencies import get_registry
from onsregistry.config import get_settings
from onsregistry.core.errors import RegistryCorruptionError
from onsregistry.services.ons_registry import OnsRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "ons-registry-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(registry: OnsRegistry = Depends(get_registry)):
    """Readiness probe — registry integrity plus database when persisting."""
    try:
        registry.check_consistency()
    except RegistryCorruptionError as e:
        logger.error(f"Registry consistency check failed: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "registry_inconsistent"},
        )

    checks = {"registry": "healthy"}
    if get_settings().persist_snapshots:
        from onsregistry.infrastructure.database import db_manager

        db_ok = await db_manager.health_check() if db_manager else False
        if not db_ok:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "status": "not_ready",
                    "reason": "database_unavailable",
                },
            )
        checks["database"] = "healthy"
    return {"status": "ready", "checks": checks}
