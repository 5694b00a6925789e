"""Health Routes — is the admin API up, and can it dispatch?

Invariants:
    - GET /health/ answers 200 while the process runs, without touching the DB
    - GET /health/ready answers 503 until the DB answers and the handler
      registry is frozen with at least one module

Design Decisions:
    - Readiness checks the registry as well as the DB: a process that failed
      to register its modules would answer every command with INVALID_MODULE
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_registry
from app.core.module_registry import ModuleRegistry
from app.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {
        "status": "healthy",
        "service": "legal-admin-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(registry: ModuleRegistry = Depends(get_registry)):
    """Ready when the DB answers and handlers are registered."""
    db_ok = await database.db_manager.health_check() if database.db_manager else False
    modules = [m.value for m in registry.modules()]
    registry_ok = registry.frozen and bool(modules)
    checks = {
        "database": "healthy" if db_ok else "unavailable",
        "registry": "healthy" if registry_ok else "not_frozen",
    }
    if not (db_ok and registry_ok):
        logger.warning("Readiness check failed", extra={"checks": checks})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks, "modules": modules}
