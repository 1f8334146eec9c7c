"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the database is unreachable or the
      ledger runtime has not been hydrated (readiness)
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from crowdfund.infrastructure import database
from crowdfund.services import ledger_runtime

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "crowdfund-ledger", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check():
    """Readiness probe — database connectivity and ledger runtime."""
    db_ok = await database.db_manager.health_check() if database.db_manager else False
    runtime_ok = ledger_runtime.ledger_runtime is not None
    if not (db_ok and runtime_ok):
        reason = "database_unavailable" if not db_ok else "ledger_not_loaded"
        logger.warning(f"Readiness check failed: {reason}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": reason},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy", "ledger": "loaded"},
    }
