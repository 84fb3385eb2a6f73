"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter

from situational_trends.config import settings

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """
    Health check endpoint for load balancers and monitoring.

    Reports whether the hosted data store is configured.
    """
    checks = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {},
    }

    if settings.supabase_url:
        checks["checks"]["data_store"] = "configured"
    else:
        checks["checks"]["data_store"] = "not configured"
        checks["status"] = "degraded"

    return checks


@router.get("/ready")
async def readiness_check() -> dict:
    """Readiness check."""
    return {"status": "ready"}
