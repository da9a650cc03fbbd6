"""Health check endpoints for monitoring application status."""

import time

from fastapi import APIRouter, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from shortlinks.core.config import settings
from shortlinks.db.session import db_dependency

router = APIRouter(tags=["health"])


async def _database_status(db: AsyncSession) -> dict:
    start_time = time.perf_counter()
    try:
        result = await db.execute(text("SELECT 1"))
        healthy = result.scalar_one() == 1
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    latency = round((time.perf_counter() - start_time) * 1000, 2)
    return {"status": "healthy" if healthy else "unhealthy", "latency_ms": latency}


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
    response_description="Health status of all system components"
)
async def health_check(db: AsyncSession = db_dependency):
    """Check health of all system components."""
    database = await _database_status(db)
    return {
        "status": "healthy" if database["status"] == "healthy" else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "hash_algorithm": settings.SHORTLINK_HASH_ALGORITHM,
        "timestamp": time.time(),
        "components": {"database": database},
    }


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness probe",
    response_description="Application readiness status"
)
async def readiness_probe(db: AsyncSession = db_dependency):
    """Check if application is ready to handle requests."""
    database = await _database_status(db)
    components_status = {"api": True, "database": database["status"] == "healthy"}
    return {
        "ready": all(components_status.values()),
        "components": components_status
    }


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    response_description="Application liveness status"
)
async def liveness_probe():
    """Simple check that application is running."""
    return {"alive": True}
