"""
Health check endpoints
"""

from fastapi import APIRouter

from impostor import __version__
from impostor.core.database import health_check as db_health_check
from impostor.core.redis_client import redis_health_check
from impostor.schemas.common import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness plus database and change feed status"""
    database = await db_health_check()
    redis = await redis_health_check()
    return HealthResponse(
        status="healthy" if database.get("status") == "healthy" else "degraded",
        service="impostor",
        version=__version__,
        database=database,
        redis=redis,
    )
