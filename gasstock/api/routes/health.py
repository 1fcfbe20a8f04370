"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from gasstock.api.dependencies import get_container
from gasstock.application.dto.responses import HealthResponse
from gasstock.application.services import ServiceContainer
from gasstock.config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_container),
) -> HealthResponse:
    """
    Service status, uptime and database reachability.

    A failing database reports ``degraded`` rather than an error status.
    """
    database = "ok"
    try:
        async with container.pool.acquire() as conn:
            await conn.execute("SELECT 1")
    except Exception as e:
        logger.warning("health_database_unreachable", error=str(e))
        database = "unavailable"

    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=container.settings.app_version,
        uptime_seconds=time.time() - _start_time,
        database=database,
    )
