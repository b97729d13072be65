"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from orderdesk import __version__
from orderdesk.application.dto.responses import HealthResponse, ProviderHealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and reports mirror writes still waiting for
    reconciliation.
    """
    from orderdesk.infrastructure.storage.sqlite import get_connection_pool, get_mirror_outbox

    db_status = ProviderHealthResponse(name="sqlite", available=False)
    pending: int | None = None

    try:
        pool = await get_connection_pool()
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=await pool.ping(),
        )
        outbox = await get_mirror_outbox()
        pending = len(await outbox.list_pending(limit=1000))

    except Exception as e:
        db_status.error = str(e)

    if not db_status.available:
        status_str = "unhealthy"
    elif pending:
        status_str = "degraded"
    else:
        status_str = "healthy"

    return HealthResponse(
        status=status_str,
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
        pending_mirror_writes=pending,
    )
