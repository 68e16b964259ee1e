"""
Songs API — Health Check Route
================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Asks the injected SongStore for a lightweight reachability probe.

Status levels:
    - healthy:   store reachable
    - unhealthy: store unreachable or its client was never built
"""

import logging
import time

from fastapi import APIRouter, Depends

from songs_api import __version__
from songs_api.schemas.song import HealthResponse
from songs_api.services.song_store import SongStore, get_song_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: SongStore = Depends(get_song_store)) -> HealthResponse:
    """Report store reachability and uptime."""
    store_status = "reachable"
    overall = "healthy"

    try:
        if not await store.health_check():
            store_status = "unreachable"
            overall = "unhealthy"
    except Exception as e:
        store_status = "unreachable"
        overall = "unhealthy"
        logger.warning("Health check: store probe raised: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        store=store_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
