"""
Catalog API: Health Check Route
=================================

What:  GET /health for container health checks and load balancer probes.
How:   For the SQL store, runs SELECT 1 on the engine. The in-memory store
       has nothing external to probe.

    healthy    store usable                 HTTP 200
    unhealthy  database unreachable         HTTP 503
"""

import logging
import time

from fastapi import APIRouter, Request, Response
from sqlalchemy.exc import SQLAlchemyError

from catalog import __version__
from catalog.database import ping
from catalog.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    store = request.app.state.store
    overall = "healthy"
    db_status = "not_applicable"

    if store.engine is not None:
        db_status = "connected"
        try:
            await ping(store.engine)
        except (SQLAlchemyError, OSError) as e:
            db_status = "disconnected"
            overall = "unhealthy"
            response.status_code = 503
            logger.warning("Health check: database unreachable: %s", e)

    return HealthResponse(
        status=overall,
        version=__version__,
        store=store.backend,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
