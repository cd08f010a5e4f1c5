"""
Manages API routes for liveness, server status and metrics.

This module provides FastAPI endpoints for:
- A liveness probe.
- Basic server status (version, uptime).
- Prometheus metrics exposition.
"""

import time

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from consent_daemon._version import VERSION
from consent_daemon.models import ServerStatus

api_router_status = APIRouter()  # Router for health, status and metrics endpoints

SERVER_START_TIME = time.time()


@api_router_status.get("/healthz")
async def healthz():
    """Liveness probe."""
    return {"status": "ok"}


@api_router_status.get("/status/server", response_model=ServerStatus)
async def get_server_status():
    """Returns basic server status information."""
    return ServerStatus(
        status="ok",
        version=VERSION,
        server_start_time_unix=SERVER_START_TIME,
        uptime_seconds=time.time() - SERVER_START_TIME,
    )


@api_router_status.get("/metrics")
def metrics():
    """Prometheus metrics endpoint."""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
