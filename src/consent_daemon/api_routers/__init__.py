"""
api_routers

This package contains FastAPI APIRouter modules that define the API endpoints
for the consent2api application.

Routers:
    - consent: Endpoints for decoding and querying consent strings
    - status: Liveness, server status and metrics endpoints
"""

from .consent import api_router_consent
from .status import api_router_status

__all__ = ["api_router_consent", "api_router_status"]
