"""
consent_daemon

API service for consent2api, a FastAPI-based daemon that decodes TCF v1 consent
strings and answers purpose and vendor consent queries over HTTP.

Modules:
    - config: Logging, FastAPI and server configuration from the environment
    - main: FastAPI application setup and server entry point
    - metrics: Prometheus metrics
    - middleware: HTTP metrics middleware
    - models: Pydantic models for API responses
"""

from ._version import VERSION
from .config import configure_logger
from .main import app, create_app

__all__ = [
    "VERSION",
    "app",
    "create_app",
    "configure_logger",
]
