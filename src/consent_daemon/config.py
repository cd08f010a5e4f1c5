"""
Handles application configuration for the consent2api daemon.

This module is responsible for:
- Configuring logging for the application.
- Providing FastAPI application settings (title, description, root_path).
- Providing Uvicorn server settings (host, port, log level).
- Providing decoding limits applied to incoming consent strings.

All settings come from environment variables with sensible defaults.
"""

import logging
import os

import coloredlogs

# ── Logging Configuration ──────────────────────────────────────────────────
# This logger is for messages originating from the config.py module itself.
module_logger = logging.getLogger(__name__)

DEFAULT_MAX_CONSENT_LENGTH = 4096


def configure_logger():
    root_logger = logging.getLogger()
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()

    log_level_int = getattr(logging, log_level_str, None)
    if not isinstance(log_level_int, int):
        module_logger.warning(f"Invalid LOG_LEVEL '{log_level_str}'. Defaulting to INFO.")
        log_level_int = logging.INFO

    log_format = "%(asctime)s %(name)s[%(process)d] %(levelname)s %(message)s"

    # Handlers filter by their own level; the root logger lets everything through.
    root_logger.setLevel(logging.DEBUG)

    # Drop existing handlers so repeated calls don't duplicate console output.
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    coloredlogs.install(
        level=log_level_int,
        fmt=log_format,
        logger=root_logger,
        reconfigure=True,
    )

    return root_logger


# ── FastAPI Configuration ──────────────────────────────────────────────────
def get_fastapi_config():
    """
    Retrieves FastAPI application settings from environment variables.

    Returns:
        dict: A dictionary containing title, server_description, and root_path
              for the FastAPI application.
    """
    return {
        "title": os.getenv("CONSENT2API_TITLE", "consent2api"),
        "server_description": os.getenv(
            "CONSENT2API_SERVER_DESCRIPTION", "TCF v1 consent string API"
        ),
        "root_path": os.getenv("CONSENT2API_ROOT_PATH", ""),
    }


# ── Server Configuration ───────────────────────────────────────────────────
def get_server_config():
    """
    Retrieves Uvicorn server settings from environment variables.

    Returns:
        dict: A dictionary containing 'host', 'port' (int) and 'log_level' (lowercase).
    """
    return {
        "host": os.getenv("CONSENT2API_HOST", "0.0.0.0"),
        "port": int(os.getenv("CONSENT2API_PORT", "8000")),
        "log_level": os.getenv("CONSENT2API_LOG_LEVEL", "info").lower(),
    }


# ── Decoding Limits ────────────────────────────────────────────────────────
def get_max_consent_length():
    """
    Returns the longest consent string the API accepts.

    Falls back to DEFAULT_MAX_CONSENT_LENGTH when CONSENT2API_MAX_CONSENT_LENGTH
    is unset, not an integer, or not positive.
    """
    raw = os.getenv("CONSENT2API_MAX_CONSENT_LENGTH")
    if raw is None:
        return DEFAULT_MAX_CONSENT_LENGTH
    try:
        value = int(raw)
    except ValueError:
        module_logger.warning(
            f"Invalid CONSENT2API_MAX_CONSENT_LENGTH '{raw}'. "
            f"Defaulting to {DEFAULT_MAX_CONSENT_LENGTH}."
        )
        return DEFAULT_MAX_CONSENT_LENGTH
    if value <= 0:
        module_logger.warning(
            f"CONSENT2API_MAX_CONSENT_LENGTH must be positive, got {value}. "
            f"Defaulting to {DEFAULT_MAX_CONSENT_LENGTH}."
        )
        return DEFAULT_MAX_CONSENT_LENGTH
    return value
