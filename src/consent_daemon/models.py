"""
Defines Pydantic models for API request/response validation and serialization.

Models:
    - PurposeCheckResponse: Outcome of a purpose consent check
    - VendorCheckResponse: Outcome of a vendor consent check
    - ServerStatus: Basic server status information
    - ConsentSummary: (re-exported from common.models)
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from common.models import ConsentSummary


class PurposeCheckResponse(BaseModel):
    """Result of checking one or more purposes against a consent string."""

    purpose_ids: List[int]
    allowed: bool = Field(
        ..., description="True only if every requested purpose is allowed (vacuously true)."
    )
    details: Dict[int, bool] = Field(
        default_factory=dict, description="Per-purpose result, keyed by purpose ID."
    )


class VendorCheckResponse(BaseModel):
    """Result of checking a single vendor against a consent string."""

    vendor_id: int
    allowed: bool
    vendor_encoding: str
    default_consent: Optional[bool] = Field(
        None, description="Fallback consent for unlisted vendors (range encoding only)."
    )
    listed: Optional[bool] = Field(
        None, description="Whether the vendor was found in the range list (range encoding only)."
    )


class ServerStatus(BaseModel):
    """Basic server status information."""

    status: str
    version: str
    server_start_time_unix: float
    uptime_seconds: float


__all__ = ["ConsentSummary", "PurposeCheckResponse", "ServerStatus", "VendorCheckResponse"]
