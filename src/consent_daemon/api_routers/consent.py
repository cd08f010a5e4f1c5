"""
Defines FastAPI APIRouter for decoding and querying TCF v1 consent strings.

This module includes routes for:
- Decoding a consent string into a summary of all its fields.
- Checking whether one or more purposes are allowed.
- Checking whether a vendor is allowed.

Every route takes the consent string as the `consent` query parameter. Strings that
cannot be decoded are rejected with HTTP 400.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query

from common.models import ConsentSummary
from consent_daemon.config import get_max_consent_length
from consent_daemon.metrics import (
    DECODE_ERRORS,
    DECODE_LATENCY,
    DECODES,
    VENDOR_ENCODING_COUNTER,
)
from consent_daemon.models import PurposeCheckResponse, VendorCheckResponse
from consent_decoder import ConsentDecodeError, ConsentRecord, decode_consent

logger = logging.getLogger(__name__)

api_router_consent = APIRouter()  # FastAPI router for consent string endpoints


def decode_or_400(consent: str) -> ConsentRecord:
    """
    Decode ``consent`` for a request, recording metrics.

    Raises:
        HTTPException: 400 if the string is too long or not valid URL-safe base64.
    """
    max_length = get_max_consent_length()
    if len(consent) > max_length:
        DECODE_ERRORS.inc()
        logger.warning(f"Rejected consent string of length {len(consent)} (max {max_length})")
        raise HTTPException(
            status_code=400,
            detail=f"Consent string longer than {max_length} characters.",
        )

    try:
        with DECODE_LATENCY.time():
            record = decode_consent(consent)
    except ConsentDecodeError as e:
        DECODE_ERRORS.inc()
        logger.warning(f"Could not decode consent string of length {len(consent)}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    DECODES.inc()
    VENDOR_ENCODING_COUNTER.labels(encoding=record.vendor_encoding.label).inc()
    return record


@api_router_consent.get("/consent", response_model=ConsentSummary)
async def get_consent(consent: str = Query(..., description="URL-safe base64 consent string")):
    """
    Decode a consent string and return all of its fields.

    Args:
        consent: The consent string to decode.

    Returns:
        The decoded ConsentSummary.
    """
    return decode_or_400(consent).to_summary()


@api_router_consent.get("/consent/purposes", response_model=PurposeCheckResponse)
async def check_purposes(
    consent: str = Query(..., description="URL-safe base64 consent string"),
    ids: List[int] = Query(default=[], description="1-based purpose IDs; repeat for several"),
):
    """
    Check whether every purpose in `ids` is allowed.

    An empty `ids` list is allowed; IDs outside 1..24 are never allowed.
    """
    record = decode_or_400(consent)
    return PurposeCheckResponse(
        purpose_ids=ids,
        allowed=record.are_purposes_allowed(ids),
        details={p: record.is_purpose_allowed(p) for p in ids},
    )


@api_router_consent.get("/consent/vendors/{vendor_id}", response_model=VendorCheckResponse)
async def check_vendor(
    vendor_id: int,
    consent: str = Query(..., description="URL-safe base64 consent string"),
):
    """
    Check whether a vendor is allowed.

    For range-encoded strings the response also reports the default consent and
    whether the vendor was found in the exception list.
    """
    record = decode_or_400(consent)
    listed = None
    if record.default_consent is not None:
        listed = record.present_in_range_list(vendor_id)
    return VendorCheckResponse(
        vendor_id=vendor_id,
        allowed=record.is_vendor_allowed(vendor_id),
        vendor_encoding=record.vendor_encoding.label,
        default_consent=record.default_consent,
        listed=listed,
    )
