"""
common.models

Shared Pydantic models for use across consent2api modules.

RangeEntryModel:
    Serializable form of a vendor range entry (single ID or inclusive interval).

ConsentSummary:
    Flat, JSON-friendly view of a decoded consent record: header fields, the allowed
    purposes, and the vendor consent section in whichever encoding it was stored.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class RangeEntryModel(BaseModel):
    """
    RangeEntryModel

    Attributes:
        min_vendor_id (int): First vendor ID covered by the entry.
        max_vendor_id (int): Last vendor ID covered by the entry (equal to min for a single ID).
    """

    min_vendor_id: int
    max_vendor_id: int


class ConsentSummary(BaseModel):
    """
    ConsentSummary

    Represents a decoded TCF v1 consent string.

    Attributes:
        consent_string (str): The consent string exactly as received.
        version (int): Format version tag.
        created (datetime): When the consent record was created (UTC).
        last_updated (datetime): When the consent record was last updated (UTC).
        cmp_id (int): Consent management platform ID.
        cmp_version (int): Consent management platform version.
        consent_screen_id (int): Screen of the CMP the consent was collected on.
        consent_language (str): Two-letter language code.
        vendor_list_version (int): Vendor list version the consent refers to.
        max_vendor_id (int): Declared highest vendor ID.
        vendor_encoding (str): 'bitfield' or 'range'.
        allowed_purposes (List[int]): 1-based IDs of the allowed purposes.
        default_consent (Optional[bool]): Fallback consent, range encoding only.
        range_entries (List[RangeEntryModel]): Exception list, range encoding only.
    """

    consent_string: str
    version: int
    created: datetime
    last_updated: datetime
    cmp_id: int
    cmp_version: int
    consent_screen_id: int
    consent_language: str
    vendor_list_version: int
    max_vendor_id: int
    vendor_encoding: str
    allowed_purposes: List[int] = Field(default_factory=list)
    default_consent: Optional[bool] = None
    range_entries: List[RangeEntryModel] = Field(default_factory=list)
