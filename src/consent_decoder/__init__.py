"""
consent_decoder
===============

Library for decoding IAB TCF v1 consent strings and querying the consents they carry.

The consent string is URL-safe, unpadded base64 over a bit-packed record. This package
turns it into a read-only ConsentRecord that answers purpose and vendor queries.

Classes:
    - ConsentRecord: decoded consent string with purpose/vendor queries
    - BitReader: MSB-first bit-addressed reads over raw bytes
    - RangeEntry: vendor ID or inclusive vendor ID range

Functions:
    - decode_consent: decode a consent string into a ConsentRecord
    - find_vendor_in_ranges: range-list lookup used by range-encoded strings
"""

from .bits import BitReader
from .decode import (
    BitfieldVendorConsent,
    ConsentDecodeError,
    ConsentRecord,
    RangeVendorConsent,
    VendorEncoding,
    decode_consent,
)
from .ranges import RangeEntry, find_vendor_in_ranges

__all__ = [
    "BitReader",
    "BitfieldVendorConsent",
    "ConsentDecodeError",
    "ConsentRecord",
    "RangeEntry",
    "RangeVendorConsent",
    "VendorEncoding",
    "decode_consent",
    "find_vendor_in_ranges",
]
