"""
consent_decoder.decode

Core decoding logic for IAB TCF v1 consent strings.

Classes:
    - ConsentRecord: decoded consent string with purpose/vendor queries
    - BitfieldVendorConsent: vendor section stored as one bit per vendor ID
    - RangeVendorConsent: vendor section stored as a default plus range exceptions
    - VendorEncoding: which of the two vendor encodings a string uses
    - ConsentDecodeError: raised when a string is not valid URL-safe base64

Functions:
    - decode_consent: decode a consent string into a ConsentRecord
    - decode_header: extract all fixed-offset header fields from a BitReader
    - read_range_entries: read the variable-length range-entry list

Notes:
    - The header layout lives in HEADER_FIELDS; every fixed offset used by the decoder
      is defined there or in the vendor-section constants below it.
    - Decoding never validates field values against each other. Short input simply
      reads as unset bits, so truncated strings deny rather than fail.
"""

import base64
import binascii
import logging
import re
from datetime import datetime, timezone
from enum import IntEnum
from typing import Callable, Iterable, NamedTuple, Optional, Tuple

from common.models import ConsentSummary

from .bits import BitReader
from .ranges import RangeEntry, find_vendor_in_ranges

logger = logging.getLogger(__name__)

PURPOSE_COUNT = 24
VENDOR_ID_SIZE = 16

_URLSAFE_BASE64 = re.compile(r"[A-Za-z0-9_-]*")


class ConsentDecodeError(ValueError):
    """The consent string could not be decoded into raw bytes."""


class VendorEncoding(IntEnum):
    BITFIELD = 0
    RANGE = 1

    @property
    def label(self) -> str:
        return self.name.lower()


def _uint(reader: BitReader, offset: int, width: int) -> int:
    return reader.get_uint(offset, width)


def _timestamp(reader: BitReader, offset: int, width: int) -> datetime:
    # stored as deciseconds since the epoch
    return datetime.fromtimestamp(reader.get_uint(offset, width) // 10, tz=timezone.utc)


def _letters(reader: BitReader, offset: int, width: int) -> str:
    return reader.get_letters(offset, width)


def _purposes(reader: BitReader, offset: int, width: int) -> Tuple[bool, ...]:
    return tuple(reader.get_bit(offset + i) for i in range(PURPOSE_COUNT))


def _encoding(reader: BitReader, offset: int, width: int) -> VendorEncoding:
    return VendorEncoding(reader.get_uint(offset, width))


class HeaderField(NamedTuple):
    name: str
    offset: int
    width: int
    decode: Callable[[BitReader, int, int], object]


HEADER_FIELDS: Tuple[HeaderField, ...] = (
    HeaderField("version", 0, 6, _uint),
    HeaderField("created", 6, 36, _timestamp),
    HeaderField("last_updated", 42, 36, _timestamp),
    HeaderField("cmp_id", 78, 12, _uint),
    HeaderField("cmp_version", 90, 12, _uint),
    HeaderField("consent_screen_id", 102, 6, _uint),
    HeaderField("consent_language", 108, 12, _letters),
    HeaderField("vendor_list_version", 120, 12, _uint),
    HeaderField("purposes_allowed", 132, PURPOSE_COUNT, _purposes),
    HeaderField("max_vendor_id", 156, 16, _uint),
    HeaderField("vendor_encoding", 172, 1, _encoding),
)

# Vendor section, directly after the encoding-type bit.
VENDOR_BITFIELD_OFFSET = 173
DEFAULT_CONSENT_OFFSET = 173
NUM_ENTRIES_OFFSET = 174
NUM_ENTRIES_SIZE = 12
RANGE_ENTRY_OFFSET = 186


def decode_header(reader: BitReader) -> dict:
    """
    Decode every field in HEADER_FIELDS, in order.

    Returns:
      dict mapping field name -> decoded value
    """
    return {field.name: field.decode(reader, field.offset, field.width) for field in HEADER_FIELDS}


def read_range_entries(reader: BitReader, start: int, count: int) -> Tuple[RangeEntry, ...]:
    """
    Read ``count`` range entries beginning at bit ``start``.

    Each entry is a range flag followed by one 16-bit vendor ID (flag clear) or a
    16-bit start and end ID (flag set). Entries are returned in encoded order.
    """
    entries = []
    offset = start
    for _ in range(count):
        is_range = reader.get_bit(offset)
        offset += 1
        if is_range:
            start_vendor_id = reader.get_uint(offset, VENDOR_ID_SIZE)
            offset += VENDOR_ID_SIZE
            end_vendor_id = reader.get_uint(offset, VENDOR_ID_SIZE)
            offset += VENDOR_ID_SIZE
            entries.append(RangeEntry.from_range(start_vendor_id, end_vendor_id))
        else:
            entries.append(RangeEntry(reader.get_uint(offset, VENDOR_ID_SIZE)))
            offset += VENDOR_ID_SIZE
    return tuple(entries)


class BitfieldVendorConsent:
    """Vendor consents stored as one bit per vendor ID, queried straight from the bits."""

    encoding = VendorEncoding.BITFIELD

    def __init__(self, reader: BitReader):
        self._reader = reader

    def is_allowed(self, vendor_id: int) -> bool:
        # IDs below 1 would land in the header bits
        if vendor_id < 1:
            return False
        return self._reader.get_bit(VENDOR_BITFIELD_OFFSET + vendor_id - 1)


class RangeVendorConsent:
    """
    Vendor consents stored as a default plus a list of exceptions.

    A vendor found in the range list gets the opposite of ``default_consent``.
    """

    encoding = VendorEncoding.RANGE

    def __init__(self, default_consent: bool, entries: Tuple[RangeEntry, ...]):
        self.default_consent = default_consent
        self.entries = entries

    @classmethod
    def from_reader(cls, reader: BitReader) -> "RangeVendorConsent":
        default_consent = reader.get_bit(DEFAULT_CONSENT_OFFSET)
        num_entries = reader.get_uint(NUM_ENTRIES_OFFSET, NUM_ENTRIES_SIZE)
        entries = read_range_entries(reader, RANGE_ENTRY_OFFSET, num_entries)
        return cls(default_consent, entries)

    def is_listed(self, vendor_id: int) -> bool:
        return find_vendor_in_ranges(self.entries, vendor_id)

    def is_allowed(self, vendor_id: int) -> bool:
        if vendor_id < 1:
            return False
        return self.is_listed(vendor_id) != self.default_consent


def _decode_base64(consent_string: str) -> bytes:
    if not isinstance(consent_string, str):
        raise ConsentDecodeError(
            f"Consent string must be str, got {type(consent_string).__name__}"
        )
    if not _URLSAFE_BASE64.fullmatch(consent_string):
        raise ConsentDecodeError("Consent string is not unpadded URL-safe base64")
    padded = consent_string + "=" * (-len(consent_string) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except binascii.Error as e:
        raise ConsentDecodeError(f"Invalid consent string: {e}") from e


class ConsentRecord:
    """
    A decoded TCF v1 consent string.

    Construction decodes the whole string; the record is read-only afterwards.
    Every query is total and answers ``False`` for anything the string does not
    explicitly allow.

    Raises:
        ConsentDecodeError: if ``consent_string`` is not unpadded URL-safe base64.
    """

    def __init__(self, consent_string: str):
        self._bits = BitReader(_decode_base64(consent_string))
        self._consent_string = consent_string
        self._header = decode_header(self._bits)

        if self._header["vendor_encoding"] == VendorEncoding.RANGE:
            self._vendor_consent = RangeVendorConsent.from_reader(self._bits)
        else:
            self._vendor_consent = BitfieldVendorConsent(self._bits)

        logger.debug(
            f"Decoded consent string: version={self.version} cmp_id={self.cmp_id} "
            f"language={self.consent_language} encoding={self.vendor_encoding.label} "
            f"range_entries={len(self.range_entries)}"
        )

    # ── Accessors ────────────────────────────────────────────────────────────
    @property
    def consent_string(self) -> str:
        return self._consent_string

    @property
    def version(self) -> int:
        return self._header["version"]

    @property
    def created(self) -> datetime:
        return self._header["created"]

    @property
    def last_updated(self) -> datetime:
        return self._header["last_updated"]

    @property
    def cmp_id(self) -> int:
        return self._header["cmp_id"]

    @property
    def cmp_version(self) -> int:
        return self._header["cmp_version"]

    @property
    def consent_screen_id(self) -> int:
        return self._header["consent_screen_id"]

    @property
    def consent_language(self) -> str:
        return self._header["consent_language"]

    @property
    def vendor_list_version(self) -> int:
        return self._header["vendor_list_version"]

    @property
    def purposes_allowed(self) -> Tuple[bool, ...]:
        return self._header["purposes_allowed"]

    @property
    def max_vendor_id(self) -> int:
        return self._header["max_vendor_id"]

    @property
    def vendor_encoding(self) -> VendorEncoding:
        return self._header["vendor_encoding"]

    @property
    def vendor_consent(self):
        """The active vendor section: BitfieldVendorConsent or RangeVendorConsent."""
        return self._vendor_consent

    @property
    def default_consent(self) -> Optional[bool]:
        if isinstance(self._vendor_consent, RangeVendorConsent):
            return self._vendor_consent.default_consent
        return None

    @property
    def range_entries(self) -> Tuple[RangeEntry, ...]:
        if isinstance(self._vendor_consent, RangeVendorConsent):
            return self._vendor_consent.entries
        return ()

    # ── Queries ──────────────────────────────────────────────────────────────
    def is_purpose_allowed(self, purpose_id: int) -> bool:
        """Purpose IDs start at 1; anything outside 1..24 is not allowed."""
        if purpose_id < 1 or purpose_id > PURPOSE_COUNT:
            return False
        return self.purposes_allowed[purpose_id - 1]

    def are_purposes_allowed(self, purpose_ids: Iterable[int]) -> bool:
        return all(self.is_purpose_allowed(p) for p in purpose_ids)

    def is_vendor_allowed(self, vendor_id: int) -> bool:
        return self._vendor_consent.is_allowed(vendor_id)

    def present_in_range_list(self, vendor_id: int) -> bool:
        """Whether ``vendor_id`` is found in the range list; always False for bitfields."""
        if isinstance(self._vendor_consent, RangeVendorConsent):
            return self._vendor_consent.is_listed(vendor_id)
        return False

    def allowed_purposes(self) -> list:
        return [i + 1 for i, allowed in enumerate(self.purposes_allowed) if allowed]

    def allowed_vendors(self) -> list:
        """Vendor IDs in 1..max_vendor_id that are allowed."""
        return [v for v in range(1, self.max_vendor_id + 1) if self.is_vendor_allowed(v)]

    def to_summary(self) -> ConsentSummary:
        return ConsentSummary(
            consent_string=self.consent_string,
            version=self.version,
            created=self.created,
            last_updated=self.last_updated,
            cmp_id=self.cmp_id,
            cmp_version=self.cmp_version,
            consent_screen_id=self.consent_screen_id,
            consent_language=self.consent_language,
            vendor_list_version=self.vendor_list_version,
            max_vendor_id=self.max_vendor_id,
            vendor_encoding=self.vendor_encoding.label,
            allowed_purposes=self.allowed_purposes(),
            default_consent=self.default_consent,
            range_entries=[entry.to_model() for entry in self.range_entries],
        )

    def __eq__(self, other):
        if not isinstance(other, ConsentRecord):
            return NotImplemented
        return self._consent_string == other._consent_string

    def __hash__(self):
        return hash(self._consent_string)

    def __repr__(self):
        return f"ConsentRecord({self._consent_string!r})"


def decode_consent(consent_string: str) -> ConsentRecord:
    """
    Decode a consent string.

    Raises:
        ConsentDecodeError: if the string is not unpadded URL-safe base64.
    """
    return ConsentRecord(consent_string)
