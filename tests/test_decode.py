from datetime import datetime, timezone

import pytest

from consent_decoder import (
    BitfieldVendorConsent,
    ConsentDecodeError,
    ConsentRecord,
    RangeEntry,
    RangeVendorConsent,
    VendorEncoding,
    decode_consent,
)
from consent_decoder.decode import HEADER_FIELDS, decode_header
from tests.vectors import BITFIELD_CONSENT, EMPTY_CONSENT, RANGE_CONSENT


@pytest.fixture
def bitfield_record():
    return decode_consent(BITFIELD_CONSENT)


@pytest.fixture
def range_record():
    return decode_consent(RANGE_CONSENT)


# ── Header ───────────────────────────────────────────────────────────────────


def test_bitfield_header(bitfield_record):
    assert bitfield_record.version == 1
    assert bitfield_record.cmp_id == 14
    assert bitfield_record.cmp_version == 22
    assert bitfield_record.consent_screen_id == 30
    assert bitfield_record.consent_language == "FR"
    assert bitfield_record.vendor_list_version == 0
    assert bitfield_record.max_vendor_id == 10
    assert bitfield_record.vendor_encoding is VendorEncoding.BITFIELD


def test_timestamps_are_utc_seconds(bitfield_record):
    # 23:56:25 in Europe/Berlin (CEST)
    assert bitfield_record.created == datetime(2017, 4, 17, 21, 56, 25, tzinfo=timezone.utc)
    assert bitfield_record.last_updated == datetime(2018, 4, 17, 21, 56, 25, tzinfo=timezone.utc)


def test_range_header(range_record):
    assert range_record.version == 1
    assert range_record.cmp_id == 10
    assert range_record.cmp_version == 22
    assert range_record.consent_screen_id == 23
    assert range_record.consent_language == "EN"
    assert range_record.vendor_list_version == 245
    assert range_record.max_vendor_id == 5024
    assert range_record.vendor_encoding is VendorEncoding.RANGE
    assert range_record.created == datetime(2017, 4, 17, 21, 56, 25, tzinfo=timezone.utc)
    assert range_record.last_updated == datetime(2018, 4, 17, 21, 56, 25, tzinfo=timezone.utc)


def test_empty_consent_header():
    record = decode_consent(EMPTY_CONSENT)
    assert record.version == 1
    assert record.cmp_id == 1
    assert record.cmp_version == 1
    assert record.consent_language == "PL"
    assert record.vendor_list_version == 19
    assert record.created == datetime(2018, 5, 16, 13, 1, 18, tzinfo=timezone.utc)
    assert record.last_updated == record.created


def test_header_fields_are_contiguous():
    offset = 0
    for field in HEADER_FIELDS:
        assert field.offset == offset, field.name
        offset += field.width
    assert offset == 173


def test_decode_header_returns_every_field(bitfield_record):
    header = decode_header(bitfield_record._bits)
    assert list(header) == [field.name for field in HEADER_FIELDS]


# ── Purposes ─────────────────────────────────────────────────────────────────


def test_bitfield_purposes(bitfield_record):
    assert bitfield_record.is_purpose_allowed(2)
    assert bitfield_record.is_purpose_allowed(21)
    assert not bitfield_record.is_purpose_allowed(1)
    assert bitfield_record.are_purposes_allowed([2, 21])
    assert not bitfield_record.are_purposes_allowed([1, 2])
    assert bitfield_record.allowed_purposes() == [2, 3, 20, 21, 23]


def test_range_purposes(range_record):
    assert range_record.are_purposes_allowed([4, 24])
    for purpose_id in (0, 1, 25):
        assert not range_record.is_purpose_allowed(purpose_id)
    assert range_record.allowed_purposes() == [4, 5, 6, 7, 9, 14, 17, 24]


@pytest.mark.parametrize("consent", [BITFIELD_CONSENT, RANGE_CONSENT, EMPTY_CONSENT])
def test_purpose_bounds(consent):
    record = decode_consent(consent)
    assert len(record.purposes_allowed) == 24
    assert not record.is_purpose_allowed(0)
    assert not record.is_purpose_allowed(25)
    assert not record.is_purpose_allowed(-3)
    assert record.are_purposes_allowed([])


def test_out_of_range_purpose_fails_the_group(bitfield_record):
    assert not bitfield_record.are_purposes_allowed([2, 25])


# ── Vendors ──────────────────────────────────────────────────────────────────


def test_bitfield_vendors(bitfield_record):
    for vendor_id in (1, 5, 7, 9):
        assert bitfield_record.is_vendor_allowed(vendor_id)
    for vendor_id in (0, 3, 10):
        assert not bitfield_record.is_vendor_allowed(vendor_id)
    assert bitfield_record.allowed_vendors() == [1, 2, 4, 5, 7, 9]


def test_bitfield_vendor_past_end_of_data(bitfield_record):
    assert not bitfield_record.is_vendor_allowed(12)
    assert not bitfield_record.is_vendor_allowed(65535)


def test_bitfield_vendor_ids_below_one_are_denied(bitfield_record):
    # bits 0..172 hold the header, several of them set on this record
    assert bitfield_record.is_vendor_allowed(-2) is False
    assert not any(bitfield_record.is_vendor_allowed(v) for v in range(-172, 1))


def test_range_vendor_ids_below_one_are_denied(make_consent, range_bits):
    record = decode_consent(make_consent(range_bits(True, [(10, 12)])))
    assert record.is_vendor_allowed(1)
    assert not record.is_vendor_allowed(0)
    assert not record.is_vendor_allowed(-1)


def test_bitfield_record_has_no_range_section(bitfield_record):
    assert isinstance(bitfield_record.vendor_consent, BitfieldVendorConsent)
    assert bitfield_record.default_consent is None
    assert bitfield_record.range_entries == ()
    assert not bitfield_record.present_in_range_list(1)


def test_range_vendors(range_record):
    for vendor_id in (225, 515, 5000):
        assert range_record.is_vendor_allowed(vendor_id)
    for vendor_id in (0, 1, 3, 3244):
        assert not range_record.is_vendor_allowed(vendor_id)


def test_range_entries_in_encoded_order(range_record):
    assert isinstance(range_record.vendor_consent, RangeVendorConsent)
    assert range_record.default_consent is False
    assert range_record.range_entries == (
        RangeEntry(20),
        RangeEntry.from_range(200, 400),
        RangeEntry.from_range(401, 410),
        RangeEntry(515),
        RangeEntry.from_range(5000, 5024),
    )


def test_range_lookup_that_cycles_denies(range_record):
    assert not range_record.present_in_range_list(411)
    assert not range_record.is_vendor_allowed(411)


def test_default_consent_is_inverted_by_listing(make_consent, range_bits):
    record = decode_consent(make_consent(range_bits(True, [(10, 12), 30, (40, 50)])))
    assert record.default_consent is True
    assert [e for e in record.range_entries] == [
        RangeEntry.from_range(10, 12),
        RangeEntry(30),
        RangeEntry.from_range(40, 50),
    ]
    # listed vendors lose the default
    assert not record.is_vendor_allowed(30)
    assert not record.is_vendor_allowed(11)
    # unlisted vendors keep it
    assert record.is_vendor_allowed(31)
    assert record.is_vendor_allowed(1)


def test_listed_vendor_missed_by_lookup_keeps_default(make_consent, range_bits):
    record = decode_consent(make_consent(range_bits(True, [3, (10, 12)])))
    assert record.present_in_range_list(11)
    assert not record.present_in_range_list(3)
    assert record.is_vendor_allowed(3)


def test_range_with_no_entries(make_consent, range_bits):
    record = decode_consent(make_consent(range_bits(False, [])))
    assert record.vendor_encoding is VendorEncoding.RANGE
    assert record.range_entries == ()
    assert not record.is_vendor_allowed(1)


def test_declared_entries_beyond_data_read_as_zero(make_consent):
    # RANGE, default false, 2 entries declared, no entry bits present
    bits = "0" * 172 + "1" + "0" + format(2, "012b")
    record = decode_consent(make_consent(bits))
    assert record.range_entries == (RangeEntry(0), RangeEntry(0))
    assert not record.is_vendor_allowed(1)


def test_empty_consent_denies_everything():
    record = decode_consent(EMPTY_CONSENT)
    for i in (0, 1, 2, 3):
        assert not record.is_vendor_allowed(i)
        assert not record.is_purpose_allowed(i)
    assert record.allowed_purposes() == []
    assert record.allowed_vendors() == []


# ── Construction ─────────────────────────────────────────────────────────────


@pytest.mark.parametrize("consent", [BITFIELD_CONSENT, RANGE_CONSENT, EMPTY_CONSENT])
def test_decoding_is_deterministic(consent):
    first = ConsentRecord(consent)
    second = ConsentRecord(consent)
    assert first == second
    assert first.to_summary() == second.to_summary()


@pytest.mark.parametrize("consent", [BITFIELD_CONSENT, RANGE_CONSENT, EMPTY_CONSENT])
def test_consent_string_is_verbatim(consent):
    assert decode_consent(consent).consent_string == consent


@pytest.mark.parametrize(
    "consent",
    [
        BITFIELD_CONSENT + "=",
        "BN5lERiOMYEd+AOAWeFRAAYAAaAAptQ",
        "BN5lERiOMYEd/AOAWeFRAAYAAaAAptQ",
        "BN5lERiO MYEdiAOA",
        "BN5lERiO$MYEdiAOA",
        "BN5lERiOMYEdiAOAWeFRAAYAAaAAptQé",
        "A",
        "ABCDE",
    ],
)
def test_malformed_consent_raises(consent):
    with pytest.raises(ConsentDecodeError):
        ConsentRecord(consent)


@pytest.mark.parametrize("consent", [None, b"BN5lERiOMYEdiAOAWeFRAAYAAaAAptQ", 42])
def test_non_string_consent_raises(consent):
    with pytest.raises(ConsentDecodeError):
        decode_consent(consent)


def test_decode_error_is_a_value_error():
    with pytest.raises(ValueError):
        decode_consent("!!!")


def test_empty_string_decodes_to_denying_record():
    record = decode_consent("")
    assert record.version == 0
    assert record.consent_language == "AA"
    assert not record.is_vendor_allowed(1)
    assert not record.is_purpose_allowed(1)


def test_truncated_string_decodes_leniently():
    record = decode_consent(BITFIELD_CONSENT[:20])
    assert record.cmp_id == 14
    assert record.consent_language == "FR"
    assert record.allowed_purposes() == []
    assert not record.is_vendor_allowed(1)


# ── Summary ──────────────────────────────────────────────────────────────────


def test_bitfield_summary(bitfield_record):
    summary = bitfield_record.to_summary()
    assert summary.consent_string == BITFIELD_CONSENT
    assert summary.vendor_encoding == "bitfield"
    assert summary.allowed_purposes == [2, 3, 20, 21, 23]
    assert summary.default_consent is None
    assert summary.range_entries == []


def test_range_summary(range_record):
    summary = range_record.to_summary()
    assert summary.vendor_encoding == "range"
    assert summary.default_consent is False
    assert [(e.min_vendor_id, e.max_vendor_id) for e in summary.range_entries] == [
        (20, 20),
        (200, 400),
        (401, 410),
        (515, 515),
        (5000, 5024),
    ]


def test_records_are_hashable(bitfield_record):
    assert len({bitfield_record, decode_consent(BITFIELD_CONSENT)}) == 1
    assert repr(bitfield_record) == f"ConsentRecord({BITFIELD_CONSENT!r})"
