import base64

import pytest
from fastapi.testclient import TestClient

from consent_daemon.main import app
from tests.vectors import HEADER_BITS


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Synchronous TestClient fixture for FastAPI.
    Use this for standard API endpoint testing.
    """
    with TestClient(app=app, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_consent():
    """
    Returns a helper turning a string of '0'/'1' characters into an unpadded
    URL-safe base64 consent string. The bits are zero-padded to a byte boundary.
    """

    def _make(bits: str) -> str:
        bits = bits + "0" * (-len(bits) % 8)
        raw = int(bits, 2).to_bytes(len(bits) // 8, "big") if bits else b""
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return _make


@pytest.fixture
def range_bits():
    """
    Returns a helper building the bits of a range-encoded consent string with an
    all-zero header. ``entries`` holds ints (single IDs) or (start, end) tuples.
    """

    def _build(default_consent: bool, entries) -> str:
        bits = "0" * (HEADER_BITS - 1) + "1"
        bits += "1" if default_consent else "0"
        bits += format(len(entries), "012b")
        for entry in entries:
            if isinstance(entry, tuple):
                bits += "1" + format(entry[0], "016b") + format(entry[1], "016b")
            else:
                bits += "0" + format(entry, "016b")
        return bits

    return _build
