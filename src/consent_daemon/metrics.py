"""
Defines Prometheus metrics for monitoring the consent2api application.

This module centralizes the definition of all Counter and Histogram metrics used to
track consent string decoding and HTTP API traffic.
"""

from prometheus_client import Counter, Histogram

DECODES = Counter("consent2api_decodes_total", "Total consent strings decoded successfully")
DECODE_ERRORS = Counter("consent2api_decode_errors_total", "Total consent strings rejected")
DECODE_LATENCY = Histogram(
    "consent2api_decode_latency_seconds", "Time spent decoding consent strings"
)
VENDOR_ENCODING_COUNTER = Counter(
    "consent2api_vendor_encoding_total",
    "Decoded consent strings by vendor encoding",
    ["encoding"],
)
HTTP_REQUESTS = Counter(
    "consent2api_http_requests_total", "Total HTTP requests", ["method", "endpoint", "status_code"]
)
HTTP_LATENCY = Histogram(
    "consent2api_http_request_latency_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
)
