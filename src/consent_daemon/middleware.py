"""
Contains custom FastAPI middleware for the consent2api application.

Middleware functions in this module intercept HTTP requests for metrics collection.
"""

import time
from typing import Optional

from fastapi import Request

from consent_daemon.metrics import HTTP_LATENCY, HTTP_REQUESTS


def endpoint_label(request: Request, path: Optional[str] = None) -> str:
    """
    Returns the templated path (e.g. '/api/consent/vendors/{vendor_id}') that served
    the request, or the raw path when no path parameters were matched. ``path``
    defaults to the request path.

    Each path segment holding a matched path parameter is replaced by the parameter
    name. The label includes any router prefix because it starts from the request path.

    Consent strings and vendor IDs travel in the URL, so labelling by raw path would
    create one time series per request.
    """
    if path is None:
        path = request.url.path
    path_params = request.scope.get("path_params") or {}
    if not path_params:
        return path
    names = {str(value): name for name, value in path_params.items()}
    segments = path.split("/")
    return "/".join(f"{{{names[s]}}}" if s in names else s for s in segments)


async def prometheus_http_middleware(request: Request, call_next):
    """
    FastAPI middleware to record Prometheus metrics for HTTP requests.

    Measures each request's latency and counts requests by method, endpoint
    template and status code.

    Args:
        request: The incoming FastAPI Request object.
        call_next: A function to call to process the request and get the response.

    Returns:
        The response object from the next handler in the chain.
    """
    # read before routing updates the scope
    path = request.url.path
    start = time.perf_counter()
    response = await call_next(request)
    latency = time.perf_counter() - start

    endpoint = endpoint_label(request, path)
    method = request.method

    HTTP_REQUESTS.labels(method=method, endpoint=endpoint, status_code=response.status_code).inc()
    HTTP_LATENCY.labels(method=method, endpoint=endpoint).observe(latency)
    return response
