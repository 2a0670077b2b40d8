# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP Middleware: request id context and per-route Prometheus metrics.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from missionhub.core.logging import request_id_var
from missionhub.metrics import HTTP_ERRORS, REQUEST_COUNT, REQUEST_LATENCY
from missionhub.services.lifecycle import TRANSITIONS

ROUTE_SEGMENTS = frozenset({
    "api", "v1", "missions", "participations", "events", "alternate-role",
    "answers", "emails", "preview", "admin", "sidebar",
}) | frozenset(TRANSITIONS)

UNMETERED_PATHS = frozenset({
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
})


def route_label(path: str) -> str:
    """``/api/v1/participations/12/events/approve`` -> ``/api/v1/participations/{id}/events/approve``.

    Numeric segments become ``{id}``; anything else outside the known routes
    becomes ``{other}`` so label cardinality stays bounded.
    """
    labels = []
    for segment in path.strip("/").split("/"):
        if segment.isdigit():
            labels.append("{id}")
        elif segment in ROUTE_SEGMENTS:
            labels.append(segment)
        else:
            labels.append("{other}")
    return "/" + "/".join(labels)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Adopt the caller's X-Request-ID (or mint one) for the logs and the response."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.url.path in UNMETERED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        endpoint = route_label(request.url.path)
        status = str(response.status_code)
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(elapsed)
        if response.status_code >= 400:
            HTTP_ERRORS.labels(method=request.method, endpoint=endpoint, status=status).inc()
        return response
