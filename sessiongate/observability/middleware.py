"""
HTTP request metrics and tracing.

Series are labelled with the matched route template (``/api/v1/user/user``),
never the raw URL, so the label set is bounded by the routing table.
Requests that match no route share the ``unmatched`` label.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from sessiongate.observability.metrics import metrics
from sessiongate.observability.tracing import tracer

UNMATCHED_ROUTE = "unmatched"
UNLABELLED_PATHS = ("/metrics", "/health")


def route_template(request: Request) -> str:
    """Path template of the route that handled *request*, or ``unmatched``."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.url.path in UNLABELLED_PATHS:
            return await call_next(request)

        method = request.method
        with tracer.start_as_current_span(
            f"{method} {UNMATCHED_ROUTE}",
            attributes={"http.method": method, "http.url": str(request.url)},
        ) as span:
            start = time.perf_counter()
            response: Response = await call_next(request)
            elapsed = time.perf_counter() - start

            # the router fills scope["route"] while handling the request
            endpoint = route_template(request)
            span.update_name(f"{method} {endpoint}")
            span.set_attribute("http.route", endpoint)
            span.set_attribute("http.status_code", response.status_code)

            metrics.http_requests_total.labels(
                method=method, endpoint=endpoint, status_code=str(response.status_code)
            ).inc()
            metrics.http_request_duration_seconds.labels(
                method=method, endpoint=endpoint
            ).observe(elapsed)

        return response
