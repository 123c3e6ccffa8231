"""Prometheus metrics middleware: instruments every HTTP request.

For each request (except the /metrics scrape itself) this middleware:
  1. Increments the ACTIVE_REQUESTS gauge, decrementing on completion
  2. Times the request
  3. Increments REQUEST_COUNT by method / endpoint / status code and
     observes the duration in REQUEST_DURATION by method / endpoint

THE ENDPOINT LABEL
--------------------
Every distinct label value is a separate time series that lives in the
registry until the process exits.  The label is therefore the path
TEMPLATE of the route that matched, never the raw URL:

  GET /api/token/new?code=...&state=...   →  endpoint="/api/token/new"
  GET /wp-login.php                       →  endpoint="unmatched"
  GET /.env                               →  endpoint="unmatched"

Requests that hit no route (scanners, typos) all share the single
"unmatched" value, so the number of series is fixed by the route table
rather than by whatever paths clients choose to send.  A path that
matches a route but not its method (405) keeps the route's template.

The query string never appears in a label: on /api/token/new it carries
the authorization code.
"""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

from app.core.metrics import ACTIVE_REQUESTS, REQUEST_COUNT, REQUEST_DURATION

UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    """Path template of the route *request* resolves to.

    Walks the app's route table the way the router does.  A FULL match
    wins immediately; otherwise the first PARTIAL match (right path,
    wrong method) is used; otherwise UNMATCHED_ENDPOINT.
    """
    partial: str | None = None
    for route in request.app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED_ENDPOINT)
        if match == Match.PARTIAL and partial is None:
            partial = getattr(route, "path", None)
    return partial or UNMATCHED_ENDPOINT


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collect Prometheus metrics for every HTTP request except /metrics.

    The endpoint label is resolved before the handler runs, from the
    app's route table, so a handler that raises is still recorded under
    its own template with status_code="500".
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        endpoint = endpoint_label(request)
        ACTIVE_REQUESTS.inc()
        start = time.monotonic()
        status_code = "500"  # kept if the handler raises

        try:
            response = await call_next(request)
            status_code = str(response.status_code)
        finally:
            ACTIVE_REQUESTS.dec()
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
            ).inc()
            REQUEST_DURATION.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(time.monotonic() - start)

        return response
