"""Request ID and timing for every request.

The ID comes from the client's X-Request-ID header when present, else a
fresh UUID.  It is held in a ContextVar (requests share one event-loop
thread, so thread-locals would leak between them) and copied onto every
LogRecord by a root-logger filter.

The completion line logs the path only.  The query string of
/api/token/new carries the authorization code and must stay out of logs.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class _RequestContextFilter(logging.Filter):
    """Copy the current request ID onto every LogRecord.

    A filter rather than a formatter: formatters only read attributes
    that already exist on the record, a filter can add them first.  Both
    formatters in app/core/logging.py then see ``request_id``; outside a
    request (startup, tests calling services directly) it reads "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("-")  # type: ignore[attr-defined]
        return True


# Installed once on the root logger, even across module reloads.
root_logger = logging.getLogger()
if not any(isinstance(f, _RequestContextFilter) for f in root_logger.filters):
    root_logger.addFilter(_RequestContextFilter())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, time the request, log one summary line.

    For every incoming request:
      1. Reads X-Request-ID (if the client sent one) or generates a UUID
      2. Stores it in request_id_var for the rest of the async call chain
      3. Times the handler
      4. Logs "METHOD /path → status (N ms)" with the same values as
         structured extras, picked up by the JSON formatter
      5. Echoes X-Request-ID on the response, rejected callbacks included
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        logger.info(
            "%s %s → %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
