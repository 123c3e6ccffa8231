"""Prometheus metric inventory.

HTTP metrics are fed by MetricsMiddleware for every route.  The OAuth
metrics are incremented by the handlers that own the behaviour:

  oauth_state_issued_total         : one per GET /api/state
  oauth_token_exchanges_total      : one per GET /api/token/new, by result
  oauth_upstream_duration_seconds  : wall time of the provider POST

The exchange counter's "result" label takes three values:
"issued", "rejected" (400/401 before any provider call) and
"upstream_error" (502).
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# OAuth handshake metrics
# ---------------------------------------------------------------------------

STATE_ISSUED = Counter(
    "oauth_state_issued_total",
    "State tokens issued by GET /api/state",
)

TOKEN_EXCHANGES = Counter(
    "oauth_token_exchanges_total",
    "Code-for-token exchanges by result",
    ["result"],  # "issued", "rejected", "upstream_error"
)

UPSTREAM_DURATION = Histogram(
    "oauth_upstream_duration_seconds",
    "Duration of the POST to the identity provider's token endpoint",
    # The provider round-trip dominates; buckets start where a LAN call ends.
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
