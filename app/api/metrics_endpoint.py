"""Prometheus scrape endpoint (text exposition format, not JSON).

The handshake counters live here alongside the HTTP ones, e.g.:

  oauth_token_exchanges_total{result="issued"} 12.0
  oauth_token_exchanges_total{result="rejected"} 3.0

Restrict this path at the ingress in production.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
