"""Access-token endpoints.

  GET /api/token/new    : OAuth callback: check state, exchange code, set cookie
  GET /api/token/stored : read back the token cookie set by /api/token/new

Status mapping for /api/token/new:

  400  Missing authorization code | Missing state parameter
  401  Missing state cookie       | State mismatch
  502  Failed to fetch access token (provider refused, errored or timed out)
  200  body = access token, Set-Cookie: token=<same value>
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import PlainTextResponse, Response

from app.api.cookies import TOKEN_COOKIE, set_client_cookie
from app.api.dependencies import (
    GitHubClientDep,
    SettingsDep,
    StateCookieDep,
    TokenCookieDep,
)
from app.core.config import Settings
from app.core.metrics import TOKEN_EXCHANGES
from app.models.exchange_outcome import (
    ExchangeOutcome,
    TokenIssued,
    UpstreamFailed,
    ValidationFailed,
)
from app.services.token_exchange import exchange_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/token", tags=["oauth"])

UPSTREAM_FAILURE_DETAIL = "Failed to fetch access token"


def _to_response(outcome: ExchangeOutcome, settings: Settings) -> Response:
    if isinstance(outcome, TokenIssued):
        response = PlainTextResponse(outcome.access_token)
        set_client_cookie(response, TOKEN_COOKIE, outcome.access_token, settings)
        return response
    if isinstance(outcome, ValidationFailed):
        return PlainTextResponse(outcome.detail, status_code=outcome.status_code)
    if isinstance(outcome, UpstreamFailed):
        return PlainTextResponse(
            UPSTREAM_FAILURE_DETAIL, status_code=status.HTTP_502_BAD_GATEWAY
        )
    raise TypeError(f"unknown exchange outcome: {outcome!r}")


# ========================== GET /api/token/new =============================


@router.get("/new", response_class=PlainTextResponse)
async def new_token(
    settings: SettingsDep,
    client: GitHubClientDep,
    state_cookie: StateCookieDep,
    code: Annotated[str | None, Query()] = None,
    state: Annotated[str | None, Query()] = None,
) -> Response:
    outcome = await exchange_token(code, state, state_cookie, client)

    if isinstance(outcome, TokenIssued):
        TOKEN_EXCHANGES.labels(result="issued").inc()
        logger.info("access token issued", extra={"outcome": "issued"})
    elif isinstance(outcome, ValidationFailed):
        TOKEN_EXCHANGES.labels(result="rejected").inc()
        logger.warning(
            "callback rejected  status=%d detail=%s",
            outcome.status_code,
            outcome.detail,
            extra={"outcome": "rejected"},
        )
    else:
        TOKEN_EXCHANGES.labels(result="upstream_error").inc()

    return _to_response(outcome, settings)


# ========================== GET /api/token/stored ==========================


@router.get("/stored", response_class=PlainTextResponse)
def stored_token(token: TokenCookieDep) -> Response:
    if not token:
        return Response(status_code=status.HTTP_400_BAD_REQUEST)
    return PlainTextResponse(token)
