from __future__ import annotations

import logging

from app.models.exchange_outcome import (
    ExchangeOutcome,
    TokenIssued,
    UpstreamFailed,
    ValidationFailed,
)
from app.services import state_service
from app.services.github_oauth import GitHubOAuthClient, GitHubTokenError

logger = logging.getLogger(__name__)


async def exchange_token(
    code: str | None,
    state: str | None,
    state_cookie: str | None,
    client: GitHubOAuthClient,
) -> ExchangeOutcome:
    """Run the callback checks in order and stop at the first failure.

    1. code and state query parameters present      (400)
    2. state cookie present and equal to the query  (401)
    3. provider hands out an access token           (502 otherwise)

    The provider is never contacted unless steps 1 and 2 pass.
    """
    checked = state_service.validate_params(code, state)
    if isinstance(checked, ValidationFailed):
        return checked
    checked_code, checked_state = checked

    failure = state_service.validate_state(checked_state, state_cookie)
    if failure is not None:
        return failure

    try:
        access_token = await client.fetch_access_token(checked_code)
    except GitHubTokenError as exc:
        logger.warning(
            "token exchange failed  reason=%s",
            exc.reason,
            extra={"outcome": "upstream_error", "provider_status": exc.provider_status},
        )
        return UpstreamFailed(exc.reason)

    return TokenIssued(access_token)
