"""Client for the identity provider's token endpoint.

One call: POST {client_id, client_secret, code} as JSON and read back
``access_token``.  GitHub answers a bad or expired code with HTTP 200
and an ``error`` field, so a 2xx status alone is not success.
"""

from __future__ import annotations

import logging
import time

import httpx

from app.core.config import Settings
from app.core.metrics import UPSTREAM_DURATION

logger = logging.getLogger(__name__)


class GitHubTokenError(Exception):
    """The provider did not hand out an access token."""

    def __init__(self, reason: str, *, provider_status: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.provider_status = provider_status


class GitHubOAuthClient:
    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = settings.github_client_id
        self._client_secret = settings.github_client_secret
        self._token_url = settings.github_token_url
        self._timeout = settings.github_timeout_sec
        # Tests pass an httpx.MockTransport; production uses the default.
        self._transport = transport

    async def fetch_access_token(self, code: str) -> str:
        """Exchange *code* for an access token.

        Raises:
            GitHubTokenError: transport failure, non-2xx status, a body
                that is not JSON, or a JSON body without a string
                ``access_token``.
        """
        payload = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "code": code,
        }
        start = time.monotonic()
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._timeout
            ) as client:
                response = await client.post(
                    self._token_url,
                    json=payload,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            # exc may embed the request; log only its type.
            raise GitHubTokenError(f"transport error: {type(exc).__name__}") from exc
        finally:
            UPSTREAM_DURATION.observe(time.monotonic() - start)

        if not response.is_success:
            raise GitHubTokenError(
                f"token endpoint returned HTTP {response.status_code}",
                provider_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            raise GitHubTokenError(
                "token endpoint returned a non-JSON body",
                provider_status=response.status_code,
            ) from None

        if not isinstance(data, dict):
            raise GitHubTokenError(
                "token endpoint returned unexpected JSON",
                provider_status=response.status_code,
            )

        access_token = data.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            # error is a short code such as "bad_verification_code"; safe to log.
            error = data.get("error") or "no access_token in response"
            raise GitHubTokenError(
                f"token endpoint error: {error}",
                provider_status=response.status_code,
            )

        logger.debug("token endpoint returned an access token  status=%d", response.status_code)
        return access_token
