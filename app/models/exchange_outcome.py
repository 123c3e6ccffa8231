from __future__ import annotations

from dataclasses import dataclass, field

# Result of GET /api/token/new, one of:
#   TokenIssued      : state checked, provider returned an access_token
#   ValidationFailed : rejected before any provider call (400 / 401)
#   UpstreamFailed   : provider call failed or returned no token (502)


@dataclass(frozen=True, slots=True)
class TokenIssued:
    access_token: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class ValidationFailed:
    status_code: int
    detail: str


@dataclass(frozen=True, slots=True)
class UpstreamFailed:
    reason: str


ExchangeOutcome = TokenIssued | ValidationFailed | UpstreamFailed
