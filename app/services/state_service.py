from __future__ import annotations

import hmac
import uuid

from fastapi import status

from app.models.exchange_outcome import ValidationFailed

# CSRF state handling for the callback.
#
# The state value is bound to the browser through an HttpOnly cookie set by
# GET /api/state.  On the callback, the provider echoes the state back in the
# query string; the two must be identical.  Nothing is stored server-side.

MISSING_CODE = "Missing authorization code"
MISSING_STATE_PARAM = "Missing state parameter"
MISSING_STATE_COOKIE = "Missing state cookie"
STATE_MISMATCH = "State mismatch"


def generate_state() -> str:
    return str(uuid.uuid4())


def validate_params(
    code: str | None, state: str | None
) -> tuple[str, str] | ValidationFailed:
    """Both query parameters must be present and non-empty; code is checked first.

    Returns the checked ``(code, state)`` pair on success.
    """
    if not code:
        return ValidationFailed(status.HTTP_400_BAD_REQUEST, MISSING_CODE)
    if not state:
        return ValidationFailed(status.HTTP_400_BAD_REQUEST, MISSING_STATE_PARAM)
    return code, state


def validate_state(state: str, state_cookie: str | None) -> ValidationFailed | None:
    """Compare the echoed state with the cookie issued earlier.

    compare_digest on bytes: the str variant rejects non-ASCII input with
    TypeError, and the query string is attacker-controlled.
    """
    if not state_cookie:
        return ValidationFailed(status.HTTP_401_UNAUTHORIZED, MISSING_STATE_COOKIE)
    if not hmac.compare_digest(state.encode("utf-8"), state_cookie.encode("utf-8")):
        return ValidationFailed(status.HTTP_401_UNAUTHORIZED, STATE_MISMATCH)
    return None
