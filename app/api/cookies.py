"""Handshake cookies: writing ``state``/``token`` and reading them back.

Reading goes through first_cookie() rather than Starlette's parsed
``request.cookies``.  When a name appears twice in one Cookie header,
Starlette keeps the last value; browsers send the cookie with the most
specific Path first, and the first occurrence is the one used here.

    Cookie: state=from-us; state=from-elsewhere   →  "from-us"
"""

from __future__ import annotations

from urllib.parse import unquote

from starlette.requests import Request
from starlette.responses import Response

from app.core.config import Settings

STATE_COOKIE = "state"
TOKEN_COOKIE = "token"


def set_client_cookie(response: Response, key: str, value: str, settings: Settings) -> None:
    """Attach one of the handshake cookies (``state`` or ``token``).

    HttpOnly keeps page scripts away from the value; SameSite=Strict stops
    cross-site requests from carrying it.  Secure only in prod, where the
    service sits behind https.  Session cookies: no Max-Age, no expiry.
    """
    response.set_cookie(
        key=key,
        value=value,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
        path="/",
    )


def first_cookie(header: str | None, name: str) -> str | None:
    """Value of the first *name* pair in a raw Cookie header, or None.

    Pairs without ``=`` are skipped.  Surrounding double quotes are
    removed and %-escapes decoded; a value that fails to decode is
    returned as sent.
    """
    if not header:
        return None
    for pair in header.split(";"):
        key, sep, value = pair.partition("=")
        if not sep or key.strip() != name:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        try:
            return unquote(value, errors="strict")
        except UnicodeDecodeError:
            return value
    return None


def state_cookie(request: Request) -> str | None:
    return first_cookie(request.headers.get("cookie"), STATE_COOKIE)


def token_cookie(request: Request) -> str | None:
    return first_cookie(request.headers.get("cookie"), TOKEN_COOKIE)
