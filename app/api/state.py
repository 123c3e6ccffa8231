"""GET /api/state: start of the handshake.

The browser fetches a fresh state value, puts it in the provider's
authorize URL, and keeps the same value in an HttpOnly cookie.  The
callback (GET /api/token/new) then checks that the two agree.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.api.cookies import STATE_COOKIE, set_client_cookie
from app.api.dependencies import SettingsDep
from app.core.metrics import STATE_ISSUED
from app.services import state_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["oauth"])


@router.get("/state", response_class=PlainTextResponse)
def issue_state(settings: SettingsDep) -> PlainTextResponse:
    state = state_service.generate_state()

    response = PlainTextResponse(state)
    set_client_cookie(response, STATE_COOKIE, state, settings)

    STATE_ISSUED.inc()
    logger.info("state issued  secure_cookie=%s", settings.secure_cookies)
    return response
