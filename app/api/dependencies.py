from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.api.cookies import state_cookie, token_cookie
from app.core.config import Settings, get_settings
from app.services.github_oauth import GitHubOAuthClient

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_github_client(settings: SettingsDep) -> GitHubOAuthClient:
    """Provider client built from the injected settings.

    Tests override this dependency with a client on an httpx.MockTransport.
    """
    return GitHubOAuthClient(settings)


GitHubClientDep = Annotated[GitHubOAuthClient, Depends(get_github_client)]

# First occurrence wins for duplicated cookie names; see app/api/cookies.py.
StateCookieDep = Annotated[str | None, Depends(state_cookie)]
TokenCookieDep = Annotated[str | None, Depends(token_cookie)]
