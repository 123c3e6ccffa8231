from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

# Settings are read at import time; pin a non-prod env with fake credentials
# before the app is imported.
os.environ["APP_ENV"] = "test"
os.environ.setdefault("GITHUB_CLIENT_ID", "test-client-id")
os.environ.setdefault("GITHUB_CLIENT_SECRET", "test-client-secret")

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.api.dependencies import get_github_client  # noqa: E402
from app.core.config import Settings, get_settings  # noqa: E402
from app.main import app  # noqa: E402
from app.services.github_oauth import GitHubOAuthClient  # noqa: E402

TOKEN_URL = "https://github.test/login/oauth/access_token"
CLIENT_ID = "test-client-id"
CLIENT_SECRET = "test-client-secret"

Handler = Callable[[httpx.Request], httpx.Response]


def make_settings(app_env: str = "test", **overrides: object) -> Settings:
    values: dict[str, object] = {
        "app_env": app_env,
        "log_level": "info",
        "log_json": False,
        "port": 8000,
        "github_client_id": CLIENT_ID,
        "github_client_secret": CLIENT_SECRET,
        "github_token_url": TOKEN_URL,
        "github_timeout_sec": 5.0,
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


class FakeGitHub:
    """Stands in for the provider's token endpoint via httpx.MockTransport.

    Records every request it receives; ``handler`` decides the reply and
    defaults to handing out ``access_token``.
    """

    def __init__(self, access_token: str = "gho_testtoken123") -> None:
        self.access_token = access_token
        self.requests: list[httpx.Request] = []
        self.handler: Handler = self._ok

    def _ok(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "access_token": self.access_token,
                "token_type": "bearer",
                "scope": "read:user",
            },
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self, settings: Settings) -> GitHubOAuthClient:
        return GitHubOAuthClient(settings, transport=httpx.MockTransport(self))


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def client(settings: Settings, fake_github: FakeGitHub) -> Iterator[TestClient]:
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_github_client] = lambda: fake_github.client(settings)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
