from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

DEFAULT_GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    github_client_id: str
    # Kept out of repr so a logged Settings never leaks the secret.
    github_client_secret: str = field(repr=False)
    github_token_url: str = DEFAULT_GITHUB_TOKEN_URL
    github_timeout_sec: float = 10.0

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"

    @property
    def secure_cookies(self) -> bool:
        """Browsers only send Secure cookies over https, so dev stays off."""
        return self.is_prod

    @property
    def github_configured(self) -> bool:
        return bool(self.github_client_id and self.github_client_secret)


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    log_json_raw = _getenv("LOG_JSON", "false").lower()
    port_raw = _getenv("PORT", "8000")
    timeout_raw = _getenv("GITHUB_TIMEOUT_SEC", "10")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    if log_json_raw not in ("true", "false", "1", "0"):
        raise ValueError(f"LOG_JSON must be true|false (got {log_json_raw!r})")

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise ValueError(
            f"GITHUB_TIMEOUT_SEC must be a number (got {timeout_raw!r})"
        ) from None
    if timeout <= 0:
        raise ValueError(f"GITHUB_TIMEOUT_SEC must be positive (got {timeout_raw!r})")

    client_id = _getenv("GITHUB_CLIENT_ID", "") or _getenv("PUBLIC_GITHUB_CLIENT_ID", "")
    client_secret = _getenv("GITHUB_CLIENT_SECRET", "")

    if app_env_raw == "prod" and not (client_id and client_secret):
        raise ValueError(
            "GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET are required when APP_ENV=prod"
        )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=log_json_raw in ("true", "1"),
        port=port,
        github_client_id=client_id,
        github_client_secret=client_secret,
        github_token_url=_getenv("GITHUB_TOKEN_URL", "") or DEFAULT_GITHUB_TOKEN_URL,
        github_timeout_sec=timeout,
    )


SETTINGS = load_settings()


def get_settings() -> Settings:
    """FastAPI dependency; tests swap it through ``app.dependency_overrides``."""
    return SETTINGS
