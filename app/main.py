from __future__ import annotations

import logging

from fastapi import FastAPI

from app.api.health import router as health_router
from app.api.metrics_endpoint import router as metrics_router
from app.api.state import router as state_router
from app.api.token import router as token_router
from app.core.config import SETTINGS
from app.core.logging import setup_logging
from app.middleware.metrics import MetricsMiddleware
from app.middleware.request_context import RequestContextMiddleware

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="github-oauth-bridge",
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# Last-added runs first: RequestContext (outermost) → Metrics → route handler.
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(state_router)
app.include_router(token_router)

if not SETTINGS.github_configured:
    logger.warning(
        "GITHUB_CLIENT_ID/GITHUB_CLIENT_SECRET not set; token exchanges will fail"
    )

logger.info(
    "github-oauth-bridge started  env=%s log_level=%s port=%d docs=%s secure_cookies=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
    SETTINGS.secure_cookies,
)
