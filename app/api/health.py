"""Liveness and readiness probes.

/health answers "is the process up" and reports whether provider
credentials are configured.  Missing credentials still return 200 with
status=degraded: every exchange would fail with 502, but restarting the
container does not fix configuration.

/ready always returns 200.  The service holds no connections; the
provider is contacted per request.
"""

from __future__ import annotations

from fastapi import APIRouter, Response

from app.api.dependencies import SettingsDep

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(settings: SettingsDep) -> dict:
    checks = {
        "github_client": "configured" if settings.github_configured else "not_configured",
    }
    overall = "ok" if settings.github_configured else "degraded"
    return {"status": overall, "checks": checks}


@router.get("/ready")
async def ready() -> Response:
    return Response(status_code=200)
