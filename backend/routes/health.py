"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Request

from services.semrush import SemrushClient, format_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Lightweight readiness check — no external calls."""
    settings = request.app.state.settings
    return {"status": "ok", "service": "seo-metrics-api", "commit": settings.git_sha}


@router.get("/health")
async def health(request: Request) -> dict:
    """Report cache freshness from the property store. Never calls Semrush."""
    settings = request.app.state.settings
    client: SemrushClient = request.app.state.seo_client
    result = {
        "status": "ok",
        "service": "seo-metrics-api",
        "commit": settings.git_sha,
        "missing_config": settings.validate(),
    }

    last = client.last_refreshed()
    result["cache"] = {
        "last_refreshed": format_timestamp(last) if last else None,
        "refresh_rate_days": settings.refresh_rate_days,
        "stale": client.should_refresh_data(settings.refresh_rate_days),
    }
    if result["missing_config"]:
        result["status"] = "degraded"
    return result
