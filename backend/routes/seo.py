"""SEO metrics route: cached Semrush site audit, visibility and keyword gap."""

import asyncio
import logging

from fastapi import APIRouter, Request

from errors import MissingConfigurationError, SEOMetricsError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/seo")
async def seo_info(request: Request) -> dict:
    """Merged Semrush report, served from cache until it is refreshRate days old.

    Upstream failures are not retried; see errors.register_error_handlers
    for how they map to HTTP status codes.
    """
    missing = request.app.state.settings.validate()
    if missing:
        raise MissingConfigurationError(missing)

    client = request.app.state.seo_client
    result = await asyncio.to_thread(client.get_seo_info)
    if result is None:
        raise SEOMetricsError("SEO data unavailable", status_code=503)
    return result
