"""FastAPI application entry point for the SEO metrics API."""

import logging
import sys

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings as default_settings
from errors import register_error_handlers
from services.fetcher import Fetcher, HttpxFetcher
from services.property_store import PropertyStore, build_store
from services.semrush import SemrushClient

# Structured logging: JSON for production, human-readable for local
if default_settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    property_store: PropertyStore | None = None,
    fetcher: Fetcher | None = None,
) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(title="SEO Metrics API", version="1.0.0")

    # Collaborators are owned by the app, not by module globals
    if property_store is None:
        property_store = build_store(settings.property_store_path)
    if fetcher is None:
        fetcher = HttpxFetcher(timeout=settings.http_timeout_seconds)
    app.state.settings = settings
    app.state.fetcher = fetcher
    app.state.seo_client = SemrushClient(property_store, fetcher, settings.request_config)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.seo import router as seo_router

    app.include_router(health_router)
    app.include_router(seo_router)

    @app.on_event("startup")
    async def _validate_config() -> None:
        missing = settings.validate()
        if missing:
            logger.warning("Missing env vars (SEO endpoint will return 503): %s", ", ".join(missing))

    @app.on_event("shutdown")
    async def _close_fetcher() -> None:
        close = getattr(app.state.fetcher, "close", None)
        if close is not None:
            close()

    return app


app = create_app()


def main() -> None:
    """Serve the API under uvicorn on HOST:PORT."""
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    main()
