"""Custom exceptions and centralized FastAPI error handlers."""

import json
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SEOMetricsError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class CacheReadError(SEOMetricsError):
    """Property store could not return a usable cached value."""


class CacheWriteError(SEOMetricsError):
    """Property store rejected a write."""


class MissingConfigurationError(SEOMetricsError):
    def __init__(self, missing: list[str]):
        super().__init__(
            f"Missing required configuration: {', '.join(missing)}",
            status_code=503,
        )
        self.missing = missing


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(SEOMetricsError)
    async def handle_seo_metrics_error(_request: Request, exc: SEOMetricsError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(httpx.HTTPError)
    async def handle_upstream_error(_request: Request, exc: httpx.HTTPError):
        logger.error("Semrush request failed: %s", exc)
        return JSONResponse({"error": f"Upstream request failed: {exc}"}, status_code=502)

    @app.exception_handler(json.JSONDecodeError)
    async def handle_upstream_json(_request: Request, exc: json.JSONDecodeError):
        logger.error("Semrush returned invalid JSON: %s", exc)
        return JSONResponse({"error": "Upstream returned invalid JSON"}, status_code=502)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
