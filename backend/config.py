"""Centralized configuration — all env vars in one place."""

import os


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Semrush report endpoints (full URLs, API key included)
        self.refresh_rate_days: int = max(0, _int_env("SEMRUSH_REFRESH_RATE_DAYS", 1))
        self.site_audit_url: str | None = os.getenv("SEMRUSH_SITE_AUDIT_URL")
        self.position_tracking_url: str | None = os.getenv("SEMRUSH_POSITION_TRACKING_URL")
        self.keyword_gap_url: str | None = os.getenv("SEMRUSH_KEYWORD_GAP_URL")

        self.http_timeout_seconds: float = max(1.0, _float_env("HTTP_TIMEOUT_SECONDS", 30.0))
        # Unset means the cache lives in process memory only
        self.property_store_path: str | None = os.getenv("PROPERTY_STORE_PATH")

        self.host: str = os.getenv("HOST", "127.0.0.1")
        self.port: int = _int_env("PORT", 8000)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def request_config(self) -> dict:
        """Request configuration mapping consumed by SemrushClient."""
        return {
            "refreshRate": self.refresh_rate_days,
            "siteAuditURL": self.site_audit_url,
            "positionTrackingURL": self.position_tracking_url,
            "keywordGapAnalysisURL": self.keyword_gap_url,
        }

    def validate(self) -> list[str]:
        """Return list of missing required env vars for the Semrush reports."""
        required = [
            "SEMRUSH_SITE_AUDIT_URL",
            "SEMRUSH_POSITION_TRACKING_URL",
            "SEMRUSH_KEYWORD_GAP_URL",
        ]
        return [var for var in required if not getattr(self, _attr_for(var))]


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "SEMRUSH_SITE_AUDIT_URL": "site_audit_url",
        "SEMRUSH_POSITION_TRACKING_URL": "position_tracking_url",
        "SEMRUSH_KEYWORD_GAP_URL": "keyword_gap_url",
    }
    return mapping.get(env_var, env_var.lower())
