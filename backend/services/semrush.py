"""Semrush SEO metrics client with a day-granular property-store cache.

Aggregates three Semrush project reports into one flat dict:

    site audit         -> url, errors, quality, quality_delta, site_performance
    position tracking  -> visibility
    keyword gap        -> keywords

The merged dict is cached as JSON under DATA, and the refresh time under DATE.
Cache problems are logged and degrade to a live fetch; live fetch problems
are raised to the caller unchanged.
"""

import json
import logging
import math
import re
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from errors import CacheReadError
from services.fetcher import Fetcher
from services.property_store import PropertyStore

logger = logging.getLogger(__name__)

DATA_KEY = "DATA"
DATE_KEY = "DATE"

ONE_DAY = timedelta(days=1)

_FRACTION = re.compile(r"\.(\d+)(?=$|[+-])")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    # fromisoformat on 3.10 only takes 3 or 6 fractional digits
    normalized = _FRACTION.sub(lambda m: "." + m.group(1).ljust(6, "0")[:6], normalized, count=1)
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def elapsed_days(now: datetime, then: datetime) -> int:
    """Whole days between two instants, rounded half up."""
    return math.floor(abs(now - then) / ONE_DAY + 0.5)


def _redact(url: str) -> str:
    """Drop the API key before a URL reaches the logs."""
    try:
        return str(httpx.URL(url).copy_remove_param("key"))
    except httpx.InvalidURL:
        return "<invalid url>"


class SemrushClient:
    """Fetches Semrush SEO reports, caching the merged result for refreshRate days.

    Args:
        property_store: Holds the serialized result and its refresh timestamp.
        fetcher: Returns the raw body for a URL.
        request_config: Mapping with refreshRate, siteAuditURL,
            positionTrackingURL and keywordGapAnalysisURL.
        clock: Returns the current time (timezone-aware).
    """

    def __init__(
        self,
        property_store: PropertyStore,
        fetcher: Fetcher,
        request_config: Mapping[str, Any],
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.property_store = property_store
        self.fetcher = fetcher
        self.request_config = request_config
        self._clock = clock

    def get_seo_info(self) -> dict | None:
        """Return the cached result, refreshing from the API when missing or stale."""
        result = self._fetch_from_cache()
        if result is None or self.should_refresh_data(self.request_config["refreshRate"]):
            logger.info("Refresh cache")
            result = self._fetch_from_api(self.request_config)
            self._store_in_cache(result)
        return result

    def should_refresh_data(self, refresh_rate: int) -> bool:
        last = self.last_refreshed()
        if last is None:
            logger.info("Cache is empty")
            return True
        days = elapsed_days(self._clock(), last)
        logger.info("Cache is %d day(s) old (refresh rate %d)", days, refresh_rate)
        return days >= refresh_rate

    def last_refreshed(self) -> datetime | None:
        """Time of the last successful refresh, or None if unknown."""
        try:
            raw = self.property_store.get_property(DATE_KEY)
        except Exception as e:
            logger.warning("Error when reading cache date: %s", e)
            return None
        if not raw:
            return None
        try:
            return parse_timestamp(raw)
        except ValueError:
            logger.warning("Ignoring unparseable cache date %r", raw)
            return None

    # -- reports --------------------------------------------------------------

    def get_site_audit(self, url: str) -> dict:
        logger.info("Site Audit Report: Requesting URL %s", _redact(url))
        result = json.loads(self.fetcher.fetch(url))
        snapshot = result["current_snapshot"]
        return {
            "url": result["url"],
            "errors": result["errors"],
            "quality": snapshot["quality"]["value"] / 100,
            "quality_delta": snapshot["quality"]["delta"],
            "site_performance": snapshot["thematicScores"]["performance"]["value"] / 100,
        }

    def get_site_visibility(self, url: str) -> dict:
        logger.info("Visibility Report: Requesting URL %s", _redact(url))
        result = json.loads(self.fetcher.fetch(url))
        return {"visibility": result["visibility"]}

    def get_keywords_to_focus(self, url: str) -> dict:
        """Keyword gap report, already sorted by the API (e.g. display_sort=kd_asc)."""
        logger.info("Keyword Gap Analysis Report: Requesting URL %s", _redact(url))
        result = json.loads(self.fetcher.fetch(url))
        return {"keywords": result["keywords"]}

    # -- internals ------------------------------------------------------------

    def _fetch_from_api(self, config: Mapping[str, Any]) -> dict:
        overall = self.get_site_audit(config["siteAuditURL"])
        overall["visibility"] = self.get_site_visibility(config["positionTrackingURL"])["visibility"]
        overall["keywords"] = self.get_keywords_to_focus(config["keywordGapAnalysisURL"])["keywords"]
        logger.debug("Overall result: %s", overall)
        return overall

    def _fetch_from_cache(self) -> dict | None:
        logger.info("Trying to fetch from cache...")
        try:
            raw = self.property_store.get_property(DATA_KEY)
            if raw is None:
                raise CacheReadError(f"No cached value under {DATA_KEY}")
            result = json.loads(raw)
            if not isinstance(result, dict):
                raise CacheReadError(f"Cached value is a {type(result).__name__}, not an object")
        except Exception as e:
            logger.warning("Error when fetching from cache: %s", e)
            return None
        logger.info("Fetched successfully from cache")
        return result

    def _store_in_cache(self, result: dict) -> None:
        logger.info("Setting data to cache...")
        try:
            # DATA first: a failed write must not leave a fresh DATE beside old data
            self.property_store.set_property(DATA_KEY, json.dumps(result))
            self.property_store.set_property(DATE_KEY, format_timestamp(self._clock()))
        except Exception as e:
            logger.warning("Error when storing in cache: %s", e)
