"""Shared fakes for the Semrush client and API tests."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from errors import CacheReadError, CacheWriteError

SITE_AUDIT_URL = "https://api.semrush.test/reports/v1/projects/1/siteaudit/info?key=secret"
POSITION_TRACKING_URL = "https://api.semrush.test/reports/v1/projects/1/tracking/info?key=secret"
KEYWORD_GAP_URL = "https://api.semrush.test/?type=domain_domains&key=secret"

NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakePropertyStore:
    """Dict-backed store that can be told to fail reads or writes."""

    def __init__(self, props: dict[str, str] | None = None) -> None:
        self.props: dict[str, str] = dict(props or {})
        self.fail_reads = False
        self.fail_writes = False
        self.writes: list[tuple[str, str]] = []

    def get_property(self, key: str) -> str | None:
        if self.fail_reads:
            raise CacheReadError("store unavailable")
        return self.props.get(key)

    def set_property(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise CacheWriteError("store rejected write")
        self.writes.append((key, value))
        self.props[key] = value


class FakeFetcher:
    """Serves canned bodies by URL and records every request."""

    def __init__(self, bodies: dict[str, str]) -> None:
        self.bodies = bodies
        self.requested: list[str] = []

    def fetch(self, url: str) -> str:
        self.requested.append(url)
        return self.bodies[url]


def site_audit_body(quality: float = 87, delta: float = 2, performance: float = 64) -> str:
    return json.dumps(
        {
            "url": "example.com",
            "errors": 12,
            "current_snapshot": {
                "quality": {"value": quality, "delta": delta},
                "thematicScores": {"performance": {"value": performance}},
            },
        }
    )


def api_bodies(**audit_kwargs) -> dict[str, str]:
    return {
        SITE_AUDIT_URL: site_audit_body(**audit_kwargs),
        POSITION_TRACKING_URL: json.dumps({"visibility": 4.21}),
        KEYWORD_GAP_URL: json.dumps({"keywords": [{"phrase": "seo tools", "kd": 31}]}),
    }


def request_config(refresh_rate: int = 1) -> dict:
    return {
        "refreshRate": refresh_rate,
        "siteAuditURL": SITE_AUDIT_URL,
        "positionTrackingURL": POSITION_TRACKING_URL,
        "keywordGapAnalysisURL": KEYWORD_GAP_URL,
    }


@pytest.fixture()
def store() -> FakePropertyStore:
    return FakePropertyStore()


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher(api_bodies())
