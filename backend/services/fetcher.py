"""Blocking HTTP fetch used by the Semrush client.

Returns the raw response body. Status codes are not inspected; a non-JSON error
page surfaces later as a JSON decode failure in the caller.
"""

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def fetch(self, url: str) -> str: ...


class HttpxFetcher:
    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None):
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def fetch(self, url: str) -> str:
        resp = self._client.get(url)
        logger.debug("GET %s -> %d (%d bytes)", resp.url.path, resp.status_code, len(resp.content))
        return resp.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpxFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
