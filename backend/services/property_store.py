"""Key/value property stores backing the Semrush cache.

The client only needs two string slots (DATA and DATE), so a store is anything
with get_property/set_property. Values are always strings; callers serialize.

Note: neither store coordinates concurrent writers. Two workers refreshing at
the same time will both write, and the last one wins.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

from errors import CacheReadError, CacheWriteError

logger = logging.getLogger(__name__)


class PropertyStore(Protocol):
    def get_property(self, key: str) -> str | None: ...

    def set_property(self, key: str, value: str) -> None: ...


class InMemoryPropertyStore:
    """Process-local store. Contents are lost on restart."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._props: dict[str, str] = dict(initial or {})

    def get_property(self, key: str) -> str | None:
        return self._props.get(key)

    def set_property(self, key: str, value: str) -> None:
        self._props[key] = value


class JsonFilePropertyStore:
    """Store persisted as a flat JSON object of key -> string on disk.

    The file is re-read on every access so several processes can share it.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CacheReadError(f"Cannot read property store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise CacheReadError(f"Property store {self.path} does not hold a JSON object")
        return data

    def get_property(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_property(self, key: str, value: str) -> None:
        try:
            props = self._load()
        except CacheReadError as e:
            # Corrupt file gets overwritten
            logger.warning("Discarding unreadable property store: %s", e)
            props = {}
        props[key] = value

        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(props), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            raise CacheWriteError(f"Cannot write property store {self.path}: {e}") from e


def build_store(path: str | None) -> PropertyStore:
    """File-backed store when a path is configured, in-memory otherwise."""
    if path:
        logger.info("Using JSON property store at %s", path)
        return JsonFilePropertyStore(path)
    logger.info("PROPERTY_STORE_PATH not set; using in-memory property store")
    return InMemoryPropertyStore()
