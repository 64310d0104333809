"""
tests/test_property_store.py

In-memory and JSON-file property stores.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from errors import CacheReadError, CacheWriteError
from services.property_store import (
    InMemoryPropertyStore,
    JsonFilePropertyStore,
    build_store,
)


class TestInMemoryPropertyStore:
    def test_missing_key_is_none(self) -> None:
        assert InMemoryPropertyStore().get_property("DATA") is None

    def test_set_then_get(self) -> None:
        store = InMemoryPropertyStore()
        store.set_property("DATE", "2024-03-15T12:00:00.000Z")
        assert store.get_property("DATE") == "2024-03-15T12:00:00.000Z"

    def test_initial_values_are_copied(self) -> None:
        initial = {"DATA": "{}"}
        store = InMemoryPropertyStore(initial)
        store.set_property("DATA", "[]")
        assert initial == {"DATA": "{}"}


class TestJsonFilePropertyStore:
    def test_missing_file_reads_as_empty(self, tmp_path: Path) -> None:
        assert JsonFilePropertyStore(tmp_path / "props.json").get_property("DATA") is None

    def test_values_persist_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "props.json"
        JsonFilePropertyStore(path).set_property("DATA", '{"url": "example.com"}')
        JsonFilePropertyStore(path).set_property("DATE", "2024-03-15T12:00:00.000Z")

        store = JsonFilePropertyStore(path)
        assert store.get_property("DATA") == '{"url": "example.com"}'
        assert store.get_property("DATE") == "2024-03-15T12:00:00.000Z"
        assert json.loads(path.read_text()) == {
            "DATA": '{"url": "example.com"}',
            "DATE": "2024-03-15T12:00:00.000Z",
        }

    def test_corrupt_file_raises_cache_read_error(self, tmp_path: Path) -> None:
        path = tmp_path / "props.json"
        path.write_text("{not json")
        with pytest.raises(CacheReadError):
            JsonFilePropertyStore(path).get_property("DATA")

    def test_non_object_file_raises_cache_read_error(self, tmp_path: Path) -> None:
        path = tmp_path / "props.json"
        path.write_text("[]")
        with pytest.raises(CacheReadError):
            JsonFilePropertyStore(path).get_property("DATA")

    def test_non_string_value_reads_as_none(self, tmp_path: Path) -> None:
        path = tmp_path / "props.json"
        path.write_text(json.dumps({"DATA": {"url": "x"}}))
        assert JsonFilePropertyStore(path).get_property("DATA") is None

    def test_write_replaces_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "props.json"
        path.write_text("{not json")
        store = JsonFilePropertyStore(path)
        store.set_property("DATE", "2024-03-15T12:00:00.000Z")
        assert store.get_property("DATE") == "2024-03-15T12:00:00.000Z"

    def test_unwritable_location_raises_cache_write_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = JsonFilePropertyStore(blocker / "props.json")
        with pytest.raises(CacheWriteError):
            store.set_property("DATA", "{}")


def test_build_store_picks_implementation(tmp_path: Path) -> None:
    assert isinstance(build_store(None), InMemoryPropertyStore)
    assert isinstance(build_store(""), InMemoryPropertyStore)
    file_store = build_store(str(tmp_path / "props.json"))
    assert isinstance(file_store, JsonFilePropertyStore)
    assert file_store.path == tmp_path / "props.json"
