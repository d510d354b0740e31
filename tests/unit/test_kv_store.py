"""MarketRegime: Tests for the key-value persistence port."""

from __future__ import annotations

from pathlib import Path

import pytest

from marketregime.core.config import MarketRegimeConfig
from marketregime.core.kv_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    PostgresKeyValueStore,
    StorageError,
    build_store,
)


class TestInMemoryKeyValueStore:
    def test_missing_key_returns_none(self) -> None:
        assert InMemoryKeyValueStore().get("absent") is None

    def test_values_are_copied(self) -> None:
        store = InMemoryKeyValueStore()
        value = {"items": [1, 2]}
        store.set("k", value)
        value["items"].append(3)

        loaded = store.get("k")
        assert loaded == {"items": [1, 2]}
        loaded["items"].append(4)
        assert store.get("k") == {"items": [1, 2]}

    def test_non_json_value_raises_storage_error(self) -> None:
        with pytest.raises(StorageError):
            InMemoryKeyValueStore().set("k", {"bad": object()})


class TestJsonFileKeyValueStore:
    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "store.json"
        JsonFileKeyValueStore(path).set("regime_state", {"label": "Neutral"})
        JsonFileKeyValueStore(path).set("regime_log", [])

        reopened = JsonFileKeyValueStore(path)
        assert reopened.get("regime_state") == {"label": "Neutral"}
        assert reopened.get("regime_log") == []
        assert reopened.get("absent") is None

    def test_corrupt_file_raises_storage_error(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileKeyValueStore(path).get("k")

    def test_non_object_document_raises_storage_error(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileKeyValueStore(path).get("k")


class TestBuildStore:
    def test_selects_backend(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORE_BACKEND", "memory")
        assert isinstance(build_store(MarketRegimeConfig()), InMemoryKeyValueStore)

        monkeypatch.setenv("STORE_BACKEND", "file")
        monkeypatch.setenv("STORE_PATH", str(tmp_path / "s.json"))
        store = build_store(MarketRegimeConfig())
        assert isinstance(store, JsonFileKeyValueStore)
        assert store.path == tmp_path / "s.json"

    def test_postgres_backend_is_lazy(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Building the postgres store must not open a connection."""

        monkeypatch.setenv("STORE_BACKEND", "postgres")
        assert isinstance(build_store(MarketRegimeConfig()), PostgresKeyValueStore)
