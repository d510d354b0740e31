"""
MarketRegime: Key-Value Persistence Port

This module defines the small key-value persistence port used by the
correlation and regime engines, plus three interchangeable backends:

- :class:`InMemoryKeyValueStore` for tests and ephemeral sessions.
- :class:`JsonFileKeyValueStore` storing all keys in one JSON document.
- :class:`PostgresKeyValueStore` storing JSONB values in ``kv_store``.

All backends raise :class:`StorageError` on any read, write or decode
failure. Callers decide whether a failure is critical; the engines treat
persistence as non-critical and keep operating in memory.

Database tables accessed (postgres backend only):
- kv_store

Thread safety: The in-memory and file backends guard their state with a
lock. The postgres backend relies on the connection pool.

Author: MarketRegime Team
Created: 2026-02-03
Last Modified: 2026-02-10
Status: Development
Version: v0.2.0
"""

# ============================================================================
# Imports
# ============================================================================

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import psycopg2
from psycopg2.extras import Json

from marketregime.core.config import MarketRegimeConfig, get_config
from marketregime.core.database import DatabaseError, DatabaseManager
from marketregime.core.logging import get_logger
from marketregime.core.types import JSONValue

# ============================================================================
# Module setup
# ============================================================================

logger = get_logger(__name__)

# Well-known keys shared between dashboard views.
REGIME_STATE_KEY = "regime_state"
REGIME_LOG_KEY = "regime_log"
MARKET_DATA_KEY = "market_data"
CORRELATION_ALERTS_KEY = "corr_alerts"


class StorageError(Exception):
    """Raised when a key-value read or write fails."""


class KeyValueStore(Protocol):
    """Persistence port: JSON values addressed by string keys."""

    def get(self, key: str) -> JSONValue:  # pragma: no cover - interface
        """Return the stored value for ``key`` or ``None`` if absent."""

    def set(self, key: str, value: JSONValue) -> None:  # pragma: no cover - interface
        """Store ``value`` under ``key``, replacing any previous value."""


def _roundtrip(value: Any) -> JSONValue:
    try:
        return json.loads(json.dumps(value))
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Value is not JSON serialisable: {exc}") from exc


# ============================================================================
# Backends
# ============================================================================


@dataclass
class InMemoryKeyValueStore:
    """Process-local store. Values are copied through JSON on write."""

    _data: Dict[str, JSONValue] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get(self, key: str) -> JSONValue:
        with self._lock:
            value = self._data.get(key)
        return _roundtrip(value) if value is not None else None

    def set(self, key: str, value: JSONValue) -> None:
        copied = _roundtrip(value)
        with self._lock:
            self._data[key] = copied


@dataclass
class JsonFileKeyValueStore:
    """Store every key in a single JSON object on disk.

    Writes go to a temporary sibling file that atomically replaces the
    target, so a crash mid-write leaves the previous document intact.
    """

    path: Path
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    def _read_document(self) -> Dict[str, JSONValue]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
            document = json.loads(raw) if raw.strip() else {}
        except (OSError, ValueError) as exc:
            raise StorageError(f"Failed to read store file {self.path}: {exc}") from exc
        if not isinstance(document, dict):
            raise StorageError(f"Store file {self.path} does not contain a JSON object")
        return document

    def get(self, key: str) -> JSONValue:
        with self._lock:
            return self._read_document().get(key)

    def set(self, key: str, value: JSONValue) -> None:
        copied = _roundtrip(value)
        with self._lock:
            document = self._read_document()
            document[key] = copied
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(json.dumps(document), encoding="utf-8")
                os.replace(tmp_path, self.path)
            except OSError as exc:
                raise StorageError(f"Failed to write store file {self.path}: {exc}") from exc


@dataclass
class PostgresKeyValueStore:
    """JSONB-backed store in the runtime database.

    The ``kv_store`` table is created by migration ``0001``.
    """

    db_manager: DatabaseManager

    def get(self, key: str) -> JSONValue:
        sql = "SELECT value FROM kv_store WHERE key = %s"

        try:
            with self.db_manager.get_runtime_connection() as conn:
                cursor = conn.cursor()
                try:
                    cursor.execute(sql, (key,))
                    row = cursor.fetchone()
                finally:
                    cursor.close()
        except (psycopg2.Error, DatabaseError) as exc:
            raise StorageError(f"Failed to read key {key!r}: {exc}") from exc

        if row is None:
            return None
        return row[0]

    def set(self, key: str, value: JSONValue) -> None:
        sql = """
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (%s, %s, NOW())
            ON CONFLICT (key) DO UPDATE
            SET value = EXCLUDED.value, updated_at = NOW()
        """

        copied = _roundtrip(value)
        try:
            with self.db_manager.get_runtime_connection() as conn:
                cursor = conn.cursor()
                try:
                    cursor.execute(sql, (key, Json(copied)))
                    conn.commit()
                finally:
                    cursor.close()
        except (psycopg2.Error, DatabaseError) as exc:
            raise StorageError(f"Failed to write key {key!r}: {exc}") from exc


# ============================================================================
# Factory
# ============================================================================


def build_store(config: Optional[MarketRegimeConfig] = None) -> KeyValueStore:
    """Return the key-value backend selected by ``STORE_BACKEND``."""

    if config is None:
        config = get_config()

    backend = config.store_backend
    if backend == "memory":
        store: KeyValueStore = InMemoryKeyValueStore()
    elif backend == "file":
        store = JsonFileKeyValueStore(path=Path(config.store_path))
    elif backend == "postgres":
        store = PostgresKeyValueStore(db_manager=DatabaseManager(config))
    else:  # pragma: no cover - guarded by the Literal type on the config
        raise ValueError(f"Unsupported store backend: {backend!r}")

    logger.info("build_store: backend=%s", backend)
    return store
