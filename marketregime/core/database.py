"""
MarketRegime: Database Connection Management

This module provides connection pooling for the optional runtime
PostgreSQL database backing :class:`marketregime.core.kv_store.PostgresKeyValueStore`.
It uses psycopg2's ``SimpleConnectionPool`` with a thin wrapper that
exposes a context manager for acquiring connections.

Key responsibilities:
- Maintain a lazily created connection pool for runtime_db
- Provide a context manager to acquire/release connections safely
- Encapsulate connection string construction from configuration

External dependencies:
- psycopg2-binary: PostgreSQL client and connection pooling

Database tables accessed:
- None directly (this module is infrastructure only)

Thread safety: Thread-safe under normal psycopg2 pool usage.

Author: MarketRegime Team
Created: 2026-02-03
Last Modified: 2026-02-03
Status: Development
Version: v0.1.0
"""

# ============================================================================
# Imports
# ============================================================================

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional

from psycopg2 import pool
from psycopg2.extensions import connection as PsycopgConnection

from marketregime.core.config import DatabaseConfig, MarketRegimeConfig
from marketregime.core.logging import get_logger

# ============================================================================
# Module Setup
# ============================================================================

logger = get_logger(__name__)


class DatabaseError(Exception):
    """Raised when a database connection or operation fails."""


class DatabaseManager:
    """Manage the connection pool for the runtime database.

    Typical usage::

        db = DatabaseManager(get_config())
        with db.get_runtime_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

    Attributes:
        config: Loaded configuration instance.
        _runtime_pool: Connection pool for the runtime DB.
    """

    def __init__(self, config: MarketRegimeConfig) -> None:
        self.config = config
        self._runtime_pool: Optional[pool.SimpleConnectionPool] = None
        logger.info("DatabaseManager initialised")

    @staticmethod
    def _create_connection_string(db_config: DatabaseConfig) -> str:
        """Build a PostgreSQL DSN from configuration."""

        return (
            f"host={db_config.host} "
            f"port={db_config.port} "
            f"dbname={db_config.name} "
            f"user={db_config.user} "
            f"password={db_config.password}"
        )

    def _get_or_create_pool(self) -> pool.SimpleConnectionPool:
        """Return the existing pool or create a new one.

        Raises:
            DatabaseError: If the pool cannot be created.
        """

        if self._runtime_pool is not None:
            return self._runtime_pool

        db_config = self.config.runtime_db
        dsn = self._create_connection_string(db_config)
        try:
            new_pool = pool.SimpleConnectionPool(
                minconn=1,
                maxconn=db_config.pool_size,
                dsn=dsn,
            )
        except Exception as exc:  # pragma: no cover - connection errors
            logger.error("Failed to create connection pool: %s", exc)
            raise DatabaseError("Failed to create database connection pool") from exc

        self._runtime_pool = new_pool
        logger.info("Created connection pool for database '%s'", db_config.name)
        return new_pool

    @contextmanager
    def get_runtime_connection(self) -> Generator[PsycopgConnection, None, None]:
        """Yield a connection to the runtime database.

        Yields:
            A psycopg2 connection object. The connection is returned to the
            pool when the context manager exits.

        Raises:
            DatabaseError: If a connection cannot be acquired.
        """

        pool_obj = self._get_or_create_pool()
        try:
            conn = pool_obj.getconn()
        except Exception as exc:  # pragma: no cover - connection errors
            logger.error("Failed to acquire runtime_db connection: %s", exc)
            raise DatabaseError("Failed to acquire runtime_db connection") from exc

        try:
            yield conn
        finally:
            pool_obj.putconn(conn)

    def close_all(self) -> None:
        """Close the connection pool during graceful shutdown."""

        if self._runtime_pool is not None:
            self._runtime_pool.closeall()
            self._runtime_pool = None
            logger.info("Closed runtime_db connection pool")
