"""
MarketRegime: Alembic Environment Configuration

This module configures Alembic for running migrations against the
runtime database that backs the Postgres key-value store
(``STORE_BACKEND=postgres``).

Key responsibilities:
- Build the SQLAlchemy URL from the RUNTIME_DB_* environment variables
- Configure Alembic context for offline and online modes

Author: MarketRegime Team
Created: 2026-02-03
Last Modified: 2026-02-03
Status: Development
Version: v0.2.0
"""

from __future__ import annotations

import os
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import create_engine, pool
from dotenv import load_dotenv

config = context.config

# Use the same .env as the application so credentials match.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_FILE = PROJECT_ROOT / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Tables are plain DDL in the revisions; there are no declarative models.
target_metadata = None


def _get_database_url() -> str:
    host = os.environ.get("RUNTIME_DB_HOST", "localhost")
    port = os.environ.get("RUNTIME_DB_PORT", "5432")
    name = os.environ.get("RUNTIME_DB_NAME", "marketregime")
    user = os.environ.get("RUNTIME_DB_USER", "marketregime")
    password = os.environ.get("RUNTIME_DB_PASSWORD", "")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}"


def run_migrations_offline() -> None:
    """Emit SQL to the script output without connecting."""

    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_get_database_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
