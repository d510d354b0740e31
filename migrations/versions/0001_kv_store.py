"""key-value store

Revision ID: 0001
Revises: None
Create Date: 2026-02-03

This migration creates the table behind the Postgres key-value backend:

- kv_store (one JSONB document per key: regime_state, regime_log,
  market_data, corr_alerts)
"""

from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the kv_store table."""

    op.create_table(
        "kv_store",
        sa.Column("key", sa.String(length=100), primary_key=True),
        sa.Column("value", postgresql.JSONB, nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )


def downgrade() -> None:
    """Drop the kv_store table."""

    op.drop_table("kv_store")
