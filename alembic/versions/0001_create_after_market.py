"""create after_market table

Revision ID: 0001_create_after_market
Revises:
Create Date: 2019-06-02
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_after_market"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # init-db may already have built it
    if sa.inspect(op.get_bind()).has_table("after_market"):
        return

    op.create_table(
        "after_market",
        sa.Column("symbol", sa.String(10), nullable=False),
        sa.Column("percentage", sa.Double, nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("symbol", "date"),
    )
    op.create_index("ix_after_market_symbol", "after_market", ["symbol"])
    op.create_index("ix_after_market_percentage", "after_market", ["percentage"])
    op.create_index("ix_after_market_date", "after_market", ["date"])


def downgrade() -> None:
    op.drop_index("ix_after_market_date", table_name="after_market")
    op.drop_index("ix_after_market_percentage", table_name="after_market")
    op.drop_index("ix_after_market_symbol", table_name="after_market")
    op.drop_table("after_market")
