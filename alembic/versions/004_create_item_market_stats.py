"""004: create item_market_stats view

Revision ID: 004
Revises: 003
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Only active listings are visible to buyers.
    op.execute("""
        CREATE OR REPLACE VIEW item_market_stats AS
        SELECT
            item_id,
            COUNT(*)                        AS offers_count,
            MIN(price_cents)                AS min_price_cents,
            ROUND(AVG(price_cents))::BIGINT AS avg_price_cents
        FROM listings
        WHERE status = 'active'
        GROUP BY item_id;
    """)


def downgrade() -> None:
    op.execute("DROP VIEW IF EXISTS item_market_stats;")
