"""003: create listings table

Revision ID: 003
Revises: 002
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE listings (
            id                  VARCHAR(64)     PRIMARY KEY,
            seller_id           VARCHAR(64)     NOT NULL,
            item_id             VARCHAR(64)     NOT NULL REFERENCES catalog_items (id),
            price_cents         BIGINT          NOT NULL,
            fee_cents           BIGINT          NOT NULL,
            net_cents           BIGINT          NOT NULL,
            quantity            INT             NOT NULL DEFAULT 1,
            condition           VARCHAR(8)      NOT NULL DEFAULT 'NM',
            language            VARCHAR(8)      NOT NULL DEFAULT 'pt',
            finish              VARCHAR(16)     NOT NULL DEFAULT 'normal',
            notes               TEXT,
            status              VARCHAR(20)     NOT NULL DEFAULT 'pending_minimum',
            rejection_reason    TEXT,
            is_approved         BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_listings_price_gt_0       CHECK (price_cents > 0),
            CONSTRAINT ck_listings_fee_gte_0        CHECK (fee_cents >= 0),
            CONSTRAINT ck_listings_fee_split        CHECK (fee_cents + net_cents = price_cents),
            CONSTRAINT ck_listings_quantity         CHECK (quantity >= 1),
            CONSTRAINT ck_listings_condition        CHECK (condition IN ('NM', 'LP', 'MP', 'HP', 'DMG')),
            CONSTRAINT ck_listings_language         CHECK (language IN ('pt', 'en', 'jp')),
            CONSTRAINT ck_listings_finish           CHECK (finish IN ('normal', 'foil', 'reverse')),
            CONSTRAINT ck_listings_status           CHECK (
                status IN ('pending_minimum', 'pending_review', 'active',
                           'rejected', 'sold', 'cancelled')
            ),
            CONSTRAINT ck_listings_rejection_reason CHECK (
                status <> 'rejected' OR rejection_reason IS NOT NULL
            )
        );
    """)
    op.execute("CREATE INDEX idx_listings_seller ON listings (seller_id, status);")
    op.execute("""
        CREATE INDEX idx_listings_item_active
        ON listings (item_id, price_cents)
        WHERE status = 'active';
    """)
    op.execute("""
        CREATE INDEX idx_listings_review
        ON listings (created_at)
        WHERE status = 'pending_review';
    """)
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
            BEFORE UPDATE ON listings
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE listings IS 'Seller offers — all amounts in minor currency units (cents)';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
