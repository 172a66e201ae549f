"""002: create catalog tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE item_groups (
            id              VARCHAR(64)     PRIMARY KEY,
            name            VARCHAR(200)    NOT NULL,
            total           INT,
            printed_total   INT,
            release_date    DATE,
            logo            TEXT,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE TABLE catalog_items (
            id              VARCHAR(64)     PRIMARY KEY,
            name            VARCHAR(200)    NOT NULL,
            number          VARCHAR(20),
            rarity          VARCHAR(64),
            supertype       VARCHAR(64),
            image_small     TEXT,
            group_id        VARCHAR(64)     REFERENCES item_groups (id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_catalog_items_group ON catalog_items (group_id);")
    op.execute("CREATE INDEX idx_catalog_items_name ON catalog_items (LOWER(name));")
    op.execute("""
        CREATE INDEX idx_catalog_items_number
        ON catalog_items (fn_normalize_collector_number(number));
    """)
    op.execute("CREATE INDEX idx_item_groups_release ON item_groups (release_date DESC);")
    op.execute("COMMENT ON TABLE catalog_items IS 'Card catalog, loaded by the external import job';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS catalog_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS item_groups CASCADE;")
