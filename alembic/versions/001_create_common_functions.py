"""001: create common functions

Revision ID: 001
Revises: 
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    # '71' -> '071', '0071' -> '071', '0' -> '000'; NULL stays NULL
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_normalize_collector_number(raw TEXT)
        RETURNS TEXT AS $$
            SELECT CASE
                WHEN raw IS NULL THEN NULL
                ELSE LPAD(COALESCE(NULLIF(LTRIM(BTRIM(raw), '0'), ''), '0'), 3, '0')
            END;
        $$ LANGUAGE sql IMMUTABLE;
    """)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS fn_normalize_collector_number(TEXT);")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
