"""007: create admin_logs table

Revision ID: 007
Revises: 006
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE admin_logs (
            id              BIGSERIAL       PRIMARY KEY,
            admin_id        VARCHAR(64)     NOT NULL,
            action          VARCHAR(64)     NOT NULL,
            entity_type     VARCHAR(32)     NOT NULL,
            entity_id       VARCHAR(64)     NOT NULL,
            details         JSONB           NOT NULL DEFAULT '{}'::jsonb,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_admin_logs_entity ON admin_logs (entity_type, entity_id);")
    op.execute("COMMENT ON TABLE admin_logs IS 'Append-only moderator audit trail';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS admin_logs CASCADE;")
