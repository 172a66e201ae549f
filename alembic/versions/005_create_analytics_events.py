"""005: create analytics_events table

Revision ID: 005
Revises: 004
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE analytics_events (
            id              BIGSERIAL       PRIMARY KEY,
            event_name      VARCHAR(64)     NOT NULL,
            entity_id       VARCHAR(64),
            user_id         VARCHAR(64),
            session_id      VARCHAR(64),
            properties      JSONB           NOT NULL DEFAULT '{}'::jsonb,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE INDEX idx_analytics_events_name_time
        ON analytics_events (event_name, created_at DESC);
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS analytics_events CASCADE;")
