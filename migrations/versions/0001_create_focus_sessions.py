"""create focus sessions and users tables

Revision ID: 0001_create_focus_sessions
Revises: 
Create Date: 2026-10-18 00:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_create_focus_sessions"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "focus_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("objective", sa.Text(), nullable=True),
        sa.Column("from_code", sa.String(length=16), nullable=True),
        sa.Column("to_code", sa.String(length=16), nullable=True),
        sa.Column("seat", sa.String(length=16), nullable=True),
        sa.Column("start_time", sa.String(length=64), nullable=False),
        sa.Column("end_time", sa.String(length=64), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.String(length=64), nullable=False),
        sa.Column("synced_to_remote", sa.Boolean(), nullable=False),
        sa.CheckConstraint(
            "status IN ('in-progress', 'completed', 'abandoned')",
            name="ck_focus_sessions_status",
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("idx_user_id", "focus_sessions", ["user_id"])
    op.create_index("idx_start_time", "focus_sessions", ["start_time"])
    op.create_index("idx_status", "focus_sessions", ["status"])
    op.create_index("idx_synced", "focus_sessions", ["synced_to_remote"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("photo_url", sa.String(length=1024), nullable=True),
        sa.Column("last_updated", sa.String(length=64), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_index("idx_synced", table_name="focus_sessions")
    op.drop_index("idx_status", table_name="focus_sessions")
    op.drop_index("idx_start_time", table_name="focus_sessions")
    op.drop_index("idx_user_id", table_name="focus_sessions")
    op.drop_table("focus_sessions")
