"""add backlog flag"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0003_add_backlog"
down_revision = "0002_add_notes"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "tasks",
        sa.Column("is_backlogged", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    op.create_index("ix_tasks_is_backlogged", "tasks", ["is_backlogged"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_tasks_is_backlogged", table_name="tasks")
    op.drop_column("tasks", "is_backlogged")
