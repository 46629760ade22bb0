"""create tasks table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_tasks"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tasks",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_focused", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("metrics", sa.JSON(), nullable=True),
        sa.Column("priority_score", sa.Float(), nullable=False, server_default="0"),
    )
    op.create_index("ix_tasks_completed_at", "tasks", ["completed_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_tasks_completed_at", table_name="tasks")
    op.drop_table("tasks")
