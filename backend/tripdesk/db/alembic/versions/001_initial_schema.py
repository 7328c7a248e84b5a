"""Initial schema

Revision ID: 001
Revises:
Create Date: 2025-11-20

Creates the submission table: frozen draft payload plus review state.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the submission table."""
    op.create_table(
        "submission",
        sa.Column("submission_id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("variant", sa.Text(), nullable=False),
        sa.Column(
            "data",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("status", sa.Text(), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_message", sa.Text(), nullable=True),
        sa.Column("document_url", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_submission_status"
        ),
    )
    op.create_index("idx_submission_owner", "submission", ["owner_id", "created_at"])
    op.create_index("idx_submission_status", "submission", ["status", "created_at"])


def downgrade() -> None:
    """Drop the submission table."""
    op.drop_index("idx_submission_status", table_name="submission")
    op.drop_index("idx_submission_owner", table_name="submission")
    op.drop_table("submission")
