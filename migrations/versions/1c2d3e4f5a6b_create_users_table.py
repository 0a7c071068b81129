"""create users table

Revision ID: 1c2d3e4f5a6b
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "1c2d3e4f5a6b"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

RATING_EXPRESSION = "CASE WHEN viewers > 0 THEN ROUND(likes * 1.0 / viewers, 3) ELSE 0 END"


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
        ),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("nickname", sa.String(), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("viewers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "rating",
            sa.Numeric(10, 3),
            sa.Computed(RATING_EXPRESSION, persisted=True),
            nullable=False,
        ),
        sa.UniqueConstraint("nickname", name="uq_users_nickname"),
        sa.CheckConstraint("likes >= 0", name="ck_users_likes_non_negative"),
        sa.CheckConstraint("viewers >= 0", name="ck_users_viewers_non_negative"),
        sa.CheckConstraint("likes <= viewers", name="ck_users_likes_lte_viewers"),
    )
    # The unique constraint's index also serves every lookup by nickname.
    op.create_index("ix_users_rating_id", "users", ["rating", "id"])


def downgrade() -> None:
    op.drop_index("ix_users_rating_id", table_name="users")
    op.drop_table("users")
