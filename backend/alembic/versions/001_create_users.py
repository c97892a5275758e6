"""Create users table with unique CIN.

Revision ID: 001_create_users
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_create_users"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("cin", sa.String(8), nullable=False),
        sa.Column("cin_release_date", sa.Date, nullable=False),
        sa.Column("is_married", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("cin", name="uq_users_cin"),
    )
    op.create_index(
        "ix_users_cin_release_date", "users", ["cin", "cin_release_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_users_cin_release_date", table_name="users")
    op.drop_table("users")
