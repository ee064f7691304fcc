"""Create lessons and orders tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `lessons` and `orders` tables.
How:   PostgreSQL UUID primary keys with gen_random_uuid(), TIMESTAMP WITH
       TIME ZONE for insertion/order times, JSON for an order's lesson ids.

Rollback: downgrade() drops both tables (all lessons and orders are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create both tables with their constraints and the search index."""
    op.create_table(
        "lessons",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique lesson identifier, exposed over HTTP as _id",
        ),
        sa.Column("subject", sa.String(120), nullable=False),
        sa.Column("location", sa.String(120), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column(
            "spaces",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Remaining spaces; never negative",
        ),
        sa.Column("icon", sa.String(80), nullable=True),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Insertion time; defines listing order",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("spaces >= 0", name="ck_lessons_spaces_non_negative"),
        sa.CheckConstraint("price >= 0", name="ck_lessons_price_non_negative"),
    )

    # Search filters on subject and location
    op.create_index(
        "idx_lessons_subject_location",
        "lessons",
        ["subject", "location"],
    )

    op.create_table(
        "orders",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column(
            "lesson_ids",
            sa.JSON(),
            nullable=False,
            comment="Lesson identifiers as submitted; duplicates allowed",
        ),
        sa.Column(
            "spaces",
            sa.JSON(),
            nullable=True,
            comment="Requested spaces exactly as sent by the client",
        ),
        sa.Column(
            "order_date",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Set by the server when the order is stored (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop both tables. Destructive."""
    op.drop_table("orders")
    op.drop_index("idx_lessons_subject_location", table_name="lessons")
    op.drop_table("lessons")
