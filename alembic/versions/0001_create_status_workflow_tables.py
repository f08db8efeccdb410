"""create status workflow tables

Revision ID: 0001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "event_status_definitions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("display_name", sa.String(50), nullable=False),
        sa.Column("slug", sa.String(60), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_reserved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("display_name"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_event_status_definitions_id", "event_status_definitions", ["id"])

    op.create_table(
        "status_category_mappings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "status_definition_id",
            sa.Integer(),
            sa.ForeignKey("event_status_definitions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("theme_id", sa.String(), nullable=False),
        sa.Column("category_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("status_definition_id", "theme_id", name="uq_status_mapping_status_theme"),
    )
    op.create_index("ix_status_category_mappings_id", "status_category_mappings", ["id"])
    op.create_index(
        "ix_status_category_mappings_status_definition_id",
        "status_category_mappings",
        ["status_definition_id"],
    )
    op.create_index("ix_status_category_mappings_theme_id", "status_category_mappings", ["theme_id"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("slug", sa.String(60), nullable=False),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("votes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_status", "events", ["status"])


def downgrade() -> None:
    op.drop_index("ix_events_status", table_name="events")
    op.drop_index("ix_events_id", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_status_category_mappings_theme_id", table_name="status_category_mappings")
    op.drop_index("ix_status_category_mappings_status_definition_id", table_name="status_category_mappings")
    op.drop_index("ix_status_category_mappings_id", table_name="status_category_mappings")
    op.drop_table("status_category_mappings")
    op.drop_index("ix_event_status_definitions_id", table_name="event_status_definitions")
    op.drop_table("event_status_definitions")
