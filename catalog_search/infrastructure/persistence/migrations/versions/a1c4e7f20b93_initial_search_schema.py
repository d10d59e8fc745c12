"""initial search schema

Revision ID: a1c4e7f20b93
Revises:
Create Date: 2026-03-02 10:14:31.402118

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a1c4e7f20b93"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema - searchable projection, principals, saved searches, analytics."""
    op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")

    op.create_table(
        "searchable_entity",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(length=16), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("tags", postgresql.ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.Column(
            "tags_normalized", postgresql.ARRAY(sa.String()), nullable=False, server_default="{}"
        ),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("kind", sa.String(), nullable=True),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("brand_id", sa.String(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("entity_type", "status", "owner_id", "kind", "project_id", "brand_id"):
        op.create_index(f"ix_searchable_entity_{column}", "searchable_entity", [column])
    op.create_index("ix_searchable_entity_updated_id", "searchable_entity", ["updated_at", "id"])
    op.create_index(
        "ix_searchable_entity_type_created", "searchable_entity", ["entity_type", "created_at"]
    )
    op.create_index(
        "ix_searchable_entity_tags_normalized",
        "searchable_entity",
        ["tags_normalized"],
        postgresql_using="gin",
    )
    op.execute(
        "CREATE INDEX ix_searchable_entity_title_trgm "
        "ON searchable_entity USING gin (title gin_trgm_ops)"
    )

    op.create_table(
        "entity_participant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("creator_id", sa.String(), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["entity_id"], ["searchable_entity.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_entity_participant_creator_entity",
        "entity_participant",
        ["creator_id", "entity_id"],
    )

    op.create_table(
        "entity_license_grant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("brand_id", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["entity_id"], ["searchable_entity.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_entity_license_grant_brand_entity",
        "entity_license_grant",
        ["brand_id", "entity_id"],
    )

    op.create_table(
        "principal",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("creator_id", sa.String(), nullable=True),
        sa.Column("brand_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "saved_search",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("query", sa.String(length=200), nullable=False),
        sa.Column("entity_types", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("filters", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_saved_search_owner_id", "saved_search", ["owner_id"])

    op.create_table(
        "search_event",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("actor_id", sa.String(), nullable=True),
        sa.Column("query", sa.String(length=200), nullable=False),
        sa.Column("entity_types", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("filters", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("result_count", sa.Integer(), nullable=False),
        sa.Column("execution_time_ms", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_search_event_actor_id", "search_event", ["actor_id"])
    op.create_index("ix_search_event_created_at", "search_event", ["created_at"])
    op.create_index("ix_search_event_actor_created", "search_event", ["actor_id", "created_at"])

    op.create_table(
        "click_event",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("event_id", sa.String(), nullable=False),
        sa.Column("result_id", sa.String(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("entity_type", sa.String(length=16), nullable=False),
        sa.Column("clicked_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_click_event_event_id", "click_event", ["event_id"])
    op.create_index("ix_click_event_clicked_result", "click_event", ["clicked_at", "result_id"])


def downgrade() -> None:
    """Downgrade schema - drop all search tables."""
    op.drop_table("click_event")
    op.drop_table("search_event")
    op.drop_table("saved_search")
    op.drop_table("principal")
    op.drop_table("entity_license_grant")
    op.drop_table("entity_participant")
    op.execute("DROP INDEX IF EXISTS ix_searchable_entity_title_trgm")
    op.drop_table("searchable_entity")
