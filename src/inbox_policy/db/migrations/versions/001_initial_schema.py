# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

"""Initial schema: actors and actor_relationships.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from inbox_policy.models.base import JSONType

revision: str = "001"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    # ------------------------------------------------------------------
    # 1. actors
    # ------------------------------------------------------------------
    op.create_table(
        "actors",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("actor_type", sa.String(), nullable=False, server_default="user"),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("attrs", JSONType, nullable=False, server_default="{}"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            "actor_type IN ('user', 'group')",
            name="ck_actors_actor_type",
        ),
    )
    op.create_index("idx_actors_actor_type", "actors", ["actor_type"])

    # ------------------------------------------------------------------
    # 2. actor_relationships
    # ------------------------------------------------------------------
    op.create_table(
        "actor_relationships",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "subject_id",
            sa.Integer(),
            sa.ForeignKey("actors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("relationship_type", sa.String(), nullable=False),
        sa.Column(
            "object_id",
            sa.Integer(),
            sa.ForeignKey("actors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("subject_id", "relationship_type", "object_id"),
    )
    op.create_index(
        "idx_actor_relationships_subject",
        "actor_relationships",
        ["subject_id", "relationship_type"],
    )
    op.create_index(
        "idx_actor_relationships_object",
        "actor_relationships",
        ["object_id", "relationship_type"],
    )


def downgrade() -> None:
    op.drop_index("idx_actor_relationships_object", table_name="actor_relationships")
    op.drop_index("idx_actor_relationships_subject", table_name="actor_relationships")
    op.drop_table("actor_relationships")
    op.drop_index("idx_actors_actor_type", table_name="actors")
    op.drop_table("actors")
