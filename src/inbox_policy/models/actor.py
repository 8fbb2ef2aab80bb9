# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inbox_policy.models.base import Base, JSONType, TimestampMixin


class Actor(TimestampMixin, Base):
    """A user or group that can take part in a relationship."""

    __tablename__ = "actors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actor_type: Mapped[str] = mapped_column(String, nullable=False, default="user")
    name: Mapped[str] = mapped_column(Text, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    attrs: Mapped[dict[str, object]] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
    )

    # Relationships
    outgoing_relationships: Mapped[list[ActorRelationship]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        foreign_keys="[ActorRelationship.subject_id]",
        back_populates="subject_actor",
    )
    incoming_relationships: Mapped[list[ActorRelationship]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        foreign_keys="[ActorRelationship.object_id]",
        back_populates="object_actor",
    )

    __table_args__ = (
        CheckConstraint(
            "actor_type IN ('user', 'group')",
            name="ck_actors_actor_type",
        ),
        Index("idx_actors_actor_type", "actor_type"),
    )
