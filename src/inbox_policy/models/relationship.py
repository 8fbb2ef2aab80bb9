# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inbox_policy.models.base import Base, TimestampMixin


class ActorRelationship(TimestampMixin, Base):
    """A named, directed edge ``subject --relationship_type--> object``."""

    __tablename__ = "actor_relationships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_id: Mapped[int] = mapped_column(
        ForeignKey("actors.id", ondelete="CASCADE"),
        nullable=False,
    )
    relationship_type: Mapped[str] = mapped_column(String, nullable=False)
    object_id: Mapped[int] = mapped_column(
        ForeignKey("actors.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Relationships
    subject_actor: Mapped[Actor] = relationship(  # type: ignore[name-defined]  # noqa: F821
        foreign_keys="[ActorRelationship.subject_id]",
        back_populates="outgoing_relationships",
    )
    object_actor: Mapped[Actor] = relationship(  # type: ignore[name-defined]  # noqa: F821
        foreign_keys="[ActorRelationship.object_id]",
        back_populates="incoming_relationships",
    )

    __table_args__ = (
        UniqueConstraint("subject_id", "relationship_type", "object_id"),
        Index("idx_actor_relationships_subject", "subject_id", "relationship_type"),
        Index("idx_actor_relationships_object", "object_id", "relationship_type"),
    )
