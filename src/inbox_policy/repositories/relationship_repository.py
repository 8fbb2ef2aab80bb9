# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inbox_policy.models.relationship import ActorRelationship
from inbox_policy.repositories.base import BaseRepository


class RelationshipRepository(BaseRepository[ActorRelationship]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ActorRelationship)

    async def add(self, subject_id: int, relationship_type: str, object_id: int) -> ActorRelationship:
        return await self.create(
            ActorRelationship(
                subject_id=subject_id,
                relationship_type=relationship_type,
                object_id=object_id,
            )
        )

    async def exists(self, subject_id: int, relationship_type: str, object_id: int) -> bool:
        result = await self.session.execute(
            select(ActorRelationship.id).where(
                ActorRelationship.subject_id == subject_id,
                ActorRelationship.relationship_type == relationship_type,
                ActorRelationship.object_id == object_id,
            )
        )
        return result.first() is not None

    async def list_for_actor(
        self,
        actor_id: int,
        direction: str = "both",
        relationship_type: str | None = None,
    ) -> list[ActorRelationship]:
        if direction == "outgoing":
            stmt = select(ActorRelationship).where(ActorRelationship.subject_id == actor_id)
        elif direction == "incoming":
            stmt = select(ActorRelationship).where(ActorRelationship.object_id == actor_id)
        elif direction == "both":
            stmt = select(ActorRelationship).where(
                (ActorRelationship.subject_id == actor_id)
                | (ActorRelationship.object_id == actor_id)
            )
        else:
            raise ValueError(f"Invalid direction: {direction!r}")
        if relationship_type is not None:
            stmt = stmt.where(ActorRelationship.relationship_type == relationship_type)
        result = await self.session.execute(stmt.order_by(ActorRelationship.id))
        return list(result.scalars().all())
