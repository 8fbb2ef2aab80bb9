# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from inbox_policy.config import get_settings
from inbox_policy.models.actor import Actor
from inbox_policy.policy import Policy
from inbox_policy.query.aliases import AliasAllocator
from inbox_policy.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ActorRepository(BaseRepository[Actor]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Actor)

    def recipient_query(
        self,
        policy: Policy,
        sender: Actor,
        *,
        name_query: str | None = None,
        aliases: AliasAllocator | None = None,
    ) -> Select[tuple[Actor]]:
        """Build the recipient search for ``sender`` without executing it."""
        stmt = (
            select(Actor)
            .where(
                Actor.actor_type == "user",
                Actor.is_active.is_(True),
                Actor.id != sender.id,
            )
            .distinct()
        )
        if name_query:
            stmt = stmt.where(Actor.name.icontains(name_query, autoescape=True))
        return policy.get_clauses(sender, aliases).apply(stmt)

    async def search_recipients(
        self,
        policy: Policy,
        sender: Actor,
        *,
        name_query: str | None = None,
        limit: int = 50,
        offset: int = 0,
        aliases: AliasAllocator | None = None,
    ) -> list[Actor]:
        """Return active users ``sender`` may write to under ``policy``."""
        if not policy.validate_sender_type(sender):
            logger.info("Sender %s is not eligible under %r", sender.id, policy)
            return []
        limit = max(0, min(limit, get_settings().max_recipient_results))
        offset = max(0, offset)
        stmt = (
            self.recipient_query(policy, sender, name_query=name_query, aliases=aliases)
            .order_by(Actor.name, Actor.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def can_message(
        self,
        policy: Policy,
        sender: Actor,
        recipient: Any,
        *,
        aliases: AliasAllocator | None = None,
    ) -> bool:
        """Full pair check: categories plus the relationship rules in the store."""
        if not policy.validate_pair(sender, recipient):
            return False
        stmt = (
            self.recipient_query(policy, sender, aliases=aliases)
            .where(Actor.id == recipient.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first() is not None
