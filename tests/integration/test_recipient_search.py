# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inbox_policy.categories import CategoryRegistry
from inbox_policy.config import Settings
from inbox_policy.models.actor import Actor
from inbox_policy.models.relationship import ActorRelationship
from inbox_policy.policy import Policy
from inbox_policy.query.aliases import AliasAllocator
from inbox_policy.query.fragments import combine
from inbox_policy.repositories.actor_repository import ActorRepository
from tests.conftest import make_actor, make_relationship

SENDER = 42
ALICE, BOB, CAROL, DAVE, ERIN = 1, 2, 3, 4, 5
CHESS, HIKING = 100, 101


async def _seed(db_session: AsyncSession) -> dict[int, Actor]:
    """Create the sender, five users, two groups and their relationships.

    - sender is friends with alice; bob and alice list the sender as a friend
    - sender belongs to chess and hiking; alice to chess, bob to hiking,
      carol to both; erin is linked to chess by another relationship type
    - alice and carol are members, dave is an admin
    """
    actors = {
        SENDER: Actor(**make_actor(id=SENDER, name="Sender")),
        ALICE: Actor(**make_actor(id=ALICE, name="Alice", attrs={"is_member": True})),
        BOB: Actor(**make_actor(id=BOB, name="Bob", attrs={"is_member": False})),
        CAROL: Actor(**make_actor(id=CAROL, name="Carol", attrs={"is_member": True})),
        DAVE: Actor(**make_actor(id=DAVE, name="Dave", is_admin=True)),
        ERIN: Actor(**make_actor(id=ERIN, name="Erin")),
        CHESS: Actor(**make_actor(id=CHESS, name="Chess Club", actor_type="group")),
        HIKING: Actor(**make_actor(id=HIKING, name="Hiking", actor_type="group")),
    }
    db_session.add_all(actors.values())
    await db_session.flush()

    edges = [
        (SENDER, "friend", ALICE),
        (BOB, "friend", SENDER),
        (ALICE, "friend", SENDER),
        (SENDER, "group_member", CHESS),
        (SENDER, "group_member", HIKING),
        (ALICE, "group_member", CHESS),
        (BOB, "group_member", HIKING),
        (CAROL, "group_member", CHESS),
        (CAROL, "group_member", HIKING),
        (ERIN, "group_admin", CHESS),
    ]
    db_session.add_all(
        ActorRelationship(
            **make_relationship(subject_id=s, relationship_type=r, object_id=o)
        )
        for s, r, o in edges
    )
    await db_session.flush()
    return actors


async def _ids(db_session: AsyncSession, policy: Policy, sender: Actor) -> set[int]:
    stmt = policy.get_clauses(sender).apply(
        select(Actor.id).where(Actor.actor_type == "user").distinct()
    )
    result = await db_session.execute(stmt)
    return set(result.scalars().all())


class TestRelationshipPredicates:
    async def test_direct_relationship(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        policy = Policy({"relationship": "friend"}, registry=registry)
        assert await _ids(db_session, policy, actors[SENDER]) == {ALICE}

    async def test_inverse_relationship(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        policy = Policy(
            {"relationship": "friend", "inverse_relationship": True}, registry=registry
        )
        assert await _ids(db_session, policy, actors[SENDER]) == {ALICE, BOB}

    async def test_shared_group(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        policy = Policy({"group_relationship": "group_member"}, registry=registry)
        # The sender shares its own groups, so it is part of the raw predicate.
        assert await _ids(db_session, policy, actors[SENDER]) == {SENDER, ALICE, BOB, CAROL}

    async def test_shared_group_for_member_of_one_group(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        policy = Policy({"group_relationship": "group_member"}, registry=registry)
        assert await _ids(db_session, policy, actors[BOB]) == {SENDER, BOB, CAROL}

    async def test_two_policies_in_one_query(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        aliases = AliasAllocator()
        outgoing = Policy({"relationship": "friend"}, registry=registry)
        incoming = Policy(
            {"relationship": "friend", "inverse_relationship": True}, registry=registry
        )
        sender = actors[SENDER]
        fragment = combine(
            outgoing.get_clauses(sender, aliases),
            incoming.get_clauses(sender, aliases),
        )
        assert [j.target.name for j in fragment.joins] == ["rel0", "rel1"]

        stmt = fragment.apply(select(Actor.id).distinct())
        result = await db_session.execute(stmt)
        assert set(result.scalars().all()) == {ALICE}


class TestRecipientTypePredicates:
    async def test_flag_category(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        policy = Policy({"recipient": "member"}, registry=registry)
        assert await _ids(db_session, policy, actors[SENDER]) == {ALICE, CAROL}

    async def test_admin_category(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        policy = Policy({"recipient": "admin"}, registry=registry)
        assert await _ids(db_session, policy, actors[SENDER]) == {DAVE}

    async def test_flag_pair_check_agrees_with_bulk_filter(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        values: dict[int, object] = {
            1: True,
            2: 1,
            3: 2,
            4: "yes",
            5: "true",
            6: "false",
            7: False,
            8: 0,
            9: None,
        }
        users = [
            Actor(**make_actor(id=i, name=f"User {i}", attrs={"is_member": v}))
            for i, v in values.items()
        ]
        users.append(Actor(**make_actor(id=10, name="User 10")))
        db_session.add_all(users)
        await db_session.flush()

        policy = Policy({"recipient": "member"}, registry=registry)
        paired = {a.id for a in users if policy.validate_recipient_type(a)}
        stmt = policy.get_recipient_clauses().apply(
            select(Actor.id).where(Actor.actor_type == "user")
        )
        bulk = set((await db_session.execute(stmt)).scalars().all())

        assert paired == bulk == {1}

    async def test_member_friends(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        policy = Policy(
            {"recipient": "member", "relationship": "friend", "inverse_relationship": True},
            registry=registry,
        )
        assert await _ids(db_session, policy, actors[SENDER]) == {ALICE}


class TestActorRepository:
    async def test_search_recipients_excludes_sender_and_groups(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        repo = ActorRepository(db_session)
        policy = Policy({"group_relationship": "group_member"}, registry=registry)

        found = await repo.search_recipients(policy, actors[SENDER])
        assert [a.id for a in found] == [ALICE, BOB, CAROL]

    async def test_search_recipients_name_query_and_paging(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        repo = ActorRepository(db_session)
        policy = Policy(registry=registry)

        everyone = await repo.search_recipients(policy, actors[SENDER])
        assert [a.name for a in everyone] == ["Alice", "Bob", "Carol", "Dave", "Erin"]

        named = await repo.search_recipients(policy, actors[SENDER], name_query="aro")
        assert [a.id for a in named] == [CAROL]
        page = await repo.search_recipients(policy, actors[SENDER], limit=2, offset=2)
        assert [a.name for a in page] == ["Carol", "Dave"]

    async def test_name_query_matches_wildcards_literally(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        db_session.add(Actor(**make_actor(id=6, name="Frank_100%")))
        await db_session.flush()
        repo = ActorRepository(db_session)
        policy = Policy(registry=registry)
        sender = actors[SENDER]

        for query in ("%", "_", "0%", "k_1"):
            found = await repo.search_recipients(policy, sender, name_query=query)
            assert [a.name for a in found] == ["Frank_100%"]
        assert await repo.search_recipients(policy, sender, name_query="a%e") == []

    async def test_negative_paging_is_clamped(
        self,
        db_session: AsyncSession,
        registry: CategoryRegistry,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        actors = await _seed(db_session)
        repo = ActorRepository(db_session)
        policy = Policy(registry=registry)
        sender = actors[SENDER]

        assert await repo.search_recipients(policy, sender, limit=-1) == []
        page = await repo.search_recipients(policy, sender, limit=2, offset=-5)
        assert [a.name for a in page] == ["Alice", "Bob"]

        monkeypatch.setattr(
            "inbox_policy.repositories.actor_repository.get_settings",
            lambda: Settings(max_recipient_results=3),
        )
        capped = await repo.search_recipients(policy, sender, limit=1000)
        assert [a.name for a in capped] == ["Alice", "Bob", "Carol"]

    async def test_ineligible_sender_gets_nobody(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        repo = ActorRepository(db_session)
        policy = Policy({"sender": "admin"}, registry=registry)

        assert await repo.search_recipients(policy, actors[SENDER]) == []
        assert len(await repo.search_recipients(policy, actors[DAVE])) == 5

    async def test_can_message(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        repo = ActorRepository(db_session)
        policy = Policy({"recipient": "member", "relationship": "friend"}, registry=registry)
        sender = actors[SENDER]

        assert await repo.can_message(policy, sender, actors[ALICE])
        # Carol is a member but not a friend; Bob is neither.
        assert not await repo.can_message(policy, sender, actors[CAROL])
        assert not await repo.can_message(policy, sender, actors[BOB])

    async def test_can_message_rejects_inactive_recipient(
        self, db_session: AsyncSession, registry: CategoryRegistry
    ) -> None:
        actors = await _seed(db_session)
        actors[ALICE].is_active = False
        await db_session.flush()
        repo = ActorRepository(db_session)
        policy = Policy({"relationship": "friend"}, registry=registry)

        assert not await repo.can_message(policy, actors[SENDER], actors[ALICE])
