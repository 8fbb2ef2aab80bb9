# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from inbox_policy.categories import AdminCategory, CategoryRegistry, FlagCategory
from inbox_policy.models.base import Base
from inbox_policy.query.aliases import AliasAllocator


def _get_test_database_url() -> str:
    """Return the test database URL from env, falling back to SQLite."""
    return os.environ.get(
        "TEST_DATABASE_URL",
        "sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Create an async engine for the test database."""
    url = _get_test_database_url()
    engine = create_async_engine(url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(
    async_engine: AsyncEngine,
) -> AsyncIterator[AsyncSession]:
    """Provide a transactional database session that rolls back after each test."""
    session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def registry() -> CategoryRegistry:
    """Registry with the built-in admin category and a 'member' flag category."""
    reg = CategoryRegistry()
    reg.register(AdminCategory())
    reg.register(FlagCategory("member", "is_member"))
    return reg


@pytest.fixture
def aliases() -> AliasAllocator:
    """A fresh allocator so alias names in a test start at 0."""
    return AliasAllocator()


# ---------------------------------------------------------------------------
# Factory helpers for creating model instances in tests
# ---------------------------------------------------------------------------


def make_actor(
    *,
    id: int | None = None,
    name: str = "Test Actor",
    actor_type: str = "user",
    is_admin: bool = False,
    is_active: bool = True,
    attrs: dict[str, object] | None = None,
) -> dict[str, object]:
    """Return kwargs suitable for constructing an Actor model instance."""
    kwargs: dict[str, object] = {
        "name": name,
        "actor_type": actor_type,
        "is_admin": is_admin,
        "is_active": is_active,
        "attrs": attrs or {},
    }
    if id is not None:
        kwargs["id"] = id
    return kwargs


def make_relationship(
    *,
    subject_id: int,
    object_id: int,
    relationship_type: str = "friend",
) -> dict[str, object]:
    """Return kwargs suitable for constructing an ActorRelationship model instance."""
    return {
        "subject_id": subject_id,
        "relationship_type": relationship_type,
        "object_id": object_id,
    }
