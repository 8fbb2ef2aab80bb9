# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from inbox_policy.categories.base import ActorCategory, NullCategory
from inbox_policy.categories.builtin import AdminCategory, FlagCategory
from inbox_policy.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CategoryBinding:
    """A category name resolved against a registry."""

    category: str
    provider: ActorCategory
    registered: bool


class CategoryRegistry:
    """Maps category names to their capability providers."""

    def __init__(self) -> None:
        self._categories: dict[str, ActorCategory] = {}

    def register(self, category: ActorCategory) -> None:
        """Add a category. Raises ValueError if name already registered."""
        if category.name in self._categories:
            msg = f"Category '{category.name}' is already registered"
            raise ValueError(msg)
        self._categories[category.name] = category

    def get(self, name: str) -> ActorCategory | None:
        """Return a category by name, or None."""
        return self._categories.get(name)

    def all_categories(self) -> list[ActorCategory]:
        """Return all registered categories."""
        return list(self._categories.values())

    def bind(self, name: str) -> CategoryBinding:
        """Resolve ``name``; unknown names bind a ``NullCategory``."""
        provider = self._categories.get(name)
        if provider is None:
            return CategoryBinding(category=name, provider=NullCategory(name), registered=False)
        return CategoryBinding(category=name, provider=provider, registered=True)

    def __contains__(self, name: object) -> bool:
        return name in self._categories


def build_registry(settings: Settings) -> CategoryRegistry:
    """Create a registry holding the built-in categories named in ``settings``."""
    registry = CategoryRegistry()
    registry.register(AdminCategory(settings.admin_category))
    for name, flag in settings.flag_categories.items():
        registry.register(FlagCategory(name, flag))
    logger.debug(
        "Category registry built with %s",
        ", ".join(c.name for c in registry.all_categories()),
    )
    return registry


@lru_cache
def get_default_registry() -> CategoryRegistry:
    """Return the cached registry built from application settings."""
    return build_registry(get_settings())
