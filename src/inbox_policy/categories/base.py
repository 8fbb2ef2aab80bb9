# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from inbox_policy.query.fragments import CandidateClauses


class ActorCategory(ABC):
    """Capability provider for one named class of actors.

    A category answers two questions: does this actor belong to the class
    (``validate``), and which join/where clauses select every actor of the
    class in a recipient search (``candidate_filter``).
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name the category is registered under (e.g. 'admin')."""
        ...

    @abstractmethod
    def validate(self, actor: Any, category: str) -> bool:
        """Return True when ``actor`` belongs to ``category``."""
        ...

    def candidate_filter(self, category: str) -> CandidateClauses | None:
        """Clauses selecting actors of ``category``. ``None`` means unavailable."""
        return None


class NullCategory(ActorCategory):
    """Stands in for a category name nothing is registered under."""

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def validate(self, actor: Any, category: str) -> bool:
        return False

    def __repr__(self) -> str:
        return f"NullCategory({self._name!r})"
