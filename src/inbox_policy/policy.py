# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

"""Sender/recipient eligibility policy.

A ``Policy`` answers the same rule two ways: boolean checks for one concrete
sender/recipient pair, and ``FilterFragment`` objects that restrict a bulk
recipient search to the actors the sender may reach.

Pair checks fail closed when a category has no registered capability. Bulk
type filters fail open instead: a category without a candidate filter simply
adds no restriction to the search.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Mapping
from typing import Any

from sqlalchemy import ColumnElement, and_, select

from inbox_policy.categories.registry import (
    CategoryBinding,
    CategoryRegistry,
    get_default_registry,
)
from inbox_policy.models.actor import Actor
from inbox_policy.models.relationship import ActorRelationship
from inbox_policy.query.aliases import AliasAllocator, get_default_allocator
from inbox_policy.query.fragments import FilterFragment, JoinClause, combine
from inbox_policy.schemas.rule import ALL, PolicyRule

logger = logging.getLogger(__name__)

RELATIONSHIP_ALIAS_PREFIX = "rel"
GROUP_RELATIONSHIP_ALIAS_PREFIX = "gerel"

_relationships = ActorRelationship.__table__


def _sanitize_id(actor: Any) -> int:
    """Return the actor's id as a plain integer."""
    try:
        value = actor.id
    except AttributeError:
        raise TypeError(f"{actor!r} has no 'id' attribute") from None
    if value is None or isinstance(value, bool):
        raise TypeError(f"Invalid actor id: {value!r}")
    return operator.index(value)


class Policy:
    """Immutable rule combining category and relationship eligibility."""

    __slots__ = (
        "_rule",
        "_sender",
        "_recipient",
        "_entity_column",
    )

    def __init__(
        self,
        rule: PolicyRule | Mapping[str, Any] | None = None,
        *,
        registry: CategoryRegistry | None = None,
        entity_column: ColumnElement[Any] | None = None,
    ) -> None:
        if rule is None:
            rule = PolicyRule()
        elif isinstance(rule, Mapping):
            rule = PolicyRule.model_validate(dict(rule))
        elif not isinstance(rule, PolicyRule):
            raise TypeError(
                f"rule must be a PolicyRule or a mapping, not {type(rule).__name__}"
            )
        if registry is None:
            registry = get_default_registry()

        object.__setattr__(self, "_rule", rule)
        object.__setattr__(self, "_sender", self._bind(registry, rule.sender, "sender"))
        object.__setattr__(self, "_recipient", self._bind(registry, rule.recipient, "recipient"))
        object.__setattr__(
            self,
            "_entity_column",
            entity_column if entity_column is not None else Actor.id,
        )

    @staticmethod
    def _bind(registry: CategoryRegistry, category: str, role: str) -> CategoryBinding:
        binding = registry.bind(category)
        if category != ALL and not binding.registered:
            logger.warning("Unknown %s category '%s'; pair checks will deny", role, category)
        return binding

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"Policy({self._rule!r})"

    # -- Accessors -------------------------------------------------------------

    @property
    def rule(self) -> PolicyRule:
        return self._rule

    @property
    def sender_type(self) -> str:
        return self._sender.category

    @property
    def recipient_type(self) -> str:
        return self._recipient.category

    @property
    def sender_binding(self) -> CategoryBinding:
        return self._sender

    @property
    def recipient_binding(self) -> CategoryBinding:
        return self._recipient

    # -- Pair checks -----------------------------------------------------------

    @staticmethod
    def _validate(binding: CategoryBinding, actor: Any) -> bool:
        if binding.category == ALL:
            return True
        if not binding.registered:
            return False
        return bool(binding.provider.validate(actor, binding.category))

    def validate_sender_type(self, actor: Any) -> bool:
        """Return True if ``actor`` belongs to the sender category."""
        return self._validate(self._sender, actor)

    def validate_recipient_type(self, actor: Any) -> bool:
        """Return True if ``actor`` belongs to the recipient category."""
        return self._validate(self._recipient, actor)

    def validate_pair(self, sender: Any, recipient: Any) -> bool:
        """Category checks for both roles. Relationships need the store."""
        return self.validate_sender_type(sender) and self.validate_recipient_type(recipient)

    # -- Query fragments -------------------------------------------------------

    @staticmethod
    def _allocator(aliases: AliasAllocator | None) -> AliasAllocator:
        # Per-query allocator, else the process-wide one.
        return aliases if aliases is not None else get_default_allocator()

    def get_recipient_clauses(self) -> FilterFragment:
        """Clauses restricting candidates to the recipient category."""
        binding = self._recipient
        if binding.category == ALL or not binding.registered:
            return FilterFragment.empty()
        options = binding.provider.candidate_filter(binding.category)
        return FilterFragment.from_options(options)

    def get_relationship_clauses(
        self, sender: Any, aliases: AliasAllocator | None = None
    ) -> FilterFragment:
        """Clauses requiring the configured relationship between sender and candidate.

        Without ``inverse_relationship`` the candidate must be the object of
        ``sender --relationship--> candidate``; with it, the subject of
        ``candidate --relationship--> sender``.
        """
        rule = self._rule
        if not rule.requires_relationship:
            return FilterFragment.empty()

        sender_id = _sanitize_id(sender)
        alias = self._allocator(aliases).allocate(RELATIONSHIP_ALIAS_PREFIX)
        rel = _relationships.alias(alias)

        if not rule.inverse_relationship:
            onclause = self._entity_column == rel.c.object_id
            anchor = rel.c.subject_id == sender_id
        else:
            onclause = self._entity_column == rel.c.subject_id
            anchor = rel.c.object_id == sender_id

        logger.debug(
            "Relationship clauses %s: %s (inverse=%s) for sender %d",
            alias,
            rule.relationship,
            rule.inverse_relationship,
            sender_id,
        )
        return FilterFragment(
            joins=(JoinClause(rel, onclause),),
            wheres=(and_(anchor, rel.c.relationship_type == rule.relationship),),
        )

    def get_group_relationship_clauses(
        self, sender: Any, aliases: AliasAllocator | None = None
    ) -> FilterFragment:
        """Clauses requiring sender and candidate to share a group.

        The join enumerates the sender's groups; the where keeps only groups
        the candidate is also connected to. A candidate sharing several groups
        appears once per group, so searches should select DISTINCT.
        """
        rule = self._rule
        if not rule.requires_group_relationship:
            return FilterFragment.empty()

        sender_id = _sanitize_id(sender)
        alias = self._allocator(aliases).allocate(GROUP_RELATIONSHIP_ALIAS_PREFIX)
        groups = _relationships.alias(alias)
        membership = _relationships.alias(f"{alias}_m")

        candidate_groups = select(membership.c.object_id).where(
            membership.c.subject_id == self._entity_column,
            membership.c.relationship_type == rule.group_relationship,
        )

        logger.debug(
            "Group relationship clauses %s: %s for sender %d",
            alias,
            rule.group_relationship,
            sender_id,
        )
        return FilterFragment(
            joins=(
                JoinClause(
                    groups,
                    and_(
                        groups.c.subject_id == sender_id,
                        groups.c.relationship_type == rule.group_relationship,
                    ),
                ),
            ),
            wheres=(groups.c.object_id.in_(candidate_groups),),
        )

    def get_clauses(self, sender: Any, aliases: AliasAllocator | None = None) -> FilterFragment:
        """Every restriction this policy places on ``sender``'s recipients."""
        return combine(
            self.get_recipient_clauses(),
            self.get_relationship_clauses(sender, aliases),
            self.get_group_relationship_clauses(sender, aliases),
        )
