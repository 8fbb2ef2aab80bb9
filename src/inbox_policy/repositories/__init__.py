# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from inbox_policy.repositories.actor_repository import ActorRepository
from inbox_policy.repositories.base import BaseRepository
from inbox_policy.repositories.relationship_repository import RelationshipRepository

__all__ = [
    "ActorRepository",
    "BaseRepository",
    "RelationshipRepository",
]
