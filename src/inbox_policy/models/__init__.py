# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from inbox_policy.models.actor import Actor
from inbox_policy.models.base import Base, JSONType, TimestampMixin
from inbox_policy.models.relationship import ActorRelationship

__all__ = [
    "Actor",
    "ActorRelationship",
    "Base",
    "JSONType",
    "TimestampMixin",
]
