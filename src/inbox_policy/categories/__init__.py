# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from inbox_policy.categories.base import ActorCategory, NullCategory
from inbox_policy.categories.builtin import AdminCategory, CallableCategory, FlagCategory
from inbox_policy.categories.registry import (
    CategoryBinding,
    CategoryRegistry,
    build_registry,
    get_default_registry,
)

__all__ = [
    "ActorCategory",
    "AdminCategory",
    "CallableCategory",
    "CategoryBinding",
    "CategoryRegistry",
    "FlagCategory",
    "NullCategory",
    "build_registry",
    "get_default_registry",
]
