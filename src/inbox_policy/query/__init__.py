# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from inbox_policy.query.aliases import AliasAllocator, get_default_allocator
from inbox_policy.query.fragments import (
    EMPTY_FRAGMENT,
    CandidateClauses,
    FilterFragment,
    JoinClause,
    combine,
    compile_literal,
)

__all__ = [
    "EMPTY_FRAGMENT",
    "AliasAllocator",
    "CandidateClauses",
    "FilterFragment",
    "JoinClause",
    "combine",
    "compile_literal",
    "get_default_allocator",
]
