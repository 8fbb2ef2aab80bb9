# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

"""Unique table-alias names for relationship joins.

Several policies may contribute relationship joins to one compound query, so
every join needs its own alias. ``AliasAllocator`` hands out ``<prefix><n>``
names from a single counter; the module-level default allocator is shared by
every policy in the process.
"""

from __future__ import annotations

import threading


class AliasAllocator:
    """Thread-safe, monotonically increasing alias counter."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be non-negative")
        self._next = start
        self._lock = threading.Lock()

    def allocate(self, prefix: str) -> str:
        """Return ``prefix`` followed by the next counter value."""
        with self._lock:
            value = self._next
            self._next += 1
        return f"{prefix}{value}"

    @property
    def issued(self) -> int:
        """Value the next allocation will use."""
        with self._lock:
            return self._next


_default_allocator = AliasAllocator()


def get_default_allocator() -> AliasAllocator:
    """Return the process-wide allocator. It is never reset."""
    return _default_allocator
