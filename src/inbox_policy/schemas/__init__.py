# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from inbox_policy.schemas.rule import ALL, PolicyRule

__all__ = ["ALL", "PolicyRule"]
