# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from inbox_policy.policy import Policy
from inbox_policy.query.fragments import FilterFragment
from inbox_policy.schemas.rule import PolicyRule

__all__ = ["FilterFragment", "Policy", "PolicyRule"]
