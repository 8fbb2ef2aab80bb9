# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

import unicodedata

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, field_validator

# Wildcard value for categories and relationship names.
ALL = "all"


def _has_control_chars(value: str) -> bool:
    return any(unicodedata.category(ch).startswith("C") for ch in value)


class PolicyRule(BaseModel):
    """Declarative description of who may send to whom.

    ``relationship`` must run sender -> recipient, or recipient -> sender when
    ``inverse_relationship`` is set. ``group_relationship`` must connect both
    the sender and the recipient to at least one common group.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sender: StrictStr = ALL
    recipient: StrictStr = ALL
    relationship: StrictStr | None = None
    inverse_relationship: StrictBool = False
    group_relationship: StrictStr | None = None

    @field_validator("sender", "recipient")
    @classmethod
    def _validate_category(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("category must not be empty")
        return value

    @field_validator("relationship", "group_relationship", mode="before")
    @classmethod
    def _unset_relationship(cls, value: object) -> object:
        # Stored configs use ``false`` for "no relationship".
        if value is False or value == "":
            return None
        return value

    @field_validator("relationship", "group_relationship")
    @classmethod
    def _sanitize_relationship(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if _has_control_chars(value):
            raise ValueError("relationship name must not contain control characters")
        return value

    @property
    def requires_relationship(self) -> bool:
        return self.relationship is not None and self.relationship != ALL

    @property
    def requires_group_relationship(self) -> bool:
        return self.group_relationship is not None and self.group_relationship != ALL
