# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from sqlalchemy import Boolean, ColumnElement, func, literal, true
from sqlalchemy.ext.compiler import compiles

from inbox_policy.categories.base import ActorCategory
from inbox_policy.models.actor import Actor
from inbox_policy.query.fragments import CandidateClauses

Validator = Callable[[Any, str], bool]
Getter = Callable[[str], CandidateClauses | None]

_FLAG_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class JsonFlagIsTrue(ColumnElement[bool]):
    """``column[flag]`` holds the JSON literal ``true``.

    ``JSON.as_boolean()`` coerces on most backends (SQLite reports ``true``
    as ``1``, PostgreSQL casts ``'yes'`` to true), so the dialects that can
    inspect the JSON type directly do so.
    """

    type = Boolean()
    inherit_cache = False

    def __init__(self, column: ColumnElement[Any], flag: str) -> None:
        self.column = column
        self.flag = flag


@compiles(JsonFlagIsTrue)
def _compile_json_flag(element: JsonFlagIsTrue, compiler: Any, **kw: Any) -> str:
    return compiler.process(element.column[element.flag].as_boolean() == true(), **kw)


@compiles(JsonFlagIsTrue, "sqlite")
def _compile_json_flag_sqlite(element: JsonFlagIsTrue, compiler: Any, **kw: Any) -> str:
    path = literal(f'$."{element.flag}"')
    return compiler.process(func.json_type(element.column, path) == literal("true"), **kw)


@compiles(JsonFlagIsTrue, "postgresql")
def _compile_json_flag_postgresql(element: JsonFlagIsTrue, compiler: Any, **kw: Any) -> str:
    column = compiler.process(element.column, **kw)
    # Flag names are plain identifiers, see FlagCategory.
    return f"({column} -> '{element.flag}') = 'true'::jsonb"


class AdminCategory(ActorCategory):
    """Site administrators (``Actor.is_admin``)."""

    def __init__(self, name: str = "admin") -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def validate(self, actor: Any, category: str) -> bool:
        return bool(getattr(actor, "is_admin", False))

    def candidate_filter(self, category: str) -> CandidateClauses | None:
        return {"wheres": [Actor.is_admin == true()]}


class FlagCategory(ActorCategory):
    """Actors whose ``attrs`` map ``flag`` to boolean ``true``."""

    def __init__(self, name: str, flag: str) -> None:
        if not _FLAG_NAME.match(flag):
            raise ValueError(f"Invalid flag name: {flag!r}")
        self._name = name
        self.flag = flag

    @property
    def name(self) -> str:
        return self._name

    def validate(self, actor: Any, category: str) -> bool:
        attrs = getattr(actor, "attrs", None) or {}
        return attrs.get(self.flag) is True

    def candidate_filter(self, category: str) -> CandidateClauses | None:
        return {"wheres": [JsonFlagIsTrue(Actor.__table__.c.attrs, self.flag)]}


class CallableCategory(ActorCategory):
    """Wraps a configuration-supplied validator/getter pair.

    Either callable may be missing: without a validator every actor fails
    validation, without a getter no candidate filter is available.
    """

    def __init__(
        self,
        name: str,
        validator: Validator | None = None,
        getter: Getter | None = None,
    ) -> None:
        self._name = name
        self._validator = validator
        self._getter = getter

    @property
    def name(self) -> str:
        return self._name

    def validate(self, actor: Any, category: str) -> bool:
        if self._validator is None or not callable(self._validator):
            return False
        return bool(self._validator(actor, category))

    def candidate_filter(self, category: str) -> CandidateClauses | None:
        if self._getter is None or not callable(self._getter):
            return None
        return self._getter(category)
