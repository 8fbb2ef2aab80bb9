# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

"""Composable join/where fragments for recipient searches.

A ``FilterFragment`` carries SQLAlchemy constructs rather than SQL strings.
Fragments combine with ``&``: joins are concatenated in order (never merged
or deduplicated) and wheres are ANDed. The empty fragment is the identity.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import reduce
from typing import Any, TypedDict, TypeVar

from sqlalchemy import ColumnElement, Select, and_, text
from sqlalchemy.engine import Dialect
from sqlalchemy.engine.default import DefaultDialect
from sqlalchemy.sql.expression import FromClause

_DEFAULT_DIALECT = DefaultDialect()

S = TypeVar("S", bound=Select[Any])

WhereLike = ColumnElement[bool] | str


class CandidateClauses(TypedDict, total=False):
    """Raw output of a category's candidate filter, before normalization."""

    joins: JoinClause | Sequence[JoinClause] | None
    wheres: WhereLike | Sequence[WhereLike] | None


def compile_literal(clause: ColumnElement[Any], dialect: Dialect | None = None) -> str:
    """Render ``clause`` as SQL with bound values inlined (escaped by the dialect)."""
    compiled = clause.compile(
        dialect=dialect or _DEFAULT_DIALECT,
        compile_kwargs={"literal_binds": True},
    )
    return str(compiled)


@dataclass(frozen=True, slots=True)
class JoinClause:
    """An inner join of ``target`` (usually an aliased table) on ``onclause``."""

    target: FromClause
    onclause: ColumnElement[bool]

    def render(self, dialect: Dialect | None = None) -> str:
        name = getattr(self.target, "name", None)
        original = getattr(getattr(self.target, "element", None), "name", None)
        table = f"{original} {name}" if original and original != name else str(name)
        return f"JOIN {table} ON {compile_literal(self.onclause, dialect)}"


def _as_where(value: WhereLike) -> ColumnElement[bool]:
    if isinstance(value, str):
        return text(value)  # type: ignore[return-value]
    if isinstance(value, ColumnElement):
        return value
    raise TypeError(f"Unsupported where clause: {value!r}")


def _normalize_joins(value: object) -> tuple[JoinClause, ...]:
    if value is None:
        return ()
    if isinstance(value, JoinClause):
        return (value,)
    if isinstance(value, Iterable) and not isinstance(value, str):
        joins = tuple(value)
        for join in joins:
            if not isinstance(join, JoinClause):
                raise TypeError(f"Unsupported join clause: {join!r}")
        return joins
    raise TypeError(f"Unsupported join clause: {value!r}")


def _normalize_wheres(value: object) -> tuple[ColumnElement[bool], ...]:
    if value is None:
        return ()
    if isinstance(value, str | ColumnElement):
        return (_as_where(value),)
    if isinstance(value, Iterable):
        wheres = [_as_where(v) for v in value]
        if not wheres:
            return ()
        if len(wheres) == 1:
            return (wheres[0],)
        return (and_(*wheres),)
    raise TypeError(f"Unsupported where clause: {value!r}")


@dataclass(frozen=True, slots=True, eq=False)
class FilterFragment:
    joins: tuple[JoinClause, ...] = ()
    wheres: tuple[ColumnElement[bool], ...] = ()

    @classmethod
    def empty(cls) -> FilterFragment:
        return EMPTY_FRAGMENT

    @classmethod
    def from_options(cls, options: CandidateClauses | None) -> FilterFragment:
        """Normalize a candidate-filter result.

        A sequence of wheres is combined with AND into one predicate; a
        single clause passes through unchanged. Plain strings become textual
        SQL and are trusted as-is.
        """
        if not options:
            return EMPTY_FRAGMENT
        joins = _normalize_joins(options.get("joins"))
        wheres = _normalize_wheres(options.get("wheres"))
        if not joins and not wheres:
            return EMPTY_FRAGMENT
        return cls(joins=joins, wheres=wheres)

    @property
    def is_empty(self) -> bool:
        return not self.joins and not self.wheres

    @property
    def where(self) -> ColumnElement[bool] | None:
        """All wheres as a single predicate, or ``None``."""
        if not self.wheres:
            return None
        if len(self.wheres) == 1:
            return self.wheres[0]
        return and_(*self.wheres)

    def __and__(self, other: FilterFragment) -> FilterFragment:
        if not isinstance(other, FilterFragment):
            return NotImplemented
        if other.is_empty:
            return self
        if self.is_empty:
            return other
        return FilterFragment(
            joins=self.joins + other.joins,
            wheres=self.wheres + other.wheres,
        )

    def apply(self, stmt: S) -> S:
        """Splice the joins and wheres into ``stmt``."""
        for join in self.joins:
            stmt = stmt.join(join.target, join.onclause)
        if self.wheres:
            stmt = stmt.where(*self.wheres)
        return stmt

    def render(self, dialect: Dialect | None = None) -> dict[str, str]:
        """Return ``{"join": ..., "where": ...}`` as literal SQL text."""
        where = self.where
        return {
            "join": " ".join(join.render(dialect) for join in self.joins),
            "where": compile_literal(where, dialect) if where is not None else "",
        }


EMPTY_FRAGMENT = FilterFragment()


def combine(*fragments: FilterFragment) -> FilterFragment:
    """AND together any number of fragments."""
    return reduce(lambda left, right: left & right, fragments, EMPTY_FRAGMENT)
