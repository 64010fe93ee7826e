"""Clause-level accumulators.

Each accumulator is an immutable value: adding fragments returns a new
accumulator, so a cloned builder can share accumulators with its origin and
still diverge safely.

Classes
-------
ClauseAccumulator  — ``select``, ``from``, ``where``, ... fragment lists
ValuesAccumulator  — ``values (?,?),(?,?)`` matrix for INSERT
LimitSpec          — ``limit <lower>[, <upper>]``
Partials           — every clause of one builder, keyed by name
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from normsql.compile.base import PlaceholderCompiler
from normsql.compile.compositor import fold, strip_conjunction
from normsql.errors import UnsupportedFragmentError
from normsql.schema.fragments import BIND_MARKER, Fragment, Raw

#: Clause name → (leading keyword, conjunction appended after each fragment).
CLAUSE_SYNTAX: dict[str, tuple[str, str]] = {
    "select": ("select", ","),
    "from_": ("from", ","),
    "where": ("where", " and"),
    "group_by": ("group by", ","),
    "having": ("having", " and"),
    "order_by": ("order by", ","),
    "update": ("update", ","),
    "set": ("set", ","),
    "delete": ("delete from", ","),
    "using": ("using", ","),
}


@dataclass(frozen=True)
class ClauseAccumulator:
    """The fragments added to one clause so far, in call order."""

    keyword: str
    conjunction: str
    fragments: tuple[Fragment, ...] = ()

    @classmethod
    def for_clause(cls, name: str) -> ClauseAccumulator:
        keyword, conjunction = CLAUSE_SYNTAX[name]
        return cls(keyword=keyword, conjunction=conjunction)

    def extend(self, fragments: tuple[Fragment, ...]) -> ClauseAccumulator:
        return replace(self, fragments=self.fragments + fragments)

    def render(self, binds: list[Any]) -> str:
        """Return the clause text with its trailing conjunction removed."""
        text = fold(self.keyword, self.fragments, self.conjunction, binds)
        return strip_conjunction(text, self.conjunction)


@dataclass(frozen=True)
class ValuesAccumulator:
    """Rows for ``insert ... values``, plus the column list of keyed rows.

    Attributes:
        columns: Sorted keys of the most recent keyed ``values()`` call, or
            ``None`` when only positional rows were given.
        rows: Every row added so far, as tuples in column order.
    """

    columns: tuple[str, ...] | None = None
    rows: tuple[tuple[Any, ...], ...] = ()

    def extend(self, rows: tuple[Any, ...]) -> ValuesAccumulator:
        columns, normalized = _normalize_rows(rows)
        return ValuesAccumulator(
            columns=columns if columns is not None else self.columns,
            rows=self.rows + normalized,
        )

    def render(self, binds: list[Any]) -> str:
        matrix = ",".join(_render_row(row, binds) for row in self.rows)
        if self.columns:
            return f"({','.join(str(c) for c in self.columns)}) values {matrix}"
        return f"values {matrix}"


@dataclass(frozen=True)
class LimitSpec:
    """``limit(lower, upper)`` arguments; rendered by the dialect compiler."""

    lower: Any
    upper: Any = None

    def render(self, compiler: PlaceholderCompiler) -> str:
        return compiler.limit_clause(self.lower, self.upper)


@dataclass
class Partials:
    """Every clause of one builder.

    Which statement family is rendered is inferred from which fields are
    set; nothing records it explicitly.
    """

    select: ClauseAccumulator | None = None
    from_: ClauseAccumulator | None = None
    where: ClauseAccumulator | None = None
    group_by: ClauseAccumulator | None = None
    having: ClauseAccumulator | None = None
    order_by: ClauseAccumulator | None = None
    update: ClauseAccumulator | None = None
    set: ClauseAccumulator | None = None
    delete: ClauseAccumulator | None = None
    using: ClauseAccumulator | None = None
    insert: str | None = None
    values: ValuesAccumulator | None = None
    limit: LimitSpec | None = None
    distinct: bool = False

    def copy(self) -> Partials:
        """Shallow copy; the accumulators themselves are immutable."""
        return replace(self)

    def add(self, name: str, fragments: tuple[Fragment, ...]) -> None:
        current = getattr(self, name) or ClauseAccumulator.for_clause(name)
        setattr(self, name, current.extend(fragments))


# ---------------------------------------------------------------------------
# Value-matrix helpers
# ---------------------------------------------------------------------------


def _normalize_rows(
    rows: tuple[Any, ...],
) -> tuple[tuple[str, ...] | None, tuple[tuple[Any, ...], ...]]:
    """Turn keyed, positional, or scalar rows into tuples in column order."""
    columns, normalized = _shape_rows(rows)
    for row in normalized:
        for value in row:
            if isinstance(value, Mapping) and value.get("raw") and "value" not in value:
                raise UnsupportedFragmentError(value, clause="values")
    return columns, normalized


def _shape_rows(
    rows: tuple[Any, ...],
) -> tuple[tuple[str, ...] | None, tuple[tuple[Any, ...], ...]]:
    first = rows[0]
    if isinstance(first, Mapping):
        columns = tuple(sorted(first))
        return columns, tuple(_keyed_row(row, columns) for row in rows)
    if isinstance(first, (list, tuple)):
        for row in rows:
            if not isinstance(row, (list, tuple)):
                raise UnsupportedFragmentError(row, clause="values")
        return None, tuple(tuple(row) for row in rows)
    return None, tuple((row,) for row in rows)


def _keyed_row(row: Any, columns: tuple[str, ...]) -> tuple[Any, ...]:
    if not isinstance(row, Mapping):
        raise UnsupportedFragmentError(row, clause="values")
    return tuple(row.get(column) for column in columns)


def _render_row(row: tuple[Any, ...], binds: list[Any]) -> str:
    cells = []
    for value in row:
        raw_sql = _raw_sql(value)
        if raw_sql is not None:
            cells.append(raw_sql)
        else:
            binds.append(_unwrap(value))
            cells.append(BIND_MARKER)
    return f"({','.join(cells)})"


def _raw_sql(value: Any) -> str | None:
    if isinstance(value, Raw):
        return value.sql
    if isinstance(value, Mapping) and value.get("raw"):
        return str(value["value"])
    return None


def _unwrap(value: Any) -> Any:
    # {"value": x} (optionally with a falsy "raw") binds x itself.
    if isinstance(value, Mapping) and "value" in value and set(value) <= {"value", "raw"}:
        return value["value"]
    return value
