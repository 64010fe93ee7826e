"""Compiler abstractions: CompiledStatement, RenderedSQL and the PlaceholderCompiler ABC.

The Template Method pattern (GoF) is used:
- ``PlaceholderCompiler`` defines the final rendering pass (placeholder
  rewrite, LIMIT syntax).
- ``MySQLCompiler`` and ``PostgresCompiler`` override the dialect-specific
  steps (placeholder token, two-argument LIMIT).

The statement assembler itself never emits dialect placeholders: it writes
:data:`~normsql.schema.fragments.BIND_MARKER` for every bind so that
sub-builders can be spliced into a parent before numbering happens once,
over the whole statement.  Only markers are numbered; a ``?`` that is part
of literal SQL text stays as written.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from normsql.schema.fragments import BIND_MARKER, unmark


@dataclass(frozen=True)
class CompiledStatement:
    """Output of the statement assembler, before the dialect pass.

    Attributes:
        marked_sql: SQL text with :data:`BIND_MARKER` for every bind.
        binds: Values in the order their markers occur in ``marked_sql``.
        family: ``'select'``, ``'update'``, ``'delete'`` or ``'insert'``.
    """

    marked_sql: str
    binds: list[Any]
    family: str

    @property
    def sql(self) -> str:
        """Placeholder-neutral SQL, using ``?`` for every bind."""
        return unmark(self.marked_sql)


@dataclass(frozen=True)
class RenderedSQL:
    """The output of a successful render, ready for a DB-API cursor.

    Unpacks like a pair::

        sql, binds = builder.render()
        cursor.execute(sql, binds)

    Attributes:
        sql: The SQL string with dialect placeholders.
        binds: Positional bind values, one per placeholder, in order.
        dialect: The dialect the placeholders were rendered for.
    """

    sql: str
    binds: list[Any]
    dialect: str

    def __iter__(self) -> Iterator[Any]:
        yield self.sql
        yield self.binds


class PlaceholderCompiler(ABC):
    """Abstract base for dialect-specific placeholder compilers.

    Subclasses supply the placeholder token; the rewrite pass and LIMIT
    rendering are shared and may be overridden.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (``'mysql'`` or ``'postgres'``)."""

    @abstractmethod
    def placeholder(self, index: int) -> str:
        """Return the placeholder for the ``index``-th bind (1-based).

        Args:
            index: Position of the bind in the final statement.

        Returns:
            Dialect-specific placeholder string.
        """

    def rewrite_placeholders(self, marked_sql: str) -> str:
        """Replace every bind marker with this dialect's placeholder, left to right.

        Args:
            marked_sql: Assembled SQL carrying :data:`BIND_MARKER` per bind.

        Returns:
            SQL using this dialect's placeholders.  Literal ``?`` characters
            in the text are not touched.
        """
        pieces = marked_sql.split(BIND_MARKER)
        parts = [pieces[0]]
        for index, piece in enumerate(pieces[1:], start=1):
            parts.append(self.placeholder(index))
            parts.append(piece)
        return "".join(parts)

    def limit_clause(self, lower: Any, upper: Any = None) -> str:
        """Return the LIMIT clause for ``limit(lower, upper)``.

        The two-argument form follows MySQL's ``offset, count`` order.
        """
        if upper is None:
            return f"limit {lower}"
        return f"limit {lower}, {upper}"

    def render(self, statement: CompiledStatement) -> RenderedSQL:
        """Run the dialect pass over a compiled statement."""
        binds = list(statement.binds)
        return RenderedSQL(
            sql=self.rewrite_placeholders(statement.marked_sql),
            binds=binds,
            dialect=self.dialect_name,
        )
