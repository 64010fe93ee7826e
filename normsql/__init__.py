"""normsql – a SQL builder that pastes SQL together without getting too fancy.

Build statements from fragments, keep binds in placeholder order.

Public API
----------
``norm``
    Create an empty :class:`Builder`.

``engine``
    Get or set the process-wide default placeholder dialect
    (``'mysql'`` → ``?``, ``'postgres'`` → ``$1, $2, ...``).

``and_`` / ``or_`` / ``nand`` / ``nor`` / ``xor``
    Conjunction helpers usable standalone or inside any clause.

``raw``
    Mark an INSERT value to be pasted verbatim (``raw("NOW()")``).

Example::

    import normsql

    q = (
        normsql.norm()
        .select("users.id", "users.name")
        .from_("users")
        .where(["users.id > ?", 1], "users.deleted is null")
        .order_by("users.id desc")
        .limit(10)
    )
    sql, binds = q.render()
    cursor.execute(sql, binds)

Extensibility
-------------
The compiler behind a dialect name can be replaced via::

    from normsql.compile.registry import CompilerFactory

    @CompilerFactory.register("postgres")
    class AsyncpgCompiler(PostgresCompiler):
        ...
"""

from __future__ import annotations

from normsql.compile.base import CompiledStatement, PlaceholderCompiler, RenderedSQL
from normsql.compile.builder import Builder
from normsql.compile.conjunctions import Conjunction, and_, nand, nor, or_, xor
from normsql.compile.mysql import MySQLCompiler
from normsql.compile.postgres import PostgresCompiler
from normsql.compile.registry import CompilerFactory
from normsql.errors import (
    DialectConfigError,
    EmptyConjunctionError,
    HavingWithoutGroupByError,
    MissingClauseError,
    NormError,
    StructuralError,
    TemplateArityError,
    UnnamedSubqueryError,
    UnsupportedFragmentError,
    XorArityError,
)
from normsql.schema.config import EngineConfig, engine
from normsql.schema.fragments import Raw

# ---------------------------------------------------------------------------
# Register built-in compilers with CompilerFactory
# ---------------------------------------------------------------------------

CompilerFactory.register_class("mysql", MySQLCompiler)
CompilerFactory.register_class("postgres", PostgresCompiler)

__all__ = [
    # Core API
    "norm",
    "engine",
    "raw",
    "Builder",
    "EngineConfig",
    # Conjunctions
    "Conjunction",
    "and_",
    "or_",
    "nand",
    "nor",
    "xor",
    # Compilation
    "CompiledStatement",
    "RenderedSQL",
    "PlaceholderCompiler",
    "CompilerFactory",
    "MySQLCompiler",
    "PostgresCompiler",
    "Raw",
    # Errors
    "NormError",
    "StructuralError",
    "UnsupportedFragmentError",
    "UnnamedSubqueryError",
    "TemplateArityError",
    "MissingClauseError",
    "HavingWithoutGroupByError",
    "XorArityError",
    "EmptyConjunctionError",
    "DialectConfigError",
]


def norm(dialect: str | None = None) -> Builder:
    """Return an empty builder.

    Args:
        dialect: Optional placeholder dialect; defaults to the current
            :func:`engine` setting.

    Returns:
        A fresh :class:`Builder`, which renders ``select 1 from dual``.
    """
    return Builder(dialect=dialect)


def raw(sql: str) -> Raw:
    """Mark ``sql`` to be pasted verbatim in an INSERT value matrix."""
    return Raw(sql)
