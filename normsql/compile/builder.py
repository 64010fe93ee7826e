"""The fluent statement builder.

``Builder`` is the public entry point.  Clause setters classify their
arguments into typed fragments and extend the matching clause accumulator;
rendering hands the accumulated partials to the
:class:`~normsql.compile.assembler.StatementAssembler` and then runs the
dialect compiler's placeholder pass.

Typical usage::

    from normsql import norm

    q = norm().select("u.id").from_("users u").where(["u.id = ?", 5])
    cursor.execute(q.sql(), q.binds())

Building two related queries from a shared prefix::

    base = norm().select("u.id").from_("users u").where(["u.id > ?", 5])
    bounded = base.clone().where(["u.id < ?", 100])

Thread safety
-------------
A builder is a plain mutable object with no locking.  Do not call setters
on the same instance from several threads; clone per branch instead.
Rendering never mutates the builder and rebuilds the bind list from scratch
on every call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from normsql.compile.assembler import StatementAssembler
from normsql.compile.base import CompiledStatement, PlaceholderCompiler, RenderedSQL
from normsql.compile.clauses import LimitSpec, Partials, ValuesAccumulator
from normsql.compile.conjunctions import and_, nand, nor, or_, xor
from normsql.compile.context import get_current_compiler, use_compiler
from normsql.compile.registry import CompilerFactory
from normsql.errors import UnnamedSubqueryError
from normsql.schema.config import EngineConfig, default_config
from normsql.schema.fragments import Compilable, to_fragments

logger = logging.getLogger(__name__)


class Builder(Compilable):
    """Incrementally assembles one SELECT, INSERT, UPDATE or DELETE statement.

    Every setter returns the builder itself for chaining.  Setters called
    with no arguments leave the builder unchanged.

    Args:
        dialect: Placeholder dialect (``'mysql'`` or ``'postgres'``).  When
            omitted, the process-wide default at construction time is used.
        config: A full :class:`EngineConfig`; takes precedence over
            ``dialect``.
    """

    def __init__(
        self,
        dialect: str | None = None,
        config: EngineConfig | None = None,
        _partials: Partials | None = None,
    ) -> None:
        if config is None:
            config = EngineConfig.for_dialect(dialect) if dialect else default_config()
        self._config = config
        self._partials = _partials if _partials is not None else Partials()

    # ------------------------------------------------------------------
    # Clause setters
    # ------------------------------------------------------------------

    def select(self, *fragments: Any) -> Builder:
        return self._add("select", fragments)

    def from_(self, *fragments: Any) -> Builder:
        """Add tables to FROM.

        Raises:
            UnnamedSubqueryError: If a builder is passed directly; wrap it
                as ``["(?) alias", sub]`` instead.
        """
        for fragment in fragments:
            if isinstance(fragment, Compilable):
                raise UnnamedSubqueryError(fragment.compile().sql)
        return self._add("from_", fragments)

    def where(self, *fragments: Any) -> Builder:
        return self._add("where", fragments)

    def group_by(self, *fragments: Any) -> Builder:
        return self._add("group_by", fragments)

    def having(self, *fragments: Any) -> Builder:
        return self._add("having", fragments)

    def order_by(self, *fragments: Any) -> Builder:
        return self._add("order_by", fragments)

    def update(self, *fragments: Any) -> Builder:
        return self._add("update", fragments)

    def set(self, *fragments: Any) -> Builder:
        return self._add("set", fragments)

    def delete(self, *fragments: Any) -> Builder:
        return self._add("delete", fragments)

    def using(self, *fragments: Any) -> Builder:
        return self._add("using", fragments)

    def insert(self, target: str | None = None) -> Builder:
        """Set the INSERT target, e.g. ``"users (id, name)"``."""
        if target:
            self._partials.insert = target
        return self

    def values(self, *rows: Any) -> Builder:
        """Append rows to the INSERT value matrix.

        Rows may be sequences, bare scalars (one column each), or mappings.
        Mapping rows are read in sorted key order and the sorted keys become
        the column list.  ``Raw("NOW()")`` or ``{"raw": True, "value":
        "NOW()"}`` is pasted verbatim instead of being bound.
        """
        if rows:
            current = self._partials.values or ValuesAccumulator()
            self._partials.values = current.extend(rows)
        return self

    def limit(self, lower: Any = None, upper: Any = None) -> Builder:
        """Set ``limit lower`` or ``limit lower, upper`` (offset, count)."""
        if lower is None or lower == "" or lower is False:
            return self
        if upper == "" or upper is False:
            upper = None
        self._partials.limit = LimitSpec(lower=lower, upper=upper)
        return self

    def distinct(self, enabled: bool = True) -> Builder:
        self._partials.distinct = bool(enabled)
        return self

    # Sequence forms: ``b.select_many(cols)`` == ``b.select(*cols)``.

    def select_many(self, fragments: Iterable[Any]) -> Builder:
        return self.select(*fragments)

    def from_many(self, fragments: Iterable[Any]) -> Builder:
        return self.from_(*fragments)

    def where_many(self, fragments: Iterable[Any]) -> Builder:
        return self.where(*fragments)

    def group_by_many(self, fragments: Iterable[Any]) -> Builder:
        return self.group_by(*fragments)

    def having_many(self, fragments: Iterable[Any]) -> Builder:
        return self.having(*fragments)

    def order_by_many(self, fragments: Iterable[Any]) -> Builder:
        return self.order_by(*fragments)

    def update_many(self, fragments: Iterable[Any]) -> Builder:
        return self.update(*fragments)

    def set_many(self, fragments: Iterable[Any]) -> Builder:
        return self.set(*fragments)

    def delete_many(self, fragments: Iterable[Any]) -> Builder:
        return self.delete(*fragments)

    def using_many(self, fragments: Iterable[Any]) -> Builder:
        return self.using(*fragments)

    def values_many(self, rows: Iterable[Any]) -> Builder:
        return self.values(*rows)

    # Conjunction helpers, reachable from any builder.
    and_ = staticmethod(and_)
    or_ = staticmethod(or_)
    nand = staticmethod(nand)
    nor = staticmethod(nor)
    xor = staticmethod(xor)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def compiler(self) -> PlaceholderCompiler:
        return CompilerFactory.create(self._config.dialect)

    def compile(self) -> CompiledStatement:
        """Return bind-marked SQL and binds, before the dialect pass.

        Used when this builder is embedded in another one; the parent
        numbers placeholders once for the whole statement, and LIMIT follows
        the outermost statement's dialect.  Use ``.sql`` on the result for
        placeholder-neutral ``?`` SQL.
        """
        compiler = get_current_compiler() or self.compiler
        with use_compiler(compiler):
            return StatementAssembler(compiler).assemble(self._partials)

    def render(self) -> RenderedSQL:
        """Return the final SQL for this builder's dialect and its binds.

        Raises:
            MissingClauseError: If the statement family lacks a required clause.
            HavingWithoutGroupByError: If HAVING is set without GROUP BY.
        """
        compiler = self.compiler
        with use_compiler(compiler):
            rendered = compiler.render(StatementAssembler(compiler).assemble(self._partials))
        logger.debug("Rendered %s SQL with %d bind(s)", rendered.dialect, len(rendered.binds))
        return rendered

    def sql(self) -> str:
        return self.render().sql

    def binds(self) -> list[Any]:
        return self.render().binds

    def __str__(self) -> str:
        return self.sql()

    def __repr__(self) -> str:
        return f"<Builder dialect={self._config.dialect!r} family={StatementAssembler.family(self._partials)!r}>"

    # ------------------------------------------------------------------
    # State management
    # ------------------------------------------------------------------

    def clone(self) -> Builder:
        """Return an independent builder starting from the current state."""
        return Builder(config=self._config, _partials=self._partials.copy())

    def reset(self) -> Builder:
        """Discard every clause; the captured dialect is kept."""
        self._partials = Partials()
        return self

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _add(self, name: str, fragments: tuple[Any, ...]) -> Builder:
        if fragments:
            self._partials.add(name, to_fragments(fragments, clause=name))
        return self
