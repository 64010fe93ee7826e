"""Statement assembly: partials → bind-marked SQL and binds.

``StatementAssembler`` picks the statement family from whichever partials
are populated, renders each clause in grammatical order against a single
bind list, drops empty clauses, and checks the constraints that span
clauses.

Family inference
----------------
``update`` or ``set``  → ``update <t> set <a> [where] [order by] [limit]``
``delete`` or ``using``  → ``delete from <t> [using] [where] [order by] [limit]``
``insert`` or ``values`` → ``insert into <t> values ...`` or ``insert into <t> select ...``
otherwise              → ``select ... from ... [where] [group by] [having] [order by] [limit]``
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

from normsql.compile.base import CompiledStatement, PlaceholderCompiler
from normsql.compile.clauses import ClauseAccumulator, Partials
from normsql.errors import HavingWithoutGroupByError, MissingClauseError
from normsql.schema.fragments import unmark

logger = logging.getLogger(__name__)

#: One clause renderer: appends binds and returns text ("" when absent).
ClauseRenderer = Callable[[list[Any]], str]

_DISTINCT_RE = re.compile(r"^\s*select(\s+distinct\b)?")


class StatementAssembler:
    """Assembles one builder's partials into a :class:`CompiledStatement`.

    Args:
        compiler: Compiler of the outermost statement, consulted for LIMIT
            syntax only.  The placeholder pass is applied later, by the
            caller.
    """

    def __init__(self, compiler: PlaceholderCompiler) -> None:
        self._compiler = compiler

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def assemble(self, partials: Partials) -> CompiledStatement:
        """Render ``partials`` to bind-marked SQL.

        Raises:
            MissingClauseError: If the inferred family lacks a required clause.
            HavingWithoutGroupByError: If HAVING is set without GROUP BY.
        """
        family = self.family(partials)
        renderers = getattr(self, f"_{family}_clauses")(partials)

        binds: list[Any] = []
        texts = (render(binds) for render in renderers)
        sql = " ".join(text for text in texts if text).strip()

        if partials.having is not None and partials.group_by is None:
            raise HavingWithoutGroupByError(unmark(sql))

        logger.debug("Assembled %s statement with %d bind(s)", family, len(binds))
        return CompiledStatement(marked_sql=sql, binds=binds, family=family)

    @staticmethod
    def family(partials: Partials) -> str:
        """Infer the statement family from the populated partials."""
        if partials.update is not None or partials.set is not None:
            return "update"
        if partials.delete is not None or partials.using is not None:
            return "delete"
        if partials.insert is not None or partials.values is not None:
            return "insert"
        return "select"

    # ------------------------------------------------------------------
    # Per-family clause lists
    # ------------------------------------------------------------------

    def _select_clauses(self, partials: Partials) -> list[ClauseRenderer]:
        select = _clause(partials.select, "select 1")
        if partials.distinct:
            select = _with_distinct(select)
        return [
            select,
            _clause(partials.from_, "from dual"),
            _clause(partials.where),
            _clause(partials.group_by),
            _clause(partials.having),
            _clause(partials.order_by),
            self._limit(partials),
        ]

    def _update_clauses(self, partials: Partials) -> list[ClauseRenderer]:
        if partials.update is None or partials.set is None:
            raise MissingClauseError(
                "You must specify update and set clauses.",
                missing=[n for n in ("update", "set") if getattr(partials, n) is None],
            )
        return [
            _clause(partials.update),
            _clause(partials.set),
            _clause(partials.where),
            _clause(partials.order_by),
            self._limit(partials),
        ]

    def _delete_clauses(self, partials: Partials) -> list[ClauseRenderer]:
        if partials.delete is None:
            raise MissingClauseError("You must specify a delete clause.", missing=["delete"])
        return [
            _clause(partials.delete),
            _clause(partials.using),
            _clause(partials.where),
            _clause(partials.order_by),
            self._limit(partials),
        ]

    def _insert_clauses(self, partials: Partials) -> list[ClauseRenderer]:
        if partials.insert is None:
            raise MissingClauseError("You must specify an insert target.", missing=["insert"])
        if partials.values is None and partials.select is None:
            raise MissingClauseError(
                "You must specify a values or select clause.",
                missing=["values", "select"],
            )
        target = partials.insert

        def insert(binds: list[Any]) -> str:
            return f"insert into {target}"

        if partials.values is not None:
            return [insert, partials.values.render]
        return [insert, *self._select_clauses(partials)]

    def _limit(self, partials: Partials) -> ClauseRenderer:
        limit = partials.limit
        if limit is None:
            return _empty
        return lambda binds: limit.render(self._compiler)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _empty(binds: list[Any]) -> str:
    return ""


def _clause(accumulator: ClauseAccumulator | None, default: str = "") -> ClauseRenderer:
    if accumulator is None:
        return lambda binds: default
    return accumulator.render


def _with_distinct(render: ClauseRenderer) -> ClauseRenderer:
    def distinct(binds: list[Any]) -> str:
        return _DISTINCT_RE.sub("select distinct", render(binds), count=1)

    return distinct
