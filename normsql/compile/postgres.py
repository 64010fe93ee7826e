"""PostgreSQL dialect compiler."""

from __future__ import annotations

from typing import Any

from normsql.compile.base import PlaceholderCompiler


class PostgresCompiler(PlaceholderCompiler):
    """Renders statements for PostgreSQL.

    Parameter style: ``$1, $2, ...`` – compatible with ``asyncpg`` and
    server-side prepared statements.  Placeholders are numbered once over
    the whole statement, so binds contributed by sub-builders continue the
    parent's sequence.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def placeholder(self, index: int) -> str:
        return f"${index}"

    def limit_clause(self, lower: Any, upper: Any = None) -> str:
        # PostgreSQL has no "limit offset, count" form.
        if upper is None:
            return f"limit {lower}"
        return f"limit {upper} offset {lower}"
