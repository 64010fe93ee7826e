"""MySQL dialect compiler."""

from __future__ import annotations

from normsql.compile.base import PlaceholderCompiler
from normsql.schema.fragments import PLACEHOLDER, unmark


class MySQLCompiler(PlaceholderCompiler):
    """Renders statements for MySQL-style drivers.

    Parameter style: ``?`` (qmark) – compatible with ``sqlite3``,
    ``mysql-connector-python`` prepared cursors, and other qmark drivers.
    Every bind marker becomes the same ``?``, so no numbering is needed.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def placeholder(self, index: int) -> str:
        return PLACEHOLDER

    def rewrite_placeholders(self, marked_sql: str) -> str:
        return unmark(marked_sql)
