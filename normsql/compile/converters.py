"""Hand-off helpers for executing rendered statements elsewhere.

SQLAlchemy converter
--------------------
:func:`to_sqlalchemy` turns a builder into a :class:`sqlalchemy.sql.expression.TextClause`
whose positional binds are attached as named parameters ``p1 .. pn``.

Install the optional dependency before using this module::

    pip install "normsql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from normsql import norm
    from normsql.compile.converters import to_sqlalchemy

    engine = create_engine("sqlite:///mydb.db")
    query = norm().select("id").from_("users").where(["id > ?", 5])
    with engine.connect() as conn:
        rows = conn.execute(to_sqlalchemy(query)).all()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from normsql.compile.base import PlaceholderCompiler
from normsql.schema.fragments import Compilable

if TYPE_CHECKING:
    from sqlalchemy.sql.expression import TextClause


class NamedParamCompiler(PlaceholderCompiler):
    """Renders ``:p1, :p2, ...`` – SQLAlchemy ``text()`` bind syntax."""

    prefix = "p"

    @property
    def dialect_name(self) -> str:
        return "sqlalchemy"

    def placeholder(self, index: int) -> str:
        return f":{self.prefix}{index}"

    def param_name(self, index: int) -> str:
        return f"{self.prefix}{index}"


def to_sqlalchemy(statement: Compilable) -> TextClause:
    """Convert a builder into an executable SQLAlchemy ``text()`` clause.

    The statement is compiled with bind markers and renumbered with
    named parameters, so the builder's own dialect setting does not matter.
    LIMIT syntax still follows the builder's dialect.

    Args:
        statement: The builder to convert.

    Returns:
        A ``TextClause`` with every bind attached.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import text
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for to_sqlalchemy(). "
            'Install it with: pip install "normsql[sqlalchemy]"'
        ) from exc

    compiler = NamedParamCompiler()
    rendered = compiler.render(statement.compile())
    params = {
        compiler.param_name(index): value
        for index, value in enumerate(rendered.binds, start=1)
    }
    return text(rendered.sql).bindparams(**params)
