"""Custom exception hierarchy for normsql.

All public errors inherit from NormError so callers can catch the base
class for any normsql-specific failure.  Every error is a programming
error in how a statement was put together; none of them is transient.
"""
from __future__ import annotations

from typing import Any


class NormError(Exception):
    """Base exception for all normsql errors."""


class StructuralError(NormError):
    """Raised when a statement cannot be assembled from its fragments.

    Args:
        message: Human-readable description.
        clause: The clause being built when the error occurred.
        sql: SQL assembled so far, when available.
    """

    def __init__(
        self,
        message: str,
        clause: str | None = None,
        sql: str | None = None,
    ) -> None:
        super().__init__(message)
        self.clause = clause
        self.sql = sql


class UnsupportedFragmentError(StructuralError):
    """Raised when a clause argument is not one of the four fragment kinds."""

    def __init__(self, fragment: Any, clause: str | None = None) -> None:
        super().__init__(
            f"Unsupported fragment {fragment!r}. Expected a literal, a callable, "
            "a builder, or a [template, *values] sequence.",
            clause=clause,
        )
        self.fragment = fragment


class UnnamedSubqueryError(StructuralError):
    """Raised when a sub-builder is passed to FROM without an alias."""

    def __init__(self, sub_sql: str) -> None:
        super().__init__(
            f"You need to name your subquery: {sub_sql}",
            clause="from",
            sql=sub_sql,
        )


class TemplateArityError(StructuralError):
    """Raised when a template's ``?`` count differs from its value count."""

    def __init__(self, template: str, markers: int, values: int) -> None:
        super().__init__(
            f"Template {template!r} has {markers} placeholder(s) "
            f"but {values} value(s) were given.",
        )
        self.template = template


class MissingClauseError(StructuralError):
    """Raised when a statement family lacks a clause it requires.

    Args:
        message: Human-readable description.
        missing: Clause name(s) that must be added to the builder.
    """

    def __init__(self, message: str, missing: list[str]) -> None:
        super().__init__(message, clause=missing[0] if missing else None)
        self.missing = missing


class HavingWithoutGroupByError(StructuralError):
    """Raised when HAVING is used without GROUP BY."""

    def __init__(self, sql: str) -> None:
        super().__init__(
            f"You must have a group by clause to use a having clause: {sql}",
            clause="having",
            sql=sql,
        )


class XorArityError(StructuralError):
    """Raised when ``xor`` receives fewer than two operands."""

    def __init__(self, count: int) -> None:
        super().__init__(f"Cannot xor fewer than two arguments (got {count}).")
        self.count = count


class EmptyConjunctionError(StructuralError):
    """Raised when ``and_``, ``or_``, ``nand`` or ``nor`` receives no operands."""

    def __init__(self, operator: str) -> None:
        super().__init__(f"Cannot {operator} zero arguments; '()' is not valid SQL.")
        self.operator = operator


class DialectConfigError(NormError):
    """Raised when an unknown dialect is configured.

    Args:
        message: Human-readable description.
        dialect: The rejected dialect name.
        allowed: Registered dialect names.
    """

    def __init__(
        self,
        message: str,
        dialect: str | None = None,
        allowed: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.dialect = dialect
        self.allowed = allowed or []
