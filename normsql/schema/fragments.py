"""Typed fragment models for clause arguments.

Every argument passed to a clause setter (``select``, ``where``, ...) or to
a conjunction helper is classified once, when it is added, into exactly one
of four fragment kinds:

``LiteralFragment``
    Text pasted as-is: ``"users.id"``, ``5``, ``True``.
``CallableFragment``
    Raw SQL produced by a function at render time.  The function receives
    the bind list when its signature accepts a positional argument.
``SubqueryFragment``
    Another builder, rendered in parentheses with its binds spliced in.
``TemplateFragment``
    ``[template, *values]``: each ``?`` in the template is replaced by the
    placeholder(s) or sub-query for the matching value.

Usage::

    from normsql.schema.fragments import to_fragment, TemplateFragment

    frag = to_fragment(["users.id > ?", 5])
    assert isinstance(frag, TemplateFragment)
    assert frag.values == (5,)
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from normsql.errors import TemplateArityError, UnsupportedFragmentError

if TYPE_CHECKING:
    from normsql.compile.base import CompiledStatement

#: Placeholder token written by callers in templates and shown in neutral SQL.
PLACEHOLDER = "?"

#: Internal stand-in for a real bind placeholder while a statement is being
#: assembled.  Only these are numbered by the dialect pass, so a literal
#: ``?`` in pasted SQL text is never mistaken for a bind.  NUL cannot occur
#: in SQL text accepted by MySQL or PostgreSQL.
BIND_MARKER = "\x00"


def unmark(sql: str) -> str:
    """Return ``sql`` with every bind marker shown as ``?``."""
    return sql.replace(BIND_MARKER, PLACEHOLDER)


class Compilable(ABC):
    """Tag base class for anything that can be embedded as a sub-query.

    ``Builder`` is the only implementation shipped with normsql.
    """

    @abstractmethod
    def compile(self) -> CompiledStatement:
        """Return the bind-marked SQL and its binds."""


class Predicate(ABC):
    """Tag base class for callables that render with bind markers already.

    A plain callable fragment returns SQL with ``?`` for the binds it
    appended; a ``Predicate`` (e.g. a conjunction) is rendered through the
    compositor and returns marked SQL, which is pasted unchanged.
    """

    @abstractmethod
    def render(self, binds: list[Any]) -> str:
        """Append binds to ``binds`` and return bind-marked SQL."""


@dataclass(frozen=True)
class Raw:
    """SQL text emitted verbatim in an INSERT value matrix, e.g. ``NOW()``."""

    sql: str

    def __str__(self) -> str:
        return self.sql


# ---------------------------------------------------------------------------
# Concrete fragment types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LiteralFragment:
    """Text pasted into the clause; contributes no binds."""

    value: Any


@dataclass(frozen=True)
class CallableFragment:
    """A function returning raw SQL text at render time.

    Attributes:
        func: Called with the bind list when ``takes_binds``, else with no
            arguments.
        takes_binds: Whether ``func`` accepts the bind list.
        marked: ``func`` returns bind-marked SQL (see :class:`Predicate`);
            otherwise the first ``?`` per appended bind is marked for it.
    """

    func: Callable[..., Any]
    takes_binds: bool
    marked: bool = False


@dataclass(frozen=True)
class SubqueryFragment:
    """A nested builder rendered as ``(<sql>)``."""

    statement: Compilable


@dataclass(frozen=True)
class TemplateFragment:
    """A ``?`` template paired with one value per marker."""

    template: str
    values: tuple[Any, ...]


Fragment = Union[LiteralFragment, CallableFragment, SubqueryFragment, TemplateFragment]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def to_fragment(value: Any, clause: str | None = None) -> Fragment:
    """Classify a raw clause argument as a typed ``Fragment``.

    Already-typed fragments are returned unchanged.

    Args:
        value: The argument passed to a clause setter.
        clause: Clause name, used in error messages.

    Returns:
        A typed ``Fragment`` instance.

    Raises:
        UnsupportedFragmentError: For ``None``, mappings, and sequences that
            do not start with a template string.
        TemplateArityError: When a template's ``?`` count does not match the
            number of values supplied with it.
    """
    if isinstance(value, (LiteralFragment, CallableFragment, SubqueryFragment, TemplateFragment)):
        return value
    if isinstance(value, Compilable):
        return SubqueryFragment(statement=value)
    if isinstance(value, Predicate):
        return CallableFragment(func=value.render, takes_binds=True, marked=True)
    if isinstance(value, (list, tuple)):
        return _to_template(value, clause)
    if value is None or isinstance(value, Mapping):
        raise UnsupportedFragmentError(value, clause=clause)
    if callable(value):
        return CallableFragment(func=value, takes_binds=_accepts_positional(value))
    return LiteralFragment(value=value)


def to_fragments(values: tuple[Any, ...] | list[Any], clause: str | None = None) -> tuple[Fragment, ...]:
    """Classify every argument of a clause call, preserving order."""
    return tuple(to_fragment(v, clause) for v in values)


def _to_template(seq: list[Any] | tuple[Any, ...], clause: str | None) -> TemplateFragment:
    if not seq or not isinstance(seq[0], str):
        raise UnsupportedFragmentError(seq, clause=clause)
    template, values = seq[0], tuple(seq[1:])
    markers = template.count(PLACEHOLDER)
    if markers != len(values):
        raise TemplateArityError(template, markers, len(values))
    return TemplateFragment(template=template, values=values)


def _accepts_positional(func: Callable[..., Any]) -> bool:
    """True when ``func`` can be called with the bind list as an argument."""
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in params
    )
