"""Fragment compositor: folds typed fragments into clause text.

Every clause and every conjunction helper renders through :func:`fold`.
Fragments are rendered strictly left to right and each one appends its
binds to the shared list as it is rendered, so the bind list always matches
the order of bind markers in the text produced so far.  Nested builders
are compiled in place and their binds spliced in at the point where their
SQL lands.

Text produced here carries :data:`~normsql.schema.fragments.BIND_MARKER`
for every real bind.  A ``?`` that arrives as literal SQL (a string
constant, a column alias) is left alone and never numbered.
"""
from __future__ import annotations

import re
from typing import Any

from normsql.errors import UnsupportedFragmentError
from normsql.schema.fragments import (
    BIND_MARKER,
    PLACEHOLDER,
    CallableFragment,
    Compilable,
    Fragment,
    LiteralFragment,
    SubqueryFragment,
    TemplateFragment,
)


def fold(base: str, fragments: tuple[Fragment, ...], conjunction: str, binds: list[Any]) -> str:
    """Render ``fragments`` after ``base``, each followed by ``conjunction``.

    Args:
        base: Leading clause text, e.g. ``"select"``.
        fragments: Typed fragments in argument order.
        conjunction: Joiner appended after every fragment (``","``, ``" and"``).
        binds: Shared bind list; appended to in placeholder order.

    Returns:
        The clause text, still carrying its trailing conjunction.
    """
    parts = [base]
    for fragment in fragments:
        parts.append(render_fragment(fragment, binds))
        parts.append(conjunction)
    return "".join(parts)


def render_fragment(fragment: Fragment, binds: list[Any]) -> str:
    """Render a single fragment with its leading space."""
    if isinstance(fragment, LiteralFragment):
        return f" {fragment.value}"
    if isinstance(fragment, CallableFragment):
        return f" {_call(fragment, binds)}"
    if isinstance(fragment, SubqueryFragment):
        return f" ({_splice(fragment.statement, binds)})"
    if isinstance(fragment, TemplateFragment):
        return f" {substitute(fragment.template, fragment.values, binds)}"
    raise UnsupportedFragmentError(fragment)


def substitute(template: str, values: tuple[Any, ...], binds: list[Any]) -> str:
    """Replace each ``?`` in ``template`` with the matching value's SQL.

    The template is split on the marker up front, so SQL spliced in for one
    value is never scanned again for later markers.

    * scalar → one bind marker, one bind
    * list / tuple of N items → N comma-joined bind markers, N binds
    * builder → ``(<sub sql>)``, the builder's binds; a ``(?)`` already in
      the template is reused rather than doubled

    Args:
        template: Template text with one ``?`` per value.
        values: Values in marker order.
        binds: Shared bind list.

    Returns:
        The substituted template, bind-marked.
    """
    pieces = template.split(PLACEHOLDER)
    parts = [pieces[0]]
    for value, tail in zip(values, pieces[1:]):
        if isinstance(value, Compilable):
            if parts[-1].endswith("(") and tail.startswith(")"):
                parts[-1] = parts[-1][:-1]
                tail = tail[1:]
            parts.append(f"({_splice(value, binds)})")
        elif isinstance(value, (list, tuple)):
            binds.extend(value)
            parts.append(",".join(BIND_MARKER for _ in value))
        else:
            binds.append(value)
            parts.append(BIND_MARKER)
        parts.append(tail)
    return "".join(parts)


def strip_conjunction(text: str, conjunction: str) -> str:
    """Remove one trailing ``conjunction`` (and trailing whitespace) from ``text``."""
    return re.sub(re.escape(conjunction) + r"\s*$", "", text)


def _call(fragment: CallableFragment, binds: list[Any]) -> str:
    if not fragment.takes_binds:
        return str(fragment.func())
    before = len(binds)
    text = str(fragment.func(binds))
    if fragment.marked:
        return text
    # the callable wrote "?" for the binds it appended, in order
    return text.replace(PLACEHOLDER, BIND_MARKER, len(binds) - before)


def _splice(statement: Compilable, binds: list[Any]) -> str:
    compiled = statement.compile()
    binds.extend(compiled.binds)
    return compiled.marked_sql
