"""Boolean conjunction helpers: ``and_``, ``or_``, ``nand``, ``nor``, ``xor``.

Each helper returns a :class:`Conjunction`, a callable fragment.  Call it
with no arguments to get standalone SQL, or pass it to any clause setter,
where it is rendered with the enclosing statement's bind list::

    from normsql import norm, and_, or_

    cond = or_("a.id = b.id", ["a.time = ?", "2014-03-01"])
    cond()                      # '(a.id = b.id or a.time = ?)'

    norm().where(cond, "a.wow = 'wow'").render()
    # RenderedSQL(sql="select 1 from dual where (a.id = b.id or a.time = ?) "
    #                 "and a.wow = 'wow'", binds=['2014-03-01'], ...)
"""
from __future__ import annotations

from typing import Any

from normsql.compile.compositor import fold, strip_conjunction
from normsql.errors import EmptyConjunctionError, XorArityError
from normsql.schema.fragments import Fragment, Predicate, to_fragments, unmark


class Conjunction(Predicate):
    """Fragments joined by ``and`` / ``or``, parenthesized, optionally negated.

    Args:
        fragments: Operands in order; raw arguments are classified on entry.
        operator: ``'and'`` or ``'or'``.
        negate: Prefix the result with ``not``.

    Raises:
        EmptyConjunctionError: If ``fragments`` is empty.
    """

    def __init__(self, fragments: tuple[Any, ...], operator: str, negate: bool = False) -> None:
        if not fragments:
            raise EmptyConjunctionError(f"n{operator}" if negate else operator)
        self._fragments: tuple[Fragment, ...] = to_fragments(fragments, clause=operator)
        self._operator = operator
        self._negate = negate

    def render(self, binds: list[Any]) -> str:
        """Append binds to ``binds`` and return the bind-marked condition."""
        joiner = f" {self._operator}"
        body = strip_conjunction(fold("", self._fragments, joiner, binds), joiner)
        text = f"({body.strip()})"
        return f"not {text}" if self._negate else text

    def __call__(self, binds: list[Any] | None = None) -> str:
        return unmark(self.render([] if binds is None else binds))

    def __str__(self) -> str:
        return self()

    def __repr__(self) -> str:
        return f"Conjunction({self()!r})"


def and_(*fragments: Any) -> Conjunction:
    """``(a and b and ...)``."""
    return Conjunction(fragments, "and")


def or_(*fragments: Any) -> Conjunction:
    """``(a or b or ...)``."""
    return Conjunction(fragments, "or")


def nand(*fragments: Any) -> Conjunction:
    """``not (a and b and ...)``."""
    return Conjunction(fragments, "and", negate=True)


def nor(*fragments: Any) -> Conjunction:
    """``not (a or b or ...)``."""
    return Conjunction(fragments, "or", negate=True)


def xor(*fragments: Any) -> Conjunction:
    """Exactly one of the operands holds.

    Two operands expand to ``(not (a and b) and (a or b))``, which avoids
    relying on an ``xor`` keyword.  With more operands this is "one and only
    one", not chained parity: ``or`` over each operand ``and``-ed with the
    ``nor`` of all the others.

    Raises:
        XorArityError: If fewer than two operands are given.
    """
    if len(fragments) < 2:
        raise XorArityError(len(fragments))

    if len(fragments) == 2:
        return and_(nand(*fragments), or_(*fragments))

    exactly_one = []
    for i, operand in enumerate(fragments):
        others = fragments[:i] + fragments[i + 1:]
        exactly_one.append(and_(operand, nor(*others)))
    return or_(*exactly_one)
