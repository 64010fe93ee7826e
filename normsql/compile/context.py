"""Context-based access to the compiler of the statement being rendered.

A sub-builder is compiled while its parent renders, and dialect-specific
text it emits (LIMIT syntax) must follow the outermost statement's dialect,
not the sub-builder's own.  The outermost ``render()`` or ``compile()``
publishes its compiler here; nested builders pick it up without it being
passed through every fragment.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from normsql.compile.base import PlaceholderCompiler

__all__ = ("current_compiler", "get_current_compiler", "use_compiler")

# Compiler of the outermost statement currently being assembled
current_compiler: ContextVar[Optional["PlaceholderCompiler"]] = ContextVar(
    "current_compiler", default=None
)


def get_current_compiler() -> Optional["PlaceholderCompiler"]:
    """Return the compiler of the statement being rendered, if any."""
    return current_compiler.get()


@contextmanager
def use_compiler(compiler: "PlaceholderCompiler") -> Iterator["PlaceholderCompiler"]:
    """Publish ``compiler`` for nested builders for the duration of the block."""
    token = current_compiler.set(compiler)
    try:
        yield compiler
    finally:
        current_compiler.reset(token)
