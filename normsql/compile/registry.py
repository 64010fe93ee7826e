"""Compiler registry (Open/Closed Principle).

``CompilerFactory``
    Central registry for :class:`~normsql.compile.base.PlaceholderCompiler`
    implementations.  Builders look their compiler up by dialect name at
    render time, so the builder never branches on the dialect itself.

Usage::

    from normsql.compile.registry import CompilerFactory

    @CompilerFactory.register("postgres")
    class PostgresCompiler(PlaceholderCompiler):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from normsql.compile.base import PlaceholderCompiler
from normsql.errors import DialectConfigError


class CompilerFactory:
    """Registry mapping dialect names to :class:`PlaceholderCompiler` classes.

    Compilers hold no state, so :meth:`create` caches one instance per name.

    Example::

        compiler = CompilerFactory.create("postgres")
        compiler.placeholder(1)   # '$1'
    """

    _compilers: ClassVar[dict[str, type[PlaceholderCompiler]]] = {}
    _instances: ClassVar[dict[str, PlaceholderCompiler]] = {}

    @classmethod
    def register(
        cls, name: str
    ) -> Callable[[type[PlaceholderCompiler]], type[PlaceholderCompiler]]:
        """Decorator that registers a compiler class under ``name``.

        Args:
            name: The dialect name (e.g. ``"postgres"``).

        Returns:
            A decorator that registers and returns the compiler class.
        """

        def decorator(compiler_cls: type[PlaceholderCompiler]) -> type[PlaceholderCompiler]:
            cls.register_class(name, compiler_cls)
            return compiler_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, compiler_cls: type[PlaceholderCompiler]) -> None:
        """Register a compiler class without using the decorator form.

        Args:
            name: The dialect name.
            compiler_cls: The :class:`PlaceholderCompiler` subclass to register.
        """
        cls._compilers[name] = compiler_cls
        cls._instances.pop(name, None)

    @classmethod
    def create(cls, name: str) -> PlaceholderCompiler:
        """Return the compiler registered for ``name``.

        Args:
            name: The dialect name.

        Returns:
            A :class:`PlaceholderCompiler` instance.

        Raises:
            DialectConfigError: If no compiler is registered for ``name``.
        """
        instance = cls._instances.get(name)
        if instance is not None:
            return instance
        compiler_cls = cls._compilers.get(name)
        if compiler_cls is None:
            registered = sorted(cls._compilers)
            raise DialectConfigError(
                f"Unsupported dialect: '{name}'. Registered dialects: {registered}.",
                dialect=name,
                allowed=registered,
            )
        instance = cls._instances[name] = compiler_cls()
        return instance

    @classmethod
    def registered_dialects(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(cls._compilers)
