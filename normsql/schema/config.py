"""Engine configuration: which placeholder dialect a builder renders for.

Each ``Builder`` captures an :class:`EngineConfig` when it is constructed.
The process-wide default only decides what new builders capture, so
changing it never alters a builder that already exists::

    import normsql

    normsql.engine("postgres")
    pg = normsql.norm()          # renders $1, $2, ...
    normsql.engine("mysql")
    my = normsql.norm()          # renders ?, ?, ...
    assert pg.config.dialect == "postgres"

A builder may also pin its dialect explicitly, bypassing the default::

    normsql.norm(dialect="postgres")
"""
from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from normsql.errors import DialectConfigError

logger = logging.getLogger(__name__)

#: Supported placeholder dialects.
DialectName = Literal["mysql", "postgres"]

DEFAULT_DIALECT: DialectName = "mysql"


class EngineConfig(BaseModel):
    """Rendering options captured by a builder.

    Attributes:
        dialect: ``'mysql'`` renders ``?`` placeholders; ``'postgres'``
            renders numbered ``$n`` placeholders.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    dialect: DialectName = DEFAULT_DIALECT

    @classmethod
    def for_dialect(cls, dialect: str) -> EngineConfig:
        """Validate ``dialect`` and return a config for it.

        Raises:
            DialectConfigError: If ``dialect`` is not a supported name.
        """
        try:
            return cls(dialect=dialect)
        except PydanticValidationError as exc:
            raise DialectConfigError(
                f"Unsupported dialect: {dialect!r}. Choose 'mysql' or 'postgres'.",
                dialect=dialect,
                allowed=["mysql", "postgres"],
            ) from exc


_default_config = EngineConfig()


def default_config() -> EngineConfig:
    """Return the config new builders capture when none is given."""
    return _default_config


def engine(name: str | None = None) -> str:
    """Get or set the process-wide default dialect.

    Args:
        name: ``None`` to read the current default.  An empty string resets
            the default to ``'mysql'``.

    Returns:
        The default dialect name after the call.

    Raises:
        DialectConfigError: If ``name`` is not a supported dialect.
    """
    global _default_config

    if name is None:
        return _default_config.dialect

    config = EngineConfig.for_dialect(name or DEFAULT_DIALECT)
    if config.dialect != _default_config.dialect:
        logger.info("Default dialect changed from %s to %s", _default_config.dialect, config.dialect)
    _default_config = config
    return _default_config.dialect
