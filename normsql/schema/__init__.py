"""normsql schema models: fragments and engine configuration."""
from normsql.schema.config import EngineConfig, default_config, engine
from normsql.schema.fragments import (
    BIND_MARKER,
    PLACEHOLDER,
    CallableFragment,
    Compilable,
    Fragment,
    LiteralFragment,
    Predicate,
    Raw,
    SubqueryFragment,
    TemplateFragment,
    to_fragment,
    to_fragments,
    unmark,
)

__all__ = [
    "EngineConfig",
    "default_config",
    "engine",
    "BIND_MARKER",
    "PLACEHOLDER",
    "CallableFragment",
    "Compilable",
    "Fragment",
    "LiteralFragment",
    "Predicate",
    "Raw",
    "SubqueryFragment",
    "TemplateFragment",
    "to_fragment",
    "to_fragments",
    "unmark",
]
