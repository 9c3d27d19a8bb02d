# src/bubbleprompt/config/__init__.py

"""Configuration management for Bubble Prompt.

Resolve-once, freeze-then-flow: configuration is resolved at entry points
into an immutable ``FrozenConfig`` that sessions and the CLI consume.
"""

from .core import (
    FieldOrigin,
    FrozenConfig,
    Origin,
    Settings,
    SourceMap,
    audit_lines,
    resolve_config,
)
from .utils import field_spec_hint

__all__ = [
    "FieldOrigin",
    "FrozenConfig",
    "Origin",
    "Settings",
    "SourceMap",
    "audit_lines",
    "field_spec_hint",
    "resolve_config",
]
