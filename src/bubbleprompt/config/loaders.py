# src/bubbleprompt/config/loaders.py

"""Configuration loaders for environment and pyproject.toml.

Pure data loading functions: each returns a plain dictionary that the core
resolver merges and validates. No validation happens here.
"""

from __future__ import annotations

import logging
import os
import tomllib
from typing import TYPE_CHECKING, Any

from . import utils

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

log = logging.getLogger(__name__)


def load_env() -> Mapping[str, Any]:
    """Load configuration from ``BUBBLEPROMPT_*`` environment variables.

    Performs schema-informed coercion: integers are converted,
    tuple-valued fields are split on commas. Meta variables are skipped.
    ``.env`` loading happens in the resolver; this only reads ``os.environ``.
    """
    from .core import Settings  # local import to keep loaders import-light

    config: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(utils.ENV_PREFIX):
            continue
        field_name = key[len(utils.ENV_PREFIX) :].lower()
        if field_name in utils.META_ENV_FIELDS:
            continue
        info = Settings.model_fields.get(field_name)
        target_type = info.annotation if info is not None else None
        config[field_name] = _coerce_env_value(value, target_type)
    return config


def _coerce_env_value(value: str, target_type: Any) -> Any:
    """Coerce env string to the target type when possible.

    Falls back to the original string on conversion failure or unknown type.
    """
    if target_type is int:
        try:
            return int(value)
        except ValueError:
            return value
    if target_type == tuple[str, ...]:
        return utils.split_csv(value)
    return value


def _read_toml(path: Path) -> dict[str, Any]:
    """Safely read a TOML file, returning empty dict on any error."""
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        log.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def load_pyproject() -> Mapping[str, Any]:
    """Load the ``[tool.bubbleprompt]`` table from pyproject.toml."""
    data = _read_toml(utils.get_pyproject_path())
    section = data.get("tool", {}).get(utils.CONFIG_TOOL_NAME, {})
    return dict(section) if isinstance(section, dict) else {}
