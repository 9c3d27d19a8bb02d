# src/bubbleprompt/config/utils.py

"""Configuration utilities and shared constants.

Pure helpers that can be imported from anywhere in the config package
without creating circular dependencies.
"""

from __future__ import annotations

import os
from pathlib import Path

# --- Constants ---

ENV_PREFIX = "BUBBLEPROMPT_"

PYPROJECT_PATH_VAR = "BUBBLEPROMPT_PYPROJECT_PATH"
CONFIG_TOOL_NAME = "bubbleprompt"

# Meta/control variables that steer resolution but aren't config fields
META_ENV_FIELDS = {"pyproject_path"}

DEFAULT_STYLE_OPTIONS = (
    "专业严谨",
    "幽默风趣",
    "温暖治愈",
    "简洁明了",
    "极客硬核",
    "逻辑缜密",
)
DEFAULT_INDUSTRY_OPTIONS = ("互联网", "教育", "金融", "电商", "医疗", "法律", "创意写作")


# --- Path Utilities ---


def get_pyproject_path() -> Path:
    """Return the project pyproject.toml, honoring the env override."""
    if override := os.environ.get(PYPROJECT_PATH_VAR):
        return Path(override)
    return Path.cwd() / "pyproject.toml"


def default_store_path() -> str:
    """Return the default template store location.

    Robust to a missing HOME by falling back to the working directory.
    """
    try:
        base = Path.home() / ".config" / CONFIG_TOOL_NAME
    except RuntimeError:
        base = Path.cwd() / f".{CONFIG_TOOL_NAME}"
    return str(base / "templates.json")


# --- Coercion helpers ---


def split_csv(value: str) -> tuple[str, ...]:
    """Split a comma separated env value, dropping blank items."""
    return tuple(item.strip() for item in value.split(",") if item.strip())


def field_spec_hint(field: str) -> str:
    """Return a compact hint for setting a config field via env or files."""
    env_key = f"{ENV_PREFIX}{field.upper()}"
    return f"Set {env_key} or [tool.{CONFIG_TOOL_NAME}] {field} in pyproject.toml."
