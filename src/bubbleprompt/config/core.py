# src/bubbleprompt/config/core.py

"""Core configuration schema and resolution.

- ``Settings`` is the single source of truth for fields, defaults and
  validation (the pydantic wall).
- ``FrozenConfig`` is the immutable payload handed to sessions and the CLI.
- ``resolve_config`` merges defaults < pyproject < env < overrides and can
  explain where every field came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal, overload

from pydantic import BaseModel, Field, ValidationError, field_validator

from bubbleprompt.errors import ConfigurationError

from .utils import (
    DEFAULT_INDUSTRY_OPTIONS,
    DEFAULT_STYLE_OPTIONS,
    ENV_PREFIX,
    default_store_path,
    field_spec_hint,
    get_pyproject_path,
    split_csv,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# --- Schema (Pydantic wall) ---


class Settings(BaseModel):
    """Pydantic schema for configuration validation and defaults."""

    store_path: str = Field(default_factory=default_store_path, min_length=1)
    style_options: tuple[str, ...] = Field(default=DEFAULT_STYLE_OPTIONS)
    industry_options: tuple[str, ...] = Field(default=DEFAULT_INDUSTRY_OPTIONS)
    default_styles: tuple[str, ...] = Field(default=("直接",))
    default_industry: str = Field(default="通用", min_length=1)
    fallback_response_format: str = Field(default="Markdown 结构化格式")
    template_name_length: int = Field(default=10, ge=1)
    log_level: str = Field(default="WARNING")

    model_config = {"extra": "allow"}  # Preserve unknown keys for diagnostics

    @field_validator(
        "style_options", "industry_options", "default_styles", mode="before"
    )
    @classmethod
    def normalize_tags(cls, v: Any) -> Any:
        """Accept comma separated strings or sequences; trim and drop blanks."""
        if isinstance(v, str):
            return split_csv(v)
        if isinstance(v, list | tuple):
            return tuple(str(x).strip() for x in v if str(x).strip())
        return v

    @field_validator("store_path", "default_industry", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace on text fields."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Accept any casing of the standard level names."""
        if isinstance(v, str):
            level = v.strip().upper()
            if level not in _LOG_LEVELS:
                raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
            return level
        return v


# --- Immutable runtime payload ---


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration payload consumed by sessions and the CLI."""

    store_path: Path
    style_options: tuple[str, ...]
    industry_options: tuple[str, ...]
    default_styles: tuple[str, ...]
    default_industry: str
    fallback_response_format: str
    template_name_length: int
    log_level: str
    extra: Mapping[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible view for display."""
        return {
            "store_path": str(self.store_path),
            "style_options": list(self.style_options),
            "industry_options": list(self.industry_options),
            "default_styles": list(self.default_styles),
            "default_industry": self.default_industry,
            "fallback_response_format": self.fallback_response_format,
            "template_name_length": self.template_name_length,
            "log_level": self.log_level,
            "extra": dict(self.extra),
        }


# --- Audit types ---


class Origin(str, Enum):
    """Source origin for configuration field values."""

    DEFAULT = "default"
    PROJECT = "project"
    ENV = "env"
    OVERRIDES = "overrides"


@dataclass(frozen=True)
class FieldOrigin:
    """Tracks the origin and context of a configuration field value."""

    origin: Origin
    env_key: str | None = None
    file: str | None = None


SourceMap = dict[str, FieldOrigin]

_DOTENV_LOADED: bool = False


def _try_load_dotenv() -> None:
    """Load a .env file once per process."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


# --- Public resolution API ---


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    *,
    explain: Literal[True],
) -> tuple[FrozenConfig, SourceMap]: ...


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    *,
    explain: Literal[False] = ...,
) -> FrozenConfig: ...


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    explain: bool = False,
) -> FrozenConfig | tuple[FrozenConfig, SourceMap]:
    """Resolve configuration from all sources into a FrozenConfig.

    Precedence: defaults < pyproject.toml < environment < overrides.

    Args:
        overrides: Programmatic configuration overrides.
        explain: If True, also return the per-field origin map.

    Raises:
        ConfigurationError: If the merged values fail validation.
    """
    _try_load_dotenv()

    from .loaders import load_env, load_pyproject

    merged, sources = _resolve_layers(
        overrides=overrides or {},
        env=load_env(),
        project=load_pyproject(),
    )

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        msg = err.get("msg") or ""
        if msg.startswith("Value error, "):
            msg = msg[13:]
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else None
        raise ConfigurationError(
            f"Configuration validation failed: {field or 'config'}: {msg}",
            hint=field_spec_hint(field) if field else None,
        ) from e

    frozen = _freeze(settings, merged)
    log.debug("Resolved configuration: %s", frozen.to_dict())
    return (frozen, sources) if explain else frozen


# --- Internal helpers ---


def _freeze(settings: Settings, merged: Mapping[str, Any]) -> FrozenConfig:
    known_fields = set(Settings.model_fields.keys())
    extra = {k: v for k, v in merged.items() if k not in known_fields}
    for key in extra:
        log.warning("Ignoring unknown configuration key %r", key)

    return FrozenConfig(
        store_path=Path(settings.store_path).expanduser(),
        style_options=settings.style_options,
        industry_options=settings.industry_options,
        default_styles=settings.default_styles,
        default_industry=settings.default_industry,
        fallback_response_format=settings.fallback_response_format,
        template_name_length=settings.template_name_length,
        log_level=settings.log_level,
        extra=extra,
    )


def _resolve_layers(
    *,
    overrides: Mapping[str, Any],
    env: Mapping[str, Any],
    project: Mapping[str, Any],
) -> tuple[dict[str, Any], SourceMap]:
    """Merge layers last-wins while recording where each value came from."""
    layers = [
        (Origin.PROJECT, project),
        (Origin.ENV, env),
        (Origin.OVERRIDES, overrides),
    ]

    out: dict[str, Any] = {}
    src: SourceMap = {}
    for k, v in Settings().model_dump().items():
        out[k] = v
        src[k] = FieldOrigin(origin=Origin.DEFAULT)

    for origin, payload in layers:
        for k, v in payload.items():
            out[k] = v
            if origin is Origin.ENV:
                src[k] = FieldOrigin(origin=origin, env_key=f"{ENV_PREFIX}{k.upper()}")
            elif origin is Origin.PROJECT:
                src[k] = FieldOrigin(origin=origin, file=str(get_pyproject_path()))
            else:
                src[k] = FieldOrigin(origin=origin)

    return out, src


def _origin_label(where: FieldOrigin) -> str:
    match where.origin:
        case Origin.ENV:
            return f"env:{where.env_key}"
        case Origin.PROJECT:
            return f"file:{where.file or 'pyproject.toml'}"
        case _:
            return str(where.origin.value)


def audit_lines(sources: SourceMap) -> list[str]:
    """Produce human-readable ``field: origin`` lines in field order."""
    order = [*Settings.model_fields.keys()]
    order += sorted(k for k in sources if k not in Settings.model_fields)
    return [f"{field}: {_origin_label(sources[field])}" for field in order if field in sources]
