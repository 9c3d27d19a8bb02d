"""Pytest configuration and fixtures.

Provides environment isolation, dotenv blocking, a fixed clock and ready
made stores/sessions. Isolation fixtures are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
from datetime import UTC, datetime, timedelta
import os
from typing import TYPE_CHECKING

import pytest

from bubbleprompt.config import resolve_config
from bubbleprompt.session import Session
from bubbleprompt.store import InMemoryTemplateStore, JSONTemplateStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from bubbleprompt.config import FrozenConfig

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    """Clear BUBBLEPROMPT_* variables and point config at an empty pyproject."""
    for key in list(os.environ.keys()):
        if key.startswith("BUBBLEPROMPT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("BUBBLEPROMPT_PYPROJECT_PATH", str(tmp_path / "absent.toml"))


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path: Path) -> FrozenConfig:
    """Default configuration with the store under tmp_path."""
    return resolve_config({"store_path": str(tmp_path / "templates.json")})


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Deterministic clock advancing one second per call."""
    start = datetime(2026, 2, 4, 12, 0, tzinfo=UTC)
    calls = {"n": 0}

    def _now() -> datetime:
        calls["n"] += 1
        return start + timedelta(seconds=calls["n"])

    return _now


class CountingStore(InMemoryTemplateStore):
    """In-memory store that records how often the collection was replaced."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.save_calls = 0

    def save_all(self, templates) -> None:
        super().save_all(templates)
        self.save_calls += 1


@pytest.fixture
def memory_store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def json_store(tmp_path: Path) -> JSONTemplateStore:
    return JSONTemplateStore(tmp_path / "templates.json")


@pytest.fixture
def session(memory_store, config, clock) -> Session:
    """A fresh session backed by an in-memory store."""
    return Session(memory_store, config, clock=clock)
