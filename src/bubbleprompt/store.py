"""Template records and the stores that persist them.

Defines the ``TemplateStore`` protocol plus two implementations:
``JSONTemplateStore`` (single JSON array on disk, newest first) and
``InMemoryTemplateStore``. Persistence is all-or-nothing: callers load the
whole collection, mutate it in memory and save the whole collection back.
"""

from __future__ import annotations

from datetime import datetime
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from bubbleprompt.errors import HINTS, StoreError

if TYPE_CHECKING:
    from collections.abc import Sequence
    import os

log = logging.getLogger(__name__)


class Template(BaseModel):
    """Snapshot of a completed session.

    Serialized with camelCase keys (``taskInput``, ``generatedPrompt``...)
    as a versionless JSON object.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: int
    name: str
    date: datetime
    task_input: str
    task_type: str
    answers: dict[str, str] = Field(default_factory=dict)
    selected_styles: list[str] = Field(default_factory=list)
    selected_industries: list[str] = Field(default_factory=list)
    generated_prompt: str = ""
    tags: list[str] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TemplateStore(Protocol):
    """Protocol for loading and replacing the full template collection."""

    def load_all(self) -> list[Template]:
        """Return every saved template, newest first."""
        ...

    def save_all(self, templates: Sequence[Template]) -> None:
        """Replace the stored collection with ``templates``."""
        ...


class InMemoryTemplateStore:
    """Process-local store; useful for tests and embedding."""

    def __init__(self, templates: Sequence[Template] = ()) -> None:
        self._templates = list(templates)

    def load_all(self) -> list[Template]:
        return list(self._templates)

    def save_all(self, templates: Sequence[Template]) -> None:
        self._templates = list(templates)


class JSONTemplateStore:
    """JSON file store holding one array of template objects.

    Reads are tolerant: a missing or malformed file yields an empty
    collection and invalid entries are skipped, both with a warning.
    Writes go to a temp file that is renamed over the target.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Initialize the store pointing at a JSON file path."""
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> list[Template]:
        """Load templates, discarding anything that fails validation."""
        raw = self._read_raw()
        templates: list[Template] = []
        for i, entry in enumerate(raw):
            try:
                templates.append(Template.model_validate(entry))
            except ValidationError as e:
                log.warning(
                    "Skipping invalid template #%d in %s: %s",
                    i,
                    self._path,
                    e.errors()[0].get("msg"),
                )
        return templates

    def save_all(self, templates: Sequence[Template]) -> None:
        """Persist the full collection atomically via temp file rename."""
        payload = [t.to_json_dict() for t in templates]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            tmp.replace(self._path)
        except OSError as e:
            raise StoreError(
                f"Failed to write templates to '{self._path}': {e}",
                hint=HINTS["store_write"],
            ) from e
        log.debug("Saved %d templates to %s", len(payload), self._path)

    def _read_raw(self) -> list[Any]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            log.warning("Ignoring unreadable template store %s: %s", self._path, e)
            return []
        if not isinstance(data, list):
            log.warning("Ignoring template store %s: expected a JSON array", self._path)
            return []
        return data
