"""Exception hierarchy for Bubble Prompt."""

from __future__ import annotations


class BubblePromptError(Exception):
    """Base exception for all Bubble Prompt errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(BubblePromptError):
    """Configuration validation or resolution failed."""


class InputError(BubblePromptError):
    """User-supplied input was rejected (blank task, unknown tag, blank name)."""


class StageError(BubblePromptError):
    """An action was attempted in a stage that does not accept it."""

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        hint: str | None = None,
    ) -> None:
        msg = message if stage is None else f"[{stage}] {message}"
        super().__init__(msg, hint=hint)
        self.stage = stage


class TemplateNotFoundError(BubblePromptError):
    """No saved template carries the requested id."""

    def __init__(self, template_id: int) -> None:
        super().__init__(
            f"Template {template_id} not found",
            hint="List saved templates with `bubbleprompt templates list`.",
        )
        self.template_id = template_id


class StoreError(BubblePromptError):
    """Persisting the template collection failed."""


# --- Actionable Hints ---

HINTS = {
    "blank_task": "Describe the task in a few words, e.g. '帮我写一段小红书文案'.",
    "blank_name": "Pass a non-empty name or omit it to use the task prefix.",
    "unknown_tag": "Pick one of the configured options (see `bubbleprompt config show`).",
    "store_write": "Check that the store path is writable or set BUBBLEPROMPT_STORE_PATH.",
}
