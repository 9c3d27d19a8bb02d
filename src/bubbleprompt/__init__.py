"""Bubble Prompt: turn a rough task description into a structured LLM prompt.

Public API:
    - classify(): Rule-based task classification
    - PromptBuilder: Chainable CO-STAR prompt builder
    - apply_preset(): Category-specific constraints
    - Session: Intake -> Clarify -> Tag -> Done state machine
    - JSONTemplateStore / InMemoryTemplateStore: Template persistence
    - resolve_config(): Layered configuration
"""

from __future__ import annotations

import logging

from bubbleprompt.builder import DEFAULT_PHRASES, BuilderState, PromptBuilder, PromptPhrases
from bubbleprompt.classifier import (
    DEFAULT_RULES,
    Category,
    Classification,
    ClassificationRule,
    classify,
)
from bubbleprompt.config import FrozenConfig, resolve_config
from bubbleprompt.errors import (
    BubblePromptError,
    ConfigurationError,
    InputError,
    StageError,
    StoreError,
    TemplateNotFoundError,
)
from bubbleprompt.presets import PRESETS, apply_preset
from bubbleprompt.questions import Question, all_questions, find_question
from bubbleprompt.session import Session, SessionView, Stage, assemble_prompt
from bubbleprompt.store import (
    InMemoryTemplateStore,
    JSONTemplateStore,
    Template,
    TemplateStore,
)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("bubble-prompt")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("bubbleprompt").addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_PHRASES",
    "DEFAULT_RULES",
    "PRESETS",
    "BubblePromptError",
    "BuilderState",
    "Category",
    "Classification",
    "ClassificationRule",
    "ConfigurationError",
    "FrozenConfig",
    "InMemoryTemplateStore",
    "InputError",
    "JSONTemplateStore",
    "PromptBuilder",
    "PromptPhrases",
    "Question",
    "Session",
    "SessionView",
    "Stage",
    "StageError",
    "StoreError",
    "Template",
    "TemplateNotFoundError",
    "TemplateStore",
    "all_questions",
    "apply_preset",
    "assemble_prompt",
    "classify",
    "find_question",
    "resolve_config",
]
