"""Session state machine driving intake, clarification, tagging and assembly.

Stages::

    INTAKE -> CLARIFY -> TAG -> (ASSEMBLE) -> DONE
       ^__________________ restart() _________|

``ASSEMBLE`` runs synchronously inside ``generate()`` and is never observed
between calls. ``load_template()`` jumps straight to ``DONE`` from any stage.
Every public method is a user action; a method called in a stage that does
not accept it raises ``StageError`` and changes nothing.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
import logging

from bubbleprompt.builder import DEFAULT_PHRASES, PromptBuilder, PromptPhrases
from bubbleprompt.classifier import DEFAULT_RULES, Category, ClassificationRule, classify
from bubbleprompt.config import FrozenConfig, resolve_config
from bubbleprompt.errors import (
    HINTS,
    InputError,
    StageError,
    TemplateNotFoundError,
)
from bubbleprompt.presets import apply_preset
from bubbleprompt.questions import Question, questions_for
from bubbleprompt.store import JSONTemplateStore, Template, TemplateStore

log = logging.getLogger(__name__)


class Stage(str, Enum):
    """Interaction stages of a session."""

    INTAKE = "intake"
    CLARIFY = "clarify"
    TAG = "tag"
    ASSEMBLE = "assemble"
    DONE = "done"


@dataclass(frozen=True)
class SessionView:
    """Everything a front end needs to render the current stage."""

    stage: Stage
    task_input: str
    category: Category | None
    question: Question | None
    progress: float | None
    answers: dict[str, str] = field(default_factory=dict)
    style_options: tuple[str, ...] = ()
    industry_options: tuple[str, ...] = ()
    selected_styles: tuple[str, ...] = ()
    selected_industries: tuple[str, ...] = ()
    rendered_prompt: str = ""
    template_count: int = 0


def assemble_prompt(
    task_input: str,
    category: Category | str | None,
    answers: Mapping[str, str],
    styles: Sequence[str],
    industries: Sequence[str],
    *,
    phrases: PromptPhrases = DEFAULT_PHRASES,
    fallback_response_format: str = "Markdown 结构化格式",
) -> str:
    """Configure a fresh builder from session data and render it.

    The context is set only when an industry was chosen (the first one).
    The category preset runs before the fallback format is considered, so a
    preset's format always takes precedence over the fallback.
    """
    builder = PromptBuilder(phrases).set_objective(task_input).set_user_inputs(answers)
    if industries:
        builder.set_context(industries[0])
    for s in styles:
        builder.add_style(s)
    if category is not None:
        apply_preset(category, builder)
    if not builder.response_format:
        builder.set_response_format(fallback_response_format)
    return builder.build()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Session:
    """Single-user, synchronous prompt-construction session."""

    def __init__(
        self,
        store: TemplateStore | None = None,
        config: FrozenConfig | None = None,
        *,
        rules: tuple[ClassificationRule, ...] = DEFAULT_RULES,
        phrases: PromptPhrases | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Create a session in ``INTAKE`` and load saved templates.

        Args:
            store: Template persistence; defaults to a JSON file at
                ``config.store_path``.
            config: Resolved configuration; resolved from the environment
                when omitted.
            rules: Ordered classification rules.
            phrases: Builder phrases; defaults use ``config.default_industry``.
            clock: Time source for template ids and dates.
        """
        self.config = config if config is not None else resolve_config()
        self._store = store if store is not None else JSONTemplateStore(self.config.store_path)
        self._rules = rules
        self._phrases = phrases or replace(
            DEFAULT_PHRASES, default_industry=self.config.default_industry
        )
        self._clock = clock
        self._templates = self._load_templates()
        self._reset()

    # --- Read side ---

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def task_input(self) -> str:
        return self._task_input

    @property
    def category(self) -> Category | None:
        return self._category

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def current_question(self) -> Question | None:
        if self._stage is not Stage.CLARIFY:
            return None
        return self._questions[self._cursor]

    @property
    def progress(self) -> float | None:
        """(index + 1) / total while clarifying, else None."""
        if self._stage is not Stage.CLARIFY:
            return None
        return (self._cursor + 1) / len(self._questions)

    @property
    def answers(self) -> dict[str, str]:
        return dict(self._answers)

    @property
    def selected_styles(self) -> tuple[str, ...]:
        return tuple(self._styles)

    @property
    def selected_industries(self) -> tuple[str, ...]:
        return tuple(self._industries)

    @property
    def rendered_prompt(self) -> str:
        return self._rendered

    @property
    def templates(self) -> list[Template]:
        return list(self._templates)

    def view(self) -> SessionView:
        """Snapshot of the presentation data for the current stage."""
        return SessionView(
            stage=self._stage,
            task_input=self._task_input,
            category=self._category,
            question=self.current_question,
            progress=self.progress,
            answers=self.answers,
            style_options=self.config.style_options,
            industry_options=self.config.industry_options,
            selected_styles=self.selected_styles,
            selected_industries=self.selected_industries,
            rendered_prompt=self._rendered,
            template_count=len(self._templates),
        )

    # --- Intake ---

    def submit_task(self, text: str) -> Category:
        """Capture the task, classify it and start clarifying.

        Raises:
            InputError: If ``text`` is blank; nothing changes.
        """
        self._require(Stage.INTAKE, "submit a task")
        if not text.strip():
            raise InputError("Task description is empty", hint=HINTS["blank_task"])

        result = classify(text, self._rules)
        questions = result.questions or tuple(questions_for("general"))
        self._task_input = text
        self._category = result.category
        self._questions = questions
        self._cursor = 0
        self._answers = {}
        self._transition(Stage.CLARIFY)
        return result.category

    # --- Clarify ---

    def answer(self, text: str) -> None:
        """Record ``text`` for the current question unless blank, then advance."""
        self._require(Stage.CLARIFY, "answer a question")
        if text.strip():
            self._answers[self._questions[self._cursor].id] = text
        self._advance()

    def skip(self) -> None:
        """Advance without recording anything."""
        self._require(Stage.CLARIFY, "skip a question")
        self._advance()

    def _advance(self) -> None:
        self._cursor += 1
        if self._cursor >= len(self._questions):
            self._transition(Stage.TAG)

    # --- Tag ---

    def toggle_style(self, tag: str) -> bool:
        """Toggle a style tag; returns True if it is now selected.

        Default styles are accepted even when they are not offered options.
        """
        self._require(Stage.TAG, "toggle a style")
        options = (*self.config.style_options, *self.config.default_styles)
        return self._toggle(self._styles, tag, options)

    def toggle_industry(self, tag: str) -> bool:
        """Toggle an industry tag; returns True if it is now selected."""
        self._require(Stage.TAG, "toggle an industry")
        return self._toggle(self._industries, tag, self.config.industry_options)

    @staticmethod
    def _toggle(selected: list[str], tag: str, options: tuple[str, ...]) -> bool:
        if tag in selected:
            selected.remove(tag)
            return False
        if tag not in options:
            raise InputError(f"Unknown tag {tag!r}", hint=HINTS["unknown_tag"])
        selected.append(tag)
        return True

    def generate(self) -> str:
        """Assemble and render the prompt, then move to ``DONE``."""
        self._require(Stage.TAG, "generate")
        self._transition(Stage.ASSEMBLE)
        self._rendered = assemble_prompt(
            self._task_input,
            self._category,
            self._answers,
            self._styles,
            self._industries,
            phrases=self._phrases,
            fallback_response_format=self.config.fallback_response_format,
        )
        self._transition(Stage.DONE)
        return self._rendered

    # --- Done ---

    def save(self, name: str | None = None) -> Template:
        """Persist the finished session as a new template (newest first).

        Args:
            name: Label for the template; defaults to the start of the task.

        Raises:
            InputError: If an explicit name is blank.
        """
        self._require(Stage.DONE, "save")
        if name is None:
            name = self._task_input.strip()[: self.config.template_name_length].rstrip()
        elif not name.strip():
            raise InputError("Template name is empty", hint=HINTS["blank_name"])

        now = self._clock()
        template = Template(
            id=self._next_id(now),
            name=name,
            date=now,
            task_input=self._task_input,
            task_type=self._category.value if self._category else Category.GENERAL.value,
            answers=dict(self._answers),
            selected_styles=list(self._styles),
            selected_industries=list(self._industries),
            generated_prompt=self._rendered,
            tags=[*self._styles, *self._industries],
        )
        updated = [template, *self._templates]
        self._store.save_all(updated)
        self._templates = updated
        log.info("Saved template %d (%s)", template.id, template.name)
        return template

    def _next_id(self, now: datetime) -> int:
        candidate = int(now.timestamp() * 1000)
        taken = {t.id for t in self._templates}
        while candidate in taken:
            candidate += 1
        return candidate

    # --- Any stage ---

    def restart(self) -> None:
        """Clear the session back to ``INTAKE``; saved templates are kept."""
        self._reset()
        log.debug("Session restarted")

    def load_template(self, template_id: int) -> Template:
        """Restore a saved session verbatim and jump to ``DONE``.

        Category and questions are left as they are; nothing is re-run.
        """
        template = self._find(template_id)
        self._task_input = template.task_input
        self._answers = dict(template.answers)
        self._styles = list(template.selected_styles)
        self._industries = list(template.selected_industries)
        self._rendered = template.generated_prompt
        self._transition(Stage.DONE)
        return template

    def delete_template(self, template_id: int) -> bool:
        """Remove a template by id; returns False if no such id exists."""
        remaining = [t for t in self._templates if t.id != template_id]
        if len(remaining) == len(self._templates):
            return False
        self._store.save_all(remaining)
        self._templates = remaining
        log.info("Deleted template %d", template_id)
        return True

    def _find(self, template_id: int) -> Template:
        for t in self._templates:
            if t.id == template_id:
                return t
        raise TemplateNotFoundError(template_id)

    # --- Internal helpers ---

    def _reset(self) -> None:
        self._stage = Stage.INTAKE
        self._task_input = ""
        self._category: Category | None = None
        self._questions: tuple[Question, ...] = ()
        self._cursor = 0
        self._answers: dict[str, str] = {}
        self._styles = list(self.config.default_styles)
        self._industries: list[str] = []
        self._rendered = ""

    def _require(self, stage: Stage, action: str) -> None:
        if self._stage is not stage:
            raise StageError(
                f"Cannot {action} now; expected stage '{stage.value}'",
                stage=self._stage.value,
            )

    def _transition(self, stage: Stage) -> None:
        log.debug("Stage %s -> %s", self._stage.value, stage.value)
        self._stage = stage

    def _load_templates(self) -> list[Template]:
        try:
            return list(self._store.load_all())
        except Exception as e:
            # Templates are a convenience; a broken store must not block a session.
            log.warning("Template store unavailable, starting empty: %s", e)
            return []
