"""Question type and the static Question Bank.

The bank is configuration data: a read-only catalog of reusable clarifying
questions referenced by id. Ids become keys of a session's answer map, so
they must be unique within the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from bubbleprompt.errors import ConfigurationError

QuestionKind = Literal["text"]


@dataclass(frozen=True)
class Question:
    """A clarifying question shown to the user."""

    id: str
    text: str
    sub_text: str = ""
    #: Catalog grouping, e.g. ``general`` or ``marketing``.
    category: str = "general"
    kind: QuestionKind = "text"


QUESTION_BANK: tuple[Question, ...] = (
    Question("q_audience", "目标受众是谁？", "例如：Z世代、家庭主妇、IT从业者...", "general"),
    Question("q_goal", "核心目标是什么？", "例如：增加销量、提升品牌知名度、解决Bug...", "general"),
    Question("q_tone", "期望的语气口吻？", "例如：幽默、严肃、亲切、高冷...", "writing"),
    Question(
        "q_platform",
        "发布平台在哪里？",
        "例如：小红书、微信公众号、公司内部邮件...",
        "marketing",
    ),
    Question(
        "q_constraints",
        "有什么限制条件吗？",
        "例如：字数限制、避讳词、预算上限...",
        "planning",
    ),
    Question("q_tech_stack", "使用什么技术栈？", "例如：React, Python, AWS...", "technical"),
    Question(
        "q_length",
        "大致篇幅要求？",
        "例如：短小精悍（100字）、详细长文（2000字）...",
        "writing",
    ),
    Question(
        "q_scene",
        "使用场景是什么？",
        "例如：早高峰地铁、睡前阅读、会议室演讲...",
        "marketing",
    ),
)


def _index(questions: tuple[Question, ...]) -> dict[str, Question]:
    index: dict[str, Question] = {}
    for q in questions:
        if q.id in index:
            raise ConfigurationError(f"Duplicate question id {q.id!r} in catalog")
        index[q.id] = q
    return index


_BY_ID = _index(QUESTION_BANK)


def all_questions() -> list[Question]:
    """Return every catalog question in declaration order."""
    return list(QUESTION_BANK)


def find_question(question_id: str) -> Question | None:
    """Look up a catalog question by id."""
    return _BY_ID.get(question_id)


def questions_for(category: str) -> list[Question]:
    """Return the catalog questions in one grouping, e.g. ``general``."""
    return [q for q in QUESTION_BANK if q.category == category]
