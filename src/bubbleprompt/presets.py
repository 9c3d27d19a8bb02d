"""Category presets: bundles of constraints and a response format.

A preset only calls ``add_constraint`` and ``set_response_format`` on the
builder it is given. Constraints append, so presets compose with earlier
constraints; the format is an overwrite, so whatever sets it last wins.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import TYPE_CHECKING

from bubbleprompt.classifier import Category

if TYPE_CHECKING:
    from bubbleprompt.builder import PromptBuilder

log = logging.getLogger(__name__)

Preset = Callable[["PromptBuilder"], None]

MARKETING_CONSTRAINTS = (
    "使用具有说服力的心理学技巧 (如 FOMO, 社会认同)。",
    "强调产品/服务带来的利益，而非仅仅列举功能。",
)
MARKETING_FORMAT = "文案格式 (标题 + 正文 + 行动号召)"

CODING_CONSTRAINTS = (
    "遵循 Clean Code 代码规范。",
    "为复杂的逻辑逻辑添加中文注释。",
)
CODING_FORMAT = "代码块 + Markdown 解释"

ACADEMIC_CONSTRAINTS = (
    "使用严谨的学术语言。",
    "如有引用，请注明来源。",
)
ACADEMIC_FORMAT = "学术论文结构 (摘要, 引言, 主体, 结论)"


def marketing(builder: PromptBuilder) -> None:
    """Persuasion techniques and benefit framing."""
    for c in MARKETING_CONSTRAINTS:
        builder.add_constraint(c)
    builder.set_response_format(MARKETING_FORMAT)


def coding(builder: PromptBuilder) -> None:
    """Clean-code and commenting standards."""
    for c in CODING_CONSTRAINTS:
        builder.add_constraint(c)
    builder.set_response_format(CODING_FORMAT)


def academic(builder: PromptBuilder) -> None:
    """Formal register and citation rules."""
    for c in ACADEMIC_CONSTRAINTS:
        builder.add_constraint(c)
    builder.set_response_format(ACADEMIC_FORMAT)


PRESETS: dict[Category, Preset] = {
    Category.CODING: coding,
    Category.MARKETING_COPY: marketing,
    Category.ACADEMIC: academic,
}


def apply_preset(category: Category | str, builder: PromptBuilder) -> bool:
    """Apply the preset registered for ``category``.

    Returns:
        True if a preset ran; False for categories without one, in which
        case the builder is left untouched.
    """
    try:
        key = Category(category)
    except ValueError:
        log.debug("No preset for unknown category %r", category)
        return False
    preset = PRESETS.get(key)
    if preset is None:
        log.debug("No preset registered for %s", key.value)
        return False
    preset(builder)
    log.debug("Applied %s preset", key.value)
    return True
