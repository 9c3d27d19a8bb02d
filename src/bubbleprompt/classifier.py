"""Rule-based task classifier.

Maps raw task text to a category and the follow-up questions for it.
Rules are evaluated top to bottom against the lower-cased text and the
first rule with any contained keyword wins; match count and position are
irrelevant. Reordering ``DEFAULT_RULES`` changes user-visible behavior.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging

from bubbleprompt.questions import Question

log = logging.getLogger(__name__)


class Category(str, Enum):
    """Task categories; values are the persisted labels."""

    CODING = "Coding"
    MARKETING_COPY = "MarketingCopy"
    ACADEMIC = "Academic"
    GENERAL = "General"


@dataclass(frozen=True)
class ClassificationRule:
    """One ordered (keywords, category, questions) rule."""

    category: Category
    keywords: tuple[str, ...]
    questions: tuple[Question, ...]

    def matches(self, lowered: str) -> bool:
        """Return True if any keyword is a substring of ``lowered``."""
        return any(k in lowered for k in self.keywords)


@dataclass(frozen=True)
class Classification:
    """Classifier output: exactly one category and its questions."""

    category: Category
    questions: tuple[Question, ...]


DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        Category.CODING,
        ("代码", "code", "脚本", "python"),
        (
            Question("q_lang", "什么语言？", "例如: Python, JavaScript, C++"),
            Question("q_func", "具体功能？", "例如: 数据清洗, 网页爬虫, 排序算法"),
            Question("q_lib", "涉及的库或框架？", "例如: React, Pandas, Tailwind"),
        ),
    ),
    ClassificationRule(
        Category.MARKETING_COPY,
        ("文案", "copy", "宣传", "小红书"),
        (
            Question("q_platform", "发布平台？", "例如: 小红书, 朋友圈, 抖音"),
            Question("q_audience", "目标受众？", "例如: 大学生, 宝妈, 职场新人"),
            Question("q_goal", "核心目的？", "例如: 增加点击, 促进下单, 品牌曝光"),
        ),
    ),
    ClassificationRule(
        Category.ACADEMIC,
        ("论文", "学术", "paper", "essay"),
        (
            Question("q_field", "研究领域？", "例如: 计算机视觉, 宏观经济, 教育心理"),
            Question("q_citation", "引用格式？", "例如: APA, GB/T 7714, IEEE"),
            Question("q_length", "篇幅要求？", "例如: 3000字, 8页以内"),
        ),
    ),
)

GENERAL_QUESTIONS: tuple[Question, ...] = (
    Question("q_detail", "具体细节？", "补充更多关于任务的背景信息"),
    Question("q_audience", "写给谁看？", "目标读者或受众是谁"),
    Question("q_format", "输出格式？", "例如: 列表, 表格, 纯文本"),
)


def classify(
    text: str,
    rules: tuple[ClassificationRule, ...] = DEFAULT_RULES,
) -> Classification:
    """Classify task text; total for any string.

    Args:
        text: Raw task description, possibly empty.
        rules: Ordered rules; the first match wins.

    Returns:
        The matched rule's category and questions, or ``General`` with the
        generic questions when nothing matches.
    """
    lowered = text.lower()
    for rule in rules:
        if rule.matches(lowered):
            log.debug("Classified task as %s", rule.category.value)
            return Classification(rule.category, rule.questions)
    log.debug("No rule matched; falling back to %s", Category.GENERAL.value)
    return Classification(Category.GENERAL, GENERAL_QUESTIONS)
