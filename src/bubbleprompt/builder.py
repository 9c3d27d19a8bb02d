"""Chainable prompt builder for the CO-STAR layout.

Overview
--------
``PromptBuilder`` accumulates structured fields (context, objective, style,
audience, response format, constraints, user answers) and ``build()``
renders them into one fixed multi-section text:

1. role header
2. CO-STAR summary (context, objective, style, audience, response format)
3. user answers, one ``- **LABEL**: value`` line each
4. chain-of-thought steps, parameterized by the style list
5. constraints, followed by three universal constraints
6. reply marker

Every mutator accepts any string and returns the builder. Missing fields
render as the fallback phrases on ``PromptPhrases``; override them with
``dataclasses.replace(DEFAULT_PHRASES, ...)``.

Precedence
----------
``add_style``/``add_constraint`` append; ``set_*`` overwrite, so the last
``set_response_format`` wins. ``build()`` reads state only and is
deterministic: identical state yields an identical string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class PromptPhrases:
    """Literal fallback phrases and fixed texts used by ``build()``."""

    role_template: str = "你是一位 {industry} 领域的专家。"
    default_industry: str = "通用"
    context_fallback: str = "目标"
    style_fallback: str = "专业、清晰"
    audience_fallback: str = "普通用户"
    response_format_fallback: str = "结构化 Markdown"
    no_constraints: str = "无特殊限制。"
    tone_fallback: str = "专业"
    style_separator: str = "、"
    label_prefix: str = "q_"
    reasoning_steps: tuple[str, ...] = (
        "分析用户的核心目标和受众群体。",
        "识别关键限制条件和风格要求。",
        "构思内容结构，确保逻辑清晰、重点突出。",
        "调整语气以匹配用户要求的风格：{style}。",
        "按照指定格式输出最终结果。",
    )
    no_fabrication: str = "严禁捏造事实 (No Hallucination)。"
    production_ready: str = "确保输出内容可直接用于生产环境。"
    tone_template: str = "保持 {tone} 的语调。"

    def universal_constraints(self, tone: str) -> tuple[str, str, str]:
        """The three constraints appended to every prompt."""
        return (
            self.no_fabrication,
            self.production_ready,
            self.tone_template.format(tone=tone),
        )

    def label_for(self, key: str) -> str:
        """Display label for an answer key: strip the prefix, upper-case the rest."""
        if self.label_prefix and key.startswith(self.label_prefix):
            return key[len(self.label_prefix) :].upper()
        return key


DEFAULT_PHRASES = PromptPhrases()


@dataclass(frozen=True)
class BuilderState:
    """Snapshot of everything ``build()`` reads."""

    context: str = ""
    #: Industry passed to ``set_context``; empty when context was never set.
    industry: str = ""
    objective: str = ""
    style: tuple[str, ...] = ()
    audience: str = ""
    response_format: str = ""
    constraints: tuple[str, ...] = ()
    user_inputs: dict[str, str] = field(default_factory=dict)


class PromptBuilder:
    """Mutable, chainable builder; one instance per generation."""

    def __init__(self, phrases: PromptPhrases = DEFAULT_PHRASES) -> None:
        """Initialize an empty builder using the given phrases."""
        self.phrases = phrases
        self._context = ""
        self._industry = ""
        self._objective = ""
        self._style: list[str] = []
        self._audience = ""
        self._response_format = ""
        self._constraints: list[str] = []
        self._user_inputs: dict[str, str] = {}

    # --- Mutators ---

    def set_objective(self, task: str) -> PromptBuilder:
        self._objective = task
        return self

    def set_context(self, industry: str, custom_context: str = "") -> PromptBuilder:
        """Set the role definition for an industry; blank means the default."""
        self._industry = industry or self.phrases.default_industry
        role = self.phrases.role_template.format(industry=self._industry)
        self._context = f"{role} {custom_context}".rstrip()
        return self

    def add_style(self, style_tag: str) -> PromptBuilder:
        self._style.append(style_tag)
        return self

    def set_audience(self, audience: str) -> PromptBuilder:
        self._audience = audience
        return self

    def add_constraint(self, constraint: str) -> PromptBuilder:
        self._constraints.append(constraint)
        return self

    def set_response_format(self, response_format: str) -> PromptBuilder:
        self._response_format = response_format
        return self

    def set_user_inputs(self, inputs: Mapping[str, str]) -> PromptBuilder:
        """Replace the answer map; the builder keeps its own copy."""
        self._user_inputs = dict(inputs)
        return self

    # --- Read side ---

    @property
    def response_format(self) -> str:
        return self._response_format

    @property
    def state(self) -> BuilderState:
        return BuilderState(
            context=self._context,
            industry=self._industry,
            objective=self._objective,
            style=tuple(self._style),
            audience=self._audience,
            response_format=self._response_format,
            constraints=tuple(self._constraints),
            user_inputs=dict(self._user_inputs),
        )

    def build(self) -> str:
        """Render the current state into the final prompt text."""
        return render(self.state, self.phrases)


def render(state: BuilderState, phrases: PromptPhrases = DEFAULT_PHRASES) -> str:
    """Pure rendering of a ``BuilderState``."""
    p = phrases
    style_str = p.style_separator.join(state.style)
    context = state.context or p.role_template.format(industry=p.default_industry)
    tone = state.style[0] if state.style and state.style[0] else p.tone_fallback

    inputs = [f"- **{p.label_for(k)}**: {v}" for k, v in state.user_inputs.items()]
    steps = [
        f"{i}. {step.format(style=style_str or p.style_fallback)}"
        for i, step in enumerate(p.reasoning_steps, start=1)
    ]
    constraints = [f"- {c}" for c in state.constraints] or [f"- {p.no_constraints}"]
    constraints += [f"- {c}" for c in p.universal_constraints(tone)]

    lines = [
        "# 🚀 角色设定 (SYSTEM ROLE)",
        context,
        "",
        "# 🎯 核心任务 (CO-STAR)",
        f"**背景 (Context)**: 服务于 {state.industry or p.context_fallback} 行业。",
        f"**目标 (Objective)**: {state.objective}",
        f"**风格 (Style)**: {style_str or p.style_fallback}",
        f"**受众 (Audience)**: {state.audience or p.audience_fallback}",
        f"**格式 (Response)**: {state.response_format or p.response_format_fallback}",
        "",
        "# 📝 用户输入信息",
        *(inputs or [""]),
        "",
        "# ⛓️ 思考链路 (Chain of Thought)",
        *steps,
        "",
        "# ⛔ 限制条件与质量控制",
        *constraints,
        "",
        "# 👇 请在下方生成回复",
    ]
    return "\n".join(lines).strip()
