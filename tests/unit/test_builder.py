"""Tests for the CO-STAR prompt builder."""

from __future__ import annotations

from dataclasses import replace

from hypothesis import given
from hypothesis import strategies as st
import pytest

from bubbleprompt.builder import DEFAULT_PHRASES, BuilderState, PromptBuilder, render

pytestmark = pytest.mark.unit

SECTION_HEADERS = (
    "# 🚀 角色设定 (SYSTEM ROLE)",
    "# 🎯 核心任务 (CO-STAR)",
    "# 📝 用户输入信息",
    "# ⛓️ 思考链路 (Chain of Thought)",
    "# ⛔ 限制条件与质量控制",
    "# 👇 请在下方生成回复",
)


def _lines(text: str) -> list[str]:
    return text.split("\n")


class TestChaining:
    def test_mutators_return_same_instance(self) -> None:
        b = PromptBuilder()
        assert b.set_objective("x") is b
        assert b.set_context("教育") is b
        assert b.add_style("幽默") is b
        assert b.set_audience("学生") is b
        assert b.add_constraint("c") is b
        assert b.set_response_format("f") is b
        assert b.set_user_inputs({"q_a": "1"}) is b

    def test_state_snapshot_reflects_mutations(self) -> None:
        state = (
            PromptBuilder()
            .set_objective("写周报")
            .set_context("金融")
            .add_style("简洁")
            .add_constraint("一")
            .add_constraint("二")
            .state
        )
        assert state.objective == "写周报"
        assert state.industry == "金融"
        assert state.context == "你是一位 金融 领域的专家。"
        assert state.style == ("简洁",)
        assert state.constraints == ("一", "二")

    def test_user_inputs_are_copied(self) -> None:
        answers = {"q_lang": "Python"}
        b = PromptBuilder().set_user_inputs(answers)
        answers["q_func"] = "爬虫"
        assert b.state.user_inputs == {"q_lang": "Python"}

    def test_response_format_last_call_wins(self) -> None:
        b = PromptBuilder().set_response_format("A").set_response_format("B")
        assert b.response_format == "B"


class TestRendering:
    def test_sections_render_in_fixed_order(self) -> None:
        text = PromptBuilder().set_objective("任务").build()
        positions = [text.index(h) for h in SECTION_HEADERS]
        assert positions == sorted(positions)
        assert text.startswith(SECTION_HEADERS[0])
        assert text.endswith(SECTION_HEADERS[-1])

    def test_summary_block_with_all_fields(self) -> None:
        text = (
            PromptBuilder()
            .set_objective("写一段文案")
            .set_context("电商")
            .add_style("幽默风趣")
            .add_style("简洁明了")
            .set_audience("大学生")
            .set_response_format("列表")
            .build()
        )
        lines = _lines(text)
        assert "你是一位 电商 领域的专家。" in lines
        assert "**背景 (Context)**: 服务于 电商 行业。" in lines
        assert "**目标 (Objective)**: 写一段文案" in lines
        assert "**风格 (Style)**: 幽默风趣、简洁明了" in lines
        assert "**受众 (Audience)**: 大学生" in lines
        assert "**格式 (Response)**: 列表" in lines
        assert "4. 调整语气以匹配用户要求的风格：幽默风趣、简洁明了。" in lines
        assert "- 保持 幽默风趣 的语调。" in lines

    def test_unset_fields_use_fallback_phrases(self) -> None:
        lines = _lines(PromptBuilder().build())
        assert "**背景 (Context)**: 服务于 目标 行业。" in lines
        assert "**风格 (Style)**: 专业、清晰" in lines
        assert "**受众 (Audience)**: 普通用户" in lines
        assert "**格式 (Response)**: 结构化 Markdown" in lines
        assert "- 无特殊限制。" in lines
        assert "- 保持 专业 的语调。" in lines
        assert "你是一位 通用 领域的专家。" in lines

    def test_empty_user_inputs_keep_blank_block(self) -> None:
        text = PromptBuilder().build()
        assert "# 📝 用户输入信息\n\n\n# ⛓️ 思考链路 (Chain of Thought)" in text

    def test_user_inputs_follow_header_directly(self) -> None:
        text = PromptBuilder().set_user_inputs({"q_goal": "涨粉"}).build()
        assert "# 📝 用户输入信息\n- **GOAL**: 涨粉\n\n# ⛓️" in text

    def test_blank_industry_uses_default_industry(self) -> None:
        state = PromptBuilder().set_context("").state
        assert state.industry == "通用"

    def test_custom_context_is_appended_to_role(self) -> None:
        state = PromptBuilder().set_context("医疗", "熟悉临床指南。").state
        assert state.context == "你是一位 医疗 领域的专家。 熟悉临床指南。"

    def test_user_inputs_labels_strip_prefix_and_uppercase(self) -> None:
        text = PromptBuilder().set_user_inputs({"q_platform": "小红书", "budget": "100"}).build()
        lines = _lines(text)
        assert "- **PLATFORM**: 小红书" in lines
        assert "- **budget**: 100" in lines

    def test_constraints_then_three_universal_constraints(self) -> None:
        text = PromptBuilder().add_constraint("A").add_constraint("A").build()
        block = text.split("# ⛔ 限制条件与质量控制\n", 1)[1].split("\n\n", 1)[0]
        assert _lines(block) == [
            "- A",
            "- A",
            "- 严禁捏造事实 (No Hallucination)。",
            "- 确保输出内容可直接用于生产环境。",
            "- 保持 专业 的语调。",
        ]

    def test_empty_strings_are_accepted(self) -> None:
        text = (
            PromptBuilder()
            .set_objective("")
            .add_style("")
            .set_audience("")
            .add_constraint("")
            .set_response_format("")
            .build()
        )
        assert "**目标 (Objective)**: " in _lines(text)
        assert "- 保持 专业 的语调。" in _lines(text)

    def test_phrases_are_overridable(self) -> None:
        phrases = replace(DEFAULT_PHRASES, audience_fallback="everyone", label_prefix="")
        text = PromptBuilder(phrases).set_user_inputs({"q_x": "1"}).build()
        assert "**受众 (Audience)**: everyone" in _lines(text)
        assert "- **q_x**: 1" in _lines(text)

    def test_render_matches_build(self) -> None:
        b = PromptBuilder().set_objective("x").add_style("y")
        assert render(b.state) == b.build()
        assert render(BuilderState()) == PromptBuilder().build()


@given(
    objective=st.text(),
    styles=st.lists(st.text(), max_size=4),
    constraints=st.lists(st.text(), max_size=4),
    inputs=st.dictionaries(st.text(), st.text(), max_size=4),
)
def test_build_is_deterministic(objective, styles, constraints, inputs) -> None:
    b = PromptBuilder().set_objective(objective).set_user_inputs(inputs)
    for s in styles:
        b.add_style(s)
    for c in constraints:
        b.add_constraint(c)
    assert b.build() == b.build()
