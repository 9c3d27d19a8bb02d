"""End-to-end flows through a session backed by a JSON file store."""

from __future__ import annotations

import pytest

from bubbleprompt.classifier import Category
from bubbleprompt.presets import MARKETING_CONSTRAINTS, MARKETING_FORMAT
from bubbleprompt.session import Session, Stage
from bubbleprompt.store import JSONTemplateStore

pytestmark = pytest.mark.integration


def test_marketing_copy_scenario(json_store: JSONTemplateStore, config, clock) -> None:
    session = Session(json_store, config, clock=clock)

    assert session.submit_task("帮我写一段小红书文案") is Category.MARKETING_COPY
    assert [q.id for q in session.questions] == ["q_platform", "q_audience", "q_goal"]

    session.answer("小红书")
    session.skip()
    session.skip()
    assert session.answers == {"q_platform": "小红书"}
    assert session.selected_styles == ("直接",)

    text = session.generate()
    lines = text.split("\n")

    for c in MARKETING_CONSTRAINTS:
        assert f"- {c}" in lines
    assert f"**格式 (Response)**: {MARKETING_FORMAT}" in lines
    assert "Markdown 结构化格式" not in text
    assert "- **PLATFORM**: 小红书" in lines
    assert "**风格 (Style)**: 直接" in lines
    assert "- 保持 直接 的语调。" in lines


def test_save_restart_reload_across_sessions(json_store: JSONTemplateStore, config, clock) -> None:
    first = Session(json_store, config, clock=clock)
    first.submit_task("写个 python 脚本")
    first.answer("Python")
    first.skip()
    first.answer("requests")
    first.generate()
    saved_a = first.save("爬虫")

    first.restart()
    first.submit_task("帮我写一段小红书文案")
    while first.stage is Stage.CLARIFY:
        first.skip()
    first.toggle_industry("电商")
    first.generate()
    saved_b = first.save()

    first.restart()
    assert len(first.templates) == 2

    second = Session(json_store, config, clock=clock)
    assert [t.id for t in second.templates] == [saved_b.id, saved_a.id]

    second.load_template(saved_a.id)
    assert second.stage is Stage.DONE
    assert second.task_input == "写个 python 脚本"
    assert second.answers == {"q_lang": "Python", "q_lib": "requests"}
    assert second.selected_styles == ("直接",)
    assert second.selected_industries == ()
    assert second.rendered_prompt == saved_a.generated_prompt
    assert second.category is None


def test_corrupt_store_does_not_block_session(json_store: JSONTemplateStore, config) -> None:
    json_store.path.write_text("[{broken", encoding="utf-8")
    session = Session(json_store, config)
    assert session.templates == []

    session.submit_task("code")
    while session.stage is Stage.CLARIFY:
        session.skip()
    session.generate()
    session.save("fresh")
    assert [t.name for t in json_store.load_all()] == ["fresh"]
