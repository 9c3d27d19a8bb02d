"""Terminal front end for Bubble Prompt.

Usage::

    bubbleprompt new "帮我写一段小红书文案"
    bubbleprompt templates list
    bubbleprompt templates show 1767225600000
    bubbleprompt config show
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import TYPE_CHECKING

from bubbleprompt.config import audit_lines, resolve_config
from bubbleprompt.errors import BubblePromptError
from bubbleprompt.session import Session, Stage

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from bubbleprompt.config import FrozenConfig


def _out(line: str = "") -> None:
    sys.stdout.write(line + "\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("bubbleprompt")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    new = sub.add_parser("new", help="build a prompt interactively")
    new.add_argument("task", nargs="?", help="task description (asked if omitted)")
    new.add_argument("--no-save", action="store_true", help="never offer to save")

    tpl = sub.add_parser("templates", help="manage saved templates")
    tpl_sub = tpl.add_subparsers(dest="action", required=True)
    tpl_sub.add_parser("list")
    show = tpl_sub.add_parser("show")
    show.add_argument("id", type=int)
    delete = tpl_sub.add_parser("delete")
    delete.add_argument("id", type=int)

    cfg = sub.add_parser("config", help="inspect resolved configuration")
    cfg.add_argument("action", choices=("show", "audit"))
    return parser


def _run_new(session: Session, task: str | None, *, offer_save: bool) -> None:
    while session.stage is Stage.INTAKE:
        text = task if task is not None else input("任务描述: ")
        task = None
        try:
            category = session.submit_task(text)
        except BubblePromptError as e:
            _out(f"✗ {e}")
            continue
        _out(f"分类: {category.value}")

    while (q := session.current_question) is not None:
        _out(f"[{session.progress:.0%}] {q.text} ({q.sub_text})")
        reply = input("> ")
        if reply.strip():
            session.answer(reply)
        else:
            session.skip()

    _choose_tags(
        "风格", session.config.style_options, session.selected_styles, session.toggle_style
    )
    _choose_tags(
        "行业",
        session.config.industry_options,
        session.selected_industries,
        session.toggle_industry,
    )

    _out()
    _out(session.generate())
    _out()

    if offer_save:
        name = input("保存为模板 (留空跳过): ")
        if name.strip():
            tpl = session.save(name)
            _out(f"已保存 #{tpl.id}")


def _choose_tags(
    label: str,
    options: Sequence[str],
    selected: Sequence[str],
    toggle: Callable[[str], bool],
) -> None:
    for i, opt in enumerate(options, start=1):
        mark = "*" if opt in selected else " "
        _out(f" {mark} {i}. {opt}")
    raw = input(f"切换{label} (序号, 逗号分隔, 留空继续): ")
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or not 1 <= int(part) <= len(options):
            _out(f"✗ 忽略无效序号 {part!r}")
            continue
        toggle(options[int(part) - 1])


def _run_templates(session: Session, args: argparse.Namespace) -> int:
    if args.action == "list":
        for t in session.templates:
            _out(f"{t.id}\t{t.date:%Y-%m-%d}\t{t.task_type}\t{t.name}")
        return 0
    template_id: int = args.id
    if args.action == "show":
        _out(session.load_template(template_id).generated_prompt)
        return 0
    if session.delete_template(template_id):
        _out(f"已删除 #{template_id}")
        return 0
    _out(f"✗ 未找到 #{template_id}")
    return 1


def _configure_logging(config: FrozenConfig, *, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``bubbleprompt`` command."""
    args = _build_parser().parse_args(argv)
    try:
        if args.cmd == "config":
            cfg, src = resolve_config(explain=True)
            _configure_logging(cfg, verbose=args.verbose)
            if args.action == "show":
                _out(json.dumps(cfg.to_dict(), ensure_ascii=False, indent=2))
            else:
                for line in audit_lines(src):
                    _out(line)
            return 0

        config = resolve_config()
        _configure_logging(config, verbose=args.verbose)
        session = Session(config=config)
        if args.cmd == "templates":
            return _run_templates(session, args)
        _run_new(session, args.task, offer_save=not args.no_save)
        return 0
    except BubblePromptError as e:
        _out(f"✗ {e}")
        if e.hint:
            _out(f"  {e.hint}")
        return 1
    except (KeyboardInterrupt, EOFError):
        _out()
        return 130


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
