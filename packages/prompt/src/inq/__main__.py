"""Entry point: ask one question and print the answer as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="inq",
        description="Ask a single question in the terminal",
    )
    parser.add_argument("--name", "-n", required=True, help="Answer key")
    parser.add_argument("--message", "-m", help="Question text (default: NAME:)")
    parser.add_argument(
        "--type", "-t",
        default="input",
        choices=["input", "password", "confirm", "rawlist"],
        help="Prompt type",
    )
    parser.add_argument("--default", "-d", help="Default answer")
    parser.add_argument(
        "--choice", "-c",
        action="append",
        dest="choices",
        help="A choice for rawlist (repeatable)",
    )
    parser.add_argument(
        "--required",
        action="store_true",
        help="Reject empty answers",
    )
    args = parser.parse_args(argv)

    from inq.log import setup_logging
    from inq.settings import Settings

    settings = Settings.load(workspace=_cwd())
    setup_logging(log_dir=settings.log_dir, level=settings.log_level)

    question: dict = {"name": args.name, "type": args.type}
    if args.message:
        question["message"] = args.message
    if args.default is not None:
        question["default"] = args.default
    if args.choices:
        question["choices"] = args.choices
    if args.required:
        question["validate"] = _require_value

    try:
        answer = asyncio.run(_ask(question, settings))
    except (KeyboardInterrupt, EOFError):
        return 130

    print(json.dumps({args.name: answer}, ensure_ascii=False, default=str))
    return 0


async def _ask(question: dict, settings):
    from inq.prompts import create_prompt
    from inq.ui.screen import ConsoleScreen

    prompt = create_prompt(
        question,
        {},
        screen=ConsoleScreen(refresh_per_second=settings.spinner_refresh),
        defaults=settings.prompt_defaults(),
    )
    try:
        return await prompt.run()
    finally:
        prompt.close()


def _require_value(value, answers):
    if value in ("", None):
        return "A value is required"
    return True


def _cwd():
    from pathlib import Path
    return Path.cwd()


if __name__ == "__main__":
    sys.exit(main())
