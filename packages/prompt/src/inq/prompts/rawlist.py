from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from rich.markup import escape

from inq.choices import Choice, Choices
from inq.config import PromptDefaults, QuestionConfig, call_maybe_async
from inq.prompt import OnDone, OnFatalError
from inq.prompts.input import InputPrompt
from inq.ui.reader import LineReader
from inq.ui.screen import Screen

INVALID_INDEX = "Please enter a valid index"


class RawListPrompt(InputPrompt):
    """Numbered list; the user types the number of a choice.

    ``default`` may be a 0-based index or a choice value. The answer is the
    chosen entry's value.
    """

    def __init__(
        self,
        question: Mapping[str, Any] | QuestionConfig,
        answers: Mapping[str, Any] | None = None,
        *,
        reader: LineReader | None = None,
        screen: Screen | None = None,
        defaults: PromptDefaults | None = None,
    ):
        super().__init__(question, answers, reader=reader, screen=screen, defaults=defaults)
        if not isinstance(self.opt.choices, Choices):
            self.throw_param_error("choices")

        choices: Choices = self.opt.choices
        self.selected = self._default_index(choices, self.opt.default)
        user_filter = self.opt.filter
        user_validate = self.opt.validate

        async def pick(value: Any, answers: Mapping[str, Any]) -> Any:
            index = self.selected if value in ("", None) else _parse_index(value)
            choice = choices.get_choice(index) if index is not None else None
            if choice is None:
                return None
            return await call_maybe_async(user_filter, choice.value, answers)

        async def validate(value: Any, answers: Mapping[str, Any]) -> Any:
            if value is None:
                return INVALID_INDEX
            return await call_maybe_async(user_validate, value, answers)

        # The hint shows the 1-based number of the default entry
        self.opt = dataclasses.replace(
            self.opt,
            type="rawlist",
            default=None if self.selected is None else self.selected + 1,
            filter=pick,
            validate=validate,
        )

    @staticmethod
    def _default_index(choices: Choices, default: Any) -> int | None:
        if isinstance(default, int) and not isinstance(default, bool):
            if 0 <= default < choices.real_length:
                return default
        if default is None:
            return None
        index = choices.index_of(default)
        return index if index >= 0 else None

    async def _run(self, on_done: OnDone, on_fatal_error: OnFatalError) -> None:
        self.screen.render(self.render_choices())
        await super()._run(on_done, on_fatal_error)

    def filter_input(self, line: str) -> Any:
        return line.strip()

    def render_choices(self) -> str:
        lines: list[str] = []
        number = 0
        for item in self.opt.choices:
            if not isinstance(item, Choice):
                lines.append(f"   {escape(str(item))}")
                continue
            if item.is_disabled:
                lines.append(f"   - {escape(item.name)} [dim]({escape(item.disabled_reason)})[/dim]")
                continue
            number += 1
            marker = "[cyan]>[/cyan]" if number - 1 == self.selected else " "
            lines.append(f" {marker} {number}) {escape(item.name)}")
        return "\n".join(lines)

    def render_answer(self, value: Any) -> str:
        choices: Choices = self.opt.choices
        index = choices.index_of(value)
        choice = choices.get_choice(index)
        label = choice.short if choice is not None else str(value)
        return f"[cyan]{escape(label)}[/cyan]"


def _parse_index(value: Any) -> int | None:
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number - 1 if number > 0 else None
