from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from typing import Any

from inq.config import PromptDefaults, QuestionConfig, call_maybe_async
from inq.prompts.input import InputPrompt
from inq.ui.reader import LineReader
from inq.ui.screen import Screen

_YES = re.compile(r"^y(es)?$", re.IGNORECASE)
_NO = re.compile(r"^no?$", re.IGNORECASE)


class ConfirmPrompt(InputPrompt):
    """Yes/no question resolving to a bool.

    The default is True unless the question's default is exactly False; the
    hint shows ``(Y/n)`` or ``(y/N)`` accordingly. Anything that is not
    y/yes/n/no is rejected.
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
        self.default_value = self.opt.default is not False
        user_filter = self.opt.filter
        default_value = self.default_value

        async def parse(value: Any, answers: Mapping[str, Any]) -> Any:
            if isinstance(value, bool):
                parsed = value
            elif value is None or str(value).strip() == "":
                parsed = default_value
            elif _YES.match(str(value).strip()):
                parsed = True
            elif _NO.match(str(value).strip()):
                parsed = False
            else:
                raise ValueError("Please answer yes or no")
            return await call_maybe_async(user_filter, parsed, answers)

        self.opt = dataclasses.replace(
            self.opt,
            type="confirm",
            default="Y/n" if default_value else "y/N",
            filter=parse,
        )

    def filter_input(self, line: str) -> Any:
        return line

    def render_answer(self, value: Any) -> str:
        return "[cyan]Yes[/cyan]" if value else "[cyan]No[/cyan]"
