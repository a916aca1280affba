"""Free-text input prompt."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Mapping
from typing import Any

from rich.markup import escape

from inq.config import PromptDefaults, QuestionConfig
from inq.errors import describe_error
from inq.model import Outcome, PromptStatus
from inq.prompt import BasePrompt, OnDone, OnFatalError
from inq.ui.reader import LineReader, ToolkitLineReader
from inq.ui.screen import Screen


class InputPrompt(BasePrompt):
    """Reads one line per attempt until an answer is accepted.

    The next line is only read after the previous attempt settled, so a
    slow validator never has two prompts on screen at once.
    """

    is_password = False

    def __init__(
        self,
        question: Mapping[str, Any] | QuestionConfig,
        answers: Mapping[str, Any] | None = None,
        *,
        reader: LineReader | None = None,
        screen: Screen | None = None,
        defaults: PromptDefaults | None = None,
    ):
        super().__init__(question, answers, screen=screen, defaults=defaults)
        self.reader: LineReader = reader if reader is not None else ToolkitLineReader()
        self.answer: Any = None
        self.errors: list[Outcome] = []
        self._settled: asyncio.Event | None = None

    async def _run(self, on_done: OnDone, on_fatal_error: OnFatalError) -> None:
        self._settled = asyncio.Event()
        events = self.handle_submit_events(self._attempts())
        events.success.subscribe(self.on_end)
        events.error.subscribe(self.on_error)

        outcome = await self.pipeline.accepted_outcome()
        if outcome is not None:
            on_done(outcome.value)

    async def _attempts(self) -> AsyncIterator[Any]:
        while self.status is PromptStatus.PENDING:
            self._settled.clear()
            line = await self.reader.read_line(self.get_question(), is_password=self.is_password)
            yield self.filter_input(line)
            await self._settled.wait()

    def filter_input(self, line: str) -> Any:
        """Map an empty line to the default value."""
        if not line:
            return "" if self.opt.default is None else self.opt.default
        return line

    def on_end(self, outcome: Outcome) -> None:
        self.answer = outcome.value
        self.screen.render(self.get_question() + self.render_answer(outcome.value))
        self._settled.set()

    def on_error(self, outcome: Outcome) -> None:
        self.errors.append(outcome)
        self.screen.render(
            f"[red]>>[/red] {escape(describe_error(outcome.as_exception()))}"
        )
        self._settled.set()

    def render_answer(self, value: Any) -> str:
        return f"[cyan]{escape('' if value is None else str(value))}[/cyan]"
