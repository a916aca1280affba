"""Base prompt - lifecycle of one question.

Variants subclass ``BasePrompt`` and override ``_run`` (or hand a
``PromptDriver`` to the constructor). They push raw attempts through
``handle_submit_events`` and get back success/error streams; the base marks
the prompt answered and resolves ``run()`` when success fires.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import AsyncIterable, Iterable, Mapping
from typing import Any, Callable, Protocol, runtime_checkable

from rich.markup import escape

from inq.config import PromptDefaults, QuestionConfig, call_maybe_async, resolve_question
from inq.config import throw_param_error as _throw_param_error
from inq.formatter import format_question
from inq.log import log_lifecycle
from inq.model import Outcome, PromptStatus
from inq.pipeline import SubmissionPipeline, SubmitEvents
from inq.ui.screen import ConsoleScreen, Screen

OnDone = Callable[[Any], None]
OnFatalError = Callable[[BaseException], None]


@runtime_checkable
class PromptDriver(Protocol):
    """Input collection for a prompt that is not a subclass."""

    def collect_input(self, prompt: BasePrompt, on_done: OnDone, on_fatal_error: OnFatalError) -> Any:
        """Collect attempts for ``prompt``; may be a coroutine function."""
        ...


class BasePrompt:
    """Lifecycle controller for a single question.

    Raises:
        ConfigurationError: at construction, if the question has no name.
    """

    def __init__(
        self,
        question: Mapping[str, Any] | QuestionConfig,
        answers: Mapping[str, Any] | None = None,
        *,
        screen: Screen | None = None,
        driver: PromptDriver | None = None,
        defaults: PromptDefaults | None = None,
    ):
        self.answers: Mapping[str, Any] = answers if answers is not None else {}
        self.status = PromptStatus.PENDING
        self.opt = resolve_question(question, self.answers, defaults=defaults)
        self.screen: Screen = screen if screen is not None else ConsoleScreen()
        self.driver = driver

        self.pipeline: SubmissionPipeline | None = None
        self._future: asyncio.Future | None = None
        self._input_task: asyncio.Task | None = None
        self._closed = False

    @property
    def name(self) -> str:
        return self.opt.name

    # ── Lifecycle ────────────────────────────────────────────

    async def run(self) -> Any:
        """Collect input until an answer is accepted and return it.

        Validation failures never end the run; only an error raised by the
        input collection itself (or passed to ``on_fatal_error``) does.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()
        self._future = future
        log_lifecycle(self.name, "prompt_run", type=self.opt.type)

        def on_done(value: Any = None) -> None:
            if not future.done():
                future.set_result(value)

        def on_fatal_error(error: BaseException) -> None:
            if not future.done():
                future.set_exception(error)

        result = self._run(on_done, on_fatal_error)
        if inspect.isawaitable(result):
            self._input_task = asyncio.ensure_future(result)
            self._input_task.add_done_callback(
                lambda task: self._on_input_finished(task, on_fatal_error)
            )

        try:
            return await future
        finally:
            self._future = None

    def _on_input_finished(self, task: asyncio.Task, on_fatal_error: OnFatalError) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            on_fatal_error(error)

    def _run(self, on_done: OnDone, on_fatal_error: OnFatalError) -> Any:
        """Collect input. Variants override this.

        Without a driver the prompt resolves immediately with None.
        """
        if self.driver is not None:
            return self.driver.collect_input(self, on_done, on_fatal_error)
        on_done(None)
        return None

    async def when(self) -> bool:
        """Evaluate the question's ``when`` predicate against the answers."""
        predicate = self.opt.when
        if not callable(predicate):
            return bool(predicate)
        return bool(await call_maybe_async(predicate, self.answers))

    def throw_param_error(self, name: str) -> None:
        _throw_param_error(name)

    def close(self) -> None:
        """Release the terminal. Safe to call more than once, answered or not."""
        if self._closed:
            return
        self._closed = True
        if self.pipeline is not None:
            self.pipeline.close()
        if self._input_task is not None and not self._input_task.done():
            self._input_task.cancel()
        self.screen.release_cursor()
        log_lifecycle(self.name, "prompt_closed", status=self.status.value)

    # ── Submission ───────────────────────────────────────────

    def handle_submit_events(
        self, submit: AsyncIterable[Any] | Iterable[Any] | None = None
    ) -> SubmitEvents:
        """Filter and validate every submitted attempt.

        Returns the ``success`` and ``error`` streams. Success marks the
        prompt answered and resolves a running ``run()``; a failing
        ``submit`` source makes ``run()`` raise its error.
        """
        self.pipeline = SubmissionPipeline(
            self.opt,
            self.answers,
            spinner=self.start_spinner,
            on_source_error=self._on_source_failed,
        )
        self.pipeline.success.subscribe(self._on_accepted)
        return self.pipeline.handle_submit_events(submit)

    def _on_accepted(self, outcome: Outcome) -> None:
        self.status = PromptStatus.ANSWERED
        log_lifecycle(self.name, "prompt_answered")
        if self._future is not None and not self._future.done():
            self._future.set_result(outcome.value)

    def _on_source_failed(self, error: Exception) -> None:
        log_lifecycle(self.name, "prompt_failed", error=repr(error))
        if self._future is not None and not self._future.done():
            self._future.set_exception(error)

    # ── Rendering ────────────────────────────────────────────

    def start_spinner(self, value: Any, bottom_content: str) -> None:
        # Without a caption the prefix is dropped to make room for the spinner
        content = format_question(
            self.opt, self.status, self.answers, include_prefix=bool(bottom_content)
        ) + self.display_value(value)
        self.screen.render_with_spinner(content, bottom_content)

    def display_value(self, value: Any) -> str:
        """Markup for an attempt value shown next to the question."""
        return escape(_display(value))

    def get_question(self) -> str:
        """The question line as rich markup."""
        return format_question(self.opt, self.status, self.answers)


def _display(value: Any) -> str:
    return "" if value is None else str(value)
