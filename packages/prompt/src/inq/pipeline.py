"""Submission pipeline - filters and validates submit attempts.

Every attempt runs in its own task: spinner with the filtering caption,
``filter(value, answers)``, spinner with the validating caption, then
``validate(filtered, answers)``. The resulting outcome is published once and
routed to one of two streams:

- ``success`` carries the first valid outcome and then closes.
- ``error`` carries every invalid outcome published before that, and
  closes when ``success`` fires.

Attempts may overlap. Outcomes are published in the order their tasks
finish. A latch is set before success is delivered and is checked before
any error is emitted, so an outcome that finishes after success (in the same
loop turn or later) is dropped without reaching either stream.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Callable

from inq.config import QuestionConfig, call_maybe_async
from inq.log import log_attempt
from inq.model import Outcome, Phase

logger = logging.getLogger("inq.pipeline")

Spinner = Callable[[Any, str], None]

_CLOSED = object()


class OutcomeStream:
    """Hot broadcast stream of outcomes.

    Subscribers registered with ``subscribe`` are called synchronously on
    each emission. ``async for`` iterators register when created, so an
    iterator made before the first emission sees every outcome. Once
    ``limit`` outcomes have been emitted the stream closes itself.
    """

    def __init__(self, name: str, limit: int | None = None):
        self.name = name
        self._limit = limit
        self._emitted = 0
        self._closed = False
        self._callbacks: list[Callable[[Outcome], Any]] = []
        self._queues: list[asyncio.Queue] = []
        self._first: Outcome | None = None
        self._waiters: list[asyncio.Future] = []

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def emitted(self) -> int:
        return self._emitted

    def subscribe(self, callback: Callable[[Outcome], Any]) -> Callable[[], None]:
        """Register ``callback``; returns a function that unregisters it."""
        if self._closed:
            return lambda: None
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def emit(self, outcome: Outcome) -> bool:
        if self._closed:
            return False
        self._emitted += 1
        if self._first is None:
            self._first = outcome
            for fut in self._waiters:
                if not fut.done():
                    fut.set_result(outcome)
            self._waiters.clear()
        for queue in list(self._queues):
            queue.put_nowait(outcome)
        for callback in list(self._callbacks):
            self._notify(callback, outcome)
        if self._limit is not None and self._emitted >= self._limit:
            self.close()
        return True

    def _notify(self, callback: Callable[[Outcome], Any], outcome: Outcome) -> None:
        # A broken subscriber must not stop the other subscribers.
        try:
            callback(outcome)
        except Exception:
            logger.warning(
                "subscriber_error",
                extra={"data": {
                    "stream": self.name,
                    "callback": getattr(callback, "__name__", str(callback)),
                }},
                exc_info=True,
            )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._callbacks.clear()
        for queue in self._queues:
            queue.put_nowait(_CLOSED)
        for fut in self._waiters:
            if not fut.done():
                fut.set_result(None)
        self._waiters.clear()

    async def first(self) -> Outcome | None:
        """Wait for the first outcome; None if the stream closes empty."""
        if self._first is not None:
            return self._first
        if self._closed:
            return None
        fut = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        return await fut

    def __aiter__(self) -> _StreamIterator:
        return _StreamIterator(self)

    def _attach(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        if self._closed:
            queue.put_nowait(_CLOSED)
        else:
            self._queues.append(queue)
        return queue

    def _detach(self, queue: asyncio.Queue) -> None:
        if queue in self._queues:
            self._queues.remove(queue)


class _StreamIterator:
    def __init__(self, stream: OutcomeStream):
        self._stream = stream
        self._queue = stream._attach()

    def __aiter__(self) -> _StreamIterator:
        return self

    async def __anext__(self) -> Outcome:
        item = await self._queue.get()
        if item is _CLOSED:
            self._stream._detach(self._queue)
            raise StopAsyncIteration
        return item


@dataclass(frozen=True)
class SubmitEvents:
    """The two streams returned for a flow of submit attempts."""

    success: OutcomeStream
    error: OutcomeStream


class SubmissionPipeline:
    """Turns submit attempts into one accepted outcome or a run of errors.

    ``spinner`` is called as ``spinner(value, caption)`` before filtering and
    again before validating each attempt. It is never awaited.
    """

    def __init__(
        self,
        config: QuestionConfig,
        answers: Mapping[str, Any] | None = None,
        spinner: Spinner | None = None,
        on_source_error: Callable[[Exception], Any] | None = None,
    ):
        self.config = config
        self.answers: Mapping[str, Any] = answers if answers is not None else {}
        self._spinner = spinner
        self._on_source_error = on_source_error

        self.outcomes = OutcomeStream("outcomes")
        self.success = OutcomeStream("success", limit=1)
        self.error = OutcomeStream("error")
        self.outcomes.subscribe(self._route)

        self._latched = False
        self._closed = False
        self._attempts = 0
        self._tasks: set[asyncio.Task] = set()
        self._source_task: asyncio.Task | None = None
        self.source_error: Exception | None = None

    @property
    def accepted(self) -> bool:
        """True once a valid outcome has been emitted on ``success``."""
        return self._latched

    @property
    def is_open(self) -> bool:
        return not (self._latched or self._closed)

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    # ── Input ────────────────────────────────────────────────

    def handle_submit_events(
        self, attempts: AsyncIterable[Any] | Iterable[Any] | None = None
    ) -> SubmitEvents:
        """Start consuming ``attempts`` and return the success/error streams.

        Must be called with a running event loop when ``attempts`` is given.
        Attempts can also be pushed one at a time with ``submit``.
        """
        if attempts is not None and self._source_task is None:
            self._source_task = asyncio.get_running_loop().create_task(
                self._consume(attempts)
            )
        return SubmitEvents(success=self.success, error=self.error)

    async def _consume(self, attempts: AsyncIterable[Any] | Iterable[Any]) -> None:
        try:
            await self._drain_source(attempts)
        except Exception as exc:
            # The source is dead: nothing more can be accepted
            self.source_error = exc
            logger.warning(
                "attempt_source_failed",
                extra={"data": {"question": self.config.name, "error": repr(exc)}},
            )
            self.close()
            if self._on_source_error is not None:
                self._on_source_error(exc)

    async def _drain_source(self, attempts: AsyncIterable[Any] | Iterable[Any]) -> None:
        if isinstance(attempts, AsyncIterable):
            try:
                async for value in attempts:
                    if not self.is_open:
                        break
                    self.submit(value)
            finally:
                aclose = getattr(attempts, "aclose", None)
                if aclose is not None:
                    await aclose()
        else:
            for value in attempts:
                if not self.is_open:
                    break
                self.submit(value)

    def submit(self, value: Any) -> asyncio.Task | None:
        """Push one attempt. Ignored once the pipeline accepted or closed."""
        if not self.is_open:
            logger.debug(
                "attempt_ignored",
                extra={"data": {"question": self.config.name}},
            )
            return None
        self._attempts += 1
        task = asyncio.get_running_loop().create_task(
            self._process(self._attempts, value)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ── Evaluation ───────────────────────────────────────────

    async def _process(self, attempt: int, value: Any) -> Outcome:
        start = time.monotonic()
        outcome = await self.evaluate(value)
        dropped = not self.is_open
        log_attempt(
            self.config.name,
            attempt,
            time.monotonic() - start,
            outcome.valid,
            outcome.phase.value,
            dropped=dropped,
        )
        if not dropped:
            self.outcomes.emit(outcome)
        return outcome

    async def evaluate(self, value: Any) -> Outcome:
        """Run filter then validate for one value, without publishing."""
        self._start_spinner(value, self.config.filtering_text)
        try:
            filtered = await call_maybe_async(self.config.filter, value, self.answers)
        except Exception as exc:
            return Outcome.rejected(exc, phase=Phase.FILTER)

        self._start_spinner(filtered, self.config.validating_text)
        try:
            result = await call_maybe_async(self.config.validate, filtered, self.answers)
        except Exception as exc:
            return Outcome.rejected(exc, filtered)

        if result is True:
            return Outcome.accepted(filtered)
        return Outcome.rejected(result, filtered)

    def _start_spinner(self, value: Any, caption: str) -> None:
        if self._spinner is not None:
            self._spinner(value, caption)

    # ── Routing ──────────────────────────────────────────────

    def _route(self, outcome: Outcome) -> None:
        if self._latched:
            return
        if outcome.valid:
            self._latched = True
            self.success.emit(outcome)
            self.error.close()
            self._stop_source()
        else:
            self.error.emit(outcome)

    def _stop_source(self) -> None:
        task = self._source_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    # ── Teardown ─────────────────────────────────────────────

    async def accepted_outcome(self) -> Outcome | None:
        """Wait for the accepted outcome.

        Returns None if the pipeline closed without accepting anything.

        Raises:
            Exception: the attempt source's error, if the source failed.
        """
        outcome = await self.success.first()
        if outcome is None and self.source_error is not None:
            raise self.source_error
        return outcome

    async def join(self) -> None:
        """Wait until the attempt source is exhausted and attempts settle."""
        if self._source_task is not None and not self._source_task.done():
            await asyncio.wait([self._source_task])
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Stop taking attempts and close all streams.

        Attempts already running finish, but their outcomes are discarded.
        """
        if self._closed:
            return
        self._closed = True
        self._stop_source()
        self.success.close()
        self.error.close()
        self.outcomes.close()
