"""Line input sources for prompt variants."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from rich.console import Console as RichConsole


@runtime_checkable
class LineReader(Protocol):
    """Reads one submitted line for a question."""

    async def read_line(self, message: str, *, is_password: bool = False) -> str:
        """Show ``message`` (rich markup) and wait for the user's line."""
        ...


def markup_to_ansi(markup: str, color_system: str | None = "standard") -> str:
    """Render rich markup to an ANSI string prompt_toolkit can display."""
    console = RichConsole(color_system=color_system, force_terminal=color_system is not None)
    with console.capture() as capture:
        console.print(markup, end="", highlight=False, soft_wrap=True)
    return capture.get()


class ToolkitLineReader:
    """Line reader on a prompt_toolkit session.

    Enter submits; Escape+Enter inserts a newline. Password reads use a
    separate session so they never reach the history file.
    """

    def __init__(self, history_file: Path | None = None):
        history = FileHistory(str(history_file)) if history_file else InMemoryHistory()

        kb = KeyBindings()

        @kb.add("escape", "enter")
        def _newline(event):
            event.current_buffer.insert_text("\n")

        self._session: PromptSession[str] = PromptSession(
            history=history,
            multiline=False,
            key_bindings=kb,
        )
        self._password_session: PromptSession[str] = PromptSession(
            history=InMemoryHistory(),
            multiline=False,
            is_password=True,
        )

    async def read_line(self, message: str, *, is_password: bool = False) -> str:
        session = self._password_session if is_password else self._session
        return await session.prompt_async(ANSI(markup_to_ansi(message)))


class ScriptedLineReader:
    """Reader that replays fixed lines, for tests and non-interactive runs.

    Raises EOFError once the script runs out, like a closed stdin.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines = list(lines)
        self.messages: list[str] = []
        self.password_reads = 0

    async def read_line(self, message: str, *, is_password: bool = False) -> str:
        self.messages.append(message)
        if is_password:
            self.password_reads += 1
        if not self._lines:
            raise EOFError("no more scripted input")
        return self._lines.pop(0)
