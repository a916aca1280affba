"""Screen rendering for prompts, backed by Rich."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Protocol, runtime_checkable

from rich.console import Console as RichConsole
from rich.live import Live
from rich.markup import escape
from rich.text import Text


@runtime_checkable
class Screen(Protocol):
    """What a prompt needs from the terminal.

    Prompts never talk to the terminal any other way, so a test can swap
    in a recording fake.
    """

    def render(self, content: str) -> None:
        """Show ``content`` (rich markup), replacing any spinner."""
        ...

    def render_with_spinner(self, content: str, status: str) -> None:
        """Show ``content`` with a spinner and a status caption below it."""
        ...

    def release_cursor(self) -> None:
        """Stop any spinner and give the cursor back to the terminal."""
        ...


class ConsoleScreen:
    """Screen implementation on a Rich console with a transient spinner."""

    def __init__(self, console: RichConsole | None = None, refresh_per_second: float = 4):
        self._console = console or RichConsole()
        self._refresh_per_second = refresh_per_second
        self._spinner_live: Live | None = None
        self._spinner_content = ""
        self._spinner_status = ""
        self._spinner_start = 0.0
        self._spinner_refresh_task: Any = None

    @property
    def console(self) -> RichConsole:
        return self._console

    def render(self, content: str) -> None:
        self.stop_spinner()
        self._console.print(content, highlight=False)

    def render_with_spinner(self, content: str, status: str) -> None:
        """Show a spinner line; elapsed seconds appear after 5s."""
        self._spinner_content = content
        self._spinner_status = status
        if self._spinner_live:
            self._spinner_live.update(self._build_spinner_renderable())
            return

        self._spinner_start = time.monotonic()
        self._spinner_live = Live(
            self._build_spinner_renderable(),
            console=self._console,
            refresh_per_second=self._refresh_per_second,
            transient=True,
        )
        self._spinner_live.start()
        try:
            loop = asyncio.get_running_loop()
            self._spinner_refresh_task = loop.create_task(self._refresh_spinner())
        except RuntimeError:
            self._spinner_refresh_task = None

    def _build_spinner_renderable(self) -> Text:
        elapsed = time.monotonic() - self._spinner_start
        line = Text.from_markup(self._spinner_content)
        if self._spinner_status:
            line.append("\n")
            line.append_text(Text.from_markup(f"[cyan]⠋[/cyan] [dim]{escape(self._spinner_status)}[/dim]"))
        else:
            line = Text.from_markup("[cyan]⠋[/cyan] ").append_text(line)
        if elapsed >= 5:
            line.append(f" ({elapsed:.0f}s)", style="dim")
        return line

    async def _refresh_spinner(self):
        """Periodically update spinner to show elapsed time."""
        try:
            while self._spinner_live:
                await asyncio.sleep(1)
                if self._spinner_live:
                    self._spinner_live.update(self._build_spinner_renderable())
        except asyncio.CancelledError:
            pass

    def stop_spinner(self) -> None:
        if self._spinner_refresh_task:
            self._spinner_refresh_task.cancel()
            self._spinner_refresh_task = None
        if self._spinner_live:
            self._spinner_live.stop()
            self._spinner_live = None

    def release_cursor(self) -> None:
        self.stop_spinner()
        self._console.show_cursor(True)
