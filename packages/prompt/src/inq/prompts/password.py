from __future__ import annotations

from typing import Any

from rich.markup import escape

from inq.prompts.input import InputPrompt


class PasswordPrompt(InputPrompt):
    """Input prompt that never shows what was typed.

    With a ``mask`` character the answer is echoed as that many mask
    characters; without one, as a dim ``[hidden]`` marker.
    """

    is_password = True

    def masked(self, value: Any) -> str:
        text = "" if value is None else str(value)
        if self.opt.mask:
            return escape(self.opt.mask * len(text))
        return "[italic dim]\\[hidden][/italic dim]" if text else ""

    def display_value(self, value: Any) -> str:
        return self.masked(value)

    def render_answer(self, value: Any) -> str:
        return f"[cyan]{self.masked(value)}[/cyan]"
