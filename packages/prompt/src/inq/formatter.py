"""Question line rendering as rich console markup."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rich.markup import escape

from inq.config import QuestionConfig
from inq.model import PromptStatus

HIDDEN_DEFAULT = "[italic dim]\\[hidden][/italic dim] "


def format_question(
    config: QuestionConfig,
    status: PromptStatus = PromptStatus.PENDING,
    answers: Mapping[str, Any] | None = None,
    *,
    include_prefix: bool = True,
) -> str:
    """Build the question line: prefix, bold message, suffix, default hint.

    The default hint is dropped once the question is answered, and a
    password question never shows its default text.
    """
    message = escape(config.resolve_message(answers))
    line = f"[bold]{message}[/bold]{config.suffix} "
    if include_prefix:
        line = f"{config.prefix} {line}"

    if config.default is not None and status is not PromptStatus.ANSWERED:
        if config.is_password:
            line += HIDDEN_DEFAULT
        else:
            line += f"[dim]({escape(str(config.default))})[/dim] "

    return line
