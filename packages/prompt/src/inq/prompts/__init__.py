"""Prompt variants built on BasePrompt."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from inq.config import QuestionConfig
from inq.errors import ConfigurationError
from inq.prompts.confirm import ConfirmPrompt
from inq.prompts.input import InputPrompt
from inq.prompts.password import PasswordPrompt
from inq.prompts.rawlist import RawListPrompt

PROMPT_TYPES: dict[str, type[InputPrompt]] = {
    "input": InputPrompt,
    "password": PasswordPrompt,
    "confirm": ConfirmPrompt,
    "rawlist": RawListPrompt,
}


def create_prompt(
    question: Mapping[str, Any] | QuestionConfig,
    answers: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> InputPrompt:
    """Build the variant named by the question's ``type`` (default: input)."""
    kind = question.type if isinstance(question, QuestionConfig) else question.get("type", "input")
    cls = PROMPT_TYPES.get(kind or "input")
    if cls is None:
        raise ConfigurationError(
            f"Unknown prompt type '{kind}'. Available: {sorted(PROMPT_TYPES)}",
            param="type",
        )
    return cls(question, answers, **kwargs)


__all__ = [
    "InputPrompt",
    "PasswordPrompt",
    "ConfirmPrompt",
    "RawListPrompt",
    "PROMPT_TYPES",
    "create_prompt",
]
