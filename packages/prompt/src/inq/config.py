"""Question configuration and its resolution from raw option mappings.

Raw question mappings may use the camelCase keys of the classic prompt
format (``validatingText``, ``filteringText``) or snake_case. Every key that
is absent gets a documented default; keys that are present are kept as-is,
even when falsy.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from inq.choices import Choices
from inq.errors import ConfigurationError

DEFAULT_PREFIX = "[green]?[/green]"

# camelCase spellings accepted for snake_case fields
_KEY_ALIASES = {
    "validatingText": "validating_text",
    "filteringText": "filtering_text",
}


def _always_valid(value: Any, answers: Mapping[str, Any]) -> bool:
    return True


def _identity(value: Any, answers: Mapping[str, Any]) -> Any:
    return value


def _always(answers: Mapping[str, Any]) -> bool:
    return True


@dataclass(frozen=True)
class PromptDefaults:
    """Defaults that come from settings rather than from the question."""

    prefix: str = DEFAULT_PREFIX


@dataclass(frozen=True)
class QuestionConfig:
    """A fully defaulted question."""

    name: str
    message: str | Callable[[Mapping[str, Any]], str] = ""
    default: Any = None
    type: str = "input"
    prefix: str = DEFAULT_PREFIX
    suffix: str = ""
    validate: Callable[..., Any] = _always_valid
    filter: Callable[..., Any] = _identity
    when: Callable[..., Any] | bool = _always
    validating_text: str = ""
    filtering_text: str = ""
    choices: Any = None
    mask: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def resolve_message(self, answers: Mapping[str, Any] | None = None) -> str:
        if callable(self.message):
            return str(self.message(answers if answers is not None else {}))
        return self.message

    @property
    def is_password(self) -> bool:
        return self.type == "password"


_FIELDS = {
    "name", "message", "default", "type", "prefix", "suffix", "validate",
    "filter", "when", "validating_text", "filtering_text", "choices", "mask",
}


def throw_param_error(name: str) -> None:
    """Raise the error for a missing required question parameter."""
    raise ConfigurationError(f"You must provide a `{name}` parameter", param=name)


def resolve_question(
    raw: Mapping[str, Any] | QuestionConfig,
    answers: Mapping[str, Any] | None = None,
    *,
    defaults: PromptDefaults | None = None,
) -> QuestionConfig:
    """Merge a raw question with defaults and validate required fields.

    Raises:
        ConfigurationError: if ``name`` is missing or empty.
    """
    if isinstance(raw, QuestionConfig):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"Question must be a mapping, got {type(raw).__name__}"
        )

    defaults = defaults or PromptDefaults()
    answers = answers if answers is not None else {}

    opts: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in raw.items():
        key = _KEY_ALIASES.get(key, key)
        if key in _FIELDS:
            opts[key] = value
        else:
            extra[key] = value

    if not opts.get("name"):
        throw_param_error("name")

    opts.setdefault("validate", _always_valid)
    opts.setdefault("filter", _identity)
    opts.setdefault("when", _always)
    opts.setdefault("suffix", "")
    opts.setdefault("prefix", defaults.prefix)
    opts.setdefault("validating_text", "")
    opts.setdefault("filtering_text", "")
    opts.setdefault("type", "input")

    if not opts.get("message"):
        opts["message"] = f"{opts['name']}:"

    choices = opts.get("choices")
    if isinstance(choices, (list, tuple)):
        opts["choices"] = Choices(choices, answers)

    return QuestionConfig(extra=extra, **opts)


async def call_maybe_async(fn: Callable[..., Any], *args: Any) -> Any:
    """Call ``fn`` and await the result when it is awaitable."""
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
