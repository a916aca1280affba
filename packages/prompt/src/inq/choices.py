"""Choice collections for list-style questions.

A ``Choices`` collection is bound to the answer set it was created with, so
``disabled`` callables can look at earlier answers.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass
class Separator:
    """A non-selectable line between choices."""

    line: str = "──────────────"

    def __str__(self) -> str:
        return self.line


@dataclass
class Choice:
    """A single selectable entry."""

    name: str
    value: Any = None
    short: str = ""
    disabled: bool | str | Callable[[Mapping[str, Any]], Any] = False
    checked: bool = False
    _disabled_state: Any = field(default=False, init=False, repr=False)

    def __post_init__(self):
        if self.value is None:
            self.value = self.name
        if not self.short:
            self.short = self.name

    @classmethod
    def coerce(cls, raw: Any) -> Choice | Separator:
        if isinstance(raw, (Choice, Separator)):
            return raw
        if isinstance(raw, Mapping):
            name = raw.get("name", raw.get("value"))
            if name is None:
                raise ValueError(f"Choice needs a name or value: {raw!r}")
            return cls(
                name=str(name),
                value=raw.get("value"),
                short=raw.get("short", ""),
                disabled=raw.get("disabled", False),
                checked=bool(raw.get("checked", False)),
            )
        return cls(name=str(raw), value=raw)

    def bind(self, answers: Mapping[str, Any]) -> None:
        """Evaluate ``disabled`` against the answer set."""
        if callable(self.disabled):
            self._disabled_state = self.disabled(answers)
        else:
            self._disabled_state = self.disabled

    @property
    def is_disabled(self) -> bool:
        return bool(self._disabled_state)

    @property
    def disabled_reason(self) -> str:
        """Text shown next to a disabled entry."""
        state = self._disabled_state
        if isinstance(state, str) and state:
            return state
        return "Disabled" if state else ""


class Choices:
    """Ordered choice collection, deduplicated by value.

    ``real_choices`` excludes separators and disabled entries; index-based
    lookups (``get_choice``, ``pluck``) work on that list, while ``get``
    indexes the full list including separators.
    """

    def __init__(self, choices: Iterable[Any], answers: Mapping[str, Any] | None = None):
        self.answers: Mapping[str, Any] = answers if answers is not None else {}
        self.choices: list[Choice | Separator] = []
        self._seen: set[Any] = set()
        for raw in choices:
            self._append(Choice.coerce(raw))
        self._refresh()

    def _append(self, item: Choice | Separator) -> None:
        if isinstance(item, Choice):
            key = _dedupe_key(item.value)
            if key in self._seen:
                return
            self._seen.add(key)
            item.bind(self.answers)
        self.choices.append(item)

    def _refresh(self) -> None:
        self.real_choices: list[Choice] = [
            c for c in self.choices if isinstance(c, Choice) and not c.is_disabled
        ]

    def __len__(self) -> int:
        return len(self.choices)

    def __iter__(self) -> Iterator[Choice | Separator]:
        return iter(self.choices)

    @property
    def real_length(self) -> int:
        return len(self.real_choices)

    def get_choice(self, index: int) -> Choice | None:
        if 0 <= index < len(self.real_choices):
            return self.real_choices[index]
        return None

    def get(self, index: int) -> Choice | Separator | None:
        if 0 <= index < len(self.choices):
            return self.choices[index]
        return None

    def index_of(self, value: Any) -> int:
        """Position of the choice with ``value`` among real choices, or -1."""
        for i, choice in enumerate(self.real_choices):
            if choice.value == value:
                return i
        return -1

    def find(self, predicate: Callable[[Choice | Separator], bool]) -> Choice | Separator | None:
        return next((c for c in self.choices if predicate(c)), None)

    def filter(self, predicate: Callable[[Choice | Separator], bool]) -> list[Choice | Separator]:
        return [c for c in self.choices if predicate(c)]

    def pluck(self, attr: str) -> list[Any]:
        return [getattr(c, attr) for c in self.real_choices]

    def push(self, *items: Any) -> None:
        for raw in items:
            self._append(Choice.coerce(raw))
        self._refresh()


def _dedupe_key(value: Any) -> Any:
    try:
        hash(value)
    except TypeError:
        return ("__unhashable__", repr(value))
    return value
