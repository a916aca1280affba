"""Cascading settings for prompts.

Settings priority (highest first):
1. Environment variables (INQ_PREFIX, INQ_LOG_DIR, INQ_LOG_LEVEL,
   INQ_SPINNER_REFRESH)
2. .inq/config.local.toml (git-ignored, per-machine overrides)
3. .inq/config.toml (project-specific)
4. ~/.inq/config.toml (user defaults)

All keys live in a ``[prompt]`` table::

    [prompt]
    prefix = "[cyan]>[/cyan]"
    log_dir = "~/.inq/logs"
    log_level = "DEBUG"
    spinner_refresh = 8
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from inq.config import DEFAULT_PREFIX, PromptDefaults

logger = logging.getLogger("inq.settings")

_ENV_KEYS = {
    "INQ_PREFIX": "prefix",
    "INQ_LOG_DIR": "log_dir",
    "INQ_LOG_LEVEL": "log_level",
    "INQ_SPINNER_REFRESH": "spinner_refresh",
}


@dataclass
class SettingsLayer:
    """A single layer in the settings cascade."""

    name: str
    path: Path | None
    data: dict[str, Any] = field(default_factory=dict)
    source: str = ""

    @classmethod
    def from_file(cls, path: Path) -> SettingsLayer:
        """Load a layer from a TOML file; a missing or broken file is empty."""
        if not path.exists():
            return cls(name=path.stem, path=path, data={}, source="file")

        try:
            data = tomllib.loads(path.read_bytes().decode())
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
            logger.warning(
                "settings_load_failed",
                extra={"data": {"path": str(path), "error": str(e)}},
            )
            data = {}
        return cls(name=path.stem, path=path, data=data.get("prompt", {}), source="file")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> SettingsLayer:
        env = os.environ if environ is None else environ
        data = {key: env[var] for var, key in _ENV_KEYS.items() if env.get(var)}
        return cls(name="environment", path=None, data=data, source="env")


@dataclass
class Settings:
    """Resolved prompt settings."""

    prefix: str = DEFAULT_PREFIX
    log_dir: Path | None = None
    log_level: int = logging.WARNING
    spinner_refresh: float = 4.0
    layers: list[SettingsLayer] = field(default_factory=list, repr=False)

    @classmethod
    def load(
        cls,
        workspace: Path | None = None,
        home: Path | None = None,
        environ: dict[str, str] | None = None,
    ) -> Settings:
        """Load settings: env > config.local.toml > config.toml > ~/.inq."""
        home = home or Path.home()
        layers = [SettingsLayer.from_file(home / ".inq" / "config.toml")]
        if workspace:
            layers.append(SettingsLayer.from_file(workspace / ".inq" / "config.toml"))
            layers.append(SettingsLayer.from_file(workspace / ".inq" / "config.local.toml"))
        layers.append(SettingsLayer.from_env(environ))

        merged: dict[str, Any] = {}
        for layer in layers:
            merged.update(layer.data)

        settings = cls(layers=layers)
        if merged.get("prefix"):
            settings.prefix = str(merged["prefix"])
        if merged.get("log_dir"):
            settings.log_dir = Path(str(merged["log_dir"])).expanduser()
        settings.log_level = cls._parse_level(merged.get("log_level"), logging.WARNING)
        settings.spinner_refresh = cls._parse_positive_float(
            merged.get("spinner_refresh"), 4.0
        )
        return settings

    @staticmethod
    def _parse_positive_float(value: Any, default: float) -> float:
        """Parse a positive float with safe fallback."""
        try:
            parsed = float(value)
            if parsed > 0:
                return parsed
        except (TypeError, ValueError):
            pass
        return default

    @staticmethod
    def _parse_level(value: Any, default: int) -> int:
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            level = logging.getLevelName(value.strip().upper())
            if isinstance(level, int):
                return level
        return default

    def get_sources(self, key: str) -> list[str]:
        """Find which layers set ``key``, highest priority first."""
        return [
            f"{layer.name} ({layer.source})"
            for layer in reversed(self.layers)
            if layer.data.get(key) is not None
        ]

    def prompt_defaults(self) -> PromptDefaults:
        return PromptDefaults(prefix=self.prefix)
