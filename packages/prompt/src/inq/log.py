"""Structured JSON logging for prompt sessions.

Logs submit attempts, their outcomes and lifecycle transitions as JSON
lines, so a misbehaving validator can be debugged after the fact.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "data"):
            entry["data"] = record.data  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    log_dir: Path | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Configure structured logging for prompts.

    Args:
        log_dir: Directory for log files. If None, logs to stderr only.
        level: Logging level.

    Returns:
        The root 'inq' logger.
    """
    logger = logging.getLogger("inq")
    logger.setLevel(level)

    # Avoid duplicate handlers on repeated calls
    if logger.handlers:
        return logger

    fmt = JSONFormatter()

    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / "prompt.jsonl", encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(level)
        logger.addHandler(fh)

    # Stderr only gets warnings; the terminal belongs to the prompt
    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    sh.setLevel(logging.WARNING)
    logger.addHandler(sh)

    return logger


def log_attempt(
    question: str,
    attempt: int,
    elapsed_s: float,
    valid: bool,
    phase: str,
    dropped: bool = False,
):
    """Log the outcome of one submit attempt."""
    logger = logging.getLogger("inq.pipeline")
    logger.debug(
        "attempt_outcome",
        extra={"data": {
            "question": question,
            "attempt": attempt,
            "elapsed_s": round(elapsed_s, 3),
            "valid": valid,
            "phase": phase,
            "dropped": dropped,
        }},
    )


def log_lifecycle(question: str, event: str, **data: Any):
    """Log a prompt lifecycle transition (run, answered, closed)."""
    logger = logging.getLogger("inq.prompt")
    logger.info(
        event,
        extra={"data": {"question": question, **data}},
    )
