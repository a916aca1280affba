"""UI package - screen rendering and line input."""

from inq.ui.reader import LineReader, ScriptedLineReader, ToolkitLineReader
from inq.ui.screen import ConsoleScreen, Screen

__all__ = ["Screen", "ConsoleScreen", "LineReader", "ToolkitLineReader", "ScriptedLineReader"]
