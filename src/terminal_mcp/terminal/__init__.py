"""Terminal emulation — screen model, session engine and text helpers."""

from terminal_mcp.terminal.buffer import clean_output, strip_ansi
from terminal_mcp.terminal.emulator import Terminal, TerminalError, render_ansi
from terminal_mcp.terminal.screen import Cell, CellStyle, Color, ColorKind, Screen

__all__ = [
    "Terminal",
    "TerminalError",
    "Screen",
    "Cell",
    "CellStyle",
    "Color",
    "ColorKind",
    "render_ansi",
    "clean_output",
    "strip_ansi",
]
