"""TakeScreenshot tool — capture the screen with or without styling."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Literal

from pydantic import BaseModel, Field

from terminal_mcp.tool.base import BaseTool, ToolOk, ToolResult

if TYPE_CHECKING:
    from terminal_mcp.terminal.emulator import Terminal

HEADER_RULE = "─"


class ScreenshotParams(BaseModel):
    format: Literal["ansi", "plain"] = Field(
        default="ansi",
        description="'ansi' includes color codes, 'plain' is plain text only",
    )


def screenshot_header(terminal: Terminal) -> str:
    """``Terminal: <cols>x<rows> | Cursor: (<row>, <col>)`` plus a rule line."""
    row, col = terminal.cursor_position()
    cols, rows = terminal.size
    return f"Terminal: {cols}x{rows} | Cursor: ({row}, {col})\n{HEADER_RULE * cols}\n"


class TakeScreenshotTool(BaseTool[ScreenshotParams]):
    """Capture the terminal state.

    The ``ansi`` format re-encodes every cell's style as SGR sequences and
    is prefixed with a size/cursor header. The ``plain`` format is the raw
    screen text with no header.
    """

    name: ClassVar[str] = "takeScreenshot"
    description: ClassVar[str] = (
        "Capture the current terminal state as text. By default includes ANSI escape "
        "codes for colors and formatting. Use format='plain' for plain text without "
        "escape codes."
    )
    param_model: ClassVar[type[BaseModel]] = ScreenshotParams
    input_schema: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {
            "format": {
                "type": "string",
                "description": "Output format: 'ansi' (default) includes color codes, 'plain' is plain text only",
                "enum": ["ansi", "plain"],
                "default": "ansi",
            }
        },
    }

    async def execute(self, terminal: Terminal, params: ScreenshotParams) -> ToolResult:
        if params.format == "plain":
            return ToolOk(output=terminal.get_content())
        body = terminal.take_screenshot()
        return ToolOk(output=screenshot_header(terminal) + body)
