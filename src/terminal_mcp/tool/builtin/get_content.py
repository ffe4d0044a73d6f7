"""GetContent tool — read the screen as plain text."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, Field

from terminal_mcp.terminal.buffer import clean_output
from terminal_mcp.tool.base import BaseTool, ToolOk, ToolResult

if TYPE_CHECKING:
    from terminal_mcp.terminal.emulator import Terminal


class GetContentParams(BaseModel):
    start_row: int | None = Field(default=None, ge=0, description="Starting row (0-indexed).")
    end_row: int | None = Field(default=None, ge=0, description="Ending row (exclusive).")
    include_trailing_whitespace: bool = Field(
        default=False, description="Keep trailing whitespace and trailing blank lines."
    )


class GetContentTool(BaseTool[GetContentParams]):
    """Return visible screen text, optionally limited to a row range.

    Unless ``include_trailing_whitespace`` is set, trailing whitespace is
    stripped from each line and trailing empty lines are dropped.
    """

    name: ClassVar[str] = "getContent"
    description: ClassVar[str] = (
        "Get the current terminal buffer content as plain text. Returns the visible "
        "screen content without ANSI escape codes."
    )
    param_model: ClassVar[type[BaseModel]] = GetContentParams
    input_schema: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {
            "start_row": {
                "type": "integer",
                "description": "Starting row (0-indexed). If not specified, starts from the first row.",
                "minimum": 0,
            },
            "end_row": {
                "type": "integer",
                "description": "Ending row (exclusive). If not specified, includes all rows to the end.",
                "minimum": 0,
            },
            "include_trailing_whitespace": {
                "type": "boolean",
                "description": "Whether to include trailing whitespace in the output. Default is false.",
                "default": False,
            },
        },
    }

    async def execute(self, terminal: Terminal, params: GetContentParams) -> ToolResult:
        start, end = params.start_row, params.end_row
        if start is None and end is None:
            content = terminal.get_content()
        else:
            _, rows = terminal.size
            content = terminal.get_content_range(
                start if start is not None else 0,
                end if end is not None else rows,
            )

        if not params.include_trailing_whitespace:
            content = clean_output(content)
        return ToolOk(output=content)
