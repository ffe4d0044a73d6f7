"""Type tool — write text to the terminal as if typed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, Field

from terminal_mcp.terminal.emulator import TerminalError
from terminal_mcp.tool.base import BaseTool, ToolError, ToolOk, ToolResult

if TYPE_CHECKING:
    from terminal_mcp.terminal.emulator import Terminal


class TypeParams(BaseModel):
    text: str = Field(description="The text to type into the terminal")


class TypeTool(BaseTool[TypeParams]):
    """Write text verbatim (UTF-8) to the shell."""

    name: ClassVar[str] = "type"
    description: ClassVar[str] = (
        "Send text input to the terminal. The text is written directly to the "
        "terminal as if typed by a user."
    )
    param_model: ClassVar[type[BaseModel]] = TypeParams
    input_schema: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {
            "text": {
                "type": "string",
                "description": "The text to type into the terminal",
            }
        },
        "required": ["text"],
    }

    async def execute(self, terminal: Terminal, params: TypeParams) -> ToolResult:
        try:
            terminal.write_str(params.text)
        except TerminalError as e:
            return ToolError(output=f"Failed to write to terminal: {e}")
        return ToolOk(output=f"Typed {len(params.text)} characters")
