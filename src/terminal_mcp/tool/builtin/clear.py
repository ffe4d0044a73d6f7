"""Clear tool."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel

from terminal_mcp.terminal.emulator import TerminalError
from terminal_mcp.tool.base import BaseTool, ToolError, ToolOk, ToolResult

if TYPE_CHECKING:
    from terminal_mcp.terminal.emulator import Terminal


class ClearParams(BaseModel):
    pass


class ClearTool(BaseTool[ClearParams]):
    name: ClassVar[str] = "clear"
    description: ClassVar[str] = (
        "Clear the terminal screen and move cursor to the top-left position."
    )
    param_model: ClassVar[type[BaseModel]] = ClearParams
    input_schema: ClassVar[dict[str, Any]] = {"type": "object", "properties": {}}

    async def execute(self, terminal: Terminal, params: ClearParams) -> ToolResult:
        try:
            terminal.clear()
        except TerminalError as e:
            return ToolError(output=f"Failed to clear terminal: {e}")
        return ToolOk(output="Terminal cleared")
