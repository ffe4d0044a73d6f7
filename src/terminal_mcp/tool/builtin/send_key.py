"""SendKey tool — send a named key or key combination."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, Field

from terminal_mcp.terminal.emulator import TerminalError
from terminal_mcp.tool.base import BaseTool, ToolError, ToolOk, ToolResult

if TYPE_CHECKING:
    from terminal_mcp.terminal.emulator import Terminal


class SendKeyParams(BaseModel):
    key: str = Field(description="The key to send, e.g. 'Enter', 'Ctrl+C', 'Up'.")


class SendKeyTool(BaseTool[SendKeyParams]):
    """Encode a key name and write it to the shell.

    Names the encoder does not recognize are sent as literal text.
    """

    name: ClassVar[str] = "sendKey"
    description: ClassVar[str] = (
        "Send a special key or key combination to the terminal. Supports keys like "
        "Enter, Tab, Escape, arrow keys (Up, Down, Left, Right), function keys "
        "(F1-F12), and control combinations (Ctrl+C, Ctrl+D, etc.)."
    )
    param_model: ClassVar[type[BaseModel]] = SendKeyParams
    input_schema: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {
            "key": {
                "type": "string",
                "description": (
                    "The key to send. Examples: 'Enter', 'Tab', 'Escape', 'Up', "
                    "'Down', 'Left', 'Right', 'Ctrl+C', 'Ctrl+D', 'Ctrl+Z', 'F1', "
                    "'Home', 'End', 'PageUp', 'PageDown', 'Backspace', 'Delete'"
                ),
            }
        },
        "required": ["key"],
    }

    async def execute(self, terminal: Terminal, params: SendKeyParams) -> ToolResult:
        try:
            terminal.send_key(params.key)
        except TerminalError as e:
            return ToolError(output=f"Failed to send key: {e}")
        return ToolOk(output=f"Sent key: {params.key}")
