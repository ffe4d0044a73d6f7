"""Built-in terminal tools."""

from __future__ import annotations

from terminal_mcp.tool.base import BaseTool
from terminal_mcp.tool.builtin.clear import ClearTool
from terminal_mcp.tool.builtin.get_content import GetContentTool
from terminal_mcp.tool.builtin.screenshot import TakeScreenshotTool
from terminal_mcp.tool.builtin.send_key import SendKeyTool
from terminal_mcp.tool.builtin.type_text import TypeTool

__all__ = [
    "TypeTool",
    "SendKeyTool",
    "GetContentTool",
    "TakeScreenshotTool",
    "ClearTool",
    "default_tools",
]


def default_tools() -> list[BaseTool]:
    """The five published tools, in the order ``tools/list`` reports them."""
    return [
        TypeTool(),
        SendKeyTool(),
        GetContentTool(),
        TakeScreenshotTool(),
        ClearTool(),
    ]
