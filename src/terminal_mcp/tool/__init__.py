"""Tool system — base classes, registry, and the built-in terminal tools."""

from terminal_mcp.tool.base import (
    BaseTool,
    ToolArgumentsError,
    ToolError,
    ToolOk,
    ToolResult,
    UnknownToolError,
)
from terminal_mcp.tool.registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ToolResult",
    "ToolOk",
    "ToolError",
    "ToolArgumentsError",
    "UnknownToolError",
    "ToolRegistry",
]
