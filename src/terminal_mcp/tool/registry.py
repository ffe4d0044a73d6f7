"""Tool registry — register, list, and dispatch tools."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from terminal_mcp.mcp.protocol import ToolDefinition
from terminal_mcp.tool.base import BaseTool, ToolResult, UnknownToolError

if TYPE_CHECKING:
    from terminal_mcp.terminal.emulator import Terminal

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of available tools, in registration order.

    The set of tools is fixed once the server starts; ``tools/list``
    always reports the same definitions.
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    @classmethod
    def with_defaults(cls) -> ToolRegistry:
        """A registry holding the built-in terminal tools."""
        from terminal_mcp.tool.builtin import default_tools

        registry = cls()
        registry.register_many(default_tools())
        return registry

    def register(self, tool: BaseTool) -> None:
        """Register a tool instance."""
        if tool.name in self._tools:
            logger.warning("Tool %s already registered, overwriting", tool.name)
        self._tools[tool.name] = tool

    def register_many(self, tools: list[BaseTool]) -> None:
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def definitions(self) -> list[ToolDefinition]:
        return [tool.definition() for tool in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools.keys())

    async def dispatch(
        self, name: str, terminal: Terminal, arguments: dict[str, Any] | None
    ) -> ToolResult:
        """Run the named tool against the terminal.

        Raises:
            UnknownToolError: no tool is registered under ``name``.
            ToolArgumentsError: the arguments failed validation.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(f"Unknown tool: {name}")
        return await tool(terminal, arguments)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
