"""MCP protocol — wire types, method dispatch and the stdio transport.

The dispatcher is imported from ``terminal_mcp.mcp.server`` directly.
"""

from terminal_mcp.mcp.protocol import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    McpError,
    ToolDefinition,
)

__all__ = [
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
    "McpError",
    "ToolDefinition",
]
