"""terminal-mcp — a headless terminal exposed as MCP tools over stdio."""

__version__ = "0.1.0"
