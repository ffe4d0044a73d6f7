"""Allow ``python -m terminal_mcp``."""

from terminal_mcp.cli import app

app()
