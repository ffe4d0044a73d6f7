"""CLI entry point for terminal-mcp."""

from __future__ import annotations

import asyncio
import logging
import sys

import typer
from pydantic import ValidationError

from terminal_mcp import __version__
from terminal_mcp.config import ServerConfig

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="terminal-mcp",
    help="A headless terminal emulator exposed as MCP tools over stdio.",
    add_completion=False,
)


def setup_logging(level: str = "info") -> None:
    """Log to stderr. Stdout carries the JSON-RPC stream and nothing else."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"terminal-mcp {__version__}")
        raise typer.Exit()


async def _run(config: ServerConfig) -> None:
    from terminal_mcp.mcp.server import McpServer
    from terminal_mcp.mcp.transport import ExecutorLineReader, serve
    from terminal_mcp.terminal.emulator import Terminal

    terminal = Terminal(config.terminal)
    try:
        server = McpServer(terminal)
        logger.info("MCP server ready, waiting for requests")
        await serve(server, ExecutorLineReader(sys.stdin.buffer), sys.stdout.buffer)
    finally:
        terminal.close()
    logger.info("MCP server shutting down")


@app.command()
def main(
    shell: str | None = typer.Option(
        None, "--shell", "-s", help="Shell to use (default: $SHELL or /bin/bash)."
    ),
    cols: int | None = typer.Option(
        None, "--cols", "-c", help="Terminal width in columns (default: 120)."
    ),
    rows: int | None = typer.Option(
        None, "--rows", "-r", help="Terminal height in rows (default: 40)."
    ),
    working_dir: str | None = typer.Option(
        None, "--working-dir", "-w", help="Working directory for the shell."
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level (debug, info, warning, error)."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Serve one terminal session over MCP on stdin/stdout."""
    try:
        config = ServerConfig.load(
            {
                "shell": shell,
                "cols": cols,
                "rows": rows,
                "working_dir": working_dir,
                "log_level": log_level,
            }
        )
    except (ValidationError, ValueError) as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(2)

    setup_logging(config.log_level)
    logger.info("Starting Terminal MCP Server v%s", __version__)
    logger.info("Terminal config: %s", config.terminal)

    from terminal_mcp.terminal.emulator import TerminalError

    try:
        asyncio.run(_run(config))
    except TerminalError as e:
        logger.error("Failed to create terminal: %s", e)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        pass
