"""Configuration — Pydantic models for terminal-mcp settings."""

from __future__ import annotations

import os
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SHELL = "/bin/bash"
DEFAULT_COLS = 120
DEFAULT_ROWS = 40
DEFAULT_LOG_LEVEL = "info"


def default_shell() -> str:
    return os.environ.get("SHELL") or DEFAULT_SHELL


class TerminalConfig(BaseModel):
    """Settings for the single terminal session.

    Frozen: the only dimension change after creation is an explicit
    resize of the running terminal.
    """

    model_config = ConfigDict(frozen=True)

    shell: str = Field(default_factory=default_shell, description="Shell to spawn")
    cols: int = Field(default=DEFAULT_COLS, ge=1, description="Terminal width in columns")
    rows: int = Field(default=DEFAULT_ROWS, ge=1, description="Terminal height in rows")
    working_dir: str | None = Field(
        default=None, description="Working directory for the shell"
    )
    env: dict[str, str] = Field(
        default_factory=dict,
        description="Extra environment variables for the shell. TERM is always "
        "forced to xterm-256color.",
    )


class ServerConfig(BaseModel):
    """Top-level terminal-mcp configuration."""

    terminal: TerminalConfig = Field(default_factory=TerminalConfig)
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)

    @classmethod
    def load(cls, overrides: dict[str, Any] | None = None) -> ServerConfig:
        """Load config from env vars, ``.env`` and explicit overrides.

        Priority: overrides (CLI flags) > env vars / .env > defaults.

        Env vars:
            TERMINAL_MCP_SHELL  - Shell to use (falls back to $SHELL, then /bin/bash)
            TERMINAL_MCP_COLS   - Terminal width in columns
            TERMINAL_MCP_ROWS   - Terminal height in rows
            TERMINAL_MCP_CWD    - Working directory for the shell
            TERMINAL_MCP_LOG    - Log level (debug, info, warning, error)
        """
        load_dotenv(find_dotenv(usecwd=True), override=True)

        terminal: dict[str, Any] = {}

        env_shell = os.environ.get("TERMINAL_MCP_SHELL")
        if env_shell:
            terminal["shell"] = env_shell

        env_cols = os.environ.get("TERMINAL_MCP_COLS")
        if env_cols:
            terminal["cols"] = int(env_cols)

        env_rows = os.environ.get("TERMINAL_MCP_ROWS")
        if env_rows:
            terminal["rows"] = int(env_rows)

        env_cwd = os.environ.get("TERMINAL_MCP_CWD")
        if env_cwd:
            terminal["working_dir"] = env_cwd

        config_data: dict[str, Any] = {"terminal": terminal}

        env_log = os.environ.get("TERMINAL_MCP_LOG")
        if env_log:
            config_data["log_level"] = env_log.lower()

        for key, value in (overrides or {}).items():
            if value is None:
                continue
            if key == "log_level":
                config_data["log_level"] = str(value).lower()
            else:
                terminal[key] = value

        return cls.model_validate(config_data)
