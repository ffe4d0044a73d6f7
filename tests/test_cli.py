"""Tests for terminal_mcp.cli."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from terminal_mcp import __version__
from terminal_mcp.cli import app

runner = CliRunner()


class TestCli:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--shell" in result.stdout
        assert "--cols" in result.stdout

    def test_bad_size_rejected(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["--cols", "0"])
        assert result.exit_code == 2
