"""Shared fixtures: a terminal backed by an in-memory PTY stand-in."""

from __future__ import annotations

import queue

import pytest

from terminal_mcp.pty.session import PTYWriteError
from terminal_mcp.terminal.emulator import Terminal
from terminal_mcp.terminal.screen import Screen


class FakePTY:
    """Records writes and lets tests inject shell output."""

    def __init__(self, cols: int = 20, rows: int = 5) -> None:
        self.output: queue.Queue[bytes] = queue.Queue()
        self.written = bytearray()
        self.size = (cols, rows)
        self.closed = False
        self.broken = False

    def emit(self, data: bytes) -> None:
        self.output.put(data)

    def write(self, data: bytes) -> int:
        if self.broken:
            raise PTYWriteError("Failed to write to PTY: [Errno 5] Input/output error")
        self.written.extend(data)
        return len(data)

    def resize(self, cols: int, rows: int) -> None:
        self.size = (cols, rows)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_pty() -> FakePTY:
    return FakePTY()


@pytest.fixture
def terminal(fake_pty: FakePTY) -> Terminal:
    cols, rows = fake_pty.size
    return Terminal.from_parts(fake_pty, Screen(rows, cols))  # type: ignore[arg-type]
