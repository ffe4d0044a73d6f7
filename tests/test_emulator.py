"""Tests for terminal_mcp.terminal.emulator (Terminal, render_ansi)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from terminal_mcp.terminal.buffer import strip_ansi
from terminal_mcp.terminal.emulator import (
    CLEAR_SEQUENCE,
    Terminal,
    TerminalError,
    render_ansi,
    style_to_sgr,
)
from terminal_mcp.terminal.screen import CellStyle, Color, Screen

if TYPE_CHECKING:
    from conftest import FakePTY


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class TestInput:
    def test_write_str_utf8(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        assert terminal.write_str("héllo") == len("héllo".encode("utf-8"))
        assert bytes(fake_pty.written) == "héllo".encode("utf-8")

    def test_send_key(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        terminal.send_key("Ctrl+C")
        terminal.send_key("Up")
        assert bytes(fake_pty.written) == b"\x03\x1b[A"

    def test_clear_writes_sequence(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        terminal.clear()
        assert bytes(fake_pty.written) == CLEAR_SEQUENCE

    def test_write_failure_wrapped(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        fake_pty.broken = True
        with pytest.raises(TerminalError, match="Input/output error"):
            terminal.write(b"x")


# ---------------------------------------------------------------------------
# Output draining
# ---------------------------------------------------------------------------


class TestOutput:
    def test_queries_drain_pending_output(
        self, terminal: Terminal, fake_pty: FakePTY
    ) -> None:
        fake_pty.emit(b"hello")
        fake_pty.emit(b" world")
        assert terminal.get_content().splitlines()[0].rstrip() == "hello world"
        assert terminal.cursor_position() == (0, 11)

    def test_process_output_with_timeout_no_data(self, terminal: Terminal) -> None:
        assert terminal.process_output_with_timeout(0.01) is False

    def test_process_output_with_timeout_data(
        self, terminal: Terminal, fake_pty: FakePTY
    ) -> None:
        fake_pty.emit(b"a")
        fake_pty.emit(b"b")
        # Both chunks are drained up front; nothing new arrives.
        assert terminal.process_output_with_timeout(0.01) is False
        assert terminal.screen.row_text(0).startswith("ab")

    async def test_wait_for_output(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        assert await terminal.wait_for_output(0.01) is False
        assert terminal.screen.row_text(0).strip() == ""

    def test_content_is_full_grid(self, terminal: Terminal) -> None:
        content = terminal.get_content()
        lines = content.split("\n")
        assert len(lines) == 5
        assert all(len(line) == 20 for line in lines)


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


class TestContentRange:
    def test_range(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        fake_pty.emit(b"r0\r\nr1\r\nr2\r\nr3")
        lines = terminal.get_content_range(1, 3).split("\n")
        assert [line.rstrip() for line in lines] == ["r1", "r2"]

    def test_end_clamped(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        fake_pty.emit(b"r0\r\nr1\r\nr2\r\nr3\r\nr4")
        lines = terminal.get_content_range(3, 100).split("\n")
        assert [line.rstrip() for line in lines] == ["r3", "r4"]

    def test_empty_range(self, terminal: Terminal) -> None:
        assert terminal.get_content_range(3, 3) == ""
        assert terminal.get_content_range(4, 1) == ""
        assert terminal.get_content_range(10, 20) == ""


# ---------------------------------------------------------------------------
# Resize and close
# ---------------------------------------------------------------------------


class TestResize:
    def test_resize_updates_both(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        terminal.resize(80, 24)
        assert terminal.size == (80, 24)
        assert terminal.screen.size == (24, 80)
        assert fake_pty.size == (80, 24)

    def test_pending_output_processed_at_old_size(
        self, terminal: Terminal, fake_pty: FakePTY
    ) -> None:
        fake_pty.emit(b"x" * 25)
        terminal.resize(40, 5)
        assert terminal.screen.row_text(0).rstrip() == "x" * 20
        assert terminal.screen.row_text(1).rstrip() == "x" * 5

    def test_close(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        terminal.close()
        assert fake_pty.closed


# ---------------------------------------------------------------------------
# ANSI rendering
# ---------------------------------------------------------------------------


class TestRenderAnsi:
    def test_plain_screen(self) -> None:
        screen = Screen(1, 3)
        screen.process(b"abc")
        assert render_ansi(screen) == "\x1b[0mabc\x1b[0m"

    def test_repeated_style_emitted_once(self) -> None:
        screen = Screen(1, 3)
        screen.process(b"\x1b[31mabc")
        assert render_ansi(screen) == "\x1b[0m\x1b[31mabc\x1b[0m"

    def test_alternating_styles(self) -> None:
        screen = Screen(1, 4)
        screen.process(b"\x1b[1ma\x1b[0mb\x1b[1mc\x1b[0md")
        assert render_ansi(screen) == (
            "\x1b[0m\x1b[1ma\x1b[0mb\x1b[0m\x1b[1mc\x1b[0md\x1b[0m"
        )

    def test_every_row_reset(self) -> None:
        screen = Screen(2, 2)
        screen.process(b"\x1b[32mab\r\ncd")
        rows = render_ansi(screen).split("\n")
        assert len(rows) == 2
        for row in rows:
            assert row.startswith("\x1b[0m\x1b[32m")
            assert row.endswith("\x1b[0m")

    def test_strip_matches_contents(self) -> None:
        screen = Screen(3, 8)
        screen.process(
            b"\x1b[1;31mred\x1b[0m plain\r\n"
            b"\x1b[38;5;200mx\x1b[48;2;1;2;3my\x1b[0m\r\n\x1b[7minv"
        )
        assert strip_ansi(render_ansi(screen)) == screen.contents()

    def test_screenshot_drains(self, terminal: Terminal, fake_pty: FakePTY) -> None:
        fake_pty.emit(b"\x1b[34mblue")
        shot = terminal.take_screenshot()
        assert "\x1b[34mblue" in shot
        assert strip_ansi(shot) == terminal.get_content()


class TestStyleToSgr:
    def test_default_is_empty(self) -> None:
        assert style_to_sgr(CellStyle()) == ""

    def test_attribute_order(self) -> None:
        style = CellStyle(bold=True, italic=True, underline=True, inverse=True)
        assert style_to_sgr(style) == "\x1b[1;3;4;7m"

    def test_colors(self) -> None:
        assert style_to_sgr(CellStyle(fg=Color.indexed(3))) == "\x1b[33m"
        assert style_to_sgr(CellStyle(fg=Color.indexed(12))) == "\x1b[94m"
        assert style_to_sgr(CellStyle(bg=Color.indexed(9))) == "\x1b[101m"
        assert style_to_sgr(CellStyle(fg=Color.indexed(196))) == "\x1b[38;5;196m"
        assert style_to_sgr(CellStyle(bg=Color.from_rgb(1, 2, 3))) == "\x1b[48;2;1;2;3m"
