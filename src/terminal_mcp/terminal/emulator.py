"""Terminal session engine — a PTY session feeding a screen model."""

from __future__ import annotations

import asyncio
import logging
import queue

from terminal_mcp.config import TerminalConfig
from terminal_mcp.pty.session import PTYError, PTYSession
from terminal_mcp.terminal.screen import DEFAULT_SCROLLBACK, CellStyle, Color, ColorKind, Screen
from terminal_mcp.utils.keys import encode

logger = logging.getLogger(__name__)

SGR_RESET = "\x1b[0m"
CLEAR_SEQUENCE = b"\x1b[2J\x1b[H"


class TerminalError(Exception):
    """A terminal operation failed. Wraps the underlying PTY error."""


class Terminal:
    """A headless terminal: one shell, one screen.

    Every read-oriented query first drains the output already produced by
    the shell into the screen (without waiting for more), so results always
    reflect what the shell has written so far.

    Not internally locked. Callers that share a ``Terminal`` across tasks
    serialize access themselves.
    """

    def __init__(self, config: TerminalConfig) -> None:
        try:
            pty_session = PTYSession.create(config)
        except PTYError as e:
            raise TerminalError(str(e)) from e
        self._init(pty_session, Screen(config.rows, config.cols, DEFAULT_SCROLLBACK))
        logger.info(
            "Terminal created with shell: %s, size: %dx%d",
            config.shell,
            config.cols,
            config.rows,
        )

    @classmethod
    def from_parts(cls, pty_session: PTYSession, screen: Screen) -> Terminal:
        """Assemble a terminal from an existing PTY session and screen."""
        terminal = cls.__new__(cls)
        terminal._init(pty_session, screen)
        return terminal

    def _init(self, pty_session: PTYSession, screen: Screen) -> None:
        self._pty = pty_session
        self._screen = screen

    @property
    def screen(self) -> Screen:
        return self._screen

    # ------------------------------------------------------------------
    # Output draining
    # ------------------------------------------------------------------

    def process_output(self) -> None:
        """Feed all currently queued PTY output into the screen."""
        output = self._pty.output
        while True:
            try:
                data = output.get_nowait()
            except queue.Empty:
                return
            self._screen.process(data)

    def process_output_with_timeout(self, timeout: float) -> bool:
        """Drain, then wait up to ``timeout`` seconds for one more chunk.

        Returns True if a fresh chunk arrived within the timeout.
        """
        self.process_output()
        try:
            data = self._pty.output.get(timeout=timeout)
        except queue.Empty:
            return False
        self._screen.process(data)
        self.process_output()
        return True

    async def wait_for_output(self, timeout: float) -> bool:
        """Async form of ``process_output_with_timeout``.

        The blocking wait runs in the default executor so the event loop
        stays responsive.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.process_output_with_timeout, timeout)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def write(self, data: bytes) -> int:
        try:
            return self._pty.write(data)
        except PTYError as e:
            raise TerminalError(str(e)) from e

    def write_str(self, text: str) -> int:
        return self.write(text.encode("utf-8"))

    def send_key(self, key: str) -> None:
        """Send a named key (``"Enter"``, ``"Ctrl+C"``, ``"F5"``, ...)."""
        self.write(encode(key))

    def clear(self) -> None:
        """Ask the terminal to clear the screen and home the cursor.

        The sequence goes through the PTY like any other input, so the
        effect depends on the shell passing it through.
        """
        self.write(CLEAR_SEQUENCE)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_content(self) -> str:
        self.process_output()
        return self._screen.contents()

    def get_content_range(self, start_row: int, end_row: int) -> str:
        """Rows ``start_row`` (inclusive) to ``end_row`` (exclusive), clamped."""
        self.process_output()
        _, rows = self.size
        end = min(end_row, rows)
        _, cols = self._screen.size
        lines = [
            self._screen.contents_between(row, 0, row, cols)
            for row in range(max(0, start_row), end)
        ]
        return "\n".join(lines)

    def take_screenshot(self) -> str:
        """Render the screen as text with SGR sequences for styling."""
        self.process_output()
        return render_ansi(self._screen)

    def cursor_position(self) -> tuple[int, int]:
        """(row, col)"""
        self.process_output()
        return self._screen.cursor_position()

    @property
    def size(self) -> tuple[int, int]:
        """(cols, rows)"""
        return self._pty.size

    def resize(self, cols: int, rows: int) -> None:
        """Resize the PTY and the screen together."""
        # Output produced at the old size is interpreted at the old size.
        self.process_output()
        try:
            self._pty.resize(cols, rows)
        except PTYError as e:
            raise TerminalError(str(e)) from e
        self._screen.set_size(rows, cols)
        logger.info("Terminal resized to %dx%d", cols, rows)

    def close(self) -> None:
        self._pty.close()


# ----------------------------------------------------------------------
# ANSI re-encoding
# ----------------------------------------------------------------------


def render_ansi(screen: Screen) -> str:
    """Re-encode the screen grid as ANSI text.

    Walks each row left to right keeping the last emitted style. Whenever
    a cell's style differs (or at the start of a row) a full reset is
    emitted followed by the new style's codes. Each row ends with a
    reset; rows are joined with newlines.
    """
    rows, cols = screen.size
    lines: list[str] = []
    for row in range(rows):
        parts: list[str] = []
        current: CellStyle | None = None
        for col in range(cols):
            cell = screen.cell(row, col)
            if cell.style != current:
                parts.append(SGR_RESET)
                parts.append(style_to_sgr(cell.style))
                current = cell.style
            parts.append(cell.char)
        parts.append(SGR_RESET)
        lines.append("".join(parts))
    return "\n".join(lines)


def style_to_sgr(style: CellStyle) -> str:
    """SGR sequence for a style; empty when everything is default."""
    codes: list[str] = []
    if style.bold:
        codes.append("1")
    if style.italic:
        codes.append("3")
    if style.underline:
        codes.append("4")
    if style.inverse:
        codes.append("7")

    fg = _color_code(style.fg, base=30, bright_base=90, extended=38)
    if fg:
        codes.append(fg)
    bg = _color_code(style.bg, base=40, bright_base=100, extended=48)
    if bg:
        codes.append(bg)

    if not codes:
        return ""
    return f"\x1b[{';'.join(codes)}m"


def _color_code(color: Color, base: int, bright_base: int, extended: int) -> str:
    if color.kind is ColorKind.INDEXED:
        idx = color.index
        if idx < 8:
            return str(base + idx)
        if idx < 16:
            return str(bright_base + idx - 8)
        return f"{extended};5;{idx}"
    if color.kind is ColorKind.RGB:
        r, g, b = color.rgb
        return f"{extended};2;{r};{g};{b}"
    return ""
