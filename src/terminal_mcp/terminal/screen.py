"""Screen model — a pyte ``HistoryScreen`` exposed as a grid of styled cells.

The screen is a pure sink: raw PTY output is pushed in with ``process()``
and pyte updates the grid, cursor and scrollback as each character
arrives. ``ByteStream`` buffers escape sequences and multibyte UTF-8
characters that are split across chunks.

pyte keeps colors as names or hex strings, which loses the difference
between a palette entry and a true-color triple. ``_VirtualScreen``
re-encodes every SGR color as a token that keeps its kind, and adds the
xterm alternate screen and CSI S/T/s/u, which pyte lacks.
"""

from __future__ import annotations

import enum
import functools
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any

import pyte
from pyte.screens import Char, Margins

logger = logging.getLogger(__name__)

DEFAULT_SCROLLBACK = 1000

# Private modes that switch to the alternate buffer; 1049 also saves the cursor.
ALT_SCREEN_MODES = frozenset({47, 1047, 1049})
# DECCOLM would resize the grid behind the PTY's back.
IGNORED_PRIVATE_MODES = frozenset({3})

DEFAULT_TOKEN = "default"


class ColorKind(enum.Enum):
    DEFAULT = "default"
    INDEXED = "indexed"
    RGB = "rgb"


@dataclass(frozen=True)
class Color:
    """A cell color: the terminal default, a palette index or a 24-bit triple."""

    kind: ColorKind = ColorKind.DEFAULT
    index: int = 0
    rgb: tuple[int, int, int] = (0, 0, 0)

    @classmethod
    def indexed(cls, index: int) -> Color:
        return cls(kind=ColorKind.INDEXED, index=index)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> Color:
        return cls(kind=ColorKind.RGB, rgb=(r, g, b))

    @property
    def is_default(self) -> bool:
        return self.kind is ColorKind.DEFAULT


DEFAULT_COLOR = Color()


@dataclass(frozen=True)
class CellStyle:
    """Rendering attributes of a cell, excluding its content."""

    fg: Color = DEFAULT_COLOR
    bg: Color = DEFAULT_COLOR
    bold: bool = False
    italic: bool = False
    underline: bool = False
    inverse: bool = False


DEFAULT_STYLE = CellStyle()


@dataclass(frozen=True)
class Cell:
    """One grid position.

    ``char`` is a space for a blank cell and empty for the right half of
    a double-width character.
    """

    char: str = " "
    style: CellStyle = DEFAULT_STYLE

    @property
    def fg(self) -> Color:
        return self.style.fg

    @property
    def bg(self) -> Color:
        return self.style.bg

    @property
    def bold(self) -> bool:
        return self.style.bold

    @property
    def italic(self) -> bool:
        return self.style.italic

    @property
    def underline(self) -> bool:
        return self.style.underline

    @property
    def inverse(self) -> bool:
        return self.style.inverse


# ---------------------------------------------------------------------------
# Color tokens
# ---------------------------------------------------------------------------


def _indexed_token(index: int) -> str:
    return f"i{index}"


def _rgb_token(r: int, g: int, b: int) -> str:
    return "#{:02x}{:02x}{:02x}".format(*(min(v, 255) for v in (r, g, b)))


@functools.lru_cache(maxsize=None)
def _token_color(token: str) -> Color:
    if token.startswith("i"):
        return Color.indexed(int(token[1:]))
    if token.startswith("#"):
        value = int(token[1:], 16)
        return Color.from_rgb(value >> 16, (value >> 8) & 0xFF, value & 0xFF)
    return DEFAULT_COLOR


def _extended_color(params: list[int]) -> tuple[str | None, int]:
    """Token for the parameters after 38/48/58, and how many it consumed."""
    if not params:
        return None, 0
    if params[0] == 5:
        if len(params) < 2:
            return None, len(params)
        return (_indexed_token(params[1]) if params[1] < 256 else None), 2
    if params[0] == 2:
        if len(params) < 4:
            return None, len(params)
        return _rgb_token(*params[1:4]), 4
    return None, 1


@functools.lru_cache(maxsize=4096)
def _to_cell(char: Char) -> Cell:
    return Cell(
        char=char.data,
        style=CellStyle(
            fg=_token_color(char.fg),
            bg=_token_color(char.bg),
            bold=char.bold,
            italic=char.italics,
            underline=char.underscore,
            inverse=char.reverse,
        ),
    )


# ---------------------------------------------------------------------------
# pyte screen
# ---------------------------------------------------------------------------


class _VirtualScreen(pyte.HistoryScreen):
    """``HistoryScreen`` with kind-preserving colors and an alternate buffer."""

    def __init__(self, columns: int, lines: int, history: int) -> None:
        self._main_buffer: Any = None  # set while the alt screen is active
        super().__init__(columns, lines, history=history)

    @property
    def alternate(self) -> bool:
        return self._main_buffer is not None

    def select_graphic_rendition(self, *attrs: int, **kwargs: Any) -> None:
        if kwargs.get("private"):
            return
        before = self.cursor.attrs
        super().select_graphic_rendition(*attrs)

        fg, bg, bold = before.fg, before.bg, before.bold
        codes = list(attrs) or [0]
        i = 0
        while i < len(codes):
            code = codes[i]
            if code == 0:
                fg, bg, bold = DEFAULT_TOKEN, DEFAULT_TOKEN, False
            elif code == 1:
                bold = True
            elif code == 22:
                bold = False
            elif 30 <= code <= 37:
                fg = _indexed_token(code - 30)
            elif 40 <= code <= 47:
                bg = _indexed_token(code - 40)
            elif 90 <= code <= 97:
                fg = _indexed_token(code - 90 + 8)
            elif 100 <= code <= 107:
                bg = _indexed_token(code - 100 + 8)
            elif code == 39:
                fg = DEFAULT_TOKEN
            elif code == 49:
                bg = DEFAULT_TOKEN
            elif code in (38, 48, 58):
                token, used = _extended_color(codes[i + 1:])
                i += used
                if token is not None and code == 38:
                    fg = token
                elif token is not None and code == 48:
                    bg = token
            i += 1
        # pyte turns bright colors into bold; only SGR 1/22 touch bold here.
        self.cursor.attrs = self.cursor.attrs._replace(fg=fg, bg=bg, bold=bold)

    def set_mode(self, *modes: int, **kwargs: Any) -> None:
        if kwargs.get("private"):
            modes = self._private_modes(modes, enabled=True)
        super().set_mode(*modes, **kwargs)

    def reset_mode(self, *modes: int, **kwargs: Any) -> None:
        if kwargs.get("private"):
            modes = self._private_modes(modes, enabled=False)
        super().reset_mode(*modes, **kwargs)

    def _private_modes(self, modes: tuple[int, ...], enabled: bool) -> tuple[int, ...]:
        rest = []
        for mode in modes:
            if mode in ALT_SCREEN_MODES:
                self._switch_alternate(enabled, save_cursor=mode == 1049)
            elif mode not in IGNORED_PRIVATE_MODES:
                rest.append(mode)
        return tuple(rest)

    def _switch_alternate(self, enabled: bool, save_cursor: bool) -> None:
        if enabled == self.alternate:
            return
        if enabled:
            if save_cursor:
                self.save_cursor()
            self._main_buffer = self.buffer
            self.buffer = defaultdict(self._main_buffer.default_factory)
        else:
            self.buffer = self._main_buffer
            self._main_buffer = None
            if save_cursor:
                self.restore_cursor()
        self.dirty.update(range(self.lines))

    def index(self) -> None:
        top, bottom = self.margins or Margins(0, self.lines - 1)
        # Only full-screen scrolls of the main buffer feed the history.
        if not self.alternate and top == 0 and self.cursor.y == bottom:
            self.history.top.append(self.buffer[top])
        pyte.Screen.index(self)

    def scroll_up(self, count: int = 0, *args: Any, **kwargs: Any) -> None:
        """SU: scroll the region up ``count`` lines; the cursor stays put."""
        _, bottom = self.margins or Margins(0, self.lines - 1)
        y = self.cursor.y
        self.cursor.y = bottom
        for _ in range(count or 1):
            self.index()
        self.cursor.y = y

    def scroll_down(self, count: int = 0, *args: Any, **kwargs: Any) -> None:
        """SD: scroll the region down ``count`` lines; the cursor stays put."""
        top, _ = self.margins or Margins(0, self.lines - 1)
        y = self.cursor.y
        self.cursor.y = top
        for _ in range(count or 1):
            pyte.Screen.reverse_index(self)
        self.cursor.y = y

    def csi_save_cursor(self, *args: Any, **kwargs: Any) -> None:
        if not kwargs.get("private"):
            self.save_cursor()

    def csi_restore_cursor(self, *args: Any, **kwargs: Any) -> None:
        if not kwargs.get("private"):
            self.restore_cursor()

    def reset(self) -> None:
        if self.alternate:
            self.buffer = self._main_buffer
            self._main_buffer = None
        super().reset()

    def fit(self, rows: int, cols: int) -> None:
        """Resize, scrolling rows above the cursor into history if needed."""
        old_cols = self.columns
        overflow = max(0, self.cursor.y - (rows - 1))
        if not self.alternate:
            for y in range(overflow):
                self.history.top.append(self.buffer[y])
        self.buffer = _fit_buffer(self.buffer, rows, cols, overflow)
        if self.alternate:
            self._main_buffer = _fit_buffer(self._main_buffer, rows, cols, 0)
        self.cursor.y -= overflow

        # Rows are already fitted; resize() only has columns and margins left.
        self.lines = rows
        self.resize(rows, cols)
        self.set_margins()
        if cols > old_cols:
            self.tabstops.update(x for x in range(8, cols, 8) if x >= old_cols)
        self.ensure_hbounds()
        self.ensure_vbounds()
        self.dirty.update(range(rows))


class _ByteStream(pyte.ByteStream):
    """``ByteStream`` that also routes SU/SD and the ANSI cursor save/restore."""

    csi = dict(
        pyte.ByteStream.csi,
        S="scroll_up",
        T="scroll_down",
        s="csi_save_cursor",
        u="csi_restore_cursor",
    )


def _fit_buffer(buffer: Any, rows: int, cols: int, shift: int) -> Any:
    """Copy of ``buffer`` with rows moved up by ``shift`` and clipped to size."""
    fitted = defaultdict(buffer.default_factory)
    for y, line in buffer.items():
        if shift <= y < rows + shift:
            for x in [x for x in line if x >= cols]:
                del line[x]
            fitted[y - shift] = line
    return fitted


def _line_text(line: Any, cols: int) -> str:
    return "".join(line[x].data for x in range(cols))


class Screen:
    """A ``rows x cols`` terminal screen with bounded scrollback.

    Cursor invariant: ``0 <= row < rows`` and ``0 <= col < cols`` as
    reported by ``cursor_position()``. pyte parks the cursor one past the
    last column while a wrap is pending; that is reported as the last
    column.
    """

    def __init__(
        self, rows: int, cols: int, scrollback: int = DEFAULT_SCROLLBACK
    ) -> None:
        if rows < 1 or cols < 1:
            raise ValueError(f"Screen size must be positive, got {rows}x{cols}")
        self._screen = _VirtualScreen(cols, rows, history=scrollback)
        self._stream = _ByteStream(self._screen)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def size(self) -> tuple[int, int]:
        """(rows, cols)"""
        return self._screen.lines, self._screen.columns

    @property
    def cursor_visible(self) -> bool:
        return not self._screen.cursor.hidden

    @property
    def alternate_screen(self) -> bool:
        return self._screen.alternate

    @property
    def scrollback(self) -> list[str]:
        """Text of the lines that scrolled off the top, oldest first."""
        cols = self._screen.columns
        return [_line_text(line, cols) for line in self._screen.history.top]

    def cursor_position(self) -> tuple[int, int]:
        """(row, col), zero-based."""
        rows, cols = self.size
        cursor = self._screen.cursor
        return min(cursor.y, rows - 1), min(cursor.x, cols - 1)

    def cell(self, row: int, col: int) -> Cell:
        rows, cols = self.size
        if not (0 <= row < rows and 0 <= col < cols):
            raise IndexError(f"Cell ({row}, {col}) outside {rows}x{cols}")
        return _to_cell(self._screen.buffer[row][col])

    def row_text(self, row: int) -> str:
        return _line_text(self._screen.buffer[row], self._screen.columns)

    def contents(self) -> str:
        """All rows at full width (blank cells as spaces), newline-joined."""
        return "\n".join(self.row_text(row) for row in range(self._screen.lines))

    def contents_between(
        self, row_start: int, col_start: int, row_end: int, col_end: int
    ) -> str:
        """Text from ``(row_start, col_start)`` up to ``(row_end, col_end)``.

        Rows are inclusive, the end column is exclusive. Out-of-range
        positions are clamped.
        """
        rows, cols = self.size
        row_start = max(0, row_start)
        row_end = min(row_end, rows - 1)
        if row_start > row_end:
            return ""
        col_start = min(max(0, col_start), cols)
        col_end = min(max(0, col_end), cols)

        def span(row: int, start: int, end: int) -> str:
            line = self._screen.buffer[row]
            return "".join(line[x].data for x in range(start, end))

        if row_start == row_end:
            return span(row_start, col_start, col_end)

        parts = [span(row_start, col_start, cols)]
        for row in range(row_start + 1, row_end):
            parts.append(self.row_text(row))
        parts.append(span(row_end, 0, col_end))
        return "\n".join(parts)

    def process(self, data: bytes) -> None:
        """Feed raw output bytes into the screen."""
        self._stream.feed(data)

    def set_size(self, rows: int, cols: int) -> None:
        """Resize the grid, clipping or padding rows and columns.

        When shrinking below the cursor, rows are pushed off the top into
        scrollback so the cursor line stays visible.
        """
        if rows < 1 or cols < 1:
            raise ValueError(f"Screen size must be positive, got {rows}x{cols}")

        self._screen.fit(rows, cols)
        logger.debug("Screen resized to %dx%d", rows, cols)

    def reset(self) -> None:
        """Full reset (RIS), scrollback included."""
        self._screen.reset()
