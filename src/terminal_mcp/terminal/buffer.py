"""Text helpers for terminal content returned to the caller."""

from __future__ import annotations

import re

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[a-zA-Z]")


def strip_ansi(text: str) -> str:
    """Strip CSI escape sequences from text."""
    return _ANSI_RE.sub("", text)


def trim_trailing_whitespace(text: str) -> str:
    """Trim trailing whitespace from each line, keeping the line structure."""
    return "\n".join(line.rstrip() for line in text.split("\n"))


def trim_trailing_empty_lines(text: str) -> str:
    """Drop blank lines from the end of the text."""
    lines = text.split("\n")
    end = len(lines)
    while end > 0 and not lines[end - 1].strip():
        end -= 1
    return "\n".join(lines[:end])


def clean_output(text: str) -> str:
    """Remove trailing whitespace per line and trailing empty lines.

    Idempotent: ``clean_output(clean_output(x)) == clean_output(x)``.
    """
    return trim_trailing_empty_lines(trim_trailing_whitespace(text))
