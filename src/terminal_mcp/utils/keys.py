"""Key encoder — map human-readable key names to terminal byte sequences."""

from __future__ import annotations

import string

# Named keys. Lookup is done on the lower-cased name.
_NAMED_KEYS: dict[str, str] = {
    # Basic keys
    "enter": "\r",
    "return": "\r",
    "tab": "\t",
    "escape": "\x1b",
    "esc": "\x1b",
    "backspace": "\x7f",
    "delete": "\x1b[3~",
    "del": "\x1b[3~",
    "space": " ",
    # Arrow keys
    "up": "\x1b[A",
    "arrowup": "\x1b[A",
    "down": "\x1b[B",
    "arrowdown": "\x1b[B",
    "right": "\x1b[C",
    "arrowright": "\x1b[C",
    "left": "\x1b[D",
    "arrowleft": "\x1b[D",
    # Navigation
    "home": "\x1b[H",
    "end": "\x1b[F",
    "pageup": "\x1b[5~",
    "pgup": "\x1b[5~",
    "pagedown": "\x1b[6~",
    "pgdn": "\x1b[6~",
    "insert": "\x1b[2~",
    "ins": "\x1b[2~",
    # Function keys (F1-F4 are SS3-encoded)
    "f1": "\x1bOP",
    "f2": "\x1bOQ",
    "f3": "\x1bOR",
    "f4": "\x1bOS",
    "f5": "\x1b[15~",
    "f6": "\x1b[17~",
    "f7": "\x1b[18~",
    "f8": "\x1b[19~",
    "f9": "\x1b[20~",
    "f10": "\x1b[21~",
    "f11": "\x1b[23~",
    "f12": "\x1b[24~",
}

_CTRL_PREFIXES = ("ctrl+", "ctrl-", "c-")
_ALT_PREFIXES = ("alt+", "alt-", "m-")

_CTRL_PUNCTUATION: dict[str, str] = {
    "[": "\x1b",
    "\\": "\x1c",
    "]": "\x1d",
    "^": "\x1e",
    "_": "\x1f",
}


def _build_table() -> dict[str, str]:
    table = dict(_NAMED_KEYS)
    for letter in string.ascii_lowercase:
        code = chr(ord(letter) - ord("a") + 1)
        for prefix in _CTRL_PREFIXES:
            table[prefix + letter] = code
    # The short "c-" form is letters only.
    for char, code in _CTRL_PUNCTUATION.items():
        table["ctrl+" + char] = code
        table["ctrl-" + char] = code
    return table


KEY_TABLE: dict[str, str] = _build_table()


def key_to_sequence(key: str) -> str:
    """Convert a key name such as ``"Ctrl+C"`` or ``"F5"`` to its sequence.

    Matching is case-insensitive. ``alt+<x>`` / ``alt-<x>`` / ``m-<x>``
    produce ESC followed by ``<x>``.

    Unrecognized names are returned unchanged so they reach the shell as
    literal text. A malformed key name never fails the call.
    """
    lowered = key.lower()
    sequence = KEY_TABLE.get(lowered)
    if sequence is not None:
        return sequence

    for prefix in _ALT_PREFIXES:
        if lowered.startswith(prefix):
            return "\x1b" + lowered[len(prefix):]

    return key


def encode(key: str) -> bytes:
    """Encode a key name to the raw bytes written to the PTY."""
    return key_to_sequence(key).encode("utf-8")


def parse_key_combo(combo: str) -> list[str]:
    """Split a combination like ``"Ctrl + Shift + T"`` into its parts."""
    return [part.strip() for part in combo.split("+")]
