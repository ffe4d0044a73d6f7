"""PTY process management — one pseudo-terminal running the shell.

The shell's output is read by a dedicated thread and handed over through
a queue; that queue is the only bridge between blocking PTY reads and the
rest of the server.
"""

from terminal_mcp.pty.session import (
    PTYCreateError,
    PTYError,
    PTYResizeError,
    PTYSession,
    PTYSpawnError,
    PTYStatus,
    PTYWriteError,
)

__all__ = [
    "PTYSession",
    "PTYStatus",
    "PTYError",
    "PTYCreateError",
    "PTYSpawnError",
    "PTYWriteError",
    "PTYResizeError",
]
