"""PTY session — one pseudo-terminal with a shell attached to its slave side."""

from __future__ import annotations

import enum
import fcntl
import logging
import os
import pty
import queue
import select
import struct
import subprocess
import termios
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from terminal_mcp.config import TerminalConfig

logger = logging.getLogger(__name__)

READ_CHUNK = 4096


class PTYError(Exception):
    """Base class for PTY failures."""


class PTYCreateError(PTYError):
    """The pseudo-terminal pair could not be allocated."""


class PTYSpawnError(PTYError):
    """The shell could not be started on the slave side."""


class PTYWriteError(PTYError):
    """Writing to the PTY master failed."""


class PTYResizeError(PTYError):
    """The window size could not be applied."""


class PTYStatus(enum.Enum):
    """Lifecycle states for a PTY session."""

    NEW = "new"
    RUNNING = "running"
    EXITED = "exited"  # Reader hit EOF: the shell went away on its own
    CLOSED = "closed"  # Master closed by us


def _set_winsize(fd: int, cols: int, rows: int) -> None:
    fcntl.ioctl(fd, termios.TIOCSWINSZ, struct.pack("HHHH", rows, cols, 0, 0))


def _make_controlling_tty() -> None:
    # Runs in the child after setsid(): adopt stdin (the slave) as the
    # controlling terminal so job control and SIGINT from Ctrl+C work.
    fcntl.ioctl(0, termios.TIOCSCTTY, 0)


@dataclass
class PTYSession:
    """A shell running on a pseudo-terminal.

    Output is produced by a dedicated reader thread that waits on the master
    and forwards each chunk to ``output``. That queue is the only path by
    which PTY output leaves this object; the thread is its only producer.

    ``close()`` wakes the reader through a pipe and joins it before closing
    the master, so the shell gets its hangup as soon as the session closes.

    Uses subprocess.Popen (not os.fork) so spawning is safe from within a
    running asyncio event loop.
    """

    shell: str
    cols: int = 120
    rows: int = 40
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)

    output: queue.Queue[bytes] = field(default_factory=queue.Queue, init=False)
    _master_fd: int = field(default=-1, init=False)
    _proc: subprocess.Popen | None = field(default=None, init=False)
    _reader: threading.Thread | None = field(default=None, init=False)
    _wake_r: int = field(default=-1, init=False)
    _wake_w: int = field(default=-1, init=False)
    _status: PTYStatus = field(default=PTYStatus.NEW, init=False)

    @classmethod
    def create(cls, config: TerminalConfig) -> PTYSession:
        """Build and start a session from a terminal configuration."""
        session = cls(
            shell=config.shell,
            cols=config.cols,
            rows=config.rows,
            cwd=config.working_dir,
            env=dict(config.env),
        )
        session.start()
        return session

    def start(self) -> None:
        """Open the PTY pair, spawn the shell and start the reader thread."""
        try:
            master_fd, slave_fd = pty.openpty()
        except OSError as e:
            raise PTYCreateError(f"Failed to create PTY: {e}") from e

        try:
            _set_winsize(master_fd, self.cols, self.rows)
        except OSError as e:
            os.close(master_fd)
            os.close(slave_fd)
            raise PTYCreateError(f"Failed to set PTY size: {e}") from e

        env = {**os.environ, **self.env}
        env["TERM"] = "xterm-256color"

        try:
            self._proc = subprocess.Popen(
                [self.shell],
                stdin=slave_fd,
                stdout=slave_fd,
                stderr=slave_fd,
                start_new_session=True,
                preexec_fn=_make_controlling_tty,
                env=env,
                cwd=self.cwd,
                close_fds=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            os.close(master_fd)
            raise PTYSpawnError(f"Failed to spawn {self.shell}: {e}") from e
        finally:
            # Parent always closes slave fd
            os.close(slave_fd)

        self._master_fd = master_fd
        self._wake_r, self._wake_w = os.pipe()
        self._status = PTYStatus.RUNNING
        self._reader = threading.Thread(
            target=self._read_loop, name=f"pty-reader-{self._proc.pid}", daemon=True
        )
        self._reader.start()

        logger.info(
            "PTY created with shell: %s, size: %dx%d, pid=%d",
            self.shell,
            self.cols,
            self.rows,
            self._proc.pid,
        )

    def _read_loop(self) -> None:
        """Read the master until EOF, error or a wake-up from ``close()``."""
        fd, wake = self._master_fd, self._wake_r
        while True:
            try:
                ready, _, _ = select.select([fd, wake], [], [])
                if wake in ready:
                    logger.debug("PTY reader woken for close")
                    break
                data = os.read(fd, READ_CHUNK)
            except OSError as e:
                # EIO once the slave side has no more writers.
                logger.debug("PTY reader stopped: %s", e)
                break
            if not data:
                logger.debug("PTY reader EOF")
                break
            self.output.put(data)

        if self._status == PTYStatus.RUNNING:
            self._status = PTYStatus.EXITED
            logger.info("PTY shell exited (code=%s)", self.exit_code)

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    def write(self, data: bytes) -> int:
        """Write bytes to the shell. Returns the number of bytes accepted."""
        if self._status in (PTYStatus.NEW, PTYStatus.CLOSED):
            raise PTYWriteError("Failed to write to PTY: session is not open")
        try:
            written = os.write(self._master_fd, data)
        except OSError as e:
            raise PTYWriteError(f"Failed to write to PTY: {e}") from e
        logger.debug("Wrote %d bytes to PTY", written)
        return written

    def resize(self, cols: int, rows: int) -> None:
        """Apply a new window size; the shell receives SIGWINCH."""
        if self._status in (PTYStatus.NEW, PTYStatus.CLOSED):
            raise PTYResizeError("Failed to resize PTY: session is not open")
        try:
            _set_winsize(self._master_fd, cols, rows)
        except OSError as e:
            raise PTYResizeError(f"Failed to resize PTY: {e}") from e
        self.cols = cols
        self.rows = rows
        logger.info("PTY resized to %dx%d", cols, rows)

    def close(self, timeout: float = 1.0) -> None:
        """Stop the reader and close the master. The shell sees a hangup.

        The child is reaped if it goes away within ``timeout``; it is not
        signalled explicitly.
        """
        if self._status in (PTYStatus.NEW, PTYStatus.CLOSED):
            return
        self._status = PTYStatus.CLOSED
        try:
            os.write(self._wake_w, b"\0")
        except OSError:
            pass
        reader = self._reader
        if reader is not None and reader is not threading.current_thread():
            reader.join(timeout=timeout)
            if reader.is_alive():
                logger.debug("PTY reader still running after %.1fs", timeout)

        for fd in (self._master_fd, self._wake_r, self._wake_w):
            try:
                os.close(fd)
            except OSError:
                pass

        if self._proc is not None:
            try:
                self._proc.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.debug("Shell pid=%d still running after close", self._proc.pid)
        logger.info("PTY session closed")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def size(self) -> tuple[int, int]:
        """(cols, rows)"""
        return self.cols, self.rows

    @property
    def pid(self) -> int | None:
        return self._proc.pid if self._proc is not None else None

    @property
    def exit_code(self) -> int | None:
        return self._proc.poll() if self._proc is not None else None

    @property
    def status(self) -> PTYStatus:
        return self._status

    @property
    def alive(self) -> bool:
        return self._status == PTYStatus.RUNNING and self.exit_code is None

    def __del__(self) -> None:
        """Ensure the master is closed on garbage collection."""
        if self._status == PTYStatus.RUNNING:
            self.close(timeout=0)
