"""Non-blocking single-key input and key bindings."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from types import TracebackType
from typing import TextIO

from pomoterm.engine import Command

_READ_CHUNK = 1024

KEY_BINDINGS: dict[str, Command] = {
    "s": Command.START,
    "p": Command.PAUSE,
    "r": Command.RESUME,
    "n": Command.SKIP,
    "e": Command.END,
    "c": Command.CONTINUE,
    "q": Command.QUIT,
}


def bind_key(key: str | None) -> Command | None:
    """Map a key press to a command. Unknown keys map to None."""
    if not key:
        return None
    return KEY_BINDINGS.get(key.lower())


class TerminalUnavailableError(RuntimeError):
    """stdin is not a terminal that can be switched to cbreak mode."""


class KeyReader:
    """Reads single key presses from stdin without blocking.

    Use as a context manager: the terminal is put into cbreak mode on
    entry and restored on exit.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdin
        self._saved: list | None = None

    def __enter__(self) -> KeyReader:
        try:
            fd = self.stream.fileno()
            self._saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (termios.error, OSError) as e:
            raise TerminalUnavailableError(f"Cannot read keys from this terminal: {e}") from e
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._saved is not None:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None

    def read_key(self) -> str | None:
        """Return the first pending character, or None if no key was pressed.

        Anything else typed since the last poll is discarded.
        """
        fd = self.stream.fileno()
        ready, _, _ = select.select([fd], [], [], 0)
        if not ready:
            return None
        pending = os.read(fd, _READ_CHUNK).decode("utf-8", errors="ignore")
        return pending[:1] or None
