from __future__ import annotations

import os
import select
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Final

_ESCAPE_TIMEOUT_S: Final[float] = 0.025
_ESCAPE_SEQUENCES: Final[dict[str, str]] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageup",
    "\x1b[6~": "pagedown",
}
_CONTROL_KEYS: Final[dict[str, str]] = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x1b": "escape",
    " ": "space",
}


def decode_key(data: bytes) -> str:
    """Map raw terminal bytes to a Textual-style key name (`up`, `enter`, `q`, ...)."""

    text = data.decode("utf-8", errors="replace")
    if text in _ESCAPE_SEQUENCES:
        return _ESCAPE_SEQUENCES[text]
    if text in _CONTROL_KEYS:
        return _CONTROL_KEYS[text]
    if len(text) == 1 and ord(text) < 0x20:
        return f"ctrl+{chr(ord(text) + 0x60)}"
    return text


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


class TerminalInput:
    """Poll-based key reader over a terminal file descriptor in cbreak mode."""

    def __init__(self, fd: int) -> None:
        self._fd = fd

    def _ready(self, timeout: float) -> bool:
        ready, _, _ = select.select([self._fd], [], [], timeout)
        return bool(ready)

    def _read(self, count: int) -> bytes:
        data = os.read(self._fd, count)
        if not data:
            raise EOFError("Terminal input closed")
        return data

    def read_key(self, timeout: float) -> str | None:
        if not self._ready(timeout):
            return None
        data = self._read(1)
        if data == b"\x1b":
            if self._ready(_ESCAPE_TIMEOUT_S):
                data += self._read(16)
        else:
            remaining = _utf8_length(data[0]) - 1
            while remaining > 0 and self._ready(_ESCAPE_TIMEOUT_S):
                chunk = self._read(remaining)
                data += chunk
                remaining -= len(chunk)
        return decode_key(data)


@contextmanager
def terminal_session(fd: int | None = None) -> Iterator[TerminalInput]:
    """Put the terminal in cbreak mode; saved attributes are restored on exit."""

    import termios
    import tty

    target = sys.stdin.fileno() if fd is None else fd
    saved = termios.tcgetattr(target)
    try:
        tty.setcbreak(target)
        yield TerminalInput(target)
    finally:
        termios.tcsetattr(target, termios.TCSADRAIN, saved)
