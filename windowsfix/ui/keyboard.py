"""Raw keyboard input for the terminal menu.

``KeyReader`` puts the terminal in cbreak mode (or uses ``msvcrt`` on
Windows) and polls for single keys without blocking the caller for longer
than ``poll_interval``. ``map_key`` turns a key name into a menu event.
"""

from __future__ import annotations

import codecs
import os
import sys
import time
from typing import Optional

from windowsfix.logging import LoggerFactory
from windowsfix.menu.model import Activate, Event, MoveDown, MoveUp, Quit

if sys.platform == "win32":
    import msvcrt
else:
    import select
    import termios
    import tty

log = LoggerFactory.for_input()

# How long to wait for the rest of an escape sequence after "\x1b".
ESCAPE_WAIT = 0.01

KEY_UP = "up"
KEY_DOWN = "down"
KEY_ENTER = "enter"
KEY_SPACE = "space"
KEY_CTRL_C = "ctrl+c"

ESCAPE_SEQUENCES = {
    "\x1b[A": KEY_UP,
    "\x1b[B": KEY_DOWN,
    "\x1bOA": KEY_UP,
    "\x1bOB": KEY_DOWN,
}

# msvcrt reports arrows as a "\x00" or "\xe0" prefix followed by a scan code.
WINDOWS_SCAN_CODES = {
    "H": KEY_UP,
    "P": KEY_DOWN,
}

SINGLE_KEYS = {
    "\r": KEY_ENTER,
    "\n": KEY_ENTER,
    " ": KEY_SPACE,
    "\x03": KEY_CTRL_C,
}

KEY_EVENTS = {
    KEY_UP: MoveUp(),
    "k": MoveUp(),
    KEY_DOWN: MoveDown(),
    "j": MoveDown(),
    KEY_ENTER: Activate(),
    KEY_SPACE: Activate(),
    "q": Quit(),
    KEY_CTRL_C: Quit(),
}


def decode_key(raw: str) -> Optional[str]:
    """Translate raw terminal input into a key name."""
    if not raw:
        return None
    if raw in ESCAPE_SEQUENCES:
        return ESCAPE_SEQUENCES[raw]
    if raw[0] in ("\x00", "\xe0") and len(raw) == 2:
        return WINDOWS_SCAN_CODES.get(raw[1])
    if raw in SINGLE_KEYS:
        return SINGLE_KEYS[raw]
    if len(raw) == 1:
        return raw
    return None


def map_key(key: Optional[str]) -> Optional[Event]:
    """Return the menu event for a key name, or None for unbound keys."""
    if key is None:
        return None
    return KEY_EVENTS.get(key)


class KeyReader:
    def __init__(self, stream=None, poll_interval: float = 0.05) -> None:
        self.stream = stream or sys.stdin
        self.poll_interval = poll_interval
        self._old_settings = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def _fd(self) -> int:
        return self.stream.fileno()

    def __enter__(self) -> "KeyReader":
        if sys.platform != "win32":
            try:
                self._old_settings = termios.tcgetattr(self.stream)
                tty.setcbreak(self.stream.fileno())
            except (termios.error, OSError, ValueError) as error:
                log.debug(f"Terminal left in line mode: {error}")
                self._old_settings = None
        return self

    def __exit__(self, *exc_info) -> None:
        if self._old_settings is not None:
            termios.tcsetattr(self.stream, termios.TCSADRAIN, self._old_settings)
            self._old_settings = None

    def _ready(self, timeout: float) -> bool:
        readable, _, _ = select.select([self._fd], [], [], timeout)
        return bool(readable)

    def _read_char(self) -> str:
        """Read one character straight from the descriptor.

        Reading through the stream's own buffer would pull a whole escape
        sequence out from under ``select``.
        """
        decoder = self._decoder
        while True:
            chunk = os.read(self._fd, 1)
            if not chunk:
                return ""
            char = decoder.decode(chunk)
            if char:
                return char

    def read_raw(self) -> Optional[str]:
        """Return one raw key (with any escape sequence) or None on timeout."""
        if sys.platform == "win32":
            if not msvcrt.kbhit():
                time.sleep(self.poll_interval)
                return None
            first = msvcrt.getwch()
            if first in ("\x00", "\xe0"):
                return first + msvcrt.getwch()
            return first

        if not self._ready(self.poll_interval):
            return None
        first = self._read_char()
        if first != "\x1b":
            return first
        sequence = first
        while len(sequence) < 3 and self._ready(ESCAPE_WAIT):
            sequence += self._read_char()
        return sequence

    def read_key(self) -> Optional[str]:
        key = decode_key(self.read_raw() or "")
        if key is not None:
            log.trace(f"Key pressed: {key!r}")
        return key
