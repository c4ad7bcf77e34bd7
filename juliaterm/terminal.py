from __future__ import annotations

import os
import select
import shutil
import signal
import sys
import threading
from typing import Dict, Optional, TextIO, Tuple

ALT_SCREEN_ON = "\x1b[?1049h"
ALT_SCREEN_OFF = "\x1b[?1049l"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
HOME = "\x1b[H"
CLEAR_LINE = "\x1b[2K"
RESET = "\x1b[0m"

QUIT_KEYS = ("q", "Q", "\x03")


def move_to(row: int, col: int) -> str:
    return f"\x1b[{row + 1};{col + 1}H"


def terminal_size() -> Tuple[int, int]:
    size = shutil.get_terminal_size((80, 24))
    return size.columns, size.lines


class TerminalSession:
    """
    Alternate screen, hidden cursor and cbreak input for the lifetime of a
    ``with`` block. Everything is undone on exit, including when the body
    raises.
    """

    def __init__(self, out: TextIO = sys.stdout, inp: TextIO = sys.stdin):
        self.out = out
        self.inp = inp
        self._saved_attrs = None

    def __enter__(self) -> "TerminalSession":
        if _isatty(self.inp):
            import termios
            import tty
            fd = self.inp.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        self.out.write(ALT_SCREEN_ON + HIDE_CURSOR)
        self.out.flush()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.out.write(RESET + SHOW_CURSOR + ALT_SCREEN_OFF)
            self.out.flush()
        finally:
            if self._saved_attrs is not None:
                import termios
                termios.tcsetattr(self.inp.fileno(), termios.TCSADRAIN, self._saved_attrs)
                self._saved_attrs = None


def _isatty(stream) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def poll_quit_key(inp: TextIO = sys.stdin) -> bool:
    """Drain pending input without blocking; True if a quit key was pressed."""
    if not _isatty(inp):
        return False
    fd = inp.fileno()
    quit_pressed = False
    while select.select([fd], [], [], 0)[0]:
        data = os.read(fd, 64)
        if not data:
            break
        if any(k in data.decode("utf-8", "ignore") for k in QUIT_KEYS):
            quit_pressed = True
    return quit_pressed


def install_cancel_handlers(cancel: threading.Event) -> Dict[int, object]:
    """Route SIGINT/SIGTERM to ``cancel.set()``. Returns the handlers that were replaced."""
    def _handler(signum, frame):
        cancel.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, _handler)
    return previous


def restore_handlers(previous: Optional[Dict[int, object]]) -> None:
    for sig, handler in (previous or {}).items():
        signal.signal(sig, handler)
