import io
import os
import select
import signal
import threading

import pytest

from juliaterm.terminal import (
    ALT_SCREEN_OFF,
    ALT_SCREEN_ON,
    HIDE_CURSOR,
    SHOW_CURSOR,
    TerminalSession,
    install_cancel_handlers,
    poll_quit_key,
    restore_handlers,
)


def test_session_writes_setup_and_teardown():
    out = io.StringIO()
    with TerminalSession(out=out, inp=io.StringIO()):
        assert out.getvalue() == ALT_SCREEN_ON + HIDE_CURSOR
    assert out.getvalue().endswith(SHOW_CURSOR + ALT_SCREEN_OFF)


def test_session_restores_when_body_raises():
    out = io.StringIO()
    with pytest.raises(RuntimeError):
        with TerminalSession(out=out, inp=io.StringIO()):
            raise RuntimeError("frame failed")
    assert out.getvalue().endswith(SHOW_CURSOR + ALT_SCREEN_OFF)


def test_session_restores_tty_attributes():
    termios = pytest.importorskip("termios")
    pty = pytest.importorskip("pty")
    master, slave = pty.openpty()
    try:
        with os.fdopen(slave, "r", closefd=False) as inp:
            before = termios.tcgetattr(slave)
            with pytest.raises(RuntimeError):
                with TerminalSession(out=io.StringIO(), inp=inp):
                    assert termios.tcgetattr(slave) != before
                    raise RuntimeError("frame failed")
            assert termios.tcgetattr(slave) == before
    finally:
        os.close(master)
        os.close(slave)


def test_sigint_sets_cancel_and_handlers_are_restored():
    cancel = threading.Event()
    original = signal.getsignal(signal.SIGINT)
    previous = install_cancel_handlers(cancel)
    try:
        os.kill(os.getpid(), signal.SIGINT)
        assert cancel.wait(1.0)
    finally:
        restore_handlers(previous)
    assert signal.getsignal(signal.SIGINT) is original


def test_sigterm_sets_cancel():
    cancel = threading.Event()
    previous = install_cancel_handlers(cancel)
    try:
        os.kill(os.getpid(), signal.SIGTERM)
        assert cancel.wait(1.0)
    finally:
        restore_handlers(previous)


def test_restore_handlers_accepts_none():
    restore_handlers(None)


def test_poll_quit_key_ignores_non_tty():
    assert poll_quit_key(io.StringIO("q")) is False


@pytest.mark.parametrize("keys,expected", [(b"q", True), (b"\x03", True), (b"xyz", False)])
def test_poll_quit_key_reads_pty(keys, expected):
    pty = pytest.importorskip("pty")
    master, slave = pty.openpty()
    try:
        with os.fdopen(slave, "r", closefd=False) as inp:
            tty = pytest.importorskip("tty")
            # raw so the line discipline delivers bytes immediately and ^C is not a signal
            tty.setraw(slave)
            os.write(master, keys)
            select.select([slave], [], [], 1.0)
            assert poll_quit_key(inp) is expected
            assert poll_quit_key(inp) is False
    finally:
        os.close(master)
        os.close(slave)
