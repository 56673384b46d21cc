"""Terminal adapter: a :class:`Connection` over tty (or pipe) file descriptors.

Manages raw mode via :mod:`termios`, forwards SIGINT, SIGWINCH and SIGCONT
to the connection's handlers, and looks terminal capabilities up through
:mod:`curses` terminfo.
"""

from __future__ import annotations

import curses
import logging
import os
import select
import signal
import sys
import termios
import threading
from typing import IO, Any

from termline.connection import Connection, Signal, Size

logger = logging.getLogger(__name__)

_READ_SIZE = 1024

_SIGNALS: dict[int, Signal] = {
    signal.SIGINT: Signal.INT,
    signal.SIGWINCH: Signal.WINCH,
    signal.SIGCONT: Signal.CONT,
}


def _fileno(stream: IO[Any] | int) -> int:
    return stream if isinstance(stream, int) else stream.fileno()


def _raw_attributes(attrs: list) -> list:
    """Raw-mode copy of *attrs* that keeps ISIG and OPOST.

    Ctrl-C still raises SIGINT and ``\\n`` still returns the carriage.
    """
    attrs = list(attrs)
    attrs[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    attrs[2] &= ~(termios.CSIZE | termios.PARENB)
    attrs[2] |= termios.CS8
    attrs[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN)
    cc = list(attrs[6])
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    attrs[6] = cc
    return attrs


class TerminalConnection(Connection):
    """Connection backed by file descriptors, ``sys.stdin``/``sys.stdout`` by default.

    Raw mode is entered only when the input is a tty, and OS signal handlers
    are installed only when created on the main thread, so the same class
    serves pipes and worker threads.
    """

    def __init__(
        self,
        stdin: IO[Any] | int | None = None,
        stdout: IO[Any] | int | None = None,
        encoding: str | None = None,
    ) -> None:
        super().__init__(encoding)
        self._in_fd = _fileno(stdin if stdin is not None else sys.stdin)
        self._out_fd = _fileno(stdout if stdout is not None else sys.stdout)
        self._original_termios: list | None = None
        self._previous_handlers: dict[int, Any] = {}
        self._wake_r, self._wake_w = os.pipe()
        self._write_log_path: str = os.environ.get("TERMLINE_WRITE_LOG", "")
        self._terminfo: bool | None = None

        self._enter_raw_mode()
        self._install_signal_handlers()

    # -- raw mode -------------------------------------------------------------

    def _enter_raw_mode(self) -> None:
        if not os.isatty(self._in_fd):
            return
        if self._original_termios is None:
            self._original_termios = termios.tcgetattr(self._in_fd)
        termios.tcsetattr(self._in_fd, termios.TCSAFLUSH, _raw_attributes(self._original_termios))

    def _restore_termios(self) -> None:
        if self._original_termios is not None:
            termios.tcsetattr(self._in_fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None

    # -- signals --------------------------------------------------------------

    def _install_signal_handlers(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            logger.debug("not on the main thread, OS signals are not forwarded")
            return
        for signum in _SIGNALS:
            self._previous_handlers[signum] = signal.getsignal(signum)
            signal.signal(signum, self._on_os_signal)

    def _restore_signal_handlers(self) -> None:
        if not self._previous_handlers:
            return
        if threading.current_thread() is not threading.main_thread():
            logger.debug("cannot restore signal handlers off the main thread")
            return
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous_handlers.clear()

    def _on_os_signal(self, signum: int, frame: object) -> None:
        if signum == signal.SIGCONT and self._original_termios is not None:
            # the shell restored cooked mode while we were stopped
            termios.tcsetattr(self._in_fd, termios.TCSANOW, _raw_attributes(self._original_termios))
        self.raise_signal(_SIGNALS[signum])

    # -- device I/O -----------------------------------------------------------

    def _read(self) -> bytes | None:
        ready, _, _ = select.select([self._in_fd, self._wake_r], [], [])
        if self._wake_r in ready:
            os.read(self._wake_r, _READ_SIZE)
            return None
        return os.read(self._in_fd, _READ_SIZE)

    def _wakeup(self) -> None:
        try:
            os.write(self._wake_w, b"\0")
        except OSError:
            logger.debug("reader wakeup pipe already closed")

    def _write(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = os.write(self._out_fd, view)
            view = view[written:]

        if self._write_log_path:
            try:
                with open(self._write_log_path, "ab") as f:
                    f.write(data)
            except OSError:
                logger.debug("cannot append to write log %s", self._write_log_path, exc_info=True)

    def _restore(self) -> None:
        self._restore_signal_handlers()
        try:
            self._restore_termios()
        finally:
            os.close(self._wake_r)
            os.close(self._wake_w)

    # -- queries --------------------------------------------------------------

    def size(self) -> Size:
        for fd in (self._out_fd, self._in_fd):
            try:
                size = os.get_terminal_size(fd)
            except (ValueError, OSError):
                continue
            return Size(size.columns, size.lines)
        return Size(80, 24)

    def terminal_type(self) -> str:
        return os.environ.get("TERM", "dumb")

    def put(self, capability: str, *params: int) -> bool:
        if not self._setup_terminfo():
            return False
        try:
            sequence = curses.tigetstr(capability)
            if not sequence:
                return False
            if params:
                sequence = curses.tparm(sequence, *params)
        except curses.error:
            logger.debug("capability %s failed", capability, exc_info=True)
            return False
        self._write_bytes(sequence)
        return True

    def _setup_terminfo(self) -> bool:
        if self._terminfo is None:
            try:
                curses.setupterm(self.terminal_type(), self._out_fd)
                self._terminfo = True
            except curses.error:
                logger.debug("no terminfo entry for %s", self.terminal_type())
                self._terminfo = False
        return self._terminfo
