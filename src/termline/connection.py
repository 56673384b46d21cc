"""Connection: the byte channel a line editor reads from and writes to.

:class:`Connection` owns the read loop, the decoder and encoder, the handler
slots (stdin, size, signal, close) and the suspend gate. Subclasses supply
the device: :class:`~termline.terminal.TerminalConnection` for a real tty or
pipe, and the in-memory double used by the tests.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Callable

from termline.codec import Decoder, Encoder, default_encoding

logger = logging.getLogger(__name__)


class Signal(enum.Enum):
    INT = "INT"
    WINCH = "WINCH"
    CONT = "CONT"


@dataclass(frozen=True)
class Size:
    width: int
    height: int


StdinHandler = Callable[[str], None]
SignalHandler = Callable[[Signal], None]
SizeHandler = Callable[[Size], None]
CloseHandler = Callable[[], None]


class Connection:
    """Base connection with the read loop and handler plumbing.

    Subclasses implement :meth:`_read` (``bytes``, ``b""`` at end of input,
    or ``None`` once reading has been stopped), :meth:`_write` and
    :meth:`_restore`.
    """

    def __init__(self, encoding: str | None = None) -> None:
        self.encoding = encoding or default_encoding()
        self._decoder = Decoder(self.encoding)
        self._encoder = Encoder(self.encoding, self._write_bytes)
        self._stdin_handler: StdinHandler | None = None
        self.signal_handler: SignalHandler | None = None
        self.size_handler: SizeHandler | None = None
        self.close_handler: CloseHandler | None = None
        # run before close_handler; Readline finishes its active reads here
        self._close_listeners: list[CloseHandler] = []
        self._reading = False
        self._closed = False
        self._gate: threading.Event | None = None
        self._lock = threading.Lock()

    # -- device hooks ---------------------------------------------------------

    def _read(self) -> bytes | None:
        raise NotImplementedError

    def _write(self, data: bytes) -> None:
        raise NotImplementedError

    def _restore(self) -> None:
        """Undo whatever opening the device changed (raw mode, signals)."""

    def _wakeup(self) -> None:
        """Unblock a pending :meth:`_read`."""

    # -- handlers -------------------------------------------------------------

    @property
    def stdin_handler(self) -> StdinHandler | None:
        return self._stdin_handler

    @stdin_handler.setter
    def stdin_handler(self, handler: StdinHandler | None) -> None:
        self._stdin_handler = handler
        self._decoder.consumer = handler

    def add_close_listener(self, listener: CloseHandler) -> None:
        """Call *listener* on close, ahead of :attr:`close_handler`.

        Listeners run newest first and cannot be replaced by assigning the
        close handler.
        """
        self._close_listeners.append(listener)

    def remove_close_listener(self, listener: CloseHandler) -> None:
        if listener in self._close_listeners:
            self._close_listeners.remove(listener)

    @property
    def stdout_handler(self) -> Callable[[str], None]:
        return self.write

    # -- state ----------------------------------------------------------------

    @property
    def reading(self) -> bool:
        return self._reading

    @property
    def closed(self) -> bool:
        return self._closed

    def size(self) -> Size:
        return Size(80, 24)

    def terminal_type(self) -> str:
        return "dumb"

    def put(self, capability: str, *params: int) -> bool:
        """Emit the terminfo *capability*; False when it is not supported."""
        return False

    # -- reading --------------------------------------------------------------

    def open_blocking(self, seed: bytes | str | None = None) -> None:
        """Read and dispatch input on the calling thread until closed.

        *seed* is decoded before anything is read from the device.
        """
        self._reading = True
        try:
            if seed:
                self._decoder.write(seed.encode(self.encoding) if isinstance(seed, str) else seed)
            while self._reading:
                data = self._read()
                if data is None:
                    break
                if not data:
                    logger.debug("end of input")
                    self._decoder.flush()
                    self.close()
                    return
                self._decoder.write(data)
                gate = self._gate
                if gate is not None:
                    gate.wait()
        except OSError:
            if self._closed:
                return
            logger.warning("failed while reading, closing", exc_info=True)
            self.close()

    def open_non_blocking(self) -> threading.Thread:
        """Run :meth:`open_blocking` on a daemon thread."""
        thread = threading.Thread(target=self.open_blocking, name="termline-reader", daemon=True)
        thread.start()
        return thread

    def stop_reading(self) -> None:
        self._reading = False
        self._wakeup()

    # -- suspension -----------------------------------------------------------

    def suspend(self) -> None:
        """Hold the read loop after the next chunk until :meth:`awake`.

        Suspending again before :meth:`awake` keeps the same gate.
        """
        with self._lock:
            if self._gate is None:
                self._gate = threading.Event()

    def awake(self) -> None:
        with self._lock:
            gate, self._gate = self._gate, None
        if gate is not None:
            gate.set()

    @property
    def suspended(self) -> bool:
        return self._gate is not None

    # -- output ---------------------------------------------------------------

    def write(self, text: str) -> None:
        self._encoder(text)

    def _write_bytes(self, data: bytes) -> None:
        try:
            self._write(data)
        except OSError:
            if self._closed:
                logger.debug("dropping output after close", exc_info=True)
                return
            logger.warning("failed to write to the terminal, closing", exc_info=True)
            self.close()

    # -- signals --------------------------------------------------------------

    def raise_signal(self, signal: Signal) -> None:
        """Deliver *signal* to the registered handlers.

        Resizes go to the size handler. Other signals go to the signal
        handler; an INT with no signal handler registered closes the
        connection.
        """
        if signal is Signal.WINCH:
            if self.size_handler is not None:
                self.size_handler(self.size())
            return
        if self.signal_handler is not None:
            self.signal_handler(signal)
        elif signal is Signal.INT:
            logger.debug("no signal handler registered, closing")
            self.close()

    # -- closing --------------------------------------------------------------

    def close(self) -> None:
        """Stop reading, restore the device and run the close hooks once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._reading = False
        self._wakeup()
        self.awake()
        try:
            self._restore()
        except OSError:
            logger.warning("failed to restore the terminal", exc_info=True)
        for listener in reversed(list(self._close_listeners)):
            listener()
        if self.close_handler is not None:
            self.close_handler()
