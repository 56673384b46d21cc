"""Readline: read one edited line from a :class:`Connection`, asynchronously.

:meth:`Readline.readline` installs its handlers on the connection and
returns at once; the callback runs on the reading thread when the line is
submitted (with the line) or the input ends (with ``None``). The handlers
that were installed before are saved and put back before the callback runs,
so a callback can start the next read, and a read started on top of an
active one hands input back to it when done.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable

from termline.buffer import LineBuffer
from termline.completion import CompletionProvider
from termline.config import Config
from termline.connection import (
    Connection,
    Signal,
    SignalHandler,
    Size,
    SizeHandler,
    StdinHandler,
)
from termline.edit_mode import EditMode, create_edit_mode
from termline.history import History
from termline.input_processor import InputProcessor
from termline.kill_ring import KillRing
from termline.prompt import Prompt

logger = logging.getLogger(__name__)

LineCallback = Callable[["str | None"], None]


@dataclass
class _HandlerFrame:
    stdin: StdinHandler | None
    size: SizeHandler | None
    signal: SignalHandler | None

    @classmethod
    def capture(cls, connection: Connection) -> _HandlerFrame:
        return cls(
            connection.stdin_handler,
            connection.size_handler,
            connection.signal_handler,
        )

    def restore(self, connection: Connection) -> None:
        connection.stdin_handler = self.stdin
        connection.size_handler = self.size
        connection.signal_handler = self.signal


class Readline:
    """Line reader shared across reads: keeps history and the kill ring."""

    def __init__(self, edit_mode: EditMode | None = None, config: Config | None = None) -> None:
        self.config = config if config is not None else Config()
        self.edit_mode = edit_mode if edit_mode is not None else create_edit_mode(
            self.config.edit_mode, self.config.keybindings_for(self.config.edit_mode)
        )
        self.history = History(self.config.history_size)
        self.kill_ring = KillRing()
        self._processor: InputProcessor | None = None

    @property
    def processor(self) -> InputProcessor | None:
        """Processor of the innermost active read."""
        return self._processor

    @property
    def buffer(self) -> LineBuffer | None:
        return self._processor.buffer if self._processor is not None else None

    def readline(
        self,
        connection: Connection,
        prompt: Prompt | str | None,
        callback: LineCallback,
        completions: Sequence[CompletionProvider] | None = None,
    ) -> None:
        """Start reading a line; *callback* gets it (or None at end of input)."""
        previous = _HandlerFrame.capture(connection)
        outer = self._processor
        processor = InputProcessor(
            self.edit_mode.fresh(),
            connection.write,
            prompt,
            width=connection.size().width,
            completions=completions,
            history=self.history,
            kill_ring=self.kill_ring,
            bell=self.config.bell,
        )
        processor.interrupt_handler = lambda: connection.raise_signal(Signal.INT)
        self._processor = processor

        def complete_line(line: str | None) -> None:
            previous.restore(connection)
            connection.remove_close_listener(on_close)
            self._processor = outer
            if outer is not None and not outer.finished:
                outer.redisplay()
            callback(line)

        def on_input(data: str) -> None:
            result = processor.process(data)
            if not result.finished:
                return
            complete_line(result.line)
            if result.remaining:
                handler = connection.stdin_handler
                if handler is not None:
                    handler(result.remaining)
                else:
                    logger.debug("dropping %d codepoints typed after the line", len(result.remaining))

        def on_size(size: Size) -> None:
            processor.resize(size.width)
            if previous.size is not None:
                previous.size(size)

        def on_signal(signal: Signal) -> None:
            if signal is Signal.INT:
                processor.abort_line()
            elif signal is Signal.CONT:
                processor.redraw()

        def on_close() -> None:
            if not processor.finished:
                processor.finish(None)
                complete_line(None)

        connection.stdin_handler = on_input
        connection.size_handler = on_size
        if connection.signal_handler is None:
            connection.signal_handler = on_signal
        connection.add_close_listener(on_close)
        processor.start()
