"""Tests for termline.readline.Readline over a virtual connection."""

from __future__ import annotations

from termline.config import Config
from termline.connection import Signal
from termline.readline import Readline

from virtual_connection import VirtualConnection


class TestReadLine:
    def test_reads_one_line(self) -> None:
        conn = VirtualConnection()
        lines: list[str | None] = []
        Readline().readline(conn, "> ", lines.append)
        conn.feed("foo\r")
        assert lines == ["foo"]
        assert conn.get_output() == "> foo\n"

    def test_empty_line(self) -> None:
        conn = VirtualConnection()
        lines: list[str | None] = []
        Readline().readline(conn, "> ", lines.append)
        conn.feed("\r")
        assert lines == [""]

    def test_byte_at_a_time(self) -> None:
        conn = VirtualConnection()
        lines: list[str | None] = []
        Readline().readline(conn, "", lines.append)
        for byte in "héllo\r".encode("utf-8"):
            conn.feed(bytes([byte]))
        assert lines == ["héllo"]

    def test_end_of_input_gives_none(self) -> None:
        conn = VirtualConnection()
        closes: list[bool] = []
        conn.close_handler = lambda: closes.append(True)
        lines: list[str | None] = []
        Readline().readline(conn, "> ", lines.append)
        conn.end()
        assert lines == [None]
        assert closes == [True]
        conn.close()
        assert closes == [True]
        assert conn.restore_count == 1

    def test_end_of_input_reaches_read_despite_later_close_handler(self) -> None:
        conn = VirtualConnection()
        lines: list[str | None] = []
        Readline().readline(conn, "> ", lines.append)
        closes: list[bool] = []
        conn.close_handler = lambda: closes.append(True)
        conn.end()
        assert lines == [None]
        assert closes == [True]

    def test_nested_reads_all_get_end_of_input(self) -> None:
        conn = VirtualConnection()
        readline = Readline()
        outer: list[str | None] = []
        inner: list[str | None] = []
        readline.readline(conn, "> ", outer.append)
        readline.readline(conn, "inner: ", inner.append)
        conn.end()
        assert inner == [None]
        assert outer == [None]
        assert readline.processor is None

    def test_vi_mode_from_config(self) -> None:
        conn = VirtualConnection()
        lines: list[str | None] = []
        Readline(config=Config(edit_mode="vi")).readline(conn, "", lines.append)
        conn.feed("abc\x1b0x\r")
        assert lines == ["bc"]


class TestHandlerFrames:
    def test_handlers_restored_after_line(self) -> None:
        conn = VirtualConnection()

        def on_close() -> None:
            pass

        conn.close_handler = on_close
        lines: list[str | None] = []
        Readline().readline(conn, "> ", lines.append)
        assert conn.stdin_handler is not None
        conn.feed("x\r")
        assert conn.stdin_handler is None
        assert conn.signal_handler is None
        assert conn.size_handler is None
        assert conn.close_handler is on_close
        conn.close()
        assert lines == ["x"]

    def test_input_after_line_goes_to_next_read(self) -> None:
        conn = VirtualConnection()
        readline = Readline()
        lines: list[str | None] = []

        def on_line(line: str | None) -> None:
            lines.append(line)
            if len(lines) < 2:
                readline.readline(conn, "> ", on_line)

        readline.readline(conn, "> ", on_line)
        conn.feed("one\rtwo\r")
        assert lines == ["one", "two"]
        assert conn.get_output() == "> one\n> two\n"

    def test_nested_read_hands_back_to_outer(self) -> None:
        conn = VirtualConnection()
        readline = Readline()
        outer: list[str | None] = []
        inner: list[str | None] = []
        readline.readline(conn, "> ", outer.append)
        conn.feed("ab")
        readline.readline(conn, "inner: ", inner.append)
        assert readline.buffer.prompt.text == "inner: "
        conn.feed("x\r")
        assert inner == ["x"]
        assert conn.get_output().endswith("inner: x\n> ab")
        assert readline.buffer.value == "ab"
        conn.feed("c\r")
        assert outer == ["abc"]
        assert readline.processor is None

    def test_nested_read_keeps_outer_vi_command_mode(self) -> None:
        conn = VirtualConnection()
        readline = Readline(config=Config(edit_mode="vi"))
        outer: list[str | None] = []
        inner: list[str | None] = []
        readline.readline(conn, "", outer.append)
        conn.feed("abc\x1b")
        readline.readline(conn, "", inner.append)
        conn.feed("x\r")
        assert inner == ["x"]
        conn.feed("0x\r")
        assert outer == ["bc"]

    def test_history_is_shared_between_reads(self) -> None:
        conn = VirtualConnection()
        readline = Readline()
        lines: list[str | None] = []
        readline.readline(conn, "", lines.append)
        conn.feed("ls\r")
        readline.readline(conn, "", lines.append)
        conn.feed("\x1b[A\r")
        assert lines == ["ls", "ls"]

    def test_resize_reaches_processor(self) -> None:
        conn = VirtualConnection(width=80)
        readline = Readline()
        readline.readline(conn, "", lambda line: None)
        conn.resize(40)
        assert readline.processor.width == 40


class TestInterrupt:
    def test_application_signal_handler_gets_ctrl_c(self) -> None:
        conn = VirtualConnection()
        signals: list[Signal] = []

        def on_signal(signal: Signal) -> None:
            signals.append(signal)
            conn.write("GAH\n")

        conn.signal_handler = on_signal
        lines: list[str | None] = []
        Readline().readline(conn, "", lines.append)
        conn.feed("\x03")
        conn.feed("FOOBAR\r")
        assert signals == [Signal.INT]
        assert lines == ["FOOBAR"]
        assert conn.get_output() == "GAH\nFOOBAR\n"
        assert conn.signal_handler is on_signal

    def test_readline_aborts_line_without_application_handler(self) -> None:
        conn = VirtualConnection()
        lines: list[str | None] = []
        Readline().readline(conn, "", lines.append)
        conn.feed("FOO\x03")
        assert conn.get_output() == "FOO^C\n"
        assert not conn.closed
        conn.feed("bar\r")
        assert lines == ["bar"]

    def test_signal_handler_that_closes(self) -> None:
        conn = VirtualConnection()

        def on_signal(signal: Signal) -> None:
            conn.write("X")
            conn.close()

        conn.signal_handler = on_signal
        lines: list[str | None] = []
        Readline().readline(conn, "> ", lines.append)
        conn.feed("abc")
        conn.raise_signal(Signal.INT)
        assert conn.get_output() == "> abcX"
        assert conn.closed
        assert lines == [None]

    def test_interrupt_without_any_handler_closes(self) -> None:
        conn = VirtualConnection()
        conn.raise_signal(Signal.INT)
        assert conn.closed
        assert conn.get_output() == ""
