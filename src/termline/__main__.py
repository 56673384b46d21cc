"""Interactive demo: ``python -m termline``."""

from __future__ import annotations

import argparse
import logging

from termline.cancel import Cancellation
from termline.config import EDIT_MODES, Config
from termline.connection import Connection, Signal
from termline.prompt import ZERO_MASK, CharacterType, Color, Prompt, TerminalCharacter
from termline.readline import Readline
from termline.terminal import TerminalConnection

logger = logging.getLogger(__name__)

COMMANDS = ("exit", "quit", "sleep", "login", "man", "clear")


def complete_command(prefix: str) -> list[str]:
    return [command for command in COMMANDS if command.startswith(prefix)]


def default_prompt() -> Prompt:
    return Prompt.styled(
        [
            TerminalCharacter("[", Color.BLUE),
            TerminalCharacter("t", Color.RED, style=CharacterType.ITALIC),
            TerminalCharacter("e", Color.RED, style=CharacterType.INVERT),
            TerminalCharacter("r", Color.RED, style=CharacterType.CROSSED_OUT),
            TerminalCharacter("m", Color.RED, style=CharacterType.BOLD),
            TerminalCharacter("]", Color.BLUE, style=CharacterType.FAINT),
            TerminalCharacter("$", Color.GREEN, style=CharacterType.UNDERLINE),
            TerminalCharacter(" "),
        ]
    )


class Demo:
    def __init__(self, connection: Connection, readline: Readline) -> None:
        self.connection = connection
        self.readline = readline
        self.prompt = default_prompt()
        self.cancellation = Cancellation()
        self.masking = False
        connection.signal_handler = self._on_signal
        connection.close_handler = self._on_close

    def start(self) -> None:
        self.read(self.prompt)

    def read(self, prompt: Prompt) -> None:
        self.readline.readline(self.connection, prompt, self._on_line, [complete_command])

    def _on_signal(self, signal: Signal) -> None:
        if signal is Signal.INT:
            self.connection.write("we're catching ctrl-c, just continuing.\n")
            self.cancellation.cancel()

    def _on_close(self) -> None:
        self.connection.write("we're shutting down\n")

    def _on_line(self, line: str | None) -> None:
        write = self.connection.write
        if line is None:
            write("got eof, lets quit.\n")
            self.connection.close()
            return

        if self.masking:
            write(f"got password: {line}, stopping masking\n")
            self.masking = False
            self.read(self.prompt)
            return

        command = line.strip()
        write(f"=====> {line}\n")
        if command in ("exit", "quit"):
            write("we're quitting...\n")
            self.connection.close()
        elif command == "sleep":
            self._sleep()
            self.read(self.prompt)
        elif command == "login":
            self.masking = True
            self.read(Prompt("password: ", mask=ZERO_MASK))
        elif command == "clear":
            if not self.connection.put("clear"):
                write("clear is not supported by this terminal\n")
            self.read(self.prompt)
        elif command.startswith("man"):
            write("trying to wait for input:\n")
            Readline(config=self.readline.config).readline(
                self.connection, "write something: ", self._on_man_line
            )
        else:
            self.read(self.prompt)

    def _on_man_line(self, line: str | None) -> None:
        self.connection.write(f"we got: {line}\n")
        if line is not None:
            self.read(self.prompt)

    def _sleep(self) -> None:
        self.cancellation.reset()
        self.connection.write("we're going to sleep for 5 seconds, you can interrupt me if you want.\n")
        if self.cancellation.wait(5):
            self.connection.write("we got interrupted, lets continue...\n")
        else:
            self.connection.write("done sleeping, returning.\n")


def main() -> None:
    parser = argparse.ArgumentParser(description="termline: line editing demo")
    parser.add_argument("--mode", choices=EDIT_MODES, help="Editing mode (default: from inputrc or emacs)")
    parser.add_argument("--log-file", help="Write logging to this file instead of stderr")
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    args = parser.parse_args()

    logging.basicConfig(
        filename=args.log_file,
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = Config.from_env()
    if args.mode:
        config.edit_mode = args.mode

    connection = TerminalConnection(encoding=config.encoding)
    Demo(connection, Readline(config=config)).start()
    connection.open_blocking()


if __name__ == "__main__":
    main()
