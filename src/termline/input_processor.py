"""Input processor: runs decoded input through the active keybinding table,
applies the resulting actions to a :class:`LineBuffer` and writes the
minimal terminal output that keeps the screen in step with the buffer."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from termline.actions import REGISTER_STATUSES, Status
from termline.buffer import LineBuffer
from termline.completion import CompletionProvider, complete, format_columns
from termline.cursor import move_between
from termline.edit_mode import EditMode
from termline.history import History
from termline.keybindings import Match, Resolution
from termline.keys import ESC, escape_sequence_length
from termline.kill_ring import KillRing
from termline.prompt import Prompt, as_prompt
from termline.undo_stack import UndoStack
from termline.utils import is_whitespace_char

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"
CLEAR_TO_END = "\x1b[0J"
CLEAR_SCREEN = "\x1b[2J\x1b[H"
BELL = "\x07"
INTERRUPT_ECHO = "^C"

# Bracketed paste markers
PASTE_START = "\x1b[200~"
PASTE_END = "\x1b[201~"


def _is_control(char: str) -> bool:
    code = ord(char)
    return code < 32 or code == 0x7F or 0x80 <= code <= 0x9F


def _partial_suffix(text: str, marker: str) -> int:
    """Length of the longest tail of *text* that starts *marker*."""
    for size in range(min(len(marker) - 1, len(text)), 0, -1):
        if text.endswith(marker[:size]):
            return size
    return 0


@dataclass
class ProcessResult:
    finished: bool = False
    # None means end of input
    line: str | None = None
    # input received after the line was finished
    remaining: str = ""


class InputProcessor:
    """Edits one line.

    :meth:`process` accepts decoded chunks of any size. Key sequences split
    across chunks are held back until they can be resolved; a chunk that
    ends on a sequence which is both bound and a prefix of a longer binding
    (a lone ESC in vi insert mode) runs the shorter binding.
    """

    def __init__(
        self,
        edit_mode: EditMode,
        output: Callable[[str], None],
        prompt: Prompt | str | None = None,
        width: int = 80,
        completions: Sequence[CompletionProvider] | None = None,
        history: History | None = None,
        kill_ring: KillRing | None = None,
        bell: bool = True,
    ) -> None:
        self.edit_mode = edit_mode
        self.edit_mode.reset()
        self._prompt = as_prompt(prompt)
        self.buffer = LineBuffer(self._prompt)
        self._output = output
        self.width = width
        self.completions: list[CompletionProvider] = list(completions or ())
        self.history = history if history is not None else History()
        self.kill_ring = kill_ring if kill_ring is not None else KillRing()
        self.undo_stack = UndoStack()
        self.bell_enabled = bell
        # set by Readline to route Ctrl-C through the connection's signal handler
        self.interrupt_handler: Callable[[], None] | None = None

        self._pending = ""
        self._paste: str | None = None
        self._last_action: str | None = None  # "kill", "yank", "type-word"
        self._marked = False
        # status of the action being run; decides whether deletions are killed
        self._status = Status.NONE
        self._finished = False
        self._line: str | None = None

    # -- input ----------------------------------------------------------------

    @property
    def finished(self) -> bool:
        return self._finished

    def start(self) -> None:
        """Print the prompt (and any line already in the buffer)."""
        self.redisplay()

    def process(self, data: str) -> ProcessResult:
        if self._finished:
            return ProcessResult(True, self._line, data)
        self._pending += data
        while self._pending and not self._finished:
            if not self._step():
                break
        if not self._finished:
            return ProcessResult()
        remaining, self._pending = self._pending, ""
        return ProcessResult(True, self._line, remaining)

    def finish(self, line: str | None) -> None:
        self._finished = True
        self._line = line

    def _step(self) -> bool:
        """Consume one key or text run from the pending input.

        Returns False when the pending input is incomplete.
        """
        pending = self._pending

        if self._paste is not None:
            return self._continue_paste()
        if pending.startswith(PASTE_START):
            self._paste = ""
            self._pending = pending[len(PASTE_START) :]
            return True

        table = self.edit_mode.table
        match = table.resolve(pending)
        if match.kind is Resolution.PARTIAL:
            if match.action is None or match.action.takes_char:
                return False
            return self._run(match)
        if match.kind is Resolution.EXACT:
            return self._run(match)

        head = pending[0]
        if head == ESC:
            length = escape_sequence_length(pending)
            if length is not None and length > 1 and (
                _is_control(pending[1]) or (length == 2 and self.edit_mode.command_mode)
            ):
                # a lone ESC followed by another key; vi has no meta keys
                length = 1
            if length is None:
                return False
            logger.debug("ignoring unbound sequence %r", pending[:length])
            self._pending = pending[length:]
            return True
        if _is_control(head) or self.edit_mode.command_mode:
            logger.debug("ignoring unbound key %r", head)
            self._pending = pending[1:]
            return True

        end = 1
        while end < len(pending) and not _is_control(pending[end]) and not table.binds_start(pending[end]):
            end += 1
        self._pending = pending[end:]
        self._self_insert(pending[:end])
        return True

    def _run(self, match: Match) -> bool:
        action = match.action
        assert action is not None
        consumed = match.length
        char = None
        if action.takes_char:
            if len(self._pending) <= consumed:
                return False
            char = self._pending[consumed]
            consumed += 1
        self._pending = self._pending[consumed:]

        logger.debug("running %s", action.name)
        self._marked = False
        self._status = action.status
        try:
            action.run(self, char)
        finally:
            self._status = Status.NONE
        if not self._marked:
            self._last_action = None
        if self.edit_mode.command_mode and not self._finished:
            self._clamp_vi_cursor()
        return True

    def _mark(self, last_action: str) -> None:
        self._last_action = last_action
        self._marked = True

    def _continue_paste(self) -> bool:
        pending = self._pending
        end = pending.find(PASTE_END)
        if end == -1:
            keep = _partial_suffix(pending, PASTE_END)
            self._paste += pending[: len(pending) - keep]
            self._pending = pending[len(pending) - keep :]
            return False
        text = self._paste + pending[:end]
        self._paste = None
        self._pending = pending[end + len(PASTE_END) :]
        self._last_action = None
        clean_text = text.replace("\r\n", "").replace("\r", "").replace("\n", "")
        if clean_text:
            self.insert_text(clean_text)
        return True

    def _self_insert(self, text: str) -> None:
        if self._last_action != "type-word" or any(is_whitespace_char(ch) for ch in text):
            self.push_undo()
        self._last_action = "type-word"
        self.insert_text(text, undo=False)

    # -- rendering ------------------------------------------------------------

    def _emit(self, text: str) -> None:
        if text:
            self._output(text)

    def _wrap_fix(self) -> str:
        # the terminal leaves the cursor on the last column after filling a
        # row; force the wrap so column arithmetic matches the screen
        column = self.buffer.end_column()
        if column > 1 and (column - 1) % max(self.width, 1) == 0:
            return " \r"
        return ""

    def _to_end(self) -> str:
        buf = self.buffer
        if buf.zero_mask:
            return ""
        return move_between(buf.cursor_with_prompt(), buf.end_column(), self.width)

    def _repaint(self, start: int, from_column: int) -> None:
        """Rewrite the line from *start*; the terminal cursor is at *from_column*."""
        buf = self.buffer
        if buf.zero_mask:
            return
        text = buf.display(start)
        out = [move_between(from_column, buf.column_at(start), self.width), text]
        if text:
            out.append(self._wrap_fix())
        out.append(CLEAR_TO_END)
        out.append(move_between(buf.end_column(), buf.cursor_with_prompt(), self.width))
        self._emit("".join(out))

    def refresh_char(self, index: int) -> None:
        """Repaint after an in-place change at the cursor position *index*."""
        self._repaint(index, self.buffer.cursor_with_prompt())

    def redisplay(self) -> None:
        """Print prompt and line on the current (fresh) terminal row."""
        buf = self.buffer
        out = [] if buf.prompt_disabled else [buf.prompt.ansi]
        if not buf.zero_mask and buf.value:
            out.append(buf.display())
            out.append(self._wrap_fix())
            out.append(move_between(buf.end_column(), buf.cursor_with_prompt(), self.width))
        self._emit("".join(out))

    def redraw(self) -> None:
        """Repaint prompt and line in place."""
        buf = self.buffer
        self._emit(move_between(buf.cursor_with_prompt(), 1, self.width) + CLEAR_TO_END)
        self.redisplay()

    def resize(self, width: int) -> None:
        buf = self.buffer
        self._emit(move_between(buf.cursor_with_prompt(), 1, self.width))
        self.width = width
        self._emit(CLEAR_TO_END)
        self.redisplay()

    def bell(self) -> None:
        if self.bell_enabled:
            self._emit(BELL)

    # -- editing primitives used by actions -----------------------------------

    def move_to(self, index: int) -> None:
        self._emit(self.buffer.move_to(index, self.width, self.edit_mode.command_mode))

    def move_to_unclamped(self, index: int) -> None:
        """Move allowing the position after the last character, even in vi command mode."""
        self._emit(self.buffer.move_to(index, self.width))

    def push_undo(self) -> None:
        self.undo_stack.push(self.buffer.value, self.buffer.real_cursor)

    def insert_text(self, text: str, undo: bool = True) -> None:
        buf = self.buffer
        if undo:
            self.push_undo()
        start = buf.real_cursor
        from_column = buf.cursor_with_prompt()
        appending = start == len(buf.value)
        buf.write(text)
        if buf.zero_mask:
            return
        if appending:
            self._emit(buf.display(start) + self._wrap_fix())
        else:
            self._repaint(start, from_column)

    def delete_range(self, start: int, end: int, backward: bool = False) -> None:
        """Delete ``[start, end)`` and leave the cursor at *start*.

        The deleted text goes to the kill ring when the running action is a
        DELETE, CHANGE or YANK.
        """
        buf = self.buffer
        if start >= end:
            return
        self.push_undo()
        if self._status in REGISTER_STATUSES:
            self._kill(buf.value[start:end], backward)
        from_column = buf.cursor_with_prompt()
        buf.cursor = start
        buf.delete(start, end)
        self._repaint(start, from_column)

    def copy_range(self, start: int, end: int) -> None:
        """Put ``[start, end)`` on the kill ring without changing the line."""
        if start < end:
            self._kill(self.buffer.value[start:end], False)

    def _kill(self, text: str, backward: bool) -> None:
        accumulate = self._last_action == "kill" and not self.edit_mode.is_vi
        self.kill_ring.push(text, prepend=backward, accumulate=accumulate)
        self._mark("kill")

    def replace_range(self, start: int, end: int, text: str) -> None:
        """Replace ``[start, end)`` with *text*; the cursor ends after it."""
        buf = self.buffer
        self.push_undo()
        from_column = buf.cursor_with_prompt()
        buf.cursor = start
        buf.delete(start, end)
        buf.write(text)
        self._repaint(start, from_column)

    def replace_line(self, text: str) -> None:
        buf = self.buffer
        from_column = buf.cursor_with_prompt()
        buf.set_line(text)
        self._repaint(0, from_column)

    def _clamp_vi_cursor(self) -> None:
        upper = max(len(self.buffer.value) - 1, 0)
        if self.buffer.real_cursor > upper:
            self.move_to(upper)

    # -- compound operations --------------------------------------------------

    def accept(self) -> None:
        buf = self.buffer
        self._emit(self._to_end() + LINE_SEPARATOR)
        if buf.value.endswith(" \\"):
            buf.update_multi_line_buffer()
            buf.multi_line = True
            self.undo_stack.clear()
            self.redisplay()
            return
        line = buf.multi_line_value
        if not buf.masking:
            self.history.add(line)
        self.history.reset_position()
        self.finish(line)

    def abort_line(self) -> None:
        """Echo ``^C``, drop the line and prompt again."""
        self._emit(self._to_end() + INTERRUPT_ECHO + LINE_SEPARATOR)
        self.buffer.reset(self._prompt)
        self.undo_stack.clear()
        self.history.reset_position()
        self.edit_mode.reset()
        self.redisplay()

    def interrupt(self) -> None:
        if self.interrupt_handler is not None:
            self.interrupt_handler()
        else:
            self.abort_line()

    def clear_screen(self) -> None:
        self._emit(CLEAR_SCREEN)
        self.redisplay()

    def complete(self) -> None:
        if not self.completions:
            self.bell()
            return
        buf = self.buffer
        cursor = buf.real_cursor
        result = complete(buf.value[:cursor], self.completions)
        if not result.candidates:
            self.bell()
            return

        insertion = result.insertion()
        if insertion is not None:
            self.insert_text(insertion)
            return
        if result.unique:
            self.replace_range(0, cursor, result.candidates[0])
            return

        out = [self._to_end(), LINE_SEPARATOR]
        for row in format_columns(result.candidates, self.width):
            out.append(row + LINE_SEPARATOR)
        self._emit("".join(out))
        self.redisplay()

    def yank(self) -> None:
        text = self.kill_ring.peek()
        if not text:
            self.bell()
            return
        self.insert_text(text)
        self._mark("yank")

    def yank_pop(self) -> None:
        if self._last_action != "yank" or len(self.kill_ring) <= 1:
            return
        buf = self.buffer
        previous = self.kill_ring.peek() or ""
        self.kill_ring.rotate()
        text = self.kill_ring.peek() or ""
        self.replace_range(buf.real_cursor - len(previous), buf.real_cursor, text)
        self._mark("yank")

    def undo(self) -> None:
        snapshot = self.undo_stack.pop()
        if snapshot is None:
            self.bell()
            return
        buf = self.buffer
        from_column = buf.cursor_with_prompt()
        buf.set_line(snapshot.value)
        buf.cursor = snapshot.cursor
        self._repaint(0, from_column)

    def history_step(self, direction: int) -> None:
        buf = self.buffer
        if buf.masking:
            self.bell()
            return
        line = self.history.previous(buf.value) if direction < 0 else self.history.next()
        if line is None:
            self.bell()
            return
        self.replace_line(line)
