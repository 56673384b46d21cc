"""Line buffer: content, cursor, prompt and redraw bookkeeping for one line."""

from __future__ import annotations

import logging

from termline.cursor import clamp_move, move_between
from termline.prompt import Prompt
from termline.utils import visible_width

logger = logging.getLogger(__name__)

CONTINUATION_PROMPT = Prompt("> ")


class LineBuffer:
    """Tracks a single edited line and where the cursor sits in it.

    The cursor is a codepoint index into the line. Screen positions are
    derived on demand from the prompt width and the display width of the text
    before the cursor, so wide glyphs and mask characters move the terminal
    cursor by the right number of columns.

    When the prompt masks with :data:`~termline.prompt.ZERO_MASK` the buffer
    reports a length of 1 and a cursor of 0 regardless of its content; edits
    still apply to the real content at the real cursor, but nothing about the
    input reaches the screen.
    """

    def __init__(self, prompt: Prompt | None = None) -> None:
        self._prompt: Prompt = prompt if prompt is not None else Prompt()
        self._line: str = ""
        self._cursor: int = 0
        self.delta: int = 0
        self.prompt_disabled: bool = False
        self._multi_line: bool = False
        self._multi_line_buffer: str = ""

    # -- prompt ---------------------------------------------------------------

    @property
    def prompt(self) -> Prompt:
        return CONTINUATION_PROMPT if self._multi_line else self._prompt

    @property
    def masking(self) -> bool:
        return self._prompt.masking

    @property
    def zero_mask(self) -> bool:
        return self._prompt.zero_mask

    def reset(self, prompt: Prompt | None = None) -> None:
        """Clear everything and switch to *prompt* (an empty one if None)."""
        self._prompt = prompt if prompt is not None else Prompt()
        self._line = ""
        self._cursor = 0
        self.delta = 0
        self._multi_line = False
        self._multi_line_buffer = ""

    def update_prompt(self, prompt: Prompt) -> None:
        """Swap the prompt, keeping any input typed so far."""
        if self._line:
            self._prompt = prompt
        else:
            self.reset(prompt)

    # -- content --------------------------------------------------------------

    @property
    def value(self) -> str:
        """The real, unmasked content."""
        return self._line

    @property
    def line(self) -> str:
        """The content as displayed (mask characters, or nothing)."""
        return self._prompt.mask_text(self._line)

    def display(self, start: int = 0, end: int | None = None) -> str:
        """Displayed form of ``value[start:end]``."""
        return self._prompt.mask_text(self._line[start:end])

    def length(self) -> int:
        if self.zero_mask:
            return 1
        return len(self._line)

    @property
    def cursor(self) -> int:
        if self.zero_mask:
            return 0
        return self._cursor

    @cursor.setter
    def cursor(self, index: int) -> None:
        self._cursor = min(max(index, 0), len(self._line))

    @property
    def real_cursor(self) -> int:
        return self._cursor

    def write(self, text: str) -> None:
        """Insert *text* at the cursor and move the cursor past it."""
        if not self._line:
            self._line = text
        else:
            self._line = self._line[: self._cursor] + text + self._line[self._cursor :]
        self._cursor += len(text)
        self.delta = len(text)

    def insert(self, index: int, text: str) -> None:
        """Insert *text* at *index* without moving the cursor."""
        self._line = self._line[:index] + text + self._line[index:]
        self.delta = len(text)

    def delete(self, start: int, end: int) -> None:
        """Remove ``[start, end)``.

        A cursor after the range shifts left with the text; one inside it
        lands on *start*.
        """
        start = min(max(start, 0), len(self._line))
        end = min(end, len(self._line))
        if end < start:
            start, end = end, start
        self._line = self._line[:start] + self._line[end:]
        self.delta = start - end
        if self._cursor >= end:
            self._cursor -= end - start
        elif self._cursor > start:
            self._cursor = start

    def set_line(self, text: str) -> None:
        """Replace the whole line and put the cursor at its end."""
        self.delta = len(text) - len(self._line)
        self._line = text
        self._cursor = len(text)

    def clear(self) -> None:
        self._line = ""
        self._cursor = 0
        self.delta = 0

    def change_case(self) -> bool:
        """Swap the case of the character under the cursor.

        Returns False when there is no letter under the cursor.
        """
        if self._cursor >= len(self._line):
            return False
        char = self._line[self._cursor]
        if not char.isalpha():
            return False
        swapped = char.lower() if char.isupper() else char.upper()
        self.replace_char(swapped)
        return True

    def replace_char(self, char: str, pos: int | None = None) -> None:
        if pos is None:
            pos = self._cursor
        if 0 <= pos < len(self._line):
            self._line = self._line[:pos] + char + self._line[pos + 1 :]
            self.delta = 0

    # -- multi-line -----------------------------------------------------------

    @property
    def multi_line(self) -> bool:
        return self._multi_line

    @multi_line.setter
    def multi_line(self, value: bool) -> None:
        self._multi_line = value

    def update_multi_line_buffer(self) -> None:
        """Move the live line into the multi-line accumulator.

        A trailing ``" \\"`` continuation marker loses its backslash; the
        space stays and separates the line from the next one.
        """
        line = self._line
        if line.endswith(" \\"):
            line = line[:-1]
        self._multi_line_buffer += line
        self._line = ""
        self._cursor = 0

    @property
    def multi_line_buffer(self) -> str:
        return self._multi_line_buffer

    @property
    def multi_line_value(self) -> str:
        """Accumulated lines followed by the live line."""
        if self._multi_line:
            return self._multi_line_buffer + self._line
        return self._line

    # -- geometry -------------------------------------------------------------

    def column_at(self, index: int) -> int:
        """Absolute 1-based screen column of line position *index*."""
        base = 1 if self.prompt_disabled else self.prompt.width + 1
        if self.zero_mask:
            return base
        return base + visible_width(self.display(0, index))

    def cursor_with_prompt(self) -> int:
        return self.column_at(self.cursor)

    def end_column(self) -> int:
        return self.column_at(len(self._line))

    def move(self, move: int, width: int, vi_mode: bool = False) -> str:
        """Move the cursor by *move* codepoints and return the ANSI to follow it.

        Requests past either end are clamped. With zero masking the cursor
        still moves internally but the returned sequence is empty.
        """
        current = self.cursor_with_prompt()
        move = clamp_move(self._cursor, move, len(self._line), vi_mode)
        self._cursor += move
        if self.zero_mask:
            return ""
        target = self.cursor_with_prompt()
        logger.debug("moving %d from column %d to %d (width %d)", move, current, target, width)
        return move_between(current, target, width)

    def move_to(self, index: int, width: int, vi_mode: bool = False) -> str:
        return self.move(index - self._cursor, width, vi_mode)
