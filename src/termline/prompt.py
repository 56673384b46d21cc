"""Prompt descriptors: plain or styled leading text, optional masking."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable

from termline.utils import caret_notation, visible_width

ZERO_MASK = "\0"

_SGR_RESET = "\x1b[0m"


class Color(enum.IntEnum):
    """ANSI palette index; foreground is ``30 + value``, background ``40 + value``."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    DEFAULT = 9


class CharacterType(enum.Flag):
    """Text attributes, each mapped to its SGR parameter."""

    NONE = 0
    BOLD = enum.auto()
    FAINT = enum.auto()
    ITALIC = enum.auto()
    UNDERLINE = enum.auto()
    INVERT = enum.auto()
    CROSSED_OUT = enum.auto()


_STYLE_CODES: dict[CharacterType, int] = {
    CharacterType.BOLD: 1,
    CharacterType.FAINT: 2,
    CharacterType.ITALIC: 3,
    CharacterType.UNDERLINE: 4,
    CharacterType.INVERT: 7,
    CharacterType.CROSSED_OUT: 9,
}


@dataclass(frozen=True)
class TerminalCharacter:
    """One prompt character with colors and attributes."""

    char: str
    fg: Color = Color.DEFAULT
    bg: Color = Color.DEFAULT
    style: CharacterType = CharacterType.NONE

    def sgr(self) -> str:
        params = [str(code) for flag, code in _STYLE_CODES.items() if flag in self.style]
        params.append(str(30 + self.fg))
        params.append(str(40 + self.bg))
        return f"\x1b[{';'.join(params)}m"

    def to_ansi(self) -> str:
        return self.sgr() + self.char


@dataclass(frozen=True)
class Prompt:
    """Decoration printed in front of the editable line.

    ``mask`` turns on masking: every typed character is shown as ``mask``,
    or not shown at all when ``mask`` is :data:`ZERO_MASK`.
    """

    text: str = ""
    mask: str | None = None
    characters: tuple[TerminalCharacter, ...] = ()

    @classmethod
    def styled(
        cls,
        characters: Iterable[TerminalCharacter],
        mask: str | None = None,
    ) -> Prompt:
        chars = tuple(characters)
        return cls(text="".join(c.char for c in chars), mask=mask, characters=chars)

    @property
    def masking(self) -> bool:
        return self.mask is not None

    @property
    def zero_mask(self) -> bool:
        """True when input is hidden completely (no placeholder glyphs)."""
        return self.mask == ZERO_MASK

    @property
    def width(self) -> int:
        return visible_width(self.text)

    @property
    def ansi(self) -> str:
        """The prompt as it is written to the terminal."""
        if not self.characters:
            return self.text
        return "".join(c.to_ansi() for c in self.characters) + _SGR_RESET

    def mask_text(self, text: str) -> str:
        """Render *text* the way this prompt displays user input.

        Unmasked control characters are shown in caret notation.
        """
        if self.mask is None:
            return caret_notation(text)
        if self.zero_mask:
            return ""
        return self.mask * len(text)


def as_prompt(prompt: Prompt | str | None) -> Prompt:
    if prompt is None:
        return Prompt()
    if isinstance(prompt, Prompt):
        return prompt
    return Prompt(prompt)
