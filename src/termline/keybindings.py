"""Keybinding tables: raw input sequences mapped to edit actions, per mode."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from termline.actions import (
    ACTIONS,
    VI_MOTIONS,
    VI_OPERATORS,
    EditAction,
    Mode,
    operator_action_name,
)
from termline.errors import ConfigError
from termline.keys import KeyId, key_sequences

logger = logging.getLogger(__name__)

KeybindingsConfig = Mapping[str, "KeyId | list[KeyId]"]

DEFAULT_EMACS_KEYBINDINGS: dict[str, KeyId | list[KeyId]] = {
    # Cursor movement
    "backward-char": ["left", "ctrl+b"],
    "forward-char": ["right", "ctrl+f"],
    "backward-word": ["alt+b", "alt+left", "ctrl+left"],
    "forward-word": ["alt+f", "alt+right", "ctrl+right"],
    "beginning-of-line": ["home", "ctrl+a"],
    "end-of-line": ["end", "ctrl+e"],
    # Deletion
    "backward-delete-char": "backspace",
    "delete-char": "delete",
    "eof-or-delete": "ctrl+d",
    "kill-line": "ctrl+k",
    "backward-kill-line": "ctrl+u",
    "kill-word": ["alt+d", "alt+delete"],
    "backward-kill-word": "alt+backspace",
    "unix-word-rubout": "ctrl+w",
    # Kill ring
    "yank": "ctrl+y",
    "yank-pop": "alt+y",
    # Undo
    "undo": "ctrl+_",
    # Case and characters
    "upcase-word": "alt+u",
    "downcase-word": "alt+l",
    "capitalize-word": "alt+c",
    "transpose-chars": "ctrl+t",
    # History
    "previous-history": ["up", "ctrl+p"],
    "next-history": ["down", "ctrl+n"],
    # Line
    "accept-line": ["enter", "linefeed"],
    "complete": "tab",
    "clear-screen": "ctrl+l",
    "interrupt": "ctrl+c",
}

DEFAULT_VI_INSERT_KEYBINDINGS: dict[str, KeyId | list[KeyId]] = {
    "vi-command-mode": "escape",
    "backward-char": "left",
    "forward-char": "right",
    "beginning-of-line": "home",
    "end-of-line": "end",
    "backward-delete-char": "backspace",
    "delete-char": "delete",
    "eof-or-delete": "ctrl+d",
    "backward-kill-line": "ctrl+u",
    "unix-word-rubout": "ctrl+w",
    "previous-history": "up",
    "next-history": "down",
    "accept-line": ["enter", "linefeed"],
    "complete": "tab",
    "clear-screen": "ctrl+l",
    "interrupt": "ctrl+c",
}

DEFAULT_VI_COMMAND_KEYBINDINGS: dict[str, KeyId | list[KeyId]] = {
    # Motions; the operator forms (dw, c$, yB...) are added below
    "backward-char": ["h", "left", "backspace"],
    "forward-char": ["l", "right", "space"],
    "beginning-of-line": ["0", "home"],
    "end-of-line": ["$", "end"],
    "vi-backward-word": "b",
    "vi-forward-word": "w",
    "vi-end-of-word": "e",
    "backward-big-word": "B",
    "forward-big-word": "W",
    "end-of-big-word": "E",
    "vi-find-char": "f",
    "vi-find-char-backward": "F",
    "vi-till-char": "t",
    "vi-till-char-backward": "T",
    # Entering insert mode
    "vi-insert": "i",
    "vi-append": "a",
    "vi-insert-beginning": "I",
    "vi-append-end": "A",
    # Deletion and change
    "vi-delete-char": ["x", "delete"],
    "vi-backward-delete-char": "X",
    "kill-line": "D",
    "vi-change-to-end": "C",
    "vi-substitute-char": "s",
    "vi-delete-line": "dd",
    "vi-change-line": ["cc", "S"],
    "vi-yank-line": "yy",
    "change-case": "~",
    "replace-char": "r",
    # Put and undo
    "vi-put-after": "p",
    "vi-put-before": "P",
    "undo": "u",
    # History
    "previous-history": ["k", "up"],
    "next-history": ["j", "down"],
    # Line
    "accept-line": ["enter", "linefeed"],
    "eof-or-delete": "ctrl+d",
    "clear-screen": "ctrl+l",
    "interrupt": "ctrl+c",
}

for _name, (_motion, _inclusive, _key) in VI_MOTIONS.items():
    for _op, (_prefix, _status) in VI_OPERATORS.items():
        DEFAULT_VI_COMMAND_KEYBINDINGS[operator_action_name(_prefix, _name)] = _op + _key


def as_key_list(keys: KeyId | list[KeyId]) -> list[KeyId]:
    return list(keys) if isinstance(keys, list) else [keys]


class Resolution(enum.Enum):
    EXACT = "exact"
    # pending input is a strict prefix of a longer binding
    PARTIAL = "partial"
    NONE = "none"


@dataclass(frozen=True)
class Match:
    kind: Resolution
    action: EditAction | None = None
    length: int = 0


class KeyBindingTable:
    """Raw sequence -> action map for one mode, with prefix lookup.

    Every action bound into the table must be allowed in the table's mode;
    binding an Emacs-only action into a vi table (or the reverse) raises
    :class:`ConfigError`.
    """

    def __init__(self, mode: Mode) -> None:
        self.mode = mode
        self._bindings: dict[str, EditAction] = {}
        self._prefixes: set[str] = set()
        self._max_length = 0

    @classmethod
    def from_config(
        cls,
        mode: Mode,
        defaults: KeybindingsConfig,
        overrides: KeybindingsConfig | None = None,
    ) -> KeyBindingTable:
        """Build a table from *defaults*, with *overrides* replacing the keys
        of the actions they name."""
        overrides = overrides or {}
        table = cls(mode)
        for name, keys in defaults.items():
            if name not in overrides:
                table.bind_keys(name, as_key_list(keys))
        # overrides go last so their sequences win over defaults
        for name, keys in overrides.items():
            table.bind_keys(name, as_key_list(keys))
        return table

    def bind_keys(self, name: str, keys: list[KeyId]) -> None:
        action = ACTIONS.get(name)
        if action is None:
            raise ConfigError(f"unknown action: {name!r}")
        for key in keys:
            for sequence in key_sequences(key):
                self.bind(sequence, action)

    def bind(self, sequence: str, action: EditAction) -> None:
        if not sequence:
            raise ConfigError(f"empty key sequence for {action.name!r}")
        if not action.allowed_in(self.mode):
            raise ConfigError(f"action {action.name!r} is not available in {self.mode.name} mode")
        previous = self._bindings.get(sequence)
        if previous is not None and previous is not action:
            logger.debug("rebinding %r from %s to %s", sequence, previous.name, action.name)
        self._bindings[sequence] = action
        for i in range(1, len(sequence)):
            self._prefixes.add(sequence[:i])
        self._max_length = max(self._max_length, len(sequence))

    def lookup(self, sequence: str) -> EditAction | None:
        return self._bindings.get(sequence)

    def is_prefix(self, sequence: str) -> bool:
        """True if *sequence* is a strict prefix of some bound sequence."""
        return sequence in self._prefixes

    def binds_start(self, char: str) -> bool:
        """True if some binding starts with *char*."""
        return char in self._bindings or char in self._prefixes

    def resolve(self, pending: str) -> Match:
        """Match the start of *pending* against the table.

        PARTIAL means more input could complete a longer binding; the match
        then carries the action bound to *pending* itself, if any.
        Otherwise the longest bound prefix wins.
        """
        if pending in self._prefixes:
            action = self._bindings.get(pending)
            return Match(Resolution.PARTIAL, action, len(pending) if action else 0)
        for length in range(min(len(pending), self._max_length), 0, -1):
            action = self._bindings.get(pending[:length])
            if action is not None:
                return Match(Resolution.EXACT, action, length)
        return Match(Resolution.NONE)

    def sequences(self, name: str) -> list[str]:
        return [seq for seq, action in self._bindings.items() if action.name == name]

    def __contains__(self, sequence: object) -> bool:
        return sequence in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)
