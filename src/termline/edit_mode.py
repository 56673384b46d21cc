"""Edit modes: which keybinding table is active, and vi's insert/command state."""

from __future__ import annotations

import copy
import logging

from termline.actions import Mode
from termline.errors import ConfigError
from termline.keybindings import (
    DEFAULT_EMACS_KEYBINDINGS,
    DEFAULT_VI_COMMAND_KEYBINDINGS,
    DEFAULT_VI_INSERT_KEYBINDINGS,
    KeyBindingTable,
    KeybindingsConfig,
    as_key_list,
)
from termline.keys import key_sequences

logger = logging.getLogger(__name__)


class EditMode:
    mode: Mode

    @property
    def table(self) -> KeyBindingTable:
        raise NotImplementedError

    @property
    def is_vi(self) -> bool:
        return self.mode is Mode.VI

    @property
    def command_mode(self) -> bool:
        """True in vi command mode, where the cursor stays on a character."""
        return False

    def enter_insert(self) -> None:
        pass

    def enter_command(self) -> None:
        pass

    def reset(self) -> None:
        """Return to the state a fresh line starts in."""

    def fresh(self) -> EditMode:
        """Copy sharing the keybinding tables, in the state a new line starts in."""
        mode = copy.copy(self)
        mode.reset()
        return mode


class EmacsMode(EditMode):
    mode = Mode.EMACS

    def __init__(self, keybindings: KeybindingsConfig | None = None) -> None:
        self._table = KeyBindingTable.from_config(Mode.EMACS, DEFAULT_EMACS_KEYBINDINGS, keybindings)

    @property
    def table(self) -> KeyBindingTable:
        return self._table


def _is_printable_key(key: str) -> bool:
    return all(seq.isprintable() for seq in key_sequences(key))


class ViMode(EditMode):
    """vi editing: lines start in insert mode, ESC switches to command mode.

    User overrides made of printable keys go to the command table only, so
    they never shadow typing in insert mode; the rest go to both tables.
    """

    mode = Mode.VI

    def __init__(self, keybindings: KeybindingsConfig | None = None) -> None:
        insert_overrides: dict = {}
        command_overrides: dict = {}
        for name, keys in (keybindings or {}).items():
            keys = as_key_list(keys)
            command_overrides[name] = keys
            control = [key for key in keys if not _is_printable_key(key)]
            if control:
                insert_overrides[name] = control
        self._insert_table = KeyBindingTable.from_config(
            Mode.VI, DEFAULT_VI_INSERT_KEYBINDINGS, insert_overrides
        )
        self._command_table = KeyBindingTable.from_config(
            Mode.VI, DEFAULT_VI_COMMAND_KEYBINDINGS, command_overrides
        )
        self._inserting = True

    @property
    def table(self) -> KeyBindingTable:
        return self._insert_table if self._inserting else self._command_table

    @property
    def insert_table(self) -> KeyBindingTable:
        return self._insert_table

    @property
    def command_table(self) -> KeyBindingTable:
        return self._command_table

    @property
    def command_mode(self) -> bool:
        return not self._inserting

    def enter_insert(self) -> None:
        if not self._inserting:
            logger.debug("vi: insert mode")
        self._inserting = True

    def enter_command(self) -> None:
        if self._inserting:
            logger.debug("vi: command mode")
        self._inserting = False

    def reset(self) -> None:
        self._inserting = True


def create_edit_mode(name: str = "emacs", keybindings: KeybindingsConfig | None = None) -> EditMode:
    """Build the edit mode called *name* (``"emacs"`` or ``"vi"``)."""
    name = name.lower()
    if name == "emacs":
        return EmacsMode(keybindings)
    if name == "vi":
        return ViMode(keybindings)
    raise ConfigError(f"unknown editing mode: {name!r}")
