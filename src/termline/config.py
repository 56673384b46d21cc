"""Editor configuration: defaults, environment variables and inputrc."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from termline.actions import ACTIONS, Mode
from termline.errors import ConfigError
from termline.keybindings import DEFAULT_EMACS_KEYBINDINGS, as_key_list
from termline.keys import KeyId, key_sequences, parse_inputrc_keyseq

logger = logging.getLogger(__name__)

EDIT_MODES = ("emacs", "vi")

_BINDING_RE = re.compile(r'^"(?P<seq>(?:[^"\\]|\\.)*)"\s*:\s*(?P<action>\S+)')
_KEYNAME_RE = re.compile(r"^(?P<key>[A-Za-z][\w-]*)\s*:\s*(?P<action>\S+)")

_KEYNAME_MODIFIERS = {
    "control": "ctrl",
    "ctrl": "ctrl",
    "c": "ctrl",
    "meta": "alt",
    "m": "alt",
}

_KEYNAMES = {
    "rubout": "backspace",
    "del": "delete",
    "esc": "escape",
    "escape": "escape",
    "newline": "linefeed",
    "lfd": "linefeed",
    "ret": "enter",
    "return": "enter",
    "spc": "space",
    "space": "space",
    "tab": "tab",
}


@dataclass
class Config:
    """Editor settings.

    ``keybindings`` maps action names to key ids and replaces the default
    keys of each action it names. Bindings read from inputrc are kept apart
    in ``inputrc_bindings`` and add to the Emacs keys instead.
    """

    edit_mode: str = "emacs"
    keybindings: dict[str, KeyId | list[KeyId]] = field(default_factory=dict)
    history_size: int = 500
    bell: bool = True
    encoding: str | None = None
    inputrc_bindings: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Defaults, then inputrc (``INPUTRC`` or ``~/.inputrc``), then
        ``TERMLINE_EDIT_MODE``."""
        environ = os.environ if environ is None else environ
        config = cls()

        path = _inputrc_path(environ)
        if path is not None and path.is_file():
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError:
                logger.warning("cannot read %s", path, exc_info=True)
            else:
                config.apply_inputrc(text)

        mode = environ.get("TERMLINE_EDIT_MODE")
        if mode:
            config.edit_mode = mode.strip().lower()
        if config.edit_mode not in EDIT_MODES:
            raise ConfigError(f"unknown editing mode: {config.edit_mode!r}")
        return config

    def apply_inputrc(self, text: str) -> None:
        """Apply the settings and bindings of inputrc *text*.

        Conditional blocks (``$if`` ... ``$endif``) and bindings under a vi
        keymap are skipped; unknown variables and functions are ignored.
        """
        depth = 0
        keymap = "emacs"
        for lineno, raw in enumerate(text.splitlines(), 1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("$"):
                directive = line[1:].split(None, 1)[0].lower() if len(line) > 1 else ""
                if directive == "if":
                    depth += 1
                elif directive == "endif":
                    depth = max(depth - 1, 0)
                else:
                    logger.debug("inputrc:%d: ignoring %s", lineno, line)
                continue
            if depth:
                continue

            if line.startswith("set ") or line.startswith("set\t"):
                parts = line.split(None, 2)
                if len(parts) == 3:
                    keymap = self._set_variable(parts[1].lower(), parts[2].strip(), keymap, lineno)
                continue

            binding = self._parse_binding(line, lineno)
            if binding is None:
                continue
            if keymap != "emacs":
                logger.debug("inputrc:%d: ignoring binding for keymap %s", lineno, keymap)
                continue
            self.inputrc_bindings.append(binding)

    def _set_variable(self, name: str, value: str, keymap: str, lineno: int) -> str:
        value_lower = value.lower()
        if name == "editing-mode":
            if value_lower in EDIT_MODES:
                self.edit_mode = value_lower
                keymap = "emacs" if value_lower == "emacs" else "vi"
            else:
                logger.warning("inputrc:%d: unknown editing-mode %r", lineno, value)
        elif name == "keymap":
            keymap = "emacs" if value_lower.startswith("emacs") else value_lower
        elif name == "bell-style":
            self.bell = value_lower != "none"
        elif name == "history-size":
            try:
                self.history_size = max(int(value), 0)
            except ValueError:
                logger.warning("inputrc:%d: bad history-size %r", lineno, value)
        else:
            logger.debug("inputrc:%d: ignoring variable %s", lineno, name)
        return keymap

    def _parse_binding(self, line: str, lineno: int) -> tuple[str, str] | None:
        match = _BINDING_RE.match(line)
        if match:
            try:
                key = parse_inputrc_keyseq(match.group("seq"))
            except ConfigError:
                logger.warning("inputrc:%d: bad key sequence in %r", lineno, line)
                return None
        else:
            match = _KEYNAME_RE.match(line)
            if match is None:
                logger.debug("inputrc:%d: cannot parse %r", lineno, line)
                return None
            key = _keyname_to_key_id(match.group("key"))
            if key is None:
                logger.debug("inputrc:%d: unknown key name in %r", lineno, line)
                return None

        try:
            key_sequences(key)
        except ConfigError:
            logger.warning("inputrc:%d: cannot bind %r", lineno, line)
            return None

        action = match.group("action")
        if action not in ACTIONS:
            logger.debug("inputrc:%d: unsupported function %s", lineno, action)
            return None
        return key, action

    def keybindings_for(self, mode: str) -> dict[str, KeyId | list[KeyId]]:
        """Overrides to build the keybinding tables of *mode* with."""
        bindings: dict[str, KeyId | list[KeyId]] = dict(self.keybindings)
        if mode != "emacs":
            return bindings
        for key, name in self.inputrc_bindings:
            if not ACTIONS[name].allowed_in(Mode.EMACS):
                continue
            keys = bindings.get(name, DEFAULT_EMACS_KEYBINDINGS.get(name, []))
            bindings[name] = as_key_list(keys) + [key]
        return bindings


def _inputrc_path(environ: Mapping[str, str]) -> Path | None:
    if environ.get("INPUTRC"):
        return Path(environ["INPUTRC"]).expanduser()
    home = environ.get("HOME")
    if home:
        return Path(home) / ".inputrc"
    return None


def _keyname_to_key_id(name: str) -> KeyId | None:
    """``Control-a`` -> ``ctrl+a``, ``Meta-Rubout`` -> ``alt+backspace``."""
    parts = name.split("-")
    modifiers = []
    while len(parts) > 1 and parts[0].lower() in _KEYNAME_MODIFIERS:
        modifiers.append(_KEYNAME_MODIFIERS[parts.pop(0).lower()])
    key = "-".join(parts)
    if len(key) == 1:
        base = key.lower() if "ctrl" in modifiers else key
    else:
        base = _KEYNAMES.get(key.lower())
        if base is None:
            return None
    return "+".join(modifiers + [base])
