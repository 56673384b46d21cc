"""Key identifiers and the raw sequences terminals send for them.

Key ids are the human-readable names used in keybinding tables and config:
``"ctrl+a"``, ``"alt+b"``, ``"left"``, ``"ctrl+left"``, ``"backspace"``.
Anything that is not a known name or modifier combination is taken
literally, which is how vi command keys such as ``"dw"`` or ``"$"`` are bound.
"""

from __future__ import annotations

from termline.errors import ConfigError

KeyId = str

ESC = "\x1b"
CSI = "\x1b["

# ---------------------------------------------------------------------------
# Named keys
# ---------------------------------------------------------------------------

NAMED_KEYS: dict[str, tuple[str, ...]] = {
    "escape": (ESC,),
    "esc": (ESC,),
    "enter": ("\r",),
    "return": ("\r",),
    "linefeed": ("\n",),
    "tab": ("\t",),
    "space": (" ",),
    "backspace": ("\x7f", "\x08"),
    "delete": ("\x1b[3~",),
    "insert": ("\x1b[2~",),
    "home": ("\x1b[H", "\x1bOH", "\x1b[1~", "\x1b[7~"),
    "end": ("\x1b[F", "\x1bOF", "\x1b[4~", "\x1b[8~"),
    "pageUp": ("\x1b[5~",),
    "pageDown": ("\x1b[6~",),
    "up": ("\x1b[A", "\x1bOA"),
    "down": ("\x1b[B", "\x1bOB"),
    "right": ("\x1b[C", "\x1bOC"),
    "left": ("\x1b[D", "\x1bOD"),
}

# Final byte (or "n~" form) of keys that take an xterm modifier parameter
_MODIFIABLE: dict[str, str] = {
    "up": "A",
    "down": "B",
    "right": "C",
    "left": "D",
    "home": "H",
    "end": "F",
    "delete": "3~",
}

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}


# ---------------------------------------------------------------------------
# Raw control character helper
# ---------------------------------------------------------------------------


def raw_ctrl_char(key: str) -> str | None:
    """Return the control character for a key, or ``None`` if not applicable.

    For example, ``raw_ctrl_char("a")`` returns ``"\\x01"``.
    """
    if len(key) != 1:
        return None
    code = ord(key.lower())
    if ord("a") <= code <= ord("z"):
        return chr(code & 0x1F)
    ctrl_map: dict[str, str] = {
        "[": chr(27),
        "\\": chr(28),
        "]": chr(29),
        "^": chr(30),
        "_": chr(31),
        "-": chr(31),
        "@": chr(0),
        "?": chr(127),
    }
    return ctrl_map.get(key)


# ---------------------------------------------------------------------------
# Key ID parsing
# ---------------------------------------------------------------------------


def _split_key_id(key_id: str) -> tuple[int, str]:
    parts = key_id.split("+")
    modifier = 0
    while len(parts) > 1 and parts[0].lower() in MODIFIERS:
        modifier |= MODIFIERS[parts.pop(0).lower()]
    return modifier, "+".join(parts)


def key_sequences(key_id: KeyId) -> tuple[str, ...]:
    """All raw sequences a terminal may send for *key_id*.

    Raises :class:`ConfigError` for a modifier combination that has no
    terminal encoding (``"ctrl+f5"``, ``"ctrl+"``).
    """
    if not key_id:
        raise ConfigError("empty key id")

    if key_id in NAMED_KEYS:
        return NAMED_KEYS[key_id]

    modifier, key = _split_key_id(key_id)
    if not modifier:
        return (key_id,)
    if not key:
        raise ConfigError(f"key id without a key: {key_id!r}")

    if key in _MODIFIABLE:
        final = _MODIFIABLE[key]
        param = modifier + 1
        if final.endswith("~"):
            return (f"{CSI}{final[:-1]};{param}~",)
        return (f"{CSI}1;{param}{final}",)

    if modifier & MODIFIERS["shift"]:
        raise ConfigError(f"unsupported shift combination: {key_id!r}")

    if modifier & MODIFIERS["ctrl"]:
        ctrl = raw_ctrl_char(key)
        if ctrl is None:
            raise ConfigError(f"unsupported ctrl combination: {key_id!r}")
        base: tuple[str, ...] = (ctrl,)
    else:
        base = NAMED_KEYS.get(key, (key,))

    if modifier & MODIFIERS["alt"]:
        return tuple(ESC + seq for seq in base)
    return base


# ---------------------------------------------------------------------------
# inputrc key notation
# ---------------------------------------------------------------------------

_INPUTRC_ESCAPES: dict[str, str] = {
    "e": ESC,
    "a": "\x07",
    "b": "\x08",
    "d": "\x7f",
    "f": "\x0c",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\x0b",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


def parse_inputrc_keyseq(text: str) -> str:
    """Decode a quoted inputrc key sequence body such as ``\\C-a`` or ``\\e[A``."""
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt in ("C", "M") and text[i + 2 : i + 3] == "-" and i + 3 < len(text):
            target = text[i + 3]
            consumed = 4
            if target == "\\" and i + 4 < len(text):
                target = _INPUTRC_ESCAPES.get(text[i + 4], text[i + 4])
                consumed = 5
            if nxt == "C":
                ctrl = raw_ctrl_char(target)
                if ctrl is None:
                    raise ConfigError(f"cannot apply control to {target!r}")
                out.append(ctrl)
            else:
                out.append(ESC + target)
            i += consumed
            continue
        out.append(_INPUTRC_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


# ---------------------------------------------------------------------------
# Escape sequence framing
# ---------------------------------------------------------------------------


def escape_sequence_length(data: str) -> int | None:
    """Length of the escape sequence at the start of *data*.

    Returns ``None`` while the sequence is still incomplete and 0 when *data*
    does not start with ESC.
    """
    if not data.startswith(ESC):
        return 0
    if len(data) == 1:
        return None

    intro = data[1]

    # CSI: ESC [ params intermediates final(0x40-0x7E)
    if intro == "[":
        for i in range(2, len(data)):
            if 0x40 <= ord(data[i]) <= 0x7E:
                return i + 1
        return None

    # SS3: ESC O <char>
    if intro == "O":
        return 3 if len(data) >= 3 else None

    # OSC / DCS / APC: terminated by BEL or ST
    if intro in ("]", "P", "_"):
        for i in range(2, len(data)):
            if data[i] == "\x07":
                return i + 1
            if data[i] == "\\" and data[i - 1] == ESC:
                return i + 1
        return None

    # Meta key: ESC followed by a single character
    return 2
