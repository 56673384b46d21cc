"""Edit actions: motions and mutations bound to keys per edit mode.

Every action is an :class:`EditAction` value carrying the modes it may be
bound in, an effect classification (:class:`Status`) and the function that
runs it against an :class:`~termline.input_processor.InputProcessor`. Actions
are looked up by name in :data:`ACTIONS`.

Cursor motions are plain functions ``(text, cursor) -> new_cursor``. The
vi operators ``d``, ``c`` and ``y`` are generated from the motion table, so
``dw``, ``cB`` or ``y$`` exist without a class per combination.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from termline.utils import (
    is_punctuation_char,
    is_whitespace_char,
    is_word_char,
    next_grapheme_length,
    previous_grapheme_length,
)

if TYPE_CHECKING:
    from termline.input_processor import InputProcessor


class Mode(enum.Flag):
    """Edit modes an action may be bound in."""

    EMACS = enum.auto()
    VI = enum.auto()
    BOTH = EMACS | VI


class Status(enum.Enum):
    """What an action does to the line.

    Text removed or copied by a DELETE, CHANGE or YANK action goes to the
    kill ring; EDIT changes the line without touching it and MOVE only
    repositions.
    """

    MOVE = "move"
    DELETE = "delete"
    CHANGE = "change"
    YANK = "yank"
    EDIT = "edit"
    NONE = "none"


# statuses whose removed or copied text updates the kill ring
REGISTER_STATUSES = frozenset({Status.DELETE, Status.CHANGE, Status.YANK})


ActionFn = Callable[["InputProcessor", "str | None"], None]
Motion = Callable[[str, int], int]


@dataclass(frozen=True)
class EditAction:
    name: str
    run: ActionFn
    modes: Mode = Mode.BOTH
    status: Status = Status.NONE
    # reads one more key after its binding (vi r, f, t)
    takes_char: bool = False

    def allowed_in(self, mode: Mode) -> bool:
        return bool(self.modes & mode)


ACTIONS: dict[str, EditAction] = {}


def action(
    name: str,
    modes: Mode = Mode.BOTH,
    status: Status = Status.NONE,
    takes_char: bool = False,
) -> Callable[[ActionFn], ActionFn]:
    def register(fn: ActionFn) -> ActionFn:
        ACTIONS[name] = EditAction(name, fn, modes, status, takes_char)
        return fn

    return register


def get_action(name: str) -> EditAction | None:
    return ACTIONS.get(name)


# ---------------------------------------------------------------------------
# Motions
# ---------------------------------------------------------------------------


def backward_char(text: str, cursor: int) -> int:
    return cursor - previous_grapheme_length(text, cursor)


def forward_char(text: str, cursor: int) -> int:
    return cursor + next_grapheme_length(text, cursor)


def beginning_of_line(text: str, cursor: int) -> int:
    return 0


def end_of_line(text: str, cursor: int) -> int:
    return len(text)


def backward_word(text: str, cursor: int) -> int:
    """Emacs ``M-b``: skip non-word characters, then word characters."""
    cursor = min(cursor, len(text))
    while cursor > 0 and not is_word_char(text[cursor - 1]):
        cursor -= 1
    while cursor > 0 and is_word_char(text[cursor - 1]):
        cursor -= 1
    return cursor


def forward_word(text: str, cursor: int) -> int:
    """Emacs ``M-f``: skip non-word characters, then to the end of the word."""
    while cursor < len(text) and not is_word_char(text[cursor]):
        cursor += 1
    while cursor < len(text) and is_word_char(text[cursor]):
        cursor += 1
    return cursor


def backward_big_word(text: str, cursor: int) -> int:
    """Start of the previous whitespace-delimited word."""
    cursor = min(cursor, len(text))
    # whitespace right before the cursor first
    while cursor > 0 and is_whitespace_char(text[cursor - 1]):
        cursor -= 1
    while cursor > 0 and not is_whitespace_char(text[cursor - 1]):
        cursor -= 1
    return cursor


def forward_big_word(text: str, cursor: int) -> int:
    """Start of the next whitespace-delimited word."""
    while cursor < len(text) and not is_whitespace_char(text[cursor]):
        cursor += 1
    while cursor < len(text) and is_whitespace_char(text[cursor]):
        cursor += 1
    return cursor


def end_of_big_word(text: str, cursor: int) -> int:
    """Last character of the current or next whitespace-delimited word."""
    if cursor >= len(text) - 1:
        return max(len(text) - 1, 0)
    cursor += 1
    while cursor < len(text) - 1 and is_whitespace_char(text[cursor]):
        cursor += 1
    while cursor < len(text) - 1 and not is_whitespace_char(text[cursor + 1]):
        cursor += 1
    return cursor


def _char_class(char: str) -> int:
    if is_whitespace_char(char):
        return 0
    if is_punctuation_char(char):
        return 1
    return 2


def vi_backward_word(text: str, cursor: int) -> int:
    """vi ``b``: runs of punctuation and runs of word characters are words."""
    cursor = min(cursor, len(text))
    while cursor > 0 and is_whitespace_char(text[cursor - 1]):
        cursor -= 1
    if cursor > 0:
        cls = _char_class(text[cursor - 1])
        while cursor > 0 and _char_class(text[cursor - 1]) == cls:
            cursor -= 1
    return cursor


def vi_forward_word(text: str, cursor: int) -> int:
    """vi ``w``: start of the next word or punctuation run."""
    if cursor < len(text) and not is_whitespace_char(text[cursor]):
        cls = _char_class(text[cursor])
        while cursor < len(text) and _char_class(text[cursor]) == cls:
            cursor += 1
    while cursor < len(text) and is_whitespace_char(text[cursor]):
        cursor += 1
    return cursor


def vi_end_of_word(text: str, cursor: int) -> int:
    """vi ``e``: last character of the current or next word."""
    if cursor >= len(text) - 1:
        return max(len(text) - 1, 0)
    cursor += 1
    while cursor < len(text) - 1 and is_whitespace_char(text[cursor]):
        cursor += 1
    cls = _char_class(text[cursor])
    while cursor < len(text) - 1 and _char_class(text[cursor + 1]) == cls:
        cursor += 1
    return cursor


# name -> (motion, inclusive, vi key)
VI_MOTIONS: dict[str, tuple[Motion, bool, str]] = {
    "backward-char": (backward_char, False, "h"),
    "forward-char": (forward_char, False, "l"),
    "beginning-of-line": (beginning_of_line, False, "0"),
    "end-of-line": (end_of_line, False, "$"),
    "vi-backward-word": (vi_backward_word, False, "b"),
    "vi-forward-word": (vi_forward_word, False, "w"),
    "vi-end-of-word": (vi_end_of_word, True, "e"),
    "backward-big-word": (backward_big_word, False, "B"),
    "forward-big-word": (forward_big_word, False, "W"),
    "end-of-big-word": (end_of_big_word, True, "E"),
}

# vi operator key -> (action name prefix, status)
VI_OPERATORS: dict[str, tuple[str, Status]] = {
    "d": ("vi-delete-", Status.DELETE),
    "c": ("vi-change-", Status.CHANGE),
    "y": ("vi-yank-", Status.YANK),
}


def apply_motion(p: InputProcessor, motion: Motion, status: Status, inclusive: bool = False) -> None:
    """Move to, delete, change or yank the span covered by *motion*."""
    text = p.buffer.value
    cursor = p.buffer.real_cursor
    target = motion(text, cursor)

    if status is Status.MOVE:
        p.move_to(target)
        return

    start, end = sorted((cursor, target))
    if inclusive and target >= cursor:
        end = min(end + 1, len(text))
    if start == end:
        return

    if status is Status.YANK:
        p.copy_range(start, end)
        p.move_to(start)
        return

    p.delete_range(start, end, backward=target < cursor)
    if status is Status.CHANGE:
        p.edit_mode.enter_insert()


def _motion_action(motion: Motion, status: Status, inclusive: bool) -> ActionFn:
    def run(p: InputProcessor, char: str | None) -> None:
        apply_motion(p, motion, status, inclusive)

    return run


def operator_action_name(prefix: str, motion_name: str) -> str:
    """Name of the vi operator action, e.g. ``vi-delete-forward-word`` for ``dw``."""
    return prefix + motion_name.removeprefix("vi-")


# cw and cW change to the end of the word, like ce and cE
_CHANGE_MOTIONS: dict[str, str] = {
    "vi-forward-word": "vi-end-of-word",
    "forward-big-word": "end-of-big-word",
}


def _register_motions() -> None:
    both = {"backward-char", "forward-char", "beginning-of-line", "end-of-line"}
    for name, (motion, inclusive, _key) in VI_MOTIONS.items():
        modes = Mode.BOTH if name in both else Mode.VI
        ACTIONS[name] = EditAction(name, _motion_action(motion, Status.MOVE, inclusive), modes, Status.MOVE)
        for prefix, status in VI_OPERATORS.values():
            op_name = operator_action_name(prefix, name)
            op_motion, op_inclusive = motion, inclusive
            if status is Status.CHANGE and name in _CHANGE_MOTIONS:
                op_motion, op_inclusive, _ = VI_MOTIONS[_CHANGE_MOTIONS[name]]
            ACTIONS[op_name] = EditAction(
                op_name, _motion_action(op_motion, status, op_inclusive), Mode.VI, status
            )

    ACTIONS["backward-word"] = EditAction(
        "backward-word", _motion_action(backward_word, Status.MOVE, False), Mode.EMACS, Status.MOVE
    )
    ACTIONS["forward-word"] = EditAction(
        "forward-word", _motion_action(forward_word, Status.MOVE, False), Mode.EMACS, Status.MOVE
    )


_register_motions()


# ---------------------------------------------------------------------------
# Line submission, completion, signals
# ---------------------------------------------------------------------------


@action("accept-line")
def _accept_line(p: InputProcessor, char: str | None) -> None:
    p.accept()


@action("complete", status=Status.EDIT)
def _complete(p: InputProcessor, char: str | None) -> None:
    p.complete()


@action("interrupt")
def _interrupt(p: InputProcessor, char: str | None) -> None:
    p.interrupt()


@action("clear-screen")
def _clear_screen(p: InputProcessor, char: str | None) -> None:
    p.clear_screen()


@action("eof-or-delete", status=Status.EDIT)
def _eof_or_delete(p: InputProcessor, char: str | None) -> None:
    if not p.buffer.value and not p.buffer.multi_line:
        p.finish(None)
        return
    _delete_char(p, char)


# ---------------------------------------------------------------------------
# Deletion
# ---------------------------------------------------------------------------


@action("delete-char", status=Status.EDIT)
def _delete_char(p: InputProcessor, char: str | None) -> None:
    text = p.buffer.value
    cursor = p.buffer.real_cursor
    if cursor >= len(text):
        p.bell()
        return
    p.delete_range(cursor, forward_char(text, cursor))


@action("backward-delete-char", status=Status.EDIT)
def _backward_delete_char(p: InputProcessor, char: str | None) -> None:
    text = p.buffer.value
    cursor = p.buffer.real_cursor
    if cursor == 0:
        p.bell()
        return
    p.delete_range(backward_char(text, cursor), cursor, backward=True)


# vi x and X keep what they delete
@action("vi-delete-char", Mode.VI, Status.DELETE)
def _vi_delete_char(p: InputProcessor, char: str | None) -> None:
    _delete_char(p, char)


@action("vi-backward-delete-char", Mode.VI, Status.DELETE)
def _vi_backward_delete_char(p: InputProcessor, char: str | None) -> None:
    _backward_delete_char(p, char)


@action("kill-line", status=Status.DELETE)
def _kill_line(p: InputProcessor, char: str | None) -> None:
    p.delete_range(p.buffer.real_cursor, len(p.buffer.value))


@action("backward-kill-line", status=Status.DELETE)
def _backward_kill_line(p: InputProcessor, char: str | None) -> None:
    p.delete_range(0, p.buffer.real_cursor, backward=True)


@action("kill-word", Mode.EMACS, Status.DELETE)
def _kill_word(p: InputProcessor, char: str | None) -> None:
    apply_motion(p, forward_word, Status.DELETE)


@action("backward-kill-word", Mode.EMACS, Status.DELETE)
def _backward_kill_word(p: InputProcessor, char: str | None) -> None:
    apply_motion(p, backward_word, Status.DELETE)


@action("unix-word-rubout", status=Status.DELETE)
def _unix_word_rubout(p: InputProcessor, char: str | None) -> None:
    apply_motion(p, backward_big_word, Status.DELETE)


@action("vi-delete-line", Mode.VI, Status.DELETE)
def _vi_delete_line(p: InputProcessor, char: str | None) -> None:
    p.delete_range(0, len(p.buffer.value))


@action("vi-change-line", Mode.VI, Status.CHANGE)
def _vi_change_line(p: InputProcessor, char: str | None) -> None:
    p.delete_range(0, len(p.buffer.value))
    p.edit_mode.enter_insert()


@action("vi-yank-line", Mode.VI, Status.YANK)
def _vi_yank_line(p: InputProcessor, char: str | None) -> None:
    p.copy_range(0, len(p.buffer.value))


@action("vi-change-to-end", Mode.VI, Status.CHANGE)
def _vi_change_to_end(p: InputProcessor, char: str | None) -> None:
    p.delete_range(p.buffer.real_cursor, len(p.buffer.value))
    p.edit_mode.enter_insert()


@action("vi-substitute-char", Mode.VI, Status.CHANGE)
def _vi_substitute_char(p: InputProcessor, char: str | None) -> None:
    text = p.buffer.value
    cursor = p.buffer.real_cursor
    if cursor < len(text):
        p.delete_range(cursor, forward_char(text, cursor))
    p.edit_mode.enter_insert()


# ---------------------------------------------------------------------------
# Kill ring
# ---------------------------------------------------------------------------


@action("yank", Mode.EMACS, Status.EDIT)
def _yank(p: InputProcessor, char: str | None) -> None:
    p.yank()


@action("yank-pop", Mode.EMACS, Status.EDIT)
def _yank_pop(p: InputProcessor, char: str | None) -> None:
    p.yank_pop()


@action("vi-put-after", Mode.VI, Status.EDIT)
def _vi_put_after(p: InputProcessor, char: str | None) -> None:
    text = p.kill_ring.peek()
    if not text:
        p.bell()
        return
    value = p.buffer.value
    cursor = p.buffer.real_cursor
    p.move_to_unclamped(cursor + next_grapheme_length(value, cursor) if value else 0)
    p.insert_text(text)
    p.move_to(p.buffer.real_cursor - 1)


@action("vi-put-before", Mode.VI, Status.EDIT)
def _vi_put_before(p: InputProcessor, char: str | None) -> None:
    text = p.kill_ring.peek()
    if not text:
        p.bell()
        return
    p.insert_text(text)
    p.move_to(p.buffer.real_cursor - 1)


@action("undo", status=Status.EDIT)
def _undo(p: InputProcessor, char: str | None) -> None:
    p.undo()


# ---------------------------------------------------------------------------
# Case and character changes
# ---------------------------------------------------------------------------


@action("change-case", Mode.VI, Status.CHANGE)
def _change_case(p: InputProcessor, char: str | None) -> None:
    buf = p.buffer
    if buf.real_cursor >= len(buf.value):
        return
    p.push_undo()
    if buf.change_case():
        p.refresh_char(buf.real_cursor)
    p.move_to(buf.real_cursor + 1)


@action("replace-char", Mode.VI, Status.CHANGE, takes_char=True)
def _replace_char(p: InputProcessor, char: str | None) -> None:
    buf = p.buffer
    if char is None or buf.real_cursor >= len(buf.value) or not char.isprintable():
        p.bell()
        return
    p.push_undo()
    buf.replace_char(char)
    p.refresh_char(buf.real_cursor)


def _transform_word(p: InputProcessor, transform: Callable[[str], str]) -> None:
    buf = p.buffer
    start = buf.real_cursor
    end = forward_word(buf.value, start)
    if start == end:
        return
    p.replace_range(start, end, transform(buf.value[start:end]))


@action("upcase-word", Mode.EMACS, Status.CHANGE)
def _upcase_word(p: InputProcessor, char: str | None) -> None:
    _transform_word(p, str.upper)


@action("downcase-word", Mode.EMACS, Status.CHANGE)
def _downcase_word(p: InputProcessor, char: str | None) -> None:
    _transform_word(p, str.lower)


def _capitalize(word: str) -> str:
    for i, ch in enumerate(word):
        if is_word_char(ch):
            return word[:i] + ch.upper() + word[i + 1 :].lower()
    return word


@action("capitalize-word", Mode.EMACS, Status.CHANGE)
def _capitalize_word(p: InputProcessor, char: str | None) -> None:
    _transform_word(p, _capitalize)


@action("transpose-chars", Mode.EMACS, Status.CHANGE)
def _transpose_chars(p: InputProcessor, char: str | None) -> None:
    text = p.buffer.value
    cursor = p.buffer.real_cursor
    if len(text) < 2 or cursor == 0:
        p.bell()
        return
    if cursor == len(text):
        cursor -= 1
    swapped = text[cursor] + text[cursor - 1]
    p.replace_range(cursor - 1, cursor + 1, swapped)


# ---------------------------------------------------------------------------
# vi mode switches and character search
# ---------------------------------------------------------------------------


@action("vi-command-mode", Mode.VI)
def _vi_command_mode(p: InputProcessor, char: str | None) -> None:
    p.edit_mode.enter_command()
    p.move_to(backward_char(p.buffer.value, p.buffer.real_cursor))


@action("vi-insert", Mode.VI)
def _vi_insert(p: InputProcessor, char: str | None) -> None:
    p.edit_mode.enter_insert()


@action("vi-append", Mode.VI)
def _vi_append(p: InputProcessor, char: str | None) -> None:
    p.edit_mode.enter_insert()
    p.move_to(forward_char(p.buffer.value, p.buffer.real_cursor))


@action("vi-insert-beginning", Mode.VI)
def _vi_insert_beginning(p: InputProcessor, char: str | None) -> None:
    p.edit_mode.enter_insert()
    p.move_to(0)


@action("vi-append-end", Mode.VI)
def _vi_append_end(p: InputProcessor, char: str | None) -> None:
    p.edit_mode.enter_insert()
    p.move_to(len(p.buffer.value))


def _find(text: str, cursor: int, char: str, forward: bool, till: bool) -> int:
    if forward:
        index = text.find(char, cursor + (2 if till else 1))
        if index == -1:
            return cursor
        return index - 1 if till else index
    index = text.rfind(char, 0, max(cursor - (1 if till else 0), 0))
    if index == -1:
        return cursor
    return index + 1 if till else index


def _find_action(forward: bool, till: bool) -> ActionFn:
    def run(p: InputProcessor, char: str | None) -> None:
        if char is None:
            return
        p.move_to(_find(p.buffer.value, p.buffer.real_cursor, char, forward, till))

    return run


for _name, _forward, _till in (
    ("vi-find-char", True, False),
    ("vi-find-char-backward", False, False),
    ("vi-till-char", True, True),
    ("vi-till-char-backward", False, True),
):
    ACTIONS[_name] = EditAction(_name, _find_action(_forward, _till), Mode.VI, Status.MOVE, takes_char=True)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


@action("previous-history", status=Status.EDIT)
def _previous_history(p: InputProcessor, char: str | None) -> None:
    p.history_step(-1)


@action("next-history", status=Status.EDIT)
def _next_history(p: InputProcessor, char: str | None) -> None:
    p.history_step(1)
