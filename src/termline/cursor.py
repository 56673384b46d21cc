"""Cursor movement arithmetic.

Columns here are absolute, 1-based positions counted from the start of the
prompt, as if the prompt and line were one long row that the terminal wraps
every ``width`` columns. A column that is an exact multiple of ``width`` is
the last cell of its row, not the first cell of the next one.
"""

from __future__ import annotations

CSI = "\x1b["


def row_of(column: int, width: int) -> int:
    """Zero-based terminal row holding absolute *column*."""
    width = max(width, 1)
    row = column // width
    if row > 0 and column % width == 0:
        row -= 1
    return row


def column_in_row(column: int, width: int) -> int:
    """1-based column within its row, suitable for ``ESC [ n G``."""
    width = max(width, 1)
    col = column % width
    if col == 0 and column > 0:
        col = width
    return col


def clamp_move(cursor: int, move: int, length: int, vi_mode: bool = False) -> int:
    """Clamp *move* so ``cursor + move`` stays inside the line.

    Emacs allows the cursor one past the last character; vi command mode
    stops on the last character.
    """
    upper = max(length - 1, 0) if vi_mode else length
    target = min(max(cursor + move, 0), upper)
    return target - cursor


def move_between(current: int, target: int, width: int) -> str:
    """Escape sequence taking the terminal cursor from *current* to *target*."""
    rows = row_of(target, width) - row_of(current, width)
    if rows == 0:
        diff = target - current
        if diff > 0:
            return f"{CSI}{diff}C"
        if diff < 0:
            return f"{CSI}{-diff}D"
        return ""
    vertical = f"{CSI}{rows}B" if rows > 0 else f"{CSI}{-rows}A"
    return f"{vertical}{CSI}{column_in_row(target, width)}G"
