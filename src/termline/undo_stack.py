"""Undo snapshots for the line editor."""

from __future__ import annotations

from typing import NamedTuple


class Snapshot(NamedTuple):
    value: str
    cursor: int


class UndoStack:
    """Stores line snapshots taken before each content change.

    Snapshots are immutable tuples, so they are stored as-is. The oldest
    snapshot is dropped once *max_depth* is reached.
    """

    def __init__(self, max_depth: int = 100) -> None:
        self._stack: list[Snapshot] = []
        self._max_depth = max_depth

    def push(self, value: str, cursor: int) -> None:
        """Record *value*/*cursor* unless it equals the latest snapshot."""
        snapshot = Snapshot(value, cursor)
        if self._stack and self._stack[-1].value == value:
            return
        self._stack.append(snapshot)
        if len(self._stack) > self._max_depth:
            del self._stack[0]

    def pop(self) -> Snapshot | None:
        """Pop and return the most recent snapshot, or None if empty."""
        return self._stack.pop() if self._stack else None

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)
