"""In-memory line history for up/down navigation.

Persistence is left to the application; it can feed earlier lines through
:meth:`History.add` and read them back from :attr:`History.entries`.
"""

from __future__ import annotations


class History:
    """Submitted lines, newest first, with a browsing position.

    ``index == -1`` means "not browsing": the editor shows the line being
    typed, which is stashed when browsing starts and restored when the user
    walks back down past the newest entry.
    """

    def __init__(self, max_size: int = 500) -> None:
        self._entries: list[str] = []
        self._max_size = max_size
        self._index: int = -1
        self._stash: str = ""

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def index(self) -> int:
        return self._index

    def add(self, line: str) -> None:
        """Add a submitted line; blank lines and repeats are skipped."""
        self._index = -1
        if not line.strip():
            return
        if self._entries and self._entries[0] == line:
            return
        self._entries.insert(0, line)
        if len(self._entries) > self._max_size:
            self._entries.pop()

    def previous(self, current: str) -> str | None:
        """Older entry, or None when already at the oldest."""
        if self._index + 1 >= len(self._entries):
            return None
        if self._index == -1:
            self._stash = current
        self._index += 1
        return self._entries[self._index]

    def next(self) -> str | None:
        """Newer entry (the stashed line after the newest), or None."""
        if self._index == -1:
            return None
        self._index -= 1
        if self._index == -1:
            return self._stash
        return self._entries[self._index]

    def reset_position(self) -> None:
        self._index = -1
        self._stash = ""
