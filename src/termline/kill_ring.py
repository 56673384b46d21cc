"""Kill ring shared by Emacs kill/yank and vi delete/yank/put."""

from __future__ import annotations


class KillRing:
    """Bounded list of killed (deleted or yanked) text, newest last.

    Consecutive kills can accumulate into a single entry. Emacs ``yank``
    inserts the newest entry and ``yank-pop`` rotates to older ones; vi
    ``p``/``P`` read the newest entry, which plays the unnamed register.
    """

    def __init__(self, max_size: int = 60) -> None:
        self._ring: list[str] = []
        self._max_size = max_size

    def push(self, text: str, *, prepend: bool = False, accumulate: bool = False) -> None:
        """Add killed text.

        Args:
            text: The killed text; empty text is ignored.
            prepend: When accumulating, put *text* before the newest entry
                (backward kills) instead of after it.
            accumulate: Merge into the newest entry instead of adding one.
        """
        if not text:
            return

        if accumulate and self._ring:
            last = self._ring.pop()
            self._ring.append(text + last if prepend else last + text)
            return

        self._ring.append(text)
        if len(self._ring) > self._max_size:
            del self._ring[0]

    def peek(self) -> str | None:
        return self._ring[-1] if self._ring else None

    def rotate(self) -> None:
        """Move the newest entry to the oldest slot (yank-pop)."""
        if len(self._ring) > 1:
            self._ring.insert(0, self._ring.pop())

    def __len__(self) -> int:
        return len(self._ring)
