"""Tab completion: collect candidates from providers and decide what to do."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from termline.utils import visible_width

logger = logging.getLogger(__name__)

CompletionProvider = Callable[[str], Iterable[str]]

_COLUMN_GAP = 2


@dataclass(frozen=True)
class CompletionResult:
    """Candidates for one Tab press, sorted and de-duplicated."""

    prefix: str
    candidates: tuple[str, ...]

    @property
    def common_prefix(self) -> str:
        return os.path.commonprefix(list(self.candidates)) if self.candidates else ""

    @property
    def unique(self) -> bool:
        return len(self.candidates) == 1

    def insertion(self) -> str | None:
        """Text to insert after *prefix*, or None if candidates must be listed.

        A unique candidate completes with a trailing space; several candidates
        sharing more than *prefix* complete to their common prefix.
        """
        if not self.candidates:
            return None
        if self.unique:
            (candidate,) = self.candidates
            if not candidate.startswith(self.prefix):
                return None
            suffix = candidate[len(self.prefix) :]
            return suffix if candidate.endswith(" ") else suffix + " "
        common = self.common_prefix
        if len(common) > len(self.prefix) and common.startswith(self.prefix):
            return common[len(self.prefix) :]
        return None


def complete(prefix: str, providers: Sequence[CompletionProvider]) -> CompletionResult:
    """Ask every provider for candidates completing *prefix*."""
    found: set[str] = set()
    for provider in providers:
        for candidate in provider(prefix):
            if candidate:
                found.add(candidate)
    logger.debug("%d completion(s) for %r", len(found), prefix)
    return CompletionResult(prefix, tuple(sorted(found)))


def format_columns(candidates: Sequence[str], width: int) -> list[str]:
    """Lay *candidates* out column-major in rows that fit *width* columns."""
    if not candidates:
        return []
    cell = max(visible_width(c) for c in candidates) + _COLUMN_GAP
    columns = max(1, width // cell) if width > 0 else 1
    rows = (len(candidates) + columns - 1) // columns

    lines: list[str] = []
    for row in range(rows):
        cells = []
        for col in range(columns):
            index = col * rows + row
            if index >= len(candidates):
                break
            text = candidates[index]
            cells.append(text + " " * (cell - visible_width(text)))
        lines.append("".join(cells).rstrip())
    return lines
