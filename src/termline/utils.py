"""Text utilities: display width, grapheme clusters, ANSI stripping.

Cursor arithmetic works in terminal columns, so every width question asked by
the buffer goes through :func:`visible_width`, which measures grapheme
clusters with ``wcwidth`` after removing ANSI escape sequences.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# CSI sequences (any final byte), OSC strings and two-byte escapes
_STRIP_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"             # CSI
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"  # OSC
    r"|\x1b[@-Z\\-_]"                      # Fe escapes
)

# Punctuation characters for word-break classification
_PUNCTUATION_REGEX = re.compile(r"[(){}\[\]<>.,;:'\"!?\+\-=*/\\|&%\^$#@~`]")

# tabs advance to the next multiple of this column
TAB_STOP = 8

# C0 controls and DEL
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------

def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Control characters are zero width, emoji sequences (VS16, ZWJ, skin tone
    modifiers, regional indicators) are two columns, everything else is
    whatever ``wcwidth`` reports for the base codepoint.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


# ---------------------------------------------------------------------------
# visible_width / strip_ansi
# ---------------------------------------------------------------------------

def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


def caret_notation(text: str) -> str:
    """Show control characters as ``^X`` (a tab as ``^I``, DEL as ``^?``)."""
    return _CONTROL_RE.sub(lambda m: "^" + chr(ord(m.group()) ^ 0x40), text)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    * Strips ANSI escape sequences.
    * Expands tabs to the next :data:`TAB_STOP`, counting from the start of
      *text*.
    * Uses a fast ASCII path when possible.
    * Caches results for non-ASCII strings.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(stripped):
        if g == "\t":
            total += TAB_STOP - total % TAB_STOP
        else:
            total += _grapheme_width(g)

    return _cache_width(stripped, total)


# ---------------------------------------------------------------------------
# Grapheme navigation
# ---------------------------------------------------------------------------

def graphemes(text: str) -> list[str]:
    """Split *text* into grapheme clusters."""
    return list(grapheme.graphemes(text))


def previous_grapheme_length(text: str, index: int) -> int:
    """Codepoint length of the grapheme cluster ending at *index*."""
    if index <= 0:
        return 0
    clusters = graphemes(text[:index])
    return len(clusters[-1]) if clusters else 1


def next_grapheme_length(text: str, index: int) -> int:
    """Codepoint length of the grapheme cluster starting at *index*."""
    if index >= len(text):
        return 0
    after = text[index:]
    first = next(iter(grapheme.graphemes(after)), None)
    return len(first) if first else 1


# ---------------------------------------------------------------------------
# Character classification
# ---------------------------------------------------------------------------

def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in (" ", "\t", "\n", "\r", "\f", "\v")


def is_punctuation_char(char: str) -> bool:
    """Return ``True`` if *char* is a punctuation character."""
    return bool(_PUNCTUATION_REGEX.match(char))


def is_word_char(char: str) -> bool:
    """Return ``True`` for letters, digits and underscore."""
    return char.isalnum() or char == "_"
