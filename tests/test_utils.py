"""Tests for termline.utils -- display width and grapheme helpers."""

from __future__ import annotations

from termline.utils import (
    caret_notation,
    graphemes,
    is_punctuation_char,
    is_whitespace_char,
    is_word_char,
    next_grapheme_length,
    previous_grapheme_length,
    strip_ansi,
    visible_width,
)


class TestVisibleWidth:
    def test_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty(self) -> None:
        assert visible_width("") == 0

    def test_ansi_is_ignored(self) -> None:
        assert visible_width("\x1b[31mred\x1b[0m") == 3

    def test_wide_glyphs(self) -> None:
        assert visible_width("世界") == 4

    def test_combining_mark(self) -> None:
        assert visible_width("e\u0301") == 1

    def test_emoji_sequence(self) -> None:
        assert visible_width("\U0001f44d\U0001f3fd") == 2

    def test_tab_advances_to_next_stop(self) -> None:
        assert visible_width("\t") == 8
        assert visible_width("abc\t") == 8
        assert visible_width("abcdefgh\tx") == 17
        assert visible_width("\u4e16\t") == 8


class TestCaretNotation:
    def test_controls(self) -> None:
        assert caret_notation("a\tb") == "a^Ib"
        assert caret_notation("\x07\x7f") == "^G^?"

    def test_plain_text_unchanged(self) -> None:
        assert caret_notation("h\u00e9llo") == "h\u00e9llo"


class TestStripAnsi:
    def test_csi_and_osc(self) -> None:
        assert strip_ansi("\x1b[1;32mok\x1b]0;title\x07!") == "ok!"


class TestGraphemes:
    def test_split(self) -> None:
        assert graphemes("ae\u0301") == ["a", "e\u0301"]

    def test_lengths(self) -> None:
        text = "ae\u0301b"
        assert previous_grapheme_length(text, 3) == 2
        assert next_grapheme_length(text, 1) == 2
        assert previous_grapheme_length(text, 0) == 0
        assert next_grapheme_length(text, 4) == 0


class TestClassification:
    def test_whitespace(self) -> None:
        assert is_whitespace_char(" ")
        assert not is_whitespace_char("a")

    def test_punctuation(self) -> None:
        assert is_punctuation_char(".")
        assert not is_punctuation_char("a")

    def test_word(self) -> None:
        assert is_word_char("_")
        assert is_word_char("\u00e9")
        assert not is_word_char("-")
