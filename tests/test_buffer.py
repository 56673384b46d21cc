"""Tests for termline.buffer.LineBuffer -- content, cursor and geometry."""

from __future__ import annotations

import pytest

from termline.buffer import CONTINUATION_PROMPT, LineBuffer
from termline.prompt import ZERO_MASK, Prompt


def _buffer(text: str = "", prompt: str = "", mask: str | None = None) -> LineBuffer:
    buf = LineBuffer(Prompt(prompt, mask=mask))
    if text:
        buf.write(text)
    return buf


class TestLineBufferContent:
    """Writing, inserting and deleting text."""

    def test_write_appends_and_moves_cursor(self) -> None:
        buf = _buffer("abc")
        assert buf.value == "abc"
        assert buf.cursor == 3
        assert buf.delta == 3

    def test_write_in_the_middle(self) -> None:
        buf = _buffer("ac")
        buf.cursor = 1
        buf.write("b")
        assert buf.value == "abc"
        assert buf.cursor == 2

    def test_insert_keeps_cursor(self) -> None:
        buf = _buffer("ac")
        buf.insert(1, "b")
        assert buf.value == "abc"
        assert buf.cursor == 2

    def test_delete_range(self) -> None:
        buf = _buffer("hello world")
        buf.cursor = 5
        buf.delete(5, 11)
        assert buf.value == "hello"
        assert buf.delta == -6

    def test_delete_pulls_cursor_back_inside(self) -> None:
        buf = _buffer("hello")
        buf.delete(2, 5)
        assert buf.cursor == 2

    def test_set_line_puts_cursor_at_end(self) -> None:
        buf = _buffer("old")
        buf.cursor = 0
        buf.set_line("newer")
        assert buf.value == "newer"
        assert buf.cursor == 5

    def test_cursor_setter_clamps(self) -> None:
        buf = _buffer("abc")
        buf.cursor = 10
        assert buf.cursor == 3
        buf.cursor = -1
        assert buf.cursor == 0

    def test_clear(self) -> None:
        buf = _buffer("abc")
        buf.clear()
        assert buf.value == ""
        assert buf.cursor == 0


class TestLineBufferRoundTrip:
    @pytest.mark.parametrize("text", ["", "hello", "foo  bar", "\u4e16\u754c!"])
    @pytest.mark.parametrize("inserted", ["x", "two words", "\u00e9\u00e9"])
    @pytest.mark.parametrize("position", [0, 1, -1])
    def test_write_then_delete_restores(self, text: str, inserted: str, position: int) -> None:
        buf = _buffer(text)
        buf.cursor = position % (len(text) + 1)
        before = buf.cursor
        buf.write(inserted)
        buf.delete(before, before + len(inserted))
        assert buf.value == text
        assert buf.cursor == before

    def test_delete_before_cursor_shifts_it(self) -> None:
        buf = _buffer("abcdef")
        buf.cursor = 5
        buf.delete(1, 3)
        assert buf.value == "adef"
        assert buf.cursor == 3

    def test_delete_after_cursor_keeps_it(self) -> None:
        buf = _buffer("abcdef")
        buf.cursor = 1
        buf.delete(3, 5)
        assert buf.cursor == 1


class TestLineBufferCharacters:
    def test_change_case_swaps(self) -> None:
        buf = _buffer("abC")
        buf.cursor = 0
        assert buf.change_case()
        buf.cursor = 2
        assert buf.change_case()
        assert buf.value == "Abc"

    def test_change_case_on_non_letter(self) -> None:
        buf = _buffer("1")
        buf.cursor = 0
        assert not buf.change_case()
        assert buf.value == "1"

    def test_change_case_at_end(self) -> None:
        assert not _buffer("a").change_case()

    def test_replace_char(self) -> None:
        buf = _buffer("cat")
        buf.replace_char("b", 0)
        assert buf.value == "bat"

    def test_replace_char_out_of_range_is_ignored(self) -> None:
        buf = _buffer("cat")
        buf.replace_char("x", 3)
        assert buf.value == "cat"


class TestLineBufferMasking:
    def test_zero_mask_hides_length_and_cursor(self) -> None:
        buf = _buffer("secret", prompt="pw: ", mask=ZERO_MASK)
        assert buf.length() == 1
        assert buf.cursor == 0
        assert buf.real_cursor == 6
        assert buf.value == "secret"
        assert buf.line == ""

    def test_zero_mask_moves_real_cursor_silently(self) -> None:
        buf = _buffer("secret", prompt="pw: ", mask=ZERO_MASK)
        assert buf.move(-2, 80) == ""
        assert buf.real_cursor == 4
        buf.write("X")
        assert buf.value == "secrXet"

    def test_zero_mask_column_stays_after_prompt(self) -> None:
        buf = _buffer("secret", prompt="pw: ", mask=ZERO_MASK)
        assert buf.cursor_with_prompt() == 5
        assert buf.end_column() == 5

    @pytest.mark.parametrize(
        "edits",
        [
            [("write", "secret")],
            [("write", "abc"), ("move", -2), ("write", "XY"), ("delete", 1)],
            [("write", "pass word"), ("delete", 4), ("move", -10), ("write", "!"), ("delete", 3)],
            [("write", "a"), ("delete", 1), ("delete", 1)],
        ],
    )
    def test_zero_mask_holds_through_edits(self, edits: list[tuple[str, object]]) -> None:
        buf = _buffer(prompt="pw: ", mask=ZERO_MASK)
        for op, arg in edits:
            if op == "write":
                buf.write(arg)
            elif op == "move":
                assert buf.move(arg, 80) == ""
            else:
                start = max(buf.real_cursor - arg, 0)
                buf.delete(start, buf.real_cursor)
            assert buf.length() == 1
            assert buf.cursor == 0
            assert buf.line == ""
            assert buf.cursor_with_prompt() == 5

    def test_star_mask_shows_placeholders(self) -> None:
        buf = _buffer("abc", prompt="pw: ", mask="*")
        assert buf.line == "***"
        assert buf.display(1) == "**"
        assert buf.end_column() == 8
        assert buf.masking
        assert not buf.zero_mask


class TestLineBufferMoves:
    def test_move_left_clamped_at_start(self) -> None:
        buf = _buffer("abc")
        assert buf.move(-5, 80) == "\x1b[3D"
        assert buf.cursor == 0

    def test_move_right_clamped_at_end(self) -> None:
        buf = _buffer("abc")
        buf.cursor = 0
        assert buf.move(5, 80) == "\x1b[3C"
        assert buf.cursor == 3

    def test_vi_move_stops_on_last_char(self) -> None:
        buf = _buffer("abc")
        buf.cursor = 0
        assert buf.move_to(3, 80, vi_mode=True) == "\x1b[2C"
        assert buf.cursor == 2

    def test_no_move_is_empty(self) -> None:
        buf = _buffer("abc")
        assert buf.move(1, 80) == ""

    def test_wide_glyph_moves_two_columns(self) -> None:
        buf = _buffer("世界")
        assert buf.move(-1, 80) == "\x1b[2D"
        assert buf.cursor == 1

    def test_move_across_wrapped_rows(self) -> None:
        buf = _buffer("abcdefghijklmn", prompt="> ")
        assert buf.cursor_with_prompt() == 17
        assert buf.move_to(0, 10) == "\x1b[1A\x1b[3G"

    def test_prompt_disabled_ignores_prompt_width(self) -> None:
        buf = _buffer("ab", prompt="prompt> ")
        buf.prompt_disabled = True
        assert buf.cursor_with_prompt() == 3


class TestLineBufferPrompt:
    def test_update_prompt_keeps_input(self) -> None:
        buf = _buffer("typed", prompt="a> ")
        buf.update_prompt(Prompt("b> "))
        assert buf.prompt.text == "b> "
        assert buf.value == "typed"

    def test_update_prompt_on_empty_line_resets(self) -> None:
        buf = _buffer(prompt="a> ")
        buf.delta = 4
        buf.update_prompt(Prompt("b> "))
        assert buf.prompt.text == "b> "
        assert buf.delta == 0

    def test_reset_clears_everything(self) -> None:
        buf = _buffer("abc", prompt="a> ")
        buf.reset()
        assert buf.value == ""
        assert buf.prompt.text == ""


class TestLineBufferMultiLine:
    def test_continuation_joins_with_space(self) -> None:
        buf = _buffer("foo \\", prompt="$ ")
        buf.multi_line = True
        buf.update_multi_line_buffer()
        assert buf.value == ""
        assert buf.prompt is CONTINUATION_PROMPT
        buf.write("bar")
        assert buf.multi_line_value == "foo bar"

    def test_value_without_multi_line(self) -> None:
        buf = _buffer("plain")
        assert buf.multi_line_value == "plain"
