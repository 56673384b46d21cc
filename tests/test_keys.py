"""Tests for termline.keys -- key ids, inputrc notation and escape framing."""

from __future__ import annotations

import pytest

from termline.errors import ConfigError
from termline.keys import (
    ESC,
    escape_sequence_length,
    key_sequences,
    parse_inputrc_keyseq,
    raw_ctrl_char,
)


class TestKeySequencesNamed:
    def test_enter(self) -> None:
        assert key_sequences("enter") == ("\r",)

    def test_backspace_has_both_encodings(self) -> None:
        assert key_sequences("backspace") == ("\x7f", "\x08")

    def test_arrows_include_ss3_form(self) -> None:
        assert "\x1bOA" in key_sequences("up")
        assert "\x1b[D" in key_sequences("left")


class TestKeySequencesModifiers:
    def test_ctrl_letter(self) -> None:
        assert key_sequences("ctrl+a") == ("\x01",)

    def test_ctrl_underscore(self) -> None:
        assert key_sequences("ctrl+_") == ("\x1f",)

    def test_alt_letter(self) -> None:
        assert key_sequences("alt+b") == ("\x1bb",)

    def test_ctrl_arrow_uses_modifier_parameter(self) -> None:
        assert key_sequences("ctrl+left") == ("\x1b[1;5D",)

    def test_alt_delete(self) -> None:
        assert key_sequences("alt+delete") == ("\x1b[3;3~",)

    def test_alt_backspace(self) -> None:
        assert key_sequences("alt+backspace") == ("\x1b\x7f", "\x1b\x08")

    def test_modifier_names_are_case_insensitive(self) -> None:
        assert key_sequences("Ctrl+a") == ("\x01",)


class TestKeySequencesLiteral:
    def test_vi_command_keys_are_literal(self) -> None:
        assert key_sequences("dw") == ("dw",)
        assert key_sequences("$") == ("$",)

    def test_plus_alone_is_literal(self) -> None:
        assert key_sequences("+") == ("+",)


class TestKeySequencesErrors:
    @pytest.mark.parametrize("key_id", ["ctrl+f5", "shift+a", "ctrl+", ""])
    def test_unsupported_combinations(self, key_id: str) -> None:
        with pytest.raises(ConfigError):
            key_sequences(key_id)


class TestRawCtrlChar:
    def test_letters(self) -> None:
        assert raw_ctrl_char("a") == "\x01"
        assert raw_ctrl_char("Z") == "\x1a"

    def test_symbols(self) -> None:
        assert raw_ctrl_char("?") == "\x7f"
        assert raw_ctrl_char("@") == "\x00"

    def test_not_applicable(self) -> None:
        assert raw_ctrl_char("1") is None
        assert raw_ctrl_char("ab") is None


class TestParseInputrcKeyseq:
    def test_control(self) -> None:
        assert parse_inputrc_keyseq("\\C-a") == "\x01"

    def test_meta(self) -> None:
        assert parse_inputrc_keyseq("\\M-b") == "\x1bb"

    def test_escape_prefix(self) -> None:
        assert parse_inputrc_keyseq("\\e[A") == "\x1b[A"

    def test_plain_text(self) -> None:
        assert parse_inputrc_keyseq("ab") == "ab"

    def test_control_of_escaped_char(self) -> None:
        assert parse_inputrc_keyseq("\\C-\\\\") == "\x1c"

    def test_invalid_control(self) -> None:
        with pytest.raises(ConfigError):
            parse_inputrc_keyseq("\\C-1")


class TestEscapeSequenceLength:
    def test_not_an_escape(self) -> None:
        assert escape_sequence_length("abc") == 0

    def test_lone_escape_is_incomplete(self) -> None:
        assert escape_sequence_length(ESC) is None

    def test_csi(self) -> None:
        assert escape_sequence_length("\x1b[1;5Dxyz") == 6

    def test_incomplete_csi(self) -> None:
        assert escape_sequence_length("\x1b[1;") is None

    def test_ss3(self) -> None:
        assert escape_sequence_length("\x1bOAx") == 3
        assert escape_sequence_length("\x1bO") is None

    def test_osc_terminated_by_bel(self) -> None:
        assert escape_sequence_length("\x1b]0;t\x07rest") == 6

    def test_meta_key(self) -> None:
        assert escape_sequence_length("\x1bbxyz") == 2
