"""Tests for termline.history.History."""

from __future__ import annotations

from termline.history import History


def _history(*lines: str, max_size: int = 500) -> History:
    history = History(max_size=max_size)
    for line in lines:
        history.add(line)
    return history


class TestHistoryAdd:
    def test_newest_first(self) -> None:
        assert _history("one", "two").entries == ["two", "one"]

    def test_blank_lines_skipped(self) -> None:
        assert _history("one", "   ", "").entries == ["one"]

    def test_consecutive_duplicates_skipped(self) -> None:
        assert _history("one", "one").entries == ["one"]

    def test_bounded(self) -> None:
        assert _history("a", "b", "c", max_size=2).entries == ["c", "b"]


class TestHistoryBrowse:
    def test_previous_walks_back(self) -> None:
        history = _history("one", "two")
        assert history.previous("") == "two"
        assert history.previous("") == "one"
        assert history.previous("") is None

    def test_next_restores_stashed_line(self) -> None:
        history = _history("one")
        assert history.previous("typing") == "one"
        assert history.next() == "typing"
        assert history.index == -1

    def test_next_when_not_browsing(self) -> None:
        assert _history("one").next() is None

    def test_previous_on_empty(self) -> None:
        assert History().previous("x") is None

    def test_add_resets_position(self) -> None:
        history = _history("one")
        history.previous("")
        history.add("two")
        assert history.index == -1
        assert history.previous("") == "two"

    def test_reset_position(self) -> None:
        history = _history("one", "two")
        history.previous("")
        history.reset_position()
        assert history.previous("") == "two"
