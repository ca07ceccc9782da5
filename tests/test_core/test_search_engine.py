# tests/test_core/test_search_engine.py
"""Unit tests for synchronous and background search."""

import pytest

from tinted.core.SearchEngine import (
    BackgroundSearch,
    SearchResult,
    display_column,
    find_next,
    scan_forward,
)

from tests.stubs import CountingLines, SlowLines


LINES = ["foo one", "bar foo foo", "baz", "\tfoo"]


class TestFindNext:
    """Forward and backward search with wrap-around."""

    def test_forward_same_line(self) -> None:
        assert find_next(LINES, len(LINES), "foo", 1, 4) == SearchResult(1, 8)

    def test_forward_next_lines(self) -> None:
        assert find_next(LINES, len(LINES), "foo", 0, 0) == SearchResult(1, 4)

    def test_forward_wraps(self) -> None:
        assert find_next(LINES, len(LINES), "foo", 3, 1) == SearchResult(0, 0)

    def test_forward_without_wrap(self) -> None:
        assert find_next(LINES, len(LINES), "foo", 3, 1, wrap=False) is None

    def test_backward_same_line(self) -> None:
        assert find_next(LINES, len(LINES), "foo", 1, 8, forward=False) == SearchResult(1, 4)

    def test_backward_previous_lines(self) -> None:
        assert find_next(LINES, len(LINES), "bar", 2, 0, forward=False) == SearchResult(1, 0)

    def test_backward_wraps(self) -> None:
        assert find_next(LINES, len(LINES), "foo", 0, 0, forward=False) == SearchResult(3, 1)

    def test_case_sensitive_and_empty(self) -> None:
        assert find_next(LINES, len(LINES), "FOO", 0, 0) is None
        assert find_next(LINES, len(LINES), "", 0, 0) is None
        assert find_next([], 0, "foo", 0, 0) is None

    def test_callable_accessor(self) -> None:
        lines = CountingLines(LINES)
        result = find_next(lines, len(lines), "baz", 0, 0, wrap=False)

        assert result == SearchResult(2, 0)
        assert lines.reads == [0, 1, 2]


def test_scan_forward_range() -> None:
    assert scan_forward(LINES, len(LINES), "foo", 2) == SearchResult(3, 1)
    assert scan_forward(LINES, len(LINES), "foo", 2, 3) is None


@pytest.mark.parametrize(
    ("line", "column", "tab_size", "expected"),
    [
        ("abc", 2, 4, 2),
        ("\tfoo", 1, 4, 4),
        ("\t\tx", 2, 8, 16),
        ("a\tb", 1, 4, 1),
    ],
)
def test_display_column(line: str, column: int, tab_size: int, expected: int) -> None:
    assert display_column(line, column, tab_size) == expected


class TestBackgroundSearch:
    """First-match search in a worker thread."""

    def test_first_match(self) -> None:
        searcher = BackgroundSearch()

        assert searcher.first_match(LINES, len(LINES), "baz") == SearchResult(2, 0)
        assert searcher.first_match(LINES, len(LINES), "foo", start=2) == SearchResult(3, 1)

    def test_no_match_and_empty_term(self) -> None:
        searcher = BackgroundSearch()

        assert searcher.first_match(LINES, len(LINES), "nothing") is None
        assert searcher.first_match(LINES, len(LINES), "") is None
        assert searcher.threads and all(t.daemon for t in searcher.threads)

    def test_timeout_drops_late_result(self) -> None:
        """A worker that answers after the deadline does not affect later calls."""
        slow = SlowLines(["a", "b", "needle"])
        searcher = BackgroundSearch()

        assert searcher.first_match(slow, 3, "needle", timeout=0.05) is None

        slow.release.set()
        assert slow.finished.wait(timeout=5)
        for thread in searcher.threads:
            thread.join(timeout=5)

        fresh = searcher.first_match(LINES, len(LINES), "bar", timeout=5)
        assert fresh == SearchResult(1, 0)

    def test_worker_exception_reports_no_match(self) -> None:
        def broken(index: int) -> str:
            raise RuntimeError("unreadable line")

        assert BackgroundSearch().first_match(broken, 3, "x", timeout=5) is None
