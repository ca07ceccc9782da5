# tests/ui/test_viewer.py
"""Tests for the read-only pager that drives the pipeline end to end.

curses is only touched through the mocked ``stdscr`` and the patched
screen update call; no terminal is initialised.
"""

import curses
from unittest.mock import patch

import pytest

from tinted.core.ModeRegistry import Mode
from tinted.core.SearchEngine import SearchResult
from tinted.ui.Viewer import Viewer


DOCUMENT = "\n".join(f"line {i} value = ({i})" for i in range(100)) + "\n"


@pytest.fixture(autouse=True)
def no_screen_updates():
    with patch("tinted.ui.Canvas.curses.doupdate"):
        yield


@pytest.fixture
def viewer(mock_stdscr, mock_config, monkeypatch) -> Viewer:
    monkeypatch.delenv("NO_COLOR", raising=False)
    return Viewer(mock_stdscr, mock_config, DOCUMENT, "demo.py")


class TestSetup:
    """Construction and classification."""

    def test_lines_and_mode(self, viewer) -> None:
        assert len(viewer.lines) == 100
        assert viewer.classification.mode == Mode.PYTHON
        assert viewer.highlighter.mode == Mode.PYTHON
        assert viewer.renderer.syntax_highlighting is True

    def test_unhighlighted_file(self, mock_stdscr, mock_config) -> None:
        viewer = Viewer(mock_stdscr, mock_config, "plain words\n", "notes")

        assert viewer.classification.mode == Mode.BLANK
        assert viewer.renderer.syntax_highlighting is False

    def test_unmapped_extension_uses_borrowed_lexer(self, mock_stdscr, mock_config) -> None:
        viewer = Viewer(mock_stdscr, mock_config, "const x = 1;\n", "app.js")

        assert viewer.highlighter.mode == Mode.BLANK
        assert viewer.highlighter.profile.lexer == "javascript"
        assert viewer.renderer.syntax_highlighting is True

    def test_buffer_without_path(self, mock_stdscr) -> None:
        viewer = Viewer(mock_stdscr, None, "a\nb")

        assert viewer.lines == ["a", "b"]
        assert viewer.classification.mode == Mode.BLANK

    def test_from_file(self, mock_stdscr, mock_config, tmp_path) -> None:
        path = tmp_path / "main.c"
        path.write_text("int main(void) {\n    return 0;\n}\n", encoding="utf-8")

        viewer = Viewer.from_file(mock_stdscr, mock_config, str(path))

        assert viewer.lines[1] == "    return 0;"
        assert viewer.classification.mode == Mode.C
        assert viewer.encoding == "utf-8"


class TestNavigation:
    """Scrolling keys."""

    def test_scroll_is_clamped(self, viewer) -> None:
        viewer.handle_key("k")
        assert viewer.top == 0

        viewer.handle_key("j")
        assert viewer.top == 1

        viewer.handle_key(curses.KEY_END)
        assert viewer.top == 100 - 23

        viewer.handle_key(curses.KEY_NPAGE)
        assert viewer.top == viewer.max_top()

        viewer.handle_key(curses.KEY_HOME)
        assert (viewer.top, viewer.left) == (0, 0)

    def test_horizontal_scroll(self, viewer) -> None:
        viewer.handle_key("l")
        assert viewer.left == 4

        viewer.handle_key("h")
        viewer.handle_key("h")
        assert viewer.left == 0

    def test_quit(self, viewer) -> None:
        viewer.handle_key("q")

        assert viewer.running is False

    def test_toggles(self, viewer) -> None:
        viewer.handle_key("r")
        viewer.handle_key("t")

        assert viewer.renderer.rainbow is False
        assert viewer.renderer.compact_tabs is True
        assert "Compact tabs on" in viewer.status


class TestSearch:
    """Search and match navigation."""

    def test_start_search_moves_to_match(self, viewer) -> None:
        viewer.start_search("line 50 ")

        assert viewer.match == SearchResult(50, 0)
        assert viewer.top <= 50 < viewer.top + viewer.text_height()

    def test_search_not_found(self, viewer) -> None:
        viewer.start_search("missing")

        assert viewer.match is None
        assert "not found" in viewer.status

    def test_next_and_previous(self, viewer) -> None:
        viewer.start_search("(9")
        assert viewer.match == SearchResult(9, 15)

        viewer.handle_key("n")
        assert viewer.match == SearchResult(90, 16)

        viewer.handle_key("N")
        assert viewer.match == SearchResult(9, 15)

    def test_next_without_term(self, viewer) -> None:
        viewer.handle_key("n")

        assert viewer.status == "No search term"

    def test_prompt_reads_term(self, viewer, mock_stdscr) -> None:
        mock_stdscr.get_wch.side_effect = ["l", "i", "x", "\x7f", "n", "e", " ", "7", "\n"]

        with patch("tinted.ui.Viewer.curses.curs_set"):
            viewer.handle_key("/")

        assert viewer.search_term == "line 7"
        assert viewer.match == SearchResult(7, 0)

    def test_prompt_cancel(self, viewer, mock_stdscr) -> None:
        mock_stdscr.get_wch.side_effect = ["a", "\x1b"]

        with patch("tinted.ui.Viewer.curses.curs_set"):
            viewer.handle_key("/")

        assert viewer.search_term == ""


class TestDraw:
    """Full redraws through the mocked window."""

    def test_draw_paints_text_and_status(self, viewer, mock_stdscr) -> None:
        viewer.draw()

        rows = {call.args[0] for call in mock_stdscr.addstr.call_args_list}
        assert set(range(24)) <= rows
        status = [c.args[2] for c in mock_stdscr.addstr.call_args_list if c.args[0] == 23]
        assert "demo.py [Python]" in status[-1]
        mock_stdscr.noutrefresh.assert_called_once()

    def test_short_document_blanks_remaining_rows(self, mock_stdscr, mock_config) -> None:
        viewer = Viewer(mock_stdscr, mock_config, "only line\n", "short.py")
        viewer.draw()

        row_five = [c.args[2] for c in mock_stdscr.addstr.call_args_list if c.args[0] == 5]
        assert row_five == [" " * 80]
