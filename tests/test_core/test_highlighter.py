# tests/test_core/test_highlighter.py
"""Unit tests for line composition in `tinted.core.Highlighter`."""

from unittest.mock import patch

from tinted.core.Highlighter import Highlighter
from tinted.core.KeywordTable import KeywordTable
from tinted.core.LexicalState import INITIAL_DOCUMENT, INITIAL_STATE, advance
from tinted.core.ModeRegistry import Mode, profile_for


def text_of(cells) -> str:
    return "".join(cell.char for cell in cells)


def fg_of(cells) -> list[str]:
    return [cell.fg for cell in cells]


class TestComposition:
    """Default composition path."""

    def test_cells_cover_line(self, make_highlighter) -> None:
        line = 'int main(void) { return "x"; }'
        result = make_highlighter(Mode.C).highlight_line(line)

        assert text_of(result.cells) == line

    def test_idempotent(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.PYTHON)
        line = "def f(a): return [a, (a)]  # done"

        assert highlighter.highlight_line(line) == highlighter.highlight_line(line)

    def test_comment_suffix_recoloured(self, make_highlighter) -> None:
        """Everything from the marker on is comment; code brackets are rainbow."""
        line = "x(); // y ("
        result = make_highlighter(Mode.C).highlight_line(line)
        colours = fg_of(result.cells)

        assert colours[5:] == ["comment"] * (len(line) - 5)
        assert colours[1] == colours[2] == "rainbow_1"
        assert result.state.paren_depth == 0

    def test_block_comment_region(self, make_highlighter) -> None:
        line = "a /* (b) */ c"
        result = make_highlighter(Mode.C).highlight_line(line)
        colours = fg_of(result.cells)

        assert colours[2:11] == ["multiline_comment"] * 9
        assert colours[0] != "multiline_comment"
        assert colours[12] != "multiline_comment"

    def test_continued_block_comment(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.C)
        state = advance(INITIAL_STATE, "/* open", profile_for(Mode.C))
        result = highlighter.highlight_line("still (here) */ x", state)

        assert fg_of(result.cells)[:15] == ["multiline_comment"] * 15
        assert result.state.multi_line_comment is False
        assert result.state.paren_depth == 0

    def test_multi_line_string_region(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.PYTHON)
        first = highlighter.highlight_line('x = """doc (')
        second = highlighter.highlight_line('end"""', first.state)

        assert fg_of(first.cells)[4:] == ["multiline_string"] * 8
        assert fg_of(second.cells) == ["multiline_string"] * 6
        assert second.state.in_multi_line_string is False

    def test_tokenizer_failure_degrades_to_plain(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.PYTHON)
        line = "value = compute(1)  # degraded line for highlighter"
        with patch("tinted.core.Tokenizer.lex", side_effect=RuntimeError("boom")):
            result = highlighter.highlight_line(line, search_term="compute")

        assert text_of(result.cells) == line
        assert set(fg_of(result.cells)) == {"default"}
        assert result.state == advance(INITIAL_STATE, line, profile_for(Mode.PYTHON))

    def test_search_overlay_applies_last(self, make_highlighter) -> None:
        result = make_highlighter(Mode.C).highlight_line("(abc)", search_term="(a")

        assert fg_of(result.cells)[:2] == ["search_highlight"] * 2
        assert fg_of(result.cells)[4] == "rainbow_1"


class TestRainbowGating:
    """Rainbow brackets need the flag, the profile and a non-prose mode."""

    def test_flag_off(self, make_highlighter) -> None:
        result = make_highlighter(Mode.C, rainbow=False).highlight_line("f(x)")

        assert not any(fg.startswith("rainbow_") for fg in fg_of(result.cells))

    def test_per_call_override(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.C, rainbow=False)
        result = highlighter.highlight_line("f(x)", rainbow=True)

        assert fg_of(result.cells)[1] == "rainbow_1"

    def test_prose_mode(self, make_highlighter) -> None:
        result = make_highlighter(Mode.MARKDOWN).highlight_line("see (this) note")

        assert not any(fg.startswith("rainbow_") for fg in fg_of(result.cells))

    def test_incoming_depth_seeds_colours(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.C)
        state = advance(INITIAL_STATE, "f(a,", profile_for(Mode.C))
        result = highlighter.highlight_line("  b)", state)

        assert fg_of(result.cells)[3] == "rainbow_1"


class TestOverrides:
    """Strategy output bypasses the default overlays."""

    def test_markdown_code_block_tracks_document(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.MARKDOWN)
        fence = highlighter.highlight_line("```")
        body = highlighter.highlight_line("f(x)", fence.state, fence.document)

        assert fence.document.in_code_block is True
        assert set(fg_of(body.cells)) == {"code_block"}

    def test_state_advances_on_override_lines(self, make_highlighter) -> None:
        """The tracker runs on strategy lines so replay and render agree."""
        highlighter = make_highlighter(Mode.LISP)
        line = "(foo ;; note"
        result = highlighter.highlight_line(line)

        assert result.state == advance(INITIAL_STATE, line, profile_for(Mode.LISP))
        assert result.state.paren_depth == 1

    def test_rainbow_on_single_marker_lines(self, make_highlighter) -> None:
        line = "(foo (bar)) ;; note"
        colours = fg_of(make_highlighter(Mode.LISP).highlight_line(line).cells)

        assert [colours[i] for i in (0, 5, 9, 10)] == [
            "rainbow_1", "rainbow_2", "rainbow_2", "rainbow_1",
        ]
        assert set(colours[12:]) == {"comment"}

    def test_rainbow_follows_flag_on_strategy_lines(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.LISP, rainbow=False)
        colours = fg_of(highlighter.highlight_line("(foo) ;; note").cells)

        assert not any(fg.startswith("rainbow_") for fg in colours)

    def test_block_guard_lines_stay_uncoloured(self, make_highlighter) -> None:
        result = make_highlighter(Mode.CONFIG).highlight_line("key = (a) /* x */")

        assert set(fg_of(result.cells)) == {"default"}


class TestModeSwitching:
    """Mode changes rebuild tables and drop checkpoints."""

    def test_switch_and_back(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.C)
        line = "static int x = print(1);"
        before = highlighter.highlight_line(line)

        highlighter.set_mode(Mode.PYTHON)
        assert highlighter.mode == Mode.PYTHON
        assert highlighter.keywords == KeywordTable.for_profile(profile_for(Mode.PYTHON))

        highlighter.set_mode(Mode.C)
        assert highlighter.keywords == KeywordTable.for_profile(profile_for(Mode.C))
        assert highlighter.highlight_line(line) == before

    def test_set_mode_clears_checkpoints(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.C, interval=2)
        highlighter.resume_state(["a", "b", "c", "d", "e"], 5)
        assert len(highlighter.checkpoints) == 2

        highlighter.set_mode(Mode.GO)

        assert len(highlighter.checkpoints) == 0

    def test_invalidate_after_edit(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.C, interval=2)
        lines = ["/*", "a", "b", "c", "d"]
        state, _ = highlighter.resume_state(lines, 5)
        assert state.multi_line_comment is True

        lines[0] = "//"
        highlighter.invalidate(0)
        state, document = highlighter.resume_state(lines, 5)

        assert state.multi_line_comment is False
        assert document == INITIAL_DOCUMENT

    def test_plain_line_advances_state(self, make_highlighter) -> None:
        highlighter = make_highlighter(Mode.C)
        result = highlighter.plain_line("f(", INITIAL_STATE, INITIAL_DOCUMENT)

        assert set(fg_of(result.cells)) == {"default"}
        assert result.state.paren_depth == 1
