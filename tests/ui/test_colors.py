# tests/ui/test_colors.py
"""Tests for `tinted.ui.Colors.ColorPalette` with a mocked curses module."""

import curses
from unittest.mock import MagicMock, patch

import pytest

from tinted.ui.Colors import ColorPalette
from tinted.utils.utils import hex_to_xterm


A_BOLD, A_DIM, A_REVERSE = 1 << 21, 1 << 20, 1 << 18


@pytest.fixture
def fake_curses():
    """A curses stand-in with a real error class and recorded pair calls."""
    mock = MagicMock()
    mock.error = curses.error
    mock.A_NORMAL = 0
    mock.A_BOLD = A_BOLD
    mock.A_DIM = A_DIM
    mock.A_REVERSE = A_REVERSE
    mock.COLOR_RED, mock.COLOR_GREEN, mock.COLOR_WHITE = 1, 2, 7
    mock.COLOR_PAIRS = 256
    mock.COLORS = 256
    mock.has_colors.return_value = True
    mock.color_pair.side_effect = lambda n: n << 8
    with patch("tinted.ui.Colors.curses", mock):
        yield mock


def test_uninitialized_palette_is_monochrome(fake_curses) -> None:
    palette = ColorPalette()

    assert palette.attr("keyword") == A_BOLD
    assert palette.attr("comment") == A_DIM
    assert palette.attr("default") == 0
    fake_curses.init_pair.assert_not_called()


def test_no_color_terminal(fake_curses) -> None:
    fake_curses.has_colors.return_value = False
    palette = ColorPalette()
    palette.init_colors()

    assert palette.monochrome is True
    assert palette.attr("search_highlight") == A_REVERSE
    fake_curses.start_color.assert_not_called()


def test_256_color_pairs_use_config_hex(fake_curses) -> None:
    palette = ColorPalette({"colors": {"keyword": "#FF0000"}})
    palette.init_colors()

    attribute = palette.attr("keyword")

    assert palette.is_256_color_terminal is True
    fake_curses.init_pair.assert_called_once_with(1, hex_to_xterm("#FF0000"), -1)
    assert attribute == 1 << 8


def test_pairs_are_cached_per_combination(fake_curses) -> None:
    palette = ColorPalette()
    palette.init_colors()

    first = palette.attr("keyword")
    again = palette.attr("keyword")
    # rainbow_0 shares the keyword colour, so the pair is reused.
    shared = palette.attr("rainbow_0")

    assert first == again == shared
    assert fake_curses.init_pair.call_count == 1


def test_custom_background(fake_curses) -> None:
    palette = ColorPalette({"colors": {"background": "#000000"}})
    palette.init_colors()
    palette.attr("default")

    fg, bg = fake_curses.init_pair.call_args[0][1:]
    assert bg == hex_to_xterm("#000000")


def test_eight_color_terminal(fake_curses) -> None:
    fake_curses.COLORS = 8
    palette = ColorPalette()
    palette.init_colors()
    palette.attr("function")

    assert palette.is_256_color_terminal is False
    fake_curses.init_pair.assert_called_once_with(1, 2, -1)
    assert palette.attr("function") == (1 << 8) | A_BOLD


def test_pair_exhaustion_degrades_to_attributes(fake_curses) -> None:
    fake_curses.COLOR_PAIRS = 1
    palette = ColorPalette()
    palette.init_colors()

    assert palette.attr("comment") == A_DIM
    fake_curses.init_pair.assert_not_called()


def test_init_pair_error_is_logged(fake_curses, caplog) -> None:
    fake_curses.init_pair.side_effect = curses.error("bad pair")
    palette = ColorPalette()
    palette.init_colors()

    assert palette.attr("heading") == A_BOLD
    assert "Failed to initialize curses pair" in caplog.text
