# tinted/ui/Canvas.py
"""Drawing surfaces for the line renderer.

The renderer only needs ``put(x, y, text, fg, bg)`` and ``size()``.
`CursesCanvas` implements them on a curses window, resolving colour tags
through a `ColorPalette`.
"""

import curses
import logging

from tinted.ui.Colors import ColorPalette


class CursesCanvas:
    """A curses window seen as a grid of tagged text runs."""

    def __init__(self, stdscr, palette: ColorPalette) -> None:
        self.stdscr = stdscr
        self.palette = palette

    def size(self) -> tuple[int, int]:
        """Returns ``(width, height)`` of the window."""
        height, width = self.stdscr.getmaxyx()
        return width, height

    def put(self, x: int, y: int, text: str, fg: str, bg: str = "background") -> None:
        if not text:
            return
        try:
            self.stdscr.addstr(y, x, text, self.palette.attr(fg, bg))
        except curses.error as e:
            # Writing into the bottom-right cell raises after a successful write.
            logging.debug(f"Curses error drawing {len(text)} cells at ({y}, {x}): {e}")

    def clear(self) -> None:
        self.stdscr.erase()

    def refresh(self) -> None:
        self.stdscr.noutrefresh()
        curses.doupdate()
