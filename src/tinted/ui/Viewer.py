# tinted/ui/Viewer.py
"""Viewer Module
=============
A read-only curses pager that drives the highlighting pipeline.

The viewer owns one document (a list of decoded lines), classifies it,
and on every redraw asks the `LineRenderer` to paint the visible window.
It exists so the pipeline can be exercised end to end in a real terminal:
scrolling exercises checkpoint resumption, ``/`` exercises the
bounded-timeout background search, ``n``/``N`` the synchronous match
navigation, ``r`` and ``t`` toggle rainbow brackets and compact tabs.
"""

import curses
import logging
from pathlib import Path
from typing import Any, Optional

from tinted.core.Highlighter import Highlighter
from tinted.core.ModeRegistry import Classification, Mode, classify, profile_for
from tinted.core.SearchEngine import BackgroundSearch, SearchResult, display_column, find_next
from tinted.ui.Canvas import CursesCanvas
from tinted.ui.Colors import ColorPalette
from tinted.ui.LineRenderer import LineRenderer, char_width
from tinted.utils.utils import DEFAULT_CONFIG, read_text_file


ESCAPE = 27
ENTER_KEYS = (curses.KEY_ENTER, 10, 13)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 8, 127)


## ==================== class Viewer ====================
class Viewer:
    """Read-only pager over one document.

    Attributes:
        lines (list[str]): Document lines without line terminators.
        path (str | None): Path the document was read from.
        encoding (str): Detected text encoding.
        classification (Classification): Mode and flags of the document.
        highlighter (Highlighter): Mode-aware line composer.
        renderer (LineRenderer): Paints line ranges.
        top (int): First visible line.
        left (int): Columns scrolled off to the left.
        search_term (str): Active search term.
        match (SearchResult | None): Position of the current match.
        status (str): Message shown in the status bar.
        running (bool): False once the user quits.
    """

    def __init__(
        self,
        stdscr,
        config: Optional[dict[str, Any]] = None,
        text: str = "",
        path: Optional[str] = None,
        encoding: str = "utf-8",
    ) -> None:
        self.stdscr = stdscr
        self.config = config or DEFAULT_CONFIG
        self.path = path
        self.encoding = encoding
        self.lines = text.split("\n")
        if len(self.lines) > 1 and self.lines[-1] == "":
            self.lines.pop()

        first_line = self.lines[0] if self.lines else ""
        if path:
            self.classification = classify(path, first_line)
        else:
            self.classification = Classification(
                Mode.BLANK, profile_for(Mode.BLANK), False, False
            )

        editor = dict(DEFAULT_CONFIG["editor"])
        editor.update(self.config.get("editor", {}))
        search = dict(DEFAULT_CONFIG["search"])
        search.update(self.config.get("search", {}))
        self.search_timeout = float(search["timeout_ms"]) / 1000.0
        self.search_wrap = bool(search["wrap"])

        self.palette = ColorPalette(self.config)
        self.canvas = CursesCanvas(stdscr, self.palette)
        self.highlighter = Highlighter(
            self.classification.profile,
            checkpoint_interval=int(editor["checkpoint_interval"]),
            rainbow=bool(editor["rainbow_parentheses"]),
        )
        self.renderer = LineRenderer(self.highlighter, self.config)
        if not self.classification.syntax_highlight:
            self.renderer.syntax_highlighting = False
        self.searcher = BackgroundSearch()

        self.top = 0
        self.left = 0
        self.search_term = ""
        self.match: Optional[SearchResult] = None
        self.status = ""
        self.running = True
        logging.info(
            f"Viewer opened {path or '<buffer>'}: {len(self.lines)} lines, "
            f"mode {self.classification.mode.value}, encoding {encoding}"
        )

    @classmethod
    def from_file(cls, stdscr, config: dict[str, Any], path: str) -> "Viewer":
        text, encoding = read_text_file(Path(path))
        return cls(stdscr, config, text, path, encoding)

    # ---------------- geometry ----------------
    def text_height(self) -> int:
        height, _ = self.stdscr.getmaxyx()
        return max(height - 1, 0)

    def max_top(self) -> int:
        return max(len(self.lines) - self.text_height(), 0)

    def scroll(self, delta: int) -> None:
        self.top = min(max(self.top + delta, 0), self.max_top())

    def scroll_horizontal(self, delta: int) -> None:
        self.left = max(self.left + delta, 0)

    # ---------------- drawing ----------------
    def draw(self) -> None:
        height, width = self.stdscr.getmaxyx()
        text_rows = max(height - 1, 0)
        stop = min(self.top + text_rows, len(self.lines))
        if stop > self.top:
            self.renderer.render_lines(
                self.canvas,
                self.lines,
                self.top,
                stop,
                0,
                0,
                width,
                scroll_left=self.left,
                search_term=self.search_term,
            )
        for row in range(stop - self.top, text_rows):
            self.canvas.put(0, row, " " * width, "default", "background")
        if height > 0:
            self.draw_status(height - 1, width)
        self.canvas.refresh()

    def draw_status(self, row: int, width: int) -> None:
        name = self.path or "<buffer>"
        mode = self.classification.mode.value
        position = f"{self.top + 1}/{len(self.lines)}"
        flags = []
        if self.classification.read_only:
            flags.append("ro")
        if self.renderer.rainbow:
            flags.append("rainbow")
        if self.renderer.compact_tabs:
            flags.append("compact")
        text = f" {name} [{mode}] {self.encoding} {position} {' '.join(flags)} {self.status}"
        clipped = []
        used = 0
        for ch in text:
            w = char_width(ch)
            if used + w > width - 1:
                break
            clipped.append(ch)
            used += w
        self.canvas.put(0, row, "".join(clipped) + " " * (width - 1 - used), "status")

    # ---------------- search ----------------
    def show_match(self, result: Optional[SearchResult]) -> None:
        if result is None:
            self.status = f"'{self.search_term}' not found"
            return
        self.match = result
        text_rows = self.text_height()
        if not self.top <= result.line < self.top + text_rows:
            self.top = min(max(result.line - text_rows // 2, 0), self.max_top())
        _, width = self.stdscr.getmaxyx()
        column = display_column(self.lines[result.line], result.column, self.renderer.tab_size)
        if self.renderer.compact_tabs:
            column = result.column
        if not self.left <= column < self.left + width:
            self.left = max(column - width // 2, 0)
        self.status = f"'{self.search_term}' at {result.line + 1}:{result.column + 1}"

    def start_search(self, term: str) -> None:
        self.search_term = term
        self.match = None
        if not term:
            self.status = ""
            return
        result = self.searcher.first_match(
            self.lines, len(self.lines), term, self.top, self.search_timeout
        )
        self.show_match(result)

    def next_match(self, forward: bool = True) -> None:
        if not self.search_term:
            self.status = "No search term"
            return
        line, column = (self.match.line, self.match.column) if self.match else (self.top, -1)
        result = find_next(
            self.lines, len(self.lines), self.search_term, line, column,
            forward=forward, wrap=self.search_wrap,
        )
        self.show_match(result)

    def prompt(self, label: str) -> Optional[str]:
        """Reads a line of input on the status row; None when cancelled."""
        height, width = self.stdscr.getmaxyx()
        text = ""
        curses.curs_set(1)
        try:
            while True:
                line = f"{label}{text}"[: max(width - 1, 0)]
                self.canvas.put(0, height - 1, line + " " * (width - 1 - len(line)), "status")
                self.canvas.refresh()
                key = self.stdscr.get_wch()
                if key == "\x1b" or key == ESCAPE:
                    return None
                if key in ("\n", "\r") or key in ENTER_KEYS:
                    return text
                if key in ("\x7f", "\b") or key in BACKSPACE_KEYS:
                    text = text[:-1]
                elif isinstance(key, str) and key.isprintable():
                    text += key
        finally:
            curses.curs_set(0)

    # ---------------- input ----------------
    def handle_key(self, key) -> None:
        """Applies one key press (``int`` key code or ``str`` character)."""
        if isinstance(key, str):
            key = ord(key) if len(key) == 1 else -1
        page = max(self.text_height() - 1, 1)

        if key in (ord("q"), ESCAPE):
            self.running = False
        elif key in (curses.KEY_DOWN, ord("j")):
            self.scroll(1)
        elif key in (curses.KEY_UP, ord("k")):
            self.scroll(-1)
        elif key in (curses.KEY_NPAGE, ord(" ")):
            self.scroll(page)
        elif key == curses.KEY_PPAGE:
            self.scroll(-page)
        elif key == curses.KEY_HOME:
            self.top, self.left = 0, 0
        elif key == curses.KEY_END:
            self.top = self.max_top()
        elif key in (curses.KEY_RIGHT, ord("l")):
            self.scroll_horizontal(4)
        elif key in (curses.KEY_LEFT, ord("h")):
            self.scroll_horizontal(-4)
        elif key == ord("/"):
            term = self.prompt("/")
            if term is not None:
                self.start_search(term)
        elif key == ord("n"):
            self.next_match(forward=True)
        elif key == ord("N"):
            self.next_match(forward=False)
        elif key == ord("r"):
            self.renderer.rainbow = not self.renderer.rainbow
            self.status = f"Rainbow parentheses {'on' if self.renderer.rainbow else 'off'}"
        elif key == ord("t"):
            self.renderer.compact_tabs = not self.renderer.compact_tabs
            self.status = f"Compact tabs {'on' if self.renderer.compact_tabs else 'off'}"
        elif key == curses.KEY_RESIZE:
            self.top = min(self.top, self.max_top())

    def run(self) -> None:
        curses.curs_set(0)
        self.stdscr.keypad(True)
        self.palette.init_colors()
        while self.running:
            self.draw()
            try:
                key = self.stdscr.get_wch()
            except curses.error:
                continue
            self.handle_key(key)
        logging.info("Viewer closed.")
