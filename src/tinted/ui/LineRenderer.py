# tinted/ui/LineRenderer.py
"""LineRenderer Module
===================
Paints a range of buffer lines onto a canvas.

For every line of the requested range ``[start, stop)`` the renderer:

1. expands tabs (one column in compact mode, ``tab_size`` spaces otherwise),
2. trims trailing whitespace from the displayed copy,
3. asks the `Highlighter` for coloured cells, resuming lexical state from
   the nearest checkpoint before ``start``,
4. applies horizontal scrolling and clips to ``width`` terminal columns,
   measuring glyphs with `wcwidth` and never splitting a wide glyph,
5. replaces control characters with a placeholder glyph,
6. paints the cells as runs and fills the rest of the row with the
   background so nothing from a previously longer line survives.

With ``NO_COLOR`` set, or syntax highlighting switched off, every line goes
through the plain path; lexical state still advances so checkpoints stay
valid when colours come back.
"""

import logging
import os
import unicodedata
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from wcwidth import wcwidth

from tinted.core.Errors import RenderRangeError
from tinted.core.Highlighter import Highlighter
from tinted.core.Overlay import Cell
from tinted.utils.logging_config import RENDER_LOGGER
from tinted.utils.utils import DEFAULT_CONFIG, LineAccessor, as_accessor, no_color_requested


CONTROL_PLACEHOLDER = "¿"


def expand_tabs(line: str, tab_size: int = 4, compact: bool = False) -> str:
    """Replaces every tab with one space (compact) or *tab_size* spaces."""
    if "\t" not in line:
        return line
    return line.replace("\t", " " if compact else " " * tab_size)


def is_control(char: str) -> bool:
    return char not in "\t\n" and unicodedata.category(char) == "Cc"


def char_width(char: str) -> int:
    """Terminal columns taken by *char*; unknown widths count as one."""
    width = wcwidth(char)
    return 1 if width < 0 else width


def visible_cells(cells: Sequence[Cell], width: int, scroll_left: int = 0) -> list[Cell]:
    """Scrolls and clips *cells* to at most *width* terminal columns.

    A wide glyph straddling either edge is dropped entirely; the half column
    it leaves at the left edge becomes a blank cell.
    """
    visible: list[Cell] = []
    skipped = 0
    used = 0
    for cell in cells:
        if is_control(cell.char):
            cell = cell._replace(char=CONTROL_PLACEHOLDER)
        w = char_width(cell.char)
        if skipped < scroll_left:
            skipped += w
            if skipped > scroll_left:
                pad = min(skipped - scroll_left, width - used)
                visible.extend(Cell(" ", "default", cell.bg) for _ in range(pad))
                used += pad
            continue
        if used + w > width:
            break
        visible.append(cell)
        used += w
    return visible


## ==================== class LineRenderer ====================
class LineRenderer:
    """Renders line ranges through a `Highlighter`.

    Attributes:
        highlighter (Highlighter): Mode-aware line composer.
        tab_size (int): Spaces per tab in expanded mode.
        compact_tabs (bool): Render each tab as a single column.
        syntax_highlighting (bool): False forces the plain path.
        rainbow (bool): Rainbow brackets default for `render_lines`.
    """

    def __init__(
        self,
        highlighter: Highlighter,
        config: Optional[dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.highlighter = highlighter
        editor = dict(DEFAULT_CONFIG["editor"])
        editor.update((config or {}).get("editor", {}))
        self.tab_size = int(editor["tab_size"])
        self.compact_tabs = bool(editor["compact_tabs"])
        self.syntax_highlighting = bool(editor["syntax_highlighting"])
        self.rainbow = bool(editor["rainbow_parentheses"])
        self.environ = os.environ if environ is None else environ

    def plain_mode(self) -> bool:
        return no_color_requested(self.environ) or not self.syntax_highlighting

    def display_text(self, line: str) -> str:
        """The copy of *line* that is actually drawn: tabs expanded, right-trimmed."""
        return expand_tabs(line, self.tab_size, self.compact_tabs).rstrip()

    def render_lines(
        self,
        canvas,
        lines: LineAccessor,
        start: int,
        stop: int,
        x: int,
        y: int,
        width: int,
        scroll_left: int = 0,
        search_term: str = "",
        rainbow: Optional[bool] = None,
    ) -> None:
        """Draws lines ``[start, stop)`` with the first one at row *y*.

        Args:
            canvas: Object with ``put(x, y, text, fg, bg)``.
            lines: Line accessor (callable or sequence).
            start (int): First line index to draw.
            stop (int): One past the last line index to draw.
            x (int): Canvas column of the first text cell.
            y (int): Canvas row of line *start*.
            width (int): Columns available per row.
            scroll_left (int): Columns scrolled off to the left.
            search_term (str): Term to highlight; empty for none.
            rainbow (bool | None): Rainbow brackets; ``None`` uses the
                configured default.

        Raises:
            RenderRangeError: ``start >= stop``. Nothing is drawn.
        """
        if start >= stop:
            raise RenderRangeError(start, stop)
        if rainbow is None:
            rainbow = self.rainbow

        line_at = as_accessor(lines)
        plain = self.plain_mode()
        highlighter = self.highlighter
        trace = RENDER_LOGGER.isEnabledFor(logging.DEBUG)

        with highlighter.lock:
            state, document = highlighter.resume_state(line_at, start)
            for row, index in enumerate(range(start, stop)):
                text = self.display_text(line_at(index))
                if plain:
                    result = highlighter.plain_line(text, state, document)
                else:
                    result = highlighter.highlight_line(
                        text, state, document, search_term, rainbow
                    )
                state, document = result.state, result.document
                highlighter.checkpoints.store(index + 1, state, document)
                self.paint_row(canvas, result.cells, x, y + row, width, scroll_left)
                if trace:
                    RENDER_LOGGER.debug(f"line {index}: {state} {document}")

    def paint_row(
        self,
        canvas,
        cells: Sequence[Cell],
        x: int,
        y: int,
        width: int,
        scroll_left: int = 0,
    ) -> None:
        """Paints one composed line and fills the rest of the row."""
        column = 0
        run: list[str] = []
        run_fg = run_bg = None
        run_start = 0
        for cell in visible_cells(cells, width, scroll_left):
            if run and (cell.fg, cell.bg) != (run_fg, run_bg):
                canvas.put(x + run_start, y, "".join(run), run_fg, run_bg)
                run = []
            if not run:
                run_fg, run_bg, run_start = cell.fg, cell.bg, column
            run.append(cell.char)
            column += char_width(cell.char)
        if run:
            canvas.put(x + run_start, y, "".join(run), run_fg, run_bg)

        if column < width:
            canvas.put(x + column, y, " " * (width - column), "default", "background")
