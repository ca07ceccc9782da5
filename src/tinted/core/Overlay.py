# tinted/core/Overlay.py
"""Overlay Module
==============
Colour decorations applied on top of a composed line: rainbow brackets
and search-term highlighting.

Overlays work on a list of `Cell` objects (one per code point of the
tab-expanded line) and only ever replace the foreground tag. Span
boundaries set by tokenization and background tags are left alone.
"""

from typing import NamedTuple, Sequence

from tinted.core.LexicalState import OPENERS
from tinted.core.Tokenizer import ColoredSpan


RAINBOW_TABLE: tuple[str, ...] = tuple(f"rainbow_{i}" for i in range(6))
SEARCH_TAG = "search_highlight"


class Cell(NamedTuple):
    """A single code point with its colour tags."""

    char: str
    fg: str = "default"
    bg: str = "background"


def spans_to_cells(spans: Sequence[ColoredSpan]) -> list[Cell]:
    return [Cell(ch, span.fg, span.bg) for span in spans for ch in span.text]


def cells_to_spans(cells: Sequence[Cell]) -> list[ColoredSpan]:
    """Groups neighbouring cells with identical tags back into spans."""
    spans: list[ColoredSpan] = []
    for cell in cells:
        if spans and spans[-1].fg == cell.fg and spans[-1].bg == cell.bg:
            spans[-1] = spans[-1]._replace(text=spans[-1].text + cell.char)
        else:
            spans.append(ColoredSpan(cell.char, cell.fg, cell.bg))
    return spans


def rainbow_color(depth: int, table: Sequence[str] = RAINBOW_TABLE) -> str:
    """Colour for a bracket at *depth*; negative depths wrap by magnitude."""
    return table[abs(depth) % len(table)]


def apply_rainbow(
    cells: list[Cell],
    brackets: Sequence[int],
    depth: int,
    table: Sequence[str] = RAINBOW_TABLE,
) -> list[Cell]:
    """Colours the brackets at the given columns by nesting depth.

    Args:
        cells: The composed line; modified in place and returned.
        brackets: Columns of brackets that count towards nesting, in order.
        depth: Bracket depth at the start of the line.
        table: Rainbow colour tags.

    An opening bracket increments the depth and then takes its colour, a
    closing bracket takes the colour and then decrements, so both brackets
    of a matching pair share one colour.
    """
    for column in brackets:
        if column >= len(cells):
            break
        cell = cells[column]
        if cell.char in OPENERS:
            depth += 1
            cells[column] = cell._replace(fg=rainbow_color(depth, table))
        else:
            cells[column] = cell._replace(fg=rainbow_color(depth, table))
            depth -= 1
    return cells


def search_matches(text: str, term: str) -> list[int]:
    """Start columns of every non-overlapping, case-sensitive match of *term*."""
    if not term:
        return []
    first = term[0]
    matches = []
    i, n = 0, len(text)
    while i < n:
        if text[i] == first and text.startswith(term, i):
            matches.append(i)
            i += len(term)
        else:
            i += 1
    return matches


def apply_search(cells: list[Cell], term: str, tag: str = SEARCH_TAG) -> list[Cell]:
    """Recolours every match of *term* in *cells*; modified in place."""
    text = "".join(cell.char for cell in cells)
    for start in search_matches(text, term):
        for column in range(start, start + len(term)):
            cells[column] = cells[column]._replace(fg=tag)
    return cells
