# tinted/core/SearchEngine.py
"""SearchEngine Module
===================
Plain-text, case-sensitive search over a line accessor.

`BackgroundSearch.first_match` is the only concurrent operation of the
pipeline: it scans for the first match in a daemon thread and waits for a
bounded time. The worker delivers its single result through a one-slot
queue owned by that call; once the caller has stopped waiting, a late
result lands in a queue nobody reads and is simply dropped. The worker is
never cancelled.

`find_next` is the synchronous forward/backward search with wrap-around
used for "next match" and "previous match". All columns are code point
indices; `display_column` converts one to a tab-expanded screen column.
"""

import logging
import queue
import threading
from typing import NamedTuple, Optional

from tinted.utils.utils import LineAccessor, as_accessor


class SearchResult(NamedTuple):
    """Position of a match: line index and code point column."""

    line: int
    column: int


def display_column(line: str, column: int, tab_size: int = 4) -> int:
    """Screen column of code point *column* once tabs are expanded."""
    return column + line.count("\t", 0, column) * (tab_size - 1)


def scan_forward(
    lines: LineAccessor, count: int, term: str, start: int, stop: Optional[int] = None
) -> Optional[SearchResult]:
    """First match in lines ``[start, stop)``, searching each line from column 0."""
    if not term:
        return None
    line_at = as_accessor(lines)
    stop = count if stop is None else min(stop, count)
    for index in range(max(start, 0), stop):
        column = line_at(index).find(term)
        if column != -1:
            return SearchResult(index, column)
    return None


def find_next(
    lines: LineAccessor,
    count: int,
    term: str,
    line: int,
    column: int,
    forward: bool = True,
    wrap: bool = True,
) -> Optional[SearchResult]:
    """Finds the match after (or before) the cursor.

    Args:
        lines: Line accessor (callable or sequence).
        count: Number of lines in the document.
        term: Search term; an empty term never matches.
        line: Cursor line.
        column: Cursor column in code points.
        forward: Search towards the end of the document.
        wrap: Continue from the other end when nothing is found.

    Returns:
        SearchResult | None: the match position, or None for no match.
    """
    if not term or count <= 0:
        return None
    line_at = as_accessor(lines)
    line = min(max(line, 0), count - 1)

    if forward:
        current = line_at(line)
        found = current.find(term, column + 1)
        if found != -1:
            return SearchResult(line, found)
        result = scan_forward(line_at, count, term, line + 1)
        if result is None and wrap:
            result = scan_forward(line_at, count, term, 0, line + 1)
        return result

    current = line_at(line)
    found = current.rfind(term, 0, max(column, 0) + len(term) - 1) if column > 0 else -1
    if found != -1:
        return SearchResult(line, found)
    order = list(range(line - 1, -1, -1))
    if wrap:
        order += list(range(count - 1, line - 1, -1))
    for index in order:
        found = line_at(index).rfind(term)
        if found != -1:
            return SearchResult(index, found)
    return None


## ==================== BackgroundSearch Class ====================
class BackgroundSearch:
    """Runs first-match searches in daemon threads with a bounded wait.

    Attributes:
        threads (list[threading.Thread]): Workers started by this instance.
            Finished workers are pruned on each new search.
    """

    def __init__(self) -> None:
        self.threads: list[threading.Thread] = []

    def first_match(
        self,
        lines: LineAccessor,
        count: int,
        term: str,
        start: int = 0,
        timeout: float = 0.5,
    ) -> Optional[SearchResult]:
        """Looks for the first line at or after *start* containing *term*.

        Returns the match, or None when there is none or the worker did not
        answer within *timeout* seconds.
        """
        if not term:
            return None

        results: queue.Queue[Optional[SearchResult]] = queue.Queue(maxsize=1)

        def worker() -> None:
            try:
                found = scan_forward(lines, count, term, start)
            except Exception as e:
                logging.error(f"Background search for '{term}' failed: {e}", exc_info=True)
                found = None
            results.put(found)

        self.threads = [t for t in self.threads if t.is_alive()]
        thread = threading.Thread(target=worker, name="tinted-search", daemon=True)
        self.threads.append(thread)
        thread.start()

        try:
            return results.get(timeout=timeout)
        except queue.Empty:
            logging.debug(f"Search for '{term}' timed out after {timeout:.3f}s")
            return None
