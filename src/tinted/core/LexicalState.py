# tinted/core/LexicalState.py
"""LexicalState Module
===================
The incremental lexical state machine that carries context across line
boundaries: whether a block comment or multi-line string is open, the
quote parity of the current line and the bracket nesting depth.

The tracker is strictly sequential: the state after line N is the only
legal input for line N+1. `advance` is a pure function of
``(state, line, profile)``, which is what makes periodic checkpoints safe:
resuming from any stored `StateCheckpoints` boundary produces exactly the
states a replay from the top of the document would.

Scanning works on decoded code points. Escape sequences are deliberately
not recognised, so ``"a\\"b"`` toggles the double-quote parity three times.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

from tinted.core.ModeRegistry import ModeProfile


OPENERS = "([{"
CLOSERS = ")]}"


@dataclass(frozen=True)
class LexicalState:
    """Lexical context at a line boundary.

    Attributes:
        single_line_comment (bool): The line ended inside a single-line
            comment. Reset at the start of every line.
        multi_line_comment (bool): A block comment is open.
        multi_line_string (int): Number of multi-line string delimiters seen
            so far; an odd count means a string is open.
        double_quote (int): Double-quote parity counter for the line.
        single_quote (int): Single-quote parity counter for the line.
        paren_depth (int): Running bracket depth; negative on malformed input.
        started_multi_line_string (bool): A multi-line string was opened on
            this line rather than continued from an earlier one.
    """

    single_line_comment: bool = False
    multi_line_comment: bool = False
    multi_line_string: int = 0
    double_quote: int = 0
    single_quote: int = 0
    paren_depth: int = 0
    started_multi_line_string: bool = False

    @property
    def in_multi_line_string(self) -> bool:
        return self.multi_line_string % 2 == 1

    @property
    def in_quote(self) -> bool:
        return self.double_quote % 2 == 1 or self.single_quote % 2 == 1

    def none(self) -> bool:
        """True when the boundary is outside every comment and string."""
        return not (
            self.single_line_comment
            or self.multi_line_comment
            or self.in_multi_line_string
            or self.in_quote
        )


@dataclass(frozen=True)
class DocumentState:
    """Document structure carried next to the lexical state (prose modes)."""

    in_code_block: bool = False
    prev_line_is_list_item: bool = False


INITIAL_STATE = LexicalState()
INITIAL_DOCUMENT = DocumentState()


COMMENT_REGION = "multiline_comment"
STRING_REGION = "multiline_string"


class ScanResult(NamedTuple):
    """Everything one scan learns about a line.

    ``regions`` holds ``(start, end, tag)`` column ranges covered by a block
    comment or a multi-line string, including their delimiters.
    """

    state: LexicalState
    brackets: tuple[int, ...]
    comment_start: Optional[int]
    regions: tuple[tuple[int, int, str], ...] = ()


def scan(state: LexicalState, line: str, profile: ModeProfile) -> ScanResult:
    """Processes one line and reports the new state.

    Args:
        state: State at the start of the line.
        line: The line text (code points; tabs may already be expanded).
        profile: Capability record of the active mode.

    Returns:
        ScanResult: the state after the line, the columns of brackets that
        count towards nesting (outside strings and comments), the column
        where a single-line comment starts (if any) and the block comment
        and multi-line string regions of the line.
    """
    mls_count = state.multi_line_string
    carry = mls_count % 2 == 1
    dq = state.double_quote if carry else 0
    sq = state.single_quote if carry else 0
    in_comment = state.multi_line_comment
    depth = state.paren_depth
    started = False
    comment_start = None
    brackets = []
    regions = []
    # Start column of the block comment or multi-line string being scanned.
    region_start = 0 if (in_comment or carry) else None

    marker = profile.comment_marker
    block_open, block_close = profile.block_comment or (None, None)
    delimiter = profile.multiline_string
    lead = len(line) - len(line.lstrip())

    i, n = 0, len(line)
    while i < n:
        if in_comment:
            if block_close and line.startswith(block_close, i):
                in_comment = False
                i += len(block_close)
                regions.append((region_start, i, COMMENT_REGION))
                region_start = None
            else:
                i += 1
            continue

        in_mls = mls_count % 2 == 1
        in_quote = dq % 2 == 1 or sq % 2 == 1

        if not (in_mls or in_quote):
            if block_open and line.startswith(block_open, i):
                in_comment = True
                region_start = i
                i += len(block_open)
                continue
            if marker and line.startswith(marker, i) and (
                not profile.marker_at_line_start_only or i == lead
            ):
                comment_start = i
                break
            if profile.assembly_comments and line[i] == ";":
                comment_start = i
                break

        if delimiter and not in_quote and line.startswith(delimiter, i):
            mls_count += 1
            if mls_count % 2 == 1:
                started = True
                region_start = i
                i += len(delimiter)
            else:
                i += len(delimiter)
                regions.append((region_start, i, STRING_REGION))
                region_start = None
            continue

        ch = line[i]
        if not in_mls:
            if ch == '"' and sq % 2 == 0:
                dq += 1
            elif ch == "'" and dq % 2 == 0 and not profile.ignore_single_quotes:
                sq += 1
            elif not in_quote:
                if ch in OPENERS:
                    depth += 1
                    brackets.append(i)
                elif ch in CLOSERS:
                    depth -= 1
                    brackets.append(i)
        i += 1

    if region_start is not None:
        regions.append(
            (region_start, n, COMMENT_REGION if in_comment else STRING_REGION)
        )

    new_state = LexicalState(
        single_line_comment=comment_start is not None,
        multi_line_comment=in_comment,
        multi_line_string=mls_count,
        double_quote=dq,
        single_quote=sq,
        paren_depth=depth,
        started_multi_line_string=started,
    )
    return ScanResult(new_state, tuple(brackets), comment_start, tuple(regions))


def advance(state: LexicalState, line: str, profile: ModeProfile) -> LexicalState:
    """Returns the state after *line*, given the state before it."""
    return scan(state, line, profile).state


class StateCheckpoints:
    """Periodic snapshots of ``(LexicalState, DocumentState)``.

    A checkpoint at boundary ``k`` holds the state *before* line ``k``, i.e.
    after processing lines ``[0, k)``. Only every ``interval``-th boundary is
    stored.

    Attributes:
        interval (int): Distance in lines between stored boundaries.
    """

    def __init__(self, interval: int = 64) -> None:
        if interval < 1:
            raise ValueError(f"Checkpoint interval must be positive, got {interval}")
        self.interval = interval
        self._states: dict[int, tuple[LexicalState, DocumentState]] = {}

    def nearest(self, line: int) -> tuple[int, LexicalState, DocumentState]:
        """Returns the closest stored boundary at or before *line*.

        Falls back to the document start with the initial states.
        """
        boundary = (max(line, 0) // self.interval) * self.interval
        while boundary > 0:
            stored = self._states.get(boundary)
            if stored is not None:
                return boundary, stored[0], stored[1]
            boundary -= self.interval
        return 0, INITIAL_STATE, INITIAL_DOCUMENT

    def store(self, line: int, state: LexicalState, document: DocumentState) -> None:
        if line > 0 and line % self.interval == 0:
            self._states[line] = (state, document)

    def invalidate(self, from_line: int) -> None:
        """Drops every boundary that depends on line *from_line* or later."""
        stale = [boundary for boundary in self._states if boundary > from_line]
        for boundary in stale:
            del self._states[boundary]
        if stale:
            logging.debug(f"Dropped {len(stale)} checkpoints after line {from_line}")

    def clear(self) -> None:
        self._states.clear()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, line: object) -> bool:
        return line in self._states
