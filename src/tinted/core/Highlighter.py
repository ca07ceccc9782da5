# tinted/core/Highlighter.py
"""Highlighter Module
==================
Composition of one highlighted line from the mode's override strategy,
the tokenizer, the lexical state tracker and the overlays.

The `Highlighter` owns everything that depends on the active mode: the
profile, the immutable keyword table and the checkpoint store. Mode
switches and render passes are serialised through its re-entrant lock, so
a redraw never observes a half-swapped keyword table.

Composition of a line, given the state before it:

1. The lexical tracker scans the line. It always runs, including for lines
   an override strategy handles, so states stay identical whether a line
   is replayed or rendered.
2. The override strategy of the mode gets the first chance; a composed
   result is used as is.
3. Otherwise the line is tokenized; block comment and multi-line string
   regions are recoloured and everything from a single-line comment marker
   onwards takes the comment colour. A tokenizer failure degrades to the
   plain line.
4. Rainbow brackets (code brackets only; strategies may opt out) and the
   search overlay are applied last.
"""

import logging
import threading
from typing import NamedTuple, Optional, Union

from tinted.core.Dispatcher import USE_DEFAULT, DispatchContext, dispatch, next_document
from tinted.core.Errors import TokenizerError
from tinted.core.KeywordTable import KeywordTable
from tinted.core.LexicalState import (
    INITIAL_DOCUMENT,
    INITIAL_STATE,
    DocumentState,
    LexicalState,
    StateCheckpoints,
    advance,
    scan,
)
from tinted.core.ModeRegistry import Mode, ModeProfile, profile_for
from tinted.core.Overlay import Cell, apply_rainbow, apply_search, spans_to_cells
from tinted.core.Tokenizer import plain_spans, tokenize
from tinted.utils.utils import LineAccessor, as_accessor


class LineHighlight(NamedTuple):
    """Composed cells of a line plus the states after it."""

    cells: list[Cell]
    state: LexicalState
    document: DocumentState


## ====================== class Highlighter ======================
class Highlighter:
    """Composes highlighted lines for one buffer.

    Attributes:
        profile (ModeProfile): Capability record of the active mode.
        keywords (KeywordTable): Keyword table built for ``profile``.
        checkpoints (StateCheckpoints): Stored line-boundary states.
        rainbow (bool): Default for rainbow bracket colouring.
    """

    def __init__(
        self,
        mode: Union[Mode, ModeProfile] = Mode.BLANK,
        checkpoint_interval: int = 64,
        rainbow: bool = True,
    ) -> None:
        self.lock = threading.RLock()
        self.checkpoints = StateCheckpoints(checkpoint_interval)
        self.rainbow = rainbow
        self.profile: ModeProfile = profile_for(Mode.BLANK)
        self.keywords: KeywordTable = KeywordTable.default()
        self.set_mode(mode)

    @property
    def mode(self) -> Mode:
        return self.profile.mode

    def set_mode(self, mode: Union[Mode, ModeProfile]) -> None:
        """Switches mode: rebuilds the keyword table and drops all checkpoints."""
        profile = mode if isinstance(mode, ModeProfile) else profile_for(mode)
        with self.lock:
            self.profile = profile
            self.keywords = KeywordTable.for_profile(profile)
            self.checkpoints.clear()
        logging.debug(
            f"Highlighter mode set to {profile.name} ({len(self.keywords)} keywords)"
        )

    def invalidate(self, from_line: int) -> None:
        """Forgets checkpoints that depend on *from_line* after an edit."""
        with self.lock:
            self.checkpoints.invalidate(from_line)

    def advance_line(
        self, state: LexicalState, document: DocumentState, line: str
    ) -> tuple[LexicalState, DocumentState]:
        """Advances both states over *line* without composing it."""
        return (
            advance(state, line, self.profile),
            next_document(document, line, self.profile),
        )

    def resume_state(
        self, lines: LineAccessor, start: int
    ) -> tuple[LexicalState, DocumentState]:
        """Computes the states before line *start*.

        Replays from the nearest checkpoint at or before *start*, storing
        new checkpoints on the way.
        """
        line_at = as_accessor(lines)
        with self.lock:
            boundary, state, document = self.checkpoints.nearest(start)
            for index in range(boundary, start):
                state, document = self.advance_line(state, document, line_at(index))
                self.checkpoints.store(index + 1, state, document)
        if start - boundary > self.checkpoints.interval:
            logging.debug(f"Replayed {start - boundary} lines from boundary {boundary}")
        return state, document

    def plain_line(
        self, text: str, state: LexicalState, document: DocumentState
    ) -> LineHighlight:
        """Uncoloured cells for *text*; states still advance."""
        state_after, document_after = self.advance_line(state, document, text)
        return LineHighlight(spans_to_cells(plain_spans(text)), state_after, document_after)

    def highlight_line(
        self,
        text: str,
        state: LexicalState = INITIAL_STATE,
        document: DocumentState = INITIAL_DOCUMENT,
        search_term: str = "",
        rainbow: Optional[bool] = None,
    ) -> LineHighlight:
        """Composes one tab-expanded line.

        Args:
            text (str): Line text with tabs already expanded.
            state (LexicalState): Lexical state before the line.
            document (DocumentState): Document state before the line.
            search_term (str): Term to highlight; empty for none.
            rainbow (bool | None): Rainbow brackets; ``None`` uses the
                highlighter's default.

        Returns:
            LineHighlight: cells of the line and the states after it.
        """
        if rainbow is None:
            rainbow = self.rainbow
        with self.lock:
            profile = self.profile
            keywords = self.keywords

        result = scan(state, text, profile)
        dispatched = dispatch(DispatchContext(text, profile, keywords, document))

        colour_brackets = rainbow and profile.rainbow and not profile.prose

        if dispatched.spans is not USE_DEFAULT:
            cells = spans_to_cells(dispatched.spans)
            if colour_brackets and dispatched.rainbow:
                apply_rainbow(cells, result.brackets, state.paren_depth)
        else:
            try:
                cells = spans_to_cells(tokenize(text, profile, keywords))
            except TokenizerError as e:
                logging.debug(f"Falling back to plain text: {e}")
                return LineHighlight(
                    spans_to_cells(plain_spans(text)), result.state, dispatched.document
                )

            for start, end, tag in result.regions:
                for column in range(start, end):
                    cells[column] = cells[column]._replace(fg=tag)
            if result.comment_start is not None:
                for column in range(result.comment_start, len(cells)):
                    cells[column] = cells[column]._replace(fg="comment")

            if colour_brackets:
                apply_rainbow(cells, result.brackets, state.paren_depth)

        if search_term:
            apply_search(cells, search_term)

        return LineHighlight(cells, result.state, dispatched.document)
