# tinted/core/Dispatcher.py
"""Dispatcher Module
=================
Per-mode override strategies consulted before the default
tokenize-and-track composition.

A handful of modes need bespoke per-line handling: prose formats track
fenced code blocks and list items, Lisp and ViM split a line on a single
comment marker, configuration-like files bail out on C-style block comment
delimiters and the ML family colours ``(* ... *)`` one-liners. Each of
these lives in a small `OverrideStrategy` registered under the override id
that the mode profile names.

A strategy either returns a fully composed list of spans or the
`USE_DEFAULT` sentinel; it never applies half a transformation. Strategies
that keep document structure (fenced code, list items) also report the
`DocumentState` for the next line, and `next_document` exposes that update
on its own so that lines above the visible window can be replayed cheaply.
"""

import logging
import re
from enum import Enum
from typing import NamedTuple, Union

from tinted.core.Errors import TokenizerError
from tinted.core.KeywordTable import KeywordTable
from tinted.core.LexicalState import DocumentState
from tinted.core.ModeRegistry import ModeProfile
from tinted.core.Tokenizer import ColoredSpan, tokenize


class _Default(Enum):
    USE_DEFAULT = "use-default"

    def __repr__(self) -> str:
        return "USE_DEFAULT"


USE_DEFAULT = _Default.USE_DEFAULT

Spans = Union[list[ColoredSpan], _Default]


class DispatchContext(NamedTuple):
    """Input to a strategy: one tab-expanded line and its surroundings."""

    line: str
    profile: ModeProfile
    keywords: KeywordTable
    document: DocumentState


class Dispatch(NamedTuple):
    """Strategy output: spans (or `USE_DEFAULT`) and the next document state.

    `rainbow` is False when the strategy wants its spans left without
    bracket colouring.
    """

    spans: Spans
    document: DocumentState
    rainbow: bool = True


class OverrideStrategy:
    """Base class for per-mode line overrides."""

    name = ""
    rainbow = True

    def next_document(self, document: DocumentState, line: str) -> DocumentState:
        return document

    def spans(self, ctx: DispatchContext) -> Spans:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} '{self.name}'>"


STRATEGIES: dict[str, OverrideStrategy] = {}


def register_strategy(cls):
    """Class decorator adding one instance of *cls* to the registry."""
    STRATEGIES[cls.name] = cls()
    return cls


def _whole(line: str, tag: str) -> list[ColoredSpan]:
    return [ColoredSpan(line, tag)] if line else []


## ================= Prose ======================================

FENCES = ("```", "~~~")
LIST_ITEM_RE = re.compile(r"^(\s*(?:[-*+]|\d+[.)]))(\s+)(?=\S)")
HEADING_RE = re.compile(r"^#{1,6}(\s|$)")


def is_fence(line: str) -> bool:
    return line.strip().startswith(FENCES)


def is_list_item(line: str) -> bool:
    return LIST_ITEM_RE.match(line) is not None


@register_strategy
class MarkdownStrategy(OverrideStrategy):
    """Fenced code blocks, headings, quotes and list items."""

    name = "markdown"

    def next_document(self, document: DocumentState, line: str) -> DocumentState:
        in_code_block = document.in_code_block
        if is_fence(line):
            in_code_block = not in_code_block
        return DocumentState(
            in_code_block=in_code_block,
            prev_line_is_list_item=is_list_item(line),
        )

    def spans(self, ctx: DispatchContext) -> Spans:
        line = ctx.line
        trimmed = line.strip()

        if is_fence(line) or ctx.document.in_code_block:
            return _whole(line, "code_block")
        if HEADING_RE.match(trimmed):
            return _whole(line, "heading")
        if trimmed.startswith(">"):
            return _whole(line, "quote")

        match = LIST_ITEM_RE.match(line)
        if match:
            marker_end = match.end(1)
            spans = [ColoredSpan(line[:marker_end], "list_marker")]
            if line[marker_end:]:
                spans.append(ColoredSpan(line[marker_end:], "list_text"))
            return spans
        if ctx.document.prev_line_is_list_item and trimmed and line[0].isspace():
            return _whole(line, "list_text")

        return USE_DEFAULT


## ================= Comment markers ============================

@register_strategy
class SingleMarkerStrategy(OverrideStrategy):
    """Splits a line holding exactly one comment marker.

    The prefix is tokenized normally and the marker plus the rest of the
    line takes the comment colour. Zero or several markers fall through to
    the default composition.
    """

    name = "single_marker"

    def spans(self, ctx: DispatchContext) -> Spans:
        marker = ctx.profile.comment_marker
        if not marker:
            return USE_DEFAULT
        trimmed = ctx.line.strip()
        if trimmed.count(marker) != 1:
            return USE_DEFAULT
        if trimmed.startswith(marker):
            return _whole(ctx.line, "comment")

        index = ctx.line.index(marker)
        prefix, suffix = ctx.line[:index], ctx.line[index:]
        try:
            spans = tokenize(prefix, ctx.profile, ctx.keywords)
        except TokenizerError as e:
            logging.debug(f"Single marker prefix not tokenized: {e}")
            return USE_DEFAULT
        return spans + [ColoredSpan(suffix, "comment")]


@register_strategy
class BlockGuardStrategy(OverrideStrategy):
    """Lines containing C-style block delimiters are shown unhighlighted."""

    name = "block_guard"
    rainbow = False

    def spans(self, ctx: DispatchContext) -> Spans:
        if "/*" in ctx.line or "*/" in ctx.line:
            return _whole(ctx.line, "default")
        return USE_DEFAULT


@register_strategy
class MlOneLineCommentStrategy(OverrideStrategy):
    """``(* ... *)`` on a single line is a comment."""

    name = "ml_one_line_comment"

    def spans(self, ctx: DispatchContext) -> Spans:
        trimmed = ctx.line.strip()
        if len(trimmed) >= 4 and trimmed.startswith("(*") and trimmed.endswith("*)"):
            return _whole(ctx.line, "comment")
        return USE_DEFAULT


## ================= Git ========================================

REBASE_COMMANDS = frozenset(
    {
        "pick", "p", "reword", "r", "edit", "e", "squash", "s", "fixup", "f",
        "exec", "x", "break", "b", "drop", "d", "label", "l", "reset", "t",
        "merge", "m", "update-ref", "u",
    }
)
REBASE_RE = re.compile(r"^(\s*)(\S+)(\s+)([0-9a-fA-F]{4,40})\b")


@register_strategy
class GitStrategy(OverrideStrategy):
    """Commit messages and interactive rebase todo lists."""

    name = "git"

    def spans(self, ctx: DispatchContext) -> Spans:
        line = ctx.line
        if line.lstrip().startswith("#"):
            return _whole(line, "comment")

        match = REBASE_RE.match(line)
        if match and match.group(2) in REBASE_COMMANDS:
            spans = []
            if match.group(1):
                spans.append(ColoredSpan(match.group(1)))
            spans.append(ColoredSpan(match.group(2), "keyword"))
            spans.append(ColoredSpan(match.group(3)))
            spans.append(ColoredSpan(match.group(4), "number"))
            if line[match.end():]:
                spans.append(ColoredSpan(line[match.end():]))
            return spans

        return _whole(line, "default")


## ================= Lookup =====================================

def strategy_for(profile: ModeProfile):
    """Returns the strategy named by *profile*, or None."""
    if profile.override is None:
        return None
    strategy = STRATEGIES.get(profile.override)
    if strategy is None:
        logging.warning(f"Unknown override '{profile.override}' for mode {profile.name}")
    return strategy


def next_document(document: DocumentState, line: str, profile: ModeProfile) -> DocumentState:
    """Advances the document structure over *line* without composing it."""
    strategy = strategy_for(profile)
    if strategy is None:
        return document
    return strategy.next_document(document, line)


def dispatch(ctx: DispatchContext) -> Dispatch:
    """Runs the override strategy of ``ctx.profile`` on one line."""
    strategy = strategy_for(ctx.profile)
    if strategy is None:
        return Dispatch(USE_DEFAULT, ctx.document)
    return Dispatch(
        strategy.spans(ctx),
        strategy.next_document(ctx.document, ctx.line),
        strategy.rainbow,
    )
