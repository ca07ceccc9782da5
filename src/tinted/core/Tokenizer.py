# tinted/core/Tokenizer.py
"""Tokenizer Module
================
Turns one line of text into colour-tagged spans, without any cross-line
context.

Two back-ends are available and the mode profile decides which one runs:

* **Pygments**: profiles with a ``lexer`` alias are lexed with
  ``pygments.lex``. Token types are mapped to colour tags by walking up the
  token hierarchy (``Token.Keyword.Constant`` falls back to
  ``Token.Keyword``), exactly as the editor's own highlighter does. The
  active `KeywordTable` then adjusts the result: names in the table are
  promoted to ``keyword`` and keywords the mode removed are demoted to
  ``default``.
* **Word tokenizer**: profiles without a lexer are tokenized with a small
  regular-expression scanner that recognises quoted strings, numbers,
  words (keywords when the table contains them), the mode's comment marker
  and punctuation.

The spans returned by `tokenize` always concatenate to exactly the input
line. Any failure is raised as `TokenizerError`; the caller decides how to
degrade.
"""

import functools
import logging
import re
from typing import NamedTuple, Optional

from pygments import lex
from pygments.lexers import get_lexer_by_name
from pygments.token import Token
from pygments.util import ClassNotFound

from tinted.core.Errors import TokenizerError
from tinted.core.KeywordTable import KeywordTable
from tinted.core.ModeRegistry import ModeProfile


DEFAULT_TAG = "default"


class ColoredSpan(NamedTuple):
    """A run of characters sharing one foreground and background tag."""

    text: str
    fg: str = DEFAULT_TAG
    bg: str = "background"


TOKEN_TAGS = {
    Token.Keyword: "keyword",
    Token.Name.Function: "function",
    Token.Name.Class: "class",
    Token.Name.Decorator: "decorator",
    Token.Name.Builtin: "builtin",
    Token.Name.Exception: "class",
    Token.Name.Tag: "tag",
    Token.Name.Attribute: "attribute",
    Token.Literal.String: "string",
    Token.Literal.String.Doc: "comment",
    Token.Literal.Number: "number",
    Token.Comment: "comment",
    Token.Operator: "operator",
    Token.Operator.Word: "keyword",
    Token.Punctuation: "punctuation",
    Token.Generic.Heading: "heading",
    Token.Generic.Subheading: "heading",
    Token.Error: "error",
}


def tag_for_token(token_type) -> str:
    """Returns the colour tag for a Pygments token type."""
    current_type = token_type
    while current_type:
        if current_type in TOKEN_TAGS:
            return TOKEN_TAGS[current_type]
        current_type = current_type.parent
    return DEFAULT_TAG


@functools.lru_cache(maxsize=64)
def _lexer_for(alias: str):
    try:
        return get_lexer_by_name(alias, stripnl=False, ensurenl=False)
    except ClassNotFound as e:
        raise TokenizerError(f"No Pygments lexer named '{alias}'") from e


@functools.lru_cache(maxsize=64)
def _word_pattern(profile: ModeProfile) -> "re.Pattern[str]":
    """Builds the word-tokenizer regex for *profile*."""
    parts = []
    marker = profile.comment_marker
    markers = []
    if marker and profile.marker_at_line_start_only:
        # Only the first non-blank text may open a comment.
        parts.append(rf"(?P<lead_comment>^\s*{re.escape(marker)}.*)")
    elif marker:
        markers.append(re.escape(marker))
    if profile.assembly_comments and marker != ";":
        markers.append(";")

    if profile.ignore_single_quotes:
        parts.append(r'(?P<string>"[^"]*"?)')
    else:
        parts.append(r'(?P<string>"[^"]*"?|\'[^\']*\'?)')
    if markers:
        parts.append(rf"(?P<comment>(?:{'|'.join(markers)}).*)")
    parts.extend(
        (
            r"(?P<number>0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?)",
            r"(?P<word>[^\W\d]\w*)",
            r"(?P<space>\s+)",
            r"(?P<punctuation>.)",
        )
    )
    return re.compile("|".join(parts), re.DOTALL)


def _word_tokens(line: str, profile: ModeProfile, keywords: KeywordTable) -> list[ColoredSpan]:
    spans = []
    for match in _word_pattern(profile).finditer(line):
        kind = match.lastgroup
        text = match.group()
        if kind in ("comment", "lead_comment"):
            tag = "comment"
        elif kind == "word":
            tag = "keyword" if text in keywords else DEFAULT_TAG
        elif kind in ("string", "number", "punctuation"):
            tag = kind
        else:
            tag = DEFAULT_TAG
        spans.append(ColoredSpan(text, tag))
    return spans


def _pygments_tokens(line: str, alias: str, keywords: KeywordTable) -> list[ColoredSpan]:
    spans = []
    for token_type, text_value in lex(line, _lexer_for(alias)):
        if not text_value:
            continue
        tag = tag_for_token(token_type)
        if token_type in Token.Keyword and text_value in keywords.suppressed:
            tag = DEFAULT_TAG
        elif token_type in Token.Name and text_value in keywords:
            tag = "keyword"
        spans.append(ColoredSpan(text_value, tag))
    return spans


def _merge(spans: list[ColoredSpan]) -> tuple[ColoredSpan, ...]:
    merged: list[ColoredSpan] = []
    for span in spans:
        if merged and merged[-1].fg == span.fg and merged[-1].bg == span.bg:
            merged[-1] = merged[-1]._replace(text=merged[-1].text + span.text)
        else:
            merged.append(span)
    return tuple(merged)


@functools.lru_cache(maxsize=20000)
def _tokenize_cached(
    line: str, profile: ModeProfile, keywords: KeywordTable
) -> tuple[ColoredSpan, ...]:
    if not line:
        return ()
    try:
        if profile.lexer:
            spans = _pygments_tokens(line, profile.lexer, keywords)
        else:
            spans = _word_tokens(line, profile, keywords)
    except TokenizerError:
        raise
    except Exception as e:
        raise TokenizerError(f"{profile.name} tokenization failed for '{line[:70]}': {e}") from e

    if "".join(span.text for span in spans) != line:
        raise TokenizerError(f"{profile.name} tokens do not cover line '{line[:70]}'")
    return _merge(spans)


def tokenize(
    line: str, profile: ModeProfile, keywords: Optional[KeywordTable] = None
) -> list[ColoredSpan]:
    """Tokenizes *line* for *profile*.

    Args:
        line (str): Tab-expanded text of a single line, without a newline.
        profile (ModeProfile): Capability record of the active mode.
        keywords (KeywordTable | None): Active keyword table; the profile's
            own table is built when omitted.

    Returns:
        list[ColoredSpan]: Spans whose texts concatenate to ``line``.

    Raises:
        TokenizerError: The back-end failed or produced inconsistent output.
    """
    if keywords is None:
        keywords = KeywordTable.for_profile(profile)
    return list(_tokenize_cached(line, profile, keywords))


def plain_spans(line: str) -> list[ColoredSpan]:
    """The uncoloured rendition of *line* used when tokenization fails."""
    return [ColoredSpan(line)] if line else []


def clear_cache() -> None:
    _tokenize_cached.cache_clear()
    logging.debug("Tokenizer cache cleared.")
