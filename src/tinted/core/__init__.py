# src/tinted/core/__init__.py
"""Public facade for tinted.core: re-export main classes from CamelCase modules.

Keeps the CamelCase file names (Highlighter.py, LexicalState.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .Dispatcher import USE_DEFAULT, DispatchContext, dispatch  # noqa: F401
from .Errors import RenderRangeError, TintedError, TokenizerError  # noqa: F401
from .Highlighter import Highlighter, LineHighlight  # noqa: F401
from .KeywordTable import KeywordTable  # noqa: F401
from .LexicalState import (  # noqa: F401
    DocumentState,
    LexicalState,
    StateCheckpoints,
    advance,
)
from .ModeRegistry import Mode, ModeProfile, classify, detect_mode  # noqa: F401
from .Overlay import Cell  # noqa: F401
from .SearchEngine import BackgroundSearch, SearchResult, find_next  # noqa: F401
from .Tokenizer import ColoredSpan, tokenize  # noqa: F401


__all__ = [
    "USE_DEFAULT",
    "BackgroundSearch",
    "Cell",
    "ColoredSpan",
    "DispatchContext",
    "DocumentState",
    "Highlighter",
    "KeywordTable",
    "LexicalState",
    "LineHighlight",
    "Mode",
    "ModeProfile",
    "RenderRangeError",
    "SearchResult",
    "StateCheckpoints",
    "TintedError",
    "TokenizerError",
    "advance",
    "classify",
    "detect_mode",
    "dispatch",
    "find_next",
    "tokenize",
]
