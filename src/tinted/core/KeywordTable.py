# tinted/core/KeywordTable.py
"""KeywordTable Module
===================
The active set of highlighted words.

A `KeywordTable` is an immutable value. Switching modes builds a brand new
table from the default word list plus the mode's keyword delta, so a render
pass that already holds a table is never affected by a concurrent mode
switch, and tokenization results can be memoised on the table itself.

The table also carries a ``suppressed`` set: words the mode explicitly
removed. Lexer-backed tokenization uses it to demote words that a Pygments
lexer would otherwise report as keywords.
"""

from collections.abc import Iterable

from tinted.core.ModeRegistry import ModeProfile


DEFAULT_WORDS: frozenset[str] = frozenset(
    {
        "False", "None", "True", "and", "as", "assert", "async", "auto", "await",
        "bool", "break", "build", "byte", "case", "catch", "char", "class",
        "const", "continue", "def", "default", "defer", "del", "do", "done",
        "double", "elif", "else", "end", "enum", "except", "export", "extern",
        "false", "finally", "float", "fn", "for", "foreach", "from", "func",
        "get", "global", "goto", "if", "import", "in", "install", "int", "is",
        "lambda", "last", "let", "local", "long", "map", "match", "mut", "new",
        "next", "nil", "no", "nonlocal", "not", "null", "or", "package", "pass",
        "print", "private", "property", "protected", "public", "raise",
        "require", "ret", "return", "self", "set", "short", "signed", "sizeof",
        "static", "struct", "sub", "super", "switch", "template", "this",
        "throw", "true", "try", "type", "typedef", "union", "unsigned", "until",
        "var", "void", "volatile", "when", "while", "with", "yield",
    }
)


class KeywordTable:
    """Immutable set of keywords for one mode.

    Attributes:
        words (frozenset[str]): Words highlighted as keywords.
        suppressed (frozenset[str]): Words the active mode removed; they are
            never highlighted as keywords, even when a lexer reports them.
    """

    __slots__ = ("words", "suppressed")

    def __init__(
        self,
        words: Iterable[str] = (),
        suppressed: Iterable[str] = (),
    ) -> None:
        self.words = frozenset(words)
        self.suppressed = frozenset(suppressed) - self.words

    @classmethod
    def default(cls) -> "KeywordTable":
        return cls(DEFAULT_WORDS)

    @classmethod
    def for_profile(cls, profile: ModeProfile) -> "KeywordTable":
        """Builds the table for *profile*: defaults, then replace, add and remove."""
        table = cls.default()
        delta = profile.keywords
        if delta.replace is not None:
            table = table.clear().add(delta.replace)
        return table.add(delta.add).remove(delta.remove)

    def clear(self) -> "KeywordTable":
        return KeywordTable()

    def add(self, words: Iterable[str]) -> "KeywordTable":
        words = frozenset(words)
        return KeywordTable(self.words | words, self.suppressed - words)

    def remove(self, words: Iterable[str]) -> "KeywordTable":
        words = frozenset(words)
        return KeywordTable(self.words - words, self.suppressed | words)

    def __contains__(self, word: object) -> bool:
        return word in self.words

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self):
        return iter(sorted(self.words))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeywordTable):
            return NotImplemented
        return self.words == other.words and self.suppressed == other.suppressed

    def __hash__(self) -> int:
        return hash((self.words, self.suppressed))

    def __repr__(self) -> str:
        return f"KeywordTable({len(self.words)} words, {len(self.suppressed)} suppressed)"
