# tinted/core/ModeRegistry.py
"""ModeRegistry Module
===================
Language modes and the data-driven registry of per-mode capabilities.

Every file opened in the editor is classified into a `Mode`. Each mode maps
to one frozen `ModeProfile`, a small capability record that tells the rest
of the highlighting pipeline everything it needs to know about the language:

- the single-line comment marker and the block-comment delimiter pair,
- the multi-line string delimiter (if the language has one),
- indentation style,
- special-case flags (assembly-style `;` comments, ignoring apostrophes,
  markers that only count at the start of a line, prose formats),
- which per-line override strategy the dispatcher should use,
- which Pygments lexer tokenizes the mode (``None`` selects the built-in
  word tokenizer, which is driven by the keyword table),
- the keyword delta applied on top of the default keyword table.

Classification (`detect_mode`, `detect_from_contents`, `classify`) looks at
the filename first and lets a shebang line revise the decision. Files
that stay in the blank mode borrow a Pygments lexer found by filename or
guessed from the first line.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional

from pygments.lexers import get_lexer_for_filename, guess_lexer
from pygments.util import ClassNotFound


class Mode(Enum):
    """Classification tag for a file's language or format."""

    BLANK = "-"
    GIT = "Git"
    MARKDOWN = "Markdown"
    MAKEFILE = "Make"
    SHELL = "Shell"
    CONFIG = "Configuration"
    ASSEMBLY = "Assembly"
    GO = "Go"
    HASKELL = "Haskell"
    OCAML = "Ocaml"
    STANDARD_ML = "Standard ML"
    PYTHON = "Python"
    TEXT = "Text"
    CMAKE = "Cmake"
    VIM = "ViM"
    LISP = "Lisp"
    ZIG = "Zig"
    KOTLIN = "Kotlin"
    JAVA = "Java"
    HIDL = "HIDL"
    SQL = "SQL"
    OAK = "Oak"
    RUST = "Rust"
    LUA = "Lua"
    CRYSTAL = "Crystal"
    NIM = "Nim"
    OBJECT_PASCAL = "Pas"
    BAT = "Bat"
    CPP = "C++"
    C = "C"
    ADA = "Ada"
    HTML = "HTML"
    ODIN = "Odin"
    XML = "XML"
    POLICY_LANGUAGE = "SELinux"
    NROFF = "Man"
    SCALA = "Scala"
    JSON = "JSON"


@dataclass(frozen=True)
class Indentation:
    """How a mode indents: with spaces (``per_tab`` of them) or with tabs."""

    spaces: bool = True
    per_tab: int = 4


@dataclass(frozen=True)
class KeywordDelta:
    """Changes a mode makes to the default keyword table.

    ``replace`` clears the table before ``add`` and ``remove`` are applied.
    """

    add: tuple[str, ...] = ()
    remove: tuple[str, ...] = ()
    replace: Optional[tuple[str, ...]] = None


@dataclass(frozen=True)
class ModeProfile:
    """Capability record for one mode."""

    mode: Mode
    comment_marker: Optional[str] = "//"
    block_comment: Optional[tuple[str, str]] = ("/*", "*/")
    multiline_string: Optional[str] = None
    indentation: Indentation = field(default_factory=Indentation)
    assembly_comments: bool = False
    ignore_single_quotes: bool = False
    marker_at_line_start_only: bool = False
    prose: bool = False
    rainbow: bool = True
    override: Optional[str] = None
    lexer: Optional[str] = None
    keywords: KeywordDelta = field(default_factory=KeywordDelta)

    @property
    def name(self) -> str:
        return self.mode.value


class Classification(NamedTuple):
    """Result of classifying a file."""

    mode: Mode
    profile: ModeProfile
    read_only: bool
    syntax_highlight: bool


TABS = Indentation(spaces=False, per_tab=4)
TWO_SPACES = Indentation(spaces=True, per_tab=2)

# Word lists for modes that replace the default keyword table.
ASM_WORDS = (
    "adc", "add", "and", "bits", "call", "cmp", "db", "dd", "dec", "div", "dw",
    "equ", "extern", "global", "inc", "int", "ja", "jae", "jb", "jbe", "je",
    "jg", "jge", "jl", "jle", "jmp", "jne", "jnz", "jz", "lea", "loop", "mov",
    "movzx", "mul", "neg", "nop", "not", "or", "pop", "push", "resb", "resd",
    "resw", "ret", "section", "shl", "shr", "sub", "syscall", "test", "xor",
)
LISP_WORDS = (
    "and", "cond", "defalias", "defconst", "defcustom", "defgroup", "defmacro",
    "defun", "defvar", "dolist", "dotimes", "if", "interactive", "lambda",
    "let", "let*", "loop", "not", "or", "progn", "provide", "require",
    "setq", "unless", "when", "while",
)
LUA_WORDS = (
    "and", "break", "do", "else", "elseif", "end", "false", "for", "function",
    "goto", "if", "in", "local", "nil", "not", "or", "repeat", "return",
    "then", "true", "until", "while",
)
KOTLIN_WORDS = (
    "as", "break", "class", "continue", "do", "else", "false", "for", "fun",
    "if", "in", "interface", "is", "null", "object", "package", "return",
    "super", "this", "throw", "true", "try", "typealias", "typeof", "val",
    "var", "when", "while",
)
OCAML_WORDS = (
    "and", "as", "begin", "do", "done", "downto", "else", "end", "exception",
    "external", "for", "fun", "function", "if", "in", "include", "let",
    "match", "module", "mutable", "of", "open", "rec", "sig", "struct",
    "then", "to", "try", "type", "val", "when", "while", "with",
)
SML_WORDS = (
    "abstype", "and", "andalso", "as", "case", "datatype", "do", "else",
    "end", "eqtype", "exception", "fn", "fun", "functor", "handle", "if",
    "in", "include", "infix", "infixr", "let", "local", "nonfix", "of", "op",
    "open", "orelse", "raise", "rec", "sharing", "sig", "signature", "struct",
    "structure", "then", "type", "val", "where", "while", "with", "withtype",
)
ODIN_WORDS = (
    "bit_set", "break", "case", "cast", "context", "continue", "defer",
    "distinct", "do", "dynamic", "else", "enum", "fallthrough", "for",
    "foreign", "if", "import", "in", "map", "not_in", "or_else", "or_return",
    "package", "proc", "return", "struct", "switch", "transmute", "union",
    "using", "when", "where",
)
ZIG_WORDS = (
    "align", "allowzero", "and", "anyframe", "anytype", "asm", "async",
    "await", "break", "catch", "comptime", "const", "continue", "defer",
    "else", "enum", "errdefer", "error", "export", "extern", "fn", "for",
    "if", "inline", "noalias", "nosuspend", "or", "orelse", "packed", "pub",
    "resume", "return", "struct", "suspend", "switch", "test", "threadlocal",
    "try", "union", "unreachable", "usingnamespace", "var", "volatile", "while",
)
HIDL_WORDS = (
    "enum", "extends", "generates", "import", "interface", "oneway",
    "package", "safe_union", "struct", "typedef", "union",
)
POLICY_WORDS = (
    "allow", "allowxperm", "auditallow", "class", "constrain", "dontaudit",
    "expandattribute", "neverallow", "role", "type", "typeattribute",
    "typetransition", "user",
)

# Shared deltas lifted from the per-language keyword adjustments.
SHELL_DELTA = KeywordDelta(
    add=("checkout", "clean", "configure", "do", "done", "endif", "exec",
         "for", "ifeq", "ifneq", "in", "make", "rm", "sudo", "while"),
    remove=("as", "build", "default", "del", "double", "finally", "float",
            "fn", "get", "long", "new", "no", "package", "pass", "print",
            "property", "require", "ret", "set", "super", "template", "type",
            "var", "with"),
)
C_DELTA = KeywordDelta(
    add=("int8_t", "uint8_t", "int16_t", "uint16_t", "int32_t", "uint32_t",
         "int64_t", "uint64_t", "size_t", "elif", "endif"),
    remove=("static", "build", "done", "package", "require", "set", "super",
            "type", "when"),
)
RUST_DELTA = KeywordDelta(
    add=("String", "assert_eq", "char", "fn", "i16", "i32", "i64", "i8",
         "impl", "loop", "mod", "panic", "u16", "u32", "u64", "u8", "usize"),
    remove=("as", "build", "byte", "done", "end", "foreach", "get", "int",
            "last", "map", "mut", "next", "pass", "print", "var"),
)


def _profiles() -> dict[Mode, ModeProfile]:
    no_block = None
    entries = [
        ModeProfile(Mode.BLANK, multiline_string="`", rainbow=False),
        ModeProfile(Mode.GIT, comment_marker="#", block_comment=no_block,
                    prose=True, rainbow=False, override="git"),
        ModeProfile(Mode.MARKDOWN, comment_marker=None, block_comment=("<!--", "-->"),
                    ignore_single_quotes=True, prose=True, rainbow=False,
                    override="markdown", indentation=TWO_SPACES),
        ModeProfile(Mode.TEXT, comment_marker=None, block_comment=no_block,
                    ignore_single_quotes=True, prose=True, rainbow=False),
        ModeProfile(Mode.MAKEFILE, comment_marker="#", block_comment=no_block,
                    indentation=TABS, override="block_guard", lexer="make",
                    keywords=SHELL_DELTA),
        ModeProfile(Mode.SHELL, comment_marker="#", block_comment=no_block,
                    indentation=TWO_SPACES, override="block_guard", lexer="bash",
                    keywords=SHELL_DELTA),
        ModeProfile(Mode.CMAKE, comment_marker="#", block_comment=no_block,
                    override="block_guard", lexer="cmake",
                    keywords=KeywordDelta(remove=("build", "package"))),
        ModeProfile(Mode.CONFIG, comment_marker="#", block_comment=no_block,
                    indentation=TWO_SPACES, override="block_guard",
                    keywords=KeywordDelta(
                        add=("PASSWORD", "Password", "SECRET", "Secret",
                             "password", "secret", "secrets"),
                        remove=("auto", "default", "from", "install", "int",
                                "local", "no", "not", "type", "var"))),
        ModeProfile(Mode.ASSEMBLY, comment_marker=";", block_comment=no_block,
                    assembly_comments=True, indentation=TABS,
                    keywords=KeywordDelta(replace=ASM_WORDS)),
        ModeProfile(Mode.GO, multiline_string="`", indentation=TABS, lexer="go",
                    keywords=KeywordDelta(
                        add=("defer", "error", "fallthrough", "func", "go",
                             "import", "package", "range", "rune", "string"),
                        remove=("False", "None", "True", "class", "def", "del",
                                "end", "fn", "in", "let", "pass"))),
        ModeProfile(Mode.HASKELL, comment_marker="--", block_comment=("{-", "-}"),
                    ignore_single_quotes=True, lexer="haskell"),
        ModeProfile(Mode.OCAML, comment_marker=None, block_comment=("(*", "*)"),
                    ignore_single_quotes=True, override="ml_one_line_comment",
                    indentation=TWO_SPACES, lexer="ocaml",
                    keywords=KeywordDelta(replace=OCAML_WORDS)),
        ModeProfile(Mode.STANDARD_ML, comment_marker=None, block_comment=("(*", "*)"),
                    ignore_single_quotes=True, override="ml_one_line_comment",
                    indentation=TWO_SPACES, lexer="sml",
                    keywords=KeywordDelta(replace=SML_WORDS)),
        ModeProfile(Mode.PYTHON, comment_marker="#", block_comment=no_block,
                    multiline_string='"""', lexer="python",
                    keywords=KeywordDelta(remove=("append", "exit", "fn", "get",
                                                  "package", "print"))),
        ModeProfile(Mode.VIM, comment_marker='"', block_comment=no_block,
                    ignore_single_quotes=True, marker_at_line_start_only=True,
                    override="single_marker", indentation=TWO_SPACES,
                    keywords=KeywordDelta(add=("call", "echo", "elseif",
                                               "endfunction", "map", "nmap",
                                               "redraw"))),
        ModeProfile(Mode.LISP, comment_marker=";;", block_comment=no_block,
                    assembly_comments=True, ignore_single_quotes=True,
                    override="single_marker", indentation=TWO_SPACES,
                    keywords=KeywordDelta(replace=LISP_WORDS)),
        ModeProfile(Mode.ZIG, lexer="zig", keywords=KeywordDelta(replace=ZIG_WORDS,
                                                                 remove=("log",))),
        ModeProfile(Mode.KOTLIN, multiline_string='"""', lexer="kotlin",
                    keywords=KeywordDelta(replace=KOTLIN_WORDS)),
        ModeProfile(Mode.JAVA, lexer="java",
                    keywords=KeywordDelta(add=("package",),
                                          remove=("add", "bool", "get", "in",
                                                  "local", "sub"))),
        ModeProfile(Mode.HIDL, keywords=KeywordDelta(replace=HIDL_WORDS)),
        ModeProfile(Mode.SQL, comment_marker="--", lexer="sql",
                    keywords=KeywordDelta(add=("NOT",))),
        ModeProfile(Mode.OAK, keywords=KeywordDelta(add=("fn",),
                                                    remove=("from", "new", "print"))),
        ModeProfile(Mode.RUST, lexer="rust", keywords=RUST_DELTA),
        ModeProfile(Mode.LUA, comment_marker="--", block_comment=("--[[", "]]"),
                    indentation=TWO_SPACES, lexer="lua",
                    keywords=KeywordDelta(replace=LUA_WORDS)),
        ModeProfile(Mode.CRYSTAL, comment_marker="#", block_comment=no_block,
                    indentation=TWO_SPACES, lexer="crystal"),
        ModeProfile(Mode.NIM, comment_marker="#", block_comment=("#[", "]#"),
                    multiline_string='"""', lexer="nim",
                    keywords=KeywordDelta(remove=("append", "exit", "fn", "get",
                                                  "package", "print"))),
        ModeProfile(Mode.OBJECT_PASCAL, comment_marker="{", block_comment=("(*", "*)"),
                    ignore_single_quotes=False, indentation=TWO_SPACES,
                    lexer="delphi"),
        ModeProfile(Mode.BAT, comment_marker="@rem", block_comment=no_block,
                    lexer="batch"),
        ModeProfile(Mode.CPP, lexer="cpp", keywords=C_DELTA),
        ModeProfile(Mode.C, lexer="c", keywords=C_DELTA),
        ModeProfile(Mode.ADA, comment_marker="--", block_comment=no_block,
                    indentation=Indentation(spaces=True, per_tab=3), lexer="ada",
                    keywords=KeywordDelta(add=("constant", "loop", "procedure",
                                               "project"))),
        ModeProfile(Mode.HTML, comment_marker=None, block_comment=("<!--", "-->"),
                    ignore_single_quotes=True, indentation=TWO_SPACES, lexer="html"),
        ModeProfile(Mode.ODIN, indentation=TABS,
                    keywords=KeywordDelta(replace=ODIN_WORDS)),
        ModeProfile(Mode.XML, comment_marker=None, block_comment=("<!--", "-->"),
                    ignore_single_quotes=True, indentation=TWO_SPACES, lexer="xml"),
        ModeProfile(Mode.POLICY_LANGUAGE, comment_marker="#", block_comment=no_block,
                    keywords=KeywordDelta(replace=POLICY_WORDS)),
        ModeProfile(Mode.NROFF, comment_marker='.\\"', block_comment=no_block,
                    ignore_single_quotes=True, prose=True, rainbow=False,
                    lexer="groff",
                    keywords=KeywordDelta(replace=("B", "BR", "PP", "SH", "TP",
                                                   "TH", "IR", "IP", "RB"))),
        ModeProfile(Mode.SCALA, multiline_string='"""', indentation=TWO_SPACES,
                    lexer="scala"),
        ModeProfile(Mode.JSON, comment_marker=None, block_comment=no_block,
                    indentation=TWO_SPACES, lexer="json",
                    keywords=KeywordDelta(remove=("install",))),
    ]
    return {profile.mode: profile for profile in entries}


MODE_PROFILES: dict[Mode, ModeProfile] = _profiles()


def profile_for(mode: Mode) -> ModeProfile:
    """Return the capability record for *mode* (the blank profile if unknown)."""
    return MODE_PROFILES.get(mode, MODE_PROFILES[Mode.BLANK])


# --- Classification -------------------------------------------------------

CONFIG_FILENAMES = (
    "fstab", "config", "BUILD", "WORKSPACE", "passwd", "group", "environment",
    "shadow", "gshadow", "hostname", "hosts", "issue", "mirrorlist",
)

EXTENSION_MODES: dict[str, Mode] = {
    ".asm": Mode.ASSEMBLY, ".S": Mode.ASSEMBLY, ".s": Mode.ASSEMBLY, ".inc": Mode.ASSEMBLY,
    ".go": Mode.GO, ".odin": Mode.ODIN, ".hs": Mode.HASKELL,
    ".sml": Mode.STANDARD_ML, ".ml": Mode.OCAML, ".py": Mode.PYTHON,
    ".md": Mode.MARKDOWN, ".adoc": Mode.MARKDOWN, ".rst": Mode.MARKDOWN,
    ".scdoc": Mode.MARKDOWN, ".scd": Mode.MARKDOWN,
    ".cpp": Mode.CPP, ".cc": Mode.CPP, ".c++": Mode.CPP, ".cxx": Mode.CPP,
    ".hpp": Mode.CPP, ".h": Mode.CPP, ".c": Mode.C,
    ".txt": Mode.TEXT, ".text": Mode.TEXT, ".nfo": Mode.TEXT, ".diz": Mode.TEXT,
    ".lsp": Mode.LISP, ".emacs": Mode.LISP, ".el": Mode.LISP, ".elisp": Mode.LISP,
    ".clojure": Mode.LISP, ".clj": Mode.LISP, ".lisp": Mode.LISP, ".cl": Mode.LISP,
    ".l": Mode.LISP,
    ".zig": Mode.ZIG, ".zir": Mode.ZIG, ".kt": Mode.KOTLIN, ".kts": Mode.KOTLIN,
    ".java": Mode.JAVA, ".gradle": Mode.JAVA, ".hal": Mode.HIDL, ".sql": Mode.SQL,
    ".ok": Mode.OAK, ".rs": Mode.RUST, ".lua": Mode.LUA, ".cr": Mode.CRYSTAL,
    ".nim": Mode.NIM, ".pas": Mode.OBJECT_PASCAL, ".pp": Mode.OBJECT_PASCAL,
    ".lpr": Mode.OBJECT_PASCAL, ".bat": Mode.BAT,
    ".adb": Mode.ADA, ".gpr": Mode.ADA, ".ads": Mode.ADA, ".ada": Mode.ADA,
    ".htm": Mode.HTML, ".html": Mode.HTML, ".xml": Mode.XML,
    ".te": Mode.POLICY_LANGUAGE, ".scala": Mode.SCALA,
    ".json": Mode.JSON, ".ipynb": Mode.JSON,
}
EXTENSION_MODES.update({f".{n}": Mode.NROFF for n in range(1, 9)})

SHEBANG_MODES: dict[str, Mode] = {
    "python": Mode.PYTHON, "python3": Mode.PYTHON, "sh": Mode.SHELL,
    "bash": Mode.SHELL, "zsh": Mode.SHELL, "ksh": Mode.SHELL, "fish": Mode.SHELL,
    "lua": Mode.LUA, "make": Mode.MAKEFILE, "crystal": Mode.CRYSTAL,
}


def detect_mode(filename: str) -> Mode:
    """Guess a mode from *filename* alone."""
    base = os.path.basename(filename)
    ext = os.path.splitext(base)[1]

    if (
        base in ("COMMIT_EDITMSG", "MERGE_MSG")
        or (base.startswith("git-") and "." not in base and base.count("-") >= 2)
    ):
        mode = Mode.GIT
    elif ext in (".vimrc", ".vim", ".nvim") or base in (".vimrc", ".gvimrc"):
        mode = Mode.VIM
    elif base.startswith(("Makefile", "makefile")) or base == "GNUmakefile":
        # Must be checked before the extension-less config rule below.
        mode = Mode.MAKEFILE
    elif (
        filename.endswith(".git/config")
        or ext in (".ini", ".cfg", ".conf", ".service", ".target", ".socket",
                   ".yml", ".yaml", ".toml", ".bp")
        or ext.startswith(".rc")
        or (ext == "" and (base.endswith(("file", "rc")) or base in CONFIG_FILENAMES))
    ):
        mode = Mode.CONFIG
    elif (
        ext in (".sh", ".ksh", ".tcsh", ".bash", ".zsh", ".local", ".profile")
        or base == "PKGBUILD"
        or (base.startswith(".") and "sh" in base)
    ):
        mode = Mode.SHELL
    elif base == "CMakeLists.txt" or ext == ".cmake":
        mode = Mode.CMAKE
    else:
        mode = EXTENSION_MODES.get(ext, Mode.BLANK)

    if mode == Mode.TEXT:
        mode = Mode.MARKDOWN

    # README, TODO, LICENSE and friends read best as prose.
    if mode == Mode.BLANK and "." not in base and base and base == base.upper():
        mode = Mode.MARKDOWN

    return mode


def detect_from_contents(mode: Mode, first_line: str) -> Mode:
    """Revise *mode* using a shebang on *first_line*.

    Only blank and configuration modes are revised; an explicit extension
    always wins.
    """
    if mode not in (Mode.BLANK, Mode.CONFIG) or not first_line.startswith("#!"):
        return mode
    words = first_line[2:].strip().split()
    if not words:
        return mode
    interpreter = os.path.basename(words[0])
    if interpreter == "env" and len(words) > 1:
        interpreter = os.path.basename(words[1])
    revised = SHEBANG_MODES.get(interpreter)
    if revised is None and interpreter.startswith("python"):
        revised = Mode.PYTHON
    if revised is not None:
        logging.debug(f"Shebang '{interpreter}' revises mode {mode.name} -> {revised.name}")
        return revised
    return mode


def lexer_alias_for(path: str, first_line: Optional[str] = None) -> Optional[str]:
    """Pygments alias for a file no mode claims: filename first, then content."""
    filename = os.path.basename(path)
    lexer = None
    if filename:
        try:
            lexer = get_lexer_for_filename(filename)
            logging.debug(f"Pygments: Detected '{lexer.name}' by filename.")
        except ClassNotFound:
            logging.debug(f"Pygments: No lexer for filename '{filename}'.")

    if lexer is None and first_line and first_line.strip():
        try:
            lexer = guess_lexer(first_line)
            logging.debug(f"Pygments: Guessed '{lexer.name}' by content.")
        except ClassNotFound:
            logging.debug("Pygments: Content guess failed.")

    if lexer is None or not lexer.aliases or lexer.aliases[0] == "text":
        return None
    return lexer.aliases[0]


def classify(path: str, first_line: Optional[str] = None) -> Classification:
    """Classify *path*: mode, profile, read-only flag and highlight default."""
    mode = detect_mode(path)
    ext = os.path.splitext(os.path.basename(path))[1]
    syntax_highlight = (mode != Mode.BLANK or ext != "") and mode != Mode.TEXT
    if first_line is not None:
        revised = detect_from_contents(mode, first_line)
        if revised != mode or first_line.startswith("#!"):
            syntax_highlight = True
        mode = revised

    p = Path(path)
    read_only = p.exists() and not os.access(p, os.W_OK)

    profile = profile_for(mode)
    if mode == Mode.BLANK and syntax_highlight:
        alias = lexer_alias_for(path, first_line)
        if alias is not None:
            profile = replace(profile, lexer=alias)

    return Classification(mode, profile, read_only, syntax_highlight)
