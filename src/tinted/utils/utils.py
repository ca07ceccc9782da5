# tinted/utils/utils.py
"""
tinted.utils.utils
==================

Core utility functions shared by the tinted pipeline and the viewer.

Key functionalities include:
- Robust Configuration Loading: the embedded `DEFAULT_CONFIG` is deep-merged
  with user settings from `~/.config/tinted/config.toml` so the pipeline can
  always run, even with a missing or corrupted user file.
- Environment switches: `NO_COLOR` forces the plain rendering path.
- Text loading: decodes files with the encoding reported by `chardet`.
- Helper utilities: dictionary deep-merge and hex → xterm-256 conversion.
"""

import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Dict, Optional, Union

import chardet
import toml

logger = logging.getLogger("tinted")

# --- Constants ---
WHITE_FG_IDX = 255
CONFIG_DIR = Path.home() / ".config" / "tinted"

# Hardcoded fallback configuration; user config.toml is merged on top.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_size": 4,
        "compact_tabs": False,
        "syntax_highlighting": True,
        "rainbow_parentheses": True,
        "checkpoint_interval": 64,
    },
    "search": {"timeout_ms": 500, "wrap": True},
    "colors": {
        # syntax categories
        "default": "#87D787", "keyword": "#FF5F5F", "string": "#FFFF87",
        "comment": "#8A8A8A", "number": "#FFFFFF", "function": "#87D787",
        "type": "#5FAFFF", "class": "#FF5F5F", "operator": "#FFFF87",
        "punctuation": "#5FAFFF", "builtin": "#87D787", "tag": "#87D787",
        "attribute": "#87D787", "decorator": "#FFFF87", "error": "#FF5F5F",
        # whole-line states
        "multiline_comment": "#8A8A8A", "multiline_string": "#AF5FAF",
        # prose
        "code_block": "#87D787", "heading": "#FF5F5F", "list_marker": "#FFFF87",
        "list_text": "#D7D7D7", "quote": "#8A8A8A",
        # overlays
        "search_highlight": "#FF87FF",
        "status": "#D7D7D7",
        "rainbow_0": "#FF5F5F", "rainbow_1": "#FFFF87", "rainbow_2": "#87D787",
        "rainbow_3": "#5FAFFF", "rainbow_4": "#FF87FF", "rainbow_5": "#5FD7D7",
        # canvas background; "default" keeps the terminal's own background
        "background": "default",
    },
    "logging": {
        "file": "tinted.log",
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
}


# --- Helper Functions ---

LineAccessor = Union[Callable[[int], str], Sequence[str]]


def as_accessor(lines: LineAccessor) -> Callable[[int], str]:
    """Accepts either a ``line_at(index)`` callable or a sequence of lines."""
    if callable(lines):
        return lines
    return lines.__getitem__


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(user_config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's config.toml on top.

    Args:
        user_config_path: Explicit config file; defaults to
            ``~/.config/tinted/config.toml``.

    Returns:
        The merged configuration dictionary. A missing or unparsable user
        file is logged and the defaults are returned.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    path = user_config_path or CONFIG_DIR / "config.toml"
    if path.is_file():
        try:
            user_config = toml.load(path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{path}': {e}. Using defaults.")

    return final_config


def no_color_requested(environ: Optional[Dict[str, str]] = None) -> bool:
    """Return True when the NO_COLOR convention asks for uncoloured output."""
    env = os.environ if environ is None else environ
    return env.get("NO_COLOR", "") != ""


def read_text_file(path: Path) -> tuple[str, str]:
    """
    Reads *path* and decodes it, guessing the encoding with chardet.

    Returns:
        A ``(text, encoding)`` tuple. Undecodable bytes are replaced.
    """
    raw = path.read_bytes()
    encoding = "utf-8"
    if raw:
        guess = chardet.detect(raw[:65536])
        encoding = guess.get("encoding") or "utf-8"
        if encoding.lower() == "ascii":
            encoding = "utf-8"
    try:
        return raw.decode(encoding, errors="replace"), encoding
    except LookupError:
        logger.warning(f"Unknown encoding '{encoding}' for {path}, falling back to UTF-8.")
        return raw.decode("utf-8", errors="replace"), "utf-8"


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8: return 16
        if r > 248: return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
