# tinted/ui/Colors.py
"""Colors Module
=============
Resolves colour tags (``"keyword"``, ``"comment"``, ``"rainbow_3"``, ...)
to curses attributes.

The highlighting pipeline never touches curses: every cell it produces
carries a foreground tag and a background tag. `ColorPalette` turns such a
pair into an attribute with graceful degradation:

- 256-colour terminals use the hex values from the ``[colors]`` section of
  the configuration, converted with `hex_to_xterm`;
- 8-colour terminals use a fixed basic colour per tag;
- terminals without colour fall back to monochrome attributes
  (bold, dim, reverse).

Colour pairs are allocated lazily per ``(fg, bg)`` combination and cached,
since rainbow brackets and search matches combine foregrounds with
arbitrary backgrounds.
"""

import curses
import logging
from typing import Any, Optional

from tinted.utils.utils import DEFAULT_CONFIG, hex_to_xterm


# Basic colour used for each tag on 8-colour terminals.
EIGHT_COLOR_NAMES = {
    "default": "WHITE",
    "keyword": "RED",
    "string": "YELLOW",
    "comment": "WHITE",
    "number": "WHITE",
    "function": "GREEN",
    "type": "BLUE",
    "class": "RED",
    "operator": "YELLOW",
    "punctuation": "BLUE",
    "builtin": "GREEN",
    "tag": "GREEN",
    "attribute": "GREEN",
    "decorator": "YELLOW",
    "error": "RED",
    "multiline_comment": "WHITE",
    "multiline_string": "MAGENTA",
    "code_block": "GREEN",
    "heading": "RED",
    "list_marker": "YELLOW",
    "list_text": "WHITE",
    "quote": "WHITE",
    "search_highlight": "MAGENTA",
    "status": "WHITE",
    "rainbow_0": "RED",
    "rainbow_1": "YELLOW",
    "rainbow_2": "GREEN",
    "rainbow_3": "BLUE",
    "rainbow_4": "MAGENTA",
    "rainbow_5": "CYAN",
}

# Attributes added on top of the colour pair.
TAG_ATTRIBUTES = {
    "comment": "A_DIM",
    "multiline_comment": "A_DIM",
    "quote": "A_DIM",
    "function": "A_BOLD",
    "heading": "A_BOLD",
    "error": "A_BOLD",
    "status": "A_REVERSE",
}

# Monochrome rendition of each tag.
MONOCHROME_ATTRIBUTES = {
    "keyword": "A_BOLD",
    "class": "A_BOLD",
    "function": "A_BOLD",
    "decorator": "A_BOLD",
    "heading": "A_BOLD",
    "list_marker": "A_BOLD",
    "comment": "A_DIM",
    "multiline_comment": "A_DIM",
    "quote": "A_DIM",
    "error": "A_REVERSE",
    "search_highlight": "A_REVERSE",
    "status": "A_REVERSE",
}


## ==================== class ColorPalette ====================
class ColorPalette:
    """Maps ``(fg_tag, bg_tag)`` pairs to curses attributes.

    Attributes:
        colors (dict[str, str]): Tag → hex colour, from the configuration.
        is_256_color_terminal (bool): True when hex colours can be used.
        monochrome (bool): True when the terminal has no usable colours.
        initialized (bool): `init_colors` has run.
    """

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        config = config or {}
        self.colors: dict[str, str] = dict(DEFAULT_CONFIG["colors"])
        self.colors.update(config.get("colors", {}))
        self.is_256_color_terminal = False
        self.monochrome = False
        self.initialized = False
        self._pairs: dict[tuple[int, int], int] = {}
        self._attrs: dict[tuple[str, str], int] = {}
        self._next_pair = 1

    def init_colors(self) -> None:
        """Starts curses colour support, degrading when it is limited."""
        self._pairs.clear()
        self._attrs.clear()
        self._next_pair = 1
        self.initialized = True

        if not curses.has_colors() or curses.COLORS < 8:
            logging.warning(
                "Terminal has no or limited color support (< 8). Using monochrome attributes."
            )
            self.monochrome = True
            self.is_256_color_terminal = False
            return

        self.monochrome = False
        try:
            curses.start_color()
            curses.use_default_colors()
        except curses.error as e:
            logging.error(f"Failed to start curses colors: {e}")
        self.is_256_color_terminal = curses.COLORS >= 256
        logging.debug(
            f"Color palette initialized: {curses.COLORS} colors, "
            f"256-color mode: {self.is_256_color_terminal}"
        )

    def _attribute(self, name: str) -> int:
        return getattr(curses, name, curses.A_NORMAL)

    def color_index(self, tag: str, background: bool = False) -> int:
        """Terminal colour number for *tag*; -1 keeps the terminal default."""
        if background and tag == "background":
            value = self.colors.get("background", "default")
            if not value or value == "default":
                return -1
            if self.is_256_color_terminal:
                return hex_to_xterm(value)
            return -1

        if self.is_256_color_terminal:
            hex_code = self.colors.get(tag) or self.colors.get("default", "#FFFFFF")
            return hex_to_xterm(hex_code)
        name = EIGHT_COLOR_NAMES.get(tag, "WHITE")
        return getattr(curses, f"COLOR_{name}", -1)

    def _pair_for(self, fg: int, bg: int) -> Optional[int]:
        key = (fg, bg)
        if key in self._pairs:
            return self._pairs[key]
        if self._next_pair >= curses.COLOR_PAIRS:
            logging.warning(f"Ran out of color pairs. Cannot allocate pair for {key}.")
            return None
        try:
            curses.init_pair(self._next_pair, fg, bg)
        except curses.error as e:
            logging.error(f"Failed to initialize curses pair {self._next_pair} for {key}: {e}")
            return None
        self._pairs[key] = self._next_pair
        self._next_pair += 1
        return self._pairs[key]

    def attr(self, fg: str, bg: str = "background") -> int:
        """Curses attribute for a cell with foreground *fg* and background *bg*."""
        key = (fg, bg)
        if key in self._attrs:
            return self._attrs[key]

        if self.monochrome or not self.initialized:
            attribute = self._attribute(MONOCHROME_ATTRIBUTES.get(fg, "A_NORMAL"))
        else:
            extra = self._attribute(TAG_ATTRIBUTES.get(fg, "A_NORMAL"))
            fg_index = self.color_index(fg)
            bg_index = self.color_index(bg, background=True)
            pair = self._pair_for(fg_index, bg_index)
            attribute = extra if pair is None else curses.color_pair(pair) | extra

        self._attrs[key] = attribute
        return attribute
