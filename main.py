#!/usr/bin/env python3
# /tinted/main.py
"""
tinted Main Entry Point
=======================

This script launches the tinted viewer on a single file. It performs:
1) Environment Loading: reads ~/.config/tinted/.env early (NO_COLOR and
   TINTED_RENDER_TRACE may be set there).
2) Path Setup: ensures the tinted package is importable from a source checkout.
3) Configuration & Logging: loads config and initializes logging ASAP.
4) Curses Wrapper: safely initializes/tears down curses to avoid terminal corruption.
5) Application Run: reads the file, classifies it and runs the pager loop.
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# --- Step 1: Load Environment Variables from the User's Config Directory ---
dotenv_path = Path.home() / ".config" / "tinted" / ".env"
if dotenv_path.is_file():
    load_dotenv(dotenv_path=dotenv_path)

# --- Step 2: Set up the Python Path ---
project_root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if os.path.isdir(project_root) and project_root not in sys.path:
    sys.path.insert(0, project_root)

# --- Step 3: Immediate Logging and Configuration Setup ---
try:
    from tinted.utils.logging_config import setup_logging
    from tinted.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("tinted")
except Exception as e:
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

from tinted.ui.Viewer import Viewer  # noqa: E402


# --- Step 4: Curses Application Runner ---
def main_app_runner(stdscr: curses.window, config: dict[str, Any], path: str) -> None:
    """
    Target for `curses.wrapper`. Builds the viewer and runs its loop.

    Args:
        stdscr: Curses standard screen window provided by wrapper.
        config: Application configuration dict.
        path: File to display.
    """
    try:
        curses.set_escdelay(25)
    except AttributeError:
        os.environ.setdefault("ESCDELAY", "25")

    viewer = Viewer.from_file(stdscr, config, path)
    viewer.run()


def start() -> None:
    """Initializes locale and runs the curses application via wrapper."""
    if len(sys.argv) < 2:
        print("usage: tinted FILE", file=sys.stderr)
        sys.exit(2)

    path = str(Path(sys.argv[1]).expanduser())
    if not os.path.isfile(path):
        print(f"tinted: {path}: no such file", file=sys.stderr)
        sys.exit(1)

    logger.info(f"tinted viewer starting on {path}")
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    try:
        curses.wrapper(main_app_runner, config, path)
        logger.info("tinted viewer shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
