# tinted/utils/logging_config.py
"""tinted.utils.logging_config
=============================

Logging configuration for the tinted highlighting pipeline and viewer.
It defines the global logger objects and a single setup function,
`setup_logging`, which attaches handlers and levels based on the
``[logging]`` section of the application configuration.

Features:
    - Rotating file logging for general events (tinted.log).
    - Optional console logging to stderr with configurable log level.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional per-line render tracing (render.log) enabled via the
      TINTED_RENDER_TRACE environment variable.
    - Automatic creation of log directories, with fallback to the system temp directory.
    - Safe reconfiguration: clears existing handlers so repeated calls do not duplicate records.
    - Never raises; problems are reported to stderr and logging continues best-effort.

Globals:
    logger: Main application logger ("tinted").
    RENDER_LOGGER: Logger for per-line render traces ("tinted.render").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
# Created at import-time, configured by ``setup_logging()``.
logger = logging.getLogger("tinted")
RENDER_LOGGER = logging.getLogger("tinted.render")

RENDER_TRACE_ENV = "TINTED_RENDER_TRACE"


def _rotating_handler(
    filename: str, max_bytes: int, backups: int
) -> Optional[logging.handlers.RotatingFileHandler]:
    """Create a rotating handler, creating the parent directory when needed."""
    log_dir = os.path.dirname(filename)
    try:
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        return logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
    except OSError as e:
        print(f"Error setting up log file '{filename}': {e}", file=sys.stderr)
        return None


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are installed:

    1. File handler: rotating tinted.log capturing everything from
       ``file_level`` (default DEBUG) upward. Falls back to a file in the
       system temp directory when the configured location is unusable.
    2. Console handler: optional ``stderr`` output whose threshold is
       ``console_level`` (default WARNING).
    3. Error-file handler: optional rotating error.log that stores only
       ERROR and CRITICAL events.
    4. Render-trace handler: rotating render.log attached to the
       ``tinted.render`` logger when ``TINTED_RENDER_TRACE`` is set to
       ``1/true/yes``. The trace logger never propagates to the root.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` sub-section is consulted; recognised keys are
            ``file``, ``file_level``, ``console_level``, ``log_to_console``
            and ``separate_error_log``.

    Example:
        >>> setup_logging({"logging": {"file_level": "INFO", "log_to_console": False}})
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_filename = logging_config.get("file", "tinted.log")
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
    if file_handler is None:
        log_filename = os.path.join(tempfile.gettempdir(), "tinted.log")
        print(f"Logging to temporary file: '{log_filename}'", file=sys.stderr)
        file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
    if file_handler:
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", True):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s")
        )
        console_handler.setLevel(getattr(logging, console_level_str, logging.WARNING))

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_file_handler = _rotating_handler("error.log", 1 * 1024 * 1024, 3)
        if error_file_handler:
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)

    root_logger = logging.getLogger()
    root_logger.handlers = []  # avoid duplicates on repeated setup
    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)
    root_logger.setLevel(log_file_level)

    # Render trace logger
    render_logger = logging.getLogger("tinted.render")
    render_logger.propagate = False
    render_logger.setLevel(logging.DEBUG)
    render_logger.handlers = []
    render_logger.disabled = False

    if os.environ.get(RENDER_TRACE_ENV, "").lower() in {"1", "true", "yes"}:
        trace_handler = _rotating_handler("render.log", 1 * 1024 * 1024, 3)
        if trace_handler:
            trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            render_logger.addHandler(trace_handler)
            logging.info("Render tracing enabled, logging to 'render.log'.")
        else:
            render_logger.disabled = True
    else:
        render_logger.addHandler(logging.NullHandler())
        render_logger.disabled = True
        logging.debug("Render tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            "File logging to '%s' at level: %s.",
            log_filename,
            logging.getLevelName(file_handler.level),
        )
