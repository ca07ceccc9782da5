# tests/utils/test_logging_config.py
"""Unit tests for logging configuration utility.
=================================================

Tests for the logging setup utility in `tinted.utils.logging_config`.

This module verifies that `setup_logging`:
- Creates rotating file handlers for the main log and a separate error log
  when `separate_error_log` is enabled.
- Honors the configured levels for each handler.
- Keeps the render-trace logger silent unless TINTED_RENDER_TRACE is set.

Each test runs in a temporary working directory to avoid touching real files.
"""

import logging

import pytest

from tinted.utils import logging_config


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_creates_handlers(tmp_path, monkeypatch) -> None:
    """`setup_logging` should add rotating file handlers with proper levels."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(logging_config.RENDER_TRACE_ENV, raising=False)

    logging_config.setup_logging(
        {
            "logging": {
                "file_level": "INFO",
                "console_level": "ERROR",
                "log_to_console": False,
                "separate_error_log": True,
            }
        }
    )

    root = logging.getLogger()
    names = {type(h).__name__ for h in root.handlers}

    assert "RotatingFileHandler" in names
    # Main file + error file
    assert len(root.handlers) == 2
    assert root.handlers[0].level == logging.INFO
    assert root.handlers[1].level == logging.ERROR


def test_console_handler_level(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    logging_config.setup_logging(
        {"logging": {"log_to_console": True, "console_level": "ERROR"}}
    )

    stream_handlers = [
        h for h in logging.getLogger().handlers
        if type(h) is logging.StreamHandler
    ]
    assert len(stream_handlers) == 1
    assert stream_handlers[0].level == logging.ERROR


def test_repeated_setup_does_not_duplicate(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    config = {"logging": {"log_to_console": False}}

    logging_config.setup_logging(config)
    logging_config.setup_logging(config)

    assert len(logging.getLogger().handlers) == 1


def test_render_trace_disabled_by_default(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(logging_config.RENDER_TRACE_ENV, raising=False)

    logging_config.setup_logging({"logging": {"log_to_console": False}})

    render_logger = logging.getLogger("tinted.render")
    assert render_logger.disabled is True
    assert render_logger.propagate is False
    assert not (tmp_path / "render.log").exists()


def test_render_trace_enabled_by_env(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(logging_config.RENDER_TRACE_ENV, "yes")

    logging_config.setup_logging({"logging": {"log_to_console": False}})

    render_logger = logging.getLogger("tinted.render")
    try:
        assert render_logger.disabled is False
        assert any(
            type(h).__name__ == "RotatingFileHandler" for h in render_logger.handlers
        )
        assert (tmp_path / "render.log").exists()
    finally:
        for handler in render_logger.handlers:
            handler.close()
        render_logger.handlers = []
        render_logger.disabled = True
