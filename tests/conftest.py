# tests/conftest.py
"""Pytest configuration with shared fixtures for the tinted tests.

The highlighting pipeline is curses-free, so most fixtures are plain
values: configuration dictionaries, mode profiles, highlighters and the
in-memory canvas from ``tests/stubs.py``. UI tests that touch curses
patch it per module.
"""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from tinted.core.Highlighter import Highlighter
from tinted.core.ModeRegistry import Mode, ModeProfile, profile_for
from tinted.ui.LineRenderer import LineRenderer
from tinted.utils.utils import DEFAULT_CONFIG, deep_merge

from tests.stubs import StubCanvas


@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the `curses` stdscr.

    Returns:
        MagicMock: A mocked `stdscr` with terminal size set to (24, 80).
    """
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, dict[str, Any]]:
    """Provide a private copy of the default configuration.

    Returns:
        dict[str, dict[str, Any]]: Configuration dictionary safe to mutate.
    """
    return deep_merge({}, DEFAULT_CONFIG)


@pytest.fixture
def python_profile() -> ModeProfile:
    return profile_for(Mode.PYTHON)


@pytest.fixture
def c_profile() -> ModeProfile:
    return profile_for(Mode.C)


@pytest.fixture
def make_highlighter() -> Callable[..., Highlighter]:
    """Factory for highlighters with a small checkpoint interval."""

    def _make(mode: Mode = Mode.C, interval: int = 4, rainbow: bool = True) -> Highlighter:
        return Highlighter(mode, checkpoint_interval=interval, rainbow=rainbow)

    return _make


@pytest.fixture
def stub_canvas() -> StubCanvas:
    return StubCanvas(width=20, height=10)


@pytest.fixture
def make_renderer(
    mock_config: dict[str, dict[str, Any]],
) -> Callable[..., LineRenderer]:
    """Factory for renderers with an empty environment (no NO_COLOR)."""

    def _make(
        mode: Mode = Mode.C,
        environ: dict[str, str] | None = None,
        **editor: Any,
    ) -> LineRenderer:
        config = deep_merge(mock_config, {"editor": editor})
        highlighter = Highlighter(mode, checkpoint_interval=4)
        return LineRenderer(highlighter, config, environ=environ or {})

    return _make
