"""
Root conftest.py — pins terminal color support for the test session.

Escape-code assertions depend on the detected color level, so every test
runs at truecolor unless it sets a level itself. Tests that exercise
detection use the `color_env` fixture, which clears the relevant variables.
"""
from __future__ import annotations

import pytest

from inkgrid.colorize import reset_color_level_cache, set_color_level
from inkgrid.config import ENV_COLOR_LEVEL, ENV_COLORTERM, ENV_FORCE_COLOR, ENV_NO_COLOR, ENV_TERM


@pytest.fixture(autouse=True)
def _truecolor():
    set_color_level(3)
    yield
    reset_color_level_cache()


@pytest.fixture
def color_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Environment with no color-related variables and an empty detection cache."""
    for name in (ENV_COLOR_LEVEL, ENV_FORCE_COLOR, ENV_NO_COLOR, ENV_TERM, ENV_COLORTERM):
        monkeypatch.delenv(name, raising=False)
    reset_color_level_cache()
    return monkeypatch
