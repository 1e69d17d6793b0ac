"""
Configuration constants and environment lookups.
"""
from __future__ import annotations

import os

APP_NAME: str = "inkgrid"
VERSION: str = "0.1.0"

# Glyph used by every truncation policy
ELLIPSIS: str = "…"

# Tabs are expanded to this many spaces before measuring or painting
TAB_WIDTH: int = 3


# ============================================================================
# Color support environment
# ============================================================================

ENV_COLOR_LEVEL: str = f"{APP_NAME.upper()}_COLOR_LEVEL"
ENV_FORCE_COLOR: str = "FORCE_COLOR"
ENV_NO_COLOR: str = "NO_COLOR"
ENV_TERM: str = "TERM"
ENV_COLORTERM: str = "COLORTERM"

# 0 = no color, 1 = 16 colors, 2 = 256 colors, 3 = truecolor
MIN_COLOR_LEVEL: int = 0
MAX_COLOR_LEVEL: int = 3


def _parse_level(raw: str) -> int | None:
    raw = raw.strip().lower()
    if raw in ("true", ""):
        return 1
    if raw == "false":
        return 0
    try:
        level = int(raw)
    except ValueError:
        return None
    return max(MIN_COLOR_LEVEL, min(MAX_COLOR_LEVEL, level))


def get_color_level_override() -> int | None:
    """
    Color level forced through the environment, or None to auto-detect.
    INKGRID_COLOR_LEVEL takes precedence over FORCE_COLOR.
    """
    for name in (ENV_COLOR_LEVEL, ENV_FORCE_COLOR):
        raw = os.environ.get(name)
        if raw is not None:
            level = _parse_level(raw)
            if level is not None:
                return level
    return None


def detect_color_level() -> int:
    """Best-effort color level from NO_COLOR, TERM and COLORTERM."""
    override = get_color_level_override()
    if override is not None:
        return override
    if ENV_NO_COLOR in os.environ:
        return 0

    term = os.environ.get(ENV_TERM, "")
    if term == "dumb":
        return 0
    colorterm = os.environ.get(ENV_COLORTERM, "").lower()
    if colorterm in ("truecolor", "24bit"):
        return 3
    if "256" in term:
        return 2
    return 1
