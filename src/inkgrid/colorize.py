"""
Color resolution.

colorize() wraps text in the escape codes for a foreground or background
color. Named colors (chalk-style `redBright` or snake_case `bright_red`),
hex (`#f00`, `#ff0000`), `rgb(r, g, b)` and `ansi256(n)` are accepted; the
value is downgraded to the color level the terminal supports. Anything
that cannot be parsed is returned unstyled.
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Literal

from rich.color import Color, ColorParseError, ColorSystem

from .config import detect_color_level

logger = logging.getLogger(__name__)

ColorChannel = Literal["foreground", "background"]

_FOREGROUND_CLOSE = "\x1b[39m"
_BACKGROUND_CLOSE = "\x1b[49m"

_CAMEL_RE = re.compile(r"^([a-z]+)Bright$")
_ANSI256_RE = re.compile(r"^ansi256\(\s*(\d{1,3})\s*\)$")

_LEVEL_SYSTEMS = {
    1: ColorSystem.STANDARD,
    2: ColorSystem.EIGHT_BIT,
    3: ColorSystem.TRUECOLOR,
}

# ─────────────────────────────────────────────────────────────────────────────
# Color level (cached, like terminal capability detection)
# ─────────────────────────────────────────────────────────────────────────────

_cached_level: int | None = None


def get_color_level() -> int:
    global _cached_level
    if _cached_level is None:
        _cached_level = detect_color_level()
        logger.debug("Detected color level %d", _cached_level)
    return _cached_level


def set_color_level(level: int) -> None:
    global _cached_level
    _cached_level = max(0, min(3, level))


def reset_color_level_cache() -> None:
    global _cached_level
    _cached_level = None


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────

def _normalize(color: str) -> str:
    value = color.strip()
    m = _CAMEL_RE.match(value)
    if m:
        return f"bright_{m.group(1)}"
    m = _ANSI256_RE.match(value)
    if m:
        return f"color({m.group(1)})"
    lowered = value.lower()
    if lowered in ("gray", "grey"):
        return "bright_black"
    if lowered.startswith("#") and len(lowered) == 4:
        # #rgb shorthand
        return "#" + "".join(ch * 2 for ch in lowered[1:])
    return lowered


@lru_cache(maxsize=256)
def _parse(color: str) -> Color | None:
    try:
        return Color.parse(_normalize(color))
    except ColorParseError:
        logger.debug("Unrecognized color %r, leaving text unstyled", color)
        return None


def ansi_codes(color: str, channel: ColorChannel, level: int | None = None) -> tuple[str, str] | None:
    """
    Return the (open, close) escape pair for color on channel, or None when
    the color is unknown or color output is disabled.
    """
    if level is None:
        level = get_color_level()
    if level <= 0:
        return None

    parsed = _parse(color)
    if parsed is None:
        return None

    system = _LEVEL_SYSTEMS[min(level, 3)]
    if parsed.system > system:
        parsed = parsed.downgrade(system)

    foreground = channel == "foreground"
    codes = parsed.get_ansi_codes(foreground=foreground)
    close = _FOREGROUND_CLOSE if foreground else _BACKGROUND_CLOSE
    return f"\x1b[{';'.join(codes)}m", close


def wrap_sgr(text: str, open_code: str, close_code: str) -> str:
    """
    Wrap text in an open/close pair. Inner occurrences of close_code are
    followed by open_code again so nested styles survive inner resets.
    """
    if not text:
        return text
    if close_code in text:
        text = text.replace(close_code, close_code + open_code)
    return f"{open_code}{text}{close_code}"


def colorize(text: str, color: str, channel: ColorChannel) -> str:
    """Apply a foreground or background color to text."""
    if not color:
        return text
    pair = ansi_codes(color, channel)
    if pair is None:
        return text
    return wrap_sgr(text, *pair)
