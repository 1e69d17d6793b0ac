"""
Text style transform.

apply_styles() composes the visual attributes of a text run into one
escape-coded string. Attributes are applied as an ordered list of steps,
each wrapping the result of the previous one:

    dim → color → background → bold → italic → underline → strikethrough → inverse

so dim sits innermost and inverse wraps everything else.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .colorize import colorize, get_color_level, wrap_sgr

Transformer = Callable[[str], str]

# (open, close) pairs
_DIM = ("\x1b[2m", "\x1b[22m")
_BOLD = ("\x1b[1m", "\x1b[22m")
_ITALIC = ("\x1b[3m", "\x1b[23m")
_UNDERLINE = ("\x1b[4m", "\x1b[24m")
_STRIKETHROUGH = ("\x1b[9m", "\x1b[29m")
_INVERSE = ("\x1b[7m", "\x1b[27m")


@dataclass(frozen=True)
class TextStyle:
    """Visual attributes of a text run. Colors are names or arbitrary color strings."""
    dim_color: bool = False
    color: str | None = None
    background_color: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    inverse: bool = False


def _attribute(pair: tuple[str, str]) -> Transformer:
    def apply(text: str) -> str:
        if get_color_level() <= 0:
            return text
        return wrap_sgr(text, *pair)
    return apply


dim = _attribute(_DIM)
bold = _attribute(_BOLD)
italic = _attribute(_ITALIC)
underline = _attribute(_UNDERLINE)
strikethrough = _attribute(_STRIKETHROUGH)
inverse = _attribute(_INVERSE)


def style_steps(style: TextStyle) -> list[Transformer]:
    """
    The ordered steps apply_styles() runs for style. Disabled attributes and
    absent colors contribute no step, so the color resolver is only reached
    for colors that are actually set.
    """
    steps: list[Transformer] = []
    if style.dim_color:
        steps.append(dim)
    if style.color:
        fg = style.color
        steps.append(lambda s: colorize(s, fg, "foreground"))
    if style.background_color:
        bg = style.background_color
        steps.append(lambda s: colorize(s, bg, "background"))
    if style.bold:
        steps.append(bold)
    if style.italic:
        steps.append(italic)
    if style.underline:
        steps.append(underline)
    if style.strikethrough:
        steps.append(strikethrough)
    if style.inverse:
        steps.append(inverse)
    return steps


def apply_styles(text: str, style: TextStyle) -> str:
    """Wrap text in the escape codes for style. Empty text stays a string."""
    for step in style_steps(style):
        text = step(text)
    return text


def style_transformer(style: TextStyle) -> Transformer:
    """Bind style into a single-argument transformer for the output chain."""
    steps = style_steps(style)

    def transform(text: str) -> str:
        for step in steps:
            text = step(text)
        return text

    return transform
