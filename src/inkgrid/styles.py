"""
Layout and box styles consumed by the layout engine and the walker.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

# int = absolute cells, str = percentage of the parent ("50%")
SizeValue = int | str

FlexDirection = Literal["row", "column"]
Position = Literal["relative", "absolute"]
Display = Literal["flex", "none"]
Overflow = Literal["visible", "hidden"]


class TextWrap(str, Enum):
    """How text wider than its box is broken or shortened."""
    WRAP = "wrap"
    # end truncation, the default truncation flavour
    TRUNCATE = "truncate"
    TRUNCATE_START = "truncate-start"
    TRUNCATE_MIDDLE = "truncate-middle"
    TRUNCATE_END = "truncate-end"

    @property
    def is_truncation(self) -> bool:
        return self is not TextWrap.WRAP


@dataclass
class BorderStyle:
    top_left: str
    top: str
    top_right: str
    right: str
    bottom_right: str
    bottom: str
    bottom_left: str
    left: str


BORDER_STYLES: dict[str, BorderStyle] = {
    "single": BorderStyle("┌", "─", "┐", "│", "┘", "─", "└", "│"),
    "double": BorderStyle("╔", "═", "╗", "║", "╝", "═", "╚", "║"),
    "round": BorderStyle("╭", "─", "╮", "│", "╯", "─", "╰", "│"),
    "bold": BorderStyle("┏", "━", "┓", "┃", "┛", "━", "┗", "┃"),
    "singleDouble": BorderStyle("╓", "─", "╖", "║", "╜", "─", "╙", "║"),
    "doubleSingle": BorderStyle("╒", "═", "╕", "│", "╛", "═", "╘", "│"),
    "classic": BorderStyle("+", "-", "+", "|", "+", "-", "+", "|"),
}


@dataclass
class Style:
    """
    Flex layout properties plus the few paint-time properties a box carries
    (border, background, overflow) and a text node's wrap policy.
    """
    flex_direction: FlexDirection = "row"
    flex_grow: float = 0
    flex_shrink: float = 1
    width: SizeValue | None = None
    height: SizeValue | None = None
    min_width: SizeValue | None = None
    min_height: SizeValue | None = None

    padding_top: int = 0
    padding_bottom: int = 0
    padding_left: int = 0
    padding_right: int = 0

    margin_top: int = 0
    margin_bottom: int = 0
    margin_left: int = 0
    margin_right: int = 0

    position: Position = "relative"
    display: Display = "flex"
    overflow: Overflow = "visible"

    # a key of BORDER_STYLES or a BorderStyle
    border_style: str | BorderStyle | None = None
    border_color: str | None = None
    border_dim_color: bool = False
    border_top: bool = True
    border_bottom: bool = True
    border_left: bool = True
    border_right: bool = True

    background_color: str | None = None

    text_wrap: TextWrap = TextWrap.WRAP

    def __post_init__(self) -> None:
        if not isinstance(self.text_wrap, TextWrap):
            self.text_wrap = TextWrap(self.text_wrap)

    # ── border helpers ──────────────────────────────────────────────────────

    def resolved_border(self) -> BorderStyle | None:
        if self.border_style is None:
            return None
        if isinstance(self.border_style, BorderStyle):
            return self.border_style
        return BORDER_STYLES.get(self.border_style)

    @property
    def border_top_width(self) -> int:
        return 1 if self.border_style and self.border_top else 0

    @property
    def border_bottom_width(self) -> int:
        return 1 if self.border_style and self.border_bottom else 0

    @property
    def border_left_width(self) -> int:
        return 1 if self.border_style and self.border_left else 0

    @property
    def border_right_width(self) -> int:
        return 1 if self.border_style and self.border_right else 0

    # ── insets (padding + border) ───────────────────────────────────────────

    @property
    def inset_left(self) -> int:
        return self.padding_left + self.border_left_width

    @property
    def inset_right(self) -> int:
        return self.padding_right + self.border_right_width

    @property
    def inset_top(self) -> int:
        return self.padding_top + self.border_top_width

    @property
    def inset_bottom(self) -> int:
        return self.padding_bottom + self.border_bottom_width


def padding(x: int = 0, y: int = 0) -> dict[str, int]:
    """Shorthand for Style(**padding(x=1)) style construction."""
    return {"padding_left": x, "padding_right": x, "padding_top": y, "padding_bottom": y}


def margin(x: int = 0, y: int = 0) -> dict[str, int]:
    return {"margin_left": x, "margin_right": x, "margin_top": y, "margin_bottom": y}
