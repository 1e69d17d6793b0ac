"""Wrap and truncation policies for text wider than its box."""
from __future__ import annotations

from functools import lru_cache

from .config import ELLIPSIS
from .styles import TextWrap
from .utils import slice_by_column, visible_width, widest_line, wrap_text_with_ansi

_RESET = "\x1b[0m"


def _close(segment: str) -> str:
    # a styled head must not leak its style onto the ellipsis
    return segment + _RESET if "\x1b[" in segment else segment


def _fill(segment: str, columns: int) -> str:
    # a wide glyph cut at the slice edge leaves a column short
    return " " * (columns - visible_width(segment))


def truncate_end(line: str, width: int) -> str:
    if width <= 0:
        return ""
    if visible_width(line) <= width:
        return line
    if width == 1:
        return ELLIPSIS
    head = slice_by_column(line, 0, width - 1, strict=True)
    return _close(head) + _fill(head, width - 1) + ELLIPSIS


def truncate_start(line: str, width: int) -> str:
    if width <= 0:
        return ""
    total = visible_width(line)
    if total <= width:
        return line
    if width == 1:
        return ELLIPSIS
    keep = width - 1
    tail = slice_by_column(line, total - keep, keep, strict=True)
    return ELLIPSIS + _fill(tail, keep) + tail


def truncate_middle(line: str, width: int) -> str:
    """
    Keep both ends around a single ellipsis. With an odd number of columns
    to share, the head gets the extra one: width 6 keeps 3 + 2.
    """
    if width <= 0:
        return ""
    total = visible_width(line)
    if total <= width:
        return line
    if width == 1:
        return ELLIPSIS
    keep = width - 1
    head_width = keep - keep // 2
    tail_width = keep // 2
    head = slice_by_column(line, 0, head_width, strict=True)
    result = _close(head) + _fill(head, head_width) + ELLIPSIS
    if tail_width:
        tail = slice_by_column(line, total - tail_width, tail_width, strict=True)
        result += _fill(tail, tail_width) + tail
    return result


_TRUNCATORS = {
    TextWrap.TRUNCATE: truncate_end,
    TextWrap.TRUNCATE_END: truncate_end,
    TextWrap.TRUNCATE_START: truncate_start,
    TextWrap.TRUNCATE_MIDDLE: truncate_middle,
}


@lru_cache(maxsize=512)
def wrap_text(text: str, max_width: int, wrap_type: TextWrap = TextWrap.WRAP) -> str:
    """
    Fit text into max_width columns according to wrap_type.

    `wrap` returns one or more lines joined with newlines, none wider than
    max_width. Truncation policies collapse to the first line and shorten it
    around a single ellipsis. Nothing fits in zero columns.
    """
    if max_width <= 0 or not text:
        return ""

    wrap_type = TextWrap(wrap_type)
    if wrap_type is TextWrap.WRAP:
        return "\n".join(wrap_text_with_ansi(text, max_width))

    first_line = text.split("\n", 1)[0]
    return _TRUNCATORS[wrap_type](first_line, max_width)


def fit_text(text: str, max_width: int, wrap_type: TextWrap = TextWrap.WRAP) -> str:
    """
    Apply wrap_type only where it changes something: text wider than
    max_width, or multi-line text under a truncation policy.
    """
    wrap_type = TextWrap(wrap_type)
    if widest_line(text) > max_width or (wrap_type.is_truncation and "\n" in text):
        return wrap_text(text, max_width, wrap_type)
    return text
