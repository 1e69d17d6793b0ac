"""
Terminal text utilities.

Provides:
- visible_width(): terminal column width of a string (ANSI codes count as zero)
- widest_line(): width of the widest line of a multi-line string
- strip_ansi(): remove escape sequences
- extract_ansi_code(): read one escape sequence at a position
- iter_graphemes(): walk a string as (kind, value, width) parts
- slice_by_column() / slice_with_width(): ANSI-aware column slicing
- wrap_text_with_ansi(): word-wrap preserving ANSI codes
- AnsiCodeTracker: track active SGR codes across line breaks
"""
from __future__ import annotations

import re
import unicodedata
from typing import Iterator, NamedTuple

from wcwidth import wcwidth

from .config import TAB_WIDTH

# ─────────────────────────────────────────────────────────────────────────────
# Width cache
# ─────────────────────────────────────────────────────────────────────────────
_WIDTH_CACHE_SIZE = 512
_width_cache: dict[str, int] = {}

_ANSI_RE = re.compile(
    r"\x1b\[[0-9;?]*[A-Za-z~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"
)

_ZERO_WIDTH_CATEGORIES = ("Mn", "Me", "Cf", "Cc", "Cs")


def _could_be_emoji(cp: int, segment: str) -> bool:
    return (
        (0x1f000 <= cp <= 0x1fbff) or
        (0x2600 <= cp <= 0x27bf) or
        (0x2b50 <= cp <= 0x2b55) or
        "\ufe0f" in segment
    )


def grapheme_width(segment: str) -> int:
    """Terminal width of a single grapheme cluster."""
    if not segment:
        return 0

    if all(unicodedata.category(c) in _ZERO_WIDTH_CATEGORIES for c in segment):
        return 0

    cp = ord(segment[0])
    # ZWJ sequences, flags and presentation selectors render as one wide glyph
    if _could_be_emoji(cp, segment) and len(segment) > 1:
        return 2

    w = wcwidth(segment[0])
    if w < 0:
        return 0
    return w


def segment_graphemes(text: str) -> list[str]:
    """Group code points into clusters: a base character plus any combining marks."""
    clusters: list[str] = []
    i = 0
    while i < len(text):
        cluster = text[i]
        i += 1
        while i < len(text):
            ch = text[i]
            if unicodedata.category(ch) in ("Mn", "Me", "Cf") or ord(ch) in (0x200D, 0xFE0F, 0x20E3):
                cluster += ch
                i += 1
                # the character after a zero-width joiner belongs to the cluster too
                if ord(ch) == 0x200D and i < len(text):
                    cluster += text[i]
                    i += 1
            else:
                break
        clusters.append(cluster)
    return clusters


def strip_ansi(s: str) -> str:
    """Remove CSI, OSC and APC escape sequences."""
    if "\x1b" not in s:
        return s
    return _ANSI_RE.sub("", s)


def visible_width(s: str) -> int:
    """
    Calculate the visible terminal column width of a single-line string.
    Handles ANSI escape codes, wide chars, emoji and tabs.
    """
    if not s:
        return 0

    # Fast path: pure ASCII printable
    if all(0x20 <= ord(c) <= 0x7e for c in s):
        return len(s)

    cached = _width_cache.get(s)
    if cached is not None:
        return cached

    clean = s.replace("\t", " " * TAB_WIDTH) if "\t" in s else s
    clean = strip_ansi(clean)
    width = sum(grapheme_width(g) for g in segment_graphemes(clean))

    if len(_width_cache) >= _WIDTH_CACHE_SIZE:
        _width_cache.pop(next(iter(_width_cache)))
    _width_cache[s] = width

    return width


def widest_line(text: str) -> int:
    """Width of the widest line in a possibly multi-line string."""
    if not text:
        return 0
    return max(visible_width(line) for line in text.split("\n"))


# ─────────────────────────────────────────────────────────────────────────────
# ANSI code extraction
# ─────────────────────────────────────────────────────────────────────────────

class AnsiCode(NamedTuple):
    code: str
    length: int


def extract_ansi_code(s: str, pos: int) -> AnsiCode | None:
    """Extract the escape sequence starting at pos, or None if there is none."""
    if pos + 1 >= len(s) or s[pos] != "\x1b":
        return None
    next_ch = s[pos + 1]

    # CSI: ESC [ params final-byte
    if next_ch == "[":
        j = pos + 2
        while j < len(s) and not ("@" <= s[j] <= "~"):
            j += 1
        if j < len(s):
            return AnsiCode(s[pos:j + 1], j + 1 - pos)
        return None

    # OSC / APC: terminated by BEL or ST
    if next_ch in "]_":
        j = pos + 2
        while j < len(s):
            if s[j] == "\x07":
                return AnsiCode(s[pos:j + 1], j + 1 - pos)
            if s[j] == "\x1b" and j + 1 < len(s) and s[j + 1] == "\\":
                return AnsiCode(s[pos:j + 2], j + 2 - pos)
            j += 1
        return None

    return None


def is_sgr(code: str) -> bool:
    return code.startswith("\x1b[") and code.endswith("m")


def iter_graphemes(text: str) -> Iterator[tuple[str, str, int]]:
    """
    Walk text yielding ("ansi", code, 0) for escape sequences and
    ("grapheme", cluster, width) for visible clusters. Tabs expand to spaces.
    """
    i = 0
    while i < len(text):
        ansi = extract_ansi_code(text, i)
        if ansi:
            yield "ansi", ansi.code, 0
            i += ansi.length
            continue

        end = i
        while end < len(text) and not (text[end] == "\x1b" and extract_ansi_code(text, end)):
            end += 1

        chunk = text[i:end]
        if "\t" in chunk:
            chunk = chunk.replace("\t", " " * TAB_WIDTH)
        for g in segment_graphemes(chunk):
            yield "grapheme", g, grapheme_width(g)
        i = end


# ─────────────────────────────────────────────────────────────────────────────
# ANSI SGR code tracker
# ─────────────────────────────────────────────────────────────────────────────

# SGR attribute codes, in the order get_active_codes() re-emits them
_SGR_ATTRS = {
    1: "bold",
    2: "dim",
    3: "italic",
    4: "underline",
    5: "blink",
    7: "inverse",
    8: "hidden",
    9: "strikethrough",
}
_SGR_OFF = {
    21: ("bold",),
    22: ("bold", "dim"),
    23: ("italic",),
    24: ("underline",),
    25: ("blink",),
    27: ("inverse",),
    28: ("hidden",),
    29: ("strikethrough",),
}
_SGR_RE = re.compile(r"\x1b\[([\d;]*)m")


class AnsiCodeTracker:
    """
    Running SGR state of a stream of escape codes.

    The painter asks it for the style of each cell; the wrapper asks it what
    to re-open at the start of a continuation line.
    """

    __slots__ = ("_attrs", "_fg_color", "_bg_color")

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        self._attrs: set[str] = set()
        self._fg_color: str | None = None
        self._bg_color: str | None = None

    def _set_color(self, code: int, color: str | None) -> None:
        if code in (38, 39) or 30 <= code <= 37 or 90 <= code <= 97:
            self._fg_color = color
        else:
            self._bg_color = color

    def process(self, ansi_code: str) -> None:
        """Fold one escape sequence into the state. Non-SGR codes are ignored."""
        m = _SGR_RE.fullmatch(ansi_code)
        if not m:
            return
        params = [p for p in m.group(1).split(";") if p.isdigit()]
        if not params:
            self.clear()
            return

        i = 0
        while i < len(params):
            code = int(params[i])
            if code in (38, 48):
                # 38;5;n / 38;2;r;g;b and their background twins
                span = {"5": 3, "2": 5}.get(params[i + 1] if i + 1 < len(params) else "", 0)
                if span and i + span <= len(params):
                    self._set_color(code, ";".join(params[i:i + span]))
                    i += span
                    continue
            if code == 0:
                self.clear()
            elif code in _SGR_ATTRS:
                self._attrs.add(_SGR_ATTRS[code])
            elif code in _SGR_OFF:
                self._attrs.difference_update(_SGR_OFF[code])
            elif code in (39, 49):
                self._set_color(code, None)
            elif 30 <= code <= 37 or 90 <= code <= 97 or 40 <= code <= 47 or 100 <= code <= 107:
                self._set_color(code, str(code))
            i += 1

    def get_active_codes(self) -> str:
        """One escape sequence restoring the current state, or an empty string."""
        codes = [str(code) for code, name in _SGR_ATTRS.items() if name in self._attrs]
        codes += [c for c in (self._fg_color, self._bg_color) if c]
        return f"\x1b[{';'.join(codes)}m" if codes else ""

    def get_line_end_reset(self) -> str:
        """Underline would bleed into padding after the line, so close it."""
        return "\x1b[24m" if "underline" in self._attrs else ""


def _update_tracker_from_text(text: str, tracker: AnsiCodeTracker) -> None:
    for kind, value, _ in iter_graphemes(text):
        if kind == "ansi":
            tracker.process(value)


# ─────────────────────────────────────────────────────────────────────────────
# Column slicing
# ─────────────────────────────────────────────────────────────────────────────

class SliceResult(NamedTuple):
    text: str
    width: int


def slice_with_width(line: str, start_col: int, length: int, strict: bool = False) -> SliceResult:
    """
    Extract visible columns [start_col, start_col+length) from a line.
    Escape codes seen before the range are carried into the result so the
    slice keeps its styling. With strict, a wide glyph straddling the end
    of the range is dropped.
    """
    if length <= 0:
        return SliceResult("", 0)

    end_col = start_col + length
    result = ""
    result_width = 0
    current_col = 0
    pending_ansi = ""

    for kind, value, w in iter_graphemes(line):
        if kind == "ansi":
            if current_col < start_col:
                pending_ansi += value
            else:
                # codes right after the range are usually closers; keep them
                result += value
            continue

        if current_col >= end_col:
            break
        in_range = current_col >= start_col
        fits = not strict or current_col + w <= end_col
        if in_range and fits:
            if pending_ansi:
                result += pending_ansi
                pending_ansi = ""
            result += value
            result_width += w
        current_col += w

    return SliceResult(result, result_width)


def slice_by_column(line: str, start_col: int, length: int, strict: bool = False) -> str:
    """Extract a column range from a line."""
    return slice_with_width(line, start_col, length, strict).text


# ─────────────────────────────────────────────────────────────────────────────
# Token splitting
# ─────────────────────────────────────────────────────────────────────────────

def _split_into_tokens_with_ansi(text: str) -> list[str]:
    """Split into alternating runs of spaces and non-spaces, escape codes attached."""
    tokens: list[str] = []
    current = ""
    pending_ansi = ""
    in_whitespace = False

    for kind, value, _ in iter_graphemes(text):
        if kind == "ansi":
            pending_ansi += value
            continue

        is_space = value == " "
        if is_space != in_whitespace and current:
            tokens.append(current)
            current = ""

        if pending_ansi:
            current += pending_ansi
            pending_ansi = ""

        in_whitespace = is_space
        current += value

    if pending_ansi:
        current += pending_ansi
    if current:
        tokens.append(current)
    return tokens


# ─────────────────────────────────────────────────────────────────────────────
# Word wrapping
# ─────────────────────────────────────────────────────────────────────────────

def wrap_text_with_ansi(text: str, width: int) -> list[str]:
    """
    Wrap text to width, preserving ANSI codes across line breaks.
    Breaks at spaces; a word is split mid-way only when it is wider than
    width on its own.
    """
    if not text:
        return [""]

    result: list[str] = []
    tracker = AnsiCodeTracker()

    for line in text.split("\n"):
        prefix = tracker.get_active_codes() if result else ""
        result.extend(_wrap_single_line(prefix + line, width, tracker))
        _update_tracker_from_text(line, tracker)

    return result if result else [""]


def _break_long_word(word: str, width: int, tracker: AnsiCodeTracker) -> list[str]:
    lines: list[str] = []
    current_line = tracker.get_active_codes()
    current_width = 0

    for kind, value, w in iter_graphemes(word):
        if kind == "ansi":
            current_line += value
            tracker.process(value)
            continue

        if current_width + w > width and current_width > 0:
            lines.append(current_line + tracker.get_line_end_reset())
            current_line = tracker.get_active_codes()
            current_width = 0

        current_line += value
        current_width += w

    if current_line:
        lines.append(current_line)

    return lines if lines else [""]


def _has_text(line: str) -> bool:
    return strip_ansi(line).strip() != ""


def _wrap_single_line(line: str, width: int, tracker: AnsiCodeTracker) -> list[str]:
    if not line:
        return [""]
    if visible_width(line) <= width:
        return [line]

    wrapped: list[str] = []
    current_line = ""
    current_visible = 0

    for token in _split_into_tokens_with_ansi(line):
        token_visible = visible_width(token)
        is_whitespace = strip_ansi(token).strip() == ""

        if token_visible > width and not is_whitespace:
            if _has_text(current_line):
                wrapped.append(current_line + tracker.get_line_end_reset())
            broken = _break_long_word(token, width, tracker)
            wrapped.extend(broken[:-1])
            current_line = broken[-1]
            current_visible = visible_width(current_line)
            continue

        if current_visible + token_visible > width and current_visible > 0:
            # indentation that never reached a word is not a line of its own
            if _has_text(current_line):
                wrapped.append(current_line.rstrip() + tracker.get_line_end_reset())
            if is_whitespace:
                current_line = tracker.get_active_codes()
                current_visible = 0
            else:
                current_line = tracker.get_active_codes() + token
                current_visible = token_visible
        else:
            current_line += token
            current_visible += token_visible

        _update_tracker_from_text(token, tracker)

    if current_line:
        wrapped.append(current_line)

    return [ln.rstrip() for ln in wrapped] if wrapped else [""]
