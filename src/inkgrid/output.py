"""
Output buffer — a fixed-size grid of styled cells.

Text is painted at absolute coordinates; anything outside the grid (or
outside the active clip rectangle) is dropped without error. get()
flattens the grid back into printable lines.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, NamedTuple, Sequence

from .utils import AnsiCodeTracker, is_sgr, iter_graphemes, visible_width

logger = logging.getLogger(__name__)

Transformer = Callable[[str], str]

_RESET = "\x1b[0m"


class Cell(NamedTuple):
    """One terminal column. A wide glyph's second column holds char == ""."""
    char: str
    style: str


_BLANK = Cell(" ", "")
_CONTINUATION = ""


@dataclass(frozen=True)
class Clip:
    x1: int
    x2: int
    y1: int
    y2: int

    def intersect(self, other: "Clip") -> "Clip":
        return Clip(
            max(self.x1, other.x1),
            min(self.x2, other.x2),
            max(self.y1, other.y1),
            min(self.y2, other.y2),
        )


class OutputResult(NamedTuple):
    output: str
    height: int


class Output:
    """
    Grid of width × height cells, all blank initially.

    Every write lands immediately, so later writes occlude earlier ones cell
    by cell. Each row also records how many columns have been painted, which
    lets get() emit untouched rows as plain blanks.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, int(width))
        self.height = max(0, int(height))
        self._rows: list[list[Cell]] = [[_BLANK] * self.width for _ in range(self.height)]
        self._row_widths: list[int] = [0] * self.height
        self._clips: list[Clip] = []

    # ── clipping ────────────────────────────────────────────────────────────

    def clip(self, x1: int, x2: int, y1: int, y2: int) -> None:
        """Restrict writes to columns [x1, x2) and rows [y1, y2) until unclip()."""
        region = Clip(x1, x2, y1, y2)
        if self._clips:
            region = self._clips[-1].intersect(region)
        self._clips.append(region)

    def unclip(self) -> None:
        if self._clips:
            self._clips.pop()

    def _bounds(self) -> Clip:
        bounds = Clip(0, self.width, 0, self.height)
        if self._clips:
            bounds = bounds.intersect(self._clips[-1])
        return bounds

    # ── writing ─────────────────────────────────────────────────────────────

    def write(self, x: int, y: int, text: str, transformers: Sequence[Transformer] = ()) -> None:
        """
        Paint text with its first line at (x, y) and each following line one
        row lower. Every line runs through transformers in order before it
        is painted.
        """
        if not text:
            return

        bounds = self._bounds()
        for offset, line in enumerate(text.split("\n")):
            row = y + offset
            if row < bounds.y1 or row >= bounds.y2:
                continue
            for transformer in transformers:
                line = transformer(line)
            self._paint_line(x, row, line, bounds)

    def _paint_line(self, x: int, row: int, line: str, bounds: Clip) -> None:
        cells = self._rows[row]
        tracker = AnsiCodeTracker()
        col = x
        last_col: int | None = None

        for kind, value, w in iter_graphemes(line):
            if kind == "ansi":
                if is_sgr(value):
                    tracker.process(value)
                continue

            if w == 0:
                # combining mark or control char: attach to the previous glyph
                if last_col is not None and value.isprintable():
                    prev = cells[last_col]
                    cells[last_col] = Cell(prev.char + value, prev.style)
                continue

            if col >= bounds.x2:
                break
            if col >= bounds.x1 and col + w <= bounds.x2:
                style = tracker.get_active_codes()
                self._put(cells, col, Cell(value, style))
                if w == 2:
                    self._put(cells, col + 1, Cell(_CONTINUATION, style))
                last_col = col
                self._row_widths[row] = max(self._row_widths[row], col + w)
            else:
                last_col = None
            col += w

    @staticmethod
    def _put(cells: list[Cell], col: int, cell: Cell) -> None:
        current = cells[col]
        # overwriting half of a wide glyph blanks the other half
        if current.char == _CONTINUATION and col > 0 and cell.char != _CONTINUATION:
            cells[col - 1] = Cell(" ", cells[col - 1].style)
        elif (
            current.char != _CONTINUATION
            and col + 1 < len(cells)
            and cells[col + 1].char == _CONTINUATION
            and visible_width(current.char) == 2
        ):
            cells[col + 1] = Cell(" ", cells[col + 1].style)
        cells[col] = cell

    # ── flattening ──────────────────────────────────────────────────────────

    def _flatten_row(self, row: int) -> str:
        if self._row_widths[row] == 0:
            return " " * self.width

        parts: list[str] = []
        current = ""
        for cell in self._rows[row]:
            if cell.char == _CONTINUATION:
                continue
            if cell.style != current:
                if current:
                    parts.append(_RESET)
                if cell.style:
                    parts.append(cell.style)
                current = cell.style
            parts.append(cell.char)
        if current:
            parts.append(_RESET)

        line = "".join(parts)
        if visible_width(line) > self.width:
            logger.warning("Row %d exceeds buffer width (%d > %d)", row, visible_width(line), self.width)
        return line

    def get(self) -> OutputResult:
        """Flatten into newline-joined rows. Blank rows are kept; height is the allocated height."""
        lines = [self._flatten_row(row) for row in range(self.height)]
        return OutputResult("\n".join(lines), self.height)
