"""
Layout — geometry for every node of a tree.

The renderer talks to layout through the LayoutEngine protocol: given a
root node, a width constraint and a writing direction, an engine returns a
LayoutTree mapping each node to its Geometry. Nodes are never mutated; a
fresh LayoutTree is produced every pass.

FlexLayout is the built-in engine. It covers the subset of flexbox a
terminal UI needs:
- flex_direction row / column, flex_grow, flex_shrink
- fixed or percentage width/height, min_width/min_height
- padding, margin and border insets
- position absolute (out of flow, placed at the parent's content origin)
- display none
- stretch alignment on the cross axis
- text measured with its wrap policy
"""
from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Iterator, Protocol, runtime_checkable

from .dom import BoxNode, Geometry, Node, RootNode, TextNode, squash_text_nodes
from .styles import SizeValue, Style
from .utils import widest_line
from .wrap_text import fit_text

logger = logging.getLogger(__name__)


class LayoutFailure(ValueError):
    """The layout engine could not compute geometry for the given constraints."""


class Direction(str, Enum):
    LTR = "ltr"
    RTL = "rtl"


class LayoutTree:
    """Geometry overlay for one layout pass, keyed by node identity."""

    def __init__(self) -> None:
        self._geometry: dict[Node, Geometry] = {}

    def set(self, node: Node, geometry: Geometry) -> None:
        self._geometry[node] = geometry

    def get(self, node: Node) -> Geometry | None:
        return self._geometry.get(node)

    def __contains__(self, node: object) -> bool:
        return node in self._geometry

    def __len__(self) -> int:
        return len(self._geometry)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._geometry)


@runtime_checkable
class LayoutEngine(Protocol):
    def calculate_layout(
        self,
        root: Node,
        width: int,
        direction: Direction = Direction.LTR,
    ) -> LayoutTree:
        """Compute geometry for root and all its descendants."""
        ...


# ─────────────────────────────────────────────────────────────────────────────
# Size helpers
# ─────────────────────────────────────────────────────────────────────────────

def resolve_size(value: SizeValue | None, reference: int | None) -> int | None:
    """
    Resolve a style size to cells. Percentages need a definite reference;
    without one the size is treated as auto (None).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise LayoutFailure(f"Invalid size value: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise LayoutFailure(f"Negative size value: {value!r}")
        return int(value)
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith("%"):
            try:
                percent = float(raw[:-1])
            except ValueError:
                raise LayoutFailure(f"Invalid percentage: {value!r}") from None
            if percent < 0:
                raise LayoutFailure(f"Negative size value: {value!r}")
            if reference is None:
                return None
            return int(math.floor(reference * percent / 100))
        if raw.isdigit():
            return int(raw)
    raise LayoutFailure(f"Invalid size value: {value!r}")


def _clamp_min(size: int, minimum: SizeValue | None, reference: int | None) -> int:
    floor = resolve_size(minimum, reference)
    if floor is not None and size < floor:
        return floor
    return max(0, size)


def _in_flow(node: Node) -> bool:
    return node.style.display != "none" and node.style.position != "absolute"


def _distribute(amount: int, weights: list[float]) -> list[int]:
    """Split a non-negative integer amount by weights; leftovers go to the first entries."""
    total = sum(weights)
    if amount <= 0 or total <= 0:
        return [0] * len(weights)
    shares = [int(amount * w / total) for w in weights]
    remainder = amount - sum(shares)
    for i, w in enumerate(weights):
        if remainder <= 0:
            break
        if w > 0:
            shares[i] += 1
            remainder -= 1
    return shares


# ─────────────────────────────────────────────────────────────────────────────
# FlexLayout
# ─────────────────────────────────────────────────────────────────────────────

class FlexLayout:
    """
    Small flexbox engine for terminal cells.

    A pass memoizes measured heights and content widths per node so nested
    containers measure each subtree once. The memo lives only for the
    duration of one calculate_layout() call; one pass runs at a time.
    """

    def __init__(self) -> None:
        self._heights: dict[tuple[Node, int, int | None], int] = {}
        self._widths: dict[tuple[Node, int | None], int] = {}
        self._in_pass = False

    def calculate_layout(
        self,
        root: Node,
        width: int,
        direction: Direction = Direction.LTR,
    ) -> LayoutTree:
        if Direction(direction) is not Direction.LTR:
            raise LayoutFailure(f"Unsupported writing direction: {direction}")
        if isinstance(width, bool) or not isinstance(width, int):
            raise LayoutFailure(f"Width constraint must be an integer, got {width!r}")
        if width < 0:
            raise LayoutFailure(f"Width constraint must be non-negative, got {width}")

        tree = LayoutTree()
        if root.style.display == "none":
            tree.set(root, Geometry(0, 0, 0, 0))
            return tree

        height = resolve_size(root.style.height, None)
        self._in_pass = True
        try:
            self._layout(root, tree, 0, 0, width, height)
        finally:
            measured = len(self._heights)
            self._in_pass = False
            self._heights.clear()
            self._widths.clear()
        logger.debug("Laid out %d nodes at width %d (%d measurements)", len(tree), width, measured)
        return tree

    # ── measuring ───────────────────────────────────────────────────────────

    def max_content_width(self, node: Node, reference: int | None = None) -> int:
        """Width the node takes when nothing constrains it."""
        if not self._in_pass:
            return self._content_width(node, reference)
        key = (node, reference)
        if key not in self._widths:
            self._widths[key] = self._content_width(node, reference)
        return self._widths[key]

    def _content_width(self, node: Node, reference: int | None) -> int:
        style = node.style
        fixed = resolve_size(style.width, reference)
        if fixed is not None:
            return _clamp_min(fixed, style.min_width, reference)

        if isinstance(node, TextNode):
            return _clamp_min(widest_line(squash_text_nodes(node)), style.min_width, reference)

        children = [c for c in node.children if _in_flow(c)]
        sizes = [
            self.max_content_width(c) + c.style.margin_left + c.style.margin_right
            for c in children
        ]
        if not sizes:
            content = 0
        elif style.flex_direction == "row":
            content = sum(sizes)
        else:
            content = max(sizes)
        return _clamp_min(content + style.inset_left + style.inset_right, style.min_width, reference)

    def _measure_height(self, node: Node, width: int, height: int | None) -> int:
        return self._layout(node, None, 0, 0, width, height)

    # ── layout ──────────────────────────────────────────────────────────────

    def _layout(
        self,
        node: Node,
        tree: LayoutTree | None,
        x: int,
        y: int,
        width: int,
        height: int | None,
    ) -> int:
        """
        Lay out node with a decided outer width; returns its outer height.
        Without a tree the node is only measured, and a height already known
        for the same constraints is reused.
        """
        width = max(0, width)
        key = (node, width, height)
        if tree is None and key in self._heights:
            return self._heights[key]

        if isinstance(node, TextNode):
            final_height = height if height is not None else self._text_height(node, width)
        elif isinstance(node, (BoxNode, RootNode)):
            final_height = self._layout_container(node, tree, width, height)
        else:
            raise LayoutFailure(f"Unknown node type: {type(node).__name__}")

        final_height = _clamp_min(final_height, node.style.min_height, None)
        if self._in_pass:
            self._heights[key] = final_height
        if tree is not None:
            tree.set(node, Geometry(x, y, width, final_height))
        return final_height

    @staticmethod
    def _text_height(node: TextNode, width: int) -> int:
        content = squash_text_nodes(node)
        if not content or width <= 0:
            return 0
        content = fit_text(content, width, node.style.text_wrap)
        return len(content.split("\n")) if content else 0

    def _layout_container(
        self,
        node: BoxNode | RootNode,
        tree: LayoutTree | None,
        width: int,
        height: int | None,
    ) -> int:
        style = node.style
        inner_width = max(0, width - style.inset_left - style.inset_right)
        inner_height = None
        if height is not None:
            inner_height = max(0, height - style.inset_top - style.inset_bottom)

        for child in node.children:
            if child.style.display == "none" and tree is not None:
                tree.set(child, Geometry(0, 0, 0, 0))

        flow = [c for c in node.children if _in_flow(c)]
        if style.flex_direction == "row":
            content_height = self._layout_row(style, flow, tree, inner_width, inner_height)
        else:
            content_height = self._layout_column(style, flow, tree, inner_width, inner_height)

        for child in node.children:
            if tree is not None and child.style.display != "none" and child.style.position == "absolute":
                self._layout_absolute(style, child, tree, inner_width, inner_height)

        if height is not None:
            return height
        return content_height + style.inset_top + style.inset_bottom

    def _layout_column(
        self,
        style: Style,
        children: list[Node],
        tree: LayoutTree | None,
        inner_width: int,
        inner_height: int | None,
    ) -> int:
        widths: list[int] = []
        heights: list[int] = []
        fixed: list[bool] = []

        for child in children:
            cs = child.style
            stretch = inner_width - cs.margin_left - cs.margin_right
            w = resolve_size(cs.width, inner_width)
            w = _clamp_min(stretch if w is None else w, cs.min_width, inner_width)
            h = resolve_size(cs.height, inner_height)
            fixed.append(h is not None)
            if h is None:
                h = self._measure_height(child, w, None)
            widths.append(w)
            heights.append(_clamp_min(h, cs.min_height, inner_height))

        if inner_height is not None:
            used = sum(h + c.style.margin_top + c.style.margin_bottom for h, c in zip(heights, children))
            grow = _distribute(inner_height - used, [c.style.flex_grow for c in children])
            for i, extra in enumerate(grow):
                if extra:
                    heights[i] += extra
                    fixed[i] = True

        cursor = style.inset_top
        for child, w, h, is_fixed in zip(children, widths, heights, fixed):
            cs = child.style
            cursor += cs.margin_top
            if tree is not None:
                self._layout(child, tree, style.inset_left + cs.margin_left, cursor, w, h if is_fixed else None)
            cursor += h + cs.margin_bottom
        return cursor - style.inset_top

    def _layout_row(
        self,
        style: Style,
        children: list[Node],
        tree: LayoutTree | None,
        inner_width: int,
        inner_height: int | None,
    ) -> int:
        widths: list[int] = []
        flexible: list[bool] = []
        for child in children:
            cs = child.style
            w = resolve_size(cs.width, inner_width)
            flexible.append(w is None)
            if w is None:
                w = self.max_content_width(child, inner_width)
            widths.append(_clamp_min(w, cs.min_width, inner_width))

        margins = sum(c.style.margin_left + c.style.margin_right for c in children)
        free = inner_width - margins - sum(widths)
        if free > 0:
            grow = _distribute(free, [c.style.flex_grow for c in children])
            widths = [w + g for w, g in zip(widths, grow)]
        elif free < 0:
            weights = [
                c.style.flex_shrink * w if flex else 0
                for c, w, flex in zip(children, widths, flexible)
            ]
            shrink = _distribute(-free, weights)
            widths = [
                _clamp_min(w - s, c.style.min_width, inner_width)
                for c, w, s in zip(children, widths, shrink)
            ]

        natural: list[int] = []
        explicit: list[int | None] = []
        for child, w in zip(children, widths):
            cs = child.style
            h = resolve_size(cs.height, inner_height)
            explicit.append(h)
            if h is None:
                h = self._measure_height(child, w, None)
            natural.append(_clamp_min(h, cs.min_height, inner_height))

        content_height = max(
            (h + c.style.margin_top + c.style.margin_bottom for h, c in zip(natural, children)),
            default=0,
        )
        line_height = inner_height if inner_height is not None else content_height

        cursor = style.inset_left
        for child, w, h, fixed_h in zip(children, widths, natural, explicit):
            cs = child.style
            cursor += cs.margin_left
            if fixed_h is None:
                # stretch across the row
                h = max(h, line_height - cs.margin_top - cs.margin_bottom)
            if tree is not None:
                self._layout(child, tree, cursor, style.inset_top + cs.margin_top, w, h)
            cursor += w + cs.margin_right
        return content_height

    def _layout_absolute(
        self,
        style: Style,
        child: Node,
        tree: LayoutTree | None,
        inner_width: int,
        inner_height: int | None,
    ) -> None:
        cs = child.style
        available = max(0, inner_width - cs.margin_left - cs.margin_right)
        w = resolve_size(cs.width, inner_width)
        if w is None:
            w = min(self.max_content_width(child, inner_width), available)
        w = _clamp_min(w, cs.min_width, inner_width)
        h = resolve_size(cs.height, inner_height)
        self._layout(child, tree, style.inset_left + cs.margin_left, style.inset_top + cs.margin_top, w, h)
