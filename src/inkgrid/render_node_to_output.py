"""
Walk a laid-out node tree and paint it into an Output buffer.
"""
from __future__ import annotations

import logging
from typing import Sequence

from .colorize import colorize
from .dom import BoxNode, Node, RootNode, TextNode, squash_text_nodes
from .layout import LayoutTree
from .output import Output, Transformer
from .render_border import render_border
from .wrap_text import fit_text

logger = logging.getLogger(__name__)


def _background_transformer(color: str) -> Transformer:
    return lambda s: colorize(s, color, "background")


def render_node_to_output(
    node: Node,
    output: Output,
    layout: LayoutTree,
    offset_x: int = 0,
    offset_y: int = 0,
    transformers: Sequence[Transformer] = (),
    skip_static_elements: bool = False,
) -> None:
    """
    Paint node and its subtree depth-first. Children paint in order, so later
    siblings occlude earlier ones. transformers are inherited from ancestors;
    a node's own transformers run before them.
    """
    geometry = layout.get(node)
    if geometry is None or node.style.display == "none":
        return

    if skip_static_elements and node.internal_static:
        logger.debug("Skipping static subtree %r", type(node).__name__)
        return

    x = offset_x + geometry.x
    y = offset_y + geometry.y
    chain = [*node.own_transformers(), *transformers]

    if isinstance(node, TextNode):
        content = squash_text_nodes(node)
        if not content or geometry.width <= 0 or geometry.height <= 0:
            return
        content = fit_text(content, geometry.width, node.style.text_wrap)
        output.write(x, y, content, chain)
        return

    if isinstance(node, RootNode):
        origin_x, origin_y = x, y
        clipped = False
    elif isinstance(node, BoxNode):
        style = node.style
        inner_x = x + style.border_left_width
        inner_y = y + style.border_top_width
        inner_width = geometry.width - style.border_left_width - style.border_right_width
        inner_height = geometry.height - style.border_top_width - style.border_bottom_width

        if style.background_color and inner_width > 0 and inner_height > 0:
            background = _background_transformer(style.background_color)
            fill = "\n".join([" " * inner_width] * inner_height)
            output.write(inner_x, inner_y, fill, [background])
            chain = [background, *chain]

        render_border(x, y, node, geometry, output)

        clipped = style.overflow == "hidden"
        if clipped:
            output.clip(
                inner_x,
                inner_x + max(0, inner_width),
                inner_y,
                inner_y + max(0, inner_height),
            )
        origin_x, origin_y = x, y
    else:
        raise TypeError(f"Unknown node type: {type(node).__name__}")

    try:
        for child in node.children:
            render_node_to_output(
                child,
                output,
                layout,
                offset_x=origin_x,
                offset_y=origin_y,
                transformers=chain,
                skip_static_elements=skip_static_elements,
            )
    finally:
        if clipped:
            output.unclip()
