"""
Renderer — turn a node tree into the strings a terminal writer prints.

A render pass lays out the tree, paints the main tree (skipping static
content) and, when the root carries a static subtree, lays out and paints
that separately. Each pass gets fresh buffers; nothing is kept between
calls.
"""
from __future__ import annotations

import logging
from typing import NamedTuple

from .dom import RootNode
from .layout import Direction, FlexLayout, LayoutEngine
from .output import Output
from .render_node_to_output import render_node_to_output

logger = logging.getLogger(__name__)


class RenderResult(NamedTuple):
    output: str
    output_height: int
    static_output: str


EMPTY_RESULT = RenderResult(output="", output_height=0, static_output="")

_default_engine = FlexLayout()


def render(
    root: RootNode,
    terminal_width: int,
    layout_engine: LayoutEngine | None = None,
) -> RenderResult:
    """
    Render root at terminal_width.

    LayoutFailure from the engine propagates to the caller unchanged. A tree
    that yields no geometry renders as the empty result.
    """
    engine = layout_engine or _default_engine

    layout = engine.calculate_layout(root, terminal_width, Direction.LTR)
    geometry = layout.get(root)
    if geometry is None:
        return EMPTY_RESULT

    output = Output(geometry.width, geometry.height)
    render_node_to_output(root, output, layout, skip_static_elements=True)
    generated, output_height = output.get()

    static_output = ""
    if root.static_node is not None:
        static_layout = engine.calculate_layout(root.static_node, terminal_width, Direction.LTR)
        static_geometry = static_layout.get(root.static_node)
        if static_geometry is not None and static_geometry.height > 0:
            buffer = Output(static_geometry.width, static_geometry.height)
            render_node_to_output(root.static_node, buffer, static_layout, skip_static_elements=False)
            # the trailing newline keeps the next interactive frame off the last static line
            static_output = buffer.get().output + "\n"

    logger.debug(
        "Rendered %dx%d frame (static: %d chars)",
        geometry.width, output_height, len(static_output),
    )
    return RenderResult(output=generated, output_height=output_height, static_output=static_output)
