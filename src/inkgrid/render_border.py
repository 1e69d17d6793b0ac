"""Paint a box's border into the output."""
from __future__ import annotations

from .colorize import colorize
from .dom import BoxNode, Geometry
from .output import Output, Transformer
from .text_style import dim


def _border_transformers(color: str | None, dim_color: bool) -> list[Transformer]:
    transformers: list[Transformer] = []
    if color:
        transformers.append(lambda s: colorize(s, color, "foreground"))
    if dim_color:
        transformers.append(dim)
    return transformers


def render_border(x: int, y: int, node: BoxNode, geometry: Geometry, output: Output) -> None:
    style = node.style
    box = style.resolved_border()
    if box is None or geometry.width <= 0 or geometry.height <= 0:
        return

    width = geometry.width
    transformers = _border_transformers(style.border_color, style.border_dim_color)

    content_width = width - style.border_left_width - style.border_right_width
    vertical_height = geometry.height - style.border_top_width - style.border_bottom_width

    if style.border_top:
        top = (
            (box.top_left if style.border_left else "")
            + box.top * max(0, content_width)
            + (box.top_right if style.border_right else "")
        )
        output.write(x, y, top, transformers)

    if vertical_height > 0:
        offset_y = y + style.border_top_width
        if style.border_left:
            left = "\n".join([box.left] * vertical_height)
            output.write(x, offset_y, left, transformers)
        if style.border_right:
            right = "\n".join([box.right] * vertical_height)
            output.write(x + width - 1, offset_y, right, transformers)

    if style.border_bottom:
        bottom = (
            (box.bottom_left if style.border_left else "")
            + box.bottom * max(0, content_width)
            + (box.bottom_right if style.border_right else "")
        )
        output.write(x, y + geometry.height - 1, bottom, transformers)
