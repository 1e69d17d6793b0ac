"""
inkgrid — render flex-laid-out boxes and styled text into terminal output.
"""
from .colorize import colorize, get_color_level, reset_color_level_cache, set_color_level
from .dom import BoxNode, Geometry, Node, RootNode, TextNode, box, squash_text_nodes, static_box, text
from .layout import Direction, FlexLayout, LayoutEngine, LayoutFailure, LayoutTree
from .output import Output, OutputResult
from .render_node_to_output import render_node_to_output
from .renderer import EMPTY_RESULT, RenderResult, render
from .styles import BORDER_STYLES, BorderStyle, Style, TextWrap, margin, padding
from .text_style import TextStyle, apply_styles, style_transformer
from .utils import slice_by_column, strip_ansi, visible_width, widest_line, wrap_text_with_ansi
from .wrap_text import fit_text, truncate_end, truncate_middle, truncate_start, wrap_text

__all__ = [
    "BORDER_STYLES",
    "BorderStyle",
    "BoxNode",
    "Direction",
    "EMPTY_RESULT",
    "FlexLayout",
    "Geometry",
    "LayoutEngine",
    "LayoutFailure",
    "LayoutTree",
    "Node",
    "Output",
    "OutputResult",
    "RenderResult",
    "RootNode",
    "Style",
    "TextNode",
    "TextStyle",
    "TextWrap",
    "apply_styles",
    "box",
    "colorize",
    "fit_text",
    "get_color_level",
    "margin",
    "padding",
    "render",
    "render_node_to_output",
    "reset_color_level_cache",
    "set_color_level",
    "slice_by_column",
    "squash_text_nodes",
    "static_box",
    "strip_ansi",
    "style_transformer",
    "text",
    "truncate_end",
    "truncate_middle",
    "truncate_start",
    "visible_width",
    "widest_line",
    "wrap_text",
    "wrap_text_with_ansi",
]
