"""
Node tree.

The tree is a closed set of three node kinds: TextNode, BoxNode and
RootNode. Code that walks it dispatches on the kind in one place instead
of relying on per-class render methods.

Nodes are plain data. Layout geometry is not stored on them; a layout pass
produces a LayoutTree overlay (see inkgrid.layout) keyed by node identity,
so the same tree can be laid out and rendered repeatedly without mutation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union

from .styles import Style
from .text_style import TextStyle, style_transformer

Transformer = Callable[[str], str]


@dataclass(frozen=True)
class Geometry:
    """Computed box of a node in terminal cells. x and y are relative to the parent."""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


def _root_style_defaults() -> Style:
    return Style(flex_direction="column")


@dataclass(eq=False)
class TextNode:
    """
    A run of text. Children are literal strings or nested TextNodes; a
    nested node is a styled span inside its parent's text and takes no part
    in layout on its own.
    """
    children: list[Union[str, "TextNode"]] = field(default_factory=list)
    text_style: TextStyle | None = None
    style: Style = field(default_factory=Style)
    transform: Transformer | None = None
    internal_static: bool = False

    def own_transformers(self) -> list[Transformer]:
        """This node's transformers, innermost first: text style, then custom transform."""
        result: list[Transformer] = []
        if self.text_style is not None:
            result.append(style_transformer(self.text_style))
        if self.transform is not None:
            result.append(self.transform)
        return result


@dataclass(eq=False)
class BoxNode:
    """A flex container. Paints only its background and border."""
    children: list["Node"] = field(default_factory=list)
    style: Style = field(default_factory=Style)
    transform: Transformer | None = None
    internal_static: bool = False

    def own_transformers(self) -> list[Transformer]:
        return [self.transform] if self.transform is not None else []


@dataclass(eq=False)
class RootNode:
    """
    Top of a render tree. static_node, when set, is laid out and painted as
    a separate tree whose output is printed once instead of every frame.
    """
    children: list["Node"] = field(default_factory=list)
    style: Style = field(default_factory=_root_style_defaults)
    static_node: BoxNode | None = None
    transform: Transformer | None = None
    internal_static: bool = False

    def own_transformers(self) -> list[Transformer]:
        return [self.transform] if self.transform is not None else []


Node = Union[TextNode, BoxNode, RootNode]


def text(*children: Union[str, TextNode], text_style: TextStyle | None = None, **style) -> TextNode:
    """Build a TextNode; keyword arguments other than text_style go to Style."""
    return TextNode(children=list(children), text_style=text_style, style=Style(**style))


def box(*children: Node, static: bool = False, **style) -> BoxNode:
    """Build a BoxNode; keyword arguments go to Style."""
    return BoxNode(children=list(children), style=Style(**style), internal_static=static)


def static_box(*children: Node, **style) -> BoxNode:
    """A static container: absolutely positioned column, flagged static."""
    style.setdefault("flex_direction", "column")
    style.setdefault("position", "absolute")
    return box(*children, static=True, **style)


def squash_text_nodes(node: TextNode) -> str:
    """
    Flatten a TextNode's children into one string. Nested text nodes are
    squashed recursively and run through their own transformers, so their
    styling is embedded in the result.
    """
    out = ""
    for child in node.children:
        if isinstance(child, str):
            out += child
            continue
        segment = squash_text_nodes(child)
        for transformer in child.own_transformers():
            segment = transformer(segment)
        out += segment
    return out
