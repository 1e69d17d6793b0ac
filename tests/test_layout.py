"""Tests for inkgrid.layout — the built-in flex engine and its failure modes"""
import pytest

from inkgrid.dom import BoxNode, Geometry, RootNode, box, text
from inkgrid.layout import Direction, FlexLayout, LayoutEngine, LayoutFailure, LayoutTree, resolve_size


def layout(root, width):
    return FlexLayout().calculate_layout(root, width)


class TestResolveSize:
    def test_int(self):
        assert resolve_size(4, None) == 4

    def test_percentage(self):
        assert resolve_size("50%", 21) == 10

    def test_percentage_without_reference_is_auto(self):
        assert resolve_size("50%", None) is None

    def test_numeric_string(self):
        assert resolve_size("7", None) == 7

    @pytest.mark.parametrize("bad", ["wide", "-3", "x%", -1, True])
    def test_invalid(self, bad):
        with pytest.raises(LayoutFailure):
            resolve_size(bad, 10)


class TestFlexLayoutBasics:
    def test_engine_protocol(self):
        assert isinstance(FlexLayout(), LayoutEngine)

    def test_empty_root(self):
        root = RootNode()
        tree = layout(root, 80)
        assert tree.get(root) == Geometry(0, 0, 80, 0)

    def test_text_wraps_to_root_width(self):
        t = text("hello world")
        root = RootNode(children=[t])
        tree = layout(root, 10)
        assert tree.get(t) == Geometry(0, 0, 10, 2)
        assert tree.get(root) == Geometry(0, 0, 10, 2)

    def test_truncated_text_is_one_line(self):
        t = text("hello world", text_wrap="truncate-end")
        tree = layout(RootNode(children=[t]), 5)
        assert tree.get(t).height == 1

    def test_multiline_truncated_text_is_one_line(self):
        t = text("ab\ncd", text_wrap="truncate-middle")
        tree = layout(RootNode(children=[t]), 10)
        assert tree.get(t).height == 1

    def test_column_stacks_children(self):
        a, b = text("a"), text("b")
        tree = layout(RootNode(children=[a, b]), 20)
        assert tree.get(a).y == 0
        assert tree.get(b).y == 1

    def test_row_places_children_side_by_side(self):
        a, b = text("ab"), text("cd")
        row = box(a, b)
        tree = layout(RootNode(children=[row]), 20)
        assert tree.get(row) == Geometry(0, 0, 20, 1)
        assert tree.get(a) == Geometry(0, 0, 2, 1)
        assert tree.get(b) == Geometry(2, 0, 2, 1)

    def test_unknown_node_in_overlay(self):
        tree = layout(RootNode(), 10)
        assert tree.get(text("x")) is None
        assert len(tree) == 1

    def test_layout_does_not_mutate_tree(self):
        t = text("hello world")
        root = RootNode(children=[t])
        first = layout(root, 10)
        second = layout(root, 10)
        assert first.get(t) == second.get(t)
        assert first is not second


class TestFlexLayoutSizing:
    def test_flex_grow_takes_remaining_width(self):
        a, b = text("a"), text("b", flex_grow=1)
        tree = layout(RootNode(children=[box(a, b)]), 10)
        assert tree.get(a) == Geometry(0, 0, 1, 1)
        assert tree.get(b) == Geometry(1, 0, 9, 1)

    def test_flex_shrink_wraps_text(self):
        a, b = text("hello world"), text("abcdefgh")
        row = box(a, b)
        tree = layout(RootNode(children=[row]), 10)
        assert tree.get(a).width + tree.get(b).width <= 10
        assert tree.get(a).height == 2
        assert tree.get(row).height == 2

    def test_fixed_and_percentage_width(self):
        fixed = box(width=4)
        half = box(width="50%")
        tree = layout(RootNode(children=[fixed, half]), 20)
        assert tree.get(fixed).width == 4
        assert tree.get(half).width == 10

    def test_column_flex_grow_with_fixed_height(self):
        a = text("a")
        filler = box(flex_grow=1)
        col = box(a, filler, flex_direction="column", height=5)
        tree = layout(RootNode(children=[col]), 10)
        assert tree.get(col).height == 5
        assert tree.get(filler) == Geometry(0, 1, 10, 4)

    def test_min_height(self):
        b = box(min_height=3)
        tree = layout(RootNode(children=[b]), 10)
        assert tree.get(b).height == 3

    def test_row_children_stretch_to_row_height(self):
        short = box(text("x"))
        tall = box(text("a\nb\nc"))
        tree = layout(RootNode(children=[box(short, tall)]), 10)
        assert tree.get(short).height == 3


class TestFlexLayoutInsets:
    def test_padding_offsets_children(self):
        t = text("hi")
        b = box(t, padding_left=2, padding_top=1)
        tree = layout(RootNode(children=[b]), 10)
        assert tree.get(t) == Geometry(2, 1, 2, 1)
        assert tree.get(b).height == 2

    def test_border_adds_insets(self):
        t = text("hi")
        b = box(t, border_style="single")
        tree = layout(RootNode(children=[b]), 10)
        assert tree.get(t) == Geometry(1, 1, 2, 1)
        assert tree.get(b) == Geometry(0, 0, 10, 3)

    def test_margins(self):
        a = text("a", margin_top=1, margin_left=2)
        tree = layout(RootNode(children=[a]), 10)
        assert tree.get(a) == Geometry(2, 1, 8, 1)


class TestFlexLayoutFlow:
    def test_display_none_takes_no_space(self):
        hidden = text("hidden", display="none")
        shown = text("shown")
        tree = layout(RootNode(children=[hidden, shown]), 10)
        assert tree.get(hidden) == Geometry(0, 0, 0, 0)
        assert tree.get(shown).y == 0

    def test_absolute_child_is_out_of_flow(self):
        overlay = box(text("over"), position="absolute")
        after = text("after")
        root = RootNode(children=[overlay, after])
        tree = layout(root, 10)
        assert tree.get(after).y == 0
        assert tree.get(overlay) == Geometry(0, 0, 4, 1)
        assert tree.get(root).height == 1


class TestLayoutFailure:
    def test_negative_width(self):
        with pytest.raises(LayoutFailure):
            layout(RootNode(), -1)

    def test_non_integer_width(self):
        with pytest.raises(LayoutFailure):
            layout(RootNode(), 10.5)

    def test_rtl_unsupported(self):
        with pytest.raises(LayoutFailure):
            FlexLayout().calculate_layout(RootNode(), 10, Direction.RTL)

    def test_bad_style_value(self):
        with pytest.raises(LayoutFailure):
            layout(RootNode(children=[box(width="wide")]), 10)

    def test_is_value_error(self):
        assert issubclass(LayoutFailure, ValueError)


class TestLayoutTree:
    def test_set_and_get(self):
        node = BoxNode()
        tree = LayoutTree()
        tree.set(node, Geometry(1, 2, 3, 4))
        assert node in tree
        assert tree.get(node) == Geometry(1, 2, 3, 4)
        assert list(tree) == [node]


def nested(depth, **style):
    leaf = text("x")
    node = leaf
    for _ in range(depth):
        node = box(node, **style)
    return node, leaf


class TestDeepTrees:
    @pytest.mark.parametrize("direction", ["row", "column"])
    def test_each_level_laid_out_a_bounded_number_of_times(self, monkeypatch, direction):
        calls = []
        original = FlexLayout._layout

        def counting(self, node, *args):
            calls.append(node)
            return original(self, node, *args)

        monkeypatch.setattr(FlexLayout, "_layout", counting)
        outer, leaf = nested(30, flex_direction=direction)
        tree = layout(RootNode(children=[outer]), 20)
        assert tree.get(leaf) == Geometry(0, 0, 20 if direction == "column" else 1, 1)
        assert len(calls) <= 4 * 32

    def test_memo_does_not_outlive_a_pass(self):
        engine = FlexLayout()
        t = text("hello world")
        root = RootNode(children=[box(t)])
        assert engine.calculate_layout(root, 20).get(t).height == 1
        t.children[0] = "hello world " * 4
        assert engine.calculate_layout(root, 20).get(t).height == 3
