"""Tests for inkgrid.text_style — style composition order and no-op behaviour"""
import pytest

import inkgrid.text_style as text_style
from inkgrid.colorize import colorize, set_color_level
from inkgrid.text_style import (
    TextStyle,
    apply_styles,
    bold,
    dim,
    inverse,
    style_steps,
    style_transformer,
)
from inkgrid.utils import strip_ansi


class TestApplyStyles:
    def test_no_attributes_is_identity(self):
        assert apply_styles("hello", TextStyle()) == "hello"

    def test_bold(self):
        assert apply_styles("hi", TextStyle(bold=True)) == "\x1b[1mhi\x1b[22m"

    def test_each_attribute_code(self):
        assert apply_styles("x", TextStyle(italic=True)) == "\x1b[3mx\x1b[23m"
        assert apply_styles("x", TextStyle(underline=True)) == "\x1b[4mx\x1b[24m"
        assert apply_styles("x", TextStyle(strikethrough=True)) == "\x1b[9mx\x1b[29m"
        assert apply_styles("x", TextStyle(inverse=True)) == "\x1b[7mx\x1b[27m"
        assert apply_styles("x", TextStyle(dim_color=True)) == "\x1b[2mx\x1b[22m"

    def test_dim_then_color_then_bold(self):
        style = TextStyle(dim_color=True, color="red", bold=True)
        expected = bold(colorize(dim("hi"), "red", "foreground"))
        result = apply_styles("hi", style)
        assert result == expected
        assert result == "\x1b[1m\x1b[31m\x1b[2mhi\x1b[22m\x1b[1m\x1b[39m\x1b[22m"
        assert strip_ansi(result) == "hi"

    def test_inverse_wraps_everything(self):
        result = apply_styles("x", TextStyle(underline=True, inverse=True, background_color="blue"))
        assert result.startswith("\x1b[7m\x1b[4m\x1b[44m")
        assert result.endswith("\x1b[27m")

    def test_background_applied_after_foreground(self):
        result = apply_styles("x", TextStyle(color="red", background_color="green"))
        assert result == "\x1b[42m\x1b[31mx\x1b[39m\x1b[49m"

    def test_full_order(self):
        style = TextStyle(
            dim_color=True,
            color="red",
            background_color="green",
            bold=True,
            italic=True,
            underline=True,
            strikethrough=True,
            inverse=True,
        )
        result = apply_styles("x", style)
        opens = result[: result.index("x")]
        assert opens == "\x1b[7m\x1b[9m\x1b[4m\x1b[3m\x1b[1m\x1b[42m\x1b[31m\x1b[2m"

    def test_empty_text_returns_string(self):
        result = apply_styles("", TextStyle(bold=True, color="red"))
        assert isinstance(result, str)

    def test_color_resolution_skipped_without_color(self, monkeypatch):
        calls = []

        def recording_colorize(text, color, channel):
            calls.append((color, channel))
            return text

        monkeypatch.setattr(text_style, "colorize", recording_colorize)
        apply_styles("hi", TextStyle(bold=True, underline=True))
        assert calls == []

        apply_styles("hi", TextStyle(background_color="blue"))
        assert calls == [("blue", "background")]

    def test_unknown_color_passes_through(self):
        assert apply_styles("hi", TextStyle(color="not-a-color")) == "hi"

    def test_no_color_support_is_identity(self):
        set_color_level(0)
        assert apply_styles("hi", TextStyle(bold=True, color="red", inverse=True)) == "hi"


class TestStyleSteps:
    def test_disabled_attributes_add_no_steps(self):
        assert style_steps(TextStyle()) == []

    def test_step_order(self):
        steps = style_steps(TextStyle(inverse=True, dim_color=True, bold=True))
        assert steps == [dim, bold, inverse]


class TestStyleTransformer:
    @pytest.mark.parametrize("style", [
        TextStyle(bold=True),
        TextStyle(color="cyan", italic=True),
        TextStyle(dim_color=True, background_color="#ff0000", strikethrough=True),
    ])
    def test_matches_apply_styles(self, style):
        assert style_transformer(style)("text") == apply_styles("text", style)
