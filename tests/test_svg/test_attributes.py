"""Tests for attribute value parsing."""

from __future__ import annotations

import pytest

from svgcut.engine.transform import AspectRatio, Transform, Viewport
from svgcut.svg.attributes import (
    INHERIT,
    Paint,
    PaintKind,
    parse_aspect_ratio,
    parse_attribute,
    parse_dasharray,
    parse_paint,
    parse_style,
    parse_transform,
    parse_units,
    parse_viewbox,
)
from svgcut.svg.document import SvgAttributeError
from svgcut.svg.units import Length

VIEWPORT = Viewport(0, 0, 100, 100)


class TestTransform:
    def test_list_composes_left_to_right(self):
        t = parse_transform("translate(10, 0) scale(2)")
        assert t == Transform.translate(10, 0) @ Transform.scale(2)

    def test_comma_separated_list(self):
        t = parse_transform("translate(1,2),rotate(90)")
        assert t.apply(1, 0) == pytest.approx((1, 3))

    def test_all_operations(self):
        parse_transform("matrix(1 0 0 1 0 0) translate(1) scale(1 2) rotate(45 1 1) skewX(10) skewY(10)")

    def test_empty_is_identity(self):
        assert parse_transform("  ").is_identity()

    @pytest.mark.parametrize("text", ["translate(1 2", "shear(1)", "rotate(1 2)", "matrix(1 2 3)", "scale(a)"])
    def test_malformed_raises(self, text):
        with pytest.raises(SvgAttributeError):
            parse_transform(text)


class TestPaint:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("none", Paint(PaintKind.NONE)),
            ("currentColor", Paint(PaintKind.CURRENT_COLOR)),
            ("inherit", Paint(PaintKind.INHERIT)),
            ("url(#hatch)", Paint(PaintKind.FRAGMENT, "hatch")),
            ("url('#hatch') red", Paint(PaintKind.FRAGMENT, "hatch")),
            ("url(other.svg#p)", Paint(PaintKind.IRI, "other.svg#p")),
            ("#abc", Paint(PaintKind.COLOR, "#abc")),
            ("rgb(1, 2, 3)", Paint(PaintKind.COLOR, "rgb(1, 2, 3)")),
            ("red", Paint(PaintKind.COLOR, "red")),
            ("#12", Paint(PaintKind.UNKNOWN, "#12")),
        ],
    )
    def test_kinds(self, text, expected):
        assert parse_paint(text) == expected

    def test_icc_color(self):
        paint = parse_paint("#fff icc-color(p, 1)")
        assert paint.kind is PaintKind.COLOR
        assert paint.icc_color
        assert not paint.is_plain_color


class TestDasharray:
    def test_list(self):
        assert parse_dasharray("4, 2", VIEWPORT) == [4.0, 2.0]

    def test_none(self):
        assert parse_dasharray("none", VIEWPORT) is None

    def test_inherit(self):
        assert parse_dasharray(" inherit ", VIEWPORT) == INHERIT

    def test_units_and_percent(self):
        dashes = parse_dasharray("1in 10%", Viewport(0, 0, 100, 100))
        assert dashes == pytest.approx([96.0, 10.0])

    @pytest.mark.parametrize("text", ["", "4 -2", "4 x"])
    def test_invalid(self, text):
        with pytest.raises(SvgAttributeError):
            parse_dasharray(text, VIEWPORT)


class TestViewportAttributes:
    def test_viewbox(self):
        assert parse_viewbox("0 0 24 24") == (0, 0, 24, 24)
        assert parse_viewbox("-1,-1,2,2") == (-1, -1, 2, 2)

    @pytest.mark.parametrize("text", ["0 0 24", "0 0 -1 1"])
    def test_invalid_viewbox(self, text):
        with pytest.raises(SvgAttributeError):
            parse_viewbox(text)

    def test_aspect_ratio(self):
        assert parse_aspect_ratio("xMinYMax slice") == AspectRatio("xMinYMax", True)
        assert parse_aspect_ratio("defer none") == AspectRatio("none", False)
        with pytest.raises(SvgAttributeError):
            parse_aspect_ratio("middle")

    def test_units(self):
        assert parse_units("userSpaceOnUse") == "userSpaceOnUse"
        with pytest.raises(SvgAttributeError):
            parse_units("pixels")


class TestStyle:
    def test_declarations_in_order(self):
        assert parse_style("fill: none; stroke:red ;; stroke-dasharray: 1 2 !important") == [
            ("fill", "none"),
            ("stroke", "red"),
            ("stroke-dasharray", "1 2"),
        ]

    def test_ignores_malformed(self):
        assert parse_style("garbage; :x; fill:") == []


class TestParseAttribute:
    def test_dispatch(self):
        assert isinstance(parse_attribute("transform", "scale(2)", VIEWPORT), Transform)
        assert isinstance(parse_attribute("patternTransform", "scale(2)", VIEWPORT), Transform)
        assert parse_attribute("fill", "none", VIEWPORT) == Paint(PaintKind.NONE)
        assert parse_attribute("width", "50%", VIEWPORT) == Length(50, "%")
        assert parse_attribute("patternUnits", "objectBoundingBox", VIEWPORT) == "objectBoundingBox"
        assert parse_attribute("id", "x", VIEWPORT) == "x"
