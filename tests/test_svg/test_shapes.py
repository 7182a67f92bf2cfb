"""Tests for shape-to-path conversion and the minimal segment policy."""

from __future__ import annotations

import math

import pytest
from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

from svgcut.engine.transform import Viewport
from svgcut.svg.document import SvgAttributeError
from svgcut.svg.shapes import (
    arc_to_cubics,
    ellipse_to_d,
    minimal_segments,
    parse_subpaths,
    points_to_d,
    quadratic_to_cubic,
    rect_to_d,
    shape_to_d,
    shape_to_subpaths,
    split_path_data,
)

VIEWPORT = Viewport(0, 0, 100, 100)


class TestShapeToD:
    def test_rect(self):
        assert rect_to_d(0, 0, 10, 5, None, None) == "M0,0 H10 V5 H0 V0 Z"

    def test_rounded_rect_uses_arcs(self):
        d = rect_to_d(0, 0, 10, 10, 2, None)
        assert d.count("A2,2") == 4

    def test_rx_clamped_to_half_width(self):
        d = rect_to_d(0, 0, 10, 10, 20, 20)
        assert "A5,5" in d

    def test_ellipse(self):
        d = ellipse_to_d(5, 5, 2, 1)
        assert d.startswith("M7,5")
        assert d.count("A") == 4

    def test_points(self):
        assert points_to_d("0,0 10,0 10,10", close=False) == "M0,0 L10,0 L10,10"
        assert points_to_d("0,0 10,0", close=True) == "M0,0 L10,0 Z"

    def test_points_too_short(self):
        assert points_to_d("5,5", close=False) is None

    def test_points_odd_count_drops_last(self):
        assert points_to_d("0,0 10,0 7", close=False) == "M0,0 L10,0"

    @pytest.mark.parametrize(
        "kind,attrs",
        [
            ("rect", {"width": "0", "height": "10"}),
            ("rect", {"height": "10"}),
            ("circle", {"cx": "5", "cy": "5"}),
            ("circle", {"r": "-1"}),
            ("ellipse", {"rx": "5", "ry": "0"}),
            ("path", {"d": "  "}),
            ("path", {}),
        ],
    )
    def test_degenerate_shapes(self, kind, attrs):
        assert shape_to_d(kind, attrs, VIEWPORT) is None

    def test_percent_lengths(self):
        d = shape_to_d("line", {"x1": "0", "y1": "0", "x2": "50%", "y2": "10%"}, Viewport(0, 0, 200, 100))
        assert d == "M0,0 L100,10"

    def test_not_a_shape(self):
        with pytest.raises(ValueError):
            shape_to_d("g", {}, VIEWPORT)

    def test_malformed_path_data(self):
        with pytest.raises(SvgAttributeError):
            shape_to_subpaths("path", {"d": "M 0 0 L foo"}, VIEWPORT)

    def test_malformed_length(self):
        with pytest.raises(SvgAttributeError):
            shape_to_d("circle", {"r": "big"}, VIEWPORT)


class TestParseSubpaths:
    def test_split_before_moveto_and_after_close(self):
        assert split_path_data("M0 0 L1 1z m2 2 l1 0 Z L3 3") == ["M0 0 L1 1z", "m2 2 l1 0 Z", "L3 3"]

    def test_closed_only_with_explicit_close(self):
        open_, closed = parse_subpaths("M0 0 L10 0 L0 0 M5 5 L6 5 Z")
        assert not open_.closed
        assert closed.closed
        assert closed.start == 5 + 5j
        assert [s.end for s in closed.segments] == [6 + 5j]

    def test_relative_moveto_after_close_starts_from_subpath_start(self):
        first, second = parse_subpaths("M10 10 l5 0 z m1 1 l1 0")
        assert first.closed
        assert second.start == 11 + 11j
        assert second.segments[0].end == 12 + 11j

    def test_relative_moveto_after_open_subpath(self):
        _first, second = parse_subpaths("M0 0 L4 0 m1 1 l1 0")
        assert second.start == 5 + 1j

    def test_must_start_with_moveto(self):
        with pytest.raises(SvgAttributeError):
            parse_subpaths("L1 1")

    def test_moveto_only(self):
        (subpath,) = parse_subpaths("M3 4")
        assert subpath.start == 3 + 4j
        assert subpath.segments == []

    def test_shape_subpaths(self):
        (subpath,) = shape_to_subpaths("rect", {"width": "10", "height": "5"}, VIEWPORT)
        assert subpath.closed
        assert subpath.start == 0j
        assert len(subpath.segments) == 4

    def test_degenerate_shape_has_no_subpaths(self):
        assert shape_to_subpaths("circle", {"r": "0"}, VIEWPORT) == []


class TestMinimalSegments:
    def test_quadratic_elevation_is_exact(self):
        quad = QuadraticBezier(0j, 5 + 10j, 10 + 0j)
        cubic = quadratic_to_cubic(quad)
        for t in (0.0, 0.25, 0.5, 0.9):
            assert abs(cubic.point(t) - quad.point(t)) < 1e-9

    def test_quarter_arc_is_one_cubic(self):
        (arc,) = parse_path("M10,0 A10,10 0 0,1 0,10")
        cubics = arc_to_cubics(arc)
        assert len(cubics) == 1
        assert cubics[0].start == arc.start
        assert cubics[0].end == arc.end
        assert abs(abs(cubics[0].point(0.5)) - 10) < 0.01

    def test_large_arc_split_at_90_degrees(self):
        (arc,) = parse_path("M10,0 A10,10 0 1,1 0,-10")
        cubics = arc_to_cubics(arc)
        assert len(cubics) == 3
        for a, b in zip(cubics, cubics[1:]):
            assert abs(a.end - b.start) < 1e-9
        assert cubics[-1].end == arc.end

    def test_arc_points_stay_on_ellipse(self):
        (arc,) = parse_path("M0,0 A20,10 30 0,1 15,12")
        for cubic in arc_to_cubics(arc):
            for t in (0.0, 0.5, 1.0):
                p = cubic.point(t) - arc.center
                rot = math.radians(arc.rotation)
                x = p.real * math.cos(rot) + p.imag * math.sin(rot)
                y = -p.real * math.sin(rot) + p.imag * math.cos(rot)
                r = arc.radius
                assert (x / r.real) ** 2 + (y / r.imag) ** 2 == pytest.approx(1, abs=5e-3)

    def test_only_lines_and_cubics(self):
        path = parse_path("M0,0 L1,1 Q2,2 3,1 A1,1 0 0,1 5,1 C6,0 7,0 8,1")
        segments = minimal_segments(list(path))
        assert all(isinstance(s, (Line, CubicBezier)) for s in segments)
        assert not any(isinstance(s, (Arc, QuadraticBezier)) for s in segments)
        assert segments[0].start == 0j
        assert segments[-1].end == 8 + 1j
