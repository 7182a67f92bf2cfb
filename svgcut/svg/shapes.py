"""Basic shapes to path geometry, facade over svgpathtools.

Every shape element is rewritten as path data and parsed by svgpathtools, so
the traversal only ever deals with svgpathtools segments.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

from svgcut.engine.transform import Viewport
from svgcut.svg.document import SvgAttributeError
from svgcut.svg.units import NUMBER_RE, parse_length, parse_number_list

logger = logging.getLogger(__name__)

# Maximum sweep of one cubic approximating an arc.
_ARC_SEGMENT_MAX = math.pi / 2

_SUBPATH_SPLIT_RE = re.compile(r"(?=[Mm])|(?<=[Zz])")


def _length(attrs: Mapping[str, str], name: str, viewport: Viewport, axis: str, default: str | None = "0") -> float | None:
    raw = attrs.get(name, default)
    if raw is None:
        return None
    return parse_length(raw).resolve(viewport, axis)


def rect_to_d(x: float, y: float, width: float, height: float, rx: float | None, ry: float | None) -> str:
    """https://www.w3.org/TR/SVG/shapes.html#RectElement"""
    if rx is None and ry is None:
        rx = ry = 0.0
    elif rx is None:
        rx = ry
    elif ry is None:
        ry = rx
    rx = min(max(rx, 0.0), width / 2)
    ry = min(max(ry, 0.0), height / 2)

    ops = [f"M{x + rx:g},{y:g}", f"H{x + width - rx:g}"]
    rounded = rx > 0 and ry > 0
    if rounded:
        ops.append(f"A{rx:g},{ry:g},0,0,1,{x + width:g},{y + ry:g}")
    ops.append(f"V{y + height - ry:g}")
    if rounded:
        ops.append(f"A{rx:g},{ry:g},0,0,1,{x + width - rx:g},{y + height:g}")
    ops.append(f"H{x + rx:g}")
    if rounded:
        ops.append(f"A{rx:g},{ry:g},0,0,1,{x:g},{y + height - ry:g}")
    ops.append(f"V{y + ry:g}")
    if rounded:
        ops.append(f"A{rx:g},{ry:g},0,0,1,{x + rx:g},{y:g}")
    ops.append("Z")
    return " ".join(ops)


def ellipse_to_d(cx: float, cy: float, rx: float, ry: float) -> str:
    return " ".join([
        f"M{cx + rx:g},{cy:g}",
        f"A{rx:g},{ry:g},0,0,1,{cx:g},{cy + ry:g}",
        f"A{rx:g},{ry:g},0,0,1,{cx - rx:g},{cy:g}",
        f"A{rx:g},{ry:g},0,0,1,{cx:g},{cy - ry:g}",
        f"A{rx:g},{ry:g},0,0,1,{cx + rx:g},{cy:g}",
        "Z",
    ])


def points_to_d(raw: str, close: bool) -> str | None:
    numbers = parse_number_list(raw)
    if len(numbers) % 2:
        # Odd coordinate count: render up to the last complete pair
        logger.debug("Dropping trailing coordinate of points list %r", raw)
        numbers = numbers[:-1]
    if len(numbers) < 4:
        return None
    pairs = [f"{numbers[i]:g},{numbers[i + 1]:g}" for i in range(0, len(numbers), 2)]
    d = "M" + " L".join(pairs)
    return d + " Z" if close else d


def shape_to_d(kind: str, attrs: Mapping[str, str], viewport: Viewport) -> str | None:
    """Path data for a shape given its geometry attributes, or None when the shape renders nothing."""
    if kind == "path":
        d = attrs.get("d", "").strip()
        return d or None

    if kind == "rect":
        width = _length(attrs, "width", viewport, "x")
        height = _length(attrs, "height", viewport, "y")
        if width <= 0 or height <= 0:
            return None
        return rect_to_d(
            _length(attrs, "x", viewport, "x"),
            _length(attrs, "y", viewport, "y"),
            width,
            height,
            _length(attrs, "rx", viewport, "x", default=None),
            _length(attrs, "ry", viewport, "y", default=None),
        )

    if kind == "circle":
        r = _length(attrs, "r", viewport, "diagonal")
        if r <= 0:
            return None
        return ellipse_to_d(_length(attrs, "cx", viewport, "x"), _length(attrs, "cy", viewport, "y"), r, r)

    if kind == "ellipse":
        rx = _length(attrs, "rx", viewport, "x")
        ry = _length(attrs, "ry", viewport, "y")
        if rx <= 0 or ry <= 0:
            return None
        return ellipse_to_d(_length(attrs, "cx", viewport, "x"), _length(attrs, "cy", viewport, "y"), rx, ry)

    if kind == "line":
        x1 = _length(attrs, "x1", viewport, "x")
        y1 = _length(attrs, "y1", viewport, "y")
        x2 = _length(attrs, "x2", viewport, "x")
        y2 = _length(attrs, "y2", viewport, "y")
        return f"M{x1:g},{y1:g} L{x2:g},{y2:g}"

    if kind in ("polyline", "polygon"):
        return points_to_d(attrs.get("points", ""), close=kind == "polygon")

    raise ValueError(f"Not a shape element: {kind!r}")


@dataclass
class Subpath:
    """Continuous run of segments starting at a moveto."""

    start: complex
    segments: list = field(default_factory=list)
    closed: bool = False


def split_path_data(d: str) -> list[str]:
    """Path data split before every moveto and after every closepath."""
    return [piece.strip() for piece in _SUBPATH_SPLIT_RE.split(d) if piece.strip()]


def parse_subpaths(d: str) -> list[Subpath]:
    """Parse path data into subpaths, closed only where the data says ``Z``.

    Each piece is parsed by svgpathtools on its own, so the close command of
    one subpath never touches the geometry of another.
    """
    subpaths: list[Subpath] = []
    current = 0j
    start = 0j
    for index, piece in enumerate(split_path_data(d)):
        closed = piece[-1] in "Zz"
        body = piece[:-1] if closed else piece
        if body[:1] in ("M", "m"):
            coords = NUMBER_RE.findall(body, 1)
            if len(coords) < 2:
                raise SvgAttributeError(f"Invalid path data {d!r}: moveto without coordinates")
            offset = complex(float(coords[0]), float(coords[1]))
            start = offset if body[0] == "M" else current + offset
        elif index == 0:
            raise SvgAttributeError(f"Invalid path data {d!r}: must start with a moveto")
        else:
            # Drawing straight after a closepath continues from the closed subpath's start
            body = f"M{start.real!r},{start.imag!r} {body}"

        try:
            segments = list(parse_path(body, current_pos=current)) if body.strip() else []
        except (ValueError, IndexError) as e:
            raise SvgAttributeError(f"Invalid path data {d!r}: {e}") from e

        subpaths.append(Subpath(start, segments, closed))
        if closed:
            current = start
        elif segments:
            current = segments[-1].end
        else:
            current = start
    return subpaths


def shape_to_subpaths(kind: str, attrs: Mapping[str, str], viewport: Viewport) -> list[Subpath]:
    d = shape_to_d(kind, attrs, viewport)
    if d is None:
        return []
    return parse_subpaths(d)


# -- minimal segment policy --------------------------------------------------


def quadratic_to_cubic(seg: QuadraticBezier) -> CubicBezier:
    """Exact degree elevation."""
    c1 = seg.start + 2.0 / 3.0 * (seg.control - seg.start)
    c2 = seg.end + 2.0 / 3.0 * (seg.control - seg.end)
    return CubicBezier(seg.start, c1, c2, seg.end)


def arc_to_cubics(seg: Arc) -> list[CubicBezier]:
    """Approximate an elliptical arc with cubic beziers of at most 90 degrees.

    Same construction as "Drawing an elliptical arc using polylines, quadratic
    or cubic Bezier curves" (L. Maisonobe).
    """
    rx, ry = seg.radius.real, seg.radius.imag
    phi = math.radians(seg.rotation)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)
    center = seg.center

    def point(eta: float) -> complex:
        x, y = rx * math.cos(eta), ry * math.sin(eta)
        return center + complex(x * cos_phi - y * sin_phi, x * sin_phi + y * cos_phi)

    def derivative(eta: float) -> complex:
        x, y = -rx * math.sin(eta), ry * math.cos(eta)
        return complex(x * cos_phi - y * sin_phi, x * sin_phi + y * cos_phi)

    start = math.radians(seg.theta)
    sweep = math.radians(seg.delta)
    count = max(1, math.ceil(abs(sweep) / _ARC_SEGMENT_MAX - 1e-6))
    step = sweep / count

    cubics = []
    p0 = seg.start
    for i in range(count):
        eta1 = start + i * step
        eta2 = eta1 + step
        alpha = math.sin(step) * (math.sqrt(4 + 3 * math.tan(step / 2) ** 2) - 1) / 3
        # Pin the last endpoint to the exact arc end to keep subpaths continuous
        p3 = seg.end if i == count - 1 else point(eta2)
        cubics.append(CubicBezier(p0, p0 + alpha * derivative(eta1), p3 - alpha * derivative(eta2), p3))
        p0 = p3
    return cubics


def minimal_segments(segments: list) -> list[Line | CubicBezier]:
    """Reduce svgpathtools segments to lines and cubic beziers."""
    result: list[Line | CubicBezier] = []
    for seg in segments:
        if isinstance(seg, (Line, CubicBezier)):
            result.append(seg)
        elif isinstance(seg, QuadraticBezier):
            result.append(quadratic_to_cubic(seg))
        elif isinstance(seg, Arc):
            result.extend(arc_to_cubics(seg))
        else:
            raise SvgAttributeError(f"Unsupported path segment {type(seg).__name__}")
    return result
