"""Attribute value parsing.

Turns raw attribute strings into the typed values delivered to contexts:
transforms, paints, dash arrays, lengths, viewBox and preserveAspectRatio.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any

from svgcut.engine.transform import AspectRatio, Transform, Viewport
from svgcut.svg.document import SvgAttributeError
from svgcut.svg.units import parse_length, parse_number_list


class PaintKind(enum.Enum):
    NONE = "none"
    FRAGMENT = "fragment"  # url(#id)
    IRI = "iri"  # url() pointing outside the document
    COLOR = "color"
    CURRENT_COLOR = "currentColor"
    INHERIT = "inherit"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Paint:
    kind: PaintKind
    value: str = ""
    icc_color: bool = False

    @property
    def is_plain_color(self) -> bool:
        return self.kind is PaintKind.COLOR and not self.icc_color


_TRANSFORM_RE = re.compile(r"\s*(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)\s*,?")
_URL_RE = re.compile(r"^url\(\s*['\"]?([^'\")]*)['\"]?\s*\)\s*(.*)$")
_HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_FUNC_COLOR_RE = re.compile(r"^rgba?\([^)]*\)$", re.IGNORECASE)
_KEYWORD_RE = re.compile(r"^[a-zA-Z]+$")
_ICC_RE = re.compile(r"\s+icc-color\([^)]*\)\s*$")
_ALIGN_VALUES = {
    "none",
    "xMinYMin", "xMidYMin", "xMaxYMin",
    "xMinYMid", "xMidYMid", "xMaxYMid",
    "xMinYMax", "xMidYMax", "xMaxYMax",
}
_UNITS_VALUES = {"userSpaceOnUse", "objectBoundingBox"}

# Value of inheritable properties that keeps the parent's resolved state.
INHERIT = "inherit"


def parse_transform(text: str) -> Transform:
    """Parse an SVG transform list into a single composed transform."""
    result = Transform.identity()
    remaining = text.strip()
    while remaining:
        match = _TRANSFORM_RE.match(remaining)
        if match is None:
            raise SvgAttributeError(f"Invalid transform: {text!r}")
        remaining = remaining[match.end():].lstrip()
        op, raw_args = match.groups()
        args = parse_number_list(raw_args)
        result = result @ _transform_op(op, args, text)
    return result


def _transform_op(op: str, args: list[float], text: str) -> Transform:
    n = len(args)
    if op == "matrix" and n == 6:
        return Transform.matrix(*args)
    if op == "translate" and n in (1, 2):
        return Transform.translate(args[0], args[1] if n == 2 else 0.0)
    if op == "scale" and n in (1, 2):
        return Transform.scale(args[0], args[1] if n == 2 else None)
    if op == "rotate" and n in (1, 3):
        return Transform.rotate(*args)
    if op == "skewX" and n == 1:
        return Transform.skew_x(args[0])
    if op == "skewY" and n == 1:
        return Transform.skew_y(args[0])
    raise SvgAttributeError(f"Wrong number of arguments for {op} in transform {text!r}")


def parse_paint(text: str) -> Paint:
    """Parse a fill/stroke value. Never raises; unparseable values are UNKNOWN."""
    value = text.strip()
    if value == "none":
        return Paint(PaintKind.NONE)
    if value == "currentColor":
        return Paint(PaintKind.CURRENT_COLOR)
    if value == "inherit":
        return Paint(PaintKind.INHERIT)

    url = _URL_RE.match(value)
    if url is not None:
        iri = url.group(1).strip()
        if iri.startswith("#") and len(iri) > 1:
            return Paint(PaintKind.FRAGMENT, iri[1:])
        return Paint(PaintKind.IRI, iri)

    icc = _ICC_RE.search(value)
    color = value[: icc.start()] if icc else value
    if _HEX_RE.match(color) or _FUNC_COLOR_RE.match(color) or _KEYWORD_RE.match(color):
        return Paint(PaintKind.COLOR, color, icc_color=icc is not None)
    return Paint(PaintKind.UNKNOWN, value)


def parse_dasharray(text: str, viewport: Viewport) -> list[float] | str | None:
    """``None`` for ``none``, ``INHERIT`` for ``inherit``, else the dash lengths in user units."""
    value = text.strip()
    if value == "none":
        return None
    if value == INHERIT:
        return INHERIT
    items = [item for item in re.split(r"[\s,]+", value) if item]
    if not items:
        raise SvgAttributeError(f"Invalid stroke-dasharray: {text!r}")
    dashes = [parse_length(item).resolve(viewport, "diagonal") for item in items]
    if any(d < 0 for d in dashes):
        raise SvgAttributeError(f"Negative value in stroke-dasharray: {text!r}")
    return dashes


def parse_viewbox(text: str) -> tuple[float, float, float, float]:
    numbers = parse_number_list(text)
    if len(numbers) != 4:
        raise SvgAttributeError(f"Invalid viewBox: {text!r}")
    x, y, w, h = numbers
    if w < 0 or h < 0:
        raise SvgAttributeError(f"Negative size in viewBox: {text!r}")
    return (x, y, w, h)


def parse_aspect_ratio(text: str) -> AspectRatio:
    parts = text.split()
    if parts and parts[0] == "defer":
        parts = parts[1:]
    if not parts or parts[0] not in _ALIGN_VALUES or len(parts) > 2:
        raise SvgAttributeError(f"Invalid preserveAspectRatio: {text!r}")
    if len(parts) == 2 and parts[1] not in ("meet", "slice"):
        raise SvgAttributeError(f"Invalid preserveAspectRatio: {text!r}")
    return AspectRatio(parts[0], len(parts) == 2 and parts[1] == "slice")


def parse_units(text: str) -> str:
    value = text.strip()
    if value not in _UNITS_VALUES:
        raise SvgAttributeError(f"Invalid units value: {text!r}")
    return value


def parse_style(text: str) -> list[tuple[str, str]]:
    """CSS declarations of a ``style`` attribute, in source order."""
    declarations = []
    for item in text.split(";"):
        name, sep, value = item.partition(":")
        if not sep:
            continue
        value = value.replace("!important", "").strip()
        if name.strip() and value:
            declarations.append((name.strip(), value))
    return declarations


_LENGTH_ATTRIBUTES = {"x", "y", "width", "height"}


def parse_attribute(name: str, text: str, viewport: Viewport) -> Any:
    """Parse the value of a processed attribute for delivery to a context."""
    if name in ("transform", "patternTransform"):
        return parse_transform(text)
    if name in ("fill", "stroke"):
        return parse_paint(text)
    if name == "stroke-dasharray":
        return parse_dasharray(text, viewport)
    if name == "viewBox":
        return parse_viewbox(text)
    if name == "preserveAspectRatio":
        return parse_aspect_ratio(text)
    if name in ("patternUnits", "patternContentUnits"):
        return parse_units(text)
    if name in _LENGTH_ATTRIBUTES:
        return parse_length(text)
    return text

