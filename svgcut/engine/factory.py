"""Element kinds, the processed element/attribute sets, and context dispatch."""

from __future__ import annotations

import enum

from svgcut.engine.context import Context, GraphicsElementContext, ViewportContext
from svgcut.engine.pattern import PatternContext, PatternPseudoContext
from svgcut.engine.shape import ShapeContext


class ElementKind(str, enum.Enum):
    PATH = "path"
    RECT = "rect"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    LINE = "line"
    POLYLINE = "polyline"
    POLYGON = "polygon"
    SVG = "svg"
    G = "g"
    PATTERN = "pattern"

    @classmethod
    def from_tag(cls, name: str | None) -> ElementKind | None:
        if name is None:
            return None
        try:
            return cls(name)
        except ValueError:
            return None


SHAPE_ELEMENTS = frozenset({
    ElementKind.PATH,
    ElementKind.RECT,
    ElementKind.CIRCLE,
    ElementKind.ELLIPSE,
    ElementKind.LINE,
    ElementKind.POLYLINE,
    ElementKind.POLYGON,
})

STRUCTURAL_ELEMENTS = frozenset({ElementKind.SVG, ElementKind.G})

# <pattern> is only processed when a fill reference asks for it.
PROCESSED_ELEMENTS = SHAPE_ELEMENTS | STRUCTURAL_ELEMENTS

PROCESSED_ATTRIBUTES = frozenset({"transform", "fill", "stroke", "stroke-dasharray"})

# Geometry attributes, consumed by the traversal engine to build the path.
SHAPE_ATTRIBUTES: dict[ElementKind, frozenset[str]] = {
    ElementKind.PATH: frozenset({"d"}),
    ElementKind.RECT: frozenset({"x", "y", "width", "height", "rx", "ry"}),
    ElementKind.CIRCLE: frozenset({"cx", "cy", "r"}),
    ElementKind.ELLIPSE: frozenset({"cx", "cy", "rx", "ry"}),
    ElementKind.LINE: frozenset({"x1", "y1", "x2", "y2"}),
    ElementKind.POLYLINE: frozenset({"points"}),
    ElementKind.POLYGON: frozenset({"points"}),
}

# Attributes delivered to the context in addition to PROCESSED_ATTRIBUTES.
ELEMENT_ATTRIBUTES: dict[ElementKind, frozenset[str]] = {
    ElementKind.SVG: frozenset({"x", "y", "width", "height", "viewBox", "preserveAspectRatio"}),
    ElementKind.PATTERN: frozenset({
        "x", "y", "width", "height", "viewBox", "preserveAspectRatio",
        "patternUnits", "patternContentUnits", "patternTransform",
    }),
}


def create_context(kind: ElementKind, parent: Context) -> Context:
    """Build the context for an element of ``kind`` entered under ``parent``."""
    if kind in SHAPE_ELEMENTS:
        return ShapeContext(parent)
    if kind is ElementKind.SVG:
        return ViewportContext(parent)
    if kind is ElementKind.G:
        return GraphicsElementContext(parent)
    if kind is ElementKind.PATTERN:
        if not isinstance(parent, PatternPseudoContext):
            raise ValueError("<pattern> is only processed through a fill reference")
        return PatternContext(parent)
    raise ValueError(f"No context for element kind {kind!r}")
