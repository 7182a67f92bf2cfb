"""SVG lengths and unit conversion to user units (CSS px at 96 dpi)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from svgcut.engine.transform import Viewport
from svgcut.svg.document import SvgAttributeError

# User units per unit. em/ex assume the CSS default font size of 16px.
_DPI = 96.0
_FONT_SIZE = 16.0
UNIT_SCALE: dict[str, float] = {
    "": 1.0,
    "px": 1.0,
    "pt": _DPI / 72.0,
    "pc": _DPI / 6.0,
    "in": _DPI,
    "mm": _DPI / 25.4,
    "cm": _DPI / 2.54,
    "em": _FONT_SIZE,
    "ex": _FONT_SIZE / 2.0,
}

NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_LENGTH_RE = re.compile(r"^\s*(" + NUMBER_RE.pattern + r")\s*(px|pt|pc|in|mm|cm|em|ex|%)?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class Length:
    value: float
    unit: str = ""

    @property
    def is_percentage(self) -> bool:
        return self.unit == "%"

    def resolve(self, viewport: Viewport, axis: str = "x") -> float:
        """Convert to user units; percentages use the viewport axis ('x', 'y' or 'diagonal')."""
        if self.unit == "%":
            if axis == "x":
                full = viewport.width
            elif axis == "y":
                full = viewport.height
            else:
                full = viewport.diagonal
            return self.value / 100.0 * full
        return self.value * UNIT_SCALE[self.unit]

    def fraction(self) -> float:
        """Value as a fraction, for objectBoundingBox units ('10%' == 0.1)."""
        if self.unit == "%":
            return self.value / 100.0
        return self.value * UNIT_SCALE[self.unit]


def parse_length(text: str) -> Length:
    match = _LENGTH_RE.match(text)
    if match is None:
        raise SvgAttributeError(f"Invalid length: {text!r}")
    return Length(float(match.group(1)), (match.group(2) or "").lower())


def parse_number_list(text: str) -> list[float]:
    """Comma and/or whitespace separated numbers."""
    stripped = text.strip()
    if not stripped:
        return []
    remainder = NUMBER_RE.sub(" ", stripped).replace(",", " ")
    if remainder.strip():
        raise SvgAttributeError(f"Invalid number list: {text!r}")
    return [float(n) for n in NUMBER_RE.findall(stripped)]
