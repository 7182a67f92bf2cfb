"""svgcut: turn SVG documents into plot-ready path records for pen plotters and cutters."""

from svgcut.convert import convert, convert_svg
from svgcut.engine.path import DashedPath, Path
from svgcut.engine.transform import Transform

__all__ = [
    "convert",
    "convert_svg",
    "DashedPath",
    "Path",
    "Transform",
]
