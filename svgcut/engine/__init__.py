"""Conversion engine: path model, transforms and the element context tree."""

from svgcut.engine.config import ConversionConfig
from svgcut.engine.path import DashedPath, Path
from svgcut.engine.transform import Transform, Viewport

__all__ = [
    "ConversionConfig",
    "DashedPath",
    "Path",
    "Transform",
    "Viewport",
]
