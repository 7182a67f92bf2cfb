"""Write plot records back out as a flat SVG, for previewing a conversion."""

from __future__ import annotations

import math

import numpy as np

from svgcut.engine.path import DashedPath
from svgcut.utils.geometry import bbox


def document_dashes(record: DashedPath) -> list[float]:
    """Dash lengths scaled from the element's user space into document space."""
    det = abs(record.inverse_transform.determinant)
    scale = 1.0 / math.sqrt(det) if det > 0 else 1.0
    return [v * scale for v in record.dashes]


class SvgPreviewExporter:
    """Collects records and renders them as stroked, unfilled paths."""

    def __init__(self, stroke: str = "black", stroke_width: float = 1.0, margin: float = 0.0) -> None:
        self.stroke = stroke
        self.stroke_width = stroke_width
        self.margin = margin
        self.records: list[DashedPath] = []

    def plot(self, record: DashedPath) -> None:
        self.records.append(record)

    def bounds(self) -> tuple[float, float, float, float]:
        """(x, y, width, height) enclosing every plotted point, margin included."""
        points = [r.path.points() for r in self.records]
        points = [p for p in points if len(p)]
        if not points:
            return (0.0, 0.0, 0.0, 0.0)
        x0, y0, x1, y1 = bbox(np.vstack(points))
        m = self.margin
        return (x0 - m, y0 - m, x1 - x0 + 2 * m, y1 - y0 + 2 * m)

    def render(self, title: str = "") -> str:
        x, y, w, h = self.bounds()
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<svg viewBox="{x:g} {y:g} {w:g} {h:g}" xmlns="http://www.w3.org/2000/svg"'
            f' fill="none" stroke="{self.stroke}" stroke-width="{self.stroke_width:g}">',
        ]

        if title:
            lines.append(f"  <title>{title}</title>")

        for record in self.records:
            d = record.path.to_svg_d()
            if not d:
                continue
            attrs = {"d": d}
            if record.is_dashed:
                attrs["stroke-dasharray"] = " ".join(f"{v:g}" for v in document_dashes(record))
            attr_str = " ".join(f'{k}="{v}"' for k, v in attrs.items())
            lines.append(f"  <path {attr_str} />")

        lines.append("</svg>")
        return "\n".join(lines)
