"""Exporter proxy that restricts plotted geometry to a fill region.

Pattern content is plotted through this proxy so that only the parts inside
the referencing shape's outline reach the real exporter.
"""

from __future__ import annotations

import logging

from shapely.geometry import LineString, MultiLineString, Polygon
from shapely.geometry.base import BaseGeometry

from svgcut.engine.path import DashedPath, LineCommand, MoveCommand, Path, Point
from svgcut.exporters.base import Exporter
from svgcut.utils.geometry import flatten_path

logger = logging.getLogger(__name__)


def fill_region(outline: Path, samples_per_segment: int = 16) -> BaseGeometry:
    """Area enclosed by ``outline`` under the even-odd rule.

    Open subpaths are closed implicitly, as fills do.
    """
    region: BaseGeometry = Polygon()
    for points, _closed in flatten_path(outline, samples_per_segment):
        if len(points) < 3:
            continue
        ring = Polygon(points)
        if not ring.is_valid:
            ring = ring.buffer(0)
        if ring.is_empty:
            continue
        region = region.symmetric_difference(ring)
    return region


def _iter_linestrings(geom: BaseGeometry):
    if geom.is_empty:
        return
    if isinstance(geom, LineString):
        yield geom
    elif hasattr(geom, "geoms"):
        for part in geom.geoms:
            yield from _iter_linestrings(part)


class ClippingExporter:
    """Clips each record to a fill region and forwards what is left."""

    def __init__(self, outline: Path, exporter: Exporter, samples_per_segment: int = 16) -> None:
        self.exporter = exporter
        self.samples_per_segment = samples_per_segment
        self.region = fill_region(outline, samples_per_segment)

    def plot(self, record: DashedPath) -> None:
        if self.region.is_empty:
            return
        lines = [pts for pts, _closed in flatten_path(record.path, self.samples_per_segment)]
        if not lines:
            return

        clipped = MultiLineString([line.tolist() for line in lines]).intersection(self.region)
        path = Path()
        for piece in _iter_linestrings(clipped):
            coords = list(piece.coords)
            path.push_command(MoveCommand(Point(*coords[0][:2])))
            for coord in coords[1:]:
                path.push_command(LineCommand(Point(*coord[:2])))

        if not path:
            logger.debug("Pattern content entirely outside the fill region")
            return
        self.exporter.plot(DashedPath(path, list(record.dashes), record.inverse_transform))
