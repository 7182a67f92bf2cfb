"""Leaf-node geometry helpers on the path model. No context imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from svgcut.engine.path import BezierCommand, CloseSubpathCommand, LineCommand, MoveCommand, Path


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def sample_cubic(
    p0: tuple[float, float],
    p1: tuple[float, float],
    p2: tuple[float, float],
    p3: tuple[float, float],
    num_samples: int,
) -> NDArray[np.float64]:
    """Points on a cubic bezier at ``num_samples`` evenly spaced t in (0, 1]."""
    t = np.linspace(0.0, 1.0, num_samples + 1)[1:, None]
    mt = 1.0 - t
    pts = np.array([p0, p1, p2, p3], dtype=np.float64)
    return mt**3 * pts[0] + 3 * mt**2 * t * pts[1] + 3 * mt * t**2 * pts[2] + t**3 * pts[3]


def flatten_path(path: Path, samples_per_segment: int = 16) -> list[tuple[NDArray[np.float64], bool]]:
    """Split a path into polylines, one per subpath, with a closed flag.

    Closed polylines repeat their first point at the end.
    """
    polylines: list[tuple[NDArray[np.float64], bool]] = []
    current: list[NDArray[np.float64]] = []
    start: tuple[float, float] | None = None

    def flush(closed: bool) -> None:
        if current:
            pts = np.vstack(current)
            if closed and start is not None:
                pts = np.vstack([pts, np.array([start])])
            polylines.append((pts, closed))

    last = (0.0, 0.0)
    for cmd in path:
        if isinstance(cmd, MoveCommand):
            flush(False)
            current = [np.array([cmd.point])]
            start = last = tuple(cmd.point)
        elif isinstance(cmd, LineCommand):
            current.append(np.array([cmd.point]))
            last = tuple(cmd.point)
        elif isinstance(cmd, BezierCommand):
            current.append(sample_cubic(last, cmd.control1, cmd.control2, cmd.point, samples_per_segment))
            last = tuple(cmd.point)
        elif isinstance(cmd, CloseSubpathCommand):
            flush(True)
            current = []
            # A new subpath after close starts at the closed subpath's start
            if start is not None:
                last = start
                current = [np.array([start])]
    flush(False)
    return [(pts, closed) for pts, closed in polylines if len(pts) >= 2]
