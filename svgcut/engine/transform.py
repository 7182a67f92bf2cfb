"""Affine transforms and viewports.

Transforms are 3x3 homogeneous matrices acting on column vectors, so
``parent @ child`` maps child coordinates into the parent's space and applying
``t1`` then ``t2`` is the same as applying ``t2 @ t1`` once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

# Tolerance for approximate matrix comparison and singularity checks.
_EPS = 1e-12


class Transform:
    """2D affine transform backed by a numpy matrix."""

    __slots__ = ("_matrix",)

    def __init__(self, matrix: NDArray[np.float64] | None = None) -> None:
        if matrix is None:
            matrix = np.identity(3)
        self._matrix = np.array(matrix, dtype=np.float64)
        if self._matrix.shape != (3, 3):
            raise ValueError(f"Transform matrix must be 3x3, got {self._matrix.shape}")

    # -- constructors -------------------------------------------------------

    @classmethod
    def identity(cls) -> Transform:
        return cls()

    @classmethod
    def matrix(cls, a: float, b: float, c: float, d: float, e: float, f: float) -> Transform:
        """SVG ``matrix(a b c d e f)`` ordering."""
        return cls(np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]]))

    @classmethod
    def translate(cls, tx: float, ty: float = 0.0) -> Transform:
        return cls.matrix(1.0, 0.0, 0.0, 1.0, tx, ty)

    @classmethod
    def scale(cls, sx: float, sy: float | None = None) -> Transform:
        if sy is None:
            sy = sx
        return cls.matrix(sx, 0.0, 0.0, sy, 0.0, 0.0)

    @classmethod
    def rotate(cls, degrees: float, cx: float = 0.0, cy: float = 0.0) -> Transform:
        a = math.radians(degrees)
        cos_a, sin_a = math.cos(a), math.sin(a)
        rotation = cls.matrix(cos_a, sin_a, -sin_a, cos_a, 0.0, 0.0)
        if cx == 0.0 and cy == 0.0:
            return rotation
        return cls.translate(cx, cy) @ rotation @ cls.translate(-cx, -cy)

    @classmethod
    def skew_x(cls, degrees: float) -> Transform:
        return cls.matrix(1.0, 0.0, math.tan(math.radians(degrees)), 1.0, 0.0, 0.0)

    @classmethod
    def skew_y(cls, degrees: float) -> Transform:
        return cls.matrix(1.0, math.tan(math.radians(degrees)), 0.0, 1.0, 0.0, 0.0)

    # -- algebra ------------------------------------------------------------

    def __matmul__(self, other: Transform) -> Transform:
        if not isinstance(other, Transform):
            return NotImplemented
        return Transform(self._matrix @ other._matrix)

    def inverse(self) -> Transform:
        if abs(self.determinant) < _EPS:
            raise ValueError(f"Transform is not invertible: {self.as_tuple()}")
        return Transform(np.linalg.inv(self._matrix))

    @property
    def determinant(self) -> float:
        return float(np.linalg.det(self._matrix[:2, :2]))

    @property
    def array(self) -> NDArray[np.float64]:
        return self._matrix.copy()

    def apply(self, x: float, y: float) -> tuple[float, float]:
        m = self._matrix
        return (
            float(m[0, 0] * x + m[0, 1] * y + m[0, 2]),
            float(m[1, 0] * x + m[1, 1] * y + m[1, 2]),
        )

    def apply_points(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        """Map an Nx2 array of points."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        return pts @ self._matrix[:2, :2].T + self._matrix[:2, 2]

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        m = self._matrix
        return (
            float(m[0, 0]), float(m[1, 0]),
            float(m[0, 1]), float(m[1, 1]),
            float(m[0, 2]), float(m[1, 2]),
        )

    def is_identity(self) -> bool:
        return bool(np.allclose(self._matrix, np.identity(3), atol=_EPS))

    def almost_equal(self, other: Transform, tol: float = 1e-9) -> bool:
        return bool(np.allclose(self._matrix, other._matrix, atol=tol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return self.almost_equal(other)

    def __hash__(self) -> int:
        return hash(tuple(round(v, 9) for v in self.as_tuple()))

    def __repr__(self) -> str:
        a, b, c, d, e, f = self.as_tuple()
        return f"Transform.matrix({a:g}, {b:g}, {c:g}, {d:g}, {e:g}, {f:g})"


@dataclass(frozen=True)
class Viewport:
    """Rectangle establishing the user space for percentage lengths."""

    x: float
    y: float
    width: float
    height: float

    @property
    def diagonal(self) -> float:
        """Normalized diagonal used for lengths that are neither horizontal nor vertical."""
        return math.sqrt(self.width**2 + self.height**2) / math.sqrt(2.0)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class AspectRatio:
    """Parsed ``preserveAspectRatio`` value."""

    align: str = "xMidYMid"
    slice: bool = False


def viewbox_transform(
    viewbox: tuple[float, float, float, float],
    viewport: Viewport,
    aspect: AspectRatio | None = None,
) -> Transform:
    """Map ``viewbox`` (min-x, min-y, width, height) onto ``viewport``."""
    if aspect is None:
        aspect = AspectRatio()
    vx, vy, vw, vh = viewbox
    if vw <= 0 or vh <= 0:
        raise ValueError(f"viewBox must have positive size: {viewbox}")

    sx = viewport.width / vw
    sy = viewport.height / vh
    if aspect.align == "none":
        return Transform.translate(viewport.x, viewport.y) @ Transform.scale(sx, sy) @ Transform.translate(-vx, -vy)

    s = max(sx, sy) if aspect.slice else min(sx, sy)
    tx = viewport.x - vx * s
    ty = viewport.y - vy * s
    free_w = viewport.width - vw * s
    free_h = viewport.height - vh * s
    if "xMid" in aspect.align:
        tx += free_w / 2
    elif "xMax" in aspect.align:
        tx += free_w
    if "YMid" in aspect.align:
        ty += free_h / 2
    elif "YMax" in aspect.align:
        ty += free_h
    return Transform.matrix(s, 0.0, 0.0, s, tx, ty)
