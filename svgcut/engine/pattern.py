"""Pattern fills.

A shape whose ``fill`` references a ``<pattern>`` re-enters the traversal
engine for that pattern. The pattern's content is loaded once per tile
covering the shape, and everything it plots is clipped to the shape's outline,
so the fill region is exactly the outline path.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from svgcut.engine.context import Context, GraphicsElementContext
from svgcut.engine.path import Path
from svgcut.engine.transform import AspectRatio, Transform, Viewport, viewbox_transform
from svgcut.exporters.clipping import ClippingExporter
from svgcut.svg.units import Length
from svgcut.utils.geometry import bbox, flatten_path

OBJECT_BOUNDING_BOX = "objectBoundingBox"
USER_SPACE_ON_USE = "userSpaceOnUse"


class PatternPseudoContext(Context):
    """Parent for a referenced ``<pattern>``, standing in for the filled shape.

    Carries the shape's transformed outline and coordinate system. Paint state
    is not inherited from the shape: pattern content starts from defaults.
    """

    def __init__(self, shape: Context, outline: Path) -> None:
        super().__init__(
            document=shape.document,
            exporter=shape.exporter,
            traversal=shape.traversal,
            config=shape.config,
            logger=shape.logger,
            tile_budget=shape.tile_budget,
            pattern_depth=shape.pattern_depth + 1,
        )
        self.outline = outline.copy()
        self._transform = shape.transform
        self._viewport = shape.viewport

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def viewport(self) -> Viewport:
        return self._viewport


class PatternContext(GraphicsElementContext):
    """Context for a ``<pattern>`` element loaded through a fill reference."""

    def __init__(self, parent: PatternPseudoContext) -> None:
        super().__init__(parent)
        self.x = Length(0.0)
        self.y = Length(0.0)
        self.width = Length(0.0)
        self.height = Length(0.0)
        self.pattern_units = OBJECT_BOUNDING_BOX
        self.content_units = USER_SPACE_ON_USE
        self.pattern_transform = Transform.identity()
        self.viewbox: tuple[float, float, float, float] | None = None
        self.aspect = AspectRatio()

    def set(self, attribute: str, value: Any) -> None:
        if attribute == "x":
            self.x = value
        elif attribute == "y":
            self.y = value
        elif attribute == "width":
            self.width = value
        elif attribute == "height":
            self.height = value
        elif attribute == "patternUnits":
            self.pattern_units = value
        elif attribute == "patternContentUnits":
            self.content_units = value
        elif attribute == "patternTransform":
            self.pattern_transform = value
        elif attribute == "viewBox":
            self.viewbox = value
        elif attribute == "preserveAspectRatio":
            self.aspect = value
        else:
            super().set(attribute, value)

    @property
    def transform(self) -> Transform:
        """Pattern space: the filled shape's user space with patternTransform applied."""
        return self.parent.transform @ self.pattern_transform

    def _object_bbox(self) -> tuple[float, float, float, float] | None:
        """Bounding box of the filled shape in its own user space."""
        try:
            to_user = self.parent.transform.inverse()
        except ValueError:
            return None
        polylines = flatten_path(self.parent.outline, self.config.samples_per_segment)
        if not polylines:
            return None
        return bbox(to_user.apply_points(np.vstack([pts for pts, _closed in polylines])))

    def tile_rect(self) -> tuple[float, float, float, float] | None:
        """Tile (x, y, width, height) in pattern space, None if nothing renders."""
        if self.pattern_units == OBJECT_BOUNDING_BOX:
            box = self._object_bbox()
            if box is None:
                return None
            bx0, by0, bx1, by1 = box
            bw, bh = bx1 - bx0, by1 - by0
            if bw <= 0 or bh <= 0:
                return None
            rect = (
                bx0 + self.x.fraction() * bw,
                by0 + self.y.fraction() * bh,
                self.width.fraction() * bw,
                self.height.fraction() * bh,
            )
        else:
            vp = self.parent.viewport
            rect = (
                self.x.resolve(vp, "x"),
                self.y.resolve(vp, "y"),
                self.width.resolve(vp, "x"),
                self.height.resolve(vp, "y"),
            )
        if rect[2] <= 0 or rect[3] <= 0:
            return None
        return rect

    def _content_space(self, tile_w: float, tile_h: float) -> tuple[Transform, Viewport]:
        if self.viewbox is not None and not Viewport(*self.viewbox).is_empty:
            return viewbox_transform(self.viewbox, Viewport(0.0, 0.0, tile_w, tile_h), self.aspect), Viewport(*self.viewbox)
        if self.content_units == OBJECT_BOUNDING_BOX:
            box = self._object_bbox()
            if box is not None:
                return Transform.scale(box[2] - box[0], box[3] - box[1]), Viewport(0.0, 0.0, 1.0, 1.0)
        return Transform.identity(), self.parent.viewport

    def content_contexts(self) -> list[Context]:
        rect = self.tile_rect()
        if rect is None:
            self.logger.debug("Pattern tile is empty, nothing to fill")
            return []
        tx, ty, tw, th = rect

        pattern_space = self.transform
        try:
            to_pattern = pattern_space.inverse()
        except ValueError:
            return []
        polylines = flatten_path(self.parent.outline, self.config.samples_per_segment)
        if not polylines:
            return []
        px0, py0, px1, py1 = bbox(to_pattern.apply_points(np.vstack([pts for pts, _closed in polylines])))

        i0 = math.floor((px0 - tx) / tw)
        i1 = max(math.ceil((px1 - tx) / tw), i0 + 1)
        j0 = math.floor((py0 - ty) / th)
        j1 = max(math.ceil((py1 - ty) / th), j0 + 1)
        count = (i1 - i0) * (j1 - j0)
        if count > self.config.max_pattern_tiles:
            self.logger.warning(
                "Pattern needs %d tiles, more than the limit of %d; not filling",
                count,
                self.config.max_pattern_tiles,
            )
            return []

        budget = self.tile_budget
        already_exhausted = budget.exhausted
        if not budget.take(count):
            if already_exhausted:
                self.logger.debug("Pattern tile budget exhausted, not filling")
            else:
                self.logger.warning(
                    "Pattern fills need more than %d tiles in total; skipping the rest",
                    budget.limit,
                )
            return []

        content, content_viewport = self._content_space(tw, th)
        clipper = ClippingExporter(self.parent.outline, self.exporter, self.config.samples_per_segment)
        self.logger.debug("Filling with %d pattern tiles of %gx%g", count, tw, th)
        return [
            PatternTileContext(
                self,
                pattern_space @ Transform.translate(tx + i * tw, ty + j * th) @ content,
                content_viewport,
                clipper,
            )
            for j in range(j0, j1)
            for i in range(i0, i1)
        ]


class PatternTileContext(GraphicsElementContext):
    """One repetition of the pattern content, plotting through a clipper."""

    def __init__(
        self,
        parent: PatternContext,
        transform: Transform,
        viewport: Viewport,
        exporter: ClippingExporter,
    ) -> None:
        super().__init__(parent)
        self.exporter = exporter
        self._transform = transform
        self._viewport = viewport

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def viewport(self) -> Viewport:
        return self._viewport
