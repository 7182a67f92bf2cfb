"""Element contexts: the state carried down the element tree during traversal.

A context is created when the traversal engine enters an element and dropped
when it leaves it. Children are always built from a reference to their parent
and compose their own local state with the parent's on read. The only
mutable state contexts share is conversion-wide: the exporter and the pattern
tile budget.

Visitor interface (called by ``svgcut.svg.traversal.DocumentTraversal``):

- ``set(attribute, value)`` once per processed attribute, in source order
- geometry events (shape contexts only)
- ``content_contexts()`` the contexts the element's children are loaded under
- ``on_exit_element()`` after everything else
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from svgcut.engine.config import ConversionConfig, TileBudget
from svgcut.engine.transform import AspectRatio, Transform, Viewport, viewbox_transform
from svgcut.svg.attributes import INHERIT, Paint, PaintKind
from svgcut.svg.units import Length

if TYPE_CHECKING:
    from svgcut.exporters.base import Exporter
    from svgcut.svg.document import SvgDocument
    from svgcut.svg.traversal import DocumentTraversal


class Context:
    """Capabilities every context exposes: transform, viewport, exporter, id lookup, logger."""

    is_root = False

    def __init__(
        self,
        *,
        document: SvgDocument,
        exporter: Exporter,
        traversal: DocumentTraversal,
        config: ConversionConfig,
        logger: logging.Logger,
        tile_budget: TileBudget,
        pattern_depth: int = 0,
    ) -> None:
        self.document = document
        self.exporter = exporter
        self.traversal = traversal
        self.config = config
        self.logger = logger
        self.tile_budget = tile_budget
        self.pattern_depth = pattern_depth

        # Inheritable paint state
        self.fill_reference = ""
        self.stroke = True
        self.dasharray: list[float] = []

    @property
    def transform(self) -> Transform:
        """Composed transform from this element's user space to the document root."""
        raise NotImplementedError

    @property
    def viewport(self) -> Viewport:
        """Viewport that percentages of this element's children resolve against."""
        raise NotImplementedError

    def set(self, attribute: str, value: Any) -> None:
        self.logger.debug("Ignoring attribute %s on %s", attribute, type(self).__name__)

    def content_contexts(self) -> list[Context]:
        return [self]

    def on_exit_element(self) -> None:
        pass


class BaseContext(Context):
    """Root of the context tree, built from document-level defaults."""

    is_root = True

    def __init__(
        self,
        document: SvgDocument,
        exporter: Exporter,
        traversal: DocumentTraversal,
        config: ConversionConfig | None = None,
        logger: logging.Logger | None = None,
        viewport: Viewport | None = None,
    ) -> None:
        config = config or ConversionConfig()
        super().__init__(
            document=document,
            exporter=exporter,
            traversal=traversal,
            config=config,
            logger=logger or logging.getLogger(config.logger_name),
            tile_budget=TileBudget(config.max_total_pattern_tiles),
        )
        self._viewport = viewport or Viewport(0.0, 0.0, config.default_viewport_width, config.default_viewport_height)

    @property
    def transform(self) -> Transform:
        return Transform.identity()

    @property
    def viewport(self) -> Viewport:
        return self._viewport


class GraphicsElementContext(Context):
    """Context for ``<g>``: local transform plus inheritable fill/stroke state."""

    def __init__(self, parent: Context) -> None:
        super().__init__(
            document=parent.document,
            exporter=parent.exporter,
            traversal=parent.traversal,
            config=parent.config,
            logger=parent.logger,
            tile_budget=parent.tile_budget,
            pattern_depth=parent.pattern_depth,
        )
        self.parent = parent
        self.local_transform = Transform.identity()
        self.fill_reference = parent.fill_reference
        self.stroke = parent.stroke
        self.dasharray = list(parent.dasharray)

    @property
    def transform(self) -> Transform:
        return self.parent.transform @ self.local_transform

    @property
    def viewport(self) -> Viewport:
        return self.parent.viewport

    def set(self, attribute: str, value: Any) -> None:
        if attribute == "transform":
            self.local_transform = value
        elif attribute == "stroke-dasharray":
            if value is None:
                self.dasharray.clear()
            elif value == INHERIT:
                self.dasharray = list(self.parent.dasharray)
            else:
                self.dasharray = list(value)
        elif attribute == "stroke":
            self._set_stroke(value)
        elif attribute == "fill":
            self._set_fill(value)
        else:
            super().set(attribute, value)

    def _set_stroke(self, paint: Paint) -> None:
        if paint.kind is PaintKind.NONE:
            self.stroke = False
        elif paint.kind is PaintKind.INHERIT:
            self.stroke = self.parent.stroke
        else:
            self._unsupported_paint("stroke", paint)

    def _set_fill(self, paint: Paint) -> None:
        if paint.kind is PaintKind.NONE:
            self.fill_reference = ""
        elif paint.kind is PaintKind.FRAGMENT:
            self.fill_reference = paint.value
        elif paint.kind is PaintKind.INHERIT:
            self.fill_reference = self.parent.fill_reference
        else:
            self._unsupported_paint("fill", paint)

    def _unsupported_paint(self, attribute: str, paint: Paint) -> None:
        # Plain colors are common (clickable or debug-visible elements), so
        # they only get a debug line.
        if paint.is_plain_color:
            self.logger.debug("Ignoring color value for attribute %s", attribute)
        else:
            self.logger.warning("Unsupported value type for attribute %s", attribute)


class ViewportContext(GraphicsElementContext):
    """Context for ``<svg>``, which establishes a new viewport."""

    def __init__(self, parent: Context) -> None:
        super().__init__(parent)
        self.is_outermost = parent.is_root
        self.x = Length(0.0)
        self.y = Length(0.0)
        self.width: Length | None = None
        self.height: Length | None = None
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
        elif attribute == "viewBox":
            self.viewbox = value
        elif attribute == "preserveAspectRatio":
            self.aspect = value
        else:
            super().set(attribute, value)

    def _position(self) -> tuple[float, float]:
        if self.is_outermost:
            return (0.0, 0.0)
        outer = self.parent.viewport
        return (self.x.resolve(outer, "x"), self.y.resolve(outer, "y"))

    def _size(self) -> tuple[float, float]:
        outer = self.parent.viewport
        if self.is_outermost and self.viewbox is not None:
            default_w, default_h = self.viewbox[2], self.viewbox[3]
        else:
            default_w, default_h = outer.width, outer.height
        width = self.width.resolve(outer, "x") if self.width is not None else default_w
        height = self.height.resolve(outer, "y") if self.height is not None else default_h
        return (width, height)

    @property
    def viewport(self) -> Viewport:
        if self.viewbox is not None:
            return Viewport(*self.viewbox)
        return Viewport(0.0, 0.0, *self._size())

    @property
    def transform(self) -> Transform:
        x, y = self._position()
        t = self.parent.transform @ self.local_transform @ Transform.translate(x, y)
        if self.viewbox is not None and not Viewport(*self.viewbox).is_empty:
            t = t @ viewbox_transform(self.viewbox, Viewport(0.0, 0.0, *self._size()), self.aspect)
        return t

    def content_contexts(self) -> list[Context]:
        width, height = self._size()
        if width <= 0 or height <= 0 or (self.viewbox is not None and Viewport(*self.viewbox).is_empty):
            self.logger.debug("Skipping content of zero-sized <svg>")
            return []
        return [self]
