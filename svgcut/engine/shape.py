"""Context for shape elements (<path>, <rect>, <circle>, ...).

The traversal engine reduces every shape to absolute move, line, cubic bezier
and close events, so only those four need handling here.
"""

from __future__ import annotations

import enum

from svgcut.engine.context import Context, GraphicsElementContext
from svgcut.engine.path import (
    BezierCommand,
    CloseSubpathCommand,
    DashedPath,
    LineCommand,
    MoveCommand,
    Path,
    Point,
)
from svgcut.svg.document import UnexpectedElementError


class ShapeState(enum.Enum):
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


class ShapeContext(GraphicsElementContext):
    """Accumulates a shape's outline and turns it into a DashedPath on exit.

    Unlike SVG, ``fill`` defaults to no fill: there is no sensible default
    pattern to fill a shape with.
    """

    def __init__(self, parent: Context) -> None:
        super().__init__(parent)
        self.path = Path()
        self.state = ShapeState.ACCUMULATING

    def path_move_to(self, x: float, y: float) -> None:
        self.path.push_command(MoveCommand(Point(x, y)))

    def path_line_to(self, x: float, y: float) -> None:
        self.path.push_command(LineCommand(Point(x, y)))

    def path_cubic_bezier_to(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> None:
        self.path.push_command(BezierCommand(Point(x, y), Point(x1, y1), Point(x2, y2)))

    def path_close_subpath(self) -> None:
        self.path.push_command(CloseSubpathCommand())

    def path_exit(self) -> None:
        """Last geometry event of the shape."""

    def on_exit_element(self) -> None:
        if self.state is ShapeState.FINALIZED:
            raise RuntimeError("Shape context finalized twice")
        self.state = ShapeState.FINALIZED

        transform = self.transform
        self.path.transform(transform)

        if self.fill_reference:
            self._fill_with_pattern(self.fill_reference)

        if not self.stroke:
            return
        try:
            inverse = transform.inverse()
        except ValueError:
            self.logger.warning("Skipping shape with non-invertible transform %s", transform)
            return
        record = DashedPath(self.path, self.dasharray, inverse)
        # The exporter owns the geometry from here on
        self.path = Path()
        self.dasharray = []
        self.exporter.plot(record)

    def _fill_with_pattern(self, element_id: str) -> None:
        # Imported here: the pattern module builds on this one
        from svgcut.engine.factory import ElementKind
        from svgcut.engine.pattern import PatternPseudoContext

        referenced = self.document.find_by_id(element_id)
        if referenced is None:
            return
        if self.pattern_depth >= self.config.max_pattern_depth:
            self.logger.warning(
                "Pattern fills nested deeper than %d levels, not filling with #%s",
                self.config.max_pattern_depth,
                element_id,
            )
            return

        context = PatternPseudoContext(self, self.path)
        expected = frozenset({ElementKind.PATTERN})
        try:
            self.traversal.load_referenced_element(referenced, context, expected, processed_elements=expected)
        except UnexpectedElementError as e:
            self.logger.warning("Unsupported value type for attribute fill: %s", e)
