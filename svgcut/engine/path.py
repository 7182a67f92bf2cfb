"""Path model: the minimal command set every shape is reduced to.

Only absolute move, line, cubic bezier and close commands exist here. The
traversal engine converts everything else (arcs, quadratics, shorthand
commands) before geometry reaches a context.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import NamedTuple, Union

import numpy as np
from numpy.typing import NDArray

from svgcut.engine.transform import Transform


class Point(NamedTuple):
    x: float
    y: float

    def transformed(self, transform: Transform) -> Point:
        return Point(*transform.apply(self.x, self.y))


@dataclass(frozen=True)
class MoveCommand:
    point: Point

    def transformed(self, transform: Transform) -> MoveCommand:
        return MoveCommand(self.point.transformed(transform))


@dataclass(frozen=True)
class LineCommand:
    point: Point

    def transformed(self, transform: Transform) -> LineCommand:
        return LineCommand(self.point.transformed(transform))


@dataclass(frozen=True)
class BezierCommand:
    """Cubic bezier ending at ``point``."""

    point: Point
    control1: Point
    control2: Point

    def transformed(self, transform: Transform) -> BezierCommand:
        return BezierCommand(
            self.point.transformed(transform),
            self.control1.transformed(transform),
            self.control2.transformed(transform),
        )


@dataclass(frozen=True)
class CloseSubpathCommand:
    def transformed(self, transform: Transform) -> CloseSubpathCommand:
        return self


PathCommand = Union[MoveCommand, LineCommand, BezierCommand, CloseSubpathCommand]


class Path:
    """Ordered, append-only sequence of path commands."""

    __slots__ = ("_commands",)

    def __init__(self, commands: Sequence[PathCommand] = ()) -> None:
        self._commands: list[PathCommand] = list(commands)

    def push_command(self, command: PathCommand) -> None:
        self._commands.append(command)

    def transform(self, transform: Transform) -> None:
        """Rewrite every coordinate-bearing command in place."""
        self._commands = [cmd.transformed(transform) for cmd in self._commands]

    @property
    def commands(self) -> tuple[PathCommand, ...]:
        return tuple(self._commands)

    def copy(self) -> Path:
        return Path(self._commands)

    def points(self) -> NDArray[np.float64]:
        """All on-curve and control points as an Nx2 array."""
        pts: list[Point] = []
        for cmd in self._commands:
            if isinstance(cmd, BezierCommand):
                pts.extend((cmd.control1, cmd.control2, cmd.point))
            elif isinstance(cmd, (MoveCommand, LineCommand)):
                pts.append(cmd.point)
        if not pts:
            return np.empty((0, 2))
        return np.array(pts, dtype=np.float64)

    def to_svg_d(self) -> str:
        parts: list[str] = []
        for cmd in self._commands:
            if isinstance(cmd, MoveCommand):
                parts.append(f"M{cmd.point.x:g},{cmd.point.y:g}")
            elif isinstance(cmd, LineCommand):
                parts.append(f"L{cmd.point.x:g},{cmd.point.y:g}")
            elif isinstance(cmd, BezierCommand):
                parts.append(
                    f"C{cmd.control1.x:g},{cmd.control1.y:g} "
                    f"{cmd.control2.x:g},{cmd.control2.y:g} "
                    f"{cmd.point.x:g},{cmd.point.y:g}"
                )
            else:
                parts.append("Z")
        return " ".join(parts)

    def __iter__(self) -> Iterator[PathCommand]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __getitem__(self, index: int) -> PathCommand:
        return self._commands[index]

    def __bool__(self) -> bool:
        return bool(self._commands)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._commands == other._commands

    def __repr__(self) -> str:
        return f"Path({self._commands!r})"


@dataclass
class DashedPath:
    """Finalized, plot-ready record handed to an exporter.

    ``inverse_transform`` maps the (document space) path back into the user
    space of the element it came from, so stroke widths and dash lengths can be
    interpreted in source units.
    """

    path: Path
    dashes: list[float] = field(default_factory=list)
    inverse_transform: Transform = field(default_factory=Transform.identity)

    @property
    def is_dashed(self) -> bool:
        return bool(self.dashes)
