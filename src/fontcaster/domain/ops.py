"""Normalized drawing instructions.

Drawing ops are the position-independent output of path interpretation: every
coordinate is absolute in glyph-local space, so replaying the same sequence
always yields the same geometry.
"""

from dataclasses import dataclass
from typing import ClassVar, Union


@dataclass(frozen=True, slots=True)
class Cursor:
    """Current pen position during path interpretation."""

    x: float = 0.0
    y: float = 0.0

    def moved_by(self, dx: float, dy: float) -> "Cursor":
        """Return a cursor offset by (dx, dy)."""
        return Cursor(self.x + dx, self.y + dy)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)


ORIGIN = Cursor(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class MoveTo:
    """Start a new contour at (x, y)."""

    name: ClassVar[str] = "moveTo"

    x: float
    y: float

    @property
    def end(self) -> Cursor:
        return Cursor(self.x, self.y)


@dataclass(frozen=True, slots=True)
class LineTo:
    """Straight segment to (x, y)."""

    name: ClassVar[str] = "lineTo"

    x: float
    y: float

    @property
    def end(self) -> Cursor:
        return Cursor(self.x, self.y)


@dataclass(frozen=True, slots=True)
class CubicCurveTo:
    """Cubic Bezier segment with two control points."""

    name: ClassVar[str] = "cubicCurveTo"

    c1x: float
    c1y: float
    c2x: float
    c2y: float
    ex: float
    ey: float

    @property
    def end(self) -> Cursor:
        return Cursor(self.ex, self.ey)


@dataclass(frozen=True, slots=True)
class QuadCurveTo:
    """Quadratic Bezier segment with one control point."""

    name: ClassVar[str] = "quadCurveTo"

    cx: float
    cy: float
    ex: float
    ey: float

    @property
    def end(self) -> Cursor:
        return Cursor(self.ex, self.ey)


@dataclass(frozen=True, slots=True)
class ClosePath:
    """Close the current contour. Has no anchor point."""

    name: ClassVar[str] = "closePath"


PositionalOp = Union[MoveTo, LineTo, CubicCurveTo, QuadCurveTo]
DrawingOp = Union[MoveTo, LineTo, CubicCurveTo, QuadCurveTo, ClosePath]
