"""Glyph outline construction from drawing ops.

Drawing ops are replayed against a fontTools pen, which provides the five
path-construction operations (moveTo, lineTo, curveTo, qCurveTo, closePath).
No transformation is applied on the way.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from fontTools.pens.boundsPen import ControlBoundsPen
from fontTools.pens.recordingPen import RecordingPen

from fontcaster.domain.glyph import GlyphOutline
from fontcaster.domain.ops import (
    ORIGIN,
    ClosePath,
    CubicCurveTo,
    DrawingOp,
    LineTo,
    MoveTo,
    QuadCurveTo,
)

logger = logging.getLogger(__name__)


def replay_ops(ops: Iterable[DrawingOp], pen: Any) -> None:
    """Replay drawing ops onto a fontTools pen, in order.

    Pens need an open contour before any segment. A segment that arrives
    with no open contour (at the start, or after a close) first opens one
    at the last anchor point, (0, 0) initially. A close with no open
    contour is dropped.

    Args:
        ops: Drawing ops in absolute coordinates
        pen: Any object implementing the fontTools pen protocol

    Raises:
        TypeError: If an op is not a known drawing op
    """
    anchor = ORIGIN.to_tuple()
    contour_open = False

    for op in ops:
        if isinstance(op, ClosePath):
            if contour_open:
                pen.closePath()
                contour_open = False
            continue
        if not isinstance(op, (MoveTo, LineTo, CubicCurveTo, QuadCurveTo)):
            raise TypeError(f"Unknown drawing op: {op!r}")

        if isinstance(op, MoveTo):
            pen.moveTo((op.x, op.y))
        else:
            if not contour_open:
                pen.moveTo(anchor)
            if isinstance(op, LineTo):
                pen.lineTo((op.x, op.y))
            elif isinstance(op, CubicCurveTo):
                pen.curveTo((op.c1x, op.c1y), (op.c2x, op.c2y), (op.ex, op.ey))
            else:
                pen.qCurveTo((op.cx, op.cy), (op.ex, op.ey))
        contour_open = True
        anchor = op.end.to_tuple()


class GlyphBuilder:
    """Builds glyph outlines with fixed metrics.

    Example:
        builder = GlyphBuilder(advance_width=512)
        outline = builder.build(ops, name="A", codepoint=0x41)
    """

    def __init__(self, advance_width: float, left_side_bearing: float = 0) -> None:
        """Initialize the builder.

        Args:
            advance_width: Advance width given to every built glyph
            left_side_bearing: Left side bearing given to every built glyph
        """
        self.advance_width = advance_width
        self.left_side_bearing = left_side_bearing

    def build(
        self,
        ops: Iterable[DrawingOp],
        name: str,
        codepoint: int | None = None,
        source: Path | None = None,
    ) -> GlyphOutline:
        """Build one glyph outline.

        An empty op sequence is not an error: the glyph is built with an
        empty outline and a warning is logged.

        Args:
            ops: Drawing ops for the glyph
            name: Glyph identity
            codepoint: Unicode code point, or None to let the assembler assign it
            source: Source document, for diagnostics

        Returns:
            The glyph outline
        """
        ops = tuple(ops)

        recording = RecordingPen()
        replay_ops(ops, recording)

        if not recording.value:
            logger.warning("Glyph '%s' has an empty outline", name)
        else:
            bounds_pen = ControlBoundsPen(None)
            recording.replay(bounds_pen)
            logger.debug(
                "Built glyph '%s': %d ops, control bounds %s",
                name,
                len(ops),
                bounds_pen.bounds,
            )

        return GlyphOutline(
            name=name,
            codepoint=codepoint,
            advance_width=self.advance_width,
            left_side_bearing=self.left_side_bearing,
            ops=ops,
            source=source,
        )
