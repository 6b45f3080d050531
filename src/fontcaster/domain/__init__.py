"""Domain models for fontcaster.

This module contains the data passed between pipeline stages:

- Raw commands produced by the path tokenizer
- Drawing ops produced by the path interpreter
- Glyph outlines and the font document assembled from them

All models are frozen dataclasses and independent of fontTools.
"""

from fontcaster.domain.commands import (
    COMMAND_ARITY,
    SUPPORTED_LETTERS,
    CommandType,
    RawCommand,
)
from fontcaster.domain.glyph import NOTDEF, FontDocument, GlyphOutline
from fontcaster.domain.ops import (
    ORIGIN,
    ClosePath,
    CubicCurveTo,
    Cursor,
    DrawingOp,
    LineTo,
    MoveTo,
    PositionalOp,
    QuadCurveTo,
)

__all__: list[str] = [
    "COMMAND_ARITY",
    "NOTDEF",
    "ORIGIN",
    "SUPPORTED_LETTERS",
    # Commands
    "CommandType",
    "RawCommand",
    # Drawing ops
    "ClosePath",
    "CubicCurveTo",
    "Cursor",
    "DrawingOp",
    "LineTo",
    "MoveTo",
    "PositionalOp",
    "QuadCurveTo",
    # Glyphs
    "FontDocument",
    "GlyphOutline",
]
