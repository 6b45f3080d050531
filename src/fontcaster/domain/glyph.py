"""Glyph outline and font document models.

This module defines the glyph outline produced for each source document and
the font document that collects them before encoding.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fontcaster.domain.ops import DrawingOp

NOTDEF = ".notdef"


@dataclass(frozen=True)
class GlyphOutline:
    """One character's outline and metrics.

    Attributes:
        name: Glyph identity (the source file stem, or ".notdef")
        codepoint: Unicode code point (None for unencoded glyphs)
        advance_width: Horizontal advance width in font units
        left_side_bearing: Left side bearing in font units
        ops: Drawing instructions in absolute glyph coordinates
        source: Source document the glyph was built from, if any
    """

    name: str
    codepoint: int | None
    advance_width: float
    left_side_bearing: float = 0
    ops: tuple[DrawingOp, ...] = ()
    source: Path | None = field(default=None, compare=False)

    def is_empty(self) -> bool:
        """Check if the glyph has no drawing instructions."""
        return len(self.ops) == 0

    def is_fallback(self) -> bool:
        """Check if this is the .notdef glyph."""
        return self.name == NOTDEF

    def draw(self, pen: Any) -> None:
        """Draw the outline onto a fontTools pen."""
        from fontcaster.core.builder import replay_ops

        replay_ops(self.ops, pen)

    @property
    def label(self) -> str:
        """Identity used in diagnostics: name plus source file when known."""
        if self.source is None:
            return self.name
        return f"{self.name} ({self.source.name})"


@dataclass(frozen=True)
class FontDocument:
    """A finalized font ready for encoding.

    Attributes:
        font_name: Identifier used for output files and the PostScript name
        family_name: Font family name
        style_name: Style name (e.g. "Regular")
        units_per_em: Design grid resolution
        ascender: Typographic ascender in font units
        descender: Typographic descender in font units (negative)
        glyphs: Glyphs in order; glyphs[0] is always .notdef
    """

    font_name: str
    family_name: str
    style_name: str
    units_per_em: int
    ascender: int
    descender: int
    glyphs: tuple[GlyphOutline, ...]

    def glyph_order(self) -> list[str]:
        """Glyph names in font order."""
        return [glyph.name for glyph in self.glyphs]

    def cmap(self) -> dict[int, str]:
        """Map of codepoint to glyph name for encoded glyphs."""
        return {
            glyph.codepoint: glyph.name
            for glyph in self.glyphs
            if glyph.codepoint is not None
        }

    def get_glyph(self, name: str) -> GlyphOutline | None:
        """Get a glyph by name, or None if absent."""
        for glyph in self.glyphs:
            if glyph.name == name:
                return glyph
        return None

    def __len__(self) -> int:
        return len(self.glyphs)
