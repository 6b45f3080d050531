"""Font assembly from glyph outlines.

The assembler owns the glyph list for one run. It starts with the .notdef
glyph, assigns codepoints to appended glyphs, refuses duplicates, and hands
out a frozen FontDocument exactly once.
"""

import logging
from collections.abc import Iterator
from dataclasses import replace

from fontTools.agl import toUnicode

from fontcaster.config import CodepointPolicy, FontConfig
from fontcaster.domain.glyph import NOTDEF, FontDocument, GlyphOutline
from fontcaster.exceptions import (
    AssemblerClosedError,
    CodepointResolutionError,
    DuplicateGlyphError,
)

logger = logging.getLogger(__name__)


def resolve_codepoint(name: str, policy: CodepointPolicy) -> int:
    """Map a glyph identity to a codepoint.

    Args:
        name: Glyph identity, usually a file stem like "A"
        policy: Resolution policy for multi-character identities

    Returns:
        The codepoint

    Raises:
        CodepointResolutionError: If the identity cannot be resolved
    """
    if not name:
        raise CodepointResolutionError(name, "empty glyph name")
    if len(name) == 1 or policy == CodepointPolicy.FIRST_CHAR:
        return ord(name[0])
    if policy == CodepointPolicy.SINGLE_CHAR:
        raise CodepointResolutionError(name, "name is longer than one character")

    # Adobe Glyph List names: "exclam", "uni0041", "u1F600"
    text = toUnicode(name)
    if len(text) != 1:
        raise CodepointResolutionError(name, "not a single-character glyph name")
    return ord(text)


def make_notdef(advance_width: float) -> GlyphOutline:
    """Create the fallback glyph."""
    return GlyphOutline(name=NOTDEF, codepoint=None, advance_width=advance_width)


class FontAssembler:
    """Accumulates glyph outlines into a font document.

    Single writer, then frozen: append() may be called any number of times,
    finalize() once, and nothing after that.

    Example:
        assembler = FontAssembler(FontConfig())
        assembler.append(outline_a)
        assembler.append(outline_b)
        document = assembler.finalize()
        # document.glyph_order() == [".notdef", "A", "B"]
    """

    def __init__(self, config: FontConfig) -> None:
        """Initialize the assembler and seed the .notdef glyph.

        Args:
            config: Font naming, metrics and codepoint policy
        """
        self.config = config
        self._glyphs: list[GlyphOutline] = [make_notdef(config.default_advance_width)]
        self._by_codepoint: dict[int, GlyphOutline] = {}
        self._by_name: dict[str, GlyphOutline] = {NOTDEF: self._glyphs[0]}
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once finalize() has been called."""
        return self._closed

    def append(self, outline: GlyphOutline) -> GlyphOutline:
        """Add a glyph to the font.

        Assigns the codepoint from the glyph identity if the outline has none.

        Args:
            outline: Glyph outline to add

        Returns:
            The outline as stored (with its codepoint assigned)

        Raises:
            AssemblerClosedError: If the assembler has been finalized
            CodepointResolutionError: If no codepoint can be assigned
            DuplicateGlyphError: If the name or codepoint is already taken
        """
        if self._closed:
            raise AssemblerClosedError("append glyph")

        if outline.codepoint is None:
            outline = replace(
                outline,
                codepoint=resolve_codepoint(outline.name, self.config.codepoint_policy),
            )

        existing = self._by_name.get(outline.name)
        if existing is not None:
            raise DuplicateGlyphError(
                existing.name,
                outline.name,
                f"glyph name '{outline.name}'",
                existing.source,
                outline.source,
            )

        existing = self._by_codepoint.get(outline.codepoint)
        if existing is not None:
            raise DuplicateGlyphError(
                existing.name,
                outline.name,
                f"U+{outline.codepoint:04X}",
                existing.source,
                outline.source,
            )

        self._glyphs.append(outline)
        self._by_name[outline.name] = outline
        self._by_codepoint[outline.codepoint] = outline
        logger.debug("Appended glyph '%s' as U+%04X", outline.name, outline.codepoint)
        return outline

    def finalize(self) -> FontDocument:
        """Freeze the assembler and return the font document.

        Raises:
            AssemblerClosedError: If called more than once
        """
        if self._closed:
            raise AssemblerClosedError("finalize font")
        self._closed = True

        return FontDocument(
            font_name=self.config.font_name,
            family_name=self.config.family_name,
            style_name=self.config.style_name,
            units_per_em=self.config.units_per_em,
            ascender=self.config.ascender,
            descender=self.config.descender,
            glyphs=tuple(self._glyphs),
        )

    def __len__(self) -> int:
        return len(self._glyphs)

    def __iter__(self) -> Iterator[GlyphOutline]:
        return iter(list(self._glyphs))
