"""Font encoding with fontTools FontBuilder.

Encodes a finalized FontDocument as a CFF-flavoured OpenType font. Glyph
outlines are drawn with T2CharStringPen, so cubic curves are stored as-is
and quadratic curves are converted to cubics by the pen.
"""

import re
from io import BytesIO
from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.t2CharStringPen import T2CharStringPen

from fontcaster.domain.glyph import FontDocument, GlyphOutline
from fontcaster.exceptions import CollaboratorFailure

STAGE = "encode"
FONT_SUFFIX = ".otf"

_PS_FORBIDDEN = re.compile(r"[^\x21-\x7e]|[\[\](){}<>/%]")


def postscript_name(font_name: str, style_name: str) -> str:
    """Build a PostScript name like "CustomFont-Regular"."""
    family = _PS_FORBIDDEN.sub("", font_name) or "Untitled"
    style = _PS_FORBIDDEN.sub("", style_name) or "Regular"
    return f"{family}-{style}"[:63]


def _is_production_safe(name: str) -> bool:
    return (
        0 < len(name) <= 63
        and name.isascii()
        and name.isprintable()
        and not any(char.isspace() for char in name)
    )


def production_names(glyphs: tuple[GlyphOutline, ...]) -> dict[str, str]:
    """Map glyph identities to names that can be stored in the font.

    ASCII identities are kept. Others become uniXXXX / uXXXXX names derived
    from their codepoint, or glyphNN when they have none.
    """
    names: dict[str, str] = {}
    used: set[str] = set()
    for index, glyph in enumerate(glyphs):
        if _is_production_safe(glyph.name):
            candidate = glyph.name
        elif glyph.codepoint is not None:
            fmt = "uni{:04X}" if glyph.codepoint <= 0xFFFF else "u{:05X}"
            candidate = fmt.format(glyph.codepoint)
        else:
            candidate = f"glyph{index}"

        unique = candidate
        suffix = 1
        while unique in used:
            unique = f"{candidate}.{suffix}"
            suffix += 1
        used.add(unique)
        names[glyph.name] = unique
    return names


class FontEncoder:
    """Serializes font documents to OpenType (CFF) bytes.

    Example:
        encoder = FontEncoder()
        data = encoder.encode(document)
        Path("CustomFont.otf").write_bytes(data)
    """

    def encode(self, document: FontDocument) -> bytes:
        """Encode a font document.

        Args:
            document: Finalized font document

        Returns:
            Binary font data

        Raises:
            CollaboratorFailure: If fontTools cannot build the font
        """
        try:
            builder = self._build(document)
            buffer = BytesIO()
            builder.save(buffer)
        except Exception as e:
            raise CollaboratorFailure(STAGE, str(e) or type(e).__name__) from e
        return buffer.getvalue()

    def _build(self, document: FontDocument) -> FontBuilder:
        names = production_names(document.glyphs)
        ps_name = postscript_name(document.font_name, document.style_name)
        full_name = f"{document.family_name} {document.style_name}"

        builder = FontBuilder(document.units_per_em, isTTF=False)
        builder.setupGlyphOrder([names[glyph.name] for glyph in document.glyphs])
        builder.setupCharacterMap(
            {codepoint: names[name] for codepoint, name in document.cmap().items()}
        )

        charstrings = {}
        metrics = {}
        for glyph in document.glyphs:
            width = round(glyph.advance_width)
            pen = T2CharStringPen(width=width, glyphSet=None)
            glyph.draw(pen)
            charstrings[names[glyph.name]] = pen.getCharString()
            metrics[names[glyph.name]] = (width, round(glyph.left_side_bearing))

        builder.setupCFF(
            psName=ps_name,
            fontInfo={"FamilyName": document.family_name, "FullName": full_name},
            charStringsDict=charstrings,
            privateDict={},
        )
        builder.setupHorizontalMetrics(metrics)
        builder.setupHorizontalHeader(ascent=document.ascender, descent=document.descender)
        builder.setupNameTable(
            {
                "familyName": document.family_name,
                "styleName": document.style_name,
                "uniqueFontIdentifier": f"fontcaster:{ps_name}",
                "fullName": full_name,
                "psName": ps_name,
            }
        )
        builder.setupOS2(
            sTypoAscender=document.ascender,
            sTypoDescender=document.descender,
            sTypoLineGap=0,
            usWinAscent=document.ascender,
            usWinDescent=abs(document.descender),
            fsType=0,
        )
        builder.setupPost()
        return builder


class FontWriter:
    """Writes encoded fonts into an output directory.

    Example:
        writer = FontWriter(Path("out"))
        font_path = writer.write(document, encoder.encode(document))
    """

    def __init__(self, output_dir: Path) -> None:
        """Initialize the font writer.

        Args:
            output_dir: Directory that receives the font file
        """
        self._output_dir = output_dir

    @staticmethod
    def get_font_path(output_dir: Path, font_name: str) -> Path:
        """Output path for a font: {output_dir}/{font_name}.otf"""
        return output_dir / f"{font_name}{FONT_SUFFIX}"

    def write(self, document: FontDocument, font_data: bytes) -> Path:
        """Write encoded font data for a document.

        Returns:
            Path of the written font

        Raises:
            CollaboratorFailure: If the file cannot be written
        """
        path = self.get_font_path(self._output_dir, document.font_name)
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(font_data)
        except OSError as e:
            raise CollaboratorFailure("write", str(e), path) from e
        return path
