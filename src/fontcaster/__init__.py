"""fontcaster - Build a font from a directory of per-character documents.

fontcaster is a CLI tool that turns a directory of single-character PDF
drawings into an OpenType font. Each document is rasterized, traced into a
vector path, interpreted into glyph outlines and assembled into one font,
together with an HTML preview page.

Example:
    $ fontcaster --dir letters --fontName MyHand

This will create letters/MyHand.otf and letters/MyHand-glyphs.html, with one
glyph per document (A.pdf becomes glyph "A" at U+0041).
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
