"""HTML preview of a generated font.

The preview loads the font with an @font-face rule and shows one cell per
glyph with its character and code point.
"""

from html import escape
from pathlib import Path
from string import Template

from fontcaster.domain.glyph import FontDocument, GlyphOutline

PREVIEW_SUFFIX = "-glyphs.html"

_PAGE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Glyphs from $title</title>
  <style>
    @font-face {
      font-family: '$family';
      src: url('$font_url');
    }
    body {
      font-family: Arial, sans-serif;
      padding: 20px;
    }
    .glyph {
      display: inline-block;
      text-align: center;
      margin: 10px;
      padding: 10px;
      border: 1px solid #ccc;
      width: 100px;
    }
    .glyph-char {
      font-family: '$family', sans-serif;
      font-size: 48px;
      min-height: 64px;
    }
  </style>
</head>
<body>
  <h1>Glyphs from $title</h1>
  <div class="glyphs">
$cells
  </div>
</body>
</html>
""")

_CELL = Template("""    <div class="glyph">
      <div class="glyph-char">$char</div>
      <div class="glyph-code">$code</div>
      <div class="glyph-name">$name</div>
    </div>""")


def _css_string(value: str) -> str:
    return escape(value.replace("\\", "\\\\").replace("'", "\\'"), quote=True)


def render_cell(glyph: GlyphOutline) -> str:
    """Render one glyph cell."""
    if glyph.codepoint is None:
        char, code = "", "N/A"
    else:
        char, code = escape(chr(glyph.codepoint)), f"U+{glyph.codepoint:04X}"
    return _CELL.substitute(char=char, code=code, name=escape(glyph.name))


def render_preview(document: FontDocument, font_url: str) -> str:
    """Render the preview page.

    Args:
        document: Font document whose glyphs are shown
        font_url: URL of the font file, relative to the preview

    Returns:
        HTML markup
    """
    return _PAGE.substitute(
        title=escape(document.font_name),
        family=_css_string(document.font_name),
        font_url=_css_string(font_url),
        cells="\n".join(render_cell(glyph) for glyph in document.glyphs),
    )


def get_preview_path(output_dir: Path, font_name: str) -> Path:
    """Output path for a preview: {output_dir}/{font_name}-glyphs.html"""
    return output_dir / f"{font_name}{PREVIEW_SUFFIX}"


def write_preview(document: FontDocument, font_path: Path, output_dir: Path) -> Path:
    """Write the preview page next to the font.

    Returns:
        Path of the written preview
    """
    path = get_preview_path(output_dir, document.font_name)
    path.write_text(render_preview(document, font_path.name), encoding="utf-8")
    return path
