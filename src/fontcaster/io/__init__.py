"""External collaborators for fontcaster.

This module wraps the tools the pipeline delegates to:

- PopplerRasterizer: source document -> PNG (pdftocairo)
- PotraceTracer: PNG -> SVG path description (Pillow, numpy, potrace)
- FontEncoder / FontWriter: FontDocument -> OpenType bytes (fontTools)
- write_preview: FontDocument -> HTML preview page
"""

from fontcaster.io.encoder import FontEncoder, FontWriter
from fontcaster.io.preview import render_preview, write_preview
from fontcaster.io.rasterizer import PopplerRasterizer
from fontcaster.io.tracer import PotraceTracer, extract_path_data

__all__ = [
    "FontEncoder",
    "FontWriter",
    "PopplerRasterizer",
    "PotraceTracer",
    "extract_path_data",
    "render_preview",
    "write_preview",
]
