"""Bitmap tracing with potrace.

Decodes a raster image with Pillow, thresholds it with numpy and traces the
ink with potrace. The result is an SVG document with a single path element
whose ``d`` attribute uses only M, L, C and Z commands in glyph space.
"""

from pathlib import Path
from typing import Any

import numpy as np
import potrace
from lxml import etree
from PIL import Image, UnidentifiedImageError

from fontcaster.exceptions import CollaboratorFailure, EmptyGlyphError

STAGE = "trace"
SVG_NS = "http://www.w3.org/2000/svg"


def _xy(point: Any) -> tuple[float, float]:
    # pypotrace yields tuples, potracer yields objects with x/y
    if hasattr(point, "x"):
        return float(point.x), float(point.y)
    return float(point[0]), float(point[1])


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def load_bitmap(image_path: Path, threshold: int) -> np.ndarray:
    """Decode an image into a boolean ink mask (True = ink).

    Transparent areas are treated as white paper.

    Raises:
        CollaboratorFailure: If the image cannot be decoded
    """
    try:
        with Image.open(image_path) as image:
            if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
                rgba = image.convert("RGBA")
                paper = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
                gray = Image.alpha_composite(paper, rgba).convert("L")
            else:
                gray = image.convert("L")
    except (OSError, UnidentifiedImageError) as e:
        raise CollaboratorFailure(STAGE, f"cannot decode image: {e}", image_path) from e

    return np.asarray(gray) < threshold


class PotraceTracer:
    """Traces raster images into SVG path descriptions.

    Example:
        tracer = PotraceTracer(threshold=128)
        svg = tracer.trace(Path("A.png"))
        d = extract_path_data(svg, "A")
    """

    def __init__(
        self,
        threshold: int = 128,
        turdsize: int = 2,
        alphamax: float = 1.0,
        opticurve: bool = True,
        flip_y: bool = True,
    ) -> None:
        """Initialize the tracer.

        Args:
            threshold: Grayscale threshold (0-255); darker pixels are ink
            turdsize: Discard contours smaller than this many pixels^2
            alphamax: Potrace corner threshold
            opticurve: Let potrace join adjacent Bezier segments
            flip_y: Flip y so the bottom image row sits on the baseline
        """
        self.threshold = threshold
        self.turdsize = turdsize
        self.alphamax = alphamax
        self.opticurve = opticurve
        self.flip_y = flip_y

    def trace(self, image_path: Path) -> str:
        """Trace an image into an SVG document.

        Args:
            image_path: Raster image to trace

        Returns:
            SVG markup; contains no path element if the image has no ink

        Raises:
            CollaboratorFailure: If decoding or tracing fails
        """
        mask = load_bitmap(image_path, self.threshold)
        height, width = mask.shape[:2]

        try:
            # potrace.Bitmap takes True as paper and inverts it into ink
            bitmap = potrace.Bitmap(~mask)
            traced = bitmap.trace(
                turdsize=self.turdsize,
                alphamax=self.alphamax,
                opticurve=self.opticurve,
            )
        except Exception as e:
            raise CollaboratorFailure(STAGE, f"potrace failed: {e}", image_path) from e

        path_data = self.path_data(traced.curves, height)
        return self.to_svg(path_data, width, height)

    def path_data(self, curves: Any, height: int) -> str:
        """Render potrace curves as path data."""
        parts: list[str] = []
        for curve in curves:
            parts.append("M" + self._point(curve.start_point, height))
            for segment in curve.segments:
                if segment.is_corner:
                    parts.append(
                        "L" + self._point(segment.c, height)
                        + " " + self._point(segment.end_point, height)
                    )
                else:
                    parts.append(
                        "C" + " ".join(
                            self._point(p, height)
                            for p in (segment.c1, segment.c2, segment.end_point)
                        )
                    )
            parts.append("Z")
        return " ".join(parts)

    def _point(self, point: Any, height: int) -> str:
        x, y = _xy(point)
        if self.flip_y:
            y = height - y
        return f"{_fmt(x)},{_fmt(y)}"

    @staticmethod
    def to_svg(path_data: str, width: int, height: int) -> str:
        """Wrap path data in an SVG document."""
        root = etree.Element(
            f"{{{SVG_NS}}}svg",
            nsmap={None: SVG_NS},
            width=str(width),
            height=str(height),
            viewBox=f"0 0 {width} {height}",
        )
        if path_data:
            etree.SubElement(root, f"{{{SVG_NS}}}path", d=path_data)
        return etree.tostring(root, encoding="unicode")


def extract_path_data(svg: str, glyph_name: str) -> str:
    """Return the ``d`` attribute of the first path element in an SVG.

    Args:
        svg: SVG markup from the tracer
        glyph_name: Glyph identity, for diagnostics

    Returns:
        Path description string

    Raises:
        EmptyGlyphError: If there is no path element with path data
        CollaboratorFailure: If the markup is not well-formed XML
    """
    try:
        root = etree.fromstring(svg.encode("utf-8"))
    except etree.XMLSyntaxError as e:
        raise CollaboratorFailure(STAGE, f"invalid SVG for '{glyph_name}': {e}") from e

    for node in root.iter(f"{{{SVG_NS}}}path", "path"):
        data = node.get("d")
        if data and data.strip():
            return data

    raise EmptyGlyphError(glyph_name, "traced image contains no path")
