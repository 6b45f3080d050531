"""Unit tests for the collaborator layer.

Tests for PopplerRasterizer, PotraceTracer, extract_path_data, FontEncoder,
FontWriter and the HTML preview.
"""

import subprocess
from io import BytesIO
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from fontTools.pens.boundsPen import ControlBoundsPen
from fontTools.pens.recordingPen import RecordingPen
from fontTools.ttLib import TTFont
from PIL import Image, ImageDraw

from fontcaster.core.builder import replay_ops
from fontcaster.core.interpreter import PathInterpreter
from fontcaster.domain import NOTDEF, ClosePath, FontDocument, GlyphOutline, LineTo, MoveTo
from fontcaster.exceptions import CollaboratorFailure, EmptyGlyphError, StageTimeoutError
from fontcaster.io.encoder import FontEncoder, FontWriter, postscript_name, production_names
from fontcaster.io.preview import get_preview_path, render_cell, render_preview, write_preview
from fontcaster.io.rasterizer import PopplerRasterizer
from fontcaster.io.tracer import PotraceTracer, extract_path_data, load_bitmap


def make_document(*glyphs, font_name="CustomFont"):
    return FontDocument(
        font_name=font_name,
        family_name="CustomFontFamily",
        style_name="Regular",
        units_per_em=1000,
        ascender=800,
        descender=-200,
        glyphs=(GlyphOutline(name=NOTDEF, codepoint=None, advance_width=512), *glyphs),
    )


SQUARE = (MoveTo(0, 0), LineTo(100, 0), LineTo(100, 100), LineTo(0, 100), ClosePath())


class TestPopplerRasterizer:
    """Tests for PopplerRasterizer class."""

    def test_command(self):
        """Test the pdftocairo command line."""
        rasterizer = PopplerRasterizer(size=256)
        cmd = rasterizer.command(Path("in/A.pdf"), Path("/tmp/out"))
        assert cmd[0] == "pdftocairo"
        assert "-png" in cmd
        assert "-singlefile" in cmd
        assert cmd[cmd.index("-scale-to") + 1] == "256"
        assert cmd[-2:] == [str(Path("in/A.pdf")), str(Path("/tmp/out/A"))]

    @patch("fontcaster.io.rasterizer.subprocess.run")
    def test_rasterize_success(self, mock_run, tmp_path):
        """Test the image path is returned once the process has exited."""
        def fake_run(cmd, **kwargs):
            Path(cmd[-1] + ".png").write_bytes(b"png")
            return subprocess.CompletedProcess(cmd, 0, "", "")

        mock_run.side_effect = fake_run
        result = PopplerRasterizer(timeout_s=5).rasterize(Path("A.pdf"), tmp_path)

        assert result == tmp_path / "A.png"
        assert mock_run.call_args.kwargs["timeout"] == 5

    @patch("fontcaster.io.rasterizer.subprocess.run")
    def test_rasterize_nonzero_exit(self, mock_run, tmp_path):
        """Test a failing process raises CollaboratorFailure with stderr."""
        mock_run.return_value = subprocess.CompletedProcess([], 1, "", "Syntax Error")
        with pytest.raises(CollaboratorFailure, match="Syntax Error") as exc_info:
            PopplerRasterizer().rasterize(Path("A.pdf"), tmp_path)
        assert exc_info.value.stage == "rasterize"
        assert exc_info.value.path == Path("A.pdf")

    @patch("fontcaster.io.rasterizer.subprocess.run")
    def test_rasterize_missing_output(self, mock_run, tmp_path):
        """Test a clean exit without an image is still a failure."""
        mock_run.return_value = subprocess.CompletedProcess([], 0, "", "")
        with pytest.raises(CollaboratorFailure, match="no image produced"):
            PopplerRasterizer().rasterize(Path("A.pdf"), tmp_path)

    @patch("fontcaster.io.rasterizer.subprocess.run")
    def test_rasterize_missing_executable(self, mock_run, tmp_path):
        """Test a missing pdftocairo binary."""
        mock_run.side_effect = FileNotFoundError("pdftocairo")
        with pytest.raises(CollaboratorFailure, match="not found"):
            PopplerRasterizer().rasterize(Path("A.pdf"), tmp_path)

    @patch("fontcaster.io.rasterizer.subprocess.run")
    def test_rasterize_timeout(self, mock_run, tmp_path):
        """Test the process timeout becomes StageTimeoutError."""
        mock_run.side_effect = subprocess.TimeoutExpired("pdftocairo", 2)
        with pytest.raises(StageTimeoutError) as exc_info:
            PopplerRasterizer(timeout_s=2).rasterize(Path("A.pdf"), tmp_path)
        assert exc_info.value.timeout_s == 2

    @patch("fontcaster.io.rasterizer.shutil.which", return_value=None)
    def test_is_available(self, _mock_which):
        """Test availability check."""
        assert not PopplerRasterizer().is_available()


def traced_bounds(path_data):
    ops, _ = PathInterpreter().run(path_data)
    pen = ControlBoundsPen(None)
    replay_ops(ops, pen)
    return pen.bounds


def segment_corner(c, end):
    return SimpleNamespace(is_corner=True, c=c, end_point=end)


def segment_curve(c1, c2, end):
    return SimpleNamespace(is_corner=False, c1=c1, c2=c2, end_point=end)


class TestPotraceTracer:
    """Tests for PotraceTracer class."""

    def test_path_data_corner_and_curve(self):
        """Test corners become L pairs and curves become C."""
        curve = SimpleNamespace(
            start_point=(0, 10),
            segments=[
                segment_corner((5, 10), (5, 5)),
                segment_curve((6, 4), (7, 3), (0, 10)),
            ],
        )
        data = PotraceTracer(flip_y=False).path_data([curve], height=10)
        assert data == "M0,10 L5,10 5,5 C6,4 7,3 0,10 Z"

    def test_path_data_flips_y(self):
        """Test y is measured from the image bottom."""
        curve = SimpleNamespace(
            start_point=SimpleNamespace(x=1.5, y=2.25),
            segments=[segment_corner((1.5, 8), (4, 8))],
        )
        data = PotraceTracer(flip_y=True).path_data([curve], height=10)
        assert data == "M1.5,7.75 L1.5,2 4,2 Z"

    def test_path_data_empty(self):
        """Test no curves gives empty path data."""
        assert PotraceTracer().path_data([], height=10) == ""

    def test_to_svg_roundtrip(self):
        """Test the SVG wrapper carries the path data."""
        svg = PotraceTracer.to_svg("M0,0 L1,1 Z", 32, 16)
        assert 'viewBox="0 0 32 16"' in svg
        assert extract_path_data(svg, "A") == "M0,0 L1,1 Z"

    def test_to_svg_without_ink(self):
        """Test empty path data gives an SVG with no path element."""
        svg = PotraceTracer.to_svg("", 32, 32)
        with pytest.raises(EmptyGlyphError):
            extract_path_data(svg, "space")

    def test_load_bitmap_threshold(self, tmp_path):
        """Test dark pixels become ink."""
        path = tmp_path / "A.png"
        image = Image.new("L", (4, 4), 255)
        image.putpixel((1, 2), 0)
        image.save(path)

        mask = load_bitmap(path, threshold=128)
        assert mask.shape == (4, 4)
        assert mask[2, 1]
        assert mask.sum() == 1

    def test_load_bitmap_transparency_is_paper(self, tmp_path):
        """Test fully transparent pixels are not ink."""
        path = tmp_path / "A.png"
        Image.new("RGBA", (4, 4), (0, 0, 0, 0)).save(path)
        assert not load_bitmap(path, threshold=128).any()

    def test_load_bitmap_invalid(self, tmp_path):
        """Test undecodable files raise CollaboratorFailure."""
        path = tmp_path / "A.png"
        path.write_bytes(b"not an image")
        with pytest.raises(CollaboratorFailure, match="cannot decode image"):
            load_bitmap(path, threshold=128)

    def test_trace_square(self, tmp_path):
        """Test a filled square traces to one contour around the ink."""
        path = tmp_path / "A.png"
        image = Image.new("L", (64, 64), 255)
        ImageDraw.Draw(image).rectangle((16, 16, 47, 47), fill=0)
        image.save(path)

        data = extract_path_data(PotraceTracer().trace(path), "A")
        assert data.startswith("M")
        assert data.endswith("Z")
        assert data.count("M") == 1
        assert traced_bounds(data) == pytest.approx((16, 16, 48, 48), abs=1)

    def test_trace_flips_y(self, tmp_path):
        """Test ink near the top of the page lands high in glyph space."""
        path = tmp_path / "A.png"
        image = Image.new("L", (100, 100), 255)
        ImageDraw.Draw(image).rectangle((20, 10, 49, 39), fill=0)
        image.save(path)

        data = extract_path_data(PotraceTracer().trace(path), "A")
        assert traced_bounds(data) == pytest.approx((20, 60, 50, 90), abs=1)

    def test_trace_without_flip(self, tmp_path):
        """Test image coordinates are kept when flipping is off."""
        path = tmp_path / "A.png"
        image = Image.new("L", (100, 100), 255)
        ImageDraw.Draw(image).rectangle((20, 10, 49, 39), fill=0)
        image.save(path)

        data = extract_path_data(PotraceTracer(flip_y=False).trace(path), "A")
        assert traced_bounds(data) == pytest.approx((20, 10, 50, 40), abs=1)

    def test_trace_blank_image(self, tmp_path):
        """Test a blank page traces to an empty glyph."""
        path = tmp_path / "space.png"
        Image.new("L", (32, 32), 255).save(path)
        with pytest.raises(EmptyGlyphError):
            extract_path_data(PotraceTracer().trace(path), "space")


class TestExtractPathData:
    """Tests for extract_path_data function."""

    def test_first_path(self):
        """Test the first path element with data wins."""
        svg = (
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<path d=""/><path d="M1 1 L2 2"/><path d="M9 9"/></svg>'
        )
        assert extract_path_data(svg, "A") == "M1 1 L2 2"

    def test_without_namespace(self):
        """Test SVG documents without the SVG namespace."""
        assert extract_path_data('<svg><g><path d="M0 0"/></g></svg>', "A") == "M0 0"

    def test_no_path(self):
        """Test a missing path element is an empty glyph."""
        with pytest.raises(EmptyGlyphError) as exc_info:
            extract_path_data('<svg xmlns="http://www.w3.org/2000/svg"/>', "A")
        assert exc_info.value.glyph_name == "A"

    def test_invalid_xml(self):
        """Test malformed markup raises CollaboratorFailure."""
        with pytest.raises(CollaboratorFailure, match="invalid SVG"):
            extract_path_data("<svg><path", "A")


class TestFontEncoder:
    """Tests for FontEncoder class."""

    def test_encode_glyphs(self):
        """Test encoded font contents."""
        glyph = GlyphOutline(name="A", codepoint=0x41, advance_width=512, ops=SQUARE)
        data = FontEncoder().encode(make_document(glyph))

        font = TTFont(BytesIO(data))
        assert "CFF " in font
        assert font.getGlyphOrder() == [NOTDEF, "A"]
        assert font.getBestCmap() == {0x41: "A"}
        assert font["hmtx"]["A"] == (512, 0)
        assert font["hmtx"][NOTDEF] == (512, 0)
        assert font["head"].unitsPerEm == 1000
        assert font["hhea"].ascent == 800
        assert font["hhea"].descent == -200
        assert font["name"].getDebugName(1) == "CustomFontFamily"
        assert font["name"].getDebugName(6) == "CustomFont-Regular"

    @pytest.mark.parametrize(
        ("path_data", "move_points"),
        [
            ("Q10 10 20 0", [(0, 0)]),
            ("M0 0 L10 0 Z q1 1 2 2", [(0, 0), (10, 0)]),
        ],
    )
    def test_encode_segment_without_open_contour(self, path_data, move_points):
        """Test curves with no preceding move start at the last anchor."""
        ops, _ = PathInterpreter().run(path_data)
        glyph = GlyphOutline(name="A", codepoint=0x41, advance_width=512, ops=tuple(ops))
        font = TTFont(BytesIO(FontEncoder().encode(make_document(glyph))))

        pen = RecordingPen()
        font.getGlyphSet()["A"].draw(pen)
        assert [args[0] for op, args in pen.value if op == "moveTo"] == move_points

    def test_encode_only_notdef(self):
        """Test a font with no source glyphs still encodes."""
        font = TTFont(BytesIO(FontEncoder().encode(make_document())))
        assert font.getGlyphOrder() == [NOTDEF]
        assert not font.getBestCmap()

    def test_encode_empty_glyph(self):
        """Test glyphs without outline are encoded with their advance."""
        glyph = GlyphOutline(name="space", codepoint=0x20, advance_width=512)
        font = TTFont(BytesIO(FontEncoder().encode(make_document(glyph))))
        assert font.getBestCmap() == {0x20: "space"}
        assert font["hmtx"]["space"][0] == 512

    def test_encode_non_ascii_identity(self):
        """Test non-ASCII identities are stored under production names."""
        glyph = GlyphOutline(name="é", codepoint=0xE9, advance_width=512, ops=SQUARE)
        font = TTFont(BytesIO(FontEncoder().encode(make_document(glyph))))
        assert font.getBestCmap() == {0xE9: "uni00E9"}

    @patch("fontcaster.io.encoder.FontBuilder")
    def test_encode_failure(self, mock_builder):
        """Test fontTools errors become CollaboratorFailure."""
        mock_builder.side_effect = ValueError("boom")
        with pytest.raises(CollaboratorFailure) as exc_info:
            FontEncoder().encode(make_document())
        assert exc_info.value.stage == "encode"

    def test_postscript_name(self):
        """Test PostScript names drop forbidden characters."""
        assert postscript_name("My Font", "Regular") == "MyFont-Regular"
        assert postscript_name("(x)", "Bold") == "x-Bold"

    def test_production_names_unique(self):
        """Test colliding production names get suffixes."""
        glyphs = (
            GlyphOutline(name="uni00E9", codepoint=0x10000, advance_width=1),
            GlyphOutline(name="é", codepoint=0xE9, advance_width=1),
        )
        names = production_names(glyphs)
        assert names == {"uni00E9": "uni00E9", "é": "uni00E9.1"}


class TestFontWriter:
    """Tests for FontWriter class."""

    def test_get_font_path(self):
        """Test font path generation."""
        assert FontWriter.get_font_path(Path("out"), "MyFont") == Path("out/MyFont.otf")

    def test_write(self, tmp_path):
        """Test writing into a new directory."""
        output_dir = tmp_path / "nested" / "out"
        path = FontWriter(output_dir).write(make_document(), b"OTTO")
        assert path == output_dir / "CustomFont.otf"
        assert path.read_bytes() == b"OTTO"

    def test_write_failure(self, tmp_path):
        """Test OS errors become CollaboratorFailure."""
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(CollaboratorFailure):
            FontWriter(blocker / "sub").write(make_document(), b"OTTO")


class TestPreview:
    """Tests for the HTML preview."""

    def test_render_cell(self):
        """Test a glyph cell shows character and code."""
        cell = render_cell(GlyphOutline(name="A", codepoint=0x41, advance_width=512))
        assert ">A<" in cell
        assert "U+0041" in cell

    def test_render_notdef_cell(self):
        """Test unencoded glyphs show N/A."""
        cell = render_cell(GlyphOutline(name=NOTDEF, codepoint=None, advance_width=512))
        assert "N/A" in cell

    def test_render_escapes(self):
        """Test markup characters are escaped."""
        cell = render_cell(GlyphOutline(name="<", codepoint=0x3C, advance_width=512))
        assert "&lt;" in cell
        assert "<<" not in cell

    def test_render_preview(self):
        """Test the page loads the font and lists every glyph."""
        glyph = GlyphOutline(name="A", codepoint=0x41, advance_width=512)
        html = render_preview(make_document(glyph), "CustomFont.otf")
        assert "@font-face" in html
        assert "url('CustomFont.otf')" in html
        assert html.count('class="glyph"') == 2

    def test_write_preview(self, tmp_path):
        """Test the preview file name."""
        path = write_preview(make_document(), tmp_path / "CustomFont.otf", tmp_path)
        assert path == get_preview_path(tmp_path, "CustomFont")
        assert path.name == "CustomFont-glyphs.html"
        assert "CustomFont.otf" in path.read_text(encoding="utf-8")

