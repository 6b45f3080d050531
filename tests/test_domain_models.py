"""Tests for domain models to verify they work correctly."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest
from fontTools.pens.recordingPen import RecordingPen

from fontcaster.domain import (
    COMMAND_ARITY,
    NOTDEF,
    ORIGIN,
    ClosePath,
    CommandType,
    CubicCurveTo,
    Cursor,
    FontDocument,
    GlyphOutline,
    LineTo,
    MoveTo,
    QuadCurveTo,
    RawCommand,
)


class TestRawCommand:
    """Tests for RawCommand class."""

    def test_command_creation(self) -> None:
        """Test basic command creation."""
        cmd = RawCommand("L", (10.0, 20.0))
        assert cmd.command_type == CommandType.LINE_TO
        assert cmd.operands == (10.0, 20.0)
        assert not cmd.is_relative

    def test_relative_command(self) -> None:
        """Test that lowercase letters are relative."""
        cmd = RawCommand("c", (1, 2, 3, 4, 5, 6))
        assert cmd.is_relative
        assert cmd.command_type == CommandType.CUBIC_TO

    def test_unsupported_letter(self) -> None:
        """Test that letters outside the drawing alphabet are refused."""
        with pytest.raises(ValueError, match="Unsupported command letter"):
            RawCommand("A", (1, 1, 0, 0, 1, 5, 5))

    @pytest.mark.parametrize(
        ("letter", "arity"),
        [("M", 2), ("l", 2), ("C", 6), ("q", 4), ("Z", 0)],
    )
    def test_arity(self, letter: str, arity: int) -> None:
        """Test operands consumed per application."""
        assert RawCommand(letter, (0.0,) * arity).arity == arity

    def test_arity_table_covers_all_types(self) -> None:
        """Test that every command type has an arity."""
        assert set(COMMAND_ARITY) == set(CommandType)

    def test_groups_split_repetitions(self) -> None:
        """Test implicit repetition yields one group per application."""
        cmd = RawCommand("L", (1, 2, 3, 4, 5, 6))
        assert list(cmd.groups()) == [(1, 2), (3, 4), (5, 6)]
        assert cmd.repeat_count == 3

    def test_close_yields_single_empty_group(self) -> None:
        """Test close commands apply exactly once."""
        cmd = RawCommand("z")
        assert list(cmd.groups()) == [()]
        assert cmd.repeat_count == 1

    def test_command_immutable(self) -> None:
        """Test that command is immutable."""
        cmd = RawCommand("M", (0, 0))
        with pytest.raises(FrozenInstanceError):
            cmd.letter = "L"  # type: ignore


class TestCursorAndOps:
    """Tests for Cursor and drawing ops."""

    def test_origin(self) -> None:
        """Test the origin cursor."""
        assert ORIGIN == Cursor(0.0, 0.0)
        assert ORIGIN.to_tuple() == (0.0, 0.0)

    def test_moved_by(self) -> None:
        """Test cursor offset returns a new cursor."""
        cursor = Cursor(10, 5)
        moved = cursor.moved_by(3, -2)
        assert moved == Cursor(13, 3)
        assert cursor == Cursor(10, 5)

    def test_positional_op_end(self) -> None:
        """Test anchor points of positional ops."""
        assert MoveTo(1, 2).end == Cursor(1, 2)
        assert LineTo(3, 4).end == Cursor(3, 4)
        assert CubicCurveTo(0, 0, 1, 1, 5, 6).end == Cursor(5, 6)
        assert QuadCurveTo(0, 0, 7, 8).end == Cursor(7, 8)

    def test_close_path_has_no_anchor(self) -> None:
        """Test that ClosePath carries no position."""
        assert not hasattr(ClosePath(), "end")

    def test_op_names(self) -> None:
        """Test op names match pen methods conceptually."""
        assert MoveTo.name == "moveTo"
        assert ClosePath.name == "closePath"

    def test_ops_compare_by_value(self) -> None:
        """Test that equal coordinates give equal ops."""
        assert LineTo(1.0, 2.0) == LineTo(1, 2)
        assert LineTo(1, 2) != MoveTo(1, 2)


class TestGlyphOutline:
    """Tests for GlyphOutline class."""

    def test_empty_outline(self) -> None:
        """Test outline without ops."""
        glyph = GlyphOutline(name="space", codepoint=0x20, advance_width=512)
        assert glyph.is_empty()
        assert not glyph.is_fallback()

    def test_notdef_is_fallback(self) -> None:
        """Test .notdef detection."""
        glyph = GlyphOutline(name=NOTDEF, codepoint=None, advance_width=512)
        assert glyph.is_fallback()

    def test_draw_replays_ops(self) -> None:
        """Test drawing onto a fontTools pen."""
        glyph = GlyphOutline(
            name="A",
            codepoint=0x41,
            advance_width=512,
            ops=(MoveTo(0, 0), LineTo(10, 0), QuadCurveTo(10, 10, 0, 10), ClosePath()),
        )
        pen = RecordingPen()
        glyph.draw(pen)
        assert pen.value == [
            ("moveTo", ((0, 0),)),
            ("lineTo", ((10, 0),)),
            ("qCurveTo", ((10, 10), (0, 10))),
            ("closePath", ()),
        ]

    def test_label_with_source(self) -> None:
        """Test diagnostic label includes the source file name."""
        glyph = GlyphOutline(
            name="A", codepoint=0x41, advance_width=512, source=Path("/in/A.pdf")
        )
        assert glyph.label == "A (A.pdf)"

    def test_source_not_part_of_equality(self) -> None:
        """Test that the source path is diagnostic only."""
        a = GlyphOutline(name="A", codepoint=0x41, advance_width=512, source=Path("x/A.pdf"))
        b = GlyphOutline(name="A", codepoint=0x41, advance_width=512)
        assert a == b


class TestFontDocument:
    """Tests for FontDocument class."""

    @pytest.fixture
    def document(self) -> FontDocument:
        return FontDocument(
            font_name="CustomFont",
            family_name="CustomFontFamily",
            style_name="Regular",
            units_per_em=1000,
            ascender=800,
            descender=-200,
            glyphs=(
                GlyphOutline(name=NOTDEF, codepoint=None, advance_width=512),
                GlyphOutline(name="A", codepoint=0x41, advance_width=512),
                GlyphOutline(name="B", codepoint=0x42, advance_width=512),
            ),
        )

    def test_glyph_order(self, document: FontDocument) -> None:
        """Test glyph order follows the glyph tuple."""
        assert document.glyph_order() == [NOTDEF, "A", "B"]

    def test_cmap_skips_unencoded(self, document: FontDocument) -> None:
        """Test cmap contains only encoded glyphs."""
        assert document.cmap() == {0x41: "A", 0x42: "B"}

    def test_get_glyph(self, document: FontDocument) -> None:
        """Test glyph lookup by name."""
        glyph = document.get_glyph("B")
        assert glyph is not None
        assert glyph.codepoint == 0x42
        assert document.get_glyph("C") is None

    def test_len(self, document: FontDocument) -> None:
        """Test document length counts .notdef."""
        assert len(document) == 3
