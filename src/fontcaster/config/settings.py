"""Configuration settings for fontcaster."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class UnsupportedCommandPolicy(str, Enum):
    """What the path tokenizer does with command letters it cannot draw."""

    SKIP = "skip"
    REJECT = "reject"


class CodepointPolicy(str, Enum):
    """How a glyph identity is mapped to a codepoint."""

    FIRST_CHAR = "first_char"
    GLYPH_NAME = "glyph_name"
    SINGLE_CHAR = "single_char"


class FailurePolicy(str, Enum):
    """What the pipeline does when a single glyph faults."""

    ABORT = "abort"
    SKIP = "skip"


class FontConfig(BaseModel):
    """Font naming and metrics."""

    font_name: str = Field(
        default="CustomFont",
        min_length=1,
        description="Font identifier used for output files and the PostScript name",
    )
    family_name: str = Field(
        default="CustomFontFamily",
        min_length=1,
        description="Font family name",
    )
    style_name: str = Field(
        default="Regular",
        min_length=1,
        description="Font style name",
    )
    units_per_em: int = Field(
        default=1000,
        ge=16,
        le=16384,
        description="Units per em",
    )
    ascender: int = Field(
        default=800,
        description="Typographic ascender in font units",
    )
    descender: int = Field(
        default=-200,
        le=0,
        description="Typographic descender in font units",
    )
    default_advance_width: int = Field(
        default=512,
        ge=0,
        description="Advance width of every glyph, including .notdef",
    )
    left_side_bearing: int = Field(
        default=0,
        description="Left side bearing recorded for traced glyphs",
    )
    codepoint_policy: CodepointPolicy = Field(
        default=CodepointPolicy.FIRST_CHAR,
        description="How glyph identities map to codepoints",
    )

    @field_validator("font_name")
    @classmethod
    def _check_font_name(cls, value: str) -> str:
        if any(sep in value for sep in ("/", "\\")) or value in (".", ".."):
            raise ValueError("font_name is used as a file name and cannot contain path separators")
        return value


class PathConfig(BaseModel):
    """Configuration for path description parsing."""

    unsupported_commands: UnsupportedCommandPolicy = Field(
        default=UnsupportedCommandPolicy.SKIP,
        description="Skip or reject arc/shorthand commands",
    )


class PipelineConfig(BaseModel):
    """Configuration for the conversion pipeline."""

    source_extension: str = Field(
        default=".pdf",
        description="Suffix of source documents in the input directory",
    )
    raster_size: int = Field(
        default=512,
        ge=16,
        le=8192,
        description="Longest side of the rasterized page in pixels",
    )
    threshold: int = Field(
        default=128,
        ge=1,
        le=255,
        description="Grayscale threshold; darker pixels are traced",
    )
    turdsize: int = Field(
        default=2,
        ge=0,
        description="Potrace speckle filter (pixels^2)",
    )
    flip_y: bool = Field(
        default=True,
        description="Flip traced coordinates so the image bottom is the baseline",
    )
    stage_timeout_s: float = Field(
        default=60.0,
        gt=0,
        description="Maximum time a single collaborator call may take",
    )
    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.ABORT,
        description="Abort the run or skip the glyph when a glyph faults",
    )
    output_dir: Path | None = Field(
        default=None,
        description="Where to write the font and preview (None = source directory)",
    )
    keep_rasters_dir: Path | None = Field(
        default=None,
        description="Copy intermediate raster images here (None = discard)",
    )
    write_preview: bool = Field(
        default=True,
        description="Write an HTML preview next to the font",
    )

    @field_validator("source_extension")
    @classmethod
    def _normalize_extension(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("source_extension must not be empty")
        return value if value.startswith(".") else f".{value}"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )
    quiet: bool = Field(
        default=False,
        description="Suppress console log output",
    )


class FontcasterSettings(BaseModel):
    """Main application settings."""

    font: FontConfig = Field(default_factory=FontConfig)
    path: PathConfig = Field(default_factory=PathConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> FontcasterSettings:
    """Get default application settings."""
    return FontcasterSettings()
