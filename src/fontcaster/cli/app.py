"""CLI application entry point for fontcaster.

This module provides the main CLI interface using Typer.
"""

from enum import Enum, IntEnum
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from pydantic import ValidationError

from fontcaster import __version__
from fontcaster.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_error,
    print_header,
    print_skipped,
    print_source_info,
    print_step,
    print_success,
)
from fontcaster.config import (
    CodepointPolicy,
    FailurePolicy,
    FontcasterSettings,
    FontConfig,
    LoggingConfig,
    PathConfig,
    PipelineConfig,
    UnsupportedCommandPolicy,
)
from fontcaster.core import PipelineOrchestrator, PipelineResult
from fontcaster.exceptions import (
    CollaboratorFailure,
    DuplicateGlyphError,
    FontcasterError,
    GlyphFaultError,
    SourceDirectoryError,
    StageTimeoutError,
)

E = TypeVar("E", bound=Enum)


class ExitCode(IntEnum):
    """Process exit codes."""

    OK = 0
    FAILURE = 1
    USAGE = 2
    GLYPH_FAULT = 3
    DUPLICATE_GLYPH = 4
    COLLABORATOR = 5
    TIMEOUT = 6
    INTERRUPTED = 130


STAGE_HINTS = {
    "rasterize": "Check that pdftocairo (poppler-utils) is installed and the document opens.",
    "trace": "Check that the document renders dark ink on a light background.",
    "parse": "Arc and shorthand commands are rejected with --unsupported reject.",
    "append": "Glyph names map to codepoints by their first character; see --codepoints.",
}

# Create the Typer app
app = typer.Typer(
    name="fontcaster",
    help="Build a font from a directory of per-character PDF documents.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]fontcaster[/bold blue] v{__version__}")
        raise typer.Exit()


def _parse_choice(enum_cls: type[E], value: str, option: str) -> E:
    """Convert an option value to an enum member or exit with a usage error."""
    try:
        return enum_cls(value.lower())
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        print_error(f"Invalid {option}: {value}", details=f"Valid values: {valid}")
        raise typer.Exit(code=ExitCode.USAGE)


@app.command()
def build(
    source_dir: Annotated[
        Path,
        typer.Option(
            "--dir",
            "-d",
            help="Directory with one PDF document per character (A.pdf, B.pdf, ...)",
            show_default=False,
        ),
    ],
    font_name: Annotated[
        str,
        typer.Option(
            "--fontName",
            "--font-name",
            help="Font identifier, used for the output file names",
        ),
    ] = "CustomFont",
    font_family: Annotated[
        str,
        typer.Option(
            "--fontFamily",
            "--font-family",
            help="Font family name stored in the font",
        ),
    ] = "CustomFontFamily",
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output-dir",
            "-o",
            help="Where to write the font and preview (default: --dir)",
        ),
    ] = None,
    on_error: Annotated[
        str,
        typer.Option(
            "--on-error",
            help="What to do when a glyph fails (abort|skip)",
        ),
    ] = "abort",
    unsupported: Annotated[
        str,
        typer.Option(
            "--unsupported",
            help="Arc/shorthand path commands (skip|reject)",
        ),
    ] = "skip",
    codepoints: Annotated[
        str,
        typer.Option(
            "--codepoints",
            help="Codepoint assignment (first_char|glyph_name|single_char)",
        ),
    ] = "first_char",
    advance_width: Annotated[
        int,
        typer.Option(
            "--advance-width",
            help="Advance width of every glyph in font units",
            min=0,
        ),
    ] = 512,
    raster_size: Annotated[
        int,
        typer.Option(
            "--raster-size",
            help="Rasterized page size in pixels",
            min=16,
            max=8192,
        ),
    ] = 512,
    timeout: Annotated[
        float,
        typer.Option(
            "--timeout",
            help="Seconds a single rasterize/trace/encode step may take",
            min=0.1,
        ),
    ] = 60.0,
    keep_rasters: Annotated[
        Path | None,
        typer.Option(
            "--keep-rasters",
            help="Copy intermediate PNG images to this directory",
        ),
    ] = None,
    no_preview: Annotated[
        bool,
        typer.Option(
            "--no-preview",
            help="Do not write the HTML preview",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Build a font from a directory of per-character PDF documents.

    Every PDF in --dir becomes one glyph named after the file: A.pdf becomes
    glyph "A" mapped to U+0041. Pages are rasterized with pdftocairo, traced
    with potrace and assembled into an OpenType font.

    Example:
        fontcaster --dir pdfs --fontName MyHand --fontFamily "My Hand"

    This will create pdfs/MyHand.otf and pdfs/MyHand-glyphs.html.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=ExitCode.USAGE)

    if not source_dir.is_dir():
        print_error(
            f"Source directory not found: {source_dir}",
            details="Pass a directory containing one PDF per character with --dir.",
        )
        raise typer.Exit(code=ExitCode.FAILURE)

    failure_policy = _parse_choice(FailurePolicy, on_error, "--on-error")
    unsupported_policy = _parse_choice(UnsupportedCommandPolicy, unsupported, "--unsupported")
    codepoint_policy = _parse_choice(CodepointPolicy, codepoints, "--codepoints")

    try:
        settings = FontcasterSettings(
            font=FontConfig(
                font_name=font_name,
                family_name=font_family,
                default_advance_width=advance_width,
                codepoint_policy=codepoint_policy,
            ),
            path=PathConfig(unsupported_commands=unsupported_policy),
            pipeline=PipelineConfig(
                raster_size=raster_size,
                stage_timeout_s=timeout,
                failure_policy=failure_policy,
                output_dir=output_dir,
                keep_rasters_dir=keep_rasters,
                write_preview=not no_preview,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level="DEBUG" if verbose else log_level,
                quiet=quiet,
            ),
        )
    except ValidationError as e:
        print_error("Invalid options", details=str(e))
        raise typer.Exit(code=ExitCode.USAGE)

    if not quiet:
        print_header(__version__)

    try:
        orchestrator = PipelineOrchestrator(settings, source_dir)
        sources = orchestrator.discover()

        if not quiet:
            print_step("Scanning sources")
            print_source_info(str(source_dir), len(sources), settings.pipeline.source_extension)
            if not sources:
                console.print("  No source documents; the font will only contain .notdef")
            print_step("Building glyphs")

        result = _run_pipeline(orchestrator, len(sources), quiet)

    except KeyboardInterrupt:
        if not quiet:
            print_cancellation_notice()
        raise typer.Exit(code=ExitCode.INTERRUPTED) from None
    except GlyphFaultError as e:
        print_error(
            f"{e.source.name} failed during {e.stage}",
            details=str(e.cause),
            hint=f"{STAGE_HINTS.get(e.stage, '')} Use --on-error skip to leave it out.".strip(),
        )
        code = ExitCode.TIMEOUT if isinstance(e.cause, StageTimeoutError) else ExitCode.GLYPH_FAULT
        raise typer.Exit(code=code)
    except DuplicateGlyphError as e:
        print_error(
            str(e),
            hint="Rename one of the files or choose another --codepoints policy.",
        )
        raise typer.Exit(code=ExitCode.DUPLICATE_GLYPH)
    except StageTimeoutError as e:
        print_error(f"{e.stage} timed out", details=str(e), hint="Raise --timeout.")
        raise typer.Exit(code=ExitCode.TIMEOUT)
    except CollaboratorFailure as e:
        print_error(f"{e.stage} failed", details=e.reason)
        raise typer.Exit(code=ExitCode.COLLABORATOR)
    except SourceDirectoryError as e:
        print_error(str(e))
        raise typer.Exit(code=ExitCode.FAILURE)
    except FontcasterError as e:
        print_error(str(e))
        raise typer.Exit(code=ExitCode.FAILURE)
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=ExitCode.FAILURE)

    if not quiet:
        stats = result.stats
        print_skipped(
            [
                (job.source.name, job.fault_stage.value if job.fault_stage else "?", str(job.fault))
                for job in result.skipped
            ]
        )
        print_success(
            font_path=str(result.font_path),
            file_size=_format_file_size(len(result.font_data)),
            preview_path=str(result.preview_path) if result.preview_path else None,
            total_time_s=stats.duration_seconds,
            glyphs=len(result.document),
            empty=stats.empty_count,
            skipped=stats.skipped_count,
            avg_time_ms=stats.avg_glyph_time_ms,
        )


def _run_pipeline(orchestrator: PipelineOrchestrator, total: int, quiet: bool) -> PipelineResult:
    """Run the pipeline, with a progress bar unless quiet."""
    if quiet or total == 0:
        return orchestrator.run()

    with create_progress() as progress:
        task_id = progress.add_task("Building", total=total, glyph="")

        def update_progress(completed: int, _total: int, glyph_name: str, _ok: bool) -> None:
            progress.update(task_id, completed=completed, glyph=glyph_name)

        return orchestrator.run(progress_callback=update_progress)


def _format_file_size(size_bytes: int) -> str:
    """Format a byte count in human-readable form (e.g. "12 KB")."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
