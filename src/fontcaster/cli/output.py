"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars and formatted messages.
"""


from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for glyph processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TextColumn("{task.fields[glyph]}"),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]fontcaster[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_source_info(source_dir: str, document_count: int, extension: str) -> None:
    """Print what was found in the source directory.

    Args:
        source_dir: Source directory path
        document_count: Number of source documents found
        extension: Source document suffix
    """
    line = Text("  ")
    line.append(source_dir)
    console.print(line)
    plural = "document" if document_count == 1 else "documents"
    console.print(f"  {document_count} {extension} {plural}")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    font_path: str,
    file_size: str,
    preview_path: str | None,
    total_time_s: float,
    glyphs: int,
    empty: int,
    skipped: int,
    avg_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        font_path: Path to the written font
        file_size: Human-readable file size string
        preview_path: Path to the HTML preview, if written
        total_time_s: Total processing time in seconds
        glyphs: Number of glyphs in the font, .notdef included
        empty: Number of glyphs added without outline
        skipped: Number of glyphs dropped after a fault
        avg_time_ms: Average processing time per glyph in milliseconds
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")

    line = Text("  ")
    line.append(font_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)
    if preview_path:
        line = Text("  ")
        line.append(preview_path)
        console.print(line)

    empty_style = "yellow" if empty > 0 else "green"
    skipped_style = "red" if skipped > 0 else "green"
    console.print(
        f"  {glyphs} glyphs {SYM_DOT} [{empty_style}]{empty} empty[/{empty_style}] "
        f"{SYM_DOT} [{skipped_style}]{skipped} skipped[/{skipped_style}]"
    )

    if avg_time_ms is not None:
        console.print(f"  {avg_time_ms:.1f}ms avg per glyph")


def print_skipped(skipped: list[tuple[str, str, str]]) -> None:
    """Print glyphs dropped under the skip policy.

    Args:
        skipped: (file name, stage, reason) per skipped glyph
    """
    if not skipped:
        return
    console.print(f"\n[yellow]{SYM_WARN} Skipped glyphs[/yellow]")
    for file_name, stage, reason in skipped:
        line = Text(f"  {file_name} ")
        line.append(f"[{stage}] ", style="dim")
        line.append(reason)
        console.print(line)


def print_error(message: str, details: str | None = None, hint: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
        hint: Optional remediation hint
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {escape(message)}")
    if details:
        console.print(f"  {escape(details)}")
    if hint:
        console.print(f"  [dim]{escape(hint)}[/dim]")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print("  No output file created")
