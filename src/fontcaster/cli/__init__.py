"""Command-line interface for fontcaster.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bar while glyphs are built
- Verbose/quiet output modes
- Structured error reporting with per-stage hints and exit codes
"""

from fontcaster.cli.app import ExitCode, cli, main

__all__ = ["ExitCode", "cli", "main"]
