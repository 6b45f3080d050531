"""Core processing for fontcaster.

This module contains the path grammar and glyph/font assembly:

- Path tokenizing (command letters, operand groups, implicit repetition)
- Path interpretation (absolute/relative resolution into drawing ops)
- Glyph building (replaying drawing ops onto fontTools pens)
- Font assembly (.notdef seeding, codepoint assignment, uniqueness)
- Pipeline orchestration (per-glyph state machine, stage timeouts)

Key classes:
- PathCommandParser: Splits path strings into raw commands
- PathInterpreter: Resolves raw commands into absolute drawing ops
- GlyphBuilder: Builds glyph outlines from drawing ops
- FontAssembler: Accumulates glyphs into a font document
- PipelineOrchestrator: Runs the end-to-end conversion
"""

from fontcaster.core.assembler import FontAssembler, resolve_codepoint
from fontcaster.core.builder import GlyphBuilder, replay_ops
from fontcaster.core.interpreter import InterpreterState, PathInterpreter, interpret, step
from fontcaster.core.parser import PathCommandParser, parse_path
from fontcaster.core.pipeline import (
    GlyphJob,
    GlyphState,
    PipelineOrchestrator,
    PipelineResult,
    Stage,
    StageRunner,
)

__all__ = [
    # Assembly
    "FontAssembler",
    "GlyphBuilder",
    # Pipeline
    "GlyphJob",
    "GlyphState",
    # Path grammar
    "InterpreterState",
    "PathCommandParser",
    "PathInterpreter",
    "PipelineOrchestrator",
    "PipelineResult",
    "Stage",
    "StageRunner",
    "interpret",
    "parse_path",
    "replay_ops",
    "resolve_codepoint",
    "step",
]
