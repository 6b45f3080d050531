"""Exception hierarchy for fontcaster."""

from pathlib import Path


class FontcasterError(Exception):
    """Base exception for all fontcaster errors."""

    pass


class PathSyntaxError(FontcasterError):
    """Errors related to path description strings."""

    pass


class MalformedPathError(PathSyntaxError):
    """A path chunk whose operands cannot be interpreted."""

    def __init__(self, chunk: str, reason: str, offset: int | None = None) -> None:
        self.chunk = chunk
        self.reason = reason
        self.offset = offset
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"Malformed path chunk '{chunk}'{where}: {reason}")


class UnsupportedCommandError(MalformedPathError):
    """A command letter outside the supported drawing alphabet."""

    def __init__(self, letter: str, chunk: str, offset: int | None = None) -> None:
        self.letter = letter
        super().__init__(chunk, f"unsupported command '{letter}'", offset)


class GlyphError(FontcasterError):
    """Errors related to glyph construction."""

    pass


class EmptyGlyphError(GlyphError):
    """The tracer returned no usable path for a glyph.

    Recoverable: the glyph is still added with an empty outline.
    """

    def __init__(self, glyph_name: str, reason: str = "no path data") -> None:
        self.glyph_name = glyph_name
        self.reason = reason
        super().__init__(f"Glyph '{glyph_name}' is empty: {reason}")


class DuplicateGlyphError(GlyphError):
    """Two glyphs resolve to the same codepoint or name."""

    def __init__(
        self,
        existing: str,
        incoming: str,
        key: str,
        existing_source: Path | None = None,
        incoming_source: Path | None = None,
    ) -> None:
        self.existing = existing
        self.incoming = incoming
        self.key = key
        self.existing_source = existing_source
        self.incoming_source = incoming_source
        first = existing_source.name if existing_source else existing
        second = incoming_source.name if incoming_source else incoming
        super().__init__(
            f"Glyphs '{existing}' ({first}) and '{incoming}' ({second}) "
            f"both resolve to {key}"
        )


class CodepointResolutionError(GlyphError):
    """A glyph identity cannot be mapped to a single codepoint."""

    def __init__(self, glyph_name: str, reason: str) -> None:
        self.glyph_name = glyph_name
        self.reason = reason
        super().__init__(f"Cannot assign codepoint to '{glyph_name}': {reason}")


class CollaboratorFailure(FontcasterError):
    """An external collaborator (rasterizer, tracer, encoder) failed."""

    def __init__(self, stage: str, reason: str, path: Path | None = None) -> None:
        self.stage = stage
        self.reason = reason
        self.path = path
        target = f" for '{path}'" if path is not None else ""
        super().__init__(f"{stage} failed{target}: {reason}")


class StageTimeoutError(CollaboratorFailure):
    """A collaborator did not complete within the stage timeout."""

    def __init__(self, stage: str, timeout_s: float, path: Path | None = None) -> None:
        self.timeout_s = timeout_s
        super().__init__(stage, f"timed out after {timeout_s:g}s", path)


class AssemblyError(FontcasterError):
    """Errors related to font assembly."""

    pass


class AssemblerClosedError(AssemblyError):
    """The font assembler was used after finalize()."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation}: font assembler is already finalized")


class PipelineError(FontcasterError):
    """Errors raised by the pipeline orchestrator."""

    pass


class SourceDirectoryError(PipelineError):
    """The source directory is missing or not a directory."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid source directory '{path}': {reason}")


class InvalidTransitionError(PipelineError):
    """A glyph job was moved to a state it cannot reach."""

    def __init__(self, glyph_name: str, current: str, target: str) -> None:
        self.glyph_name = glyph_name
        self.current = current
        self.target = target
        super().__init__(
            f"Glyph '{glyph_name}' cannot move from {current} to {target}"
        )


class GlyphFaultError(PipelineError):
    """A glyph failed in some pipeline stage and the run was aborted."""

    def __init__(self, source: Path, stage: str, cause: Exception) -> None:
        self.source = source
        self.stage = stage
        self.cause = cause
        super().__init__(f"'{source.name}' failed during {stage}: {cause}")
