"""Pipeline orchestration: source directory to font file.

Each source document is one glyph job that moves through

    PENDING -> RASTERIZED -> TRACED -> PARSED -> APPENDED

or ends in FAULTED (run aborted) or SKIPPED (glyph left out). Jobs run
strictly one after another in sorted file-name order, and each collaborator
call finishes (or times out) before the next stage starts.

Key components:
- GlyphState / GlyphJob: per-glyph state machine
- StageRunner: runs collaborator calls with a per-stage timeout
- PipelineOrchestrator: discovers sources, drives jobs, encodes the font
"""

import shutil
import tempfile
import time
import traceback
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, TypeVar

from fontcaster.config import FailurePolicy, FontcasterSettings
from fontcaster.core.assembler import FontAssembler
from fontcaster.core.builder import GlyphBuilder
from fontcaster.core.interpreter import PathInterpreter
from fontcaster.domain.glyph import FontDocument, GlyphOutline
from fontcaster.domain.ops import DrawingOp
from fontcaster.exceptions import (
    CollaboratorFailure,
    DuplicateGlyphError,
    EmptyGlyphError,
    FontcasterError,
    GlyphFaultError,
    InvalidTransitionError,
    SourceDirectoryError,
    StageTimeoutError,
)
from fontcaster.io import FontEncoder, PopplerRasterizer, PotraceTracer, extract_path_data
from fontcaster.io.encoder import FontWriter
from fontcaster.io.preview import write_preview
from fontcaster.utils import ProcessingLogger, ProcessingStats, configure_logging

T = TypeVar("T")


class Rasterizer(Protocol):
    def rasterize(self, document: Path, output_dir: Path) -> Path: ...


class Tracer(Protocol):
    def trace(self, image_path: Path) -> str: ...


class Encoder(Protocol):
    def encode(self, document: FontDocument) -> bytes: ...


class Stage(str, Enum):
    """Pipeline stages, used in diagnostics."""

    RASTERIZE = "rasterize"
    TRACE = "trace"
    PARSE = "parse"
    APPEND = "append"
    ENCODE = "encode"


class GlyphState(Enum):
    """Lifecycle of one glyph job."""

    PENDING = "pending"
    RASTERIZED = "rasterized"
    TRACED = "traced"
    PARSED = "parsed"
    APPENDED = "appended"
    FAULTED = "faulted"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (GlyphState.APPENDED, GlyphState.FAULTED, GlyphState.SKIPPED)


_NEXT_STATE: dict[GlyphState, GlyphState] = {
    GlyphState.PENDING: GlyphState.RASTERIZED,
    GlyphState.RASTERIZED: GlyphState.TRACED,
    GlyphState.TRACED: GlyphState.PARSED,
    GlyphState.PARSED: GlyphState.APPENDED,
}


@dataclass
class GlyphJob:
    """One source document on its way to becoming a glyph."""

    source: Path
    name: str
    state: GlyphState = GlyphState.PENDING
    image_path: Path | None = None
    path_data: str | None = None
    ops: list[DrawingOp] = field(default_factory=list)
    outline: GlyphOutline | None = None
    fault: Exception | None = None
    fault_stage: Stage | None = None

    @classmethod
    def for_source(cls, source: Path) -> "GlyphJob":
        """Create a job whose glyph identity is the file stem."""
        return cls(source=source, name=source.stem)

    def advance(self, target: GlyphState) -> None:
        """Move to the next state.

        Raises:
            InvalidTransitionError: If target is not the next state
        """
        if _NEXT_STATE.get(self.state) != target:
            raise InvalidTransitionError(self.name, self.state.value, target.value)
        self.state = target

    def fail(self, stage: Stage, error: Exception) -> None:
        """Move to FAULTED, recording the failing stage and error.

        Raises:
            InvalidTransitionError: If the job is already terminal
        """
        self._end(GlyphState.FAULTED, stage, error)

    def skip(self, stage: Stage, error: Exception) -> None:
        """Move to SKIPPED, recording the failing stage and error.

        Raises:
            InvalidTransitionError: If the job is already terminal
        """
        self._end(GlyphState.SKIPPED, stage, error)

    def _end(self, target: GlyphState, stage: Stage, error: Exception) -> None:
        if self.state.is_terminal:
            raise InvalidTransitionError(self.name, self.state.value, target.value)
        self.state = target
        self.fault = error
        self.fault_stage = stage


class StageRunner:
    """Runs collaborator calls on a worker thread with a timeout.

    A call that times out raises StageTimeoutError. The worker that is still
    busy with it is abandoned and later calls get a fresh one.
    """

    def __init__(self, timeout_s: float) -> None:
        self.timeout_s = timeout_s
        self._executor: ThreadPoolExecutor | None = None

    def call(
        self,
        stage: Stage,
        func: Callable[..., T],
        *args: Any,
        path: Path | None = None,
    ) -> T:
        """Call func(*args) and wait for it.

        Raises:
            StageTimeoutError: If the call does not finish in time
            CollaboratorFailure: If the call raises a non-fontcaster error
            FontcasterError: Re-raised unchanged from the call
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fontcaster")

        future = self._executor.submit(func, *args)
        try:
            return future.result(timeout=self.timeout_s)
        except FutureTimeoutError as e:
            future.cancel()
            self._abandon()
            raise StageTimeoutError(stage.value, self.timeout_s, path) from e
        except FontcasterError:
            raise
        except Exception as e:
            raise CollaboratorFailure(stage.value, str(e) or type(e).__name__, path) from e

    def _abandon(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def close(self) -> None:
        """Release the worker thread."""
        self._abandon()

    def __enter__(self) -> "StageRunner":
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        self.close()


@dataclass
class PipelineResult:
    """Outcome of a pipeline run."""

    document: FontDocument
    font_data: bytes
    font_path: Path
    preview_path: Path | None
    jobs: list[GlyphJob]
    stats: ProcessingStats

    @property
    def appended(self) -> list[GlyphJob]:
        return [job for job in self.jobs if job.state == GlyphState.APPENDED]

    @property
    def skipped(self) -> list[GlyphJob]:
        return [job for job in self.jobs if job.state == GlyphState.SKIPPED]


class PipelineOrchestrator:
    """Converts a directory of source documents into a font.

    Manages the complete workflow:
    1. Discover source documents (sorted by file name)
    2. For each: rasterize, trace, parse, build and append the glyph
    3. Finalize and encode the font
    4. Write the font and the HTML preview

    Example:
        settings = FontcasterSettings()
        orchestrator = PipelineOrchestrator(settings, Path("letters"))
        result = orchestrator.run()
        print(result.font_path)
    """

    def __init__(
        self,
        config: FontcasterSettings,
        source_dir: Path,
        rasterizer: Rasterizer | None = None,
        tracer: Tracer | None = None,
        encoder: Encoder | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Application settings
            source_dir: Directory holding one source document per glyph
            rasterizer: Document rasterizer (default: pdftocairo)
            tracer: Bitmap tracer (default: potrace)
            encoder: Font encoder (default: fontTools FontBuilder)
        """
        self.config = config
        self.source_dir = source_dir
        pipeline = config.pipeline

        self.rasterizer = rasterizer or PopplerRasterizer(
            size=pipeline.raster_size,
            timeout_s=pipeline.stage_timeout_s,
        )
        self.tracer = tracer or PotraceTracer(
            threshold=pipeline.threshold,
            turdsize=pipeline.turdsize,
            flip_y=pipeline.flip_y,
        )
        self.encoder = encoder or FontEncoder()
        self.interpreter = PathInterpreter.with_policy(config.path.unsupported_commands)

        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=config.logging.quiet,
        )
        self.processing_logger = ProcessingLogger(self.logger)

    @property
    def output_dir(self) -> Path:
        """Directory receiving the font and preview."""
        return self.config.pipeline.output_dir or self.source_dir

    def discover(self) -> list[Path]:
        """List source documents in processing order.

        Raises:
            SourceDirectoryError: If the source directory is unusable
        """
        if not self.source_dir.exists():
            raise SourceDirectoryError(self.source_dir, "does not exist")
        if not self.source_dir.is_dir():
            raise SourceDirectoryError(self.source_dir, "not a directory")

        extension = self.config.pipeline.source_extension
        return sorted(
            (
                path for path in self.source_dir.iterdir()
                if path.is_file() and path.suffix.lower() == extension
            ),
            key=lambda path: path.name,
        )

    def run(
        self,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> PipelineResult:
        """Run the full pipeline.

        Args:
            progress_callback: Optional callback(completed, total, glyph_name,
                success) invoked after each glyph

        Returns:
            PipelineResult with the document, output paths and statistics

        Raises:
            SourceDirectoryError: If the source directory is unusable
            GlyphFaultError: If a glyph faults under the ABORT policy
            DuplicateGlyphError: If two glyphs share a name or codepoint
            CollaboratorFailure: If encoding or writing the font fails
        """
        stats = self.processing_logger.stats
        stats.start_time = time.time()

        sources = self.discover()
        stats.discovered_count = len(sources)
        self.logger.info(
            "Starting pipeline",
            source_dir=str(self.source_dir),
            glyphs=len(sources),
            failure_policy=self.config.pipeline.failure_policy.value,
        )

        font_config = self.config.font
        assembler = FontAssembler(font_config)
        builder = GlyphBuilder(
            advance_width=font_config.default_advance_width,
            left_side_bearing=font_config.left_side_bearing,
        )
        jobs: list[GlyphJob] = []

        with (
            StageRunner(self.config.pipeline.stage_timeout_s) as runner,
            tempfile.TemporaryDirectory(prefix="fontcaster-") as raster_dir,
        ):
            for index, source in enumerate(sources, start=1):
                job = GlyphJob.for_source(source)
                jobs.append(job)
                self._process_job(job, assembler, builder, runner, Path(raster_dir))
                if progress_callback is not None:
                    progress_callback(
                        index, len(sources), job.name, job.state == GlyphState.APPENDED
                    )

            document = assembler.finalize()
            font_data = runner.call(Stage.ENCODE, self.encoder.encode, document)

        font_path, preview_path = self._write_outputs(document, font_data)

        stats.end_time = time.time()
        self.logger.info(
            "Pipeline complete",
            font=str(font_path),
            glyphs=len(document),
            appended=stats.appended_count,
            empty=stats.empty_count,
            skipped=stats.skipped_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return PipelineResult(
            document=document,
            font_data=font_data,
            font_path=font_path,
            preview_path=preview_path,
            jobs=jobs,
            stats=stats,
        )

    def _process_job(
        self,
        job: GlyphJob,
        assembler: FontAssembler,
        builder: GlyphBuilder,
        runner: StageRunner,
        raster_dir: Path,
    ) -> None:
        """Drive one job to APPENDED, SKIPPED or FAULTED."""
        start_time = time.time()
        stage = Stage.RASTERIZE
        empty_reason: str | None = None
        self.processing_logger.log_glyph_start(job.name, job.source)

        try:
            job.image_path = runner.call(
                stage, self.rasterizer.rasterize, job.source, raster_dir, path=job.source
            )
            self._keep_raster(job.image_path)
            job.advance(GlyphState.RASTERIZED)
            self._log_stage(job, stage, start_time)

            stage = Stage.TRACE
            svg = runner.call(stage, self.tracer.trace, job.image_path, path=job.image_path)
            try:
                job.path_data = extract_path_data(svg, job.name)
            except EmptyGlyphError as e:
                job.path_data = ""
                empty_reason = e.reason
            job.advance(GlyphState.TRACED)
            self._log_stage(job, stage, start_time)

            stage = Stage.PARSE
            job.ops, _cursor = self.interpreter.run(job.path_data)
            job.advance(GlyphState.PARSED)
            self._log_stage(job, stage, start_time)

            stage = Stage.APPEND
            outline = builder.build(job.ops, job.name, source=job.source)
            job.outline = assembler.append(outline)
            job.advance(GlyphState.APPENDED)

        except DuplicateGlyphError as e:
            job.fail(stage, e)
            self.processing_logger.log_glyph_fault(job.name, stage.value, e)
            raise
        except FontcasterError as e:
            if self.config.pipeline.failure_policy == FailurePolicy.SKIP:
                job.skip(stage, e)
                self.processing_logger.log_glyph_skipped(job.name, stage.value, e)
                return
            job.fail(stage, e)
            self.processing_logger.log_glyph_fault(
                job.name, stage.value, e, traceback=traceback.format_exc()
            )
            raise GlyphFaultError(job.source, stage.value, e) from e

        if job.outline.is_empty():
            self.processing_logger.log_glyph_empty(job.name, empty_reason or "no drawing ops")
        self.processing_logger.log_glyph_appended(
            job.name,
            job.outline.codepoint,
            len(job.ops),
            (time.time() - start_time) * 1000,
        )

    def _log_stage(self, job: GlyphJob, stage: Stage, start_time: float) -> None:
        self.processing_logger.log_stage(job.name, stage.value, (time.time() - start_time) * 1000)

    def _keep_raster(self, image_path: Path) -> None:
        keep_dir = self.config.pipeline.keep_rasters_dir
        if keep_dir is None:
            return
        try:
            keep_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(image_path, keep_dir / image_path.name)
        except OSError as e:
            raise CollaboratorFailure(Stage.RASTERIZE.value, f"cannot keep raster: {e}", image_path) from e

    def _write_outputs(self, document: FontDocument, font_data: bytes) -> tuple[Path, Path | None]:
        font_path = FontWriter(self.output_dir).write(document, font_data)
        if not self.config.pipeline.write_preview:
            return font_path, None
        try:
            preview_path = write_preview(document, font_path, self.output_dir)
        except OSError as e:
            raise CollaboratorFailure("write", str(e), self.output_dir) from e
        return font_path, preview_path
