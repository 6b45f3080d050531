"""Logging utilities for fontcaster."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from a pipeline run."""

    discovered_count: int = 0
    appended_count: int = 0
    empty_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    glyph_times_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_glyph_time_ms(self) -> float | None:
        """Average time per appended glyph."""
        if not self.glyph_times_ms:
            return None
        return sum(self.glyph_times_ms) / len(self.glyph_times_ms)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in list(root_logger.handlers):
        if getattr(handler, "_fontcaster", False):
            root_logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        file_handler._fontcaster = True  # type: ignore[attr-defined]
        root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        console_handler._fontcaster = True  # type: ignore[attr-defined]
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("fontcaster")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking pipeline progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_glyph_start(self, glyph_name: str, source: Path) -> None:
        """Log start of glyph processing."""
        self._logger.debug("Processing glyph", glyph=glyph_name, source=str(source))

    def log_stage(self, glyph_name: str, stage: str, duration_ms: float) -> None:
        """Log completion of one pipeline stage for a glyph."""
        self._logger.debug(
            "Stage complete",
            glyph=glyph_name,
            stage=stage,
            duration_ms=round(duration_ms, 2),
        )

    def log_glyph_appended(
        self,
        glyph_name: str,
        codepoint: int | None,
        op_count: int,
        duration_ms: float,
    ) -> None:
        """Log a glyph added to the font."""
        self._logger.info(
            "Glyph appended",
            glyph=glyph_name,
            codepoint=f"U+{codepoint:04X}" if codepoint is not None else None,
            ops=op_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.appended_count += 1
        self._stats.glyph_times_ms.append(duration_ms)

    def log_glyph_empty(self, glyph_name: str, reason: str) -> None:
        """Log a glyph that was added without any outline."""
        self._logger.info("Glyph has no outline", glyph=glyph_name, reason=reason)
        self._stats.empty_count += 1

    def log_glyph_skipped(self, glyph_name: str, stage: str, error: Exception) -> None:
        """Log a glyph dropped from the font after a recoverable fault."""
        self._logger.warning(
            "Glyph skipped",
            glyph=glyph_name,
            stage=stage,
            error=str(error),
            error_type=type(error).__name__,
        )
        self._stats.skipped_count += 1
        self._stats.errors.append((glyph_name, str(error)))

    def log_glyph_fault(
        self,
        glyph_name: str,
        stage: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log a glyph fault that aborts the run."""
        self._logger.error(
            "Glyph processing failed",
            glyph=glyph_name,
            stage=stage,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((glyph_name, str(error)))

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
