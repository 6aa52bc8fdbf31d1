"""Logging utilities for Strokefont."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class BuildStats:
    """Statistics from a build run."""

    processed_count: int = 0
    empty_count: int = 0
    fallback_count: int = 0
    error_count: int = 0
    degenerate_segments: int = 0
    malformed_paths: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    glyph_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate build duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_glyph_time_ms(self) -> float | None:
        """Average per-glyph measurement time."""
        if not self.glyph_timings_ms:
            return None
        return sum(self.glyph_timings_ms) / len(self.glyph_timings_ms)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
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

    logger = structlog.get_logger("strokefont")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class BuildLogger:
    """Logger for tracking build progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, stats: BuildStats | None = None) -> None:
        self._logger = logger
        self._stats = stats if stats is not None else BuildStats()

    def log_glyph_start(self, character: str) -> None:
        """Log start of glyph processing."""
        self._logger.debug("Processing glyph", character=character)

    def log_glyph_complete(self, character: str, faces: int, duration_ms: float) -> None:
        """Log successful glyph measurement."""
        self._logger.info(
            "Glyph processed",
            character=character,
            faces=faces,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.glyph_timings_ms.append(duration_ms)

    def log_glyph_empty(self, character: str) -> None:
        """Log a glyph with no ink."""
        self._logger.debug("Empty glyph", character=character)
        self._stats.empty_count += 1

    def log_union_fallback(self, character: str, reason: str) -> None:
        """Log a glyph emitted with unmerged capsules."""
        self._logger.warning("Union fallback", character=character, reason=reason)
        self._stats.fallback_count += 1

    def log_malformed_path(self, character: str, issues: list[str]) -> None:
        """Log skipped path data for a glyph."""
        self._logger.warning("Malformed path data", character=character, issues=issues)
        self._stats.malformed_paths += 1

    def log_glyph_error(
        self,
        character: str,
        error: str,
        traceback: str | None = None,
    ) -> None:
        """Log glyph processing error."""
        self._logger.error(
            "Glyph processing failed",
            character=character,
            error=error,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((character, error))

    @property
    def stats(self) -> BuildStats:
        """Get current build statistics."""
        return self._stats
