"""Build orchestration for the stroke-to-outline pipeline.

This module coordinates the two-pass build:

1. Measure: parse, expand and unify every glyph independently, optionally in
   worker processes.
2. Reduce: compute the shared monospace advance and baseline from all
   measurements.
3. Lay out: fit every glyph into font units and order the result.

Key components:
- measure_glyph: Top-level picklable function for parallel execution
- FontPipeline: Main orchestrator class
"""

import time
import traceback
from collections.abc import Callable, Iterable, Mapping, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

import structlog

from strokefont.config import GeometryConfig, StrokeConfig, StrokeFontSettings
from strokefont.core.expander import StrokeExpander
from strokefont.core.metrics import MetricsFitter, order_glyphs
from strokefont.core.parser import PathParser
from strokefont.core.unifier import PolygonUnifier
from strokefont.domain import BoundingBox, Glyph, Outline, Polyline
from strokefont.exceptions import ConfigurationError
from strokefont.utils import BuildLogger, BuildStats

PathSource = str | Sequence[Polyline]

MALFORMED_PATH = "MalformedPath"
UNION_FAILURE = "UnionFailure"


def measure_glyph(
    character: str,
    source: dict[str, Any],
    stroke_dict: dict[str, Any],
    geometry_dict: dict[str, Any],
) -> dict[str, Any]:
    """Parse, expand and unify a single glyph.

    Top-level function designed to be picklable for use with
    ProcessPoolExecutor. Works entirely on serialized inputs and outputs.

    Args:
        character: Character being built
        source: ``{"path": str}`` or ``{"polylines": [polyline dicts]}``
        stroke_dict: Serialized stroke configuration
        geometry_dict: Serialized geometry configuration

    Returns:
        Dictionary containing either:
        - Success: {"character", "outline", "bbox", "issues", "union_warning",
          "degenerate", "duration_ms"}
        - Error: {"error", "character", "traceback", "duration_ms"}
    """
    start_time = time.time()

    try:
        stroke = StrokeConfig(**stroke_dict)
        geometry = GeometryConfig(**geometry_dict)

        if "polylines" in source:
            polylines = [Polyline.from_dict(p) for p in source["polylines"]]
            issues: list[str] = []
        else:
            parser = PathParser(
                flip_y=geometry.flip_y,
                flatten_tolerance=geometry.flatten_tolerance,
                strict=geometry.strict_paths,
            )
            parsed = parser.parse(source["path"], character=character)
            polylines = parsed.polylines
            issues = parsed.issues

        expander = StrokeExpander(stroke.width, stroke.cap_segments)
        capsules = expander.expand_all(polylines)
        result = PolygonUnifier().unify(capsules, character=character)

        return {
            "character": character,
            "outline": result.outline.to_dict(),
            "bbox": result.bbox.to_dict(),
            "issues": issues,
            "union_warning": result.warning,
            "degenerate": expander.degenerate_count,
            "duration_ms": (time.time() - start_time) * 1000,
        }

    except Exception as e:
        return {
            "error": str(e),
            "character": character,
            "traceback": traceback.format_exc(),
            "duration_ms": (time.time() - start_time) * 1000,
        }


@dataclass(frozen=True)
class MeasuredGlyph:
    """A glyph after the measure pass, still in normalized space."""

    character: str
    outline: Outline
    bbox: BoundingBox


@dataclass(frozen=True)
class GlyphWarning:
    """A recoverable problem surfaced to the caller.

    Attributes:
        character: Affected character
        kind: MalformedPath or UnionFailure
        message: Description
    """

    character: str
    kind: str
    message: str


@dataclass
class BuildResult:
    """Output of a build.

    Attributes:
        glyphs: Finished glyphs, undefined glyph first, then by code point
        stats: Run statistics
        warnings: Recoverable per-glyph problems
    """

    glyphs: list[Glyph]
    stats: BuildStats
    warnings: list[GlyphWarning] = field(default_factory=list)

    @property
    def monospace_advance(self) -> int | None:
        """Shared advance width if all glyphs have the same advance."""
        advances = {g.advance_width for g in self.glyphs}
        return advances.pop() if len(advances) == 1 else None


class FontPipeline:
    """Orchestrates the stroke-to-outline build.

    Example:
        settings = StrokeFontSettings()
        pipeline = FontPipeline(settings)
        result = pipeline.build({"I": "M0.5 0L0.5 1"})
        for glyph in result.glyphs:
            print(glyph.name, glyph.advance_width)
    """

    def __init__(
        self,
        config: StrokeFontSettings,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Build settings
            logger: Structured logger (module logger if None)
        """
        self.config = config
        self.logger = logger if logger is not None else structlog.get_logger("strokefont")

    def validate(self) -> None:
        """Reject configurations no glyph could be built with.

        Settings normally arrive validated by pydantic; this also guards
        settings built with ``model_construct``.

        Raises:
            ConfigurationError: On a structurally impossible configuration
        """
        stroke = self.config.stroke
        layout = self.config.layout
        if not stroke.width > 0:
            raise ConfigurationError(f"stroke width must be positive, got {stroke.width}")
        if stroke.cap_segments < 2:
            raise ConfigurationError(f"cap segments must be at least 2, got {stroke.cap_segments}")
        if layout.units_per_em <= 0:
            raise ConfigurationError(f"units per em must be positive, got {layout.units_per_em}")
        if layout.ascender <= layout.descender:
            raise ConfigurationError("ascender must be greater than descender")
        if self.config.processing.max_workers < 1:
            raise ConfigurationError("max workers must be at least 1")

    def build(
        self,
        source: Mapping[str, PathSource],
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> BuildResult:
        """Build glyphs for every character of a glyph source.

        Args:
            source: Mapping of character to path string or polylines
            progress_callback: Optional callback(completed, total, character,
                success) called after each glyph is measured

        Returns:
            BuildResult with ordered glyphs, statistics and warnings

        Raises:
            ConfigurationError: Before any glyph is processed, if the
                configuration is unusable
        """
        self.validate()

        stats = BuildStats()
        stats.start_time = time.time()
        build_logger = BuildLogger(self.logger, stats)
        warnings: list[GlyphWarning] = []

        self.logger.info(
            "Starting build",
            glyph_count=len(source),
            width_policy=self.config.layout.width_policy.value,
            stroke_width=self.config.stroke.width,
        )

        measured = self.measure(source, build_logger, warnings, progress_callback)

        fitter = MetricsFitter(self.config.layout)
        advance: int | None = None
        if fitter.is_monospace:
            advance = fitter.monospace_advance(m.bbox for m in measured)
            self.logger.info("Monospace advance computed", advance_width=advance)
        baseline = fitter.baseline_offset((m.character, m.bbox) for m in measured)
        self.logger.info("Baseline computed", baseline=baseline)

        glyphs = [fitter.notdef_glyph(fitter.notdef_advance(advance))]
        for item in measured:
            try:
                glyphs.append(
                    fitter.fit(item.character, item.outline, item.bbox, advance, baseline)
                )
            except Exception as e:
                build_logger.log_glyph_error(item.character, str(e), traceback.format_exc())

        stats.end_time = time.time()
        self.logger.info(
            "Build complete",
            glyphs=len(glyphs),
            processed=stats.processed_count,
            empty=stats.empty_count,
            fallbacks=stats.fallback_count,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return BuildResult(glyphs=order_glyphs(glyphs), stats=stats, warnings=warnings)

    def measure(
        self,
        source: Mapping[str, PathSource],
        build_logger: BuildLogger,
        warnings: list[GlyphWarning],
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> list[MeasuredGlyph]:
        """Run the measure pass over every character.

        Results keep the input order whether or not workers are used.
        Characters that fail are logged and left out.
        """
        tasks: dict[str, dict[str, Any]] = {}
        for character, path in source.items():
            if len(character) != 1:
                build_logger.log_glyph_error(
                    character, "glyph source keys must be single characters"
                )
                continue
            tasks[character] = _serialize_source(path)

        stroke_dict = self.config.stroke.model_dump()
        geometry_dict = self.config.geometry.model_dump()
        max_workers = self.config.processing.max_workers

        if max_workers > 1 and len(tasks) > 1:
            results = self._measure_parallel(
                tasks, stroke_dict, geometry_dict, max_workers, progress_callback
            )
        else:
            results = {}
            for completed, (character, task) in enumerate(tasks.items(), start=1):
                build_logger.log_glyph_start(character)
                results[character] = measure_glyph(character, task, stroke_dict, geometry_dict)
                if progress_callback is not None:
                    progress_callback(
                        completed, len(tasks), character, "error" not in results[character]
                    )

        measured: list[MeasuredGlyph] = []
        for character in tasks:
            result = results[character]
            if "error" in result:
                build_logger.log_glyph_error(character, result["error"], result.get("traceback"))
                continue
            measured.append(self._collect(result, build_logger, warnings))

        return measured

    def _collect(
        self,
        result: dict[str, Any],
        build_logger: BuildLogger,
        warnings: list[GlyphWarning],
    ) -> MeasuredGlyph:
        """Turn a successful measure_glyph result into a MeasuredGlyph."""
        character = result["character"]
        outline = Outline.from_dict(result["outline"])
        build_logger.stats.degenerate_segments += result["degenerate"]

        if result["issues"]:
            build_logger.log_malformed_path(character, result["issues"])
            warnings.extend(
                GlyphWarning(character, MALFORMED_PATH, issue) for issue in result["issues"]
            )
        if result["union_warning"]:
            build_logger.log_union_fallback(character, result["union_warning"])
            warnings.append(GlyphWarning(character, UNION_FAILURE, result["union_warning"]))
        if outline.is_empty():
            build_logger.log_glyph_empty(character)

        build_logger.log_glyph_complete(character, len(outline.faces), result["duration_ms"])
        return MeasuredGlyph(
            character=character,
            outline=outline,
            bbox=BoundingBox.from_dict(result["bbox"]),
        )

    def _measure_parallel(
        self,
        tasks: dict[str, dict[str, Any]],
        stroke_dict: dict[str, Any],
        geometry_dict: dict[str, Any],
        max_workers: int,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> dict[str, dict[str, Any]]:
        """Measure glyphs in worker processes.

        Returns:
            Results keyed by character
        """
        results: dict[str, dict[str, Any]] = {}
        total = len(tasks)

        self.logger.info(
            "Starting parallel measurement",
            glyph_count=total,
            max_workers=max_workers,
        )

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            pending = {
                executor.submit(measure_glyph, character, task, stroke_dict, geometry_dict): character
                for character, task in tasks.items()
            }

            for completed, future in enumerate(as_completed(pending), start=1):
                character = pending[future]
                try:
                    results[character] = future.result()
                except Exception as e:
                    # Executor-level error (e.g. a worker died)
                    results[character] = {
                        "error": str(e),
                        "character": character,
                        "traceback": traceback.format_exc(),
                        "duration_ms": 0.0,
                    }

                if progress_callback is not None:
                    progress_callback(completed, total, character, "error" not in results[character])

        return results


def _serialize_source(path: PathSource | Iterable[Polyline]) -> dict[str, Any]:
    if isinstance(path, str):
        return {"path": path}
    return {"polylines": [p.to_dict() for p in path]}
