"""Unit tests for build orchestration."""

from unittest.mock import patch

import pytest
from shapely.errors import GEOSException

from strokefont.config import (
    GeometryConfig,
    LayoutConfig,
    ProcessingConfig,
    StrokeConfig,
    StrokeFontSettings,
    WidthPolicy,
)
from strokefont.core.geometry import face_to_polygon
from strokefont.core.pipeline import (
    MALFORMED_PATH,
    UNION_FAILURE,
    FontPipeline,
    measure_glyph,
)
from strokefont.core.unifier import PolygonUnifier
from strokefont.domain import NOTDEF_NAME, Point, Polyline
from strokefont.exceptions import ConfigurationError

ALPHABET = {
    "I": "M0.5 0L0.5 1",
    "L": "M0.2 0L0.2 1L0.7 1",
    "O": "M0.2 0.2L0.8 0.2L0.8 0.8L0.2 0.8Z",
    "g": "M0.3 0.3L0.7 0.3L0.7 1.2L0.3 1.2",
    " ": "",
}


def make_settings(**layout: object) -> StrokeFontSettings:
    return StrokeFontSettings(layout=LayoutConfig(**layout))


@pytest.fixture
def proportional_settings() -> StrokeFontSettings:
    return make_settings()


@pytest.fixture
def monospace_settings() -> StrokeFontSettings:
    return make_settings(width_policy=WidthPolicy.MONOSPACE)


class TestMeasureGlyph:
    """Tests for the picklable per-glyph worker."""

    def test_success_result(self) -> None:
        result = measure_glyph(
            "I",
            {"path": "M0.5 0L0.5 1"},
            StrokeConfig().model_dump(),
            GeometryConfig().model_dump(),
        )

        assert "error" not in result
        assert result["character"] == "I"
        assert len(result["outline"]["faces"]) == 1
        assert result["issues"] == []
        assert result["union_warning"] is None
        assert result["degenerate"] == 0
        assert result["duration_ms"] >= 0

    def test_polyline_source(self) -> None:
        polyline = Polyline((Point(0, 0), Point(1, 0)))

        result = measure_glyph(
            "-",
            {"polylines": [polyline.to_dict()]},
            StrokeConfig().model_dump(),
            GeometryConfig().model_dump(),
        )

        assert result["bbox"]["min_x"] == pytest.approx(-0.04)
        assert result["bbox"]["max_x"] == pytest.approx(1.04)

    def test_error_result(self) -> None:
        """Strict parsing failures come back as an error dictionary."""
        result = measure_glyph(
            "x",
            {"path": "M0 0L abc"},
            StrokeConfig().model_dump(),
            GeometryConfig(strict_paths=True).model_dump(),
        )

        assert result["character"] == "x"
        assert "Malformed path" in result["error"]
        assert "MalformedPathError" in result["traceback"]


class TestValidation:
    """Tests for configuration checks before the build."""

    def test_valid_settings(self, proportional_settings: StrokeFontSettings) -> None:
        FontPipeline(proportional_settings).validate()

    def test_zero_stroke_width_rejected(self) -> None:
        settings = StrokeFontSettings.model_construct(
            stroke=StrokeConfig.model_construct(width=0.0, cap_segments=8)
        )

        with pytest.raises(ConfigurationError, match="stroke width"):
            FontPipeline(settings).build(ALPHABET)

    def test_zero_upm_rejected(self) -> None:
        settings = StrokeFontSettings.model_construct(
            layout=LayoutConfig.model_construct(units_per_em=0)
        )

        with pytest.raises(ConfigurationError, match="units per em"):
            FontPipeline(settings).validate()


class TestBuild:
    """Tests for FontPipeline.build."""

    def test_notdef_first_and_sorted(self, proportional_settings: StrokeFontSettings) -> None:
        result = FontPipeline(proportional_settings).build(ALPHABET)

        names = [g.name for g in result.glyphs]
        assert names[0] == NOTDEF_NAME
        codes = [g.unicode for g in result.glyphs[1:]]
        assert codes == sorted(codes)
        assert len(result.glyphs) == len(ALPHABET) + 1

    def test_stats(self, proportional_settings: StrokeFontSettings) -> None:
        result = FontPipeline(proportional_settings).build(ALPHABET)

        assert result.stats.processed_count == len(ALPHABET)
        assert result.stats.empty_count == 1
        assert result.stats.error_count == 0
        assert result.warnings == []

    def test_empty_path_glyph(self, proportional_settings: StrokeFontSettings) -> None:
        """An empty path becomes an empty glyph with minimum bearings."""
        result = FontPipeline(proportional_settings).build({" ": ""})

        assert [g.name for g in result.glyphs] == [NOTDEF_NAME, "space"]
        space = result.glyphs[1]
        assert space.is_empty()
        assert space.advance_width == 100
        assert result.glyphs[0].advance_width == 500

    def test_empty_source(self, proportional_settings: StrokeFontSettings) -> None:
        result = FontPipeline(proportional_settings).build({})
        assert [g.name for g in result.glyphs] == [NOTDEF_NAME]

    def test_monospace_uniform_advance(self, monospace_settings: StrokeFontSettings) -> None:
        """Every glyph, including the undefined glyph, shares one advance."""
        result = FontPipeline(monospace_settings).build(ALPHABET)

        advances = {g.advance_width for g in result.glyphs}
        assert len(advances) == 1
        assert result.monospace_advance == advances.pop()

    def test_proportional_widths_differ(self, proportional_settings: StrokeFontSettings) -> None:
        result = FontPipeline(proportional_settings).build(ALPHABET)
        assert result.monospace_advance is None

    def test_descender_glyph_below_baseline(
        self, proportional_settings: StrokeFontSettings
    ) -> None:
        result = FontPipeline(proportional_settings).build(ALPHABET)
        by_name = {g.name: g for g in result.glyphs}

        assert by_name["g"].metrics.bbox.min_y == -160
        assert by_name["L"].metrics.bbox.min_y == 0

    def test_raised_glyphs_keep_height(self, proportional_settings: StrokeFontSettings) -> None:
        """Glyphs drawn above the baseline are not dropped onto it."""
        result = FontPipeline(proportional_settings).build(
            {
                "-": "M0 0.5L1 0.5",
                "'": "M0.5 0L0.5 0.3",
                "H": "M0.2 0L0.2 1M0.8 0L0.8 1M0.2 0.5L0.8 0.5",
            }
        )
        by_name = {g.name: g for g in result.glyphs}

        assert by_name["H"].metrics.bbox.min_y == 0
        assert abs(by_name["hyphen"].metrics.bbox.min_y - 400) <= 1
        assert by_name["quotesingle"].metrics.bbox.max_y == by_name["H"].metrics.bbox.max_y

    def test_fitted_faces_are_valid(self, proportional_settings: StrokeFontSettings) -> None:
        """Crossing strokes snap to the integer grid as valid polygons."""
        result = FontPipeline(proportional_settings).build(
            {
                "X": "M0.1 0L0.9 1M0.9 0L0.1 1M0.5 0L0.5001 1",
                "e": "M0.2 0.5L0.8 0.5L0.8 0.3L0.5 0.2L0.2 0.4L0.3 0.8L0.8 0.8",
            }
        )

        for glyph in result.glyphs:
            for face in glyph.outline.faces:
                assert face_to_polygon(face).is_valid

    def test_idempotent(self, proportional_settings: StrokeFontSettings) -> None:
        """Two builds of the same source produce identical glyphs."""
        first = FontPipeline(proportional_settings).build(ALPHABET)
        second = FontPipeline(proportional_settings).build(ALPHABET)

        assert [g.to_dict() for g in first.glyphs] == [g.to_dict() for g in second.glyphs]

    def test_polyline_source(self, proportional_settings: StrokeFontSettings) -> None:
        source = {"-": [Polyline((Point(0.2, 0.5), Point(0.8, 0.5)))]}

        result = FontPipeline(proportional_settings).build(source)

        assert result.glyphs[1].name == "hyphen"
        assert len(result.glyphs[1].outline.faces) == 1

    def test_progress_callback(self, proportional_settings: StrokeFontSettings) -> None:
        calls: list[tuple[int, int, str, bool]] = []

        FontPipeline(proportional_settings).build(
            ALPHABET, progress_callback=lambda *args: calls.append(args)
        )

        assert [c[0] for c in calls] == list(range(1, len(ALPHABET) + 1))
        assert all(c[1] == len(ALPHABET) for c in calls)
        assert all(c[3] for c in calls)


class TestErrorContainment:
    """Tests that one bad glyph never stops a build."""

    def test_multi_character_key(self, proportional_settings: StrokeFontSettings) -> None:
        result = FontPipeline(proportional_settings).build({"ab": "M0 0L1 1", "I": "M0.5 0L0.5 1"})

        assert [g.name for g in result.glyphs] == [NOTDEF_NAME, "I"]
        assert result.stats.error_count == 1
        assert result.stats.errors[0][0] == "ab"

    def test_strict_parse_error(self) -> None:
        settings = StrokeFontSettings(geometry=GeometryConfig(strict_paths=True))

        result = FontPipeline(settings).build({"x": "M0 0L abc", "I": "M0.5 0L0.5 1"})

        assert [g.name for g in result.glyphs] == [NOTDEF_NAME, "I"]
        assert result.stats.error_count == 1

    def test_malformed_path_warnings(self, proportional_settings: StrokeFontSettings) -> None:
        result = FontPipeline(proportional_settings).build({"x": "M0 0L abc"})

        assert len(result.warnings) == 2
        assert all(w.kind == MALFORMED_PATH for w in result.warnings)
        assert all(w.character == "x" for w in result.warnings)
        assert result.stats.malformed_paths == 1
        assert result.stats.error_count == 0

    def test_union_fallback_warning(self, proportional_settings: StrokeFontSettings) -> None:
        """A union failure keeps the glyph with unmerged capsules."""
        with patch.object(PolygonUnifier, "_union", side_effect=GEOSException("boom")):
            result = FontPipeline(proportional_settings).build({"L": ALPHABET["L"]})

        glyph = result.glyphs[1]
        assert glyph.name == "L"
        assert not glyph.outline.merged
        assert len(glyph.outline.faces) == 2
        assert [w.kind for w in result.warnings] == [UNION_FAILURE]
        assert result.stats.fallback_count == 1

    def test_degenerate_segments_counted(
        self, proportional_settings: StrokeFontSettings
    ) -> None:
        result = FontPipeline(proportional_settings).build({"I": "M0.5 0L0.5 0L0.5 1"})

        assert result.stats.degenerate_segments == 1
        assert len(result.glyphs[1].outline.faces) == 1


class TestParallelMeasure:
    """Tests for measuring in worker processes."""

    def test_parallel_matches_serial(self) -> None:
        serial = FontPipeline(StrokeFontSettings()).build(ALPHABET)
        parallel = FontPipeline(
            StrokeFontSettings(processing=ProcessingConfig(max_workers=2))
        ).build(ALPHABET)

        assert [g.to_dict() for g in parallel.glyphs] == [g.to_dict() for g in serial.glyphs]
