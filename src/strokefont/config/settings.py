"""Configuration settings for Strokefont."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class WidthPolicy(str, Enum):
    """How advance widths are assigned."""

    MONOSPACE = "monospace"
    PROPORTIONAL = "proportional"


class VerticalScale(str, Enum):
    """Font-unit height that one normalized unit of Y maps to."""

    ASCENDER = "ascender"
    EM = "em"


class LogLevel(str, Enum):
    """Log levels accepted for console and file output."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class StrokeConfig(BaseModel):
    """Configuration for stroke expansion.

    Widths are in normalized design space, where a glyph spans roughly 0..1.
    """

    width: float = Field(
        default=0.08,
        gt=0.0,
        le=1.0,
        description="Stroke width in normalized design units",
    )
    cap_segments: int = Field(
        default=8,
        ge=2,
        le=64,
        description="Straight segments used to approximate each round cap",
    )


class GeometryConfig(BaseModel):
    """Configuration for path parsing."""

    flip_y: bool = Field(
        default=True,
        description="Source paths are y-down (SVG style) and are flipped to y-up",
    )
    flatten_tolerance: float = Field(
        default=0.002,
        gt=0.0,
        le=0.1,
        description="Maximum deviation when flattening curves (normalized units)",
    )
    strict_paths: bool = Field(
        default=False,
        description="Raise on malformed path data instead of skipping it",
    )


class LayoutConfig(BaseModel):
    """Configuration for fitting outlines into font metric space."""

    units_per_em: int = Field(
        default=1000,
        gt=0,
        le=16384,
        description="Font units per em",
    )
    ascender: int = Field(
        default=800,
        gt=0,
        description="Ascender height in font units",
    )
    descender: int = Field(
        default=-200,
        le=0,
        description="Descender depth in font units (zero or negative)",
    )
    vertical_scale: VerticalScale = Field(
        default=VerticalScale.ASCENDER,
        description="Font-unit height of one normalized Y unit",
    )
    width_policy: WidthPolicy = Field(
        default=WidthPolicy.PROPORTIONAL,
        description="Monospace or proportional advance widths",
    )
    side_bearing_percent: float = Field(
        default=10.0,
        ge=0.0,
        le=100.0,
        description="Side bearing as percentage of glyph width",
    )
    side_bearing_minimum: int = Field(
        default=50,
        ge=0,
        description="Minimum side bearing in font units (proportional policy)",
    )
    baseline_normalization: bool = Field(
        default=True,
        description="Rest every glyph's ink on the baseline, descenders below it",
    )
    baseline: float = Field(
        default=0.0,
        description="Normalized Y of the baseline when normalization is off",
    )
    descender_characters: str = Field(
        default="gjpqy,",
        description="Characters that hang below the baseline",
    )

    @model_validator(mode="after")
    def _check_vertical_metrics(self) -> "LayoutConfig":
        if self.ascender <= self.descender:
            raise ValueError("ascender must be greater than descender")
        return self

    @property
    def y_scale(self) -> int:
        """Font units per normalized Y unit."""
        if self.vertical_scale == VerticalScale.EM:
            return self.units_per_em
        return self.ascender


class NamingConfig(BaseModel):
    """Font naming written by the assembler."""

    family_name: str = Field(default="Strokefont", min_length=1)
    style_name: str = Field(default="Regular", min_length=1)
    version: str = Field(default="1.000")


class ProcessingConfig(BaseModel):
    """Configuration for the build run."""

    max_workers: int = Field(
        default=1,
        ge=1,
        description="Worker processes for glyph measurement (1 = in-process)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: LogLevel = Field(
        default=LogLevel.WARNING,
        description="Console log level",
    )
    file_log_level: LogLevel = Field(
        default=LogLevel.DEBUG,
        description="File log level (more verbose)",
    )


class StrokeFontSettings(BaseModel):
    """Main application settings."""

    stroke: StrokeConfig = Field(default_factory=StrokeConfig)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> StrokeFontSettings:
    """Get default application settings."""
    return StrokeFontSettings()
