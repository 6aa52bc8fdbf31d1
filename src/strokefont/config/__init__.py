"""Configuration management for strokefont.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- StrokeConfig: Stroke width and cap tessellation
- GeometryConfig: Path parsing settings
- LayoutConfig: Font metrics and width policy
- NamingConfig: Font naming
- ProcessingConfig: Build run settings
- LoggingConfig: Logging settings
- StrokeFontSettings: Main application settings
"""

from strokefont.config.settings import (
    GeometryConfig,
    LayoutConfig,
    LoggingConfig,
    LogLevel,
    NamingConfig,
    ProcessingConfig,
    StrokeConfig,
    StrokeFontSettings,
    VerticalScale,
    WidthPolicy,
    get_default_settings,
)

__all__ = [
    "GeometryConfig",
    "LayoutConfig",
    "LoggingConfig",
    "LogLevel",
    "NamingConfig",
    "ProcessingConfig",
    "StrokeConfig",
    "StrokeFontSettings",
    "VerticalScale",
    "WidthPolicy",
    "get_default_settings",
]
