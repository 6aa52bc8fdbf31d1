"""Utility functions for strokefont.

This module provides utility functions including:

- Logging setup and configuration
- Build statistics and progress logging
"""

from strokefont.utils.logging import (
    BuildLogger,
    BuildStats,
    configure_logging,
)

__all__ = [
    "BuildLogger",
    "BuildStats",
    "configure_logging",
]
