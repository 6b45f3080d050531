"""Utility functions for fontcaster.

This module provides logging setup and progress/statistics tracking.
"""

from fontcaster.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
