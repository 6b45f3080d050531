"""Configuration management for fontcaster.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- FontConfig: Font naming, metrics and codepoint assignment
- PathConfig: Path description parsing settings
- PipelineConfig: Rasterizing, tracing, timeouts and failure handling
- LoggingConfig: Logging settings
- FontcasterSettings: Main application settings
"""

from fontcaster.config.settings import (
    CodepointPolicy,
    FailurePolicy,
    FontcasterSettings,
    FontConfig,
    LoggingConfig,
    PathConfig,
    PipelineConfig,
    UnsupportedCommandPolicy,
    get_default_settings,
)

__all__ = [
    "CodepointPolicy",
    "FailurePolicy",
    "FontConfig",
    "FontcasterSettings",
    "LoggingConfig",
    "PathConfig",
    "PipelineConfig",
    "UnsupportedCommandPolicy",
    "get_default_settings",
]
