"""Configuration management for markforge.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Path sampling and emission settings
- CustomizerConfig: Retry thresholds and intensify factors
- MotifConfig: Motif generator settings
- EvaluatorConfig: Variant scoring weights
- LoggingConfig: Logging settings
- MarkforgeSettings: Main application settings
"""

from markforge.config.settings import (
    CustomizerConfig,
    EvaluatorConfig,
    GeometryConfig,
    LoggingConfig,
    MarkforgeSettings,
    MotifConfig,
    get_default_settings,
)

__all__ = [
    "CustomizerConfig",
    "EvaluatorConfig",
    "GeometryConfig",
    "LoggingConfig",
    "MarkforgeSettings",
    "MotifConfig",
    "get_default_settings",
]
