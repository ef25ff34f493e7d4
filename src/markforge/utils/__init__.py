"""Utility modules for markforge."""

from markforge.utils.logging import CustomizationLogger, CustomizationStats, configure_logging

__all__ = ["CustomizationLogger", "CustomizationStats", "configure_logging"]
