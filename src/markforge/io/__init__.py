"""Outline acquisition and SVG output for markforge.

This module handles reading fonts with fonttools and writing SVG
documents. It keeps fonttools out of the geometry core.

Key responsibilities:
- Provider protocol, caching and fallback tiers for glyph outlines
- Draw text outlines into path data
- Serialize marks and wordmarks as SVG documents

Key classes:
- FontOutlineProvider: fontTools-backed provider
- FallbackOutlineProvider: Ordered provider tiers with typed failures
- OutlineCache: Caller-owned LRU cache
"""

from markforge.io.provider import (
    FailureReason,
    FallbackOutlineProvider,
    GlyphOutlineProvider,
    OutlineCache,
    ProviderAttempt,
    check_outline_quality,
)
from markforge.io.reader import FontOutlineProvider, PathDataPen, identify_font
from markforge.io.writer import mark_svg, wordmark_svg, write_svg

__all__ = [
    "FailureReason",
    "FallbackOutlineProvider",
    "FontOutlineProvider",
    "GlyphOutlineProvider",
    "OutlineCache",
    "PathDataPen",
    "ProviderAttempt",
    "check_outline_quality",
    "identify_font",
    "mark_svg",
    "wordmark_svg",
    "write_svg",
]
