"""Glyph outline provider contracts.

The geometry core consumes already-extracted outlines. This module defines
how they are obtained:

- GlyphOutlineProvider: protocol every provider implements
- OutlineCache: caller-owned LRU cache with explicit eviction
- check_outline_quality: gate rejecting placeholder-like outlines
- FallbackOutlineProvider: ordered tiers with typed failure reasons
"""

from collections import OrderedDict
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Protocol, TypeVar, runtime_checkable

import structlog

from markforge.core.geometry import count_path_commands, path_bbox
from markforge.domain import FontIdentity, WordmarkBase
from markforge.exceptions import (
    FontNotFoundError,
    MarkforgeError,
    OutlineLoadError,
    OutlineQualityError,
    OutlineUnavailableError,
)

logger = structlog.get_logger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@runtime_checkable
class GlyphOutlineProvider(Protocol):
    """Source of text outlines.

    Implementations must raise an ``OutlineError`` rather than return a
    placeholder shape when they cannot produce genuine outlines.
    """

    def get_outline(
        self,
        text: str,
        font: FontIdentity,
        size_px: float,
        tracking_px: float = 0.0,
    ) -> WordmarkBase: ...


class OutlineCache(Generic[K, V]):
    """Least-recently-used cache owned by its caller.

    Example:
        cache = OutlineCache(max_entries=8)
        cache.put("Inter-700-normal", font)
        font = cache.get("Inter-700-normal")
    """

    def __init__(self, max_entries: int = 32) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: OrderedDict[K, V] = OrderedDict()

    def get(self, key: K) -> V | None:
        """Cached value for ``key``, marking it recently used."""
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: K, value: V) -> None:
        """Store ``value``, evicting the least recently used entry when full."""
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def check_outline_quality(
    base: WordmarkBase,
    size_px: float,
    min_commands: int = 4,
    min_extent: float = 0.1,
) -> None:
    """Reject outlines that look like placeholders.

    Args:
        base: Provider output
        size_px: Requested font size
        min_commands: Minimum path command count of the combined path
        min_extent: Minimum bbox width or height as a fraction of ``size_px``

    Raises:
        OutlineQualityError: If the outline is too simple or too small
    """
    commands = count_path_commands(base.combined_path)
    if commands < min_commands:
        raise OutlineQualityError(f"{commands} path commands (minimum {min_commands})")

    bbox = path_bbox(base.combined_path)
    limit = min_extent * size_px
    if max(bbox.w, bbox.h) < limit:
        raise OutlineQualityError(
            f"bbox {bbox.w:.2f}x{bbox.h:.2f} smaller than {limit:.2f} for size {size_px}"
        )


class FailureReason(str, Enum):
    """Why a provider tier failed."""

    FONT_NOT_FOUND = "font_not_found"
    LOAD_FAILED = "load_failed"
    QUALITY_GATE = "quality_gate"
    PROVIDER_ERROR = "provider_error"


@dataclass(frozen=True, slots=True)
class ProviderAttempt:
    """One failed provider tier."""

    tier: str
    reason: FailureReason
    detail: str


def classify_failure(error: Exception) -> FailureReason:
    """Map a provider exception to its failure reason."""
    if isinstance(error, FontNotFoundError):
        return FailureReason.FONT_NOT_FOUND
    if isinstance(error, OutlineLoadError):
        return FailureReason.LOAD_FAILED
    if isinstance(error, OutlineQualityError):
        return FailureReason.QUALITY_GATE
    return FailureReason.PROVIDER_ERROR


class FallbackOutlineProvider:
    """Tries provider tiers in priority order.

    Every failed tier is recorded with a typed reason. When all tiers fail,
    ``OutlineUnavailableError`` carries the full list of attempts; no
    placeholder geometry is ever returned.

    Attributes:
        last_attempts: Failed tiers of the most recent call
        last_tier: Name of the tier that served the most recent call
    """

    def __init__(
        self,
        tiers: Sequence[tuple[str, GlyphOutlineProvider]],
        min_commands: int = 4,
        min_extent: float = 0.1,
    ) -> None:
        if not tiers:
            raise ValueError("FallbackOutlineProvider needs at least one tier")
        self.tiers = list(tiers)
        self.min_commands = min_commands
        self.min_extent = min_extent
        self.last_attempts: list[ProviderAttempt] = []
        self.last_tier: str | None = None

    def get_outline(
        self,
        text: str,
        font: FontIdentity,
        size_px: float,
        tracking_px: float = 0.0,
    ) -> WordmarkBase:
        """Outline from the first tier that succeeds and passes the quality gate.

        Raises:
            OutlineUnavailableError: If every tier fails
        """
        attempts: list[ProviderAttempt] = []
        self.last_attempts = attempts
        self.last_tier = None

        for name, provider in self.tiers:
            try:
                base = provider.get_outline(text, font, size_px, tracking_px)
                check_outline_quality(base, size_px, self.min_commands, self.min_extent)
            except (MarkforgeError, OSError, ValueError) as e:
                attempt = ProviderAttempt(name, classify_failure(e), str(e))
                attempts.append(attempt)
                logger.warning(
                    "Outline provider tier failed",
                    tier=name,
                    reason=attempt.reason.value,
                    detail=attempt.detail,
                    text=text,
                    font=str(font),
                )
                continue
            self.last_tier = name
            if attempts:
                logger.info("Outline served by fallback tier", tier=name, failed=len(attempts))
            return base

        raise OutlineUnavailableError(attempts)
