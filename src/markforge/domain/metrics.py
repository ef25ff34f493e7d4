"""Derived scores and result records.

Metrics are pure values recomputed from geometry each time; nothing here is
persisted.
"""

from dataclasses import dataclass, field
from typing import Any

from markforge.domain.glyph import BBox


@dataclass(frozen=True, slots=True)
class WordmarkMetrics:
    """Area-delta metrics for a customization pass (each 0-100)."""

    device_visibility: float
    silhouette_delta: float
    default_font_risk: float
    legibility: float

    def to_dict(self) -> dict[str, float]:
        return {
            "device_visibility": self.device_visibility,
            "silhouette_delta": self.silhouette_delta,
            "default_font_risk": self.default_font_risk,
            "legibility": self.legibility,
        }


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """Outcome of one device in a customization pass.

    Attributes:
        device: Device kind
        target: Target letter, or "from-to" for pairs
        applied: Whether the device changed the geometry
        reason: Why it was skipped (None when applied)
    """

    device: str
    target: str
    applied: bool
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "device": self.device,
            "target": self.target,
            "applied": self.applied,
        }
        if self.reason is not None:
            data["reason"] = self.reason
        return data


@dataclass(frozen=True, slots=True)
class AttemptRecord:
    """Metrics of one customization attempt.

    Attributes:
        attempt: 1-based attempt number
        intensified: Whether device magnitudes were scaled up
        metrics: Metrics of this attempt's path
        path_empty: Whether the attempt produced no geometry
        selected: Whether this attempt's path was returned
    """

    attempt: int
    intensified: bool
    metrics: WordmarkMetrics
    path_empty: bool
    selected: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempt": self.attempt,
            "intensified": self.intensified,
            "metrics": self.metrics.to_dict(),
            "path_empty": self.path_empty,
            "selected": self.selected,
        }


@dataclass(frozen=True)
class CustomizationResult:
    """Best-effort result of a customization pass."""

    path: str
    manifest: list[ManifestEntry]
    metrics: WordmarkMetrics
    attempts: list[AttemptRecord] = field(default_factory=list)
    seed: str = ""

    @property
    def retried(self) -> bool:
        """True when the intensified retry produced the returned path."""
        return any(a.intensified and a.selected for a in self.attempts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "manifest": [m.to_dict() for m in self.manifest],
            "metrics": self.metrics.to_dict(),
            "attempts": [a.to_dict() for a in self.attempts],
            "seed": self.seed,
        }


@dataclass(frozen=True, slots=True)
class CandidatePath:
    """One glyph path of a wordmark candidate."""

    d: str
    bbox: BBox

    def to_dict(self) -> dict[str, Any]:
        return {"d": self.d, "bbox": self.bbox.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CandidatePath":
        return cls(d=str(data.get("d", "")), bbox=BBox.from_dict(data.get("bbox", {})))


@dataclass(frozen=True)
class WordmarkCandidate:
    """Geometry summary of a wordmark variant, as consumed by the evaluator.

    Attributes:
        bbox: Bounding box of the whole wordmark
        paths: Per-glyph paths with their bounds
        path_count: Path count when ``paths`` is not supplied
        command_count: Path command count (derived from paths when None)
        advance_width: Total advance of the string
        advances: Per-glyph advances used for spacing consistency
    """

    bbox: BBox
    paths: tuple[CandidatePath, ...] = ()
    path_count: int | None = None
    command_count: int | None = None
    advance_width: float | None = None
    advances: tuple[float, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "bbox": self.bbox.to_dict(),
            "paths": [p.to_dict() for p in self.paths],
            "path_count": self.path_count,
            "command_count": self.command_count,
            "advance_width": self.advance_width,
            "advances": list(self.advances),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WordmarkCandidate":
        metrics = data.get("metrics") or {}
        path_count = data.get("path_count", metrics.get("pathCount"))
        command_count = data.get("command_count", metrics.get("commandCount"))
        advance_width = data.get("advance_width", metrics.get("advanceWidth"))
        return cls(
            bbox=BBox.from_dict(data.get("bbox", {})),
            paths=tuple(CandidatePath.from_dict(p) for p in data.get("paths", [])),
            path_count=int(path_count) if path_count is not None else None,
            command_count=int(command_count) if command_count is not None else None,
            advance_width=float(advance_width) if advance_width is not None else None,
            advances=tuple(float(a) for a in data.get("advances", [])),
        )


@dataclass(frozen=True, slots=True)
class EvaluationBreakdown:
    """Per-axis evaluator scores (each 0-100)."""

    legibility: float
    weight: float
    distinctiveness: float
    spacing_consistency: float

    def to_dict(self) -> dict[str, float]:
        return {
            "legibility": self.legibility,
            "weight": self.weight,
            "distinctiveness": self.distinctiveness,
            "spacing_consistency": self.spacing_consistency,
        }


@dataclass(frozen=True)
class Evaluation:
    """Weighted evaluator output with advisory flags."""

    total_score: float
    breakdown: EvaluationBreakdown
    flags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_score": self.total_score,
            "breakdown": self.breakdown.to_dict(),
            "flags": list(self.flags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Evaluation":
        b = data["breakdown"]
        return cls(
            total_score=float(data["total_score"]),
            breakdown=EvaluationBreakdown(
                legibility=float(b["legibility"]),
                weight=float(b["weight"]),
                distinctiveness=float(b["distinctiveness"]),
                spacing_consistency=float(b["spacing_consistency"]),
            ),
            flags=list(data.get("flags", [])),
        )
