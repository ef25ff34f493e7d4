"""Motif mark specification and output types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MotifFamily(str, Enum):
    """Procedural mark families."""

    LOOP = "loop"
    INTERLOCK = "interlock"
    ORBIT = "orbit"
    FOLD = "fold"
    SWAP = "swap"
    MONOGRAM_INTERLOCK = "monogram-interlock"


class MotifMarkSpec(BaseModel):
    """Input for the motif mark generator.

    ``variant`` selects a deterministic geometric sub-pattern per family;
    when absent it is derived from ``seed``.
    """

    brand_name: str = Field(min_length=1)
    motif_family: MotifFamily
    seed: str
    grid: float = Field(default=24, ge=8, le=64)
    stroke_px: float = Field(default=2, ge=0.5, le=8)
    corner_radius_px: float = Field(default=2, ge=0, le=8)
    primary_hex: str = Field(pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$")
    variant: int | None = Field(default=None, ge=0, le=5)
    use_fill: bool = True


@dataclass(frozen=True, slots=True)
class PositionedPath:
    """Path data with an optional SVG transform."""

    d: str
    transform: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"d": self.d}
        if self.transform is not None:
            data["transform"] = self.transform
        return data


@dataclass(frozen=True)
class Construction:
    """How a mark was built.

    Attributes:
        grid: Square grid size
        stroke_px: Effective stroke width (for stroke rendering)
        corner_radius_px: Requested corner radius
        family: Family that produced the geometry
        variant: Resolved variant index (before per-family modulo)
        fallback_family: Family that replaced a rejected candidate, if any
        fallback_reason: Why a fallback was used (monogram provider failure or ring scan)
        warnings: Advisory structural warnings
    """

    grid: float
    stroke_px: float
    corner_radius_px: float
    family: MotifFamily
    variant: int
    fallback_family: MotifFamily | None = None
    fallback_reason: str | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "grid": self.grid,
            "stroke_px": self.stroke_px,
            "corner_radius_px": self.corner_radius_px,
            "family": self.family.value,
            "variant": self.variant,
            "fallback_family": self.fallback_family.value if self.fallback_family else None,
            "fallback_reason": self.fallback_reason,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class MotifMark:
    """Generated mark: positioned paths, construction info and SVG document."""

    paths: list[PositionedPath]
    construction: Construction
    mark_svg: str

    @property
    def path_data(self) -> str:
        """All path data joined, ignoring transforms."""
        return " ".join(p.d for p in self.paths)

    def to_dict(self) -> dict[str, Any]:
        return {
            "paths": [p.to_dict() for p in self.paths],
            "construction": self.construction.to_dict(),
            "mark_svg": self.mark_svg,
        }
