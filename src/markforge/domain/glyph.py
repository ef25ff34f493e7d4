"""Glyph run and wordmark base representations.

This module defines the outline data a customization pass operates on:
- BBox: Axis-aligned bounding box in SVG (y-down) space
- GlyphRun: One character's outline, bounds and advance
- WordmarkBase: Rendered text string at a fixed size and tracking
- FontIdentity: Family/weight/style triple naming a font
"""

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class BBox:
    """Axis-aligned bounding box.

    Attributes:
        x: Left edge
        y: Top edge (SVG space, y grows downward)
        w: Width
        h: Height
    """

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        """Right edge of the box."""
        return self.x + self.w

    @property
    def bottom(self) -> float:
        """Bottom edge of the box."""
        return self.y + self.h

    @property
    def area(self) -> float:
        """Box area (zero for degenerate boxes)."""
        return max(self.w, 0.0) * max(self.h, 0.0)

    def to_dict(self) -> dict[str, float]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x, y, w and h fields
        """
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BBox":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x, y, w and h fields

        Returns:
            BBox instance
        """
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            w=float(data.get("w", 0.0)),
            h=float(data.get("h", 0.0)),
        )


@dataclass(frozen=True, slots=True)
class FontIdentity:
    """Names a font by family, weight and style."""

    family: str
    weight: int = 400
    style: str = "normal"

    def key(self) -> str:
        """Stable cache key for this identity."""
        return f"{self.family}-{self.weight}-{self.style}".replace(" ", "-")

    def __str__(self) -> str:
        return f"{self.family} {self.weight} {self.style}"


@dataclass(frozen=True)
class GlyphRun:
    """A single character's extracted outline.

    Immutable once created; a customization pass works on copies made with
    ``with_path``.

    Attributes:
        index: Position of the character in the text
        char: The character itself
        path_d: Outline as SVG path data
        bbox: Bounding box of the outline
        advance: Horizontal advance to the next glyph
    """

    index: int
    char: str
    path_d: str
    bbox: BBox
    advance: float

    def with_path(self, path_d: str) -> "GlyphRun":
        """Return a copy of this run carrying different outline data."""
        return replace(self, path_d=path_d)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the glyph run
        """
        return {
            "index": self.index,
            "char": self.char,
            "path": self.path_d,
            "bbox": self.bbox.to_dict(),
            "advance": self.advance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], index: int | None = None) -> "GlyphRun":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a glyph run
            index: Index to use when the dictionary carries none

        Returns:
            GlyphRun instance
        """
        return cls(
            index=int(data.get("index", index if index is not None else 0)),
            char=str(data["char"]),
            path_d=str(data.get("path", data.get("path_d", ""))),
            bbox=BBox.from_dict(data.get("bbox", {})),
            advance=float(data.get("advance", 0.0)),
        )


@dataclass(frozen=True)
class WordmarkBase:
    """Aggregate snapshot of a rendered text string.

    The single source of truth a customization plan operates on.

    Attributes:
        combined_path: Outline of the whole string
        view_box: SVG view box as "x y w h"
        width: Rendered width
        height: Rendered height
        glyph_runs: Per-character runs in text order
    """

    combined_path: str
    view_box: str
    width: float
    height: float
    glyph_runs: tuple[GlyphRun, ...] = field(default_factory=tuple)

    @property
    def center_x(self) -> float:
        """Horizontal center of the view box, or half the width."""
        parts = self.view_box.split()
        if len(parts) >= 3:
            try:
                return float(parts[0]) + float(parts[2]) / 2
            except ValueError:
                pass
        return self.width / 2

    @property
    def text(self) -> str:
        """The rendered string, reassembled from the glyph runs."""
        return "".join(g.char for g in self.glyph_runs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the wordmark base
        """
        return {
            "combined_path": self.combined_path,
            "view_box": self.view_box,
            "width": self.width,
            "height": self.height,
            "glyphs": [g.to_dict() for g in self.glyph_runs],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WordmarkBase":
        """Deserialize from dictionary.

        Accepts both ``combined_path`` and ``path_d`` keys for the outline and
        ``view_box`` or ``viewBox`` for the view box.

        Args:
            data: Dictionary representation of a wordmark base

        Returns:
            WordmarkBase instance
        """
        glyphs = data.get("glyphs", data.get("glyph_runs", []))
        return cls(
            combined_path=str(data.get("combined_path", data.get("path_d", ""))),
            view_box=str(data.get("view_box", data.get("viewBox", "0 0 0 0"))),
            width=float(data.get("width", 0.0)),
            height=float(data.get("height", 0.0)),
            glyph_runs=tuple(GlyphRun.from_dict(g, index=i) for i, g in enumerate(glyphs)),
        )
