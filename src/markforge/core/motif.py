"""Procedural motif mark generation.

This module builds abstract brand marks inside a square grid. Six families
are supported; each geometric family has a small table of variations and
the resolved variant is always taken modulo the table length.

Filled marks are stacks of rings rendered with the even-odd rule, so bands
and gaps appear as negative space. Stroke marks are open centerlines.

Key functions:
- resolve_variant: Explicit variant or seed hash modulo the variant count
- build_loop / build_interlock / build_orbit / build_fold / build_swap:
  Geometric family builders
- check_structure: Structural scan of the serialized mark
- build_motif_mark: Build, scan and serialize a mark

Key classes:
- MotifMarkBuilder: Builder with an injectable family table and outline provider
"""

import re
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

import structlog

from markforge.config import MarkforgeSettings, get_default_settings
from markforge.core.boolean import subtract, union
from markforge.core.geometry import format_number, path_bbox
from markforge.core.seed import SeededRandom, hash_seed, pick
from markforge.core.shapes import polygon_path, rect_path, rounded_rect_path
from markforge.domain import (
    BBox,
    Construction,
    FontIdentity,
    MotifFamily,
    MotifMark,
    MotifMarkSpec,
    PositionedPath,
)
from markforge.exceptions import MarkStructureError, OutlineError, OutlineQualityError
from markforge.io.writer import effective_stroke_px, mark_svg

if TYPE_CHECKING:
    from markforge.io.provider import GlyphOutlineProvider

logger = structlog.get_logger(__name__)

FamilyBuilder = Callable[[float, float, float, int, bool], str]
Point = tuple[float, float]

# Arc command drawing a full ring: A rx ry 0 1 1
FULL_RING_RE = re.compile(r"A\s+\d+\.?\d*\s+\d+\.?\d*\s+0\s+1\s+1")
SUBPATH_RE = re.compile(r"\bM\s+[-\d.]+\s+[-\d.]+")

# (gap side, band width / grid)
LOOP_VARIATIONS: tuple[tuple[str, float], ...] = (
    ("right", 0.12),
    ("top", 0.12),
    ("left", 0.12),
    ("bottom", 0.12),
    ("right", 0.10),
    ("bottom", 0.14),
)
# (overlap / grid, transposed)
INTERLOCK_VARIATIONS: tuple[tuple[float, bool], ...] = (
    (0.08, False),
    (0.08, True),
    (0.06, False),
    (0.06, True),
    (0.10, False),
    (0.10, True),
)
# (x direction, y direction, offset / grid) of the second crescent
ORBIT_VARIATIONS: tuple[tuple[int, int, float], ...] = (
    (-1, 1, 0.08),
    (1, 1, 0.08),
    (1, -1, 0.08),
    (-1, -1, 0.08),
    (-1, 1, 0.06),
    (1, -1, 0.06),
)
# (horizontal seam, face size / grid)
FOLD_VARIATIONS: tuple[tuple[bool, float], ...] = (
    (False, 0.40),
    (True, 0.40),
    (False, 0.36),
    (True, 0.36),
    (False, 0.44),
    (True, 0.44),
)
# (vertical direction, band width / grid)
SWAP_VARIATIONS: tuple[tuple[int, float], ...] = (
    (1, 0.12),
    (-1, 0.12),
    (1, 0.10),
    (-1, 0.10),
    (1, 0.14),
    (-1, 0.14),
)
# Half-distance between two monogram initials, as a fraction of the scaled font size
MONOGRAM_SPREADS: tuple[float, ...] = (0.15, 0.17, 0.19)

ALTERNATE_FAMILY: dict[MotifFamily, MotifFamily] = {
    MotifFamily.ORBIT: MotifFamily.FOLD,
    MotifFamily.FOLD: MotifFamily.ORBIT,
    MotifFamily.SWAP: MotifFamily.LOOP,
}


def _fmt(value: float) -> str:
    return format_number(value)


def _polyline(points: list[Point], closed: bool = False) -> str:
    head, *rest = points
    parts = [f"M {_fmt(head[0])} {_fmt(head[1])}"]
    parts.extend(f"L {_fmt(x)} {_fmt(y)}" for x, y in rest)
    if closed:
        parts.append("Z")
    return " ".join(parts)


def _ring(x: float, y: float, w: float, h: float, r: float, band: float) -> str:
    """Outer rounded rect followed by its inset, forming a band under even-odd."""
    outer = rounded_rect_path(x, y, w, h, r, clamp=True)
    inner = rounded_rect_path(
        x + band, y + band, w - band * 2, h - band * 2, max(0.0, r - band / 2), clamp=True
    )
    return f"{outer} {inner}"


def resolve_variant(spec: MotifMarkSpec, variant_count: int = 6) -> int:
    """Explicit variant, or the seed hash modulo ``variant_count``."""
    if spec.variant is not None:
        return spec.variant
    return hash_seed(spec.seed) % variant_count


def build_loop(
    grid: float, stroke_px: float, corner_radius_px: float, variant: int, use_fill: bool
) -> str:
    """Rounded-square ring with one tension gap cut through the band."""
    side, band_ratio = LOOP_VARIATIONS[variant % len(LOOP_VARIATIONS)]
    c = grid / 2
    band = grid * band_ratio
    outer = grid * 0.42
    gap = grid * 0.08
    r = min(corner_radius_px, outer / 4)

    if use_fill:
        o = c - outer / 2
        # The gap rectangle spans the band exactly, so even-odd opens the ring
        gap_rects = {
            "right": (o + outer - band, c - gap / 2, band, gap),
            "left": (o, c - gap / 2, band, gap),
            "top": (c - gap / 2, o, gap, band),
            "bottom": (c - gap / 2, o + outer - band, gap, band),
        }
        return f"{_ring(o, o, outer, outer, r, band)} {rect_path(*gap_rects[side])}"

    s = outer / 2
    h = gap / 2
    # Centerline with the opening on the right, rotated to the requested side
    points = [(s, h), (s, s), (-s, s), (-s, -s), (s, -s), (s, -h)]
    turns = {"right": 0, "bottom": 1, "left": 2, "top": 3}[side]
    for _ in range(turns):
        points = [(-py, px) for px, py in points]
    return _polyline([(c + px, c + py) for px, py in points])


def build_interlock(
    grid: float, stroke_px: float, corner_radius_px: float, variant: int, use_fill: bool
) -> str:
    """Two overlapping rounded-rect rings with the overlap carved as a window."""
    overlap_ratio, transposed = INTERLOCK_VARIATIONS[variant % len(INTERLOCK_VARIATIONS)]
    c = grid / 2
    band = grid * 0.1
    size1 = grid * 0.36
    size2 = grid * 0.32
    overlap = grid * overlap_ratio
    r = min(corner_radius_px, size1 / 4)

    rects = [
        (c - size1 / 2, c - size2 / 2 - overlap, size1, size2),
        (c - size2 / 2 - overlap, c - size1 / 2, size2, size1),
    ]
    window = (c - overlap / 2, c - overlap / 2, overlap, overlap)
    if transposed:
        rects = [(y, x, h, w) for x, y, w, h in rects]

    if use_fill:
        rings = " ".join(_ring(*rect, r, band) for rect in rects)
        return f"{rings} {rect_path(*window)}"
    return " ".join(rounded_rect_path(*rect, r, clamp=True) for rect in rects)


def _corner_index(dx: int, dy: int) -> int:
    # Corners clockwise on screen from the top-left
    return {(-1, -1): 0, (1, -1): 1, (1, 1): 2, (-1, 1): 3}[(dx, dy)]


def build_orbit(
    grid: float, stroke_px: float, corner_radius_px: float, variant: int, use_fill: bool
) -> str:
    """Two offset crescent bands, each a ring missing one corner."""
    sx, sy, offset_ratio = ORBIT_VARIATIONS[variant % len(ORBIT_VARIATIONS)]
    c = grid / 2
    band = grid * 0.12
    outer = grid * 0.42
    gap = grid * 0.15
    offset = grid * offset_ratio
    r = min(corner_radius_px, outer / 4)

    # First crescent opens away from the second; the second opens toward it
    crescents = [(0.0, 0.0, -sx, -sy), (sx * offset, sy * offset, sx, sy)]

    if use_fill:
        parts: list[str] = []
        for ox, oy, gx, gy in crescents:
            x = c - outer / 2 + ox
            y = c - outer / 2 + oy
            ring = _ring(x, y, outer, outer, r, band)
            gap_x = x + outer - gap if gx > 0 else x
            gap_y = y + outer - gap if gy > 0 else y
            parts.append(subtract(ring, rect_path(gap_x, gap_y, gap, gap)))
        return " ".join(p for p in parts if p)

    s = outer / 2
    lines: list[str] = []
    for ox, oy, gx, gy in crescents:
        corners = [(-s, -s), (s, -s), (s, s), (-s, s)]
        i = _corner_index(gx, gy)
        cx0, cy0 = corners[i]
        nx, ny = corners[(i + 1) % 4]
        px, py = corners[(i + 3) % 4]
        start = (cx0 + (nx - cx0) / (2 * s) * gap, cy0 + (ny - cy0) / (2 * s) * gap)
        end = (cx0 + (px - cx0) / (2 * s) * gap, cy0 + (py - cy0) / (2 * s) * gap)
        points = [start, corners[(i + 1) % 4], corners[(i + 2) % 4], corners[(i + 3) % 4], end]
        lines.append(_polyline([(c + ox + x, c + oy + y) for x, y in points]))
    return " ".join(lines)


def build_fold(
    grid: float, stroke_px: float, corner_radius_px: float, variant: int, use_fill: bool
) -> str:
    """Two triangular faces meeting at the center, split by a seam."""
    horizontal, face_ratio = FOLD_VARIATIONS[variant % len(FOLD_VARIATIONS)]
    c = grid / 2
    s = grid * face_ratio / 2
    seam = grid * 0.04

    def place(points: list[Point]) -> list[Point]:
        if horizontal:
            return [(y, x) for x, y in points]
        return points

    face1 = place([(c - s, c - s), (c, c), (c - s, c + s)])
    face2 = place([(c + s, c - s), (c, c), (c + s, c + s)])

    if use_fill:
        seam_x, seam_y, seam_w, seam_h = c - seam / 2, c - s, seam, 2 * s
        if horizontal:
            seam_x, seam_y, seam_w, seam_h = seam_y, seam_x, seam_h, seam_w
        faces = union(polygon_path(face1), polygon_path(face2))
        return subtract(faces, rect_path(seam_x, seam_y, seam_w, seam_h))

    seam_line = place([(c - seam / 2, c - s), (c - seam / 2, c + s)])
    return " ".join(_polyline(points) for points in (face1, face2, seam_line))


def build_swap(
    grid: float, stroke_px: float, corner_radius_px: float, variant: int, use_fill: bool
) -> str:
    """Two ribbon bands with rounded ends, offset diagonally so they pass each other."""
    direction, band_ratio = SWAP_VARIATIONS[variant % len(SWAP_VARIATIONS)]
    c = grid / 2
    bw = grid * band_ratio
    length = grid * 0.32
    offset = grid * 0.15
    r = min(corner_radius_px, bw / 2)

    if use_fill:
        parts: list[str] = []
        for sign in (-1, 1):
            x = c + sign * offset - length / 2
            y = c - bw / 2 + sign * direction * offset / 2
            parts.append(rounded_rect_path(x, y, length, bw, r, clamp=True))
            parts.append(
                rounded_rect_path(
                    x + bw / 3,
                    y + bw / 3,
                    length - bw * 2 / 3,
                    bw / 3,
                    max(0.0, r - bw / 3),
                    clamp=True,
                )
            )
        parts.append(rect_path(c - bw / 2, c - bw / 2, bw, bw))
        return " ".join(parts)

    b = length / 2
    curves = []
    for sign in (-1, 1):
        x0 = c + sign * offset
        y_end = c + sign * direction * offset / 2
        y_ctrl = c + sign * direction * offset
        curves.append(
            f"M {_fmt(x0 - b)} {_fmt(y_end)} Q {_fmt(x0)} {_fmt(y_ctrl)} {_fmt(x0 + b)} {_fmt(y_end)}"
        )
    return " ".join(curves)


FAMILY_BUILDERS: dict[MotifFamily, FamilyBuilder] = {
    MotifFamily.LOOP: build_loop,
    MotifFamily.INTERLOCK: build_interlock,
    MotifFamily.ORBIT: build_orbit,
    MotifFamily.FOLD: build_fold,
    MotifFamily.SWAP: build_swap,
}


def monogram_initials(brand_name: str) -> list[str]:
    """One or two initials: first letters of the first two words, when distinct."""
    words = brand_name.split()
    first = words[0][0].upper() if words else "A"
    second = words[1][0].upper() if len(words) >= 2 else first
    return [first, second] if second != first else [first]


def monogram_fallback(grid: float) -> str:
    """Two offset ribbon rings standing in for unavailable initials."""
    c = grid / 2
    band = grid * 0.12
    outer = grid * 0.36
    r = min(4.0, outer / 4)
    rings = [
        _ring(c - outer / 2 + dx, c - outer / 2, outer, outer, r, band)
        for dx in (-grid * 0.1, grid * 0.1)
    ]
    return " ".join(rings)


def check_structure(svg: str, family: MotifFamily) -> list[str]:
    """Scan a serialized mark for banned structure.

    Args:
        svg: Serialized mark
        family: Family that produced the mark

    Returns:
        Advisory warnings

    Raises:
        MarkStructureError: If the mark contains text or a lone circle
    """
    if "<text" in svg:
        raise MarkStructureError(family.value, "contains <text>; marks must be path-only")

    path_count = svg.count("<path")
    circle_count = svg.count("<circle")
    if circle_count and not path_count:
        raise MarkStructureError(family.value, "lone <circle> without path content")

    warnings: list[str] = []
    if circle_count:
        warnings.append(f"contains {circle_count} circle element(s)")
    if family is not MotifFamily.MONOGRAM_INTERLOCK:
        if path_count < 2:
            warnings.append(f"only {path_count} path element(s); mark may lack visual weight")
        subpaths = len(SUBPATH_RE.findall(svg))
        if subpaths < 2:
            warnings.append(f"only {subpaths} subpath(s); mark may lack visual weight")
    return warnings


def count_full_rings(svg: str) -> int:
    """Number of full-ring arc signatures in a serialized mark."""
    return len(FULL_RING_RE.findall(svg))


def alternate_family(family: MotifFamily) -> MotifFamily:
    """Family used when ``family`` produced a ring-like candidate."""
    return ALTERNATE_FAMILY.get(family, MotifFamily.SWAP)


class MotifMarkBuilder:
    """Builds motif marks.

    Attributes:
        provider: Outline provider for monogram initials (None disables them)
        settings: Application settings
        builders: Family builder table; entries passed to the constructor
            override the defaults
    """

    def __init__(
        self,
        provider: "GlyphOutlineProvider | None" = None,
        settings: MarkforgeSettings | None = None,
        builders: Mapping[MotifFamily, FamilyBuilder] | None = None,
    ) -> None:
        self.provider = provider
        self.settings = settings or get_default_settings()
        self.builders: dict[MotifFamily, FamilyBuilder] = dict(FAMILY_BUILDERS)
        if builders:
            self.builders.update(builders)

    def build(self, spec: MotifMarkSpec) -> MotifMark:
        """Build, scan and serialize a mark.

        Args:
            spec: Mark specification

        Returns:
            MotifMark with positioned paths, construction info and SVG

        Raises:
            MarkStructureError: If the candidate (or its replacement) is not path-only
        """
        variant = resolve_variant(spec, self.settings.motif.variant_count)
        stroke = effective_stroke_px(spec.stroke_px, spec.grid)
        family = spec.motif_family

        paths, fallback_reason = self._build_paths(spec, family, variant)
        svg = self._serialize(spec, paths, stroke)
        warnings = check_structure(svg, family)

        fallback_family: MotifFamily | None = None
        rings = count_full_rings(svg)
        if rings >= 3:
            fallback_family = alternate_family(family)
            logger.warning(
                "Full ring signature found, regenerating",
                family=family.value,
                rings=rings,
                fallback=fallback_family.value,
            )
            fallback_reason = f"{rings} full-ring arcs in {family.value} candidate"
            family = fallback_family
            paths, _ = self._build_paths(spec, family, variant)
            svg = self._serialize(spec, paths, stroke)
            warnings = check_structure(svg, family)

        for warning in warnings:
            logger.warning("Motif structure warning", family=family.value, warning=warning)

        construction = Construction(
            grid=spec.grid,
            stroke_px=stroke,
            corner_radius_px=spec.corner_radius_px,
            family=family,
            variant=variant,
            fallback_family=fallback_family,
            fallback_reason=fallback_reason,
            warnings=warnings,
        )
        return MotifMark(paths=paths, construction=construction, mark_svg=svg)

    def _serialize(self, spec: MotifMarkSpec, paths: list[PositionedPath], stroke: float) -> str:
        return mark_svg(paths, spec.grid, spec.primary_hex, spec.use_fill, stroke, spec.brand_name)

    def _build_paths(
        self, spec: MotifMarkSpec, family: MotifFamily, variant: int
    ) -> tuple[list[PositionedPath], str | None]:
        builder = self.builders.get(family)
        if builder is not None:
            d = builder(spec.grid, spec.stroke_px, spec.corner_radius_px, variant, spec.use_fill)
            return [PositionedPath(d)], None
        if family is MotifFamily.MONOGRAM_INTERLOCK:
            return self._build_monogram(spec)
        raise MarkStructureError(family.value, "no builder registered")

    def _build_monogram(self, spec: MotifMarkSpec) -> tuple[list[PositionedPath], str | None]:
        """Position initials from the outline provider, or fall back to ribbon rings."""
        cfg = self.settings.motif
        initials = monogram_initials(spec.brand_name)
        if self.provider is None:
            reason = "no outline provider configured"
            logger.warning("Monogram outlines unavailable, using ribbon fallback", error=reason)
            return [PositionedPath(monogram_fallback(spec.grid))], reason
        try:
            font = FontIdentity(cfg.monogram_font_family, cfg.monogram_font_weight)
            outlines: list[tuple[str, BBox]] = []
            for initial in initials:
                base = self.provider.get_outline(initial, font, cfg.monogram_font_size, 0.0)
                if not base.combined_path:
                    raise OutlineQualityError(f"empty outline for '{initial}'")
                outlines.append((base.combined_path, path_bbox(base.combined_path)))
        except (OutlineError, OSError, ValueError) as e:
            logger.warning("Monogram outlines unavailable, using ribbon fallback", error=str(e))
            return [PositionedPath(monogram_fallback(spec.grid))], str(e)

        c = spec.grid / 2
        scale = spec.grid * 0.52 / cfg.monogram_font_size
        top = min(bbox.y for _, bbox in outlines)
        bottom = max(bbox.bottom for _, bbox in outlines)
        ty = c - (top + bottom) / 2 * scale

        if len(outlines) == 1:
            d, bbox = outlines[0]
            tx = c - (bbox.x + bbox.w / 2) * scale
            return [PositionedPath(d, self._transform(tx, ty, scale))], None

        rng = SeededRandom(spec.seed)
        spread = pick(rng, MONOGRAM_SPREADS) * cfg.monogram_font_size * scale
        paths = []
        for (d, bbox), shift in zip(outlines, (-spread, spread), strict=True):
            tx = c + shift - (bbox.x + bbox.w / 2) * scale
            paths.append(PositionedPath(d, self._transform(tx, ty, scale)))
        return paths, None

    @staticmethod
    def _transform(tx: float, ty: float, scale: float) -> str:
        return f"translate({_fmt(tx)},{_fmt(ty)}) scale({format_number(scale, 6)})"


def build_motif_mark(
    spec: MotifMarkSpec,
    provider: "GlyphOutlineProvider | None" = None,
    settings: MarkforgeSettings | None = None,
) -> MotifMark:
    """Build a motif mark with the default family table."""
    return MotifMarkBuilder(provider, settings).build(spec)
