"""Device appliers.

Each applier takes glyph run(s) and returns the modified outline as path
data. Appliers raise ``DeviceError`` when the edit cannot be made; they
never mutate their inputs.
"""

from dataclasses import dataclass

from markforge.core.boolean import subtract, union
from markforge.core.shapes import diagonal_band_path, rounded_rect_path, wedge_path
from markforge.domain import (
    BBox,
    BridgeLevel,
    GlyphRun,
    LigatureBridge,
    NotchCut,
    NotchSide,
    SeamCut,
)
from markforge.exceptions import DeviceError

# Smallest notch zone edge, in path units
MIN_ZONE_EXTENT = 0.5
# Smallest bridge thickness, in path units
MIN_BRIDGE_THICKNESS = 1.0
# Bridge top as a fraction of glyph height for the x-height level
XHEIGHT_RATIO = 0.7


@dataclass(frozen=True, slots=True)
class BooleanOptions:
    """Sampling options forwarded to the Boolean kernel."""

    sample_budget: int = 120
    min_sample_spacing: float = 0.5
    precision: int = 4


def notch_zone(bbox: BBox, side: NotchSide, depth: float, width: float) -> BBox:
    """Rectangle a notch wedge is inscribed in.

    Args:
        bbox: Glyph bounding box
        side: Edge of the glyph the zone touches
        depth: Zone height as a fraction of ``bbox.h``
        width: Zone width as a fraction of ``bbox.w``

    Returns:
        Zone rectangle touching the requested edge, centered along it
    """
    h = max(bbox.h * depth, MIN_ZONE_EXTENT)
    w = max(bbox.w * width, MIN_ZONE_EXTENT)
    side = NotchSide(side)
    if side is NotchSide.TOP:
        return BBox(bbox.x + (bbox.w - w) / 2, bbox.y, w, h)
    if side is NotchSide.BOTTOM:
        return BBox(bbox.x + (bbox.w - w) / 2, bbox.y + bbox.h - h, w, h)
    if side is NotchSide.INNER:
        return BBox(bbox.x + bbox.w - w, bbox.y + (bbox.h - h) / 2, w, h)
    return BBox(bbox.x, bbox.y + (bbox.h - h) / 2, w, h)


def apply_notch_cut(
    glyph: GlyphRun,
    device: NotchCut,
    options: BooleanOptions | None = None,
) -> str:
    """Subtract a wedge from one edge of a glyph."""
    opts = options or BooleanOptions()
    zone = notch_zone(glyph.bbox, device.side, device.depth, device.width)
    cutter = wedge_path(zone.x, zone.y, zone.w, zone.h, device.side)
    result = subtract(
        glyph.path_d, cutter, opts.sample_budget, opts.min_sample_spacing, opts.precision
    )
    if not result:
        raise DeviceError(device.kind, glyph.char, "cut eliminated the glyph")
    return result


def apply_seam_cut(
    glyph: GlyphRun,
    device: SeamCut,
    options: BooleanOptions | None = None,
) -> str:
    """Subtract a diagonal band across a glyph."""
    opts = options or BooleanOptions()
    thickness = glyph.bbox.h * device.thickness
    if thickness <= 0:
        raise DeviceError(device.kind, glyph.char, "band has no thickness")
    cutter = diagonal_band_path(glyph.bbox, device.angle_deg, thickness, device.offset)
    result = subtract(
        glyph.path_d, cutter, opts.sample_budget, opts.min_sample_spacing, opts.precision
    )
    if not result:
        raise DeviceError(device.kind, glyph.char, "cut eliminated the glyph")
    return result


def bridge_rect(a: BBox, b: BBox, thickness: float, level: BridgeLevel) -> tuple[BBox, float]:
    """Bar rectangle spanning the gap between two glyph boxes.

    Args:
        a: Left glyph bounding box
        b: Right glyph bounding box
        thickness: Bar height as a fraction of the mean glyph height
        level: Vertical placement

    Returns:
        The bar rectangle and its corner radius
    """
    th = max((a.h + b.h) / 2 * thickness, MIN_BRIDGE_THICKNESS)
    level = BridgeLevel(level)
    if level is BridgeLevel.BASELINE:
        mid = ((a.y + a.h / 2) + (b.y + b.h / 2)) / 2
        y = mid - th / 2
    elif level is BridgeLevel.CAP:
        y = min(a.y, b.y)
    else:
        y = min(a.y + a.h * XHEIGHT_RATIO, b.y + b.h * XHEIGHT_RATIO) - th / 2
    gap = b.x - a.right
    return BBox(a.right, y, max(gap, MIN_ZONE_EXTENT), th), th / 4


def apply_ligature_bridge(
    glyph_a: GlyphRun,
    glyph_b: GlyphRun,
    device: LigatureBridge,
    options: BooleanOptions | None = None,
) -> str:
    """Join two glyphs with a rounded bar.

    Returns:
        Outline of glyph A, the bar and glyph B merged into one shape
    """
    opts = options or BooleanOptions()
    rect, radius = bridge_rect(glyph_a.bbox, glyph_b.bbox, device.thickness, device.y_pos)
    bar = rounded_rect_path(rect.x, rect.y, rect.w, rect.h, radius)
    joined = union(glyph_a.path_d, bar, opts.sample_budget, opts.min_sample_spacing, opts.precision)
    result = union(joined, glyph_b.path_d, opts.sample_budget, opts.min_sample_spacing, opts.precision)
    if not result:
        raise DeviceError(device.kind, device.target, "bridge produced an empty shape")
    return result
