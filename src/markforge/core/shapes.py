"""Path builders for cutting and joining shapes.

All builders work in glyph (SVG, y-down) coordinates and return path data
whose numbers are formatted with ``format_number`` so repeated calls are
byte-identical.
"""

import math

from markforge.core.geometry import format_number
from markforge.domain import BBox, NotchSide


def _fmt(*values: float) -> list[str]:
    return [format_number(v) for v in values]


def rect_path(x: float, y: float, w: float, h: float) -> str:
    """Axis-aligned rectangle, clockwise on screen."""
    x0, y0, x1, y1 = _fmt(x, y, x + w, y + h)
    return f"M {x0} {y0} L {x1} {y0} L {x1} {y1} L {x0} {y1} Z"


def rounded_rect_path(
    x: float,
    y: float,
    w: float,
    h: float,
    r: float,
    clamp: bool = False,
) -> str:
    """Rectangle with quadratic corners.

    Args:
        x: Left edge
        y: Top edge
        w: Width
        h: Height
        r: Corner radius
        clamp: Clamp ``r`` to half the shorter side instead of falling back
            to a square-cornered rectangle when it does not fit

    Returns:
        Path data; a plain rectangle when ``r <= 0`` (or when ``r`` does not
        fit and ``clamp`` is False)
    """
    if clamp:
        r = min(r, w / 2, h / 2)
        if r <= 0:
            return rect_path(x, y, w, h)
    elif r <= 0 or r >= w / 2 or r >= h / 2:
        return rect_path(x, y, w, h)

    x0, x0r, x1r, x1 = _fmt(x, x + r, x + w - r, x + w)
    y0, y0r, y1r, y1 = _fmt(y, y + r, y + h - r, y + h)
    return (
        f"M {x0r} {y0} L {x1r} {y0} Q {x1} {y0} {x1} {y0r} "
        f"L {x1} {y1r} Q {x1} {y1} {x1r} {y1} "
        f"L {x0r} {y1} Q {x0} {y1} {x0} {y1r} "
        f"L {x0} {y0r} Q {x0} {y0} {x0r} {y0} Z"
    )


def wedge_path(x: float, y: float, w: float, h: float, side: NotchSide) -> str:
    """Triangle inside the zone ``(x, y, w, h)`` whose base lies on ``side``.

    The apex points away from the glyph edge named by ``side``, into the
    glyph body.
    """
    side = NotchSide(side)
    cx, cy = x + w / 2, y + h / 2
    if side is NotchSide.TOP:
        points = [(x, y), (x + w, y), (cx, y + h)]
    elif side is NotchSide.BOTTOM:
        points = [(x, y + h), (cx, y), (x + w, y + h)]
    elif side is NotchSide.INNER:
        points = [(x + w, y), (x + w, y + h), (x, cy)]
    else:
        points = [(x, y), (x, y + h), (x + w, cy)]
    return polygon_path(points)


def polygon_path(points: list[tuple[float, float]]) -> str:
    """Closed straight-edged path through ``points``."""
    head, *rest = points
    parts = ["M {} {}".format(*_fmt(*head))]
    parts.extend("L {} {}".format(*_fmt(px, py)) for px, py in rest)
    parts.append("Z")
    return " ".join(parts)


def diagonal_band_path(bbox: BBox, angle_deg: float, thickness: float, offset: float) -> str:
    """Parallelogram band crossing ``bbox``.

    The band starts at ``(bbox.x + offset, bbox.y + offset)``, runs
    ``bbox.w + bbox.h`` units along ``angle_deg`` and is ``thickness`` units
    thick perpendicular to that direction.

    Args:
        bbox: Glyph bounding box
        angle_deg: Band direction in degrees (0 is horizontal, y-down)
        thickness: Band thickness in path units
        offset: Start offset along both axes

    Returns:
        Path data of the band
    """
    rad = math.radians(angle_deg)
    length = bbox.w + bbox.h
    dx, dy = math.cos(rad) * length, math.sin(rad) * length
    perp_x, perp_y = -math.sin(rad) * thickness, math.cos(rad) * thickness
    x1, y1 = bbox.x + offset, bbox.y + offset
    x2, y2 = x1 + dx, y1 + dy
    return polygon_path(
        [
            (x1, y1),
            (x2, y2),
            (x2 + perp_x, y2 + perp_y),
            (x1 + perp_x, y1 + perp_y),
        ]
    )
