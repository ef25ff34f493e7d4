"""Even-odd Boolean operations on path data.

Both operands are sampled into rings, each operand's rings are folded into a
single region under the even-odd rule (symmetric difference of the rings),
and the regions are combined with shapely. Results are re-emitted as M/L/Z
path data, exterior and interior rings alike, so the output renders
correctly with ``fill-rule="evenodd"``.

An empty string is a valid result and means the shape was eliminated.
"""

from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.validation import make_valid

from markforge.core.geometry import Polygon as Ring
from markforge.core.geometry import path_to_polygons, polygons_to_path_d

# Faces smaller than this are floating-point debris from clipping
MIN_FACE_AREA = 1e-9


def _polygonal_parts(geom: BaseGeometry) -> list[Polygon]:
    """Flatten a geometry into its non-empty polygon faces."""
    if geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, (MultiPolygon, GeometryCollection)):
        parts: list[Polygon] = []
        for sub in geom.geoms:
            parts.extend(_polygonal_parts(sub))
        return parts
    return []


def _as_region(parts: list[Polygon]) -> BaseGeometry:
    if not parts:
        return Polygon()
    if len(parts) == 1:
        return parts[0]
    return MultiPolygon(parts)


def _ring_region(ring: Ring) -> BaseGeometry | None:
    """Region enclosed by one ring, repaired when self-intersecting.

    Returns None for degenerate rings (fewer than 3 distinct vertices or
    zero area).
    """
    points = list(ring)
    if len(points) > 1 and points[0] == points[-1]:
        points = points[:-1]
    if len(points) < 3:
        return None
    try:
        poly = Polygon(points)
        if not poly.is_valid:
            poly = make_valid(poly)
    except (ValueError, GEOSException):
        return None
    parts = _polygonal_parts(poly)
    if not parts:
        return None
    return _as_region(parts)


def even_odd_region(rings: list[Ring]) -> BaseGeometry:
    """Fold rings into one region under the even-odd fill rule.

    Args:
        rings: Rings as produced by ``path_to_polygons``

    Returns:
        Polygonal shapely geometry (possibly empty)
    """
    region: BaseGeometry = Polygon()
    for ring in rings:
        if len(ring) < 3:
            continue
        part = _ring_region(ring)
        if part is None:
            continue
        region = _as_region(_polygonal_parts(region.symmetric_difference(part)))
    return region


def region_to_rings(region: BaseGeometry, min_area: float = MIN_FACE_AREA) -> list[Ring]:
    """Exterior and interior rings of every face of ``region``."""
    rings: list[Ring] = []
    for face in _polygonal_parts(region):
        if face.area < min_area:
            continue
        rings.append([(float(x), float(y)) for x, y in face.exterior.coords])
        for interior in face.interiors:
            rings.append([(float(x), float(y)) for x, y in interior.coords])
    return rings


def path_region(
    path_d: str,
    sample_budget: int = 120,
    min_sample_spacing: float = 0.5,
) -> BaseGeometry:
    """Even-odd region of path data."""
    return even_odd_region(path_to_polygons(path_d, sample_budget, min_sample_spacing))


def path_area(path_d: str, sample_budget: int = 60, min_sample_spacing: float = 0.5) -> float:
    """Enclosed area of path data under the even-odd rule.

    Holes are subtracted, unlike a plain sum of ring areas.

    Examples:
        >>> path_area("M 0 0 L 10 0 L 10 10 L 0 10 Z")
        100.0
    """
    return float(path_region(path_d, sample_budget, min_sample_spacing).area)


def _combine(
    path_a: str,
    path_b: str,
    operation: str,
    sample_budget: int,
    min_sample_spacing: float,
    precision: int,
) -> str:
    region_a = path_region(path_a, sample_budget, min_sample_spacing)
    region_b = path_region(path_b, sample_budget, min_sample_spacing)

    if operation == "union":
        result = region_a.union(region_b)
    else:
        result = region_a.difference(region_b)

    return polygons_to_path_d(region_to_rings(result), precision)


def union(
    path_a: str,
    path_b: str,
    sample_budget: int = 120,
    min_sample_spacing: float = 0.5,
    precision: int = 4,
) -> str:
    """Even-odd union of two paths.

    Args:
        path_a: First operand
        path_b: Second operand
        sample_budget: Curve sample budget for both operands
        min_sample_spacing: Sample spacing on short curve segments
        precision: Decimal places kept in the output

    Returns:
        M/L/Z path data of the union (empty string when both are empty)
    """
    return _combine(path_a, path_b, "union", sample_budget, min_sample_spacing, precision)


def subtract(
    path_a: str,
    path_b: str,
    sample_budget: int = 120,
    min_sample_spacing: float = 0.5,
    precision: int = 4,
) -> str:
    """Even-odd difference ``path_a - path_b``.

    Args:
        path_a: Shape to cut from
        path_b: Cutting shape
        sample_budget: Curve sample budget for both operands
        min_sample_spacing: Sample spacing on short curve segments
        precision: Decimal places kept in the output

    Returns:
        M/L/Z path data of the difference; empty when ``path_b`` covers
        ``path_a`` entirely
    """
    return _combine(path_a, path_b, "difference", sample_budget, min_sample_spacing, precision)
