"""Path and polygon conversion utilities.

This module provides the path side of the geometry kernel:
- Permissive parsing of the M/L/C/Q/Z path subset into sampled polygons
- Re-emission of polygons as M/L/Z path data
- Signed and absolute polygon area (shoelace formula)
- Bounding boxes and horizontal scaling by polygon round trip

Curves are never fitted back: a curve -> polygon -> path round trip loses
fidelity bounded by the sample budget. All functions are pure and stateless.
"""

import math
import re

from markforge.core._bezier import sample_cubic, sample_quadratic, segment_steps
from markforge.domain import BBox

Point = tuple[float, float]
Polygon = list[Point]

_TOKEN_RE = re.compile(r"[A-Za-z]|[-+]?[\d.]+(?:[eE][-+]?\d+)?")
_COMMAND_RE = re.compile(r"[MLCQAZ]", re.IGNORECASE)
_MOVE_RE = re.compile(r"[Mm]")

# Operand counts for the supported commands
_ARITY = {"M": 2, "L": 2, "C": 6, "Q": 4, "Z": 0}


def _to_number(token: str) -> float:
    """Coerce a numeric token, defaulting malformed or non-finite values to 0."""
    try:
        value = float(token)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def format_number(value: float, precision: int = 4) -> str:
    """Format a coordinate for path data.

    Rounds to ``precision`` decimals and strips trailing zeros, so output is
    stable across runs.

    Examples:
        >>> format_number(10.0)
        '10'
        >>> format_number(-0.00001)
        '0'
        >>> format_number(1.23456, 3)
        '1.235'
    """
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def path_to_polygons(
    path_d: str,
    sample_budget: int = 120,
    min_sample_spacing: float = 0.5,
) -> list[Polygon]:
    """Parse path data into polygons, sampling curves.

    Supports M, L, C, Q and Z (lower-case letters are read as absolute).
    Other command letters and their operands are skipped. A number where a
    command letter is expected repeats the previous command, with M
    repeating as L.

    Args:
        path_d: SVG path data
        sample_budget: Scale for curve sampling (cubic: budget // 10,
            quadratic: budget // 15 subdivisions per full-length segment)
        min_sample_spacing: Sample spacing used to reduce subdivisions on
            short segments

    Returns:
        Rings in path order. Closed rings end with their start point;
        trailing unterminated rings with at least 2 points are included.

    Examples:
        >>> path_to_polygons("M 0 0 L 10 0 L 10 10 Z")
        [[(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 0.0)]]
    """
    tokens = _TOKEN_RE.findall(path_d.replace(",", " ")) if path_d else []
    n = len(tokens)
    polygons: list[Polygon] = []
    current: Polygon = []
    x = y = 0.0
    start_x = start_y = 0.0
    cubic_base = max(2, sample_budget // 10)
    quad_base = max(2, sample_budget // 15)
    command: str | None = None
    i = 0

    def operands(count: int) -> list[float]:
        nonlocal i
        values: list[float] = []
        for _ in range(count):
            if i < n and not tokens[i].isalpha():
                values.append(_to_number(tokens[i]))
                i += 1
            else:
                values.append(0.0)
        return values

    def ensure_started() -> None:
        nonlocal start_x, start_y
        if not current:
            current.append((x, y))
            start_x, start_y = x, y

    while i < n:
        token = tokens[i]
        if token.isalpha():
            i += 1
            letter = token.upper()
            command = letter if letter in _ARITY else None
            if command is None:
                continue
        elif command is None or command == "Z":
            # Stray number with no command to repeat
            i += 1
            continue

        if command == "M":
            if len(current) >= 2:
                polygons.append(current)
            x, y = operands(2)
            start_x, start_y = x, y
            current = [(x, y)]
            # Subsequent coordinate pairs are implicit line-tos
            command = "L"
        elif command == "L":
            ensure_started()
            x, y = operands(2)
            current.append((x, y))
        elif command == "C":
            ensure_started()
            x1, y1, x2, y2, x3, y3 = operands(6)
            p0 = current[-1]
            ctrl = [p0, (x1, y1), (x2, y2), (x3, y3)]
            steps = segment_steps(ctrl, cubic_base, min_sample_spacing)
            current.extend(sample_cubic(p0, (x1, y1), (x2, y2), (x3, y3), steps)[1:])
            x, y = x3, y3
        elif command == "Q":
            ensure_started()
            x1, y1, x2, y2 = operands(4)
            p0 = current[-1]
            ctrl = [p0, (x1, y1), (x2, y2)]
            steps = segment_steps(ctrl, quad_base, min_sample_spacing)
            current.extend(sample_quadratic(p0, (x1, y1), (x2, y2), steps)[1:])
            x, y = x2, y2
        elif command == "Z":
            if len(current) >= 2:
                current.append((start_x, start_y))
                polygons.append(current)
            current = []
            x, y = start_x, start_y

    if len(current) >= 2:
        polygons.append(current)
    return polygons


def polygons_to_path_d(polygons: list[Polygon], precision: int = 4) -> str:
    """Emit polygons as M/L/Z path data.

    Args:
        polygons: Rings to emit; rings with fewer than 2 points are skipped
        precision: Decimal places kept per coordinate

    Returns:
        Path data string (empty when there is nothing to emit)

    Examples:
        >>> polygons_to_path_d([[(0, 0), (1, 0), (1, 1)]])
        'M 0 0 L 1 0 L 1 1 Z'
    """
    parts: list[str] = []
    for poly in polygons:
        if len(poly) < 2:
            continue
        fx, fy = poly[0]
        parts.append(f"M {format_number(fx, precision)} {format_number(fy, precision)}")
        for px, py in poly[1:]:
            parts.append(f"L {format_number(px, precision)} {format_number(py, precision)}")
        parts.append("Z")
    return " ".join(parts)


def signed_area(points: Polygon) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    Positive for counter-clockwise rings in y-up space (clockwise on screen).

    Args:
        points: Ring points (closing point optional)

    Returns:
        Signed area. Returns 0.0 for degenerate polygons.
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i][0] * points[j][1]
        area -= points[j][0] * points[i][1]

    return area / 2.0


def polygon_area(points: Polygon) -> float:
    """Absolute shoelace area of a ring."""
    return abs(signed_area(points))


def polygons_bbox(polygons: list[Polygon]) -> BBox:
    """Bounding box of all points in ``polygons`` (zero box when empty)."""
    xs = [p[0] for poly in polygons for p in poly]
    ys = [p[1] for poly in polygons for p in poly]
    if not xs:
        return BBox(0.0, 0.0, 0.0, 0.0)
    return BBox(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def path_bbox(path_d: str, sample_budget: int = 120) -> BBox:
    """Bounding box of sampled path data."""
    return polygons_bbox(path_to_polygons(path_d, sample_budget))


def scale_polygons_x(polygons: list[Polygon], scale_x: float, cx: float) -> list[Polygon]:
    """Scale ring x coordinates about the vertical line ``x = cx``."""
    return [[((px - cx) * scale_x + cx, py) for px, py in poly] for poly in polygons]


def scale_path_x(
    path_d: str,
    scale_x: float,
    cx: float,
    sample_budget: int = 80,
    precision: int = 4,
) -> str:
    """Horizontally scale path data about ``cx`` by polygon round trip.

    Args:
        path_d: Path data to scale
        scale_x: Horizontal scale factor
        cx: Horizontal center of the scaling
        sample_budget: Curve sample budget for the round trip
        precision: Decimal places kept in the output

    Returns:
        Scaled M/L/Z path data
    """
    polygons = path_to_polygons(path_d, sample_budget)
    return polygons_to_path_d(scale_polygons_x(polygons, scale_x, cx), precision)


def count_path_commands(path_d: str) -> int:
    """Count drawing commands (M, L, C, Q, A, Z in either case)."""
    return len(_COMMAND_RE.findall(path_d))


def count_subpaths(path_d: str) -> int:
    """Count move-to commands, i.e. subpaths."""
    return len(_MOVE_RE.findall(path_d))
