"""Internal Bezier curve sampling helpers.

This is an internal module containing helper functions for path_to_polygons.
Not intended for public use.
"""

import math

Coord = tuple[float, float]


def control_length(points: list[Coord]) -> float:
    """Length of the control polygon, an upper bound on the curve length."""
    return sum(
        math.hypot(points[i + 1][0] - points[i][0], points[i + 1][1] - points[i][1])
        for i in range(len(points) - 1)
    )


def segment_steps(points: list[Coord], base_steps: int, min_spacing: float) -> int:
    """Number of subdivisions for a curve segment.

    Long segments get ``base_steps``; short ones get proportionally fewer,
    never less than 2.

    Args:
        points: Control points of the segment
        base_steps: Subdivisions for a full-length segment
        min_spacing: Approximate distance between samples on short segments

    Returns:
        Subdivision count
    """
    base = max(2, base_steps)
    if min_spacing <= 0:
        return base
    proportional = math.ceil(control_length(points) / min_spacing)
    return max(2, min(base, proportional))


def sample_cubic(p0: Coord, p1: Coord, p2: Coord, p3: Coord, steps: int) -> list[Coord]:
    """Sample a cubic Bezier at ``steps + 1`` evenly spaced parameters.

    Args:
        p0: Start point
        p1: First control point
        p2: Second control point
        p3: End point
        steps: Number of subdivisions

    Returns:
        Points from t=0 to t=1 inclusive
    """
    out: list[Coord] = []
    for i in range(steps + 1):
        t = i / steps
        u = 1.0 - t
        a = u * u * u
        b = 3 * u * u * t
        c = 3 * u * t * t
        d = t * t * t
        out.append(
            (
                a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
                a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
            )
        )
    return out


def sample_quadratic(p0: Coord, p1: Coord, p2: Coord, steps: int) -> list[Coord]:
    """Sample a quadratic Bezier at ``steps + 1`` evenly spaced parameters.

    Args:
        p0: Start point
        p1: Control point
        p2: End point
        steps: Number of subdivisions

    Returns:
        Points from t=0 to t=1 inclusive
    """
    out: list[Coord] = []
    for i in range(steps + 1):
        t = i / steps
        u = 1.0 - t
        out.append(
            (
                u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
                u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1],
            )
        )
    return out
