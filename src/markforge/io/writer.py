"""SVG document serialization.

Marks and wordmarks are produced as path data; this module wraps them in
complete SVG documents for callers that need files.
"""

from html import escape
from pathlib import Path

from markforge.core.geometry import format_number
from markforge.domain import PositionedPath

SVG_NS = "http://www.w3.org/2000/svg"

# Minimum stroke width of 5px when the grid is rendered at 640px
MIN_STROKE_AT_640 = 5.0


def effective_stroke_px(stroke_px: float, grid: float) -> float:
    """Stroke width raised to stay visible when the mark is enlarged."""
    return max(stroke_px, MIN_STROKE_AT_640 * (grid / 640))


def _clean_d(path_d: str) -> str:
    return path_d.replace('"', "'")


def path_attributes(primary_hex: str, use_fill: bool, stroke_px: float) -> str:
    """Paint attributes for mark paths.

    Filled marks rely on the even-odd rule to carve negative space; stroke
    marks draw centerlines with round caps and joins.
    """
    if use_fill:
        return f'fill="{primary_hex}" fill-rule="evenodd" stroke="none"'
    return (
        f'fill="none" stroke="{primary_hex}" stroke-width="{format_number(stroke_px)}" '
        'stroke-linecap="round" stroke-linejoin="round"'
    )


def mark_svg(
    paths: list[PositionedPath],
    grid: float,
    primary_hex: str,
    use_fill: bool,
    stroke_px: float,
    brand_name: str,
) -> str:
    """Serialize a motif mark as a square SVG document.

    Args:
        paths: Positioned paths of the mark
        grid: Square grid size (width, height and view box)
        primary_hex: Paint color
        use_fill: Fill with even-odd rule instead of stroking
        stroke_px: Stroke width for stroke rendering
        brand_name: Used for the accessible label

    Returns:
        SVG document text
    """
    attrs = path_attributes(primary_hex, use_fill, stroke_px)
    lines = []
    for p in paths:
        transform = f' transform="{p.transform}"' if p.transform else ""
        lines.append(f'  <path d="{_clean_d(p.d)}" {attrs}{transform} />')
    size = format_number(grid)
    label = escape(f"{brand_name} mark", quote=True)
    header = (
        f'<svg xmlns="{SVG_NS}" width="{size}" height="{size}" '
        f'viewBox="0 0 {size} {size}" role="img" aria-label="{label}">'
    )
    return "\n".join([header, *lines, "</svg>"])


def wordmark_svg(path_d: str, view_box: str, fill: str = "currentColor") -> str:
    """Serialize a wordmark path as an SVG document."""
    return (
        f'<svg xmlns="{SVG_NS}" viewBox="{view_box}" fill="{fill}">'
        f'<path d="{_clean_d(path_d)}"/></svg>'
    )


def write_svg(output_path: Path, document: str) -> Path:
    """Write an SVG document, creating parent directories.

    Args:
        output_path: Destination file
        document: SVG text

    Returns:
        The path written
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(document + "\n", encoding="utf-8")
    return output_path
