"""Shared fixtures for integration tests.

Builds a tiny "Testmark" TrueType family on the fly so the font-backed
provider can be exercised without shipping binary fixtures.
"""

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from markforge.domain import FontIdentity
from markforge.io import FontOutlineProvider

UPM = 1000
ASCENT = 800
DESCENT = -200

Rect = tuple[int, int, int, int]

# glyph name -> (codepoint, advance, rectangles); the first rectangle is the outer contour
GLYPHS: dict[str, tuple[int, int, list[Rect]]] = {
    "A": (0x41, 600, [(50, 0, 550, 700), (200, 250, 400, 450)]),
    "B": (0x42, 600, [(50, 0, 550, 700), (200, 100, 400, 300), (200, 400, 400, 600)]),
    "C": (0x43, 500, [(50, 0, 450, 700)]),
    "l": (0x6C, 300, [(100, 0, 200, 700)]),
}


def _draw_rects(rects: list[Rect]) -> object:
    pen = TTGlyphPen(None)
    for i, (x0, y0, x1, y1) in enumerate(rects):
        # Counters run the opposite direction to the outer contour
        points = [(x0, y0), (x0, y1), (x1, y1), (x1, y0)]
        if i:
            points.reverse()
        pen.moveTo(points[0])
        for point in points[1:]:
            pen.lineTo(point)
        pen.closePath()
    return pen.glyph()


def build_test_font(out_path: Path, weight: int, style: str) -> Path:
    """Write a Testmark font of the given weight to ``out_path``."""
    glyph_order = [".notdef", "space", *GLYPHS]
    fb = FontBuilder(UPM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)

    glyf: dict[str, object] = {
        ".notdef": _draw_rects([(50, 0, 450, 700)]),
        "space": TTGlyphPen(None).glyph(),
    }
    hmtx: dict[str, tuple[int, int]] = {".notdef": (500, 50), "space": (250, 0)}
    cmap: dict[int, str] = {0x20: "space"}
    for name, (codepoint, advance, rects) in GLYPHS.items():
        glyf[name] = _draw_rects(rects)
        hmtx[name] = (advance, rects[0][0])
        cmap[codepoint] = name

    fb.setupGlyf(glyf)
    fb.setupHorizontalMetrics(hmtx)
    fb.setupCharacterMap(cmap)
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupOS2(
        usWeightClass=weight,
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
    )
    fb.setupNameTable(
        {
            "familyName": "Testmark",
            "styleName": style,
            "uniqueFontIdentifier": f"Testmark-{style}",
            "fullName": f"Testmark {style}",
            "psName": f"Testmark-{style}",
            "version": "Version 1.000",
        }
    )
    fb.setupPost()

    out_path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(out_path))
    return out_path


@pytest.fixture(scope="session")
def font_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Directory with Testmark Regular (400) and Bold (700)."""
    directory = tmp_path_factory.mktemp("fonts")
    build_test_font(directory / "Testmark-Regular.ttf", 400, "Regular")
    build_test_font(directory / "Testmark-Bold.ttf", 700, "Bold")
    return directory


@pytest.fixture
def provider(font_dir: Path) -> FontOutlineProvider:
    """Font-backed provider over the Testmark family."""
    return FontOutlineProvider.from_directory(font_dir)


@pytest.fixture
def bold() -> FontIdentity:
    """Testmark Bold identity."""
    return FontIdentity("Testmark", 700)
