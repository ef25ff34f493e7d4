"""Font-backed glyph outline provider.

This module loads TTF/OTF fonts with fontTools and draws text into SVG
path data (y-down, baseline at ``size_px``). Only the M/L/C/Q/Z subset is
emitted, so every outline is readable by the geometry kernel.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fontTools.pens.basePen import BasePen
from fontTools.pens.transformPen import TransformPen
from fontTools.ttLib import TTFont, TTLibError

from markforge.core.geometry import format_number, path_bbox
from markforge.domain import BBox, FontIdentity, GlyphRun, WordmarkBase
from markforge.exceptions import FontNotFoundError, OutlineLoadError
from markforge.io.provider import OutlineCache

FONT_SUFFIXES = (".ttf", ".otf")

# Name table IDs used to identify a font file
NAME_ID_FAMILY = 1
NAME_ID_TYPOGRAPHIC_FAMILY = 16


class PathDataPen(BasePen):
    """Pen recording drawing commands as SVG path data.

    BasePen decomposes multi-point curve segments, so only single cubic and
    quadratic segments reach this pen.
    """

    def __init__(self, glyph_set: Any = None, precision: int = 4) -> None:
        super().__init__(glyph_set)
        self._precision = precision
        self._commands: list[str] = []

    def _pt(self, pt: tuple[float, float]) -> str:
        return f"{format_number(pt[0], self._precision)} {format_number(pt[1], self._precision)}"

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self._commands.append(f"M {self._pt(pt)}")

    def _lineTo(self, pt: tuple[float, float]) -> None:
        self._commands.append(f"L {self._pt(pt)}")

    def _curveToOne(
        self,
        pt1: tuple[float, float],
        pt2: tuple[float, float],
        pt3: tuple[float, float],
    ) -> None:
        self._commands.append(f"C {self._pt(pt1)} {self._pt(pt2)} {self._pt(pt3)}")

    def _qCurveToOne(self, pt1: tuple[float, float], pt2: tuple[float, float]) -> None:
        self._commands.append(f"Q {self._pt(pt1)} {self._pt(pt2)}")

    def _closePath(self) -> None:
        self._commands.append("Z")

    def path_data(self) -> str:
        """Recorded path data."""
        return " ".join(self._commands)


def _font_name(font: TTFont) -> str | None:
    name_table = font["name"]
    for name_id in (NAME_ID_TYPOGRAPHIC_FAMILY, NAME_ID_FAMILY):
        name = name_table.getDebugName(name_id)
        if name:
            return name
    return None


def identify_font(font: TTFont) -> FontIdentity:
    """Family, weight and style of a loaded font."""
    family = _font_name(font) or "Unknown"
    weight = 400
    style = "normal"
    if "OS/2" in font:
        os2 = font["OS/2"]
        weight = int(os2.usWeightClass)
        if os2.fsSelection & 1:
            style = "italic"
    return FontIdentity(family, weight, style)


class FontOutlineProvider:
    """Draws text outlines from registered font files.

    Loaded fonts are kept in a caller-owned ``OutlineCache``; pass the same
    cache to several providers to share it, and call ``cache.clear()`` to
    release fonts.

    Example:
        provider = FontOutlineProvider({FontIdentity("Inter", 700): Path("Inter-Bold.ttf")})
        base = provider.get_outline("Acme", FontIdentity("Inter", 700), 64)
    """

    def __init__(
        self,
        font_files: Mapping[FontIdentity, Path],
        cache: OutlineCache[str, TTFont] | None = None,
        precision: int = 4,
    ) -> None:
        """Initialize the provider.

        Args:
            font_files: Registry of font identities to font files
            cache: Loaded-font cache (a private one is created when None)
            precision: Decimal places kept in emitted path data
        """
        self.font_files = dict(font_files)
        self.cache: OutlineCache[str, TTFont] = cache if cache is not None else OutlineCache(8)
        self.precision = precision

    @classmethod
    def from_directory(
        cls,
        font_dir: Path,
        cache: OutlineCache[str, TTFont] | None = None,
    ) -> "FontOutlineProvider":
        """Register every font file in ``font_dir`` under its own identity.

        Files that cannot be parsed are skipped.
        """
        registry: dict[FontIdentity, Path] = {}
        for path in sorted(font_dir.iterdir()):
            if path.suffix.lower() not in FONT_SUFFIXES:
                continue
            try:
                font = TTFont(str(path), lazy=True)
            except (TTLibError, OSError):
                continue
            try:
                registry.setdefault(identify_font(font), path)
            finally:
                font.close()
        return cls(registry, cache)

    def _resolve(self, font: FontIdentity) -> Path:
        path = self.font_files.get(font)
        if path is None:
            # Fall back to the closest weight registered for the family and style
            candidates = [
                (abs(ident.weight - font.weight), ident.weight, p)
                for ident, p in self.font_files.items()
                if ident.family.lower() == font.family.lower() and ident.style == font.style
            ]
            if not candidates:
                raise FontNotFoundError(str(font))
            path = min(candidates)[2]
        if not path.exists():
            raise FontNotFoundError(f"{font} ({path})")
        return path

    def _load(self, font: FontIdentity) -> TTFont:
        key = font.key()
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        path = self._resolve(font)
        try:
            tt = TTFont(str(path))
        except (TTLibError, OSError) as e:
            raise OutlineLoadError(str(font), str(e)) from e
        self.cache.put(key, tt)
        return tt

    def get_outline(
        self,
        text: str,
        font: FontIdentity,
        size_px: float,
        tracking_px: float = 0.0,
    ) -> WordmarkBase:
        """Draw ``text`` into path data.

        Args:
            text: Text to draw (no shaping or kerning)
            font: Font identity to draw with
            size_px: Font size; the baseline sits at ``y = size_px``
            tracking_px: Extra advance added after every glyph

        Returns:
            WordmarkBase with per-character glyph runs

        Raises:
            FontNotFoundError: If no file is registered for the font
            OutlineLoadError: If the font cannot be loaded or lacks a glyph
        """
        tt = self._load(font)
        try:
            cmap = tt.getBestCmap() or {}
            glyph_set = tt.getGlyphSet()
            upm = tt["head"].unitsPerEm
            descent = abs(tt["hhea"].descent) if "hhea" in tt else 0
        except (TTLibError, KeyError, AttributeError) as e:
            raise OutlineLoadError(str(font), str(e)) from e

        scale = size_px / upm
        x = 0.0
        runs: list[GlyphRun] = []
        for i, char in enumerate(text):
            glyph_name = cmap.get(ord(char))
            if glyph_name is None:
                raise OutlineLoadError(str(font), f"no glyph for {char!r}")
            glyph = glyph_set[glyph_name]
            pen = PathDataPen(glyph_set, self.precision)
            glyph.draw(TransformPen(pen, (scale, 0, 0, -scale, x, size_px)))
            path_d = pen.path_data()
            bbox = path_bbox(path_d) if path_d else BBox(x, size_px, 0.0, 0.0)
            advance = glyph.width * scale + tracking_px
            runs.append(GlyphRun(i, char, path_d, bbox, advance))
            x += advance

        width = max(x - tracking_px, 0.0) if runs else 0.0
        height = size_px + descent * scale
        return WordmarkBase(
            combined_path=" ".join(r.path_d for r in runs if r.path_d),
            view_box=f"0 0 {format_number(width)} {format_number(height)}",
            width=width,
            height=height,
            glyph_runs=tuple(runs),
        )
