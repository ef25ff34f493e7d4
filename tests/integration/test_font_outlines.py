"""Integration tests for font-backed outline extraction."""

from pathlib import Path

import pytest
from fontTools.ttLib import TTFont

from markforge.core.boolean import path_area
from markforge.core.geometry import count_subpaths
from markforge.domain import FontIdentity
from markforge.exceptions import FontNotFoundError, OutlineLoadError, OutlineUnavailableError
from markforge.io import FallbackOutlineProvider, FontOutlineProvider, OutlineCache, identify_font
from markforge.io.provider import FailureReason


class TestFontOutlineProvider:
    """Tests for FontOutlineProvider against a generated font."""

    def test_outline_geometry(self, provider: FontOutlineProvider, bold: FontIdentity) -> None:
        """Test glyph placement, scaling and the view box."""
        base = provider.get_outline("AB", bold, 64)
        assert base.text == "AB"
        assert len(base.glyph_runs) == 2
        a, b = base.glyph_runs
        assert a.advance == pytest.approx(38.4)
        assert b.bbox.x == pytest.approx(41.6)
        assert b.bbox.y == pytest.approx(19.2)
        assert b.bbox.w == pytest.approx(32.0)
        assert b.bbox.h == pytest.approx(44.8)
        assert base.width == pytest.approx(76.8)
        assert base.height == pytest.approx(76.8)
        assert base.view_box == "0 0 76.8 76.8"

    def test_counters_survive(self, provider: FontOutlineProvider, bold: FontIdentity) -> None:
        """Test counters are separate subpaths carved out under even-odd."""
        a = provider.get_outline("A", bold, 64).glyph_runs[0]
        assert count_subpaths(a.path_d) == 2
        assert path_area(a.path_d) == pytest.approx(32.0 * 44.8 - 12.8 * 12.8, rel=1e-6)

    def test_tracking(self, provider: FontOutlineProvider, bold: FontIdentity) -> None:
        """Test tracking is added after every glyph but not the last."""
        base = provider.get_outline("AB", bold, 64, tracking_px=5)
        assert base.glyph_runs[0].advance == pytest.approx(43.4)
        assert base.width == pytest.approx(81.8)

    def test_missing_glyph(self, provider: FontOutlineProvider, bold: FontIdentity) -> None:
        """Test a character outside the cmap raises OutlineLoadError."""
        with pytest.raises(OutlineLoadError, match="no glyph"):
            provider.get_outline("AZ", bold, 64)

    def test_unknown_family(self, provider: FontOutlineProvider) -> None:
        """Test an unregistered family raises FontNotFoundError."""
        with pytest.raises(FontNotFoundError):
            provider.get_outline("A", FontIdentity("Nowhere", 400), 64)

    @pytest.mark.parametrize(("weight", "expected"), [(500, 400), (600, 700), (550, 400)])
    def test_closest_weight(
        self, provider: FontOutlineProvider, weight: int, expected: int
    ) -> None:
        """Test unregistered weights resolve to the closest registered file."""
        exact = provider.get_outline("C", FontIdentity("Testmark", expected), 64)
        near = provider.get_outline("C", FontIdentity("Testmark", weight), 64)
        assert near.combined_path == exact.combined_path

    def test_family_match_ignores_case(self, provider: FontOutlineProvider) -> None:
        """Test family names are matched case-insensitively."""
        base = provider.get_outline("l", FontIdentity("testmark", 700), 64)
        assert base.glyph_runs[0].bbox.w == pytest.approx(6.4)

    def test_loaded_fonts_cached(self, font_dir: Path, bold: FontIdentity) -> None:
        """Test loaded fonts are kept in the caller's cache."""
        cache: OutlineCache[str, TTFont] = OutlineCache(2)
        provider = FontOutlineProvider.from_directory(font_dir, cache)
        provider.get_outline("A", bold, 32)
        assert bold.key() in cache
        cache.clear()
        assert provider.get_outline("A", bold, 32).glyph_runs


class TestFontDiscovery:
    """Tests for font identification and directory scanning."""

    def test_identify_font(self, font_dir: Path) -> None:
        """Test family and weight are read from the name and OS/2 tables."""
        font = TTFont(str(font_dir / "Testmark-Bold.ttf"))
        try:
            assert identify_font(font) == FontIdentity("Testmark", 700, "normal")
        finally:
            font.close()

    def test_from_directory_skips_other_files(self, tmp_path: Path, font_dir: Path) -> None:
        """Test non-font and unreadable files are ignored."""
        (tmp_path / "notes.txt").write_text("not a font", encoding="utf-8")
        (tmp_path / "broken.ttf").write_bytes(b"\x00garbage")
        (tmp_path / "Testmark-Bold.ttf").write_bytes((font_dir / "Testmark-Bold.ttf").read_bytes())
        provider = FontOutlineProvider.from_directory(tmp_path)
        assert list(provider.font_files) == [FontIdentity("Testmark", 700)]


class TestFallbackWithFonts:
    """Tests for fallback tiers over real providers."""

    def test_empty_tier_falls_through(self, provider: FontOutlineProvider, bold: FontIdentity) -> None:
        """Test a tier without the font hands over to the next tier."""
        chain = FallbackOutlineProvider([("bundled", FontOutlineProvider({})), ("local", provider)])
        base = chain.get_outline("AB", bold, 64)
        assert chain.last_tier == "local"
        assert chain.last_attempts[0].reason is FailureReason.FONT_NOT_FOUND
        assert len(base.glyph_runs) == 2

    def test_tiny_size_rejected(self, provider: FontOutlineProvider, bold: FontIdentity) -> None:
        """Test the quality gate applies to real outlines too."""
        chain = FallbackOutlineProvider([("local", provider)], min_extent=2.0)
        with pytest.raises(OutlineUnavailableError, match="quality_gate"):
            chain.get_outline("l", bold, 64)
