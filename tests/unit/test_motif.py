"""Tests for procedural motif mark generation."""

from concurrent.futures import ProcessPoolExecutor
from unittest.mock import Mock

import pytest

from markforge.config import MarkforgeSettings, MotifConfig
from markforge.core.boolean import path_area
from markforge.core.geometry import path_bbox
from markforge.core.motif import (
    FAMILY_BUILDERS,
    MotifMarkBuilder,
    alternate_family,
    build_motif_mark,
    check_structure,
    count_full_rings,
    monogram_initials,
    resolve_variant,
)
from markforge.domain import BBox, FontIdentity, GlyphRun, MotifFamily, MotifMarkSpec, WordmarkBase
from markforge.exceptions import MarkStructureError, OutlineLoadError
from markforge.io.writer import effective_stroke_px

GEOMETRIC_FAMILIES = [f for f in MotifFamily if f is not MotifFamily.MONOGRAM_INTERLOCK]
RING_ARCS = "M 0 0 A 5 5 0 1 1 10 0 A 5 5 0 1 1 0 0 A 4 4 0 1 1 8 0 Z"


def _spec(family: MotifFamily | str, **kwargs: object) -> MotifMarkSpec:
    data: dict[str, object] = {
        "brand_name": "Acme",
        "motif_family": family,
        "seed": "acme-seed",
        "primary_hex": "#1a2b3c",
    }
    data.update(kwargs)
    return MotifMarkSpec(**data)


def _outline(path_d: str) -> WordmarkBase:
    box = path_bbox(path_d)
    return WordmarkBase(path_d, "0 0 64 64", 64, 64, (GlyphRun(0, "A", path_d, box, 40),))


class TestResolveVariant:
    """Tests for variant selection."""

    def test_explicit_variant(self) -> None:
        """Test an explicit variant wins over the seed."""
        assert resolve_variant(_spec("loop", variant=4)) == 4

    def test_seed_variant(self) -> None:
        """Test the seed hash selects the variant."""
        assert resolve_variant(_spec("loop", seed="ab")) == 3105 % 6

    def test_seed_variant_in_range(self) -> None:
        """Test seed-derived variants stay below the variant count."""
        for seed in ("a", "b", "acme", "zeta", "Ω"):
            assert 0 <= resolve_variant(_spec("fold", seed=seed)) < 6


class TestFamilyBuilders:
    """Tests for the geometric family builders."""

    @pytest.mark.parametrize("family", GEOMETRIC_FAMILIES)
    @pytest.mark.parametrize("variant", range(6))
    def test_filled_marks_have_area_inside_grid(self, family: MotifFamily, variant: int) -> None:
        """Test filled marks enclose area and stay inside the grid."""
        d = FAMILY_BUILDERS[family](24, 2, 2, variant, True)
        assert path_area(d) > 0
        box = path_bbox(d)
        assert box.x >= 0 and box.y >= 0
        assert box.right <= 24 and box.bottom <= 24

    @pytest.mark.parametrize("family", GEOMETRIC_FAMILIES)
    def test_variants_differ(self, family: MotifFamily) -> None:
        """Test variations produce different geometry."""
        builder = FAMILY_BUILDERS[family]
        paths = {builder(24, 2, 2, v, True) for v in range(6)}
        assert len(paths) > 1

    @pytest.mark.parametrize("family", GEOMETRIC_FAMILIES)
    def test_variant_wraps(self, family: MotifFamily) -> None:
        """Test variants wrap modulo the family table."""
        builder = FAMILY_BUILDERS[family]
        assert builder(24, 2, 2, 7, True) == builder(24, 2, 2, 1, True)

    def test_loop_gap_opens_ring(self) -> None:
        """Test the loop gap removes band area from the ring."""
        d = FAMILY_BUILDERS[MotifFamily.LOOP](24, 2, 2, 0, True)
        ring_only = d[: d.rindex(" M ")]
        assert path_area(d) < path_area(ring_only)

    @pytest.mark.parametrize("family", GEOMETRIC_FAMILIES)
    def test_stroke_marks_are_centerlines(self, family: MotifFamily) -> None:
        """Test stroke builders return path data without arcs."""
        d = FAMILY_BUILDERS[family](24, 2, 2, 0, False)
        assert d.startswith("M ")
        assert "A" not in d


class TestStructureScan:
    """Tests for the structural self-scan."""

    def test_text_rejected(self) -> None:
        """Test text elements raise MarkStructureError."""
        with pytest.raises(MarkStructureError, match="<text>"):
            check_structure('<svg><text>A</text><path d="M 0 0"/></svg>', MotifFamily.LOOP)

    def test_lone_circle_rejected(self) -> None:
        """Test a circle without paths raises MarkStructureError."""
        with pytest.raises(MarkStructureError, match="circle"):
            check_structure('<svg><circle r="4"/></svg>', MotifFamily.ORBIT)

    def test_circle_with_path_warns(self) -> None:
        """Test a circle next to paths is only a warning."""
        svg = '<svg><circle r="4"/><path d="M 0 0 L 1 1 M 2 2 L 3 3"/></svg>'
        warnings = check_structure(svg, MotifFamily.ORBIT)
        assert "contains 1 circle element(s)" in warnings
        assert not any("subpath" in w for w in warnings)

    def test_single_subpath_warns(self) -> None:
        """Test one subpath adds a visual weight warning."""
        warnings = check_structure('<svg><path d="M 0 0 L 1 1"/></svg>', MotifFamily.FOLD)
        assert any("subpath" in w for w in warnings)

    def test_single_path_element_warns(self) -> None:
        """Test one path element warns even when it holds several subpaths."""
        svg = '<svg><path d="M 0 0 L 1 1 M 2 2 L 3 3"/></svg>'
        warnings = check_structure(svg, MotifFamily.LOOP)
        assert warnings == ["only 1 path element(s); mark may lack visual weight"]

    def test_two_path_elements_no_warning(self) -> None:
        """Test two path elements with two subpaths pass cleanly."""
        svg = '<svg><path d="M 0 0 L 1 1"/><path d="M 2 2 L 3 3"/></svg>'
        assert check_structure(svg, MotifFamily.LOOP) == []

    def test_monogram_exempt_from_subpath_warning(self) -> None:
        """Test monogram marks skip the subpath check."""
        svg = '<svg><path d="M 0 0 L 1 1"/></svg>'
        assert check_structure(svg, MotifFamily.MONOGRAM_INTERLOCK) == []

    def test_count_full_rings(self) -> None:
        """Test full-ring arc signatures are counted."""
        assert count_full_rings(RING_ARCS) == 3
        assert count_full_rings("M 0 0 A 5 5 0 0 1 10 0") == 0

    def test_alternate_families(self) -> None:
        """Test alternate family table."""
        assert alternate_family(MotifFamily.ORBIT) is MotifFamily.FOLD
        assert alternate_family(MotifFamily.FOLD) is MotifFamily.ORBIT
        assert alternate_family(MotifFamily.SWAP) is MotifFamily.LOOP
        assert alternate_family(MotifFamily.INTERLOCK) is MotifFamily.SWAP


class TestBuildMotifMark:
    """Tests for build_motif_mark."""

    @pytest.mark.parametrize("family", list(MotifFamily))
    @pytest.mark.parametrize("use_fill", [True, False])
    def test_never_contains_text(self, family: MotifFamily, use_fill: bool) -> None:
        """Test marks of every family are path-only."""
        mark = build_motif_mark(_spec(family, use_fill=use_fill))
        assert "<text" not in mark.mark_svg
        assert "<path" in mark.mark_svg

    def test_deterministic(self) -> None:
        """Test repeated builds are byte-identical."""
        spec = _spec("orbit", variant=2, grid=32)
        first = build_motif_mark(spec)
        second = build_motif_mark(spec)
        assert first.mark_svg == second.mark_svg
        assert first.path_data == second.path_data

    def test_deterministic_across_processes(self) -> None:
        """Test builds in worker processes match the in-process build."""
        specs = [_spec(family, seed="cross") for family in GEOMETRIC_FAMILIES]
        local = [build_motif_mark(s).mark_svg for s in specs]
        with ProcessPoolExecutor(max_workers=2) as executor:
            remote = [m.mark_svg for m in executor.map(build_motif_mark, specs)]
        assert remote == local

    def test_construction(self) -> None:
        """Test construction info reflects the requested geometry."""
        mark = build_motif_mark(_spec("fold", variant=3, grid=40, corner_radius_px=3))
        c = mark.construction
        assert c.family is MotifFamily.FOLD
        assert c.variant == 3
        assert c.grid == 40
        assert c.corner_radius_px == 3
        assert c.fallback_family is None
        assert c.warnings == ["only 1 path element(s); mark may lack visual weight"]

    def test_svg_document(self) -> None:
        """Test SVG header, label and paint."""
        mark = build_motif_mark(_spec("swap", brand_name="A & B"))
        assert mark.mark_svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="24"')
        assert 'aria-label="A &amp; B mark"' in mark.mark_svg
        assert 'fill="#1a2b3c" fill-rule="evenodd"' in mark.mark_svg
        assert mark.mark_svg.endswith("</svg>")

    def test_stroke_width_floor(self) -> None:
        """Test stroke width is raised for large grids."""
        assert effective_stroke_px(0.5, 24) == 0.5
        assert effective_stroke_px(0.5, 640) == 5.0
        mark = build_motif_mark(_spec("loop", use_fill=False, stroke_px=1))
        assert 'stroke-width="1"' in mark.mark_svg
        assert 'fill="none"' in mark.mark_svg

    def test_ring_signature_regenerates_with_alternate(self) -> None:
        """Test a candidate with three full rings is replaced once."""
        builder = MotifMarkBuilder(builders={MotifFamily.ORBIT: lambda *args: RING_ARCS})
        mark = builder.build(_spec("orbit", variant=0))
        c = mark.construction
        assert c.family is MotifFamily.FOLD
        assert c.fallback_family is MotifFamily.FOLD
        assert "full-ring" in (c.fallback_reason or "")
        assert count_full_rings(mark.mark_svg) == 0

    def test_injected_builder_with_text_rejected(self) -> None:
        """Test an injected builder cannot smuggle text into the mark."""
        builder = MotifMarkBuilder(builders={MotifFamily.LOOP: lambda *args: '"/><text>A</text>'})
        with pytest.raises(MarkStructureError):
            builder.build(_spec("loop"))


class TestMonogram:
    """Tests for the monogram-interlock family."""

    def test_initials(self) -> None:
        """Test initials extraction."""
        assert monogram_initials("acme") == ["A"]
        assert monogram_initials("Acme Beta Corp") == ["A", "B"]
        assert monogram_initials("Alpha Acme") == ["A"]

    def test_single_word_gives_one_path(self) -> None:
        """Test a single-word brand yields exactly one glyph path."""
        provider = Mock()
        provider.get_outline.return_value = _outline("M 0 0 L 10 0 L 10 10 L 0 10 Z")
        mark = MotifMarkBuilder(provider).build(_spec("monogram-interlock"))
        assert len(mark.paths) == 1
        assert mark.paths[0].transform == "translate(11.025,11.025) scale(0.195)"
        assert mark.construction.fallback_reason is None
        provider.get_outline.assert_called_once_with("A", FontIdentity("Inter", 700), 64.0, 0.0)

    def test_two_words_give_two_paths(self) -> None:
        """Test two initials are spread symmetrically about the center."""
        provider = Mock()
        provider.get_outline.return_value = _outline("M 0 0 L 10 0 L 10 10 L 0 10 Z")
        mark = MotifMarkBuilder(provider).build(_spec("monogram-interlock", brand_name="Acme Beta"))
        assert len(mark.paths) == 2
        left, right = (float(p.transform.split("(")[1].split(",")[0]) for p in mark.paths)
        assert (left + right) / 2 == pytest.approx(11.025, abs=1e-3)
        assert right > left

    def test_monogram_font_from_settings(self) -> None:
        """Test monogram font identity and size come from settings."""
        provider = Mock()
        provider.get_outline.return_value = _outline("M 0 0 L 10 0 L 10 10 L 0 10 Z")
        settings = MarkforgeSettings(
            motif=MotifConfig(monogram_font_family="Testmark", monogram_font_size=32)
        )
        MotifMarkBuilder(provider, settings).build(_spec("monogram-interlock"))
        provider.get_outline.assert_called_once_with("A", FontIdentity("Testmark", 700), 32.0, 0.0)

    def test_provider_failure_falls_back(self) -> None:
        """Test provider errors fall back to ribbon rings with a reason."""
        provider = Mock()
        provider.get_outline.side_effect = OutlineLoadError("Inter 700 normal", "corrupt")
        mark = MotifMarkBuilder(provider).build(_spec("monogram-interlock"))
        assert len(mark.paths) == 1
        assert mark.paths[0].transform is None
        assert "corrupt" in (mark.construction.fallback_reason or "")
        assert mark.construction.family is MotifFamily.MONOGRAM_INTERLOCK
        assert path_area(mark.paths[0].d) > 0

    def test_provider_timeout_falls_back(self) -> None:
        """Test I/O errors from the provider also fall back to ribbon rings."""
        provider = Mock()
        provider.get_outline.side_effect = TimeoutError("font fetch timed out")
        mark = MotifMarkBuilder(provider).build(_spec("monogram-interlock"))
        assert len(mark.paths) == 1
        assert mark.paths[0].transform is None
        assert "timed out" in (mark.construction.fallback_reason or "")

    def test_provider_value_error_falls_back(self) -> None:
        """Test malformed outline data falls back instead of escaping."""
        provider = Mock()
        provider.get_outline.side_effect = ValueError("bad path data")
        mark = MotifMarkBuilder(provider).build(_spec("monogram-interlock"))
        assert mark.construction.fallback_reason == "bad path data"

    def test_no_provider_falls_back(self) -> None:
        """Test a missing provider is recorded as the fallback reason."""
        mark = build_motif_mark(_spec("monogram-interlock"))
        assert mark.construction.fallback_reason == "no outline provider configured"
        assert "quality gate" not in (mark.construction.fallback_reason or "")

    def test_empty_outline_falls_back(self) -> None:
        """Test an empty outline is treated as a provider failure."""
        provider = Mock()
        provider.get_outline.return_value = WordmarkBase("", "0 0 0 0", 0, 0)
        mark = MotifMarkBuilder(provider).build(_spec("monogram-interlock"))
        assert "empty outline" in (mark.construction.fallback_reason or "")

    def test_spread_is_seeded(self) -> None:
        """Test the initial spread depends only on the seed."""
        provider = Mock()
        provider.get_outline.return_value = _outline("M 0 0 L 10 0 L 10 10 L 0 10 Z")
        builder = MotifMarkBuilder(provider)
        spec = _spec("monogram-interlock", brand_name="Acme Beta")
        assert builder.build(spec).mark_svg == builder.build(spec).mark_svg


class TestOutlineBBox:
    """Sanity check for the outline helper used above."""

    def test_outline_bbox(self) -> None:
        """Test helper outlines carry their bbox."""
        assert _outline("M 0 0 L 10 0 L 10 10 L 0 10 Z").glyph_runs[0].bbox == BBox(0, 0, 10, 10)
