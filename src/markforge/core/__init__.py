"""Core geometry and generation algorithms for markforge.

This module contains the core algorithms for:

- Path parsing, polygon emission and even-odd Boolean operations
- Cutting and joining shapes (wedges, bands, rounded bars)
- Deterministic seeding (32-bit rolling hash, mulberry32)
- Motif mark generation with structural self-scan
- Plan-driven wordmark customization with a bounded retry
- Area metrics and wordmark variant scoring

All functions are designed to be:
- Deterministic (same inputs, same path data)
- Pure (no shared mutable state)
- Safe to run in worker processes

Key functions:
- path_to_polygons / polygons_to_path_d: Path <-> polygon conversion
- union / subtract: Even-odd Boolean operations
- build_motif_mark: Generate a motif mark
- customize_wordmark: Apply a customization plan
- evaluate_wordmark_variant: Score a wordmark variant

Key classes:
- MotifMarkBuilder: Motif generator with an injectable family table
- WordmarkCustomizer: Customizer with settings and statistics
"""

from markforge.core.geometry import (
    count_path_commands,
    format_number,
    path_bbox,
    path_to_polygons,
    polygon_area,
    polygons_to_path_d,
    scale_path_x,
    signed_area,
)
from markforge.core.boolean import path_area, subtract, union
from markforge.core.seed import SeededRandom, hash_seed, pick, rolling_hash
from markforge.core.shapes import diagonal_band_path, rect_path, rounded_rect_path, wedge_path
from markforge.core.devices import apply_ligature_bridge, apply_notch_cut, apply_seam_cut
from markforge.core.metrics import compute_metrics
from markforge.core.evaluator import (
    evaluate_wordmark_variant,
    score_motif_distinctiveness,
    select_best,
    spacing_consistency,
)
from markforge.core.customizer import WordmarkCustomizer, customize_wordmark
from markforge.core.motif import MotifMarkBuilder, build_motif_mark, resolve_variant
from markforge.core.variants import (
    VariantRanking,
    VariantRequest,
    WordmarkVariant,
    generate_variants,
)

__all__ = [
    # Geometry functions
    "count_path_commands",
    "format_number",
    "path_area",
    "path_bbox",
    "path_to_polygons",
    "polygon_area",
    "polygons_to_path_d",
    "scale_path_x",
    "signed_area",
    "subtract",
    "union",
    # Shapes
    "diagonal_band_path",
    "rect_path",
    "rounded_rect_path",
    "wedge_path",
    # Seeding
    "SeededRandom",
    "hash_seed",
    "pick",
    "rolling_hash",
    # Devices and metrics
    "apply_ligature_bridge",
    "apply_notch_cut",
    "apply_seam_cut",
    "compute_metrics",
    # Customizer
    "WordmarkCustomizer",
    "customize_wordmark",
    # Motif
    "MotifMarkBuilder",
    "build_motif_mark",
    "resolve_variant",
    # Evaluator and variants
    "VariantRanking",
    "VariantRequest",
    "WordmarkVariant",
    "evaluate_wordmark_variant",
    "generate_variants",
    "score_motif_distinctiveness",
    "select_best",
    "spacing_consistency",
]
