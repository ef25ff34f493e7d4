"""Wordmark variant generation and ranking.

Twelve deterministic parameter sets (tracking delta, size scale, weight)
are rendered through an outline provider, evaluated, and ranked by score.
Evaluation can run in worker processes; each candidate is shipped as a
plain dictionary and owns its own geometry.

Key components:
- evaluate_candidate: Top-level picklable function for parallel execution
- candidate_from_base: Geometry summary of a rendered wordmark
- generate_variants: Render, evaluate and rank
"""

import math
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from markforge.config import EvaluatorConfig, MarkforgeSettings, get_default_settings
from markforge.core.evaluator import evaluate_wordmark_variant
from markforge.core.geometry import count_path_commands, path_bbox
from markforge.domain import (
    CandidatePath,
    Evaluation,
    FontIdentity,
    WordmarkBase,
    WordmarkCandidate,
)
from markforge.exceptions import MarkforgeError

if TYPE_CHECKING:
    from markforge.io.provider import GlyphOutlineProvider

logger = structlog.get_logger(__name__)

# (tracking delta, size scale, font weight)
VARIANT_PARAMS: tuple[tuple[float, float, int], ...] = (
    (-15, 1.0, 400),
    (-5, 1.0, 400),
    (0, 1.0, 400),
    (10, 1.0, 400),
    (-10, 0.98, 500),
    (5, 1.02, 500),
    (15, 1.0, 600),
    (-5, 1.0, 700),
    (0, 0.98, 700),
    (10, 1.0, 700),
    (20, 1.02, 700),
    (0, 1.0, 400),
)


@dataclass(frozen=True)
class VariantRequest:
    """Text and base typography for variant generation."""

    text: str
    font_family: str = "Inter"
    font_weight: int = 400
    font_style: str = "normal"
    size_px: float = 64.0
    tracking_px: float = 0.0
    seed: str = ""


@dataclass(frozen=True)
class WordmarkVariant:
    """One rendered and evaluated variant.

    Attributes:
        variant_index: Position of the parameter set that produced it
        font: Font identity used
        size_px: Rendered size
        tracking_px: Rendered tracking
        base: Rendered wordmark
        candidate: Geometry summary fed to the evaluator
        evaluation: Evaluator output
    """

    variant_index: int
    font: FontIdentity
    size_px: float
    tracking_px: float
    base: WordmarkBase
    candidate: WordmarkCandidate
    evaluation: Evaluation

    def to_dict(self) -> dict[str, Any]:
        return {
            "variant_index": self.variant_index,
            "font": {
                "family": self.font.family,
                "weight": self.font.weight,
                "style": self.font.style,
            },
            "size_px": self.size_px,
            "tracking_px": self.tracking_px,
            "base": self.base.to_dict(),
            "candidate": self.candidate.to_dict(),
            "evaluation": self.evaluation.to_dict(),
        }


@dataclass(frozen=True)
class VariantRanking:
    """Variants sorted by descending score; ties keep generation order."""

    variants: list[WordmarkVariant]
    best_index: int = 0

    @property
    def best(self) -> WordmarkVariant:
        return self.variants[self.best_index]


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def candidate_from_base(base: WordmarkBase) -> WordmarkCandidate:
    """Summarize a rendered wordmark for the evaluator.

    Advances are measured between consecutive glyph bbox left edges; the
    last glyph contributes its own width.
    """
    paths = tuple(CandidatePath(g.path_d, g.bbox) for g in base.glyph_runs if g.path_d)
    advances: tuple[float, ...] = ()
    if len(paths) >= 2:
        gaps = [nxt.bbox.x - cur.bbox.x for cur, nxt in zip(paths, paths[1:])]
        advances = tuple(gaps) + (paths[-1].bbox.w,)
    return WordmarkCandidate(
        bbox=path_bbox(base.combined_path),
        paths=paths,
        path_count=len(paths),
        command_count=count_path_commands(base.combined_path),
        advance_width=base.width,
        advances=advances,
    )


def evaluate_candidate(candidate_dict: dict[str, Any], config_dict: dict[str, Any]) -> dict[str, Any]:
    """Evaluate a serialized candidate.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.

    Args:
        candidate_dict: Serialized candidate (from WordmarkCandidate.to_dict())
        config_dict: Serialized evaluator configuration

    Returns:
        Serialized Evaluation
    """
    candidate = WordmarkCandidate.from_dict(candidate_dict)
    return evaluate_wordmark_variant(candidate, EvaluatorConfig(**config_dict)).to_dict()


def _evaluate_all(
    candidates: list[WordmarkCandidate],
    config: EvaluatorConfig,
    max_workers: int,
) -> list[Evaluation]:
    config_dict = config.model_dump()
    if max_workers <= 1 or len(candidates) <= 1:
        return [
            Evaluation.from_dict(evaluate_candidate(c.to_dict(), config_dict)) for c in candidates
        ]

    results: dict[int, Evaluation] = {}
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        pending = {
            executor.submit(evaluate_candidate, c.to_dict(), config_dict): i
            for i, c in enumerate(candidates)
        }
        for future in as_completed(pending):
            results[pending[future]] = Evaluation.from_dict(future.result())
    return [results[i] for i in range(len(candidates))]


def generate_variants(
    request: VariantRequest,
    provider: "GlyphOutlineProvider",
    settings: MarkforgeSettings | None = None,
    max_workers: int = 1,
) -> VariantRanking:
    """Render, evaluate and rank wordmark variants.

    Args:
        request: Text and base typography
        provider: Outline source
        settings: Application settings (evaluator weights)
        max_workers: Worker processes for evaluation (1 evaluates inline)

    Returns:
        VariantRanking sorted by descending total score

    Raises:
        OutlineError: If no variant renders and the plain request fails too
    """
    settings = settings or get_default_settings()
    rendered: list[tuple[int, FontIdentity, float, float, WordmarkBase]] = []

    for i, (tracking_delta, size_scale, weight) in enumerate(VARIANT_PARAMS):
        font = FontIdentity(request.font_family, weight, request.font_style)
        size = _round_half_up(request.size_px * size_scale)
        tracking = request.tracking_px + tracking_delta
        try:
            base = provider.get_outline(request.text, font, size, tracking)
        except MarkforgeError as e:
            logger.info("Variant skipped", variant=i, font=str(font), error=str(e))
            continue
        rendered.append((i, font, size, tracking, base))

    if not rendered:
        font = FontIdentity(request.font_family, request.font_weight, request.font_style)
        logger.warning("No variant rendered, using the plain request", text=request.text)
        base = provider.get_outline(request.text, font, request.size_px, request.tracking_px)
        rendered.append((0, font, request.size_px, request.tracking_px, base))

    candidates = [candidate_from_base(r[4]) for r in rendered]
    evaluations = _evaluate_all(candidates, settings.evaluator, max_workers)

    variants = [
        WordmarkVariant(index, font, size, tracking, base, candidate, evaluation)
        for (index, font, size, tracking, base), candidate, evaluation in zip(
            rendered, candidates, evaluations, strict=True
        )
    ]
    variants.sort(key=lambda v: -v.evaluation.total_score)
    return VariantRanking(variants=variants, best_index=0)
