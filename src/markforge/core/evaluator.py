"""Scoring of wordmark variants and motif families.

The evaluator combines four independent 0-100 scores into a weighted total:

- legibility: bbox coverage and smallest glyph extent
- weight: ink area relative to the bbox
- distinctiveness: path command count band and aspect ratio
- spacing consistency: coefficient of variation of glyph advances

Flags are advisory labels for ranking; nothing here raises on poor input.
"""

import math
from collections.abc import Callable, Sequence
from typing import TypeVar

from markforge.config import EvaluatorConfig
from markforge.core.boolean import path_area
from markforge.core.geometry import count_path_commands
from markforge.domain import Evaluation, EvaluationBreakdown, MotifFamily, WordmarkCandidate

T = TypeVar("T")

# Smallest glyph extent, relative to the wordmark width, before counters count as tiny
TINY_COUNTER_RATIO = 0.02
LOW_DETAIL_COMMANDS = 30
RICH_DETAIL_COMMANDS = 100

# Keyword groups and the score each family receives when a group matches
_HOOK_KEYWORDS: tuple[tuple[tuple[str, ...], dict[MotifFamily, int]], ...] = (
    (("loop", "circular", "flow"), {MotifFamily.LOOP: 10, MotifFamily.ORBIT: 8}),
    (("interlock", "connect", "link"), {MotifFamily.INTERLOCK: 10}),
    (("orbit", "circle", "round"), {MotifFamily.ORBIT: 10, MotifFamily.LOOP: 6}),
    (("fold", "origami", "geometric"), {MotifFamily.FOLD: 10, MotifFamily.INTERLOCK: 6}),
    (("swap", "alternate", "dynamic"), {MotifFamily.SWAP: 10}),
)
_BASE_FAMILY_SCORES: dict[MotifFamily, int] = {
    MotifFamily.LOOP: 5,
    MotifFamily.INTERLOCK: 6,
    MotifFamily.ORBIT: 5,
    MotifFamily.FOLD: 7,
    MotifFamily.SWAP: 6,
}


def _round1(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def spacing_consistency(advances: Sequence[float]) -> float:
    """Score 0-100 falling as the advances' coefficient of variation grows.

    Fewer than two advances, or a non-positive mean, score 100.
    """
    if len(advances) < 2:
        return 100.0
    mean = sum(advances) / len(advances)
    if mean <= 0:
        return 100.0
    variance = sum((a - mean) ** 2 for a in advances) / len(advances)
    return max(0.0, 100.0 - (math.sqrt(variance) / mean) * 200.0)


def evaluate_wordmark_variant(
    candidate: WordmarkCandidate,
    config: EvaluatorConfig | None = None,
    sample_budget: int = 60,
) -> Evaluation:
    """Score a wordmark variant.

    Args:
        candidate: Geometry summary of the variant
        config: Axis weights (defaults to 35/20/25/20)
        sample_budget: Curve sample budget for ink area

    Returns:
        Evaluation with the total, per-axis breakdown and flags
    """
    cfg = config or EvaluatorConfig()
    bbox = candidate.bbox
    paths = candidate.paths
    flags: list[str] = []

    bbox_area = bbox.w * bbox.h
    path_count = len(paths) if paths else (candidate.path_count or 0)
    if candidate.command_count is not None:
        command_count = candidate.command_count
    else:
        command_count = sum(count_path_commands(p.d) for p in paths)

    total_area = 0.0
    min_extent = bbox.w
    for p in paths:
        total_area += path_area(p.d, sample_budget)
        if p.bbox.w > 0 and p.bbox.h > 0 and p.bbox.w < min_extent:
            min_extent = p.bbox.w
        if 0 < p.bbox.h < min_extent:
            min_extent = p.bbox.h
    if bbox_area <= 0:
        min_extent = 0.0

    # Legibility
    coverage = min(100.0, total_area / bbox_area * 80.0) if bbox_area > 0 else 0.0
    counters = min(100.0, min_extent / bbox.w * 150.0) if bbox.w > 0 else 0.0
    legibility = min(100.0, (coverage + counters) / 2)
    if path_count < 2:
        flags.append("low_path_count")
    if min_extent < bbox.w * TINY_COUNTER_RATIO:
        flags.append("tiny_counters")

    # Weight
    weight = min(100.0, total_area / bbox_area * 120.0) if bbox_area > 0 else 0.0
    if weight < 20:
        flags.append("too_light")
    if weight > 95:
        flags.append("very_heavy")

    # Distinctiveness
    aspect = bbox.w / bbox.h if bbox.h > 0 else 1.0
    if command_count < LOW_DETAIL_COMMANDS:
        node_band = 0.0
    elif command_count < RICH_DETAIL_COMMANDS:
        node_band = 50.0
    else:
        node_band = min(100.0, command_count / 5)
    if 1 <= aspect <= 20:
        aspect_score = 100.0
    elif aspect < 1:
        aspect_score = 50.0
    else:
        aspect_score = max(0.0, 100.0 - aspect)
    distinctiveness = min(100.0, (node_band + aspect_score) / 2)
    if command_count < LOW_DETAIL_COMMANDS:
        flags.append("low_detail")

    # Spacing
    spacing = spacing_consistency(candidate.advances)
    if len(candidate.advances) >= 2 and spacing < 50:
        flags.append("inconsistent_spacing")

    total = (
        legibility * cfg.legibility_weight
        + weight * cfg.weight_weight
        + distinctiveness * cfg.distinctiveness_weight
        + spacing * cfg.spacing_weight
    )
    return Evaluation(
        total_score=_round1(min(100.0, max(0.0, total))),
        breakdown=EvaluationBreakdown(
            legibility=_round1(legibility),
            weight=_round1(weight),
            distinctiveness=_round1(distinctiveness),
            spacing_consistency=_round1(spacing),
        ),
        flags=flags,
    )


def score_motif_distinctiveness(family: MotifFamily, hook: str) -> int:
    """Keyword match score between a motif family and a distinctiveness hook.

    Examples:
        >>> score_motif_distinctiveness(MotifFamily.FOLD, "Origami-like planes")
        17
    """
    family = MotifFamily(family)
    text = hook.lower()
    score = 0
    for keywords, family_scores in _HOOK_KEYWORDS:
        if any(k in text for k in keywords):
            score += family_scores.get(family, 0)
    return score + _BASE_FAMILY_SCORES.get(family, 5)


def select_best(items: Sequence[T], score: Callable[[T], float]) -> int:
    """Index of the highest-scoring item; ties go to the earliest.

    Raises:
        ValueError: If ``items`` is empty
    """
    if not items:
        raise ValueError("select_best: empty sequence")
    best = 0
    best_score = score(items[0])
    for i in range(1, len(items)):
        s = score(items[i])
        if s > best_score:
            best, best_score = i, s
    return best
