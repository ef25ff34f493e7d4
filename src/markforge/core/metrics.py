"""Area-delta metrics for customization passes."""

from markforge.core.boolean import path_area
from markforge.domain import WordmarkMetrics

SILHOUETTE_THRESHOLD = 0.02
LEGIBILITY_LOSS_THRESHOLD = 0.35


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, value))


def compute_metrics(
    original_path: str,
    modified_path: str,
    original_area: float | None = None,
    sample_budget: int = 60,
    silhouette_threshold: float = SILHOUETTE_THRESHOLD,
    legibility_loss_threshold: float = LEGIBILITY_LOSS_THRESHOLD,
) -> WordmarkMetrics:
    """Compare enclosed areas of the original and modified wordmark.

    Args:
        original_path: Path data before devices were applied
        modified_path: Path data after devices were applied
        original_area: Precomputed area of ``original_path``
        sample_budget: Curve sample budget for area computation
        silhouette_threshold: Delta ratio at which the silhouette counts as changed
        legibility_loss_threshold: Loss ratio beyond which legibility drops

    Returns:
        WordmarkMetrics with every value in 0..100
    """
    area_orig = original_area if original_area is not None else path_area(original_path, sample_budget)
    area_mod = path_area(modified_path, sample_budget)
    delta = area_orig - area_mod
    ratio = abs(delta) / area_orig if area_orig > 0 else 0.0

    legibility = 100.0
    if delta > 0 and area_orig > 0 and delta / area_orig > legibility_loss_threshold:
        legibility = 100.0 - (delta / area_orig) * 150.0

    return WordmarkMetrics(
        device_visibility=_clamp(ratio * 100.0),
        silhouette_delta=100.0 if ratio >= silhouette_threshold else 0.0,
        default_font_risk=_clamp((1.0 - ratio) * 100.0),
        legibility=_clamp(legibility),
    )
