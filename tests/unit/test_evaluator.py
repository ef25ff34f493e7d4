"""Tests for variant scoring and motif ranking."""

import pytest
from pydantic import ValidationError

from markforge.config import EvaluatorConfig
from markforge.core.evaluator import (
    evaluate_wordmark_variant,
    score_motif_distinctiveness,
    select_best,
    spacing_consistency,
)
from markforge.domain import BBox, CandidatePath, MotifFamily, WordmarkCandidate


def _square(x: float, y: float = 0.0, size: float = 10.0) -> CandidatePath:
    d = f"M {x:g} {y:g} L {x + size:g} {y:g} L {x + size:g} {y + size:g} L {x:g} {y + size:g} Z"
    return CandidatePath(d, BBox(x, y, size, size))


@pytest.fixture
def two_squares() -> WordmarkCandidate:
    """Two 10x10 glyphs in a 30x10 wordmark with even advances."""
    return WordmarkCandidate(
        bbox=BBox(0, 0, 30, 10),
        paths=(_square(0), _square(20)),
        advances=(20.0, 20.0),
    )


class TestSpacingConsistency:
    """Tests for spacing_consistency."""

    def test_monotonic_in_variation(self) -> None:
        """Test the score falls as advances spread out."""
        even = spacing_consistency([10, 10, 10, 10])
        mild = spacing_consistency([8, 12, 8, 12])
        wide = spacing_consistency([6, 14, 6, 14])
        assert even == 100.0
        assert mild == pytest.approx(60.0)
        assert wide == pytest.approx(20.0)
        assert even > mild > wide

    def test_short_or_degenerate_input(self) -> None:
        """Test single advances and non-positive means score 100."""
        assert spacing_consistency([]) == 100.0
        assert spacing_consistency([12]) == 100.0
        assert spacing_consistency([0, 0]) == 100.0

    def test_clamped_at_zero(self) -> None:
        """Test extreme variation clamps to zero."""
        assert spacing_consistency([1, 100]) == 0.0


class TestEvaluateWordmarkVariant:
    """Tests for evaluate_wordmark_variant."""

    def test_breakdown(self, two_squares: WordmarkCandidate) -> None:
        """Test each axis for a simple two-glyph candidate."""
        result = evaluate_wordmark_variant(two_squares)
        b = result.breakdown
        assert b.legibility == 51.7
        assert b.weight == 80.0
        assert b.distinctiveness == 50.0
        assert b.spacing_consistency == 100.0
        assert result.total_score == 66.6
        assert result.flags == ["low_detail"]

    def test_custom_weights(self, two_squares: WordmarkCandidate) -> None:
        """Test the total follows the configured weights."""
        config = EvaluatorConfig(
            legibility_weight=0.0, weight_weight=1.0, distinctiveness_weight=0.0, spacing_weight=0.0
        )
        assert evaluate_wordmark_variant(two_squares, config).total_score == 80.0

    def test_weights_must_sum_to_one(self) -> None:
        """Test invalid weights are rejected."""
        with pytest.raises(ValidationError):
            EvaluatorConfig(legibility_weight=0.9)

    def test_single_path_flag(self) -> None:
        """Test a single path is flagged."""
        candidate = WordmarkCandidate(bbox=BBox(0, 0, 10, 10), paths=(_square(0),))
        assert "low_path_count" in evaluate_wordmark_variant(candidate).flags

    def test_path_count_without_paths(self) -> None:
        """Test the summary path count is used when paths are absent."""
        candidate = WordmarkCandidate(bbox=BBox(0, 0, 10, 10), path_count=3, command_count=40)
        result = evaluate_wordmark_variant(candidate)
        assert "low_path_count" not in result.flags
        assert "low_detail" not in result.flags

    def test_tiny_counters(self) -> None:
        """Test a glyph far smaller than the wordmark is flagged."""
        candidate = WordmarkCandidate(
            bbox=BBox(0, 0, 100, 10), paths=(_square(0), _square(50, size=1))
        )
        assert "tiny_counters" in evaluate_wordmark_variant(candidate).flags

    def test_too_light(self) -> None:
        """Test sparse ink is flagged as too light."""
        candidate = WordmarkCandidate(bbox=BBox(0, 0, 100, 10), paths=(_square(0),))
        result = evaluate_wordmark_variant(candidate)
        assert result.breakdown.weight == 12.0
        assert "too_light" in result.flags

    def test_very_heavy(self) -> None:
        """Test ink filling the bbox is flagged as very heavy."""
        candidate = WordmarkCandidate(bbox=BBox(0, 0, 10, 10), paths=(_square(0),))
        result = evaluate_wordmark_variant(candidate)
        assert result.breakdown.weight == 100.0
        assert "very_heavy" in result.flags

    def test_inconsistent_spacing(self, two_squares: WordmarkCandidate) -> None:
        """Test uneven advances are flagged."""
        candidate = WordmarkCandidate(
            bbox=two_squares.bbox, paths=two_squares.paths, advances=(6, 14, 6, 14)
        )
        result = evaluate_wordmark_variant(candidate)
        assert result.breakdown.spacing_consistency == 20.0
        assert "inconsistent_spacing" in result.flags

    @pytest.mark.parametrize(
        ("commands", "expected"),
        [(10, 50.0), (60, 75.0), (150, 65.0), (600, 100.0)],
    )
    def test_detail_bands(self, commands: int, expected: float) -> None:
        """Test the command count bands with a square-ish aspect."""
        candidate = WordmarkCandidate(bbox=BBox(0, 0, 20, 10), path_count=2, command_count=commands)
        assert evaluate_wordmark_variant(candidate).breakdown.distinctiveness == expected

    @pytest.mark.parametrize(
        ("bbox", "expected"),
        [(BBox(0, 0, 10, 20), 25.0), (BBox(0, 0, 30, 1), 35.0), (BBox(0, 0, 20, 1), 50.0)],
    )
    def test_aspect_scores(self, bbox: BBox, expected: float) -> None:
        """Test tall and very wide aspects lose distinctiveness."""
        candidate = WordmarkCandidate(bbox=bbox, path_count=2, command_count=0)
        assert evaluate_wordmark_variant(candidate).breakdown.distinctiveness == expected

    def test_empty_bbox_does_not_raise(self) -> None:
        """Test degenerate input scores low instead of raising."""
        result = evaluate_wordmark_variant(WordmarkCandidate(bbox=BBox(0, 0, 0, 0)))
        assert result.breakdown.legibility == 0.0
        assert result.breakdown.weight == 0.0
        assert 0.0 <= result.total_score <= 100.0

    def test_from_summary_metrics(self) -> None:
        """Test candidates parsed from camelCase summary metrics."""
        candidate = WordmarkCandidate.from_dict(
            {"bbox": {"x": 0, "y": 0, "w": 20, "h": 10}, "metrics": {"pathCount": 4, "commandCount": 120}}
        )
        result = evaluate_wordmark_variant(candidate)
        assert result.breakdown.distinctiveness == pytest.approx(62.0)


class TestScoreMotifDistinctiveness:
    """Tests for score_motif_distinctiveness."""

    def test_keyword_and_base(self) -> None:
        """Test a matching keyword adds to the family base score."""
        assert score_motif_distinctiveness(MotifFamily.FOLD, "Origami-like planes") == 17

    def test_multiple_groups(self) -> None:
        """Test several matching groups accumulate."""
        assert score_motif_distinctiveness(MotifFamily.LOOP, "A round loop") == 5 + 10 + 6

    def test_secondary_family(self) -> None:
        """Test a group can score a related family."""
        assert score_motif_distinctiveness(MotifFamily.ORBIT, "circular flow") == 5 + 8

    def test_no_match(self) -> None:
        """Test an unrelated hook scores only the base."""
        assert score_motif_distinctiveness(MotifFamily.SWAP, "quiet") == 6

    def test_monogram_default_base(self) -> None:
        """Test families without a base score use 5."""
        assert score_motif_distinctiveness(MotifFamily.MONOGRAM_INTERLOCK, "") == 5

    def test_string_family(self) -> None:
        """Test family values are accepted as strings."""
        assert score_motif_distinctiveness("swap", "dynamic") == 16


class TestSelectBest:
    """Tests for select_best."""

    def test_highest_wins(self) -> None:
        """Test the highest score is selected."""
        assert select_best([1, 5, 3], float) == 1

    def test_tie_goes_to_earliest(self) -> None:
        """Test ties keep the earliest index."""
        assert select_best([1, 3, 3, 2], float) == 1

    def test_empty(self) -> None:
        """Test empty input raises ValueError."""
        with pytest.raises(ValueError):
            select_best([], float)
