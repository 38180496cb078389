"""
Tests for Scoring Configuration

Tests for table validation and the numeric helpers.
"""

import pytest
from ridescore.config import (
    DEFAULT_CONFIG,
    finite_or_zero,
    OverallWeights,
    RacePointsScaling,
    round_half_up,
    ScoringConfig,
    TierCutoffs,
)


class TestScoringConfigValidation:
    """Tests for construction-time checks"""

    def test_default_config_is_valid(self):
        """The shipped table passes its own checks"""
        assert sum(DEFAULT_CONFIG.weights.as_dict().values()) == pytest.approx(1.0)

    def test_weights_must_sum_to_one(self):
        """Weights that do not sum to 1.0 are rejected"""
        with pytest.raises(ValueError, match="sum to 1.0"):
            ScoringConfig(weights=OverallWeights(power=0.5))

    def test_tier_cutoffs_must_increase(self):
        """Overlapping tier bands are rejected"""
        with pytest.raises(ValueError, match="strictly increasing"):
            ScoringConfig(tiers=TierCutoffs(silver=70, platinum=65))

    def test_federations_must_be_ordered(self):
        """A lower-prestige federation may not out-score a higher one"""
        scaling = RacePointsScaling(
            federation_coefficients={"FFC": 1.0, "UFOLEP": 1.2, "FSGT": 0.8, "OTHER": 0.7}
        )
        with pytest.raises(ValueError, match="FFC > UFOLEP > FSGT"):
            ScoringConfig(race_points=scaling)

    def test_missing_federation_is_value_error(self):
        """A table without one of the ranked federations is rejected cleanly"""
        scaling = RacePointsScaling(
            federation_coefficients={"FFC": 1.2, "UFOLEP": 1.0, "OTHER": 0.7}
        )
        with pytest.raises(ValueError, match="Missing federation coefficients"):
            ScoringConfig(race_points=scaling)

    def test_default_federation_must_exist(self):
        """The fallback federation needs a coefficient"""
        with pytest.raises(ValueError, match="default federation"):
            ScoringConfig(race_points=RacePointsScaling(default_federation="UCI"))

    def test_config_is_frozen(self):
        """Scoring tables cannot be mutated after construction"""
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.max_badges = 5


class TestRoundHalfUp:
    """Tests for half-up rounding"""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (40.9, 41), (-0.5, 0)],
    )
    def test_values(self, value, expected):
        """Halves always round up"""
        assert round_half_up(value) == expected


class TestFiniteOrZero:
    """Tests for numeric coercion"""

    @pytest.mark.parametrize(
        "value",
        [None, float("nan"), float("inf"), float("-inf"), "abc", [1, 2]],
    )
    def test_bad_values_become_zero(self, value):
        """Missing or non-finite values become 0"""
        assert finite_or_zero(value) == 0.0

    def test_numbers_pass_through(self):
        """Finite numbers and numeric strings are kept"""
        assert finite_or_zero(12) == 12.0
        assert finite_or_zero("3.5") == 3.5
        assert finite_or_zero(-4.2) == -4.2
