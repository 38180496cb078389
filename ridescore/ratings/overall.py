"""
Overall Rating and Tier

OVR is a fixed-weight sum of the six skill axes; the tier is a threshold
lookup on OVR, recomputed from scratch on every call.
"""

from enum import IntEnum

from ..analysis.skill_axes import SkillVector
from ..config import DEFAULT_CONFIG, ScoringConfig, finite_or_zero, round_half_up


class Tier(IntEnum):
    """Card tiers, lowest to highest"""

    BRONZE = 0  # < 50
    SILVER = 1  # 50-64
    PLATINUM = 2  # 65-79
    DIAMOND = 3  # 80-89
    LEGEND = 4  # >= 90

    @property
    def slug(self) -> str:
        return self.name.lower()


def compute_overall(skills: SkillVector, config: ScoringConfig = DEFAULT_CONFIG) -> int:
    """
    Weighted sum of the skill axes, rounded to the nearest integer.

    Weights: power 0.30, climbing 0.20, pace 0.15, endurance 0.15,
    sprint 0.10, technique 0.10.
    """
    total = sum(
        weight * getattr(skills, axis)
        for axis, weight in config.weights.as_dict().items()
    )
    return max(0, min(config.skills.max_score, round_half_up(total)))


def classify_tier(overall, config: ScoringConfig = DEFAULT_CONFIG) -> Tier:
    """
    Map OVR to a tier. Lower edges are inclusive (49 is BRONZE, 50 is SILVER).

    Negative, missing or non-numeric input falls through to BRONZE.
    """
    value = finite_or_zero(overall)
    cutoffs = config.tiers

    if value >= cutoffs.legend:
        return Tier.LEGEND
    elif value >= cutoffs.diamond:
        return Tier.DIAMOND
    elif value >= cutoffs.platinum:
        return Tier.PLATINUM
    elif value >= cutoffs.silver:
        return Tier.SILVER
    else:
        return Tier.BRONZE
