"""
Badge Evaluation

Playstyle badges are a flat rule table evaluated in full against the
current skill vector; the passing rules are ordered by priority and the
first three kept. Stat-based achievements are evaluated the same way but
returned in full.
"""

from typing import List

from ..analysis.skill_axes import SkillVector
from ..config import DEFAULT_CONFIG, ScoringConfig
from .overall import Tier


def evaluate_badges(skills: SkillVector, config: ScoringConfig = DEFAULT_CONFIG) -> List[str]:
    """
    Select up to `config.max_badges` playstyle badges.

    Args:
        skills: Current skill vector
        config: Scoring table holding the rule catalog

    Returns:
        Badge ids sorted by ascending priority (empty when nothing passes)
    """
    passing = [rule for rule in config.badge_rules if rule.predicate(skills)]
    passing.sort(key=lambda rule: rule.priority)
    return [rule.badge_id for rule in passing[: config.max_badges]]


def evaluate_achievements(
    skills: SkillVector,
    tier: Tier,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> List[str]:
    """
    List every stat-based achievement unlocked by the current card.

    History-based achievements (streaks, duels, races) belong to the caller.
    """
    unlocked = [
        achievement_id
        for achievement_id, axis, minimum in config.performance_achievements
        if getattr(skills, axis) >= minimum
    ]
    if tier >= Tier.DIAMOND:
        unlocked.append("reached_diamond")
    return unlocked
