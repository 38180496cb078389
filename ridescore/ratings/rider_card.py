"""
Rider Card

Composes the full card (skills, OVR, tier, badges) from a batch of
activities, and compares two cards for the weekly snapshot.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..analysis.activities import ActivityRecord, filter_activities
from ..analysis.skill_axes import AXES, SkillVector, compute_skill_vector
from ..config import DEFAULT_CONFIG, ScoringConfig
from .badges import evaluate_achievements, evaluate_badges
from .overall import Tier, classify_tier, compute_overall


@dataclass(frozen=True)
class RiderCard:
    """Everything derived from one batch of activities"""

    skills: SkillVector
    overall: int
    tier: Tier
    badges: List[str] = field(default_factory=list)
    achievements: List[str] = field(default_factory=list)
    activities_counted: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skills": self.skills.to_dict(),
            "overall": self.overall,
            "tier": self.tier.slug,
            "badges": list(self.badges),
            "achievements": list(self.achievements),
            "activities_counted": self.activities_counted,
        }


@dataclass(frozen=True)
class WeeklyProgression:
    """Difference between last week's card and this week's"""

    skill_deltas: Dict[str, int]
    overall_delta: int
    previous_tier: Tier
    current_tier: Tier
    is_highlight: bool

    @property
    def tier_changed(self) -> bool:
        return self.previous_tier != self.current_tier

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skill_deltas": dict(self.skill_deltas),
            "overall_delta": self.overall_delta,
            "previous_tier": self.previous_tier.slug,
            "current_tier": self.current_tier.slug,
            "tier_changed": self.tier_changed,
            "is_highlight": self.is_highlight,
        }


def card_from_skills(
    skills: SkillVector,
    config: ScoringConfig = DEFAULT_CONFIG,
    activities_counted: int = 0,
) -> RiderCard:
    """Derive OVR, tier, badges and achievements from a skill vector"""
    overall = compute_overall(skills, config)
    tier = classify_tier(overall, config)

    return RiderCard(
        skills=skills,
        overall=overall,
        tier=tier,
        badges=evaluate_badges(skills, config),
        achievements=evaluate_achievements(skills, tier, config),
        activities_counted=activities_counted,
    )


def build_rider_card(
    activities: Optional[Sequence[ActivityRecord]],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> RiderCard:
    """
    Full card for a batch of activities.

    Non-ride activities are ignored; an empty batch gives an all-zero
    BRONZE card with no badges.
    """
    rides = filter_activities(activities)
    skills = compute_skill_vector(rides, config)
    return card_from_skills(skills, config, activities_counted=len(rides))


def weekly_progression(
    previous: RiderCard,
    current: RiderCard,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> WeeklyProgression:
    """
    Compare two cards.

    A progression is a highlight when OVR rose by at least
    `config.progression.highlight_overall_delta`.
    """
    deltas = {
        axis: getattr(current.skills, axis) - getattr(previous.skills, axis)
        for axis in AXES
    }
    overall_delta = current.overall - previous.overall

    return WeeklyProgression(
        skill_deltas=deltas,
        overall_delta=overall_delta,
        previous_tier=previous.tier,
        current_tier=current.tier,
        is_highlight=overall_delta >= config.progression.highlight_overall_delta,
    )
