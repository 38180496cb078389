"""
Ratings Module

Overall rating, tiers, badges, route difficulty and race scoring.
"""

from .badges import evaluate_achievements, evaluate_badges
from .overall import classify_tier, compute_overall, Tier
from .race_scoring import (
    compute_gen_score,
    compute_race_points,
    Federation,
    ghost_tier,
    LeaderboardEntry,
    race_bonus,
    RaceBonus,
    RaceResult,
    rank_by_points,
    score_race_results,
    ScoredFinisher,
)
from .rider_card import (
    build_rider_card,
    card_from_skills,
    RiderCard,
    weekly_progression,
    WeeklyProgression,
)
from .route_difficulty import (
    compute_route_difficulty,
    DifficultyResult,
    score_route_difficulty,
)

__all__ = [
    "Tier",
    "compute_overall",
    "classify_tier",
    "evaluate_badges",
    "evaluate_achievements",
    "DifficultyResult",
    "score_route_difficulty",
    "compute_route_difficulty",
    "Federation",
    "RaceResult",
    "RaceBonus",
    "ScoredFinisher",
    "LeaderboardEntry",
    "compute_gen_score",
    "ghost_tier",
    "compute_race_points",
    "race_bonus",
    "score_race_results",
    "rank_by_points",
    "RiderCard",
    "WeeklyProgression",
    "build_rider_card",
    "card_from_skills",
    "weekly_progression",
]
