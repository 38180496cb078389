"""
Route Difficulty Index (RDI)

Three additive terms, each a square-root saturation curve so it approaches
its cap slowly:

    score = 7 * sqrt(min(1, gain / 4500))
          + 2.5 * sqrt(min(1, distance_km / 200))
          + 0.5 * sqrt(min(1, wind_kmh / 50))

The score is rounded to the nearest 0.5 and capped at 10.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ..analysis.route_profile import RouteProfile
from ..config import DEFAULT_CONFIG, ScoringConfig, finite_or_zero, round_half_up


@dataclass(frozen=True)
class DifficultyResult:
    """RDI score and its qualitative label"""

    score: float
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _saturate(value: Optional[float], reference: float) -> float:
    """sqrt(min(1, value / reference)), with bad or negative input giving 0"""
    ratio = finite_or_zero(value) / reference if reference > 0 else 0.0
    return math.sqrt(max(0.0, min(1.0, ratio)))


def difficulty_label(score: float, config: ScoringConfig = DEFAULT_CONFIG) -> str:
    bands = config.route
    if score <= bands.easy_max:
        return "easy"
    if score <= bands.moderate_max:
        return "moderate"
    if score <= bands.hard_max:
        return "hard"
    return "extreme"


def score_route_difficulty(
    elevation_gain_m: float,
    distance_km: float,
    wind_kmh: Optional[float] = None,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> DifficultyResult:
    """
    Compute the RDI from route totals.

    Args:
        elevation_gain_m: Total D+ in meters
        distance_km: Total distance in km
        wind_kmh: Forecast wind speed; None when no weather data is available

    Returns:
        DifficultyResult
    """
    route = config.route

    raw = (
        route.elevation_weight * _saturate(elevation_gain_m, route.elevation_reference_m)
        + route.distance_weight * _saturate(distance_km, route.distance_reference_km)
        + route.wind_weight * _saturate(wind_kmh, route.wind_reference_kmh)
    )

    steps = round_half_up(raw / route.rounding_step)
    score = min(steps * route.rounding_step, route.max_score)

    return DifficultyResult(score=score, label=difficulty_label(score, config))


def compute_route_difficulty(
    profile: RouteProfile,
    wind_kmh: Optional[float] = None,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> DifficultyResult:
    """RDI for a parsed route profile"""
    if not profile.points:
        return score_route_difficulty(0.0, 0.0, wind_kmh, config)

    stats = profile.get_elevation_stats()
    return score_route_difficulty(
        stats['elevation_gain_m'],
        profile.get_total_distance_km(),
        wind_kmh,
        config,
    )
