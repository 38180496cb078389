"""
Race Scoring

Placement-based scores for race finishers:
- GEN: a 0-99 skill estimate from position and finish time, computed the
  same way for riders with an account and for ghosts (no account yet)
- Race points: placement scaled by the federation's prestige coefficient
- Finishing bonuses applied to a rider's card
- Race-result ingestion and cross-race leaderboard ranking
"""

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from ..config import DEFAULT_CONFIG, ScoringConfig, finite_or_zero, round_half_up
from .overall import Tier, classify_tier


class Federation(Enum):
    """Sanctioning bodies, highest prestige first"""

    FFC = "FFC"
    UFOLEP = "UFOLEP"
    FSGT = "FSGT"
    OTHER = "OTHER"  # unsanctioned or unknown

    @classmethod
    def parse(cls, value) -> "Federation":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").upper())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class RaceBonus:
    """Card boosts earned by a finishing position"""

    power_boost: int = 0
    overall_boost: int = 0
    badge: Optional[str] = None


@dataclass(frozen=True)
class RaceResult:
    """One finisher as stored by the race-results collaborator"""

    position: int
    finish_time_s: Optional[float]
    rider_id: Optional[str] = None  # None for a ghost
    rider_name: Optional[str] = None

    @property
    def is_ghost(self) -> bool:
        return self.rider_id is None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RaceResult":
        finish_time = data.get("finish_time_s", data.get("finish_time"))
        rider_id = data.get("rider_id", data.get("user_id"))
        return cls(
            position=int(finite_or_zero(data.get("position"))),
            finish_time_s=finite_or_zero(finish_time) if finish_time is not None else None,
            rider_id=str(rider_id) if rider_id is not None else None,
            rider_name=data.get("rider_name"),
        )


@dataclass(frozen=True)
class ScoredFinisher:
    """A race result with every derived score attached"""

    rider_id: Optional[str]
    rider_name: Optional[str]
    position: int
    field_size: int
    gen_score: int
    tier: Tier
    points: float
    is_ghost: bool
    bonus: RaceBonus = field(default_factory=RaceBonus)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["tier"] = self.tier.slug
        return result


@dataclass(frozen=True)
class LeaderboardEntry:
    """Cross-race points total for one rider"""

    rank: int
    rider_id: str
    points: float
    races: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _valid_count(value) -> Optional[float]:
    """Positive finite number, or None"""
    number = finite_or_zero(value)
    return number if number > 0 else None


def compute_gen_score(
    position,
    finish_time_s,
    field_size,
    best_time_s,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> int:
    """
    GEN score for one finisher.

    position_score: 1st = 99, last = 30, linear in between (99 for a
    field of one). time_score: best_time / finish_time * 99, 0 without a
    finish time. GEN is the rounded average, clamped to [0, 99].

    Depends only on the result tuple, so a ghost scores exactly like a
    registered rider. Invalid position or field size scores 0.
    """
    placement = config.placement
    pos = _valid_count(position)
    total = _valid_count(field_size)
    if pos is None or total is None:
        return 0

    if total <= 1:
        position_score = placement.first_place_score
    else:
        position_score = placement.first_place_score - (
            (pos - 1) / (total - 1)
        ) * (placement.first_place_score - placement.last_place_score)

    finish = finite_or_zero(finish_time_s)
    if finish > 0:
        time_score = (finite_or_zero(best_time_s) / finish) * placement.first_place_score
    else:
        time_score = 0.0

    gen = round_half_up((position_score + time_score) / 2)
    return max(0, min(placement.max_score, gen))


def ghost_tier(gen_score, config: ScoringConfig = DEFAULT_CONFIG) -> Tier:
    """Ghost cards use the same tier cutoffs as live cards"""
    return classify_tier(gen_score, config)


def compute_race_points(
    position,
    field_size,
    federation=Federation.OTHER,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> float:
    """
    Points for a finish: (1 - (position - 1) / field_size) * 100 * coefficient.

    Returned unrounded so points strictly decrease with position. Position
    or field size <= 0 gives 0.
    """
    pos = _valid_count(position)
    total = _valid_count(field_size)
    if pos is None or total is None:
        return 0.0

    scaling = config.race_points
    coefficients = scaling.federation_coefficients
    coefficient = coefficients.get(
        Federation.parse(federation).value,
        coefficients[scaling.default_federation],
    )

    raw = (1 - (pos - 1) / total) * scaling.base_points * coefficient
    return max(0.0, raw)


def race_bonus(position, config: ScoringConfig = DEFAULT_CONFIG) -> RaceBonus:
    """Card boosts for a finishing position (winner, podium, top 10)"""
    pos = _valid_count(position)
    if pos is None:
        return RaceBonus()

    for max_position, power_boost, overall_boost, badge in config.race_points.bonus_table:
        if pos <= max_position:
            return RaceBonus(
                power_boost=power_boost,
                overall_boost=overall_boost,
                badge=badge or None,
            )
    return RaceBonus()


def score_race_results(
    results: Iterable[RaceResult],
    federation=Federation.OTHER,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> List[ScoredFinisher]:
    """
    Score every finisher of one race.

    Field size is the number of results; the best time is the smallest
    positive finish time in the field.

    Args:
        results: Finishers (registered riders and ghosts)
        federation: Sanctioning body of the race
        config: Scoring table

    Returns:
        ScoredFinisher list ordered by position
    """
    ordered = sorted(results, key=lambda r: (finite_or_zero(r.position), r.rider_id or ""))
    field_size = len(ordered)

    times = [finite_or_zero(r.finish_time_s) for r in ordered]
    positive_times = [t for t in times if t > 0]
    best_time = min(positive_times) if positive_times else 0.0

    scored = []
    for result in ordered:
        gen = compute_gen_score(
            result.position, result.finish_time_s, field_size, best_time, config
        )
        scored.append(ScoredFinisher(
            rider_id=result.rider_id,
            rider_name=result.rider_name,
            position=result.position,
            field_size=field_size,
            gen_score=gen,
            tier=ghost_tier(gen, config),
            points=compute_race_points(result.position, field_size, federation, config),
            is_ghost=result.is_ghost,
            bonus=race_bonus(result.position, config),
        ))

    return scored


def rank_by_points(awards: Iterable[Dict[str, Any]]) -> List[LeaderboardEntry]:
    """
    Rank riders by total race points across races.

    Args:
        awards: Dicts with rider_id and points (one per race result);
            entries without a rider_id (ghosts) are skipped

    Returns:
        LeaderboardEntry list, highest points first. Riders on equal
        points share a rank (1, 2, 2, 4).
    """
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}

    for award in awards:
        rider_id = award.get("rider_id")
        if rider_id is None:
            continue
        rider_id = str(rider_id)
        totals[rider_id] = totals.get(rider_id, 0.0) + finite_or_zero(award.get("points"))
        counts[rider_id] = counts.get(rider_id, 0) + 1

    ordered = sorted(totals, key=lambda r: (-totals[r], counts[r], r))

    entries: List[LeaderboardEntry] = []
    for index, rider_id in enumerate(ordered):
        if entries and math.isclose(entries[-1].points, totals[rider_id], abs_tol=1e-9):
            rank = entries[-1].rank
        else:
            rank = index + 1
        entries.append(LeaderboardEntry(
            rank=rank,
            rider_id=rider_id,
            points=totals[rider_id],
            races=counts[rider_id],
        ))

    return entries
