"""
Scoring Configuration

Single table of every weight, cap, reference value and threshold used by
the scoring engine. Live sync, weekly snapshots, race ingestion and the
leaderboard all read from DEFAULT_CONFIG so their numbers cannot drift.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, NamedTuple, Tuple


@dataclass(frozen=True)
class SkillScaling:
    """Reference values for the six skill axes"""

    max_score: int = 99

    # END: longest ride (km) that maps to max_score
    endurance_reference_km: float = 200.0

    # MON: cumulative D+ (m) that maps to max_score
    climbing_reference_m: float = 50000.0

    # RES: measured power branch
    power_reference_w: float = 300.0
    power_min_measured_rides: int = 3
    power_top_fraction: float = 0.2

    # RES: physics estimate branch (~75kg rider)
    rider_mass_kg: float = 75.0
    gravity_ms2: float = 9.81
    flat_power_coefficient: float = 1.5  # 3.0 * 0.5, air resistance proxy
    estimate_damping: float = 0.8

    # SPR: GPS spike filter and ratio that maps to max_score
    max_speed_cap_kmh: float = 80.0
    sprint_reference_ratio: float = 2.0

    # VAL: pacing efficiency + consistency
    technique_efficiency_weight: float = 0.7
    technique_consistency_weight: float = 0.3
    technique_reference: float = 0.95


@dataclass(frozen=True)
class OverallWeights:
    """OVR weights per axis, must sum to 1.0"""

    power: float = 0.30
    climbing: float = 0.20
    pace: float = 0.15
    endurance: float = 0.15
    sprint: float = 0.10
    technique: float = 0.10

    def as_dict(self) -> Dict[str, float]:
        return {
            "pace": self.pace,
            "endurance": self.endurance,
            "climbing": self.climbing,
            "power": self.power,
            "sprint": self.sprint,
            "technique": self.technique,
        }


@dataclass(frozen=True)
class TierCutoffs:
    """Lower (inclusive) OVR edge of each tier above the lowest"""

    silver: int = 50
    platinum: int = 65
    diamond: int = 80
    legend: int = 90


@dataclass(frozen=True)
class RouteDifficultyScaling:
    """RDI term caps, saturation references and label bands"""

    elevation_weight: float = 7.0
    elevation_reference_m: float = 4500.0
    distance_weight: float = 2.5
    distance_reference_km: float = 200.0
    wind_weight: float = 0.5
    wind_reference_kmh: float = 50.0

    max_score: float = 10.0
    rounding_step: float = 0.5

    easy_max: float = 3.0
    moderate_max: float = 6.0
    hard_max: float = 8.0


@dataclass(frozen=True)
class PlacementScaling:
    """GEN score bounds"""

    first_place_score: float = 99.0
    last_place_score: float = 30.0
    max_score: int = 99


@dataclass(frozen=True)
class RacePointsScaling:
    """Race points base and federation coefficients"""

    base_points: float = 100.0
    federation_coefficients: Dict[str, float] = field(
        default_factory=lambda: {
            "FFC": 1.2,
            "UFOLEP": 1.0,
            "FSGT": 0.8,
            "OTHER": 0.7,
        }
    )
    default_federation: str = "OTHER"

    # Finishing-position bonuses: (max position, power boost, overall boost, badge)
    bonus_table: Tuple[Tuple[int, int, int, str], ...] = (
        (1, 5, 3, "race_winner"),
        (3, 3, 2, "race_podium"),
        (10, 2, 1, ""),
    )


@dataclass(frozen=True)
class ProgressionScaling:
    """Weekly snapshot thresholds"""

    highlight_overall_delta: int = 5


class BadgeRule(NamedTuple):
    """A single playstyle badge: identifier, priority and predicate"""

    badge_id: str
    priority: int
    predicate: Callable[[object], bool]


# Evaluated uniformly; lower priority wins when more than max_badges pass.
PLAYSTYLE_BADGE_RULES: Tuple[BadgeRule, ...] = (
    BadgeRule(
        "all_rounder",
        0,
        lambda s: s.pace >= 40
        and s.endurance >= 40
        and s.climbing >= 40
        and s.power >= 40
        and s.sprint >= 40
        and s.technique >= 40,
    ),
    BadgeRule("goat", 1, lambda s: s.climbing >= 60),
    BadgeRule("aero", 2, lambda s: s.pace >= 60 and s.climbing < 30),
    BadgeRule("diesel", 3, lambda s: s.endurance >= 60),
    BadgeRule(
        "flandrien",
        4,
        lambda s: s.pace >= 40 and s.endurance >= 40 and s.climbing >= 40,
    ),
    BadgeRule("climber", 5, lambda s: s.climbing >= 50 and s.endurance >= 50),
    BadgeRule("puncheur", 6, lambda s: s.pace >= 30 and s.climbing >= 40),
    BadgeRule("explosive", 7, lambda s: s.sprint >= 60),
    BadgeRule("technician", 8, lambda s: s.technique >= 60),
)

# Stat-based achievements: (id, axis, minimum score)
PERFORMANCE_ACHIEVEMENTS: Tuple[Tuple[str, str, int], ...] = (
    ("century_ride", "endurance", 50),
    ("summit_hunter", "climbing", 60),
    ("speed_demon", "pace", 70),
    ("iron_legs", "power", 60),
    ("mountain_goat", "climbing", 80),
)


@dataclass(frozen=True)
class ScoringConfig:
    """Complete scoring table shared by every call site"""

    skills: SkillScaling = field(default_factory=SkillScaling)
    weights: OverallWeights = field(default_factory=OverallWeights)
    tiers: TierCutoffs = field(default_factory=TierCutoffs)
    route: RouteDifficultyScaling = field(default_factory=RouteDifficultyScaling)
    placement: PlacementScaling = field(default_factory=PlacementScaling)
    race_points: RacePointsScaling = field(default_factory=RacePointsScaling)
    progression: ProgressionScaling = field(default_factory=ProgressionScaling)

    badge_rules: Tuple[BadgeRule, ...] = PLAYSTYLE_BADGE_RULES
    max_badges: int = 3
    performance_achievements: Tuple[Tuple[str, str, int], ...] = (
        PERFORMANCE_ACHIEVEMENTS
    )

    def __post_init__(self) -> None:
        total = sum(self.weights.as_dict().values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Overall weights must sum to 1.0 (got {total})")

        cutoffs = [
            self.tiers.silver,
            self.tiers.platinum,
            self.tiers.diamond,
            self.tiers.legend,
        ]
        if cutoffs != sorted(set(cutoffs)):
            raise ValueError(f"Tier cutoffs must be strictly increasing: {cutoffs}")

        coefficients = self.race_points.federation_coefficients
        if self.race_points.default_federation not in coefficients:
            raise ValueError(
                f"Unknown default federation: {self.race_points.default_federation}"
            )
        missing = [f for f in ("FFC", "UFOLEP", "FSGT") if f not in coefficients]
        if missing:
            raise ValueError(f"Missing federation coefficients: {missing}")
        if not coefficients["FFC"] > coefficients["UFOLEP"] > coefficients["FSGT"]:
            raise ValueError("Federation coefficients must be ordered FFC > UFOLEP > FSGT")


DEFAULT_CONFIG = ScoringConfig()


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (not banker's rounding)"""
    return int(math.floor(value + 0.5))


def finite_or_zero(value) -> float:
    """Coerce missing or non-finite numbers to 0.0"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0
