"""
Skill Axis Calculators

Turns a batch of ride records into six independent 0-99 skill scores:
- PAC: speed adjusted for climbing density
- END: longest ride distance
- MON: cumulative elevation gain
- RES: measured power, or a physics estimate when power is missing
- SPR: burst speed relative to average speed
- VAL: pacing efficiency and consistency

Every calculator returns 0 for an empty batch and skips records that would
divide by zero instead of raising.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..config import DEFAULT_CONFIG, ScoringConfig, finite_or_zero, round_half_up
from .activities import DEFAULT_KINDS, ActivityRecord, filter_activities

logger = logging.getLogger(__name__)

AXES = ("pace", "endurance", "climbing", "power", "sprint", "technique")


@dataclass(frozen=True)
class SkillVector:
    """Six skill scores, each an integer in [0, 99]"""

    pace: int = 0
    endurance: int = 0
    climbing: int = 0
    power: int = 0
    sprint: int = 0
    technique: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(
        cls,
        data: Optional[Dict[str, Any]],
        config: ScoringConfig = DEFAULT_CONFIG,
    ) -> "SkillVector":
        data = data or {}
        max_score = config.skills.max_score
        return cls(
            **{
                axis: max(0, min(max_score, round_half_up(finite_or_zero(data.get(axis)))))
                for axis in AXES
            }
        )


def _scale(value: float, reference: float, max_score: int) -> int:
    """Linear scale against a reference value, clamped to [0, max_score]"""
    if reference <= 0:
        return 0
    scaled = (value / reference) * max_score
    return round_half_up(max(0.0, min(scaled, max_score)))


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


def compute_pace(
    activities: Sequence[ActivityRecord], config: ScoringConfig = DEFAULT_CONFIG
) -> int:
    """
    PAC: average speed (km/h) weighted by climbing density.

    Per ride: avg_speed_kmh * (1 + gradient / 100), where gradient is
    metres of D+ per km. Averaged across rides and capped at 99.
    """
    max_score = config.skills.max_score
    weighted_speeds = []

    for activity in activities:
        distance_m = finite_or_zero(activity.distance_m)
        if distance_m <= 0:
            continue

        gradient = finite_or_zero(activity.elevation_gain_m) / (distance_m / 1000)
        speed_kmh = finite_or_zero(activity.average_speed_ms) * 3.6
        weighted_speeds.append(speed_kmh * (1 + gradient / 100))

    if not weighted_speeds:
        return 0

    avg = _mean(weighted_speeds)
    return round_half_up(max(0.0, min(avg, max_score)))


def compute_endurance(
    activities: Sequence[ActivityRecord], config: ScoringConfig = DEFAULT_CONFIG
) -> int:
    """END: longest single ride, 200km maps to 99"""
    distances_km = [
        finite_or_zero(a.distance_m) / 1000
        for a in activities
        if finite_or_zero(a.distance_m) > 0
    ]
    if not distances_km:
        return 0

    return _scale(
        max(distances_km),
        config.skills.endurance_reference_km,
        config.skills.max_score,
    )


def compute_climbing(
    activities: Sequence[ActivityRecord], config: ScoringConfig = DEFAULT_CONFIG
) -> int:
    """MON: cumulative D+ across all rides, 50 000m maps to 99"""
    rides = [a for a in activities if finite_or_zero(a.distance_m) > 0]
    if not rides:
        return 0

    total_gain = sum(max(0.0, finite_or_zero(a.elevation_gain_m)) for a in rides)
    return _scale(
        total_gain,
        config.skills.climbing_reference_m,
        config.skills.max_score,
    )


def _estimate_power(activity: ActivityRecord, config: ScoringConfig) -> float:
    """
    Rough power estimate (W) from speed and climbing.

    flat = k * v^2 (air resistance proxy)
    climb = mass * g * grade * v
    """
    skills = config.skills
    speed_ms = finite_or_zero(activity.average_speed_ms)
    distance_m = finite_or_zero(activity.distance_m)
    grade_percent = (
        (finite_or_zero(activity.elevation_gain_m) / distance_m) * 100
        if distance_m > 0
        else 0
    )

    flat_power = skills.flat_power_coefficient * speed_ms * speed_ms
    climb_power = (
        skills.rider_mass_kg * skills.gravity_ms2 * (grade_percent / 100) * speed_ms
    )
    return max(flat_power + climb_power, 0.0)


def compute_power(
    activities: Sequence[ActivityRecord], config: ScoringConfig = DEFAULT_CONFIG
) -> int:
    """
    RES: power score.

    With at least 3 rides carrying measured power, the top 20% of those
    values (at least one ride) are averaged and scaled against 300W.
    Otherwise every ride gets a physics estimate; the averaged estimate is
    scaled the same way and damped by 0.8.
    """
    skills = config.skills
    rides = [a for a in activities if finite_or_zero(a.distance_m) > 0]
    if not rides:
        return 0

    measured = sorted(
        (
            finite_or_zero(a.average_power_w)
            for a in rides
            if a.has_measured_power and finite_or_zero(a.average_power_w) > 0
        ),
        reverse=True,
    )

    if len(measured) >= skills.power_min_measured_rides:
        top_count = max(1, math.ceil(len(measured) * skills.power_top_fraction))
        avg_top_watts = _mean(measured[:top_count])
        return _scale(avg_top_watts, skills.power_reference_w, skills.max_score)

    logger.debug(
        f"Only {len(measured)} rides with measured power, using physics estimate "
        f"for {len(rides)} rides"
    )
    estimates = [_estimate_power(a, config) for a in rides]
    avg_estimate = _mean(estimates)
    scaled = (avg_estimate / skills.power_reference_w) * skills.max_score
    scaled *= skills.estimate_damping
    return round_half_up(max(0.0, min(scaled, skills.max_score)))


def compute_sprint(
    activities: Sequence[ActivityRecord], config: ScoringConfig = DEFAULT_CONFIG
) -> int:
    """
    SPR: explosivity from max speed / average speed.

    Max speed is capped at 80 km/h to drop GPS spikes. A ratio of 1.0 or
    less scores 0, a ratio of 2.0 scores 99.
    """
    skills = config.skills
    max_speed_cap = skills.max_speed_cap_kmh / 3.6

    ratios = []
    for activity in activities:
        max_speed = finite_or_zero(activity.max_speed_ms)
        if finite_or_zero(activity.distance_m) <= 0 or max_speed <= 0:
            continue

        avg_speed = finite_or_zero(activity.average_speed_ms)
        capped_max = min(max_speed, max_speed_cap)
        ratios.append(capped_max / avg_speed if avg_speed > 0 else 1.0)

    if not ratios:
        return 0

    explosivity = max(0.0, _mean(ratios) - 1.0)
    return _scale(explosivity, skills.sprint_reference_ratio - 1.0, skills.max_score)


def compute_technique(
    activities: Sequence[ActivityRecord], config: ScoringConfig = DEFAULT_CONFIG
) -> int:
    """
    VAL: technique from pacing efficiency and consistency.

    70%: moving_time / elapsed_time (fewer stops is better)
    30%: 1 - coefficient of variation of average speed across rides
    """
    skills = config.skills
    rides = []
    for activity in activities:
        moving = finite_or_zero(activity.moving_time_s)
        elapsed = finite_or_zero(activity.elapsed_time_s)
        if finite_or_zero(activity.distance_m) <= 0:
            continue
        if moving > 0 and elapsed > 0 and elapsed >= moving:
            rides.append(activity)

    if not rides:
        return 0

    efficiency = _mean(
        [
            finite_or_zero(a.moving_time_s) / finite_or_zero(a.elapsed_time_s)
            for a in rides
        ]
    )

    speeds = [finite_or_zero(a.average_speed_ms) for a in rides]
    avg_speed = _mean(speeds)
    variance = sum((s - avg_speed) ** 2 for s in speeds) / len(speeds)
    cv = math.sqrt(variance) / avg_speed if avg_speed > 0 else 1.0
    consistency = max(0.0, 1 - cv)

    combined = (
        efficiency * skills.technique_efficiency_weight
        + consistency * skills.technique_consistency_weight
    )
    return _scale(combined, skills.technique_reference, skills.max_score)


def compute_skill_vector(
    activities: Optional[Sequence[ActivityRecord]],
    config: ScoringConfig = DEFAULT_CONFIG,
    kinds: Sequence[str] = DEFAULT_KINDS,
) -> SkillVector:
    """
    Filter eligible rides and compute all six axes.

    Args:
        activities: Raw activity records (any kind)
        config: Scoring table
        kinds: Activity kinds that count as rides

    Returns:
        SkillVector (all zeros when nothing is eligible)
    """
    rides = filter_activities(activities, kinds)

    return SkillVector(
        pace=compute_pace(rides, config),
        endurance=compute_endurance(rides, config),
        climbing=compute_climbing(rides, config),
        power=compute_power(rides, config),
        sprint=compute_sprint(rides, config),
        technique=compute_technique(rides, config),
    )
