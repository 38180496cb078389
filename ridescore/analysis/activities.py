"""
Activity Records

Immutable ride records as delivered by the telemetry-sync collaborator,
plus the filter that selects the rides eligible for scoring.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..config import finite_or_zero

DEFAULT_KINDS = ("ride",)


@dataclass(frozen=True)
class ActivityRecord:
    """One completed activity"""

    activity_id: str
    kind: str
    distance_m: float
    moving_time_s: float
    elapsed_time_s: float
    elevation_gain_m: float
    average_speed_ms: float
    max_speed_ms: float
    average_power_w: Optional[float] = None
    start_date: Optional[str] = None

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000

    @property
    def has_measured_power(self) -> bool:
        return self.average_power_w is not None and self.average_power_w > 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivityRecord":
        """
        Build a record from a provider payload.

        Accepts Strava-style keys (id, type, distance, total_elevation_gain,
        weighted_average_watts, ...) as well as this class's own field names.
        Missing numbers become 0 and missing power stays None.

        Args:
            data: Activity dict

        Returns:
            ActivityRecord
        """

        def pick(*keys: str) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        power = pick("average_power_w", "weighted_average_watts", "average_watts")
        power = finite_or_zero(power) if power is not None else None

        activity_id = pick("activity_id", "id")
        start_date = pick("start_date", "timestamp")

        return cls(
            activity_id=str(activity_id) if activity_id is not None else "unknown",
            kind=str(pick("kind", "type", "sport_type") or ""),
            distance_m=finite_or_zero(pick("distance_m", "distance")),
            moving_time_s=finite_or_zero(pick("moving_time_s", "moving_time")),
            elapsed_time_s=finite_or_zero(pick("elapsed_time_s", "elapsed_time")),
            elevation_gain_m=finite_or_zero(
                pick("elevation_gain_m", "total_elevation_gain")
            ),
            average_speed_ms=finite_or_zero(
                pick("average_speed_ms", "average_speed")
            ),
            max_speed_ms=finite_or_zero(pick("max_speed_ms", "max_speed")),
            average_power_w=power,
            start_date=str(start_date) if start_date is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def filter_activities(
    activities: Optional[Iterable[ActivityRecord]],
    kinds: Sequence[str] = DEFAULT_KINDS,
) -> List[ActivityRecord]:
    """
    Keep only the activities whose kind is in `kinds` (case-insensitive).

    Other kinds are dropped silently. An empty result is a valid state.
    A single kind may be passed as a plain string.
    """
    if not activities:
        return []

    if isinstance(kinds, str):
        kinds = (kinds,)

    wanted = {k.lower() for k in kinds}
    return [a for a in activities if (a.kind or "").lower() in wanted]
