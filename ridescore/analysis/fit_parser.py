"""
FIT File Parser

Decodes Garmin/Wahoo/ANT+ FIT files into ActivityRecord objects so device
uploads can be scored alongside provider-synced rides.

Uses the fitparse library to decode FIT files.
"""

import io
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from fitparse import FitFile

from .activities import ActivityRecord

# FIT sport values that map onto the engine's "ride" kind
RIDE_SPORTS = {"cycling", "e_biking"}


@dataclass
class FitSessionData:
    """Session-level totals extracted from a FIT file"""
    sport: Optional[str] = None
    start_time: Optional[datetime] = None
    total_distance_m: float = 0.0
    total_elapsed_time_s: float = 0.0
    total_timer_time_s: float = 0.0
    total_ascent_m: float = 0.0
    avg_speed: Optional[float] = None
    max_speed: Optional[float] = None
    avg_power: Optional[float] = None
    normalized_power: Optional[float] = None
    record_powers: List[int] = field(default_factory=list)
    record_speeds: List[float] = field(default_factory=list)


def _as_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def parse_fit_content(fit_content: bytes) -> FitSessionData:
    """
    Parse FIT file content and extract session totals.

    Per-record power and speed are kept as a fallback for devices that do
    not write them into the session message.

    Args:
        fit_content: Raw FIT file content as bytes

    Returns:
        FitSessionData
    """
    fitfile = FitFile(io.BytesIO(fit_content))
    data = FitSessionData()

    for record in fitfile.get_messages():
        record_type = record.name

        if record_type == 'session':
            for fit_field in record.fields:
                name = fit_field.name
                value = fit_field.value
                if value is None:
                    continue

                if name == 'sport':
                    data.sport = str(value)
                elif name == 'start_time':
                    data.start_time = value
                elif name == 'total_distance':
                    data.total_distance_m = float(value)
                elif name == 'total_elapsed_time':
                    data.total_elapsed_time_s = float(value)
                elif name == 'total_timer_time':
                    data.total_timer_time_s = float(value)
                elif name == 'total_ascent':
                    data.total_ascent_m = float(value)
                elif name in ('avg_speed', 'enhanced_avg_speed'):
                    data.avg_speed = float(value)
                elif name in ('max_speed', 'enhanced_max_speed'):
                    data.max_speed = float(value)
                elif name == 'avg_power':
                    data.avg_power = float(value)
                elif name == 'normalized_power':
                    data.normalized_power = float(value)

        elif record_type == 'record':
            for fit_field in record.fields:
                if fit_field.value is None:
                    continue
                if fit_field.name == 'power':
                    data.record_powers.append(int(fit_field.value))
                elif fit_field.name in ('speed', 'enhanced_speed'):
                    data.record_speeds.append(float(fit_field.value))

    return data


def fit_to_activity_record(data: FitSessionData, activity_id: str) -> ActivityRecord:
    """
    Convert parsed FIT session data into an ActivityRecord.

    Normalized power is preferred over average power, matching what
    providers report as weighted average watts. Missing session speeds and
    power fall back to the per-record samples.

    Args:
        data: Parsed FIT session data
        activity_id: ID to assign to the record

    Returns:
        ActivityRecord
    """
    moving_time = data.total_timer_time_s or data.total_elapsed_time_s
    elapsed_time = max(data.total_elapsed_time_s, moving_time)

    avg_speed = data.avg_speed
    if avg_speed is None:
        avg_speed = data.total_distance_m / moving_time if moving_time > 0 else 0.0

    max_speed = data.max_speed
    if max_speed is None:
        max_speed = max(data.record_speeds) if data.record_speeds else 0.0

    power = data.normalized_power or data.avg_power
    if power is None and data.record_powers:
        power = sum(data.record_powers) / len(data.record_powers)

    kind = "ride" if (data.sport or "").lower() in RIDE_SPORTS else (data.sport or "")

    return ActivityRecord(
        activity_id=activity_id,
        kind=kind,
        distance_m=data.total_distance_m,
        moving_time_s=moving_time,
        elapsed_time_s=elapsed_time,
        elevation_gain_m=data.total_ascent_m,
        average_speed_ms=avg_speed,
        max_speed_ms=max_speed,
        average_power_w=_as_float(power),
        start_date=data.start_time.isoformat() if data.start_time else None,
    )


def parse_fit_activity(fit_content: bytes, activity_id: str = "unknown") -> ActivityRecord:
    """
    Parse a FIT file straight into an ActivityRecord.

    This is the main entry point for FIT file processing.
    """
    return fit_to_activity_record(parse_fit_content(fit_content), activity_id)
