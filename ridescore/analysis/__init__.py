"""
Analysis Module

Turns raw telemetry (activity records, FIT files, GPX routes) into the
inputs the rating layer consumes.
"""

from .activities import ActivityRecord, filter_activities
from .fit_parser import FitSessionData, parse_fit_activity, parse_fit_content
from .route_profile import (
    ClimbSegment,
    DescentSegment,
    gradient_band,
    GradientBand,
    GradientSegment,
    RoutePoint,
    RouteProfile,
    RouteSummary,
)
from .skill_axes import (
    compute_climbing,
    compute_endurance,
    compute_pace,
    compute_power,
    compute_skill_vector,
    compute_sprint,
    compute_technique,
    SkillVector,
)

__all__ = [
    "ActivityRecord",
    "filter_activities",
    "FitSessionData",
    "parse_fit_activity",
    "parse_fit_content",
    "RoutePoint",
    "RouteProfile",
    "RouteSummary",
    "GradientBand",
    "GradientSegment",
    "ClimbSegment",
    "DescentSegment",
    "gradient_band",
    "SkillVector",
    "compute_skill_vector",
    "compute_pace",
    "compute_endurance",
    "compute_climbing",
    "compute_power",
    "compute_sprint",
    "compute_technique",
]
