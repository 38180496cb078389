"""
Route Analysis Tasks

Celery task for scoring planned routes with the Route Difficulty Index.
"""

import logging
from typing import Any, Dict, Optional

from ..analysis import RouteProfile
from ..ratings import compute_route_difficulty
from . import app

logger = logging.getLogger(__name__)


@app.task(name="analyze_route_difficulty")
def analyze_route_difficulty(
    gpx_content: str,
    wind_speed_kmh: Optional[float] = None,
    smooth: bool = False,
) -> Dict[str, Any]:
    """
    Parse a GPX route and compute its difficulty.

    Args:
        gpx_content: Raw GPX file content as string
        wind_speed_kmh: Forecast wind speed, None without weather data
        smooth: Smooth elevation before counting D+

    Returns:
        Dict containing:
            - route: distance, D+, elevation range, map centre
            - difficulty: score (0-10, 0.5 steps) and label
            - elevation_profile: sampled elevation data for charting
            - gradient_segments: banded gradients along the route
            - climbs / descents: detected climbs and descents
    """
    try:
        profile = RouteProfile.from_gpx(gpx_content, smooth=smooth)
        difficulty = compute_route_difficulty(profile, wind_speed_kmh)
        summary = profile.summary()
        climbs = profile.get_climbs()
        descents = profile.get_descents()

        logger.info(
            f"Route {profile.name or 'unnamed'}: {summary.total_distance_km}km, "
            f"{summary.total_elevation_gain_m}m D+, {len(climbs)} climbs, "
            f"RDI {difficulty.score} ({difficulty.label})"
        )

        return {
            "success": True,
            "route": summary.to_dict(),
            "difficulty": difficulty.to_dict(),
            "elevation_profile": profile.get_elevation_profile(100),
            "gradient_segments": [s.to_dict() for s in profile.get_gradient_segments()],
            "climbs": [c.to_dict() for c in climbs],
            "descents": [d.to_dict() for d in descents],
        }

    except Exception as e:
        logger.error(f"Error analyzing route difficulty: {e}", exc_info=True)
        return {"success": False, "error": str(e)}
