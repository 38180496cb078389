"""
Race Scoring Tasks

Celery tasks for race-result ingestion and the cross-race leaderboard.
"""

import logging
from typing import Any, Dict, List

from ..ratings import Federation, RaceResult, rank_by_points, score_race_results
from . import app

logger = logging.getLogger(__name__)


@app.task(name="score_race")
def score_race(results: List[Dict[str, Any]], federation: str = "OTHER") -> Dict[str, Any]:
    """
    Score every finisher of a race.

    Args:
        results: Result dicts with position, finish_time_s and rider_id
            (None or missing for ghosts)
        federation: Sanctioning body (FFC, UFOLEP, FSGT, OTHER)

    Returns:
        Dict containing:
            - federation: normalized federation code
            - finishers: GEN, tier, points and bonus per finisher
    """
    try:
        fed = Federation.parse(federation)
        scored = score_race_results(
            [RaceResult.from_dict(r) for r in (results or [])], fed
        )
        ghosts = sum(1 for s in scored if s.is_ghost)

        logger.info(
            f"Scored race ({fed.value}): {len(scored)} finishers, {ghosts} ghosts"
        )

        return {
            "success": True,
            "federation": fed.value,
            "finishers": [s.to_dict() for s in scored],
        }

    except Exception as e:
        logger.error(f"Error scoring race: {e}", exc_info=True)
        return {"success": False, "error": str(e)}


@app.task(name="rank_leaderboard")
def rank_leaderboard(awards: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Rank riders by cumulative race points.

    Args:
        awards: Dicts with rider_id and points, one per race result

    Returns:
        Dict containing the ranked leaderboard entries
    """
    try:
        entries = rank_by_points(awards or [])

        logger.info(f"Leaderboard ranked: {len(entries)} riders")

        return {
            "success": True,
            "leaderboard": [e.to_dict() for e in entries],
        }

    except Exception as e:
        logger.error(f"Error ranking leaderboard: {e}", exc_info=True)
        return {"success": False, "error": str(e)}
