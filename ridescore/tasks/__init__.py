"""
ridescore Worker Tasks Package
"""

from ..celery_app import app

# Import all tasks to ensure they're registered with Celery
from .race_tasks import rank_leaderboard, score_race
from .rating_tasks import compute_rider_card, compute_weekly_snapshot, parse_fit_activity
from .route_tasks import analyze_route_difficulty

__all__ = [
    "app",
    "analyze_route_difficulty",
    "compute_rider_card",
    "compute_weekly_snapshot",
    "parse_fit_activity",
    "rank_leaderboard",
    "score_race",
]
