"""
Rider Rating Tasks

Celery tasks for the live sync and weekly snapshot call sites, plus FIT
upload ingestion.
"""

import base64
import logging
from typing import Any, Dict, List, Optional

from ..analysis import ActivityRecord, parse_fit_activity as parse_fit_to_record
from ..analysis import SkillVector
from ..ratings import build_rider_card, card_from_skills, weekly_progression
from . import app

logger = logging.getLogger(__name__)


def _to_records(activities: Optional[List[Dict[str, Any]]]) -> List[ActivityRecord]:
    return [ActivityRecord.from_dict(a) for a in (activities or [])]


@app.task(name="compute_rider_card")
def compute_rider_card(activities: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Compute a rider's card after a telemetry sync.

    Args:
        activities: Activity dicts from the sync collaborator (any kind;
            only rides are scored)

    Returns:
        Dict containing:
            - card: skills, overall, tier, badges, achievements
    """
    try:
        records = _to_records(activities)
        card = build_rider_card(records)

        logger.info(
            f"Rider card computed from {card.activities_counted}/{len(records)} "
            f"activities: OVR {card.overall} ({card.tier.slug})"
        )

        return {"success": True, "card": card.to_dict()}

    except Exception as e:
        logger.error(f"Error computing rider card: {e}", exc_info=True)
        return {"success": False, "error": str(e)}


@app.task(name="compute_weekly_snapshot")
def compute_weekly_snapshot(
    activities: List[Dict[str, Any]],
    previous_skills: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Compute this week's card and its progression against last week's.

    Args:
        activities: Activity dicts for the snapshot window
        previous_skills: Last snapshot's skill dict (pace, endurance, ...);
            treated as all zeros when missing

    Returns:
        Dict containing:
            - card: this week's card
            - progression: per-axis and OVR deltas, tier change, highlight flag
    """
    try:
        current = build_rider_card(_to_records(activities))
        previous = card_from_skills(SkillVector.from_dict(previous_skills))
        progression = weekly_progression(previous, current)

        logger.info(
            f"Weekly snapshot: OVR {previous.overall} -> {current.overall} "
            f"(delta {progression.overall_delta:+d})"
        )

        return {
            "success": True,
            "card": current.to_dict(),
            "progression": progression.to_dict(),
        }

    except Exception as e:
        logger.error(f"Error computing weekly snapshot: {e}", exc_info=True)
        return {"success": False, "error": str(e)}


@app.task(name="parse_fit_activity", bind=True)
def parse_fit_activity(self, activity_id: str, file_content: str) -> Dict[str, Any]:
    """
    Decode an uploaded FIT file into an activity dict.

    Args:
        activity_id: Unique ID for the activity
        file_content: FIT file content, base64-encoded

    Returns:
        Dict containing the activity record fields
    """
    logger.info(
        f"[Task {self.request.id}] Parsing FIT activity {activity_id} "
        f"({len(file_content)} chars)"
    )

    try:
        fit_bytes = base64.b64decode(file_content)
        record = parse_fit_to_record(fit_bytes, activity_id)

        logger.info(
            f"[Task {self.request.id}] FIT parsed: kind={record.kind}, "
            f"distance={record.distance_km:.2f}km, "
            f"power={'yes' if record.has_measured_power else 'no'}"
        )

        return {"success": True, "activity": record.to_dict()}

    except Exception as e:
        logger.error(
            f"[Task {self.request.id}] Error parsing FIT activity {activity_id}: {e}",
            exc_info=True,
        )
        return {
            "success": False,
            "error": str(e),
            "activity_id": activity_id,
        }
