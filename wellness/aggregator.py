"""
Progress aggregation across a student's saved assessments
"""
import logging
import statistics
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from wellness import config
from wellness.models import CategoryStats, StudentProgressInDB, utcnow
from wellness.persistence import fetch_history
from wellness.severity import classify_percentage

logger = logging.getLogger(__name__)

# Categories averaged into the dashboard's single wellbeing figure.
DASHBOARD_CATEGORIES = ("depression", "stress", "anxiety", "wellbeing")


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str) and value:
        try:
            moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def aggregate_history(assessments: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Summarise several assessments of the same student.

    Only categories that were actually scored (answered_count > 0, where the
    document records counts) contribute samples.
    """
    if not assessments:
        return None

    ordered = sorted(
        assessments,
        key=lambda doc: _as_datetime(doc.get("completed_at")) or datetime.min.replace(tzinfo=timezone.utc),
    )

    samples: Dict[str, List[int]] = {}
    timestamps: List[datetime] = []
    for assessment in ordered:
        completed_at = _as_datetime(assessment.get("completed_at"))
        if completed_at:
            timestamps.append(completed_at)

        counts = assessment.get("answered_counts") or {}
        for category, percentage in (assessment.get("results") or {}).items():
            if counts and not counts.get(category):
                continue
            samples.setdefault(category, []).append(int(percentage))

    categories = {}
    for category, values in samples.items():
        categories[category] = CategoryStats(
            average=round(statistics.mean(values), 2),
            minimum=min(values),
            maximum=max(values),
            std=round(statistics.stdev(values), 2) if len(values) > 1 else 0.0,
            latest=values[-1],
            trend=values[-1] - values[0],
            samples=len(values),
        )

    return {
        "total_assessments": len(ordered),
        "first_assessment": min(timestamps) if timestamps else None,
        "last_assessment": max(timestamps) if timestamps else None,
        "categories": categories,
    }


def build_dashboard_summary(
    latest: Optional[Dict[str, Any]],
    now: Optional[datetime] = None,
    interval_days: Optional[int] = None,
) -> Dict[str, Any]:
    """Wellbeing figure, label and next-assessment countdown for a student."""
    now = now or utcnow()
    interval_days = interval_days or config.NEXT_ASSESSMENT_DAYS
    summary: Dict[str, Any] = {
        "wellbeing_progress": 0,
        "label": "N/A",
        "next_assessment_days": None,
        "next_assessment_progress": 0,
    }
    if not latest:
        return summary

    results = latest.get("results") or {}
    valid = [
        results[category]
        for category in DASHBOARD_CATEGORIES
        if isinstance(results.get(category), (int, float))
    ]
    score = sum(valid) / len(valid) if valid else 0
    score = max(0, min(100, score))
    summary["wellbeing_progress"] = int(score + 0.5)
    if score > 0:
        summary["label"] = classify_percentage(score)

    last_date = _as_datetime(latest.get("completed_at"))
    if last_date:
        next_date = last_date + timedelta(days=interval_days)
        seconds_per_day = 24 * 60 * 60
        days_until = -(-(next_date - now).total_seconds() // seconds_per_day)
        days_since = -(-(now - last_date).total_seconds() // seconds_per_day)
        summary["next_assessment_days"] = max(0, int(days_until))
        summary["next_assessment_progress"] = min(100, int(days_since / interval_days * 100 + 0.5))

    return summary


async def update_student_progress(user_id: str, assessments, progress) -> Optional[StudentProgressInDB]:
    """
    Recompute a student's aggregate and upsert it.
    Called after each submission.
    """
    history = await fetch_history(assessments, user_id, limit=config.HISTORY_LIMIT)
    if not history:
        logger.warning("No assessments found for user %s", user_id)
        return None

    aggregated = aggregate_history(history)
    document = StudentProgressInDB(user_id=user_id, **aggregated)
    await progress.update_one(
        {"user_id": user_id},
        {"$set": document.model_dump()},
        upsert=True,
    )
    logger.info("Updated progress for %s from %d assessments", user_id, len(history))
    return document
