"""
Labels applied to percentage scores by dashboards and result views
"""
from typing import Dict

from wellness.processor import AssessmentResult, CategoryScore

GOOD = "Good"
AVERAGE = "Average"
NEEDS_ATTENTION = "Needs Attention"
NOT_AVAILABLE = "Not Available"

HIGH_RISK = "High"
MODERATE_RISK = "Moderate"
LOW_RISK = "Low"


def classify_percentage(percentage: float) -> str:
    if percentage >= 75:
        return GOOD
    if percentage >= 50:
        return AVERAGE
    if percentage > 0:
        return NEEDS_ATTENTION
    return NOT_AVAILABLE


def classify(score: CategoryScore) -> str:
    # A genuine zero still has answers behind it.
    if not score.has_data:
        return NOT_AVAILABLE
    if score.percentage == 0:
        return NEEDS_ATTENTION
    return classify_percentage(score.percentage)


def risk_level(percentage: float) -> str:
    if percentage >= 70:
        return HIGH_RISK
    if percentage >= 40:
        return MODERATE_RISK
    return LOW_RISK


def describe_result(result: AssessmentResult) -> Dict[str, Dict[str, object]]:
    return {
        tag: {
            "percentage": score.percentage,
            "answered_count": score.answered_count,
            "label": classify(score),
            "risk_level": risk_level(score.percentage) if score.has_data else None,
        }
        for tag, score in result.items()
    }
