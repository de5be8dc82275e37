import pytest

from wellness.processor import AssessmentResult, CategoryScore
from wellness.severity import classify, classify_percentage, describe_result, risk_level


@pytest.mark.parametrize(
    "percentage,answered,label",
    [
        (100, 5, "Good"),
        (75, 5, "Good"),
        (74, 5, "Average"),
        (50, 5, "Average"),
        (49, 5, "Needs Attention"),
        (1, 5, "Needs Attention"),
        (0, 5, "Needs Attention"),
        (0, 0, "Not Available"),
    ],
)
def test_classify(percentage, answered, label):
    assert classify(CategoryScore(percentage, answered)) == label


def test_classify_percentage_treats_zero_as_not_available():
    assert classify_percentage(0) == "Not Available"
    assert classify_percentage(62.5) == "Average"


@pytest.mark.parametrize("percentage,level", [(70, "High"), (69, "Moderate"), (40, "Moderate"), (39, "Low"), (0, "Low")])
def test_risk_level(percentage, level):
    assert risk_level(percentage) == level


def test_describe_result():
    result = AssessmentResult({
        "stress": CategoryScore(80, 3),
        "adhd": CategoryScore(0, 0),
    })
    assert describe_result(result) == {
        "stress": {"percentage": 80, "answered_count": 3, "label": "Good", "risk_level": "High"},
        "adhd": {"percentage": 0, "answered_count": 0, "label": "Not Available", "risk_level": None},
    }
