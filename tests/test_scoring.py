"""Tests for daily performance scoring."""
import pytest

from dailyreport.models import DailyRecord
from dailyreport.services.scoring import (
    SCORE_TABLE,
    PerformanceTier,
    evaluate,
    score_of,
    tier_for,
)
from dailyreport.services.status_styles import Axis


def _record(attendance="present", participation="none", homework="none", behavior="none"):
    return DailyRecord.from_dict(
        {
            "studentId": "st-1",
            "date": "2026-10-18",
            "attendance": attendance,
            "participation": participation,
            "homework": homework,
            "behavior": behavior,
        }
    )


def test_score_table_values():
    assert dict(SCORE_TABLE) == {"excellent": 100, "good": 75, "average": 50, "poor": 25, "none": 0}


@pytest.mark.parametrize("status", ["", None, "outstanding", "N/A"])
def test_unknown_status_scores_zero(status):
    assert score_of(status) == 0


@pytest.mark.parametrize(
    "mean, tier",
    [
        (100.0, PerformanceTier.TOP),
        (90.0, PerformanceTier.TOP),
        (89.99, PerformanceTier.HIGH),
        (75.0, PerformanceTier.HIGH),
        (74.99, PerformanceTier.MID),
        (60.0, PerformanceTier.MID),
        (59.99, PerformanceTier.FOLLOW_UP),
        (0.0, PerformanceTier.FOLLOW_UP),
    ],
)
def test_tier_thresholds_are_inclusive(mean, tier):
    assert tier_for(mean) is tier


def test_all_excellent_is_top_tier():
    summary = evaluate(_record(participation="excellent", homework="excellent", behavior="excellent"))
    assert summary.mean == 100
    assert summary.tier is PerformanceTier.TOP
    assert summary.label == "ممتاز"


def test_mixed_statuses_average_out():
    summary = evaluate(_record(participation="good", homework="average", behavior="poor"))
    assert summary.scores == {Axis.PARTICIPATION: 75, Axis.HOMEWORK: 50, Axis.BEHAVIOR: 25}
    assert summary.mean == 50
    assert summary.tier is PerformanceTier.FOLLOW_UP
    assert summary.label == "يحتاج متابعة"


def test_good_good_excellent_is_high():
    # (75 + 75 + 100) / 3 = 83.3
    summary = evaluate(_record(participation="good", homework="good", behavior="excellent"))
    assert summary.tier is PerformanceTier.HIGH


@pytest.mark.parametrize("attendance", ["absent", "excused", "late"])
def test_non_present_records_are_undetermined(attendance):
    summary = evaluate(_record(attendance=attendance, participation="excellent", homework="excellent"))
    assert summary.mean is None
    assert not summary.is_scored
    assert summary.tier is PerformanceTier.UNDETERMINED
    assert summary.label == "غير محدد"
    assert set(summary.scores.values()) == {0}
