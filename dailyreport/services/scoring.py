"""Daily performance scoring for the three academic axes."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from dailyreport.models import DailyRecord, StatusType
from dailyreport.services.status_styles import ACADEMIC_AXES, Axis

SCORE_TABLE: Mapping[str, int] = MappingProxyType({
    StatusType.EXCELLENT.value: 100,
    StatusType.GOOD.value: 75,
    StatusType.AVERAGE.value: 50,
    StatusType.POOR.value: 25,
    StatusType.NONE.value: 0,
})


class PerformanceTier(str, Enum):
    TOP = "top"
    HIGH = "high"
    MID = "mid"
    FOLLOW_UP = "follow_up"
    UNDETERMINED = "undetermined"


# Inclusive lower bounds, checked in order.
TIER_THRESHOLDS = (
    (90.0, PerformanceTier.TOP),
    (75.0, PerformanceTier.HIGH),
    (60.0, PerformanceTier.MID),
)

TIER_LABELS: Mapping[PerformanceTier, str] = MappingProxyType({
    PerformanceTier.TOP: "ممتاز",
    PerformanceTier.HIGH: "جيد جداً",
    PerformanceTier.MID: "جيد",
    PerformanceTier.FOLLOW_UP: "يحتاج متابعة",
    PerformanceTier.UNDETERMINED: "غير محدد",
})


@dataclass(frozen=True)
class PerformanceSummary:
    """Scored view of one daily record. ``mean`` is None when not scored."""

    scores: Dict[Axis, int]
    mean: Optional[float]
    tier: PerformanceTier

    @property
    def label(self) -> str:
        return TIER_LABELS[self.tier]

    @property
    def is_scored(self) -> bool:
        return self.mean is not None


def score_of(status: Any) -> int:
    if isinstance(status, Enum):
        status = status.value
    key = str(status).strip().lower() if status is not None else ""
    return SCORE_TABLE.get(key, 0)


def tier_for(mean: float) -> PerformanceTier:
    for lower_bound, tier in TIER_THRESHOLDS:
        if mean >= lower_bound:
            return tier
    return PerformanceTier.FOLLOW_UP


def evaluate(record: DailyRecord) -> PerformanceSummary:
    """Score a record; only a present student gets a numeric mean."""
    if not record.is_present:
        return PerformanceSummary(
            scores={axis: 0 for axis in ACADEMIC_AXES},
            mean=None,
            tier=PerformanceTier.UNDETERMINED,
        )
    scores = {axis: score_of(getattr(record, axis.value)) for axis in ACADEMIC_AXES}
    mean = sum(scores.values()) / len(scores)
    return PerformanceSummary(scores=scores, mean=mean, tier=tier_for(mean))
