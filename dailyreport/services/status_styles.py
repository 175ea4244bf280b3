"""
Status → display style lookup.

Every status axis maps to a label plus a background/border/text colour
triplet. The tables are immutable module constants and every lookup is
total: an unknown or missing status resolves to ``PLACEHOLDER_STYLE``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from dailyreport.models import AttendanceStatus, StatusType


class Axis(str, Enum):
    ATTENDANCE = "attendance"
    PARTICIPATION = "participation"
    HOMEWORK = "homework"
    BEHAVIOR = "behavior"


ACADEMIC_AXES = (Axis.PARTICIPATION, Axis.HOMEWORK, Axis.BEHAVIOR)

AXIS_LABELS: Mapping[Axis, str] = MappingProxyType({
    Axis.ATTENDANCE: "الحضور",
    Axis.PARTICIPATION: "المشاركة",
    Axis.HOMEWORK: "الواجبات",
    Axis.BEHAVIOR: "السلوك",
})


@dataclass(frozen=True)
class StatusStyle:
    label: str
    background: str
    border: str
    text: str


PLACEHOLDER_STYLE = StatusStyle(label="-", background="#f9fafb", border="#e5e7eb", text="#9ca3af")

ATTENDANCE_STYLES: Mapping[str, StatusStyle] = MappingProxyType({
    AttendanceStatus.PRESENT.value: StatusStyle("حاضر", "#f0fdf4", "#bbf7d0", "#166534"),
    AttendanceStatus.EXCUSED.value: StatusStyle("مستأذن", "#fefce8", "#fef08a", "#854d0e"),
    AttendanceStatus.ABSENT.value: StatusStyle("غائب", "#fef2f2", "#fecaca", "#991b1b"),
})

ACADEMIC_STYLES: Mapping[str, StatusStyle] = MappingProxyType({
    StatusType.EXCELLENT.value: StatusStyle("متميز", "#f0fdfa", "#99f6e4", "#115e59"),
    StatusType.GOOD.value: StatusStyle("جيد", "#eff6ff", "#bfdbfe", "#1e40af"),
    StatusType.AVERAGE.value: StatusStyle("متوسط", "#fefce8", "#fef08a", "#854d0e"),
    StatusType.POOR.value: StatusStyle("ضعيف", "#fef2f2", "#fecaca", "#991b1b"),
})


def _key(status: Any) -> str:
    if isinstance(status, Enum):
        status = status.value
    if status is None:
        return ""
    return str(status).strip().lower()


def attendance_style(status: Any) -> StatusStyle:
    return ATTENDANCE_STYLES.get(_key(status), PLACEHOLDER_STYLE)


def academic_style(status: Any) -> StatusStyle:
    return ACADEMIC_STYLES.get(_key(status), PLACEHOLDER_STYLE)


def resolve_style(axis: Axis, status: Any) -> StatusStyle:
    """Style for ``status`` on ``axis``; attendance has its own table."""
    if Axis(axis) is Axis.ATTENDANCE:
        return attendance_style(status)
    return academic_style(status)
