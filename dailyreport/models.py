"""
Domain records consumed by the report generator.

Rows come from the hosted database in camelCase; ``from_dict`` accepts both
those keys and snake_case so callers can pass either shape.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional

from dailyreport.errors import ReportPreconditionError


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"


class StatusType(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"
    NONE = "none"


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _status(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return _text(value).lower()


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ReportPreconditionError(f"{what} must be an object, got {type(data).__name__}.")
    return data


def parse_date(value: Any) -> date:
    """Parse an ISO date (or datetime) into a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = _text(value)
    if not raw:
        raise ReportPreconditionError("Daily record is missing its date.")
    try:
        return date.fromisoformat(raw[:10])
    except ValueError as exc:
        raise ReportPreconditionError(f"Daily record date '{raw}' is not an ISO date.") from exc


@dataclass(frozen=True)
class Student:
    id: str
    name: str
    class_grade: str = ""
    parent_phone: str = ""
    avatar: Optional[str] = None
    student_number: Optional[str] = None

    @property
    def file_number(self) -> str:
        """Number printed on the card; falls back to the database id."""
        return self.student_number or self.id

    @classmethod
    def from_dict(cls, data: Any) -> "Student":
        data = _require_mapping(data, "Student")
        student_id = _text(_pick(data, "id", "student_id", "studentId"))
        name = _text(data.get("name"))
        if not student_id:
            raise ReportPreconditionError("Student is missing its id.")
        if not name:
            raise ReportPreconditionError(f"Student '{student_id}' is missing its name.")
        return cls(
            id=student_id,
            name=name,
            class_grade=_text(_pick(data, "class_grade", "classGrade")),
            parent_phone=_text(_pick(data, "parent_phone", "parentPhone")),
            avatar=_text(data.get("avatar")) or None,
            student_number=_text(_pick(data, "student_number", "studentNumber")) or None,
        )


@dataclass(frozen=True)
class DailyRecord:
    """One day of tracking for one student. Status strings are kept verbatim."""

    student_id: str
    date: date
    attendance: str
    participation: str = StatusType.NONE.value
    homework: str = StatusType.NONE.value
    behavior: str = StatusType.NONE.value
    notes: str = ""
    id: Optional[str] = None

    @property
    def is_present(self) -> bool:
        return self.attendance == AttendanceStatus.PRESENT.value

    @classmethod
    def from_dict(cls, data: Any) -> "DailyRecord":
        data = _require_mapping(data, "Daily record")
        attendance = _status(data.get("attendance"))
        if not attendance:
            raise ReportPreconditionError("Daily record is missing its attendance status.")
        return cls(
            student_id=_text(_pick(data, "student_id", "studentId")),
            date=parse_date(data.get("date")),
            attendance=attendance,
            participation=_status(data.get("participation")) or StatusType.NONE.value,
            homework=_status(data.get("homework")) or StatusType.NONE.value,
            behavior=_status(data.get("behavior")) or StatusType.NONE.value,
            notes=_text(data.get("notes")),
            id=_text(data.get("id")) or None,
        )


@dataclass(frozen=True)
class ScheduleItem:
    day: str
    period: int
    subject: str
    teacher: str = ""
    class_room: str = ""
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ScheduleItem":
        data = _require_mapping(data, "Schedule item")
        try:
            period = int(data.get("period"))
        except (TypeError, ValueError) as exc:
            raise ReportPreconditionError(
                f"Schedule item period must be a number, got {data.get('period')!r}."
            ) from exc
        return cls(
            day=_text(data.get("day")),
            period=period,
            subject=_text(data.get("subject")),
            teacher=_text(data.get("teacher")),
            class_room=_text(_pick(data, "class_room", "classRoom")),
            id=_text(data.get("id")) or None,
        )


@dataclass(frozen=True)
class SchoolSettings:
    """Letterhead data. Every field is optional and defaults to empty."""

    name: str = ""
    ministry: str = ""
    region: str = ""
    slogan: str = ""
    logo_url: Optional[str] = None
    stamp_url: Optional[str] = None
    report_link: Optional[str] = None
    report_general_message: str = ""
    whatsapp_phone: str = ""
    academic_year: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "SchoolSettings":
        data = _require_mapping(data, "School settings")
        return cls(
            name=_text(data.get("name")),
            ministry=_text(data.get("ministry")),
            region=_text(data.get("region")),
            slogan=_text(data.get("slogan")),
            logo_url=_text(_pick(data, "logo_url", "logoUrl")) or None,
            stamp_url=_text(_pick(data, "stamp_url", "stampUrl")) or None,
            report_link=_text(_pick(data, "report_link", "reportLink")) or None,
            report_general_message=_text(_pick(data, "report_general_message", "reportGeneralMessage")),
            whatsapp_phone=_text(_pick(data, "whatsapp_phone", "whatsappPhone")),
            academic_year=_text(_pick(data, "academic_year", "academicYear")),
        )


def parse_schedule(items: Any) -> list[ScheduleItem]:
    """Parse the full weekly schedule; the list itself is required."""
    if not isinstance(items, (list, tuple)):
        raise ReportPreconditionError("Schedule must be a list of schedule items.")
    return [item if isinstance(item, ScheduleItem) else ScheduleItem.from_dict(item) for item in items]
