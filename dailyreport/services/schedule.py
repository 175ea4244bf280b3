"""Weekday names, report date formatting and daily schedule selection."""
from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List

from dailyreport.models import ScheduleItem

MAX_SCHEDULE_ROWS = 7

# Indexed by date.weekday() (Monday == 0).
ARABIC_DAY_NAMES = ("الاثنين", "الثلاثاء", "الأربعاء", "الخميس", "الجمعة", "السبت", "الأحد")
ENGLISH_DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

ARABIC_MONTH_NAMES = (
    "يناير", "فبراير", "مارس", "أبريل", "مايو", "يونيو",
    "يوليو", "أغسطس", "سبتمبر", "أكتوبر", "نوفمبر", "ديسمبر",
)


def day_name_for(day: date) -> str:
    return ARABIC_DAY_NAMES[day.weekday()]


def _day_index(name: str) -> int | None:
    cleaned = name.strip()
    if cleaned in ARABIC_DAY_NAMES:
        return ARABIC_DAY_NAMES.index(cleaned)
    lowered = cleaned.lower()
    if lowered in ENGLISH_DAY_NAMES:
        return ENGLISH_DAY_NAMES.index(lowered)
    return None


def format_report_date(day: date) -> str:
    return f"{day.day} {ARABIC_MONTH_NAMES[day.month - 1]} {day.year}"


def format_generated_at(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M")


def select_daily_schedule(
    items: Iterable[ScheduleItem],
    day: date,
    limit: int = MAX_SCHEDULE_ROWS,
) -> List[ScheduleItem]:
    """
    Sessions held on ``day``'s weekday, ordered by period, truncated to ``limit``.

    Schedule rows may name the day in Arabic or English; rows with an
    unrecognised day name never match.
    """
    weekday = day.weekday()
    matching = [item for item in items if _day_index(item.day) == weekday]
    matching.sort(key=lambda item: item.period)
    return matching[: max(0, limit)]
