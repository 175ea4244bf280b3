"""Parent-facing message text and chat links that accompany a report."""
from __future__ import annotations

import re
from urllib.parse import quote

from dailyreport.models import SchoolSettings, Student

CHAT_BASE_URL = "https://wa.me/"

_NON_DIGITS = re.compile(r"\D+")


def clean_phone(phone: str | None) -> str:
    """Strip everything but digits from a phone number."""
    return _NON_DIGITS.sub("", phone or "")


def build_parent_message(student: Student, settings: SchoolSettings) -> str:
    school_name = settings.name or "المدرسة"
    message = (
        f"🏫 *{school_name}*\n"
        f"👤 ولي أمر الطالب: *{student.name}*\n\n"
        "السلام عليكم ورحمة الله،\n"
        "مرفق لكم ملف PDF يحتوي على تقرير المتابعة اليومي للطالب.\n\n"
        "نرجو التكرم بالاطلاع عليه."
    )
    school_phone = clean_phone(settings.whatsapp_phone)
    if school_phone:
        message += f"\n\n👇 للرد على المدرسة:\n{CHAT_BASE_URL}{school_phone}"
    return message


def build_chat_link(phone: str | None, text: str) -> str:
    """Chat deep link for ``phone`` with ``text`` pre-filled.

    Raises:
        ValueError: if the phone number has no digits.
    """
    digits = clean_phone(phone)
    if not digits:
        raise ValueError("A phone number with at least one digit is required.")
    return f"{CHAT_BASE_URL}{digits}?text={quote(text, safe='')}"
