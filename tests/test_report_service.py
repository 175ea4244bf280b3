"""Tests for the report service facade and bulk mode."""
import asyncio
import csv
import io
import zipfile
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest

from dailyreport.errors import ReportPreconditionError
from dailyreport.services.report import SUMMARY_FILENAME, sanitize_name, unique_filename

GENERATED_AT = datetime(2026, 10, 18, 13, 30)


def test_sanitize_name():
    assert sanitize_name("  محمد   عبدالله ") == "محمد_عبدالله"
    assert sanitize_name("a/b") == "a-b"
    assert sanitize_name("   ") == "student"


def test_generate_pdf(report_service, student_data, record_data, school_data, schedule_data):
    pdf = asyncio.run(report_service.generate_pdf(student_data, record_data, school_data, schedule_data, GENERATED_AT))
    assert pdf.startswith(b"%PDF")


def test_bulk_partial_success(report_service, student_data, record_data, school_data, schedule_data):
    second = {**student_data, "id": "st-2", "name": "سعد"}
    entries = [
        {"student": student_data, "record": record_data},
        {"student": {"id": "st-3"}, "record": record_data},
        {"student": second, "record": {**record_data, "studentId": "st-2", "attendance": "absent"}},
    ]

    outcome = asyncio.run(report_service.generate_bulk(school_data, schedule_data, entries, GENERATED_AT))

    assert (outcome.succeeded, outcome.failed) == (2, 1)
    with zipfile.ZipFile(io.BytesIO(outcome.archive)) as archive:
        names = archive.namelist()
        assert "محمد_عبدالله_أحمد_الزهراني_2026-10-18.pdf" in names
        assert "سعد_2026-10-18.pdf" in names
        assert SUMMARY_FILENAME in names
        rows = list(csv.reader(io.StringIO(archive.read(SUMMARY_FILENAME).decode("utf-8"))))
    assert rows[0][3] == "Status"
    assert [row[3] for row in rows[1:]] == ["Success", "Error", "Success"]
    assert rows[3][5] == "غير محدد"
    assert "name" in rows[2][6]


def test_bulk_names_do_not_collide(report_service, student_data, record_data, school_data):
    twin = {**student_data, "id": "st-9"}
    entries = [
        {"student": student_data, "record": record_data},
        {"student": twin, "record": {**record_data, "studentId": "st-9"}},
    ]
    outcome = asyncio.run(report_service.generate_bulk(school_data, [], entries, GENERATED_AT))
    with zipfile.ZipFile(io.BytesIO(outcome.archive)) as archive:
        pdfs = [name for name in archive.namelist() if name.endswith(".pdf")]
    assert len(set(pdfs)) == 2


def test_repeated_entries_get_distinct_archive_names(report_service, student_data, record_data, school_data):
    entries = [{"student": student_data, "record": record_data}] * 3
    outcome = asyncio.run(report_service.generate_bulk(school_data, [], entries, GENERATED_AT))
    with zipfile.ZipFile(io.BytesIO(outcome.archive)) as archive:
        names = archive.namelist()
    assert outcome.succeeded == 3
    assert len(names) == len(set(names)) == 4


def test_unique_filename_counts_up():
    used = {"a_2026-10-18.pdf", "a_2026-10-18_st-1.pdf", "a_2026-10-18_st-1_2.pdf"}
    assert unique_filename("b_2026-10-18", "st-1", used) == "b_2026-10-18.pdf"
    assert unique_filename("a_2026-10-18", "st-1", used) == "a_2026-10-18_st-1_3.pdf"


def test_bulk_pauses_between_builds(report_service, student_data, record_data, school_data):
    report_service.settings = report_service.settings.model_copy(update={"BULK_PAUSE_SECONDS": 0.5})
    entries = [{"student": student_data, "record": record_data}] * 3
    with patch("dailyreport.services.report.asyncio.sleep", new=AsyncMock()) as sleep:
        asyncio.run(report_service.generate_bulk(school_data, [], entries, GENERATED_AT))
    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.5)


def test_bulk_archive_is_byte_stable(report_service, student_data, record_data, school_data):
    entries = [{"student": student_data, "record": record_data}]
    first = asyncio.run(report_service.generate_bulk(school_data, [], entries, GENERATED_AT))
    second = asyncio.run(report_service.generate_bulk(school_data, [], entries, GENERATED_AT))
    assert first.archive == second.archive


@pytest.mark.parametrize("entries", [[], None, "entries"])
def test_bulk_requires_entries(report_service, school_data, entries):
    with pytest.raises(ReportPreconditionError):
        asyncio.run(report_service.generate_bulk(school_data, [], entries))


def test_bulk_entry_limit(report_service, student_data, record_data, school_data):
    report_service.settings = report_service.settings.model_copy(update={"MAX_BULK_ENTRIES": 1})
    entries = [{"student": student_data, "record": record_data}] * 2
    with pytest.raises(ReportPreconditionError):
        asyncio.run(report_service.generate_bulk(school_data, [], entries))
