"""
Daily report service.

Entry point used by the HTTP layer: builds a fresh composer for every report
from the application settings, and packs bulk runs into a ZIP archive with
a CSV summary.
"""
from __future__ import annotations

import asyncio
import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo

import httpx

from dailyreport.config import Settings
from dailyreport.errors import ReportError, ReportPreconditionError
from dailyreport.models import DailyRecord, SchoolSettings, Student, parse_schedule
from dailyreport.services.chart import ChartRenderer
from dailyreport.services.composer import ComposedReport, ReportComposer
from dailyreport.services.image_loader import ImageLoader
from dailyreport.services.text_raster import TextRasterizer

logger = logging.getLogger(__name__)

SUMMARY_FILENAME = "bulk_summary.csv"
SUMMARY_HEADER = ["Student ID", "Student Name", "Date", "Status", "File", "Performance", "Notes"]


@dataclass
class BulkOutcome:
    archive: bytes
    succeeded: int = 0
    failed: int = 0
    rows: List[List[str]] = field(default_factory=list)


def sanitize_name(name: str) -> str:
    sanitized = "_".join(part for part in name.strip().split() if part)
    sanitized = sanitized.replace("/", "-").replace("\\", "-")
    return sanitized or "student"


def unique_filename(stem: str, student_id: str, used: set[str]) -> str:
    """``stem.pdf``, else ``stem_<id>.pdf``, else ``stem_<id>_2.pdf``, ``_3`` and so on."""
    candidate = f"{stem}.pdf"
    if candidate not in used:
        return candidate
    candidate = f"{stem}_{student_id}.pdf"
    counter = 2
    while candidate in used:
        candidate = f"{stem}_{student_id}_{counter}.pdf"
        counter += 1
    return candidate


class ReportService:
    """Generates daily report PDFs for one student or a whole class."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    def build_composer(self) -> ReportComposer:
        settings = self.settings
        rasterizer = TextRasterizer(settings.FONT_PATH, settings.BOLD_FONT_PATH, scale=settings.RASTER_SCALE)
        loader = ImageLoader(
            timeout=settings.IMAGE_FETCH_TIMEOUT_SECONDS,
            assets_dir=settings.ASSETS_DIR,
            max_bytes=settings.MAX_IMAGE_BYTES,
            transport=self._transport,
        )
        return ReportComposer(
            rasterizer,
            loader,
            chart_renderer=ChartRenderer(rasterizer),
            margin=settings.PAGE_MARGIN,
            max_schedule_rows=settings.MAX_SCHEDULE_ROWS,
            qr_service_url=settings.QR_SERVICE_URL,
        )

    async def generate(
        self,
        student: Any,
        record: Any,
        school: Any,
        schedule: Any,
        generated_at: Optional[datetime] = None,
    ) -> ComposedReport:
        return await self.build_composer().compose(student, record, school, schedule, generated_at)

    async def generate_pdf(self, *args: Any, **kwargs: Any) -> bytes:
        report = await self.generate(*args, **kwargs)
        return report.pdf

    async def generate_bulk(
        self,
        school: Any,
        schedule: Any,
        entries: Sequence[Dict[str, Any]],
        generated_at: Optional[datetime] = None,
    ) -> BulkOutcome:
        """Build one report per entry; a failing entry is recorded, not fatal."""
        if not isinstance(entries, (list, tuple)) or not entries:
            raise ReportPreconditionError("Bulk request must include a non-empty 'entries' list.")
        if len(entries) > self.settings.MAX_BULK_ENTRIES:
            raise ReportPreconditionError(
                f"Bulk request has {len(entries)} entries; the limit is {self.settings.MAX_BULK_ENTRIES}."
            )
        school = school if isinstance(school, SchoolSettings) else SchoolSettings.from_dict(school)
        schedule = parse_schedule(schedule)
        generated_at = generated_at or datetime.now()

        outcome = BulkOutcome(archive=b"")
        used_names: set[str] = set()
        buffer = io.BytesIO()
        with ZipFile(buffer, "w", ZIP_DEFLATED) as archive:
            for index, entry in enumerate(entries):
                if index and self.settings.BULK_PAUSE_SECONDS:
                    await asyncio.sleep(self.settings.BULK_PAUSE_SECONDS)
                row = await self._bulk_entry(archive, entry, school, schedule, generated_at, used_names)
                if row[3] == "Success":
                    outcome.succeeded += 1
                else:
                    outcome.failed += 1
                outcome.rows.append(row)

            csv_buffer = io.StringIO()
            writer = csv.writer(csv_buffer)
            writer.writerow(SUMMARY_HEADER)
            writer.writerows(outcome.rows)
            archive.writestr(_entry_info(SUMMARY_FILENAME, generated_at), csv_buffer.getvalue().encode("utf-8"))

        outcome.archive = buffer.getvalue()
        logger.info("Bulk run finished: %d succeeded, %d failed", outcome.succeeded, outcome.failed)
        return outcome

    async def _bulk_entry(
        self,
        archive: ZipFile,
        entry: Any,
        school: SchoolSettings,
        schedule: list,
        generated_at: datetime,
        used_names: set[str],
    ) -> List[str]:
        entry = entry if isinstance(entry, dict) else {}
        raw_student, raw_record = entry.get("student"), entry.get("record")
        known = raw_student if isinstance(raw_student, dict) else {}
        student_id, student_name = str(known.get("id") or ""), str(known.get("name") or "")
        try:
            student = raw_student if isinstance(raw_student, Student) else Student.from_dict(raw_student)
            record = raw_record if isinstance(raw_record, DailyRecord) else DailyRecord.from_dict(raw_record)
            report = await self.generate(student, record, school, schedule, generated_at)
        except ReportError as exc:
            logger.warning("Bulk entry for student %r failed: %s", student_id or student_name, exc)
            return [student_id, student_name, "", "Error", "", "", str(exc)]

        filename = unique_filename(
            f"{sanitize_name(student.name)}_{record.date.isoformat()}",
            sanitize_name(student.id),
            used_names,
        )
        used_names.add(filename)
        archive.writestr(_entry_info(filename, generated_at), report.pdf)
        return [
            student.id,
            student.name,
            record.date.isoformat(),
            "Success",
            filename,
            report.performance.label,
            "",
        ]


def _entry_info(filename: str, moment: datetime) -> ZipInfo:
    # Stamp entries with the report time so identical runs give identical archives.
    info = ZipInfo(filename, date_time=(max(moment.year, 1980),) + moment.timetuple()[1:6])
    info.compress_type = ZIP_DEFLATED
    return info
