"""Report generation routes."""
from __future__ import annotations

import io
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response, StreamingResponse
from pydantic import BaseModel, Field

from dailyreport.errors import ReportPreconditionError
from dailyreport.models import SchoolSettings, Student
from dailyreport.services.composer import validate_inputs
from dailyreport.services.messaging import build_chat_link, build_parent_message
from dailyreport.services.report import ReportService, sanitize_name
from dailyreport.dependencies import get_report_service

logger = logging.getLogger(__name__)

router = APIRouter()


class DailyReportRequest(BaseModel):
    student: Optional[Dict[str, Any]] = None
    record: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    schedule: Optional[List[Dict[str, Any]]] = None
    generated_at: Optional[datetime] = None


class BulkEntry(BaseModel):
    student: Optional[Dict[str, Any]] = None
    record: Optional[Dict[str, Any]] = None


class BulkReportRequest(BaseModel):
    settings: Optional[Dict[str, Any]] = None
    schedule: Optional[List[Dict[str, Any]]] = None
    entries: List[BulkEntry] = Field(default_factory=list)
    generated_at: Optional[datetime] = None


class ShareLinkRequest(BaseModel):
    student: Dict[str, Any]
    settings: Dict[str, Any] = Field(default_factory=dict)


def _attachment(filename: str, fallback: str) -> Dict[str, str]:
    return {"Content-Disposition": f"attachment; filename={fallback}; filename*=UTF-8''{quote(filename)}"}


def _bad_request(exc: ReportPreconditionError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("/daily")
async def daily_report(
    body: DailyReportRequest,
    service: ReportService = Depends(get_report_service),
):
    """Generate one student's daily report as a PDF attachment."""
    try:
        student, record, school, schedule = validate_inputs(body.student, body.record, body.settings, body.schedule)
    except ReportPreconditionError as exc:
        raise _bad_request(exc) from exc

    report = await service.generate(student, record, school, schedule, body.generated_at)
    day = record.date.isoformat()
    return Response(
        content=report.pdf,
        media_type="application/pdf",
        headers=_attachment(f"{sanitize_name(student.name)}_{day}.pdf", f"daily_report_{day}.pdf"),
    )


@router.post("/bulk")
async def bulk_reports(
    body: BulkReportRequest,
    service: ReportService = Depends(get_report_service),
):
    """Generate reports for many students and return a ZIP archive (partial success)."""
    if body.settings is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="School settings are required.")
    try:
        outcome = await service.generate_bulk(
            body.settings,
            body.schedule,
            [entry.model_dump() for entry in body.entries],
            body.generated_at,
        )
    except ReportPreconditionError as exc:
        raise _bad_request(exc) from exc

    headers = {
        "Content-Disposition": "attachment; filename=daily_reports.zip",
        "X-Reports-Succeeded": str(outcome.succeeded),
        "X-Reports-Failed": str(outcome.failed),
    }
    return StreamingResponse(io.BytesIO(outcome.archive), media_type="application/zip", headers=headers)


@router.post("/share-link")
async def share_link(body: ShareLinkRequest) -> dict[str, str]:
    """Return the parent message and the chat link that sends it."""
    try:
        student = Student.from_dict(body.student)
        school = SchoolSettings.from_dict(body.settings)
    except ReportPreconditionError as exc:
        raise _bad_request(exc) from exc

    message = build_parent_message(student, school)
    try:
        url = build_chat_link(student.parent_phone, message)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Student '{student.id}' has no guardian phone number.",
        ) from exc
    return {"message": message, "url": url}
