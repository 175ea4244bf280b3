"""End-to-end tests for the daily report composer."""
import asyncio
import math
from datetime import datetime
from urllib.parse import unquote

import httpx
import pytest

from dailyreport.errors import ReportPreconditionError
from dailyreport.models import DailyRecord, SchoolSettings, Student
from dailyreport.services.composer import MAX_PAGE_MARGIN, ReportComposer, summary_styles_for
from dailyreport.services.image_loader import ImageLoader
from dailyreport.services.scoring import PerformanceTier
from dailyreport.services.status_styles import PLACEHOLDER_STYLE, Axis

QR_URL = "https://qr.test/create?size=120x120&data={data}"
GENERATED_AT = datetime(2026, 10, 18, 13, 30)
FIXED_SECTIONS = ["header", "student_card", "summary", "chart", "schedule", "footer"]


def _compose(composer, student, record, school, schedule, generated_at=GENERATED_AT):
    return asyncio.run(composer.compose(student, record, school, schedule, generated_at))


def test_present_report(composer, student_data, record_data, school_data, schedule_data):
    report = _compose(composer, student_data, record_data, school_data, schedule_data)

    assert report.pdf.startswith(b"%PDF")
    assert b"/Count 1" in report.pdf
    assert report.performance.tier is PerformanceTier.TOP
    assert report.performance.label == "ممتاز"
    assert report.chart_state == "radar"
    for point in report.chart.points:
        assert math.dist(point, report.chart.center) == pytest.approx(report.chart.radius)
    assert [row.period for row in report.schedule_rows] == [1, 2, 3]
    assert report.section_names == FIXED_SECTIONS
    assert report.summary_styles[Axis.ATTENDANCE].label == "حاضر"
    assert report.summary_styles[Axis.HOMEWORK].label == "متميز"


def test_absent_report_has_no_data_panel(composer, student_data, absent_record_data, school_data, schedule_data):
    report = _compose(composer, student_data, absent_record_data, school_data, schedule_data)

    assert report.pdf.startswith(b"%PDF")
    assert report.chart is None
    assert report.chart_state == "no-data"
    assert report.performance.tier is PerformanceTier.UNDETERMINED
    assert report.performance.label == "غير محدد"
    assert report.summary_styles[Axis.ATTENDANCE].label == "غائب"
    for axis in (Axis.PARTICIPATION, Axis.HOMEWORK, Axis.BEHAVIOR):
        assert report.summary_styles[axis] is PLACEHOLDER_STYLE


def test_excused_record_hides_academic_statuses(record_data):
    styles = summary_styles_for(DailyRecord.from_dict({**record_data, "attendance": "excused"}))
    assert styles[Axis.ATTENDANCE].label == "مستأذن"
    assert styles[Axis.BEHAVIOR] is PLACEHOLDER_STYLE


def test_identical_inputs_give_identical_bytes(composer, student_data, record_data, school_data, schedule_data):
    first = _compose(composer, student_data, record_data, school_data, schedule_data)
    second = _compose(composer, student_data, record_data, school_data, schedule_data)
    assert first.pdf == second.pdf


def test_sections_stack_downwards_inside_margins(composer, student_data, record_data, school_data):
    schedule = [{"day": "الأحد", "period": period, "subject": f"مادة {period}"} for period in range(1, 10)]
    record = {**record_data, "notes": "تأخر عن الحصة الأولى " * 20}
    school = {**school_data, "reportGeneralMessage": "نشكر أولياء الأمور على متابعتهم المستمرة"}

    report = _compose(composer, student_data, record, school, schedule)

    assert len(report.schedule_rows) == 7
    assert report.section_names == ["header", "student_card", "summary", "chart", "schedule", "notes", "message", "footer"]
    boxes = [box for _, box in report.sections]
    for upper, lower in zip(boxes, boxes[1:]):
        assert lower.top <= upper.y
    assert boxes[0].top <= 842
    assert boxes[-1].y >= composer.margin - 1e-6


def test_empty_schedule_draws_placeholder_row(composer, student_data, record_data, school_data):
    report = _compose(composer, student_data, record_data, school_data, [])
    schedule_box = dict(report.sections)["schedule"]
    assert report.schedule_rows == []
    assert schedule_box.height == pytest.approx(ReportComposer.schedule_height(0))


def test_blank_notes_and_message_are_skipped(composer, student_data, record_data, school_data, schedule_data):
    record = {**record_data, "notes": "   "}
    school = {**school_data, "reportGeneralMessage": ""}
    report = _compose(composer, student_data, record, school, schedule_data)
    assert "notes" not in report.section_names
    assert "message" not in report.section_names


def test_minimal_settings_still_render(composer, student_data, record_data):
    report = _compose(composer, {"id": "s", "name": "طالب"}, {**record_data, "studentId": "s"}, {}, [])
    assert report.pdf.startswith(b"%PDF")


@pytest.mark.parametrize(
    "field, value",
    [("student", None), ("record", None), ("school", None), ("schedule", None), ("schedule", {"day": "x"})],
)
def test_missing_required_input_raises_before_drawing(
    composer, student_data, record_data, school_data, field, value
):
    inputs = {"student": student_data, "record": record_data, "school": school_data, "schedule": []}
    inputs[field] = value
    with pytest.raises(ReportPreconditionError):
        _compose(composer, inputs["student"], inputs["record"], inputs["school"], inputs["schedule"])


@pytest.mark.parametrize("change", [{"attendance": ""}, {"date": None}, {"date": "18/10/2026"}])
def test_bad_record_raises(composer, student_data, record_data, school_data, change):
    with pytest.raises(ReportPreconditionError):
        _compose(composer, student_data, {**record_data, **change}, school_data, [])


def test_record_for_another_student_raises(composer, student_data, record_data, school_data):
    with pytest.raises(ReportPreconditionError):
        _compose(composer, student_data, {**record_data, "studentId": "someone-else"}, school_data, [])


def _composer_with(rasterizer, handler):
    loader = ImageLoader(timeout=1.0, transport=httpx.MockTransport(handler))
    return ReportComposer(rasterizer, loader, qr_service_url=QR_URL)


def test_qr_code_used_when_no_stamp(rasterizer, png_bytes, student_data, school_data):
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, content=png_bytes, headers={"content-type": "image/png"})

    composer = _composer_with(rasterizer, handler)
    school = {**school_data, "reportLink": "https://school.test/reports?id=1"}
    assets = asyncio.run(composer.load_assets(Student.from_dict(student_data), SchoolSettings.from_dict(school)))

    assert assets.stamp is None
    assert assets.qr is not None
    assert len(requested) == 1
    assert requested[0].startswith("https://qr.test/create")
    assert unquote(requested[0].split("data=")[1]) == "https://school.test/reports?id=1"


def test_stamp_takes_precedence_over_qr(rasterizer, png_data_uri, student_data, school_data):
    requested = []

    def handler(request):
        requested.append(request)
        return httpx.Response(404)

    composer = _composer_with(rasterizer, handler)
    school = {**school_data, "stampUrl": png_data_uri, "reportLink": "https://school.test/r"}
    assets = asyncio.run(composer.load_assets(Student.from_dict(student_data), SchoolSettings.from_dict(school)))

    assert assets.stamp is not None
    assert assets.qr is None
    assert requested == []


def test_broken_images_fall_back_to_placeholders(rasterizer, student_data, record_data, school_data, schedule_data):
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    composer = _composer_with(rasterizer, handler)
    school = {**school_data, "logoUrl": "https://cdn.test/logo.png", "stampUrl": "data:image/png;base64,AAAA"}
    student = {**student_data, "avatar": "https://cdn.test/avatar.jpg"}

    report = _compose(composer, student, record_data, school, schedule_data)

    assert report.pdf.startswith(b"%PDF")



def _full_page_inputs(record_data, school_data):
    schedule = [{"day": "الأحد", "period": period, "subject": f"مادة {period}"} for period in range(1, 10)]
    record = {**record_data, "notes": "ملاحظة طويلة " * 30}
    school = {**school_data, "reportGeneralMessage": "رسالة الإدارة " * 20}
    return record, school, schedule


def test_full_page_fits_at_largest_margin(rasterizer, offline_transport, student_data, record_data, school_data):
    loader = ImageLoader(timeout=1.0, transport=offline_transport)
    composer = ReportComposer(rasterizer, loader, margin=MAX_PAGE_MARGIN)
    record, school, schedule = _full_page_inputs(record_data, school_data)

    report = _compose(composer, student_data, record, school, schedule)

    assert len(report.section_names) == 8
    assert dict(report.sections)["footer"].y >= MAX_PAGE_MARGIN - 1e-6


@pytest.mark.parametrize("margin", [-1.0, MAX_PAGE_MARGIN + 1])
def test_margin_outside_page_budget_is_rejected(rasterizer, offline_transport, margin):
    with pytest.raises(ValueError):
        ReportComposer(rasterizer, ImageLoader(transport=offline_transport), margin=margin)
