"""
Daily report composer.

Lays out the one-page daily follow-up report top to bottom on a fixed A4
page. Every piece of text goes through ``TextRasterizer`` and is embedded as
a bitmap; boxes, rules and badges are plain canvas primitives.

Sections, in order (6 and 7 are the only optional ones):

1. header          - organisation block, logo + title, date block
2. student card    - avatar panel and a 2x2 grid of details
3. summary strip   - one styled box per status axis
4. chart panel     - radar chart and overall grade, or a no-data panel
5. schedule table  - today's sessions, at most ``max_schedule_rows``
6. notes           - only when the record carries notes
7. message         - only when the school configured a report message
8. footer          - signatures, stamp / QR, info strip
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from dailyreport.errors import ReportPreconditionError
from dailyreport.models import DailyRecord, ScheduleItem, SchoolSettings, Student, parse_schedule
from dailyreport.services.assembler import DocumentAssembler
from dailyreport.services.chart import ChartRenderer, RadarCategory, RadarChart
from dailyreport.services.image_loader import ImageLoader, LoadedImage
from dailyreport.services.layout import DEFAULT_MARGIN, PAGE_HEIGHT, PAGE_WIDTH, LayoutCursor, RenderBox
from dailyreport.services.schedule import (
    MAX_SCHEDULE_ROWS,
    day_name_for,
    format_generated_at,
    format_report_date,
    select_daily_schedule,
)
from dailyreport.services.scoring import PerformanceSummary, evaluate
from dailyreport.services.status_styles import (
    ACADEMIC_AXES,
    AXIS_LABELS,
    PLACEHOLDER_STYLE,
    Axis,
    StatusStyle,
    academic_style,
    attendance_style,
)
from dailyreport.services.text_raster import (
    LINE_HEIGHT_FACTOR,
    PADDING,
    Align,
    RasterText,
    TextRasterizer,
    TextStyle,
)

logger = logging.getLogger(__name__)

SECTION_GAP = 8.0
HEADER_HEIGHT = 92.0
CARD_HEIGHT = 72.0
TITLE_HEIGHT = 16.0
SUMMARY_BOX_HEIGHT = 40.0
CHART_PANEL_HEIGHT = 120.0
TABLE_HEADER_HEIGHT = 20.0
TABLE_ROW_HEIGHT = 18.0
NOTES_HEIGHT = 58.0
MESSAGE_HEIGHT = 48.0
SIGNATURE_HEIGHT = 66.0
INFO_STRIP_HEIGHT = 24.0
FOOTER_HEIGHT = SIGNATURE_HEIGHT + 6.0 + INFO_STRIP_HEIGHT

# Every section drawn, a full schedule, notes and message, with the gaps between them.
MAX_CONTENT_HEIGHT = (
    HEADER_HEIGHT + CARD_HEIGHT + 3 * TITLE_HEIGHT + SUMMARY_BOX_HEIGHT + CHART_PANEL_HEIGHT
    + TABLE_HEADER_HEIGHT + MAX_SCHEDULE_ROWS * TABLE_ROW_HEIGHT
    + NOTES_HEIGHT + MESSAGE_HEIGHT + FOOTER_HEIGHT + 7 * SECTION_GAP
)
MAX_PAGE_MARGIN = (PAGE_HEIGHT - MAX_CONTENT_HEIGHT) / 2
AVATAR_PANEL_WIDTH = 92.0

# Right-to-left: index, subject, teacher, attendance, participation,
# homework, behavior, notes.
SCHEDULE_COLUMNS = (0.06, 0.18, 0.18, 0.11, 0.11, 0.11, 0.11, 0.14)

INK = "#1f2937"
MUTED = "#6b7280"
FAINT = "#9ca3af"
RULE = "#d1d5db"
HAIRLINE = "#e5e7eb"
ACCENT = "#0f766e"
PANEL = "#f9fafb"
HEADER_FILL = "#f3f4f6"

REPORT_TITLE = "تقرير متابعة يومي"
COUNTRY_LINE = "المملكة العربية السعودية"
ISSUER_LINE = "صدر عن: نظام التتبع الذكي"
NO_SESSIONS_TEXT = "لا توجد حصص مسجلة في الجدول لهذا اليوم"


@dataclass
class ReportAssets:
    logo: Optional[LoadedImage] = None
    avatar: Optional[LoadedImage] = None
    stamp: Optional[LoadedImage] = None
    qr: Optional[LoadedImage] = None


@dataclass
class ComposedReport:
    """The serialized report plus the layout decisions taken while drawing it."""

    pdf: bytes
    performance: PerformanceSummary
    chart: Optional[RadarChart]
    summary_styles: Dict[Axis, StatusStyle]
    schedule_rows: List[ScheduleItem]
    sections: List[Tuple[str, RenderBox]] = field(default_factory=list)

    @property
    def chart_state(self) -> str:
        return "radar" if self.chart is not None else "no-data"

    @property
    def section_names(self) -> List[str]:
        return [name for name, _ in self.sections]


@dataclass
class _ReportContext:
    student: Student
    record: DailyRecord
    school: SchoolSettings
    rows: List[ScheduleItem]
    performance: PerformanceSummary
    assets: ReportAssets
    generated_at: datetime


def validate_inputs(
    student: Any,
    record: Any,
    school: Any,
    schedule: Any,
) -> Tuple[Student, DailyRecord, SchoolSettings, List[ScheduleItem]]:
    """Coerce raw inputs into domain records; fail before anything is drawn."""
    if student is None:
        raise ReportPreconditionError("A student is required to build a report.")
    if record is None:
        raise ReportPreconditionError("A daily record is required to build a report.")
    if school is None:
        raise ReportPreconditionError("School settings are required to build a report.")
    if schedule is None:
        raise ReportPreconditionError("The schedule list is required (it may be empty).")

    student = student if isinstance(student, Student) else Student.from_dict(student)
    record = record if isinstance(record, DailyRecord) else DailyRecord.from_dict(record)
    school = school if isinstance(school, SchoolSettings) else SchoolSettings.from_dict(school)
    schedule = parse_schedule(schedule)

    if not student.id or not student.name:
        raise ReportPreconditionError("Student id and name are required.")
    if record.student_id and record.student_id != student.id:
        raise ReportPreconditionError(
            f"Daily record belongs to student '{record.student_id}', not '{student.id}'."
        )
    return student, record, school, schedule


def summary_styles_for(record: DailyRecord) -> Dict[Axis, StatusStyle]:
    """Badge styles per axis; academic axes fall back to the placeholder unless present."""
    styles = {Axis.ATTENDANCE: attendance_style(record.attendance)}
    for axis in ACADEMIC_AXES:
        styles[axis] = academic_style(getattr(record, axis.value)) if record.is_present else PLACEHOLDER_STYLE
    return styles


class _Page:
    """Drawing helpers bound to one document; knows nothing about sections."""

    def __init__(self, doc: DocumentAssembler, rasterizer: TextRasterizer):
        self.doc = doc
        self.rasterizer = rasterizer

    def text(
        self,
        text: str,
        box: RenderBox,
        style: TextStyle,
        valign: str = "middle",
    ) -> Optional[RasterText]:
        """Rasterize ``text`` into ``box``, shrinking the bitmap if it would spill."""
        if not text or not text.strip():
            return None
        if style.max_width is None:
            style = style.replace(max_width=max(1.0, box.width - 2 * PADDING))
        raster = self.rasterizer.rasterize(text, style)
        factor = min(1.0, box.width / raster.width, box.height / raster.height)
        width, height = raster.width * factor, raster.height * factor

        align = Align(style.align)
        if align is Align.RIGHT:
            x = box.right - width
        elif align is Align.CENTER:
            x = box.center_x - width / 2
        else:
            x = box.x
        if valign == "top":
            y = box.top - height
        elif valign == "bottom":
            y = box.y
        else:
            y = box.center_y - height / 2

        self.doc.image(raster.image, RenderBox(x, y, width, height))
        return raster

    def picture(self, loaded: LoadedImage, box: RenderBox) -> RenderBox:
        """Fit an image into ``box`` keeping its aspect ratio, centered."""
        aspect = loaded.aspect
        width = min(box.width, box.height * aspect)
        height = width / aspect
        target = RenderBox(box.center_x - width / 2, box.center_y - height / 2, width, height)
        self.doc.image(loaded.image, target)
        return target

    def badge(self, style: StatusStyle, box: RenderBox, font_size: float = 8.0) -> None:
        self.doc.rect(box, fill=style.background, stroke=style.border, line_width=0.5, radius=2)
        self.text(style.label, box, TextStyle(font_size=font_size, bold=True, color=style.text, align=Align.CENTER))

    def section_title(self, title: str, box: RenderBox) -> None:
        raster = self.text(title, box, TextStyle(font_size=10, bold=True, color=ACCENT), valign="top")
        underline = min(box.width, raster.width if raster else box.width)
        self.doc.line(box.right - underline, box.y + 1, box.right, box.y + 1, color=HAIRLINE)

    def placeholder(self, box: RenderBox, caption: str, radius: float = 4.0) -> None:
        self.doc.rect(box, stroke=RULE, line_width=0.75, radius=radius, dash=(3, 2))
        self.text(caption, box.inset(3), TextStyle(font_size=7, color=FAINT, align=Align.CENTER))


def _lines_that_fit(height: float, font_size: float) -> int:
    return max(1, math.floor((height - 2 * PADDING) / (font_size * LINE_HEIGHT_FACTOR)))


class ReportComposer:
    """Builds one daily report per ``compose`` call; holds no per-report state."""

    def __init__(
        self,
        rasterizer: TextRasterizer,
        loader: ImageLoader,
        chart_renderer: Optional[ChartRenderer] = None,
        margin: float = DEFAULT_MARGIN,
        max_schedule_rows: int = MAX_SCHEDULE_ROWS,
        qr_service_url: Optional[str] = None,
    ):
        if not 0 <= margin <= MAX_PAGE_MARGIN:
            raise ValueError(f"Page margin must be between 0 and {MAX_PAGE_MARGIN:.1f}pt, got {margin}.")
        self.rasterizer = rasterizer
        self.loader = loader
        self.chart_renderer = chart_renderer or ChartRenderer(rasterizer)
        self.margin = margin
        self.max_schedule_rows = min(max_schedule_rows, MAX_SCHEDULE_ROWS)
        self.qr_service_url = qr_service_url
        self.page_size = (PAGE_WIDTH, PAGE_HEIGHT)

    async def compose(
        self,
        student: Any,
        record: Any,
        school: Any,
        schedule: Any,
        generated_at: Optional[datetime] = None,
    ) -> ComposedReport:
        """
        Build the report PDF for one student and one day.

        ``generated_at`` is printed in the footer and defaults to the current
        time; pass a fixed value to get byte-identical output for identical
        inputs.

        Raises:
            ReportPreconditionError: required input is missing or malformed.
            RasterizationError: text or chart could not be rendered.
            SerializationError: the PDF could not be written.
        """
        student, record, school, schedule = validate_inputs(student, record, school, schedule)
        ctx = _ReportContext(
            student=student,
            record=record,
            school=school,
            rows=select_daily_schedule(schedule, record.date, self.max_schedule_rows),
            performance=evaluate(record),
            assets=await self.load_assets(student, school),
            generated_at=generated_at or datetime.now(),
        )
        logger.info(
            "Composing report for student %s on %s (%d sessions, tier=%s)",
            student.id, record.date.isoformat(), len(ctx.rows), ctx.performance.tier.value,
        )

        doc = DocumentAssembler(self.page_size)
        doc.set_metadata(
            title=f"{REPORT_TITLE} - {student.name}",
            author=school.name,
            subject=record.date.isoformat(),
        )
        page = _Page(doc, self.rasterizer)
        cursor = LayoutCursor(self.page_size, self.margin)

        self._draw_frame(page)
        self._draw_header(page, cursor.take(HEADER_HEIGHT, "header"), ctx)
        cursor.skip(SECTION_GAP)
        self._draw_student_card(page, cursor.take(CARD_HEIGHT, "student_card"), ctx)
        cursor.skip(SECTION_GAP)
        summary_styles = summary_styles_for(record)
        self._draw_summary(page, cursor.take(TITLE_HEIGHT + SUMMARY_BOX_HEIGHT, "summary"), summary_styles)
        cursor.skip(SECTION_GAP)
        chart = self._draw_chart_panel(page, cursor.take(TITLE_HEIGHT + CHART_PANEL_HEIGHT, "chart"), ctx)
        cursor.skip(SECTION_GAP)
        self._draw_schedule(page, cursor.take(self.schedule_height(len(ctx.rows)), "schedule"), ctx, summary_styles)
        if record.notes.strip():
            cursor.skip(SECTION_GAP)
            self._draw_notes(page, cursor.take(NOTES_HEIGHT, "notes"), record.notes)
        if school.report_general_message.strip():
            cursor.skip(SECTION_GAP)
            self._draw_message(page, cursor.take(MESSAGE_HEIGHT, "message"), school.report_general_message)
        cursor.skip(SECTION_GAP)
        self._draw_footer(page, cursor.take(FOOTER_HEIGHT, "footer"), ctx)

        return ComposedReport(
            pdf=doc.finish(),
            performance=ctx.performance,
            chart=chart,
            summary_styles=summary_styles,
            schedule_rows=ctx.rows,
            sections=list(cursor.sections),
        )

    @staticmethod
    def schedule_height(row_count: int) -> float:
        # An empty day still draws one "no sessions" row.
        return TITLE_HEIGHT + TABLE_HEADER_HEIGHT + max(1, row_count) * TABLE_ROW_HEIGHT

    async def load_assets(self, student: Student, school: SchoolSettings) -> ReportAssets:
        """Fetch images one after another; any of them may come back as None."""
        assets = ReportAssets()
        assets.logo = await self.loader.load(school.logo_url)
        assets.avatar = await self.loader.load(student.avatar)
        assets.stamp = await self.loader.load(school.stamp_url)
        if assets.stamp is None and school.report_link and self.qr_service_url:
            qr_url = self.qr_service_url.format(data=quote(school.report_link, safe=""))
            assets.qr = await self.loader.load(qr_url, hint="image/png")
        return assets

    def _draw_frame(self, page: _Page) -> None:
        width, height = self.page_size
        page.doc.rect(RenderBox(8, 8, width - 16, height - 16), stroke=RULE, line_width=1.5, radius=2)
        page.doc.rect(RenderBox(12, 12, width - 24, height - 24), stroke=HAIRLINE, line_width=0.5, radius=2)

    def _draw_header(self, page: _Page, box: RenderBox, ctx: _ReportContext) -> None:
        school = ctx.school
        org, middle, dates = box.inset(0, 4).columns_rtl((1, 1, 1), gap=8)

        org_rows = org.rows(4)
        page.text(COUNTRY_LINE, org_rows[0], TextStyle(font_size=7.5, bold=True, color=MUTED))
        page.text(school.ministry, org_rows[1], TextStyle(font_size=9, bold=True, color=INK))
        page.text(school.region, org_rows[2], TextStyle(font_size=9, bold=True, color=INK))
        page.text(school.name, org_rows[3], TextStyle(font_size=11, bold=True, color=ACCENT))

        logo_box = RenderBox(middle.center_x - 26, middle.top - 52, 52, 52)
        if ctx.assets.logo is not None:
            page.picture(ctx.assets.logo, logo_box)
        else:
            page.placeholder(logo_box, "الشعار", radius=26)
        title_box = RenderBox(middle.x, middle.y, middle.width, middle.height - 56)
        title = page.text(REPORT_TITLE, title_box, TextStyle(font_size=14, bold=True, color=INK, align=Align.CENTER))
        if title is not None:
            half = min(title.width, title_box.width) / 2
            page.doc.line(middle.center_x - half, middle.y, middle.center_x + half, middle.y, color=ACCENT, line_width=1.5)

        date_rows = dates.rows(4)
        left = TextStyle(align=Align.LEFT)
        page.text("تاريخ التقرير", date_rows[0], left.replace(font_size=7.5, color=MUTED))
        page.text(format_report_date(ctx.record.date), date_rows[1], left.replace(font_size=10, bold=True, color=INK))
        page.text(day_name_for(ctx.record.date), date_rows[2], left.replace(font_size=8, color=MUTED))
        if school.whatsapp_phone:
            page.text(school.whatsapp_phone, date_rows[3], left.replace(font_size=8, color=MUTED))

        page.doc.line(box.x, box.y, box.right, box.y, color=HAIRLINE, line_width=1.5)

    def _draw_student_card(self, page: _Page, box: RenderBox, ctx: _ReportContext) -> None:
        student = ctx.student
        page.doc.rect(box, stroke=RULE, line_width=0.75, radius=5)

        avatar_panel, grid = box.columns_rtl((AVATAR_PANEL_WIDTH, box.width - AVATAR_PANEL_WIDTH))
        page.doc.rect(avatar_panel, fill=PANEL, stroke=RULE, line_width=0.75, radius=5)
        picture_box = RenderBox(avatar_panel.center_x - 20, avatar_panel.top - 48, 40, 40)
        if ctx.assets.avatar is not None:
            page.picture(ctx.assets.avatar, picture_box)
        else:
            page.placeholder(picture_box, "صورة", radius=20)
        page.text(
            f"رقم الملف: {student.file_number}",
            avatar_panel.bottom_slice(20).inset(4, 2),
            TextStyle(font_size=7, bold=True, color=MUTED, align=Align.CENTER),
        )

        cells = [
            ("الاسم الرباعي", student.name, INK),
            ("الصف / الفصل", student.class_grade or "-", INK),
            ("جوال ولي الأمر", student.parent_phone or "-", INK),
            ("حالة التقرير", "معتمد من المدرسة", ACCENT),
        ]
        cell_boxes = [cell for row in grid.rows(2) for cell in row.columns_rtl((1, 1))]
        for (label, value, color), cell in zip(cells, cell_boxes):
            page.doc.rect(cell, stroke=HAIRLINE, line_width=0.5)
            inner = cell.inset(6, 3)
            label_box, value_box = inner.rows(2)
            page.text(label, label_box, TextStyle(font_size=7.5, bold=True, color=MUTED))
            page.text(value, value_box, TextStyle(font_size=10, bold=True, color=color, max_lines=1))

    def _draw_summary(self, page: _Page, box: RenderBox, styles: Dict[Axis, StatusStyle]) -> None:
        page.section_title("ملخص الأداء والمستوى اليومي", box.top_slice(TITLE_HEIGHT))
        strip = box.bottom_slice(SUMMARY_BOX_HEIGHT)
        axes = (Axis.ATTENDANCE,) + ACADEMIC_AXES
        for axis, cell in zip(axes, strip.columns_rtl((1, 1, 1, 1), gap=8)):
            style = styles[axis]
            page.doc.rect(cell, fill=style.background, stroke=style.border, line_width=0.75, radius=4)
            label_box, value_box = cell.inset(4, 3).rows(2)
            page.text(AXIS_LABELS[axis], label_box, TextStyle(font_size=7.5, bold=True, color=MUTED, align=Align.CENTER))
            page.text(style.label, value_box, TextStyle(font_size=10, bold=True, color=style.text, align=Align.CENTER))

    def _draw_chart_panel(self, page: _Page, box: RenderBox, ctx: _ReportContext) -> Optional[RadarChart]:
        performance = ctx.performance
        page.section_title("مؤشر الأداء", box.top_slice(TITLE_HEIGHT))
        panel = box.bottom_slice(CHART_PANEL_HEIGHT)
        page.doc.rect(panel, stroke=HAIRLINE, line_width=0.75, radius=5)
        info, plot = panel.inset(6).columns_rtl((0.45, 0.55), gap=8)

        label_box, grade_box, detail_box = info.rows(3)
        page.text("التقدير العام", label_box, TextStyle(font_size=8, bold=True, color=MUTED), valign="bottom")
        page.text(performance.label, grade_box, TextStyle(font_size=16, bold=True, color=ACCENT))

        if not performance.is_scored:
            attendance = attendance_style(ctx.record.attendance).label
            page.text("لم يتم احتساب المعدل", detail_box, TextStyle(font_size=8, color=FAINT), valign="top")
            page.placeholder(plot, f"لا يوجد تقييم ({attendance})")
            return None

        page.text(
            f"المعدل اليومي: {performance.mean:.0f}%",
            detail_box,
            TextStyle(font_size=9, bold=True, color=INK),
            valign="top",
        )
        categories = [RadarCategory(AXIS_LABELS[axis], performance.scores[axis]) for axis in ACADEMIC_AXES]
        chart = self.chart_renderer.render_radar(categories, plot.width, plot.height)
        page.doc.image(chart.image, plot)
        return chart

    def _draw_schedule(
        self,
        page: _Page,
        box: RenderBox,
        ctx: _ReportContext,
        styles: Dict[Axis, StatusStyle],
    ) -> None:
        page.section_title("كشف المتابعة والحصص الدراسية", box.top_slice(TITLE_HEIGHT))
        table = RenderBox(box.x, box.y, box.width, box.height - TITLE_HEIGHT)
        header = table.top_slice(TABLE_HEADER_HEIGHT)

        page.doc.rect(header, fill=HEADER_FILL, stroke=RULE, line_width=0.5)
        titles = ["م", "المادة", "المعلم"] + [AXIS_LABELS[axis] for axis in (Axis.ATTENDANCE,) + ACADEMIC_AXES] + ["ملاحظات"]
        for title, cell in zip(titles, header.columns_rtl(SCHEDULE_COLUMNS)):
            page.doc.rect(cell, stroke=RULE, line_width=0.5)
            page.text(title, cell.inset(2), TextStyle(font_size=7.5, bold=True, color=INK, align=Align.CENTER))

        body = RenderBox(table.x, table.y, table.width, table.height - TABLE_HEADER_HEIGHT)
        if not ctx.rows:
            page.doc.rect(body, stroke=RULE, line_width=0.5)
            page.text(NO_SESSIONS_TEXT, body.inset(4), TextStyle(font_size=8, color=FAINT, align=Align.CENTER))
            return

        notes = ctx.record.notes or "-"
        status_axes = (Axis.ATTENDANCE,) + ACADEMIC_AXES
        for index, (item, row) in enumerate(zip(ctx.rows, body.rows(len(ctx.rows)))):
            page.doc.rect(row, fill="#ffffff" if index % 2 == 0 else PANEL)
            cells = row.columns_rtl(SCHEDULE_COLUMNS)
            for cell in cells:
                page.doc.rect(cell, stroke=RULE, line_width=0.5)

            page.doc.rect(cells[0], fill=PANEL, stroke=RULE, line_width=0.5)
            page.text(str(item.period), cells[0].inset(2), TextStyle(font_size=8, bold=True, color=INK, align=Align.CENTER))
            page.text(item.subject, cells[1].inset(3, 2), TextStyle(font_size=8, bold=True, color=INK, max_lines=1))
            page.text(item.teacher or "-", cells[2].inset(3, 2), TextStyle(font_size=7.5, color=MUTED, max_lines=1))
            for axis, cell in zip(status_axes, cells[3:7]):
                page.badge(styles[axis], cell.inset(3, 3), font_size=7)
            page.text(notes, cells[7].inset(3, 2), TextStyle(font_size=6.5, color=MUTED, max_lines=1))

    def _draw_notes(self, page: _Page, box: RenderBox, notes: str) -> None:
        page.doc.rect(box, stroke=RULE, line_width=0.75, radius=5)
        inner = box.inset(8, 4)
        page.text(
            "الملاحظات العامة على اليوم الدراسي",
            inner.top_slice(14),
            TextStyle(font_size=8.5, bold=True, color=ACCENT),
        )
        body = RenderBox(inner.x, inner.y, inner.width, inner.height - 14)
        page.text(notes, body, TextStyle(font_size=9, color=INK, max_lines=_lines_that_fit(body.height, 9)), valign="top")

    def _draw_message(self, page: _Page, box: RenderBox, message: str) -> None:
        page.doc.rect(box, fill="#eff6ff", stroke="#bfdbfe", line_width=0.75, radius=5)
        inner = box.inset(8, 4)
        page.text(
            "رسالة الموجه الطلابي / الإدارة",
            inner.top_slice(14),
            TextStyle(font_size=8.5, bold=True, color="#1d4ed8"),
        )
        body = RenderBox(inner.x, inner.y, inner.width, inner.height - 14)
        page.text(
            f"\"{message}\"",
            body,
            TextStyle(font_size=8.5, color="#1e3a8a", align=Align.CENTER, max_lines=_lines_that_fit(body.height, 8.5)),
        )

    def _draw_footer(self, page: _Page, box: RenderBox, ctx: _ReportContext) -> None:
        school = ctx.school
        page.doc.line(box.x, box.top, box.right, box.top, color=HAIRLINE)
        signatures = box.top_slice(SIGNATURE_HEIGHT)
        principal, seal, deputy = signatures.columns_rtl((1, 1, 1), gap=8)
        self._signature(page, principal, "مدير المدرسة")
        self._signature(page, deputy, "وكيل الشؤون التعليمية")

        seal_box = RenderBox(seal.center_x - 24, seal.top - 52, 48, 48)
        image = ctx.assets.stamp or ctx.assets.qr
        if image is not None:
            page.picture(image, seal_box)
        else:
            page.placeholder(seal_box, "مكان الختم")
        page.text("ختم المدرسة", RenderBox(seal.x, seal.y, seal.width, 12), TextStyle(font_size=6.5, color=FAINT, align=Align.CENTER))

        strip = box.bottom_slice(INFO_STRIP_HEIGHT)
        page.doc.rect(strip, fill=HEADER_FILL, stroke=HAIRLINE, line_width=0.5, radius=3)
        slogan, issuer, contact = strip.inset(8, 3).columns_rtl((0.35, 0.3, 0.35), gap=6)
        page.text(school.slogan, slogan, TextStyle(font_size=7.5, bold=True, color=MUTED, max_lines=1))
        page.text(ISSUER_LINE, issuer, TextStyle(font_size=7, color=MUTED, align=Align.CENTER, max_lines=1))
        stamp_line = f"أُنشئ في {format_generated_at(ctx.generated_at)}"
        if school.whatsapp_phone:
            stamp_line = f"Contact: {school.whatsapp_phone}  |  {stamp_line}"
        page.text(stamp_line, contact, TextStyle(font_size=7, color=MUTED, align=Align.LEFT, max_lines=1))

    @staticmethod
    def _signature(page: _Page, box: RenderBox, title: str) -> None:
        page.text(title, box.top_slice(14), TextStyle(font_size=8, bold=True, color=MUTED, align=Align.CENTER))
        line_y = box.y + 18
        page.doc.line(box.center_x - 50, line_y, box.center_x + 50, line_y, color=RULE)
        page.text("التوقيع", RenderBox(box.x, box.y + 4, box.width, 12), TextStyle(font_size=6.5, color=FAINT, align=Align.CENTER))
