"""Pytest configuration and fixtures."""
import base64
import io

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from dailyreport.app import app
from dailyreport.config import Settings
from dailyreport.dependencies import get_report_service
from dailyreport.services.image_loader import ImageLoader
from dailyreport.services.composer import ReportComposer
from dailyreport.services.report import ReportService
from dailyreport.services.text_raster import TextRasterizer

REPORT_DAY = "2026-10-18"  # a Sunday
QR_URL = "https://qr.test/create?size=120x120&data={data}"


def _encode(color, fmt: str, mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, (24, 16), color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """A small PNG with an alpha channel."""
    return _encode((13, 148, 136, 200), "PNG", mode="RGBA")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _encode((200, 30, 30), "JPEG")


@pytest.fixture
def png_data_uri(png_bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def offline_transport() -> httpx.MockTransport:
    """Every remote fetch answers 404."""
    return httpx.MockTransport(lambda request: httpx.Response(404))


@pytest.fixture
def rasterizer() -> TextRasterizer:
    return TextRasterizer(scale=2)


@pytest.fixture
def composer(rasterizer, tmp_path, offline_transport) -> ReportComposer:
    loader = ImageLoader(timeout=1.0, assets_dir=tmp_path, transport=offline_transport)
    return ReportComposer(rasterizer, loader, qr_service_url=QR_URL)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        ASSETS_DIR=tmp_path,
        FONT_PATH=tmp_path / "fonts" / "missing-regular.ttf",
        BOLD_FONT_PATH=tmp_path / "fonts" / "missing-bold.ttf",
        RASTER_SCALE=2,
        IMAGE_FETCH_TIMEOUT_SECONDS=1.0,
        QR_SERVICE_URL=QR_URL,
    )


@pytest.fixture
def report_service(settings, offline_transport) -> ReportService:
    return ReportService(settings, transport=offline_transport)


@pytest.fixture
def client(report_service):
    """Create test client with network-free report generation."""
    app.dependency_overrides[get_report_service] = lambda: report_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def student_data() -> dict:
    return {
        "id": "st-1",
        "name": "محمد عبدالله أحمد الزهراني",
        "classGrade": "الصف الثالث متوسط / 2",
        "parentPhone": "+966 50 123 4567",
        "studentNumber": "1024",
    }


@pytest.fixture
def record_data() -> dict:
    return {
        "id": "rec-1",
        "studentId": "st-1",
        "date": REPORT_DAY,
        "attendance": "present",
        "participation": "excellent",
        "homework": "excellent",
        "behavior": "excellent",
        "notes": "",
    }


@pytest.fixture
def absent_record_data(record_data) -> dict:
    return {**record_data, "attendance": "absent", "participation": "none", "homework": "none", "behavior": "none"}


@pytest.fixture
def school_data() -> dict:
    return {
        "name": "متوسطة الأمل",
        "ministry": "وزارة التعليم",
        "region": "الإدارة العامة للتعليم بمنطقة الرياض",
        "slogan": "نحو تعليم متميز",
        "whatsappPhone": "+966 11 000 1234",
    }


@pytest.fixture
def schedule_data() -> list:
    return [
        {"day": "الأحد", "period": 3, "subject": "رياضيات", "teacher": "أ. خالد"},
        {"day": "الأحد", "period": 1, "subject": "لغتي", "teacher": "أ. سالم"},
        {"day": "Sunday", "period": 2, "subject": "علوم", "teacher": "أ. فهد"},
        {"day": "الاثنين", "period": 1, "subject": "إنجليزي", "teacher": "أ. ماجد"},
    ]
