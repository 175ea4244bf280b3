"""Reusable FastAPI dependencies."""
from fastapi import Depends

from dailyreport.config import Settings, get_settings as _get_settings
from dailyreport.services.report import ReportService


def get_settings() -> Settings:
    """Return application settings (cached)."""
    return _get_settings()


def get_report_service(settings: Settings = Depends(get_settings)) -> ReportService:
    """A report service bound to the current settings."""
    return ReportService(settings)
