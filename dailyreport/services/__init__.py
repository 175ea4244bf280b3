"""Service layer for the daily report generator."""
from .assembler import DocumentAssembler
from .chart import ChartRenderer, RadarCategory, RadarChart
from .composer import ComposedReport, ReportComposer
from .image_loader import ImageLoader, LoadedImage
from .messaging import build_chat_link, build_parent_message, clean_phone
from .report import BulkOutcome, ReportService
from .scoring import PerformanceSummary, PerformanceTier, evaluate
from .status_styles import Axis, StatusStyle, resolve_style
from .text_raster import Align, RasterText, TextRasterizer, TextStyle

__all__ = [
	"DocumentAssembler", "ChartRenderer", "RadarCategory", "RadarChart",
	"ComposedReport", "ReportComposer", "ImageLoader", "LoadedImage",
	"build_chat_link", "build_parent_message", "clean_phone",
	"BulkOutcome", "ReportService",
	"PerformanceSummary", "PerformanceTier", "evaluate",
	"Axis", "StatusStyle", "resolve_style",
	"Align", "RasterText", "TextRasterizer", "TextStyle",
]
