"""
PDF page assembly.

A thin sink over a reportlab canvas: rectangles, lines and embedded bitmaps
go in, PDF bytes come out. The canvas is created with ``invariant=1`` so
identical inputs serialize to identical bytes.
"""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional, Sequence, Tuple

from PIL import Image
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from dailyreport.errors import SerializationError
from dailyreport.services.layout import RenderBox

logger = logging.getLogger(__name__)


def _color(value: Optional[str]):
    return colors.HexColor(value) if value else None


class DocumentAssembler:
    """Owns one single-page PDF canvas for one report build."""

    def __init__(self, page_size: Tuple[float, float] = A4):
        self.page_size = page_size
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=page_size, invariant=1)
        self._finished = False

    def set_metadata(self, title: str, author: str = "", subject: str = "") -> None:
        self._canvas.setTitle(title)
        self._canvas.setAuthor(author)
        self._canvas.setSubject(subject)

    def rect(
        self,
        box: RenderBox,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        line_width: float = 0.75,
        radius: float = 0.0,
        dash: Optional[Sequence[float]] = None,
    ) -> None:
        c = self._canvas
        c.saveState()
        if fill:
            c.setFillColor(_color(fill))
        if stroke:
            c.setStrokeColor(_color(stroke))
            c.setLineWidth(line_width)
        if dash:
            c.setDash(list(dash))
        if radius:
            c.roundRect(box.x, box.y, box.width, box.height, radius, stroke=int(bool(stroke)), fill=int(bool(fill)))
        else:
            c.rect(box.x, box.y, box.width, box.height, stroke=int(bool(stroke)), fill=int(bool(fill)))
        c.restoreState()

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: str = "#d1d5db",
        line_width: float = 0.75,
    ) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(_color(color))
        c.setLineWidth(line_width)
        c.line(x1, y1, x2, y2)
        c.restoreState()

    def image(self, image: Image.Image, box: RenderBox) -> None:
        """Draw ``image`` stretched to ``box``; alpha is kept as a soft mask."""
        self._canvas.drawImage(
            ImageReader(image),
            box.x,
            box.y,
            width=box.width,
            height=box.height,
            mask="auto",
        )

    def finish(self) -> bytes:
        """Close the page and return the serialized document."""
        if self._finished:
            raise SerializationError("Document has already been serialized.")
        try:
            self._canvas.showPage()
            self._canvas.save()
        except Exception as exc:
            logger.error("PDF serialization failed: %s", exc)
            raise SerializationError(f"Could not serialize report: {exc}") from exc
        self._finished = True
        return self._buffer.getvalue()
