"""
Text rasterization service.

The PDF canvas cannot shape Arabic text, so every label on the report is
measured, wrapped and drawn into a bitmap with Pillow, then embedded as an
image. This module is the only place that knows about fonts; the composer
deals in ``text + style -> bitmap + size``.
"""
from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont, features

from dailyreport.errors import RasterizationError

logger = logging.getLogger(__name__)

LINE_HEIGHT_FACTOR = 1.6
PADDING = 2.0
ELLIPSIS = "…"


class Align(str, Enum):
    RIGHT = "right"
    CENTER = "center"
    LEFT = "left"


_ANCHORS = {Align.RIGHT: "rm", Align.CENTER: "mm", Align.LEFT: "lm"}


@dataclass(frozen=True)
class TextStyle:
    font_size: float = 10.0
    bold: bool = False
    color: str = "#1f2937"
    align: Align = Align.RIGHT
    max_width: Optional[float] = None
    max_lines: Optional[int] = None

    def replace(self, **changes) -> "TextStyle":
        return dataclasses.replace(self, **changes)


@dataclass
class RasterText:
    """A rendered text block. ``width``/``height`` are layout units (points)."""

    image: Image.Image
    width: float
    height: float
    lines: List[str]


def _layout_engine() -> ImageFont.Layout:
    # Raqm gives bidi reordering and Arabic shaping; BASIC draws glyphs unjoined.
    if features.check_feature("raqm"):
        return ImageFont.Layout.RAQM
    return ImageFont.Layout.BASIC


class TextRasterizer:
    """Wraps and renders text at ``scale``× resolution for crisp embedding."""

    def __init__(
        self,
        font_path: Optional[Path] = None,
        bold_font_path: Optional[Path] = None,
        scale: int = 3,
    ):
        self.font_path = Path(font_path) if font_path else None
        self.bold_font_path = Path(bold_font_path) if bold_font_path else None
        self.scale = max(1, int(scale))
        self._fonts: Dict[Tuple[bool, int], Tuple[ImageFont.FreeTypeFont, int]] = {}

    def _font(self, font_size: float, bold: bool) -> Tuple[ImageFont.FreeTypeFont, int]:
        """Return the font for a size and the stroke width used to fake bold."""
        pixels = max(1, round(font_size * self.scale))
        key = (bold, pixels)
        if key in self._fonts:
            return self._fonts[key]

        stroke = 0
        path = self.bold_font_path if bold else self.font_path
        if bold and not (path and path.is_file()):
            path = self.font_path
            stroke = max(1, pixels // 24)
        try:
            if path and path.is_file():
                font = ImageFont.truetype(str(path), pixels, layout_engine=_layout_engine())
            else:
                if path:
                    logger.warning("Font file %s not found, using Pillow's default font", path)
                font = ImageFont.load_default(size=pixels)
        except (OSError, ValueError) as exc:
            raise RasterizationError(f"Could not load font {path}: {exc}") from exc

        self._fonts[key] = (font, stroke)
        return font, stroke

    def measure(self, text: str, font_size: float, bold: bool = False) -> float:
        """Advance width of ``text`` in layout units."""
        if not text:
            return 0.0
        font, stroke = self._font(font_size, bold)
        try:
            return (font.getlength(text) + 2 * stroke) / self.scale
        except (OSError, ValueError) as exc:
            raise RasterizationError(f"Could not measure text: {exc}") from exc

    def wrap(
        self,
        text: str,
        font_size: float,
        bold: bool = False,
        max_width: Optional[float] = None,
    ) -> List[str]:
        """
        Greedy word wrap.

        Words are appended to the current line while the candidate line fits
        ``max_width``. A word that is wider than ``max_width`` on its own is
        kept whole on its own line.
        """
        lines: List[str] = []
        for paragraph in (text or "").splitlines() or [""]:
            words = paragraph.split()
            if not words:
                lines.append("")
                continue
            current = words[0]
            for word in words[1:]:
                candidate = f"{current} {word}"
                if max_width is None or self.measure(candidate, font_size, bold) <= max_width:
                    current = candidate
                else:
                    lines.append(current)
                    current = word
            lines.append(current)
        return lines or [""]

    def _truncate(self, lines: List[str], style: TextStyle) -> List[str]:
        if not style.max_lines or len(lines) <= style.max_lines:
            return lines
        kept = lines[: style.max_lines]
        last = kept[-1]
        while " " in last and style.max_width is not None and (
            self.measure(f"{last} {ELLIPSIS}", style.font_size, style.bold) > style.max_width
        ):
            last = last.rsplit(" ", 1)[0]
        kept[-1] = f"{last} {ELLIPSIS}" if last else ELLIPSIS
        return kept

    def rasterize(self, text: str, style: TextStyle = TextStyle()) -> RasterText:
        """Render ``text`` into a transparent RGBA bitmap sized to its lines."""
        lines = self._truncate(
            self.wrap(text, style.font_size, style.bold, style.max_width), style
        )
        font, stroke = self._font(style.font_size, style.bold)
        line_height = style.font_size * LINE_HEIGHT_FACTOR
        content_width = max((self.measure(line, style.font_size, style.bold) for line in lines), default=0.0)
        width = content_width + 2 * PADDING
        height = len(lines) * line_height + 2 * PADDING

        align = Align(style.align)
        if align is Align.RIGHT:
            x = (width - PADDING) * self.scale
        elif align is Align.CENTER:
            x = width / 2 * self.scale
        else:
            x = PADDING * self.scale

        size = (max(1, math.ceil(width * self.scale)), max(1, math.ceil(height * self.scale)))
        try:
            color = ImageColor.getrgb(style.color)[:3]
            mask = Image.new("L", size, 0)
            draw = ImageDraw.Draw(mask)
            for index, line in enumerate(lines):
                if not line:
                    continue
                y = (PADDING + index * line_height + line_height / 2) * self.scale
                draw.text(
                    (x, y),
                    line,
                    font=font,
                    fill=255,
                    anchor=_ANCHORS[align],
                    stroke_width=stroke,
                    stroke_fill=255,
                )
            image = Image.new("RGBA", size, color + (255,))
            image.putalpha(mask)
        except (OSError, ValueError, MemoryError) as exc:
            raise RasterizationError(f"Could not rasterize text: {exc}") from exc

        return RasterText(image=image, width=width, height=height, lines=lines)
