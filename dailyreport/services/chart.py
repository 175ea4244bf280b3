"""
Radar (spider) chart rendering for the performance panel.

Geometry uses top-left origin layout units with y growing downwards: the
first spoke points straight up (-90°) and the rest follow clockwise. The
figure is drawn with matplotlib's object-oriented API on the Agg canvas so
concurrent report builds never share pyplot state.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from io import BytesIO
from typing import List, Sequence, Tuple

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server environments
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.colors import to_rgba
from matplotlib.figure import Figure
from matplotlib.patches import Polygon
from PIL import Image

from dailyreport.errors import RasterizationError
from dailyreport.services.text_raster import Align, RasterText, TextRasterizer, TextStyle

RING_COUNT = 4
START_ANGLE = -90.0
LABEL_GAP = 3.0
MIN_RADIUS = 10.0

GRID_COLOR = "#e5e7eb"
SERIES_COLOR = "#0d9488"
SERIES_OPACITY = 0.5
LABEL_STYLE = TextStyle(font_size=7, bold=True, color="#6b7280", align=Align.CENTER)

Point = Tuple[float, float]


@dataclass(frozen=True)
class RadarCategory:
    label: str
    value: float


@dataclass
class RadarChart:
    image: Image.Image
    width: float
    height: float
    center: Point
    radius: float
    points: List[Point]


def spoke_angles(count: int) -> List[float]:
    """Spoke directions in degrees, starting at the top and going clockwise."""
    return [START_ANGLE + index * 360.0 / count for index in range(count)]


def radar_points(values: Sequence[float], center: Point, radius: float) -> List[Point]:
    """Map 0-100 values onto their spokes; out-of-range values are clamped."""
    cx, cy = center
    points = []
    for value, angle in zip(values, spoke_angles(len(values))):
        reach = radius * min(max(float(value), 0.0), 100.0) / 100.0
        theta = math.radians(angle)
        points.append((cx + reach * math.cos(theta), cy + reach * math.sin(theta)))
    return points


class ChartRenderer:
    def __init__(self, rasterizer: TextRasterizer):
        self.rasterizer = rasterizer
        self.scale = rasterizer.scale

    def render_radar(
        self,
        categories: Sequence[RadarCategory],
        width: float,
        height: float,
    ) -> RadarChart:
        if len(categories) < 3:
            raise ValueError("A radar chart needs at least three categories.")

        labels = [self.rasterizer.rasterize(category.label, LABEL_STYLE) for category in categories]
        center = (width / 2, height / 2)
        widest = max(label.width for label in labels)
        tallest = max(label.height for label in labels)
        radius = max(
            MIN_RADIUS,
            min(center[0] - LABEL_GAP - widest, center[1] - LABEL_GAP - tallest),
        )
        points = radar_points([category.value for category in categories], center, radius)

        try:
            image = self._draw(len(categories), points, center, radius, width, height)
        except (ValueError, RuntimeError, OSError) as exc:
            raise RasterizationError(f"Could not render radar chart: {exc}") from exc

        for label, angle in zip(labels, spoke_angles(len(categories))):
            self._place_label(image, label, center, radius, angle)

        return RadarChart(
            image=image,
            width=width,
            height=height,
            center=center,
            radius=radius,
            points=points,
        )

    def _draw(
        self,
        count: int,
        points: List[Point],
        center: Point,
        radius: float,
        width: float,
        height: float,
    ) -> Image.Image:
        # 72 dpi per scale step keeps one layout unit equal to one point.
        dpi = 72 * self.scale
        fig = Figure(figsize=(width / 72, height / 72), dpi=dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_axes((0, 0, 1, 1))
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.axis("off")

        for ring in range(1, RING_COUNT + 1):
            outline = radar_points([100.0 * ring / RING_COUNT] * count, center, radius)
            ax.add_patch(Polygon(outline, closed=True, fill=False, edgecolor=GRID_COLOR, linewidth=0.6))
        for x, y in radar_points([100.0] * count, center, radius):
            ax.plot([center[0], x], [center[1], y], color=GRID_COLOR, linewidth=0.6)

        ax.add_patch(
            Polygon(
                points,
                closed=True,
                facecolor=to_rgba(SERIES_COLOR, SERIES_OPACITY),
                edgecolor=SERIES_COLOR,
                linewidth=1.2,
            )
        )

        buffer = BytesIO()
        fig.savefig(buffer, format="png", dpi=dpi, transparent=True)
        buffer.seek(0)
        with Image.open(buffer) as rendered:
            return rendered.convert("RGBA")

    def _place_label(
        self,
        image: Image.Image,
        label: RasterText,
        center: Point,
        radius: float,
        angle: float,
    ) -> None:
        theta = math.radians(angle)
        # Push the label out until its box clears the outer ring.
        reach = radius + LABEL_GAP + abs(math.cos(theta)) * label.width / 2 + abs(math.sin(theta)) * label.height / 2
        x = center[0] + reach * math.cos(theta) - label.width / 2
        y = center[1] + reach * math.sin(theta) - label.height / 2
        left = min(max(0, round(x * self.scale)), max(0, image.width - label.image.width))
        top = min(max(0, round(y * self.scale)), max(0, image.height - label.image.height))
        image.alpha_composite(label.image, dest=(left, top))
