"""
Page geometry for the report composer.

Boxes use PDF coordinates (origin bottom-left, y up). The cursor starts at
the top margin and only ever moves down the page.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from reportlab.lib.pagesizes import A4

from dailyreport.errors import LayoutOverflowError

PAGE_WIDTH, PAGE_HEIGHT = A4
DEFAULT_MARGIN = 28.0
_EPSILON = 1e-6


@dataclass(frozen=True)
class RenderBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    def inset(self, dx: float, dy: float | None = None) -> "RenderBox":
        dy = dx if dy is None else dy
        return RenderBox(self.x + dx, self.y + dy, max(0.0, self.width - 2 * dx), max(0.0, self.height - 2 * dy))

    def top_slice(self, height: float) -> "RenderBox":
        return RenderBox(self.x, self.top - height, self.width, height)

    def bottom_slice(self, height: float) -> "RenderBox":
        return RenderBox(self.x, self.y, self.width, height)

    def columns_rtl(self, fractions: Sequence[float], gap: float = 0.0) -> List["RenderBox"]:
        """Split into columns laid out right-to-left; the first fraction is rightmost."""
        total = sum(fractions)
        usable = self.width - gap * (len(fractions) - 1)
        boxes = []
        right = self.right
        for fraction in fractions:
            width = usable * fraction / total
            boxes.append(RenderBox(right - width, self.y, width, self.height))
            right -= width + gap
        return boxes

    def rows(self, count: int, gap: float = 0.0) -> List["RenderBox"]:
        """Split into equal rows, top row first."""
        height = (self.height - gap * (count - 1)) / count
        return [
            RenderBox(self.x, self.top - (index + 1) * height - index * gap, self.width, height)
            for index in range(count)
        ]


class LayoutCursor:
    """Hands out full-width bands from the top of the content area downwards."""

    def __init__(
        self,
        page_size: Tuple[float, float] = (PAGE_WIDTH, PAGE_HEIGHT),
        margin: float = DEFAULT_MARGIN,
    ):
        width, height = page_size
        self.left = margin
        self.width = width - 2 * margin
        self.top = height - margin
        self.bottom = margin
        self.y = self.top
        self.sections: List[Tuple[str, RenderBox]] = []

    @property
    def remaining(self) -> float:
        return self.y - self.bottom

    def take(self, height: float, name: str) -> RenderBox:
        """Reserve ``height`` below the cursor for section ``name``."""
        if height < 0:
            raise LayoutOverflowError(f"Section '{name}' asked for a negative height.")
        if height > self.remaining + _EPSILON:
            raise LayoutOverflowError(
                f"Section '{name}' needs {height:.1f}pt but only {self.remaining:.1f}pt remain."
            )
        box = RenderBox(self.left, self.y - height, self.width, height)
        self.y -= height
        self.sections.append((name, box))
        return box

    def skip(self, height: float) -> None:
        if height > self.remaining + _EPSILON:
            raise LayoutOverflowError(f"Gap of {height:.1f}pt does not fit on the page.")
        self.y -= height
