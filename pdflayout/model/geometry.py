"""Pointer to page coordinate mapping for rendered PDF pages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Mapping

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Point:
    x: float
    y: float


@dataclass(slots=True, frozen=True)
class SurfaceRect:
    """Bounding rectangle of one rendered page, in canvas pixels."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, point: Point) -> bool:
        if self.is_empty:
            return False
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom


class CoordinateSpace(str, Enum):
    PERCENT = "percent"
    PIXEL = "pixel"

    @property
    def upper_bound_is_page(self) -> bool:
        return self is CoordinateSpace.PERCENT


def to_relative(point: Point, rect: SurfaceRect) -> tuple[float, float]:
    if rect.is_empty:
        raise ValueError(f"Cannot map onto an empty page surface: {rect}")
    x_pct = (point.x - rect.left) / rect.width * 100.0
    y_pct = (point.y - rect.top) / rect.height * 100.0
    return x_pct, y_pct


def to_absolute(x_pct: float, y_pct: float, rect: SurfaceRect) -> Point:
    return Point(
        rect.left + x_pct / 100.0 * rect.width,
        rect.top + y_pct / 100.0 * rect.height,
    )


def resolve_page(
    point: Point,
    page_rects: Mapping[int, SurfaceRect],
) -> tuple[int, SurfaceRect] | None:
    """Return the page whose surface contains ``point``.

    Pages are checked in ascending page order so a point sitting exactly on a
    shared edge belongs to the earlier page.
    """
    for page_index in sorted(page_rects):
        rect = page_rects[page_index]
        if rect.contains(point):
            return page_index, rect
    logger.debug("No page surface under point (%.1f, %.1f)", point.x, point.y)
    return None


@dataclass(slots=True, frozen=True)
class GeometryMapper:
    """Maps canvas pixels to page coordinates in one coordinate space.

    In the percent space positions survive zoom changes. The pixel space keeps
    page-local offsets in reference-zoom pixels; ``scale`` is the ratio of the
    current render zoom to the reference zoom.
    """

    space: CoordinateSpace = CoordinateSpace.PERCENT
    clamp: bool = False

    def to_page(self, point: Point, rect: SurfaceRect, scale: float = 1.0) -> tuple[float, float]:
        if self.space is CoordinateSpace.PERCENT:
            x, y = to_relative(point, rect)
        else:
            if rect.is_empty:
                raise ValueError(f"Cannot map onto an empty page surface: {rect}")
            x = (point.x - rect.left) / scale
            y = (point.y - rect.top) / scale
        if self.clamp:
            x, y = self.clamp_to_page(x, y, rect, scale)
        return x, y

    def to_surface(self, x: float, y: float, rect: SurfaceRect, scale: float = 1.0) -> Point:
        if self.space is CoordinateSpace.PERCENT:
            return to_absolute(x, y, rect)
        return Point(rect.left + x * scale, rect.top + y * scale)

    def clamp_to_page(
        self,
        x: float,
        y: float,
        rect: SurfaceRect,
        scale: float = 1.0,
    ) -> tuple[float, float]:
        if self.space.upper_bound_is_page:
            max_x, max_y = 100.0, 100.0
        else:
            max_x, max_y = rect.width / scale, rect.height / scale
        return max(0.0, min(x, max_x)), max(0.0, min(y, max_y))
