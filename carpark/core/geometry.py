# carpark/core/geometry.py
"""
Geometry helpers in pixel units: pixel/metre scale, grid snapping,
scan-line polygon containment, segment/rectangle predicates.
See: docs/ALGORITHM.md S1–S4.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from shapely.geometry import LineString, Point, Polygon, box
from shapely.geometry.base import BaseGeometry

from carpark.core.config import GRID_SNAP_PX

PX_PER_METRE: float = 25.0
"""5px grid squares of 0.2m: the only pixel/metre conversion in the package."""

XY = tuple[float, float]
Rect = tuple[float, float, float, float]  # (x, y, width, height), y grows downwards


def metres_to_px(metres: float) -> float:
    return metres * PX_PER_METRE


def px_to_metres(px: float) -> float:
    return px / PX_PER_METRE


def snap_to_grid(value: float, step: int = GRID_SNAP_PX) -> float:
    """Truncate toward zero to a multiple of step (12.7 -> 10, -7 -> -5)."""
    return float(math.trunc(value / step) * step)


def snap_point(point: Sequence[float], step: int = GRID_SNAP_PX) -> XY:
    return (snap_to_grid(float(point[0]), step), snap_to_grid(float(point[1]), step))


class ScanlinePolygon:
    """
    Closed polygon over integer vertices with even-odd, half-open insideness:
    a point on a left/top edge may be inside, one on a right/bottom edge never is.
    Mirrors scan-line polygon fill so results do not depend on edge touching rules.
    """

    def __init__(self, vertices: Iterable[Sequence[float]]) -> None:
        self.xs = [int(v[0]) for v in vertices]
        self.ys = [int(v[1]) for v in vertices]
        n = len(self.xs)
        # (x_last, y_last, x_cur, y_cur); horizontal edges never cross a scan line
        self._edges = [
            (self.xs[i - 1], self.ys[i - 1], self.xs[i], self.ys[i])
            for i in range(n)
            if self.ys[i - 1] != self.ys[i]
        ]

    def __len__(self) -> int:
        return len(self.xs)

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        """Integer bounding box (x, y, width, height); zeros when empty."""
        if not self.xs:
            return (0, 0, 0, 0)
        minx, miny = min(self.xs), min(self.ys)
        return (minx, miny, max(self.xs) - minx, max(self.ys) - miny)

    def to_shapely(self) -> Polygon:
        if len(self.xs) < 3:
            return Polygon()
        return Polygon(list(zip(self.xs, self.ys)))

    def contains(self, x: float, y: float) -> bool:
        if len(self.xs) <= 2:
            return False
        bx, by, bw, bh = self.bounds
        if not (bx <= x < bx + bw and by <= y < by + bh):
            return False
        hits = 0
        for lastx, lasty, curx, cury in self._edges:
            if curx < lastx:
                if x >= lastx:
                    continue
                leftx = curx
            else:
                if x >= curx:
                    continue
                leftx = lastx
            if cury < lasty:
                if y < cury or y >= lasty:
                    continue
                if x < leftx:
                    hits += 1
                    continue
                test1 = x - curx
                test2 = y - cury
            else:
                if y < lasty or y >= cury:
                    continue
                if x < leftx:
                    hits += 1
                    continue
                test1 = x - lastx
                test2 = y - lasty
            if test1 < (test2 / (lasty - cury) * (lastx - curx)):
                hits += 1
        return (hits & 1) != 0

    def contains_all(self, points: Iterable[Sequence[float]]) -> bool:
        return all(self.contains(p[0], p[1]) for p in points)


def rect_corners(rect: Rect) -> list[XY]:
    """Corners A (top-left), B (top-right), C (bottom-left), D (bottom-right)."""
    x, y, w, h = rect
    return [(x, y), (x + w, y), (x, y + h), (x + w, y + h)]


def rect_to_polygon(rect: Rect) -> Polygon:
    x, y, w, h = rect
    return box(x, y, x + w, y + h)


def expand_top_left(rect: Rect, margin: float) -> Rect:
    """
    Move the top-left corner out by margin, keep bottom/right where they are.
    Used for entrance/exit clearance. See: docs/ALGORITHM.md S4.
    """
    x, y, w, h = rect
    return (x - margin, y - margin, w + margin, h + margin)


def segment_geometry(start: Sequence[float], end: Sequence[float]) -> BaseGeometry:
    """LineString for the segment; a Point when both ends coincide."""
    if tuple(start) == tuple(end):
        return Point(start)
    return LineString([tuple(start), tuple(end)])


def geometry_intersects_rect(geom: BaseGeometry, rect: Rect) -> bool:
    """Closed-set test (touching counts). Rectangles without area intersect nothing."""
    _, _, w, h = rect
    if w <= 0 or h <= 0:
        return False
    return rect_to_polygon(rect).intersects(geom)


def segment_intersects_rect(start: Sequence[float], end: Sequence[float], rect: Rect) -> bool:
    return geometry_intersects_rect(segment_geometry(start, end), rect)


def segments_intersect(
    a_start: Sequence[float],
    a_end: Sequence[float],
    b_start: Sequence[float],
    b_end: Sequence[float],
) -> bool:
    """True if the two closed segments share any point (touching and collinear overlap included)."""
    return segment_geometry(a_start, a_end).intersects(segment_geometry(b_start, b_end))


def point_segment_distance(point: Sequence[float], start: Sequence[float], end: Sequence[float]) -> float:
    """Minimum distance from point to the segment, clamped to the segment's extent."""
    return float(segment_geometry(start, end).distance(Point(point)))


def segment_length(start: Sequence[float], end: Sequence[float]) -> float:
    return math.hypot(end[0] - start[0], end[1] - start[1])


def point_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])
