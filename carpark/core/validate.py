# carpark/core/validate.py
"""
Validate a candidate stall rectangle against the car park boundary.
A stall is valid when all four corners are inside the polygon, no boundary
segment touches it, and no entrance/exit segment touches its clearance
rectangle. Only a boolean is returned; rejection reasons are not kept.
See: docs/ALGORITHM.md S4.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import shapely

from carpark.core.boundary import BoundarySegment
from carpark.core.geometry import (
    Rect,
    ScanlinePolygon,
    expand_top_left,
    rect_corners,
    rect_to_polygon,
)
from carpark.core.types import EdgeType


class StallValidator:
    """
    Checks candidate rectangles against one boundary snapshot.
    Segment geometries are built once; each check is a vectorized shapely call.
    """

    def __init__(
        self,
        polygon: ScanlinePolygon,
        segments: Sequence[BoundarySegment],
        clearance_px: float,
    ) -> None:
        self.polygon = polygon
        self.clearance_px = clearance_px
        self._lines = np.array([s.geometry() for s in segments], dtype=object)
        is_access = np.array([s.edge_type != EdgeType.BORDER for s in segments], dtype=bool)
        self._access_lines = self._lines[is_access] if len(self._lines) else self._lines

    def _touches(self, lines: np.ndarray, rect: Rect) -> bool:
        _, _, w, h = rect
        if len(lines) == 0 or w <= 0 or h <= 0:
            return False
        return bool(shapely.intersects(lines, rect_to_polygon(rect)).any())

    def is_valid(self, rect: Rect) -> bool:
        # partial overlap with the polygon is a rejection, not a clip
        if not self.polygon.contains_all(rect_corners(rect)):
            return False
        if self._touches(self._lines, rect):
            return False
        clearance = expand_top_left(rect, self.clearance_px)
        return not self._touches(self._access_lines, clearance)

    __call__ = is_valid
