# carpark/core/drawing.py
"""
Headless state machine for drawing a car park border point by point.
Tracks the in-progress "rubber" line, classifies it against the committed
border (collision / closeable), closes the ring and re-tags segments as
entrances/exits subject to the minimum entry width.
Input events (mouse, keys) are the caller's; this holds only the state.
See: docs/ALGORITHM.md S5.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from carpark.core.boundary import Boundary, BoundarySegment, validate_ready
from carpark.core.config import (
    CLOSE_TOLERANCE_PX,
    ENTRANCE_EXIT_WIDTH_FACTOR,
    SELECT_TOLERANCE_PX,
)
from carpark.core.geometry import (
    XY,
    point_distance,
    point_segment_distance,
    segments_intersect,
    snap_point,
)
from carpark.core.types import Dimensions, EdgeType

logger = logging.getLogger(__name__)


class DrawStatus(Enum):
    NO_COLLISION = "no_collision"
    COLLISION = "collision"
    CLOSEABLE = "closeable"


class TagOutcome(Enum):
    TAGGED = "tagged"
    TOO_NARROW = "too_narrow"
    NO_SEGMENT = "no_segment"
    NOT_CLOSED = "not_closed"


class BoundaryDraft:
    """
    Border being drawn. While open, click() adds points; once the rubber line
    returns to the first point the draft is closed and tag_nearest() re-tags
    segments. snapshot() hands an independent Boundary to the engine.
    """

    def __init__(self) -> None:
        self.boundary = Boundary()
        self.rubber: BoundarySegment | None = None
        self.anchor: XY | None = None
        self.closed = False

    @property
    def segments(self) -> tuple[BoundarySegment, ...]:
        return self.boundary.snapshot()

    def move_rubber(self, point: Sequence[float]) -> DrawStatus | None:
        """Stretch the rubber line to point; tag it COLLISION if it may not be committed."""
        if self.closed or self.anchor is None:
            return None
        self.rubber = BoundarySegment(self.anchor, tuple(point))
        status = self.classify()
        edge_type = EdgeType.COLLISION if status == DrawStatus.COLLISION else EdgeType.BORDER
        self.rubber = self.rubber.with_edge_type(edge_type)
        return status

    def classify(self) -> DrawStatus:
        """
        Rubber line vs the committed border. The first and last segments are
        special: the last shares the rubber start, the first may be closed onto.
        """
        segs = self.boundary.snapshot()
        if self.rubber is None or not segs:
            return DrawStatus.NO_COLLISION
        start, end = self.rubber.start, self.rubber.end
        status = DrawStatus.NO_COLLISION
        for seg in segs[1:-1]:
            if segments_intersect(start, end, seg.start, seg.end):
                status = DrawStatus.COLLISION
        last = segs[-1]
        if point_segment_distance(end, last.start, last.end) == 0.0:
            status = DrawStatus.COLLISION
        if status == DrawStatus.NO_COLLISION and len(segs) > 1:
            first = segs[0]
            if segments_intersect(start, end, first.start, first.end):
                status = DrawStatus.COLLISION
            if point_distance(end, first.start) < CLOSE_TOLERANCE_PX:
                status = DrawStatus.CLOSEABLE
        return status

    def click(self, point: Sequence[float]) -> DrawStatus | None:
        """
        Commit the rubber line at point if it does not collide, starting a new
        one there; close the border if the line ends on the first point.
        Returns the status the click was judged by (None once closed).
        """
        if self.closed:
            return None
        if self.anchor is not None:
            self.move_rubber(point)
        status = self.classify()
        if status == DrawStatus.NO_COLLISION:
            if self.rubber is not None:
                self.boundary.append_segment(self.rubber.with_edge_type(EdgeType.BORDER))
            self.anchor = snap_point(point)
            self.rubber = BoundarySegment(self.anchor, self.anchor)
        elif status == DrawStatus.CLOSEABLE:
            self.boundary.append_segment(self.rubber.with_edge_type(EdgeType.BORDER))
            self.rubber = None
            self.closed = True
            logger.debug("Border closed with %d segments", len(self.boundary))
        return status

    def tag_nearest(
        self,
        point: Sequence[float],
        edge_type: EdgeType,
        dimensions: Dimensions,
    ) -> TagOutcome:
        """
        Re-tag the first segment within SELECT_TOLERANCE_PX of point.
        Entrances and exits must be at least the minimum entry width long,
        combined entrance/exits twice that.
        """
        if not self.closed:
            return TagOutcome.NOT_CLOSED
        edge_type = EdgeType(edge_type)
        for i, seg in enumerate(self.boundary):
            if point_segment_distance(point, seg.start, seg.end) > SELECT_TOLERANCE_PX:
                continue
            required_m = 0.0
            if edge_type in (EdgeType.ENTRANCE, EdgeType.EXIT):
                required_m = dimensions.entry_width_min
            elif edge_type == EdgeType.ENTRANCE_EXIT:
                required_m = dimensions.entry_width_min * ENTRANCE_EXIT_WIDTH_FACTOR
            if required_m > seg.length_m:
                logger.debug("Segment %d too short for %s: %.2fm < %.2fm", i, edge_type.name, seg.length_m, required_m)
                return TagOutcome.TOO_NARROW
            self.boundary.set_edge_type(i, edge_type)
            return TagOutcome.TAGGED
        return TagOutcome.NO_SEGMENT

    def undo(self) -> None:
        """Remove the last committed segment, re-open the border and re-anchor at its end."""
        if not len(self.boundary):
            return
        if len(self.boundary) > 1:
            self.boundary.remove_last()
            self.anchor = self.boundary[-1].end
            self.rubber = BoundarySegment(self.anchor, self.anchor)
            self.closed = False
        else:
            self.clear()

    def clear(self) -> None:
        self.boundary.clear()
        self.rubber = None
        self.anchor = None
        self.closed = False

    def snapshot(self) -> Boundary:
        return self.boundary.copy()

    def ready_boundary(self) -> Boundary:
        """Snapshot after the engine preconditions hold; raises BoundaryError otherwise."""
        boundary = self.snapshot()
        validate_ready(boundary)
        return boundary
