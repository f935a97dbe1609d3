# carpark/core/boundary.py
"""
Boundary model: ordered, grid-snapped, typed segments outlining a car park.
Insertion order defines traversal; the polygon is formed by each segment's start.
No geometric validation on mutation; validate_ready() is the caller-side gate
run before the placement engine. See: docs/ALGORITHM.md S1.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Sequence

from carpark.core.error_codes import (
    BOUNDARY_NOT_CLOSED,
    COLLISION_SEGMENT,
    NO_ENTRANCE_EXIT,
    user_message,
)
from carpark.core.geometry import (
    XY,
    px_to_metres,
    segment_geometry,
    segment_length,
    snap_point,
)
from carpark.core.types import EdgeType


class BoundaryError(ValueError):
    """Boundary cannot be handed to the placement engine."""

    def __init__(self, error_key: str, detail: str = "") -> None:
        self.error_key = error_key
        message = user_message(error_key)
        super().__init__(f"{message} {detail}".strip())


@dataclass(frozen=True)
class BoundarySegment:
    """A border line between two grid-snapped endpoints, tagged with its edge type."""
    start: XY
    end: XY
    edge_type: EdgeType = EdgeType.BORDER

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", snap_point(self.start))
        object.__setattr__(self, "end", snap_point(self.end))
        object.__setattr__(self, "edge_type", EdgeType(self.edge_type))

    @property
    def length_px(self) -> float:
        return segment_length(self.start, self.end)

    @property
    def length_m(self) -> float:
        return px_to_metres(self.length_px)

    def geometry(self):
        return segment_geometry(self.start, self.end)

    def with_edge_type(self, edge_type: int) -> BoundarySegment:
        """Copy with a new tag; values outside the known edge types leave the tag unchanged."""
        if not EdgeType.BORDER <= edge_type <= EdgeType.COLLISION:
            return self
        return replace(self, edge_type=EdgeType(edge_type))

    def __str__(self) -> str:
        return (
            f"State: {self.edge_type.name} Line: ({self.start[0]}, {self.start[1]}) "
            f"to ({self.end[0]}, {self.end[1]})"
        )


class Boundary:
    """
    Mutable, ordered sequence of BoundarySegment.
    The engine never scans this object directly, only snapshot().
    """

    def __init__(self, segments: Iterable[BoundarySegment] | None = None) -> None:
        self._segments: list[BoundarySegment] = list(segments or [])

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[BoundarySegment]:
        return iter(self._segments)

    def __getitem__(self, index: int) -> BoundarySegment:
        return self._segments[index]

    def __repr__(self) -> str:
        return f"Boundary({len(self._segments)} segments)"

    def append(self, start: Sequence[float], end: Sequence[float], edge_type: EdgeType = EdgeType.BORDER) -> BoundarySegment:
        segment = BoundarySegment(tuple(start), tuple(end), edge_type)
        self._segments.append(segment)
        return segment

    def append_segment(self, segment: BoundarySegment) -> None:
        self._segments.append(segment)

    def remove_last(self) -> BoundarySegment | None:
        if not self._segments:
            return None
        return self._segments.pop()

    def replace_all(self, segments: Iterable[BoundarySegment]) -> None:
        self._segments = list(segments)

    def clear(self) -> None:
        self._segments = []

    def set_edge_type(self, index: int, edge_type: int) -> None:
        """Re-tag segment index. Unknown edge type values are ignored."""
        self._segments[index] = self._segments[index].with_edge_type(edge_type)

    def snapshot(self) -> tuple[BoundarySegment, ...]:
        return tuple(self._segments)

    def copy(self) -> Boundary:
        return Boundary(self._segments)

    def first_points(self) -> list[XY]:
        """Segment start points in order: the polygon the scan fills."""
        return [s.start for s in self._segments]

    def is_closed(self) -> bool:
        """Consecutive segments share endpoints and the last ends where the first starts."""
        if len(self._segments) < 3:
            return False
        return all(
            self._segments[i - 1].end == self._segments[i].start
            for i in range(len(self._segments))
        )

    def has_entrance(self) -> bool:
        return any(s.edge_type.allows_entry for s in self._segments)

    def has_exit(self) -> bool:
        return any(s.edge_type.allows_exit for s in self._segments)


def boundary_from_points(
    points: Sequence[Sequence[float]],
    edge_types: dict[int, EdgeType | int] | None = None,
) -> Boundary:
    """
    Closed boundary through points (the ring is closed automatically).
    edge_types maps segment index -> edge type; others are BORDER.
    """
    edge_types = edge_types or {}
    boundary = Boundary()
    n = len(points)
    for i in range(n):
        boundary.append(points[i], points[(i + 1) % n], EdgeType(edge_types.get(i, EdgeType.BORDER)))
    return boundary


def validate_ready(boundary: Boundary | Sequence[BoundarySegment]) -> None:
    """
    Precondition gate for the placement engine: closed, no in-progress COLLISION
    tags, at least one entrance-bearing and one exit-bearing segment.
    Raises BoundaryError with a key from error_codes.
    """
    if not isinstance(boundary, Boundary):
        boundary = Boundary(boundary)
    if not boundary.is_closed():
        raise BoundaryError(BOUNDARY_NOT_CLOSED, f"({len(boundary)} segments)")
    if any(s.edge_type == EdgeType.COLLISION for s in boundary):
        raise BoundaryError(COLLISION_SEGMENT)
    if not (boundary.has_entrance() and boundary.has_exit()):
        raise BoundaryError(NO_ENTRANCE_EXIT)
