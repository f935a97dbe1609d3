# tests/test_geometry.py
"""
Deterministic tests for geometry: grid snapping, scan-line containment,
segment/rectangle predicates, distances. See: docs/ALGORITHM.md S1, S4.
"""

from __future__ import annotations

import pytest

from carpark.core.geometry import (
    PX_PER_METRE,
    ScanlinePolygon,
    expand_top_left,
    metres_to_px,
    point_segment_distance,
    rect_corners,
    segment_intersects_rect,
    segment_length,
    segments_intersect,
    snap_point,
    snap_to_grid,
)


def test_metres_to_px_uses_single_scale() -> None:
    assert PX_PER_METRE == 25.0
    assert metres_to_px(2.5) == pytest.approx(62.5)
    assert metres_to_px(0.0) == 0.0


@pytest.mark.parametrize(
    "value, expected",
    [(0, 0.0), (4.9, 0.0), (5, 5.0), (12.7, 10.0), (14.999, 10.0), (-7, -5.0), (-3, 0.0)],
)
def test_snap_to_grid_truncates_toward_zero(value: float, expected: float) -> None:
    assert snap_to_grid(value) == expected


def test_snap_point() -> None:
    assert snap_point((123.4, 56.7)) == (120.0, 55.0)


def test_scanline_polygon_interior_and_exterior() -> None:
    tri = ScanlinePolygon([(0, 0), (10, 0), (0, 10)])
    assert tri.contains(2, 2) is True
    assert tri.contains(6, 6) is False
    assert tri.contains(-1, 2) is False


def test_scanline_polygon_half_open_edges() -> None:
    square = ScanlinePolygon([(0, 0), (10, 0), (10, 10), (0, 10)])
    # left and top edges are inside, right and bottom edges are not
    assert square.contains(0, 5) is True
    assert square.contains(5, 0) is True
    assert square.contains(10, 5) is False
    assert square.contains(5, 10) is False
    assert square.contains(9.999, 9.999) is True


def test_scanline_polygon_concave() -> None:
    # L shape: notch at top-right
    poly = ScanlinePolygon([(0, 0), (4, 0), (4, 4), (10, 4), (10, 10), (0, 10)])
    assert poly.contains(2, 2) is True
    assert poly.contains(7, 2) is False
    assert poly.contains(7, 7) is True


def test_scanline_polygon_truncates_vertices_and_bounds() -> None:
    poly = ScanlinePolygon([(1.9, 2.2), (11.5, 2.0), (11.0, 12.9), (1.0, 12.0)])
    assert poly.bounds == (1, 2, 10, 10)


def test_scanline_polygon_degenerate() -> None:
    assert ScanlinePolygon([]).bounds == (0, 0, 0, 0)
    assert ScanlinePolygon([(0, 0), (10, 10)]).contains(5, 5) is False
    assert ScanlinePolygon([(0, 0), (10, 10)]).to_shapely().is_empty


def test_rect_corners_and_expand_top_left() -> None:
    rect = (10.0, 20.0, 5.0, 4.0)
    assert rect_corners(rect) == [(10.0, 20.0), (15.0, 20.0), (10.0, 24.0), (15.0, 24.0)]
    x, y, w, h = expand_top_left(rect, 2.0)
    assert (x, y) == (8.0, 18.0)
    # bottom/right edges stay where they were
    assert x + w == 15.0 and y + h == 24.0


def test_segment_intersects_rect_touching_counts() -> None:
    rect = (0.0, 0.0, 10.0, 10.0)
    assert segment_intersects_rect((-5, 5), (15, 5), rect) is True
    assert segment_intersects_rect((10, -5), (10, 15), rect) is True
    assert segment_intersects_rect((11, -5), (11, 15), rect) is False
    assert segment_intersects_rect((2, 2), (3, 3), rect) is True


def test_segment_intersects_rect_without_area() -> None:
    assert segment_intersects_rect((0, 0), (10, 10), (5.0, 5.0, 0.0, 10.0)) is False


def test_segments_intersect() -> None:
    assert segments_intersect((0, 0), (10, 10), (0, 10), (10, 0)) is True
    assert segments_intersect((0, 0), (10, 0), (10, 0), (10, 10)) is True
    assert segments_intersect((0, 0), (10, 0), (0, 1), (10, 1)) is False
    assert segments_intersect((0, 0), (10, 0), (5, 0), (15, 0)) is True


def test_point_segment_distance_is_clamped() -> None:
    assert point_segment_distance((5, 3), (0, 0), (10, 0)) == pytest.approx(3.0)
    assert point_segment_distance((-3, 4), (0, 0), (10, 0)) == pytest.approx(5.0)
    assert point_segment_distance((4, 0), (0, 0), (10, 0)) == 0.0
    assert point_segment_distance((3, 4), (0, 0), (0, 0)) == pytest.approx(5.0)


def test_segment_length() -> None:
    assert segment_length((0, 0), (3, 4)) == pytest.approx(5.0)
    assert segment_length((2, 2), (2, 2)) == 0.0
