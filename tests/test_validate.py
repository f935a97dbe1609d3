# tests/test_validate.py
"""
Deterministic tests for StallValidator. See: docs/ALGORITHM.md S4.
"""

from __future__ import annotations

from carpark.core.boundary import boundary_from_points
from carpark.core.placement import boundary_polygon
from carpark.core.types import EdgeType
from carpark.core.validate import StallValidator

SQUARE = [(0, 0), (100, 0), (100, 100), (0, 100)]


def _check(edge_types: dict, rect: tuple[float, float, float, float], clearance_px: float = 5.0) -> bool:
    b = boundary_from_points(SQUARE, edge_types)
    return StallValidator(boundary_polygon(b.snapshot()), b.snapshot(), clearance_px).is_valid(rect)


def test_rect_inside_is_valid() -> None:
    assert _check({}, (10, 10, 20, 20)) is True


def test_rect_partly_outside_is_rejected() -> None:
    assert _check({}, (90, 10, 20, 20)) is False


def test_rect_on_right_edge_is_rejected() -> None:
    # corner exactly on the right edge is outside
    assert _check({}, (80, 10, 20, 20)) is False


def test_border_only_blocks_by_contact() -> None:
    # 2px from the top border, inside the 5px clearance: borders ignore clearance
    assert _check({}, (10, 2, 20, 20)) is True


def test_entrance_blocks_within_clearance_on_top_left() -> None:
    assert _check({0: EdgeType.ENTRANCE}, (10, 2, 20, 20)) is False
    assert _check({3: EdgeType.EXIT}, (2, 40, 20, 20)) is False
    assert _check({0: EdgeType.ENTRANCE}, (10, 6, 20, 20)) is True


def test_entrance_clearance_not_applied_bottom_right() -> None:
    # 2px above the bottom exit and 2px left of the right exit still pass
    assert _check({2: EdgeType.EXIT}, (10, 78, 20, 20)) is True
    assert _check({1: EdgeType.ENTRANCE_EXIT}, (78, 10, 20, 20)) is True


def test_validator_is_reusable() -> None:
    b = boundary_from_points(SQUARE, {0: EdgeType.ENTRANCE_EXIT})
    check = StallValidator(boundary_polygon(b.snapshot()), b.snapshot(), 5.0)
    assert check((10, 10, 20, 20)) is True
    assert check((10, 1, 20, 20)) is False
    assert check.is_valid((50, 50, 20, 20)) is True
