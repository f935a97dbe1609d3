# carpark/core/placement.py
"""
Placement engine: per-orientation stall footprint and the greedy scan that
fills the boundary polygon left-to-right, top-to-bottom with stalls.
Deterministic and stateless; scans an immutable snapshot of the boundary.
See: docs/ALGORITHM.md S2–S4.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Sequence

from carpark.core.boundary import Boundary, BoundarySegment, validate_ready
from carpark.core.config import ANGLED_STALL_DEG, MIN_SCAN_STEP_PX, SCAN_START_OFFSET_PX
from carpark.core.geometry import ScanlinePolygon, metres_to_px
from carpark.core.types import Dimensions, Footprint, LayoutResult, Orientation, Placement
from carpark.core.validate import StallValidator

logger = logging.getLogger(__name__)


def angled_shear_m(dimensions: Dimensions) -> float:
    """Horizontal run (m) of an angled stall's depth: depth / tan(60°)."""
    return dimensions.angle60_depth / math.tan(math.radians(ANGLED_STALL_DEG))


def stall_footprint(dimensions: Dimensions, orientation: Orientation | int) -> Footprint:
    """
    Unrotated stall rectangle for the orientation, height including manoeuvring space.
    Angled stalls widen by their shear but step by width minus shear, so
    neighbouring bounding boxes overlap. See: docs/ALGORITHM.md S3.
    """
    orientation = Orientation(orientation)
    shear_m = 0.0
    if orientation == Orientation.DEG60:
        shear_m = angled_shear_m(dimensions)
        width_m = shear_m + dimensions.angle60_width
        height_m = dimensions.angle60_depth + dimensions.angle60_space_min
    elif orientation == Orientation.DEG90:
        width_m = dimensions.angle90_width
        height_m = dimensions.angle90_depth + dimensions.angle90_space_min
    else:
        width_m = dimensions.angle0_length
        height_m = dimensions.angle0_width + dimensions.angle0_space_min

    width_px = metres_to_px(width_m)
    height_px = metres_to_px(height_m)
    shear_px = metres_to_px(shear_m)
    step_x = int(width_px)
    if orientation == Orientation.DEG60:
        step_x = int(step_x - shear_px)
    return Footprint(
        orientation=orientation,
        width_px=width_px,
        height_px=height_px,
        step_x=step_x,
        step_y=int(height_px),
        shear_px=shear_px,
    )


def boundary_polygon(boundary: Boundary | Sequence[BoundarySegment]) -> ScanlinePolygon:
    """Polygon through each segment's start point, in boundary order."""
    if not isinstance(boundary, Boundary):
        boundary = Boundary(boundary)
    return ScanlinePolygon(boundary.first_points())


def _snapshot(boundary: Boundary | Sequence[BoundarySegment]) -> tuple[BoundarySegment, ...]:
    if isinstance(boundary, Boundary):
        return boundary.snapshot()
    return tuple(boundary)


def _scan(
    segments: tuple[BoundarySegment, ...],
    dimensions: Dimensions,
    footprint: Footprint,
) -> list[Placement]:
    polygon = boundary_polygon(segments)
    bx, by, bw, bh = polygon.bounds
    logger.debug(
        "Scan %s: bbox=(%d, %d, %d, %d) footprint=%.2fx%.2f step=(%d, %d)",
        footprint.orientation.name, bx, by, bw, bh,
        footprint.width_px, footprint.height_px, footprint.step_x, footprint.step_y,
    )
    if not _can_advance(footprint):
        logger.warning(
            "Footprint step (%d, %d) cannot advance the scan; no stalls placed.",
            footprint.step_x, footprint.step_y,
        )
        return []

    is_valid = StallValidator(polygon, segments, metres_to_px(dimensions.clearance_min))
    placements: list[Placement] = []

    y = SCAN_START_OFFSET_PX
    while y < bh:
        placed = False
        x = SCAN_START_OFFSET_PX
        while x < bw:
            if is_valid((bx + x, by + y, footprint.width_px, footprint.height_px)):
                placements.append(Placement(float(bx + x), float(by + y), 0.0))
                x += footprint.step_x
                placed = True
            else:
                x += 1
        if placed:
            # last stall of a row can seal the far end of the aisle
            placements.pop()
            y += footprint.step_y
        else:
            y += 1
    return placements


def _can_advance(footprint: Footprint) -> bool:
    return footprint.step_x >= MIN_SCAN_STEP_PX and footprint.step_y >= MIN_SCAN_STEP_PX


def generate(
    boundary: Boundary | Sequence[BoundarySegment],
    dimensions: Dimensions,
    orientation: Orientation | int,
) -> list[Placement]:
    """
    Greedy scan over the polygon's bounding box. Returns placements in discovery order.
    Preconditions (closed boundary with entrance and exit) are the caller's;
    see boundary.validate_ready. See: docs/ALGORITHM.md S2.
    """
    return _scan(_snapshot(boundary), dimensions, stall_footprint(dimensions, orientation))


def run_layout(
    boundary: Boundary | Sequence[BoundarySegment],
    dimensions: Dimensions,
    orientation: Orientation | int,
    boundary_source: str = "",
    check_ready: bool = True,
) -> LayoutResult:
    """
    Validate the boundary (unless check_ready is False), run the scan and
    wrap the placements with footprint, timing and warnings.
    Raises BoundaryError if the boundary is not ready.
    """
    segments = _snapshot(boundary)
    if check_ready:
        validate_ready(segments)
    orientation = Orientation(orientation)
    footprint = stall_footprint(dimensions, orientation)
    t0 = time.perf_counter()
    placements = _scan(segments, dimensions, footprint)
    duration_ms = int((time.perf_counter() - t0) * 1000)

    warnings: list[str] = []
    if not _can_advance(footprint):
        warnings.append("Stall footprint too small to advance the scan.")
    elif not placements:
        warnings.append("No stalls fit inside the boundary.")
    logger.info(
        "Placed %d stalls (%s) for %s in %d ms",
        len(placements), orientation.name, boundary_source or "boundary", duration_ms,
    )
    return LayoutResult(
        boundary_source=boundary_source,
        orientation=orientation,
        dimensions=dimensions,
        footprint=footprint,
        placements=placements,
        duration_ms=duration_ms,
        boundary_area_px=float(boundary_polygon(segments).to_shapely().area),
        warnings=warnings,
    )
