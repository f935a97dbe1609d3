#!/usr/bin/env python3
"""
Generate diverse car park boundary JSON files for batch testing.

Categories:
1-10:  Rectangles (varying aspect, entrance/exit on different sides)
11-20: L shapes (notch in a random corner)
21-30: Trapezoids and skewed quads
31-40: Irregular convex-ish polygons (random radial points)

Every boundary is closed, grid-snapped, simple (non self-intersecting) and
carries at least one entrance and one exit.
"""

from __future__ import annotations

import math
import random
from pathlib import Path

from shapely.geometry import Polygon

from carpark.core.boundary import Boundary, boundary_from_points
from carpark.core.geometry import snap_point
from carpark.core.io import write_boundary
from carpark.core.types import EdgeType

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "test_boundaries"

SEED = 7
ORIGIN = (50.0, 50.0)


def save(filename: str, boundary: Boundary) -> None:
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    path = write_boundary(OUTPUT_DIR / filename, boundary)
    print(f"Created: {path.name}")


def _tag(n_edges: int, rng: random.Random) -> dict[int, EdgeType]:
    """One combined entrance/exit, or a separate entrance and exit on different edges."""
    if rng.random() < 0.4:
        return {rng.randrange(n_edges): EdgeType.ENTRANCE_EXIT}
    entrance, exit_ = rng.sample(range(n_edges), 2)
    return {entrance: EdgeType.ENTRANCE, exit_: EdgeType.EXIT}


def _is_simple(points: list[tuple[float, float]]) -> bool:
    poly = Polygon(points)
    return poly.is_valid and poly.area > 0


def rectangle(rng: random.Random) -> list[tuple[float, float]]:
    w = rng.randrange(200, 800, 5)
    h = rng.randrange(200, 600, 5)
    x0, y0 = ORIGIN
    return [(x0, y0), (x0 + w, y0), (x0 + w, y0 + h), (x0, y0 + h)]


def l_shape(rng: random.Random) -> list[tuple[float, float]]:
    w = rng.randrange(400, 800, 5)
    h = rng.randrange(400, 700, 5)
    nw = rng.randrange(100, w // 2, 5)
    nh = rng.randrange(100, h // 2, 5)
    x0, y0 = ORIGIN
    pts = [(x0, y0), (x0 + w - nw, y0), (x0 + w - nw, y0 + nh), (x0 + w, y0 + nh), (x0 + w, y0 + h), (x0, y0 + h)]
    # rotate the notch to a random corner by mirroring
    if rng.random() < 0.5:
        pts = [(2 * x0 + w - x, y) for x, y in reversed(pts)]
    if rng.random() < 0.5:
        pts = [(x, 2 * y0 + h - y) for x, y in reversed(pts)]
    return pts


def trapezoid(rng: random.Random) -> list[tuple[float, float]]:
    w = rng.randrange(400, 800, 5)
    h = rng.randrange(250, 550, 5)
    inset_l = rng.randrange(0, w // 4, 5)
    inset_r = rng.randrange(0, w // 4, 5)
    x0, y0 = ORIGIN
    return [(x0, y0), (x0 + w, y0), (x0 + w - inset_r, y0 + h), (x0 + inset_l, y0 + h)]


def irregular(rng: random.Random) -> list[tuple[float, float]]:
    n = rng.randint(5, 9)
    cx, cy = ORIGIN[0] + 400, ORIGIN[1] + 400
    angles = sorted(rng.uniform(0, 2 * math.pi) for _ in range(n))
    return [
        (cx + r * math.cos(a), cy + r * math.sin(a))
        for a, r in ((a, rng.uniform(250, 400)) for a in angles)
    ]


GENERATORS = [("rect", rectangle), ("lshape", l_shape), ("trap", trapezoid), ("irregular", irregular)]


def main() -> None:
    rng = random.Random(SEED)
    count = 0
    for name, make in GENERATORS:
        made = 0
        while made < 10:
            points = [snap_point(p) for p in make(rng)]
            if not _is_simple(points):
                continue
            count += 1
            made += 1
            boundary = boundary_from_points(points, _tag(len(points), rng))
            save(f"carpark_{count:03d}_{name}.json", boundary)
    print(f"\nGenerated {count} boundaries in {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
