# carpark/core/config.py
"""
Central configuration for car park stall layout.
All tunable values live here; no magic numbers in other modules
(the pixel/metre scale is owned by geometry.py).
See: docs/ALGORITHM.md.
"""

from __future__ import annotations
import os

# ----- Paths (repo-relative) -----
DEFAULT_DIMENSIONS_PATH: str = "data/carpark_dimensions.txt"
DEFAULT_BOUNDARY_PATH: str = "data/boundaries/square_entrance_top.json"
REPORTS_DIR: str = "reports"

# ----- Grid -----
GRID_SNAP_PX: int = 5
"""Boundary endpoints are truncated toward zero to a multiple of this. See ALGORITHM S1."""

# ----- Drawing -----
CLOSE_TOLERANCE_PX: float = 1.0
"""Rubber line end closer than this to the first point closes the boundary. See ALGORITHM S5."""

SELECT_TOLERANCE_PX: float = 5.0
"""A point within this distance of a segment selects it for re-tagging. See ALGORITHM S5."""

ENTRANCE_EXIT_WIDTH_FACTOR: float = 2.0
"""A combined entrance/exit must be this many entry widths long."""

# ----- Scan -----
SCAN_START_OFFSET_PX: int = 1
"""Scan starts 1px inside the bounding box so axis-aligned edges at the origin are not hit. See ALGORITHM S2."""

MIN_SCAN_STEP_PX: int = 1
"""Smallest step the scan can advance by; a smaller footprint step yields no placements."""

ANGLED_STALL_DEG: float = 60.0
"""Angle of the angled parking scheme; drives the shear of its footprint. See ALGORITHM S3."""

# ----- Reporting -----
SCHEMA_VERSION: str = "1.0"

ORIENTATIONS_DEFAULT: tuple[int, ...] = (0, 60, 90)
"""Orientations run in batch mode when none are given."""

# ----- Logging -----
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
"""Root log level for CLI entrypoints. Set env LOG_LEVEL=DEBUG for scan details."""
