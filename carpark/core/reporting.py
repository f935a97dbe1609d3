# carpark/core/reporting.py
"""
Create reports/<run_name>/ and write layout.json (exact schema), run_metadata.json.
Metrics are computed with numpy over the placement coordinates.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from carpark.core.config import (
    GRID_SNAP_PX,
    MIN_SCAN_STEP_PX,
    REPORTS_DIR,
    SCAN_START_OFFSET_PX,
    SCHEMA_VERSION,
)
from carpark.core.geometry import PX_PER_METRE
from carpark.core.types import LayoutResult


def layout_metrics(result: LayoutResult) -> dict:
    """Stall count, rows used, stalls per row and footprint area against boundary area."""
    n = len(result.placements)
    if n == 0:
        return {
            "stall_count": 0,
            "row_count": 0,
            "max_stalls_per_row": 0,
            "stall_area_px": 0.0,
            "coverage_ratio": 0.0,
        }
    ys = np.array([p.y for p in result.placements], dtype=float)
    _, per_row = np.unique(ys, return_counts=True)
    stall_area = float(n * result.footprint.width_px * result.footprint.height_px)
    coverage = stall_area / result.boundary_area_px if result.boundary_area_px > 0 else 0.0
    return {
        "stall_count": n,
        "row_count": int(per_row.size),
        "max_stalls_per_row": int(per_row.max()),
        "stall_area_px": round(stall_area, 3),
        "coverage_ratio": round(coverage, 4),
    }


def layout_to_dict(result: LayoutResult) -> dict:
    """Exact structure for layout.json."""
    fp = result.footprint
    return {
        "schema_version": SCHEMA_VERSION,
        "input": {
            "boundary_source": result.boundary_source,
            "orientation_deg": int(result.orientation),
            "units": "px",
            "px_per_metre": PX_PER_METRE,
            "dimensions_m": result.dimensions.as_dict(),
        },
        "footprint": {
            "width_px": fp.width_px,
            "height_px": fp.height_px,
            "step_x_px": fp.step_x,
            "step_y_px": fp.step_y,
            "shear_px": fp.shear_px,
        },
        "result": {
            "placements": [
                {"x": p.x, "y": p.y, "angle_rad": p.angle_rad}
                for p in result.placements
            ],
        },
        "metrics": {
            **layout_metrics(result),
            "boundary_area_px": round(result.boundary_area_px, 3),
            "duration_ms": result.duration_ms,
        },
        "warnings": list(result.warnings),
    }


def run_metadata_dict(
    run_name: str,
    boundary_path: str,
    dimensions_path: str,
    orientations: list[int],
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "boundary_path": boundary_path,
        "dimensions_path": dimensions_path,
        "orientations_deg": list(orientations),
        "config": {
            "PX_PER_METRE": PX_PER_METRE,
            "GRID_SNAP_PX": GRID_SNAP_PX,
            "SCAN_START_OFFSET_PX": SCAN_START_OFFSET_PX,
            "MIN_SCAN_STEP_PX": MIN_SCAN_STEP_PX,
            "SCHEMA_VERSION": SCHEMA_VERSION,
        },
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def layout_filename(result: LayoutResult) -> str:
    return f"layout_{int(result.orientation)}.json"


def write_layout_json(report_dir: Path, result: LayoutResult, filename: str | None = None) -> Path:
    """Write layout_<deg>.json (or filename) to report_dir. Returns path to file."""
    path = report_dir / (filename or layout_filename(result))
    path.write_text(json.dumps(layout_to_dict(result), indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    boundary_path: str,
    dimensions_path: str,
    orientations: list[int],
) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, boundary_path, dimensions_path, orientations)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
