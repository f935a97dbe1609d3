# carpark/core/batch.py
"""
Multi-boundary batch mode: run every orientation on a directory of boundary .json files.
Output: reports/batch_<run_name>/index.csv and cases/<case_id>/layout_<deg>.json.
"""

from __future__ import annotations

import csv
import logging
import time
from pathlib import Path

from carpark.core.boundary import BoundaryError, validate_ready
from carpark.core.config import ORIENTATIONS_DEFAULT, REPORTS_DIR
from carpark.core.io import load_boundary
from carpark.core.placement import run_layout
from carpark.core.reporting import ensure_report_dir, layout_metrics, write_layout_json
from carpark.core.types import Dimensions, Orientation

logger = logging.getLogger(__name__)

INDEX_FIELDS = [
    "case_id", "boundary_source", "orientation_deg", "status",
    "stall_count", "row_count", "coverage_ratio", "duration_ms", "warnings_count",
]


def _row(case_id: str, source: str, orientation: int | str, status: str, duration_ms: int, **metrics) -> dict:
    row = {
        "case_id": case_id, "boundary_source": source, "orientation_deg": orientation,
        "status": status, "stall_count": 0, "row_count": 0, "coverage_ratio": "",
        "duration_ms": duration_ms, "warnings_count": 0,
    }
    row.update(metrics)
    return row


def run_batch(
    run_name: str,
    batch_dir: Path,
    dimensions: Dimensions,
    orientations: list[Orientation] | None = None,
    limit: int | None = None,
    repo_root: Path | None = None,
    output_dir: str = REPORTS_DIR,
) -> Path:
    """
    Run each orientation on every *.json boundary in batch_dir (sorted by name).
    Unreadable or not-ready boundaries get one 'error'/'not_ready' row and the batch continues.
    Returns the batch report directory containing index.csv and cases/.
    """
    root = repo_root or Path.cwd().resolve()
    if not batch_dir.is_dir():
        raise ValueError(f"Batch directory not found: {batch_dir}")
    orientations = orientations or [Orientation(o) for o in ORIENTATIONS_DEFAULT]
    out_dir = ensure_report_dir(root, f"batch_{run_name}", output_dir=output_dir)
    cases_dir = out_dir / "cases"
    cases_dir.mkdir(parents=True, exist_ok=True)

    files = sorted(batch_dir.glob("*.json"))
    if limit is not None:
        files = files[:limit]
    rows: list[dict] = []
    for i, path in enumerate(files):
        case_id = f"case_{i:04d}_{path.stem}"
        source = str(path.relative_to(root)) if root in path.parents else str(path)
        t0 = time.perf_counter()
        try:
            boundary = load_boundary(path)
        except ValueError as e:
            logger.warning("Skipping %s: %s", source, e)
            rows.append(_row(case_id, source, "", "error", int((time.perf_counter() - t0) * 1000)))
            continue
        try:
            validate_ready(boundary)
        except BoundaryError as e:
            logger.warning("Skipping %s: %s", source, e.error_key)
            rows.append(_row(case_id, source, "", "not_ready", int((time.perf_counter() - t0) * 1000)))
            continue

        case_dir = cases_dir / case_id
        case_dir.mkdir(parents=True, exist_ok=True)
        for orientation in orientations:
            result = run_layout(boundary, dimensions, orientation, boundary_source=source, check_ready=False)
            write_layout_json(case_dir, result)
            metrics = layout_metrics(result)
            rows.append(_row(
                case_id, source, int(orientation), "ok", result.duration_ms,
                stall_count=metrics["stall_count"],
                row_count=metrics["row_count"],
                coverage_ratio=metrics["coverage_ratio"],
                warnings_count=len(result.warnings),
            ))

    index_path = out_dir / "index.csv"
    with open(index_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=INDEX_FIELDS)
        w.writeheader()
        w.writerows(rows)
    logger.info("Batch %s: %d boundaries, %d rows -> %s", run_name, len(files), len(rows), index_path)
    return out_dir
