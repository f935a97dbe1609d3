# carpark/core/runner.py
"""
CLI entrypoint: load dimensions and boundary, check the boundary is ready,
run the placement engine for one or more orientations, export layout JSON.
Default inputs: data/carpark_dimensions.txt, data/boundaries/square_entrance_top.json.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from carpark.core.boundary import BoundaryError
from carpark.core.config import (
    DEFAULT_BOUNDARY_PATH,
    DEFAULT_DIMENSIONS_PATH,
    LOG_LEVEL,
    ORIENTATIONS_DEFAULT,
    REPORTS_DIR,
)
from carpark.core.error_codes import user_message
from carpark.core.io import DimensionFileError, load_boundary, load_dimensions
from carpark.core.placement import run_layout
from carpark.core.reporting import (
    ensure_report_dir,
    write_layout_json,
    write_run_metadata_json,
)
from carpark.core.types import Orientation

logger = logging.getLogger(__name__)


def _parse_orientations(text: str) -> list[Orientation]:
    """'90' or '0,60,90' -> orientations; empty -> all three."""
    parts = [t for t in (text or "").replace(" ", "").split(",") if t]
    if not parts:
        return [Orientation(o) for o in ORIENTATIONS_DEFAULT]
    return [Orientation.parse(t) for t in parts]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Lay out parking stalls inside a car park boundary.")
    p.add_argument("--dimensions", type=str, default=DEFAULT_DIMENSIONS_PATH, help="Dimension tag file (repo-relative)")
    p.add_argument("--boundary", type=str, default=DEFAULT_BOUNDARY_PATH, help="Boundary JSON path (repo-relative)")
    p.add_argument("--orientation", type=str, default="90", help="Orientation(s): '90' or '0,60,90'")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--batch-dir", type=str, default=None, dest="batch_dir", help="Batch mode: directory of boundary .json files")
    p.add_argument("--batch-limit", type=int, default=None, dest="batch_limit", help="Max cases in batch")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()
    try:
        orientations = _parse_orientations(args.orientation)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    try:
        dimensions = load_dimensions(args.dimensions, repo_root=repo_root)
    except (DimensionFileError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 2

    if args.batch_dir:
        from carpark.core.batch import run_batch
        batch_dir = Path(args.batch_dir)
        if not batch_dir.is_absolute():
            batch_dir = repo_root / batch_dir
        out = run_batch(
            run_name=args.run_name,
            batch_dir=batch_dir,
            dimensions=dimensions,
            orientations=orientations,
            limit=args.batch_limit,
            repo_root=repo_root,
            output_dir=args.output_dir,
        )
        print(out / "index.csv")
        return 0

    try:
        boundary = load_boundary(args.boundary, repo_root=repo_root)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 2
    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    for orientation in orientations:
        try:
            result = run_layout(boundary, dimensions, orientation, boundary_source=args.boundary)
        except BoundaryError as e:
            logger.error("%s", user_message(e.error_key))
            return 2
        path = write_layout_json(report_dir, result)
        print(path)
        print(f"Stalls ({int(orientation)} deg):", result.stall_count)
    meta = write_run_metadata_json(
        report_dir,
        args.run_name,
        args.boundary,
        args.dimensions,
        [int(o) for o in orientations],
    )
    print(meta)
    return 0


if __name__ == "__main__":
    sys.exit(main())
