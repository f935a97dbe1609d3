# carpark/core/io.py
"""
Load car park inputs from disk.
Dimensions come from a plain-text tag file ("[ANGLE90 WIDTH] 2.5");
boundaries from JSON (typed segments, or points plus edge types).
See: docs/ALGORITHM.md S6.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path

from carpark.core.boundary import Boundary, BoundarySegment, boundary_from_points
from carpark.core.error_codes import DUPLICATE_TAG, MISSING_TAG
from carpark.core.types import Dimensions, EdgeType

logger = logging.getLogger(__name__)

# Tag text -> Dimensions field, in file documentation order
DIMENSION_TAGS: dict[str, str] = {
    "ENTRY WIDTH MIN": "entry_width_min",
    "ENTRY CLEARANCE MIN": "clearance_min",
    "ANGLE0 WIDTH": "angle0_width",
    "ANGLE0 LENGTH": "angle0_length",
    "ANGLE0 SPACE MIN": "angle0_space_min",
    "ANGLE90 WIDTH": "angle90_width",
    "ANGLE90 DEPTH": "angle90_depth",
    "ANGLE90 SPACE MIN": "angle90_space_min",
    "ANGLE60 WIDTH": "angle60_width",
    "ANGLE60 DEPTH": "angle60_depth",
    "ANGLE60 SPACE MIN": "angle60_space_min",
}


class DimensionFileError(ValueError):
    """Dimension tag file is rejected as a whole."""
    error_key = ""

    def __init__(self, tag: str, message: str) -> None:
        self.tag = tag
        super().__init__(message)


class MissingTagError(DimensionFileError):
    error_key = MISSING_TAG

    def __init__(self, tag: str) -> None:
        super().__init__(
            tag,
            f'No "{tag}" tags found in selected file. Add this tag with a '
            "non-negative number for its dimension, then try again.",
        )


class DuplicateTagError(DimensionFileError):
    error_key = DUPLICATE_TAG

    def __init__(self, tag: str) -> None:
        super().__init__(
            tag,
            f'Too many "{tag}" tags found in selected file. Keep only one of '
            "these tags in the file, then try again.",
        )


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def _split_tag_line(line: str) -> tuple[str, str] | None:
    """'[TAG] value' -> ('TAG', 'value'); None for lines without both brackets."""
    if "[" not in line or "]" not in line:
        return None
    name, _, value = line.partition("]")
    return name.replace("[", "").strip(), value.strip()


def _parse_value(text: str) -> float | None:
    """Non-negative finite number, or None when the line should be skipped."""
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def parse_dimensions(text: str) -> Dimensions:
    """
    Parse tag-file text into Dimensions.
    Each required tag must be stored exactly once: a second occurrence after a
    stored one raises DuplicateTagError; a non-numeric or negative value skips
    the line; a tag never stored raises MissingTagError.
    """
    found: dict[str, float] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        parts = _split_tag_line(line)
        if parts is None:
            continue
        tag, raw = parts
        if tag not in DIMENSION_TAGS or not raw:
            continue
        if tag in found:
            raise DuplicateTagError(tag)
        value = _parse_value(raw)
        if value is None:
            logger.debug("Skipping line %d: invalid value %r for [%s]", lineno, raw, tag)
            continue
        found[tag] = value

    for tag in DIMENSION_TAGS:
        if tag not in found:
            raise MissingTagError(tag)
    return Dimensions(**{field: found[tag] for tag, field in DIMENSION_TAGS.items()})


def load_dimensions(path: str | Path, repo_root: Path | None = None) -> Dimensions:
    """
    Read and parse a dimension tag file.
    Raises FileNotFoundError if missing, DimensionFileError if tags are wrong.
    """
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Dimension file not found: {resolved}")
    return parse_dimensions(resolved.read_text(encoding="utf-8"))


def dimensions_to_text(dimensions: Dimensions) -> str:
    """Tag-file text for dimensions; parse_dimensions reads it back."""
    values = dimensions.as_dict()
    return "".join(f"[{tag}] {values[field]:g}\n" for tag, field in DIMENSION_TAGS.items())


def _point(value: object) -> tuple[float, float]:
    if isinstance(value, dict):
        x, y = float(value["x"]), float(value["y"])
    else:
        x, y = value  # type: ignore[misc]
        x, y = float(x), float(y)
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"non-finite coordinate ({x}, {y})")
    return (x, y)


def boundary_from_dict(data: dict) -> Boundary:
    """
    Build a Boundary from either
    {"segments": [{"start": [x, y], "end": [x, y], "type": "entrance"}, ...]} or
    {"points": [[x, y], ...], "edge_types": {"<index>": "exit", ...}}.
    Raises ValueError on any structural problem.
    """
    if "segments" in data:
        if not isinstance(data["segments"], list):
            raise ValueError("'segments' must be a list")
        segments = []
        for i, seg in enumerate(data["segments"]):
            try:
                segments.append(BoundarySegment(
                    _point(seg["start"]),
                    _point(seg["end"]),
                    EdgeType.parse(seg.get("type", EdgeType.BORDER)),
                ))
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                raise ValueError(f"Invalid segment {i}: {e}") from e
        return Boundary(segments)
    if "points" in data:
        if not isinstance(data["points"], list):
            raise ValueError("'points' must be a list")
        if not isinstance(data.get("edge_types", {}), dict):
            raise ValueError("'edge_types' must be an object of index -> type")
        try:
            points = [_point(p) for p in data["points"]]
            edge_types = {int(k): EdgeType.parse(v) for k, v in data.get("edge_types", {}).items()}
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise ValueError(f"Invalid points boundary: {e}") from e
        return boundary_from_points(points, edge_types)
    raise ValueError("Boundary JSON needs 'segments' or 'points'")


def boundary_to_dict(boundary: Boundary) -> dict:
    return {
        "segments": [
            {
                "start": list(s.start),
                "end": list(s.end),
                "type": s.edge_type.name.lower(),
            }
            for s in boundary
        ]
    }


def load_boundary(path: str | Path, repo_root: Path | None = None) -> Boundary:
    """
    Load a boundary JSON file. Endpoints are snapped to the grid on load.
    Raises FileNotFoundError if missing, ValueError if malformed.
    """
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Boundary file not found: {resolved}")
    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Boundary file is not valid JSON: {resolved}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Boundary file must hold a JSON object: {resolved}")
    return boundary_from_dict(data)


def write_boundary(path: str | Path, boundary: Boundary) -> Path:
    p = Path(path)
    p.write_text(json.dumps(boundary_to_dict(boundary), indent=2), encoding="utf-8")
    return p
