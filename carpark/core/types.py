# carpark/core/types.py
"""
Dataclasses and enums for dimensions, edge types, footprints and placements.
Schema aligns with docs/ALGORITHM.md (S3, S4) and the layout.json output.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import IntEnum


class EdgeType(IntEnum):
    """Tag carried by a boundary segment. COLLISION is only used while drawing."""
    BORDER = 0
    ENTRANCE = 1
    EXIT = 2
    ENTRANCE_EXIT = 3
    COLLISION = 4

    @property
    def allows_entry(self) -> bool:
        return self in (EdgeType.ENTRANCE, EdgeType.ENTRANCE_EXIT)

    @property
    def allows_exit(self) -> bool:
        return self in (EdgeType.EXIT, EdgeType.ENTRANCE_EXIT)

    @classmethod
    def parse(cls, value: str | int) -> EdgeType:
        """Accept an int code or a name like 'entrance_exit' / 'Entrance Exit'."""
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip()
        if text.lstrip("-").isdigit():
            return cls(int(text))
        key = text.upper().replace(" ", "_").replace("-", "_").replace("/", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown edge type: {value!r}") from None


class Orientation(IntEnum):
    """Parking scheme: tangential (0), angled (60) or perpendicular (90) stalls."""
    DEG0 = 0
    DEG60 = 60
    DEG90 = 90

    @classmethod
    def parse(cls, value: str | int) -> Orientation:
        try:
            return cls(int(str(value).strip().rstrip("°")))
        except ValueError:
            raise ValueError(f"Unknown orientation: {value!r} (expected 0, 60 or 90)") from None


@dataclass(frozen=True)
class Dimensions:
    """
    Stall and clearance rules in metres. Immutable; every field must be non-negative.
    See: docs/ALGORITHM.md S3.
    """
    entry_width_min: float
    clearance_min: float
    angle0_width: float
    angle0_length: float
    angle0_space_min: float
    angle90_width: float
    angle90_depth: float
    angle90_space_min: float
    angle60_width: float
    angle60_depth: float
    angle60_space_min: float

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise ValueError(f"Dimension {f.name} must be non-negative, got {value}")

    def as_dict(self) -> dict[str, float]:
        return {f.name: float(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class Footprint:
    """
    Unrotated stall rectangle in px, including manoeuvring space.
    step_x/step_y are the integer advances used by the scan after a placement.
    """
    orientation: Orientation
    width_px: float
    height_px: float
    step_x: int
    step_y: int
    shear_px: float = 0.0


@dataclass(frozen=True)
class Placement:
    """Top-left corner (px) of an unrotated stall and its counter-clockwise rotation (rad)."""
    x: float
    y: float
    angle_rad: float = 0.0


@dataclass
class LayoutResult:
    """Output of one engine run. Serializes to layout.json (see reporting.py)."""
    boundary_source: str
    orientation: Orientation
    dimensions: Dimensions
    footprint: Footprint
    placements: list[Placement]
    duration_ms: int = 0
    boundary_area_px: float = 0.0
    warnings: list[str] = field(default_factory=list)

    @property
    def stall_count(self) -> int:
        return len(self.placements)
