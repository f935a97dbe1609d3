# tests/test_io.py
"""
Dimension tag-file parsing (missing / duplicate / malformed values) and
boundary JSON loading. See: docs/ALGORITHM.md S6.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from carpark.core.error_codes import DUPLICATE_TAG, MISSING_TAG
from carpark.core.io import (
    DIMENSION_TAGS,
    DimensionFileError,
    DuplicateTagError,
    MissingTagError,
    dimensions_to_text,
    load_boundary,
    load_dimensions,
    parse_dimensions,
    write_boundary,
)
from carpark.core.types import Dimensions, EdgeType

VALID_TEXT = """\
Car park rules
[ENTRY WIDTH MIN] 3.0
[ENTRY CLEARANCE MIN] 0.3
[ANGLE0 WIDTH] 2.7
[ANGLE0 LENGTH] 2.5
[ANGLE0 SPACE MIN] 0.3

[ANGLE90 WIDTH] 2.5
[ANGLE90 DEPTH] 5.0
[ANGLE90 SPACE MIN] 1.0
  [ANGLE60 WIDTH]   2.5
[ANGLE60 DEPTH] 5
[ANGLE60 SPACE MIN] 1.0
"""


def _without(tag: str) -> str:
    return "\n".join(line for line in VALID_TEXT.splitlines() if f"[{tag}]" not in line)


def test_parse_dimensions_valid() -> None:
    d = parse_dimensions(VALID_TEXT)
    assert d.entry_width_min == 3.0
    assert d.clearance_min == pytest.approx(0.3)
    assert d.angle0_length == pytest.approx(2.5)
    assert d.angle60_width == pytest.approx(2.5)
    assert d.angle60_depth == 5.0


def test_missing_tag_raises() -> None:
    with pytest.raises(MissingTagError) as exc:
        parse_dimensions(_without("ANGLE90 DEPTH"))
    assert exc.value.tag == "ANGLE90 DEPTH"
    assert exc.value.error_key == MISSING_TAG
    assert isinstance(exc.value, ValueError)


def test_duplicate_tag_raises() -> None:
    with pytest.raises(DuplicateTagError) as exc:
        parse_dimensions(VALID_TEXT + "[ANGLE0 WIDTH] 2.8\n")
    assert exc.value.tag == "ANGLE0 WIDTH"
    assert exc.value.error_key == DUPLICATE_TAG


def test_duplicate_detected_even_when_second_value_is_malformed() -> None:
    with pytest.raises(DuplicateTagError):
        parse_dimensions(VALID_TEXT + "[ANGLE0 WIDTH] wide\n")


@pytest.mark.parametrize("bad", ["-1.0", "abc", "nan", "inf"])
def test_malformed_value_is_skipped_then_missing(bad: str) -> None:
    text = _without("ANGLE0 LENGTH") + f"\n[ANGLE0 LENGTH] {bad}\n"
    with pytest.raises(MissingTagError) as exc:
        parse_dimensions(text)
    assert exc.value.tag == "ANGLE0 LENGTH"


def test_malformed_value_skipped_before_valid_occurrence() -> None:
    text = "[ANGLE0 LENGTH] -2\n" + _without("ANGLE0 LENGTH") + "\n[ANGLE0 LENGTH] 6\n"
    d = parse_dimensions(text)
    assert d.angle0_length == 6.0


def test_untagged_and_unknown_lines_ignored() -> None:
    text = "ANGLE0 WIDTH 99\n[UNKNOWN TAG] 5\n[ANGLE0 WIDTH]\n" + VALID_TEXT
    d = parse_dimensions(text)
    assert d.angle0_width == pytest.approx(2.7)


def test_dimensions_text_roundtrip() -> None:
    d = parse_dimensions(VALID_TEXT)
    assert parse_dimensions(dimensions_to_text(d)) == d
    assert len(DIMENSION_TAGS) == 11


def test_dimensions_reject_negative() -> None:
    values = dict.fromkeys(DIMENSION_TAGS.values(), 1.0)
    values["angle90_depth"] = -0.5
    with pytest.raises(ValueError):
        Dimensions(**values)


def test_load_dimensions_file(tmp_path: Path) -> None:
    p = tmp_path / "dims.txt"
    p.write_text(VALID_TEXT, encoding="utf-8")
    assert load_dimensions(p).angle90_width == pytest.approx(2.5)
    assert load_dimensions("dims.txt", repo_root=tmp_path).angle90_width == pytest.approx(2.5)
    with pytest.raises(FileNotFoundError):
        load_dimensions(tmp_path / "missing.txt")
    assert issubclass(MissingTagError, DimensionFileError)


def test_load_boundary_segments(tmp_path: Path) -> None:
    p = tmp_path / "b.json"
    p.write_text(json.dumps({"segments": [
        {"start": [0, 0], "end": [102, 0], "type": "entrance"},
        {"start": [102, 0], "end": [100, 100], "type": 2},
        {"start": [100, 100], "end": {"x": 0, "y": 0}},
    ]}), encoding="utf-8")
    b = load_boundary(p)
    assert len(b) == 3
    assert b[0].end == (100.0, 0.0)
    assert [s.edge_type for s in b] == [EdgeType.ENTRANCE, EdgeType.EXIT, EdgeType.BORDER]
    assert b.is_closed()


def test_load_boundary_points(tmp_path: Path) -> None:
    p = tmp_path / "b.json"
    p.write_text(json.dumps({
        "points": [[0, 0], [200, 0], [200, 200], [0, 200]],
        "edge_types": {"1": "Entrance Exit"},
    }), encoding="utf-8")
    b = load_boundary(p)
    assert len(b) == 4
    assert b[1].edge_type is EdgeType.ENTRANCE_EXIT
    out = write_boundary(tmp_path / "copy.json", b)
    again = load_boundary(out)
    assert again.snapshot() == b.snapshot()


def test_load_boundary_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_boundary(tmp_path / "none.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_boundary(bad)
    empty = tmp_path / "empty.json"
    empty.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        load_boundary(empty)
    typo = tmp_path / "typo.json"
    typo.write_text(json.dumps({"segments": [{"start": [0, 0], "end": [5, 5], "type": "gate"}]}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_boundary(typo)


@pytest.mark.parametrize(
    "text",
    [
        '{"segments": 5}',
        '{"segments": [[0, 0]]}',
        '{"segments": [{"start": [0, 0], "end": [Infinity, 0]}]}',
        '{"points": {"a": 1}}',
        '{"points": [[0, 0], [100, 0], [100, 100]], "edge_types": []}',
        '{"points": [[0, 0], [NaN, 0], [100, 100]]}',
        '{"points": [[0, 0], [-Infinity, 0], [100, 100]]}',
    ],
)
def test_load_boundary_wrong_structure_is_value_error(tmp_path: Path, text: str) -> None:
    path = tmp_path / "shape.json"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ValueError):
        load_boundary(path)
