from __future__ import annotations

from pathlib import Path
import sys

BASE = Path(__file__).resolve().parents[1]
if str(BASE) not in sys.path:
    sys.path.insert(0, str(BASE))

from floorplan import Shelf
from grid_editor import CollisionValidator, rects_intersect


def _validator() -> CollisionValidator:
    return CollisionValidator([Shelf("S1", (2, 2), (3, 2)), Shelf("S2", (10, 10), (1, 1))])


def test_rects_intersect_is_half_open() -> None:
    assert rects_intersect((0, 0, 2, 2), (1, 1, 3, 3))
    assert not rects_intersect((0, 0, 2, 2), (2, 0, 4, 2))
    assert not rects_intersect((0, 0, 2, 2), (0, 2, 2, 4))
    assert rects_intersect((0, 0, 10, 10), (4, 4, 5, 5))


def test_point_valid_excludes_right_and_bottom_edges() -> None:
    validator = _validator()
    assert not validator.point_valid(2, 2)
    assert not validator.point_valid(4, 3)
    assert validator.point_valid(5, 3)
    assert validator.point_valid(4, 4)
    assert validator.point_valid(1, 2)
    assert not validator.point_valid(10.5, 10.5)


def test_rect_valid_allows_touching_shelves() -> None:
    validator = _validator()
    assert validator.rect_valid(5, 2, 2, 2)
    assert validator.rect_valid(2, 4, 3, 1)
    assert validator.rect_valid(0, 0, 2, 2)
    assert not validator.rect_valid(3, 3, 1, 1)
    assert not validator.rect_valid(0, 0, 20, 20)


def test_empty_validator_accepts_everything() -> None:
    validator = CollisionValidator([])
    assert validator.point_valid(0, 0)
    assert validator.rect_valid(0, 0, 20, 20)
