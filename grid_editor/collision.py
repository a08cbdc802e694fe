"""Placement predicates against the shelf rectangles."""
from __future__ import annotations

from typing import Iterable, List, Tuple

from floorplan.config import Shelf

Rect = Tuple[float, float, float, float]  # x1, y1, x2, y2 (half-open)


def rects_intersect(a: Rect, b: Rect) -> bool:
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b
    return not (ax2 <= bx1 or ax1 >= bx2 or ay2 <= by1 or ay1 >= by2)


class CollisionValidator:
    """Answers point/rectangle validity questions for one shelf snapshot.

    Both checks are linear in the number of shelves and allocation free, so
    they can run on every pointer move while a drag is active.
    """

    def __init__(self, shelves: Iterable[Shelf]) -> None:
        self._rects: List[Rect] = [shelf.bounds for shelf in shelves]

    def point_valid(self, x: float, y: float) -> bool:
        for x1, y1, x2, y2 in self._rects:
            if x1 <= x < x2 and y1 <= y < y2:
                return False
        return True

    def rect_valid(self, x: float, y: float, w: float, h: float) -> bool:
        candidate = (x, y, x + w, y + h)
        return not any(rects_intersect(candidate, rect) for rect in self._rects)
