"""Derived floor-plan content: pickup/navigation points, robots and the visibility graph."""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .config import (
    EnvironmentElements,
    GridDimensions,
    Graph,
    GraphEdge,
    GraphNode,
    NavigationPoint,
    PickupPoint,
    Point,
    Robot,
    RobotStation,
    Shelf,
)

PICKUP_NUDGE = 0.05
_SIDE_NUDGE = {
    "top": (0.0, -PICKUP_NUDGE),
    "right": (PICKUP_NUDGE, 0.0),
    "bottom": (0.0, PICKUP_NUDGE),
    "left": (-PICKUP_NUDGE, 0.0),
}


def _within(point: Point, dims: GridDimensions) -> bool:
    x, y = point
    return 0 <= x <= dims.width and 0 <= y <= dims.height


def generate_pickup_points(shelves: Sequence[Shelf], dims: GridDimensions) -> List[PickupPoint]:
    """One pickup per unit of shelf edge, walking each shelf clockwise from the top-left."""
    candidates: List[PickupPoint] = []
    counter = 1
    for shelf in shelves:
        x, y = shelf.position
        w, h = shelf.size
        ring: List[Tuple[Point, str]] = []
        ring.extend(((x + i + 0.5, float(y)), "top") for i in range(w))
        ring.extend(((float(x + w), y + i + 0.5), "right") for i in range(h))
        ring.extend(((x + i + 0.5, float(y + h)), "bottom") for i in reversed(range(w)))
        ring.extend(((float(x), y + i + 0.5), "left") for i in reversed(range(h)))
        for pos, side in ring:
            candidates.append(PickupPoint(id=f"P{counter}", position=pos, shelf_id=shelf.id, side=side))
            counter += 1
    seen: Set[Point] = set()
    unique: List[PickupPoint] = []
    for pickup in candidates:
        if not _within(pickup.position, dims) or pickup.position in seen:
            continue
        seen.add(pickup.position)
        unique.append(pickup)
    return unique


def _on_any_shelf(point: Point, shelves: Sequence[Shelf]) -> bool:
    px, py = point
    for shelf in shelves:
        x1, y1, x2, y2 = shelf.bounds
        if x1 <= px <= x2 and y1 <= py <= y2:
            return True
    return False


def generate_navigation_points(shelves: Sequence[Shelf], dims: GridDimensions) -> List[NavigationPoint]:
    """Waypoints half a cell outside every shelf corner."""
    candidates: List[NavigationPoint] = []
    counter = 1
    for shelf in shelves:
        x1, y1, x2, y2 = shelf.bounds
        corners = [
            (x1 - 0.5, y1 - 0.5),
            (x2 + 0.5, y1 - 0.5),
            (x2 + 0.5, y2 + 0.5),
            (x1 - 0.5, y2 + 0.5),
        ]
        for corner in corners:
            candidates.append(NavigationPoint(id=f"N{counter}", position=corner, shelf_id=shelf.id))
            counter += 1
    seen: Set[Point] = set()
    unique: List[NavigationPoint] = []
    for nav in candidates:
        if not _within(nav.position, dims) or _on_any_shelf(nav.position, shelves):
            continue
        if nav.position in seen:
            continue
        seen.add(nav.position)
        unique.append(nav)
    return unique


def generate_robots(stations: Sequence[RobotStation], counts: Optional[Dict[str, int]] = None) -> List[Robot]:
    """Expand each station into its robots; explicit counts override the station's own."""
    counts = counts or {}
    robots: List[Robot] = []
    for station in stations:
        count = counts.get(station.id) or station.robot_count or 1
        number = station.id[1:] if len(station.id) > 1 else station.id
        for k in range(count):
            robots.append(Robot(id=f"R{number}_{k + 1}", station_id=station.id, position=tuple(station.position)))
    return robots


def segment_crosses_shelf(a: Point, b: Point, shelves: Sequence[Shelf]) -> bool:
    """True if the closed segment a-b touches any shelf rectangle (boundary included)."""
    x1, y1 = a
    x2, y2 = b
    dx = x2 - x1
    dy = y2 - y1
    for shelf in shelves:
        left, top, right, bottom = shelf.bounds
        if abs(dx) < 1e-3:
            if x1 < left or x1 > right:
                continue
            if not (max(y1, y2) < top or min(y1, y2) > bottom):
                return True
            continue
        m = dy / dx
        b0 = y1 - m * x1
        for edge_x in (left, right):
            edge_y = m * edge_x + b0
            if top <= edge_y <= bottom and min(x1, x2) <= edge_x <= max(x1, x2):
                return True
        if abs(m) < 1e-12:
            continue
        for edge_y in (top, bottom):
            edge_x = (edge_y - b0) / m
            if left <= edge_x <= right and min(y1, y2) <= edge_y <= max(y1, y2):
                return True
    return False


def _skip_pickup_pair(a: PickupPoint, b: PickupPoint, pa: Point, pb: Point) -> bool:
    if a.shelf_id == b.shelf_id:
        return True
    horizontal = {"top", "bottom"}
    vertical = {"left", "right"}
    if {a.side, b.side} <= horizontal and pa[1] == pb[1]:
        return True
    if {a.side, b.side} <= vertical and pa[0] == pb[0]:
        return True
    return False


def build_graph(elements: EnvironmentElements, robots: Optional[Sequence[Robot]] = None) -> Graph:
    """Visibility graph over pickups, dropoffs, navigation points and robots."""
    robots = list(robots if robots is not None else elements.robots)
    entries: List[Tuple[str, str, Point, Optional[PickupPoint]]] = []
    entries.extend((p.id, "pickup", tuple(p.position), p) for p in elements.pickups)
    entries.extend((d.id, "dropoff", tuple(d.position), None) for d in elements.dropoffs)
    entries.extend((n.id, "navigation", tuple(n.position), None) for n in elements.navigation_points)
    entries.extend((r.id, "robot", tuple(r.position), None) for r in robots)

    graph = Graph(nodes=[GraphNode(id=ident, x=pos[0], y=pos[1], kind=kind) for ident, kind, pos, _ in entries])

    def _anchor(pos: Point, pickup: Optional[PickupPoint]) -> Point:
        if pickup is None:
            return pos
        nx, ny = _SIDE_NUDGE.get(pickup.side, (0.0, 0.0))
        return (pos[0] + nx, pos[1] + ny)

    for i in range(len(entries)):
        id_a, _, pos_a, pick_a = entries[i]
        pa = _anchor(pos_a, pick_a)
        for j in range(i + 1, len(entries)):
            id_b, _, pos_b, pick_b = entries[j]
            pb = _anchor(pos_b, pick_b)
            if pick_a is not None and pick_b is not None and _skip_pickup_pair(pick_a, pick_b, pa, pb):
                continue
            if segment_crosses_shelf(pa, pb, elements.shelves):
                continue
            weight = round(math.hypot(pb[0] - pa[0], pb[1] - pa[1]), 2)
            graph.edges.append(GraphEdge(source=id_a, target=id_b, weight=weight))
            graph.edges.append(GraphEdge(source=id_b, target=id_a, weight=weight))
    return graph


def refresh_derived(elements: EnvironmentElements, dims: GridDimensions) -> Tuple[List[PickupPoint], EnvironmentElements]:
    """Regenerate pickups and waypoints after the shelves changed.

    Returns the full pickup catalogue plus a copy of the elements whose
    navigation points are rebuilt and whose selected pickups are cleared.
    """
    all_pickups = generate_pickup_points(elements.shelves, dims)
    refreshed = EnvironmentElements(
        shelves=list(elements.shelves),
        dropoffs=list(elements.dropoffs),
        robot_stations=list(elements.robot_stations),
        pickups=[],
        robots=list(elements.robots),
        navigation_points=generate_navigation_points(elements.shelves, dims),
    )
    return all_pickups, refreshed


def toggle_selection(selected: Iterable[str], pickup_id: str) -> Set[str]:
    updated = set(selected)
    if pickup_id in updated:
        updated.discard(pickup_id)
    else:
        updated.add(pickup_id)
    return updated


def normalize_selection(value: Union[None, str, Iterable[str]]) -> Set[str]:
    """Coerce legacy single-id or list selections into a set of ids."""
    if value is None:
        return set()
    if isinstance(value, str):
        return {value} if value else set()
    return set(value)


def selected_pickups(all_pickups: Sequence[PickupPoint], selected: Set[str]) -> List[PickupPoint]:
    return [p for p in all_pickups if p.id in selected]
