"""Tool modes and the pointer-driven state machine for placement, erasure and panning."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
import math
from typing import Optional, Sequence, Tuple, Union

from floorplan.config import (
    Cell,
    Dropoff,
    EditorConfig,
    EnvironmentElements,
    PickupPoint,
    Point,
    RobotStation,
    Shelf,
)

from .collision import CollisionValidator, rects_intersect
from .mapper import CoordinateMapper


class ToolMode(str, Enum):
    SELECT = "select"
    SHELF = "shelf"
    DROPOFF = "dropoff"
    ROBOT_STATION = "robot_station"
    PICKUP_SELECT = "pickup_select"
    ERASE = "erase"

    @property
    def drags(self) -> bool:
        return self in DRAG_TOOLS


DRAG_TOOLS = frozenset({ToolMode.SHELF, ToolMode.DROPOFF, ToolMode.ROBOT_STATION, ToolMode.ERASE})


class Phase(Enum):
    IDLE = "idle"
    PANNING = "panning"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DragSession:
    tool: ToolMode
    anchor: Cell
    current: Cell
    valid: bool = True

    @property
    def min_corner(self) -> Cell:
        return (min(self.anchor[0], self.current[0]), min(self.anchor[1], self.current[1]))

    @property
    def extent(self) -> Cell:
        return (abs(self.current[0] - self.anchor[0]), abs(self.current[1] - self.anchor[1]))

    @property
    def cell_bounds(self) -> Tuple[int, int, int, int]:
        """Inclusive (min_x, min_y, max_x, max_y) over anchor and current."""
        (x1, y1), (dx, dy) = self.min_corner, self.extent
        return (x1, y1, x1 + dx, y1 + dy)


@dataclass(frozen=True)
class Interaction:
    """Everything the state machine remembers between pointer events."""

    pan_anchor: Optional[Point] = None
    session: Optional[DragSession] = None

    @property
    def phase(self) -> Phase:
        if self.session is not None:
            return Phase.DRAGGING
        if self.pan_anchor is not None:
            return Phase.PANNING
        return Phase.IDLE


# --- Mutation intents --------------------------------------------------------


@dataclass(frozen=True)
class AddShelf:
    position: Cell
    size: Cell


@dataclass(frozen=True)
class AddDropoff:
    position: Point


@dataclass(frozen=True)
class AddRobotStation:
    position: Point


@dataclass(frozen=True)
class EraseRegion:
    min_cell: Cell
    max_cell: Cell


@dataclass(frozen=True)
class TogglePickup:
    pickup_id: str


Intent = Union[AddShelf, AddDropoff, AddRobotStation, EraseRegion, TogglePickup]


@dataclass(frozen=True)
class Transition:
    interaction: Interaction
    pan_delta: Optional[Point] = None
    intent: Optional[Intent] = None
    rejected: Optional[str] = None


@dataclass(frozen=True)
class ToolContext:
    """Per-event view of the world the controller needs to decide a transition."""

    mapper: CoordinateMapper
    validator: CollisionValidator
    pickups: Sequence[PickupPoint] = ()
    read_only: bool = False


class ToolController:
    """Pure transition function: (interaction, tool, event) -> Transition."""

    def __init__(self, config: Optional[EditorConfig] = None) -> None:
        self.config = config or EditorConfig()

    def pointer_down(self, state: Interaction, tool: ToolMode, ctx: ToolContext, pos: Point) -> Transition:
        if state.phase is not Phase.IDLE:
            return Transition(state)
        if ctx.read_only or tool is ToolMode.SELECT:
            return Transition(Interaction(pan_anchor=pos))
        if tool is ToolMode.PICKUP_SELECT:
            hit = self.pick_pickup(ctx, pos)
            return Transition(state, intent=TogglePickup(hit.id) if hit else None)
        cell = ctx.mapper.canvas_to_grid(*pos)
        if not ctx.mapper.in_bounds(cell):
            return Transition(state)
        session = DragSession(tool=tool, anchor=cell, current=cell)
        return Transition(Interaction(session=replace(session, valid=self.validity(session, ctx.validator))))

    def pointer_move(self, state: Interaction, ctx: ToolContext, pos: Point) -> Transition:
        phase = state.phase
        if phase is Phase.PANNING:
            last = state.pan_anchor
            assert last is not None
            delta = (pos[0] - last[0], pos[1] - last[1])
            return Transition(Interaction(pan_anchor=pos), pan_delta=delta)
        if phase is Phase.DRAGGING:
            session = state.session
            assert session is not None
            cell = ctx.mapper.canvas_to_grid(*pos)
            if not ctx.mapper.in_bounds(cell):
                return Transition(state)
            moved = replace(session, current=cell)
            moved = replace(moved, valid=self.validity(moved, ctx.validator))
            return Transition(Interaction(session=moved))
        return Transition(state)

    def pointer_up(self, state: Interaction, ctx: Optional[ToolContext] = None) -> Transition:
        session = state.session
        if session is None:
            return Transition(Interaction())
        if ctx is not None:
            # shelves may have been replaced since the last move
            session = replace(session, valid=self.validity(session, ctx.validator))
        intent, rejected = self.commit(session)
        return Transition(Interaction(), intent=intent, rejected=rejected)

    def pointer_leave(self, state: Interaction) -> Transition:
        # a drag cut short by leaving the canvas is dropped, never half-committed
        return Transition(Interaction())

    def validity(self, session: DragSession, validator: CollisionValidator) -> bool:
        if session.tool is ToolMode.SHELF:
            (x, y), (w, h) = session.min_corner, session.extent
            return w > 0 and h > 0 and validator.rect_valid(x, y, w, h)
        if session.tool in (ToolMode.DROPOFF, ToolMode.ROBOT_STATION):
            return validator.point_valid(*session.current)
        return True

    def commit(self, session: DragSession) -> Tuple[Optional[Intent], Optional[str]]:
        tool = session.tool
        if tool is ToolMode.SHELF:
            w, h = session.extent
            if w == 0 or h == 0:
                return None, "shelf needs a non-zero width and height"
            if not session.valid:
                return None, "shelf would overlap an existing shelf"
            return AddShelf(position=session.min_corner, size=(w, h)), None
        if tool in (ToolMode.DROPOFF, ToolMode.ROBOT_STATION):
            if not session.valid:
                return None, f"{tool.value} cannot sit inside a shelf"
            cx, cy = session.current
            centre = (cx + 0.5, cy + 0.5)
            if tool is ToolMode.DROPOFF:
                return AddDropoff(centre), None
            return AddRobotStation(centre), None
        if tool is ToolMode.ERASE:
            x1, y1, x2, y2 = session.cell_bounds
            return EraseRegion(min_cell=(x1, y1), max_cell=(x2, y2)), None
        return None, None

    def pick_pickup(self, ctx: ToolContext, pos: Point) -> Optional[PickupPoint]:
        """Nearest pickup to the pointer within the hit threshold, measured on screen."""
        threshold = ctx.mapper.hit_radius(self.config.pickup_hit_ratio)
        best: Optional[PickupPoint] = None
        best_d = threshold
        for pickup in ctx.pickups:
            sx, sy = ctx.mapper.grid_to_canvas(*pickup.position)
            d = math.hypot(pos[0] - sx, pos[1] - sy)
            if d < best_d or (best is None and d <= threshold):
                best_d = d
                best = pickup
        return best


def apply_intent(elements: EnvironmentElements, intent: Intent) -> Optional[EnvironmentElements]:
    """Return the complete updated collection, or None when the intent mutates nothing."""
    if isinstance(intent, AddShelf):
        shelf = Shelf(id=f"S{len(elements.shelves) + 1}", position=intent.position, size=intent.size)
        return replace(elements, shelves=[*elements.shelves, shelf])
    if isinstance(intent, AddDropoff):
        dropoff = Dropoff(id=f"D{len(elements.dropoffs) + 1}", position=intent.position)
        return replace(elements, dropoffs=[*elements.dropoffs, dropoff])
    if isinstance(intent, AddRobotStation):
        station = RobotStation(id=f"R{len(elements.robot_stations) + 1}", position=intent.position)
        return replace(elements, robot_stations=[*elements.robot_stations, station])
    if isinstance(intent, EraseRegion):
        return erase_region(elements, intent.min_cell, intent.max_cell)
    return None


def erase_region(elements: EnvironmentElements, min_cell: Cell, max_cell: Cell) -> EnvironmentElements:
    min_x, min_y = min_cell
    max_x, max_y = max_cell
    box = (min_x, min_y, max_x + 1, max_y + 1)

    def _outside(position: Point) -> bool:
        x, y = position
        return x < min_x or x > max_x or y < min_y or y > max_y

    # pickups, robots and waypoints are derived from the rest and rebuilt by the owner
    return EnvironmentElements(
        shelves=[s for s in elements.shelves if not rects_intersect(s.bounds, box)],
        dropoffs=[d for d in elements.dropoffs if _outside(d.position)],
        robot_stations=[r for r in elements.robot_stations if _outside(r.position)],
        pickups=[],
        robots=[],
        navigation_points=[],
    )
