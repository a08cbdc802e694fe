"""Editor: owns camera/tool/drag state, routes pointer events and re-renders."""
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from floorplan.config import (
    EditorConfig,
    EnvironmentElements,
    GridDimensions,
    Graph,
    PickupPoint,
)

from .collision import CollisionValidator
from .mapper import Camera, CoordinateMapper
from .renderer import DrawCommand, Renderer, Scene
from .tools import (
    AddDropoff,
    AddRobotStation,
    AddShelf,
    DragSession,
    EraseRegion,
    Interaction,
    Phase,
    TogglePickup,
    ToolContext,
    ToolController,
    ToolMode,
    Transition,
    apply_intent,
)

ElementsCallback = Callable[[EnvironmentElements], None]
PickupCallback = Callable[[str], None]


class Editor:
    """Composition root for the grid editor.

    Until ``attach_surface`` supplies a container size every pointer and camera
    operation is a no-op and ``frame`` stays empty. Each handled event that
    changes visible state triggers exactly one render.
    """

    def __init__(
        self,
        dimensions: GridDimensions,
        elements: Optional[EnvironmentElements] = None,
        *,
        on_elements_change: Optional[ElementsCallback] = None,
        on_pickup_toggle: Optional[PickupCallback] = None,
        all_pickups: Optional[Sequence[PickupPoint]] = None,
        selected_pickup_ids: Optional[Iterable[str]] = None,
        graph: Optional[Graph] = None,
        show_graph: bool = False,
        read_only: bool = False,
        initial_zoom: float = 1.0,
        config: Optional[EditorConfig] = None,
        debug_checks: bool = False,
    ) -> None:
        self.config = config or EditorConfig()
        self.dimensions = dimensions
        self.elements = elements or EnvironmentElements()
        self.on_elements_change = on_elements_change
        self.on_pickup_toggle = on_pickup_toggle
        self.all_pickups: Optional[List[PickupPoint]] = list(all_pickups) if all_pickups is not None else None
        self.selected_pickup_ids = frozenset(selected_pickup_ids or ())
        self.graph = graph
        self.show_graph = show_graph
        self.read_only = read_only
        self.tool = ToolMode.SELECT
        self.camera = Camera()
        self.camera.set_zoom(initial_zoom, self.config)
        self.interaction = Interaction()
        self.surface_size: Optional[Tuple[float, float]] = None
        self.controller = ToolController(self.config)
        self.renderer = Renderer(self.config)
        self.frame: List[DrawCommand] = []
        self.render_count = 0
        self.debug_checks = debug_checks
        self.last_warning: Optional[str] = None
        self.status_hint: str = ""

    # --- Setup -----------------------------------------------------------
    @property
    def ready(self) -> bool:
        return self.surface_size is not None

    def attach_surface(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            self.surface_size = None
            self.frame = []
            return
        self.surface_size = (float(width), float(height))
        self._render()

    def resize(self, width: float, height: float) -> None:
        self.attach_surface(width, height)

    @property
    def mapper(self) -> Optional[CoordinateMapper]:
        if self.surface_size is None:
            return None
        return CoordinateMapper.for_camera(self.surface_size, self.dimensions, self.camera, self.config)

    @property
    def phase(self) -> Phase:
        return self.interaction.phase

    @property
    def session(self) -> Optional[DragSession]:
        return self.interaction.session

    @property
    def placement_valid(self) -> bool:
        session = self.interaction.session
        return session.valid if session is not None else True

    @property
    def pickups(self) -> Sequence[PickupPoint]:
        if self.all_pickups is not None:
            return self.all_pickups
        return self.elements.pickups

    # --- Collaborator inputs ----------------------------------------------
    def set_tool(self, tool: ToolMode) -> None:
        self.tool = ToolMode(tool)
        self.status_hint = f"Tool: {self.tool.value}"

    def set_elements(self, elements: EnvironmentElements) -> None:
        self.elements = elements
        session = self.interaction.session
        if session is not None:
            valid = self.controller.validity(session, CollisionValidator(elements.shelves))
            self.interaction = replace(self.interaction, session=replace(session, valid=valid))
        self._render()

    def set_pickups(self, all_pickups: Optional[Sequence[PickupPoint]], selected_ids: Iterable[str] = ()) -> None:
        self.all_pickups = list(all_pickups) if all_pickups is not None else None
        self.selected_pickup_ids = frozenset(selected_ids)
        self._render()

    def set_selected_pickups(self, selected_ids: Iterable[str]) -> None:
        self.selected_pickup_ids = frozenset(selected_ids)
        self._render()

    def set_graph(self, graph: Optional[Graph]) -> None:
        self.graph = graph
        self._render()

    def set_show_graph(self, show: bool) -> None:
        self.show_graph = bool(show)
        self._render()

    def set_read_only(self, read_only: bool) -> None:
        self.read_only = bool(read_only)
        self.interaction = Interaction()
        self._render()

    # --- Camera -----------------------------------------------------------
    def zoom_in(self) -> None:
        if not self.ready:
            return
        self.camera.zoom_in(self.config)
        self._render()

    def zoom_out(self) -> None:
        if not self.ready:
            return
        self.camera.zoom_out(self.config)
        self._render()

    def set_zoom(self, zoom: float) -> None:
        self.camera.set_zoom(zoom, self.config)
        self._render()

    def pan_by(self, dx: float, dy: float) -> None:
        if not self.ready:
            return
        self.camera.pan_by(dx, dy)
        self._render()

    def reset_view(self) -> None:
        if not self.ready:
            return
        self.camera.reset(self.config)
        self._render()

    # --- Pointer events ---------------------------------------------------
    def pointer_down(self, x: float, y: float) -> None:
        ctx = self._context()
        if ctx is None:
            return
        self._apply(self.controller.pointer_down(self.interaction, self.tool, ctx, (x, y)))

    def pointer_move(self, x: float, y: float) -> None:
        if self.interaction.phase is Phase.IDLE:
            return
        ctx = self._context()
        if ctx is None:
            return
        self._apply(self.controller.pointer_move(self.interaction, ctx, (x, y)))

    def pointer_up(self) -> None:
        if not self.ready or self.interaction.phase is Phase.IDLE:
            return
        self._apply(self.controller.pointer_up(self.interaction, self._context()))

    def pointer_leave(self) -> None:
        if not self.ready or self.interaction.phase is Phase.IDLE:
            return
        self._apply(self.controller.pointer_leave(self.interaction))

    # --- Internals --------------------------------------------------------
    def _context(self) -> Optional[ToolContext]:
        mapper = self.mapper
        if mapper is None:
            return None
        return ToolContext(
            mapper=mapper,
            validator=CollisionValidator(self.elements.shelves),
            pickups=self.pickups,
            read_only=self.read_only,
        )

    def _apply(self, transition: Transition) -> None:
        changed = transition.interaction != self.interaction
        self.interaction = transition.interaction
        if transition.pan_delta is not None:
            self.camera.pan_by(*transition.pan_delta)
            changed = True
        if transition.rejected:
            self._flag_warning(transition.rejected)
        intent = transition.intent
        if isinstance(intent, TogglePickup):
            if self.on_pickup_toggle:
                self.on_pickup_toggle(intent.pickup_id)
            self.status_hint = f"Toggled pickup {intent.pickup_id}"
        elif intent is not None and not self.read_only:
            updated = apply_intent(self.elements, intent)
            if updated is not None:
                self.elements = updated
                self.status_hint = self._describe(intent, updated)
                if self.on_elements_change:
                    self.on_elements_change(updated)
                changed = True
        if changed:
            self._render()

    def _describe(self, intent, updated: EnvironmentElements) -> str:
        if isinstance(intent, AddShelf):
            return f"Added shelf {updated.shelves[-1].id}"
        if isinstance(intent, AddDropoff):
            return f"Added dropoff {updated.dropoffs[-1].id}"
        if isinstance(intent, AddRobotStation):
            return f"Added robot station {updated.robot_stations[-1].id}"
        if isinstance(intent, EraseRegion):
            (x1, y1), (x2, y2) = intent.min_cell, intent.max_cell
            return f"Erased ({x1},{y1})-({x2},{y2})"
        return ""

    def _flag_warning(self, message: str) -> None:
        self.last_warning = message
        self.status_hint = message
        if self.debug_checks:
            print(f"[editor][warn] {message}")

    def _render(self) -> None:
        mapper = self.mapper
        if mapper is None:
            return
        scene = Scene(
            mapper=mapper,
            elements=self.elements,
            pickups=self.pickups,
            selected_pickups=self.selected_pickup_ids,
            graph=self.graph,
            show_graph=self.show_graph,
            session=self.interaction.session,
        )
        self.frame = self.renderer.render(scene)
        self.render_count += 1
