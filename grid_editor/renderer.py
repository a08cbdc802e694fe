"""Frame composition: turns editor state into an ordered list of draw commands.

The renderer never touches a real surface. It produces plain dataclasses
(``FillRect``, ``Text``, ...) in back-to-front order; a backend such as the
pygame executor in ``apps.shared_ui`` replays them. Because a frame is a pure
function of its inputs, rendering twice for the same state yields equal lists.

Layer order, bottom to top:

1. grid lines
2. shelves (+ id label)
3. drop-offs (+ id label)
4. pickup points (selected vs. idle colour)
5. robot stations (diamond + "id (count)" label)
6. navigation points
7. graph overlay (edges + weight labels), when enabled
8. drag preview (dashed outline, tinted when invalid)

Everything between ``PushTranslate`` and ``PopTranslate`` is expressed in the
pan-translated frame, so positions come from ``grid_to_canvas(..., with_pan=False)``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, List, Optional, Sequence, Tuple, Union

from floorplan.config import Color, EditorConfig, EnvironmentElements, Graph, PickupPoint, Point

from .mapper import CoordinateMapper
from .tools import DragSession


@dataclass(frozen=True)
class Clear:
    color: Color


@dataclass(frozen=True)
class PushTranslate:
    dx: float
    dy: float


@dataclass(frozen=True)
class PopTranslate:
    pass


@dataclass(frozen=True)
class Line:
    start: Point
    end: Point
    color: Color
    width: float = 1.0
    alpha: int = 255


@dataclass(frozen=True)
class FillRect:
    rect: Tuple[float, float, float, float]  # x, y, w, h
    color: Color
    alpha: int = 255


@dataclass(frozen=True)
class StrokeRect:
    rect: Tuple[float, float, float, float]
    color: Color
    width: float = 1.0
    dash: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class FillCircle:
    center: Point
    radius: float
    color: Color
    alpha: int = 255


@dataclass(frozen=True)
class FillPolygon:
    points: Tuple[Point, ...]
    color: Color
    alpha: int = 255


@dataclass(frozen=True)
class Text:
    text: str
    position: Point
    color: Color
    size: int = 12
    alpha: int = 255


DrawCommand = Union[Clear, PushTranslate, PopTranslate, Line, FillRect, StrokeRect, FillCircle, FillPolygon, Text]


@dataclass
class Scene:
    """Inputs for one frame."""

    mapper: CoordinateMapper
    elements: EnvironmentElements
    pickups: Sequence[PickupPoint] = ()
    selected_pickups: AbstractSet[str] = frozenset()
    graph: Optional[Graph] = None
    show_graph: bool = False
    session: Optional[DragSession] = None


def _format_weight(weight: float) -> str:
    value = float(weight)
    return str(int(value)) if value.is_integer() else str(value)


@dataclass
class Renderer:
    config: EditorConfig = field(default_factory=EditorConfig)

    def render(self, scene: Scene) -> List[DrawCommand]:
        cmds: List[DrawCommand] = [Clear(self.config.color("background"))]
        mapper = scene.mapper
        cmds.append(PushTranslate(*mapper.pan))
        self._grid(cmds, mapper)
        self._shelves(cmds, scene)
        self._dropoffs(cmds, scene)
        self._pickups(cmds, scene)
        self._stations(cmds, scene)
        self._navigation(cmds, scene)
        if scene.show_graph and scene.graph:
            self._graph(cmds, scene)
        if scene.session is not None:
            self._preview(cmds, mapper, scene.session)
        cmds.append(PopTranslate())
        return cmds

    def _to_local(self, mapper: CoordinateMapper, point: Point) -> Point:
        return mapper.grid_to_canvas(point[0], point[1], with_pan=False)

    def _grid(self, cmds: List[DrawCommand], mapper: CoordinateMapper) -> None:
        color = self.config.color("grid")
        dims = mapper.dims
        for x in range(dims.width + 1):
            cmds.append(Line(self._to_local(mapper, (x, 0)), self._to_local(mapper, (x, dims.height)), color, 1.0))
        for y in range(dims.height + 1):
            cmds.append(Line(self._to_local(mapper, (0, y)), self._to_local(mapper, (dims.width, y)), color, 1.0))

    def _shelves(self, cmds: List[DrawCommand], scene: Scene) -> None:
        mapper = scene.mapper
        cw, ch = mapper.cell
        for shelf in scene.elements.shelves:
            x, y = shelf.position
            w, h = shelf.size
            left, top = self._to_local(mapper, (x, y))
            cmds.append(FillRect((left, top, w * cw, h * ch), self.config.color("shelf")))
            centre = self._to_local(mapper, (x + w / 2.0, y + h / 2.0))
            cmds.append(Text(shelf.id, centre, self.config.color("label"), self.config.label_font_px))

    def _dropoffs(self, cmds: List[DrawCommand], scene: Scene) -> None:
        mapper = scene.mapper
        radius = mapper.hit_radius(self.config.dropoff_radius_ratio)
        for dropoff in scene.elements.dropoffs:
            centre = self._to_local(mapper, dropoff.position)
            cmds.append(FillCircle(centre, radius, self.config.color("dropoff")))
            cmds.append(Text(dropoff.id, centre, self.config.color("label"), self.config.label_font_px))

    def _pickups(self, cmds: List[DrawCommand], scene: Scene) -> None:
        mapper = scene.mapper
        radius = mapper.hit_radius(self.config.pickup_radius_ratio)
        for pickup in scene.pickups:
            centre = self._to_local(mapper, pickup.position)
            if pickup.id in scene.selected_pickups:
                cmds.append(FillCircle(centre, radius, self.config.color("pickup_selected")))
            else:
                cmds.append(FillCircle(centre, radius, self.config.color("pickup_idle"), alpha=77))

    def _stations(self, cmds: List[DrawCommand], scene: Scene) -> None:
        mapper = scene.mapper
        for station in scene.elements.robot_stations:
            x, y = station.position
            diamond = tuple(
                self._to_local(mapper, p) for p in ((x, y - 0.4), (x + 0.4, y), (x, y + 0.4), (x - 0.4, y))
            )
            cmds.append(FillPolygon(diamond, self.config.color("station")))
            label = f"{station.id} ({station.robot_count or 1})"
            cmds.append(Text(label, self._to_local(mapper, (x, y)), self.config.color("label"), self.config.label_font_px))

    def _navigation(self, cmds: List[DrawCommand], scene: Scene) -> None:
        mapper = scene.mapper
        radius = mapper.hit_radius(self.config.nav_radius_ratio)
        for nav in scene.elements.navigation_points or []:
            cmds.append(FillCircle(self._to_local(mapper, nav.position), radius, self.config.color("navigation")))

    def _graph(self, cmds: List[DrawCommand], scene: Scene) -> None:
        assert scene.graph is not None
        mapper = scene.mapper
        nodes = scene.graph.node_lookup()
        for edge in scene.graph.edges:
            source = nodes.get(edge.source)
            target = nodes.get(edge.target)
            if source is None or target is None:
                continue
            start = self._to_local(mapper, (source.x, source.y))
            end = self._to_local(mapper, (target.x, target.y))
            cmds.append(Line(start, end, self.config.color("graph_edge"), 1.5, alpha=178))
            mid = self._to_local(mapper, ((source.x + target.x) / 2.0, (source.y + target.y) / 2.0))
            cmds.append(
                Text(_format_weight(edge.weight), mid, self.config.color("graph_label"), self.config.weight_font_px, alpha=178)
            )

    def _preview(self, cmds: List[DrawCommand], mapper: CoordinateMapper, session: DragSession) -> None:
        cw, ch = mapper.cell
        (x, y), (w, h) = session.min_corner, session.extent
        left, top = self._to_local(mapper, (x, y))
        rect = (left, top, w * cw, h * ch)
        key = "preview_valid" if session.valid else "preview_invalid"
        cmds.append(StrokeRect(rect, self.config.color(key), 2.0, dash=(5.0, 5.0)))
        if not session.valid:
            cmds.append(FillRect(rect, self.config.color("preview_invalid"), alpha=51))
