from __future__ import annotations

from pathlib import Path
import sys

import pytest

BASE = Path(__file__).resolve().parents[1]
if str(BASE) not in sys.path:
    sys.path.insert(0, str(BASE))

from floorplan import (
    Dropoff,
    EditorConfig,
    EnvironmentElements,
    Graph,
    GraphEdge,
    GraphNode,
    GridDimensions,
    NavigationPoint,
    PickupPoint,
    RobotStation,
    Shelf,
)
from grid_editor import (
    Clear,
    CoordinateMapper,
    DragSession,
    FillCircle,
    FillPolygon,
    FillRect,
    Line,
    PopTranslate,
    PushTranslate,
    Renderer,
    Scene,
    StrokeRect,
    Text,
    ToolMode,
)

CONFIG = EditorConfig()


def _scene(**overrides) -> Scene:
    elements = EnvironmentElements(
        shelves=[Shelf("S1", (2, 2), (3, 2))],
        dropoffs=[Dropoff("D1", (10.5, 10.5))],
        robot_stations=[RobotStation("R1", (1.5, 8.5), robot_count=3)],
        navigation_points=[NavigationPoint("N1", (1.5, 1.5))],
    )
    pickups = [PickupPoint("P1", (2.5, 2.0)), PickupPoint("P2", (3.5, 2.0))]
    graph = Graph(
        nodes=[GraphNode("D1", 10.5, 10.5, "dropoff"), GraphNode("N1", 1.5, 1.5)],
        edges=[GraphEdge("D1", "N1", 12.73), GraphEdge("N1", "ghost", 4.0), GraphEdge("N1", "D1", 12.0)],
    )
    base = dict(
        mapper=CoordinateMapper((500.0, 500.0), GridDimensions(20, 20), 1.0, (15.0, -5.0)),
        elements=elements,
        pickups=pickups,
        selected_pickups=frozenset({"P2"}),
        graph=graph,
        show_graph=True,
        session=DragSession(ToolMode.SHELF, (6, 6), (8, 7), valid=True),
    )
    base.update(overrides)
    return Scene(**base)


def _first(cmds, predicate) -> int:
    return next(i for i, cmd in enumerate(cmds) if predicate(cmd))


def test_frame_is_wrapped_in_pan_translation() -> None:
    cmds = Renderer(CONFIG).render(_scene())
    assert cmds[0] == Clear(CONFIG.color("background"))
    assert cmds[1] == PushTranslate(15.0, -5.0)
    assert cmds[-1] == PopTranslate()


def test_grid_lines_cover_every_boundary() -> None:
    cmds = Renderer(CONFIG).render(_scene())
    grid = [c for c in cmds if isinstance(c, Line) and c.color == CONFIG.color("grid")]
    assert len(grid) == 21 + 21
    assert grid[0] == Line((0.0, 0.0), (0.0, 500.0), CONFIG.color("grid"), 1.0)


def test_layers_are_drawn_back_to_front() -> None:
    cmds = Renderer(CONFIG).render(_scene())
    grid = _first(cmds, lambda c: isinstance(c, Line) and c.color == CONFIG.color("grid"))
    shelf = _first(cmds, lambda c: isinstance(c, FillRect) and c.color == CONFIG.color("shelf"))
    dropoff = _first(cmds, lambda c: isinstance(c, FillCircle) and c.color == CONFIG.color("dropoff"))
    pickup = _first(cmds, lambda c: isinstance(c, FillCircle) and c.color == CONFIG.color("pickup_idle"))
    station = _first(cmds, lambda c: isinstance(c, FillPolygon))
    nav = _first(cmds, lambda c: isinstance(c, FillCircle) and c.color == CONFIG.color("navigation"))
    edge = _first(cmds, lambda c: isinstance(c, Line) and c.color == CONFIG.color("graph_edge"))
    preview = _first(cmds, lambda c: isinstance(c, StrokeRect))
    assert grid < shelf < dropoff < pickup < station < nav < edge < preview


def test_entities_use_stored_coordinates() -> None:
    cmds = Renderer(CONFIG).render(_scene())
    shelf = next(c for c in cmds if isinstance(c, FillRect))
    assert shelf.rect == (50.0, 50.0, 75.0, 50.0)
    labels = {c.text: c for c in cmds if isinstance(c, Text)}
    assert labels["S1"].position == (87.5, 75.0)
    assert labels["D1"].position == (262.5, 262.5)
    assert labels["R1 (3)"].position == (37.5, 212.5)
    dropoff = next(c for c in cmds if isinstance(c, FillCircle) and c.color == CONFIG.color("dropoff"))
    assert dropoff.center == (262.5, 262.5)
    assert dropoff.radius == 10.0
    diamond = next(c for c in cmds if isinstance(c, FillPolygon))
    assert diamond.points[0] == pytest.approx((37.5, 202.5))


def test_pickups_distinguish_selection() -> None:
    cmds = Renderer(CONFIG).render(_scene())
    circles = [c for c in cmds if isinstance(c, FillCircle) and c.color == CONFIG.color("pickup_idle")]
    assert [c.center for c in circles] == [(62.5, 50.0), (87.5, 50.0)]
    assert circles[0].alpha < 255
    assert circles[1].alpha == 255
    assert circles[0].radius == 5.0


def test_station_label_defaults_count_to_one() -> None:
    elements = EnvironmentElements(robot_stations=[RobotStation("R2", (4.5, 4.5), robot_count=0)])
    cmds = Renderer(CONFIG).render(_scene(elements=elements))
    assert any(isinstance(c, Text) and c.text == "R2 (1)" for c in cmds)


def test_graph_skips_unknown_endpoints_and_formats_weights() -> None:
    cmds = Renderer(CONFIG).render(_scene())
    edges = [c for c in cmds if isinstance(c, Line) and c.color == CONFIG.color("graph_edge")]
    assert len(edges) == 2
    weights = [c.text for c in cmds if isinstance(c, Text) and c.color == CONFIG.color("graph_label")]
    assert weights == ["12.73", "12"]


def test_graph_hidden_when_disabled_or_absent() -> None:
    for scene in (_scene(show_graph=False), _scene(graph=None)):
        cmds = Renderer(CONFIG).render(scene)
        assert not any(isinstance(c, Line) and c.color == CONFIG.color("graph_edge") for c in cmds)


def test_preview_colour_follows_validity() -> None:
    valid = Renderer(CONFIG).render(_scene())
    stroke = next(c for c in valid if isinstance(c, StrokeRect))
    assert stroke.color == CONFIG.color("preview_valid")
    assert stroke.dash == (5.0, 5.0)
    assert stroke.rect == (150.0, 150.0, 50.0, 25.0)
    assert not any(isinstance(c, FillRect) and c.color == CONFIG.color("preview_invalid") for c in valid)

    invalid = Renderer(CONFIG).render(_scene(session=DragSession(ToolMode.SHELF, (6, 6), (8, 7), valid=False)))
    stroke = next(c for c in invalid if isinstance(c, StrokeRect))
    assert stroke.color == CONFIG.color("preview_invalid")
    tint = invalid[-2]
    assert isinstance(tint, FillRect) and tint.alpha < 255


def test_no_preview_without_session() -> None:
    cmds = Renderer(CONFIG).render(_scene(session=None))
    assert not any(isinstance(c, StrokeRect) for c in cmds)


def test_render_is_deterministic() -> None:
    renderer = Renderer(CONFIG)
    assert renderer.render(_scene()) == renderer.render(_scene())
