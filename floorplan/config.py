"""Data models and JSON helpers for warehouse floor plans and editor settings."""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple, get_type_hints, get_origin, get_args

Point = Tuple[float, float]
Cell = Tuple[int, int]
Color = Tuple[int, int, int]


@dataclass(frozen=True)
class GridDimensions:
    width: int = 20
    height: int = 20

    def contains_cell(self, gx: int, gy: int) -> bool:
        return 0 <= gx < self.width and 0 <= gy < self.height


@dataclass
class Shelf:
    """Axis-aligned block occupying [position, position + size) in cells."""

    id: str
    position: Cell
    size: Cell

    @property
    def bounds(self) -> Tuple[int, int, int, int]:
        x, y = self.position
        w, h = self.size
        return (x, y, x + w, y + h)


@dataclass
class Dropoff:
    id: str
    position: Point


@dataclass
class RobotStation:
    id: str
    position: Point
    robot_count: int = 1


@dataclass
class PickupPoint:
    id: str
    position: Point
    shelf_id: str = ""
    side: str = "top"  # top | right | bottom | left


@dataclass
class NavigationPoint:
    id: str
    position: Point
    shelf_id: str = ""


@dataclass
class Robot:
    id: str
    station_id: str
    position: Point


@dataclass
class EnvironmentElements:
    """Complete element collection exchanged with the editor's owner."""

    shelves: List[Shelf] = field(default_factory=list)
    dropoffs: List[Dropoff] = field(default_factory=list)
    robot_stations: List[RobotStation] = field(default_factory=list)
    pickups: List[PickupPoint] = field(default_factory=list)
    robots: List[Robot] = field(default_factory=list)
    navigation_points: List[NavigationPoint] = field(default_factory=list)


@dataclass
class GraphNode:
    id: str
    x: float
    y: float
    kind: str = "navigation"  # pickup | dropoff | robot | navigation


@dataclass
class GraphEdge:
    source: str
    target: str
    weight: float


@dataclass
class Graph:
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def node_lookup(self) -> Dict[str, GraphNode]:
        return {node.id: node for node in self.nodes}


EDITOR_THEME: Dict[str, Color] = {
    "background": (255, 255, 255),
    "grid": (229, 231, 235),
    "shelf": (59, 130, 246),
    "label": (255, 255, 255),
    "dropoff": (16, 185, 129),
    "pickup_selected": (236, 72, 153),
    "pickup_idle": (236, 72, 153),
    "station": (245, 158, 11),
    "navigation": (79, 70, 229),
    "graph_edge": (156, 163, 175),
    "graph_label": (0, 0, 0),
    "preview_valid": (59, 130, 246),
    "preview_invalid": (239, 68, 68),
}


@dataclass
class EditorConfig:
    """Tunables for cell sizing, zoom limits, hit testing and colours."""

    min_cell_px: float = 25.0
    min_zoom: float = 0.5
    max_zoom: float = 2.5
    zoom_step: float = 0.1
    pickup_hit_ratio: float = 0.3
    pickup_radius_ratio: float = 0.2
    dropoff_radius_ratio: float = 0.4
    nav_radius_ratio: float = 0.2
    base_fit_cell_px: float = 50.0
    fit_boost: float = 1.4
    label_font_px: int = 12
    weight_font_px: int = 10
    theme: Dict[str, Color] = field(default_factory=lambda: dict(EDITOR_THEME))

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def color(self, key: str) -> Color:
        return tuple(self.theme.get(key, EDITOR_THEME[key]))  # type: ignore[return-value]


def _dataclass_from_dict(cls, data: Dict) -> object:
    field_types = get_type_hints(cls)
    kwargs = {}
    for key, value in data.items():
        expected = field_types.get(key)
        origin = get_origin(expected)
        if origin is list:
            inner = get_args(expected)[0]
            if hasattr(inner, "__dataclass_fields__"):
                kwargs[key] = [_dataclass_from_dict(inner, v) for v in value]
                continue
        if origin is tuple and isinstance(value, list):
            kwargs[key] = tuple(value)
            continue
        if origin is dict and isinstance(value, dict):
            kwargs[key] = {k: tuple(v) if isinstance(v, list) else v for k, v in value.items()}
            continue
        if origin is not None:
            args = [a for a in get_args(expected) if a is not type(None)]
            if len(args) == 1 and hasattr(args[0], "__dataclass_fields__"):
                if value is None:
                    kwargs[key] = None
                else:
                    kwargs[key] = _dataclass_from_dict(args[0], value)
                continue
        if hasattr(expected, "__dataclass_fields__"):
            kwargs[key] = _dataclass_from_dict(expected, value)
        else:
            kwargs[key] = value
    return cls(**kwargs)


def load_json(path: Path, cls):
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return _dataclass_from_dict(cls, data)


def save_json(path: Path, obj) -> None:
    def _encode(o):
        if hasattr(o, "__dataclass_fields__"):
            return {k: _encode(v) for k, v in asdict(o).items()}
        if isinstance(o, (list, tuple)):
            return [_encode(v) for v in o]
        if isinstance(o, dict):
            return {k: _encode(v) for k, v in o.items()}
        return o

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(_encode(obj), f, indent=2)


def load_editor_config(path: Optional[Path]) -> EditorConfig:
    """Read editor settings, falling back to defaults when no file exists."""
    if path is None or not path.exists():
        return EditorConfig()
    cfg = load_json(path, EditorConfig)
    if cfg.min_zoom <= 0 or cfg.min_zoom > cfg.max_zoom:
        raise ValueError(f"zoom range must satisfy 0 < min_zoom <= max_zoom: {path}")
    if cfg.min_cell_px <= 0:
        raise ValueError(f"min_cell_px must be positive: {path}")
    merged = dict(EDITOR_THEME)
    merged.update(cfg.theme)
    cfg.theme = merged
    return cfg
