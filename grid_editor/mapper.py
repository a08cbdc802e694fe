"""Camera state and the pointer <-> grid-cell transform."""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Optional, Tuple

from floorplan.config import Cell, EditorConfig, GridDimensions, Point


@dataclass
class Camera:
    """Pan offset (pixels) plus zoom factor; zoom is kept inside the configured range."""

    pan: Point = (0.0, 0.0)
    zoom: float = 1.0

    def pan_by(self, dx: float, dy: float) -> None:
        self.pan = (self.pan[0] + dx, self.pan[1] + dy)

    def set_zoom(self, zoom: float, config: EditorConfig) -> None:
        # two decimals keeps repeated 0.1 steps from drifting off the ladder
        self.zoom = config.clamp_zoom(round(float(zoom), 2))

    def zoom_in(self, config: EditorConfig) -> None:
        self.set_zoom(self.zoom + config.zoom_step, config)

    def zoom_out(self, config: EditorConfig) -> None:
        self.set_zoom(self.zoom - config.zoom_step, config)

    def reset(self, config: EditorConfig) -> None:
        self.pan = (0.0, 0.0)
        self.set_zoom(1.0, config)


def cell_size(
    container: Tuple[float, float],
    dims: GridDimensions,
    zoom: float,
    min_cell_px: float = 25.0,
) -> Tuple[float, float]:
    cw, ch = container
    return (
        max(cw / max(1, dims.width), min_cell_px) * zoom,
        max(ch / max(1, dims.height), min_cell_px) * zoom,
    )


def fit_zoom(container: Tuple[float, float], dims: GridDimensions, config: Optional[EditorConfig] = None) -> float:
    """Initial zoom that fits the whole grid into the container."""
    config = config or EditorConfig()
    cw, ch = container
    if cw <= 0 or ch <= 0 or dims.width <= 0 or dims.height <= 0:
        return config.clamp_zoom(1.0)
    horizontal = cw / (dims.width * config.base_fit_cell_px)
    vertical = ch / (dims.height * config.base_fit_cell_px)
    return config.clamp_zoom(min(horizontal, vertical) * config.fit_boost)


@dataclass(frozen=True)
class CoordinateMapper:
    """Affine map between canvas pixels and grid cells for one camera/container pairing."""

    container: Tuple[float, float]
    dims: GridDimensions
    zoom: float = 1.0
    pan: Point = (0.0, 0.0)
    min_cell_px: float = 25.0

    @classmethod
    def for_camera(
        cls, container: Tuple[float, float], dims: GridDimensions, camera: Camera, config: EditorConfig
    ) -> "CoordinateMapper":
        return cls(container, dims, camera.zoom, camera.pan, config.min_cell_px)

    @property
    def cell(self) -> Tuple[float, float]:
        return cell_size(self.container, self.dims, self.zoom, self.min_cell_px)

    @property
    def origin(self) -> Point:
        """Top-left of the grid inside the pan-translated frame (grid is centred)."""
        cw, ch = self.cell
        return (
            (self.container[0] - self.dims.width * cw) / 2.0,
            (self.container[1] - self.dims.height * ch) / 2.0,
        )

    @property
    def extent(self) -> Tuple[float, float]:
        cw, ch = self.cell
        return (self.dims.width * cw, self.dims.height * ch)

    def canvas_to_grid(self, px: float, py: float) -> Cell:
        cw, ch = self.cell
        ox, oy = self.origin
        gx = (px - self.pan[0] - ox) / cw
        gy = (py - self.pan[1] - oy) / ch
        return (int(math.floor(gx)), int(math.floor(gy)))

    def grid_to_canvas(self, gx: float, gy: float, with_pan: bool = True) -> Point:
        cw, ch = self.cell
        ox, oy = self.origin
        x = ox + gx * cw
        y = oy + gy * ch
        if with_pan:
            x += self.pan[0]
            y += self.pan[1]
        return (x, y)

    def in_bounds(self, cell: Cell) -> bool:
        return self.dims.contains_cell(cell[0], cell[1])

    def hit_radius(self, ratio: float) -> float:
        return ratio * min(self.cell)
