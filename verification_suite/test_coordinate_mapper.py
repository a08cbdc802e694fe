from __future__ import annotations

from pathlib import Path
import sys

BASE = Path(__file__).resolve().parents[1]
if str(BASE) not in sys.path:
    sys.path.insert(0, str(BASE))

import pytest

from floorplan import EditorConfig, GridDimensions
from grid_editor import Camera, CoordinateMapper, cell_size, fit_zoom


def _mapper(zoom: float = 1.0, pan=(0.0, 0.0), container=(500.0, 500.0), dims=GridDimensions(20, 20)) -> CoordinateMapper:
    return CoordinateMapper(container, dims, zoom, pan)


def test_cell_size_for_reference_grid() -> None:
    assert cell_size((500.0, 500.0), GridDimensions(20, 20), 1.0) == (25.0, 25.0)
    mapper = _mapper()
    assert mapper.cell == (25.0, 25.0)
    assert mapper.origin == (0.0, 0.0)


def test_cell_size_respects_minimum_and_zoom() -> None:
    # 200 px / 20 cells = 10 px, lifted to the 25 px floor before zooming
    assert cell_size((200.0, 600.0), GridDimensions(20, 20), 2.0) == (50.0, 60.0)


def test_grid_is_centred_in_container() -> None:
    mapper = _mapper(container=(800.0, 500.0))
    cw, _ = mapper.cell
    assert cw == 40.0
    small = _mapper(container=(500.0, 500.0), dims=GridDimensions(10, 10))
    assert small.cell == (50.0, 50.0)
    assert small.origin == (0.0, 0.0)
    zoomed = _mapper(zoom=2.0)
    assert zoomed.origin == (-250.0, -250.0)


def test_canvas_to_grid_floors_and_accounts_for_pan() -> None:
    mapper = _mapper()
    assert mapper.canvas_to_grid(62.5, 62.5) == (2, 2)
    assert mapper.canvas_to_grid(137.5, 112.5) == (5, 4)
    assert mapper.canvas_to_grid(-1.0, 10.0) == (-1, 0)
    panned = _mapper(pan=(50.0, -25.0))
    assert panned.canvas_to_grid(62.5, 62.5) == (0, 3)


def test_grid_to_canvas_with_and_without_pan() -> None:
    mapper = _mapper(pan=(10.0, 20.0))
    assert mapper.grid_to_canvas(2, 3) == (60.0, 95.0)
    assert mapper.grid_to_canvas(2, 3, with_pan=False) == (50.0, 75.0)


@pytest.mark.parametrize("zoom", [0.5, 1.0, 1.7, 2.5])
@pytest.mark.parametrize("pan", [(0.0, 0.0), (37.0, -12.5)])
def test_round_trip_stays_within_one_cell(zoom: float, pan) -> None:
    mapper = _mapper(zoom=zoom, pan=pan)
    cw, ch = mapper.cell
    for px in (0.0, 13.3, 250.0, 333.7, 499.0):
        for py in (1.0, 99.9, 420.25):
            cx, cy = mapper.grid_to_canvas(*mapper.canvas_to_grid(px, py))
            assert -1e-9 <= px - cx < cw
            assert -1e-9 <= py - cy < ch


def test_in_bounds_and_hit_radius() -> None:
    mapper = _mapper()
    assert mapper.in_bounds((0, 0))
    assert mapper.in_bounds((19, 19))
    assert not mapper.in_bounds((20, 5))
    assert not mapper.in_bounds((-1, 5))
    assert mapper.hit_radius(0.3) == pytest.approx(7.5)


def test_fit_zoom_matches_container() -> None:
    assert fit_zoom((500.0, 500.0), GridDimensions(20, 20)) == pytest.approx(0.7)
    # clamped into the zoom range
    assert fit_zoom((5000.0, 5000.0), GridDimensions(5, 5)) == 2.5
    assert fit_zoom((100.0, 100.0), GridDimensions(50, 50)) == 0.5
    assert fit_zoom((0.0, 500.0), GridDimensions(20, 20)) == 1.0


def test_camera_zoom_is_bounded() -> None:
    config = EditorConfig()
    camera = Camera()
    for _ in range(40):
        camera.zoom_in(config)
        assert 0.5 <= camera.zoom <= 2.5
    assert camera.zoom == 2.5
    for _ in range(40):
        camera.zoom_out(config)
        assert 0.5 <= camera.zoom <= 2.5
    assert camera.zoom == 0.5


def test_camera_steps_do_not_drift() -> None:
    config = EditorConfig()
    camera = Camera()
    for _ in range(3):
        camera.zoom_in(config)
    assert camera.zoom == 1.3
    camera.pan_by(12.0, -4.0)
    camera.reset(config)
    assert camera.pan == (0.0, 0.0)
    assert camera.zoom == 1.0
