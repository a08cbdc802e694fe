from __future__ import annotations

import json
from pathlib import Path
import sys

BASE = Path(__file__).resolve().parents[1]
if str(BASE) not in sys.path:
    sys.path.insert(0, str(BASE))

import pytest

from floorplan import (
    EDITOR_THEME,
    Dropoff,
    EditorConfig,
    EnvironmentElements,
    PickupPoint,
    RobotStation,
    Shelf,
    load_editor_config,
    load_json,
    save_json,
)


def test_missing_settings_fall_back_to_defaults(tmp_path: Path) -> None:
    cfg = load_editor_config(tmp_path / "nope.json")
    assert cfg == EditorConfig()
    assert load_editor_config(None) == EditorConfig()


def test_partial_settings_keep_defaults_and_merge_theme(tmp_path: Path) -> None:
    path = tmp_path / "editor.json"
    path.write_text(json.dumps({"max_zoom": 3.0, "theme": {"shelf": [1, 2, 3]}}), encoding="utf-8")
    cfg = load_editor_config(path)
    assert cfg.max_zoom == 3.0
    assert cfg.min_zoom == 0.5
    assert cfg.color("shelf") == (1, 2, 3)
    assert cfg.color("dropoff") == EDITOR_THEME["dropoff"]
    assert cfg.clamp_zoom(2.8) == 2.8


def test_inverted_zoom_range_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "editor.json"
    path.write_text(json.dumps({"min_zoom": 2.0, "max_zoom": 1.0}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_editor_config(path)


def test_settings_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "editor.json"
    cfg = EditorConfig(zoom_step=0.25, pickup_hit_ratio=0.5)
    save_json(path, cfg)
    assert load_editor_config(path) == cfg


def test_layout_round_trip(tmp_path: Path) -> None:
    elements = EnvironmentElements(
        shelves=[Shelf("S1", (2, 2), (3, 2))],
        dropoffs=[Dropoff("D1", (10.5, 10.5))],
        robot_stations=[RobotStation("R1", (1.5, 1.5), robot_count=2)],
        pickups=[PickupPoint("P1", (2.5, 2.0), "S1", "top")],
    )
    path = tmp_path / "layout.json"
    save_json(path, elements)
    assert load_json(path, EnvironmentElements) == elements
