"""Headless smoke test for replaying editor frames onto a pygame surface."""
from __future__ import annotations

import os
import sys
from pathlib import Path

# Allow pygame to initialize without a real display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

import pygame  # noqa: E402

from apps.shared_ui import CHROME_THEME, CommandPainter, HoverMenu, darken_color, lighten_color, with_alpha  # noqa: E402
from floorplan import (  # noqa: E402
    Dropoff,
    EditorConfig,
    EnvironmentElements,
    GridDimensions,
    PickupPoint,
    RobotStation,
    Shelf,
    build_graph,
)
from grid_editor import Editor, ToolMode  # noqa: E402


def _editor() -> Editor:
    elements = EnvironmentElements(
        shelves=[Shelf("S1", (2, 2), (3, 2))],
        dropoffs=[Dropoff("D1", (10.5, 10.5))],
        robot_stations=[RobotStation("R1", (15.5, 4.5))],
        pickups=[PickupPoint("P1", (2.5, 2.0), "S1", "top")],
    )
    editor = Editor(
        GridDimensions(20, 20),
        elements,
        selected_pickup_ids={"P1"},
        graph=build_graph(elements),
        show_graph=True,
    )
    editor.attach_surface(500, 500)
    return editor


def test_palette_helpers() -> None:
    assert lighten_color((0, 0, 0), 0.5) == (127, 127, 127)
    assert darken_color((200, 100, 50), 1.0) == (0, 0, 0)
    assert with_alpha((1, 2, 3), 300) == (1, 2, 3, 255)


def test_frame_paints_onto_surface() -> None:
    pygame.init()
    try:
        editor = _editor()
        editor.set_tool(ToolMode.SHELF)
        editor.pointer_down(162.5, 162.5)
        editor.pointer_move(212.5, 212.5)
        surface = pygame.Surface((500, 500))
        painter = CommandPainter()
        assert painter.paint(surface, editor.frame) == len(editor.frame)
        cfg = EditorConfig()
        # interior of S1 at grid (2.2, 3.8) carries the shelf colour
        assert tuple(surface.get_at((55, 95)))[:3] == cfg.color("shelf")
        # outside every entity the background shows through
        assert tuple(surface.get_at((490, 490)))[:3] == cfg.color("background")
    finally:
        pygame.quit()


def test_translate_stack_shifts_output() -> None:
    pygame.init()
    try:
        editor = _editor()
        editor.pan_by(40, 0)
        surface = pygame.Surface((500, 500))
        CommandPainter().paint(surface, editor.frame)
        cfg = EditorConfig()
        assert tuple(surface.get_at((55 + 40, 95)))[:3] == cfg.color("shelf")
    finally:
        pygame.quit()


def test_hover_menu_tints_checked_entries() -> None:
    pygame.init()
    try:
        menu = HoverMenu(
            [("View", [{"label": "Show graph", "checked": lambda: True}, {"label": "Read-only", "checked": lambda: False}])]
        )
        menu.open_menu = 0
        surface = pygame.Surface((300, 200))
        menu.draw(surface)
        checked_rect, plain_rect = menu.entry_rects(0)
        tint = lighten_color(CHROME_THEME["accent"], 0.85)
        assert tuple(surface.get_at((checked_rect.right - 3, checked_rect.centery)))[:3] == tint
        assert tuple(surface.get_at((plain_rect.right - 3, plain_rect.centery)))[:3] == CHROME_THEME["panel"]
    finally:
        pygame.quit()
