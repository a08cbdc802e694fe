"""Floor-plan editor app: pygame window around the grid editor core."""
from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pygame
import pygame_gui

sys.path.append(str(Path(__file__).resolve().parent.parent))

from floorplan import (  # noqa: E402
    EnvironmentElements,
    GridDimensions,
    PickupPoint,
    build_graph,
    generate_robots,
    load_editor_config,
    load_json,
    refresh_derived,
    save_json,
    selected_pickups,
    toggle_selection,
)
from grid_editor import Editor, ToolMode, fit_zoom  # noqa: E402
from apps.shared_ui import CHROME_THEME, CommandPainter, HoverMenu  # noqa: E402

TOOL_LABELS: List[Tuple[ToolMode, str]] = [
    (ToolMode.SELECT, "Pan"),
    (ToolMode.SHELF, "Shelf"),
    (ToolMode.DROPOFF, "Dropoff"),
    (ToolMode.ROBOT_STATION, "Station"),
    (ToolMode.PICKUP_SELECT, "Pickups"),
    (ToolMode.ERASE, "Erase"),
]
TOOL_KEYS: Dict[int, ToolMode] = {
    pygame.K_1: ToolMode.SELECT,
    pygame.K_2: ToolMode.SHELF,
    pygame.K_3: ToolMode.DROPOFF,
    pygame.K_4: ToolMode.ROBOT_STATION,
    pygame.K_5: ToolMode.PICKUP_SELECT,
    pygame.K_6: ToolMode.ERASE,
}


class EditorApp:
    def __init__(
        self,
        dimensions: GridDimensions = GridDimensions(20, 20),
        settings_path: Optional[Path] = None,
        layout_path: Optional[Path] = None,
    ) -> None:
        pygame.init()
        pygame.display.set_caption("Floor-plan Editor")
        self.window_size = (1280, 800)
        self.window_surface = pygame.display.set_mode(self.window_size)
        self.manager = pygame_gui.UIManager(self.window_size)
        self.clock = pygame.time.Clock()
        self.running = True

        self.base_path = Path(__file__).resolve().parent.parent
        self.settings_path = settings_path or self.base_path / "settings" / "editor.json"
        self.layout_path = layout_path or self.base_path / "layouts" / "floorplan.json"
        self.status_hint = ""
        if not self.settings_path.exists():
            print(f"[app] no editor settings at {self.settings_path}, using defaults")
        try:
            self.config = load_editor_config(self.settings_path)
        except ValueError as exc:
            print(f"[app] bad editor settings, using defaults: {exc}")
            self.status_hint = "Editor settings invalid; using defaults"
            self.config = load_editor_config(None)

        self.dimensions = dimensions
        self.elements = EnvironmentElements()
        self.all_pickups: List[PickupPoint] = []
        self.selected: Set[str] = set()
        self.show_graph = False

        self.canvas_rect = pygame.Rect(20, 84, self.window_size[0] - 40, self.window_size[1] - 124)
        self.canvas = pygame.Surface(self.canvas_rect.size)
        self.painter = CommandPainter()
        self.pointer_inside = False

        print(f"[app] grid {dimensions.width}x{dimensions.height}, canvas {self.canvas_rect.size}")
        self.editor = Editor(
            dimensions,
            self.elements,
            on_elements_change=self._on_elements_change,
            on_pickup_toggle=self._on_pickup_toggle,
            all_pickups=self.all_pickups,
            selected_pickup_ids=self.selected,
            initial_zoom=fit_zoom(self.canvas_rect.size, dimensions, self.config),
            config=self.config,
            debug_checks=True,
        )
        self.editor.attach_surface(*self.canvas_rect.size)
        self._build_ui()
        self._set_tool(ToolMode.SELECT)
        if not self.status_hint:
            self.status_hint = "Pick a tool, drag on the grid. Wheel zooms, Pan tool drags the view."

    # --- UI construction -------------------------------------------------
    def _build_ui(self) -> None:
        self.tool_buttons: Dict[ToolMode, pygame_gui.elements.UIButton] = {}
        x = 20
        for tool, label in TOOL_LABELS:
            self.tool_buttons[tool] = pygame_gui.elements.UIButton(
                relative_rect=pygame.Rect(x, 44, 90, 30), text=label, manager=self.manager
            )
            x += 96
        right = self.window_size[0] - 20
        self.btn_zoom_out = pygame_gui.elements.UIButton(
            relative_rect=pygame.Rect(right - 200, 44, 40, 30), text="-", manager=self.manager
        )
        self.btn_zoom_in = pygame_gui.elements.UIButton(
            relative_rect=pygame.Rect(right - 156, 44, 40, 30), text="+", manager=self.manager
        )
        self.btn_reset = pygame_gui.elements.UIButton(
            relative_rect=pygame.Rect(right - 112, 44, 112, 30), text="Reset view", manager=self.manager
        )
        tool_entries = [
            {"label": label, "action": (lambda t=tool: self._set_tool(t)), "checked": (lambda t=tool: self.editor.tool is t)}
            for tool, label in TOOL_LABELS
        ]
        view_entries = [
            {"label": "Zoom in", "action": self.editor.zoom_in},
            {"label": "Zoom out", "action": self.editor.zoom_out},
            {"label": "Fit to window", "action": self._fit_view},
            {"label": "Reset view", "action": self.editor.reset_view},
            {"label": "Show graph", "action": self._toggle_graph, "checked": lambda: self.show_graph},
            {"label": "Read-only", "action": self._toggle_read_only, "checked": lambda: self.editor.read_only},
        ]
        layout_entries = [
            {"label": "Save layout", "action": self._save_layout},
            {"label": "Load layout", "action": self._load_layout},
            {"label": "Clear all", "action": self._clear_layout},
        ]
        self.hover_menu = HoverMenu([("Tools", tool_entries), ("View", view_entries), ("Layout", layout_entries)])

    # --- Collaborator side of the editor ------------------------------------
    def _on_elements_change(self, updated: EnvironmentElements) -> None:
        shelves_changed = updated.shelves != self.elements.shelves
        self.elements = updated
        self.selected = {p.id for p in updated.pickups}
        if shelves_changed or not updated.navigation_points:
            self._refresh_layout()
        if self.show_graph:
            self._rebuild_graph()

    def _on_pickup_toggle(self, pickup_id: str) -> None:
        self.selected = toggle_selection(self.selected, pickup_id)
        self.elements = replace(self.elements, pickups=selected_pickups(self.all_pickups, self.selected))
        self.editor.set_elements(self.elements)
        self.editor.set_selected_pickups(self.selected)
        if self.show_graph:
            self._rebuild_graph()

    def _refresh_layout(self) -> None:
        self.all_pickups, refreshed = refresh_derived(self.elements, self.dimensions)
        known = {p.id for p in self.all_pickups}
        self.selected = {pid for pid in self.selected if pid in known}
        self.elements = replace(refreshed, pickups=selected_pickups(self.all_pickups, self.selected))
        self.editor.set_elements(self.elements)
        self.editor.set_pickups(self.all_pickups, self.selected)

    def _rebuild_graph(self) -> None:
        robots = generate_robots(self.elements.robot_stations)
        graph = build_graph(self.elements, robots)
        self.editor.set_graph(graph)
        self.status_hint = f"Graph: {len(graph.nodes)} nodes, {len(graph.edges)} edges"

    # --- Actions ------------------------------------------------------------
    def _set_tool(self, tool: ToolMode) -> None:
        self.editor.set_tool(tool)
        for mode, button in self.tool_buttons.items():
            if mode is tool:
                button.select()
            else:
                button.unselect()
        self.status_hint = self.editor.status_hint

    def _fit_view(self) -> None:
        self.editor.reset_view()
        self.editor.set_zoom(fit_zoom(self.canvas_rect.size, self.dimensions, self.config))
        self.status_hint = f"Zoom {self.editor.camera.zoom:.2f}"

    def _toggle_graph(self) -> None:
        self.show_graph = not self.show_graph
        if self.show_graph:
            self._rebuild_graph()
        else:
            self.status_hint = "Graph hidden"
        self.editor.set_show_graph(self.show_graph)

    def _toggle_read_only(self) -> None:
        self.editor.set_read_only(not self.editor.read_only)
        self.status_hint = "Read-only: drag to pan" if self.editor.read_only else "Editing enabled"

    def _save_layout(self) -> None:
        save_json(self.layout_path, self.elements)
        print(f"[app] saved layout to {self.layout_path}")
        self.status_hint = f"Saved {self.layout_path.name}"

    def _load_layout(self) -> None:
        if not self.layout_path.exists():
            self.status_hint = f"No layout at {self.layout_path}"
            return
        try:
            loaded = load_json(self.layout_path, EnvironmentElements)
        except (ValueError, TypeError, KeyError) as exc:
            print(f"[app] failed to load layout {self.layout_path}: {exc}")
            self.status_hint = "Layout file is malformed"
            return
        self.selected = {p.id for p in loaded.pickups}
        self.elements = loaded
        self._refresh_layout()
        if self.show_graph:
            self._rebuild_graph()
        print(f"[app] loaded layout from {self.layout_path}")
        self.status_hint = f"Loaded {self.layout_path.name}"

    def _clear_layout(self) -> None:
        self.elements = EnvironmentElements()
        self.selected = set()
        self._refresh_layout()
        if self.show_graph:
            self._rebuild_graph()
        self.status_hint = "Cleared layout"

    # --- Event loop ---------------------------------------------------------
    def _local(self, pos: Tuple[int, int]) -> Tuple[float, float]:
        return (float(pos[0] - self.canvas_rect.x), float(pos[1] - self.canvas_rect.y))

    def _handle_pointer(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and self.canvas_rect.collidepoint(event.pos):
            self.editor.pointer_down(*self._local(event.pos))
            self.status_hint = self.editor.status_hint or self.status_hint
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.editor.pointer_up()
            self.status_hint = self.editor.status_hint or self.status_hint
        elif event.type == pygame.MOUSEMOTION:
            inside = self.canvas_rect.collidepoint(event.pos)
            if inside:
                self.editor.pointer_move(*self._local(event.pos))
            elif self.pointer_inside:
                self.editor.pointer_leave()
            self.pointer_inside = inside

    def _handle_key(self, event: pygame.event.Event) -> None:
        if event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.key in TOOL_KEYS:
            self._set_tool(TOOL_KEYS[event.key])
        elif event.key in (pygame.K_EQUALS, pygame.K_PLUS):
            self.editor.zoom_in()
        elif event.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
            self.editor.zoom_out()
        elif event.key == pygame.K_0:
            self.editor.reset_view()
        elif event.key == pygame.K_f:
            self._fit_view()
        elif event.key == pygame.K_g:
            self._toggle_graph()
        elif event.key == pygame.K_r:
            self._toggle_read_only()
        elif event.key == pygame.K_s and (event.mod & (pygame.KMOD_CTRL | pygame.KMOD_META | pygame.KMOD_GUI)):
            self._save_layout()
        elif event.key == pygame.K_o and (event.mod & (pygame.KMOD_CTRL | pygame.KMOD_META | pygame.KMOD_GUI)):
            self._load_layout()

    def _handle_ui_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame_gui.UI_BUTTON_PRESSED:
            return
        for tool, button in self.tool_buttons.items():
            if event.ui_element == button:
                self._set_tool(tool)
                return
        if event.ui_element == self.btn_zoom_in:
            self.editor.zoom_in()
        elif event.ui_element == self.btn_zoom_out:
            self.editor.zoom_out()
        elif event.ui_element == self.btn_reset:
            self.editor.reset_view()

    def run(self) -> None:
        print("[app] editor ready")
        while self.running:
            dt = self.clock.tick(60) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                if self.hover_menu.handle_event(event):
                    continue
                if event.type == pygame.KEYDOWN:
                    self._handle_key(event)
                if event.type == pygame.MOUSEWHEEL and self.canvas_rect.collidepoint(pygame.mouse.get_pos()):
                    if event.y > 0:
                        self.editor.zoom_in()
                    elif event.y < 0:
                        self.editor.zoom_out()
                if event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION):
                    self._handle_pointer(event)
                self.manager.process_events(event)
                self._handle_ui_event(event)
            self.manager.update(dt)
            self.hover_menu.update_hover(pygame.mouse.get_pos())
            self._draw()
        pygame.quit()

    def _draw(self) -> None:
        self.window_surface.fill(CHROME_THEME["bg"])
        self.painter.paint(self.canvas, self.editor.frame)
        self.window_surface.blit(self.canvas, self.canvas_rect.topleft)
        pygame.draw.rect(self.window_surface, CHROME_THEME["panel_border"], self.canvas_rect, 1)
        self._draw_status()
        self.manager.draw_ui(self.window_surface)
        self.hover_menu.draw(self.window_surface)
        pygame.display.update()

    def _draw_status(self) -> None:
        font = self.painter.font(14)
        bar = pygame.Rect(0, self.window_size[1] - 32, self.window_size[0], 32)
        pygame.draw.rect(self.window_surface, CHROME_THEME["panel"], bar)
        pygame.draw.line(self.window_surface, CHROME_THEME["panel_border"], bar.topleft, bar.topright)
        warn = self.editor.last_warning is not None and self.status_hint == self.editor.last_warning
        color = CHROME_THEME["warn"] if warn else CHROME_THEME["text_primary"]
        self.window_surface.blit(font.render(self.status_hint, True, color), (20, bar.y + 8))
        summary = (
            f"{self.editor.tool.value} | zoom {self.editor.camera.zoom:.2f} | "
            f"shelves {len(self.elements.shelves)} | selected pickups {len(self.selected)}"
        )
        label = font.render(summary, True, CHROME_THEME["text_muted"])
        self.window_surface.blit(label, (bar.right - label.get_width() - 20, bar.y + 8))


def main() -> None:
    EditorApp().run()


if __name__ == "__main__":
    main()
