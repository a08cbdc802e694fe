"""Shared UI helpers: palette tweaks, the draw-command painter and the hover menu bar."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from grid_editor.renderer import (
    Clear,
    DrawCommand,
    FillCircle,
    FillPolygon,
    FillRect,
    Line,
    PopTranslate,
    PushTranslate,
    StrokeRect,
    Text,
)

# --- Palette helpers --------------------------------------------------------


def _clamp_channel(x: float) -> int:
    return max(0, min(255, int(x)))


def blend_color(color: tuple[int, int, int], target: tuple[int, int, int], t: float) -> tuple[int, int, int]:
    t = max(0.0, min(1.0, t))
    return tuple(_clamp_channel(c + (target[i] - c) * t) for i, c in enumerate(color))


def lighten_color(color: tuple[int, int, int], amount: float = 0.15) -> tuple[int, int, int]:
    return blend_color(color, (255, 255, 255), amount)


def darken_color(color: tuple[int, int, int], amount: float = 0.15) -> tuple[int, int, int]:
    return blend_color(color, (0, 0, 0), amount)


def with_alpha(color: tuple[int, int, int], alpha: int) -> tuple[int, int, int, int]:
    return (color[0], color[1], color[2], max(0, min(255, alpha)))


CHROME_THEME: dict[str, tuple[int, int, int]] = {
    "bg": (243, 244, 246),
    "panel": (255, 255, 255),
    "panel_border": (209, 213, 219),
    "text_primary": (17, 24, 39),
    "text_muted": (107, 114, 128),
    "accent": (59, 130, 246),
    "warn": (220, 38, 38),
}


# --- Draw-command execution -------------------------------------------------


class CommandPainter:
    """Replays renderer draw commands onto a pygame surface.

    Translucent shapes go through a small SRCALPHA overlay sized to the shape's
    bounding box; opaque ones are drawn directly.
    """

    def __init__(self) -> None:
        self._fonts: Dict[int, pygame.font.Font] = {}
        self._offsets: List[Tuple[float, float]] = []

    def font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            if not pygame.font.get_init():
                pygame.font.init()
            self._fonts[size] = pygame.font.Font(pygame.font.get_default_font(), size)
        return self._fonts[size]

    def paint(self, surface: pygame.Surface, commands: Sequence[DrawCommand]) -> int:
        """Execute ``commands`` in order; returns how many were drawn."""
        self._offsets = [(0.0, 0.0)]
        for cmd in commands:
            if isinstance(cmd, Clear):
                surface.fill(cmd.color)
            elif isinstance(cmd, PushTranslate):
                ox, oy = self._offsets[-1]
                self._offsets.append((ox + cmd.dx, oy + cmd.dy))
            elif isinstance(cmd, PopTranslate):
                if len(self._offsets) > 1:
                    self._offsets.pop()
            elif isinstance(cmd, Line):
                self._line(surface, cmd)
            elif isinstance(cmd, FillRect):
                self._fill_rect(surface, cmd)
            elif isinstance(cmd, StrokeRect):
                self._stroke_rect(surface, cmd)
            elif isinstance(cmd, FillCircle):
                self._circle(surface, cmd)
            elif isinstance(cmd, FillPolygon):
                self._polygon(surface, cmd)
            elif isinstance(cmd, Text):
                self._text(surface, cmd)
            else:
                raise TypeError(f"unknown draw command: {cmd!r}")
        return len(commands)

    def _shift(self, point: Tuple[float, float]) -> Tuple[int, int]:
        ox, oy = self._offsets[-1]
        return (int(round(point[0] + ox)), int(round(point[1] + oy)))

    def _line(self, surface: pygame.Surface, cmd: Line) -> None:
        start, end = self._shift(cmd.start), self._shift(cmd.end)
        width = max(1, int(round(cmd.width)))
        if cmd.alpha >= 255:
            pygame.draw.line(surface, cmd.color, start, end, width)
            return
        left = min(start[0], end[0]) - width
        top = min(start[1], end[1]) - width
        overlay = pygame.Surface(
            (abs(end[0] - start[0]) + 2 * width + 1, abs(end[1] - start[1]) + 2 * width + 1), pygame.SRCALPHA
        )
        pygame.draw.line(
            overlay,
            with_alpha(cmd.color, cmd.alpha),
            (start[0] - left, start[1] - top),
            (end[0] - left, end[1] - top),
            width,
        )
        surface.blit(overlay, (left, top))

    def _fill_rect(self, surface: pygame.Surface, cmd: FillRect) -> None:
        x, y = self._shift(cmd.rect[:2])
        rect = pygame.Rect(x, y, int(round(cmd.rect[2])), int(round(cmd.rect[3])))
        if cmd.alpha >= 255:
            pygame.draw.rect(surface, cmd.color, rect)
            return
        overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
        overlay.fill(with_alpha(cmd.color, cmd.alpha))
        surface.blit(overlay, rect.topleft)

    def _stroke_rect(self, surface: pygame.Surface, cmd: StrokeRect) -> None:
        x, y = self._shift(cmd.rect[:2])
        w, h = int(round(cmd.rect[2])), int(round(cmd.rect[3]))
        width = max(1, int(round(cmd.width)))
        if cmd.dash is None:
            pygame.draw.rect(surface, cmd.color, pygame.Rect(x, y, w, h), width)
            return
        corners = [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]
        for i, start in enumerate(corners):
            draw_dashed_line(surface, cmd.color, start, corners[(i + 1) % 4], cmd.dash, width)

    def _circle(self, surface: pygame.Surface, cmd: FillCircle) -> None:
        cx, cy = self._shift(cmd.center)
        radius = max(1, int(round(cmd.radius)))
        if cmd.alpha >= 255:
            pygame.draw.circle(surface, cmd.color, (cx, cy), radius)
            return
        overlay = pygame.Surface((radius * 2 + 1, radius * 2 + 1), pygame.SRCALPHA)
        pygame.draw.circle(overlay, with_alpha(cmd.color, cmd.alpha), (radius, radius), radius)
        surface.blit(overlay, (cx - radius, cy - radius))

    def _polygon(self, surface: pygame.Surface, cmd: FillPolygon) -> None:
        pts = [self._shift(p) for p in cmd.points]
        if len(pts) < 3:
            return
        if cmd.alpha >= 255:
            pygame.draw.polygon(surface, cmd.color, pts, 0)
            return
        left = min(p[0] for p in pts)
        top = min(p[1] for p in pts)
        overlay = pygame.Surface(
            (max(p[0] for p in pts) - left + 1, max(p[1] for p in pts) - top + 1), pygame.SRCALPHA
        )
        pygame.draw.polygon(overlay, with_alpha(cmd.color, cmd.alpha), [(p[0] - left, p[1] - top) for p in pts], 0)
        surface.blit(overlay, (left, top))

    def _text(self, surface: pygame.Surface, cmd: Text) -> None:
        label = self.font(cmd.size).render(cmd.text, True, cmd.color)
        if cmd.alpha < 255:
            label.set_alpha(cmd.alpha)
        surface.blit(label, label.get_rect(center=self._shift(cmd.position)))


def draw_dashed_line(
    surface: pygame.Surface,
    color: Tuple[int, int, int],
    start: Tuple[float, float],
    end: Tuple[float, float],
    dash: Tuple[float, float],
    width: int = 1,
) -> None:
    on, off = dash
    dx, dy = end[0] - start[0], end[1] - start[1]
    length = (dx * dx + dy * dy) ** 0.5
    if length == 0 or on <= 0:
        return
    ux, uy = dx / length, dy / length
    t = 0.0
    while t < length:
        t_end = min(t + on, length)
        a = (start[0] + ux * t, start[1] + uy * t)
        b = (start[0] + ux * t_end, start[1] + uy * t_end)
        pygame.draw.line(surface, color, a, b, width)
        t += on + off


# --- Hover menu -------------------------------------------------------------


class HoverMenu:
    """Lightweight hover-to-open menu bar for pygame surfaces."""

    def __init__(
        self,
        menus: List[Tuple[str, List[Dict[str, object]]]],
        pos: Tuple[int, int] = (12, 8),
        font: Optional[pygame.font.Font] = None,
    ) -> None:
        self.menus = menus  # [(label, entries)], entry: {"label", "action", "checked"?}
        self.pos = pos
        self.font = font or pygame.font.Font(pygame.font.get_default_font(), 14)
        self.header_h = 24
        self.padding = 10
        self.open_menu: Optional[int] = None
        self.header_rects: List[pygame.Rect] = []
        self.close_grace_ms = 160
        self._last_inside_ms: int = pygame.time.get_ticks()

    def _compute_headers(self) -> None:
        x, y = self.pos
        self.header_rects = []
        for label, _ in self.menus:
            w = self.font.size(label)[0] + self.padding * 2
            self.header_rects.append(pygame.Rect(x, y, w, self.header_h))
            x += w + 8

    def entry_rects(self, idx: int) -> List[pygame.Rect]:
        if not self.header_rects:
            self._compute_headers()
        if idx < 0 or idx >= len(self.menus):
            return []
        header = self.header_rects[idx]
        entries = self.menus[idx][1]
        menu_w = max(self.font.size(str(e.get("label", "")))[0] + self.padding * 4 for e in entries) if entries else header.width
        return [pygame.Rect(header.x, header.bottom + i * self.header_h, menu_w, self.header_h) for i in range(len(entries))]

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Returns True when the event was consumed by the menu."""
        if not self.header_rects:
            self._compute_headers()
        if event.type == pygame.MOUSEMOTION:
            for i, rect in enumerate(self.header_rects):
                if rect.collidepoint(event.pos):
                    self.open_menu = i
                    self._last_inside_ms = pygame.time.get_ticks()
                    break
            return False
        if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
            return False
        for i, rect in enumerate(self.header_rects):
            if rect.collidepoint(event.pos):
                self.open_menu = i if self.open_menu != i else None
                self._last_inside_ms = pygame.time.get_ticks()
                return True
        if self.open_menu is None:
            return False
        entries = self.menus[self.open_menu][1]
        for j, rect in enumerate(self.entry_rects(self.open_menu)):
            if rect.collidepoint(event.pos):
                action = entries[j].get("action")
                if callable(action):
                    action()
                self.open_menu = None
                return True
        self.open_menu = None
        return False

    def update_hover(self, mouse_pos: Tuple[int, int]) -> None:
        if self.open_menu is None:
            return
        if not self.header_rects:
            self._compute_headers()
        now = pygame.time.get_ticks()
        inside = any(r.collidepoint(mouse_pos) for r in self.header_rects) or any(
            r.collidepoint(mouse_pos) for r in self.entry_rects(self.open_menu)
        )
        if inside:
            self._last_inside_ms = now
        elif now - self._last_inside_ms > self.close_grace_ms:
            self.open_menu = None

    def draw(self, surface: pygame.Surface) -> None:
        if not self.header_rects:
            self._compute_headers()
        header_idle = CHROME_THEME["panel"]
        header_active = darken_color(header_idle, 0.06)
        border = CHROME_THEME["panel_border"]
        text = CHROME_THEME["text_primary"]
        for i, rect in enumerate(self.header_rects):
            bg = header_active if self.open_menu == i else header_idle
            pygame.draw.rect(surface, bg, rect, border_radius=6)
            pygame.draw.rect(surface, border, rect, 1, border_radius=6)
            surface.blit(self.font.render(self.menus[i][0], True, text), (rect.x + self.padding - 2, rect.y + 4))
        if self.open_menu is None:
            return
        entries = self.menus[self.open_menu][1]
        for entry, rect in zip(entries, self.entry_rects(self.open_menu)):
            checker = entry.get("checked")
            checked = bool(checker()) if callable(checker) else False
            pygame.draw.rect(surface, lighten_color(CHROME_THEME["accent"], 0.85) if checked else header_idle, rect)
            pygame.draw.rect(surface, border, rect, 1)
            box = pygame.Rect(rect.x + self.padding - 2, rect.y + 6, 12, 12)
            if checked:
                pygame.draw.rect(surface, CHROME_THEME["accent"], box.inflate(-2, -2))
            surface.blit(self.font.render(str(entry.get("label", "")), True, text), (box.right + self.padding // 2, rect.y + 4))
