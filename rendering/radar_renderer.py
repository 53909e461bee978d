"""
pygame drawing of a RadarFrame.

Layers, back to front: scope disk and grid, star background (masked to the
disk), cardinal labels, orbit path, trails, objects, sweep highlight, labels.
"""
from __future__ import annotations
import math
from typing import Optional, Sequence

import pygame

from core.projection import cardinal_points, project
from rendering.radar_engine import Blip, Geometry, RadarFrame, RadarStatus
from rendering.sky_background import ProjectedSky, star_radius
from ui_new.theme import Colors, Theme, get_theme

ELEVATION_RINGS = (30, 60)
SWEEP_TAIL_FRACTION = 0.15   # portion of the circle lit behind the sweep line
SWEEP_TAIL_ALPHA = 77        # peak alpha at the sweep line (~0.3)
SWEEP_SLICES = 24


class RadarRenderer:
    def __init__(self, theme: Optional[Theme] = None):
        self.theme = theme or get_theme()
        self._mask_key = None
        self._mask: Optional[pygame.Surface] = None

    def draw(self, surface: pygame.Surface, frame: RadarFrame) -> None:
        g = frame.geometry
        surface.fill(Colors.BG_DARK)
        self._draw_scope(surface, g)
        if frame.sky is not None:
            self._draw_sky(surface, g, frame.sky)
        self._draw_cardinals(surface, g, frame)
        for seg in frame.path_segments:
            _dashed_polyline(surface, Colors.ORBIT_PATH, seg)
        self._draw_trails(surface, frame)
        for blip in frame.blips:
            self._draw_blip(surface, blip, frame.now_ms)
        self._draw_sweep(surface, g, frame.sweep_angle)
        for blip in frame.blips:
            if blip.obj.is_primary or blip.selected or blip.hovered:
                self._draw_label(surface, blip)
        if frame.status is not RadarStatus.TRACKING:
            self._draw_status(surface, g, frame.status)

    # --- scope -----------------------------------------------------------

    def _draw_scope(self, surface, g: Geometry):
        center = (int(g.cx), int(g.cy))
        R = int(g.radius)
        pygame.draw.circle(surface, Colors.BG_SCOPE, center, R)

        font = self.theme.fonts.tiny()
        for el in ELEVATION_RINGS:
            r = int(g.radius * (1.0 - el / 90.0))
            pygame.draw.circle(surface, Colors.GRID, center, r, 1)
            self.theme.draw_text(surface, font, center[0] + 3, center[1] - r - 12, f"{el}°", Colors.FG_DARK)

        for az in range(0, 360, 45):
            x, y = project(az, 0.0, g.cx, g.cy, g.radius)
            pygame.draw.line(surface, Colors.GRID, center, (int(x), int(y)), 1)

        pygame.draw.circle(surface, Colors.FG_DIM, center, R, 2)

    def _disk_mask(self, size, g: Geometry) -> pygame.Surface:
        key = (size, g)
        if key != self._mask_key:
            mask = pygame.Surface(size, pygame.SRCALPHA)
            mask.fill((0, 0, 0, 0))
            pygame.draw.circle(mask, (255, 255, 255, 255), (int(g.cx), int(g.cy)), int(g.radius))
            self._mask, self._mask_key = mask, key
        return self._mask

    def _draw_sky(self, surface, g: Geometry, sky: ProjectedSky):
        size = surface.get_size()
        layer = pygame.Surface(size, pygame.SRCALPHA)
        for a, b in sky.lines:
            pygame.draw.line(layer, (*Colors.CONSTELLATION, 160), a, b, 1)
        for x, y, mag, _name in sky.stars:
            pygame.draw.circle(layer, (*Colors.STAR, 220), (int(x), int(y)), int(round(star_radius(mag))))
        # clip to the plotting circle
        layer.blit(self._disk_mask(size, g), (0, 0), special_flags=pygame.BLEND_RGBA_MULT)
        surface.blit(layer, (0, 0))

    def _draw_cardinals(self, surface, g: Geometry, frame: RadarFrame):
        font = self.theme.fonts.small()
        for label, x, y in cardinal_points(g.cx, g.cy, g.radius + 22, frame.mode):
            color = Colors.FG_PRIMARY if len(label) == 1 else Colors.FG_DARK
            rendered = font.render(label, False, color)
            surface.blit(rendered, (int(x - rendered.get_width() / 2), int(y - rendered.get_height() / 2)))

    def _draw_sweep(self, surface, g: Geometry, angle: float):
        layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        tail = SWEEP_TAIL_FRACTION * 2.0 * math.pi
        step = tail / SWEEP_SLICES
        for i in range(SWEEP_SLICES):
            a0 = angle - tail + i * step
            a1 = a0 + step
            alpha = int(SWEEP_TAIL_ALPHA * (i + 1) / SWEEP_SLICES)
            pts = [(g.cx, g.cy)]
            for k in range(4):
                a = a0 + (a1 - a0) * k / 3
                pts.append((g.cx + g.radius * math.cos(a), g.cy + g.radius * math.sin(a)))
            pygame.draw.polygon(layer, (*Colors.SWEEP, alpha), pts)
        surface.blit(layer, (0, 0))
        end = (g.cx + g.radius * math.cos(angle), g.cy + g.radius * math.sin(angle))
        pygame.draw.line(surface, Colors.SWEEP, (g.cx, g.cy), end, 2)

    # --- objects ---------------------------------------------------------

    def _draw_trails(self, surface, frame: RadarFrame):
        layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        for points in frame.trails.values():
            n = len(points)
            for i, (x, y) in enumerate(points):
                alpha = int(40 + 140 * (i + 1) / n)
                pygame.draw.circle(layer, (*Colors.FG_DIM, alpha), (int(x), int(y)), 1)
        surface.blit(layer, (0, 0))

    def _draw_blip(self, surface, blip: Blip, now_ms: float):
        x, y = int(blip.x), int(blip.y)
        if blip.obj.is_primary:
            glow = pygame.Surface((24, 24), pygame.SRCALPHA)
            pygame.draw.circle(glow, (255, 255, 255, 60), (12, 12), 11)
            surface.blit(glow, (x - 12, y - 12))
            pygame.draw.rect(surface, Colors.PRIMARY_OBJECT, pygame.Rect(x - 4, y - 4, 8, 8))
        else:
            size = 2.5 + (0.0 if blip.selected else blip.pulse * 2.0)
            if blip.hovered:
                color = Colors.HOVER
            else:
                color = Colors.lerp_color(Colors.FG_DIM, Colors.FG_BRIGHT, blip.pulse)
            pygame.draw.circle(surface, color, (x, y), max(1, int(round(size))))

        if blip.selected:
            r = int(10 + math.sin(now_ms / 200.0) * 4)
            pygame.draw.circle(surface, Colors.SELECTED, (x, y), r, 2)
            reach = r + 6
            pygame.draw.line(surface, Colors.SELECTED, (x - reach, y), (x - r + 2, y), 1)
            pygame.draw.line(surface, Colors.SELECTED, (x + r - 2, y), (x + reach, y), 1)
            pygame.draw.line(surface, Colors.SELECTED, (x, y - reach), (x, y - r + 2), 1)
            pygame.draw.line(surface, Colors.SELECTED, (x, y + r - 2), (x, y + reach), 1)

    def _draw_label(self, surface, blip: Blip):
        font = self.theme.fonts.tiny()
        color = Colors.SELECTED if blip.selected else Colors.PRIMARY_OBJECT if blip.obj.is_primary else Colors.HOVER
        text = font.render(blip.obj.name, False, color)
        w, h = text.get_width() + 8, text.get_height() + 4
        bg = pygame.Surface((w, h), pygame.SRCALPHA)
        bg.fill((0, 16, 10, 200))
        lx, ly = int(blip.x) + 12, int(blip.y) - h // 2
        surface.blit(bg, (lx, ly))
        surface.blit(text, (lx + 4, ly + 2))

    def _draw_status(self, surface, g: Geometry, status: RadarStatus):
        font = self.theme.fonts.normal()
        color = Colors.WARNING if status is RadarStatus.ACQUIRING else Colors.FG_DIM
        self.theme.draw_text(surface, font, int(g.cx), int(g.cy + g.radius * 0.4), status.value, color, align='center')


def _dashed_polyline(surface, color, points: Sequence[tuple[float, float]], dash: float = 6.0, gap: float = 5.0):
    """Dashed line along a polyline; the dash pattern continues across vertices."""
    on = True
    remaining = dash
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        seg = math.hypot(x1 - x0, y1 - y0)
        if seg == 0:
            continue
        ux, uy = (x1 - x0) / seg, (y1 - y0) / seg
        pos = 0.0
        while pos < seg:
            length = min(remaining, seg - pos)
            if on:
                a = (x0 + ux * pos, y0 + uy * pos)
                b = (x0 + ux * (pos + length), y0 + uy * (pos + length))
                pygame.draw.line(surface, color, a, b, 2)
            pos += length
            remaining -= length
            if remaining <= 0:
                on = not on
                remaining = dash if on else gap
