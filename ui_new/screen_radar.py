"""
Radar Screen - live tracking view

Left: the radar/sky disk, drawn by RadarEngine from the frame scheduler.
Right: telemetry for the selected object.

The screen is the engine's only writer: every 500 ms it recomputes which
objects are above the horizon and publishes them, and whenever the
selection or the observer changes it regenerates the orbit path.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import pygame

from core.frame_scheduler import FrameScheduler
from core.types import HorizonPosition, OrbitalElementSet, OrbitalParameters, VisualObject
from orbits.sampling import future_path, orbital_parameters, prune_elapsed, visible_objects
from rendering.radar_engine import PointerKind, RadarEngine, RadarInputs
from rendering.radar_renderer import RadarRenderer
from rendering.sky_background import SkyBackground
from .base_screen import BaseScreen

logger = logging.getLogger(__name__)

PANEL_W = 300
HEADER_H = 50
FOOTER_H = 40
GAP = 10


class RadarScreen(BaseScreen):
    def __init__(self, state_manager, scheduler: FrameScheduler, utc_clock=None):
        super().__init__("RADAR")
        self.state_manager = state_manager
        self.config = state_manager.config
        self.utc_clock = utc_clock or (lambda: datetime.now(timezone.utc))

        self.engine = RadarEngine(
            scheduler,
            target=self._viewport,
            renderer=RadarRenderer(self.theme),
            settings=self.config.radar,
            background=SkyBackground(refresh_ms=self.config.radar.catalog_refresh_ms),
            utc_clock=self.utc_clock,
        )

        self.objects: list[VisualObject] = []
        self.path: list[HorizonPosition] = []
        self.params: Optional[OrbitalParameters] = None
        self._refresh_accum_ms = float("inf")
        self._path_key = None

    # --- layout ----------------------------------------------------------

    def viewport_rect(self, size) -> pygame.Rect:
        w, h = size
        return pygame.Rect(GAP, HEADER_H + 2 * GAP,
                           max(0, w - PANEL_W - 3 * GAP),
                           max(0, h - HEADER_H - FOOTER_H - 4 * GAP))

    def _viewport(self) -> Optional[pygame.Surface]:
        display = pygame.display.get_surface()
        if display is None:
            return None
        rect = self.viewport_rect(display.get_size()).clip(display.get_rect())
        if rect.width <= 0 or rect.height <= 0:
            return None
        return display.subsurface(rect)

    # --- lifecycle -------------------------------------------------------

    def on_enter(self):
        super().on_enter()
        self._refresh_accum_ms = float("inf")
        self._publish()
        self.engine.start()

    def on_exit(self):
        super().on_exit()
        self.engine.stop()

    # --- input -----------------------------------------------------------

    def handle_input(self, events: list[pygame.event.Event]) -> Optional[str]:
        display = pygame.display.get_surface()
        size = display.get_size() if display is not None else (0, 0)
        vp = self.viewport_rect(size)

        for event in events:
            # touch also arrives as synthesized mouse events; the finger handler owns those
            if getattr(event, "touch", False):
                continue

            if event.type == pygame.MOUSEMOTION:
                if vp.collidepoint(event.pos):
                    self.engine.pointer_move(event.pos[0] - vp.x, event.pos[1] - vp.y, PointerKind.MOUSE)
                else:
                    self.engine.pointer_leave()

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if vp.collidepoint(event.pos):
                    self.engine.click()

            elif event.type == pygame.FINGERDOWN:
                x, y = event.x * size[0], event.y * size[1]
                if vp.collidepoint(x, y):
                    self.engine.touch_start(x - vp.x, y - vp.y)

            elif event.type == pygame.WINDOWLEAVE:
                self.engine.pointer_leave()

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_v:
                    state = self.state_manager.state
                    state.view_mode = state.view_mode.toggled()
                    self._publish()
                elif event.key == pygame.K_ESCAPE:
                    self.select(None)
                elif event.key == pygame.K_r:
                    self.state_manager.refresh_catalog()
                elif event.key == pygame.K_TAB:
                    return "DEEP_SPACE"
        return None

    def select(self, obj_id: Optional[str]):
        """Selection callback handed to the engine."""
        self.state_manager.state.selected_id = obj_id
        self._publish()

    # --- update ----------------------------------------------------------

    def _element_sets(self) -> tuple[OrbitalElementSet, ...]:
        return self.state_manager.state.catalog.get().element_sets

    def _selected_set(self) -> Optional[OrbitalElementSet]:
        sel = self.state_manager.state.selected_id
        return next((es for es in self._element_sets() if es.id == sel), None)

    def update(self, dt: float):
        state = self.state_manager.state
        observer = state.observer
        now = self.utc_clock()

        self._refresh_accum_ms += dt * 1000.0
        if observer is not None and self._refresh_accum_ms >= self.config.path.object_refresh_ms:
            self._refresh_accum_ms = 0.0
            self.objects = visible_objects(self._element_sets(), now, observer)
            self.path = prune_elapsed(self.path, now)
            self._publish()

        es = self._selected_set()
        path_key = (state.selected_id, observer, (es.line1, es.line2) if es else None)
        if path_key != self._path_key:
            self._path_key = path_key
            self._regenerate_path(now)

    def _regenerate_path(self, now: datetime):
        observer = self.state_manager.state.observer
        es = self._selected_set()
        if es is None or observer is None:
            self.path, self.params = [], None
        else:
            cfg = self.config.path
            self.path = future_path(es, now, cfg.duration_minutes, observer, cfg.step_minutes)
            self.params = orbital_parameters(es)
            logger.debug("Orbit path for %s: %d samples", es.name, len(self.path))
        self._publish()

    def _publish(self):
        state = self.state_manager.state
        self.engine.inputs.publish(RadarInputs(
            objects=tuple(self.objects),
            selected_id=state.selected_id,
            orbit_path=tuple(self.path),
            observer=state.observer,
            mode=state.view_mode,
            on_select=self.select,
        ))

    # --- render ----------------------------------------------------------

    def render(self, surface: pygame.Surface):
        W, H = surface.get_size()
        state = self.state_manager.state
        catalog = state.catalog.get()

        if catalog.loading:
            source = "LOADING"
        else:
            source = catalog.source.value.upper() if catalog.source else "OFFLINE"
        self.draw_header(surface, pygame.Rect(GAP, GAP, W - 2 * GAP, HEADER_H),
                         f"ZENITH // {state.view_mode.name} VIEW",
                         f"TLE: {source}  OBJ: {len(self.objects)}")

        panel = pygame.Rect(W - PANEL_W - GAP, HEADER_H + 2 * GAP, PANEL_W, H - HEADER_H - FOOTER_H - 4 * GAP)
        self.theme.draw_panel(surface, panel, "TELEMETRY")
        self._draw_telemetry(surface, panel)

        self.draw_footer(surface, pygame.Rect(GAP, H - FOOTER_H - GAP, W - 2 * GAP, FOOTER_H),
                         "[CLICK] Select  [ESC] Clear  [V] Radar/Sky  [R] Reload TLE  [TAB] Deep space")

    def _draw_telemetry(self, surface, panel: pygame.Rect):
        c = self.theme.colors
        font = self.theme.fonts.small()
        x, y = panel.x + 12, panel.y + 40
        state = self.state_manager.state

        def row(label, value, color=c.FG_PRIMARY):
            nonlocal y
            self.theme.draw_text(surface, font, x, y, label, c.FG_DIM)
            self.theme.draw_text(surface, font, panel.right - 12, y, value, color, align='right')
            y += 22

        obs = state.observer
        row("OBSERVER", (obs.name or "-") if obs else "ACQUIRING", c.WARNING if obs is None else c.FG_PRIMARY)
        if obs is not None:
            row("LAT / LON", f"{obs.latitude:.2f} {obs.longitude:.2f}")
        y += 10

        es = self._selected_set()
        if es is None:
            self.theme.draw_text(surface, font, x, y, "NO TARGET SELECTED", c.FG_DARK)
            return

        row("TARGET", es.name[:18], c.SELECTED)
        row("TYPE", es.type)
        row("NORAD", es.id)
        if es.cospar:
            row("COSPAR", es.cospar)

        current = next((o for o in self.objects if o.id == es.id), None)
        if current is None:
            row("STATUS", "BELOW HORIZON", c.FG_DARK)
        else:
            p = current.position
            row("AZ", f"{p.azimuth:6.1f}°")
            row("EL", f"{p.elevation:6.1f}°")
            row("RANGE", f"{p.range_km:8.0f} km")
            row("ALT", f"{p.height_km:8.0f} km")
            row("VEL", f"{p.velocity_km_s:6.2f} km/s")
        if self.params is not None:
            y += 10
            row("PERIGEE", f"{self.params.perigee_km:8.0f} km")
            row("APOGEE", f"{self.params.apogee_km:8.0f} km")
            row("INCL", f"{self.params.inclination_deg:6.2f}°")
