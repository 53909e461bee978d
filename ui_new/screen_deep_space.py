"""
Deep Space Screen - signal timing to distant spacecraft

Lists the cached spacecraft, shows one-way and round-trip light time, a
log distance scale and a compressed "ping" animation of the round trip.
"""

import logging
from typing import Optional

import pygame

from core.frame_scheduler import FrameScheduler
from deep_space.ping import PingAnimation
from deep_space.signal_timing import (
    MILESTONES,
    SignalPhase,
    compression_factor,
    distance_scale_position,
    doppler_shift_hz,
    format_duration,
    light_time,
    ping_duration_seconds,
    received_power_dbm,
    signal_marker_position,
    signal_phase,
    virtual_elapsed_seconds,
)
from deep_space.spacecraft import SpacecraftDataError, SpacecraftTarget, bearing_deg, load_spacecraft
from .base_screen import BaseScreen
from .components import Button, SelectList

logger = logging.getLogger(__name__)

LIST_W = 320


class DeepSpaceScreen(BaseScreen):
    def __init__(self, state_manager, scheduler: FrameScheduler):
        super().__init__("DEEP_SPACE")
        self.state_manager = state_manager
        self.config = state_manager.config
        self.ping = PingAnimation(scheduler)
        self.targets: list[SpacecraftTarget] = []
        self.error: Optional[str] = None

        self.list = SelectList(pygame.Rect(10, 70, LIST_W, 300), on_change=self._on_select)
        self.ping_button = Button(0, 0, 120, 34, "PING", self.start_ping)
        self.stop_button = Button(0, 0, 120, 34, "STOP", self.ping.stop)

    # --- data ------------------------------------------------------------

    def load(self):
        try:
            self.targets = load_spacecraft(self.config.data.spacecraft_file)
            self.error = None
        except SpacecraftDataError as e:
            logger.warning("Spacecraft list unavailable: %s", e)
            self.targets, self.error = [], str(e)
        self.list.set_items([t.name for t in self.targets])

    @property
    def target(self) -> Optional[SpacecraftTarget]:
        if not self.targets:
            return None
        return self.targets[self.list.selected]

    def _on_select(self, index: int):
        # a new target invalidates any ping in flight
        self.ping.stop()
        self.state_manager.state.selected_spacecraft = self.targets[index].id

    def start_ping(self):
        t = self.target
        if t is None:
            return
        rt = light_time(t.distance_km).round_trip_seconds
        self.ping.set_duration(ping_duration_seconds(rt, self.config.ping.max_real_seconds) * 1000.0)
        self.ping.start()

    # --- lifecycle -------------------------------------------------------

    def on_enter(self):
        super().on_enter()
        if not self.targets:
            self.load()
        wanted = self.state_manager.state.selected_spacecraft
        for i, t in enumerate(self.targets):
            if t.id == wanted:
                self.list.selected = i

    def on_exit(self):
        super().on_exit()
        self.ping.stop()

    def handle_input(self, events: list[pygame.event.Event]) -> Optional[str]:
        for event in events:
            if self.ping_button.handle_event(event) or self.stop_button.handle_event(event):
                continue
            if self.list.handle_event(event):
                continue
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    self.start_ping()
                elif event.key == pygame.K_s:
                    self.ping.stop()
                elif event.key in (pygame.K_TAB, pygame.K_ESCAPE):
                    return "RADAR"
        return None

    def update(self, dt: float):
        mouse = pygame.mouse.get_pos()
        self.ping_button.update(mouse)
        self.stop_button.update(mouse)
        self.stop_button.set_enabled(self.ping.active)
        self.ping_button.set_enabled(self.target is not None and not self.ping.active)

    # --- render ----------------------------------------------------------

    def render(self, surface: pygame.Surface):
        W, H = surface.get_size()
        c = self.theme.colors
        self.draw_header(surface, pygame.Rect(10, 10, W - 20, 50), "ZENITH // DEEP SPACE", "SIGNAL TIMING")

        self.list.rect = pygame.Rect(10, 70, LIST_W, H - 140)
        self.list.draw(surface)

        panel = pygame.Rect(LIST_W + 20, 70, W - LIST_W - 30, H - 140)
        self.theme.draw_panel(surface, panel)
        self.draw_footer(surface, pygame.Rect(10, H - 60, W - 20, 50),
                         "[UP/DOWN] Target  [SPACE] Ping  [S] Stop  [TAB] Radar")

        t = self.target
        if t is None:
            msg = self.error or "NO SPACECRAFT DATA"
            self.theme.draw_text(surface, self.theme.fonts.normal(), panel.centerx, panel.centery, msg,
                                 c.WARNING, align='center')
            return

        font = self.theme.fonts.small()
        x, y = panel.x + 16, panel.y + 16
        lt = light_time(t.distance_km)
        lines = [
            (t.name.upper(), c.SELECTED),
            (f"{t.mission_type}  {t.status}".strip(), c.FG_DIM),
            (f"DISTANCE      {t.distance_km:,.0f} km", c.FG_PRIMARY),
            (f"ONE-WAY       {format_duration(lt.one_way_seconds)}", c.FG_PRIMARY),
            (f"ROUND TRIP    {format_duration(lt.round_trip_seconds)}", c.FG_PRIMARY),
            (f"BEARING       {bearing_deg(t):6.1f}°", c.FG_DIM),
            (f"DOPPLER       {doppler_shift_hz(t.velocity_km_s) / 1e3:,.1f} kHz", c.FG_DIM),
            (f"RX POWER      {received_power_dbm(t.distance_km, t.dsn_power_dbm):.1f} dBm", c.FG_DIM),
        ]
        for text, color in lines:
            self.theme.draw_text(surface, font, x, y, text, color)
            y += 22

        self._draw_scale(surface, pygame.Rect(x, y + 30, panel.width - 32, 60), t)
        self._draw_ping(surface, pygame.Rect(x, y + 120, panel.width - 32, 120), lt.round_trip_seconds)

    def _draw_scale(self, surface, rect: pygame.Rect, t: SpacecraftTarget):
        c = self.theme.colors
        font = self.theme.fonts.tiny()
        max_d = max(t.distance_km, max(s.distance_km for s in self.targets))
        line_y = rect.y + rect.height // 2
        pygame.draw.line(surface, c.FG_DARK, (rect.x, line_y), (rect.right, line_y), 2)

        def at(pct):
            return int(rect.x + rect.width * pct / 100.0)

        for name, d in MILESTONES:
            if d > max_d:
                continue
            px = at(distance_scale_position(d, max_d))
            pygame.draw.line(surface, c.FG_DIM, (px, line_y - 6), (px, line_y + 6), 1)
            self.theme.draw_text(surface, font, px, line_y + 10, name, c.FG_DIM, align='center')

        target_pct = distance_scale_position(t.distance_km, max_d)
        pygame.draw.circle(surface, c.SELECTED, (at(target_pct), line_y), 5)
        if self.ping.active or self.ping.progress >= 100.0:
            marker = signal_marker_position(target_pct, self.ping.progress)
            pygame.draw.circle(surface, c.HOVER, (at(marker), line_y), 4)

    def _draw_ping(self, surface, rect: pygame.Rect, round_trip: float):
        c = self.theme.colors
        font = self.theme.fonts.small()
        progress = self.ping.progress
        self.theme.draw_progress_bar(surface, pygame.Rect(rect.x, rect.y, rect.width, 20), progress / 100.0, c.HOVER)

        real = ping_duration_seconds(round_trip, self.config.ping.max_real_seconds)
        phase = signal_phase(progress)
        if progress >= 100.0:
            status = "SIGNAL RECEIVED"
        elif not self.ping.active:
            status = "READY"
        elif phase is SignalPhase.OUTBOUND:
            status = f"SIGNAL TRAVELING TO {self.target.name.upper()}"
        else:
            status = "SIGNAL RETURNING TO EARTH"

        self.theme.draw_text(surface, font, rect.x, rect.y + 30, status, c.FG_PRIMARY)
        self.theme.draw_text(surface, font, rect.x, rect.y + 52,
                             f"VIRTUAL T+ {format_duration(virtual_elapsed_seconds(progress, round_trip))}", c.FG_DIM)
        self.theme.draw_text(surface, font, rect.x, rect.y + 74,
                             f"TIME COMPRESSION x{compression_factor(round_trip, real):,.0f}", c.FG_DARK)

        self.ping_button.rect.topleft = (rect.right - 250, rect.y + 30)
        self.stop_button.rect.topleft = (rect.right - 120, rect.y + 30)
        self.ping_button.draw(surface)
        self.stop_button.draw(surface)
