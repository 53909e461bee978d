from __future__ import annotations
from dataclasses import replace
from pathlib import Path

import pygame
import pytest

from conftest import TLE_TEXT, ISS_EPOCH, make_object
from core.config import DashboardConfig
from core.projection import ViewMode
from core.types import HorizonPosition, ObjectType
from dashboard.state_manager import CatalogSnapshot, ObserverStore, StateManager
from orbits.tle_catalog import DataSource, parse_tle_text
from rendering.radar_engine import RadarEngine, RadarInputs
from rendering.radar_renderer import RadarRenderer, _dashed_polyline
from rendering.sky_background import SkyBackground
from ui_new.screen_deep_space import DeepSpaceScreen
from ui_new.screen_radar import RadarScreen
from ui_new.theme import Colors, get_theme

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(scope="module")
def display():
    pygame.init()
    surface = pygame.display.set_mode((1000, 700))
    yield surface
    # fonts cached by the theme stay valid
    pygame.display.quit()


@pytest.fixture
def manager(tmp_path, observer):
    cfg = DashboardConfig()
    cfg.data.spacecraft_file = str(ROOT / "data" / "spacecraft.json")
    mgr = StateManager(cfg, ObserverStore(tmp_path / "observer.json"), fetcher=None)
    mgr.set_observer(observer, persist=False)
    mgr.state.catalog.publish(CatalogSnapshot(tuple(parse_tle_text(TLE_TEXT)), DataSource.MIRROR))
    return mgr


@pytest.mark.parametrize("mode", list(ViewMode))
def test_renderer_draws_full_frame(display, scheduler, observer, mode):
    surface = pygame.Surface((500, 400))
    engine = RadarEngine(scheduler, target=lambda: surface, renderer=RadarRenderer(),
                         background=SkyBackground(), utc_clock=lambda: ISS_EPOCH)
    path = tuple(HorizonPosition(float(az), 20.0 + az / 10, 1.0, 1.0, 0.0, 0.0, 0.0) for az in range(0, 180, 5))
    engine.inputs.publish(RadarInputs(
        objects=(make_object("25544", 90, 40, "ISS (ZARYA)", ObjectType.SPACE_STATION),
                 make_object("b", 200, 15), make_object("c", 300, 70)),
        selected_id="b",
        orbit_path=path,
        observer=observer,
        mode=mode,
    ))
    engine.pointer_move(250.0, 200.0)
    engine.start()
    for t in (1000.0, 2000.0, 3000.0):
        scheduler.tick(t)
    frame = engine.last_frame
    assert frame.sky is not None and frame.sky.stars
    assert frame.path_segments
    assert engine.frame_count == 3


def test_renderer_draws_status_without_observer(display, scheduler):
    surface = pygame.Surface((300, 300))
    engine = RadarEngine(scheduler, target=lambda: surface, renderer=RadarRenderer())
    frame = engine.advance(1000.0)
    RadarRenderer().draw(surface, frame)
    assert frame.sky is None
    assert surface.get_at((2, 2)) == pygame.Color(*Colors.BG_DARK)


def test_dashed_polyline_handles_degenerate_points(display):
    surface = pygame.Surface((50, 50))
    _dashed_polyline(surface, (255, 0, 0), [(5, 5), (5, 5), (40, 5), (40, 40)])
    _dashed_polyline(surface, (255, 0, 0), [(1, 1)])
    assert surface.get_at((6, 5)) == pygame.Color(255, 0, 0)


def test_radar_screen_frame_cycle(display, scheduler, manager):
    screen = RadarScreen(manager, scheduler, utc_clock=lambda: ISS_EPOCH)
    manager.register_screen("RADAR", screen)
    manager.switch_to("RADAR")
    assert screen.engine.running

    screen.select("25544")
    for t in (1000.0, 1016.0):
        screen.handle_input([pygame.event.Event(pygame.MOUSEMOTION, pos=(300, 300), rel=(0, 0), buttons=(0, 0, 0))])
        manager.update(0.6)
        display.fill((0, 0, 0))
        scheduler.tick(t)
        manager.render(display)

    assert screen.path
    assert screen.params is not None
    assert screen.engine.inputs.get().selected_id == "25544"
    assert scheduler.pending == 1

    toggle = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_v, mod=0, unicode="v", scancode=0)
    screen.handle_input([toggle])
    assert manager.state.view_mode is ViewMode.SKY

    tab = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_TAB, mod=0, unicode="\t", scancode=0)
    assert screen.handle_input([tab]) == "DEEP_SPACE"

    manager.shutdown()
    assert not screen.engine.running
    assert scheduler.pending == 0


def test_deep_space_screen_ping(display, clock, scheduler, manager):
    screen = DeepSpaceScreen(manager, scheduler)
    manager.register_screen("DEEP_SPACE", screen)
    manager.switch_to("DEEP_SPACE")
    assert screen.target is not None

    space = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE, mod=0, unicode=" ", scancode=0)
    screen.handle_input([space])
    assert screen.ping.active

    scheduler.tick(clock.advance(500.0))
    screen.update(0.016)
    screen.render(display)
    assert 0.0 < screen.ping.progress < 100.0

    down = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_DOWN, mod=0, unicode="", scancode=0)
    screen.handle_input([down])
    assert not screen.ping.active
    assert manager.state.selected_spacecraft == screen.targets[1].id
    screen.render(display)


def test_deep_space_screen_without_data(display, scheduler, manager, tmp_path):
    manager.config.data.spacecraft_file = str(tmp_path / "missing.json")
    screen = DeepSpaceScreen(manager, scheduler)
    screen.on_enter()
    assert screen.target is None
    assert screen.error
    screen.start_ping()
    assert not screen.ping.active
    screen.render(display)


def test_sweep_is_drawn_over_objects_and_under_labels(display, scheduler, observer):
    order = []

    class Recording(RadarRenderer):
        def _draw_blip(self, surface, blip, now_ms):
            order.append("blip")
            super()._draw_blip(surface, blip, now_ms)

        def _draw_sweep(self, surface, g, angle):
            order.append("sweep")
            super()._draw_sweep(surface, g, angle)

        def _draw_label(self, surface, blip):
            order.append("label")
            super()._draw_label(surface, blip)

    surface = pygame.Surface((400, 400))
    engine = RadarEngine(scheduler, target=lambda: surface)
    engine.inputs.publish(RadarInputs(
        objects=(make_object("25544", 90, 40, "ISS (ZARYA)", ObjectType.SPACE_STATION), make_object("b", 200, 15)),
        observer=observer,
    ))
    Recording().draw(surface, engine.advance(1000.0))
    assert order == ["blip", "blip", "sweep", "label"]


def test_radar_path_follows_refreshed_element_set(display, scheduler, manager):
    screen = RadarScreen(manager, scheduler, utc_clock=lambda: ISS_EPOCH)
    manager.state.selected_id = "25544"
    screen.update(0.0)
    assert screen.params.inclination_deg == pytest.approx(51.6439)

    # same catalog size, newer elements for the selected object
    (iss,) = manager.state.catalog.get().element_sets
    newer = replace(iss, line2=iss.line2.replace("51.6439", "51.6450"))
    manager.state.catalog.publish(CatalogSnapshot((newer,), DataSource.MIRROR))
    screen.update(0.0)
    assert screen.params.inclination_deg == pytest.approx(51.6450)


def test_theme_progress_bar_clamps(display):
    theme = get_theme()
    surface = pygame.Surface((104, 20))
    surface.fill((0, 0, 0))
    theme.draw_progress_bar(surface, pygame.Rect(0, 0, 104, 20), 2.5, Colors.HOVER)
    assert surface.get_at((101, 10)) == pygame.Color(*Colors.HOVER)
    surface.fill((0, 0, 0))
    theme.draw_progress_bar(surface, pygame.Rect(0, 0, 104, 20), -1.0, Colors.HOVER)
    assert surface.get_at((50, 10)) == pygame.Color(0, 0, 0)
    assert surface.get_at((0, 10)) == pygame.Color(*Colors.FG_PRIMARY)
