"""
Zenith Tracker - Main Application

Live satellite radar/sky view and deep-space signal timing:
- Radar screen (objects above the horizon, sweep, orbit path)
- Deep space screen (light time, ping animation)

Frame order: events -> update -> frame scheduler tick -> screen render.
"""

import argparse
import logging
import sys

import pygame

from core.config import ConfigError, load_config
from core.frame_scheduler import FrameScheduler
from core.types import ObserverLocation
from dashboard.state_manager import StateManager
from ui_new.screen_deep_space import DeepSpaceScreen
from ui_new.screen_radar import RadarScreen
from ui_new.theme import get_theme

WIDTH, HEIGHT = 1280, 800
TITLE = "Zenith Tracker"

logger = logging.getLogger("zenith")


def parse_observer(text: str) -> ObserverLocation:
    """"lat,lon[,name]" -> ObserverLocation"""
    parts = [p.strip() for p in text.split(",", 2)]
    if len(parts) < 2:
        raise argparse.ArgumentTypeError("observer must be LAT,LON[,NAME]")
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"bad observer coordinates: {text}") from e
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise argparse.ArgumentTypeError(f"observer out of range: {text}")
    return ObserverLocation(lat, lon, parts[2] if len(parts) > 2 else "")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description=TITLE)
    p.add_argument("--config", help="TOML settings file")
    p.add_argument("--set", action="append", default=[], metavar="KEY=VALUE",
                   help="override a setting, e.g. radar.sweep_rate_rad_s=1.2")
    p.add_argument("--observer", type=parse_observer, metavar="LAT,LON[,NAME]",
                   help="observer location (saved for next time)")
    return p


class ZenithApp:
    """Owns the window, the frame scheduler and the screens."""

    def __init__(self, config, observer=None):
        pygame.init()
        self.config = config
        self.fullscreen = False
        self.screen = pygame.display.set_mode((WIDTH, HEIGHT), pygame.RESIZABLE)
        pygame.display.set_caption(TITLE)
        self.clock = pygame.time.Clock()
        self.theme = get_theme()

        self.scheduler = FrameScheduler(clock=lambda: float(pygame.time.get_ticks()))
        self.state_manager = StateManager(config)
        if observer is not None:
            self.state_manager.set_observer(observer)

        self.state_manager.register_screen("RADAR", RadarScreen(self.state_manager, self.scheduler))
        self.state_manager.register_screen("DEEP_SPACE", DeepSpaceScreen(self.state_manager, self.scheduler))
        self.state_manager.switch_to("RADAR", push_stack=False)
        self.state_manager.refresh_catalog()

        self.running = True
        print(f"\n{TITLE}")
        print("=" * 60)
        obs = self.state_manager.state.observer
        print(f"Observer: {obs.latitude:.3f}, {obs.longitude:.3f} {obs.name}" if obs else
              "Observer: not set (use --observer LAT,LON)")
        print("=" * 60)

    def run(self):
        while self.running:
            dt = self.clock.tick(self.config.fps) / 1000.0

            events = pygame.event.get()
            for event in events:
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_F11:
                    self.toggle_fullscreen()
                elif event.type == pygame.VIDEORESIZE and not self.fullscreen:
                    self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)

            self.state_manager.handle_input(events)
            self.state_manager.update(dt)

            self.screen.fill(self.theme.colors.BG_DARK)
            self.scheduler.tick()
            self.state_manager.render(self.screen)
            pygame.display.flip()

        self.quit()

    def toggle_fullscreen(self):
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            info = pygame.display.Info()
            self.screen = pygame.display.set_mode((info.current_w, info.current_h), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode((WIDTH, HEIGHT), pygame.RESIZABLE)

    def quit(self):
        self.state_manager.shutdown()
        print("\nShutting down...")
        pygame.quit()


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    try:
        config = load_config(args.config, args.set)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        ZenithApp(config, args.observer).run()
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
