"""
Dashboard State Manager

Holds the shared dashboard state, persists the observer location and
drives screen navigation. The element-set catalog is refreshed on a
background thread and handed over through a LatestSnapshot.
"""
from __future__ import annotations
import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Optional

import pygame

from core.config import DashboardConfig
from core.projection import ViewMode
from core.snapshot import LatestSnapshot
from core.types import ObserverLocation, OrbitalElementSet
from orbits.tle_catalog import DataSource, fetch_element_sets

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CatalogSnapshot:
    element_sets: tuple[OrbitalElementSet, ...] = ()
    source: Optional[DataSource] = None
    loading: bool = False
    fetched_at: Optional[datetime] = None


@dataclass
class DashboardState:
    """Global dashboard state"""
    observer: Optional[ObserverLocation] = None
    selected_id: Optional[str] = None
    view_mode: ViewMode = ViewMode.RADAR
    selected_spacecraft: Optional[str] = None
    catalog: LatestSnapshot = field(default_factory=lambda: LatestSnapshot(CatalogSnapshot()))


class ObserverStore:
    """JSON file holding the last observer location."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Optional[ObserverLocation]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            obs = ObserverLocation(
                latitude=float(data["latitude"]),
                longitude=float(data["longitude"]),
                name=str(data.get("name", "")),
            )
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable observer file %s: %s", self.path, e)
            return None
        if obs.is_placeholder or not (-90.0 <= obs.latitude <= 90.0) or not (-180.0 <= obs.longitude <= 180.0):
            logger.warning("Ignoring invalid stored observer %s", obs)
            return None
        return obs

    def save(self, observer: ObserverLocation) -> None:
        payload = {"name": observer.name, "latitude": observer.latitude, "longitude": observer.longitude}
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Observer saved to %s", self.path)


class StateManager:
    """
    Dashboard state and screen navigation

    - screen registration and lifecycle
    - navigation with a back stack
    - observer location (replaced as a whole, persisted)
    - background catalog refresh
    """

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        store: Optional[ObserverStore] = None,
        fetcher: Callable = fetch_element_sets,
    ):
        self.config = config or DashboardConfig()
        self.store = store or ObserverStore(self.config.data.observer_file)
        self.fetcher = fetcher
        self.state = DashboardState(observer=self.store.load())
        self.screens: Dict[str, 'BaseScreen'] = {}
        self.current_screen: Optional[str] = None
        self.screen_stack: list[str] = []
        self._fetch_thread: Optional[threading.Thread] = None

    # --- screens ---------------------------------------------------------

    def register_screen(self, name: str, screen: 'BaseScreen'):
        self.screens[name] = screen
        logger.debug("Registered screen: %s", name)

    def switch_to(self, screen_name: str, push_stack: bool = True):
        if screen_name not in self.screens:
            logger.warning("Screen '%s' not registered", screen_name)
            return

        if self.current_screen:
            if push_stack:
                self.screen_stack.append(self.current_screen)
            self.screens[self.current_screen].on_exit()

        self.current_screen = screen_name
        self.screens[screen_name].on_enter()
        logger.info("Switched to screen: %s", screen_name)

    def go_back(self) -> bool:
        if not self.screen_stack:
            return False
        self.switch_to(self.screen_stack.pop(), push_stack=False)
        return True

    def update(self, dt: float):
        if self.current_screen:
            self.screens[self.current_screen].update(dt)

    def render(self, surface: pygame.Surface):
        if self.current_screen:
            self.screens[self.current_screen].render(surface)

    def handle_input(self, events: list[pygame.event.Event]):
        if not self.current_screen:
            return
        next_screen = self.screens[self.current_screen].handle_input(events)
        if next_screen:
            self.switch_to(next_screen)

    def shutdown(self):
        if self.current_screen:
            self.screens[self.current_screen].on_exit()
            self.current_screen = None

    # --- observer --------------------------------------------------------

    def set_observer(self, observer: ObserverLocation, persist: bool = True):
        """Replace the observer location. Partial updates are not supported."""
        self.state.observer = observer
        if persist:
            try:
                self.store.save(observer)
            except OSError as e:
                logger.warning("Could not persist observer: %s", e)

    # --- catalog ---------------------------------------------------------

    def refresh_catalog(self, background: bool = True):
        """Fetch element sets; results land in state.catalog when done."""
        if self._fetch_thread is not None and self._fetch_thread.is_alive():
            return
        self.state.catalog.update(loading=True)
        if not background:
            self._fetch()
            return
        self._fetch_thread = threading.Thread(target=self._fetch, name="tle-fetch", daemon=True)
        self._fetch_thread.start()

    def _fetch(self):
        data = self.config.data
        try:
            sets, source = self.fetcher(data.tle_sources, timeout=data.request_timeout_s)
        except Exception:
            logger.exception("Element set fetch failed")
            sets, source = [], DataSource.ERROR
        previous = self.state.catalog.get()
        if not sets and previous.element_sets:
            # keep the last good catalog
            self.state.catalog.publish(CatalogSnapshot(previous.element_sets, source, False, previous.fetched_at))
            return
        self.state.catalog.publish(CatalogSnapshot(tuple(sets), source, False, datetime.now(timezone.utc)))
