from __future__ import annotations
import json
from pathlib import Path

import pytest

from conftest import TLE_TEXT
from core.config import ConfigError, DashboardConfig, apply_overrides, load_config, merge_dicts
from core.snapshot import LatestSnapshot
from core.types import ObserverLocation
from dashboard.state_manager import CatalogSnapshot, ObserverStore, StateManager
from orbits.tle_catalog import DataSource, parse_tle_text


# ---------- config ----------


def test_defaults_without_file():
    cfg = load_config()
    assert isinstance(cfg, DashboardConfig)
    assert cfg.radar.sweep_rate_rad_s == 0.8
    assert cfg.radar.mouse_hit_px == 10.0 and cfg.radar.touch_hit_px == 30.0
    assert cfg.path.duration_minutes == 90.0
    assert cfg.ping.max_real_seconds == 15.0


def test_toml_file_overrides_defaults(tmp_path):
    p = tmp_path / "zenith.toml"
    p.write_text('log_level = "DEBUG"\n[radar]\ntrail_capacity = 8\n[data]\ntle_sources = ["a", "b"]\n')
    cfg = load_config(p, ["radar.sweep_rate_rad_s=1.5", "fps=30"])
    assert cfg.log_level == "DEBUG"
    assert cfg.radar.trail_capacity == 8
    assert cfg.radar.sweep_rate_rad_s == 1.5
    assert cfg.radar.pulse_duration_ms == 1000.0
    assert cfg.data.tle_sources == ["a", "b"]
    assert cfg.fps == 30


def test_shipped_example_config_loads():
    cfg = load_config(Path(__file__).resolve().parents[1] / "config" / "zenith.toml")
    assert cfg.radar.sweep_tolerance_deg == 1.5


@pytest.mark.parametrize("content,overrides", [
    ("[radar]\nwobble = 1\n", []),
    ("colour = 'red'\n", []),
    ("", ["radar.nope=1"]),
    ("", ["no-equals-sign"]),
    ("[radar\n", []),
    ("", ["radar.sweep_rate_rad_s=fast"]),
    ("", ["path=3"]),
    ("radar = 5\n", []),
    ("[radar]\ntrail_capacity = 2.5\n", []),
    ("[data]\ntle_sources = \"https://example.org\"\n", []),
    ("log_level = 1\n", []),
])
def test_bad_config_is_rejected(tmp_path, content, overrides):
    p = tmp_path / "bad.toml"
    p.write_text(content)
    with pytest.raises(ConfigError):
        load_config(p, overrides)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.toml")


def test_merge_and_override_helpers():
    assert merge_dicts({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}}) == {"a": {"x": 1, "y": 3}}
    assert apply_overrides({}, ["a.b=true", "a.c=2", "a.d=hello"]) == {"a": {"b": True, "c": 2, "d": "hello"}}


# ---------- snapshot ----------


def test_latest_snapshot_replaces_value():
    snap = LatestSnapshot(CatalogSnapshot())
    snap.update(loading=True)
    assert snap.get().loading is True
    snap.publish(CatalogSnapshot(source=DataSource.MIRROR))
    assert snap.get().source is DataSource.MIRROR
    assert snap.get().loading is False
    assert snap.version == 2


# ---------- observer persistence ----------


def test_observer_round_trip(tmp_path):
    store = ObserverStore(tmp_path / "observer.json")
    assert store.load() is None
    store.save(ObserverLocation(44.8, 10.33, "Parma"))
    assert store.load() == ObserverLocation(44.8, 10.33, "Parma")


@pytest.mark.parametrize("payload", [
    "{not json",
    json.dumps({"latitude": 0.0, "longitude": 0.0}),
    json.dumps({"latitude": 120.0, "longitude": 0.0}),
    json.dumps({"name": "nowhere"}),
])
def test_invalid_stored_observer_is_ignored(tmp_path, payload):
    p = tmp_path / "observer.json"
    p.write_text(payload)
    assert ObserverStore(p).load() is None


# ---------- state manager ----------


def _manager(tmp_path, fetcher):
    return StateManager(DashboardConfig(), ObserverStore(tmp_path / "observer.json"), fetcher=fetcher)


def test_set_observer_replaces_and_persists(tmp_path):
    mgr = _manager(tmp_path, lambda *a, **k: ([], DataSource.ERROR))
    assert mgr.state.observer is None
    mgr.set_observer(ObserverLocation(51.5, -0.12, "London"))
    mgr.set_observer(ObserverLocation(-33.9, 18.4, "Cape Town"))
    assert mgr.state.observer.name == "Cape Town"
    assert _manager(tmp_path, None).state.observer.name == "Cape Town"


def test_refresh_catalog_publishes_snapshot(tmp_path):
    sets = parse_tle_text(TLE_TEXT)
    mgr = _manager(tmp_path, lambda sources, timeout: (sets, DataSource.FALLBACK))
    mgr.refresh_catalog(background=False)
    snap = mgr.state.catalog.get()
    assert snap.element_sets == tuple(sets)
    assert snap.source is DataSource.FALLBACK
    assert not snap.loading
    assert snap.fetched_at is not None


def test_failed_refresh_keeps_last_good_catalog(tmp_path):
    sets = parse_tle_text(TLE_TEXT)
    results = [(sets, DataSource.MIRROR), ([], DataSource.ERROR)]
    mgr = _manager(tmp_path, lambda sources, timeout: results.pop(0))
    mgr.refresh_catalog(background=False)
    mgr.refresh_catalog(background=False)
    snap = mgr.state.catalog.get()
    assert snap.element_sets == tuple(sets)
    assert snap.source is DataSource.ERROR


def test_raising_fetcher_reports_error(tmp_path):
    def boom(sources, timeout):
        raise RuntimeError("network stack exploded")

    mgr = _manager(tmp_path, boom)
    mgr.refresh_catalog(background=False)
    assert mgr.state.catalog.get().source is DataSource.ERROR


def test_screen_navigation(tmp_path):
    class Screen:
        def __init__(self, target=None):
            self.log = []
            self.target = target

        def on_enter(self):
            self.log.append("enter")

        def on_exit(self):
            self.log.append("exit")

        def handle_input(self, events):
            return self.target

        def update(self, dt):
            self.log.append("update")

        def render(self, surface):
            pass

    mgr = _manager(tmp_path, None)
    a, b = Screen(target="B"), Screen()
    mgr.register_screen("A", a)
    mgr.register_screen("B", b)
    mgr.switch_to("A", push_stack=False)
    mgr.handle_input([])
    assert mgr.current_screen == "B"
    assert a.log == ["enter", "exit"]
    assert mgr.go_back() is True
    assert mgr.current_screen == "A"
    assert mgr.go_back() is False
    mgr.switch_to("MISSING")
    assert mgr.current_screen == "A"


def test_integer_settings_widen_to_float():
    cfg = load_config(None, ["radar.sweep_rate_rad_s=2", "ping.max_real_seconds=10"])
    assert isinstance(cfg.radar.sweep_rate_rad_s, float) and cfg.radar.sweep_rate_rad_s == 2.0
    assert isinstance(cfg.ping.max_real_seconds, float)
