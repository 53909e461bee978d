
from __future__ import annotations
import dataclasses
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    pass


@dataclass(slots=True)
class RadarSettings:
    sweep_rate_rad_s: float = 0.8
    sweep_tolerance_deg: float = 1.5
    pulse_duration_ms: float = 1000.0
    trail_interval_ms: float = 1000.0
    trail_capacity: int = 16
    trail_min_move_px: float = 1.0
    mouse_hit_px: float = 10.0
    touch_hit_px: float = 30.0
    label_margin_px: float = 65.0
    catalog_refresh_ms: float = 30000.0


@dataclass(slots=True)
class PathSettings:
    object_refresh_ms: float = 500.0
    duration_minutes: float = 90.0
    step_minutes: float = 0.2


@dataclass(slots=True)
class PingSettings:
    max_real_seconds: float = 15.0


@dataclass(slots=True)
class DataSettings:
    tle_sources: list[str] = field(default_factory=lambda: [
        "https://celestrak.org/NORAD/elements/gp.php?GROUP=stations&FORMAT=tle",
        "https://live.ariss.org/iss.txt",
    ])
    request_timeout_s: float = 10.0
    spacecraft_file: str = "data/spacecraft.json"
    observer_file: str = "observer.json"


@dataclass(slots=True)
class DashboardConfig:
    radar: RadarSettings = field(default_factory=RadarSettings)
    path: PathSettings = field(default_factory=PathSettings)
    ping: PingSettings = field(default_factory=PingSettings)
    data: DataSettings = field(default_factory=DataSettings)
    log_level: str = "INFO"
    fps: int = 60


def load_toml(path: str | Path) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def merge_dicts(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = merge_dicts(out[k], v)
        else:
            out[k] = v
    return out


def parse_scalar(s: str):
    sl = s.lower()
    if sl in ("true", "false"):
        return sl == "true"
    try:
        if "." in s or "e" in sl:
            return float(s)
        return int(s)
    except ValueError:
        return s


def apply_overrides(raw: Dict[str, Any], sets: Iterable[str]) -> Dict[str, Any]:
    """Apply dotted key=value overrides, e.g. "radar.sweep_rate_rad_s=1.2"."""
    for item in sets:
        if "=" not in item:
            raise ConfigError(f"override requires key=value, got: {item}")
        key, val = item.split("=", 1)
        path = key.strip().split(".")
        cursor = raw
        for p in path[:-1]:
            if not isinstance(cursor.get(p), dict):
                cursor[p] = {}
            cursor = cursor[p]
        cursor[path[-1]] = parse_scalar(val.strip())
    return raw


def _coerce(value, default, name: str):
    """Check value against the type of the field default; ints widen to float."""
    if isinstance(default, bool):
        ok = isinstance(value, bool)
    elif isinstance(default, float):
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        if ok:
            value = float(value)
    elif isinstance(default, int):
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif isinstance(default, list):
        ok = isinstance(value, list) and all(isinstance(v, str) for v in value)
    else:
        ok = isinstance(value, type(default))
    if not ok:
        raise ConfigError(f"{name} expects {type(default).__name__}, got {value!r}")
    return value


def _build(cls, values: Dict[str, Any], where: str):
    known = {f.name: f for f in dataclasses.fields(cls)}
    kwargs = {}
    for key, value in values.items():
        if key not in known:
            raise ConfigError(f"unknown setting {where}{key}")
        f = known[key]
        default = f.default_factory() if f.default_factory is not dataclasses.MISSING else f.default
        if dataclasses.is_dataclass(default):
            if not isinstance(value, dict):
                raise ConfigError(f"{where}{key} must be a table, got {value!r}")
            kwargs[key] = _build(type(default), value, f"{where}{key}.")
        else:
            kwargs[key] = _coerce(value, default, f"{where}{key}")
    return cls(**kwargs)


def load_config(path: str | Path | None = None, overrides: Iterable[str] = ()) -> DashboardConfig:
    """Defaults, then the TOML file (if any), then overrides."""
    raw: Dict[str, Any] = {}
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"config file not found: {p}")
        try:
            raw = merge_dicts(raw, load_toml(p))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"invalid TOML in {p}: {e}") from e
        logger.info("Loaded config from %s", p)
    raw = apply_overrides(raw, overrides)
    return _build(DashboardConfig, raw, "")
