"""
Light-time and link figures for deep-space targets.

Distances in km, velocities in km/s (positive = receding), times in seconds.
"""
from __future__ import annotations
import math
from enum import Enum
from typing import NamedTuple, Optional

SPEED_OF_LIGHT_KM_S = 299792.458
MOON_DISTANCE_KM = 384400.0

# X-band downlink and a 70 m DSN dish
X_BAND_HZ = 8.4e9
_TX_POWER_DBW = 43.0
_TX_GAIN_DBI = 48.0
_RX_GAIN_DBI = 74.0

# Reference markers on the distance scale
MILESTONES = (
    ("Moon", MOON_DISTANCE_KM),
    ("Mars", 225e6),
    ("Jupiter", 628e6),
    ("Pluto", 5.9e9),
)


class LightTime(NamedTuple):
    one_way_seconds: float
    round_trip_seconds: float


class SignalPhase(Enum):
    OUTBOUND = "outbound"
    INBOUND = "inbound"


def light_time(distance_km: float) -> LightTime:
    one_way = distance_km / SPEED_OF_LIGHT_KM_S
    return LightTime(one_way, 2.0 * one_way)


def ping_duration_seconds(round_trip_seconds: float, max_real_seconds: float = 15.0) -> float:
    """Wall-clock length of the ping animation: the round trip, capped."""
    return max(0.0, min(round_trip_seconds, max_real_seconds))


def compression_factor(round_trip_seconds: float, real_seconds: float) -> float:
    """Virtual seconds shown per real second of animation."""
    if real_seconds <= 0:
        return 1.0
    return round_trip_seconds / real_seconds


def virtual_elapsed_seconds(progress: float, round_trip_seconds: float) -> float:
    return max(0.0, min(progress, 100.0)) / 100.0 * round_trip_seconds


def signal_phase(progress: float) -> SignalPhase:
    return SignalPhase.OUTBOUND if progress < 50.0 else SignalPhase.INBOUND


def format_duration(seconds: float) -> str:
    s = max(0, int(seconds))
    h, rem = divmod(s, 3600)
    m, sec = divmod(rem, 60)
    return f"{h}h {m}m {sec}s"


def distance_scale_position(distance_km: float, max_distance_km: float) -> float:
    """Log-scale position in percent, Moon at 0 and max_distance at 100."""
    lo = math.log10(MOON_DISTANCE_KM)
    hi = math.log10(max(max_distance_km, MOON_DISTANCE_KM * 10.0))
    d = math.log10(max(distance_km, MOON_DISTANCE_KM))
    return max(0.0, min(100.0, (d - lo) / (hi - lo) * 100.0))


def signal_marker_position(target_position: float, progress: float) -> float:
    """Where the ping marker sits on the scale: out to the target, then home."""
    if progress < 50.0:
        return target_position * (progress / 50.0)
    return target_position * (1.0 - (min(progress, 100.0) - 50.0) / 50.0)


def doppler_shift_hz(velocity_km_s: float, carrier_hz: float = X_BAND_HZ) -> float:
    """First-order shift; receding targets (v > 0) shift down."""
    return -(velocity_km_s / SPEED_OF_LIGHT_KM_S) * carrier_hz


def free_space_path_loss_db(distance_km: float, carrier_hz: float = X_BAND_HZ) -> float:
    return 20.0 * math.log10(distance_km) + 20.0 * math.log10(carrier_hz / 1e9) + 92.45


def received_power_dbm(distance_km: float, reported_dbm: Optional[float] = None) -> float:
    """Estimated received power; a reported DSN measurement takes precedence."""
    if reported_dbm is not None:
        return reported_dbm
    return _TX_POWER_DBW + _TX_GAIN_DBI + _RX_GAIN_DBI - free_space_path_loss_db(distance_km)
