"""
Reference-frame transforms for SGP4 output.

TEME/ECI (what SGP4 produces) -> ECEF (rotates with Earth) -> geodetic or
topocentric look angles for an observer on the ground.

All functions accept either one vector of shape (3,) or a batch of shape
(3, N); the math is written component-wise so numpy broadcasts over N.
"""
from __future__ import annotations
import math
from datetime import datetime
from typing import NamedTuple

import numpy as np

from core.astro_time import julian_date

# WGS84
EARTH_A_KM = 6378.137
EARTH_B_KM = 6356.7523142
_F = (EARTH_A_KM - EARTH_B_KM) / EARTH_A_KM
_E2 = 2.0 * _F - _F * _F
TWO_PI = 2.0 * math.pi


class Geodetic(NamedTuple):
    lat: np.ndarray | float     # degrees
    lng: np.ndarray | float     # degrees, East positive, [-180, 180]
    height_km: np.ndarray | float


class LookAngles(NamedTuple):
    azimuth: np.ndarray | float     # degrees, [0, 360)
    elevation: np.ndarray | float   # degrees
    range_km: np.ndarray | float


def gstime_from_jd(jd_ut1):
    """IAU-82 Greenwich sidereal time in radians, [0, 2pi)."""
    tut1 = (np.asarray(jd_ut1, dtype=float) - 2451545.0) / 36525.0
    temp = (-6.2e-6 * tut1 ** 3 + 0.093104 * tut1 ** 2
            + (876600.0 * 3600.0 + 8640184.812866) * tut1 + 67310.54841)
    theta = np.mod(np.radians(temp) / 240.0, TWO_PI)
    return float(theta) if np.ndim(theta) == 0 else theta


def gstime(instant: datetime) -> float:
    return gstime_from_jd(julian_date(instant))


def eci_to_ecf(r, gmst):
    r = np.asarray(r, dtype=float)
    c, s = np.cos(gmst), np.sin(gmst)
    return np.array([
        r[0] * c + r[1] * s,
        -r[0] * s + r[1] * c,
        r[2],
    ])


def eci_to_geodetic(r, gmst) -> Geodetic:
    """Sub-satellite point. Iterative latitude (20 rounds is far past convergence)."""
    r = np.asarray(r, dtype=float)
    x, y, z = r[0], r[1], r[2]
    p = np.sqrt(x * x + y * y)

    lng = np.arctan2(y, x) - gmst
    lng = np.mod(lng + math.pi, TWO_PI) - math.pi

    lat = np.arctan2(z, p)
    c = 1.0
    for _ in range(20):
        sin_lat = np.sin(lat)
        c = 1.0 / np.sqrt(1.0 - _E2 * sin_lat * sin_lat)
        lat = np.arctan2(z + EARTH_A_KM * c * _E2 * sin_lat, p)

    height = p / np.cos(lat) - EARTH_A_KM * c
    return Geodetic(np.degrees(lat), np.degrees(lng), height)


def geodetic_to_ecf(lat_deg: float, lng_deg: float, height_km: float = 0.0) -> np.ndarray:
    lat = math.radians(lat_deg)
    lng = math.radians(lng_deg)
    n = EARTH_A_KM / math.sqrt(1.0 - _E2 * math.sin(lat) ** 2)
    return np.array([
        (n + height_km) * math.cos(lat) * math.cos(lng),
        (n + height_km) * math.cos(lat) * math.sin(lng),
        (n * (1.0 - _E2) + height_km) * math.sin(lat),
    ])


def ecf_to_look_angles(lat_deg: float, lng_deg: float, height_km: float, r_ecf) -> LookAngles:
    """Azimuth/elevation/range of an ECEF point seen from a ground station."""
    r_ecf = np.asarray(r_ecf, dtype=float)
    obs = geodetic_to_ecf(lat_deg, lng_deg, height_km)
    if r_ecf.ndim == 2:
        obs = obs[:, None]
    rx, ry, rz = r_ecf[0] - obs[0], r_ecf[1] - obs[1], r_ecf[2] - obs[2]

    lat = math.radians(lat_deg)
    lng = math.radians(lng_deg)
    sl, cl = math.sin(lat), math.cos(lat)
    so, co = math.sin(lng), math.cos(lng)

    # South-East-Zenith topocentric frame
    top_s = sl * co * rx + sl * so * ry - cl * rz
    top_e = -so * rx + co * ry
    top_z = cl * co * rx + cl * so * ry + sl * rz

    rng = np.sqrt(top_s * top_s + top_e * top_e + top_z * top_z)
    el = np.arcsin(np.clip(top_z / rng, -1.0, 1.0))
    az = np.mod(np.arctan2(-top_e, top_s) + math.pi, TWO_PI)
    return LookAngles(np.mod(np.degrees(az), 360.0), np.degrees(el), rng)
