
from __future__ import annotations
import math
from datetime import datetime

import numpy as np

from core.astro_time import julian_date, lst_hours
from core.types import Horizontal

# Denominator guard for the azimuth cosine rule (pole / zenith).
_AZ_EPS = 1e-6


def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x


def wrap_deg(x: float) -> float:
    x = x % 360.0
    return x if x >= 0 else x + 360.0


def ang_diff_deg(a: float, b: float) -> float:
    """Smallest signed difference a-b in degrees in [-180,180)."""
    d = (a - b + 180.0) % 360.0 - 180.0
    return d


def refraction_deg(alt_deg: float) -> float:
    """Bennett's atmospheric refraction, degrees. Zero at or below the horizon."""
    if alt_deg <= 0.0:
        return 0.0
    arcmin = 1.02 / math.tan(math.radians(alt_deg + 10.3 / (alt_deg + 5.11)))
    return arcmin / 60.0


def equatorial_to_horizontal(
    ra_deg: float,
    dec_deg: float,
    lat_deg: float,
    lng_deg: float,
    instant: datetime,
) -> Horizontal:
    """
    Convert J2000 RA/Dec to observed azimuth/elevation.

    Azimuth is measured from North towards East in [0, 360).
    Elevation includes refraction for objects above the horizon.
    """
    lst = lst_hours(julian_date(instant), lng_deg)
    ha_hours = (lst - ra_deg / 15.0) % 24.0
    ha = math.radians(ha_hours * 15.0)
    dec = math.radians(dec_deg)
    lat = math.radians(lat_deg)

    sin_el = math.sin(dec) * math.sin(lat) + math.cos(dec) * math.cos(lat) * math.cos(ha)
    el = math.asin(clamp(sin_el, -1.0, 1.0))

    el_deg = math.degrees(el)
    el_deg += refraction_deg(el_deg)

    # azimuth uses the geometric elevation
    denom = math.cos(el) * math.cos(lat)
    if abs(denom) > _AZ_EPS:
        cos_az = clamp((math.sin(dec) - math.sin(el) * math.sin(lat)) / denom, -1.0, 1.0)
        az_deg = math.degrees(math.acos(cos_az))
        if math.sin(ha) > 0:
            az_deg = 360.0 - az_deg
    else:
        az_deg = 0.0

    return Horizontal(wrap_deg(az_deg), clamp(el_deg, -90.0, 90.0))


def equatorial_to_horizontal_array(
    ra_deg: np.ndarray,
    dec_deg: np.ndarray,
    lat_deg: float,
    lng_deg: float,
    instant: datetime,
) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised version of equatorial_to_horizontal. Returns (az, el) arrays."""
    ra = np.asarray(ra_deg, dtype=float)
    dec = np.radians(np.asarray(dec_deg, dtype=float))
    lat = math.radians(lat_deg)

    lst = lst_hours(julian_date(instant), lng_deg)
    ha = np.radians(((lst - ra / 15.0) % 24.0) * 15.0)

    sin_el = np.sin(dec) * math.sin(lat) + np.cos(dec) * math.cos(lat) * np.cos(ha)
    el = np.arcsin(np.clip(sin_el, -1.0, 1.0))
    el_deg = np.degrees(el)

    above = el_deg > 0.0
    safe = np.where(above, el_deg, 1.0)
    refr = 1.02 / np.tan(np.radians(safe + 10.3 / (safe + 5.11))) / 60.0
    el_deg = np.where(above, el_deg + refr, el_deg)

    denom = np.cos(el) * math.cos(lat)
    ok = np.abs(denom) > _AZ_EPS
    cos_az = np.clip((np.sin(dec) - np.sin(el) * math.sin(lat)) / np.where(ok, denom, 1.0), -1.0, 1.0)
    az = np.degrees(np.arccos(cos_az))
    az = np.where(np.sin(ha) > 0, 360.0 - az, az)
    az = np.where(ok, az, 0.0) % 360.0

    return az, np.clip(el_deg, -90.0, 90.0)


def stable_hash_angle(text: str) -> float:
    """
    Deterministic bearing in [0, 360) derived from a string.

    Used as a placeholder position for objects with no known right ascension;
    it carries no astronomical meaning.
    """
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return float(abs(h) % 360)
