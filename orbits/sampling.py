"""
Orbit sampling: look angles now, a sampled future path, and classical
orbital parameters, all from a two-line element set.

Propagation itself is the sgp4 library. Everything here is tolerant of bad
element sets: a failed object yields None (or is skipped), never an exception.
"""
from __future__ import annotations
import logging
import math
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Iterable, Optional

import numpy as np
from sgp4.api import Satrec, jday

from core.astro_time import to_utc
from core.types import (
    HorizonPosition,
    ObserverLocation,
    OrbitalElementSet,
    OrbitalParameters,
    VisualObject,
)
from orbits.frames import eci_to_ecf, eci_to_geodetic, ecf_to_look_angles, gstime_from_jd

logger = logging.getLogger(__name__)

MU_KM3_S2 = 398600.4418
EARTH_RADIUS_KM = 6371.0


@lru_cache(maxsize=512)
def _satrec(line1: str, line2: str) -> Satrec:
    return Satrec.twoline2rv(line1, line2)


def _well_formed(line1: str, line2: str) -> bool:
    return (
        len(line1) >= 69 and len(line2) >= 69
        and line1.startswith("1 ") and line2.startswith("2 ")
    )


def load_satrec(element_set: OrbitalElementSet) -> Optional[Satrec]:
    if not _well_formed(element_set.line1, element_set.line2):
        return None
    try:
        sat = _satrec(element_set.line1, element_set.line2)
    except (ValueError, TypeError, IndexError) as e:
        logger.debug("Unparseable element set %s: %s", element_set.id, e)
        return None
    if sat.error != 0:
        return None
    return sat


def _jday(instant: datetime) -> tuple[float, float]:
    t = to_utc(instant)
    return jday(t.year, t.month, t.day, t.hour, t.minute, t.second + t.microsecond / 1e6)


def _positions(r_eci: np.ndarray, v_eci: np.ndarray, jd_total, observer: ObserverLocation):
    """r/v as (3, N) arrays -> (look angles, geodetic, speed)."""
    gmst = gstime_from_jd(jd_total)
    look = ecf_to_look_angles(observer.latitude, observer.longitude, 0.0, eci_to_ecf(r_eci, gmst))
    geo = eci_to_geodetic(r_eci, gmst)
    speed = np.sqrt(np.sum(v_eci * v_eci, axis=0))
    return look, geo, speed


def current_look_angle(
    element_set: OrbitalElementSet,
    instant: datetime,
    observer: ObserverLocation,
) -> Optional[HorizonPosition]:
    """Where the object is right now as seen by the observer, or None."""
    sat = load_satrec(element_set)
    if sat is None:
        return None
    jd, fr = _jday(instant)
    err, r, v = sat.sgp4(jd, fr)
    if err != 0 or not all(math.isfinite(c) for c in r):
        return None

    look, geo, speed = _positions(np.asarray(r), np.asarray(v), jd + fr, observer)
    return HorizonPosition(
        azimuth=float(look.azimuth),
        elevation=float(look.elevation),
        range_km=float(look.range_km),
        height_km=float(geo.height_km),
        lat=float(geo.lat),
        lng=float(geo.lng),
        velocity_km_s=float(speed),
        time=to_utc(instant),
    )


def future_path(
    element_set: OrbitalElementSet,
    start: datetime,
    duration_minutes: float,
    observer: ObserverLocation,
    step_minutes: float = 1.0,
) -> list[HorizonPosition]:
    """
    Sample [0, duration] at a fixed step. Steps that fail to propagate are
    dropped; the rest keep their own timestamps.
    """
    if not step_minutes > 0:
        logger.warning("Ignoring path request with non-positive step %r", step_minutes)
        return []
    sat = load_satrec(element_set)
    if sat is None:
        return []

    # small epsilon so the closing sample survives float accumulation
    offsets = np.arange(0.0, duration_minutes + step_minutes * 1e-6, step_minutes)
    jd0, fr0 = _jday(start)
    fr = fr0 + offsets / 1440.0
    jd = np.full_like(fr, jd0)
    errs, r, v = sat.sgp4_array(jd, fr)

    ok = (errs == 0) & np.all(np.isfinite(r), axis=1)
    if not ok.any():
        return []
    look, geo, _ = _positions(r[ok].T, v[ok].T, jd[ok] + fr[ok], observer)

    t0 = to_utc(start)
    out = []
    for i, minutes in enumerate(offsets[ok]):
        out.append(HorizonPosition(
            azimuth=float(look.azimuth[i]),
            elevation=float(look.elevation[i]),
            range_km=float(look.range_km[i]),
            height_km=float(geo.height_km[i]),
            lat=float(geo.lat[i]),
            lng=float(geo.lng[i]),
            velocity_km_s=0.0,
            time=t0 + timedelta(minutes=float(minutes)),
        ))
    return out


def orbital_parameters(element_set: OrbitalElementSet) -> Optional[OrbitalParameters]:
    """Perigee/apogee altitude above a spherical Earth, and inclination."""
    sat = load_satrec(element_set)
    if sat is None:
        return None
    n = sat.no_kozai / 60.0  # rad/min -> rad/s
    if not n > 0:
        return None
    a = (MU_KM3_S2 / (n * n)) ** (1.0 / 3.0)
    e = sat.ecco
    return OrbitalParameters(
        perigee_km=max(0.0, a * (1.0 - e) - EARTH_RADIUS_KM),
        apogee_km=max(0.0, a * (1.0 + e) - EARTH_RADIUS_KM),
        inclination_deg=math.degrees(sat.inclo),
    )


def visible_objects(
    element_sets: Iterable[OrbitalElementSet],
    instant: datetime,
    observer: ObserverLocation,
) -> list[VisualObject]:
    """Objects above the horizon right now. Failures are skipped."""
    out = []
    for es in element_sets:
        pos = current_look_angle(es, instant, observer)
        if pos is None or not pos.above_horizon:
            continue
        out.append(VisualObject(id=es.id, name=es.name, type=es.type, position=pos))
    return out


def prune_elapsed(path: Iterable[HorizonPosition], now: datetime) -> list[HorizonPosition]:
    now = to_utc(now)
    return [p for p in path if p.time is None or p.time > now]
