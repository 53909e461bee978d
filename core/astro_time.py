
from __future__ import annotations
from datetime import datetime, timezone

# Time utilities for sidereal computations.
# Everything is UTC internally; naive datetimes are taken as UTC.

J2000_JD = 2451545.0
_J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def julian_date(dt: datetime) -> float:
    """Julian Date of an absolute instant (sub-second precise)."""
    delta = to_utc(dt) - _J2000
    return J2000_JD + delta.total_seconds() / 86400.0


def gmst_deg(jd: float) -> float:
    """
    Greenwich Mean Sidereal Time in degrees, [0, 360).
    Third-order polynomial in Julian centuries since J2000.
    """
    d = jd - J2000_JD
    T = d / 36525.0
    gmst = 280.46061837 + 360.98564736629 * d + 0.000387933 * T * T - (T * T * T) / 38710000.0
    return gmst % 360.0


def lst_hours(jd: float, lon_deg: float) -> float:
    """Local sidereal time in hours, wrapped into [0, 24)."""
    return (gmst_deg(jd) / 15.0 + lon_deg / 15.0) % 24.0
