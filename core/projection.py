
from __future__ import annotations
import math
from enum import Enum


class ViewMode(Enum):
    """Screen conventions for the horizon disk."""

    RADAR = "radar"  # map view: N up, E right
    SKY = "sky"      # looking up at the sky: E/W mirrored

    def screen_angle_deg(self, azimuth_deg: float) -> float:
        """Screen angle (0 = +x, clockwise since y grows downward)."""
        if self is ViewMode.SKY:
            return 270.0 - azimuth_deg
        return azimuth_deg - 90.0

    def toggled(self) -> "ViewMode":
        return ViewMode.RADAR if self is ViewMode.SKY else ViewMode.SKY


CARDINALS = (
    ("N", 0.0), ("NE", 45.0), ("E", 90.0), ("SE", 135.0),
    ("S", 180.0), ("SW", 225.0), ("W", 270.0), ("NW", 315.0),
)


def project(
    azimuth_deg: float,
    elevation_deg: float,
    center_x: float,
    center_y: float,
    radius: float,
    mode: ViewMode = ViewMode.RADAR,
) -> tuple[float, float]:
    """
    Map (azimuth, elevation) onto the disk.

    Zenith lands on the centre, the horizon on the rim:
    r = radius * (1 - elevation / 90). Only defined for elevation in [0, 90];
    callers drop anything below the horizon first.
    """
    r = radius * (1.0 - elevation_deg / 90.0)
    ang = math.radians(mode.screen_angle_deg(azimuth_deg))
    return center_x + r * math.cos(ang), center_y + r * math.sin(ang)


def cardinal_points(
    center_x: float,
    center_y: float,
    radius: float,
    mode: ViewMode = ViewMode.RADAR,
) -> list[tuple[str, float, float]]:
    """Label positions on a circle of the given radius, in compass order."""
    out = []
    for label, az in CARDINALS:
        x, y = project(az, 0.0, center_x, center_y, radius, mode)
        out.append((label, x, y))
    return out
