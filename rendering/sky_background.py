
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

import numpy as np

from core.constellation_data import BRIGHT_STARS, constellation_lines
from core.coords import equatorial_to_horizontal_array
from core.projection import ViewMode, project
from core.types import CelestialCatalogEntry, ConstellationLine, ObserverLocation

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProjectedSky:
    stars: list[tuple[float, float, float, str]] = field(default_factory=list)   # x, y, mag, name
    lines: list[tuple[tuple[float, float], tuple[float, float]]] = field(default_factory=list)


class SkyBackground:
    """
    Star and constellation background for the horizon disk.

    Horizontal coordinates are cached and recomputed only when the observer
    moves or the refresh interval elapses. Screen positions are redone when
    the disk geometry or view mode changes.
    """

    def __init__(
        self,
        stars: Sequence[CelestialCatalogEntry] = BRIGHT_STARS,
        lines: Optional[Sequence[ConstellationLine]] = None,
        refresh_ms: float = 30000.0,
    ):
        self.stars = tuple(stars)
        self.lines = tuple(lines) if lines is not None else tuple(constellation_lines())
        self.refresh_ms = refresh_ms
        self.recompute_count = 0

        self._star_ra = np.array([s.ra for s in self.stars], dtype=float)
        self._star_dec = np.array([s.dec for s in self.stars], dtype=float)
        # figures are polylines; each consecutive pair is one segment
        ends = [p for ln in self.lines for a, b in zip(ln.points, ln.points[1:]) for p in (a, b)]
        self._line_ra = np.array([p[0] for p in ends], dtype=float)
        self._line_dec = np.array([p[1] for p in ends], dtype=float)

        self._observer_key = None
        self._computed_ms: Optional[float] = None
        self._star_altaz = None
        self._line_altaz = None
        self._screen_key = None
        self._projected: Optional[ProjectedSky] = None

    def refresh(self, observer: ObserverLocation, instant: datetime, now_ms: float) -> bool:
        """Recompute horizontal coordinates if stale. True if recomputed."""
        key = (observer.latitude, observer.longitude)
        stale = (
            key != self._observer_key
            or self._computed_ms is None
            or now_ms - self._computed_ms >= self.refresh_ms
        )
        if not stale:
            return False
        lat, lng = observer.latitude, observer.longitude
        self._star_altaz = equatorial_to_horizontal_array(self._star_ra, self._star_dec, lat, lng, instant)
        self._line_altaz = equatorial_to_horizontal_array(self._line_ra, self._line_dec, lat, lng, instant)
        self._observer_key = key
        self._computed_ms = now_ms
        self.recompute_count += 1
        logger.debug("Sky background recomputed for %.3f, %.3f", lat, lng)
        return True

    def projected(self, observer: ObserverLocation, instant: datetime, now_ms: float,
                  geometry, mode: ViewMode) -> ProjectedSky:
        recomputed = self.refresh(observer, instant, now_ms)
        screen_key = (geometry.cx, geometry.cy, geometry.radius, mode)
        if recomputed or screen_key != self._screen_key or self._projected is None:
            self._projected = self._project(geometry, mode)
            self._screen_key = screen_key
        return self._projected

    def _project(self, geometry, mode: ViewMode) -> ProjectedSky:
        cx, cy, radius = geometry.cx, geometry.cy, geometry.radius
        out = ProjectedSky()

        az, el = self._star_altaz
        for i in np.flatnonzero(el > 0):
            x, y = project(float(az[i]), float(el[i]), cx, cy, radius, mode)
            s = self.stars[i]
            out.stars.append((x, y, s.mag, s.name))

        laz, lel = self._line_altaz
        for i in range(0, len(laz), 2):
            # segments with an endpoint below the horizon are dropped
            if lel[i] <= 0 or lel[i + 1] <= 0:
                continue
            a = project(float(laz[i]), float(lel[i]), cx, cy, radius, mode)
            b = project(float(laz[i + 1]), float(lel[i + 1]), cx, cy, radius, mode)
            out.lines.append((a, b))
        return out


def star_radius(mag: float) -> float:
    """Glyph radius in px: brighter stars draw larger."""
    return min(4.0, max(1.0, (4.5 - mag) * 0.7))
