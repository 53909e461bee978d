from __future__ import annotations
import math
from datetime import datetime, timezone

from core.projection import ViewMode
from core.types import CelestialCatalogEntry, ConstellationLine, ObserverLocation
from core.constellation_data import BRIGHT_STARS, constellation_lines
from rendering.radar_engine import Geometry
from rendering.sky_background import SkyBackground, star_radius

WHEN = datetime(2024, 1, 15, 22, 0, tzinfo=timezone.utc)
GEOM = Geometry(400, 400, 200.0, 200.0, 135.0)


def test_catalog_data_is_consistent():
    names = {s.name for s in BRIGHT_STARS}
    assert "Polaris" in names and "Vega" in names
    lines = constellation_lines()
    assert lines
    for ln in lines:
        assert len(ln.points) == 2
        for ra, dec in ln.points:
            assert 0.0 <= ra < 360.0 and -90.0 <= dec <= 90.0


def test_projection_is_cached_until_refresh_interval(observer):
    sky = SkyBackground(refresh_ms=30000.0)
    first = sky.projected(observer, WHEN, 0.0, GEOM, ViewMode.SKY)
    again = sky.projected(observer, WHEN, 29999.0, GEOM, ViewMode.SKY)
    assert again is first
    assert sky.recompute_count == 1
    sky.projected(observer, WHEN, 30000.0, GEOM, ViewMode.SKY)
    assert sky.recompute_count == 2


def test_location_change_forces_recompute(observer):
    sky = SkyBackground()
    sky.projected(observer, WHEN, 0.0, GEOM, ViewMode.SKY)
    sky.projected(ObserverLocation(-33.9, 18.4, "Cape Town"), WHEN, 10.0, GEOM, ViewMode.SKY)
    assert sky.recompute_count == 2


def test_geometry_or_mode_change_reprojects_without_recompute(observer):
    sky = SkyBackground()
    a = sky.projected(observer, WHEN, 0.0, GEOM, ViewMode.SKY)
    b = sky.projected(observer, WHEN, 10.0, GEOM, ViewMode.RADAR)
    c = sky.projected(observer, WHEN, 20.0, Geometry(800, 800, 400.0, 400.0, 335.0), ViewMode.RADAR)
    assert sky.recompute_count == 1
    assert a is not b and b is not c


def test_only_stars_above_horizon_inside_disk(observer):
    sky = SkyBackground()
    out = sky.projected(observer, WHEN, 0.0, GEOM, ViewMode.SKY)
    assert 0 < len(out.stars) < len(BRIGHT_STARS)
    for x, y, _mag, _name in out.stars:
        assert math.hypot(x - GEOM.cx, y - GEOM.cy) <= GEOM.radius + 1e-9
    # Polaris never sets at 45N
    assert any(name == "Polaris" for *_, name in out.stars)


def test_lines_with_endpoint_below_horizon_are_dropped():
    stars = [CelestialCatalogEntry(0.0, 0.0, 1.0, "x")]
    lines = [ConstellationLine("split", ((0.0, 89.0), (0.0, -89.0)))]
    sky = SkyBackground(stars=stars, lines=lines)
    out = sky.projected(ObserverLocation(45.0, 0.0), WHEN, 0.0, GEOM, ViewMode.RADAR)
    assert out.lines == []


def test_star_radius_grows_with_brightness():
    assert star_radius(-1.5) >= star_radius(1.0) >= star_radius(4.0) >= 1.0


def test_polylines_split_into_segments_and_short_lines_are_ignored():
    lines = [
        ConstellationLine("three", ((0.0, 80.0), (90.0, 80.0), (180.0, 80.0))),
        ConstellationLine("single", ((10.0, 70.0),)),
        ConstellationLine("pair", ((0.0, 75.0), (180.0, 75.0))),
    ]
    sky = SkyBackground(stars=[CelestialCatalogEntry(0.0, 89.0, 2.0, "x")], lines=lines)
    out = sky.projected(ObserverLocation(89.9, 0.0), WHEN, 0.0, GEOM, ViewMode.RADAR)
    assert len(out.lines) == 3


def test_background_without_any_segments():
    lines = [ConstellationLine("single", ((10.0, 70.0),))]
    sky = SkyBackground(stars=[CelestialCatalogEntry(0.0, 89.0, 2.0, "x")], lines=lines)
    out = sky.projected(ObserverLocation(89.9, 0.0), WHEN, 0.0, GEOM, ViewMode.RADAR)
    assert out.lines == []
    assert len(out.stars) == 1
