from __future__ import annotations
import os

# headless pygame for renderer and screen tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from datetime import datetime, timezone

import pytest
from hypothesis import strategies as st

from core.frame_scheduler import FrameScheduler
from core.types import HorizonPosition, ObjectType, ObserverLocation, OrbitalElementSet, VisualObject

# ---------- Shared data ----------

ISS_LINE1 = "1 25544U 98067A   19343.69339541  .00001764  00000-0  38792-4 0  9991"
ISS_LINE2 = "2 25544  51.6439 211.2001 0007417  17.6667  85.6398 15.50103472202482"
ISS_EPOCH = datetime(2019, 12, 9, 16, 38, 29, tzinfo=timezone.utc)

TLE_TEXT = f"""ISS (ZARYA)
{ISS_LINE1}
{ISS_LINE2}
"""


# ---------- Shared fixtures ----------


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, ms: float) -> float:
        self.t += ms
        return self.t


class FakeSurface:
    """Anything the engine can ask for a size."""

    def __init__(self, w: int = 400, h: int = 400):
        self.size = (w, h)

    def get_size(self):
        return self.size


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1000.0)


@pytest.fixture
def scheduler(clock) -> FrameScheduler:
    return FrameScheduler(clock=clock)


@pytest.fixture
def observer() -> ObserverLocation:
    return ObserverLocation(latitude=44.80, longitude=10.33, name="Parma")


@pytest.fixture
def iss() -> OrbitalElementSet:
    return OrbitalElementSet(
        id="25544", name="ISS (ZARYA)", type=ObjectType.SPACE_STATION,
        line1=ISS_LINE1, line2=ISS_LINE2, cospar="1998-067-A",
    )


def make_object(obj_id: str, az: float, el: float, name: str = "", kind: str = ObjectType.SATELLITE) -> VisualObject:
    pos = HorizonPosition(azimuth=az, elevation=el, range_km=1000.0, height_km=500.0,
                          lat=0.0, lng=0.0, velocity_km_s=7.5)
    return VisualObject(id=obj_id, name=name or f"SAT {obj_id}", type=kind, position=pos)


# ---------- Hypothesis strategies ----------

finite = dict(allow_nan=False, allow_infinity=False)
ra_deg = st.floats(min_value=0.0, max_value=360.0, exclude_max=True, **finite)
dec_deg = st.floats(min_value=-90.0, max_value=90.0, **finite)
lat_deg = st.floats(min_value=-90.0, max_value=90.0, **finite)
lng_deg = st.floats(min_value=-180.0, max_value=180.0, **finite)
instants = st.datetimes(
    min_value=datetime(1990, 1, 1), max_value=datetime(2060, 1, 1), timezones=st.just(timezone.utc)
)
