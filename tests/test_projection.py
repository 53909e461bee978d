from __future__ import annotations
import math

import pytest
from hypothesis import given, strategies as st

from core.projection import CARDINALS, ViewMode, cardinal_points, project

CX, CY, R = 200.0, 150.0, 100.0

azimuths = st.floats(min_value=0.0, max_value=360.0, exclude_max=True, allow_nan=False)
elevations = st.floats(min_value=0.0, max_value=90.0, allow_nan=False)


@pytest.mark.parametrize("mode", list(ViewMode))
def test_zenith_projects_to_centre(mode):
    for az in (0.0, 90.0, 217.0):
        x, y = project(az, 90.0, CX, CY, R, mode)
        assert x == pytest.approx(CX)
        assert y == pytest.approx(CY)


@given(az=azimuths, mode=st.sampled_from(list(ViewMode)))
def test_horizon_projects_onto_rim(az, mode):
    x, y = project(az, 0.0, CX, CY, R, mode)
    assert math.hypot(x - CX, y - CY) == pytest.approx(R)


@given(az=azimuths, el=elevations, mode=st.sampled_from(list(ViewMode)))
def test_distance_from_centre_is_linear_in_zenith_angle(az, el, mode):
    x, y = project(az, el, CX, CY, R, mode)
    assert math.hypot(x - CX, y - CY) == pytest.approx(R * (1 - el / 90.0), abs=1e-9)


@pytest.mark.parametrize("mode", list(ViewMode))
def test_due_south_at_45_degrees(mode):
    x, y = project(180.0, 45.0, CX, CY, R, mode)
    assert x == pytest.approx(CX, abs=1e-9)
    assert y == pytest.approx(CY + 50.0)


def test_north_is_up_in_both_modes():
    for mode in ViewMode:
        x, y = project(0.0, 0.0, CX, CY, R, mode)
        assert x == pytest.approx(CX, abs=1e-9)
        assert y == pytest.approx(CY - R)


def test_east_and_west_swap_between_modes():
    east_radar, _ = project(90.0, 0.0, CX, CY, R, ViewMode.RADAR)
    east_sky, _ = project(90.0, 0.0, CX, CY, R, ViewMode.SKY)
    assert east_radar == pytest.approx(CX + R)
    assert east_sky == pytest.approx(CX - R)


def test_cardinal_labels_mirror_order():
    radar = {label: x for label, x, _ in cardinal_points(CX, CY, R, ViewMode.RADAR)}
    sky = {label: x for label, x, _ in cardinal_points(CX, CY, R, ViewMode.SKY)}
    assert [label for label, _ in CARDINALS] == [p[0] for p in cardinal_points(CX, CY, R)]
    assert radar["E"] > CX > radar["W"]
    assert sky["E"] < CX < sky["W"]
    assert radar["NE"] - CX == pytest.approx(CX - sky["NE"])


def test_toggled_mode():
    assert ViewMode.RADAR.toggled() is ViewMode.SKY
    assert ViewMode.SKY.toggled() is ViewMode.RADAR
