from __future__ import annotations
import math
from datetime import datetime, timezone

import numpy as np
import pytest
from hypothesis import given, settings

from conftest import dec_deg, instants, lat_deg, lng_deg, ra_deg
from core.astro_time import gmst_deg, julian_date, lst_hours
from core.coords import (
    ang_diff_deg,
    equatorial_to_horizontal,
    equatorial_to_horizontal_array,
    refraction_deg,
    stable_hash_angle,
)

T0 = datetime(2024, 3, 20, 21, 0, tzinfo=timezone.utc)


# ---------- time ----------


def test_julian_date_at_j2000():
    assert julian_date(datetime(2000, 1, 1, 12, tzinfo=timezone.utc)) == pytest.approx(2451545.0, abs=1e-9)


def test_naive_datetime_is_utc():
    aware = datetime(2021, 6, 1, 3, 4, 5, tzinfo=timezone.utc)
    assert julian_date(aware.replace(tzinfo=None)) == julian_date(aware)


def test_gmst_at_j2000():
    assert gmst_deg(2451545.0) == pytest.approx(280.46061837, abs=1e-9)


def test_lst_is_wrapped():
    jd = julian_date(T0)
    for lng in (-180.0, -45.0, 0.0, 90.0, 180.0):
        assert 0.0 <= lst_hours(jd, lng) < 24.0


# ---------- equatorial -> horizontal ----------


@settings(max_examples=300, deadline=None)
@given(ra=ra_deg, dec=dec_deg, lat=lat_deg, lng=lng_deg, when=instants)
def test_horizontal_is_always_in_range(ra, dec, lat, lng, when):
    az, el = equatorial_to_horizontal(ra, dec, lat, lng, when)
    assert 0.0 <= az < 360.0
    assert -90.0 <= el <= 90.0


@pytest.mark.parametrize("lat,lng", [(45.0, 10.0), (-33.9, 18.4), (0.0, -70.0)])
def test_object_on_meridian_at_declination_equal_latitude_is_at_zenith(lat, lng):
    ra = lst_hours(julian_date(T0), lng) * 15.0
    _, el = equatorial_to_horizontal(ra, lat, lat, lng, T0)
    assert el == pytest.approx(90.0, abs=1e-3)


def test_meridian_transit_south_of_zenith_has_azimuth_180():
    lat, lng = 45.0, 10.0
    ra = lst_hours(julian_date(T0), lng) * 15.0
    az, el = equatorial_to_horizontal(ra, 10.0, lat, lng, T0)
    assert az == pytest.approx(180.0, abs=1e-4)
    assert el == pytest.approx(55.0, abs=0.05)


def test_rising_object_is_east_setting_object_is_west():
    lat, lng = 45.0, 10.0
    lst_deg = lst_hours(julian_date(T0), lng) * 15.0
    # hour angle -6h: rising, +6h: setting
    az_rise, _ = equatorial_to_horizontal((lst_deg + 90.0) % 360.0, 0.0, lat, lng, T0)
    az_set, _ = equatorial_to_horizontal((lst_deg - 90.0) % 360.0, 0.0, lat, lng, T0)
    assert az_rise == pytest.approx(90.0, abs=0.5)
    assert az_set == pytest.approx(270.0, abs=0.5)


def test_refraction_only_above_horizon():
    assert refraction_deg(0.0) == 0.0
    assert refraction_deg(-5.0) == 0.0
    assert refraction_deg(10.0) == pytest.approx(0.09, abs=0.005)
    assert refraction_deg(1.0) > refraction_deg(30.0) > 0.0


def test_array_version_matches_scalar():
    rng = np.random.default_rng(7)
    ra = rng.uniform(0, 360, 50)
    dec = rng.uniform(-90, 90, 50)
    az, el = equatorial_to_horizontal_array(ra, dec, 44.8, 10.33, T0)
    for i in range(50):
        exp_az, exp_el = equatorial_to_horizontal(ra[i], dec[i], 44.8, 10.33, T0)
        assert el[i] == pytest.approx(exp_el, abs=1e-9)
        assert abs(ang_diff_deg(az[i], exp_az)) < 1e-7


# ---------- helpers ----------


def test_ang_diff_deg_wraps():
    assert ang_diff_deg(10.0, 350.0) == pytest.approx(20.0)
    assert ang_diff_deg(350.0, 10.0) == pytest.approx(-20.0)


def test_stable_hash_angle():
    assert stable_hash_angle("") == 0.0
    assert stable_hash_angle("a") == 97.0
    a = stable_hash_angle("-31")
    assert a == stable_hash_angle("-31")
    assert 0.0 <= a < 360.0
    assert math.isfinite(stable_hash_angle("x" * 500))
