import datetime
import math
from types import SimpleNamespace

import attotime
import numpy as np
import pytest

from satpath.time.gast import gmst, R3
from satpath.time.calmjd import (
    jday,
    cal2mjd,
    cal2fmjd,
    cal2jd,
    jd2cal,
    minutes_since,
    to_utc,
    utcnow_jd,
)


def test_gmst_at_j2000():
    # 67310.54841 s of sidereal time = 280.46061837 deg
    assert math.isclose(gmst(2451545.0), math.radians(280.46061837), abs_tol=1e-9)


def test_gmst_vallado_example():
    # Vallado, example 3-5: 1992 August 20, 12:14 UT1
    jd = jday(1992, 8, 20, 12, 14, 0.0)
    assert math.isclose(math.degrees(gmst(jd)), 152.578787886, abs_tol=1e-4)


def test_gmst_range():
    for jd in np.linspace(2440000.5, 2470000.5, 257):
        g = gmst(jd)
        assert 0.0 <= g < 2.0 * math.pi


def test_gmst_advances_one_sidereal_turn_per_sidereal_day():
    jd = 2459193.25
    sidereal_day = 86164.0905 / 86400.0
    delta = (gmst(jd + sidereal_day) - gmst(jd)) % (2.0 * math.pi)
    assert min(delta, 2.0 * math.pi - delta) < 1e-6


def test_R3():
    np.testing.assert_allclose(R3(math.pi) @ np.array([1.0, 2.0, 3.0]), [-1.0, -2.0, 3.0], atol=1e-15)


def test_jday():
    assert jday(2000, 1, 1, 12, 0, 0.0) == 2451545.0
    assert math.isclose(jday(1992, 8, 20, 12, 14, 0.0), 2448855.009722222, abs_tol=1e-8)
    assert math.isclose(jday(2018, 1, 6, 0, 0, 30.5), 2458124.5 + 30.5 / 86400.0, abs_tol=1e-9)


def test_cal2mjd():
    assert cal2mjd(datetime.datetime(2000, 1, 1)) == (51544, 0.0)
    mjd, sec = cal2mjd(datetime.datetime(2020, 12, 9, 22, 0, 0, 500000))
    assert mjd == 59192
    assert math.isclose(sec, 79200.5)
    assert math.isclose(cal2fmjd(datetime.datetime(2000, 1, 1, 6)), 51544.25)


def test_cal2jd_matches_jday():
    t = datetime.datetime(2020, 12, 9, 22, 0, 1)
    assert math.isclose(cal2jd(t), jday(2020, 12, 9, 22, 0, 1.0), abs_tol=1e-9)
    assert cal2jd(datetime.datetime(2000, 1, 1, 12)) == 2451545.0


def test_cal2mjd_attodatetime_nanoseconds():
    t = attotime.attodatetime(2000, 1, 1, 12, 0, 0, 0, 500)
    mjd, sec = cal2mjd(t)
    assert mjd == 51544
    assert math.isclose(sec, 43200.0 + 500e-9, rel_tol=0.0, abs_tol=1e-10)


@pytest.mark.parametrize(
    "t",
    [
        SimpleNamespace(year=2021, month=13, day=1, hour=0, minute=0, second=0, microsecond=0),
        SimpleNamespace(year=2021, month=2, day=29, hour=0, minute=0, second=0, microsecond=0),
        SimpleNamespace(year=2021, month=4, day=0, hour=0, minute=0, second=0, microsecond=0),
    ],
)
def test_cal2mjd_rejects_invalid_dates(t):
    with pytest.raises(ValueError):
        cal2mjd(t)


def test_jd2cal():
    t = jd2cal(2451545.0)
    assert isinstance(t, attotime.attodatetime)
    assert (t.year, t.month, t.day, t.hour, t.minute, t.second) == (2000, 1, 1, 12, 0, 0)


def test_jd2cal_round_trip():
    jd = 2459193.4166782400
    assert math.isclose(cal2jd(jd2cal(jd)), jd, abs_tol=1e-9)


def test_minutes_since():
    assert minutes_since(2451546.0, 2451545.0) == 1440.0
    assert minutes_since(2451545.0, 2451545.5) == -720.0


def test_to_utc():
    naive = datetime.datetime(2020, 1, 1, 3)
    assert to_utc(naive).tzinfo == datetime.timezone.utc
    eet = datetime.datetime(2020, 1, 1, 3, tzinfo=datetime.timezone(datetime.timedelta(hours=2)))
    assert to_utc(eet).hour == 1


def test_utcnow_jd():
    # after 2023-02-24
    assert utcnow_jd() > 2460000.0


def test_cal2jd_timezone_aware():
    plus2 = datetime.timezone(datetime.timedelta(hours=2))
    assert cal2jd(datetime.datetime(2000, 1, 1, 14, tzinfo=plus2)) == 2451545.0
    # crossing midnight backwards into the previous UTC day
    mjd, sec = cal2mjd(datetime.datetime(2000, 1, 1, 1, tzinfo=plus2))
    assert (mjd, sec) == (51543, 82800.0)
    assert cal2jd(datetime.datetime(2000, 1, 1, 12, tzinfo=datetime.timezone.utc)) == 2451545.0
