import math

import numpy as np
import pytest

from satpath.geodesy.constants import WGS72
from satpath.orbits.elements import (
    OrbitalElements,
    StateVector,
    check_elements,
    mean_motion,
    orbital_period,
    perifocal2inertial,
    elements2state,
    state2elements,
)


def _angle_diff(a, b):
    return abs((a - b + math.pi) % (2.0 * math.pi) - math.pi)


def test_elements_are_immutable(leo_elements):
    with pytest.raises(AttributeError):
        leo_elements.e = 0.5


def test_mean_motion_and_period():
    el = OrbitalElements(7000.0, 0.0, 0.0, 0.0, 0.0, 0.0, 2451545.0)
    expected = 2.0 * math.pi * math.sqrt(7000.0**3 / WGS72.mu) / 60.0
    assert math.isclose(orbital_period(el), expected, rel_tol=1e-12)
    assert math.isclose(mean_motion(el) * orbital_period(el), 2.0 * math.pi, rel_tol=1e-12)


def test_period_from_given_mean_motion(leo_elements):
    el = leo_elements._replace(mean_motion=2.0 * math.pi / 90.0)
    assert math.isclose(orbital_period(el), 90.0, rel_tol=1e-12)


@pytest.mark.parametrize(
    "changes",
    [{"e": 1.0}, {"e": -0.01}, {"e": float("nan")}, {"a": 0.0}, {"a": -7000.0}, {"mean_motion": 0.0}],
)
def test_check_elements_rejects(leo_elements, changes):
    with pytest.raises(ValueError):
        check_elements(leo_elements._replace(**changes))


def test_state_vector_speed():
    s = StateVector(np.array([7000.0, 0.0, 0.0]), np.array([0.0, 3.0, 4.0]))
    assert s.frame == "teme"
    assert s.speed() == 5.0


def test_perifocal2inertial_order():
    # perigee direction: rotated by the argument of perigee, then tilted, then by the node
    inc, argp, raan = math.radians(30.0), math.radians(90.0), math.radians(90.0)
    p = perifocal2inertial([1.0, 0.0, 0.0], inc, argp, raan)
    np.testing.assert_allclose(p, [-math.cos(inc), 0.0, math.sin(inc)], atol=1e-15)
    # orbit normal
    w = perifocal2inertial([0.0, 0.0, 1.0], inc, argp, raan)
    np.testing.assert_allclose(w, [math.sin(inc), 0.0, math.cos(inc)], atol=1e-15)


def test_elements2state_circular_equatorial():
    el = OrbitalElements(7000.0, 0.0, 0.0, 0.0, 0.0, 0.0, 2451545.0)
    s = elements2state(el)
    np.testing.assert_allclose(s.position, [7000.0, 0.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(s.velocity, [0.0, math.sqrt(WGS72.mu / 7000.0), 0.0], atol=1e-12)


def test_elements2state_after_one_period(leo_elements):
    s0 = elements2state(leo_elements)
    s1 = elements2state(leo_elements, dt_min=orbital_period(leo_elements))
    np.testing.assert_allclose(s1.position, s0.position, atol=1e-6)
    np.testing.assert_allclose(s1.velocity, s0.velocity, atol=1e-9)


def test_elements2state_conserves_energy(leo_elements):
    energies = []
    for dt in np.linspace(0.0, 200.0, 9):
        s = elements2state(leo_elements, dt_min=dt)
        energies.append(s.speed() ** 2 / 2.0 - WGS72.mu / np.linalg.norm(s.position))
    np.testing.assert_allclose(energies, -WGS72.mu / (2.0 * leo_elements.a), rtol=1e-12)


def test_state2elements_round_trip():
    el = OrbitalElements(
        a=7200.0,
        e=0.01,
        inc=math.radians(51.6),
        argp=math.radians(40.0),
        raan=math.radians(120.0),
        mean_anomaly=math.radians(30.0),
        epoch=2459193.5,
    )
    back = state2elements(elements2state(el), el.epoch)
    assert math.isclose(back.a, el.a, rel_tol=1e-9)
    assert math.isclose(back.e, el.e, rel_tol=1e-7)
    assert math.isclose(back.inc, el.inc, abs_tol=1e-10)
    assert _angle_diff(back.raan, el.raan) < 1e-10
    assert _angle_diff(back.argp, el.argp) < 1e-7
    assert _angle_diff(back.mean_anomaly, el.mean_anomaly) < 1e-7
    assert back.epoch == el.epoch


def test_state2elements_circular_equatorial():
    el = OrbitalElements(7000.0, 0.0, 0.0, 0.0, 0.0, math.radians(75.0), 2451545.0)
    back = state2elements(elements2state(el), el.epoch)
    assert back.e == 0.0 and back.raan == 0.0 and back.argp == 0.0
    assert _angle_diff(back.mean_anomaly, math.radians(75.0)) < 1e-12
