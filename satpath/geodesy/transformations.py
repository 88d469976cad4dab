#! /usr/bin/python

import math
import numpy as np

from satpath.geodesy.constants import (
    WGS72,
    SEC_PER_DAY,
    GEODETIC_TOLERANCE,
    GEODETIC_MAX_ITERATIONS,
)
from satpath.orbits.elements import GeodeticCoordinate, StateVector
from satpath.time.gast import gmst, R3

""" Pseudo-inertial (TEME) -> Earth-fixed -> geodetic transformations.

    All matrices are built fresh on every call and never modified in
    place.

    References:
    [1]. D. A. Vallado, Fundamentals of Astrodynamics and Applications,
         4th edition, 2013 (teme2ecef, ijk2ll)
"""


def earth_rotation_rate(lod=0e0, earth=WGS72):
    """Earth's rotation rate [rad/s] corrected for the excess length of
    day lod [s]."""
    return earth.omega * (1e0 - lod / SEC_PER_DAY)


def sidereal_matrix(gmst_rad):
    """Rotation PEF -> TEME, i.e. r_teme = ST @ r_pef"""
    return R3(gmst_rad)


""" The resulting matrix from this function, PM, can be used in the sense:
    r_pef = PM @ r_ecef
    xp and yp are the pole coordinates in [rad]; for xp = yp = 0, PM is
    the identity.
"""


def polar_motion_matrix(xp, yp):
    cosxp = math.cos(xp)
    sinxp = math.sin(xp)
    cosyp = math.cos(yp)
    sinyp = math.sin(yp)
    return np.array(
        [
            [cosxp, 0e0, -sinxp],
            [sinxp * sinyp, cosyp, cosxp * sinyp],
            [sinxp * cosyp, -sinyp, cosxp * cosyp],
        ]
    )


def _as_vector(r, name):
    r = np.asarray(r, dtype=float)
    if r.shape != (3,):
        raise ValueError("{:} must be a 3-vector (shape (3,)), got {:}".format(name, r.shape))
    return r


def teme2ecef(rteme, xp, yp, jdut1, lod=0e0):
    """Rotate a TEME position vector to the Earth-fixed frame.

        r_ecef = PM^T @ ST^T @ r_teme

    rteme : position in TEME [km]
    xp, yp: polar motion [rad]
    jdut1 : Julian date, UT1
    lod   : excess length of day [s]; only the velocity depends on it, see
            teme2ecef_state
    """
    rteme = _as_vector(rteme, "rteme")
    st = sidereal_matrix(gmst(jdut1))
    pm = polar_motion_matrix(xp, yp)
    rpef = st.T @ rteme
    return pm.T @ rpef


def teme2ecef_state(state, xp, yp, jdut1, lod=0e0, earth=WGS72):
    """Rotate a TEME StateVector to the Earth-fixed frame.

    The velocity loses the transport term ω x r_pef of the rotating frame,
    with ω corrected for the length of day.
    """
    if state.frame != "teme":
        raise ValueError("Expected a TEME state vector, got frame '{:}'".format(state.frame))
    rteme = _as_vector(state.position, "position")
    vteme = _as_vector(state.velocity, "velocity")

    st = sidereal_matrix(gmst(jdut1))
    pm = polar_motion_matrix(xp, yp)
    omegaearth = np.array([0e0, 0e0, earth_rotation_rate(lod, earth)])

    rpef = st.T @ rteme
    vpef = st.T @ vteme - np.cross(omegaearth, rpef)
    return StateVector(pm.T @ rpef, pm.T @ vpef, "ecef")


def normalize_longitude(lon):
    """Wrap an angle [rad] into (-π, π]."""
    lon = math.fmod(lon, 2e0 * math.pi)
    if lon > math.pi:
        lon -= 2e0 * math.pi
    elif lon <= -math.pi:
        lon += 2e0 * math.pi
    return lon


def ecef2geodetic(
    recef,
    jdut1=None,
    earth=WGS72,
    tol=GEODETIC_TOLERANCE,
    max_iter=GEODETIC_MAX_ITERATIONS,
):
    """Earth-fixed Cartesian [km] to GeodeticCoordinate ([rad], [km]).

    The geodetic latitude is found by fixed-point iteration on the
    ellipsoid, seeded with the geocentric latitude, until two successive
    estimates differ by less than tol or max_iter estimates have been
    made; the last estimate is used either way.

    jdut1 is accepted for symmetry with teme2ecef; the result does not
    depend on it.
    """
    x, y, z = _as_vector(recef, "recef")
    re = earth.radius
    e2 = earth.e2
    small = 1e-8

    rmag = math.sqrt(x * x + y * y + z * z)
    # distance from polar axis
    temp = math.sqrt(x * x + y * y)

    # longitude
    if temp < small:
        lon = math.copysign(math.pi * 0.5e0, z)
    else:
        lon = math.atan2(y, x)
    lon = normalize_longitude(lon)

    # geodetic latitude, seeded with the geocentric one
    latgd = math.asin(z / rmag) if rmag > 0e0 else 0e0
    olddelta = latgd + 10e0
    i = 1
    while abs(olddelta - latgd) >= tol and i < max_iter:
        olddelta = latgd
        sintemp = math.sin(latgd)
        c = re / math.sqrt(1e0 - e2 * sintemp * sintemp)
        # atan2 with a non-negative second argument is atan(num / temp), and
        # stays defined on the polar axis
        latgd = math.atan2(z + c * e2 * sintemp, temp)
        i += 1

    sintemp = math.sin(latgd)
    c = re / math.sqrt(1e0 - e2 * sintemp * sintemp)

    # height above the ellipsoid
    if (math.pi * 0.5e0 - abs(latgd)) > math.radians(1e0):
        hellp = temp / math.cos(latgd) - c
    else:
        hellp = z / sintemp - c * (1e0 - e2)

    latgc = math.atan2((1e0 - e2) * sintemp, math.cos(latgd))
    return GeodeticCoordinate(latgc, latgd, lon, hellp)


def geodetic2ecef(lat, lon, h, earth=WGS72):
    """Geodetic latitude, longitude [rad] and ellipsoidal height [km] to
    Earth-fixed Cartesian [km]."""
    e2 = earth.e2
    sf = math.sin(lat)
    cf = math.cos(lat)
    sl = math.sin(lon)
    cl = math.cos(lon)
    Rn = earth.radius / math.sqrt(1e0 - e2 * sf * sf)  # normal radius of curvature
    x = (Rn + h) * cf * cl
    y = (Rn + h) * cf * sl
    z = ((1e0 - e2) * Rn + h) * sf
    return np.array([x, y, z])


def geodetic2render(lat, lon, scale=1e0):
    """Point on a sphere of radius scale in the host's y-up render frame:
    y towards the north pole, z towards (lat, lon) = (0, 0).
    """
    return scale * np.array(
        [
            math.cos(lat) * math.sin(lon),
            math.sin(lat),
            math.cos(lat) * math.cos(lon),
        ]
    )
