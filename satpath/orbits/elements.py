##
## Algorithm from:
## Orbital Mechanics for Engineering Students,
##

from typing import NamedTuple, Optional

import numpy as np
from scipy.spatial.transform import Rotation as R

from satpath.geodesy.constants import WGS72, MIN_PER_DAY
from satpath.kepler.kepler_eq import kepler, true_anomaly, eccentric_anomaly, mean_anomaly
from satpath.kepler.orbit_plane import orbit_plane

FRAMES = ("teme", "ecef")


class OrbitalElements(NamedTuple):
    """Osculating classical elements at epoch.

    a            : semi-major axis [km]
    e            : eccentricity, 0 <= e < 1
    inc          : inclination [rad]
    argp         : argument of perigee (little omega) [rad]
    raan         : longitude of the ascending node (great omega) [rad]
    mean_anomaly : mean anomaly at epoch [rad]
    epoch        : Julian date of the elements
    mean_motion  : [rad/min]; derived from a when None
    """

    a: float
    e: float
    inc: float
    argp: float
    raan: float
    mean_anomaly: float
    epoch: float
    mean_motion: Optional[float] = None


class StateVector(NamedTuple):
    position: np.ndarray  # [km]
    velocity: np.ndarray  # [km/s]
    frame: str = "teme"

    def speed(self):
        return float(np.linalg.norm(self.velocity))


class GeodeticCoordinate(NamedTuple):
    latgc: float  # geocentric latitude [rad]
    latgd: float  # geodetic latitude [rad]
    lon: float  # longitude in (-π, π] [rad]
    hgt: float  # height above the ellipsoid [km]


def check_elements(elements):
    """Raise ValueError if the elements do not describe an ellipse."""
    if not (0e0 <= elements.e < 1e0):
        raise ValueError(
            "Eccentricity must lie in [0, 1), got {:}".format(elements.e)
        )
    if not elements.a > 0e0:
        raise ValueError(
            "Semi-major axis must be positive, got {:} km".format(elements.a)
        )
    if elements.mean_motion is not None and not elements.mean_motion > 0e0:
        raise ValueError(
            "Mean motion must be positive, got {:} rad/min".format(elements.mean_motion)
        )


def mean_motion(elements, mu=WGS72.mu):
    """Mean motion in [rad/min]."""
    if elements.mean_motion is not None:
        return elements.mean_motion
    return np.sqrt(mu / elements.a**3) * 60e0


def orbital_period(elements, mu=WGS72.mu):
    """Orbital period in [min], from the mean motion in revolutions per day."""
    revs_per_day = mean_motion(elements, mu) * MIN_PER_DAY / (2e0 * np.pi)
    return MIN_PER_DAY / revs_per_day


def perifocal2inertial(q, inc, argp, raan):
    """Rotate perifocal vector(s) q (..., 3) to the equatorial frame:
    argument of perigee first, then inclination, then the node."""
    Q = R.from_euler("ZXZ", [raan, inc, argp]).as_matrix()
    return np.asarray(q, dtype=float) @ Q.T


def elements2state(elements, mu=WGS72.mu, dt_min=0e0):
    """Two-body state vector dt_min minutes after the elements' epoch.

    Returns a StateVector in the frame of the elements (TEME for elements
    derived from an SGP4 element set).
    """
    check_elements(elements)
    n = mean_motion(elements, mu)
    M = elements.mean_anomaly + n * dt_min
    E = kepler(M, elements.e)
    v = true_anomaly(E, elements.e)
    q1, q2, _, _, q3, q4 = orbit_plane(elements.a, elements.e, mu, v)
    rp = np.array([float(q1), float(q2), 0e0])
    vp = np.array([float(q3), float(q4), 0e0])
    pos = perifocal2inertial(rp, elements.inc, elements.argp, elements.raan)
    vel = perifocal2inertial(vp, elements.inc, elements.argp, elements.raan)
    return StateVector(pos, vel, "teme")


def state2elements(state, epoch, mu=WGS72.mu):
    """Computes the classical orbital elements (coe) from the state vector
    (r,v).
    state : inertial StateVector, position [km] and velocity [km/sec]
    epoch : Julian date of the state

    Equatorial and circular orbits have undefined node and/or perigee;
    those angles are then set to 0 and the along-track angle is carried by
    the mean anomaly.
    """
    small = 1e-10
    Rv = np.asarray(state.position, dtype=float)
    V = np.asarray(state.velocity, dtype=float)
    r = np.linalg.norm(Rv)
    v = np.linalg.norm(V)
# radial velocity
# Note that if vr > 0, the satellite is flying away from perigee.
# If vr < 0, it is flying towards perigee.
    vr = np.dot(Rv, V) / r
# specific angular momentum and its magnitude [km^2/sec]
    H = np.cross(Rv, V)
    h = np.linalg.norm(H)
# Inclination (i) lies between 0 and 180 [deg], so there is no quadrant
# ambiguity.
    inc = np.arccos(np.clip(H[2] / h, -1e0, 1e0))
# vector defining the nodal line (and its magnitude)
    N = np.cross(np.array([0e0, 0e0, 1e0]), H)
    n = np.linalg.norm(N)
# eccentricity vector and magnitude
    Ev = 1.0 / mu * ((v * v - mu / r) * Rv - r * vr * V)
    e = np.linalg.norm(Ev)

    if n > small:
        raan = np.arctan2(N[1], N[0]) % (2 * np.pi)
        node = N / n
    else:
        raan = 0e0
        node = np.array([1e0, 0e0, 0e0])
    # in-plane axis perpendicular to the node line
    perp = np.cross(H / h, node)

    if e > small:
        argp = np.arctan2(np.dot(Ev, perp), np.dot(Ev, node)) % (2 * np.pi)
        theta = np.arctan2(np.dot(np.cross(Ev, Rv), H) / h, np.dot(Ev, Rv)) % (2 * np.pi)
    else:
        e = 0e0
        argp = 0e0
        theta = np.arctan2(np.dot(Rv, perp), np.dot(Rv, node)) % (2 * np.pi)
# semi-major axis from the vis-viva energy
    a = 1e0 / (2e0 / r - v * v / mu)
    M = mean_anomaly(eccentric_anomaly(theta, e), e) % (2 * np.pi)

    return OrbitalElements(
        a=float(a),
        e=float(e),
        inc=float(inc),
        argp=float(argp),
        raan=float(raan),
        mean_anomaly=float(M),
        epoch=epoch,
    )
