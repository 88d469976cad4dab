from typing import NamedTuple


class EarthModel(NamedTuple):
    """Reference ellipsoid and rotation of the Earth.

    radius : equatorial radius [km]
    e2     : eccentricity squared of the ellipsoid [-]
    omega  : nominal rotation rate [rad/s]
    mu     : gravitational parameter [km^3/s^2]
    """

    radius: float
    e2: float
    omega: float
    mu: float


# WGS-72, the constants the SGP4 family of propagators is fitted against
WGS72 = EarthModel(
    radius=6378.135e0,
    e2=0.006694385000e0,
    omega=7.29211514670698e-05,
    mu=398600.8e0,
)

SEC_PER_DAY = 86400e0
MIN_PER_DAY = 1440e0

# iterative inversion of the ellipsoid, see ecef2geodetic
GEODETIC_TOLERANCE = 1e-8
GEODETIC_MAX_ITERATIONS = 10
