import logging
from typing import NamedTuple, Optional, Tuple

import numpy as np

from satpath.geodesy.constants import WGS72, MIN_PER_DAY
from satpath.geodesy.transformations import (
    teme2ecef,
    ecef2geodetic,
    earth_rotation_rate,
    normalize_longitude,
    geodetic2render,
)
from satpath.kepler.kepler_eq import kepler, true_anomaly
from satpath.orbits.elements import (
    GeodeticCoordinate,
    check_elements,
    orbital_period,
    perifocal2inertial,
)
from satpath.orbits.propagator import Propagator
from satpath.time.calmjd import minutes_since

logger = logging.getLogger(__name__)


class GroundTrack(NamedTuple):
    """Samples of a propagated ground track, in time order.

    jd     : (K,) Julian dates of the samples
    latgd  : (K,) geodetic latitude [rad]
    lon    : (K,) longitude [rad], in (-π, π]
    hgt    : (K,) height above the ellipsoid [km]
    points : (K, 3) render-frame points, see geodetic2render
    """

    jd: np.ndarray
    latgd: np.ndarray
    lon: np.ndarray
    hgt: np.ndarray
    points: np.ndarray


def _check_points(points):
    if int(points) != points or points < 2:
        raise ValueError(
            "Number of sample points must be an integer >= 2, got {:}".format(points)
        )
    return int(points)


def element_orbit(elements, points) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample the osculating ellipse of a set of elements.

    The mean anomaly is stepped uniformly, M(k) = k * 2π / points for
    k = 0 .. points-1, so the samples bunch up towards apogee exactly as
    the satellite does in time. No propagation is involved: the ellipse
    is exact for the given elements and ignores secular drift.

    Parameters
    ----------
    elements : OrbitalElements
    points : int
        Number of samples, at least 2.

    Returns
    -------
    pos : np.ndarray, shape (points, 3)
        Positions in the frame of the elements [km].
    true_anom : np.ndarray, shape (points,)
        True anomaly of each sample [rad].
    """
    points = _check_points(points)
    check_elements(elements)

    a = elements.a
    e = elements.e
    increment = 2e0 * np.pi / points
    M = np.arange(points) * increment

    E = kepler(M, e)
    v = true_anomaly(E, e)
    radius = a * (1e0 - e * np.cos(E))

    q = np.column_stack((radius * np.cos(v), radius * np.sin(v), np.zeros(points)))
    pos = perifocal2inertial(q, elements.inc, elements.argp, elements.raan)
    return pos, v


def subpoint(
    propagator: Propagator, jd, xp=0e0, yp=0e0, lod=0e0
) -> Optional[Tuple[GeodeticCoordinate, float]]:
    """Where the satellite is at jd: its GeodeticCoordinate and its
    inertial speed [km/s], or None if the propagation failed.

    Polar motion of (0, 0) matches what most online trackers display.
    """
    state = propagator.propagate_jd(jd)
    if state is None:
        return None
    recef = teme2ecef(state.position, xp, yp, jd, lod)
    return ecef2geodetic(recef, jd), state.speed()


def ground_track(
    propagator: Propagator,
    start_jd,
    points,
    period=None,
    correct_longitude=False,
    xp=0e0,
    yp=0e0,
    lod=0e0,
    scale=1e0,
    earth=WGS72,
) -> GroundTrack:
    """
    Propagate the satellite over one orbital period and collect its
    ground track.

    Parameters
    ----------
    propagator : Propagator
    start_jd : float
        Julian date (UT1) of the first sample.
    points : int
        Number of samples, at least 2. They are spaced evenly over
        [0, period], so the last one closes the loop.
    period : float, optional
        Sampled span [min]. Default: the orbital period from the
        propagator's mean motion.
    correct_longitude : bool, optional
        Add back the Earth's rotation since start_jd to every longitude,
        so that the track closes on itself instead of drifting west.
    xp, yp : float, optional
        Polar motion [rad].
    lod : float, optional
        Excess length of day [s], used by the longitude correction.
    scale : float, optional
        Radius of the render sphere for GroundTrack.points.

    Returns
    -------
    GroundTrack
        Samples whose propagation failed are left out.
    """
    points = _check_points(points)
    if period is None:
        period = orbital_period(propagator.elements(), propagator.mu)
    if not period > 0e0:
        raise ValueError("Sampling period must be positive, got {:} min".format(period))

    omega = earth_rotation_rate(lod, earth)
    t0 = minutes_since(start_jd, propagator.epoch)
    offsets = np.linspace(0e0, period, points)

    jds, lats, lons, hgts, xyz = [], [], [], [], []
    for dt in offsets:
        jd = start_jd + dt / MIN_PER_DAY
        state = propagator.propagate(t0 + dt)
        if state is None:
            # no state, no point; never substitute one
            continue

        recef = teme2ecef(state.position, xp, yp, jd, lod)
        geo = ecef2geodetic(recef, jd, earth)
        lon = geo.lon
        if correct_longitude:
            lon = normalize_longitude(lon + omega * dt * 60e0)

        jds.append(jd)
        lats.append(geo.latgd)
        lons.append(lon)
        hgts.append(geo.hgt)
        xyz.append(geodetic2render(geo.latgd, lon, scale))

    if len(jds) < points:
        logger.warning(
            "Ground track: %d of %d samples skipped after failed propagation",
            points - len(jds),
            points,
        )

    return GroundTrack(
        np.asarray(jds, dtype=float),
        np.asarray(lats, dtype=float),
        np.asarray(lons, dtype=float),
        np.asarray(hgts, dtype=float),
        np.asarray(xyz, dtype=float).reshape(-1, 3),
    )


def _freeze(*arrays):
    for arr in arrays:
        arr.setflags(write=False)


class OrbitSampler:
    """
    Both sampling strategies behind a single-entry cache.

    The cache is keyed by a fingerprint of the inputs (elements, epoch,
    start date, number of points, options and the propagator's own
    parameters); any change recomputes. Cached arrays are returned
    read-only, since the same objects are handed out on every hit.

    The key and its value live in one tuple that is replaced in a single
    assignment, so threads sharing a sampler never see a key paired with
    another input's value.
    """

    def __init__(self) -> None:
        self._cache = None

    def invalidate(self) -> None:
        self._cache = None

    def _lookup(self, key):
        cached = self._cache
        if cached is not None and cached[0] == key:
            logger.debug("Orbit sampler cache hit")
            return cached[1]
        return None

    def _store(self, key, value):
        self._cache = (key, value)
        return value

    def element_orbit(self, elements, points):
        key = ("element_orbit", tuple(elements), points)
        cached = self._lookup(key)
        if cached is not None:
            return cached
        pos, v = element_orbit(elements, points)
        _freeze(pos, v)
        return self._store(key, (pos, v))

    def ground_track(self, propagator, start_jd, points, **kwargs):
        key = (
            "ground_track",
            propagator.fingerprint(),
            start_jd,
            points,
            tuple(sorted(kwargs.items())),
        )
        cached = self._lookup(key)
        if cached is not None:
            return cached
        track = ground_track(propagator, start_jd, points, **kwargs)
        _freeze(*track)
        return self._store(key, track)
