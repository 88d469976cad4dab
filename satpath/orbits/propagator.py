import logging
from typing import Optional

import numpy as np
from sgp4.api import Satrec, WGS72 as SGP4_WGS72, SGP4_ERRORS

from satpath.geodesy.constants import WGS72
from satpath.orbits.elements import (
    OrbitalElements,
    StateVector,
    check_elements,
    elements2state,
)
from satpath.time.calmjd import minutes_since

logger = logging.getLogger(__name__)


class Propagator:
    """Produces inertial (TEME) state vectors relative to an epoch.

    Subclasses implement propagate(); a return value of None means the
    propagation failed (e.g. the orbit decayed) and there is no state at
    that time.
    """

    epoch: float  # Julian date
    mu: float = WGS72.mu  # [km^3/s^2]

    def propagate(self, tsince: float) -> Optional[StateVector]:
        """State vector tsince minutes after (negative: before) the epoch."""
        raise NotImplementedError

    def propagate_jd(self, jd: float) -> Optional[StateVector]:
        return self.propagate(minutes_since(jd, self.epoch))

    def elements(self) -> OrbitalElements:
        """Osculating elements at the epoch."""
        raise NotImplementedError

    def fingerprint(self) -> tuple:
        """Everything the propagated states depend on; equal fingerprints
        mean equal trajectories."""
        return (type(self).__name__, tuple(self.elements()), self.epoch, self.mu)


class KeplerPropagator(Propagator):
    """Unperturbed two-body motion of a fixed set of elements."""

    def __init__(self, elements: OrbitalElements, mu: float = WGS72.mu):
        check_elements(elements)
        self._elements = elements
        self.mu = mu
        self.epoch = elements.epoch

    def propagate(self, tsince):
        return elements2state(self._elements, self.mu, dt_min=tsince)

    def elements(self):
        return self._elements


class Sgp4Propagator(Propagator):
    """SGP4/SDP4 propagation of a two-line element set.

    The perturbation theory lives in the sgp4 package; this class only
    adapts its interface.
    """

    def __init__(self, satrec: Satrec, name: Optional[str] = None):
        self._satrec = satrec
        self.name = name
        self.epoch = satrec.jdsatepoch + satrec.jdsatepochF

    @classmethod
    def from_tle(cls, line1: str, line2: str, name: Optional[str] = None):
        return cls(Satrec.twoline2rv(line1, line2, SGP4_WGS72), name)

    @property
    def satnum(self):
        return self._satrec.satnum

    def propagate(self, tsince):
        err, r, v = self._satrec.sgp4_tsince(tsince)
        if err != 0:
            logger.warning(
                "SGP4 propagation of satellite %s failed at %.3f min from epoch: %s (code %d)",
                self.name or self._satrec.satnum,
                tsince,
                SGP4_ERRORS.get(err, "unknown error"),
                err,
            )
            return None
        return StateVector(np.array(r), np.array(v), "teme")

    def elements(self):
        sat = self._satrec
        # sgp4 keeps the semi-major axis in Earth radii
        return OrbitalElements(
            a=sat.a * sat.radiusearthkm,
            e=sat.ecco,
            inc=sat.inclo,
            argp=sat.argpo,
            raan=sat.nodeo,
            mean_anomaly=sat.mo,
            epoch=self.epoch,
            mean_motion=sat.no_kozai,
        )

    def fingerprint(self):
        sat = self._satrec
        # drag terms change the trajectory but not the mean elements
        return super().fingerprint() + (sat.satnum, sat.bstar, sat.ndot, sat.nddot)
