import math

import pytest

from satpath.orbits.elements import OrbitalElements
from satpath.orbits.propagator import KeplerPropagator, Sgp4Propagator

ISS_L1 = "1 25544U 98067A   20344.91667824  .00001264  00000-0  29621-4 0  9991"
ISS_L2 = "2 25544  51.6442  12.2145 0002202  70.9817  48.7153 15.49260293258322"

# 2020-12-09 22:00:00 UT, the ISS element set's epoch
EPOCH_JD = 2459193.4166782400


@pytest.fixture
def leo_elements():
    return OrbitalElements(
        a=6778.0,
        e=0.001,
        inc=math.radians(51.6),
        argp=math.radians(40.0),
        raan=math.radians(120.0),
        mean_anomaly=math.radians(30.0),
        epoch=EPOCH_JD,
    )


@pytest.fixture
def kepler_propagator(leo_elements):
    return KeplerPropagator(leo_elements)


@pytest.fixture
def iss_propagator():
    return Sgp4Propagator.from_tle(ISS_L1, ISS_L2, name="ISS (ZARYA)")
