import math
from scipy.spatial.transform import Rotation as R

J2000 = 2451545.0e0
DAYS_PER_CENTURY = 36525.0e0


def gmst(jdut1):
    """Greenwich Mean Sidereal Time (IAU-82) in [rad], in range [0, 2π).

    jdut1 : Julian date in the UT1 time scale.
    """
    tut1 = (jdut1 - J2000) / DAYS_PER_CENTURY
    # seconds of sidereal time
    temp = (
        -6.2e-6 * tut1 * tut1 * tut1
        + 0.093104e0 * tut1 * tut1
        + (876600.0e0 * 3600e0 + 8640184.812866e0) * tut1
        + 67310.54841e0
    )
    # 360 deg / 86400 s = 1/240 deg/s
    temp = math.fmod(math.radians(temp) / 240.0e0, 2e0 * math.pi)
    if temp < 0e0:
        temp += 2e0 * math.pi
    return temp


def R3(theta):
    """Elementary rotation about z, r' = R3(theta) @ r rotates r by +theta."""
    return R.from_euler("z", theta, degrees=False).as_matrix()
