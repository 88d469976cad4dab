import numpy as np


def orbit_plane(a, e, mu, true_anom):
    """
    In-plane (perifocal) position and velocity on a Keplerian ellipse.

    Parameters
    ----------
    a : float or array_like
        Semi-major axis [km].
    e : float or array_like
        Eccentricity.
    mu : float or array_like
        Gravitational parameter GM [km^3/s^2].
    true_anom : float or array_like
        True anomaly ν [rad].

    Returns
    -------
    q1, q2, r, v, q3, q4 : ndarray
    q1, q2: in-plane coordinates (perigee axis and perpendicular) [km]
    r:      radius [km]
    v:      speed [km/s]
    q3, q4: in-plane velocity components (along/perp. to perigee axis) [km/s]
    """
    a = np.asarray(a, dtype=float)
    e = np.asarray(e, dtype=float)
    nu = np.asarray(true_anom, dtype=float)
    mu = np.asarray(mu, dtype=float)

    a, e, mu, nu = np.broadcast_arrays(a, e, mu, nu)

    # semi-latus rectum
    p = a * (1.0 - e * e)
    ct = np.cos(nu)
    st = np.sin(nu)

    r = p / (1.0 + e * ct)
    v = np.sqrt(mu * (2.0 / r - 1.0 / a))

    h0 = np.sqrt(mu / p)

    q1 = r * ct
    q2 = r * st
    q3 = -h0 * st
    q4 = h0 * (e + ct)

    return q1, q2, r, v, q3, q4
