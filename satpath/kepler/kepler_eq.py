import logging
import numpy as np

""" Kepler's equation and the anomaly conversions built on it.

    References:
    [1]. M. A. Murison, A Practical Method for Solving the Kepler Equation,
         U.S. Naval Observatory, 2006
"""

logger = logging.getLogger(__name__)

KEPLER_TOLERANCE = 1.0e-14
KEPLER_MAX_ITERATIONS = 100


def _check_eccentricity(e):
    if np.any(~np.isfinite(e)) or np.any(e < 0e0) or np.any(e >= 1e0):
        raise ValueError(
            "Eccentricity must lie in [0, 1) for an elliptic orbit, got {:}".format(e)
        )


def initial_guess(mean_anom, eccentricity):
    """Third-order (in e) starting value for the eccentric anomaly [1]."""
    M = mean_anom
    e = eccentricity
    e2 = e * e
    e3 = e * e2
    cM = np.cos(M)
    return M + (-0.5e0 * e3 + e + (e2 + 1.5e0 * cM * e3) * cM) * np.sin(M)


def correction(mean_anom, eccentricity, ecc_anom):
    """Third-order correction of an eccentric anomaly estimate [1].

    The estimate is improved by subtracting the returned value; the
    convergence is cubic in the error of the estimate.
    """
    M = mean_anom
    e = eccentricity
    x = ecc_anom
    cx = np.cos(x)
    sx = np.sin(x)
    t2 = -1e0 + e * cx
    t4 = e * sx
    t5 = -x + t4 + M
    t6 = t5 / (0.5e0 * t5 * t4 / t2 + t2)
    return t5 / ((0.5e0 * sx - (1e0 / 6e0) * cx * t6) * e * t6 + t2)


def kepler(
    mean_anom,
    eccentricity,
    tol=KEPLER_TOLERANCE,
    max_iter=KEPLER_MAX_ITERATIONS,
):
    """
    Solve Kepler's equation M = E - e sin(E) for the eccentric anomaly.

    Parameters
    ----------
    mean_anom : float or array_like
        Mean anomaly M [rad]. Not reduced to [0, 2π); the solver works on
        the raw angle.
    eccentricity : float or array_like
        Eccentricity e, 0 <= e < 1.
    tol : float, optional
        Iteration stops once every |E(i+1) - E(i)| < tol.
    max_iter : int, optional
        Safety bound on the number of corrections.

    Returns
    -------
    ecc_anom : float or np.ndarray
        Eccentric anomaly E [rad], with the broadcast shape of the inputs.

    Notes
    -----
    For e = 0 both the starting value and the correction are exact, so
    E == M after a single pass.
    """
    M = np.asarray(mean_anom, dtype=float)
    e = np.asarray(eccentricity, dtype=float)
    _check_eccentricity(e)
    M, e = np.broadcast_arrays(M, e)

    E0 = initial_guess(M, e)
    E = E0
    it = 0
    while it < max_iter:
        E = E0 - correction(M, e, E0)
        it += 1
        if np.all(np.abs(E - E0) < tol):
            break
        E0 = E
    else:
        logger.warning(
            "Kepler's equation reached max_iterations (%d) without meeting tolerance %.1e",
            max_iter,
            tol,
        )

    return E[()] if E.ndim == 0 else E


def kepler_residual(ecc_anom, mean_anom, eccentricity):
    """Residual of Kepler's equation, E - e sin(E) - M (should be ~0)."""
    return ecc_anom - eccentricity * np.sin(ecc_anom) - mean_anom


def true_anomaly(ecc_anom, eccentricity):
    """Compute true anomaly (v) given the eccentric anomaly (E) and the
    eccentricity (e), according to:
        v = E + 2 arctan( β sin E / (1 − β cos E) )
        with
        β = e / (1 + √(1 − e²)).
    The correction term stays bounded for every E, so v is continuous
    through E = π and follows E across revolutions.
    """
    E = ecc_anom
    e = eccentricity
    beta = e / (1e0 + np.sqrt(1e0 - e * e))
    return E + 2e0 * np.arctan2(beta * np.sin(E), 1e0 - beta * np.cos(E))


def eccentric_anomaly(true_anom, eccentricity):
    """Compute eccentric anomaly (E) given the true anomaly (v).
    E = v - 2 arctan( β sin v / (1 + β cos v) )
    """
    v = true_anom
    e = eccentricity
    beta = e / (1e0 + np.sqrt(1e0 - e * e))
    return v - 2e0 * np.arctan2(beta * np.sin(v), 1e0 + beta * np.cos(v))


def mean_anomaly(ecc_anom, eccentricity):
    """Use Kepler's equation to compute mean anomaly (M) from eccentric
    anomaly (E) and eccentricity (e)
    M = E - e * sinE
    """
    E = ecc_anom
    e = eccentricity
    return E - np.sin(E) * e
