"""Earth ellipsoid and gravity models.

This module defines WGS84 constants and the few Earth models needed by the filter:
radii of curvature used in geodetic conversions and normal gravity. All
definitions can be found in [1]_.

Constants
---------
.. autosummary::
    :toctree: generated

    A
    E2
    GE
    GP

Functions
---------
.. autosummary::
    :toctree: generated/

    principal_radii
    gravity
    gravity_g

References
----------
.. [1] P. D. Groves, "Principles of GNSS, Inertial, and Multisensor Integrated
       Navigation Systems", 2nd edition
"""
import numpy as np


#: Semi major axis of Earth ellipsoid.
A = 6378137.0
#: Squared eccentricity of Earth ellipsoid
E2 = 6.6943799901413e-3
#: Gravity at the equator.
GE = 9.7803253359
#: Gravity at the pole.
GP = 9.8321849378
F = (1 - E2) ** 0.5 * GP / GE - 1


def principal_radii(lat, alt):
    """Compute the principal radii of curvature of Earth ellipsoid.

    Parameters
    ----------
    lat, alt : array_like
        Latitude and altitude.

    Returns
    -------
    rn : float or ndarray
        Principle radius in North direction.
    re : float or ndarray
        Principle radius in East direction.
    rp : float or ndarray
        Radius of cross-section along the parallel.
    """
    sin_lat = np.sin(np.deg2rad(lat))
    cos_lat = np.sqrt(1 - sin_lat**2)

    x = 1 - E2 * sin_lat ** 2
    re = A / np.sqrt(x)
    rn = re * (1 - E2) / x

    return rn + alt, re + alt, (re + alt) * cos_lat


def gravity(lat, alt):
    """Compute gravity magnitude.

    Somigliana model used in WGS84 with linear vertical correction is implemented.

    Parameters
    ----------
    lat, alt : array_like
        Latitude and altitude.

    Returns
    -------
    gravity : float or ndarray
        Magnitude of the gravity.
    """
    sin_lat = np.sin(np.deg2rad(lat))
    alt = np.asarray(alt)
    return (GE * (1 + F * sin_lat**2) / (1 - E2 * sin_lat**2) ** 0.5
            * (1 - 2 * alt / A))


def gravity_g(magnitude):
    """Compute gravity vector in the local East-North-Up frame.

    Parameters
    ----------
    magnitude : float
        Gravity magnitude.

    Returns
    -------
    g_g : ndarray, shape (3,)
        Gravity vector, pointing down.
    """
    return np.array([0.0, 0.0, -magnitude])
