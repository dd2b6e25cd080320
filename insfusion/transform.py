"""Geodetic coordinate transformations.

The filter works in a local East-North-Up (ENU) Cartesian frame anchored at a
reference point, whereas position fixes are given as latitude, longitude and
altitude on the WGS84 ellipsoid. Conversions go through Earth-centered
Earth-fixed (ECEF) Cartesian coordinates.

Constants
----------
.. autosummary::
    :toctree: generated

    DEG_TO_RAD
    RAD_TO_DEG

Functions
---------
.. autosummary::
    :toctree: generated

    lla_to_ecef
    ecef_to_lla
    lla_to_enu
    enu_to_lla
    mat_eg_from_ll
"""
import numpy as np
import pandas as pd
from scipy.spatial.transform import Rotation
from .util import LLA_COLS, ENU_COLS
from . import earth, util

#: Degrees to radians.
DEG_TO_RAD = np.pi / 180
#: Radians to degrees.
RAD_TO_DEG = 1 / DEG_TO_RAD

_LATITUDE_MAX_ITER = 10
_LATITUDE_TOLERANCE = 1e-15


def lla_to_ecef(lla):
    """Convert latitude, longitude, altitude into ECEF Cartesian coordinates.

    Parameters
    ----------
    lla : array_like, shape (3,) or (n, 3)
        Latitude, longitude and altitude values.

    Returns
    -------
    r_e : ndarray, shape (3,) or (n, 3)
        Cartesian coordinates in ECEF frame.
    """
    lat, lon, alt = np.asarray(lla, dtype=float).T

    sin_lat = np.sin(np.deg2rad(lat))
    cos_lat = np.cos(np.deg2rad(lat))
    sin_lon = np.sin(np.deg2rad(lon))
    cos_lon = np.cos(np.deg2rad(lon))

    _, re, _ = earth.principal_radii(lat, 0)
    r_e = np.empty((3,) + lat.shape)
    r_e[0] = (re + alt) * cos_lat * cos_lon
    r_e[1] = (re + alt) * cos_lat * sin_lon
    r_e[2] = ((1 - earth.E2) * re + alt) * sin_lat

    return r_e.transpose()


def ecef_to_lla(r_e):
    """Convert ECEF Cartesian coordinates into latitude, longitude, altitude.

    The geodetic latitude is found by the fixed-point iteration::

        lat = arctan2(z + E2 * re(lat) * sin(lat), p)

    where ``p`` is the distance from the polar axis and ``re`` is the principal
    radius in East direction. For points near Earth surface the iteration
    contracts with the factor close to `earth.E2`, so a few iterations
    give the result exact to the machine precision.

    Parameters
    ----------
    r_e : array_like, shape (3,) or (n, 3)
        Cartesian coordinates in ECEF frame.

    Returns
    -------
    lla : ndarray, shape (3,) or (n, 3)
        Latitude, longitude and altitude.
    """
    x, y, z = np.asarray(r_e, dtype=float).T
    p = np.hypot(x, y)
    lon = np.arctan2(y, x)

    lat = np.arctan2(z, p * (1 - earth.E2))
    for _ in range(_LATITUDE_MAX_ITER):
        sin_lat = np.sin(lat)
        re = earth.A / np.sqrt(1 - earth.E2 * sin_lat ** 2)
        lat_new = np.arctan2(z + earth.E2 * re * sin_lat, p)
        converged = np.all(np.abs(lat_new - lat) < _LATITUDE_TOLERANCE)
        lat = lat_new
        if converged:
            break

    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    re = earth.A / np.sqrt(1 - earth.E2 * sin_lat ** 2)
    alt = p * cos_lat + z * sin_lat - earth.A ** 2 / re

    lla = np.empty((3,) + lat.shape)
    lla[0] = np.rad2deg(lat)
    lla[1] = np.rad2deg(lon)
    lla[2] = alt
    return lla.transpose()


def mat_eg_from_ll(lat, lon):
    """Create a rotation matrix projecting from ENU to ECEF frame.

    The sequence of elemental rotations is as follows::

           pi/2+lon    pi/2-lat
        E ----------> ----------> G
               3           1

    Here E denotes the ECEF frame and G denotes the local East-North-Up frame.

    Parameters
    ----------
    lat, lon : float or array_like, shape (n,)
        Latitude and longitude.

    Returns
    -------
    ndarray, shape (3, 3) or (n, 3, 3)
        Rotation matrices.
    """
    lat = np.asarray(lat)
    lon = np.asarray(lon)

    if lat.ndim == 0 and lon.ndim == 0:
        return Rotation.from_euler('ZX', [90 + lon, 90 - lat], degrees=True).as_matrix()

    lat = np.atleast_1d(lat)
    lon = np.atleast_1d(lon)

    n = max(len(lat), len(lon))
    angles = np.empty((n, 2))
    angles[:, 0] = 90 + lon
    angles[:, 1] = 90 - lat
    return Rotation.from_euler('ZX', angles, degrees=True).as_matrix()


def lla_to_enu(lla, lla_origin=None):
    """Convert lla into ENU Cartesian coordinates.

    Parameters
    ----------
    lla : array_like, shape (3,) or (n, 3)
        Latitude, longitude and altitude values. If DataFrame (with columns 'lat',
        'lon', 'alt') the result will be DataFrame with columns 'east', 'north',
        'up'.
    lla_origin : array_like with shape (3,) or None, optional
        Latitude, longitude and altitude of the origin point.
        If None (default), the first row in `lla` will be used.

    Returns
    -------
    ndarray or DataFrame
        ENU coordinates.
    """
    is_dataframe = isinstance(lla, pd.DataFrame)
    if is_dataframe:
        time = lla.index
        lla = lla[LLA_COLS].values
    else:
        lla = np.asarray(lla, dtype=float)
    if lla_origin is None:
        lla_origin = np.atleast_2d(lla)[0]
    lla_origin = np.asarray(lla_origin, dtype=float)

    r_e = lla_to_ecef(lla) - lla_to_ecef(lla_origin)
    mat_eg = mat_eg_from_ll(lla_origin[0], lla_origin[1])
    r_g = util.mv_prod(mat_eg, r_e, True)
    return pd.DataFrame(r_g, index=time, columns=ENU_COLS) if is_dataframe else r_g


def enu_to_lla(r_g, lla_origin):
    """Convert ENU Cartesian coordinates into lla.

    This is the exact inverse of `lla_to_enu` for the same origin.

    Parameters
    ----------
    r_g : array_like, shape (3,) or (n, 3)
        East, north and up coordinates. If DataFrame (with columns 'east',
        'north', 'up') the result will be DataFrame with columns 'lat', 'lon',
        'alt'.
    lla_origin : array_like, shape (3,)
        Latitude, longitude and altitude of the origin point.

    Returns
    -------
    ndarray or DataFrame
        Latitude, longitude and altitude.
    """
    is_dataframe = isinstance(r_g, pd.DataFrame)
    if is_dataframe:
        time = r_g.index
        r_g = r_g[ENU_COLS].values
    else:
        r_g = np.asarray(r_g, dtype=float)
    lla_origin = np.asarray(lla_origin, dtype=float)

    mat_eg = mat_eg_from_ll(lla_origin[0], lla_origin[1])
    r_e = lla_to_ecef(lla_origin) + util.mv_prod(mat_eg, r_g)
    lla = ecef_to_lla(r_e)
    return pd.DataFrame(lla, index=time, columns=LLA_COLS) if is_dataframe else lla
