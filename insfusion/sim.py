"""Simulation of sensors.

The functions generate IMU readings and GNSS fixes for simple motions which are
sufficient to exercise the filter: the platform moves with constant velocity and
constant attitude in the local ENU frame (including the stationary case).

Functions
---------
.. autosummary::
    :toctree: generated/

    generate_uniform_motion
    generate_position_fixes
"""
import numpy as np
import pandas as pd
from scipy.spatial.transform import Rotation
from . import earth, transform
from .util import ENU_COLS, VEL_COLS, QUAT_COLS, ACCEL_COLS, GYRO_COLS


def generate_uniform_motion(time, velocity_g=None, rotation=None, gravity=9.81007,
                            accel_bias=None, gyro_bias=None, accel_sd=0,
                            gyro_sd=0, rng=None):
    """Generate IMU readings for a motion with constant velocity and attitude.

    Earth rotation is not modelled, so gyros sense only their biases and noise.

    Parameters
    ----------
    time : array_like, shape (n,)
        Time points.
    velocity_g : array_like with shape (3,) or None, optional
        Velocity in ENU frame. If None (default), the platform is stationary.
    rotation : `scipy.spatial.transform.Rotation` or None, optional
        Rotation from body to ENU frame. If None (default), identity.
    gravity : float, optional
        Gravity magnitude. Default is 9.81007.
    accel_bias, gyro_bias : array_like with shape (3,) or None, optional
        Sensor biases. If None (default), zero.
    accel_sd, gyro_sd : float, optional
        Standard deviations of white noise added to each sample. Default is 0.
    rng : None, int or `numpy.random.Generator`, optional
        Random seed or generator for the noise.

    Returns
    -------
    trajectory : DataFrame
        True trajectory indexed by time with ENU position, velocity and
        quaternion columns. Position is zero at the first time point.
    imu : DataFrame
        IMU readings indexed by time with accelerometer and gyro columns.
    """
    rng = np.random.default_rng(rng)
    time = np.asarray(time, dtype=float)
    n = len(time)
    if velocity_g is None:
        velocity_g = np.zeros(3)
    if rotation is None:
        rotation = Rotation.identity()
    if accel_bias is None:
        accel_bias = np.zeros(3)
    if gyro_bias is None:
        gyro_bias = np.zeros(3)
    velocity_g = np.asarray(velocity_g, dtype=float)

    position = (time - time[0])[:, None] * velocity_g
    index = pd.Index(time, name='time')
    trajectory = pd.DataFrame(
        np.hstack((position, np.tile(velocity_g, (n, 1)),
                   np.tile(rotation.as_quat(), (n, 1)))),
        index=index, columns=ENU_COLS + VEL_COLS + QUAT_COLS)

    accel = rotation.inv().apply(-earth.gravity_g(gravity)) + accel_bias
    imu = pd.DataFrame(
        np.hstack((accel + accel_sd * rng.standard_normal((n, 3)),
                   gyro_bias + gyro_sd * rng.standard_normal((n, 3)))),
        index=index, columns=ACCEL_COLS + GYRO_COLS)
    return trajectory, imu


def generate_position_fixes(trajectory, lla_origin, error_sd, lever_arm=None,
                            rng=None, status=2):
    """Generate GNSS fixes from the trajectory.

    The fixes are computed as true antenna positions perturbed by normal random
    errors in ENU frame and then converted to latitude, longitude, altitude.

    Parameters
    ----------
    trajectory : DataFrame
        Trajectory with ENU position and quaternion columns.
    lla_origin : array_like, shape (3,)
        Latitude, longitude and altitude of the ENU frame origin.
    error_sd : float
        Standard deviation of the position errors in meters.
    lever_arm : array_like with shape (3,) or None, optional
        Vector from IMU to antenna in body frame. If None (default), zero.
    rng : None, int or `numpy.random.Generator`, optional
        Random seed or generator.
    status : int, optional
        Fix status assigned to all fixes. Default is 2.

    Returns
    -------
    DataFrame
        Fixes indexed by time with columns 'lat', 'lon', 'alt', 'sd' and 'status'.
    """
    rng = np.random.default_rng(rng)
    r_g = trajectory[ENU_COLS].values
    if lever_arm is not None:
        r_g = r_g + Rotation.from_quat(trajectory[QUAT_COLS].values).apply(lever_arm)
    r_g = r_g + error_sd * rng.standard_normal(r_g.shape)

    fixes = transform.enu_to_lla(pd.DataFrame(r_g, index=trajectory.index,
                                              columns=ENU_COLS), lla_origin)
    fixes['sd'] = error_sd
    fixes['status'] = status
    return fixes

