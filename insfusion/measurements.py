"""Sensor records and the position measurement model.

The filter consumes two streams: IMU samples and GNSS position fixes. Both are
represented as immutable records. A position fix is processed by forming the
difference between the measured and the predicted antenna positions and linearly
relating it to the error state::

    z = r_measured - r_predicted = H @ x + v

Where

    - ``z`` - residual vector
    - ``x`` - error state vector
    - ``H`` - measurement Jacobian
    - ``v`` - noise vector with zero mean and covariance ``R``

Classes
-------
.. autosummary::
    :toctree: generated/

    ImuSample
    GnssFix
    Position
"""
from collections import namedtuple
import numpy as np
from . import error_model


def _frozen_array(value, shape, name):
    value = np.array(value, dtype=float)
    if value.shape != shape:
        raise ValueError(f"`{name}` must have shape {shape}, got {value.shape}")
    value.flags.writeable = False
    return value


class ImuSample(namedtuple('ImuSample', ['time', 'accel', 'gyro'])):
    """IMU sample.

    Parameters
    ----------
    time : float
        Time in seconds.
    accel : array_like, shape (3,)
        Specific force in body frame, m/s^2.
    gyro : array_like, shape (3,)
        Angular rate in body frame, rad/s.
    """
    __slots__ = ()

    def __new__(cls, time, accel, gyro):
        return super(ImuSample, cls).__new__(cls, float(time),
                                             _frozen_array(accel, (3,), 'accel'),
                                             _frozen_array(gyro, (3,), 'gyro'))


class GnssFix(namedtuple('GnssFix', ['time', 'lla', 'cov', 'status'])):
    """GNSS position fix.

    Parameters
    ----------
    time : float
        Time in seconds.
    lla : array_like, shape (3,)
        Latitude, longitude and altitude.
    cov : float or array_like, shape (3, 3)
        Covariance of the position error resolved in ENU frame, m^2. A float is
        interpreted as a standard deviation in meters common for all axes.
    status : int, optional
        Fix status reported by the receiver. Default is 2.
    """
    __slots__ = ()

    def __new__(cls, time, lla, cov, status=2):
        cov = np.asarray(cov, dtype=float)
        if cov.ndim == 0:
            cov = cov ** 2 * np.eye(3)
        return super(GnssFix, cls).__new__(cls, float(time),
                                           _frozen_array(lla, (3,), 'lla'),
                                           _frozen_array(cov, (3, 3), 'cov'),
                                           int(status))


class Position:
    """Measurement of the antenna position in the local ENU frame.

    Parameters
    ----------
    lever_arm : array_like with shape (3,) or None, optional
        Vector from IMU to antenna expressed in body frame. If None (default),
        assumed to be zero.
    """
    def __init__(self, lever_arm=None):
        if lever_arm is None:
            lever_arm = np.zeros(3)
        self.lever_arm = np.asarray(lever_arm, dtype=float)

    def predict(self, state):
        """Predict the antenna position from the filter state."""
        return state.position + state.rotation.apply(self.lever_arm)

    def residual(self, state, r_g):
        """Compute the difference between measured and predicted positions."""
        return np.asarray(r_g, dtype=float) - self.predict(state)

    def compute_matrices(self, state, r_g, cov):
        """Compute matrices for the linearized measurement.

        Parameters
        ----------
        state : `insfusion.state.FilterState`
            Current filter state.
        r_g : array_like, shape (3,)
            Measured antenna position in ENU frame.
        cov : array_like, shape (3, 3)
            Covariance of the measured position.

        Returns
        -------
        z : ndarray, shape (3,)
            Residual vector.
        H : ndarray, shape (3, 15)
            Measurement Jacobian.
        R : ndarray, shape (3, 3)
            Measurement noise covariance.
        """
        z = self.residual(state, r_g)
        H = error_model.position_error_jacobian(state, self.lever_arm)
        return z, H, np.asarray(cov, dtype=float)
