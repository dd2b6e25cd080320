"""Filter state.

The filter state consists of the nominal navigation state (position, velocity,
attitude, sensor biases), the covariance of the error state and the time of the
last propagation or update.

Error state vector has 15 components, 3 for each of the following errors:
position, velocity, attitude (small rotation vector composed on the right of the
nominal attitude), accelerometer bias and gyro bias. Indices of the blocks are
defined in `insfusion.error_model`.

Classes
-------
.. autosummary::
    :toctree: generated/

    FilterState
"""
import numpy as np
from scipy.spatial.transform import Rotation
from . import error_model


class FilterState:
    """Nominal state and error covariance of the filter.

    Parameters
    ----------
    time : float, optional
        Time of the state. Default is 0.
    position, velocity : array_like, shape (3,), optional
        Position and velocity resolved in the local ENU frame. Default is zero.
    rotation : `scipy.spatial.transform.Rotation`, optional
        Attitude, i.e. rotation from body to ENU frame. Default is identity.
    accel_bias, gyro_bias : array_like, shape (3,), optional
        Sensor bias estimates. Default is zero.
    P : array_like, shape (15, 15), optional
        Error state covariance. Default is zero.

    Attributes
    ----------
    mat_gb : ndarray, shape (3, 3)
        Attitude as a rotation matrix projecting from body to ENU frame.
    """
    def __init__(self, time=0.0, position=None, velocity=None, rotation=None,
                 accel_bias=None, gyro_bias=None, P=None):
        self.time = float(time)
        self.position = np.zeros(3) if position is None else np.array(position,
                                                                       dtype=float)
        self.velocity = np.zeros(3) if velocity is None else np.array(velocity,
                                                                       dtype=float)
        self.rotation = Rotation.identity() if rotation is None else rotation
        self.accel_bias = (np.zeros(3) if accel_bias is None
                           else np.array(accel_bias, dtype=float))
        self.gyro_bias = (np.zeros(3) if gyro_bias is None
                          else np.array(gyro_bias, dtype=float))
        n_states = error_model.N_STATES
        self.P = (np.zeros((n_states, n_states)) if P is None
                  else np.array(P, dtype=float))
        if self.P.shape != (n_states, n_states):
            raise ValueError(f"`P` must have shape {(n_states, n_states)}")

    @property
    def mat_gb(self):
        return self.rotation.as_matrix()

    @property
    def quaternion(self):
        """Attitude quaternion in scalar-last (x, y, z, w) order."""
        return self.rotation.as_quat()

    def copy(self):
        # Rotation objects are immutable, sharing is safe.
        return FilterState(self.time, self.position, self.velocity, self.rotation,
                           self.accel_bias, self.gyro_bias, self.P)

    def pose_covariance(self):
        """Compute the covariance of position and attitude errors.

        Returns
        -------
        ndarray, shape (6, 6)
            Matrix with blocks ``[[P_pp, P_po], [P_op, P_oo]]``.
        """
        pose = error_model.DR + error_model.DTHETA
        return self.P[np.ix_(pose, pose)]

    def sd(self):
        """Standard deviations of the error state components."""
        return np.diag(self.P) ** 0.5

    def __eq__(self, other):
        if not isinstance(other, FilterState):
            return NotImplemented
        return (self.time == other.time and
                np.array_equal(self.position, other.position) and
                np.array_equal(self.velocity, other.velocity) and
                np.array_equal(self.rotation.as_quat(), other.rotation.as_quat()) and
                np.array_equal(self.accel_bias, other.accel_bias) and
                np.array_equal(self.gyro_bias, other.gyro_bias) and
                np.array_equal(self.P, other.P))

    def __repr__(self):
        return ("FilterState(time={}, position={}, velocity={}, quaternion={})"
                .format(self.time, self.position, self.velocity, self.quaternion))
