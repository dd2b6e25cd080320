"""Error-state model of the strapdown INS used in the filter.

The nominal state is integrated by the nonlinear strapdown equations, whereas its
errors are modelled by a system of linear differential equations which depend on
the current nominal state and IMU readings::

    dx/dt = F @ x + G @ w

Where ``x`` is the error vector with 15 components and ``w`` is the vector of 12
white noises (accelerometer and gyro noises, noises driving the random walk of
accelerometer and gyro biases).

The attitude error ``theta`` is a small rotation vector defined in body frame,
that is the true attitude is ``mat_gb @ exp(theta)``. With this choice the
equations for the velocity and attitude errors are::

    d(dv)/dt = -mat_gb @ [f]x @ theta - mat_gb @ dba - mat_gb @ n_a
    d(theta)/dt = -[w]x @ theta - dbg - n_g

where ``f`` and ``w`` are bias corrected specific force and angular rate.
Refer to [1]_ for the derivation.

Constants
---------
.. autosummary::
    :toctree: generated

    N_STATES
    N_NOISES

Functions
---------
.. autosummary::
    :toctree: generated/

    system_matrices
    position_error_jacobian
    initial_covariance
    correct_state

References
----------
.. [1] J. Sola, "Quaternion kinematics for the error-state Kalman filter", 2017
"""
import numpy as np
from scipy.spatial.transform import Rotation
from . import util, transform

#: Number of error states.
N_STATES = 15
#: Number of process noises.
N_NOISES = 12

DR1 = 0
DR2 = 1
DR3 = 2
DV1 = 3
DV2 = 4
DV3 = 5
THETA1 = 6
THETA2 = 7
THETA3 = 8
DBA1 = 9
DBA2 = 10
DBA3 = 11
DBG1 = 12
DBG2 = 13
DBG3 = 14
DR = [DR1, DR2, DR3]
DV = [DV1, DV2, DV3]
DTHETA = [THETA1, THETA2, THETA3]
DBA = [DBA1, DBA2, DBA3]
DBG = [DBG1, DBG2, DBG3]

ACCEL_NOISE = [0, 1, 2]
GYRO_NOISE = [3, 4, 5]
ACCEL_BIAS_NOISE = [6, 7, 8]
GYRO_BIAS_NOISE = [9, 10, 11]


def system_matrices(state, accel, gyro):
    """Compute matrices which govern the error model differential equations.

    Parameters
    ----------
    state : `insfusion.state.FilterState`
        Nominal state.
    accel, gyro : array_like, shape (3,)
        Bias corrected specific force and angular rate.

    Returns
    -------
    F : ndarray, shape (15, 15)
        Error dynamics matrix.
    G : ndarray, shape (15, 12)
        Noise coupling matrix.
    """
    mat_gb = state.mat_gb
    identity = np.eye(3)

    F = np.zeros((N_STATES, N_STATES))
    F[np.ix_(DR, DV)] = identity
    F[np.ix_(DV, DTHETA)] = -mat_gb @ util.skew_matrix(accel)
    F[np.ix_(DV, DBA)] = -mat_gb
    F[np.ix_(DTHETA, DTHETA)] = -util.skew_matrix(gyro)
    F[np.ix_(DTHETA, DBG)] = -identity

    G = np.zeros((N_STATES, N_NOISES))
    G[np.ix_(DV, ACCEL_NOISE)] = -mat_gb
    G[np.ix_(DTHETA, GYRO_NOISE)] = -identity
    G[np.ix_(DBA, ACCEL_BIAS_NOISE)] = identity
    G[np.ix_(DBG, GYRO_BIAS_NOISE)] = identity

    return F, G


def position_error_jacobian(state, lever_arm=None):
    """Compute position error Jacobian matrix.

    This is the matrix which linearly relates the error of the predicted antenna
    position resolved in ENU frame and the error state vector.

    Parameters
    ----------
    state : `insfusion.state.FilterState`
        Nominal state.
    lever_arm : array_like, shape (3,) or None, optional
        Vector from IMU to antenna expressed in body frame. If None, assumed
        to be zero.

    Returns
    -------
    ndarray, shape (3, 15)
        Jacobian matrix.
    """
    result = np.zeros((3, N_STATES))
    result[:, DR] = np.eye(3)
    if lever_arm is not None:
        result[:, DTHETA] = -state.mat_gb @ util.skew_matrix(lever_arm)
    return result


def initial_covariance(parameters):
    """Compute the initial error covariance.

    Parameters
    ----------
    parameters : `insfusion.parameters.FusionParameters`
        Filter parameters.

    Returns
    -------
    ndarray, shape (15, 15)
        Diagonal covariance matrix.
    """
    level_sd = parameters.level_sd * transform.DEG_TO_RAD
    azimuth_sd = parameters.azimuth_sd * transform.DEG_TO_RAD
    sd = np.empty(N_STATES)
    sd[DR] = parameters.position_sd
    sd[DV] = parameters.velocity_sd
    sd[DTHETA] = [level_sd, level_sd, azimuth_sd]
    sd[DBA] = parameters.accel_bias_sd
    sd[DBG] = parameters.gyro_bias_sd
    return np.diag(sd ** 2)


def correct_state(state, x):
    """Correct the nominal state with estimated errors.

    Position, velocity and biases are corrected additively, the attitude is
    composed with the rotation corresponding to the attitude error.

    Parameters
    ----------
    state : `insfusion.state.FilterState`
        Nominal state, modified in place.
    x : ndarray, shape (15,)
        Error vector.
    """
    state.position = state.position + x[DR]
    state.velocity = state.velocity + x[DV]
    state.rotation = state.rotation * Rotation.from_rotvec(x[DTHETA])
    state.accel_bias = state.accel_bias + x[DBA]
    state.gyro_bias = state.gyro_bias + x[DBG]
