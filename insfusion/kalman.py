"""Kalman filter functions.

Module contains abstract functions for linear Kalman filter operations.
Refer to [1]_ for the theory of Kalman filters.

Functions
---------
.. autosummary::
    :toctree: generated/

    compute_process_matrices
    propagate
    correct

References
----------
.. [1] P\\. S\\. Maybeck, "Stochastic Models, Estimation and Control", volume 1
"""
from warnings import warn
import numpy as np
from scipy.linalg import cholesky, cho_solve, solve_triangular, expm, LinAlgError
from .errors import NumericalDegeneracy
from .util import symmetrize


def compute_process_matrices(F, Q, dt):
    """Compute discrete process matrices for Kalman filter prediction.

    The algorithm with matrix exponential described in [1]_ is used.

    Parameters
    ----------
    F : ndarray, shape (n_states, n_states)
        Continuous process transition matrix.
    Q : ndarray, shape (n_states, n_states)
        Continuous process noise matrix.
    dt : float
        Time step.

    Returns
    -------
    Phi : ndarray, shape (n_states, n_states)
        State transition matrix.
    Qd : ndarray, shape (n_states, n_states)
        Discrete process noise covariance.

    References
    ----------
    .. [1] Charles F. van Loan, "Computing Integrals Involving the Matrix Exponential"
    """
    n = len(F)
    H = np.zeros((2 * n, 2 * n))
    H[:n, :n] = F
    H[:n, n:] = Q
    H[n:, n:] = -F.T
    H = expm(H * dt)
    return H[:n, :n], symmetrize(H[:n, n:] @ H[:n, :n].T)


def _check_covariance(P):
    P = symmetrize(P)
    diagonal = np.diag(P)
    if not np.all(np.isfinite(P)):
        raise NumericalDegeneracy("Covariance matrix contains non-finite values")
    if np.any(diagonal < 0):
        warn("Negative variances encountered in the covariance matrix, "
             "they were set to zeros.")
        negative = np.nonzero(diagonal < 0)[0]
        P[negative, :] = 0
        P[:, negative] = 0
    return P


def propagate(P, Phi, Qd):
    """Propagate covariance matrix.

    Parameters
    ----------
    P : ndarray, shape (n_states, n_states)
        Covariance matrix.
    Phi : ndarray, shape (n_states, n_states)
        State transition matrix.
    Qd : ndarray, shape (n_states, n_states)
        Discrete process noise covariance.

    Returns
    -------
    ndarray, shape (n_states, n_states)
        Propagated covariance, symmetric.
    """
    return _check_covariance(Phi @ P @ Phi.T + Qd)


def correct(x, P, z, H, R):
    """Perform Kalman correction.

    The correction obtains a posteriori state and covariance given measurement
    of the form::

        z = H @ x + v, with v ~ N(0, R)

    The covariance is updated in the Joseph form which preserves its symmetry and
    positive semi-definiteness.

    Parameters
    ----------
    x : ndarray, shape (n_states,)
        State vector.
    P : ndarray, shape (n_states, n_states)
        Covariance matrix.
    z : ndarray, shape (n_obs,)
        Observation vector.
    H : ndarray, shape (n_obs, n_states)
        Matrix which relates state and measurement vectors.
    R : ndarray, shape (n_obs, n_obs)
        Positive semi-definite measurement noise matrix.

    Returns
    -------
    x : ndarray, shape (n_states,)
        Corrected state vector.
    P : ndarray, shape (n_states, n_states)
        A posteriori covariance matrix.
    innovation : ndarray, shape (n_obs,)
        Standardized innovation vector with theoretical zero mean and identity
        covariance matrix.

    Raises
    ------
    NumericalDegeneracy
        If the innovation covariance ``H @ P @ H.T + R`` is not positive definite.
    """
    HP = H @ P
    S = symmetrize(HP @ H.T + R)

    e = z - H @ x
    try:
        L = cholesky(S, lower=True)
    except (LinAlgError, ValueError) as error:
        raise NumericalDegeneracy(
            "Innovation covariance is not positive definite") from error
    K = cho_solve((L, True), HP).T
    U = np.eye(len(x)) - K @ H

    return (x + K @ e, _check_covariance(U @ P @ U.T + K @ R @ K.T),
            solve_triangular(L, e, lower=True))
