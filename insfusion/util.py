"""Utility functions.

Functions
---------
.. autosummary::
    :toctree: generated

    mv_prod
    skew_matrix
    symmetrize
"""
import numpy as np


LLA_COLS = ['lat', 'lon', 'alt']
ENU_COLS = ['east', 'north', 'up']
VEL_COLS = ['VE', 'VN', 'VU']
QUAT_COLS = ['qx', 'qy', 'qz', 'qw']
THETA_COLS = ['theta_x', 'theta_y', 'theta_z']
GYRO_COLS = ['gyro_x', 'gyro_y', 'gyro_z']
ACCEL_COLS = ['accel_x', 'accel_y', 'accel_z']
BIAS_COLS = ['bias_x', 'bias_y', 'bias_z']
COV_COLS = ['cov_xx', 'cov_xy', 'cov_xz',
            'cov_yx', 'cov_yy', 'cov_yz',
            'cov_zx', 'cov_zy', 'cov_zz']
PATH_COLS = ENU_COLS + QUAT_COLS
TRAJECTORY_COLS = ENU_COLS + VEL_COLS + QUAT_COLS + LLA_COLS
TRAJECTORY_SD_COLS = ENU_COLS + VEL_COLS + THETA_COLS


def mv_prod(a, b, at=False):
    """Compute products of multiple matrices and vectors stored in a stack.

    Parameters
    ----------
    a : array_like with 2 or 3 dimensions
        Single matrix or stack of matrices. Matrices are stored in the two
        trailing dimensions.
    b : ndarray with 1 or 2 dimensions
        Single vector or stack of vectors. Vectors are stored in the trailing
        dimension.
    at : bool, optional
        Whether to use transpose of `a`.

    Returns
    -------
    ndarray
        Computed products.
    """
    a = np.asarray(a)
    b = np.asarray(b)

    if a.ndim not in [2, 3]:
        raise ValueError("Wrong number of dimensions in `a`.")
    if b.ndim not in [1, 2]:
        raise ValueError("Wrong number of dimensions in `b`.")

    if at:
        if a.ndim == 3:
            a = np.transpose(a, (0, 2, 1))
        else:
            a = a.T

    return np.einsum("...ij,...j->...i", a, b)


def skew_matrix(vec):
    """Create a skew matrix corresponding to a vector.

    Parameters
    ----------
    vec : array_like, shape (3,) or (n, 3)
        Vector.

    Returns
    -------
    ndarray, shape (3, 3) or (n, 3, 3)
        Corresponding skew matrix.
    """
    vec = np.asarray(vec)
    single = vec.ndim == 1
    n = 1 if single else len(vec)
    vec = np.atleast_2d(vec)
    result = np.zeros((n, 3, 3))
    result[:, 0, 1] = -vec[:, 2]
    result[:, 0, 2] = vec[:, 1]
    result[:, 1, 0] = vec[:, 2]
    result[:, 1, 2] = -vec[:, 0]
    result[:, 2, 0] = -vec[:, 1]
    result[:, 2, 1] = vec[:, 0]
    return result[0] if single else result


def symmetrize(P):
    """Return the symmetric part of a square matrix."""
    return 0.5 * (P + P.T)


class Bunch(dict):
    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__

    def __repr__(self):
        if self.keys():
            m = max(map(len, list(self.keys()))) + 1
            return '\n'.join(['{}: {}'.format(k.rjust(m), type(v))
                              for k, v in self.items()])
        else:
            return self.__class__.__name__ + "()"

    def __dir__(self):
        return list(self.keys())
