"""Static alignment.

When the platform is stationary accelerometers sense the reaction to gravity,
that is the specific force points up. Averaging it over a window gives the
direction of the local vertical in body frame, which determines roll and pitch.
Heading is not observable from accelerometers and is set such that the projection
of the body x-axis onto the horizontal plane points East.
"""
import logging
import numpy as np
from scipy.spatial.transform import Rotation
from .errors import InitializationFailure

_LOG = logging.getLogger(__name__)


def align_static(samples, min_samples, max_accel_sd=None):
    """Estimate attitude from accelerometer readings of a stationary IMU.

    Parameters
    ----------
    samples : sequence of `insfusion.measurements.ImuSample`
        IMU samples collected while the platform is stationary.
    min_samples : int
        Minimum number of samples required.
    max_accel_sd : float or None, optional
        Maximum allowed standard deviation of accelerometer readings for each axis.
        It serves to detect the motion during the alignment. If None (default),
        the check is not done.

    Returns
    -------
    `scipy.spatial.transform.Rotation`
        Rotation from body to ENU frame.

    Raises
    ------
    InitializationFailure
        If there are not enough samples, the IMU is moving or the mean specific
        force is zero.
    """
    if len(samples) == 0 or len(samples) < min_samples:
        raise InitializationFailure(
            f"insufficient samples: {len(samples)} < {min_samples}")

    accel = np.array([sample.accel for sample in samples])
    mean_accel = np.mean(accel, axis=0)
    _LOG.debug("Mean specific force for alignment: %s", mean_accel)

    if max_accel_sd is not None:
        accel_sd = np.std(accel, axis=0)
        if np.max(accel_sd) > max_accel_sd:
            raise InitializationFailure(
                f"too large accelerometer standard deviation {accel_sd}, "
                f"the platform is not stationary")

    norm = np.linalg.norm(mean_accel)
    if not np.isfinite(norm) or norm == 0:
        raise InitializationFailure("mean specific force is zero")

    # Axes of ENU frame expressed in body frame.
    z_axis = mean_accel / norm
    x_axis = np.array([1.0, 0.0, 0.0])
    if abs(z_axis @ x_axis) > 1 - 1e-6:
        x_axis = np.array([0.0, 1.0, 0.0])
    x_axis = x_axis - z_axis * (z_axis @ x_axis)
    x_axis /= np.linalg.norm(x_axis)
    y_axis = np.cross(z_axis, x_axis)

    mat_bg = np.column_stack((x_axis, y_axis, z_axis))
    return Rotation.from_matrix(mat_bg.T)
