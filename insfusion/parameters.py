"""Filter parameters.

Classes
-------
.. autosummary::
    :toctree: generated/

    FusionParameters

Functions
---------
.. autosummary::
    :toctree: generated/

    load_parameters
"""
import numpy as np
import yaml


class FusionParameters:
    """Parameters of the IMU/GNSS filter.

    All parameters are measured in International System of Units except angular
    standard deviations of the initial attitude which are given in degrees.
    Noise parameters are intensities of continuous white noise (root PSD).

    Parameters
    ----------
    accel_noise : float, optional
        Accelerometer white noise. Default is 1e-2.
    gyro_noise : float, optional
        Gyro white noise. Default is 1e-4.
    accel_bias_noise : float, optional
        Intensity of noise integrated into the accelerometer bias. Default is 1e-6.
    gyro_bias_noise : float, optional
        Intensity of noise integrated into the gyro bias. Default is 1e-8.
    position_sd, velocity_sd : float, optional
        Initial position and velocity standard deviations. Default is 10 for both.
    level_sd, azimuth_sd : float, optional
        Initial roll/pitch and yaw standard deviations in degrees.
        Default is 10 and 100 respectively.
    accel_bias_sd, gyro_bias_sd : float, optional
        Initial standard deviations of the sensor biases. Default is 0.02 for both.
    lever_arm : array_like, shape (3,), optional
        Vector from IMU to GNSS antenna expressed in body frame. Default is zero.
    imu_buffer_size : int, optional
        Number of IMU samples required for the static alignment. It is also the
        capacity of the buffer collecting samples before initialization.
        Default is 100.
    max_accel_sd : float or None, optional
        Maximum standard deviation of the accelerometer readings within the
        alignment window. If None, motion is not checked. Default is 3.0.
    sync_tolerance : float, optional
        Maximum time difference between the first fix and the last IMU sample
        allowed for initialization. Default is 0.5.
    min_fix_status : int, optional
        Minimum fix status accepted by the filter. Default is 2.
    gravity : float or None, optional
        Gravity magnitude. If None, the WGS84 normal gravity at the reference
        point is used. Default is 9.81007.
    """
    def __init__(self, accel_noise=1e-2, gyro_noise=1e-4, accel_bias_noise=1e-6,
                 gyro_bias_noise=1e-8, position_sd=10.0, velocity_sd=10.0,
                 level_sd=10.0, azimuth_sd=100.0, accel_bias_sd=0.02,
                 gyro_bias_sd=0.02, lever_arm=None, imu_buffer_size=100,
                 max_accel_sd=3.0, sync_tolerance=0.5, min_fix_status=2,
                 gravity=9.81007):
        self.accel_noise = self._verify_scalar(accel_noise, "accel_noise")
        self.gyro_noise = self._verify_scalar(gyro_noise, "gyro_noise")
        self.accel_bias_noise = self._verify_scalar(accel_bias_noise,
                                                    "accel_bias_noise")
        self.gyro_bias_noise = self._verify_scalar(gyro_bias_noise, "gyro_bias_noise")
        self.position_sd = self._verify_scalar(position_sd, "position_sd")
        self.velocity_sd = self._verify_scalar(velocity_sd, "velocity_sd")
        self.level_sd = self._verify_scalar(level_sd, "level_sd")
        self.azimuth_sd = self._verify_scalar(azimuth_sd, "azimuth_sd")
        self.accel_bias_sd = self._verify_scalar(accel_bias_sd, "accel_bias_sd")
        self.gyro_bias_sd = self._verify_scalar(gyro_bias_sd, "gyro_bias_sd")
        self.sync_tolerance = self._verify_scalar(sync_tolerance, "sync_tolerance")

        if max_accel_sd is not None:
            max_accel_sd = self._verify_scalar(max_accel_sd, "max_accel_sd")
        self.max_accel_sd = max_accel_sd

        if gravity is not None:
            gravity = self._verify_scalar(gravity, "gravity")
            if gravity == 0:
                raise ValueError("`gravity` must be positive")
        self.gravity = gravity

        if lever_arm is None:
            lever_arm = np.zeros(3)
        lever_arm = np.asarray(lever_arm, dtype=float)
        if lever_arm.shape != (3,) or not np.all(np.isfinite(lever_arm)):
            raise ValueError("`lever_arm` must be a finite array with shape (3,)")
        self.lever_arm = lever_arm

        if int(imu_buffer_size) != imu_buffer_size or imu_buffer_size < 1:
            raise ValueError("`imu_buffer_size` must be a positive integer")
        self.imu_buffer_size = int(imu_buffer_size)
        self.min_fix_status = int(min_fix_status)

    @staticmethod
    def _verify_scalar(value, name):
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ValueError(
                f"`{name}` must be a number, got {value!r}") from None
        if not np.isfinite(value) or value < 0:
            raise ValueError(f"`{name}` must be finite and non-negative")
        return value

    @classmethod
    def from_dict(cls, values):
        """Create parameters from a mapping.

        Parameters
        ----------
        values : dict
            Keys must be names of the constructor arguments.

        Returns
        -------
        FusionParameters
        """
        values = dict(values or {})
        unknown = set(values) - set(cls().to_dict())
        if unknown:
            raise ValueError(f"Unknown parameters: {sorted(unknown)}")
        return cls(**values)

    def to_dict(self):
        """Return parameters as a dict suitable for `from_dict`."""
        return {
            'accel_noise': self.accel_noise,
            'gyro_noise': self.gyro_noise,
            'accel_bias_noise': self.accel_bias_noise,
            'gyro_bias_noise': self.gyro_bias_noise,
            'position_sd': self.position_sd,
            'velocity_sd': self.velocity_sd,
            'level_sd': self.level_sd,
            'azimuth_sd': self.azimuth_sd,
            'accel_bias_sd': self.accel_bias_sd,
            'gyro_bias_sd': self.gyro_bias_sd,
            'lever_arm': self.lever_arm.tolist(),
            'imu_buffer_size': self.imu_buffer_size,
            'max_accel_sd': self.max_accel_sd,
            'sync_tolerance': self.sync_tolerance,
            'min_fix_status': self.min_fix_status,
            'gravity': self.gravity,
        }

    @property
    def noise_sd(self):
        """Noise intensities ordered as accel, gyro, accel bias, gyro bias."""
        return np.repeat([self.accel_noise, self.gyro_noise,
                          self.accel_bias_noise, self.gyro_bias_noise], 3)


def load_parameters(path):
    """Load parameters from a YAML file.

    The file must contain a mapping with the names of `FusionParameters`
    constructor arguments. An empty file gives the default parameters.

    Parameters
    ----------
    path : str or path-like
        Path to the file.

    Returns
    -------
    FusionParameters
    """
    with open(path) as f:
        values = yaml.safe_load(f)
    if values is not None and not isinstance(values, dict):
        raise ValueError(f"{path} must contain a mapping of parameters")
    return FusionParameters.from_dict(values)
