"""Error-state Kalman filter for IMU/GNSS integration.

The filter keeps the nominal navigation state which is integrated from IMU readings
by the strapdown algorithm and the covariance of its errors, which is propagated
by the linear error model from `insfusion.error_model`. Position fixes estimate
the errors which are immediately fed back into the nominal state, so the error
state is zero between updates. This scheme is also known as an extended Kalman
filter in feedback form. Refer to [1]_ and [2]_ for details.

Classes
-------
.. autosummary::
    :toctree: generated/

    ErrorStateFilter

References
----------
.. [1] P. D. Groves, "Principles of GNSS, Inertial, and Multisensor Integrated
       Navigation Systems", 2nd edition
.. [2] J. Sola, "Quaternion kinematics for the error-state Kalman filter", 2017
"""
import numpy as np
from scipy.spatial.transform import Rotation
from . import align, earth, error_model, kalman, measurements, transform
from .errors import InitializationFailure, OutOfOrderSample
from .parameters import FusionParameters
from .state import FilterState


class ErrorStateFilter:
    """Error-state Kalman filter.

    The filter must be initialized by `initialize` with a window of IMU samples
    collected while the platform is stationary. After that it is advanced by
    `propagate` for each IMU sample and corrected by `update` or `update_fix`
    for each position fix. All calls must be serialized by the caller.

    Parameters
    ----------
    parameters : `insfusion.parameters.FusionParameters` or None, optional
        Filter parameters. If None (default), default parameters are used.

    Attributes
    ----------
    parameters : `insfusion.parameters.FusionParameters`
        Filter parameters.
    state : `insfusion.state.FilterState` or None
        Current filter state. None before initialization.
    gravity : float or None
        Gravity magnitude used in the strapdown integration.
    """
    def __init__(self, parameters=None):
        if parameters is None:
            parameters = FusionParameters()
        self.parameters = parameters
        self.position_measurement = measurements.Position(parameters.lever_arm)
        self.state = None
        self.gravity = None
        self.last_sample = None

    @property
    def initialized(self):
        return self.state is not None

    def initialize(self, samples, lla=None):
        """Initialize the filter by the static alignment.

        The time of the state is set to the time of the latest sample. Position,
        velocity and biases are set to zero.

        Parameters
        ----------
        samples : sequence of `insfusion.measurements.ImuSample`
            IMU samples collected while the platform is stationary, ordered
            by time.
        lla : array_like with shape (3,) or None, optional
            Latitude, longitude and altitude of the reference point. Used to
            compute the gravity when ``parameters.gravity`` is None.

        Raises
        ------
        InitializationFailure
            If the alignment can't be done. The filter stays uninitialized.
        """
        gravity = self.parameters.gravity
        if gravity is None:
            if lla is None:
                raise ValueError("`lla` is required when `parameters.gravity` is None")
            gravity = float(earth.gravity(lla[0], lla[2]))

        rotation = align.align_static(samples, self.parameters.imu_buffer_size,
                                      self.parameters.max_accel_sd)
        last_sample = samples[-1]
        self.state = FilterState(last_sample.time, rotation=rotation,
                                 P=error_model.initial_covariance(self.parameters))
        self.gravity = gravity
        self.last_sample = last_sample

    def propagate(self, sample):
        """Propagate the filter to the time of an IMU sample.

        Readings are assumed to change linearly between the previous and the
        current samples, so their values at the midpoint of the interval are used.
        Position is integrated by the trapezoid rule.

        Parameters
        ----------
        sample : `insfusion.measurements.ImuSample`
            IMU sample with the time greater than the current filter time.

        Raises
        ------
        OutOfOrderSample
            If the sample time is not greater than the filter time. The state is
            not changed.
        """
        if not self.initialized:
            raise InitializationFailure("filter is not initialized")

        state = self.state
        dt = sample.time - state.time
        if not dt > 0:
            raise OutOfOrderSample(
                f"sample time {sample.time} is not after filter time {state.time}")

        accel = 0.5 * (self.last_sample.accel + sample.accel) - state.accel_bias
        gyro = 0.5 * (self.last_sample.gyro + sample.gyro) - state.gyro_bias

        F, G = error_model.system_matrices(state, accel, gyro)
        Q = G @ np.diag(self.parameters.noise_sd ** 2) @ G.T
        Phi, Qd = kalman.compute_process_matrices(F, Q, dt)
        P = kalman.propagate(state.P, Phi, Qd)

        accel_g = state.rotation.apply(accel) + earth.gravity_g(self.gravity)
        state.position = state.position + state.velocity * dt + 0.5 * accel_g * dt**2
        state.velocity = state.velocity + accel_g * dt
        state.rotation = state.rotation * Rotation.from_rotvec(gyro * dt)
        state.P = P
        state.time = sample.time
        self.last_sample = sample

    def residual(self, r_g):
        """Compute the difference between measured and predicted antenna position."""
        return self.position_measurement.residual(self.state, r_g)

    def update(self, r_g, cov):
        """Correct the filter by the antenna position measurement.

        Parameters
        ----------
        r_g : array_like, shape (3,)
            Antenna position in ENU frame.
        cov : array_like, shape (3, 3)
            Covariance of the position measurement.

        Returns
        -------
        innovation : ndarray, shape (3,)
            Standardized innovation vector.

        Raises
        ------
        NumericalDegeneracy
            If the innovation covariance is not positive definite. The state is
            not changed.
        """
        if not self.initialized:
            raise InitializationFailure("filter is not initialized")

        state = self.state
        z, H, R = self.position_measurement.compute_matrices(state, r_g, cov)
        x, P, innovation = kalman.correct(np.zeros(error_model.N_STATES), state.P,
                                          z, H, R)
        error_model.correct_state(state, x)
        state.P = P
        return innovation

    def update_fix(self, fix, lla_origin):
        """Correct the filter by a GNSS fix.

        Parameters
        ----------
        fix : `insfusion.measurements.GnssFix`
            Position fix.
        lla_origin : array_like, shape (3,)
            Reference point of the local ENU frame.

        Returns
        -------
        innovation : ndarray, shape (3,)
            Standardized innovation vector.
        """
        return self.update(transform.lla_to_enu(fix.lla, lla_origin), fix.cov)
