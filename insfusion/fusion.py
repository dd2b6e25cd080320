"""IMU/GNSS fusion driver.

`FusionEngine` owns an `insfusion.filters.ErrorStateFilter` and implements the
logic around it: buffering of IMU samples before initialization, the fix quality
gate, time synchronization check at initialization, selection of the reference
point of the local ENU frame, publishing of the estimated pose and recording
of results. `run_fusion` processes the whole recorded data set through it.

Classes
-------
.. autosummary::
    :toctree: generated/

    FusionEngine
    PoseEstimate
    Recorder

Functions
---------
.. autosummary::
    :toctree: generated/

    run_fusion
"""
from collections import deque, namedtuple
import logging
import numpy as np
import pandas as pd
from . import error_model, transform
from .errors import FusionError, InitializationFailure, OutOfOrderSample, RejectedFix
from .filters import ErrorStateFilter
from .measurements import GnssFix, ImuSample
from .parameters import FusionParameters
from .util import (ACCEL_COLS, GYRO_COLS, LLA_COLS, ENU_COLS, BIAS_COLS, COV_COLS,
                   PATH_COLS, TRAJECTORY_COLS, TRAJECTORY_SD_COLS, Bunch)

_LOG = logging.getLogger(__name__)


class PoseEstimate(namedtuple('PoseEstimate', ['time', 'position', 'quaternion',
                                               'velocity', 'covariance'])):
    """Estimated pose published by the filter.

    Attributes
    ----------
    time : float
        Time of the estimate.
    position : ndarray, shape (3,)
        Position in the local ENU frame.
    quaternion : ndarray, shape (4,)
        Rotation from body to ENU frame as a unit quaternion (x, y, z, w).
    velocity : ndarray, shape (3,)
        Velocity in the local ENU frame.
    covariance : ndarray, shape (6, 6)
        Covariance of position and attitude errors.
    """
    __slots__ = ()

    @classmethod
    def from_state(cls, state):
        return cls(state.time, state.position.copy(), state.quaternion,
                   state.velocity.copy(), state.pose_covariance())

    @property
    def covariance_flat(self):
        """Pose covariance as 36 elements in row-major order."""
        return self.covariance.ravel(order='C')


class Recorder:
    """Writer of the filter results into text files.

    For each update the state file receives the line::

        time, east, north, up, qx, qy, qz, qw, lat, lon, alt

    and the fix file receives the line::

        time, lat, lon, alt

    All values are written with 15 digits after the decimal point.

    Parameters
    ----------
    state_path, fix_path : str, path-like or None
        Paths of the files. None disables the corresponding output.
    """
    PRECISION = 15

    def __init__(self, state_path=None, fix_path=None):
        self._state_file = None if state_path is None else open(state_path, 'w')
        try:
            self._fix_file = None if fix_path is None else open(fix_path, 'w')
        except OSError:
            if self._state_file is not None:
                self._state_file.close()
            raise

    @classmethod
    def format_line(cls, values):
        return ", ".join(f"{value:.{cls.PRECISION}f}" for value in values) + "\n"

    def write_state(self, state, lla_origin):
        if self._state_file is None:
            return
        lla = transform.enu_to_lla(state.position, lla_origin)
        self._state_file.write(self.format_line(
            np.hstack((state.time, state.position, state.quaternion, lla))))

    def write_fix(self, fix):
        if self._fix_file is None:
            return
        self._fix_file.write(self.format_line(np.hstack((fix.time, fix.lla))))

    def close(self):
        for f in (self._state_file, self._fix_file):
            if f is not None:
                f.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class FusionEngine:
    """IMU/GNSS fusion driver.

    Before initialization IMU samples are stored in a buffer with capacity
    ``parameters.imu_buffer_size``. The first fix which arrives when the buffer
    is full and which is synchronized with the latest IMU sample initializes the
    filter and becomes the reference point of the local ENU frame. After that IMU
    samples propagate the filter and fixes update it.

    Rejected inputs are reported as warnings through `logging` and don't affect
    the filter.

    Parameters
    ----------
    parameters : `insfusion.parameters.FusionParameters` or None, optional
        Filter parameters. If None (default), default parameters are used.
    recorder : `Recorder` or None, optional
        Where to write the results of each update. If None (default), nothing is
        written.
    publish_on_propagate : bool, optional
        Whether to publish the pose after each IMU propagation in addition to
        each update. Default is False.
    callback : callable or None, optional
        Called with `PoseEstimate` each time the pose is published.

    Attributes
    ----------
    filter : `insfusion.filters.ErrorStateFilter`
        The filter.
    imu_buffer : deque
        IMU samples collected before initialization.
    """
    def __init__(self, parameters=None, recorder=None, publish_on_propagate=False,
                 callback=None):
        if parameters is None:
            parameters = FusionParameters()
        self.filter = ErrorStateFilter(parameters)
        self.imu_buffer = deque(maxlen=parameters.imu_buffer_size)
        self.recorder = recorder
        self.publish_on_propagate = publish_on_propagate
        self.callback = callback
        self._anchor = None
        self._path_times = []
        self._path_rows = []
        self._innovation_times = []
        self._innovations = []

    @property
    def parameters(self):
        return self.filter.parameters

    @property
    def initialized(self):
        return self.filter.initialized

    @property
    def state(self):
        return self.filter.state

    @property
    def anchor(self):
        """Latitude, longitude and altitude of the origin of the ENU frame."""
        return self._anchor

    @property
    def path(self):
        """DataFrame with all published poses indexed by time."""
        return pd.DataFrame(self._path_rows, index=pd.Index(self._path_times,
                                                            name='time'),
                            columns=PATH_COLS)

    @property
    def innovations(self):
        """DataFrame with standardized innovations of all updates."""
        return pd.DataFrame(self._innovations,
                            index=pd.Index(self._innovation_times, name='time'),
                            columns=ENU_COLS)

    def pose(self):
        """Return the current pose estimate or None if not initialized."""
        if not self.initialized:
            return None
        return PoseEstimate.from_state(self.state)

    def process_imu(self, sample):
        """Process an IMU sample.

        Parameters
        ----------
        sample : `insfusion.measurements.ImuSample`
            IMU sample.

        Returns
        -------
        bool
            Whether the sample was used (buffered or propagated).
        """
        if not self.initialized:
            if self.imu_buffer and sample.time <= self.imu_buffer[-1].time:
                _LOG.warning("Skipping IMU sample at %.6f, it is not after %.6f",
                             sample.time, self.imu_buffer[-1].time)
                return False
            self.imu_buffer.append(sample)
            return True

        try:
            self.filter.propagate(sample)
        except OutOfOrderSample as error:
            _LOG.warning("Skipping IMU sample, %s", error)
            return False

        if self.publish_on_propagate:
            self._publish()
        return True

    def process_fix(self, fix):
        """Process a GNSS fix.

        Parameters
        ----------
        fix : `insfusion.measurements.GnssFix`
            Position fix.

        Returns
        -------
        `PoseEstimate` or None
            Published pose after the update. None if the fix was used for
            initialization or rejected.
        """
        try:
            return self._process_fix(fix)
        except FusionError as error:
            _LOG.warning("Position fix at %.6f is not used, %s", fix.time, error)
            return None

    def _process_fix(self, fix):
        if fix.status < self.parameters.min_fix_status:
            raise RejectedFix(f"bad fix status {fix.status}")

        if not self.initialized:
            self._initialize(fix)
            return None

        innovation = self.filter.update_fix(fix, self._anchor)
        self._innovation_times.append(fix.time)
        self._innovations.append(innovation)

        pose = self._publish()
        if self.recorder is not None:
            self.recorder.write_state(self.state, self._anchor)
            self.recorder.write_fix(fix)
        return pose

    def _initialize(self, fix):
        if len(self.imu_buffer) < self.parameters.imu_buffer_size:
            raise InitializationFailure(
                f"not enough IMU data for initialization: {len(self.imu_buffer)} < "
                f"{self.parameters.imu_buffer_size}")

        last_time = self.imu_buffer[-1].time
        if abs(fix.time - last_time) > self.parameters.sync_tolerance:
            raise RejectedFix(f"fix time {fix.time} is not synchronized with IMU "
                              f"time {last_time}")

        self.filter.initialize(list(self.imu_buffer), fix.lla)
        self._anchor = fix.lla
        self.imu_buffer.clear()
        _LOG.info("System initialized at time %.6f, reference point %s",
                  self.state.time, self._anchor)

    def _publish(self):
        pose = PoseEstimate.from_state(self.state)
        self._path_times.append(pose.time)
        self._path_rows.append(np.hstack((pose.position, pose.quaternion)))
        if self.callback is not None:
            self.callback(pose)
        return pose


def _read_fixes(fixes):
    if all(col in fixes for col in COV_COLS):
        cov = fixes[COV_COLS].values.reshape(-1, 3, 3)
    elif 'sd' in fixes:
        cov = fixes['sd'].values[:, None, None] ** 2 * np.eye(3)
    else:
        raise ValueError("`fixes` must contain either 'sd' or covariance columns "
                         f"{COV_COLS}")
    status = fixes['status'].values if 'status' in fixes else np.full(len(fixes), 2)
    return [GnssFix(time, lla, cov_i, status_i)
            for time, lla, cov_i, status_i in zip(fixes.index, fixes[LLA_COLS].values,
                                                  cov, status)]


def run_fusion(imu, fixes, parameters=None, recorder=None):
    """Run the filter on recorded IMU and GNSS data.

    IMU samples and fixes are processed in the order of time. A fix with the same
    time as an IMU sample is processed after it.

    Parameters
    ----------
    imu : DataFrame
        IMU data indexed by time with columns 'accel_x', 'accel_y', 'accel_z' for
        specific force and 'gyro_x', 'gyro_y', 'gyro_z' for angular rate.
    fixes : DataFrame
        GNSS data indexed by time with columns 'lat', 'lon', 'alt'. Accuracy
        must be given either by column 'sd' with standard deviation in meters or
        by columns 'cov_xx', 'cov_xy', ..., 'cov_zz' with ENU covariance elements.
        Optional column 'status' contains fix status, if absent all fixes are
        considered good.
    parameters : `insfusion.parameters.FusionParameters` or None, optional
        Filter parameters. If None (default), default parameters are used.
    recorder : `Recorder` or None, optional
        Where to write the results of each update.

    Returns
    -------
    Bunch with the following fields:

        trajectory, trajectory_sd : DataFrame
            Estimated trajectory and its error standard deviations. Attitude
            errors are given as components of the rotation vector in radians.
        accel_bias, gyro_bias : DataFrame
            Estimated sensor biases.
        innovations : DataFrame
            Standardized innovations of position fixes.
        path : DataFrame
            Published poses.
        anchor : ndarray with shape (3,) or None
            Reference point of the local ENU frame. None if the filter was not
            initialized.
    """
    engine = FusionEngine(parameters, recorder)

    imu_samples = [ImuSample(time, accel, gyro) for time, accel, gyro in
                   zip(imu.index, imu[ACCEL_COLS].values, imu[GYRO_COLS].values)]
    gnss_fixes = _read_fixes(fixes)

    events = [(sample.time, 0, sample) for sample in imu_samples]
    events += [(fix.time, 1, fix) for fix in gnss_fixes]
    events.sort(key=lambda event: event[:2])

    times = []
    rows = []
    sd = []
    for _, kind, data in events:
        if kind == 0:
            used = engine.process_imu(data)
        else:
            used = engine.process_fix(data) is not None
        if not used or not engine.initialized:
            continue

        state = engine.state
        row = np.hstack((state.position, state.velocity, state.quaternion,
                         state.accel_bias, state.gyro_bias))
        if times and times[-1] == state.time:
            rows[-1] = row
            sd[-1] = state.sd()
        else:
            times.append(state.time)
            rows.append(row)
            sd.append(state.sd())

    index = pd.Index(times, name='time')
    rows = np.asarray(rows).reshape(-1, 16)
    sd = np.asarray(sd).reshape(-1, error_model.N_STATES)

    if engine.anchor is not None:
        lla = transform.enu_to_lla(rows[:, :3], engine.anchor).reshape(-1, 3)
    else:
        lla = np.full((len(rows), 3), np.nan)
    trajectory = pd.DataFrame(np.hstack((rows[:, :10], lla)), index=index,
                              columns=TRAJECTORY_COLS)

    trajectory_sd = pd.DataFrame(sd[:, :9], index=index, columns=TRAJECTORY_SD_COLS)
    accel_bias = pd.DataFrame(rows[:, 10:13], index=index, columns=BIAS_COLS)
    gyro_bias = pd.DataFrame(rows[:, 13:16], index=index, columns=BIAS_COLS)

    return Bunch(trajectory=trajectory,
                 trajectory_sd=trajectory_sd,
                 accel_bias=accel_bias,
                 gyro_bias=gyro_bias,
                 innovations=engine.innovations,
                 path=engine.path,
                 anchor=engine.anchor)
