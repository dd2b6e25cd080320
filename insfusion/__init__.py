"""insfusion: loosely coupled IMU/GNSS integration in Python.

The package estimates position, velocity, attitude and IMU biases of a platform by
fusing IMU samples (specific force and angular rate) with GNSS position fixes in
an error-state Kalman filter.

Type naming conventions
-----------------------
Batch data are represented as pandas DataFrame. The same kinds of data have the
same set of columns. In this sense we define the following "types":

    - `Imu` - DataFrame containing IMU measurements with columns 'accel_x',
      'accel_y', 'accel_z' (specific force in m/s^2) and 'gyro_x', 'gyro_y',
      'gyro_z' (angular rate in rad/s)
    - `Fixes` - DataFrame containing GNSS fixes with columns 'lat', 'lon', 'alt',
      accuracy column 'sd' or covariance columns 'cov_xx', ..., 'cov_zz' and
      optional column 'status'
    - `Trajectory` - DataFrame containing estimated trajectory with columns
      'east', 'north', 'up' for position in the local frame, 'VE', 'VN', 'VU'
      for velocity, 'qx', 'qy', 'qz', 'qw' for the attitude quaternion and
      'lat', 'lon', 'alt' for geodetic position
    - `Path` - DataFrame with published poses with columns 'east', 'north', 'up',
      'qx', 'qy', 'qz', 'qw'

All data are indexed by time in seconds measured by a common clock. Streaming
interfaces (`fusion.FusionEngine`) consume records from `measurements`.

Variable naming convention
--------------------------
Geometric vectors and rotation matrices are associated with frames of reference.
A vector ``vec`` expressed in a frame ``a`` is typically denoted as ``vec_a``.
A rotation matrix projecting from frame ``b`` to frame ``a`` is denoted as ``mat_ab``.

The following one-letter notation for the frames of reference is used:

    - e - Earth-centered Earth-fixed frame (ECEF)
    - g - East-North-Up local frame anchored at the first accepted fix
    - b - frame associated with IMU axes also known as "body frame"

Attitude is stored as `scipy.spatial.transform.Rotation` from body to ENU frame.
Quaternions are in scalar-last order (x, y, z, w).

Units of measurement
--------------------
Generally all parameters are measured in International System of Units.
Gyro readings and associated quantities (noise, bias, etc.) are based on radians
(like rad/s, etc.) Latitude and longitude are measured in degrees.

A continuous white noise intensity is expressed as root of power spectral density
(root PSD). Refer to [1]_ for the discussion of continuous white noise process and its
power spectral density.

Modules
-------
.. autosummary::
   :toctree: generated/

   align
   earth
   error_model
   errors
   filters
   fusion
   kalman
   measurements
   parameters
   sim
   state
   transform
   util

References
----------
.. [1] P\\. S\\. Maybeck, "Stochastic Models, Estimation and Control", volume 1
"""
from . import (align, earth, error_model, errors, filters, fusion, kalman,
               measurements, parameters, sim, state, transform, util)

__version__ = "1.0"
