import numpy as np
from numpy.testing import assert_allclose
from scipy.spatial.transform import Rotation
from insfusion import error_model, transform, util
from insfusion.error_model import DR, DV, DTHETA, DBA, DBG
from insfusion.parameters import FusionParameters
from insfusion.state import FilterState


def _make_state():
    return FilterState(1.0, [10, -20, 5], [1, 2, -0.5],
                       Rotation.from_euler('xyz', [5, -10, 60], degrees=True),
                       accel_bias=[0.01, -0.02, 0.03],
                       gyro_bias=[1e-4, -2e-4, 3e-4])


def test_system_matrices():
    state = _make_state()
    accel = np.array([0.3, -0.2, 9.7])
    gyro = np.array([0.1, -0.05, 0.2])
    F, G = error_model.system_matrices(state, accel, gyro)
    assert F.shape == (error_model.N_STATES, error_model.N_STATES)
    assert G.shape == (error_model.N_STATES, error_model.N_NOISES)

    mat_gb = state.mat_gb
    theta = np.array([1e-5, -2e-5, 3e-5])
    dba = np.array([1e-3, 2e-3, -1e-3])

    # Velocity error rate caused by the attitude and accelerometer bias errors.
    true_rotation = state.rotation * Rotation.from_rotvec(theta)
    dv_rate = true_rotation.apply(accel - dba) - mat_gb @ accel
    x = np.zeros(error_model.N_STATES)
    x[DTHETA] = theta
    x[DBA] = dba
    assert_allclose((F @ x)[DV], dv_rate, rtol=1e-3, atol=1e-7)

    # Attitude error rate caused by the attitude and gyro bias errors.
    dbg = np.array([-1e-4, 1e-4, 2e-4])
    dt = 1e-6
    nominal = Rotation.from_rotvec(gyro * dt)
    true = Rotation.from_rotvec(theta) * Rotation.from_rotvec((gyro - dbg) * dt)
    theta_rate = ((nominal.inv() * true).as_rotvec() - theta) / dt
    x = np.zeros(error_model.N_STATES)
    x[DTHETA] = theta
    x[DBG] = dbg
    assert_allclose((F @ x)[DTHETA], theta_rate, rtol=1e-3, atol=1e-8)

    assert_allclose(F[np.ix_(DR, DV)], np.eye(3))
    assert_allclose(G[np.ix_(DV, error_model.ACCEL_NOISE)], -mat_gb)
    assert_allclose(G[np.ix_(DTHETA, error_model.GYRO_NOISE)], -np.eye(3))
    assert_allclose(G[np.ix_(DBA, error_model.ACCEL_BIAS_NOISE)], np.eye(3))
    assert_allclose(G[np.ix_(DBG, error_model.GYRO_BIAS_NOISE)], np.eye(3))
    assert_allclose(F[DBA], 0)
    assert_allclose(F[DBG], 0)


def test_position_error_jacobian():
    state = _make_state()
    H = error_model.position_error_jacobian(state)
    assert_allclose(H[:, DR], np.eye(3))
    assert_allclose(np.delete(H, DR, axis=1), 0)

    lever_arm = [0.1, 0.5, -1.0]
    H = error_model.position_error_jacobian(state, lever_arm)
    assert_allclose(H[:, DTHETA], -state.mat_gb @ util.skew_matrix(lever_arm))


def test_initial_covariance():
    parameters = FusionParameters()
    P = error_model.initial_covariance(parameters)
    assert_allclose(P, np.diag(np.diag(P)))
    sd = np.diag(P) ** 0.5
    assert_allclose(sd[DR], 10)
    assert_allclose(sd[DV], 10)
    assert_allclose(sd[DTHETA], np.array([10, 10, 100]) * transform.DEG_TO_RAD)
    assert_allclose(sd[DBA], 0.02)
    assert_allclose(sd[DBG], 0.02)


def test_correct_state():
    state = _make_state()
    initial = state.copy()
    x = np.arange(1, error_model.N_STATES + 1) * 1e-3
    error_model.correct_state(state, x)

    assert_allclose(state.position, initial.position + x[DR])
    assert_allclose(state.velocity, initial.velocity + x[DV])
    assert_allclose(state.accel_bias, initial.accel_bias + x[DBA])
    assert_allclose(state.gyro_bias, initial.gyro_bias + x[DBG])
    assert_allclose(state.mat_gb,
                    initial.mat_gb @ Rotation.from_rotvec(x[DTHETA]).as_matrix(),
                    atol=1e-15)
    assert_allclose(np.linalg.norm(state.quaternion), 1)
    assert state.time == initial.time
