import numpy as np
from numpy.testing import assert_allclose
from scipy.spatial.transform import Rotation
from insfusion import error_model
from insfusion.state import FilterState


def test_filter_state():
    state = FilterState()
    assert state.time == 0
    assert_allclose(state.quaternion, [0, 0, 0, 1])
    assert_allclose(state.mat_gb, np.eye(3))
    assert state.P.shape == (15, 15)

    P = np.arange(225, dtype=float).reshape(15, 15)
    state = FilterState(5, [1, 2, 3], [4, 5, 6],
                        Rotation.from_euler('z', 90, degrees=True), P=P)
    assert_allclose(state.mat_gb @ [1, 0, 0], [0, 1, 0], atol=1e-15)

    copy = state.copy()
    assert copy == state
    copy.position[0] = 10
    assert copy != state
    assert state.position[0] == 1


def test_pose_covariance():
    P = np.arange(225, dtype=float).reshape(15, 15)
    state = FilterState(P=P)
    pose_cov = state.pose_covariance()
    indices = error_model.DR + error_model.DTHETA
    assert pose_cov.shape == (6, 6)
    for i, k in enumerate(indices):
        for j, m in enumerate(indices):
            assert pose_cov[i, j] == P[k, m]
    assert_allclose(state.sd(), np.diag(P) ** 0.5)
