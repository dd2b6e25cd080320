import numpy as np
from numpy.testing import assert_allclose
import pandas as pd
from insfusion import earth, transform
from insfusion.util import LLA_COLS, ENU_COLS


def test_lla_to_ecef():
    r_e = transform.lla_to_ecef([0, 0, 10])
    assert_allclose(r_e, [earth.A + 10, 0, 0])

    r_e = transform.lla_to_ecef([-90, 0, -10])
    b = (1 - earth.E2) ** 0.5 * earth.A
    assert_allclose(r_e, [0, 0, -b + 10], atol=1e-9)

    r_e = transform.lla_to_ecef([[0, 0, 10], [-90, 0, -10]])
    assert_allclose(r_e, [[earth.A + 10, 0, 0], [0, 0, -b + 10]], atol=1e-9)


def test_ecef_to_lla():
    lla = np.array([[0, 0, 10], [45, -120, 1000], [-60.5, 170, -50],
                    [89.5, 30, 8000]])
    assert_allclose(transform.ecef_to_lla(transform.lla_to_ecef(lla)), lla,
                    rtol=0, atol=1e-8)
    assert_allclose(transform.ecef_to_lla(transform.lla_to_ecef(lla[1])), lla[1],
                    rtol=0, atol=1e-8)

    b = (1 - earth.E2) ** 0.5 * earth.A
    assert_allclose(transform.ecef_to_lla([0, 0, b + 100]), [90, 0, 100], atol=1e-8)


def test_mat_eg_from_ll():
    # East, North, Up axes expressed in ECEF.
    assert_allclose(transform.mat_eg_from_ll(0, 0),
                    [[0, 0, 1], [1, 0, 0], [0, 1, 0]], atol=1e-15)
    assert_allclose(transform.mat_eg_from_ll(90, 0),
                    [[0, -1, 0], [1, 0, 0], [0, 0, 1]], atol=1e-15)

    mat = transform.mat_eg_from_ll([0, 90], [0, 0])
    assert mat.shape == (2, 3, 3)
    assert_allclose(mat[0], transform.mat_eg_from_ll(0, 0))
    assert_allclose(mat[1], transform.mat_eg_from_ll(90, 0))
    assert_allclose(mat[1] @ mat[1].T, np.eye(3), atol=1e-15)


def test_lla_to_enu():
    lla = [[0, 0, 1000], [90, 90, 0], [0, -90, -1000]]
    enu = transform.lla_to_enu(lla)
    a = earth.A + 1000
    b = (1 - earth.E2) ** 0.5 * earth.A
    expected = [[0, 0, 0], [0, b, -a], [-earth.A + 1000, 0, -a]]
    assert_allclose(enu, expected, atol=1e-8)
    assert isinstance(enu, np.ndarray)

    lla = pd.DataFrame(data=lla, columns=LLA_COLS)
    enu = transform.lla_to_enu(lla)
    expected = pd.DataFrame(data=expected, columns=ENU_COLS)
    assert_allclose(enu, expected, atol=1e-8)
    assert isinstance(enu, pd.DataFrame)
    assert list(enu.columns) == ENU_COLS


def test_lla_to_enu_axes():
    origin = [55, 37, 150]
    enu = transform.lla_to_enu([55.0001, 37, 150], origin)
    assert enu[1] > 11
    assert abs(enu[0]) < 1e-6
    assert abs(enu[2]) < 1e-3

    enu = transform.lla_to_enu([55, 37.0001, 150], origin)
    assert enu[0] > 6
    assert abs(enu[1]) < 1e-3

    enu = transform.lla_to_enu([55, 37, 160], origin)
    assert_allclose(enu, [0, 0, 10], atol=1e-8)

    assert_allclose(transform.lla_to_enu(origin, origin), 0, atol=1e-9)


def test_enu_to_lla():
    origin = np.array([55.5, 37.2, 150])
    rng = np.random.default_rng(0)
    r_g = rng.uniform(-5000, 5000, (10, 3))
    r_g[:, 2] /= 10

    lla = transform.enu_to_lla(r_g, origin)
    assert_allclose(transform.lla_to_enu(lla, origin), r_g, rtol=0, atol=1e-7)
    assert_allclose(transform.enu_to_lla([0, 0, 0], origin), origin, rtol=0,
                    atol=1e-9)

    lla = pd.DataFrame(lla, columns=LLA_COLS)
    enu = transform.lla_to_enu(lla, origin)
    lla_back = transform.enu_to_lla(enu, origin)
    assert isinstance(lla_back, pd.DataFrame)
    assert list(lla_back.columns) == LLA_COLS
    assert_allclose(lla_back[['lat', 'lon']], lla[['lat', 'lon']], rtol=0,
                    atol=1e-11)
    assert_allclose(lla_back['alt'], lla['alt'], rtol=0, atol=1e-7)


def test_lla_enu_round_trip():
    rng = np.random.default_rng(20240601)
    for _ in range(50):
        origin = [rng.uniform(-89.9, 89.9), rng.uniform(-179.9, 179.9),
                  rng.uniform(-10000, 10000)]
        lla = np.column_stack((rng.uniform(-89.9, 89.9, 40),
                               rng.uniform(-179.9, 179.9, 40),
                               rng.uniform(-10000, 10000, 40)))
        enu = transform.lla_to_enu(lla, origin)
        assert np.max(np.linalg.norm(enu, axis=1)) < 1.3e7
        assert_allclose(transform.enu_to_lla(enu, origin), lla, rtol=0, atol=1e-6)
