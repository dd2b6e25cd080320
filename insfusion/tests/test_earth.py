from numpy.testing import assert_allclose
from insfusion import earth


def test_principal_radii():
    lat = 0
    rn, re, rp = earth.principal_radii(lat, 0)
    assert_allclose(re, earth.A, rtol=1e-10)
    assert_allclose(rn, earth.A * (1 - earth.E2), rtol=1e-10)
    assert_allclose(rp, earth.A, rtol=1e-10)

    lat = [0, 90]
    rn, re, rp = earth.principal_radii(lat, 0)
    assert_allclose(re[0], earth.A, rtol=1e-10)
    assert_allclose(rn[0], earth.A * (1 - earth.E2), rtol=1e-10)
    assert_allclose(re[1], rn[1], rtol=1e-10)
    assert_allclose(rp[0], earth.A, rtol=1e-10)
    assert_allclose(rp[1], 0, atol=1e-10)


def test_gravity():
    g = earth.gravity(0, 0)
    assert_allclose(g, 9.7803253359, rtol=1e-10)

    g = earth.gravity(90, 0)
    assert_allclose(g, 9.8321849378, rtol=1e-10)

    g = earth.gravity(0, 0.5)
    assert_allclose(g, 9.7803253359 * (1 - 1 / earth.A), rtol=1e-10)

    g = earth.gravity([0, 0], [0, 0.5])
    assert_allclose(g, [9.7803253359, 9.7803253359 * (1 - 1 / earth.A)], rtol=1e-10)


def test_gravity_g():
    assert_allclose(earth.gravity_g(9.81007), [0, 0, -9.81007])
    assert_allclose(earth.gravity_g(earth.gravity(45, 0)),
                    [0, 0, -earth.gravity(45, 0)])
