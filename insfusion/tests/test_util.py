import numpy as np
from numpy.testing import assert_allclose
from insfusion import util


def test_mv_prod():
    np.random.seed(0)
    a = np.random.randn(3, 3)
    b = np.random.randn(3)
    assert_allclose(util.mv_prod(a, b), a @ b)
    assert_allclose(util.mv_prod(a, b, at=True), a.T @ b)

    a = np.random.randn(10, 3, 3)
    b = np.random.randn(3)
    at = a.transpose((0, 2, 1))
    assert_allclose(util.mv_prod(a, b), a @ b)
    assert_allclose(util.mv_prod(a, b, at=True), at @ b)

    b = np.random.randn(10, 3)
    assert_allclose(util.mv_prod(a, b), (a @ b[:, :, None]).reshape(10, 3))
    assert_allclose(util.mv_prod(a, b, at=True),
                    (at @ b[:, :, None]).reshape(10, 3))


def test_skew_matrix():
    vec = np.array([
        [0, 1, 2],
        [-2, 3, 5]
    ])
    check = np.array([
        [-2, 3, 6],
        [0, -2, 3]
    ])
    assert_allclose(util.skew_matrix(vec[0]) @ check[0],
                    np.cross(vec[0], check[0]))
    assert_allclose(util.skew_matrix(vec[1]) @ check[1],
                    np.cross(vec[1], check[1]))
    assert_allclose(util.mv_prod(util.skew_matrix(vec), check),
                    np.cross(vec, check))


def test_symmetrize():
    P = np.array([[1.0, 2.0], [4.0, 3.0]])
    assert_allclose(util.symmetrize(P), [[1, 3], [3, 3]])


def test_bunch():
    dict = {'a': 1, 'b': None, 'c': 3 * np.ones(3)}
    bunch = util.Bunch(dict)
    assert(bunch.a == 1)
    assert(bunch.b is None)
    assert((bunch.c == 3).all())

    assert(dir(bunch) == ['a', 'b', 'c'])
    assert(isinstance(repr(bunch), str))
