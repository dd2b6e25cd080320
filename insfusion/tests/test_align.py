import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy.spatial.transform import Rotation
from insfusion import align
from insfusion.errors import InitializationFailure
from insfusion.measurements import ImuSample


def _make_samples(rotation, n=100, accel_sd=0, rng=0):
    rng = np.random.default_rng(rng)
    accel = rotation.inv().apply([0, 0, 9.81])
    return [ImuSample(0.01 * i, accel + accel_sd * rng.standard_normal(3),
                      np.zeros(3)) for i in range(n)]


def test_align_static():
    rotation = Rotation.from_euler('xyz', [5, -10, 0], degrees=True)
    result = align.align_static(_make_samples(rotation), 100, 3.0)

    # Only the vertical is observable.
    up_b = result.inv().apply([0, 0, 1])
    assert_allclose(up_b, rotation.inv().apply([0, 0, 1]), atol=1e-12)
    assert_allclose(result.apply(rotation.inv().apply([0, 0, 9.81])),
                    [0, 0, 9.81], atol=1e-12)

    # Body x-axis points East in the horizontal plane.
    x_g = result.apply([1, 0, 0])
    assert abs(x_g[1]) < 1e-12
    assert x_g[0] > 0


def test_align_level():
    result = align.align_static(_make_samples(Rotation.identity()), 100)
    assert_allclose(result.as_matrix(), np.eye(3), atol=1e-12)


def test_align_x_vertical():
    rotation = Rotation.from_euler('y', -90, degrees=True)
    result = align.align_static(_make_samples(rotation), 100)
    assert_allclose(result.apply(rotation.inv().apply([0, 0, 1])), [0, 0, 1],
                    atol=1e-12)
    assert_allclose(np.linalg.det(result.as_matrix()), 1)


def test_align_failures():
    with pytest.raises(InitializationFailure):
        align.align_static([], 100)

    with pytest.raises(InitializationFailure):
        align.align_static(_make_samples(Rotation.identity(), n=50), 100)

    with pytest.raises(InitializationFailure):
        align.align_static(_make_samples(Rotation.identity(), accel_sd=5.0), 100,
                           3.0)
    align.align_static(_make_samples(Rotation.identity(), accel_sd=5.0), 100, None)

    samples = [ImuSample(0.01 * i, np.zeros(3), np.zeros(3)) for i in range(100)]
    with pytest.raises(InitializationFailure):
        align.align_static(samples, 100)
