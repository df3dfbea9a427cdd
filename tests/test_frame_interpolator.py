import numpy as np
import pytest

from blendframes.errors import IncompatibleImageError
from blendframes.frame_interpolator import blend_factor, interpolate, row_bands

from conftest import solid


@pytest.fixture
def pair():
    rng = np.random.default_rng(7)
    a = rng.integers(0, 256, size=(9, 7, 3), dtype=np.uint8)
    b = rng.integers(0, 256, size=(9, 7, 3), dtype=np.uint8)
    return a, b


def test_blend_factor():
    assert [blend_factor(i, 3) for i in (1, 2, 3)] == [0.25, 0.5, 0.75]
    with pytest.raises(ValueError):
        blend_factor(0, 3)
    with pytest.raises(ValueError):
        blend_factor(4, 3)


def test_endpoints_reproduce_sources(pair):
    a, b = pair
    np.testing.assert_array_equal(interpolate(a, b, 0.0), a)
    np.testing.assert_array_equal(interpolate(a, b, 1.0), b)


@pytest.mark.parametrize("t", [0.1, 0.25, 0.5, 0.9])
def test_self_blend_is_identity(pair, t):
    a, _ = pair
    np.testing.assert_array_equal(interpolate(a, a, t), a)


def test_midpoint_rounds():
    a, b = solid(0), solid(255)
    out = interpolate(a, b, 0.5)
    assert out.dtype == np.uint8
    # 127.5 rounds half to even
    assert np.all(out == 128)
    assert np.all(interpolate(a, b, 0.25) == 64)


def test_monotonic_in_t(pair):
    a, b = pair
    outs = np.stack([interpolate(a, b, t).astype(int) for t in np.linspace(0, 1, 21)])
    steps = np.diff(outs, axis=0)
    rising = b.astype(int) >= a.astype(int)
    assert np.all(steps[:, rising] >= 0)
    assert np.all(steps[:, ~rising] <= 0)


def test_16_bit_samples():
    a = solid(0, dtype=np.uint16)
    b = solid(65535, dtype=np.uint16)
    out = interpolate(a, b, 0.5)
    assert out.dtype == np.uint16
    assert np.all(out == 32768)


def test_single_channel_keeps_shape():
    out = interpolate(solid(10, channels=1), solid(30, channels=1), 0.5)
    assert out.shape == (6, 8, 1)
    assert np.all(out == 20)


@pytest.mark.parametrize("workers", [2, 3, 4, 50])
def test_parallel_matches_sequential(pair, workers):
    a, b = pair
    np.testing.assert_array_equal(interpolate(a, b, 0.3, workers=workers), interpolate(a, b, 0.3))


def test_row_bands_cover_rows_once():
    bands = row_bands(10, 3)
    assert bands == [(0, 4), (4, 7), (7, 10)]
    assert row_bands(2, 8) == [(0, 1), (1, 2)]


def test_shape_mismatch():
    with pytest.raises(IncompatibleImageError):
        interpolate(solid(0, width=4), solid(0, width=5), 0.5)


def test_dtype_mismatch():
    with pytest.raises(IncompatibleImageError):
        interpolate(solid(0), solid(0, dtype=np.uint16), 0.5)


def test_t_out_of_range(pair):
    a, b = pair
    with pytest.raises(ValueError):
        interpolate(a, b, 1.5)
