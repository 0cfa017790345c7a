"""Tests for the fade curve, gradient hashing and single-octave noise."""

import math

import numpy as np
import pytest

from noisefield.core.lattice import fade, gradient, lerp, single_octave
from noisefield.core.permutation import build_permutation


@pytest.fixture(scope="module")
def table():
    return build_permutation(7)


def test_fade_boundaries():
    assert fade(0.0) == 0.0
    assert fade(1.0) == 1.0
    assert fade(0.5) == 0.5


def test_fade_is_monotonic_and_symmetric():
    t = np.linspace(0.0, 1.0, 1001)
    f = fade(t)
    assert np.all(np.diff(f) >= 0)
    np.testing.assert_allclose(f + fade(1.0 - t), 1.0, atol=1e-12)


def test_fade_flattens_at_endpoints():
    """First derivative vanishes at both ends of the cell."""
    h = 1e-6
    assert fade(h) / h == pytest.approx(0.0, abs=1e-9)
    assert (1.0 - fade(1.0 - h)) / h == pytest.approx(0.0, abs=1e-7)


def test_lerp():
    assert lerp(2.0, 4.0, 0.0) == 2.0
    assert lerp(2.0, 4.0, 1.0) == 4.0
    assert lerp(2.0, 4.0, 0.25) == 2.5


@pytest.mark.parametrize("hash_val", range(16))
def test_gradient_directions(hash_val):
    """Hash h selects the unit vector at angle h * pi / 8."""
    angle = hash_val * math.pi / 8
    assert gradient(hash_val, 1.0, 0.0) == pytest.approx(math.cos(angle), abs=1e-12)
    assert gradient(hash_val, 0.0, 1.0) == pytest.approx(math.sin(angle), abs=1e-12)
    assert gradient(hash_val, 0.3, -0.7) == pytest.approx(
        math.cos(angle) * 0.3 - math.sin(angle) * 0.7, abs=1e-12
    )


def test_gradient_uses_low_four_bits():
    for h in range(16):
        assert gradient(h + 16, 0.4, 0.9) == gradient(h, 0.4, 0.9)
        assert gradient(h + 240, 0.4, 0.9) == gradient(h, 0.4, 0.9)


def test_gradient_of_zero_offset_is_zero():
    hashes = np.arange(256)
    assert np.all(gradient(hashes, 0.0, 0.0) == 0.0)


@pytest.mark.parametrize("grid_size", [1, 4, 16, 64])
def test_lattice_corners_are_one_half(table, grid_size):
    """At lattice points the offset is zero so the noise sits at 0.5."""
    ks = np.arange(-5, 6)
    xs, ys = np.meshgrid(ks * grid_size, ks * grid_size)
    values = single_octave(table, xs.astype(np.float64), ys.astype(np.float64), grid_size)
    assert np.all(values == 0.5)


def test_single_octave_range(table):
    rng = np.random.default_rng(0)
    x = rng.uniform(-5000.0, 5000.0, 10000)
    y = rng.uniform(-5000.0, 5000.0, 10000)
    values = single_octave(table, x, y, 16)
    assert values.min() >= 0.0
    assert values.max() <= 1.0
    # Not a constant field
    assert values.std() > 0.01


def test_single_octave_large_coordinates(table):
    """Very large coordinates wrap onto the hash period instead of failing."""
    values = single_octave(table, np.array([1e9 + 0.3, -1e12 + 0.7]), np.array([2e10 + 0.1, 5.5]), 16)
    assert np.all((values >= 0.0) & (values <= 1.0))


def test_single_octave_is_continuous(table):
    x = np.linspace(-40.0, 40.0, 5001)
    values = single_octave(table, x, np.full_like(x, 3.3), 8)
    assert np.max(np.abs(np.diff(values))) < 0.01


def test_single_octave_repeats_every_256_cells(table):
    grid_size = 4
    period = 256 * grid_size
    x = np.array([1.25, 10.5, -7.75])
    y = np.array([3.5, -2.25, 100.125])
    np.testing.assert_allclose(
        single_octave(table, x + period, y, grid_size),
        single_octave(table, x, y, grid_size),
        atol=1e-12,
    )
    np.testing.assert_allclose(
        single_octave(table, x, y - period, grid_size),
        single_octave(table, x, y, grid_size),
        atol=1e-12,
    )


def test_single_octave_broadcasts(table):
    x = np.linspace(0.0, 10.0, 5)
    y = np.linspace(0.0, 10.0, 3)[:, None]
    assert single_octave(table, x, y, 16).shape == (3, 5)


def test_single_octave_keeps_float32(table):
    x = np.array([1.5, 2.5], dtype=np.float32)
    y = np.array([3.5, 4.5], dtype=np.float32)
    assert single_octave(table, x, y, 16).dtype == np.float32
