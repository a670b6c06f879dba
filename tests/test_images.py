import jax
import jax.numpy as jnp
import numpy as np
import pytest

from vida_jax.errors import DegenerateDistribution
from vida_jax.filters import AsymGaussian, GaussianRing
from vida_jax.images import (
    NormalizedImage,
    blur,
    centroid,
    clip_image,
    downsample,
    inertia,
    make_image,
    window_image,
)


def _ring_image(npix=64, x0=0.0, y0=0.0):
    return make_image(GaussianRing(20.0, 5.0, x0, y0), npix, (-60.0, 60.0), (-60.0, 60.0))


def test_from_array_normalizes():
    data = np.arange(16, dtype=float).reshape(4, 4) + 1.0
    image = NormalizedImage.from_array(data, (-2.0, 2.0), (-2.0, 2.0))
    assert jnp.allclose(image.total, 1.0)
    assert image.shape == (4, 4)
    assert image.psize_x == pytest.approx(1.0)
    assert image.psize_y == pytest.approx(1.0)
    assert image.extent == pytest.approx((2.0, -2.0, -2.0, 2.0))

    raw = NormalizedImage.from_array(data, (-2.0, 2.0), (-2.0, 2.0), normalize=False)
    assert jnp.allclose(raw.total, data.sum())
    assert jnp.allclose(raw.normalized().data, image.data)


def test_image_validation():
    with pytest.raises(ValueError):
        NormalizedImage.from_array(np.ones((3, 4)), (-1.0, 1.0), (-1.0, 1.0))
    with pytest.raises(ValueError):
        NormalizedImage.from_array(-np.ones((4, 4)), (-1.0, 1.0), (-1.0, 1.0))
    with pytest.raises(ValueError):
        NormalizedImage(np.ones((4, 4)), np.arange(3.0), np.arange(4.0))
    with pytest.raises(DegenerateDistribution):
        NormalizedImage.from_array(np.zeros((4, 4)), (-1.0, 1.0), (-1.0, 1.0))

    bad = np.ones((4, 4))
    bad[1, 2] = np.nan
    with pytest.raises(ValueError):
        NormalizedImage.from_array(bad, (-1.0, 1.0), (-1.0, 1.0))


def test_make_image_intensity():
    f = GaussianRing(20.0, 5.0, 0.0, 0.0)
    image = make_image(f, 32, (-60.0, 60.0), (-60.0, 60.0), intensity=3.0)
    assert jnp.allclose(image.total, 3.0)
    assert jnp.allclose(image.normalized().total, 1.0)


def test_image_is_pytree():
    image = _ring_image(16)
    leaves = jax.tree_util.tree_leaves(image)
    assert len(leaves) == 3
    total = jax.jit(lambda im: jnp.sum(im.data))(image)
    assert jnp.allclose(total, 1.0)


def test_centroid_tracks_offset():
    image = _ring_image(64, x0=6.0, y0=-4.0)
    xc, yc = centroid(image)
    assert xc == pytest.approx(6.0, abs=0.1)
    assert yc == pytest.approx(-4.0, abs=0.1)


def test_inertia_of_gaussian_blob():
    image = make_image(AsymGaussian(4.0, 0.0, 0.0, 0.0, 0.0), 64, (-32.0, 32.0), (-32.0, 32.0))
    m = inertia(image)
    assert m.shape == (2, 2)
    assert m[0, 0] == pytest.approx(16.0, rel=1e-3)
    assert m[1, 1] == pytest.approx(16.0, rel=1e-3)
    assert abs(m[0, 1]) < 1e-8


def test_blur_adds_width_in_quadrature():
    sigma = 4.0
    image = make_image(AsymGaussian(sigma, 0.0, 0.0, 0.0, 0.0), 128, (-64.0, 64.0), (-64.0, 64.0))
    fwhm = 2.0 * np.sqrt(2.0 * np.log(2.0)) * sigma
    blurred = blur(image, fwhm)
    m = inertia(blurred)
    assert jnp.allclose(blurred.total, 1.0)
    assert np.sqrt(m[0, 0]) == pytest.approx(np.sqrt(2.0) * sigma, rel=1e-2)
    assert np.sqrt(m[1, 1]) == pytest.approx(np.sqrt(2.0) * sigma, rel=1e-2)

    with pytest.raises(ValueError):
        blur(image, 0.0)


def test_clip_image():
    image = _ring_image(32)
    clipped = clip_image(0.5, image)
    assert jnp.allclose(clipped.total, 1.0)
    data = clipped.data
    nonzero = data[data > 0]
    assert nonzero.size < data.size
    assert jnp.min(nonzero) >= 0.5 * jnp.max(data) * (1 - 1e-12)

    with pytest.raises(ValueError):
        clip_image(1.5, image)


def test_window_image():
    image = _ring_image(32)
    windowed = window_image((0.0, 60.0), (-60.0, 60.0), image)
    X, _ = windowed.grid()
    assert jnp.allclose(windowed.total, 1.0)
    assert jnp.all(jnp.where(X < 0.0, windowed.data, 0.0) == 0.0)
    assert jnp.all(jnp.where(X > 0.0, windowed.data, 1.0) > 0.0)

    with pytest.raises(DegenerateDistribution):
        window_image((100.0, 200.0), (100.0, 200.0), image)


def test_downsample():
    image = _ring_image(64)
    small = downsample(2, image)
    assert small.shape == (32, 32)
    assert jnp.allclose(small.total, 1.0)
    assert small.psize_x == pytest.approx(2 * image.psize_x)
    assert small.extent == pytest.approx(image.extent)
    assert downsample(1, image) is image

    with pytest.raises(ValueError):
        downsample(3, image)
