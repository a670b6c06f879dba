import jax.numpy as jnp
import pytest

from vida_jax.filters import Constant, GaussianRing, Sum, Disk
from vida_jax.images import evaluate_on, make_image, pixel_centers, rasterize


def test_pixel_centers_sky_convention():
    x, y = pixel_centers(4, (-2.0, 2.0), (-2.0, 2.0))
    assert jnp.allclose(x, jnp.array([1.5, 0.5, -0.5, -1.5]))
    assert jnp.allclose(y, jnp.array([-1.5, -0.5, 0.5, 1.5]))


def test_pixel_centers_off_center_range():
    x, y = pixel_centers(2, (0.0, 4.0), (10.0, 14.0))
    assert jnp.allclose(x, jnp.array([3.0, 1.0]))
    assert jnp.allclose(y, jnp.array([11.0, 13.0]))


def test_pixel_centers_rejects_empty_grid():
    with pytest.raises(ValueError):
        pixel_centers(0, (-1.0, 1.0), (-1.0, 1.0))


def test_rasterize_indexing():
    f = GaussianRing(5.0, 2.0, 10.0, -20.0)
    x, y, img = rasterize(f, 16, (-40.0, 40.0), (-40.0, 40.0))
    assert img.shape == (16, 16)
    for j, i in [(0, 0), (3, 11), (15, 7)]:
        assert jnp.allclose(img[j, i], f(x[i], y[j]))

    # x decreases with column index, so a source at positive x sits on the left
    col_profile = img.sum(axis=0)
    peak_col = int(jnp.argmax(col_profile))
    assert x[peak_col] > 0
    row_profile = img.sum(axis=1)
    peak_row = int(jnp.argmax(row_profile))
    assert y[peak_row] < 0


def test_rasterize_composite_and_constant():
    f = Sum(Disk(10.0, 2.0, 0.0, 0.0), Constant())
    _, _, img = rasterize(f, 8, (-20.0, 20.0), (-20.0, 20.0))
    assert img.shape == (8, 8)
    assert jnp.all(img >= 1.0)

    _, _, flat = rasterize(Constant(), 8, (-20.0, 20.0), (-20.0, 20.0))
    assert flat.shape == (8, 8)
    assert jnp.all(flat == 1.0)


def test_evaluate_on_image_grid():
    f = GaussianRing(20.0, 5.0, 0.0, 0.0)
    image = make_image(f, 24, (-60.0, 60.0), (-60.0, 60.0))
    raw = evaluate_on(f, image)
    assert raw.shape == image.shape
    assert jnp.allclose(raw / raw.sum(), image.data)
