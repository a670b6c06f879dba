# vida_jax/images/raster.py
"""
Sampling filters on pixel grids.

Grids follow the sky convention used by images everywhere in the package:
x (right ascension offset) decreases left to right, y increases bottom to top,
and an image array is indexed data[j, i] for the pixel at (x[i], y[j]).
"""
from __future__ import annotations

from typing import Sequence, Tuple

import jax.numpy as jnp


def pixel_centers(npix: int, xlim: Sequence[float], ylim: Sequence[float]) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Pixel-center axes of an npix x npix grid covering `xlim` x `ylim`.

    The pixel size is (range width) / npix; x runs from xlim[1] down to
    xlim[0], y from ylim[0] up to ylim[1].
    """
    if npix < 1:
        raise ValueError(f"npix must be positive, got {npix}")
    px = (xlim[1] - xlim[0]) / npix
    py = (ylim[1] - ylim[0]) / npix
    idx = jnp.arange(npix, dtype=float)
    x = xlim[1] - px / 2 - px * idx
    y = ylim[0] + py / 2 + py * idx
    return x, y


def sample(filt, x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    """Evaluate `filt` on the grid spanned by the axes `x`, `y` -> (ny, nx)."""
    X, Y = jnp.meshgrid(x, y)
    return jnp.broadcast_to(filt(X, Y), X.shape)


def rasterize(filt, npix: int, xlim: Sequence[float], ylim: Sequence[float]):
    """
    Rasterize a filter on an npix x npix grid.

    Returns
    -------
    (x, y, img)
        Pixel-center axes and the (npix, npix) image with img[j, i] the
        filter evaluated at (x[i], y[j]). The image is not normalized.
    """
    x, y = pixel_centers(npix, xlim, ylim)
    return x, y, sample(filt, x, y)


def evaluate_on(filt, image) -> jnp.ndarray:
    """Sample a filter at the pixel centers of `image`."""
    return sample(filt, image.x, image.y)
