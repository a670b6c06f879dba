# vida_jax/images/modifiers.py
"""
Image moments and modifiers.

Moments give cheap initial guesses for a template's center and size; the
modifiers prepare an image before extraction. Every modifier returns a new,
renormalized image.
"""
from __future__ import annotations

from typing import Sequence, Tuple

import jax
import jax.numpy as jnp

from ..errors import DegenerateDistribution
from .image import NormalizedImage


def _renormalized(data, x, y) -> NormalizedImage:
    total = jnp.sum(data)
    if not total > 0:
        raise DegenerateDistribution("Modified image has zero total intensity.")
    return NormalizedImage(data / total, x, y)


def centroid(image: NormalizedImage) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """Intensity-weighted center (x, y)."""
    X, Y = image.grid()
    w = image.data / image.total
    return jnp.sum(w * X), jnp.sum(w * Y)


def inertia(image: NormalizedImage) -> jnp.ndarray:
    """
    Centered second moments [[xx, xy], [xy, yy]].

    For a circular Gaussian of width sigma this is sigma^2 * I.
    """
    X, Y = image.grid()
    w = image.data / image.total
    xc, yc = centroid(image)
    dx = X - xc
    dy = Y - yc
    xx = jnp.sum(w * dx * dx)
    yy = jnp.sum(w * dy * dy)
    xy = jnp.sum(w * dx * dy)
    return jnp.array([[xx, xy], [xy, yy]])


def clip_image(fraction: float, image: NormalizedImage) -> NormalizedImage:
    """Zero every pixel below `fraction` of the peak intensity."""
    if not 0.0 <= fraction < 1.0:
        raise ValueError(f"fraction must be in [0, 1), got {fraction}")
    data = image.data
    data = jnp.where(data >= fraction * jnp.max(data), data, 0.0)
    return _renormalized(data, image.x, image.y)


def window_image(xlim: Sequence[float], ylim: Sequence[float], image: NormalizedImage) -> NormalizedImage:
    """Zero every pixel whose center lies outside `xlim` x `ylim`."""
    X, Y = image.grid()
    inside = (X >= xlim[0]) & (X <= xlim[1]) & (Y >= ylim[0]) & (Y <= ylim[1])
    return _renormalized(jnp.where(inside, image.data, 0.0), image.x, image.y)


def downsample(factor: int, image: NormalizedImage) -> NormalizedImage:
    """Mean-pool by an integer factor; the field of view is unchanged."""
    if factor == 1:
        return image
    ny, nx = image.shape
    if factor < 1 or ny % factor != 0 or nx % factor != 0:
        raise ValueError("Image dimensions must be divisible by the downsampling factor")
    data = image.data.reshape(ny // factor, factor, nx // factor, factor).mean(axis=(1, 3))
    x = image.x.reshape(nx // factor, factor).mean(axis=1)
    y = image.y.reshape(ny // factor, factor).mean(axis=1)
    return _renormalized(data, x, y)


def _gaussian_kernel(sigma_x: float, sigma_y: float, dtype) -> jnp.ndarray:
    hx = max(1, int(jnp.ceil(4.0 * sigma_x)))
    hy = max(1, int(jnp.ceil(4.0 * sigma_y)))
    ax = jnp.arange(-hx, hx + 1, dtype=dtype)
    ay = jnp.arange(-hy, hy + 1, dtype=dtype)
    yy, xx = jnp.meshgrid(ay, ax, indexing="ij")
    ker = jnp.exp(-0.5 * (xx * xx / sigma_x ** 2 + yy * yy / sigma_y ** 2))
    return ker / jnp.sum(ker)


def _conv2d_same(img: jnp.ndarray, k: jnp.ndarray) -> jnp.ndarray:
    kh, kw = k.shape
    out = jax.lax.conv_general_dilated(
        img[None, :, :, None],
        k.reshape((kh, kw, 1, 1)).astype(img.dtype),
        window_strides=(1, 1),
        padding="SAME",
        dimension_numbers=("NHWC", "HWIO", "NHWC"),
    )
    return out[0, :, :, 0]


def blur(image: NormalizedImage, fwhm: float) -> NormalizedImage:
    """
    Convolve with a circular Gaussian of full width at half maximum `fwhm`
    (same units as the pixel coordinates). Flux beyond the edges is lost.
    """
    if fwhm <= 0:
        raise ValueError(f"fwhm must be positive, got {fwhm}")
    sigma = fwhm / (2.0 * jnp.sqrt(2.0 * jnp.log(2.0)))
    k = _gaussian_kernel(float(sigma / abs(image.psize_x)), float(sigma / abs(image.psize_y)), image.data.dtype)
    return _renormalized(_conv2d_same(image.data, k), image.x, image.y)
