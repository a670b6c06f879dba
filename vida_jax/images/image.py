# vida_jax/images/image.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import jax.numpy as jnp
import numpy as np
from jax.tree_util import register_pytree_node_class

from ..errors import DegenerateDistribution
from .raster import pixel_centers, rasterize


@register_pytree_node_class
@dataclass(frozen=True, eq=False)
class NormalizedImage:
    """
    A 2-D intensity grid with its pixel-center coordinates.

    data: (ny, nx) non-negative intensities, data[j, i] at (x[i], y[j])
    x: (nx,) pixel-center x coordinates, decreasing (sky convention)
    y: (ny,) pixel-center y coordinates, increasing

    Divergences assume `data` sums to one; use `from_array(..., normalize=True)`
    or `normalized()` to get there.
    """
    data: jnp.ndarray
    x: jnp.ndarray
    y: jnp.ndarray

    def __post_init__(self):
        data = jnp.asarray(self.data, dtype=float)
        x = jnp.asarray(self.x, dtype=float)
        y = jnp.asarray(self.y, dtype=float)
        if data.ndim != 2:
            raise ValueError(f"Expected a 2D image, got shape {data.shape}.")
        if data.shape != (y.shape[0], x.shape[0]):
            raise ValueError(
                f"Image shape {data.shape} does not match axes (ny={y.shape[0]}, nx={x.shape[0]})."
            )
        values = np.asarray(data)
        if not np.all(np.isfinite(values)) or np.any(values < 0):
            raise ValueError("Image intensities must be finite and non-negative.")
        if not values.sum() > 0:
            raise DegenerateDistribution("Image has zero total intensity.")
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    # -- construction ------------------------------------------------------

    @classmethod
    def from_array(
        cls,
        data,
        xlim: Sequence[float],
        ylim: Sequence[float],
        normalize: bool = True,
    ) -> "NormalizedImage":
        """
        Wrap a square (npix, npix) array covering `xlim` x `ylim`.

        The array must already be in sky orientation: row j is y[j] (bottom to
        top), column i is x[i] (east to west, x decreasing).
        """
        data = jnp.asarray(data, dtype=float)
        if data.ndim != 2 or data.shape[0] != data.shape[1]:
            raise ValueError(f"Expected a square 2D array, got shape {data.shape}.")
        x, y = pixel_centers(data.shape[0], xlim, ylim)
        img = cls(data, x, y)
        return img.normalized() if normalize else img

    def normalized(self) -> "NormalizedImage":
        return NormalizedImage(self.data / self.total, self.x, self.y)

    # -- geometry ----------------------------------------------------------

    @property
    def shape(self) -> Tuple[int, int]:
        return tuple(self.data.shape)

    @property
    def psize_x(self) -> float:
        return float(self.x[0] - self.x[1]) if self.x.shape[0] > 1 else float("nan")

    @property
    def psize_y(self) -> float:
        return float(self.y[1] - self.y[0]) if self.y.shape[0] > 1 else float("nan")

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """(x_left, x_right, y_bottom, y_top) of the outer pixel edges."""
        hx = self.psize_x / 2
        hy = self.psize_y / 2
        return (
            float(self.x[0]) + hx,
            float(self.x[-1]) - hx,
            float(self.y[0]) - hy,
            float(self.y[-1]) + hy,
        )

    @property
    def total(self) -> jnp.ndarray:
        return jnp.sum(self.data)

    def grid(self) -> Tuple[jnp.ndarray, jnp.ndarray]:
        """(X, Y) pixel-center coordinates, each of shape (ny, nx)."""
        return jnp.meshgrid(self.x, self.y)

    # -- pytree ------------------------------------------------------------

    def tree_flatten(self):
        return (self.data, self.x, self.y), None

    @classmethod
    def tree_unflatten(cls, aux, children):
        obj = object.__new__(cls)
        for name, value in zip(("data", "x", "y"), children):
            object.__setattr__(obj, name, value)
        return obj


def make_image(
    filt,
    npix: int,
    xlim: Sequence[float],
    ylim: Sequence[float],
    intensity: float = 1.0,
) -> NormalizedImage:
    """
    Rasterize a filter into an image whose pixels sum to `intensity`.

    With the default `intensity=1.0` the result is a normalized image that can
    be handed directly to a divergence.
    """
    x, y, img = rasterize(filt, npix, xlim, ylim)
    total = jnp.sum(img)
    if not bool(jnp.isfinite(total)) or not total > 0:
        raise DegenerateDistribution(f"{type(filt).__name__} rasterized to zero total intensity.")
    return NormalizedImage(img * (intensity / total), x, y)
